import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from microsql import MalformedStatementError, MicroSQL, UnsupportedStatementError


def test_basic_crud(tmp_path):
    db = MicroSQL(str(tmp_path))

    assert db.execute('INSERT INTO users (id, name, age) VALUES (1, "Alice", 25)') == {
        "id": "1",
        "name": "Alice",
        "age": "25",
    }
    db.execute('INSERT INTO users (id, name, age) VALUES (2, "Bob", 30)')

    assert db.execute("SELECT * FROM users WHERE id = 1") == [{"id": "1", "name": "Alice", "age": "25"}]

    assert db.execute('UPDATE users SET name = "Alice Smith", age = 26 WHERE id = 1') == 1
    assert db.execute("SELECT name, age FROM users WHERE id = 1") == [{"name": "Alice Smith", "age": "26"}]

    assert db.execute("DELETE FROM users WHERE id = 1") == 1
    assert db.execute("SELECT * FROM users") == [{"id": "2", "name": "Bob", "age": "30"}]


def test_rows_persist_across_instances(tmp_path):
    MicroSQL(str(tmp_path)).execute('INSERT INTO users (id, name) VALUES (1, "Alice")')
    reopened = MicroSQL(str(tmp_path))
    assert reopened.execute("SELECT name FROM users") == [{"name": "Alice"}]
    assert reopened.tables() == ["users"]


def test_commas_in_insert_and_update_values(tmp_path):
    db = MicroSQL(str(tmp_path))
    db.execute('INSERT INTO users (id, name, bio) VALUES (1, "Smith, John", "Likes: coding, reading")')
    row = db.execute("SELECT * FROM users WHERE id = 1")[0]
    assert row["name"] == "Smith, John"
    assert row["bio"] == "Likes: coding, reading"

    db.execute('INSERT INTO users (id, name) VALUES (2, "John")')
    db.execute('UPDATE users SET name = "Smith, Jane", bio = "Likes: tea, cake" WHERE id = 2')
    row = db.execute("SELECT * FROM users WHERE id = 2")[0]
    assert row == {"id": "2", "name": "Smith, Jane", "bio": "Likes: tea, cake"}


def test_in_operator_with_quoted_commas(tmp_path):
    db = MicroSQL(str(tmp_path))
    db.execute('INSERT INTO users (id, name) VALUES (1, "Smith, John")')
    db.execute('INSERT INTO users (id, name) VALUES (2, "Doe, Jane")')
    db.execute('INSERT INTO users (id, name) VALUES (3, "Bob")')

    rows = db.execute('SELECT name FROM users WHERE name IN ("Smith, John", "Doe, Jane")')
    assert sorted(row["name"] for row in rows) == ["Doe, Jane", "Smith, John"]


def test_like_with_special_characters_and_wildcards(tmp_path):
    db = MicroSQL(str(tmp_path))
    db.execute('INSERT INTO users (id, email, code) VALUES (1, "user@test.com", "A1")')
    db.execute('INSERT INTO users (id, email, code) VALUES (2, "admin@example.org", "A2")')
    db.execute('INSERT INTO users (id, email, code) VALUES (3, "x@testy.net", "B1")')

    assert db.execute('SELECT email FROM users WHERE email LIKE "%@test.%"') == [{"email": "user@test.com"}]
    rows = db.execute('SELECT code FROM users WHERE code LIKE "a_"')
    assert sorted(row["code"] for row in rows) == ["A1", "A2"]


def test_order_by_numeric_and_string(tmp_path):
    db = MicroSQL(str(tmp_path))
    for idx, price in enumerate(["100", "20", "5"], start=1):
        db.execute(f'INSERT INTO products (id, price) VALUES ({idx}, "{price}")')
    for idx, name in enumerate(["Zara", "Alice", "Bob"], start=1):
        db.execute(f'INSERT INTO users (id, name) VALUES ({idx}, "{name}")')

    rows = db.execute("SELECT price FROM products ORDER BY price DESC")
    assert [row["price"] for row in rows] == ["100", "20", "5"]
    rows = db.execute("SELECT name FROM users ORDER BY name ASC")
    assert [row["name"] for row in rows] == ["Alice", "Bob", "Zara"]


def test_complex_where_with_mixed_and_or(tmp_path):
    db = MicroSQL(str(tmp_path))
    db.execute('INSERT INTO users (id, name, age, city) VALUES (1, "Alice", 25, "Berlin")')
    db.execute('INSERT INTO users (id, name, age, city) VALUES (2, "Bob", 30, "Paris")')
    db.execute('INSERT INTO users (id, name, age, city) VALUES (3, "Carol", 35, "Berlin")')
    db.execute('INSERT INTO users (id, name, age, city) VALUES (4, "Dave", 28, "London")')

    rows = db.execute('SELECT name FROM users WHERE (city = "Berlin" AND age > 30) OR city = "Paris"')
    assert sorted(row["name"] for row in rows) == ["Bob", "Carol"]


def test_comparison_operators(tmp_path):
    db = MicroSQL(str(tmp_path))
    for idx, price in enumerate(["10", "20", "30"], start=1):
        db.execute(f'INSERT INTO products (id, price) VALUES ({idx}, "{price}")')

    assert sorted(r["id"] for r in db.execute("SELECT id FROM products WHERE price >= 20")) == ["2", "3"]
    assert sorted(r["id"] for r in db.execute("SELECT id FROM products WHERE price <= 20")) == ["1", "2"]


def test_delete_without_where_empties_table(tmp_path):
    db = MicroSQL(str(tmp_path))
    db.execute('INSERT INTO users (id, name) VALUES (1, "Alice")')
    db.execute('INSERT INTO users (id, name) VALUES (2, "Bob")')

    assert db.execute("DELETE FROM users") == 2
    assert db.execute("SELECT * FROM users") == []


def test_update_matching_no_rows(tmp_path):
    db = MicroSQL(str(tmp_path))
    db.execute('INSERT INTO users (id, name) VALUES (1, "Alice")')

    assert db.execute('UPDATE users SET name = "Bob" WHERE id = 999') == 0
    assert db.execute("SELECT name FROM users WHERE id = 1") == [{"name": "Alice"}]


def test_select_from_missing_table_is_empty(tmp_path):
    db = MicroSQL(str(tmp_path))
    assert db.execute("SELECT * FROM nonexistent") == []
    assert db.tables() == []


def test_limit_without_order_by(tmp_path):
    db = MicroSQL(str(tmp_path))
    for idx, name in enumerate(["Alice", "Bob", "Carol"], start=1):
        db.execute(f'INSERT INTO users (id, name) VALUES ({idx}, "{name}")')
    assert db.execute("SELECT name FROM users LIMIT 2") == [{"name": "Alice"}, {"name": "Bob"}]


def test_query_result_format(tmp_path):
    db = MicroSQL(str(tmp_path))
    inserted = db.query('INSERT INTO users (id, name) VALUES (1, "Alice")')
    assert inserted.rows == [{"id": "1", "name": "Alice"}]
    assert inserted.row_count == 1
    db.execute('INSERT INTO users (id, name) VALUES (2, "Bob")')

    updated = db.query('UPDATE users SET name = "Updated" WHERE id = 1')
    assert updated.rows == []
    assert updated.row_count == 1

    deleted = db.query("DELETE FROM users WHERE id = 1")
    assert deleted.rows == []
    assert deleted.row_count == 1

    selected = db.query("SELECT * FROM users")
    assert selected.rows == [{"id": "2", "name": "Bob"}]
    assert selected.row_count == 1


def test_failed_statements_do_not_touch_rows(tmp_path):
    db = MicroSQL(str(tmp_path))
    db.execute('INSERT INTO users (id, name) VALUES (1, "Alice")')

    with pytest.raises(MalformedStatementError):
        db.execute('INSERT INTO users (id, name) VALUES (2, "Bob"')
    with pytest.raises(UnsupportedStatementError, match="Unsupported statement: TRUNCATE"):
        db.execute("TRUNCATE users")
    assert db.execute("SELECT * FROM users") == [{"id": "1", "name": "Alice"}]
