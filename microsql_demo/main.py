from microsql import MicroSQL


def run_demo() -> None:
    db = MicroSQL("demo_data")

    existing = db.execute("SELECT id FROM users LIMIT 1")
    if not existing:
        db.execute('INSERT INTO users (id, name, city, score) VALUES (1, "Alice", "Berlin", 9.5)')
        db.execute('INSERT INTO users (id, name, city, score) VALUES (2, "Smith, John", "Paris", 7.0)')
        db.execute('INSERT INTO users (id, name, city, score) VALUES (3, "Cara", "Berlin", 8.8)')

    print("Top Berlin users:")
    rows = db.execute('SELECT id, name, score FROM users WHERE city = "Berlin" ORDER BY score DESC LIMIT 10')
    for row in rows:
        print(row)

    db.execute("UPDATE users SET score = 7.8 WHERE id = 2")
    db.execute("DELETE FROM users WHERE id = 1")

    print("Remaining rows:")
    for row in db.execute("SELECT * FROM users ORDER BY id ASC"):
        print(row)


if __name__ == "__main__":
    run_demo()
