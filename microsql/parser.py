from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple

from microsql.ast_nodes import DeleteStmt, InsertStmt, JoinClause, SelectStmt, Statement, UpdateStmt
from microsql.splitting import QUOTE_CHARS, split_respecting_quotes, strip_quotes

logger = logging.getLogger(__name__)

_KEYWORD_PATTERNS = {
    keyword: re.compile(r"\s+".join(keyword.split()), re.IGNORECASE)
    for keyword in ("FROM", "WHERE", "ORDER BY", "LIMIT")
}


class ParseError(ValueError):
    pass


class UnsupportedStatementError(ParseError):
    def __init__(self, keyword: str):
        self.keyword = keyword
        if keyword:
            super().__init__(f"Unsupported statement: {keyword}")
        else:
            super().__init__("Unsupported statement: empty SQL statement")


class MalformedStatementError(ParseError):
    def __init__(self, kind: str, statement: str):
        self.kind = kind
        self.statement = statement
        super().__init__(f"Malformed {kind} statement: {statement}")


class TextCursor:
    def __init__(self, text: str, kind: str, pos: int = 0):
        self.text = text
        self.kind = kind
        self.pos = pos

    def fail(self) -> MalformedStatementError:
        return MalformedStatementError(self.kind, self.text)

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def at_end(self) -> bool:
        self.skip_whitespace()
        return self.pos >= len(self.text)

    def peek_word(self) -> str:
        self.skip_whitespace()
        end = self.pos
        while end < len(self.text) and (self.text[end].isalnum() or self.text[end] == "_"):
            end += 1
        return self.text[self.pos : end]

    def pop_word(self) -> str:
        word = self.peek_word()
        self.pos += len(word)
        return word

    def expect(self, keyword: str) -> None:
        if self.pop_word().upper() != keyword:
            raise self.fail()

    def consume(self, keyword: str) -> bool:
        if self.peek_word().upper() == keyword:
            self.pop_word()
            return True
        return False

    def expect_char(self, ch: str) -> None:
        self.skip_whitespace()
        if not self.text.startswith(ch, self.pos):
            raise self.fail()
        self.pos += len(ch)

    def identifier(self, qualified: bool = False) -> str:
        self.skip_whitespace()
        end = self.pos
        while end < len(self.text):
            ch = self.text[end]
            if ch.isalnum() or ch == "_" or (qualified and ch == "."):
                end += 1
                continue
            break
        if end == self.pos:
            raise self.fail()
        ident = self.text[self.pos : end]
        self.pos = end
        return ident

    def rest(self) -> str:
        return self.text[self.pos :]


def find_keyword(text: str, keyword: str, start: int = 0) -> Optional[Tuple[int, int]]:
    pattern = _KEYWORD_PATTERNS[keyword]
    in_quotes = False
    quote_char = ""
    depth = 0

    for i, ch in enumerate(text):
        if i >= start and not in_quotes and depth == 0 and (i == 0 or text[i - 1].isspace()):
            match = pattern.match(text, i)
            if match is not None and (match.end() == len(text) or text[match.end()].isspace()):
                return i, match.end()

        escaped = i > 0 and text[i - 1] == "\\"
        if ch in QUOTE_CHARS and not in_quotes and not escaped:
            in_quotes = True
            quote_char = ch
        elif in_quotes and ch == quote_char and not escaped:
            in_quotes = False
            quote_char = ""
        elif ch == "(" and not in_quotes:
            depth += 1
        elif ch == ")" and not in_quotes:
            depth -= 1
    return None


def _split_clauses(text: str, keywords: Sequence[str], cursor: TextCursor) -> Dict[str, str]:
    found: List[Tuple[str, int, int]] = []
    pos = 0
    for keyword in keywords:
        span = find_keyword(text, keyword, pos)
        if span is not None:
            found.append((keyword, span[0], span[1]))
            pos = span[1]

    lead = text[: found[0][1]] if found else text
    if lead.strip():
        raise cursor.fail()

    clauses: Dict[str, str] = {}
    for idx, (keyword, _start, end) in enumerate(found):
        stop = found[idx + 1][1] if idx + 1 < len(found) else len(text)
        body = text[end:stop].strip()
        if not body:
            raise cursor.fail()
        clauses[keyword] = body
    return clauses


def parse(sql: str) -> Statement:
    cleaned = sql.strip()
    if cleaned.endswith(";"):
        cleaned = cleaned[:-1].rstrip()
    if not cleaned:
        raise UnsupportedStatementError("")

    keyword = cleaned.split(None, 1)[0].upper()
    if keyword == "SELECT":
        stmt: Statement = _parse_select(cleaned)
    elif keyword == "INSERT":
        stmt = _parse_insert(cleaned)
    elif keyword == "UPDATE":
        stmt = _parse_update(cleaned)
    elif keyword == "DELETE":
        stmt = _parse_delete(cleaned)
    else:
        raise UnsupportedStatementError(keyword)

    logger.debug("Parsed %s statement on table %s", keyword, stmt.table_name)
    return stmt


def _parse_select(sql: str) -> SelectStmt:
    cursor = TextCursor(sql, "SELECT", pos=len("SELECT"))
    body = cursor.rest()
    from_span = find_keyword(body, "FROM")
    if from_span is None:
        raise cursor.fail()

    columns_text = body[: from_span[0]].strip()
    if not columns_text:
        raise cursor.fail()
    if columns_text == "*":
        columns = ["*"]
    else:
        columns = [name.strip() for name in columns_text.split(",")]
        if not all(columns):
            raise cursor.fail()

    cursor.pos += from_span[1]
    table_name = cursor.identifier()
    joins = _parse_joins(cursor)
    clauses = _split_clauses(cursor.rest(), ("WHERE", "ORDER BY", "LIMIT"), cursor)

    order_by = None
    if "ORDER BY" in clauses:
        order_by = _parse_order_by(clauses["ORDER BY"], cursor)

    limit = None
    if "LIMIT" in clauses:
        limit_text = clauses["LIMIT"]
        if not (limit_text.isascii() and limit_text.isdigit()):
            raise cursor.fail()
        limit = int(limit_text)

    return SelectStmt(
        table_name=table_name,
        columns=columns,
        where=clauses.get("WHERE"),
        order_by=order_by,
        limit=limit,
        joins=tuple(joins),
    )


def _parse_order_by(text: str, cursor: TextCursor) -> Tuple[str, str]:
    order_cursor = TextCursor(text, cursor.kind)
    try:
        field = order_cursor.identifier(qualified=True)
    except MalformedStatementError:
        raise cursor.fail() from None

    direction = "ASC"
    if not order_cursor.at_end():
        direction = order_cursor.pop_word().upper()
        if direction not in {"ASC", "DESC"} or not order_cursor.at_end():
            raise cursor.fail()
    return field, direction


def _parse_joins(cursor: TextCursor) -> List[JoinClause]:
    joins: List[JoinClause] = []
    while True:
        word = cursor.peek_word().upper()
        if word == "JOIN":
            join_type = "INNER"
        elif word in {"INNER", "LEFT"}:
            cursor.pop_word()
            join_type = word
            if join_type == "LEFT":
                cursor.consume("OUTER")
        else:
            return joins

        cursor.expect("JOIN")
        join_table = cursor.identifier()
        cursor.expect("ON")
        first = cursor.identifier(qualified=True)
        cursor.expect_char("=")
        second = cursor.identifier(qualified=True)

        if second.split(".", 1)[0] == join_table and "." in second:
            left_column, right_column = first, second
        elif first.split(".", 1)[0] == join_table and "." in first:
            left_column, right_column = second, first
        else:
            raise cursor.fail()
        if "." not in left_column:
            raise cursor.fail()

        joins.append(
            JoinClause(
                join_type=join_type,
                table_name=join_table,
                left_column=left_column,
                right_column=right_column,
            )
        )


def _parse_insert(sql: str) -> InsertStmt:
    cursor = TextCursor(sql, "INSERT", pos=len("INSERT"))
    cursor.expect("INTO")
    table_name = cursor.identifier()
    cursor.expect_char("(")

    close = sql.find(")", cursor.pos)
    if close == -1:
        raise cursor.fail()
    columns_text = sql[cursor.pos : close]
    cursor.pos = close + 1

    cursor.expect("VALUES")
    cursor.expect_char("(")
    remaining = cursor.rest()
    if not remaining.endswith(")"):
        raise cursor.fail()
    values_text = remaining[:-1]

    columns = split_respecting_quotes(columns_text)
    values = [strip_quotes(value) for value in split_respecting_quotes(values_text)]
    if not columns or not values:
        raise cursor.fail()
    return InsertStmt(table_name=table_name, columns=columns, values=values)


def _parse_update(sql: str) -> UpdateStmt:
    cursor = TextCursor(sql, "UPDATE", pos=len("UPDATE"))
    table_name = cursor.identifier()
    cursor.expect("SET")

    body = cursor.rest()
    where_span = find_keyword(body, "WHERE")
    set_text = body[: where_span[0]] if where_span else body
    where = body[where_span[1] :].strip() if where_span else None
    if not set_text.strip() or where == "":
        raise cursor.fail()

    assignments: List[Tuple[str, str]] = []
    for pair in split_respecting_quotes(set_text):
        eq_idx = pair.find("=")
        if eq_idx == -1:
            continue
        name = pair[:eq_idx].strip()
        value = strip_quotes(pair[eq_idx + 1 :].strip())
        assignments.append((name, value))

    return UpdateStmt(table_name=table_name, assignments=assignments, where=where)


def _parse_delete(sql: str) -> DeleteStmt:
    cursor = TextCursor(sql, "DELETE", pos=len("DELETE"))
    cursor.expect("FROM")
    table_name = cursor.identifier()
    clauses = _split_clauses(cursor.rest(), ("WHERE",), cursor)
    return DeleteStmt(table_name=table_name, where=clauses.get("WHERE"))
