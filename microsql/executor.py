from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from microsql.ast_nodes import DeleteStmt, InsertStmt, SelectStmt, Statement, UpdateStmt
from microsql.parser import parse
from microsql.where import matches_where, stringify, to_number, values_equal

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
TableResolver = Callable[[str], List[Record]]


@dataclass
class ExecutionResult:
    # Select: projected rows. Insert: the new record. Update/Delete: affected count.
    value: Any
    rows: List[Record]
    row_count: int
    # New table contents to persist; None when the statement only reads.
    table_rows: Optional[List[Record]] = None


class Executor:
    def __init__(self, resolve_table: Optional[TableResolver] = None):
        self.resolve_table = resolve_table

    def execute(self, statement: Statement, rows: Sequence[Record]) -> ExecutionResult:
        if isinstance(statement, SelectStmt):
            return self._select(statement, rows)
        if isinstance(statement, InsertStmt):
            return self._insert(statement, rows)
        if isinstance(statement, UpdateStmt):
            return self._update(statement, rows)
        if isinstance(statement, DeleteStmt):
            return self._delete(statement, rows)
        raise ValueError("Unsupported statement")

    def _select(self, stmt: SelectStmt, rows: Sequence[Record]) -> ExecutionResult:
        selected = self._join(stmt, rows) if stmt.joins else list(rows)

        if stmt.where:
            selected = [row for row in selected if matches_where(stmt.where, row)]

        if stmt.order_by:
            field, direction = stmt.order_by
            selected.sort(
                key=functools.cmp_to_key(
                    lambda left, right: compare_order_values(left.get(field), right.get(field))
                ),
                reverse=direction == "DESC",
            )

        if stmt.limit is not None:
            selected = selected[: stmt.limit]

        if list(stmt.columns) == ["*"]:
            out = [dict(row) for row in selected]
        else:
            out = [{name: row.get(name) for name in stmt.columns} for row in selected]

        logger.debug("SELECT from %s returned %d row(s)", stmt.table_name, len(out))
        return ExecutionResult(value=out, rows=out, row_count=len(out))

    def _join(self, stmt: SelectStmt, rows: Sequence[Record]) -> List[Record]:
        if self.resolve_table is None:
            raise ValueError("JOIN requires a table resolver")

        current = [_qualify(stmt.table_name, row) for row in rows]
        for join in stmt.joins:
            right_rows = [_qualify(join.table_name, row) for row in self.resolve_table(join.table_name)]
            joined: List[Record] = []
            for left in current:
                matched = False
                for right in right_rows:
                    if values_equal(left.get(join.left_column), right.get(join.right_column)):
                        joined.append({**left, **right})
                        matched = True
                if not matched and join.join_type == "LEFT":
                    joined.append(dict(left))
            current = joined
        return current

    def _insert(self, stmt: InsertStmt, rows: Sequence[Record]) -> ExecutionResult:
        record: Record = {}
        for column, value in zip(stmt.columns, stmt.values):
            record[column] = value

        logger.debug("INSERT into %s with %d field(s)", stmt.table_name, len(record))
        return ExecutionResult(value=record, rows=[record], row_count=1, table_rows=[*rows, record])

    def _update(self, stmt: UpdateStmt, rows: Sequence[Record]) -> ExecutionResult:
        updates = dict(stmt.assignments)
        affected = 0
        new_rows: List[Record] = []
        for row in rows:
            if stmt.where is None or matches_where(stmt.where, row):
                new_rows.append({**row, **updates})
                affected += 1
            else:
                new_rows.append(row)

        logger.debug("UPDATE on %s touched %d row(s)", stmt.table_name, affected)
        return ExecutionResult(value=affected, rows=[], row_count=affected, table_rows=new_rows)

    def _delete(self, stmt: DeleteStmt, rows: Sequence[Record]) -> ExecutionResult:
        if stmt.where is None:
            kept: List[Record] = []
        else:
            kept = [row for row in rows if not matches_where(stmt.where, row)]
        deleted = len(rows) - len(kept)

        logger.debug("DELETE on %s removed %d row(s)", stmt.table_name, deleted)
        return ExecutionResult(value=deleted, rows=[], row_count=deleted, table_rows=kept)


def compare_order_values(left: Any, right: Any) -> int:
    if left is None or right is None:
        # Missing values sort after present ones.
        return int(left is None) - int(right is None)

    left_num = to_number(left)
    right_num = to_number(right)
    if left_num is not None and right_num is not None:
        return (left_num > right_num) - (left_num < right_num)

    left_text = stringify(left)
    right_text = stringify(right)
    return (left_text > right_text) - (left_text < right_text)


def _qualify(table_name: str, row: Record) -> Record:
    return {f"{table_name}.{key}": value for key, value in row.items()}


def execute(sql: str, rows: Sequence[Record], resolve_table: Optional[TableResolver] = None) -> ExecutionResult:
    return Executor(resolve_table).execute(parse(sql), rows)
