from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Sequence

from microsql.executor import ExecutionResult, Executor
from microsql.parser import parse
from microsql.splitting import QUOTE_CHARS
from microsql.storage.row_store import RowStore

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    row_count: int = 0


class MicroSQL:
    def __init__(self, directory: str):
        self.directory = directory
        self.store = RowStore(directory)
        self.executor = Executor(resolve_table=self.store.load)

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> Any:
        return self._run(sql, params).value

    def query(self, sql: str, params: Sequence[Any] | None = None) -> QueryResult:
        result = self._run(sql, params)
        return QueryResult(rows=result.rows, row_count=result.row_count)

    def tables(self) -> List[str]:
        return self.store.tables()

    def _run(self, sql: str, params: Sequence[Any] | None) -> ExecutionResult:
        if params is not None:
            sql = self._bind_params(sql, params)
        stmt = parse(sql)

        rows = self.store.load(stmt.table_name)
        result = self.executor.execute(stmt, rows)
        if result.table_rows is not None:
            self.store.save(stmt.table_name, result.table_rows)
        logger.debug("%s on %s -> %d row(s)", type(stmt).__name__, stmt.table_name, result.row_count)
        return result

    def _bind_params(self, sql: str, params: Sequence[Any]) -> str:
        pieces: list[str] = []
        param_idx = 0
        quote_char = ""
        for ch in sql:
            if ch in QUOTE_CHARS:
                if not quote_char:
                    quote_char = ch
                elif ch == quote_char:
                    quote_char = ""
                pieces.append(ch)
                continue
            if ch == "?" and not quote_char:
                if param_idx >= len(params):
                    raise ValueError("Not enough parameters for SQL placeholders")
                pieces.append(self._to_sql_literal(params[param_idx]))
                param_idx += 1
                continue
            pieces.append(ch)

        if param_idx != len(params):
            raise ValueError("Too many parameters for SQL placeholders")
        return "".join(pieces)

    def _to_sql_literal(self, value: Any) -> str:
        if value is None:
            raise ValueError("NULL parameters are not supported")
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float, Decimal)):
            return str(value)

        text = str(value)
        if '"' not in text:
            return f'"{text}"'
        if "'" not in text:
            return f"'{text}'"
        raise ValueError("String parameters cannot contain both quote characters")
