from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class JoinClause:
    join_type: str
    table_name: str
    # Qualified column already present in the accumulated row.
    left_column: str
    # Qualified column of the joined table.
    right_column: str


@dataclass(frozen=True)
class SelectStmt:
    table_name: str
    columns: Sequence[str]
    where: Optional[str] = None
    order_by: Optional[Tuple[str, str]] = None
    limit: Optional[int] = None
    joins: Sequence[JoinClause] = ()


@dataclass(frozen=True)
class InsertStmt:
    table_name: str
    columns: Sequence[str]
    values: Sequence[str]


@dataclass(frozen=True)
class UpdateStmt:
    table_name: str
    assignments: Sequence[Tuple[str, str]]
    where: Optional[str] = None


@dataclass(frozen=True)
class DeleteStmt:
    table_name: str
    where: Optional[str] = None


Statement = SelectStmt | InsertStmt | UpdateStmt | DeleteStmt
