from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional

from microsql.splitting import split_logical, split_respecting_quotes, strip_quotes, unwrap_parens

Record = Dict[str, Any]

_CONDITION_RE = re.compile(
    r"\s*(?P<field>[\w.]+)\s*"
    r"(?P<op>>=|<=|=|>|<|\bLIKE\b|\bIN\b)\s*"
    r"(?P<value>\(.*\)|\"[^\"]*\"|'[^']*'|\S+)\s*",
    re.IGNORECASE | re.DOTALL,
)


def to_number(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def parse_float(value: Any) -> float:
    if value is None:
        return math.nan
    if isinstance(value, (bool, int, float)):
        return float(value)
    text = str(value).strip()
    if "_" in text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def values_equal(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    left_num = to_number(left)
    right_num = to_number(right)
    if left_num is not None and right_num is not None:
        return left_num == right_num
    return stringify(left) == stringify(right)


def like_to_regex(pattern: str) -> "re.Pattern[str]":
    parts: List[str] = []
    for ch in pattern:
        if ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def evaluate_condition(condition: str, record: Record) -> bool:
    match = _CONDITION_RE.fullmatch(condition)
    if match is None:
        return False

    field = match.group("field")
    op = match.group("op").upper()
    raw_value = match.group("value")
    if field not in record or record[field] is None:
        return False
    actual = record[field]

    if op == "=":
        return values_equal(actual, strip_quotes(raw_value))
    if op in {">", "<", ">=", "<="}:
        left = parse_float(actual)
        right = parse_float(strip_quotes(raw_value))
        if op == ">":
            return left > right
        if op == "<":
            return left < right
        if op == ">=":
            return left >= right
        return left <= right
    if op == "LIKE":
        regex = like_to_regex(strip_quotes(raw_value))
        return regex.fullmatch(stringify(actual)) is not None
    if op == "IN":
        if not (raw_value.startswith("(") and raw_value.endswith(")")):
            return False
        candidates = [strip_quotes(item) for item in split_respecting_quotes(raw_value[1:-1])]
        return stringify(actual) in candidates
    return False


def matches_where(expression: str, record: Record) -> bool:
    for branch in split_logical(expression, "OR"):
        terms = split_logical(unwrap_parens(branch), "AND")
        if all(evaluate_condition(unwrap_parens(term), record) for term in terms):
            return True
    return False
