from __future__ import annotations

import re
from typing import Dict, List

QUOTE_CHARS = ('"', "'")

_OPERATOR_PATTERNS: Dict[str, "re.Pattern[str]"] = {}


def split_respecting_quotes(text: str, delimiter: str = ",") -> List[str]:
    parts: List[str] = []
    current: List[str] = []
    in_quotes = False
    quote_char = ""

    for ch in text:
        if ch in QUOTE_CHARS and not in_quotes:
            in_quotes = True
            quote_char = ch
            current.append(ch)
        elif in_quotes and ch == quote_char:
            in_quotes = False
            quote_char = ""
            current.append(ch)
        elif ch == delimiter and not in_quotes:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)

    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def _operator_pattern(operator: str) -> "re.Pattern[str]":
    key = operator.upper()
    pattern = _OPERATOR_PATTERNS.get(key)
    if pattern is None:
        pattern = re.compile(rf"\s+{re.escape(key)}\s+", re.IGNORECASE)
        _OPERATOR_PATTERNS[key] = pattern
    return pattern


def split_logical(expression: str, operator: str) -> List[str]:
    """Split on a top-level AND/OR outside quotes and parentheses; never returns an empty list."""
    pattern = _operator_pattern(operator)
    parts: List[str] = []
    current: List[str] = []
    in_quotes = False
    quote_char = ""
    depth = 0

    i = 0
    while i < len(expression):
        ch = expression[i]
        escaped = i > 0 and expression[i - 1] == "\\"

        if ch in QUOTE_CHARS and not in_quotes and not escaped:
            in_quotes = True
            quote_char = ch
        elif in_quotes and ch == quote_char and not escaped:
            in_quotes = False
            quote_char = ""
        elif ch == "(" and not in_quotes:
            depth += 1
        elif ch == ")" and not in_quotes:
            # Unbalanced input may push depth below zero; it is not rejected.
            depth -= 1

        if not in_quotes and depth == 0:
            match = pattern.match(expression, i)
            if match is not None:
                parts.append("".join(current).strip())
                current = []
                i = match.end()
                continue

        current.append(ch)
        i += 1

    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts if parts else [expression.strip()]


def strip_quotes(value: str) -> str:
    # Leading and trailing quote characters are removed independently.
    if value[:1] in QUOTE_CHARS:
        value = value[1:]
    if value[-1:] in QUOTE_CHARS:
        value = value[:-1]
    return value


def unwrap_parens(text: str) -> str:
    cleaned = text.strip()
    while cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = cleaned[1:-1].strip()
    return cleaned
