from __future__ import annotations

import argparse
import logging
import os
from typing import Any, Sequence

from microsql.api import MicroSQL

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"

logger = logging.getLogger("microsql")


def _format_scalar(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _format_rows_table(rows: list[dict[str, Any]]) -> str:
    if not rows:
        return "(0 rows)"

    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    rendered_rows = [[_format_scalar(row.get(col)) for col in columns] for row in rows]

    widths = []
    for idx, col in enumerate(columns):
        cell_width = max(len(r[idx]) for r in rendered_rows) if rendered_rows else 0
        widths.append(max(len(col), cell_width))

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    header = "| " + " | ".join(col.ljust(widths[i]) for i, col in enumerate(columns)) + " |"
    body = [
        "| " + " | ".join(values[i].ljust(widths[i]) for i in range(len(columns))) + " |"
        for values in rendered_rows
    ]

    return "\n".join([border, header, border, *body, border, f"({len(rows)} row(s))"])


def _configure_logging(level: str, log_file: str | None) -> None:
    logger.setLevel(getattr(logging, level))
    if log_file is None:
        return

    log_path = os.path.abspath(log_file)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and getattr(handler, "baseFilename", None) == log_path:
            return
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="microsql REPL")
    parser.add_argument("data_dir", help="Directory holding one JSON file per table")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", default=None, help="Append log records to this file")
    args = parser.parse_args(argv)

    _configure_logging(args.log_level, args.log_file)
    db = MicroSQL(args.data_dir)
    print("microsql REPL. Commands: .tables, .help, .exit")
    while True:
        try:
            line = input("microsql> ").strip()
        except EOFError:
            break
        if not line:
            continue
        if line in {".exit", ".quit"}:
            break
        if line == ".tables":
            names = db.tables()
            if not names:
                print("(no tables)")
            else:
                for name in names:
                    print(name)
            continue
        if line == ".help":
            print("Commands: .tables, .help, .exit")
            print("Statements: SELECT, INSERT, UPDATE, DELETE")
            continue
        try:
            result = db.execute(line)
            if isinstance(result, list):
                print(_format_rows_table(result))
            elif isinstance(result, dict):
                print(_format_rows_table([result]))
            else:
                print(result)
        except Exception as exc:
            logger.exception("Statement failed: %s", line)
            print(f"error: {exc}")


if __name__ == "__main__":
    main()
