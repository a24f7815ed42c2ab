import logging

from .api import MicroSQL, QueryResult
from .executor import ExecutionResult, execute
from .parser import MalformedStatementError, ParseError, UnsupportedStatementError

__all__ = [
    "ExecutionResult",
    "MalformedStatementError",
    "MicroSQL",
    "ParseError",
    "QueryResult",
    "UnsupportedStatementError",
    "execute",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
