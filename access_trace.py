# access_trace.py

"""
Access trace parsing.

A trace is a whitespace separated list of tokens such as ``R:1 W:2 R:1``.
Each token becomes an immutable AccessRecord; the position of the record in
the list is its logical clock value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List


class TraceParseError(ValueError):
    """Raised when a trace token or trace file cannot be read."""

    def __init__(self, message: str, token: str = None):
        super().__init__(message)
        self.token = token


class Operation(Enum):
    """Kind of memory access. Values match the trace token prefix."""
    READ = "R"
    WRITE = "W"


@dataclass(frozen=True)
class AccessRecord:
    """
    A single memory access from the trace.

    Attributes:
        operation (Operation): READ or WRITE
        page_number (int): Virtual page being touched (non-negative)
    """
    operation: Operation
    page_number: int

    @property
    def is_write(self) -> bool:
        return self.operation is Operation.WRITE

    def __str__(self):
        return f"{self.operation.value}:{self.page_number}"


# -----------------------------
# Parsing
# -----------------------------

def parse_token(token: str) -> AccessRecord:
    """
    Parse one ``<op>:<page>`` token.

    Raises:
        TraceParseError: If the operation is not R/W or the page is not a
            non-negative integer.
    """
    op_text, sep, page_text = token.partition(":")
    if not sep:
        raise TraceParseError(f"Invalid access token: {token}", token)

    try:
        operation = Operation(op_text)
    except ValueError:
        raise TraceParseError(f"Invalid access token: {op_text}", token) from None

    if not (page_text.isascii() and page_text.isdigit()):
        raise TraceParseError(f"Invalid memory access token: {token}", token)

    return AccessRecord(operation, int(page_text))


def parse_trace(text: str) -> List[AccessRecord]:
    """
    Parse a whole trace string.

    The whole string is validated before anything is returned, so a bad token
    anywhere means no trace at all.

    Args:
        text (str): Whitespace separated tokens, e.g. "R:1 W:2 R:3"

    Returns:
        List[AccessRecord]: Records in trace order
    """
    return [parse_token(token) for token in text.split()]


def read_trace_file(path: str) -> str:
    """Return the contents of a trace file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError:
        raise TraceParseError(f"File {path} not found") from None


def format_trace(trace: Iterable[AccessRecord]) -> str:
    return " ".join(str(record) for record in trace)
