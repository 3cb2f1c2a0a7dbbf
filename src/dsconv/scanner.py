"""
Declaration scanner - single-pass, recovering parser for C array declarations.

This scanner walks a buffer of arbitrary C-like text and extracts every
statement of the form:

    type name[size] = {v0, v1, ...};

Anything else in the buffer is skipped one statement at a time, so a
malformed or unrelated statement never stops the scan of the rest of the
file.

Grammar:
    buffer          ::= (ws* statement)*
    statement       ::= declaration | other
    declaration     ::= type ws* identifier ws* "[" size "]" ws* "=" ws*
                        "{" value_list "}" ws* ";"?
    value_list      ::= ws* (value ws* ("," ws* value ws*)* ","?)? ws*
    other           ::= [^;]* (";" | <end>)

Terminal sets:
    type            ::= [A-Za-z]*
    identifier      ::= [A-Za-z_] [A-Za-z0-9_]*
    size            ::= [0-9]*
    value           ::= "-"? [0-9]+
    ws              ::= " " | "\\t" | "\\r" | "\\n"

Recovery:
    Whenever a required token is missing the scanner enters the RECOVERING
    state: it advances through the next ";" (or to the end of input) and
    reports the statement as Skipped. The next statement starts right after.

Ordinals:
    Every statement that reaches "[" is a declaration attempt and takes the
    next 1-based ordinal, whether it ends up Matched or Skipped.
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union

logger = logging.getLogger(__name__)


WHITESPACE = " \t\r\n"
LETTERS = frozenset(string.ascii_letters)
DIGITS = frozenset(string.digits)
IDENTIFIER_START = LETTERS | {"_"}
IDENTIFIER_CHARS = LETTERS | DIGITS | {"_"}

# Token bounds. Exceeding one rejects the statement; characters are never dropped.
MAX_TYPE_LENGTH = 31
MAX_IDENTIFIER_LENGTH = 63
MAX_VALUE_LENGTH = 31
MAX_VALUES = 1000

# 32-bit INT_MAX; larger sizes are rejected rather than wrapped
MAX_DECLARED_SIZE = 2**31 - 1


# =============================================================================
# Data structures
# =============================================================================


class ScanState(Enum):
    """Where the scanner stands after its most recent statement."""

    SCANNING = "scanning"
    RECOVERING = "recovering"
    DONE = "done"


class SkipReason(Enum):
    """Why a statement was not reported as a declaration."""

    NOT_A_DECLARATION = "not a declaration"
    MISSING_TYPE = "missing type"
    MISSING_IDENTIFIER = "missing identifier"
    MISSING_CLOSE_BRACKET = "expected ']'"
    MISSING_EQUALS = "expected '='"
    MISSING_OPEN_BRACE = "expected '{'"
    SIZE_OUT_OF_RANGE = "array size out of range"
    LIMIT_EXCEEDED = "token or value count limit exceeded"


@dataclass(frozen=True)
class Span:
    """Half-open character range [start, end) within the scanned buffer."""

    start: int
    end: int

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


@dataclass(frozen=True)
class DeclarationRecord:
    """One parsed array declaration."""

    type_name: str
    identifier: str
    declared_size: int
    values: tuple[str, ...]
    source_span: str
    terminated: bool = True  # False when the statement had no ';'
    malformed_values: bool = False  # value list ended on an unexpected character

    @property
    def value_count(self) -> int:
        return len(self.values)

    @property
    def is_under_initialized(self) -> bool:
        return self.value_count < self.declared_size

    @property
    def is_over_initialized(self) -> bool:
        return self.value_count > self.declared_size

    @property
    def uninitialized_count(self) -> int:
        return max(self.declared_size - self.value_count, 0)

    @property
    def excess_values(self) -> tuple[str, ...]:
        """Initializer values beyond the declared size."""
        return self.values[self.declared_size :]

    def value_at(self, index: int) -> Optional[str]:
        """Return the initializer for position index, or None if uninitialized."""
        if 0 <= index < self.value_count:
            return self.values[index]
        return None

    def to_dict(self) -> dict:
        return {
            "type": self.type_name,
            "name": self.identifier,
            "size": self.declared_size,
            "values": list(self.values),
            "value_count": self.value_count,
            "excess_values": list(self.excess_values),
            "terminated": self.terminated,
            "malformed_values": self.malformed_values,
            "span": self.source_span,
        }


@dataclass(frozen=True)
class Matched:
    """A statement that parsed as a declaration."""

    record: DeclarationRecord
    ordinal: int
    span: Span

    @property
    def identifier(self) -> str:
        return self.record.identifier


@dataclass(frozen=True)
class Skipped:
    """A statement that failed to parse; ordinal is set for declaration attempts."""

    span: Span
    reason: SkipReason
    ordinal: Optional[int] = None


ScanResult = Union[Matched, Skipped]


# =============================================================================
# Scanner class
# =============================================================================


class DeclarationScanner:
    """
    Forward-only scanner over one text buffer.

    Usage:
        scanner = DeclarationScanner(text)
        for result in scanner:
            if isinstance(result, Matched):
                print(result.ordinal, result.record.identifier)

    A scanner instance is consumed by iteration; use scan() for a
    restartable view of the same buffer.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.length = len(text)
        self.ordinal = 0
        self.state = ScanState.SCANNING

    # =========================================================================
    # Core parsing primitives
    # =========================================================================

    def peek(self, n: int = 1) -> str:
        """Look ahead n characters without consuming."""
        return self.text[self.pos : self.pos + n]

    def at_end(self) -> bool:
        """Check if we've reached end of input."""
        return self.pos >= self.length

    def match(self, expected: str) -> bool:
        """Check if current position matches expected string."""
        return self.peek(len(expected)) == expected

    def consume_if(self, expected: str) -> bool:
        """Consume expected string if it matches, return True if consumed."""
        if self.match(expected):
            self.pos += len(expected)
            return True
        return False

    def consume_run(self, charset: frozenset) -> str:
        """Consume the maximal run of characters drawn from charset."""
        start = self.pos
        while not self.at_end() and self.text[self.pos] in charset:
            self.pos += 1
        return self.text[start : self.pos]

    def skip_whitespace(self) -> None:
        while not self.at_end() and self.text[self.pos] in WHITESPACE:
            self.pos += 1

    def skip_past_delimiter(self) -> None:
        """Advance through the next ';' (inclusive) or to end of input."""
        index = self.text.find(";", self.pos)
        self.pos = self.length if index < 0 else index + 1

    # =========================================================================
    # Iteration
    # =========================================================================

    def __iter__(self) -> Iterator[ScanResult]:
        while self.state is not ScanState.DONE:
            result = self.next_statement()
            if result is not None:
                yield result

    def next_statement(self) -> Optional[ScanResult]:
        """
        Parse one statement starting at the cursor.

        Returns None once the input is exhausted.
        """
        self.state = ScanState.SCANNING
        self.skip_whitespace()
        if self.at_end():
            self.state = ScanState.DONE
            return None

        start = self.pos

        type_name = self.consume_run(LETTERS)

        self.skip_whitespace()
        identifier = self.parse_identifier()

        self.skip_whitespace()
        if not self.consume_if("["):
            return self.recover(start, SkipReason.NOT_A_DECLARATION)

        self.ordinal += 1
        ordinal = self.ordinal

        if len(type_name) > MAX_TYPE_LENGTH or len(identifier) > MAX_IDENTIFIER_LENGTH:
            return self.recover(start, SkipReason.LIMIT_EXCEEDED, ordinal)

        declared_size = self.parse_size()
        if declared_size is None:
            return self.recover(start, SkipReason.SIZE_OUT_OF_RANGE, ordinal)
        if not self.consume_if("]"):
            return self.recover(start, SkipReason.MISSING_CLOSE_BRACKET, ordinal)

        self.skip_whitespace()
        if not self.consume_if("="):
            return self.recover(start, SkipReason.MISSING_EQUALS, ordinal)
        self.skip_whitespace()
        if not self.consume_if("{"):
            return self.recover(start, SkipReason.MISSING_OPEN_BRACE, ordinal)

        values, malformed = self.parse_value_list()
        if values is None:
            return self.recover(start, SkipReason.LIMIT_EXCEEDED, ordinal)

        if malformed:
            # Discard the rest of the statement as trailing text
            self.skip_past_delimiter()
            end = self.pos
            terminated = self.text[end - 1] == ";"
        else:
            self.consume_if("}")
            end = self.pos
            self.skip_whitespace()
            terminated = self.consume_if(";")
            if terminated:
                end = self.pos

        span = Span(start, end)
        if not type_name:
            return self.skipped(span, SkipReason.MISSING_TYPE, ordinal)
        if not identifier:
            return self.skipped(span, SkipReason.MISSING_IDENTIFIER, ordinal)

        record = DeclarationRecord(
            type_name=type_name,
            identifier=identifier,
            declared_size=declared_size,
            values=tuple(values),
            source_span=span.slice(self.text),
            terminated=terminated,
            malformed_values=malformed,
        )
        if malformed:
            logger.debug(f"Malformed value list in declaration #{ordinal} '{identifier}'")
        return Matched(record=record, ordinal=ordinal, span=span)

    # =========================================================================
    # Grammar productions
    # =========================================================================

    def parse_identifier(self) -> str:
        """
        identifier ::= [A-Za-z_] [A-Za-z0-9_]*

        Returns an empty string when the cursor is not on an identifier start.
        """
        if self.at_end() or self.text[self.pos] not in IDENTIFIER_START:
            return ""
        return self.consume_run(IDENTIFIER_CHARS)

    def parse_size(self) -> Optional[int]:
        """
        size ::= [0-9]*

        An empty run is size 0. Returns None when the value exceeds
        MAX_DECLARED_SIZE.
        """
        digits = self.consume_run(DIGITS)
        significant = digits.lstrip("0")
        if len(significant) > len(str(MAX_DECLARED_SIZE)):
            return None
        size = int(significant) if significant else 0
        if size > MAX_DECLARED_SIZE:
            return None
        return size

    def parse_value(self) -> Optional[str]:
        """
        value ::= "-"? [0-9]+

        Returns the literal text, or None (cursor unchanged) if no digits follow.
        """
        start = self.pos
        self.consume_if("-")
        if not self.consume_run(DIGITS):
            self.pos = start
            return None
        return self.text[start : self.pos]

    def parse_value_list(self) -> tuple[Optional[list[str]], bool]:
        """
        Parse values up to (not including) the closing '}'.

        Returns (values, malformed). values is None when a token or the
        value count exceeds its limit.
        """
        values: list[str] = []
        while True:
            self.skip_whitespace()
            if self.match("}"):
                return values, False

            token = self.parse_value()
            if token is None:
                return values, True
            if len(token) > MAX_VALUE_LENGTH or len(values) >= MAX_VALUES:
                return None, False
            values.append(token)

            self.skip_whitespace()
            if self.consume_if(","):
                continue
            if self.match("}"):
                return values, False
            return values, True

    # =========================================================================
    # Recovery
    # =========================================================================

    def recover(self, start: int, reason: SkipReason, ordinal: Optional[int] = None) -> Skipped:
        """Resynchronize on the next statement delimiter and report a skip."""
        self.state = ScanState.RECOVERING
        self.skip_past_delimiter()
        return self.skipped(Span(start, self.pos), reason, ordinal)

    def skipped(self, span: Span, reason: SkipReason, ordinal: Optional[int]) -> Skipped:
        if ordinal is not None:
            logger.debug(f"Skipped declaration #{ordinal} at {span.start}: {reason.value}")
        else:
            logger.debug(f"Skipped statement at {span.start}: {reason.value}")
        return Skipped(span=span, reason=reason, ordinal=ordinal)


# =============================================================================
# Restartable scan view
# =============================================================================


class ScanResults:
    """
    Lazy, restartable sequence of scan results over one buffer.

    Each iteration runs a fresh DeclarationScanner, so iterating twice
    yields identical results.
    """

    def __init__(self, text: str):
        self.text = text

    def __iter__(self) -> Iterator[ScanResult]:
        return iter(DeclarationScanner(self.text))

    def matches(self) -> list[Matched]:
        """Return only the successfully parsed declarations."""
        return [result for result in self if isinstance(result, Matched)]

    def skipped(self) -> list[Skipped]:
        """Return only the statements that were skipped."""
        return [result for result in self if isinstance(result, Skipped)]


def scan(text: str) -> ScanResults:
    """Scan text for array declarations."""
    return ScanResults(text)
