"""
selector.py — Choose which scanned declarations get reported.

Exactly one filter mode is active per run:
  1. NONE     every matched declaration
  2. ORDINAL  the declaration attempt with the given 1-based position
  3. NAME     every declaration whose identifier equals the key (case-sensitive)

A filter that selects nothing is not an error; the result is simply empty.
Skipped statements never pass any filter, even when they carry an ordinal.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Union

from dsconv.errors import SelectionError
from dsconv.scanner import Matched, ScanResult


class FilterMode(Enum):
    NONE = "none"
    ORDINAL = "ordinal"
    NAME = "name"


@dataclass(frozen=True)
class Selection:
    """A filter mode together with its key (None for NONE)."""

    mode: FilterMode = FilterMode.NONE
    key: Union[int, str, None] = None

    @classmethod
    def all(cls) -> 'Selection':
        return cls(FilterMode.NONE)

    @classmethod
    def by_ordinal(cls, ordinal: int) -> 'Selection':
        if ordinal < 1:
            raise SelectionError(f"Declaration index must be 1 or greater, got {ordinal}")
        return cls(FilterMode.ORDINAL, ordinal)

    @classmethod
    def by_name(cls, name: str) -> 'Selection':
        if not name:
            raise SelectionError("Declaration name must not be empty")
        return cls(FilterMode.NAME, name)

    @classmethod
    def from_options(cls, index: Optional[int] = None, name: Optional[str] = None) -> 'Selection':
        """Build a selection from optional index/name options (at most one)."""
        if index is not None and name is not None:
            raise SelectionError("Select by index or by name, not both")
        if index is not None:
            return cls.by_ordinal(index)
        if name is not None:
            return cls.by_name(name)
        return cls.all()

    def matches(self, matched: Matched) -> bool:
        """Check if a matched declaration passes this selection."""
        if self.mode is FilterMode.ORDINAL:
            return matched.ordinal == self.key
        if self.mode is FilterMode.NAME:
            return matched.record.identifier == self.key
        return True

    def describe(self) -> str:
        if self.mode is FilterMode.ORDINAL:
            return f"declaration #{self.key}"
        if self.mode is FilterMode.NAME:
            return f"declarations named '{self.key}'"
        return "all declarations"


def select(results: Iterable[ScanResult], selection: Selection) -> Iterator[Matched]:
    """
    Lazily yield the matched results that pass the selection.

    Args:
        results: Scan results in source order (Matched and Skipped)
        selection: Active filter

    Returns:
        Iterator over passing Matched results, in source order
    """
    for result in results:
        if isinstance(result, Matched) and selection.matches(result):
            yield result
