"""
Metadata reporter for selected declarations.

For each declaration the report contains, in order:

    int a[3] = {1, 2, 3};        verbatim source text
    type: int
    name: a
    platform: linux-x86_64       \\
    sizeof(int): 4 bytes          |  only when the type is exactly "int"
    int min: -2147483648          |
    int max: 2147483647           |
    theoretical: 4 bytes (...)   /
    size: 3                      declared element count
    init: 3                      parsed value count
    values: 1, 2, 3              one entry per declared position
    excess values: 4, 5          only when over-initialized

Positions without an initializer show the placeholder (default "uninit").
At most MAX_LISTED_POSITIONS positions (or every parsed value, if there are
more) are listed; the remaining placeholders collapse into one marker entry
such as "... (2,147,482,623 more uninit)".

List lines are unwrapped by default. With wrap_width set, the label is
written on its own line and entries follow, breaking to a new line whenever
adding the next entry would push a non-empty line past wrap_width columns
(trailing separators are stripped from each wrapped line).
"""

import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from dsconv.platform_info import THEORETICAL_INT_NOTE, HostIntInfo, host_int_info
from dsconv.scanner import DeclarationRecord, Matched
from dsconv.sinks import Sink

logger = logging.getLogger(__name__)


UNINITIALIZED_PLACEHOLDER = "uninit"
LEGACY_WRAP_WIDTH = 12
SEPARATOR = ", "
MAX_LISTED_POSITIONS = 1024


def render_list(label: str, entries: Sequence[str], wrap_width: Optional[int] = None) -> List[str]:
    """
    Render a labelled, comma-separated list.

    Args:
        label: Line label including its colon (e.g. "values:")
        entries: Entries in order
        wrap_width: Column budget per line, or None for a single line

    Returns:
        Rendered lines
    """
    if wrap_width is None:
        if not entries:
            return [label]
        return [f"{label} {SEPARATOR.join(entries)}"]

    lines = [label]
    current = ""
    last = len(entries) - 1
    for i, entry in enumerate(entries):
        piece = entry + (SEPARATOR if i < last else "")
        if current and len(current) + len(piece) > wrap_width:
            lines.append(current.rstrip())
            current = ""
        current += piece
    if current:
        lines.append(current.rstrip())
    return lines


def position_entries(record: DeclarationRecord, placeholder: str = UNINITIALIZED_PLACEHOLDER) -> Iterator[str]:
    """
    Yield one entry per declared position, collapsing the uninitialized tail.

    Parsed values are always listed. Past MAX_LISTED_POSITIONS only
    placeholders remain, and they are summarized by a single marker entry.
    """
    listed = min(record.declared_size, max(MAX_LISTED_POSITIONS, record.value_count))
    for i in range(listed):
        value = record.value_at(i)
        yield placeholder if value is None else value
    hidden = record.declared_size - listed
    if hidden:
        yield f"... ({hidden:,} more {placeholder})"


def architecture_lines(info: HostIntInfo) -> List[str]:
    return [
        f"platform: {info.platform_tag}",
        f"sizeof(int): {info.size_bytes} bytes",
        f"int min: {info.min_value}",
        f"int max: {info.max_value}",
        f"theoretical: {THEORETICAL_INT_NOTE}",
    ]


class MetadataReporter:
    """Renders declaration metadata and writes it to a sink."""

    def __init__(
        self,
        sink: Sink,
        wrap_width: Optional[int] = None,
        placeholder: str = UNINITIALIZED_PLACEHOLDER,
        int_info: Optional[HostIntInfo] = None,
    ):
        if wrap_width is not None and wrap_width < 1:
            raise ValueError(f"wrap_width must be positive, got {wrap_width}")
        self.sink = sink
        self.wrap_width = wrap_width
        self.placeholder = placeholder
        self.int_info = int_info or host_int_info()

    def render(self, matched: Matched) -> List[str]:
        """Render the report lines for one declaration (no I/O)."""
        record = matched.record
        lines = [
            record.source_span,
            f"type: {record.type_name}",
            f"name: {record.identifier}",
        ]

        # Exact match only: "long", "short", "unsigned" etc. get no block
        if record.type_name == "int":
            lines.extend(architecture_lines(self.int_info))

        lines.append(f"size: {record.declared_size}")
        lines.append(f"init: {record.value_count}")

        entries = list(position_entries(record, self.placeholder))
        lines.extend(render_list("values:", entries, self.wrap_width))

        if record.is_over_initialized:
            lines.extend(render_list("excess values:", record.excess_values, self.wrap_width))

        lines.append("")
        return lines

    def report(self, matched: Matched) -> None:
        """Write the report for one declaration."""
        if matched.record.malformed_values:
            logger.warning(
                f"Declaration #{matched.ordinal} '{matched.identifier}': "
                "malformed value list, trailing text ignored"
            )
        self.sink.write_lines(self.render(matched))

    def report_all(self, selected: Iterable[Matched]) -> int:
        """Report every selected declaration; return how many were written."""
        count = 0
        for matched in selected:
            self.report(matched)
            count += 1
        return count

    def begin_target(self, label: str) -> None:
        self.sink.write_line(f"== {label} ==")
