"""
Per-target scan statistics and a Rich summary table.

Usage:
    stats = collect_stats("tables.c", scan(text), selected=2)
    Console().print(render_summary([stats]))
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List

from rich import box
from rich.table import Table
from rich.text import Text

from dsconv.scanner import Matched, ScanResult, Skipped


@dataclass
class TargetStats:
    """Counts for one scanned target."""

    label: str
    attempts: int = 0  # statements that reached '['
    matched: int = 0
    skipped: int = 0
    selected: int = 0
    under_initialized: int = 0
    over_initialized: int = 0
    skip_reasons: Counter = field(default_factory=Counter)

    def record(self, result: ScanResult) -> None:
        if isinstance(result, Matched):
            self.attempts += 1
            self.matched += 1
            if result.record.is_under_initialized:
                self.under_initialized += 1
            elif result.record.is_over_initialized:
                self.over_initialized += 1
        elif isinstance(result, Skipped):
            self.skipped += 1
            self.skip_reasons[result.reason.value] += 1
            if result.ordinal is not None:
                self.attempts += 1

    def tally(self, results: Iterable[ScanResult]) -> Iterator[ScanResult]:
        """Record each result while passing it through unchanged."""
        for result in results:
            self.record(result)
            yield result


def collect_stats(label: str, results: Iterable[ScanResult], selected: int = 0) -> TargetStats:
    stats = TargetStats(label=label, selected=selected)
    for result in results:
        stats.record(result)
    return stats


def render_summary(stats_list: List[TargetStats], title: str = "Scan summary") -> Table:
    """Build a Rich table with one row per target plus a total row."""
    table = Table(title=title, box=box.SIMPLE, header_style="bold grey50")
    table.add_column("Target", justify="left", no_wrap=True)
    for name in ("Attempts", "Matched", "Skipped", "Selected", "Under", "Over"):
        table.add_column(name, justify="right", style="bright_cyan")
    table.add_column("Skip reasons", justify="left")

    totals = TargetStats(label="total")
    for stats in stats_list:
        reasons = ", ".join(f"{reason} x{count}" for reason, count in sorted(stats.skip_reasons.items()))
        table.add_row(
            Text(stats.label),
            f"{stats.attempts:,}",
            f"{stats.matched:,}",
            f"{stats.skipped:,}",
            f"{stats.selected:,}",
            f"{stats.under_initialized:,}",
            f"{stats.over_initialized:,}",
            Text(reasons),
        )
        totals.attempts += stats.attempts
        totals.matched += stats.matched
        totals.skipped += stats.skipped
        totals.selected += stats.selected
        totals.under_initialized += stats.under_initialized
        totals.over_initialized += stats.over_initialized

    if len(stats_list) > 1:
        table.add_section()
        table.add_row(
            Text("total", style="bold"),
            f"{totals.attempts:,}",
            f"{totals.matched:,}",
            f"{totals.skipped:,}",
            f"{totals.selected:,}",
            f"{totals.under_initialized:,}",
            f"{totals.over_initialized:,}",
            "",
        )
    return table
