"""
dsconv - C array declaration scanner and struct converter.

Modules:
    scanner: Recovering single-pass scanner for `type name[size] = {...};`
    selector: Filter scanned declarations by ordinal or identifier
    report: Metadata report rendering
    struct_emit: Struct-form code generation
    cli: Command-line entry point
"""

from dsconv.scanner import DeclarationRecord, Matched, Skipped, SkipReason, scan
from dsconv.selector import FilterMode, Selection, select

__all__ = [
    'DeclarationRecord',
    'FilterMode',
    'Matched',
    'Selection',
    'SkipReason',
    'Skipped',
    'scan',
    'select',
]
