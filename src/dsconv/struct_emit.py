"""
Struct-form emitter: re-express an array declaration as a C struct.

Two layouts are supported:

  wrap_member=True (default)      one member holding the whole array

      struct s {
          int a[3] = {1, 2, 0};
      } s_var;
      s_var.a[0] = 1;             (external_assign)

  wrap_member=False               one scalar member per element

      struct s {
          int a_0 = 1;
          int a_1 = 2;
          int a_2 = 0;
      } s_var;
      s_var.a_0 = 1;              (external_assign)

internal_init adds inline initializers, external_assign adds one assignment
statement per element after the struct. Only the declared positions are
emitted; positions without a value default to 0 and excess values are
dropped. Any output that spells out each position is limited to
MAX_EXPANDED_POSITIONS; larger arrays raise EmitError unless the plain
wrapped member (no initializers) is requested.
"""

import re
from dataclasses import dataclass
from typing import List

from dsconv.errors import EmitError
from dsconv.scanner import DeclarationRecord


DEFAULT_STRUCT_TAG = "s"
DEFAULT_VAR_NAME = "s_var"
DEFAULT_VALUE = "0"
INDENT = "    "
MAX_EXPANDED_POSITIONS = 65536

C_IDENTIFIER = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')


@dataclass(frozen=True)
class EmitOptions:
    """Layout and initialization style for emit_struct."""

    wrap_member: bool = True
    internal_init: bool = False
    external_assign: bool = False


def is_c_identifier(name: str) -> bool:
    return bool(C_IDENTIFIER.fullmatch(name))


def element_values(record: DeclarationRecord) -> List[str]:
    """Return one value per declared position, defaulting to 0."""
    if record.declared_size > MAX_EXPANDED_POSITIONS:
        raise EmitError(
            f"Cannot expand '{record.identifier}': {record.declared_size:,} positions "
            f"exceed the limit of {MAX_EXPANDED_POSITIONS:,}"
        )
    values = []
    for i in range(record.declared_size):
        value = record.value_at(i)
        values.append(DEFAULT_VALUE if value is None else value)
    return values


def emit_struct(
    record: DeclarationRecord,
    options: EmitOptions = EmitOptions(),
    var_name: str = DEFAULT_VAR_NAME,
    tag: str = DEFAULT_STRUCT_TAG,
) -> str:
    """
    Generate struct code for a declaration.

    Args:
        record: Parsed declaration
        options: Layout and initialization flags
        var_name: Name of the struct variable
        tag: Struct tag

    Returns:
        C source text ending with a blank line

    Raises:
        EmitError: If var_name or tag is not a valid C identifier, or the
            requested form needs more than MAX_EXPANDED_POSITIONS positions
    """
    if not is_c_identifier(var_name):
        raise EmitError(f"Invalid struct variable name: {var_name!r}")
    if not is_c_identifier(tag):
        raise EmitError(f"Invalid struct tag: {tag!r}")

    expanded = not options.wrap_member or options.internal_init or options.external_assign
    values = element_values(record) if expanded else []
    lines = [
        f"/* Generated Structural Representation: {record.identifier} */",
        f"struct {tag} {{",
    ]

    if options.wrap_member:
        member = f"{record.type_name} {record.identifier}[{record.declared_size}]"
        if options.internal_init:
            lines.append(f"{INDENT}{member} = {{{', '.join(values)}}};")
        else:
            lines.append(f"{INDENT}{member};")
        lines.append(f"}} {var_name};")
        if options.external_assign:
            for i, value in enumerate(values):
                lines.append(f"{var_name}.{record.identifier}[{i}] = {value};")
    else:
        for i, value in enumerate(values):
            member = f"{record.type_name} {record.identifier}_{i}"
            if options.internal_init:
                lines.append(f"{INDENT}{member} = {value};")
            else:
                lines.append(f"{INDENT}{member};")
        lines.append(f"}} {var_name};")
        if options.external_assign:
            for i, value in enumerate(values):
                lines.append(f"{var_name}.{record.identifier}_{i} = {value};")

    lines.append("")
    return "\n".join(lines) + "\n"
