"""Tests for struct-form code generation."""

import pytest

from dsconv.errors import EmitError
from dsconv.scanner import MAX_DECLARED_SIZE, scan
from dsconv.struct_emit import MAX_EXPANDED_POSITIONS, EmitOptions, element_values, emit_struct


@pytest.fixture
def record():
    """char b[3] with one missing initializer."""
    return scan("char b[3] = {10, -2};").matches()[0].record


# =============================================================================
# Array member layout
# =============================================================================


class TestWrappedMember:
    def test_plain(self, record):
        assert emit_struct(record) == (
            "/* Generated Structural Representation: b */\n"
            "struct s {\n"
            "    char b[3];\n"
            "} s_var;\n"
            "\n"
        )

    def test_internal_init(self, record):
        code = emit_struct(record, EmitOptions(internal_init=True))
        assert "    char b[3] = {10, -2, 0};\n} s_var;\n" in code

    def test_external_assign(self, record):
        code = emit_struct(record, EmitOptions(external_assign=True), var_name="table")

        assert code.splitlines()[3:] == [
            "} table;",
            "table.b[0] = 10;",
            "table.b[1] = -2;",
            "table.b[2] = 0;",
            "",
        ]

    def test_both_initializations(self, record):
        code = emit_struct(record, EmitOptions(internal_init=True, external_assign=True))

        assert "char b[3] = {10, -2, 0};" in code
        assert "s_var.b[2] = 0;" in code


# =============================================================================
# Flattened layout
# =============================================================================


class TestFlattened:
    def test_plain(self, record):
        assert emit_struct(record, EmitOptions(wrap_member=False)) == (
            "/* Generated Structural Representation: b */\n"
            "struct s {\n"
            "    char b_0;\n"
            "    char b_1;\n"
            "    char b_2;\n"
            "} s_var;\n"
            "\n"
        )

    def test_internal_init(self, record):
        code = emit_struct(record, EmitOptions(wrap_member=False, internal_init=True))

        assert "    char b_0 = 10;\n" in code
        assert "    char b_1 = -2;\n" in code
        assert "    char b_2 = 0;\n" in code

    def test_external_assign(self, record):
        code = emit_struct(record, EmitOptions(wrap_member=False, external_assign=True))

        assert code.splitlines()[-4:] == [
            "s_var.b_0 = 10;",
            "s_var.b_1 = -2;",
            "s_var.b_2 = 0;",
            "",
        ]

    def test_both_initializations(self, record):
        code = emit_struct(
            record,
            EmitOptions(wrap_member=False, internal_init=True, external_assign=True),
        )

        assert "    char b_2 = 0;" in code
        assert "s_var.b_2 = 0;" in code


# =============================================================================
# Edge cases
# =============================================================================


class TestEmitEdgeCases:
    def test_excess_values_dropped(self):
        record = scan("int c[2] = {1,2,3,4};").matches()[0].record

        assert element_values(record) == ["1", "2"]
        assert "{1, 2}" in emit_struct(record, EmitOptions(internal_init=True))

    def test_zero_size(self):
        record = scan("int z[0] = {};").matches()[0].record
        code = emit_struct(record, EmitOptions(internal_init=True, external_assign=True))

        assert "    int z[0] = {};" in code
        assert "s_var.z" not in code

    def test_custom_tag(self, record):
        assert "struct lut_t {" in emit_struct(record, tag="lut_t")

    def test_pure(self, record):
        options = EmitOptions(internal_init=True)
        assert emit_struct(record, options) == emit_struct(record, options)

    @pytest.mark.parametrize("name", ["", "9lives", "has space", "semi;colon"])
    def test_invalid_var_name(self, record, name):
        with pytest.raises(EmitError):
            emit_struct(record, var_name=name)

    def test_invalid_tag(self, record):
        with pytest.raises(EmitError):
            emit_struct(record, tag="bad-tag")


# =============================================================================
# Large declared sizes
# =============================================================================


class TestEmitLargeSizes:
    @pytest.fixture
    def huge(self):
        return scan(f"int big[{MAX_DECLARED_SIZE}] = {{1}};").matches()[0].record

    def test_plain_member_needs_no_expansion(self, huge):
        code = emit_struct(huge)
        assert f"    int big[{MAX_DECLARED_SIZE}];" in code

    @pytest.mark.parametrize(
        "options",
        [
            EmitOptions(internal_init=True),
            EmitOptions(external_assign=True),
            EmitOptions(wrap_member=False),
        ],
    )
    def test_expanded_forms_rejected(self, huge, options):
        with pytest.raises(EmitError, match="exceed the limit"):
            emit_struct(huge, options)

    def test_limit_is_inclusive(self):
        record = scan(f"char b[{MAX_EXPANDED_POSITIONS}] = {{7}};").matches()[0].record
        values = element_values(record)

        assert len(values) == MAX_EXPANDED_POSITIONS
        assert values[:2] == ["7", "0"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
