"""Tests for declaration selection by ordinal and by name."""

import pytest

from dsconv.errors import SelectionError
from dsconv.scanner import scan
from dsconv.selector import FilterMode, Selection, select


THREE_DECLARATIONS = "int x[1] = {1}; char y[2] = {2}; long x[3] = {3};"


def selected_names(text, selection):
    return [m.record.identifier for m in select(scan(text), selection)]


class TestSelectionModes:
    """Filter predicates over scanned declarations."""

    def test_none_passes_everything(self):
        assert selected_names(THREE_DECLARATIONS, Selection.all()) == ["x", "y", "x"]

    def test_by_ordinal_ignores_name(self):
        selected = list(select(scan(THREE_DECLARATIONS), Selection.by_ordinal(2)))

        assert len(selected) == 1
        assert selected[0].ordinal == 2
        assert selected[0].record.identifier == "y"

    def test_by_name_selects_every_match(self):
        selected = list(select(scan(THREE_DECLARATIONS), Selection.by_name("x")))

        assert [m.ordinal for m in selected] == [1, 3]
        assert [m.record.type_name for m in selected] == ["int", "long"]

    def test_by_name_is_case_sensitive(self):
        assert selected_names(THREE_DECLARATIONS, Selection.by_name("X")) == []

    def test_by_name_no_prefix_match(self):
        assert selected_names("int xs[1] = {1};", Selection.by_name("x")) == []

    def test_zero_matches_is_empty_not_error(self):
        assert selected_names(THREE_DECLARATIONS, Selection.by_ordinal(9)) == []
        assert selected_names(THREE_DECLARATIONS, Selection.by_name("nope")) == []
        assert selected_names("", Selection.all()) == []

    def test_ordinal_of_skipped_attempt_selects_nothing(self):
        text = "int a[1 = {1}; int b[1] = {2};"

        assert selected_names(text, Selection.by_ordinal(1)) == []
        assert selected_names(text, Selection.by_ordinal(2)) == ["b"]

    def test_ordinal_independent_of_filter(self, mixed_source):
        all_ordinals = {m.record.identifier: m.ordinal for m in select(scan(mixed_source), Selection.all())}
        only_c = list(select(scan(mixed_source), Selection.by_name("c")))

        assert only_c[0].ordinal == all_ordinals["c"] == 4

    def test_select_is_lazy(self):
        iterator = select(scan(THREE_DECLARATIONS), Selection.all())
        assert next(iterator).record.identifier == "x"


class TestSelectionConstruction:
    """Selection factories and validation."""

    def test_from_options_default(self):
        assert Selection.from_options() == Selection(FilterMode.NONE, None)

    def test_from_options_index(self):
        assert Selection.from_options(index=3) == Selection(FilterMode.ORDINAL, 3)

    def test_from_options_name(self):
        assert Selection.from_options(name="lut") == Selection(FilterMode.NAME, "lut")

    def test_from_options_both_rejected(self):
        with pytest.raises(SelectionError):
            Selection.from_options(index=1, name="lut")

    @pytest.mark.parametrize("ordinal", [0, -1])
    def test_ordinal_must_be_positive(self, ordinal):
        with pytest.raises(SelectionError):
            Selection.by_ordinal(ordinal)

    def test_empty_name_rejected(self):
        with pytest.raises(SelectionError):
            Selection.by_name("")

    def test_describe(self):
        assert Selection.all().describe() == "all declarations"
        assert Selection.by_ordinal(2).describe() == "declaration #2"
        assert Selection.by_name("x").describe() == "declarations named 'x'"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
