"""Tests for cref cleanup."""

from xmldoc_md.converters.cref import clean_cref


class TestCleanCref:
    """Tests for the clean_cref function."""

    def test_strips_method_marker(self) -> None:
        assert clean_cref("M:Foo.Bar") == "Foo.Bar"

    def test_strips_type_marker(self) -> None:
        assert clean_cref("T:Demo.Calculator") == "Demo.Calculator"

    def test_strips_property_and_field_markers(self) -> None:
        assert clean_cref("P:Demo.Calculator.Last") == "Demo.Calculator.Last"
        assert clean_cref("F:Demo.Calculator._count") == "Demo.Calculator._count"

    def test_strips_embedded_markers(self) -> None:
        assert clean_cref("T:Foo.P:Bar") == "Foo.Bar"

    def test_no_marker_is_noop(self) -> None:
        assert clean_cref("Foo.Bar") == "Foo.Bar"

    def test_other_markers_are_kept(self) -> None:
        assert clean_cref("E:Demo.Button.Click") == "E:Demo.Button.Click"

    def test_empty_string(self) -> None:
        assert clean_cref("") == ""
