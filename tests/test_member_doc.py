"""Tests for member documentation sections."""

import logging
from typing import Optional
from unittest.mock import MagicMock

import pytest

from xmldoc_md.converters.markdown import MarkdownConverter
from xmldoc_md.generators.member_doc import (
    MemberDocExtractor,
    ParameterDoc,
    RenderedSection,
)
from xmldoc_md.parsers.structure import Declaration, DeclarationKind, Symbol


def _declaration(name: str = "Add") -> Declaration:
    return Declaration(
        name=name,
        kind=DeclarationKind.METHOD,
        namespace="Demo",
        containing_types=("Calculator",),
        doc_comment="<summary/>",
    )


def _resolver(xml: str, signature: str = "Calculator.Add(int, int)"):
    """Build a resolver that maps any declaration to a fixed symbol."""

    def resolve(declaration: Declaration) -> Optional[Symbol]:
        return Symbol(
            name=declaration.name,
            kind=declaration.kind,
            display_signature=signature,
            documentation_id="M:Demo.Calculator.Add(System.Int32,System.Int32)",
            documentation_xml=xml,
        )

    return resolve


@pytest.fixture
def diagnostics() -> MagicMock:
    """Create a mock logger for diagnostics."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def extractor(diagnostics: MagicMock) -> MemberDocExtractor:
    """Create a MemberDocExtractor with a mock diagnostics logger."""
    return MemberDocExtractor(diagnostics=diagnostics)


class TestExtract:
    """Tests for MemberDocExtractor.extract."""

    def test_unresolved_symbol(self, extractor: MemberDocExtractor) -> None:
        assert extractor.extract(_declaration(), lambda d: None) is None

    def test_empty_documentation(self, extractor: MemberDocExtractor) -> None:
        assert extractor.extract(_declaration(), _resolver("")) is None

    def test_malformed_documentation(
        self, extractor: MemberDocExtractor, diagnostics: MagicMock
    ) -> None:
        xml = "<summary>Broken"
        result = extractor.extract(_declaration("Broken"), _resolver(xml))
        assert result is None
        assert diagnostics.warning.called
        logged = " ".join(
            str(arg) for call in diagnostics.warning.call_args_list for arg in call.args
        )
        assert "Broken" in logged
        assert xml in logged

    def test_malformed_uses_module_logger_by_default(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        extractor = MemberDocExtractor()
        with caplog.at_level(logging.WARNING, logger="xmldoc_md"):
            result = extractor.extract(_declaration(), _resolver("<summary>"))
        assert result is None
        assert "Add" in caplog.text

    def test_full_section(self, extractor: MemberDocExtractor) -> None:
        xml = (
            "<summary>Adds two numbers.</summary>"
            '<param name="a">The first operand.</param>'
            '<param name="b">The second operand.</param>'
            "<returns>The sum.</returns>"
        )
        section = extractor.extract(_declaration(), _resolver(xml))
        assert section is not None
        assert section.signature == "Calculator.Add(int, int)"
        assert section.summary == "Adds two numbers."
        assert section.parameters == [
            ParameterDoc("a", "The first operand."),
            ParameterDoc("b", "The second operand."),
        ]
        assert section.returns == "The sum."

    def test_param_order_follows_fragment(self, extractor: MemberDocExtractor) -> None:
        xml = '<param name="b">B</param><summary>S</summary><param name="a">A</param>'
        section = extractor.extract(_declaration(), _resolver(xml))
        assert [p.name for p in section.parameters] == ["b", "a"]

    def test_param_name_trimmed(self, extractor: MemberDocExtractor) -> None:
        section = extractor.extract(
            _declaration(), _resolver('<param name="  a ">Value.</param>')
        )
        assert section.parameters[0].name == "a"

    def test_param_without_name(self, extractor: MemberDocExtractor) -> None:
        section = extractor.extract(_declaration(), _resolver("<param>Value.</param>"))
        assert section.parameters[0].name == "N/A"

    def test_unrecognized_top_level_tags_are_dropped(
        self, extractor: MemberDocExtractor
    ) -> None:
        xml = (
            "<summary>Adds.</summary>"
            "<remarks>Never shown.</remarks>"
            '<exception cref="T:System.Exception">Also hidden.</exception>'
        )
        section = extractor.extract(_declaration(), _resolver(xml))
        markdown = section.to_markdown()
        assert "Never shown." not in markdown
        assert "Also hidden." not in markdown

    def test_only_optional_parts_present(self, extractor: MemberDocExtractor) -> None:
        section = extractor.extract(_declaration(), _resolver("<remarks>x</remarks>"))
        assert section is not None
        assert section.summary is None
        assert section.parameters == []
        assert section.returns is None

    def test_param_descriptions_stay_on_one_line(self) -> None:
        extractor = MemberDocExtractor(
            converter=MarkdownConverter(preserve_paragraphs=True)
        )
        xml = (
            "<summary>One.\n\nTwo.</summary>"
            '<param name="a">First.\n\nSecond.</param>'
        )
        section = extractor.extract(_declaration(), _resolver(xml))
        assert section.summary == "One.\n\nTwo."
        assert section.parameters[0].description == "First. Second."

    def test_inline_spacing_applies_to_table_cells(self) -> None:
        extractor = MemberDocExtractor(
            converter=MarkdownConverter(inline_spacing=True)
        )
        xml = '<param name="a">Must not be <c>null</c> here.</param>'
        section = extractor.extract(_declaration(), _resolver(xml))
        assert section.parameters[0].description == "Must not be `null` here."


class TestRenderedSection:
    """Tests for RenderedSection.to_markdown."""

    def test_full_markdown(self) -> None:
        section = RenderedSection(
            signature="Calculator.Add(int, int)",
            summary="Adds two numbers.",
            parameters=[
                ParameterDoc("a", "The first operand."),
                ParameterDoc("b", "The second operand."),
            ],
            returns="The sum.",
        )
        assert section.to_markdown() == (
            "## `Calculator.Add(int, int)`\n"
            "\n"
            "Adds two numbers.\n"
            "\n"
            "### Parameters\n"
            "| Name | Description |\n"
            "|------|-------------|\n"
            "| `a` | The first operand. |\n"
            "| `b` | The second operand. |\n"
            "\n"
            "### Returns\n"
            "The sum.\n"
            "\n"
            "---\n"
        )

    def test_heading_and_separator_only(self) -> None:
        section = RenderedSection(signature="Calculator")
        assert section.to_markdown() == "## `Calculator`\n\n---\n"

    def test_returns_without_summary(self) -> None:
        section = RenderedSection(signature="Calculator.Last", returns="A value.")
        assert section.to_markdown() == (
            "## `Calculator.Last`\n\n### Returns\nA value.\n\n---\n"
        )
