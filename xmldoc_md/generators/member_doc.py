"""Markdown sections for documented members.

Resolves a declaration to its symbol, parses the symbol's XML
documentation fragment and renders the summary, parameters and return
value as one Markdown section.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from xmldoc_md.converters.markdown import MarkdownConverter
from xmldoc_md.converters.markup import MarkupParseError, parse_fragment
from xmldoc_md.parsers.structure import Declaration, Symbol

logger = logging.getLogger(__name__)

SymbolResolver = Callable[[Declaration], Optional[Symbol]]

SEPARATOR = "---"


@dataclass
class ParameterDoc:
    """A documented parameter row.

    Attributes:
        name: Parameter name from the 'name' attribute, or 'N/A'.
        description: Rendered Markdown description.
    """

    name: str
    description: str


@dataclass
class RenderedSection:
    """The Markdown rendering of one documented symbol.

    Attributes:
        signature: Display signature used as the heading.
        summary: Rendered summary, or None if the fragment has none.
        parameters: Parameter rows in fragment order.
        returns: Rendered returns text, or None if absent.
    """

    signature: str
    summary: Optional[str] = None
    parameters: list[ParameterDoc] = field(default_factory=list)
    returns: Optional[str] = None

    def to_markdown(self) -> str:
        """Render the section, ending with a horizontal rule line.

        Returns:
            Markdown text for the section.
        """
        lines = [f"## `{self.signature}`", ""]

        if self.summary is not None:
            lines.extend([self.summary, ""])

        if self.parameters:
            lines.append("### Parameters")
            lines.append("| Name | Description |")
            lines.append("|------|-------------|")
            for param in self.parameters:
                lines.append(f"| `{param.name}` | {param.description} |")
            lines.append("")

        if self.returns is not None:
            lines.extend(["### Returns", self.returns, ""])

        lines.append(SEPARATOR)
        return "\n".join(lines) + "\n"


class MemberDocExtractor:
    """Builds Markdown sections from documented declarations.

    Diagnostics for malformed documentation go to the supplied logger,
    so a failing member never interrupts processing of the others.
    """

    def __init__(
        self,
        converter: Optional[MarkdownConverter] = None,
        diagnostics: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            converter: Markup converter; a default one is created if None.
            diagnostics: Logger receiving malformed-markup warnings.
                Defaults to this module's logger.
        """
        self.converter = converter or MarkdownConverter()
        # Table cells must stay on one line
        self._cell_converter = MarkdownConverter(
            code_language=self.converter.code_language,
            preserve_paragraphs=False,
            inline_spacing=self.converter.inline_spacing,
        )
        self.diagnostics = diagnostics or logger

    def extract(
        self, declaration: Declaration, resolve_symbol: SymbolResolver
    ) -> Optional[RenderedSection]:
        """Render the documentation of a single declaration.

        Args:
            declaration: The declaration to document.
            resolve_symbol: Semantic lookup from declaration to symbol.

        Returns:
            A RenderedSection, or None if the declaration resolves to no
            symbol, has no documentation, or its documentation is malformed.
        """
        symbol = resolve_symbol(declaration)
        if symbol is None:
            return None

        xml_docs = symbol.get_documentation_xml()
        if not xml_docs:
            return None

        try:
            root = parse_fragment(xml_docs)
        except MarkupParseError as e:
            self.diagnostics.warning(
                "Could not parse XML documentation for member '%s'. Error: %s",
                symbol.name,
                e,
            )
            self.diagnostics.warning("XML Content: %s", xml_docs)
            return None

        section = RenderedSection(signature=symbol.display_signature)

        summary = root.find("summary")
        if summary is not None:
            section.summary = self.converter.render(summary)

        for param in root.find_all("param"):
            name = param.get("name")
            section.parameters.append(
                ParameterDoc(
                    name=name.strip() if name is not None else "N/A",
                    description=self._cell_converter.render(param),
                )
            )

        returns = root.find("returns")
        if returns is not None:
            section.returns = self.converter.render(returns)

        return section
