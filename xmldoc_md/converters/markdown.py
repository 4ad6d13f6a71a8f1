"""Conversion of documentation markup trees to Markdown text.

Handles mixed text and inline markup: ``<c>`` and ``<code>`` become
inline code or fenced blocks, ``<see>`` becomes a code reference, a link
or a keyword, and any other element is rendered transparently so that
its descendant text is never lost.
"""

import re

from xmldoc_md.converters.cref import clean_cref
from xmldoc_md.converters.markup import Element, Text

_WHITESPACE = re.compile(r"\s+")
_PARAGRAPH_BREAK = re.compile(r"\s*\n\s*\n\s*")
_FENCE = "```"


class MarkdownConverter:
    """Renders the content of a markup element as Markdown.

    Rendering is pure: the converter holds only its options and each
    call returns a fresh string.
    """

    def __init__(
        self,
        code_language: str = "csharp",
        preserve_paragraphs: bool = False,
        inline_spacing: bool = False,
    ) -> None:
        """Initialize the converter.

        Args:
            code_language: Language tag used for every fenced code block.
            preserve_paragraphs: Keep blank-line paragraph breaks in text
                instead of collapsing them into single spaces.
            inline_spacing: Keep one space at the edges of text nodes so
                words stay apart from adjacent inline code. Off by
                default, where every text node is trimmed.
        """
        self.code_language = code_language
        self.preserve_paragraphs = preserve_paragraphs
        self.inline_spacing = inline_spacing

    def render(self, node: Element) -> str:
        """Render the children of an element as trimmed Markdown.

        Args:
            node: The element whose content is converted.

        Returns:
            Markdown text with leading and trailing whitespace removed.
        """
        out = ""
        for child in node.children:
            if isinstance(child, Text):
                out = self._append_inline(out, self._normalize_text(child.value))
            elif child.tag.lower() == "code":
                code = child.text_content().replace("\r\n", "\n").strip()
                if "\n" in code or "\r" in code:
                    out = self._append_block(
                        out, f"{_FENCE}{self.code_language}\n{code}\n{_FENCE}"
                    )
                else:
                    out = self._append_inline(out, f"`{code}`")
            elif child.tag.lower() in ("c", "see"):
                out = self._append_inline(out, self._render_inline(child))
            else:
                # Unknown tags are transparent wrappers
                nested = self.render(child)
                if nested.startswith(_FENCE) or nested.endswith(_FENCE):
                    out = self._append_block(out, nested)
                else:
                    out = self._append_inline(out, nested)
        return out.strip()

    def _render_inline(self, element: Element) -> str:
        """Render a <c> or <see> child element.

        Args:
            element: A child element of the node being rendered.

        Returns:
            The Markdown for the element.
        """
        tag = element.tag.lower()

        if tag == "see":
            cref = (element.get("cref") or "").strip()
            href = (element.get("href") or "").strip()
            langword = (element.get("langword") or "").strip()
            if cref:
                return f"`{clean_cref(cref)}`"
            if href:
                return f"[{element.text_content().strip()}]({href})"
            if langword:
                return f"`{langword}`"
            return element.text_content().strip()

        return f"`{element.text_content().strip()}`"

    def _normalize_text(self, value: str) -> str:
        """Collapse whitespace runs in a text node and trim its edges."""
        text = value.replace("\r", "")
        if self.preserve_paragraphs:
            paragraphs = _PARAGRAPH_BREAK.split(text)
        else:
            paragraphs = [text]
        return "\n\n".join(self._collapse(p) for p in paragraphs)

    def _collapse(self, text: str) -> str:
        collapsed = _WHITESPACE.sub(" ", text)
        if self.inline_spacing:
            return collapsed
        return collapsed.strip()

    def _append_inline(self, out: str, piece: str) -> str:
        if out.endswith("\n"):
            piece = piece.lstrip(" ")
        return out + piece

    def _append_block(self, out: str, block: str) -> str:
        out = out.rstrip(" ")
        if out:
            out = out.rstrip("\n") + "\n\n"
        return out + block + "\n\n"
