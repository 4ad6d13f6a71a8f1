"""Markup tree for XML documentation fragments.

A fragment parses into a small tagged union of Text and Element nodes.
The tree is built from a fragment wrapped in a synthetic root element so
that fragments with several top-level tags form one document.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Optional, Union

ROOT_TAG = "root"


class MarkupParseError(ValueError):
    """Raised when a documentation fragment is not well-formed XML."""


@dataclass(frozen=True)
class Text:
    """A run of character data."""

    value: str


@dataclass(frozen=True)
class Element:
    """A markup element with attributes and ordered children.

    Attributes:
        tag: Tag name as written.
        attributes: Attribute values keyed by name.
        children: Child nodes in document order.
    """

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: tuple[MarkupNode, ...] = ()

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return an attribute value, or default if absent."""
        return self.attributes.get(name, default)

    def text_content(self) -> str:
        """Return the concatenated text of all descendants."""
        return "".join(
            child.value if isinstance(child, Text) else child.text_content()
            for child in self.children
        )

    def find(self, tag: str) -> Optional[Element]:
        """Return the first child element with the given tag, or None."""
        return next(iter(self.find_all(tag)), None)

    def find_all(self, tag: str) -> list[Element]:
        """Return all child elements with the given tag, in order."""
        return [
            child
            for child in self.children
            if isinstance(child, Element) and child.tag == tag
        ]


MarkupNode = Union[Text, Element]


def parse_fragment(fragment: str) -> Element:
    """Parse an XML documentation fragment into a markup tree.

    Args:
        fragment: Raw fragment such as '<summary>Adds.</summary><param name="a"/>'.

    Returns:
        The synthetic root Element whose children are the fragment's nodes.

    Raises:
        MarkupParseError: If the fragment is not well-formed.
    """
    try:
        root = ET.fromstring(f"<{ROOT_TAG}>{fragment}</{ROOT_TAG}>")
    except ET.ParseError as e:
        raise MarkupParseError(str(e)) from e
    return _convert(root)


def _convert(element: ET.Element) -> Element:
    """Convert an ElementTree element, with text and tails, to an Element."""
    children: list[MarkupNode] = []
    if element.text:
        children.append(Text(element.text))
    for child in element:
        children.append(_convert(child))
        if child.tail:
            children.append(Text(child.tail))
    return Element(
        tag=element.tag,
        attributes=dict(element.attrib),
        children=tuple(children),
    )
