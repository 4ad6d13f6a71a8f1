"""Data models for representing parsed C# declarations and symbols.

Defines dataclasses for declarations, their parameters, the source
files that own them, and the symbols resolved from them. These models
form the shared vocabulary between the parser, the semantic model and
the documentation generators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class DeclarationKind(str, Enum):
    """Kinds of declarations the parser recognizes."""

    NAMESPACE = "namespace"
    CLASS = "class"
    STRUCT = "struct"
    INTERFACE = "interface"
    RECORD = "record"
    ENUM = "enum"
    DELEGATE = "delegate"
    ENUM_MEMBER = "enum_member"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    DESTRUCTOR = "destructor"
    OPERATOR = "operator"
    CONVERSION_OPERATOR = "conversion_operator"
    PROPERTY = "property"
    INDEXER = "indexer"
    EVENT = "event"
    FIELD = "field"

    @property
    def is_type(self) -> bool:
        """Whether this kind declares a type."""
        return self in _TYPE_KINDS


_TYPE_KINDS = frozenset(
    {
        DeclarationKind.CLASS,
        DeclarationKind.STRUCT,
        DeclarationKind.INTERFACE,
        DeclarationKind.RECORD,
        DeclarationKind.ENUM,
        DeclarationKind.DELEGATE,
    }
)


@dataclass(frozen=True)
class ParameterInfo:
    """Represents a method, constructor, indexer or delegate parameter.

    Attributes:
        name: Parameter name.
        type_name: Type as written in the source (e.g. 'int', 'List<T>').
        modifier: Optional passing modifier ('ref', 'out', 'in', 'params', 'this').
    """

    name: str
    type_name: str = ""
    modifier: Optional[str] = None


@dataclass(frozen=True)
class Declaration:
    """A documentable construct found in a parsed source file.

    Declarations are produced once per parse and never mutated. The
    semantic model resolves them to symbols.

    Attributes:
        name: Simple name of the declared construct.
        kind: Declaration kind.
        file_path: Path of the source file that contains it.
        namespace: Enclosing namespace, empty for the global namespace.
        containing_types: Names of enclosing types, outermost first.
        type_parameters: Generic type parameter names.
        parameters: Declared parameters, in order.
        type_name: Declared type of a property, field, event or indexer, or
            the target type of a conversion operator.
        doc_comment: Raw documentation comment text with comment
            delimiters removed, or None if no doc comment precedes it.
        line_number: Starting line number in the source file.
    """

    name: str
    kind: DeclarationKind
    file_path: str = "<string>"
    namespace: str = ""
    containing_types: tuple[str, ...] = ()
    type_parameters: tuple[str, ...] = ()
    parameters: tuple[ParameterInfo, ...] = ()
    type_name: str = ""
    doc_comment: Optional[str] = None
    line_number: int = 0

    @property
    def has_doc_comment(self) -> bool:
        """Whether documentation-comment trivia precedes the declaration."""
        return self.doc_comment is not None


@dataclass
class SourceFile:
    """Represents one parsed C# source file.

    Attributes:
        file_path: Path to the source file.
        declarations: Declarations in order of appearance.
    """

    file_path: str
    declarations: list[Declaration] = field(default_factory=list)

    @property
    def documented_declarations(self) -> list[Declaration]:
        """Declarations preceded by documentation-comment trivia."""
        return [d for d in self.declarations if d.has_doc_comment]


@dataclass(frozen=True)
class Symbol:
    """Semantic identity resolved from a declaration.

    Attributes:
        name: Simple name of the symbol.
        kind: Kind of the declaration the symbol came from.
        display_signature: Short display form, e.g. 'Calculator.Add(int, int)'.
        documentation_id: Documentation-comment ID, e.g. 'M:Demo.Calculator.Reset'.
        documentation_xml: Raw XML documentation fragment, empty if none.
    """

    name: str
    kind: DeclarationKind
    display_signature: str
    documentation_id: str
    documentation_xml: str = ""

    def get_documentation_xml(self) -> str:
        """Return the raw documentation fragment for this symbol."""
        return self.documentation_xml
