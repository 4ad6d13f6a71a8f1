"""Semantic model over a set of parsed C# source files.

Resolves declarations to symbols: a short display signature, the
compiler documentation-comment ID, and the XML documentation fragment
with ``cref`` attributes bound to the IDs of the symbols they name.
"""

import logging
import re
from typing import Iterable, Optional
from xml.sax.saxutils import unescape

from xmldoc_md.parsers.structure import (
    Declaration,
    DeclarationKind,
    ParameterInfo,
    SourceFile,
    Symbol,
)

logger = logging.getLogger(__name__)

_KEYWORD_TYPES = {
    "bool": "System.Boolean",
    "byte": "System.Byte",
    "sbyte": "System.SByte",
    "char": "System.Char",
    "decimal": "System.Decimal",
    "double": "System.Double",
    "float": "System.Single",
    "int": "System.Int32",
    "uint": "System.UInt32",
    "nint": "System.IntPtr",
    "nuint": "System.UIntPtr",
    "long": "System.Int64",
    "ulong": "System.UInt64",
    "short": "System.Int16",
    "ushort": "System.UInt16",
    "object": "System.Object",
    "string": "System.String",
    "dynamic": "System.Object",
    "void": "System.Void",
}
_REFERENCE_KEYWORDS = {"object", "string", "dynamic"}

_BINARY_OPERATORS = {
    "+": "op_Addition",
    "-": "op_Subtraction",
    "*": "op_Multiply",
    "/": "op_Division",
    "%": "op_Modulus",
    "&": "op_BitwiseAnd",
    "|": "op_BitwiseOr",
    "^": "op_ExclusiveOr",
    "<<": "op_LeftShift",
    ">>": "op_RightShift",
    ">>>": "op_UnsignedRightShift",
    "==": "op_Equality",
    "!=": "op_Inequality",
    "<": "op_LessThan",
    ">": "op_GreaterThan",
    "<=": "op_LessThanOrEqual",
    ">=": "op_GreaterThanOrEqual",
}
_UNARY_OPERATORS = {
    "+": "op_UnaryPlus",
    "-": "op_UnaryNegation",
    "!": "op_LogicalNot",
    "~": "op_OnesComplement",
    "++": "op_Increment",
    "--": "op_Decrement",
    "true": "op_True",
    "false": "op_False",
}

_KIND_PREFIXES = {
    DeclarationKind.METHOD: "M:",
    DeclarationKind.CONSTRUCTOR: "M:",
    DeclarationKind.DESTRUCTOR: "M:",
    DeclarationKind.OPERATOR: "M:",
    DeclarationKind.CONVERSION_OPERATOR: "M:",
    DeclarationKind.PROPERTY: "P:",
    DeclarationKind.INDEXER: "P:",
    DeclarationKind.FIELD: "F:",
    DeclarationKind.ENUM_MEMBER: "F:",
    DeclarationKind.EVENT: "E:",
}

_CREF_ATTRIBUTE = re.compile(r"""(\bcref\s*=\s*)(["'])(.*?)\2""", re.DOTALL)


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split a type list on separators that are not nested in brackets.

    Args:
        text: Text such as 'int, Dictionary<string, int>'.
        separator: Single separator character.

    Returns:
        List of stripped parts; empty if the text is blank.
    """
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch in "<{[(":
            depth += 1
        elif ch in ">}])":
            depth -= 1
        if ch == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    tail = "".join(current).strip()
    if tail or parts:
        parts.append(tail)
    return parts


def documentation_type_name(type_text: str) -> str:
    """Convert a C# type as written in source to documentation-ID form.

    Keyword types map to their System names, generic arguments use
    braces and nullable value types become System.Nullable{T}.

    Args:
        type_text: Type as written, e.g. 'List<int>' or 'double?'.

    Returns:
        The documentation-ID spelling, e.g. 'List{System.Int32}'.
    """
    text = type_text.strip()
    if text.endswith("?"):
        inner = text[:-1].strip()
        if inner in _KEYWORD_TYPES and inner not in _REFERENCE_KEYWORDS:
            return f"System.Nullable{{{documentation_type_name(inner)}}}"
        return documentation_type_name(inner)
    if text.endswith("]") and "[" in text:
        base, _, rank = text.rpartition("[")
        return documentation_type_name(base) + "[" + rank.replace(" ", "")
    if text.endswith(">") and "<" in text:
        base, _, args = text.partition("<")
        inner = ",".join(documentation_type_name(a) for a in split_top_level(args[:-1]))
        return f"{base.strip()}{{{inner}}}"
    return _KEYWORD_TYPES.get(text, text)


def _type_segment(display_name: str) -> str:
    """Turn a type display name like 'Box<T>' into 'Box`1'."""
    if not display_name.endswith(">") or "<" not in display_name:
        return display_name
    base, _, args = display_name.partition("<")
    return f"{base}`{len(split_top_level(args[:-1]))}"


def _strip_type_arguments(name: str) -> str:
    """Remove generic argument lists such as '<T>' or '{T}' from a name."""
    result = []
    depth = 0
    for ch in name:
        if ch in "<{":
            depth += 1
        elif ch in ">}":
            depth -= 1
        elif depth == 0:
            result.append(ch)
    return "".join(result)


class SemanticModel:
    """Resolves declarations from a set of source files to symbols.

    The model indexes every declaration of the compilation so that
    ``cref`` references inside documentation comments can be bound to
    documentation IDs the same way the compiler binds them.
    """

    def __init__(self, source_files: Iterable[SourceFile]) -> None:
        """Initialize the semantic model.

        Args:
            source_files: All parsed files taking part in the compilation.
        """
        self._files = list(source_files)
        self._index: dict[str, str] = {}
        for source_file in self._files:
            for declaration in source_file.declarations:
                self._add_to_index(declaration)
        logger.debug(
            "Semantic model built over %d files (%d lookup keys)",
            len(self._files),
            len(self._index),
        )

    def resolve_symbol(self, declaration: Declaration) -> Optional[Symbol]:
        """Resolve a declaration to its symbol.

        Args:
            declaration: A declaration from one of the model's files.

        Returns:
            The resolved Symbol, or None if the declaration does not
            declare a documentable symbol.
        """
        if declaration.kind == DeclarationKind.NAMESPACE:
            return None

        return Symbol(
            name=declaration.name,
            kind=declaration.kind,
            display_signature=self.display_signature(declaration),
            documentation_id=self.documentation_id(declaration),
            documentation_xml=self._bind_crefs(
                declaration.doc_comment or "", declaration
            ),
        )

    def display_signature(self, declaration: Declaration) -> str:
        """Build the short display signature of a declaration.

        Containing types are included, namespaces and modifiers are not.

        Args:
            declaration: The declaration to describe.

        Returns:
            A signature such as 'Calculator.Add(int, int)'.
        """
        kind = declaration.kind
        own = self._own_display_name(declaration)
        if kind.is_type:
            return ".".join(declaration.containing_types + (own,))

        params = ", ".join(self._display_param(p) for p in declaration.parameters)
        if kind == DeclarationKind.INDEXER:
            member = f"this[{params}]"
        elif kind in (DeclarationKind.PROPERTY, DeclarationKind.FIELD,
                      DeclarationKind.EVENT, DeclarationKind.ENUM_MEMBER):
            member = own
        else:
            member = f"{own}({params})"
        return ".".join(declaration.containing_types + (member,))

    def documentation_id(self, declaration: Declaration) -> str:
        """Build the documentation-comment ID of a declaration.

        Args:
            declaration: The declaration to identify.

        Returns:
            An ID such as 'M:Demo.Calculator.Add(System.Int32,System.Int32)'.
        """
        kind = declaration.kind
        path = [p for p in declaration.namespace.split(".") if p]
        path.extend(_type_segment(t) for t in declaration.containing_types)

        if kind == DeclarationKind.NAMESPACE:
            return "N:" + ".".join(path + [declaration.name])
        if kind.is_type:
            own = declaration.name
            if declaration.type_parameters:
                own += f"`{len(declaration.type_parameters)}"
            return "T:" + ".".join(path + [own])

        member = self._metadata_name(declaration)
        if kind == DeclarationKind.METHOD and declaration.type_parameters:
            member += f"``{len(declaration.type_parameters)}"
        signature = ".".join(path + [member])
        if declaration.parameters:
            signature += f"({self._documentation_params(declaration.parameters)})"
        if kind == DeclarationKind.CONVERSION_OPERATOR:
            signature += "~" + documentation_type_name(declaration.type_name)
        return _KIND_PREFIXES[kind] + signature

    def _own_display_name(self, declaration: Declaration) -> str:
        kind = declaration.kind
        if kind == DeclarationKind.CONSTRUCTOR:
            return declaration.name
        if kind == DeclarationKind.DESTRUCTOR:
            return f"~{declaration.name}"
        if kind == DeclarationKind.OPERATOR:
            return f"operator {declaration.name}"
        if kind == DeclarationKind.CONVERSION_OPERATOR:
            return f"{declaration.name} operator {declaration.type_name}"
        if declaration.type_parameters:
            return f"{declaration.name}<{', '.join(declaration.type_parameters)}>"
        return declaration.name

    def _display_param(self, param: ParameterInfo) -> str:
        if param.modifier and param.modifier != "this":
            return f"{param.modifier} {param.type_name}"
        return param.type_name

    def _metadata_name(self, declaration: Declaration) -> str:
        """Name of a member as it appears in documentation IDs."""
        kind = declaration.kind
        if kind == DeclarationKind.CONSTRUCTOR:
            return "#ctor"
        if kind == DeclarationKind.DESTRUCTOR:
            return "Finalize"
        if kind == DeclarationKind.INDEXER:
            return "Item"
        if kind == DeclarationKind.CONVERSION_OPERATOR:
            return "op_Explicit" if declaration.name == "explicit" else "op_Implicit"
        if kind == DeclarationKind.OPERATOR:
            if len(declaration.parameters) == 1:
                table = _UNARY_OPERATORS
            else:
                table = _BINARY_OPERATORS
            return table.get(declaration.name, f"op_{declaration.name}")
        return declaration.name

    def _documentation_params(self, parameters: Iterable[ParameterInfo]) -> str:
        parts = []
        for param in parameters:
            part = documentation_type_name(param.type_name)
            if param.modifier in ("ref", "out", "in"):
                part += "@"
            parts.append(part)
        return ",".join(parts)

    def _add_to_index(self, declaration: Declaration) -> None:
        """Register lookup keys under which crefs can name a declaration."""
        if declaration.kind == DeclarationKind.NAMESPACE:
            return
        doc_id = self.documentation_id(declaration)
        scope = [p for p in declaration.namespace.split(".") if p]
        scope.extend(_strip_type_arguments(t) for t in declaration.containing_types)
        key = ".".join(scope + [declaration.name])

        # First declaration wins for overloaded names without a parameter list
        self._index.setdefault(key, doc_id)
        if declaration.kind in (DeclarationKind.METHOD, DeclarationKind.CONSTRUCTOR):
            params = self._documentation_params(declaration.parameters)
            self._index.setdefault(f"{key}({params})", doc_id)

    def _scopes(self, declaration: Declaration) -> list[str]:
        """Enclosing scopes of a declaration, innermost first."""
        parts = [p for p in declaration.namespace.split(".") if p]
        parts.extend(_strip_type_arguments(t) for t in declaration.containing_types)
        if declaration.kind.is_type:
            parts.append(declaration.name)
        return [".".join(parts[:i]) for i in range(len(parts), -1, -1)]

    def bind_cref(self, cref: str, declaration: Declaration) -> str:
        """Bind a cref as written in source to a documentation ID.

        Crefs that already carry a kind prefix, or that name nothing
        in the compilation, are returned unchanged.

        Args:
            cref: The cref attribute value.
            declaration: The declaration whose comment contains the cref.

        Returns:
            The documentation ID of the referenced symbol, or the cref.
        """
        text = unescape(cref).strip()
        if len(text) > 1 and text[1] == ":":
            return cref

        name, _, params = text.partition("(")
        name = _strip_type_arguments(name).strip()
        lookup = name
        if params:
            lookup += "(" + ",".join(
                documentation_type_name(p) for p in split_top_level(params.rstrip(")"))
            ) + ")"

        for scope in self._scopes(declaration):
            doc_id = self._index.get(f"{scope}.{lookup}" if scope else lookup)
            if doc_id:
                return doc_id
        logger.debug("Unresolved cref '%s' in %s", cref, declaration.name)
        return cref

    def _bind_crefs(self, fragment: str, declaration: Declaration) -> str:
        if "cref" not in fragment:
            return fragment
        def replace(match: re.Match) -> str:
            opening, quote, cref = match.groups()
            return f"{opening}{quote}{self.bind_cref(cref, declaration)}{quote}"

        return _CREF_ATTRIBUTE.sub(replace, fragment)
