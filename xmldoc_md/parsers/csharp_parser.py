"""C# parser using tree-sitter.

Walks namespaces and type bodies and extracts every documentable
declaration together with the documentation comment that precedes it.
"""

import logging
import textwrap
from pathlib import Path
from typing import Optional

import tree_sitter
import tree_sitter_c_sharp as tscs

from xmldoc_md.parsers.structure import (
    Declaration,
    DeclarationKind,
    ParameterInfo,
    SourceFile,
)

logger = logging.getLogger(__name__)

_CS_LANGUAGE = tree_sitter.Language(tscs.language())

# Node types that declare a type with a body of further declarations
_TYPE_NODES = {
    "class_declaration": DeclarationKind.CLASS,
    "struct_declaration": DeclarationKind.STRUCT,
    "interface_declaration": DeclarationKind.INTERFACE,
    "record_declaration": DeclarationKind.RECORD,
    "record_struct_declaration": DeclarationKind.RECORD,
    "enum_declaration": DeclarationKind.ENUM,
}
_MEMBER_NODES = {
    "method_declaration": DeclarationKind.METHOD,
    "constructor_declaration": DeclarationKind.CONSTRUCTOR,
    "destructor_declaration": DeclarationKind.DESTRUCTOR,
    "operator_declaration": DeclarationKind.OPERATOR,
    "conversion_operator_declaration": DeclarationKind.CONVERSION_OPERATOR,
    "property_declaration": DeclarationKind.PROPERTY,
    "indexer_declaration": DeclarationKind.INDEXER,
    "event_declaration": DeclarationKind.EVENT,
    "delegate_declaration": DeclarationKind.DELEGATE,
    "enum_member_declaration": DeclarationKind.ENUM_MEMBER,
}
# Node types that declare one member per variable declarator
_VARIABLE_NODES = {
    "field_declaration": DeclarationKind.FIELD,
    "event_field_declaration": DeclarationKind.EVENT,
}
_NAMESPACE_NODES = {"namespace_declaration", "file_scoped_namespace_declaration"}
_BODY_NODES = {"declaration_list", "enum_member_declaration_list"}
_PARAMETER_NODES = {"parameter", "params_array"}
_PARAMETER_LIST_NODES = {"parameter_list", "bracketed_parameter_list"}
_PARAMETER_MODIFIERS = {"ref", "out", "in", "params", "this"}


class CSharpParser:
    """Parses C# source files using tree-sitter.

    Produces a SourceFile whose declarations appear in source order,
    each carrying its raw documentation comment (if any), namespace,
    containing types and parameter list.
    """

    def __init__(self) -> None:
        self._parser = tree_sitter.Parser(_CS_LANGUAGE)

    def parse_file(self, file_path: str) -> SourceFile:
        """Parse a C# file and extract its declarations.

        Args:
            file_path: Path to the .cs file to parse.

        Returns:
            A SourceFile containing all extracted declarations.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        source = path.read_text(encoding="utf-8-sig")
        return self.parse_source(source, file_path)

    def parse_source(self, source: str, file_path: str = "<string>") -> SourceFile:
        """Parse a C# source string and extract its declarations.

        Args:
            source: C# source code.
            file_path: Optional file path for reference.

        Returns:
            A SourceFile containing all extracted declarations.
        """
        source_bytes = source.encode("utf-8")
        tree = self._parser.parse(source_bytes)

        source_file = SourceFile(file_path=file_path)
        self._walk(tree.root_node, source_file, source_bytes, "", ())

        logger.debug(
            "Parsed %s: %d declarations, %d documented",
            file_path,
            len(source_file.declarations),
            len(source_file.documented_declarations),
        )
        return source_file

    def _walk(
        self,
        parent: tree_sitter.Node,
        source_file: SourceFile,
        source_bytes: bytes,
        namespace: str,
        containing_types: tuple[str, ...],
    ) -> None:
        """Collect declarations from the children of a scope node.

        Args:
            parent: A compilation unit, namespace or type body node.
            source_file: The SourceFile to populate.
            source_bytes: Source as bytes for text extraction.
            namespace: Namespace enclosing the children.
            containing_types: Display names of the enclosing types.
        """
        for node in parent.named_children:
            node_type = node.type

            if node_type in _NAMESPACE_NODES:
                name_node = node.child_by_field_name("name")
                if not name_node:
                    continue
                name = self._node_text(name_node, source_bytes)
                inner = f"{namespace}.{name}" if namespace else name
                source_file.declarations.append(
                    self._make_declaration(
                        node, name, DeclarationKind.NAMESPACE, source_file,
                        source_bytes, namespace, containing_types,
                    )
                )
                body = self._body(node)
                self._walk(body or node, source_file, source_bytes, inner, ())
                # File-scoped namespaces apply to every following sibling
                if node_type == "file_scoped_namespace_declaration":
                    namespace = inner

            elif node_type in _TYPE_NODES:
                name_node = node.child_by_field_name("name")
                if not name_node:
                    continue
                name = self._node_text(name_node, source_bytes)
                type_params = self._extract_type_parameters(node, source_bytes)
                source_file.declarations.append(
                    self._make_declaration(
                        node, name, _TYPE_NODES[node_type], source_file,
                        source_bytes, namespace, containing_types,
                        type_parameters=type_params,
                    )
                )
                body = self._body(node)
                if body:
                    display = name
                    if type_params:
                        display = f"{name}<{', '.join(type_params)}>"
                    self._walk(
                        body, source_file, source_bytes, namespace,
                        containing_types + (display,),
                    )

            elif node_type in _MEMBER_NODES:
                decl = self._extract_member(
                    node, _MEMBER_NODES[node_type], source_file, source_bytes,
                    namespace, containing_types,
                )
                if decl:
                    source_file.declarations.append(decl)

            elif node_type in _VARIABLE_NODES:
                source_file.declarations.extend(
                    self._extract_variables(
                        node, _VARIABLE_NODES[node_type], source_file,
                        source_bytes, namespace, containing_types,
                    )
                )

    def _extract_member(
        self,
        node: tree_sitter.Node,
        kind: DeclarationKind,
        source_file: SourceFile,
        source_bytes: bytes,
        namespace: str,
        containing_types: tuple[str, ...],
    ) -> Optional[Declaration]:
        """Extract a method-like, property-like or enum member declaration.

        Operators are named by their operator token, conversion operators
        by 'implicit' or 'explicit', and indexers by 'this'.

        Returns:
            A Declaration, or None if the node has no usable name.
        """
        type_node = node.child_by_field_name("type") or node.child_by_field_name(
            "returns"
        )
        type_name = self._node_text(type_node, source_bytes) if type_node else ""

        if kind == DeclarationKind.OPERATOR:
            op_node = node.child_by_field_name("operator")
            name = self._node_text(op_node, source_bytes) if op_node else None
        elif kind == DeclarationKind.CONVERSION_OPERATOR:
            name = next(
                (
                    c.type
                    for c in node.children
                    if c.type in ("implicit", "explicit")
                ),
                "implicit",
            )
        elif kind == DeclarationKind.INDEXER:
            name = "this"
        else:
            name_node = node.child_by_field_name("name")
            if not name_node:
                name_node = next(
                    (c for c in node.named_children if c.type == "identifier"), None
                )
            name = self._node_text(name_node, source_bytes) if name_node else None

        if not name:
            return None

        return self._make_declaration(
            node, name, kind, source_file, source_bytes, namespace,
            containing_types,
            type_parameters=self._extract_type_parameters(node, source_bytes),
            parameters=self._extract_parameters(node, source_bytes),
            type_name=type_name,
        )

    def _extract_variables(
        self,
        node: tree_sitter.Node,
        kind: DeclarationKind,
        source_file: SourceFile,
        source_bytes: bytes,
        namespace: str,
        containing_types: tuple[str, ...],
    ) -> list[Declaration]:
        """Extract one declaration per declarator of a field or event field.

        Every declarator shares the documentation comment of the
        enclosing declaration.
        """
        declarations: list[Declaration] = []
        var_decl = next(
            (c for c in node.named_children if c.type == "variable_declaration"), None
        )
        if not var_decl:
            return declarations

        type_node = var_decl.child_by_field_name("type")
        type_name = self._node_text(type_node, source_bytes) if type_node else ""

        for declarator in var_decl.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            if not name_node:
                name_node = next(
                    (c for c in declarator.named_children if c.type == "identifier"),
                    None,
                )
            if not name_node:
                continue
            declarations.append(
                self._make_declaration(
                    node, self._node_text(name_node, source_bytes), kind,
                    source_file, source_bytes, namespace, containing_types,
                    type_name=type_name,
                )
            )
        return declarations

    def _make_declaration(
        self,
        node: tree_sitter.Node,
        name: str,
        kind: DeclarationKind,
        source_file: SourceFile,
        source_bytes: bytes,
        namespace: str,
        containing_types: tuple[str, ...],
        type_parameters: tuple[str, ...] = (),
        parameters: tuple[ParameterInfo, ...] = (),
        type_name: str = "",
    ) -> Declaration:
        return Declaration(
            name=name,
            kind=kind,
            file_path=source_file.file_path,
            namespace=namespace,
            containing_types=containing_types,
            type_parameters=type_parameters,
            parameters=parameters,
            type_name=type_name,
            doc_comment=self._extract_doc_comment(node, source_bytes),
            line_number=node.start_point.row + 1,
        )

    def _extract_type_parameters(
        self, node: tree_sitter.Node, source_bytes: bytes
    ) -> tuple[str, ...]:
        """Extract generic type parameter names from a declaration node.

        Args:
            node: A type, method or delegate declaration node.
            source_bytes: Source as bytes.

        Returns:
            Tuple of type parameter names, empty if not generic.
        """
        params_node = node.child_by_field_name("type_parameters")
        if not params_node:
            params_node = next(
                (c for c in node.named_children if c.type == "type_parameter_list"),
                None,
            )
        if not params_node:
            return ()

        names = []
        for child in params_node.named_children:
            if child.type != "type_parameter":
                continue
            name_node = child.child_by_field_name("name")
            if not name_node:
                name_node = next(
                    (c for c in child.named_children if c.type == "identifier"), None
                )
            names.append(self._node_text(name_node or child, source_bytes))
        return tuple(names)

    def _extract_parameters(
        self, node: tree_sitter.Node, source_bytes: bytes
    ) -> tuple[ParameterInfo, ...]:
        """Extract parameters from a method-like or indexer node.

        Args:
            node: A declaration node with a parameter list.
            source_bytes: Source as bytes.

        Returns:
            Tuple of ParameterInfo objects in declaration order.
        """
        params_node = node.child_by_field_name("parameters")
        if not params_node:
            params_node = next(
                (c for c in node.named_children if c.type in _PARAMETER_LIST_NODES),
                None,
            )
        if not params_node:
            return ()

        params = []
        for child in params_node.named_children:
            if child.type in _PARAMETER_NODES:
                param = self._parse_single_param(child, source_bytes)
                if param:
                    params.append(param)
        return tuple(params)

    def _parse_single_param(
        self, node: tree_sitter.Node, source_bytes: bytes
    ) -> Optional[ParameterInfo]:
        """Parse a single parameter node.

        Args:
            node: A parameter tree-sitter node.
            source_bytes: Source as bytes.

        Returns:
            A ParameterInfo, or None if the parameter has no name.
        """
        name_node = node.child_by_field_name("name")
        if not name_node:
            identifiers = [c for c in node.named_children if c.type == "identifier"]
            name_node = identifiers[-1] if identifiers else None
        if not name_node:
            return None

        type_node = node.child_by_field_name("type")
        type_name = self._node_text(type_node, source_bytes) if type_node else ""

        modifier = None
        for child in node.children:
            if child == type_node or child == name_node:
                break
            text = self._node_text(child, source_bytes)
            if text in _PARAMETER_MODIFIERS:
                modifier = text
                break
        if node.type == "params_array":
            modifier = "params"
        # Some grammar versions fold the modifier into the type node
        first_word, _, rest = type_name.partition(" ")
        if first_word in _PARAMETER_MODIFIERS and rest:
            modifier = modifier or first_word
            type_name = rest.strip()

        return ParameterInfo(
            name=self._node_text(name_node, source_bytes),
            type_name=type_name,
            modifier=modifier,
        )

    def _extract_doc_comment(
        self, node: tree_sitter.Node, source_bytes: bytes
    ) -> Optional[str]:
        """Extract the documentation comment preceding a node.

        Gathers the contiguous run of comment siblings directly before
        the node and keeps the '///' lines and '/** */' blocks among them.

        Args:
            node: The declaration node to find documentation for.
            source_bytes: Source as bytes.

        Returns:
            Cleaned documentation text (possibly empty), or None if no
            documentation comment precedes the node.
        """
        comments = []
        prev = node.prev_sibling
        while prev is not None and prev.type == "comment":
            comments.append(self._node_text(prev, source_bytes))
            prev = prev.prev_sibling
        comments.reverse()

        lines: list[str] = []
        found = False
        for text in comments:
            text = text.rstrip("\r")
            if text.startswith("///") and not text.startswith("////"):
                found = True
                lines.append(text[3:])
            elif text.startswith("/**") and not text.startswith("/**/"):
                found = True
                lines.extend(self._clean_block_comment(text))

        if not found:
            return None
        return textwrap.dedent("\n".join(lines)).strip()

    def _clean_block_comment(self, raw: str) -> list[str]:
        """Clean a raw '/** */' documentation comment.

        Removes comment delimiters and leading asterisks.

        Args:
            raw: Raw comment string including delimiters.

        Returns:
            The comment body split into lines.
        """
        text = raw[3:]
        if text.endswith("*/"):
            text = text[:-2]
        cleaned = []
        for line in text.replace("\r", "").split("\n"):
            stripped = line.lstrip()
            if stripped.startswith("*"):
                line = stripped[1:]
            cleaned.append(line)
        return cleaned

    def _body(self, node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
        """Return the member list of a namespace or type declaration."""
        body = node.child_by_field_name("body")
        if body:
            return body
        return next((c for c in node.named_children if c.type in _BODY_NODES), None)

    def _node_text(self, node: tree_sitter.Node, source_bytes: bytes) -> str:
        """Extract the text content of a tree-sitter node.

        Args:
            node: A tree-sitter Node.
            source_bytes: Source as bytes.

        Returns:
            The text content of the node.
        """
        return source_bytes[node.start_byte : node.end_byte].decode("utf-8")
