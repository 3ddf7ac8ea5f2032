from __future__ import annotations

from tree_sitter import Node
from tree_sitter_language_pack import get_parser

from contract_proxy.core.extract import Shape, classify_kind, field_descriptor
from contract_proxy.models import FieldDescriptor

_DECLARATION_TYPES = frozenset({"interface_declaration", "type_alias_declaration"})
_BODY_TYPES = frozenset({"interface_body", "object_type"})


def _text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _declared_type(annotation: Node, source: bytes) -> str:
    # type_annotation is ": <type>"; the first named child is the type itself.
    for child in annotation.named_children:
        return _text(child, source)
    return _text(annotation, source).lstrip(":")


def _field_from_property(node: Node, source: bytes) -> FieldDescriptor | None:
    name_node = node.child_by_field_name("name")
    annotation = node.child_by_field_name("type")
    if name_node is None or annotation is None:
        return None
    optional = any(child.type == "?" for child in node.children)
    info = classify_kind(_declared_type(annotation, source))
    return field_descriptor(_text(name_node, source).strip("'\""), info, optional)


def _shape_from_declaration(node: Node, source: bytes) -> Shape | None:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    body = node.child_by_field_name("body") if node.type == "interface_declaration" else node.child_by_field_name("value")
    if body is None or body.type not in _BODY_TYPES:
        return None
    fields = (
        _field_from_property(member, source) for member in body.named_children if member.type == "property_signature"
    )
    return _text(name_node, source), tuple(field for field in fields if field is not None)


class TreeSitterShapeExtractor:
    """Shape extractor backed by the tree-sitter TypeScript grammar.

    Implements the ``ShapeExtractor`` protocol with the same field classification
    as the regex extractor, but finds declarations through the syntax tree.
    """

    name = "tree-sitter"

    def __init__(self, dialect: str = "typescript") -> None:
        self._parser = get_parser(dialect)  # type: ignore[arg-type]

    def extract(self, content: str) -> list[Shape]:
        source = content.encode("utf-8")
        tree = self._parser.parse(source)
        shapes: list[Shape] = []
        for statement in tree.root_node.named_children:
            if statement.type != "export_statement":
                continue
            declaration = statement.child_by_field_name("declaration")
            if declaration is None or declaration.type not in _DECLARATION_TYPES:
                continue
            shape = _shape_from_declaration(declaration, source)
            if shape is not None:
                shapes.append(shape)
        return shapes
