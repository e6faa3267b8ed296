"""Helpers over tree-sitter Go nodes."""

from __future__ import annotations

from tree_sitter import Node

from . import constants

NodeKey = tuple[int, int, str]

# Node types that wrap a list of statements.
STATEMENT_LIST_TYPES: frozenset[str] = frozenset({"statement_list"})

# Children of a case clause that are not part of its statement body.
CASE_HEADER_FIELDS: tuple[str, ...] = ("value", "type", "communication")

CASE_CLAUSE_TYPES: frozenset[str] = frozenset(
    {"expression_case", "default_case", "type_case", "communication_case"}
)

COMMENT_TYPES: frozenset[str] = frozenset({"comment"})


def node_key(node: Node) -> NodeKey:
    return (node.start_byte, node.end_byte, node.type)


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8")


def is_blank(node: Node, source: bytes) -> bool:
    return node.type in ("identifier", "blank_identifier") and (
        node_text(node, source) == constants.BLANK_IDENTIFIER
    )


def expression_list_items(node: Node | None) -> list[Node]:
    """Items of an ``expression_list`` (or a lone expression)."""
    if node is None:
        return []
    if node.type == "expression_list":
        return [c for c in node.children if c.is_named and c.type not in COMMENT_TYPES]
    return [node]


def statements_of(node: Node) -> list[Node]:
    """Statements of a block or case clause, flattening ``statement_list``."""
    header = {
        node_key(c)
        for field in CASE_HEADER_FIELDS
        for c in node.children_by_field_name(field)
    }
    result = []
    for child in node.children:
        if not child.is_named or child.type in COMMENT_TYPES:
            continue
        if node_key(child) in header:
            continue
        if child.type in STATEMENT_LIST_TYPES:
            result.extend(statements_of(child))
            continue
        result.append(child)
    return result


def line_indent(source: bytes, offset: int) -> str:
    """Leading whitespace of the line containing *offset*."""
    line_start = source.rfind(b"\n", 0, offset) + 1
    end = line_start
    while end < len(source) and source[end : end + 1] in (b" ", b"\t"):
        end += 1
    return source[line_start:end].decode("utf-8")
