"""Go parsing on top of tree-sitter-language-pack.

The tree-sitter parser is created on first use and reused for every file of
a run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import tree_sitter_language_pack
from tree_sitter import Node, Tree

from . import constants


class ParserFactory(ABC):
    """Source of the tree-sitter parser used for Go files."""

    @abstractmethod
    def create(self): ...


class GoParserFactory(ParserFactory):
    def create(self):
        return tree_sitter_language_pack.get_parser(constants.LANGUAGE)


class Parser:
    """Parses Go source bytes, building the underlying parser lazily."""

    def __init__(self, factory: ParserFactory | None = None):
        self._factory = factory or GoParserFactory()
        self._parser = None

    def parse(self, source: bytes) -> Tree:
        if self._parser is None:
            self._parser = self._factory.create()
        return self._parser.parse(source)


def first_error(node: Node) -> Node | None:
    """The first ``ERROR`` or missing node under *node*, in source order."""
    if node.is_error or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = first_error(child)
        if found is not None:
            return found
    return node
