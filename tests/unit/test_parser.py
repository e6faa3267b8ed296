"""Tests for the Go parsing layer."""

from __future__ import annotations

from gothrow.parser import GoParserFactory, Parser, ParserFactory, first_error


class CountingFactory(ParserFactory):
    def __init__(self):
        self.created = 0

    def create(self):
        self.created += 1
        return GoParserFactory().create()


class TestParser:
    def test_parses_go(self):
        tree = Parser().parse(b"package main\n\nfunc main() {}\n")
        assert tree.root_node.type == "source_file"

    def test_factory_used_once(self):
        factory = CountingFactory()
        parser = Parser(factory)
        parser.parse(b"package a\n")
        parser.parse(b"package b\n")
        assert factory.created == 1


class TestFirstError:
    def test_clean_tree(self):
        tree = Parser().parse(b"package main\n\nfunc main() {}\n")
        assert first_error(tree.root_node) is None

    def test_error_is_located(self):
        tree = Parser().parse(b"package main\n\nfunc main() {\n\tx := \n}\n\nfunc {\n")
        error = first_error(tree.root_node)
        assert error is not None
        assert error.start_point[0] >= 2
