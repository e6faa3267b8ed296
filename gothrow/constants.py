"""Named constants — eliminates magic strings across the codebase."""

from __future__ import annotations

LANGUAGE = "go"

DEFAULT_ERROR_VAR = "err"
BLANK_IDENTIFIER = "_"
NIL_LITERAL = "nil"
FALSE_LITERAL = "false"
EMPTY_STRING_LITERAL = '""'
ZERO_LITERAL = "0"

DEFINE_TOKEN = ":="
ASSIGN_TOKEN = "="
NOT_EQUAL_TOKEN = "!="

ERROR_TYPE_NAME = "error"
ERROR_METHOD_NAME = "Error"
STRING_TYPE_NAME = "string"

ENTRY_PACKAGE = "main"
ENTRY_FUNCTION = "main"

FATAL_IMPORT = "log"
FATAL_FUNCTION = "Fatalf"
FATAL_FORMAT = '"error: %v"'

INDENT = "\t"

GO_FILE_SUFFIX = ".go"
GO_TEST_FILE_SUFFIX = "_test.go"
SKIPPED_DIRECTORIES: frozenset[str] = frozenset({"vendor", "testdata"})

# Predeclared type names grouped by zero-value shape.
STRING_TYPES: frozenset[str] = frozenset({"string"})
BOOL_TYPES: frozenset[str] = frozenset({"bool"})
NUMERIC_TYPES: frozenset[str] = frozenset(
    {
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
        "byte",
        "rune",
        "float32",
        "float64",
        "complex64",
        "complex128",
    }
)
NIL_NAMED_TYPES: frozenset[str] = frozenset({"error", "any"})
PREDECLARED_TYPES: frozenset[str] = (
    STRING_TYPES | BOOL_TYPES | NUMERIC_TYPES | NIL_NAMED_TYPES | {"comparable"}
)

BUILTIN_FUNCTIONS: frozenset[str] = frozenset(
    {
        "append",
        "cap",
        "clear",
        "close",
        "complex",
        "copy",
        "delete",
        "imag",
        "len",
        "make",
        "max",
        "min",
        "new",
        "panic",
        "print",
        "println",
        "real",
        "recover",
    }
)
