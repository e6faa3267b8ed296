"""Package index — top-level functions, types and methods of one Go package.

The same indexer serves user packages and the bundled standard-library
stubs, so method sets and signatures resolve uniformly across both.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from . import constants
from .gotypes import (
    ERROR_TYPE,
    STRING_TYPE,
    GoType,
    Signature,
    TypeBuilder,
    TypeContext,
    TypeKind,
    type_parameter_names,
)
from .nodes import node_text
from .parser import Parser

logger = logging.getLogger(__name__)

_VERSION_SUFFIX = re.compile(r"^v\d+$")
_MAX_UNDERLYING_DEPTH = 8

ERROR_SIGNATURE = Signature(params=(), results=(STRING_TYPE,))


def default_import_name(path: str) -> str:
    """Package name an import path binds when it carries no explicit name."""
    parts = [p for p in path.split("/") if p]
    if not parts:
        return path
    last = parts[-1]
    if _VERSION_SUFFIX.match(last) and len(parts) > 1:
        last = parts[-2]
    return last.split(".")[0].replace("-", "_")


def file_imports(root, source: bytes) -> dict[str, str]:
    """Map each import's local name to its path (blank and dot imports skipped)."""
    imports: dict[str, str] = {}
    for spec in _import_specs(root):
        path_node = spec.child_by_field_name("path")
        if path_node is None:
            continue
        path = node_text(path_node, source).strip('"`')
        name_node = spec.child_by_field_name("name")
        if name_node is None:
            imports[default_import_name(path)] = path
            continue
        name = node_text(name_node, source)
        if name in (constants.BLANK_IDENTIFIER, "."):
            continue
        imports[name] = path
    return imports


def _import_specs(root):
    for decl in root.named_children:
        if decl.type != "import_declaration":
            continue
        for child in decl.named_children:
            if child.type == "import_spec":
                yield child
            elif child.type == "import_spec_list":
                yield from (c for c in child.named_children if c.type == "import_spec")


def package_name(root, source: bytes) -> str:
    for child in root.named_children:
        if child.type == "package_clause":
            ident = next((c for c in child.named_children), None)
            return node_text(ident, source) if ident is not None else ""
    return ""


@dataclass
class TypeDecl:
    name: str
    underlying: GoType | None
    type_params: tuple[str, ...] = ()
    alias: bool = False
    fields: dict[str, GoType | None] = field(default_factory=dict)


@dataclass
class MethodDecl:
    name: str
    receiver: str
    pointer_receiver: bool
    signature: Signature


@dataclass
class ParsedFile:
    path: str
    source: bytes
    tree: object

    @property
    def root(self):
        return self.tree.root_node


@dataclass
class PackageIndex:
    path: str
    name: str = ""
    functions: dict[str, Signature] = field(default_factory=dict)
    types: dict[str, TypeDecl] = field(default_factory=dict)
    methods: dict[str, dict[str, MethodDecl]] = field(default_factory=dict)
    variables: dict[str, GoType | None] = field(default_factory=dict)

    def top_level_names(self) -> set[str]:
        return set(self.functions) | set(self.types) | set(self.variables)


def index_package(path: str, files: list[ParsedFile]) -> PackageIndex:
    """Collect the top-level declarations of every file in one package."""
    index = PackageIndex(path=path)
    for parsed in files:
        root = parsed.root
        if not index.name:
            index.name = package_name(root, parsed.source)
        ctx = TypeContext(package=path, imports=file_imports(root, parsed.source))
        for decl in root.named_children:
            handler = _DECL_INDEXERS.get(decl.type)
            if handler is not None:
                handler(index, decl, parsed.source, ctx)
    logger.debug(
        "Indexed package %s: %d funcs, %d types",
        path,
        len(index.functions),
        len(index.types),
    )
    return index


def _index_function(index: PackageIndex, decl, source: bytes, ctx: TypeContext):
    name_node = decl.child_by_field_name("name")
    if name_node is None:
        return
    tparams = type_parameter_names(decl.child_by_field_name("type_parameters"), source)
    builder = TypeBuilder(source, ctx.with_type_params(tparams))
    index.functions[node_text(name_node, source)] = builder.signature(
        decl.child_by_field_name("parameters"), decl.child_by_field_name("result")
    )


def receiver_type_name(receiver_list, source: bytes) -> tuple[str, bool, list[str]]:
    """``(type name, pointer receiver?, type params)`` of a method receiver."""
    decl = next(
        (c for c in receiver_list.named_children if c.type == "parameter_declaration"),
        None,
    )
    type_node = decl.child_by_field_name("type") if decl is not None else None
    pointer = False
    while type_node is not None and type_node.type in ("pointer_type", "parenthesized_type"):
        pointer = pointer or type_node.type == "pointer_type"
        type_node = type_node.named_children[0] if type_node.named_children else None
    if type_node is None:
        return "", pointer, []
    tparams: list[str] = []
    if type_node.type == "generic_type":
        args = type_node.child_by_field_name("type_arguments")
        tparams = [node_text(a, source) for a in (args.named_children if args else [])]
        type_node = type_node.child_by_field_name("type")
    return node_text(type_node, source), pointer, tparams


def _index_method(index: PackageIndex, decl, source: bytes, ctx: TypeContext):
    name_node = decl.child_by_field_name("name")
    receiver = decl.child_by_field_name("receiver")
    if name_node is None or receiver is None:
        return
    recv_name, pointer, tparams = receiver_type_name(receiver, source)
    if not recv_name:
        return
    builder = TypeBuilder(source, ctx.with_type_params(tparams))
    name = node_text(name_node, source)
    index.methods.setdefault(recv_name, {})[name] = MethodDecl(
        name=name,
        receiver=recv_name,
        pointer_receiver=pointer,
        signature=builder.signature(
            decl.child_by_field_name("parameters"), decl.child_by_field_name("result")
        ),
    )


def _index_types(index: PackageIndex, decl, source: bytes, ctx: TypeContext):
    for spec in decl.named_children:
        if spec.type not in ("type_spec", "type_alias"):
            continue
        name_node = spec.child_by_field_name("name")
        if name_node is None:
            continue
        tparams = type_parameter_names(spec.child_by_field_name("type_parameters"), source)
        builder = TypeBuilder(source, ctx.with_type_params(tparams))
        name = node_text(name_node, source)
        type_node = spec.child_by_field_name("type")
        index.types[name] = TypeDecl(
            name=name,
            underlying=builder.from_node(type_node),
            type_params=tuple(tparams),
            alias=spec.type == "type_alias",
            fields=_struct_fields(type_node, builder),
        )


def _struct_fields(type_node, builder: TypeBuilder) -> dict[str, GoType | None]:
    fields: dict[str, GoType | None] = {}
    if type_node is None or type_node.type != "struct_type":
        return fields
    for holder in type_node.named_children:
        if holder.type != "field_declaration_list":
            continue
        for decl in holder.named_children:
            if decl.type != "field_declaration":
                continue
            declared = builder.from_node(decl.child_by_field_name("type"))
            for name_node in decl.children_by_field_name("name"):
                fields[builder.text(name_node)] = declared
    return fields


def _index_vars(index: PackageIndex, decl, source: bytes, ctx: TypeContext):
    builder = TypeBuilder(source, ctx)
    specs = [c for c in decl.named_children if c.type in ("var_spec", "const_spec")]
    for holder in decl.named_children:
        if holder.type in ("var_spec_list", "const_spec_list"):
            specs.extend(c for c in holder.named_children if c.type in ("var_spec", "const_spec"))
    for spec in specs:
        declared = builder.from_node(spec.child_by_field_name("type"))
        for name_node in spec.children_by_field_name("name"):
            index.variables[node_text(name_node, source)] = declared


_DECL_INDEXERS = {
    "function_declaration": _index_function,
    "method_declaration": _index_method,
    "type_declaration": _index_types,
    "var_declaration": _index_vars,
    "const_declaration": _index_vars,
}


class PackageRegistry:
    """All packages known to one run: user packages plus standard-library stubs.

    Stubs are parsed and indexed on first use.
    """

    def __init__(self, parser: Parser | None = None, stubs: dict[str, str] | None = None):
        from .stdlib import STDLIB_STUBS

        self._parser = parser or Parser()
        self._stubs = STDLIB_STUBS if stubs is None else stubs
        self._packages: dict[str, PackageIndex] = {}

    def register(self, index: PackageIndex) -> None:
        self._packages[index.path] = index

    def get(self, path: str) -> PackageIndex | None:
        if path in self._packages:
            return self._packages[path]
        stub = self._stubs.get(path)
        if stub is None:
            return None
        source = stub.encode("utf-8")
        tree = self._parser.parse(source)
        index = index_package(path, [ParsedFile(path=f"<stub {path}>", source=source, tree=tree)])
        self._packages[path] = index
        return index

    # ── type queries ─────────────────────────────────────────────

    def type_decl(self, t: GoType | None) -> TypeDecl | None:
        t = self.resolve_alias(t)
        if t is None or t.kind != TypeKind.NAMED or t.is_predeclared():
            return None
        pkg = self.get(t.package)
        return pkg.types.get(t.name) if pkg is not None else None

    def _raw_decl(self, t: GoType) -> TypeDecl | None:
        pkg = self.get(t.package)
        return pkg.types.get(t.name) if pkg is not None else None

    def resolve_alias(self, t: GoType | None) -> GoType | None:
        """Replace a type alias by the type it denotes."""
        for _ in range(_MAX_UNDERLYING_DEPTH):
            if t is None or t.kind != TypeKind.NAMED or t.is_predeclared():
                return t
            decl = self._raw_decl(t)
            if decl is None or not decl.alias:
                return t
            t = decl.underlying
        return t

    def field_type(self, t: GoType | None, name: str) -> GoType | None:
        """Type of struct field *name* on a value of type *t* (or a pointer to it)."""
        t = self.resolve_alias(t)
        if t is not None and t.kind == TypeKind.POINTER:
            t = self.resolve_alias(t.elem)
        decl = self.type_decl(t)
        if decl is None:
            return None
        return decl.fields.get(name)

    def underlying(self, t: GoType | None) -> GoType | None:
        """Follow named types to their underlying type (``None`` if unknown)."""
        for _ in range(_MAX_UNDERLYING_DEPTH):
            if t is None or t.kind != TypeKind.NAMED or t.is_predeclared():
                return t
            decl = self.type_decl(t)
            if decl is None:
                return None
            t = decl.underlying
        return None

    def method_set(self, t: GoType | None, addressable: bool = False) -> dict[str, Signature]:
        """Methods callable on a value of type *t*.

        Follows Go's rules: ``T`` carries its value-receiver methods and ``*T``
        carries both; *addressable* widens ``T`` to ``*T`` for call lookup.
        """
        return self._method_set(t, addressable, depth=0)

    def _method_set(self, t: GoType | None, addressable: bool, depth: int) -> dict[str, Signature]:
        if t is None or depth > _MAX_UNDERLYING_DEPTH:
            return {}
        t = self.resolve_alias(t)
        if t is None:
            return {}
        if t.kind == TypeKind.INTERFACE:
            methods: dict[str, Signature] = {}
            for embedded in t.embeds:
                methods.update(self._method_set(embedded, False, depth + 1))
            methods.update({m.name: m.signature for m in t.methods})
            return methods
        if t.kind == TypeKind.POINTER:
            elem = self.resolve_alias(t.elem)
            if elem is None or elem.kind != TypeKind.NAMED:
                return {}
            return self._named_methods(elem, pointer=True)
        if t.kind != TypeKind.NAMED:
            return {}
        if t == ERROR_TYPE:
            return {constants.ERROR_METHOD_NAME: ERROR_SIGNATURE}
        decl = self.type_decl(t)
        if (
            decl is not None
            and decl.underlying is not None
            and decl.underlying.kind == TypeKind.INTERFACE
        ):
            return self._method_set(decl.underlying, False, depth + 1)
        return self._named_methods(t, pointer=addressable)

    def _named_methods(self, t: GoType, pointer: bool) -> dict[str, Signature]:
        pkg = self.get(t.package)
        if pkg is None:
            return {}
        return {
            name: decl.signature
            for name, decl in pkg.methods.get(t.name, {}).items()
            if pointer or not decl.pointer_receiver
        }

    def lookup_method(self, t: GoType | None, name: str) -> Signature | None:
        return self.method_set(t, addressable=True).get(name)

