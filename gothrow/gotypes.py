"""Go type model — just enough of go/types to drive the rewrite.

Type identity is syntactic: a named type is identified by the import path of
the package declaring it plus its name.  Predeclared types live in the empty
package ``""``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator

from . import constants
from .nodes import node_text


class TypeKind(str, Enum):
    NAMED = "named"
    TYPE_PARAM = "type_param"
    POINTER = "pointer"
    SLICE = "slice"
    ARRAY = "array"
    MAP = "map"
    CHAN = "chan"
    FUNC = "func"
    INTERFACE = "interface"
    STRUCT = "struct"


@dataclass(frozen=True)
class Signature:
    params: tuple[GoType | None, ...] = ()
    results: tuple[GoType | None, ...] = ()
    variadic: bool = False


@dataclass(frozen=True)
class Method:
    name: str
    signature: Signature


@dataclass(frozen=True)
class GoType:
    kind: TypeKind
    name: str = ""
    package: str = ""
    elem: GoType | None = None
    key: GoType | None = None
    length: str = ""
    signature: Signature | None = None
    methods: tuple[Method, ...] = ()
    embeds: tuple[GoType, ...] = ()
    args: tuple[GoType | None, ...] = ()
    text: str = field(default="", compare=False)

    def is_named(self, name: str, package: str = "") -> bool:
        return (
            self.kind == TypeKind.NAMED
            and self.name == name
            and self.package == package
        )

    def is_predeclared(self) -> bool:
        return self.kind == TypeKind.NAMED and self.package == ""

    def __str__(self) -> str:
        if self.text:
            return self.text
        if self.kind in (TypeKind.NAMED, TypeKind.TYPE_PARAM):
            return f"{self.package}.{self.name}" if self.package else self.name
        if self.kind == TypeKind.POINTER:
            return f"*{self.elem}"
        if self.kind == TypeKind.SLICE:
            return f"[]{self.elem}"
        if self.kind == TypeKind.ARRAY:
            return f"[{self.length}]{self.elem}"
        if self.kind == TypeKind.MAP:
            return f"map[{self.key}]{self.elem}"
        if self.kind == TypeKind.CHAN:
            return f"chan {self.elem}"
        return self.kind.value


def named(name: str, package: str = "", text: str = "") -> GoType:
    return GoType(kind=TypeKind.NAMED, name=name, package=package, text=text)


def pointer_to(elem: GoType | None) -> GoType | None:
    if elem is None:
        return None
    return GoType(kind=TypeKind.POINTER, elem=elem, text=f"*{elem}" if elem.text else "")


def deref(t: GoType | None) -> GoType | None:
    if t is not None and t.kind == TypeKind.POINTER:
        return t.elem
    return t


ERROR_TYPE = named(constants.ERROR_TYPE_NAME, text=constants.ERROR_TYPE_NAME)
STRING_TYPE = named(constants.STRING_TYPE_NAME, text=constants.STRING_TYPE_NAME)
INT_TYPE = named("int", text="int")
FLOAT_TYPE = named("float64", text="float64")
BOOL_TYPE = named("bool", text="bool")
RUNE_TYPE = named("rune", text="rune")
ANY_TYPE = GoType(kind=TypeKind.INTERFACE, text="any")


@dataclass(frozen=True)
class TypeContext:
    """Where a type expression is spelled: package, file imports, type params."""

    package: str = ""
    imports: dict[str, str] = field(default_factory=dict, hash=False, compare=False)
    type_params: frozenset[str] = frozenset()

    def with_type_params(self, names: Iterator[str] | frozenset[str]) -> TypeContext:
        return replace(self, type_params=self.type_params | frozenset(names))


def iter_parameters(list_node) -> Iterator[tuple[list, object, bool]]:
    """Yield ``(name_nodes, type_node, variadic)`` per parameter declaration."""
    if list_node is None:
        return
    for child in list_node.named_children:
        if child.type == "parameter_declaration":
            yield child.children_by_field_name("name"), child.child_by_field_name("type"), False
        elif child.type == "variadic_parameter_declaration":
            yield child.children_by_field_name("name"), child.child_by_field_name("type"), True


def type_parameter_names(node, source: bytes) -> list[str]:
    """Names declared by a ``type_parameter_list`` (may be ``None``)."""
    if node is None:
        return []
    names: list[str] = []
    for decl in node.named_children:
        names.extend(node_text(n, source) for n in decl.children_by_field_name("name"))
    return names


class TypeBuilder:
    """Builds ``GoType`` values from tree-sitter type nodes."""

    def __init__(self, source: bytes, ctx: TypeContext):
        self._source = source
        self.ctx = ctx

    def text(self, node) -> str:
        return node_text(node, self._source)

    def from_node(self, node) -> GoType | None:
        if node is None:
            return None
        handler = _TYPE_DISPATCH.get(node.type)
        if handler is None:
            return None
        return handler(self, node)

    # ── shapes ───────────────────────────────────────────────────

    def _identifier(self, node) -> GoType:
        name = self.text(node)
        if name in self.ctx.type_params:
            return GoType(kind=TypeKind.TYPE_PARAM, name=name, text=name)
        if name == "any":
            return ANY_TYPE
        if name in constants.PREDECLARED_TYPES:
            return named(name, text=name)
        return named(name, self.ctx.package, text=name)

    def _qualified(self, node) -> GoType | None:
        pkg_node = node.child_by_field_name("package")
        name_node = node.child_by_field_name("name")
        if pkg_node is None or name_node is None:
            return None
        local = self.text(pkg_node)
        path = self.ctx.imports.get(local, local)
        return named(self.text(name_node), path, text=self.text(node))

    def _generic(self, node) -> GoType | None:
        base = self.from_node(node.child_by_field_name("type"))
        if base is None:
            return None
        args_node = node.child_by_field_name("type_arguments")
        args = tuple(
            self.from_node(_unwrap_type_elem(a))
            for a in (args_node.named_children if args_node else [])
        )
        return replace(base, args=args, text=self.text(node))

    def _pointer(self, node) -> GoType | None:
        inner = node.named_children[0] if node.named_children else None
        elem = self.from_node(inner)
        if elem is None:
            return None
        return GoType(kind=TypeKind.POINTER, elem=elem, text=self.text(node))

    def _slice(self, node) -> GoType:
        elem = self.from_node(node.child_by_field_name("element"))
        return GoType(kind=TypeKind.SLICE, elem=elem, text=self.text(node))

    def _array(self, node) -> GoType:
        length_node = node.child_by_field_name("length")
        length = self.text(length_node) if length_node is not None else "..."
        elem = self.from_node(node.child_by_field_name("element"))
        return GoType(kind=TypeKind.ARRAY, elem=elem, length=length, text=self.text(node))

    def _map(self, node) -> GoType:
        return GoType(
            kind=TypeKind.MAP,
            key=self.from_node(node.child_by_field_name("key")),
            elem=self.from_node(node.child_by_field_name("value")),
            text=self.text(node),
        )

    def _chan(self, node) -> GoType:
        elem = self.from_node(node.child_by_field_name("value"))
        return GoType(kind=TypeKind.CHAN, elem=elem, text=self.text(node))

    def _func(self, node) -> GoType:
        sig = self.signature(
            node.child_by_field_name("parameters"), node.child_by_field_name("result")
        )
        return GoType(kind=TypeKind.FUNC, signature=sig, text=self.text(node))

    def _interface(self, node) -> GoType:
        methods: list[Method] = []
        embeds: list[GoType] = []
        children = []
        for child in node.named_children:
            if child.type == "method_spec_list":
                children.extend(child.named_children)
            else:
                children.append(child)
        for child in children:
            if child.type in ("method_elem", "method_spec"):
                name_node = child.child_by_field_name("name")
                if name_node is None:
                    continue
                sig = self.signature(
                    child.child_by_field_name("parameters"),
                    child.child_by_field_name("result"),
                )
                methods.append(Method(self.text(name_node), sig))
            else:
                embedded = self.from_node(_unwrap_type_elem(child))
                if embedded is not None:
                    embeds.append(embedded)
        text = self.text(node)
        if not methods and not embeds:
            return GoType(kind=TypeKind.INTERFACE, text=text)
        return GoType(
            kind=TypeKind.INTERFACE,
            methods=tuple(methods),
            embeds=tuple(embeds),
            text=text,
        )

    def _struct(self, node) -> GoType:
        return GoType(kind=TypeKind.STRUCT, text=self.text(node))

    def _parenthesized(self, node) -> GoType | None:
        inner = node.named_children[0] if node.named_children else None
        return self.from_node(inner)

    # ── signatures ───────────────────────────────────────────────

    def parameter_types(self, list_node) -> tuple[tuple[GoType | None, ...], bool]:
        types: list[GoType | None] = []
        variadic = False
        for names, type_node, is_variadic in iter_parameters(list_node):
            t = self.from_node(type_node)
            if is_variadic:
                variadic = True
                t = GoType(kind=TypeKind.SLICE, elem=t)
            types.extend([t] * max(1, len(names)))
        return tuple(types), variadic

    def result_types(self, result_node) -> tuple[GoType | None, ...]:
        if result_node is None:
            return ()
        if result_node.type == "parameter_list":
            return self.parameter_types(result_node)[0]
        return (self.from_node(result_node),)

    def signature(self, params_node, result_node) -> Signature:
        params, variadic = self.parameter_types(params_node)
        return Signature(
            params=params, results=self.result_types(result_node), variadic=variadic
        )


def _unwrap_type_elem(node):
    """``type_elem`` / ``constraint_elem`` wrap a single type in newer grammars."""
    if node is not None and node.type in ("type_elem", "constraint_elem", "interface_type_name"):
        named_children = node.named_children
        if len(named_children) == 1:
            return named_children[0]
    return node


_TYPE_DISPATCH = {
    "type_identifier": TypeBuilder._identifier,
    "identifier": TypeBuilder._identifier,
    "qualified_type": TypeBuilder._qualified,
    "generic_type": TypeBuilder._generic,
    "pointer_type": TypeBuilder._pointer,
    "slice_type": TypeBuilder._slice,
    "array_type": TypeBuilder._array,
    "implicit_length_array_type": TypeBuilder._array,
    "map_type": TypeBuilder._map,
    "channel_type": TypeBuilder._chan,
    "function_type": TypeBuilder._func,
    "interface_type": TypeBuilder._interface,
    "struct_type": TypeBuilder._struct,
    "parenthesized_type": TypeBuilder._parenthesized,
}
