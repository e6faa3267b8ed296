"""Resolver — builds scopes, statement arena and call result types for a file.

This is the lightweight stand-in for go/types that the rewrite consumes:
every routine body is walked once, in source order, declaring bindings
position-aware so later lookups behave like ``Scope.LookupParent(name, pos)``.
Expression typing is best effort; anything it cannot type is ``None``.
"""

from __future__ import annotations

import logging
from typing import Callable

from . import constants
from .gotypes import (
    ANY_TYPE,
    BOOL_TYPE,
    FLOAT_TYPE,
    INT_TYPE,
    RUNE_TYPE,
    STRING_TYPE,
    GoType,
    TypeBuilder,
    TypeContext,
    TypeKind,
    deref,
    iter_parameters,
    named,
    pointer_to,
    type_parameter_names,
)
from .nodes import (
    CASE_CLAUSE_TYPES,
    expression_list_items,
    is_blank,
    node_key,
    node_text,
    statements_of,
)
from .packages import PackageIndex, PackageRegistry, file_imports, receiver_type_name
from .rewrite_types import RewriteConfig
from .scope import Binding, BindingKind, Scope, ScopeKind
from .syntax import SourceExpr
from .unit import AssignStmt, CompilationUnit, Routine, Statement, StatementList, Token

logger = logging.getLogger(__name__)

_COMPARISON_OPERATORS: frozenset[str] = frozenset({"==", "!=", "<", "<=", ">", ">=", "&&", "||"})


def universe_scope() -> Scope:
    scope = Scope(id=0, kind=ScopeKind.UNIVERSE)
    for name in constants.BUILTIN_FUNCTIONS:
        scope.declare(Binding(name=name, kind=BindingKind.BUILTIN))
    for name in constants.PREDECLARED_TYPES:
        t = ANY_TYPE if name == "any" else named(name, text=name)
        scope.declare(Binding(name=name, kind=BindingKind.TYPE, type=t))
    scope.declare(Binding(name="true", kind=BindingKind.CONST, type=BOOL_TYPE))
    scope.declare(Binding(name="false", kind=BindingKind.CONST, type=BOOL_TYPE))
    scope.declare(Binding(name="iota", kind=BindingKind.CONST, type=INT_TYPE))
    scope.declare(Binding(name="nil", kind=BindingKind.CONST))
    return scope


def package_scope(index: PackageIndex, parent: Scope) -> Scope:
    scope = Scope(id=1, kind=ScopeKind.PACKAGE, parent=parent)
    for name, sig in index.functions.items():
        scope.declare(Binding(name=name, kind=BindingKind.FUNC, signature=sig))
    for name in index.types:
        scope.declare(
            Binding(name=name, kind=BindingKind.TYPE, type=named(name, index.path, text=name))
        )
    for name, declared in index.variables.items():
        scope.declare(Binding(name=name, kind=BindingKind.VAR, type=declared))
    return scope


class ExprTyper:
    """Types expressions as seen from one scope at one position."""

    def __init__(self, source: bytes, registry: PackageRegistry, builder: TypeBuilder):
        self._source = source
        self._registry = registry
        self.builder = builder

    def _text(self, node) -> str:
        return node_text(node, self._source)

    def type_of(self, node, scope: Scope, pos: int) -> GoType | None:
        if node is None:
            return None
        handler = self._TYPE_OF.get(node.type)
        if handler is None:
            return None
        return handler(self, node, scope, pos)

    # ── expressions ──────────────────────────────────────────────

    def _identifier(self, node, scope: Scope, pos: int) -> GoType | None:
        binding = scope.lookup(self._text(node), pos)
        if binding is None:
            return None
        if binding.kind in (BindingKind.VAR, BindingKind.CONST):
            return binding.type
        if binding.kind == BindingKind.FUNC and binding.signature is not None:
            return GoType(kind=TypeKind.FUNC, signature=binding.signature)
        return None

    def _call(self, node, scope: Scope, pos: int) -> GoType | None:
        results = self.call_results(node, scope, pos)
        if results is not None and len(results) == 1:
            return results[0]
        return None

    def _composite(self, node, scope: Scope, pos: int) -> GoType | None:
        return self.builder.from_node(node.child_by_field_name("type"))

    def _unary(self, node, scope: Scope, pos: int) -> GoType | None:
        op_node = node.child_by_field_name("operator")
        op = self._text(op_node) if op_node is not None else ""
        operand = self.type_of(node.child_by_field_name("operand"), scope, pos)
        if op == "&":
            return pointer_to(operand)
        if op == "*":
            return operand.elem if operand is not None and operand.kind == TypeKind.POINTER else None
        if op == "<-":
            underlying = self._registry.underlying(operand)
            return underlying.elem if underlying is not None and underlying.kind == TypeKind.CHAN else None
        if op == "!":
            return BOOL_TYPE
        return operand

    def _binary(self, node, scope: Scope, pos: int) -> GoType | None:
        op_node = node.child_by_field_name("operator")
        if op_node is not None and self._text(op_node) in _COMPARISON_OPERATORS:
            return BOOL_TYPE
        return self.type_of(node.child_by_field_name("left"), scope, pos)

    def _parenthesized(self, node, scope: Scope, pos: int) -> GoType | None:
        inner = node.named_children[0] if node.named_children else None
        return self.type_of(inner, scope, pos)

    def _selector(self, node, scope: Scope, pos: int) -> GoType | None:
        operand = node.child_by_field_name("operand")
        field_node = node.child_by_field_name("field")
        if operand is None or field_node is None:
            return None
        name = self._text(field_node)
        package = self._imported_package(operand, scope, pos)
        if package is not None:
            if name in package.variables:
                return package.variables[name]
            sig = package.functions.get(name)
            return GoType(kind=TypeKind.FUNC, signature=sig) if sig is not None else None
        base = self.type_of(operand, scope, pos)
        field_type = self._registry.field_type(base, name)
        if field_type is not None:
            return field_type
        sig = self._registry.lookup_method(base, name)
        return GoType(kind=TypeKind.FUNC, signature=sig) if sig is not None else None

    def _type_assertion(self, node, scope: Scope, pos: int) -> GoType | None:
        return self.builder.from_node(node.child_by_field_name("type"))

    def _index(self, node, scope: Scope, pos: int) -> GoType | None:
        base = self._registry.underlying(
            deref(self.type_of(node.child_by_field_name("operand"), scope, pos))
        )
        if base is None:
            return None
        if base.kind in (TypeKind.SLICE, TypeKind.ARRAY, TypeKind.MAP):
            return base.elem
        if base.is_named(constants.STRING_TYPE_NAME):
            return named("byte", text="byte")
        return None

    def _slice_expr(self, node, scope: Scope, pos: int) -> GoType | None:
        return self.type_of(node.child_by_field_name("operand"), scope, pos)

    def _func_literal(self, node, scope: Scope, pos: int) -> GoType:
        sig = self.builder.signature(
            node.child_by_field_name("parameters"), node.child_by_field_name("result")
        )
        return GoType(kind=TypeKind.FUNC, signature=sig)

    _TYPE_OF: dict[str, Callable] = {
        "identifier": _identifier,
        "call_expression": _call,
        "composite_literal": _composite,
        "unary_expression": _unary,
        "binary_expression": _binary,
        "parenthesized_expression": _parenthesized,
        "selector_expression": _selector,
        "type_assertion_expression": _type_assertion,
        "index_expression": _index,
        "slice_expression": _slice_expr,
        "func_literal": _func_literal,
        "int_literal": lambda self, n, s, p: INT_TYPE,
        "float_literal": lambda self, n, s, p: FLOAT_TYPE,
        "rune_literal": lambda self, n, s, p: RUNE_TYPE,
        "interpreted_string_literal": lambda self, n, s, p: STRING_TYPE,
        "raw_string_literal": lambda self, n, s, p: STRING_TYPE,
        "true": lambda self, n, s, p: BOOL_TYPE,
        "false": lambda self, n, s, p: BOOL_TYPE,
    }

    # ── calls ────────────────────────────────────────────────────

    def _imported_package(self, operand, scope: Scope, pos: int) -> PackageIndex | None:
        if operand.type != "identifier":
            return None
        binding = scope.lookup(self._text(operand), pos)
        if binding is None or binding.kind != BindingKind.IMPORT:
            return None
        return self._registry.get(binding.import_path)

    def call_results(self, node, scope: Scope, pos: int) -> tuple[GoType | None, ...] | None:
        """Result tuple of a call expression, or ``None`` when unresolved."""
        fn = node.child_by_field_name("function")
        while fn is not None and fn.type in ("parenthesized_expression", "index_expression", "generic_type"):
            inner = fn.child_by_field_name("operand") or fn.child_by_field_name("type")
            if inner is None and fn.named_children:
                inner = fn.named_children[0]
            fn = inner
        if fn is None:
            return None
        if fn.type == "identifier":
            return self._identifier_call(fn, node, scope, pos)
        if fn.type == "selector_expression":
            return self._selector_call(fn, scope, pos)
        if fn.type == "func_literal":
            return self._func_literal(fn, scope, pos).signature.results
        callee = self.type_of(fn, scope, pos)
        if callee is not None and callee.kind == TypeKind.FUNC and callee.signature is not None:
            return callee.signature.results
        return None

    def _identifier_call(self, fn, call, scope: Scope, pos: int) -> tuple[GoType | None, ...] | None:
        name = self._text(fn)
        binding = scope.lookup(name, pos)
        if binding is None:
            return None
        if binding.kind == BindingKind.BUILTIN:
            return self._builtin_results(name, call, scope, pos)
        if binding.kind == BindingKind.FUNC and binding.signature is not None:
            return binding.signature.results
        if binding.kind == BindingKind.TYPE:
            return (binding.type,)
        if binding.kind == BindingKind.VAR and binding.type is not None:
            underlying = self._registry.underlying(binding.type)
            if underlying is not None and underlying.kind == TypeKind.FUNC and underlying.signature:
                return underlying.signature.results
        return None

    def _builtin_results(self, name: str, call, scope: Scope, pos: int) -> tuple[GoType | None, ...] | None:
        args_node = call.child_by_field_name("arguments")
        args = args_node.named_children if args_node is not None else []
        first = args[0] if args else None
        if name == "new":
            return (pointer_to(self.builder.from_node(first)),)
        if name == "make":
            return (self.builder.from_node(first),)
        if name in ("len", "cap", "copy"):
            return (INT_TYPE,)
        if name == "append":
            return (self.type_of(first, scope, pos),)
        if name == "recover":
            return (ANY_TYPE,)
        if name in ("panic", "print", "println", "close", "delete", "clear"):
            return ()
        return None

    def _selector_call(self, fn, scope: Scope, pos: int) -> tuple[GoType | None, ...] | None:
        operand = fn.child_by_field_name("operand")
        field_node = fn.child_by_field_name("field")
        if operand is None or field_node is None:
            return None
        name = self._text(field_node)
        package = self._imported_package(operand, scope, pos)
        if package is not None:
            if name in package.functions:
                return package.functions[name].results
            if name in package.types:
                return (named(name, package.path, text=self._text(fn)),)
            return None
        receiver = self.type_of(operand, scope, pos)
        sig = self._registry.lookup_method(receiver, name)
        if sig is not None:
            return sig.results
        field_type = self._registry.underlying(self._registry.field_type(receiver, name))
        if field_type is not None and field_type.kind == TypeKind.FUNC and field_type.signature:
            return field_type.signature.results
        return None


class Resolver:
    """Walks one parsed file and produces its ``CompilationUnit``."""

    def __init__(
        self,
        path: str,
        source: bytes,
        tree,
        package: PackageIndex,
        registry: PackageRegistry,
        config: RewriteConfig | None = None,
    ):
        self._path = path
        self._source = source
        self._tree = tree
        self._package = package
        self._registry = registry
        self._config = config or RewriteConfig()
        self._imports = file_imports(tree.root_node, source)
        self._scope_counter = 2
        self._ctx = TypeContext(package=package.path, imports=self._imports)
        self._STMT_DISPATCH: dict[str, Callable] = {
            "short_var_declaration": self._visit_short_var_decl,
            "assignment_statement": self._visit_assignment,
            "var_declaration": self._visit_var_decl,
            "const_declaration": self._visit_var_decl,
            "type_declaration": self._visit_type_decl,
            "if_statement": self._visit_if,
            "for_statement": self._visit_for,
            "expression_switch_statement": self._visit_switch,
            "type_switch_statement": self._visit_type_switch,
            "select_statement": self._visit_select,
            "block": self._visit_block,
            "labeled_statement": self._visit_labeled,
        }

    def _text(self, node) -> str:
        return node_text(node, self._source)

    def _new_scope(self, kind: ScopeKind, parent: Scope, node) -> Scope:
        scope = Scope(
            id=self._scope_counter,
            kind=kind,
            parent=parent,
            start=node.start_byte,
            end=node.end_byte,
        )
        self._scope_counter += 1
        return scope

    def _typer(self, routine: Routine | None) -> ExprTyper:
        ctx = self._ctx
        if routine is not None:
            ctx = ctx.with_type_params(routine.type_params)
        return ExprTyper(self._source, self._registry, TypeBuilder(self._source, ctx))

    # ── entry point ──────────────────────────────────────────────

    def resolve(self) -> CompilationUnit:
        pkg_scope = package_scope(self._package, universe_scope())
        file_scope = Scope(id=2, kind=ScopeKind.FILE, parent=pkg_scope, end=len(self._source))
        for name, path in self._imports.items():
            file_scope.declare(Binding(name=name, kind=BindingKind.IMPORT, import_path=path))
        self._scope_counter = 3
        self._unit = CompilationUnit(
            path=self._path,
            source=self._source,
            tree=self._tree,
            package=self._package,
            imports=self._imports,
            file_scope=file_scope,
        )
        for decl in self._tree.root_node.named_children:
            if decl.type in ("function_declaration", "method_declaration"):
                self._visit_routine(decl, file_scope, parent=None)
            elif decl.type in ("var_declaration", "const_declaration"):
                self._visit_func_literals(decl, file_scope, None)
        logger.debug(
            "Resolved %s: %d routines, %d statements",
            self._path,
            len(self._unit.routines),
            len(self._unit.statements),
        )
        return self._unit

    # ── routines ─────────────────────────────────────────────────

    def _visit_routine(self, node, parent_scope: Scope, parent: Routine | None) -> Routine:
        scope = self._new_scope(ScopeKind.FUNCTION, parent_scope, node)
        name_node = node.child_by_field_name("name")
        name = self._text(name_node) if name_node is not None else ""
        tparams = frozenset(
            type_parameter_names(node.child_by_field_name("type_parameters"), self._source)
        )
        receiver = node.child_by_field_name("receiver")
        if receiver is not None:
            tparams |= frozenset(receiver_type_name(receiver, self._source)[2])
        if parent is not None:
            tparams |= parent.type_params
        builder = TypeBuilder(self._source, self._ctx.with_type_params(tparams))
        result_node = node.child_by_field_name("result")
        routine = Routine(
            id=len(self._unit.routines),
            name=name,
            node=node,
            scope=scope,
            results=list(builder.result_types(result_node)),
            type_params=tparams,
            is_entry=self._is_entry(node, name),
            parent=parent,
        )
        self._unit.add_routine(routine)

        body = node.child_by_field_name("body")
        visible_from = body.start_byte if body is not None else node.end_byte
        for list_node in (receiver, node.child_by_field_name("parameters")):
            self._declare_parameters(list_node, scope, builder, visible_from)
        if result_node is not None and result_node.type == "parameter_list":
            self._declare_parameters(result_node, scope, builder, visible_from)
        if body is not None:
            self._walk_list(body, scope, routine)
        return routine

    def _is_entry(self, node, name: str) -> bool:
        return (
            node.type == "function_declaration"
            and name == self._config.entry_func
            and self._package.name == self._config.entry_package
            and node.child_by_field_name("type_parameters") is None
        )

    def _declare_parameters(self, list_node, scope: Scope, builder: TypeBuilder, visible_from: int):
        for names, type_node, variadic in iter_parameters(list_node):
            declared = builder.from_node(type_node)
            if variadic:
                declared = GoType(kind=TypeKind.SLICE, elem=declared)
            for name_node in names:
                name = self._text(name_node)
                if name == constants.BLANK_IDENTIFIER:
                    continue
                scope.declare(
                    Binding(name=name, kind=BindingKind.VAR, visible_from=visible_from, type=declared)
                )

    def _visit_func_literals(self, node, scope: Scope, routine: Routine | None):
        """Find function literals inside an expression and resolve them as routines."""
        if node is None:
            return
        if node.type == "func_literal":
            self._visit_routine(node, scope, parent=routine)
            return
        for child in node.named_children:
            self._visit_func_literals(child, scope, routine)

    # ── statements ───────────────────────────────────────────────

    def _walk_list(self, container, scope: Scope, routine: Routine) -> StatementList:
        stmt_list = self._unit.new_list()
        for node in statements_of(container):
            stmt = self._unit.add_statement(node, scope, routine, stmt_list)
            self._visit_stmt(stmt, node, scope, routine)
        return stmt_list

    def _register_simple(self, node, scope: Scope, routine: Routine):
        """Register a statement that does not sit in a statement list."""
        if node is None:
            return
        stmt = self._unit.add_statement(node, scope, routine, None)
        self._visit_stmt(stmt, node, scope, routine)

    def _visit_stmt(self, stmt: Statement, node, scope: Scope, routine: Routine):
        handler = self._STMT_DISPATCH.get(node.type)
        if handler is not None:
            handler(stmt, node, scope, routine)
            return
        self._visit_func_literals(node, scope, routine)

    def _assign_view(self, node, tok: Token, tok_node, typer: ExprTyper, scope: Scope) -> AssignStmt:
        left = expression_list_items(node.child_by_field_name("left"))
        right = expression_list_items(node.child_by_field_name("right"))
        call_node = right[0] if len(right) == 1 and right[0].type == "call_expression" else None
        result_types = None
        if call_node is not None:
            result_types = typer.call_results(call_node, scope, node.start_byte)
        return AssignStmt(
            lhs=[SourceExpr(self._text(n), n.start_byte, n.end_byte) for n in left],
            tok=tok,
            rhs=[SourceExpr(self._text(n), n.start_byte, n.end_byte) for n in right],
            tok_start=tok_node.start_byte,
            tok_end=tok_node.end_byte,
            original_tok=tok,
            call_node=call_node,
            result_types=result_types,
        )

    def _visit_short_var_decl(self, stmt: Statement, node, scope: Scope, routine: Routine):
        self._visit_func_literals(node.child_by_field_name("right"), scope, routine)
        tok_node = next((c for c in node.children if c.type == constants.DEFINE_TOKEN), None)
        if tok_node is None:
            return
        typer = self._typer(routine)
        stmt.assign = self._assign_view(node, Token.DEFINE, tok_node, typer, scope)
        left = expression_list_items(node.child_by_field_name("left"))
        right = expression_list_items(node.child_by_field_name("right"))
        types = self._value_types(stmt.assign.result_types, right, len(left), typer, scope, node.start_byte)
        new_names: set[str] = set()
        for target, declared in zip(left, types):
            if is_blank(target, self._source) or target.type != "identifier":
                continue
            name = self._text(target)
            if scope.lookup_local(name, node.start_byte) is not None:
                continue
            new_names.add(name)
            scope.declare(
                Binding(name=name, kind=BindingKind.VAR, visible_from=node.end_byte, type=declared)
            )
        stmt.new_names = frozenset(new_names)

    def _value_types(self, call_results, values, count: int, typer: ExprTyper, scope: Scope, pos: int):
        if call_results is not None and len(call_results) == count and len(values) == 1:
            return list(call_results)
        if len(values) == count:
            return [typer.type_of(v, scope, pos) for v in values]
        return [None] * count

    def _visit_assignment(self, stmt: Statement, node, scope: Scope, routine: Routine):
        self._visit_func_literals(node.child_by_field_name("right"), scope, routine)
        op_node = node.child_by_field_name("operator")
        if op_node is None:
            op_node = next((c for c in node.children if c.type == constants.ASSIGN_TOKEN), None)
        if op_node is None or self._text(op_node) != constants.ASSIGN_TOKEN:
            return
        stmt.assign = self._assign_view(node, Token.ASSIGN, op_node, self._typer(routine), scope)

    def _visit_var_decl(self, stmt: Statement, node, scope: Scope, routine: Routine):
        kind = BindingKind.CONST if node.type == "const_declaration" else BindingKind.VAR
        typer = self._typer(routine)
        for spec in _value_specs(node):
            value_node = spec.child_by_field_name("value")
            self._visit_func_literals(value_node, scope, routine)
            names = spec.children_by_field_name("name")
            declared = typer.builder.from_node(spec.child_by_field_name("type"))
            if declared is not None:
                types = [declared] * len(names)
            else:
                values = expression_list_items(value_node)
                call_results = None
                if len(values) == 1 and values[0].type == "call_expression":
                    call_results = typer.call_results(values[0], scope, spec.start_byte)
                types = self._value_types(call_results, values, len(names), typer, scope, spec.start_byte)
            for name_node, t in zip(names, types):
                name = self._text(name_node)
                if name == constants.BLANK_IDENTIFIER:
                    continue
                scope.declare(Binding(name=name, kind=kind, visible_from=spec.end_byte, type=t))

    def _visit_type_decl(self, stmt: Statement, node, scope: Scope, routine: Routine):
        for spec in node.named_children:
            name_node = spec.child_by_field_name("name")
            if name_node is None:
                continue
            name = self._text(name_node)
            scope.declare(
                Binding(
                    name=name,
                    kind=BindingKind.TYPE,
                    visible_from=name_node.start_byte,
                    type=named(name, self._package.path, text=name),
                )
            )

    def _visit_block(self, stmt: Statement, node, scope: Scope, routine: Routine):
        self._walk_list(node, self._new_scope(ScopeKind.BLOCK, scope, node), routine)

    def _visit_labeled(self, stmt: Statement, node, scope: Scope, routine: Routine):
        inner = next((c for c in node.named_children if c.type != "label_name"), None)
        self._register_simple(inner, scope, routine)

    def _visit_if(self, stmt: Statement, node, scope: Scope, routine: Routine):
        if_scope = self._new_scope(ScopeKind.IF, scope, node)
        self._register_simple(node.child_by_field_name("initializer"), if_scope, routine)
        self._visit_func_literals(node.child_by_field_name("condition"), if_scope, routine)
        consequence = node.child_by_field_name("consequence")
        if consequence is not None:
            self._walk_list(consequence, self._new_scope(ScopeKind.BLOCK, if_scope, consequence), routine)
        alternative = node.child_by_field_name("alternative")
        if alternative is None:
            return
        if alternative.type == "if_statement":
            nested = self._unit.add_statement(alternative, if_scope, routine, None)
            self._visit_if(nested, alternative, if_scope, routine)
        else:
            self._walk_list(alternative, self._new_scope(ScopeKind.BLOCK, if_scope, alternative), routine)

    def _visit_for(self, stmt: Statement, node, scope: Scope, routine: Routine):
        for_scope = self._new_scope(ScopeKind.FOR, scope, node)
        body = node.child_by_field_name("body")
        for child in node.named_children:
            if child.type == "for_clause":
                self._register_simple(child.child_by_field_name("initializer"), for_scope, routine)
                self._visit_func_literals(child.child_by_field_name("condition"), for_scope, routine)
                self._register_simple(child.child_by_field_name("update"), for_scope, routine)
            elif child.type == "range_clause":
                self._declare_range(child, for_scope, routine, body)
            elif body is None or node_key(child) != node_key(body):
                self._visit_func_literals(child, for_scope, routine)
        if body is not None:
            self._walk_list(body, self._new_scope(ScopeKind.BLOCK, for_scope, body), routine)

    def _declare_range(self, clause, scope: Scope, routine: Routine, body):
        right = clause.child_by_field_name("right")
        self._visit_func_literals(right, scope, routine)
        if not any(c.type == constants.DEFINE_TOKEN for c in clause.children):
            return
        ranged = self._registry.underlying(
            deref(self._typer(routine).type_of(right, scope, clause.start_byte))
        )
        element_types: list[GoType | None] = [None, None]
        if ranged is not None:
            if ranged.kind in (TypeKind.SLICE, TypeKind.ARRAY):
                element_types = [INT_TYPE, ranged.elem]
            elif ranged.kind == TypeKind.MAP:
                element_types = [ranged.key, ranged.elem]
            elif ranged.kind == TypeKind.CHAN:
                element_types = [ranged.elem, None]
            elif ranged.is_named(constants.STRING_TYPE_NAME):
                element_types = [INT_TYPE, RUNE_TYPE]
        visible_from = body.start_byte if body is not None else clause.end_byte
        for target, declared in zip(expression_list_items(clause.child_by_field_name("left")), element_types):
            if is_blank(target, self._source) or target.type != "identifier":
                continue
            scope.declare(
                Binding(name=self._text(target), kind=BindingKind.VAR, visible_from=visible_from, type=declared)
            )

    def _visit_switch(self, stmt: Statement, node, scope: Scope, routine: Routine):
        switch_scope = self._new_scope(ScopeKind.SWITCH, scope, node)
        self._register_simple(node.child_by_field_name("initializer"), switch_scope, routine)
        self._visit_func_literals(node.child_by_field_name("value"), switch_scope, routine)
        for clause in node.named_children:
            if clause.type in CASE_CLAUSE_TYPES:
                self._walk_case(clause, switch_scope, routine)

    def _visit_type_switch(self, stmt: Statement, node, scope: Scope, routine: Routine):
        switch_scope = self._new_scope(ScopeKind.SWITCH, scope, node)
        self._register_simple(node.child_by_field_name("initializer"), switch_scope, routine)
        value = node.child_by_field_name("value")
        self._visit_func_literals(value, switch_scope, routine)
        aliases = [
            self._text(n)
            for n in expression_list_items(node.child_by_field_name("alias"))
            if not is_blank(n, self._source)
        ]
        typer = self._typer(routine)
        for clause in node.named_children:
            if clause.type not in CASE_CLAUSE_TYPES:
                continue
            case_types = clause.children_by_field_name("type")
            declared = typer.builder.from_node(case_types[0]) if len(case_types) == 1 else None
            bindings = [
                Binding(name=a, kind=BindingKind.VAR, visible_from=clause.start_byte, type=declared)
                for a in aliases
            ]
            self._walk_case(clause, switch_scope, routine, bindings)

    def _visit_select(self, stmt: Statement, node, scope: Scope, routine: Routine):
        for clause in node.named_children:
            if clause.type not in CASE_CLAUSE_TYPES:
                continue
            bindings: list[Binding] = []
            communication = clause.child_by_field_name("communication")
            if communication is not None and any(
                c.type == constants.DEFINE_TOKEN for c in communication.children
            ):
                bindings = [
                    Binding(name=self._text(n), kind=BindingKind.VAR, visible_from=clause.start_byte)
                    for n in expression_list_items(communication.child_by_field_name("left"))
                    if not is_blank(n, self._source)
                ]
            self._walk_case(clause, scope, routine, bindings)

    def _walk_case(self, clause, parent: Scope, routine: Routine, bindings: list[Binding] | None = None):
        case_scope = self._new_scope(ScopeKind.CASE, parent, clause)
        for binding in bindings or []:
            case_scope.declare(binding)
        for field_name in ("value", "communication"):
            for header in clause.children_by_field_name(field_name):
                self._visit_func_literals(header, case_scope, routine)
        self._walk_list(clause, case_scope, routine)


def _value_specs(node) -> list:
    specs = []
    for child in node.named_children:
        if child.type in ("var_spec", "const_spec"):
            specs.append(child)
        elif child.type in ("var_spec_list", "const_spec_list"):
            specs.extend(c for c in child.named_children if c.type in ("var_spec", "const_spec"))
    return specs


def resolve_unit(
    path: str,
    source: bytes,
    tree,
    package: PackageIndex,
    registry: PackageRegistry,
    config: RewriteConfig | None = None,
) -> CompilationUnit:
    return Resolver(path, source, tree, package, registry, config).resolve()
