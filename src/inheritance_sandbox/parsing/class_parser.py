"""Parser for the class definition DSL."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union

import ply.yacc as yacc

from inheritance_sandbox.classes import ClassRegistry
from inheritance_sandbox.errors import DuplicateClassError, UnknownParentError
from inheritance_sandbox.parsing.class_lexer import ClassLexer

logger = logging.getLogger(__name__)


# --- Expression nodes ---


@dataclass
class Literal:
    """A string or integer constant."""

    value: str | int


@dataclass
class Name:
    """A reference to a parameter of the enclosing method or initializer."""

    name: str


@dataclass
class FieldRef:
    """``self.field`` read."""

    name: str


@dataclass
class SelfCall:
    """``self.method(args)`` call, resolved from the instance's own class."""

    method_name: str
    args: list[Expr] = field(default_factory=list)


@dataclass
class SuperCall:
    """``super(args)`` delegated call."""

    args: list[Expr] = field(default_factory=list)


@dataclass
class Concat:
    """``left + right``."""

    left: Expr
    right: Expr


Expr = Union[Literal, Name, FieldRef, SelfCall, SuperCall, Concat]


# --- Class specs ---


@dataclass
class MethodSpec:
    """``def name(params) = body``."""

    name: str
    params: list[str]
    body: Expr
    lineno: int = 0


@dataclass
class FieldAssignment:
    """``self.field = value`` inside an initializer."""

    field_name: str
    value: Expr


@dataclass
class InitSpec:
    """``init(params) { assignments }``."""

    params: list[str]
    assignments: list[FieldAssignment]
    lineno: int = 0


@dataclass
class ClassSpec:
    """Specification for a class before registration."""

    name: str
    parent: str | None
    members: list[MethodSpec | InitSpec] = field(default_factory=list)
    lineno: int = 0

    @property
    def methods(self) -> list[MethodSpec]:
        return [m for m in self.members if isinstance(m, MethodSpec)]

    @property
    def inits(self) -> list[InitSpec]:
        return [m for m in self.members if isinstance(m, InitSpec)]


class ClassParser:
    """Parser for the class definition DSL."""

    tokens = ClassLexer.tokens

    # Operator precedence
    precedence = (
        ("left", "PLUS"),
    )

    def __init__(self) -> None:
        self.lexer = ClassLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self.registry: ClassRegistry = ClassRegistry()
        self._specs: list[ClassSpec] = []

    def p_program(self, p: yacc.YaccProduction) -> None:
        """program : class_list"""
        p[0] = p[1]

    def p_program_empty(self, p: yacc.YaccProduction) -> None:
        """program : empty"""
        p[0] = []

    def p_class_list_single(self, p: yacc.YaccProduction) -> None:
        """class_list : class_def"""
        p[0] = [p[1]]

    def p_class_list_multiple(self, p: yacc.YaccProduction) -> None:
        """class_list : class_list class_def"""
        p[0] = p[1] + [p[2]]

    def p_class_def_root(self, p: yacc.YaccProduction) -> None:
        """class_def : CLASS IDENTIFIER class_body"""
        p[0] = ClassSpec(name=p[2], parent=None, members=p[3], lineno=p.lineno(1))

    def p_class_def_child(self, p: yacc.YaccProduction) -> None:
        """class_def : CLASS IDENTIFIER LPAREN IDENTIFIER RPAREN class_body"""
        p[0] = ClassSpec(name=p[2], parent=p[4], members=p[6], lineno=p.lineno(1))

    def p_class_body(self, p: yacc.YaccProduction) -> None:
        """class_body : LBRACE member_list RBRACE"""
        p[0] = p[2]

    def p_class_body_empty(self, p: yacc.YaccProduction) -> None:
        """class_body : LBRACE RBRACE"""
        p[0] = []

    def p_member_list_single(self, p: yacc.YaccProduction) -> None:
        """member_list : member"""
        p[0] = [p[1]]

    def p_member_list_multiple(self, p: yacc.YaccProduction) -> None:
        """member_list : member_list member"""
        p[0] = p[1] + [p[2]]

    def p_member_method(self, p: yacc.YaccProduction) -> None:
        """member : DEF IDENTIFIER LPAREN params RPAREN EQUALS expr"""
        p[0] = MethodSpec(name=p[2], params=p[4], body=p[7], lineno=p.lineno(1))

    def p_member_init(self, p: yacc.YaccProduction) -> None:
        """member : INIT LPAREN params RPAREN LBRACE assignment_list RBRACE"""
        p[0] = InitSpec(params=p[3], assignments=p[6], lineno=p.lineno(1))

    def p_member_init_empty(self, p: yacc.YaccProduction) -> None:
        """member : INIT LPAREN params RPAREN LBRACE RBRACE"""
        p[0] = InitSpec(params=p[3], assignments=[], lineno=p.lineno(1))

    def p_param_list(self, p: yacc.YaccProduction) -> None:
        """param_list : IDENTIFIER
                      | param_list COMMA IDENTIFIER"""
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1] + [p[3]]

    def p_params(self, p: yacc.YaccProduction) -> None:
        """params : param_list"""
        p[0] = p[1]

    def p_params_empty(self, p: yacc.YaccProduction) -> None:
        """params : empty"""
        p[0] = []

    def p_assignment_list(self, p: yacc.YaccProduction) -> None:
        """assignment_list : assignment
                           | assignment_list assignment"""
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1] + [p[2]]

    def p_assignment(self, p: yacc.YaccProduction) -> None:
        """assignment : SELF DOT IDENTIFIER EQUALS expr"""
        p[0] = FieldAssignment(field_name=p[3], value=p[5])

    def p_expr_concat(self, p: yacc.YaccProduction) -> None:
        """expr : expr PLUS expr"""
        p[0] = Concat(left=p[1], right=p[3])

    def p_expr_group(self, p: yacc.YaccProduction) -> None:
        """expr : LPAREN expr RPAREN"""
        p[0] = p[2]

    def p_expr_literal(self, p: yacc.YaccProduction) -> None:
        """expr : STRING
                | INTEGER"""
        p[0] = Literal(value=p[1])

    def p_expr_name(self, p: yacc.YaccProduction) -> None:
        """expr : IDENTIFIER"""
        p[0] = Name(name=p[1])

    def p_expr_field(self, p: yacc.YaccProduction) -> None:
        """expr : SELF DOT IDENTIFIER"""
        p[0] = FieldRef(name=p[3])

    def p_expr_self_call(self, p: yacc.YaccProduction) -> None:
        """expr : SELF DOT IDENTIFIER LPAREN call_args RPAREN"""
        p[0] = SelfCall(method_name=p[3], args=p[5])

    def p_expr_super_call(self, p: yacc.YaccProduction) -> None:
        """expr : SUPER LPAREN call_args RPAREN"""
        p[0] = SuperCall(args=p[3])

    def p_arg_list(self, p: yacc.YaccProduction) -> None:
        """arg_list : expr
                    | arg_list COMMA expr"""
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1] + [p[3]]

    def p_call_args(self, p: yacc.YaccProduction) -> None:
        """call_args : arg_list"""
        p[0] = p[1]

    def p_call_args_empty(self, p: yacc.YaccProduction) -> None:
        """call_args : empty"""
        p[0] = []

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""
        p[0] = None

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse_specs(self, data: str) -> list[ClassSpec]:
        """Parse class definitions into unregistered specs."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self.lexer.lexer.lineno = 1
        specs = self.parser.parse(data, lexer=self.lexer.lexer)
        if specs is None:
            specs = []
        return specs

    def parse(self, data: str, registry: ClassRegistry | None = None) -> ClassRegistry:
        """Parse class definitions and return a populated ClassRegistry.

        Args:
            data: DSL source text.
            registry: Existing registry to add the classes to. Classes in
                ``data`` may extend classes already in it.

        Returns:
            The registry holding the parsed classes.
        """
        self.registry = registry if registry is not None else ClassRegistry()
        self._specs = self.parse_specs(data)

        # Resolve specs into class definitions
        self._resolve_specs()

        return self.registry

    def _resolve_specs(self) -> None:
        """Register all specs, parents before children.

        Classes may be written in any order. The full registration order is
        worked out and checked first, so a failing source leaves the registry
        exactly as it was.
        """
        # bodies imports the node classes from this module
        from inheritance_sandbox.bodies import make_initializer, make_method

        seen: set[str] = set()
        for spec in self._specs:
            if spec.name in seen or spec.name in self.registry:
                raise DuplicateClassError(spec.name)
            seen.add(spec.name)
            self._check_members(spec)

        ordered = self._registration_order()

        for spec in ordered:
            methods = {m.name: make_method(spec.name, m) for m in spec.methods}
            inits = spec.inits
            initializer = make_initializer(spec.name, inits[0]) if inits else None
            self.registry.define(
                spec.name,
                parent=spec.parent,
                methods=methods,
                initializer=initializer,
            )
        logger.debug("registered %d classes", len(ordered))

    def _registration_order(self) -> list[ClassSpec]:
        """Order specs so every parent comes before its children.

        Raises:
            UnknownParentError: If a parent is neither registered nor in the source.
            ValueError: If the parents of the remaining classes form a cycle.
        """
        known = set(self.registry.list_classes())
        ordered: list[ClassSpec] = []
        unresolved = list(self._specs)

        while unresolved:
            still_unresolved: list[ClassSpec] = []
            for spec in unresolved:
                if spec.parent is not None and spec.parent not in known:
                    # Parent not yet placed
                    still_unresolved.append(spec)
                    continue
                ordered.append(spec)
                known.add(spec.name)

            if len(still_unresolved) == len(unresolved):
                break
            unresolved = still_unresolved

        if unresolved:
            pending = {s.name for s in unresolved}
            for spec in unresolved:
                if spec.parent not in pending:
                    raise UnknownParentError(spec.name, spec.parent)  # type: ignore[arg-type]
            raise ValueError(f"Cyclic inheritance among classes: {sorted(pending)}")

        return ordered

    def _check_members(self, spec: ClassSpec) -> None:
        """Reject duplicate methods, repeated initializers and repeated parameters."""
        if len(spec.inits) > 1:
            raise ValueError(
                f"Class '{spec.name}' has more than one initializer "
                f"(line {spec.inits[1].lineno})"
            )

        names: set[str] = set()
        for method in spec.methods:
            if method.name in names:
                raise ValueError(
                    f"Method '{method.name}' is defined twice in class '{spec.name}' "
                    f"(line {method.lineno})"
                )
            names.add(method.name)

        for member in spec.members:
            if len(set(member.params)) != len(member.params):
                label = member.name if isinstance(member, MethodSpec) else "init"
                raise ValueError(
                    f"Repeated parameter name in '{spec.name}.{label}' (line {member.lineno})"
                )
