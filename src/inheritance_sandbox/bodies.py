"""Turn parsed DSL members into callables the registry and dispatcher run."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable

from inheritance_sandbox.dispatcher import Dispatcher, MethodContext
from inheritance_sandbox.errors import EvaluationError
from inheritance_sandbox.instance import Instance
from inheritance_sandbox.parsing.class_parser import (
    Concat,
    Expr,
    FieldRef,
    InitSpec,
    Literal,
    MethodSpec,
    Name,
    SelfCall,
    SuperCall,
)

# Name of the receiver parameter in generated signatures.
_RECEIVER = "__receiver"


@dataclass
class Scope:
    """Names visible while evaluating one method or initializer body."""

    instance: Instance
    params: dict[str, Any]
    where: str
    ctx: MethodContext | None = None


def evaluate(expr: Expr, scope: Scope) -> Any:
    """Evaluate an expression node."""
    if isinstance(expr, Literal):
        return expr.value

    if isinstance(expr, Name):
        if expr.name not in scope.params:
            raise EvaluationError(f"Unknown name '{expr.name}' in {scope.where}")
        return scope.params[expr.name]

    if isinstance(expr, FieldRef):
        fields = scope.instance.fields
        if expr.name not in fields:
            raise EvaluationError(
                f"Field '{expr.name}' is not set on {scope.instance.class_def.name} "
                f"instance (in {scope.where})"
            )
        return fields[expr.name]

    if isinstance(expr, SelfCall):
        args = [evaluate(a, scope) for a in expr.args]
        if scope.ctx is not None:
            return scope.ctx.invoke(expr.method_name, *args)
        return Dispatcher().invoke(scope.instance, expr.method_name, *args)

    if isinstance(expr, SuperCall):
        if scope.ctx is None:
            raise EvaluationError(f"super() is only available inside methods ({scope.where})")
        args = [evaluate(a, scope) for a in expr.args]
        return scope.ctx.super(*args)

    if isinstance(expr, Concat):
        left = evaluate(expr.left, scope)
        right = evaluate(expr.right, scope)
        if isinstance(left, str) or isinstance(right, str):
            return f"{left}{right}"
        return left + right

    raise TypeError(f"Unknown expression node: {type(expr).__name__}")


def _signature(params: list[str]) -> inspect.Signature:
    """Build a signature of a receiver followed by ``params``."""
    names = [_RECEIVER] + params
    return inspect.Signature(
        [inspect.Parameter(n, inspect.Parameter.POSITIONAL_OR_KEYWORD) for n in names]
    )


def make_method(class_name: str, spec: MethodSpec) -> Callable[..., Any]:
    """Build a method body: ``body(ctx, *args)`` evaluating ``spec.body``."""
    where = f"{class_name}.{spec.name}()"

    def body(ctx: MethodContext, *args: Any) -> Any:
        scope = Scope(
            instance=ctx.instance,
            params=dict(zip(spec.params, args)),
            where=where,
            ctx=ctx,
        )
        return evaluate(spec.body, scope)

    body.__name__ = spec.name
    body.__qualname__ = f"{class_name}.{spec.name}"
    body.__signature__ = _signature(spec.params)  # type: ignore[attr-defined]
    return body


def make_initializer(class_name: str, spec: InitSpec) -> Callable[..., None]:
    """Build an initializer: ``init(instance, *args)`` running each field assignment in order."""
    where = f"{class_name} initializer"

    def init(instance: Instance, *args: Any) -> None:
        scope = Scope(instance=instance, params=dict(zip(spec.params, args)), where=where)
        for assignment in spec.assignments:
            instance.fields[assignment.field_name] = evaluate(assignment.value, scope)

    init.__name__ = "init"
    init.__qualname__ = f"{class_name}.init"
    init.__signature__ = _signature(spec.params)  # type: ignore[attr-defined]
    return init
