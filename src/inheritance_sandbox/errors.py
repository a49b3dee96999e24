"""Exceptions raised by the class registry, dispatcher and class DSL."""

from __future__ import annotations


class SandboxError(Exception):
    """Base class for all inheritance_sandbox errors."""


class DuplicateClassError(SandboxError, ValueError):
    """A class with this name is already registered."""

    def __init__(self, class_name: str) -> None:
        self.class_name = class_name
        super().__init__(f"Class '{class_name}' is already defined")


class UnknownParentError(SandboxError, LookupError):
    """A class names a parent that has not been registered."""

    def __init__(self, class_name: str, parent_name: str) -> None:
        self.class_name = class_name
        self.parent_name = parent_name
        super().__init__(
            f"Class '{class_name}' extends unknown parent class '{parent_name}'"
        )


class UnknownClassError(SandboxError, LookupError):
    """No class with this name is registered."""

    def __init__(self, class_name: str) -> None:
        self.class_name = class_name
        super().__init__(f"Class '{class_name}' not found")


class ArityError(SandboxError, TypeError):
    """Arguments do not match the parameter count of an initializer or method."""

    def __init__(self, target: str, expected: int | None, given: int) -> None:
        self.target = target
        self.expected = expected
        self.given = given
        if expected is None:
            message = f"{target} does not accept {given} argument(s)"
        else:
            message = f"{target} takes {expected} argument(s) but {given} were given"
        super().__init__(message)


class NoMethodError(SandboxError, AttributeError):
    """No class on the searched ancestor chain defines the method."""

    def __init__(self, method_name: str, class_name: str, above: bool = False) -> None:
        self.method_name = method_name
        self.class_name = class_name
        if above:
            message = f"no method '{method_name}' found above root class '{class_name}'"
        else:
            message = (
                f"no method '{method_name}' found on class '{class_name}' "
                "or its ancestors"
            )
        super().__init__(message)


class EvaluationError(SandboxError):
    """A DSL method body referenced a name or field that does not exist."""
