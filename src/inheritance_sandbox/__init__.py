"""Inheritance Sandbox - method resolution and parent delegation for a toy class model."""

from inheritance_sandbox.classes import AncestorChain, ClassDefinition, ClassRegistry
from inheritance_sandbox.dispatcher import Dispatcher, MethodContext
from inheritance_sandbox.errors import (
    ArityError,
    DuplicateClassError,
    EvaluationError,
    NoMethodError,
    SandboxError,
    UnknownClassError,
    UnknownParentError,
)
from inheritance_sandbox.instance import Instance
from inheritance_sandbox.parsing import ClassParser

__all__ = [
    # Main API
    "ClassRegistry",
    "Dispatcher",
    "ClassParser",
    # Object model
    "ClassDefinition",
    "AncestorChain",
    "Instance",
    "MethodContext",
    # Errors
    "SandboxError",
    "DuplicateClassError",
    "UnknownParentError",
    "UnknownClassError",
    "ArityError",
    "NoMethodError",
    "EvaluationError",
]

__version__ = "0.1.0"
