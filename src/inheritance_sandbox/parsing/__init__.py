"""Parsing module for the class definition DSL."""

from inheritance_sandbox.parsing.class_parser import (
    ClassParser,
    ClassSpec,
    InitSpec,
    MethodSpec,
)

__all__ = [
    "ClassParser",
    "ClassSpec",
    "InitSpec",
    "MethodSpec",
]
