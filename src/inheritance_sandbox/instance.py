"""Instances of registered classes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from inheritance_sandbox.classes import ClassDefinition


@dataclass(eq=False)
class Instance:
    """An object constructed from a ClassDefinition.

    The instance keeps a reference to the class it was constructed from and
    a mutable mapping of field values. Method bodies read and write
    ``fields`` directly.
    """

    class_def: ClassDefinition
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def class_name(self) -> str:
        return self.class_def.name

    def is_instance_of(self, class_name: str) -> bool:
        """Return whether the named class is on this instance's ancestor chain."""
        return any(c.name == class_name for c in self.class_def.ancestors())

    def __repr__(self) -> str:
        return f"Instance({self.class_def.name!r}, {self.fields!r})"
