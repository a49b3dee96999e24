"""Class definitions and the registry that holds class hierarchies."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from inheritance_sandbox.errors import (
    ArityError,
    DuplicateClassError,
    UnknownClassError,
    UnknownParentError,
)
from inheritance_sandbox.instance import Instance

logger = logging.getLogger(__name__)


MethodBody = Callable[..., Any]
Initializer = Callable[..., None]


@dataclass(eq=False)
class ClassDefinition:
    """A named class with an optional parent, own methods and an initializer.

    ``methods`` holds only the methods this class defines itself. Inherited
    methods are found by walking the ancestor chain, never copied down.
    """

    name: str
    parent: ClassDefinition | None = None
    methods: dict[str, MethodBody] = field(default_factory=dict)
    initializer: Initializer | None = None

    @property
    def is_root(self) -> bool:
        """Return whether this class sits at the top of its hierarchy."""
        return self.parent is None

    def defines(self, method_name: str) -> bool:
        """Return whether this class defines ``method_name`` itself."""
        return method_name in self.methods

    def ancestors(self) -> AncestorChain:
        """Return the chain from this class up to the root."""
        return AncestorChain(self)

    def effective_methods(self) -> dict[str, ClassDefinition]:
        """Map each callable method name to the class whose body runs for it."""
        result: dict[str, ClassDefinition] = {}
        for class_def in self.ancestors():
            for name in class_def.methods:
                result.setdefault(name, class_def)
        return result

    def __repr__(self) -> str:
        parent = self.parent.name if self.parent is not None else None
        return f"ClassDefinition({self.name!r}, parent={parent!r})"


class AncestorChain:
    """Ordered classes from a starting class to the root, following parents.

    Iteration follows parent links on demand, and every ``iter()`` starts
    again from the first class, so a chain can be walked any number of times.
    """

    def __init__(self, start: ClassDefinition) -> None:
        self.start = start

    def __iter__(self) -> Iterator[ClassDefinition]:
        current: ClassDefinition | None = self.start
        while current is not None:
            yield current
            current = current.parent

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __contains__(self, item: object) -> bool:
        return any(class_def is item for class_def in self)

    @property
    def names(self) -> list[str]:
        """Return the class names along the chain."""
        return [class_def.name for class_def in self]

    @property
    def root(self) -> ClassDefinition:
        """Return the last class of the chain (the one with no parent)."""
        last = self.start
        for class_def in self:
            last = class_def
        return last

    def __repr__(self) -> str:
        return f"AncestorChain({' -> '.join(self.names)})"


def _count_parameters(func: Callable[..., Any]) -> int | None:
    """Return the number of positional parameters after the receiver.

    Returns None when the callable accepts a variable number of arguments
    or its signature cannot be inspected.
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    count = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return max(count - 1, 0)


def check_arity(func: Callable[..., Any], target: str, receiver: Any, args: tuple[Any, ...]) -> None:
    """Raise ArityError unless ``func(receiver, *args)`` binds."""
    try:
        inspect.signature(func).bind(receiver, *args)
    except TypeError:
        raise ArityError(target, _count_parameters(func), len(args)) from None
    except ValueError:
        # Builtins without an introspectable signature are called as-is.
        return


class ClassRegistry:
    """Registry of all defined classes."""

    def __init__(self) -> None:
        self._classes: dict[str, ClassDefinition] = {}

    def define(
        self,
        name: str,
        parent: str | None = None,
        methods: dict[str, MethodBody] | None = None,
        initializer: Initializer | None = None,
    ) -> ClassDefinition:
        """Register a new class.

        Args:
            name: Unique class name.
            parent: Name of an already registered parent class, or None for a root.
            methods: Method name to body. Bodies are called as ``body(ctx, *args)``.
            initializer: Called as ``initializer(instance, *args)`` on instantiation.

        Returns:
            The new ClassDefinition.

        Raises:
            DuplicateClassError: If ``name`` is already registered.
            UnknownParentError: If ``parent`` is given but not registered.
        """
        if name in self._classes:
            raise DuplicateClassError(name)

        parent_def: ClassDefinition | None = None
        if parent is not None:
            parent_def = self._classes.get(parent)
            if parent_def is None:
                raise UnknownParentError(name, parent)

        class_def = ClassDefinition(
            name=name,
            parent=parent_def,
            methods=dict(methods or {}),
            initializer=initializer,
        )
        self._classes[name] = class_def
        logger.debug(
            "defined class %s (parent=%s, methods=%s)",
            name,
            parent,
            sorted(class_def.methods),
        )
        return class_def

    def get(self, name: str) -> ClassDefinition | None:
        """Get a class by name."""
        return self._classes.get(name)

    def get_or_raise(self, name: str) -> ClassDefinition:
        """Get a class by name, raising if not found."""
        class_def = self._classes.get(name)
        if class_def is None:
            raise UnknownClassError(name)
        return class_def

    def ancestor_chain(self, name: str) -> AncestorChain:
        """Return the ancestor chain starting at the named class."""
        return self.get_or_raise(name).ancestors()

    def instantiate(self, name: str, *args: Any) -> Instance:
        """Create an instance of the named class.

        The nearest initializer on the ancestor chain (own class first) runs
        with the new instance and ``args``. With no initializer anywhere on
        the chain, no arguments are accepted.

        Raises:
            UnknownClassError: If the class is not registered.
            ArityError: If ``args`` do not fit the initializer's parameters.
        """
        class_def = self.get_or_raise(name)
        instance = Instance(class_def=class_def)

        initializer_owner = next(
            (c for c in class_def.ancestors() if c.initializer is not None), None
        )
        if initializer_owner is None:
            if args:
                raise ArityError(f"{name}()", 0, len(args))
            logger.debug("instantiated %s without initializer", name)
            return instance

        init = initializer_owner.initializer
        check_arity(init, f"{initializer_owner.name} initializer", instance, args)
        logger.debug("instantiating %s using initializer of %s", name, initializer_owner.name)
        init(instance, *args)
        return instance

    def subclasses(self, name: str) -> list[ClassDefinition]:
        """Return the classes whose direct parent is the named class."""
        class_def = self.get_or_raise(name)
        return [c for c in self._classes.values() if c.parent is class_def]

    def leaves(self) -> list[ClassDefinition]:
        """Return classes that no other class extends, in definition order."""
        parents = {id(c.parent) for c in self._classes.values() if c.parent is not None}
        return [c for c in self._classes.values() if id(c) not in parents]

    def list_classes(self) -> list[str]:
        """List all registered class names in definition order."""
        return list(self._classes.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._classes

    def __len__(self) -> int:
        return len(self._classes)

    def __iter__(self) -> Iterator[ClassDefinition]:
        return iter(self._classes.values())
