"""Method resolution and invocation along a class's ancestor chain.

Resolution starts at a class (the instance's own class unless told
otherwise), walks parent links toward the root, and stops at the first class
that defines the method itself. A delegated call made from inside a method
body resumes that walk at the parent of the class whose body is running, so
a subclass can build on its parent's result instead of replacing it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from inheritance_sandbox.classes import ClassDefinition, check_arity
from inheritance_sandbox.errors import NoMethodError
from inheritance_sandbox.instance import Instance

logger = logging.getLogger(__name__)


@dataclass
class MethodContext:
    """What a running method body knows about its own invocation.

    Passed as the first argument to every method body.
    """

    dispatcher: Dispatcher
    instance: Instance
    method_name: str
    defining_class: ClassDefinition

    @property
    def fields(self) -> dict[str, Any]:
        return self.instance.fields

    def super(self, *args: Any) -> Any:
        """Invoke this method as defined further up the ancestor chain.

        Raises:
            NoMethodError: If no ancestor above ``defining_class`` defines it.
        """
        parent = self.defining_class.parent
        if parent is None:
            logger.debug(
                "delegated call to %s from root class %s",
                self.method_name,
                self.defining_class.name,
            )
            raise NoMethodError(self.method_name, self.defining_class.name, above=True)
        logger.debug(
            "delegating %s from %s to %s",
            self.method_name,
            self.defining_class.name,
            parent.name,
        )
        return self.dispatcher.invoke(
            self.instance, self.method_name, *args, start_class=parent
        )

    def invoke(self, method_name: str, *args: Any) -> Any:
        """Call another method on the same instance, resolved from its own class."""
        return self.dispatcher.invoke(self.instance, method_name, *args)


class Dispatcher:
    """Resolves method names to bodies and runs them."""

    def resolve(self, start_class: ClassDefinition, method_name: str) -> ClassDefinition:
        """Find the first class on the chain from ``start_class`` defining ``method_name``.

        Raises:
            NoMethodError: If no class on the chain defines it.
        """
        for class_def in start_class.ancestors():
            if class_def.defines(method_name):
                return class_def
        raise NoMethodError(method_name, start_class.name)

    def invoke(
        self,
        instance: Instance,
        method_name: str,
        *args: Any,
        start_class: ClassDefinition | None = None,
    ) -> Any:
        """Invoke ``method_name`` on ``instance`` with ``args``.

        Args:
            instance: The receiver.
            method_name: Name of the method to resolve.
            *args: Arguments passed to the body after its context.
            start_class: Class to start resolution at. Defaults to the
                instance's own class.

        Returns:
            Whatever the resolved body returns.

        Raises:
            NoMethodError: If no class on the searched chain defines the method.
            ArityError: If ``args`` do not fit the body's parameters.
        """
        if start_class is None:
            start_class = instance.class_def

        defining_class = self.resolve(start_class, method_name)
        logger.debug(
            "resolved %s.%s to %s (searched from %s)",
            instance.class_def.name,
            method_name,
            defining_class.name,
            start_class.name,
        )

        body = defining_class.methods[method_name]
        ctx = MethodContext(
            dispatcher=self,
            instance=instance,
            method_name=method_name,
            defining_class=defining_class,
        )
        check_arity(body, f"{defining_class.name}.{method_name}()", ctx, args)
        return body(ctx, *args)
