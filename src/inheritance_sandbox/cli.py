"""Command line entry point: build a lesson's classes and call methods on an instance."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

from inheritance_sandbox.classes import ClassRegistry
from inheritance_sandbox.dispatcher import Dispatcher
from inheritance_sandbox.errors import SandboxError
from inheritance_sandbox.lessons import LESSONS, load_lesson
from inheritance_sandbox.parsing import ClassParser

logger = logging.getLogger(__name__)

DEFAULT_METHODS = ["go", "fill_up_tank"]


def _coerce_arg(value: str) -> Any:
    """Turn a command line argument into an int when it looks like one."""
    try:
        return int(value)
    except ValueError:
        return value


def load_registry(lesson: str, file_path: Path | None = None) -> ClassRegistry:
    """Load classes from a DSL file, or from a built-in lesson."""
    if file_path is not None:
        return ClassParser().parse(file_path.read_text())
    return load_lesson(lesson)


def default_class(registry: ClassRegistry) -> str:
    """Return the most recently defined class that nothing extends."""
    leaves = registry.leaves()
    if not leaves:
        raise SandboxError("No classes defined")
    return leaves[-1].name


def run(
    registry: ClassRegistry,
    class_name: str,
    methods: list[str],
    ctor_args: list[Any],
    show_chain: bool = False,
    out: TextIO | None = None,
) -> None:
    """Instantiate ``class_name`` and write the result of each method call.

    Raises:
        SandboxError: On any instantiation or resolution failure.
    """
    if out is None:
        out = sys.stdout

    if show_chain:
        chain = registry.ancestor_chain(class_name)
        print(" -> ".join(chain.names), file=out)

    try:
        instance = registry.instantiate(class_name, *ctor_args)
    except RecursionError:
        raise SandboxError(f"initializer of class '{class_name}' recursed too deeply") from None
    dispatcher = Dispatcher()
    for method_name in methods:
        try:
            result = dispatcher.invoke(instance, method_name)
        except RecursionError:
            raise SandboxError(
                f"method '{method_name}' on class '{class_name}' recursed too deeply"
            ) from None
        print(result, file=out)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Show which class's method runs for a Vehicle/Car instance"
    )
    arg_parser.add_argument(
        "args",
        nargs="*",
        help="Constructor arguments for the instantiated class",
    )
    arg_parser.add_argument(
        "-l", "--lesson",
        choices=sorted(LESSONS),
        default="super",
        help="Built-in lesson to load (default: super)",
    )
    arg_parser.add_argument(
        "-f", "--file",
        type=Path,
        help="Load classes from a class definition file instead of a lesson",
    )
    arg_parser.add_argument(
        "-c", "--class",
        dest="class_name",
        help="Class to instantiate (default: the last class nothing extends)",
    )
    arg_parser.add_argument(
        "-m", "--method",
        dest="methods",
        action="append",
        help="Method to call; may be repeated (default: go, fill_up_tank)",
    )
    arg_parser.add_argument(
        "--chain",
        action="store_true",
        help="Print the ancestor chain of the class before calling methods",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log class definition and method resolution steps to stderr",
    )

    args = arg_parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.file and not args.file.exists():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        return 1

    try:
        registry = load_registry(args.lesson, args.file)
    except SyntaxError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        return 1
    except (SandboxError, ValueError, OSError) as e:
        print(f"Error loading classes: {e}", file=sys.stderr)
        return 1

    methods = args.methods or DEFAULT_METHODS
    ctor_args = [_coerce_arg(a) for a in args.args]

    try:
        class_name = args.class_name or default_class(registry)
        logger.debug("instantiating %s with %r", class_name, ctor_args)
        run(registry, class_name, methods, ctor_args, show_chain=args.chain)
    except SandboxError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
