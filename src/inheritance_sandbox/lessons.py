"""The Vehicle/Car inheritance lessons, written in the class DSL."""

from __future__ import annotations

from inheritance_sandbox.classes import ClassRegistry
from inheritance_sandbox.parsing import ClassParser

VEHICLE = """
class Vehicle {
    def go() = "vrrrrrrrooom!"
    def fill_up_tank() = "filling up!"
}
"""

# Car inherits everything from Vehicle.
INHERIT = VEHICLE + """
class Car(Vehicle) {}
"""

# Car replaces Vehicle's go.
OVERRIDE = VEHICLE + """
class Car(Vehicle) {
    def go() = "VRRROOOOOOOOOOOOOOOOOOOOOOOM!!!!!"
}
"""

# Car builds on Vehicle's go.
SUPER = VEHICLE + """
class Car(Vehicle) {
    def go() = super() + "VRRROOOOOOOOOOOOOOOOOOOOOOOM!!!!!"
}
"""

LESSONS: dict[str, str] = {
    "inherit": INHERIT,
    "override": OVERRIDE,
    "super": SUPER,
}


def load_lesson(name: str) -> ClassRegistry:
    """Parse the named lesson into a fresh registry."""
    if name not in LESSONS:
        raise KeyError(f"Unknown lesson '{name}'; choose from {sorted(LESSONS)}")
    return ClassParser().parse(LESSONS[name])
