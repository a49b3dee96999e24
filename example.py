"""Example usage of the inheritance_sandbox library."""

from inheritance_sandbox import ClassParser, ClassRegistry, Dispatcher

# Define classes in Python: Car overrides go and builds on Vehicle's version
registry = ClassRegistry()
registry.define(
    "Vehicle",
    methods={
        "go": lambda ctx: "vrrrrrrrooom!",
        "fill_up_tank": lambda ctx: "filling up!",
    },
)
registry.define(
    "Car",
    parent="Vehicle",
    methods={"go": lambda ctx: ctx.super() + "VRRROOOOOOOOOOOOOOOOOOOOOOOM!!!!!"},
)

dispatcher = Dispatcher()
car = registry.instantiate("Car")
print("Ancestor chain:", " -> ".join(registry.ancestor_chain("Car").names))
for method_name in ("go", "fill_up_tank"):
    owner = dispatcher.resolve(car.class_def, method_name)
    print(f"{method_name} (from {owner.name}): {dispatcher.invoke(car, method_name)}")

# The same hierarchy written in the class DSL, with a field set by an initializer
source = """
class Vehicle {
    init(wheels) { self.wheels = wheels }
    def go() = "vrrrrrrrooom on " + self.wheels + " wheels"
}
class Truck(Vehicle) {
    def go() = super() + ", carefully"
}
"""
registry = ClassParser().parse(source)
truck = registry.instantiate("Truck", 18)
print(dispatcher.invoke(truck, "go"))
