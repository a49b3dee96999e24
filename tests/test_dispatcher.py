"""Tests for method resolution and delegated calls."""

import pytest

from inheritance_sandbox.classes import ClassRegistry
from inheritance_sandbox.dispatcher import Dispatcher, MethodContext
from inheritance_sandbox.errors import ArityError, NoMethodError

VROOM = "vrrrrrrrooom!"
LOUD_VROOM = "VRRROOOOOOOOOOOOOOOOOOOOOOOM!!!!!"


@pytest.fixture
def dispatcher():
    return Dispatcher()


def make_vehicle(reg: ClassRegistry) -> None:
    reg.define(
        "Vehicle",
        methods={
            "go": lambda ctx: VROOM,
            "fill_up_tank": lambda ctx: "filling up!",
        },
    )


class TestResolution:
    """Tests for which class's body runs."""

    def test_inherited_methods(self, dispatcher):
        reg = ClassRegistry()
        make_vehicle(reg)
        reg.define("Car", parent="Vehicle")
        car = reg.instantiate("Car")

        assert dispatcher.invoke(car, "go") == VROOM
        assert dispatcher.invoke(car, "fill_up_tank") == "filling up!"

    def test_override_selects_subclass_body(self, dispatcher):
        reg = ClassRegistry()
        make_vehicle(reg)
        reg.define("Car", parent="Vehicle", methods={"go": lambda ctx: LOUD_VROOM})

        assert dispatcher.invoke(reg.instantiate("Car"), "go") == LOUD_VROOM
        assert dispatcher.invoke(reg.instantiate("Car"), "fill_up_tank") == "filling up!"
        # Vehicle instances are unaffected
        assert dispatcher.invoke(reg.instantiate("Vehicle"), "go") == VROOM

    def test_resolve_returns_defining_class(self, dispatcher):
        reg = ClassRegistry()
        make_vehicle(reg)
        reg.define("Car", parent="Vehicle", methods={"go": lambda ctx: LOUD_VROOM})
        car = reg.get_or_raise("Car")

        assert dispatcher.resolve(car, "go").name == "Car"
        assert dispatcher.resolve(car, "fill_up_tank").name == "Vehicle"

    def test_skips_intermediate_class_without_method(self, dispatcher):
        reg = ClassRegistry()
        make_vehicle(reg)
        reg.define("Car", parent="Vehicle")
        reg.define("SportsCar", parent="Car")

        assert dispatcher.resolve(reg.get_or_raise("SportsCar"), "go").name == "Vehicle"

    def test_start_class(self, dispatcher):
        """Resolution may start above the instance's own class."""
        reg = ClassRegistry()
        make_vehicle(reg)
        reg.define("Car", parent="Vehicle", methods={"go": lambda ctx: LOUD_VROOM})
        car = reg.instantiate("Car")

        result = dispatcher.invoke(car, "go", start_class=reg.get_or_raise("Vehicle"))
        assert result == VROOM

    def test_resolution_is_deterministic(self, dispatcher):
        reg = ClassRegistry()
        make_vehicle(reg)
        reg.define("Car", parent="Vehicle", methods={"go": lambda ctx: LOUD_VROOM})
        car = reg.instantiate("Car")

        results = [dispatcher.invoke(car, "go") for _ in range(3)]
        assert results == [LOUD_VROOM] * 3

    def test_unknown_method(self, dispatcher):
        reg = ClassRegistry()
        make_vehicle(reg)
        reg.define("Car", parent="Vehicle")
        car = reg.instantiate("Car")

        with pytest.raises(NoMethodError, match="no method 'honk' found on class 'Car'") as exc_info:
            dispatcher.invoke(car, "honk")
        assert exc_info.value.method_name == "honk"
        assert exc_info.value.class_name == "Car"

    def test_unknown_method_is_attribute_error(self, dispatcher):
        reg = ClassRegistry()
        make_vehicle(reg)
        with pytest.raises(AttributeError):
            dispatcher.invoke(reg.instantiate("Vehicle"), "honk")


class TestMethodContext:
    """Tests for what a method body receives."""

    def test_context_contents(self, dispatcher):
        seen = {}

        def go(ctx):
            seen["ctx"] = ctx
            return "go"

        reg = ClassRegistry()
        reg.define("Vehicle", methods={"go": go})
        reg.define("Car", parent="Vehicle")
        car = reg.instantiate("Car")
        dispatcher.invoke(car, "go")

        ctx = seen["ctx"]
        assert isinstance(ctx, MethodContext)
        assert ctx.instance is car
        assert ctx.method_name == "go"
        assert ctx.defining_class.name == "Vehicle"

    def test_args_are_passed(self, dispatcher):
        reg = ClassRegistry()
        reg.define("Vehicle", methods={"honk": lambda ctx, times: "beep " * times})
        assert dispatcher.invoke(reg.instantiate("Vehicle"), "honk", 2) == "beep beep "

    def test_body_mutates_fields(self, dispatcher):
        def fill_up_tank(ctx, litres):
            ctx.fields["fuel"] = ctx.fields.get("fuel", 0) + litres
            return ctx.fields["fuel"]

        reg = ClassRegistry()
        reg.define("Vehicle", methods={"fill_up_tank": fill_up_tank})
        vehicle = reg.instantiate("Vehicle")

        assert dispatcher.invoke(vehicle, "fill_up_tank", 10) == 10
        assert dispatcher.invoke(vehicle, "fill_up_tank", 5) == 15
        assert vehicle.fields == {"fuel": 15}

    def test_method_arity_mismatch(self, dispatcher):
        reg = ClassRegistry()
        reg.define("Vehicle", methods={"honk": lambda ctx, times: "beep"})
        vehicle = reg.instantiate("Vehicle")

        with pytest.raises(ArityError, match=r"Vehicle.honk\(\) takes 1 argument"):
            dispatcher.invoke(vehicle, "honk")

    def test_self_call_resolves_from_instance_class(self, dispatcher):
        """A self-call from an ancestor body still sees subclass overrides."""
        reg = ClassRegistry()
        reg.define(
            "Vehicle",
            methods={
                "sound": lambda ctx: "vroom",
                "go": lambda ctx: ctx.invoke("sound") + "!",
            },
        )
        reg.define("Car", parent="Vehicle", methods={"sound": lambda ctx: "VROOM"})

        assert dispatcher.invoke(reg.instantiate("Car"), "go") == "VROOM!"
        assert dispatcher.invoke(reg.instantiate("Vehicle"), "go") == "vroom!"


class TestDelegation:
    """Tests for delegated parent calls."""

    def test_super_composes_with_parent(self, dispatcher):
        reg = ClassRegistry()
        make_vehicle(reg)
        reg.define(
            "Car",
            parent="Vehicle",
            methods={"go": lambda ctx: ctx.super() + LOUD_VROOM},
        )

        assert dispatcher.invoke(reg.instantiate("Car"), "go") == VROOM + LOUD_VROOM

    def test_super_skips_class_without_method(self, dispatcher):
        reg = ClassRegistry()
        make_vehicle(reg)
        reg.define("Car", parent="Vehicle")
        reg.define(
            "SportsCar",
            parent="Car",
            methods={"go": lambda ctx: ctx.super().upper()},
        )

        assert dispatcher.invoke(reg.instantiate("SportsCar"), "go") == VROOM.upper()

    def test_super_one_link_at_a_time(self, dispatcher):
        """Each delegated call moves up from the class whose body is running."""
        reg = ClassRegistry()
        reg.define("Vehicle", methods={"go": lambda ctx: ["Vehicle"]})
        reg.define("Car", parent="Vehicle", methods={"go": lambda ctx: ctx.super() + ["Car"]})
        reg.define(
            "SportsCar",
            parent="Car",
            methods={"go": lambda ctx: ctx.super() + ["SportsCar"]},
        )

        assert dispatcher.invoke(reg.instantiate("SportsCar"), "go") == [
            "Vehicle",
            "Car",
            "SportsCar",
        ]

    def test_super_passes_args(self, dispatcher):
        reg = ClassRegistry()
        reg.define("Vehicle", methods={"honk": lambda ctx, times: "beep" * times})
        reg.define(
            "Car",
            parent="Vehicle",
            methods={"honk": lambda ctx, times: ctx.super(times + 1)},
        )

        assert dispatcher.invoke(reg.instantiate("Car"), "honk", 1) == "beepbeep"

    def test_super_from_root_fails(self, dispatcher):
        reg = ClassRegistry()
        reg.define("Vehicle", methods={"go": lambda ctx: ctx.super()})

        with pytest.raises(NoMethodError, match="no method 'go' found above root class 'Vehicle'") as exc_info:
            dispatcher.invoke(reg.instantiate("Vehicle"), "go")
        assert exc_info.value.method_name == "go"
        assert exc_info.value.class_name == "Vehicle"

    def test_super_without_ancestor_method_fails(self, dispatcher):
        reg = ClassRegistry()
        reg.define("Vehicle")
        reg.define("Car", parent="Vehicle", methods={"go": lambda ctx: ctx.super()})

        with pytest.raises(NoMethodError, match="found on class 'Vehicle'"):
            dispatcher.invoke(reg.instantiate("Car"), "go")

    def test_dispatcher_is_stateless(self):
        """Separate dispatchers give the same results for the same chain."""
        reg = ClassRegistry()
        make_vehicle(reg)
        reg.define("Car", parent="Vehicle", methods={"go": lambda ctx: ctx.super() + "!"})
        car = reg.instantiate("Car")

        assert Dispatcher().invoke(car, "go") == Dispatcher().invoke(car, "go")
