"""Tests for TypeRegistry name resolution."""

import decimal

from entitymarshal import TypeRegistry


class Widget:
    pass


class Gadget(Widget):
    pass


def test_register_returns_fully_qualified_name(registry):
    name = registry.register(Widget)

    assert name == f"{Widget.__module__}.Widget"
    assert registry.resolve(name) is Widget


def test_registered_class_resolves_by_short_name(registry):
    registry.register(Widget)

    assert registry.resolve("Widget") is Widget


def test_locally_defined_class_resolves_by_qualified_name(registry):
    class Local:
        pass

    name = registry.register(Local)

    assert "<locals>" in name
    assert registry.resolve(name) is Local
    assert registry.resolve(Local.__qualname__) is Local


def test_unregistered_dotted_path_is_imported(registry):
    assert registry.resolve("decimal.Decimal") is decimal.Decimal


def test_builtin_class_resolves_without_registration(registry):
    assert registry.resolve("set") is set


def test_unresolvable_names_return_none(registry):
    assert registry.resolve("") is None
    assert registry.resolve("NoSuchThing") is None
    assert registry.resolve("no_such_module.Thing") is None
    assert registry.resolve("decimal.NoSuchThing") is None
    assert registry.resolve("decimal.getcontext") is None


def test_family_membership_is_inherited(registry):
    registry.register(Widget, family=True)

    assert registry.is_family(Widget)
    assert registry.is_family(Gadget)
    assert not TypeRegistry().is_family(Widget)


def test_reregistering_keeps_family_flag(registry):
    registry.register(Widget, family=True)
    registry.register(Widget)

    assert registry.is_family(Widget)
