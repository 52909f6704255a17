"""Tests for toys.registry."""

from __future__ import annotations

import pytest

from toys.errors import ModuleNotFound
from toys.registry import ModuleRegistry


def test_scan_registers_nested_modules_in_discovery_order(project) -> None:
    project.module("core")
    project.module("ui")
    project.module("ui/button")
    project.module("vendor/lib")  # vendor itself carries no manifest

    registry = project.scan()

    assert [module.namespace for module in registry.modules()] == [
        "core",
        "ui",
        "ui/button",
        "vendor/lib",
    ]
    assert len(registry) == 4


def test_namespace_is_lowercased_but_base_path_is_real(project) -> None:
    directory = project.module("Widgets/DatePicker")

    registry = project.scan()
    (module,) = registry.get_module("widgets/datepicker")

    assert module.namespace == "widgets/datepicker"
    assert module.class_name == "WidgetsDatepicker"
    assert module.id == "widgetsdatepicker"
    assert module.base_path == directory.resolve()


def test_get_module_flattens_everything_under_the_namespace(project) -> None:
    project.module("ui")
    project.module("ui/button")
    project.module("ui/forms/input")
    project.module("core")

    registry = project.scan()

    assert [module.namespace for module in registry.get_module("ui")] == [
        "ui",
        "ui/button",
        "ui/forms/input",
    ]
    assert [module.namespace for module in registry.get_module("ui/forms")] == ["ui/forms/input"]


def test_get_module_rejects_unknown_namespace(project) -> None:
    project.module("core")
    registry = project.scan()

    with pytest.raises(ModuleNotFound) as excinfo:
        registry.get_module("core/missing")

    assert "core/missing" in str(excinfo.value)
    assert registry.has_module("core")
    assert not registry.has_module("core/missing")


def test_add_module_accumulates_under_one_namespace() -> None:
    registry = ModuleRegistry()
    first, second, nested = object(), object(), object()

    registry.add_module("shared", first)  # type: ignore[arg-type]
    registry.add_module("shared/inner", nested)  # type: ignore[arg-type]
    registry.add_module("shared", second)  # type: ignore[arg-type]

    assert registry.get_module("shared") == [first, second, nested]
    returned = registry.get_module("shared")
    returned.clear()
    assert registry.get_module("shared") == [first, second, nested]


def test_hidden_directories_are_not_scanned(project) -> None:
    project.module(".trash/old")
    project.module("core")

    assert [module.namespace for module in project.scan().modules()] == ["core"]
