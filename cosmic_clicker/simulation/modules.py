"""Ship module upgrade purchasing."""
from __future__ import annotations
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from ..catalog.modules import ModuleType, ModuleUpgrade

if TYPE_CHECKING:
    from ..core.state import ShipModules

# ModuleType -> attribute on ShipModules
MODULE_FIELDS: dict[ModuleType, str] = {
    ModuleType.LASER: "laser",
    ModuleType.BOT_BAY: "bot_bay",
    ModuleType.CONVERTER: "converter",
    ModuleType.CARGO_HOLD: "cargo_hold",
    ModuleType.ENGINE: "engine",
}


def get_module(modules: ShipModules, module_type: ModuleType) -> Any:
    return getattr(modules, MODULE_FIELDS[module_type])


def owned_module_upgrades(modules: ShipModules) -> set[str]:
    """Every module upgrade id purchased on any module."""
    owned: set[str] = set()
    for field_name in MODULE_FIELDS.values():
        owned.update(getattr(modules, field_name).purchased_upgrades)
    return owned


def can_purchase_module_upgrade(modules: ShipModules, upgrade: ModuleUpgrade, credits: float) -> bool:
    """Not yet owned, affordable, and every prerequisite owned."""
    owned = owned_module_upgrades(modules)
    if upgrade.id in owned:
        return False
    if credits < upgrade.cost:
        return False
    return all(prereq in owned for prereq in upgrade.prerequisites)


def apply_module_upgrade(modules: ShipModules, upgrade: ModuleUpgrade) -> ShipModules:
    """Set the upgrade's stats on its module and record the purchase."""
    module = get_module(modules, upgrade.module)
    changes = {
        stat: value for stat, value in upgrade.stat_changes.items()
        if hasattr(module, stat)
    }
    updated = replace(
        module,
        purchased_upgrades=module.purchased_upgrades | {upgrade.id},
        **changes,
    )
    return replace(modules, **{MODULE_FIELDS[upgrade.module]: updated})
