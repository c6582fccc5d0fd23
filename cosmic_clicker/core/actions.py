"""Actions accepted by the state transition function.

The set is closed: apply_action dispatches on the concrete class and
returns the state unchanged for anything else.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..simulation.resources import ResourceType

if TYPE_CHECKING:
    from .state import GameState, GameObject, ShipSpeed


@dataclass(frozen=True)
class Action:
    """Base class for all actions."""
    pass


# Economy

@dataclass(frozen=True)
class Click(Action):
    pass


@dataclass(frozen=True)
class BuyBuilding(Action):
    building_id: str
    quantity: int = 1


@dataclass(frozen=True)
class BuyUpgrade(Action):
    """Buy a click, production or auto-click upgrade with fuel."""
    upgrade_id: str


@dataclass(frozen=True)
class BuyBuildingUpgrade(Action):
    upgrade_id: str


@dataclass(frozen=True)
class BuyPrestigeUpgrade(Action):
    """Buy a prestige upgrade with Nebula Crystals."""
    upgrade_id: str


@dataclass(frozen=True)
class PurchaseModuleUpgrade(Action):
    """Buy a ship module upgrade with credits."""
    upgrade_id: str


@dataclass(frozen=True)
class UnlockAchievement(Action):
    achievement_id: str


@dataclass(frozen=True)
class Prestige(Action):
    pass


# Time

@dataclass(frozen=True)
class Tick(Action):
    delta_time: float
    include_physics: bool = True


@dataclass(frozen=True)
class UpdateObjects(Action):
    delta_time: float


@dataclass(frozen=True)
class UpdateBots(Action):
    delta_time: float


# Mining

@dataclass(frozen=True)
class SpawnObject(Action):
    obj: GameObject


@dataclass(frozen=True)
class FireLaser(Action):
    x: float
    y: float


@dataclass(frozen=True)
class DamageObject(Action):
    object_id: str
    damage: float


@dataclass(frozen=True)
class DestroyObject(Action):
    object_id: str


# Resources and ship

@dataclass(frozen=True)
class ConvertResources(Action):
    resource: ResourceType
    amount: float


@dataclass(frozen=True)
class SellResources(Action):
    resource: ResourceType
    amount: float


@dataclass(frozen=True)
class SetAutoConvertPercent(Action):
    percent: float


@dataclass(frozen=True)
class SetAutoSell(Action):
    enabled: bool


@dataclass(frozen=True)
class SetResourcePriority(Action):
    priority: tuple[ResourceType, ...]


@dataclass(frozen=True)
class SetShipSpeed(Action):
    speed: ShipSpeed


# Zones

@dataclass(frozen=True)
class WarpToNextZone(Action):
    pass


@dataclass(frozen=True)
class SetZone(Action):
    """Debug: jump directly to a zone."""
    zone: int


@dataclass(frozen=True)
class AddFuel(Action):
    """Debug: grant fuel."""
    amount: float


# Lifecycle

@dataclass(frozen=True)
class LoadSave(Action):
    state: GameState


@dataclass(frozen=True)
class ApplyOfflineProgress(Action):
    fuel: float
    time_away: float  # Seconds


@dataclass(frozen=True)
class HardReset(Action):
    pass
