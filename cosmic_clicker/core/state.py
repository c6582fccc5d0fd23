"""Game state data model.

Every dataclass here is frozen. Transitions build new containers rather
than mutating the ones they were given.
"""
from __future__ import annotations
import time
from dataclasses import dataclass, field
from enum import Enum

from ..config import (
    VERSION, INITIAL_CLICK_POWER, FUEL_CONSUMPTION_RATES, SHIP_POSITION,
)
from ..catalog.objects import ObjectType, ObjectSize, SpecialDrop
from ..simulation.cargo import default_resource_priority
from ..simulation.physics import Position, Velocity
from ..simulation.resources import ResourceType, empty_inventory


class ShipSpeed(Enum):
    STOP = "stop"
    SLOW = "slow"
    NORMAL = "normal"
    FAST = "fast"
    BOOST = "boost"


class BotState(Enum):
    """Mining bot lifecycle states."""
    IDLE = "idle"
    MOVING_TO_TARGET = "moving_to_target"
    MINING = "mining"
    RETURNING = "returning"
    DEPOSITING = "depositing"


@dataclass(frozen=True)
class ResourceDrop:
    resource: ResourceType
    amount: int


@dataclass(frozen=True)
class GameObject:
    """A falling, mineable object."""
    id: str
    type: ObjectType
    template_id: str
    position: Position
    velocity: Velocity
    health: float
    max_health: float
    size: ObjectSize
    width: float
    height: float
    resource_drops: tuple[ResourceDrop, ...] = ()
    special_drops: SpecialDrop | None = None
    rotation: float = 0.0
    rotation_speed: float = 0.0
    destroyed: bool = False
    created_at: float = 0.0


@dataclass(frozen=True)
class Bot:
    """An autonomous mining bot."""
    id: str
    position: Position
    velocity: Velocity = field(default_factory=Velocity)
    state: BotState = BotState.IDLE
    target_object_id: str | None = None
    cargo_amount: int = 0
    cargo_type: ResourceType | None = None
    mining_progress: float = 0.0
    created_at: float = 0.0


@dataclass(frozen=True)
class LaserModule:
    damage: float = 1
    range: float = 100
    cooldown: float = 0.5
    laser_count: int = 1
    auto_target: bool = False
    piercing: bool = False
    cooldown_remaining: float = 0.0
    purchased_upgrades: frozenset[str] = frozenset()


@dataclass(frozen=True)
class BotBayModule:
    bot_count: int = 0
    mining_speed: float = 0.2  # Units per second
    range: float = 80
    bot_capacity: int = 10
    purchased_upgrades: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ConverterModule:
    conversion_speed: float = 0.5  # Units per second
    efficiency: float = 1.0  # Multiplier on base conversion rate
    auto_convert_percent: float = 50  # Share of collected loot converted on pickup
    unlocked_tiers: tuple[int, ...] = (1,)
    conversion_progress: float = 0.0  # Fraction of a unit carried between ticks
    purchased_upgrades: frozenset[str] = frozenset()


@dataclass(frozen=True)
class CargoHoldModule:
    capacity: float = 100
    auto_sell: bool = True
    resource_priority: tuple[ResourceType, ...] = field(
        default_factory=lambda: tuple(default_resource_priority()))  # Highest priority first
    purchased_upgrades: frozenset[str] = frozenset()


@dataclass(frozen=True)
class EngineModule:
    fuel_efficiency: float = 1.0  # Multiplier on consumption, lower is better
    unlocked_speeds: tuple[str, ...] = ("stop", "slow", "normal")
    purchased_upgrades: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ShipModules:
    laser: LaserModule = field(default_factory=LaserModule)
    bot_bay: BotBayModule = field(default_factory=BotBayModule)
    converter: ConverterModule = field(default_factory=ConverterModule)
    cargo_hold: CargoHoldModule = field(default_factory=CargoHoldModule)
    engine: EngineModule = field(default_factory=EngineModule)


@dataclass(frozen=True)
class Statistics:
    """Run accumulators."""
    total_clicks: int = 0
    total_play_time: float = 0.0
    current_session_time: float = 0.0
    total_prestiges: int = 0
    buildings_purchased: int = 0
    upgrades_purchased: int = 0
    objects_destroyed: int = 0


@dataclass(frozen=True)
class GameState:
    """Complete snapshot of a game."""
    fuel: float = 0
    total_fuel_earned: float = 0
    credits: float = 0
    nebula_crystals: int = 0
    click_power: float = INITIAL_CLICK_POWER
    production_per_second: float = 0
    buildings: dict[str, int] = field(default_factory=dict)
    upgrades: frozenset[str] = frozenset()
    achievements: frozenset[str] = frozenset()
    statistics: Statistics = field(default_factory=Statistics)
    current_zone: int = 1
    zone_progress: float = 0
    ship_speed: ShipSpeed = ShipSpeed.STOP
    fuel_consumption_rate: float = FUEL_CONSUMPTION_RATES["stop"]
    resources: dict[ResourceType, float] = field(default_factory=empty_inventory)
    objects: tuple[GameObject, ...] = ()
    bots: tuple[Bot, ...] = ()
    modules: ShipModules = field(default_factory=ShipModules)
    next_bot_id: int = 1
    last_save_time: float = 0.0
    version: str = VERSION

    def building_count(self, building_id: str) -> int:
        """Owned count for a building, zero if never bought."""
        return self.buildings.get(building_id, 0)

    def live_objects(self) -> list[GameObject]:
        return [obj for obj in self.objects if not obj.destroyed]

    def get_object(self, object_id: str) -> GameObject | None:
        for obj in self.objects:
            if obj.id == object_id:
                return obj
        return None


def ship_position() -> Position:
    return Position(*SHIP_POSITION)


def initial_game_state(now: float | None = None) -> GameState:
    """Default snapshot for a brand-new game."""
    return GameState(last_save_time=time.time() if now is None else now)
