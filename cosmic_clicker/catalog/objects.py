"""Mineable object templates, zones and per-zone spawn tables."""
from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum

from ..simulation.resources import ResourceType


class ObjectType(Enum):
    ASTEROID = "asteroid"
    DEBRIS = "debris"
    DERELICT = "derelict"
    GATE = "gate"
    ANOMALY = "anomaly"


class ObjectSize(Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@dataclass(frozen=True)
class LootEntry:
    """Possible resource drop. Amount is uniform in [min_amount, max_amount]."""
    resource: ResourceType
    min_amount: int
    max_amount: int
    probability: float = 1.0


@dataclass(frozen=True)
class SpecialDrop:
    """Direct rewards granted on destruction, bypassing cargo."""
    fuel: float = 0
    credits: float = 0


@dataclass(frozen=True)
class ObjectTemplate:
    id: str
    name: str
    type: ObjectType
    size: ObjectSize
    hp: int
    loot_table: tuple[LootEntry, ...]
    width: float
    height: float
    special_drops: SpecialDrop | None = None


@dataclass(frozen=True)
class ZoneConfig:
    """A zone and the fuel progress required to warp out of it."""
    number: int
    name: str
    fuel_required: float


@dataclass(frozen=True)
class SpawnEntry:
    template_id: str
    weight: float


@dataclass(frozen=True)
class ZoneSpawnTable:
    zone: int
    name: str
    spawn_rate: float
    difficulty: int
    entries: tuple[SpawnEntry, ...]


_SIZE_PIXELS = {ObjectSize.SMALL: 40, ObjectSize.MEDIUM: 60, ObjectSize.LARGE: 80}


def _asteroid(resource: ResourceType, size: ObjectSize, hp: int, lo: int, hi: int) -> ObjectTemplate:
    pixels = _SIZE_PIXELS[size]
    label = resource.value.capitalize()
    return ObjectTemplate(
        id=f"asteroid_{resource.value}_{size.value}",
        name=f"{size.value.capitalize()} {label} Asteroid",
        type=ObjectType.ASTEROID,
        size=size,
        hp=hp,
        loot_table=(LootEntry(resource, lo, hi),),
        width=pixels,
        height=pixels,
    )


_R = ResourceType
_S = ObjectSize

_TEMPLATE_LIST: tuple[ObjectTemplate, ...] = (
    _asteroid(_R.STONE, _S.SMALL, 10, 5, 10),
    _asteroid(_R.STONE, _S.MEDIUM, 50, 20, 30),
    _asteroid(_R.STONE, _S.LARGE, 100, 40, 50),
    _asteroid(_R.CARBON, _S.SMALL, 10, 5, 10),
    _asteroid(_R.CARBON, _S.MEDIUM, 50, 20, 30),
    _asteroid(_R.CARBON, _S.LARGE, 100, 40, 50),
    _asteroid(_R.IRON, _S.SMALL, 15, 3, 8),
    _asteroid(_R.IRON, _S.MEDIUM, 60, 15, 25),
    _asteroid(_R.IRON, _S.LARGE, 120, 35, 45),
    _asteroid(_R.ICE, _S.SMALL, 8, 4, 9),
    _asteroid(_R.ICE, _S.MEDIUM, 40, 18, 28),
    _asteroid(_R.ICE, _S.LARGE, 90, 38, 48),
    _asteroid(_R.GOLD, _S.SMALL, 20, 2, 5),
    _asteroid(_R.GOLD, _S.MEDIUM, 80, 10, 20),

    ObjectTemplate(
        "debris_scrap", "Space Scrap", ObjectType.DEBRIS, _S.SMALL, 5,
        (LootEntry(_R.CARBON, 2, 5, 0.7), LootEntry(_R.IRON, 1, 3, 0.3)),
        35, 35,
    ),
    ObjectTemplate(
        "debris_container", "Cargo Container", ObjectType.DEBRIS, _S.SMALL, 15,
        (LootEntry(_R.STONE, 5, 10, 0.4), LootEntry(_R.CARBON, 3, 8, 0.4), LootEntry(_R.IRON, 2, 5, 0.2)),
        45, 45,
    ),
    ObjectTemplate(
        "debris_fuel_tank", "Fuel Tank", ObjectType.DEBRIS, _S.SMALL, 10,
        (LootEntry(_R.ICE, 5, 15, 1.0),),
        40, 40, SpecialDrop(fuel=50),
    ),
    ObjectTemplate(
        "derelict_escape_pod", "Escape Pod", ObjectType.DERELICT, _S.SMALL, 200,
        (LootEntry(_R.IRON, 20, 40, 1.0), LootEntry(_R.CARBON, 10, 20, 0.8),
         LootEntry(_R.TITANIUM, 1, 3, 0.1)),
        70, 50, SpecialDrop(credits=25),
    ),
    ObjectTemplate(
        "derelict_shuttle", "Derelict Shuttle", ObjectType.DERELICT, _S.MEDIUM, 500,
        (LootEntry(_R.IRON, 50, 100, 1.0), LootEntry(_R.TITANIUM, 10, 25, 0.6),
         LootEntry(_R.GOLD, 5, 15, 0.3)),
        90, 70, SpecialDrop(credits=100),
    ),
    ObjectTemplate(
        "derelict_cruiser", "Derelict Cruiser", ObjectType.DERELICT, _S.LARGE, 1000,
        (LootEntry(_R.IRON, 100, 200, 1.0), LootEntry(_R.TITANIUM, 30, 60, 0.8),
         LootEntry(_R.GOLD, 15, 35, 0.5), LootEntry(_R.PLATINUM, 3, 10, 0.15)),
        120, 90, SpecialDrop(credits=500),
    ),
)

OBJECT_TEMPLATES: dict[str, ObjectTemplate] = {t.id: t for t in _TEMPLATE_LIST}


ZONES: tuple[ZoneConfig, ...] = (
    ZoneConfig(1, "Asteroid Belt", 10_000),
    ZoneConfig(2, "Debris Field", 50_000),
    ZoneConfig(3, "Ice Ring", 250_000),
    ZoneConfig(4, "Mining Outpost", 1_000_000),
    ZoneConfig(5, "Junk Yard", 5_000_000),
    ZoneConfig(6, "Rich Belt", math.inf),
)


def _table(zone: int, name: str, rate: float, difficulty: int, weights: dict[str, float]) -> ZoneSpawnTable:
    entries = tuple(SpawnEntry(template_id, weight) for template_id, weight in weights.items())
    return ZoneSpawnTable(zone, name, rate, difficulty, entries)


SPAWN_TABLES: tuple[ZoneSpawnTable, ...] = (
    _table(1, "Asteroid Belt", 1.0, 1, {
        "asteroid_stone_small": 30, "asteroid_stone_medium": 15,
        "asteroid_carbon_small": 20, "asteroid_carbon_medium": 10,
        "debris_scrap": 15, "debris_container": 5, "derelict_escape_pod": 4,
    }),
    _table(2, "Debris Field", 1.2, 2, {
        "asteroid_stone_small": 10, "asteroid_stone_medium": 7, "asteroid_stone_large": 3,
        "asteroid_carbon_small": 15, "asteroid_carbon_medium": 8, "asteroid_carbon_large": 2,
        "asteroid_iron_small": 10, "asteroid_iron_medium": 5,
        "debris_scrap": 20, "debris_container": 8, "debris_fuel_tank": 2,
        "derelict_escape_pod": 7, "derelict_shuttle": 3,
    }),
    _table(3, "Ice Ring", 1.4, 3, {
        "asteroid_stone_medium": 6, "asteroid_stone_large": 4,
        "asteroid_carbon_medium": 10, "asteroid_carbon_large": 5,
        "asteroid_iron_small": 8, "asteroid_iron_medium": 10, "asteroid_iron_large": 2,
        "asteroid_ice_small": 15, "asteroid_ice_medium": 12, "asteroid_ice_large": 3,
        "debris_container": 8, "debris_fuel_tank": 7,
        "derelict_escape_pod": 5, "derelict_shuttle": 5,
    }),
    _table(4, "Mining Outpost", 1.6, 4, {
        "asteroid_carbon_large": 10,
        "asteroid_iron_medium": 15, "asteroid_iron_large": 10,
        "asteroid_ice_medium": 12, "asteroid_ice_large": 8,
        "asteroid_gold_small": 10, "asteroid_gold_medium": 5,
        "debris_container": 10, "debris_fuel_tank": 5,
        "derelict_escape_pod": 5, "derelict_shuttle": 8, "derelict_cruiser": 2,
    }),
    _table(5, "Junk Yard", 1.8, 5, {
        "asteroid_iron_medium": 10, "asteroid_iron_large": 10,
        "asteroid_ice_medium": 8, "asteroid_ice_large": 7,
        "asteroid_gold_small": 8, "asteroid_gold_medium": 7,
        "debris_scrap": 5, "debris_container": 15, "debris_fuel_tank": 5,
        "derelict_escape_pod": 8, "derelict_shuttle": 12, "derelict_cruiser": 5,
    }),
    _table(6, "Rich Belt", 2.0, 6, {
        "asteroid_iron_large": 15, "asteroid_ice_large": 15,
        "asteroid_gold_small": 10, "asteroid_gold_medium": 20,
        "debris_container": 10, "debris_fuel_tank": 5,
        "derelict_shuttle": 12, "derelict_cruiser": 13,
    }),
)
