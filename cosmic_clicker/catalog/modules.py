"""Ship module upgrade tree.

Each upgrade sets one or more stats on its module. Stat names match the
fields of the module dataclasses in core.state.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ModuleType(Enum):
    LASER = "laser"
    BOT_BAY = "botBay"
    CONVERTER = "converter"
    CARGO_HOLD = "cargoHold"
    ENGINE = "engine"


@dataclass(frozen=True)
class ModuleUpgrade:
    """Credit-priced upgrade for a ship module."""
    id: str
    module: ModuleType
    name: str
    cost: float
    stat_changes: dict[str, Any] = field(hash=False)
    prerequisites: tuple[str, ...] = ()


_L = ModuleType.LASER
_B = ModuleType.BOT_BAY
_V = ModuleType.CONVERTER
_C = ModuleType.CARGO_HOLD
_E = ModuleType.ENGINE


def _chain(prefix: str, module: ModuleType, name: str, stat: str,
           steps: list[tuple[float, Any]], first_prereq: str | None = None) -> list[ModuleUpgrade]:
    """Build a linear upgrade chain where each step requires the previous one."""
    chain = []
    previous = first_prereq
    for index, (cost, value) in enumerate(steps, start=1):
        upgrade_id = f"{prefix}_{index}"
        chain.append(ModuleUpgrade(
            id=upgrade_id,
            module=module,
            name=f"{name} {index}",
            cost=cost,
            stat_changes={stat: value},
            prerequisites=(previous,) if previous else (),
        ))
        previous = upgrade_id
    return chain


_UPGRADE_LIST: list[ModuleUpgrade] = [
    # Laser
    *_chain("laser_damage", _L, "Laser Damage", "damage",
            [(100, 2), (500, 5), (2_500, 10), (12_000, 25), (60_000, 50)]),
    *_chain("laser_range", _L, "Laser Range", "range", [(200, 150), (800, 200), (4_000, 300)]),
    *_chain("laser_cooldown", _L, "Laser Cooldown", "cooldown", [(300, 0.3), (1_500, 0.2), (8_000, 0.1)]),
    *_chain("laser_multi", _L, "Multi-Laser", "laser_count", [(2_000, 2), (10_000, 3)]),
    ModuleUpgrade("laser_auto_target", _L, "Auto-Targeting", 5_000, {"auto_target": True}),
    ModuleUpgrade("laser_piercing", _L, "Piercing Beam", 15_000, {"piercing": True}, ("laser_multi_1",)),

    # Bot bay
    ModuleUpgrade("bot_unlock", _B, "Bot Bay", 500, {"bot_count": 1}),
    *_chain("bot_count", _B, "Bot Count", "bot_count", [(2_000, 3), (8_000, 5), (35_000, 10)], "bot_unlock"),
    *_chain("bot_speed", _B, "Bot Mining Speed", "mining_speed",
            [(1_500, 1 / 3), (6_000, 1.0), (25_000, 2.0)], "bot_unlock"),
    *_chain("bot_range", _B, "Bot Range", "range", [(1_000, 120), (5_000, 180)], "bot_unlock"),
    *_chain("bot_capacity", _B, "Bot Capacity", "bot_capacity", [(2_500, 25), (12_000, 50)], "bot_unlock"),

    # Converter
    *_chain("converter_speed", _V, "Converter Speed", "conversion_speed", [(400, 1), (2_000, 2), (10_000, 5)]),
    *_chain("converter_efficiency", _V, "Converter Efficiency", "efficiency",
            [(1_500, 1.1), (8_000, 1.25), (40_000, 1.5)]),
    ModuleUpgrade("converter_tier_2", _V, "Tier 2 Processing", 3_000, {"unlocked_tiers": (1, 2)}),
    ModuleUpgrade("converter_tier_3", _V, "Tier 3 Processing", 20_000, {"unlocked_tiers": (1, 2, 3)},
                  ("converter_tier_2",)),
    ModuleUpgrade("converter_tier_4", _V, "Exotic Processing", 150_000, {"unlocked_tiers": (1, 2, 3, 4)},
                  ("converter_tier_3",)),

    # Cargo hold
    *_chain("cargo_capacity", _C, "Cargo Capacity", "capacity",
            [(300, 250), (1_500, 500), (7_500, 1_000), (35_000, 2_500)]),

    # Engine
    *_chain("engine_efficiency", _E, "Engine Efficiency", "fuel_efficiency", [(800, 0.9), (4_000, 0.8), (20_000, 0.7)]),
    ModuleUpgrade("engine_unlock_fast", _E, "Fast Drive", 2_000,
                  {"unlocked_speeds": ("stop", "slow", "normal", "fast")}),
    ModuleUpgrade("engine_unlock_boost", _E, "Boost Drive", 15_000,
                  {"unlocked_speeds": ("stop", "slow", "normal", "fast", "boost")}, ("engine_unlock_fast",)),
]

MODULE_UPGRADES: dict[str, ModuleUpgrade] = {u.id: u for u in _UPGRADE_LIST}
