"""Economy math: costs, production, click power and prestige rewards.

Everything here is pure. Cost functions return math.inf instead of
raising when a value leaves the float range, so a runaway price is
simply unaffordable.
"""
from __future__ import annotations
import math
from typing import TYPE_CHECKING, Iterable

from ..config import (
    INITIAL_CLICK_POWER, MIN_PRESTIGE_FUEL, PRESTIGE_DIVISOR,
    NEBULA_CRYSTAL_BONUS, ACHIEVEMENT_BONUS, MAX_AFFORDABLE_CAP,
)
from ..catalog.buildings import Building
from ..catalog.upgrades import BuildingUpgrade, PrestigeEffect, UpgradeType

if TYPE_CHECKING:
    from ..core.registries import CatalogRegistry
    from ..core.state import GameState


def building_cost(base_cost: float, multiplier: float, owned: int) -> float:
    """Price of the next unit: floor(base * multiplier^owned)."""
    try:
        raw = base_cost * multiplier ** owned
    except OverflowError:
        return math.inf
    if not math.isfinite(raw):
        return math.inf
    return math.floor(raw)


def bulk_building_cost(base_cost: float, multiplier: float, owned: int, quantity: int) -> float:
    """Price of buying quantity units starting from owned."""
    total = 0
    for i in range(max(0, quantity)):
        total += building_cost(base_cost, multiplier, owned + i)
        if total == math.inf:
            break
    return total


def max_affordable(budget: float, base_cost: float, multiplier: float, owned: int) -> int:
    """Number of units purchasable with budget, capped at MAX_AFFORDABLE_CAP."""
    count = 0
    spent = 0
    while count < MAX_AFFORDABLE_CAP:
        cost = building_cost(base_cost, multiplier, owned + count)
        if spent + cost > budget:
            break
        spent += cost
        count += 1
    return count


def can_afford(balance: float, cost: float) -> bool:
    return balance >= cost


def building_production(
    building: Building, count: int, building_upgrades: Iterable[BuildingUpgrade] = ()
) -> float:
    """Fuel per second from one building type, with its own upgrades applied.

    A building upgrade only counts while its required count is met.
    """
    if count <= 0:
        return 0.0
    production = building.production * count
    for upgrade in building_upgrades:
        if upgrade.building_id == building.id and count >= upgrade.required_count:
            production *= upgrade.multiplier
    return production


def production_multiplier(multipliers: Iterable[float], prestige_multiplier: float = 1.0) -> float:
    result = 1.0
    for m in multipliers:
        result *= m
    return result * prestige_multiplier


def total_production(
    buildings: Iterable[Building],
    counts: dict[str, int],
    building_upgrades: Iterable[BuildingUpgrade],
    global_multiplier: float,
    nebula_crystals: float,
    achievement_count: int,
) -> float:
    """Total building production with every global bonus applied."""
    owned_upgrades = list(building_upgrades)
    base = sum(
        building_production(b, counts.get(b.id, 0), owned_upgrades)
        for b in buildings
    )
    crystal_bonus = 1 + nebula_crystals * NEBULA_CRYSTAL_BONUS
    achievement_bonus = 1 + achievement_count * ACHIEVEMENT_BONUS
    return base * global_multiplier * crystal_bonus * achievement_bonus


def click_power(
    base: float, click_multipliers: Iterable[float], prestige_click_multiplier: float = 1.0
) -> float:
    power = base
    for m in click_multipliers:
        power *= m
    return power * prestige_click_multiplier


def auto_click_production(clicks_per_second: Iterable[float], power: float) -> float:
    return sum(clicks_per_second) * power


def prestige_reward(total_fuel_earned: float, prestige_bonus: float = 0.0) -> int:
    """Nebula Crystals earned by prestiging now."""
    if not math.isfinite(total_fuel_earned) or total_fuel_earned < MIN_PRESTIGE_FUEL:
        return 0
    base = math.floor(math.sqrt(total_fuel_earned / PRESTIGE_DIVISOR))
    return math.floor(base * (1 + prestige_bonus))


def can_prestige(total_fuel_earned: float) -> bool:
    return math.isfinite(total_fuel_earned) and total_fuel_earned >= MIN_PRESTIGE_FUEL


def prestige_effect_total(
    owned: frozenset[str] | set[str], effect: PrestigeEffect, catalog: CatalogRegistry
) -> float:
    """Sum of an effect's values across owned prestige upgrades."""
    return sum(
        u.value for u in catalog.owned_of_type(owned, UpgradeType.PRESTIGE)
        if u.effect == effect
    )


def prestige_multiplier(
    owned: frozenset[str] | set[str], effect: PrestigeEffect, catalog: CatalogRegistry
) -> float:
    """Product of an effect's values across owned prestige upgrades (1 if none)."""
    result = 1.0
    for u in catalog.owned_of_type(owned, UpgradeType.PRESTIGE):
        if u.effect == effect:
            result *= u.value
    return result


def prestige_starting_resources(
    owned: frozenset[str] | set[str], catalog: CatalogRegistry
) -> tuple[float, int]:
    """Starting (fuel, space miners) granted by owned prestige upgrades."""
    fuel = prestige_effect_total(owned, PrestigeEffect.START_FUEL, catalog)
    miners = int(prestige_effect_total(owned, PrestigeEffect.START_BUILDINGS, catalog))
    return fuel, miners


def calculate_derived_stats(state: GameState, catalog: CatalogRegistry) -> tuple[float, float]:
    """Recompute (click_power, production_per_second) from owned entries."""
    owned = state.upgrades

    power = click_power(
        INITIAL_CLICK_POWER,
        (u.multiplier for u in catalog.owned_of_type(owned, UpgradeType.CLICK)),
        prestige_multiplier(owned, PrestigeEffect.CLICK_MULTIPLIER, catalog),
    )

    global_multiplier = production_multiplier(
        (u.multiplier for u in catalog.owned_of_type(owned, UpgradeType.PRODUCTION)),
        prestige_multiplier(owned, PrestigeEffect.PRODUCTION_MULTIPLIER, catalog),
    )
    production = total_production(
        catalog.buildings(),
        state.buildings,
        catalog.owned_of_type(owned, UpgradeType.BUILDING),
        global_multiplier,
        state.nebula_crystals,
        len(state.achievements),
    )
    production += auto_click_production(
        (u.clicks_per_second for u in catalog.owned_of_type(owned, UpgradeType.AUTO_CLICK)),
        power,
    )
    return power, production
