"""Resource definitions and conversion math."""
from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum


class ResourceType(Enum):
    """All collectible resource types, organized by tier."""
    # Tier 1 - Common
    STONE = "stone"
    CARBON = "carbon"

    # Tier 2 - Industrial
    IRON = "iron"
    ICE = "ice"

    # Tier 3 - Precious
    GOLD = "gold"
    TITANIUM = "titanium"

    # Tier 4 - Exotic
    PLATINUM = "platinum"
    IRIDIUM = "iridium"
    DARK_MATTER = "darkMatter"


@dataclass(frozen=True)
class ResourceInfo:
    """Static economic properties of a resource."""
    name: str
    tier: int
    fuel_conversion_rate: float  # Fuel per unit at 100% efficiency
    credit_value: float  # Credits per unit at market multiplier 1.0


RESOURCE_INFO: dict[ResourceType, ResourceInfo] = {
    ResourceType.STONE: ResourceInfo("Stone", 1, 1.0, 2),
    ResourceType.CARBON: ResourceInfo("Carbon", 1, 1.0, 3),
    ResourceType.IRON: ResourceInfo("Iron", 2, 2.0, 8),
    ResourceType.ICE: ResourceInfo("Ice", 2, 1.5, 6),
    ResourceType.GOLD: ResourceInfo("Gold", 3, 5.0, 25),
    ResourceType.TITANIUM: ResourceInfo("Titanium", 3, 4.0, 20),
    ResourceType.PLATINUM: ResourceInfo("Platinum", 4, 10.0, 75),
    ResourceType.IRIDIUM: ResourceInfo("Iridium", 4, 15.0, 150),
    ResourceType.DARK_MATTER: ResourceInfo("Dark Matter", 4, 50.0, 500),
}

# Resource tier mapping
RESOURCE_TIER: dict[ResourceType, int] = {
    resource: info.tier for resource, info in RESOURCE_INFO.items()
}


def empty_inventory() -> dict[ResourceType, float]:
    """Create an inventory with every resource at zero."""
    return {resource: 0 for resource in ResourceType}


def convert_resource_to_fuel(
    resource: ResourceType, amount: float, efficiency: float = 100.0
) -> int:
    """Fuel produced by converting an amount of a resource.

    Efficiency is a percentage (100 = base rate).
    """
    if amount <= 0 or efficiency <= 0:
        return 0
    rate = RESOURCE_INFO[resource].fuel_conversion_rate
    return math.floor(amount * rate * efficiency / 100)


def sell_value(resource: ResourceType, amount: float, market_multiplier: float = 1.0) -> int:
    """Credits received for selling an amount of a resource."""
    if amount <= 0 or market_multiplier <= 0:
        return 0
    return math.floor(amount * RESOURCE_INFO[resource].credit_value * market_multiplier)


def total_cargo(inventory: dict[ResourceType, float]) -> float:
    """Total units held across all resource types."""
    return sum(inventory.values())


def has_cargo_space(current: float, capacity: float, amount: float) -> bool:
    """Check whether an amount fits in the remaining capacity."""
    return current + amount <= capacity


def max_cargo_addition(current: float, capacity: float, requested: float) -> float:
    """Largest amount of a request that fits without exceeding capacity."""
    available = max(0, capacity - current)
    return max(0, min(requested, available))


def conversion_amount(conversion_speed: float, dt: float, available: float) -> int:
    """Units a converter can process in dt seconds."""
    if dt <= 0 or conversion_speed <= 0:
        return 0
    return max(0, min(math.floor(conversion_speed * dt), math.floor(available)))


def fuel_consumption(
    base_rate: float, speed_multiplier: float, efficiency: float, dt: float
) -> float:
    """Fuel burned over dt seconds. Efficiency is a percentage (lower is better)."""
    if speed_multiplier == 0:
        return 0.0
    return base_rate * speed_multiplier * (efficiency / 100) * dt


def resources_in_tier(tier: int) -> list[ResourceType]:
    """Resources belonging to the given tier, in catalog order."""
    return [r for r, t in RESOURCE_TIER.items() if t == tier]


def is_tier_unlocked(resource: ResourceType, unlocked_tiers: tuple[int, ...] | list[int]) -> bool:
    """Check if a resource's tier is available to the converter."""
    return RESOURCE_TIER[resource] in unlocked_tiers
