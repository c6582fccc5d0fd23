"""Upgrade definitions.

Upgrades come in five variants. All but prestige upgrades are priced in
fuel; prestige upgrades cost Nebula Crystals and survive prestige resets.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .buildings import BUILDINGS


class UpgradeType(Enum):
    """Upgrade variant tag."""
    CLICK = "click"
    PRODUCTION = "production"
    AUTO_CLICK = "autoClick"
    PRESTIGE = "prestige"
    BUILDING = "building"


class PrestigeEffect(Enum):
    """Effects a prestige upgrade can carry."""
    START_FUEL = "startStardust"
    START_BUILDINGS = "startBuildings"
    CLICK_MULTIPLIER = "clickMultiplier"
    PRODUCTION_MULTIPLIER = "productionMultiplier"
    AUTO_CLICK_START = "autoClickStart"
    PRESTIGE_BONUS = "prestigeBonus"


@dataclass(frozen=True)
class ClickUpgrade:
    id: str
    name: str
    cost: float
    multiplier: float
    type: UpgradeType = UpgradeType.CLICK


@dataclass(frozen=True)
class ProductionUpgrade:
    id: str
    name: str
    cost: float
    multiplier: float
    type: UpgradeType = UpgradeType.PRODUCTION


@dataclass(frozen=True)
class AutoClickUpgrade:
    id: str
    name: str
    cost: float
    clicks_per_second: float
    type: UpgradeType = UpgradeType.AUTO_CLICK


@dataclass(frozen=True)
class PrestigeUpgrade:
    id: str
    name: str
    cost: float  # Nebula Crystals
    effect: PrestigeEffect
    value: float
    type: UpgradeType = UpgradeType.PRESTIGE


@dataclass(frozen=True)
class BuildingUpgrade:
    id: str
    name: str
    cost: float
    building_id: str
    multiplier: float
    required_count: int
    type: UpgradeType = UpgradeType.BUILDING


Upgrade = ClickUpgrade | ProductionUpgrade | AutoClickUpgrade | PrestigeUpgrade | BuildingUpgrade


CLICK_UPGRADES: tuple[ClickUpgrade, ...] = (
    ClickUpgrade("improvedCollectors", "Improved Collectors", 100, 2),
    ClickUpgrade("enhancedCollectors", "Enhanced Collectors", 500, 2),
    ClickUpgrade("advancedCollectors", "Advanced Collectors", 2_500, 2),
    ClickUpgrade("quantumCollectors", "Quantum Collectors", 25_000, 3),
    ClickUpgrade("cosmicCollectors", "Cosmic Collectors", 500_000, 5),
)

PRODUCTION_UPGRADES: tuple[ProductionUpgrade, ...] = (
    ProductionUpgrade("efficientMining", "Efficient Mining", 500, 2),
    ProductionUpgrade("advancedAutomation", "Advanced Automation", 5_000, 2),
    ProductionUpgrade("neuralNetworks", "Neural Networks", 50_000, 2),
    ProductionUpgrade("quantumComputing", "Quantum Computing", 500_000, 2),
    ProductionUpgrade("singularityCore", "Singularity Core", 5_000_000, 3),
)

AUTO_CLICK_UPGRADES: tuple[AutoClickUpgrade, ...] = (
    AutoClickUpgrade("basicAutoClicker", "Basic Auto-Clicker", 1_000, 1),
    AutoClickUpgrade("improvedAutoClicker", "Improved Auto-Clicker", 10_000, 2),
    AutoClickUpgrade("advancedAutoClicker", "Advanced Auto-Clicker", 100_000, 5),
    AutoClickUpgrade("quantumAutoClicker", "Quantum Auto-Clicker", 1_000_000, 10),
)

PRESTIGE_UPGRADES: tuple[PrestigeUpgrade, ...] = (
    PrestigeUpgrade("stardustAffinity", "Stardust Affinity", 5, PrestigeEffect.START_FUEL, 100),
    PrestigeUpgrade("miningExperience", "Mining Experience", 10, PrestigeEffect.START_BUILDINGS, 5),
    PrestigeUpgrade("clickMaster", "Click Master", 15, PrestigeEffect.CLICK_MULTIPLIER, 2),
    PrestigeUpgrade("productionExpert", "Production Expert", 25, PrestigeEffect.PRODUCTION_MULTIPLIER, 2),
    PrestigeUpgrade("automationMastery", "Automation Mastery", 50, PrestigeEffect.AUTO_CLICK_START, 1),
    PrestigeUpgrade("cosmicInsight", "Cosmic Insight", 100, PrestigeEffect.PRESTIGE_BONUS, 0.1),
)

# Tier names, multipliers and unlock counts shared by every building
_BUILDING_UPGRADE_TIERS = (
    ("Enhanced", 2, 10),
    ("Advanced", 3, 25),
    ("Ultimate", 5, 50),
)


def _building_upgrades() -> tuple[BuildingUpgrade, ...]:
    """Three upgrades per building, each tier ten times pricier than the last."""
    upgrades = []
    for building in BUILDINGS:
        # First tier costs 10^(tier + 1)
        first_cost = 10 ** (building.tier + 1)
        for index, (prefix, multiplier, required) in enumerate(_BUILDING_UPGRADE_TIERS):
            upgrades.append(BuildingUpgrade(
                id=f"{building.id}Upgrade{index + 1}",
                name=f"{prefix} {building.name}",
                cost=first_cost * 10 ** index,
                building_id=building.id,
                multiplier=multiplier,
                required_count=required,
            ))
    return tuple(upgrades)


BUILDING_UPGRADES: tuple[BuildingUpgrade, ...] = _building_upgrades()

# First auto-clicker granted at prestige by the auto-click-start effect
STARTING_AUTO_CLICKER = AUTO_CLICK_UPGRADES[0].id
