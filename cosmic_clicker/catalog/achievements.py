"""Achievement definitions."""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class AchievementCondition(Enum):
    """Statistic an achievement threshold is compared against."""
    TOTAL_CLICKS = "totalClicks"
    BUILDING_COUNT = "buildingCount"
    TOTAL_FUEL_EARNED = "totalFuelEarned"
    TOTAL_PRESTIGES = "totalPrestiges"
    TOTAL_NEBULA_CRYSTALS = "totalNebulaCrystals"


@dataclass(frozen=True)
class Achievement:
    """A one-time milestone granting a permanent production bonus."""
    id: str
    name: str
    description: str
    category: str
    condition: AchievementCondition
    threshold: float
    building_id: str | None = None


_C = AchievementCondition

ACHIEVEMENTS: tuple[Achievement, ...] = (
    # Clicking
    Achievement("firstClick", "First Click", "Click for the first time", "clicking", _C.TOTAL_CLICKS, 1),
    Achievement("clickNovice", "Click Novice", "Click 100 times", "clicking", _C.TOTAL_CLICKS, 100),
    Achievement("clickAdept", "Click Adept", "Click 1,000 times", "clicking", _C.TOTAL_CLICKS, 1_000),
    Achievement("clickMaster", "Click Master", "Click 10,000 times", "clicking", _C.TOTAL_CLICKS, 10_000),
    Achievement("clickLegend", "Click Legend", "Click 100,000 times", "clicking", _C.TOTAL_CLICKS, 100_000),

    # Buildings
    Achievement("miningBeginner", "Mining Beginner", "Own your first Space Miner", "buildings",
                _C.BUILDING_COUNT, 1, "spaceMiner"),
    Achievement("miningFleet", "Mining Fleet", "Own 50 Space Miners", "buildings",
                _C.BUILDING_COUNT, 50, "spaceMiner"),
    Achievement("asteroidBaron", "Asteroid Baron", "Own 25 Asteroid Harvesters", "buildings",
                _C.BUILDING_COUNT, 25, "asteroidHarvester"),
    Achievement("solarMagnate", "Solar Magnate", "Own 10 Solar Collectors", "buildings",
                _C.BUILDING_COUNT, 10, "solarCollector"),
    Achievement("realityShaper", "Reality Shaper", "Own a Universe Engine", "buildings",
                _C.BUILDING_COUNT, 1, "universeEngine"),

    # Fuel
    Achievement("dustCollector", "Dust Collector", "Earn 1,000 fuel", "production", _C.TOTAL_FUEL_EARNED, 1_000),
    Achievement("stellarMiner", "Stellar Miner", "Earn 1 million fuel", "production",
                _C.TOTAL_FUEL_EARNED, 1_000_000),
    Achievement("galacticTycoon", "Galactic Tycoon", "Earn 1 billion fuel", "production",
                _C.TOTAL_FUEL_EARNED, 1_000_000_000),

    # Prestige
    Achievement("firstPrestige", "New Beginnings", "Prestige for the first time", "prestige",
                _C.TOTAL_PRESTIGES, 1),
    Achievement("veteranPrestige", "Cosmic Veteran", "Prestige 10 times", "prestige", _C.TOTAL_PRESTIGES, 10),
    Achievement("crystalHoarder", "Crystal Hoarder", "Hold 100 Nebula Crystals", "prestige",
                _C.TOTAL_NEBULA_CRYSTALS, 100),
)
