"""Building definitions."""
from __future__ import annotations
from dataclasses import dataclass

from ..config import COST_MULTIPLIER


@dataclass(frozen=True)
class Building:
    """A fuel producer that can be bought in any quantity."""
    id: str
    name: str
    description: str
    base_cost: float
    production: float  # Fuel per second per unit
    tier: int
    cost_multiplier: float = COST_MULTIPLIER


BUILDINGS: tuple[Building, ...] = (
    Building("spaceMiner", "Space Miner", "A basic mining drone that collects stardust", 10, 0.1, 1),
    Building("asteroidHarvester", "Asteroid Harvester", "Harvests fuel from nearby asteroids", 100, 1, 2),
    Building("lunarRefinery", "Lunar Refinery", "Refines lunar regolith into fuel", 1_100, 8, 3),
    Building("solarCollector", "Solar Collector", "Captures solar wind particles", 12_000, 47, 4),
    Building("wormholeGenerator", "Wormhole Generator", "Pulls fuel from parallel dimensions", 130_000, 260, 5),
    Building("galacticNexus", "Galactic Nexus", "A hub that draws fuel from across the galaxy", 1_400_000, 1_400, 6),
    Building("universeEngine", "Universe Engine", "Harnesses the energy of creation itself", 20_000_000, 7_800, 7),
)
