"""Object spawning: weighted template selection, loot rolls and the spawn timer.

All randomness comes from the random.Random passed in, so a seeded
generator reproduces the same stream of objects.
"""
from __future__ import annotations
import logging
import math
import random
from typing import TYPE_CHECKING, Sequence

from ..config import (
    OBJECT_SPAWN_RATE, OBJECT_FALL_SPEED, ZONE_FALL_SPEED_BONUS, ZONE_HP_SCALING,
    SPEED_SPAWN_FACTORS, SCREEN_WIDTH,
)
from ..catalog.objects import LootEntry, ObjectTemplate, SpawnEntry
from ..core.state import GameObject, GameState, ResourceDrop
from .physics import Position, Velocity, spawn_bounds

if TYPE_CHECKING:
    from ..core.registries import CatalogRegistry

logger = logging.getLogger(__name__)

SPAWN_Y = -100.0


def select_spawn_template(entries: Sequence[SpawnEntry], rng: random.Random) -> str | None:
    """Weighted random choice of a template id."""
    if not entries:
        return None

    total_weight = sum(entry.weight for entry in entries)
    roll = rng.random() * total_weight
    for entry in entries:
        roll -= entry.weight
        if roll <= 0:
            return entry.template_id
    return entries[0].template_id


def generate_resource_drops(loot_table: Sequence[LootEntry], rng: random.Random) -> tuple[ResourceDrop, ...]:
    """Roll each loot entry: probability first, then a uniform amount."""
    drops = []
    for entry in loot_table:
        if rng.random() > entry.probability:
            continue
        span = entry.max_amount - entry.min_amount + 1
        amount = math.floor(rng.random() * span) + entry.min_amount
        drops.append(ResourceDrop(entry.resource, amount))
    return tuple(drops)


def object_velocity(zone: int, rng: random.Random, base_fall_speed: float = OBJECT_FALL_SPEED) -> Velocity:
    """Slight horizontal drift; fall speed grows 10% per zone."""
    vx = (rng.random() - 0.5) * 40
    vy = base_fall_speed * (1 + zone * ZONE_FALL_SPEED_BONUS)
    return Velocity(vx, vy)


def scaled_health(base_hp: int, zone: int) -> int:
    """Template HP scaled by 1.3 per zone beyond the first."""
    return max(1, math.floor(base_hp * ZONE_HP_SCALING ** (max(1, zone) - 1)))


def generate_spawn_position(rng: random.Random, screen_width: float = SCREEN_WIDTH) -> Position:
    """Random point above the top edge, 100px clear of either side."""
    low, high = spawn_bounds(screen_width)
    x = low + rng.random() * (high - low)
    return Position(x, SPAWN_Y)


def create_object_from_template(
    template: ObjectTemplate,
    position: Position,
    zone: int,
    rng: random.Random,
    object_id: str,
    created_at: float = 0.0,
    base_fall_speed: float = OBJECT_FALL_SPEED,
) -> GameObject:
    velocity = object_velocity(zone, rng, base_fall_speed)
    drops = generate_resource_drops(template.loot_table, rng)
    hp = scaled_health(template.hp, zone)
    rotation = rng.random() * 360
    rotation_speed = (rng.random() - 0.5) * 180

    return GameObject(
        id=object_id,
        type=template.type,
        template_id=template.id,
        position=position,
        velocity=velocity,
        health=hp,
        max_health=hp,
        size=template.size,
        width=template.width,
        height=template.height,
        resource_drops=drops,
        special_drops=template.special_drops,
        rotation=rotation,
        rotation_speed=rotation_speed,
        created_at=created_at,
    )


class ObjectSpawner:
    """Accumulates time and emits new objects at the current zone's rate.

    The spawner owns the timer and id counter; the objects it returns are
    handed to the engine as SpawnObject actions.
    """

    def __init__(self, catalog: CatalogRegistry, rng: random.Random,
                 screen_width: float = SCREEN_WIDTH, max_active_objects: int = 30) -> None:
        self.catalog = catalog
        self.rng = rng
        self.screen_width = screen_width
        self.max_active_objects = max_active_objects
        self.spawn_timer = 0.0
        self._next_id = 1

    def spawn_interval(self, state: GameState) -> float:
        """Seconds between spawns for the state's zone and ship speed."""
        table = self.catalog.spawn_table_for_zone(state.current_zone)
        if table is None:
            return math.inf
        rate = OBJECT_SPAWN_RATE * table.spawn_rate * SPEED_SPAWN_FACTORS.get(state.ship_speed.value, 1.0)
        if rate <= 0:
            return math.inf
        return 1.0 / rate

    def update(self, dt: float, state: GameState) -> list[GameObject]:
        """Advance the timer by dt and return any objects due to appear."""
        if dt <= 0:
            return []

        interval = self.spawn_interval(state)
        if interval == math.inf:
            return []

        self.spawn_timer += dt
        spawned: list[GameObject] = []
        active = len(state.live_objects())

        while self.spawn_timer >= interval:
            self.spawn_timer -= interval
            if active + len(spawned) >= self.max_active_objects:
                continue
            obj = self.spawn(state)
            if obj is not None:
                spawned.append(obj)

        return spawned

    def spawn(self, state: GameState) -> GameObject | None:
        """Create one object for the state's zone."""
        table = self.catalog.spawn_table_for_zone(state.current_zone)
        if table is None:
            return None

        template_id = select_spawn_template(table.entries, self.rng)
        template = self.catalog.get_template(template_id) if template_id else None
        if template is None:
            logger.warning("Spawn table for zone %d names unknown template %r", table.zone, template_id)
            return None

        object_id = self._allocate_id({obj.id for obj in state.objects})
        position = generate_spawn_position(self.rng, self.screen_width)
        return create_object_from_template(
            template, position, state.current_zone, self.rng, object_id,
            created_at=state.statistics.total_play_time,
        )

    def _allocate_id(self, taken: set[str]) -> str:
        # Loaded saves may already hold objects with low ids
        while f"obj_{self._next_id}" in taken:
            self._next_id += 1
        object_id = f"obj_{self._next_id}"
        self._next_id += 1
        return object_id

    def reset(self) -> None:
        self.spawn_timer = 0.0
