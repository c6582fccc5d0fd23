"""Game session: the single owner of the current state."""
from __future__ import annotations
import logging
import random
import time
from typing import Callable

from ..config import EngineConfig
from ..simulation.achievements import check_achievements
from ..simulation.cargo import CargoStatus, cargo_status, cargo_utilization
from ..simulation.resources import total_cargo
from ..simulation.spawning import ObjectSpawner
from . import actions as a
from .engine import EngineContext, apply_action
from .events import (
    EventBus, AchievementUnlockedEvent, CargoWarningEvent, CreditsEarnedEvent,
    ObjectDestroyedEvent, PrestigeEvent, ResourcesCollectedEvent, ZoneChangedEvent,
)
from .registries import get_catalog
from .state import GameState, initial_game_state

logger = logging.getLogger(__name__)


class GameSession:
    """Serializes every transition and turns frame time into actions.

    The engine itself never clamps elapsed time; update() applies the
    config's max_frame_delta before anything reaches the engine.
    """

    def __init__(
        self,
        state: GameState | None = None,
        config: EngineConfig | None = None,
        seed: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or EngineConfig()
        self.rng = random.Random(seed)
        self.catalog = get_catalog()
        self.context = EngineContext(rng=self.rng, config=self.config, clock=clock, catalog=self.catalog)
        self.event_bus = EventBus()
        self.spawner = ObjectSpawner(
            self.catalog, self.rng,
            screen_width=self.config.screen_width,
            max_active_objects=self.config.max_active_objects,
        )
        self.state = state if state is not None else initial_game_state(clock())
        self._paused: bool = False
        self._speed: float = 1.0
        self._cargo_status = self._current_cargo_status(self.state)

    def dispatch(self, action: a.Action) -> GameState:
        """Apply an action to the current state and publish what changed."""
        before = self.state
        after = apply_action(before, action, self.context)
        if after is before:
            return after

        self.state = after
        if isinstance(action, (a.Prestige, a.HardReset, a.LoadSave)):
            self.spawner.reset()
        self._queue_changes(before, after)
        self.event_bus.process_queue()
        return after

    def clamp_delta(self, dt: float) -> float:
        """Apply the frame-delta policy. Negative deltas become zero."""
        dt = max(0.0, dt)
        if self.config.max_frame_delta is not None:
            dt = min(dt, self.config.max_frame_delta)
        return dt

    def update(self, dt: float) -> None:
        """Advance one frame: economy and physics, bots, spawns, achievements."""
        if self._paused:
            return

        dt = self.clamp_delta(dt) * self._speed
        if dt <= 0:
            return

        self.dispatch(a.Tick(dt))
        self.dispatch(a.UpdateBots(dt))

        for obj in self.spawner.update(dt, self.state):
            self.dispatch(a.SpawnObject(obj))

        for achievement_id in check_achievements(self.state, self.catalog):
            self.dispatch(a.UnlockAchievement(achievement_id))

    def _current_cargo_status(self, state: GameState) -> CargoStatus:
        utilization = cargo_utilization(total_cargo(state.resources), state.modules.cargo_hold.capacity)
        return cargo_status(utilization, self.config.cargo_warning_threshold, self.config.cargo_danger_threshold)

    def _queue_changes(self, before: GameState, after: GameState) -> None:
        bus = self.event_bus

        was_live = {obj.id for obj in before.objects if not obj.destroyed}
        for obj in after.objects:
            if obj.destroyed and obj.id in was_live:
                drops = {drop.resource.value: drop.amount for drop in obj.resource_drops}
                bus.queue(ObjectDestroyedEvent(obj.id, obj.template_id, drops))

        if after.credits > before.credits:
            bus.queue(CreditsEarnedEvent(after.credits - before.credits, after.credits))

        for resource, amount in after.resources.items():
            gained = amount - before.resources.get(resource, 0)
            if gained > 0:
                bus.queue(ResourcesCollectedEvent(resource, gained))

        for achievement_id in sorted(after.achievements - before.achievements):
            achievement = self.catalog.get_achievement(achievement_id)
            name = achievement.name if achievement else achievement_id
            logger.info("Achievement unlocked: %s", name)
            bus.queue(AchievementUnlockedEvent(achievement_id, name))

        if after.statistics.total_prestiges > before.statistics.total_prestiges:
            bus.queue(PrestigeEvent(
                crystals_gained=after.nebula_crystals - before.nebula_crystals,
                total_crystals=after.nebula_crystals,
                total_prestiges=after.statistics.total_prestiges,
            ))

        if after.current_zone != before.current_zone:
            zone = self.catalog.get_zone(after.current_zone)
            bus.queue(ZoneChangedEvent(before.current_zone, after.current_zone, zone.name if zone else ""))

        status = self._current_cargo_status(after)
        if status != self._cargo_status:
            self._cargo_status = status
            utilization = cargo_utilization(total_cargo(after.resources), after.modules.cargo_hold.capacity)
            bus.queue(CargoWarningEvent(utilization, status.value))

    def pause(self) -> None:
        self._paused = True

    def unpause(self) -> None:
        self._paused = False

    def toggle_pause(self) -> None:
        self._paused = not self._paused

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def speed(self) -> float:
        """Simulation speed multiplier applied after clamping."""
        return self._speed

    @speed.setter
    def speed(self, value: float) -> None:
        """Set simulation speed (clamped 0.25 to 10)."""
        self._speed = max(0.25, min(10.0, value))
