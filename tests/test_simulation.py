"""Integration tests for the game session and event bus."""
import pytest
from dataclasses import replace

from cosmic_clicker.catalog.objects import ObjectSize, ObjectType
from cosmic_clicker.config import EngineConfig
from cosmic_clicker.core import actions as a
from cosmic_clicker.core.events import (
    AchievementUnlockedEvent, CargoWarningEvent, Event, EventBus, NotificationEvent,
    ObjectDestroyedEvent, PrestigeEvent, ResourcesCollectedEvent, ZoneChangedEvent,
)
from cosmic_clicker.core.state import GameObject, ResourceDrop, initial_game_state
from cosmic_clicker.core.world import GameSession
from cosmic_clicker.simulation.physics import Position, Velocity
from cosmic_clicker.simulation.resources import ResourceType


def make_object(object_id="obj_1", drops=()):
    return GameObject(
        id=object_id,
        type=ObjectType.ASTEROID,
        template_id="asteroid_stone_large",
        position=Position(400, 300),
        velocity=Velocity(0, 100),
        health=100,
        max_health=100,
        size=ObjectSize.LARGE,
        width=80,
        height=80,
        resource_drops=tuple(drops),
    )


def collect(session, event_type):
    received = []
    session.event_bus.subscribe(event_type, received.append)
    return received


class TestEventBus:
    """Tests for EventBus."""

    def test_publish(self):
        """Test publishing to a subscriber."""
        bus = EventBus()
        received = []
        bus.subscribe(NotificationEvent, received.append)
        bus.publish(NotificationEvent("hello"))

        assert len(received) == 1
        assert received[0].message == "hello"

    def test_base_class_subscription(self):
        """Test subscribers to a base type see subclasses."""
        bus = EventBus()
        received = []
        bus.subscribe(Event, received.append)
        bus.publish(NotificationEvent("hi"))
        assert len(received) == 1

    def test_unsubscribe(self):
        """Test unsubscribed handlers stop receiving."""
        bus = EventBus()
        received = []
        bus.subscribe(NotificationEvent, received.append)
        bus.unsubscribe(NotificationEvent, received.append)
        bus.publish(NotificationEvent("hi"))
        assert received == []

    def test_queue_deferred(self):
        """Test queued events wait for process_queue."""
        bus = EventBus()
        received = []
        bus.subscribe(NotificationEvent, received.append)
        bus.queue(NotificationEvent("later"))

        assert received == []
        bus.process_queue()
        assert len(received) == 1

    def test_publish_during_processing(self):
        """Test events published by handlers are delivered in the same pass."""
        bus = EventBus()
        received = []

        def relay(event):
            bus.publish(NotificationEvent(f"zone {event.new_zone}"))

        bus.subscribe(ZoneChangedEvent, relay)
        bus.subscribe(NotificationEvent, received.append)
        bus.queue(ZoneChangedEvent(1, 2, "Debris Field"))
        bus.process_queue()

        assert [e.message for e in received] == ["zone 2"]

    def test_clear(self):
        """Test clearing removes handlers and queued events."""
        bus = EventBus()
        received = []
        bus.subscribe(NotificationEvent, received.append)
        bus.queue(NotificationEvent("dropped"))
        bus.clear()
        bus.process_queue()
        assert received == []


class TestGameSession:
    """Tests for GameSession."""

    def test_initial_state(self):
        """Test a new session starts a fresh game at the clock time."""
        session = GameSession(clock=lambda: 500.0)
        assert session.state.fuel == 0
        assert session.state.last_save_time == 500.0
        assert not session.paused

    def test_dispatch(self):
        """Test dispatch replaces the held state."""
        session = GameSession(clock=lambda: 0.0)
        session.dispatch(a.Click())
        assert session.state.fuel == 1

    def test_rejected_action_keeps_state(self):
        """Test a no-op action leaves the same state object."""
        session = GameSession(clock=lambda: 0.0)
        before = session.state
        assert session.dispatch(a.BuyBuilding("spaceMiner")) is before

    def test_frame_delta_clamped(self):
        """Test long frames are clamped before reaching the engine."""
        session = GameSession(clock=lambda: 0.0)
        session.update(5.0)
        assert session.state.statistics.total_play_time == pytest.approx(0.25)

    def test_clamp_disabled(self):
        """Test the clamp can be turned off."""
        session = GameSession(config=EngineConfig(max_frame_delta=None), clock=lambda: 0.0)
        session.update(5.0)
        assert session.state.statistics.total_play_time == pytest.approx(5.0)

    def test_negative_delta(self):
        """Test negative frame time does nothing."""
        session = GameSession(clock=lambda: 0.0)
        before = session.state
        session.update(-1.0)
        assert session.state is before

    def test_pause(self):
        """Test paused sessions do not advance."""
        session = GameSession(clock=lambda: 0.0)
        session.pause()
        session.update(0.1)
        assert session.state.statistics.total_play_time == 0

        session.toggle_pause()
        session.update(0.1)
        assert session.state.statistics.total_play_time == pytest.approx(0.1)

    def test_speed_clamped(self):
        """Test simulation speed bounds."""
        session = GameSession(clock=lambda: 0.0)
        session.speed = 100
        assert session.speed == 10.0
        session.speed = 0
        assert session.speed == 0.25

    def test_spawns_over_time(self):
        """Test the session spawns objects as time passes."""
        session = GameSession(seed=1, clock=lambda: 0.0)
        for _ in range(4):
            session.update(0.25)
        assert len(session.state.objects) == 1

    def test_seeded_sessions_match(self):
        """Test two sessions with the same seed and inputs agree."""
        first = GameSession(seed=7, clock=lambda: 0.0)
        second = GameSession(seed=7, clock=lambda: 0.0)
        for _ in range(40):
            first.update(0.1)
            second.update(0.1)

        assert first.state == second.state
        assert len(first.state.objects) > 0

    def test_achievements_unlock(self):
        """Test qualifying achievements unlock on update."""
        session = GameSession(clock=lambda: 0.0)
        unlocked = collect(session, AchievementUnlockedEvent)
        session.dispatch(a.Click())
        session.update(0.1)

        assert "firstClick" in session.state.achievements
        assert [e.achievement_id for e in unlocked] == ["firstClick"]


class TestSessionEvents:
    """Tests for events published on state changes."""

    def test_object_destroyed(self):
        """Test destruction publishes the object and its drops."""
        state = replace(initial_game_state(0), objects=(make_object(drops=[ResourceDrop(ResourceType.STONE, 10)]),))
        session = GameSession(state=state)
        destroyed = collect(session, ObjectDestroyedEvent)
        collected = collect(session, ResourcesCollectedEvent)
        session.dispatch(a.DestroyObject("obj_1"))

        assert len(destroyed) == 1
        assert destroyed[0].drops == {"stone": 10}
        assert collected[0].resource_type == ResourceType.STONE
        assert collected[0].amount == 5

    def test_cargo_warning(self):
        """Test crossing the warning band publishes once."""
        state = replace(initial_game_state(0), objects=(make_object(drops=[ResourceDrop(ResourceType.STONE, 85)]),))
        session = GameSession(state=state)
        warnings = collect(session, CargoWarningEvent)
        session.dispatch(a.SetAutoConvertPercent(0))
        session.dispatch(a.DestroyObject("obj_1"))
        session.dispatch(a.Click())

        assert len(warnings) == 1
        assert warnings[0].status == "warning"
        assert warnings[0].utilization == pytest.approx(85)

    def test_prestige(self):
        """Test prestige publishes the crystals gained."""
        state = replace(initial_game_state(0), total_fuel_earned=9e6)
        session = GameSession(state=state, clock=lambda: 0.0)
        events = collect(session, PrestigeEvent)
        session.spawner.spawn_timer = 0.7
        session.dispatch(a.Prestige())

        assert events[0].crystals_gained == 3
        assert events[0].total_prestiges == 1
        assert session.spawner.spawn_timer == 0

    def test_zone_change(self):
        """Test warping publishes the new zone."""
        state = replace(initial_game_state(0), zone_progress=10_000)
        session = GameSession(state=state)
        events = collect(session, ZoneChangedEvent)
        session.dispatch(a.WarpToNextZone())

        assert events[0].old_zone == 1
        assert events[0].new_zone == 2
        assert events[0].zone_name == "Debris Field"
