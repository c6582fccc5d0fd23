"""Tests for object physics and spawning."""
import random

import pytest
from dataclasses import replace

from cosmic_clicker.catalog.objects import ObjectSize, ObjectType, OBJECT_TEMPLATES, SpawnEntry
from cosmic_clicker.core.registries import get_catalog
from cosmic_clicker.core.state import GameObject, ShipSpeed, initial_game_state
from cosmic_clicker.simulation.physics import (
    Position, Velocity, advance_objects, check_collision, check_laser_hit, check_laser_multiple_hits,
    check_out_of_bounds, distance, find_nearest_object, is_point_in_circle, spawn_bounds, update_object_position,
    update_object_rotation,
)
from cosmic_clicker.simulation.resources import ResourceType
from cosmic_clicker.simulation.spawning import (
    ObjectSpawner, create_object_from_template, generate_resource_drops, generate_spawn_position,
    object_velocity, scaled_health, select_spawn_template,
)


class SequenceRandom:
    """Stand-in generator returning a fixed sequence of values."""

    def __init__(self, values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


def make_object(object_id="obj_1", x=400.0, y=300.0, health=30, size=40, **kwargs):
    return GameObject(
        id=object_id,
        type=ObjectType.ASTEROID,
        template_id="asteroid_stone_small",
        position=Position(x, y),
        velocity=kwargs.pop("velocity", Velocity(0, 100)),
        health=health,
        max_health=health,
        size=ObjectSize.SMALL,
        width=size,
        height=size,
        **kwargs,
    )


class TestMotion:
    """Tests for integration and bounds."""

    def test_position_update(self):
        """Test position integrates velocity."""
        pos = update_object_position(Position(10, 20), Velocity(5, -10), 2)
        assert pos == Position(20, 0)

    def test_rotation_wraps(self):
        """Test rotation stays within [0, 360)."""
        assert update_object_rotation(350, 20, 1) == pytest.approx(10)
        assert update_object_rotation(10, -20, 1) == pytest.approx(350)

    def test_out_of_bounds(self):
        """Test objects leave once their top edge passes the screen bottom."""
        assert not check_out_of_bounds(make_object(y=620), 600)
        assert check_out_of_bounds(make_object(y=621), 600)

    def test_advance_prunes(self):
        """Test advancing drops destroyed and off-screen objects."""
        objects = (
            make_object("a", y=100),
            make_object("b", y=590),
            make_object("c", y=100, destroyed=True),
        )
        advanced = advance_objects(objects, 1.0, 600)

        assert [o.id for o in advanced] == ["a"]
        assert advanced[0].position.y == pytest.approx(200)

    def test_collision(self):
        """Test circle overlap."""
        assert check_collision(make_object("a", x=0, y=0), make_object("b", x=30, y=0))
        assert not check_collision(make_object("a", x=0, y=0), make_object("b", x=50, y=0))

    def test_touching_objects_collide(self):
        """Test objects whose hitboxes just touch count as colliding."""
        assert check_collision(make_object("a", x=0, y=0), make_object("b", x=40, y=0))

    def test_distance_helpers(self):
        """Test point distance and circle containment."""
        assert distance(Position(0, 0), Position(3, 4)) == pytest.approx(5)
        assert is_point_in_circle(Position(0, 0), Position(3, 4), 5)
        assert not is_point_in_circle(Position(0, 0), Position(3, 4), 4.9)


class TestHitDetection:
    """Tests for laser targeting."""

    def test_nearest_hit(self):
        """Test the nearest live object is chosen."""
        near = make_object("near", x=110, y=100)
        far = make_object("far", x=160, y=100)
        assert check_laser_hit(Position(100, 100), [far, near], 100).id == "near"

    def test_destroyed_ignored(self):
        """Test destroyed objects cannot be hit."""
        dead = make_object("dead", x=100, y=100, destroyed=True)
        assert check_laser_hit(Position(100, 100), [dead], 100) is None

    def test_hit_reaches_past_range_by_hitbox(self):
        """Test the hitbox radius extends the laser range for a single laser."""
        wide = make_object("wide", x=120, y=0, size=60)
        assert check_laser_hit(Position(0, 0), [wide], 100).id == "wide"
        assert [h.id for h in check_laser_multiple_hits(Position(0, 0), [wide], 100, 2)] == ["wide"]
        assert check_laser_hit(Position(0, 0), [make_object(x=131, y=0, size=60)], 100) is None

    def test_single_hit_matches_first_multi_hit(self):
        """Test one laser picks the same target as the first of several."""
        objects = [make_object("big", x=100, y=0, size=120), make_object("small", x=60, y=0)]
        assert check_laser_hit(Position(0, 0), objects, 50).id == "small"
        assert check_laser_multiple_hits(Position(0, 0), objects, 50, 1)[0].id == "small"

    def test_miss(self):
        """Test a shot far from every object misses."""
        assert check_laser_hit(Position(0, 0), [make_object(x=500, y=500)], 100) is None

    def test_multiple_hits_sorted(self):
        """Test multi-hit returns nearest first, limited to max hits."""
        objects = [make_object(str(i), x=100 + i * 10, y=100) for i in (3, 1, 2)]
        hits = check_laser_multiple_hits(Position(100, 100), objects, 100, 2)
        assert [h.id for h in hits] == ["1", "2"]
        assert check_laser_multiple_hits(Position(100, 100), objects, 100, 0) == []

    def test_find_nearest_is_strict(self):
        """Test nearest search excludes objects exactly at max range."""
        obj = make_object(x=100, y=0)
        assert find_nearest_object(Position(0, 0), [obj], 100) is None
        assert find_nearest_object(Position(0, 0), [obj], 100.1).id == obj.id


class TestSpawning:
    """Tests for template selection and object creation."""

    def test_weighted_selection(self):
        """Test weights partition the roll."""
        entries = [SpawnEntry("a", 1), SpawnEntry("b", 3)]
        assert select_spawn_template(entries, SequenceRandom([0.1])) == "a"
        assert select_spawn_template(entries, SequenceRandom([0.5])) == "b"

    def test_empty_table(self):
        """Test an empty table selects nothing."""
        assert select_spawn_template([], SequenceRandom([0.5])) is None

    def test_zero_weights_fall_back(self):
        """Test degenerate weights fall back to the first entry."""
        entries = [SpawnEntry("a", 0), SpawnEntry("b", 0)]
        assert select_spawn_template(entries, SequenceRandom([0.9])) == "a"

    def test_loot_rolls(self):
        """Test probability gates then uniform amounts."""
        scrap = OBJECT_TEMPLATES["debris_scrap"]
        # carbon skipped (0.9 > 0.7), iron kept (0.1), amount floor(0.5 * 3) + 1
        drops = generate_resource_drops(scrap.loot_table, SequenceRandom([0.9, 0.1, 0.5]))

        assert len(drops) == 1
        assert drops[0].resource == ResourceType.IRON
        assert drops[0].amount == 2

    def test_scaled_health(self):
        """Test HP grows 30% per zone."""
        assert scaled_health(100, 1) == 100
        assert scaled_health(100, 2) == 130
        assert scaled_health(100, 3) == 169

    def test_velocity(self):
        """Test fall speed grows with zone."""
        velocity = object_velocity(1, SequenceRandom([0.5]))
        assert velocity.vx == 0
        assert velocity.vy == pytest.approx(110)

    def test_spawn_position(self):
        """Test spawns appear above the screen inside the side margins."""
        assert generate_spawn_position(SequenceRandom([0.0]), 800) == Position(100, -100)
        assert generate_spawn_position(SequenceRandom([1.0]), 800) == Position(700, -100)
        assert spawn_bounds(800) == (100, 700)
        assert spawn_bounds(150) == (100, 100)

    def test_create_from_template(self):
        """Test building an object from a template."""
        template = OBJECT_TEMPLATES["asteroid_iron_large"]
        obj = create_object_from_template(template, Position(300, -100), 2, random.Random(1), "obj_9")

        assert obj.id == "obj_9"
        assert obj.health == obj.max_health == 156
        assert obj.type == ObjectType.ASTEROID
        assert 0 <= obj.rotation < 360
        assert -90 <= obj.rotation_speed <= 90
        assert all(35 <= d.amount <= 45 for d in obj.resource_drops)
        assert not obj.destroyed

    def test_seeded_spawns_are_deterministic(self):
        """Test that equal seeds produce equal objects."""
        state = initial_game_state(0)
        first = ObjectSpawner(get_catalog(), random.Random(42)).update(3.0, state)
        second = ObjectSpawner(get_catalog(), random.Random(42)).update(3.0, state)

        assert len(first) == 3
        assert first == second


class TestObjectSpawner:
    """Tests for the spawn timer."""

    def test_interval_by_speed(self):
        """Test ship speed changes the spawn interval."""
        spawner = ObjectSpawner(get_catalog(), random.Random(0))
        state = initial_game_state(0)

        assert spawner.spawn_interval(state) == pytest.approx(1.0)
        assert spawner.spawn_interval(replace(state, ship_speed=ShipSpeed.BOOST)) == pytest.approx(1 / 1.6)
        assert spawner.spawn_interval(replace(state, current_zone=6)) == pytest.approx(0.5)

    def test_timer_carries_remainder(self):
        """Test leftover time is kept between updates."""
        spawner = ObjectSpawner(get_catalog(), random.Random(0))
        spawned = spawner.update(2.5, initial_game_state(0))

        assert len(spawned) == 2
        assert spawner.spawn_timer == pytest.approx(0.5)
        assert len({obj.id for obj in spawned}) == 2

    def test_active_object_cap(self):
        """Test no spawns beyond the active object cap."""
        spawner = ObjectSpawner(get_catalog(), random.Random(0), max_active_objects=1)
        state = replace(initial_game_state(0), objects=(make_object(),))
        assert spawner.update(5.0, state) == []

    def test_ids_skip_existing(self):
        """Test generated ids do not collide with loaded objects."""
        spawner = ObjectSpawner(get_catalog(), random.Random(0))
        state = replace(initial_game_state(0), objects=(make_object("obj_1"),))
        obj = spawner.spawn(state)
        assert obj.id == "obj_2"
