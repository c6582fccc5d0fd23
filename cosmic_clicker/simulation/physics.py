"""Screen-space physics for falling objects and hit detection (pixels, seconds)."""
from __future__ import annotations
import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from ..core.state import GameObject


@dataclass(frozen=True)
class Position:
    """2D screen position in pixels."""
    x: float = 0.0
    y: float = 0.0

    def distance_to(self, other: Position) -> float:
        """Calculate distance to another position."""
        dx = other.x - self.x
        dy = other.y - self.y
        return math.sqrt(dx * dx + dy * dy)


@dataclass(frozen=True)
class Velocity:
    """2D velocity (pixels per second)."""
    vx: float = 0.0
    vy: float = 0.0


def distance(a: Position, b: Position) -> float:
    return a.distance_to(b)


def update_object_position(position: Position, velocity: Velocity, dt: float) -> Position:
    """Integrate position by velocity over dt."""
    return Position(position.x + velocity.vx * dt, position.y + velocity.vy * dt)


def update_object_rotation(rotation: float, rotation_speed: float, dt: float) -> float:
    """Advance rotation in degrees, wrapped into [0, 360)."""
    return (rotation + rotation_speed * dt) % 360


def check_out_of_bounds(obj: GameObject, screen_height: float) -> bool:
    """True once the object's top edge has passed the bottom of the screen."""
    return obj.position.y - obj.height / 2 > screen_height


def hitbox_radius(obj: GameObject) -> float:
    return max(obj.width, obj.height) / 2


def is_point_in_circle(point: Position, center: Position, radius: float) -> bool:
    return distance(point, center) <= radius


def _in_reach(point: Position, obj: GameObject, laser_range: float) -> bool:
    return is_point_in_circle(point, obj.position, hitbox_radius(obj) + laser_range)


def check_laser_hit(
    point: Position, objects: Iterable[GameObject], laser_range: float
) -> GameObject | None:
    """Nearest live object whose hitbox, widened by the laser range, contains the point."""
    closest: GameObject | None = None
    closest_distance = math.inf

    for obj in objects:
        if obj.destroyed or not _in_reach(point, obj, laser_range):
            continue
        dist = distance(point, obj.position)
        if dist < closest_distance:
            closest = obj
            closest_distance = dist

    return closest


def check_laser_multiple_hits(
    point: Position, objects: Iterable[GameObject], laser_range: float, max_hits: int
) -> list[GameObject]:
    """Up to max_hits live objects within reach of the point, nearest first."""
    if max_hits <= 0:
        return []

    hits = [
        (distance(point, obj.position), obj)
        for obj in objects
        if not obj.destroyed and _in_reach(point, obj, laser_range)
    ]
    hits.sort(key=lambda pair: pair[0])
    return [obj for _, obj in hits[:max_hits]]


def find_nearest_object(
    point: Position, objects: Iterable[GameObject], max_range: float
) -> GameObject | None:
    """Nearest live object strictly within max_range of the point."""
    nearest: GameObject | None = None
    nearest_distance = max_range

    for obj in objects:
        if obj.destroyed:
            continue
        dist = point.distance_to(obj.position)
        if dist < nearest_distance:
            nearest = obj
            nearest_distance = dist

    return nearest


def check_collision(a: GameObject, b: GameObject) -> bool:
    """Circle overlap test using each object's hitbox radius; touching counts."""
    return a.position.distance_to(b.position) <= hitbox_radius(a) + hitbox_radius(b)


def spawn_bounds(screen_width: float, margin: float = 100.0) -> tuple[float, float]:
    """Horizontal range in which new objects may appear."""
    return (margin, max(margin, screen_width - margin))


def advance_objects(
    objects: Iterable[GameObject], dt: float, screen_height: float
) -> tuple[GameObject, ...]:
    """Step live objects forward and drop destroyed or off-screen ones."""
    advanced = []
    for obj in objects:
        if obj.destroyed:
            continue
        moved = replace(
            obj,
            position=update_object_position(obj.position, obj.velocity, dt),
            rotation=update_object_rotation(obj.rotation, obj.rotation_speed, dt),
        )
        if check_out_of_bounds(moved, screen_height):
            continue
        advanced.append(moved)
    return tuple(advanced)
