"""Save and load game state.

Saves are JSON documents of the form {version, timestamp, game_state}.
Deserialization fills any missing field from the defaults of a fresh
game, so older saves keep loading as the state grows.
"""
from __future__ import annotations
import json
import logging
import math
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from ..config import SAVE_KEY, VERSION
from ..catalog.objects import ObjectSize, ObjectType, SpecialDrop
from ..core.state import (
    Bot, BotBayModule, BotState, CargoHoldModule, ConverterModule, EngineModule, GameObject,
    GameState, LaserModule, ResourceDrop, ShipModules, ShipSpeed, Statistics, initial_game_state,
)
from ..simulation.cargo import validate_resource_priority
from ..simulation.physics import Position, Velocity
from ..simulation.resources import ResourceType, empty_inventory

logger = logging.getLogger(__name__)

# Default save directory
SAVE_DIR = Path.home() / ".cosmic_clicker" / "saves"

_LOAD_ERRORS = (KeyError, TypeError, ValueError, AttributeError, OverflowError)


@dataclass
class ImportResult:
    """Outcome of importing a save string. Never raised, always returned."""
    success: bool
    game_state: GameState | None = None
    error: str | None = None


# Serialization

def _position(p: Position) -> dict[str, float]:
    return {"x": p.x, "y": p.y}


def _velocity(v: Velocity) -> dict[str, float]:
    return {"vx": v.vx, "vy": v.vy}


def serialize_object(obj: GameObject) -> dict[str, Any]:
    return {
        "id": obj.id,
        "type": obj.type.value,
        "template_id": obj.template_id,
        "position": _position(obj.position),
        "velocity": _velocity(obj.velocity),
        "rotation": obj.rotation,
        "rotation_speed": obj.rotation_speed,
        "health": obj.health,
        "max_health": obj.max_health,
        "size": obj.size.value,
        "width": obj.width,
        "height": obj.height,
        "resource_drops": [{"type": d.resource.value, "amount": d.amount} for d in obj.resource_drops],
        "special_drops": (
            {"fuel": obj.special_drops.fuel, "credits": obj.special_drops.credits}
            if obj.special_drops else None
        ),
        "destroyed": obj.destroyed,
        "created_at": obj.created_at,
    }


def serialize_bot(bot: Bot) -> dict[str, Any]:
    return {
        "id": bot.id,
        "position": _position(bot.position),
        "velocity": _velocity(bot.velocity),
        "state": bot.state.value,
        "target_object_id": bot.target_object_id,
        "cargo_amount": bot.cargo_amount,
        "cargo_type": bot.cargo_type.value if bot.cargo_type else None,
        "mining_progress": bot.mining_progress,
        "created_at": bot.created_at,
    }


def serialize_modules(modules: ShipModules) -> dict[str, Any]:
    laser, bay, conv, cargo, engine = (
        modules.laser, modules.bot_bay, modules.converter, modules.cargo_hold, modules.engine,
    )
    return {
        "laser": {
            "damage": laser.damage,
            "range": laser.range,
            "cooldown": laser.cooldown,
            "laser_count": laser.laser_count,
            "auto_target": laser.auto_target,
            "piercing": laser.piercing,
            "cooldown_remaining": laser.cooldown_remaining,
            "purchased_upgrades": sorted(laser.purchased_upgrades),
        },
        "bot_bay": {
            "bot_count": bay.bot_count,
            "mining_speed": bay.mining_speed,
            "range": bay.range,
            "bot_capacity": bay.bot_capacity,
            "purchased_upgrades": sorted(bay.purchased_upgrades),
        },
        "converter": {
            "conversion_speed": conv.conversion_speed,
            "efficiency": conv.efficiency,
            "auto_convert_percent": conv.auto_convert_percent,
            "unlocked_tiers": list(conv.unlocked_tiers),
            "conversion_progress": conv.conversion_progress,
            "purchased_upgrades": sorted(conv.purchased_upgrades),
        },
        "cargo_hold": {
            "capacity": cargo.capacity,
            "auto_sell": cargo.auto_sell,
            "resource_priority": [r.value for r in cargo.resource_priority],
            "purchased_upgrades": sorted(cargo.purchased_upgrades),
        },
        "engine": {
            "fuel_efficiency": engine.fuel_efficiency,
            "unlocked_speeds": list(engine.unlocked_speeds),
            "purchased_upgrades": sorted(engine.purchased_upgrades),
        },
    }


def serialize_state(state: GameState) -> dict[str, Any]:
    """Convert a state into plain JSON-compatible data."""
    stats = state.statistics
    return {
        "fuel": state.fuel,
        "total_fuel_earned": state.total_fuel_earned,
        "credits": state.credits,
        "nebula_crystals": state.nebula_crystals,
        "click_power": state.click_power,
        "production_per_second": state.production_per_second,
        "buildings": dict(state.buildings),
        "upgrades": sorted(state.upgrades),
        "achievements": sorted(state.achievements),
        "statistics": {
            "total_clicks": stats.total_clicks,
            "total_play_time": stats.total_play_time,
            "current_session_time": stats.current_session_time,
            "total_prestiges": stats.total_prestiges,
            "buildings_purchased": stats.buildings_purchased,
            "upgrades_purchased": stats.upgrades_purchased,
            "objects_destroyed": stats.objects_destroyed,
        },
        "current_zone": state.current_zone,
        "zone_progress": state.zone_progress,
        "ship_speed": state.ship_speed.value,
        "fuel_consumption_rate": state.fuel_consumption_rate,
        "resources": {r.value: amount for r, amount in state.resources.items()},
        "objects": [serialize_object(obj) for obj in state.objects],
        "bots": [serialize_bot(bot) for bot in state.bots],
        "modules": serialize_modules(state.modules),
        "next_bot_id": state.next_bot_id,
        "last_save_time": state.last_save_time,
        "version": state.version,
    }


# Deserialization

def _number(data: dict, key: str, default: float) -> float:
    """Finite number stored under key, or the default when absent."""
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ValueError(f"{key} must be finite")
    return value


def _count(data: dict, key: str, default: int) -> int:
    return int(_number(data, key, default))


def _flag(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be true or false")
    return value


def _read_position(data: dict | None) -> Position:
    data = data or {}
    return Position(_number(data, "x", 0.0), _number(data, "y", 0.0))


def _read_velocity(data: dict | None) -> Velocity:
    data = data or {}
    return Velocity(_number(data, "vx", 0.0), _number(data, "vy", 0.0))


def _read_resource(value: str | None) -> ResourceType | None:
    if value is None:
        return None
    try:
        return ResourceType(value)
    except ValueError:
        logger.warning("Skipping unknown resource type %r in save", value)
        return None


def deserialize_object(data: dict[str, Any]) -> GameObject:
    drops = []
    for entry in data.get("resource_drops", []):
        resource = _read_resource(entry.get("type"))
        if resource is not None:
            drops.append(ResourceDrop(resource, _count(entry, "amount", 0)))

    special = data.get("special_drops")
    health = _number(data, "health", 1)
    return GameObject(
        id=data["id"],
        type=ObjectType(data.get("type", ObjectType.ASTEROID.value)),
        template_id=data.get("template_id", ""),
        position=_read_position(data.get("position")),
        velocity=_read_velocity(data.get("velocity")),
        health=health,
        max_health=_number(data, "max_health", health),
        size=ObjectSize(data.get("size", ObjectSize.SMALL.value)),
        width=_number(data, "width", 40),
        height=_number(data, "height", 40),
        resource_drops=tuple(drops),
        special_drops=SpecialDrop(_number(special, "fuel", 0), _number(special, "credits", 0)) if special else None,
        rotation=_number(data, "rotation", 0.0),
        rotation_speed=_number(data, "rotation_speed", 0.0),
        destroyed=_flag(data, "destroyed", False),
        created_at=_number(data, "created_at", 0.0),
    )


def deserialize_bot(data: dict[str, Any]) -> Bot:
    return Bot(
        id=data["id"],
        position=_read_position(data.get("position")),
        velocity=_read_velocity(data.get("velocity")),
        state=BotState(data.get("state", BotState.IDLE.value)),
        target_object_id=data.get("target_object_id"),
        cargo_amount=_count(data, "cargo_amount", 0),
        cargo_type=_read_resource(data.get("cargo_type")),
        mining_progress=_number(data, "mining_progress", 0.0),
        created_at=_number(data, "created_at", 0.0),
    )


def deserialize_modules(data: dict[str, Any] | None) -> ShipModules:
    data = data or {}
    defaults = ShipModules()
    laser_d, bay_d, conv_d, cargo_d, engine_d = (
        defaults.laser, defaults.bot_bay, defaults.converter, defaults.cargo_hold, defaults.engine,
    )

    laser = data.get("laser", {})
    bay = data.get("bot_bay", {})
    conv = data.get("converter", {})
    cargo = data.get("cargo_hold", {})
    engine = data.get("engine", {})

    priority = [r for r in (_read_resource(v) for v in cargo.get("resource_priority", [])) if r]

    return ShipModules(
        laser=LaserModule(
            damage=_number(laser, "damage", laser_d.damage),
            range=_number(laser, "range", laser_d.range),
            cooldown=_number(laser, "cooldown", laser_d.cooldown),
            laser_count=_count(laser, "laser_count", laser_d.laser_count),
            auto_target=_flag(laser, "auto_target", laser_d.auto_target),
            piercing=_flag(laser, "piercing", laser_d.piercing),
            cooldown_remaining=_number(laser, "cooldown_remaining", 0.0),
            purchased_upgrades=frozenset(laser.get("purchased_upgrades", [])),
        ),
        bot_bay=BotBayModule(
            bot_count=_count(bay, "bot_count", bay_d.bot_count),
            mining_speed=_number(bay, "mining_speed", bay_d.mining_speed),
            range=_number(bay, "range", bay_d.range),
            bot_capacity=_count(bay, "bot_capacity", bay_d.bot_capacity),
            purchased_upgrades=frozenset(bay.get("purchased_upgrades", [])),
        ),
        converter=ConverterModule(
            conversion_speed=_number(conv, "conversion_speed", conv_d.conversion_speed),
            efficiency=_number(conv, "efficiency", conv_d.efficiency),
            auto_convert_percent=_number(conv, "auto_convert_percent", conv_d.auto_convert_percent),
            unlocked_tiers=tuple(int(t) for t in conv.get("unlocked_tiers", conv_d.unlocked_tiers)),
            conversion_progress=_number(conv, "conversion_progress", 0.0),
            purchased_upgrades=frozenset(conv.get("purchased_upgrades", [])),
        ),
        cargo_hold=CargoHoldModule(
            capacity=_number(cargo, "capacity", cargo_d.capacity),
            auto_sell=_flag(cargo, "auto_sell", cargo_d.auto_sell),
            resource_priority=tuple(validate_resource_priority(priority)),
            purchased_upgrades=frozenset(cargo.get("purchased_upgrades", [])),
        ),
        engine=EngineModule(
            fuel_efficiency=_number(engine, "fuel_efficiency", engine_d.fuel_efficiency),
            unlocked_speeds=tuple(engine.get("unlocked_speeds", engine_d.unlocked_speeds)),
            purchased_upgrades=frozenset(engine.get("purchased_upgrades", [])),
        ),
    )


def deserialize_state(data: dict[str, Any]) -> GameState:
    """Rebuild a state, defaulting any field the data does not carry.

    Raises KeyError, TypeError or ValueError on malformed data, including
    numeric fields holding non-numbers or non-finite values.
    """
    if not isinstance(data, dict):
        raise TypeError("game state must be an object")

    base = initial_game_state(_number(data, "last_save_time", 0.0))
    stats = data.get("statistics", {})

    resources = empty_inventory()
    amounts = data.get("resources", {})
    for key in amounts:
        resource = _read_resource(key)
        if resource is not None:
            resources[resource] = _number(amounts, key, 0)

    buildings = data.get("buildings", {})

    return GameState(
        fuel=_number(data, "fuel", base.fuel),
        total_fuel_earned=_number(data, "total_fuel_earned", base.total_fuel_earned),
        credits=_number(data, "credits", base.credits),
        nebula_crystals=_count(data, "nebula_crystals", base.nebula_crystals),
        click_power=_number(data, "click_power", base.click_power),
        production_per_second=_number(data, "production_per_second", base.production_per_second),
        buildings={k: _count(buildings, k, 0) for k in buildings},
        upgrades=frozenset(data.get("upgrades", [])),
        achievements=frozenset(data.get("achievements", [])),
        statistics=Statistics(
            total_clicks=_count(stats, "total_clicks", 0),
            total_play_time=_number(stats, "total_play_time", 0.0),
            current_session_time=_number(stats, "current_session_time", 0.0),
            total_prestiges=_count(stats, "total_prestiges", 0),
            buildings_purchased=_count(stats, "buildings_purchased", 0),
            upgrades_purchased=_count(stats, "upgrades_purchased", 0),
            objects_destroyed=_count(stats, "objects_destroyed", 0),
        ),
        current_zone=_count(data, "current_zone", base.current_zone),
        zone_progress=_number(data, "zone_progress", base.zone_progress),
        ship_speed=ShipSpeed(data.get("ship_speed", base.ship_speed.value)),
        fuel_consumption_rate=_number(data, "fuel_consumption_rate", base.fuel_consumption_rate),
        resources=resources,
        objects=tuple(deserialize_object(o) for o in data.get("objects", [])),
        bots=tuple(deserialize_bot(b) for b in data.get("bots", [])),
        modules=deserialize_modules(data.get("modules")),
        next_bot_id=_count(data, "next_bot_id", base.next_bot_id),
        last_save_time=base.last_save_time,
        version=data.get("version", VERSION),
    )


# Export / import

def export_save(state: GameState, timestamp: float | None = None) -> str:
    """Serialize a state into a portable JSON save string."""
    document = {
        "version": VERSION,
        "timestamp": time.time() if timestamp is None else timestamp,
        "game_state": serialize_state(state),
    }
    return json.dumps(document)


def validate_save_data(document: Any) -> bool:
    """Check the envelope shape of a parsed save."""
    return (
        isinstance(document, dict)
        and isinstance(document.get("version"), str)
        and isinstance(document.get("timestamp"), (int, float))
        and isinstance(document.get("game_state"), dict)
    )


def import_save(text: str) -> ImportResult:
    """Parse a save string. Failures are reported, never raised."""
    try:
        document = json.loads(text)
    except (TypeError, ValueError) as e:
        return ImportResult(False, error=f"Invalid save data: {e}")

    if not validate_save_data(document):
        return ImportResult(False, error="Save data is missing version, timestamp or game state")

    try:
        state = deserialize_state(document["game_state"])
    except _LOAD_ERRORS as e:
        logger.warning("Rejected corrupt save: %s", e)
        return ImportResult(False, error=f"Corrupt game state: {e}")

    return ImportResult(True, game_state=state)


# Slot files

def ensure_save_dir(save_dir: Path = SAVE_DIR) -> Path:
    """Ensure save directory exists."""
    save_dir.mkdir(parents=True, exist_ok=True)
    return save_dir


def save_path(save_dir: Path = SAVE_DIR, slot: str = SAVE_KEY) -> Path:
    return save_dir / f"{slot}.json"


def save_game(state: GameState, save_dir: Path = SAVE_DIR, slot: str = SAVE_KEY) -> tuple[bool, str]:
    """Write the state to its slot file.

    Returns:
        (success, message) tuple
    """
    try:
        ensure_save_dir(save_dir)
        path = save_path(save_dir, slot)
        path.write_text(export_save(replace(state, last_save_time=time.time())))
    except OSError as e:
        logger.error("Save failed: %s", e)
        return False, f"Failed to save: {e}"

    logger.debug("Saved game to %s", path)
    return True, f"Game saved to {path.name}"


def load_game(save_dir: Path = SAVE_DIR, slot: str = SAVE_KEY) -> GameState | None:
    """Read a slot file. Missing or corrupt saves load as None."""
    path = save_path(save_dir, slot)
    if not path.exists():
        return None

    try:
        text = path.read_text()
    except OSError as e:
        logger.error("Could not read save %s: %s", path, e)
        return None

    result = import_save(text)
    if not result.success:
        logger.warning("Ignoring save %s: %s", path, result.error)
        return None
    return result.game_state


def delete_save(save_dir: Path = SAVE_DIR, slot: str = SAVE_KEY) -> tuple[bool, str]:
    path = save_path(save_dir, slot)
    if not path.exists():
        return False, "No save to delete"
    try:
        path.unlink()
    except OSError as e:
        return False, f"Failed to delete save: {e}"
    return True, f"Deleted {path.name}"
