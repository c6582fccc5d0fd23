"""State transition function.

apply_action(state, action, context) returns the next GameState. It never
mutates its input and never raises for a rejected action: an action that
is not allowed (unaffordable, locked, unknown id) returns the same state.
"""
from __future__ import annotations
import logging
import math
import random
import time
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable

from ..config import EngineConfig, FUEL_CONSUMPTION_RATES, PIERCING_EXTRA_HITS
from ..ai.mining_bot import create_bot, update_bots
from ..catalog.upgrades import UpgradeType, PrestigeEffect, STARTING_AUTO_CLICKER
from ..simulation import economy
from ..simulation.achievements import check_achievements
from ..simulation.cargo import auto_sell_resources, space_to_free, validate_resource_priority
from ..simulation.modules import apply_module_upgrade, can_purchase_module_upgrade
from ..simulation.physics import (
    Position, advance_objects, check_laser_hit, check_laser_multiple_hits, find_nearest_object,
)
from ..simulation.resources import (
    convert_resource_to_fuel, fuel_consumption, is_tier_unlocked, max_cargo_addition,
    sell_value, total_cargo,
)
from . import actions as a
from .registries import CatalogRegistry, get_catalog
from .state import GameState, ResourceDrop, ShipSpeed, Statistics, initial_game_state

logger = logging.getLogger(__name__)


@dataclass
class EngineContext:
    """Collaborators a transition may need: randomness, policy and wall clock."""
    rng: random.Random = field(default_factory=random.Random)
    config: EngineConfig = field(default_factory=EngineConfig)
    clock: Callable[[], float] = time.time
    catalog: CatalogRegistry = field(default_factory=get_catalog)


def apply_action(state: GameState, action: a.Action, context: EngineContext | None = None) -> GameState:
    """Apply one action and return the resulting state."""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        logger.debug("Ignoring unknown action %r", action)
        return state
    return handler(state, action, context or EngineContext())


# Helpers

def _valid_delta(dt: float) -> bool:
    return isinstance(dt, (int, float)) and math.isfinite(dt) and dt > 0


def recalculate(state: GameState, catalog: CatalogRegistry) -> GameState:
    """Refresh click power and production from owned entries."""
    power, production = economy.calculate_derived_stats(state, catalog)
    return replace(state, click_power=power, production_per_second=production)


def _earn_fuel(state: GameState, amount: float) -> GameState:
    """Credit fuel that counts toward lifetime earnings and zone progress."""
    if amount <= 0:
        return state
    return replace(
        state,
        fuel=state.fuel + amount,
        total_fuel_earned=state.total_fuel_earned + amount,
        zone_progress=state.zone_progress + amount,
    )


def _consumption_rate(speed: ShipSpeed, fuel_efficiency: float) -> float:
    return FUEL_CONSUMPTION_RATES[speed.value] * fuel_efficiency


def _sync_bots(state: GameState) -> GameState:
    """Launch bots until the fleet matches the bay's bot count."""
    wanted = state.modules.bot_bay.bot_count
    if len(state.bots) >= wanted:
        return state

    bots = list(state.bots)
    next_id = state.next_bot_id
    while len(bots) < wanted:
        bots.append(create_bot(f"bot_{next_id}", created_at=state.statistics.total_play_time))
        next_id += 1
    return replace(state, bots=tuple(bots), next_bot_id=next_id)


def collect_resources(state: GameState, drops: Iterable[ResourceDrop]) -> GameState:
    """Route collected resources into fuel and cargo.

    1. The converter's auto-convert share of each drop in an unlocked tier
       becomes fuel immediately.
    2. If the remainder will not fit and auto-sell is on, the lowest
       priority holdings are sold to make room.
    3. Each remaining drop is added, truncated to the free capacity.
    """
    converter = state.modules.converter
    cargo = state.modules.cargo_hold

    fuel_gained = 0
    to_store: list[ResourceDrop] = []
    for drop in drops:
        amount = drop.amount
        if amount <= 0:
            continue
        if converter.auto_convert_percent > 0 and is_tier_unlocked(drop.resource, converter.unlocked_tiers):
            converted = math.floor(amount * converter.auto_convert_percent / 100)
            fuel_gained += convert_resource_to_fuel(drop.resource, converted, converter.efficiency * 100)
            amount -= converted
        if amount > 0:
            to_store.append(ResourceDrop(drop.resource, amount))

    resources = dict(state.resources)
    credits = state.credits
    incoming = sum(drop.amount for drop in to_store)
    needed = space_to_free(total_cargo(resources), cargo.capacity, incoming)
    if needed > 0 and cargo.auto_sell:
        sale = auto_sell_resources(resources, cargo.resource_priority, needed)
        resources = sale.resources
        credits += sale.credits_earned
        if sale.sold:
            logger.debug("Auto-sold %s units for %d credits", sale.amount_sold, sale.credits_earned)

    for drop in to_store:
        added = max_cargo_addition(total_cargo(resources), cargo.capacity, drop.amount)
        if added > 0:
            resources[drop.resource] = resources.get(drop.resource, 0) + added

    state = replace(state, resources=resources, credits=credits)
    return _earn_fuel(state, fuel_gained)


def _damage_object(state: GameState, object_id: str, damage: float) -> GameState:
    """Apply damage; on lethal damage collect loot and mark the object destroyed."""
    obj = state.get_object(object_id)
    if obj is None or obj.destroyed or damage <= 0:
        return state

    health = max(0, obj.health - damage)
    if health > 0:
        damaged = replace(obj, health=health)
        return replace(state, objects=tuple(damaged if o.id == object_id else o for o in state.objects))

    wreck = replace(obj, health=0, destroyed=True)
    state = replace(
        state,
        objects=tuple(wreck if o.id == object_id else o for o in state.objects),
        statistics=replace(state.statistics, objects_destroyed=state.statistics.objects_destroyed + 1),
    )
    state = collect_resources(state, obj.resource_drops)
    if obj.special_drops is not None:
        state = _earn_fuel(state, obj.special_drops.fuel)
        if obj.special_drops.credits > 0:
            state = replace(state, credits=state.credits + obj.special_drops.credits)
    return state


# Economy handlers

def _click(state: GameState, action: a.Click, ctx: EngineContext) -> GameState:
    state = _earn_fuel(state, state.click_power)
    return replace(state, statistics=replace(
        state.statistics, total_clicks=state.statistics.total_clicks + 1))


def _buy_building(state: GameState, action: a.BuyBuilding, ctx: EngineContext) -> GameState:
    building = ctx.catalog.get_building(action.building_id)
    if building is None or action.quantity < 1:
        return state

    owned = state.building_count(building.id)
    cost = economy.bulk_building_cost(building.base_cost, building.cost_multiplier, owned, action.quantity)
    if not economy.can_afford(state.fuel, cost):
        logger.debug("Cannot afford %d x %s (%s fuel)", action.quantity, building.id, cost)
        return state

    buildings = dict(state.buildings)
    buildings[building.id] = owned + action.quantity
    state = replace(
        state,
        fuel=state.fuel - cost,
        buildings=buildings,
        statistics=replace(
            state.statistics,
            buildings_purchased=state.statistics.buildings_purchased + action.quantity,
        ),
    )
    return recalculate(state, ctx.catalog)


def _purchase_upgrade(state: GameState, upgrade_id: str, allowed: tuple[UpgradeType, ...],
                      ctx: EngineContext) -> GameState:
    upgrade = ctx.catalog.get_upgrade(upgrade_id)
    if upgrade is None or upgrade.type not in allowed or upgrade.id in state.upgrades:
        return state

    if upgrade.type == UpgradeType.BUILDING and state.building_count(upgrade.building_id) < upgrade.required_count:
        return state

    if upgrade.type == UpgradeType.PRESTIGE:
        if state.nebula_crystals < upgrade.cost:
            return state
        state = replace(state, nebula_crystals=state.nebula_crystals - upgrade.cost)
    else:
        if not economy.can_afford(state.fuel, upgrade.cost):
            return state
        state = replace(state, fuel=state.fuel - upgrade.cost)

    state = replace(
        state,
        upgrades=state.upgrades | {upgrade.id},
        statistics=replace(state.statistics, upgrades_purchased=state.statistics.upgrades_purchased + 1),
    )
    return recalculate(state, ctx.catalog)


def _buy_upgrade(state: GameState, action: a.BuyUpgrade, ctx: EngineContext) -> GameState:
    return _purchase_upgrade(
        state, action.upgrade_id,
        (UpgradeType.CLICK, UpgradeType.PRODUCTION, UpgradeType.AUTO_CLICK), ctx,
    )


def _buy_building_upgrade(state: GameState, action: a.BuyBuildingUpgrade, ctx: EngineContext) -> GameState:
    return _purchase_upgrade(state, action.upgrade_id, (UpgradeType.BUILDING,), ctx)


def _buy_prestige_upgrade(state: GameState, action: a.BuyPrestigeUpgrade, ctx: EngineContext) -> GameState:
    return _purchase_upgrade(state, action.upgrade_id, (UpgradeType.PRESTIGE,), ctx)


def _purchase_module_upgrade(state: GameState, action: a.PurchaseModuleUpgrade,
                             ctx: EngineContext) -> GameState:
    upgrade = ctx.catalog.get_module_upgrade(action.upgrade_id)
    if upgrade is None or not can_purchase_module_upgrade(state.modules, upgrade, state.credits):
        return state

    modules = apply_module_upgrade(state.modules, upgrade)
    state = replace(
        state,
        credits=state.credits - upgrade.cost,
        modules=modules,
        fuel_consumption_rate=_consumption_rate(state.ship_speed, modules.engine.fuel_efficiency),
    )
    return _sync_bots(state)


def _unlock_achievement(state: GameState, action: a.UnlockAchievement, ctx: EngineContext) -> GameState:
    if ctx.catalog.get_achievement(action.achievement_id) is None:
        return state
    if action.achievement_id in state.achievements:
        return state
    state = replace(state, achievements=state.achievements | {action.achievement_id})
    return recalculate(state, ctx.catalog)


def _prestige(state: GameState, action: a.Prestige, ctx: EngineContext) -> GameState:
    catalog = ctx.catalog
    bonus = economy.prestige_effect_total(state.upgrades, PrestigeEffect.PRESTIGE_BONUS, catalog)
    reward = economy.prestige_reward(state.total_fuel_earned, bonus)
    if reward <= 0:
        return state

    kept = {u.id for u in catalog.prestige_upgrades() if u.id in state.upgrades}
    if economy.prestige_effect_total(kept, PrestigeEffect.AUTO_CLICK_START, catalog) > 0:
        kept.add(STARTING_AUTO_CLICKER)

    start_fuel, start_miners = economy.prestige_starting_resources(kept, catalog)
    fresh = initial_game_state(ctx.clock())
    state = replace(
        fresh,
        nebula_crystals=state.nebula_crystals + reward,
        upgrades=frozenset(kept),
        achievements=state.achievements,
        fuel=start_fuel,
        total_fuel_earned=start_fuel,
        buildings={"spaceMiner": start_miners} if start_miners > 0 else {},
        statistics=Statistics(total_prestiges=state.statistics.total_prestiges + 1),
    )
    logger.info("Prestiged for %d crystals", reward)
    return recalculate(state, catalog)


# Time handlers

def _tick(state: GameState, action: a.Tick, ctx: EngineContext) -> GameState:
    dt = action.delta_time
    if not _valid_delta(dt):
        return state

    state = _earn_fuel(state, state.production_per_second * dt)

    engine = state.modules.engine
    burned = fuel_consumption(1.0, FUEL_CONSUMPTION_RATES[state.ship_speed.value],
                              engine.fuel_efficiency * 100, dt)
    fuel = max(0.0, state.fuel - burned)
    speed = state.ship_speed
    rate = state.fuel_consumption_rate
    if burned > 0 and fuel <= 0:
        speed = ShipSpeed.STOP
        rate = 0.0

    laser = state.modules.laser
    stats = state.statistics
    state = replace(
        state,
        fuel=fuel,
        ship_speed=speed,
        fuel_consumption_rate=rate,
        modules=replace(state.modules, laser=replace(
            laser, cooldown_remaining=max(0.0, laser.cooldown_remaining - dt))),
        statistics=replace(
            stats,
            total_play_time=stats.total_play_time + dt,
            current_session_time=stats.current_session_time + dt,
        ),
    )

    state = _run_converter(state, dt)

    if action.include_physics:
        state = replace(state, objects=advance_objects(state.objects, dt, ctx.config.screen_height))
    return state


def _run_converter(state: GameState, dt: float) -> GameState:
    """Feed held cargo through the converter at its conversion speed.

    Whole units leave the hold lowest priority first; the fraction carries
    to the next tick. Progress resets when nothing convertible is held.
    """
    converter = state.modules.converter
    queue = [
        r for r in reversed(state.modules.cargo_hold.resource_priority)
        if is_tier_unlocked(r, converter.unlocked_tiers) and state.resources.get(r, 0) >= 1
    ]
    if not queue:
        progress = 0.0
    else:
        progress = converter.conversion_progress + max(0.0, converter.conversion_speed) * dt

    budget = math.floor(progress)
    resources = dict(state.resources)
    gained = 0
    for resource in queue:
        if budget <= 0:
            break
        amount = min(budget, math.floor(resources[resource]))
        resources[resource] -= amount
        budget -= amount
        gained += convert_resource_to_fuel(resource, amount, converter.efficiency * 100)
    # Budget left over means the hold ran dry mid-step
    if budget > 0:
        progress = 0.0
    else:
        progress -= math.floor(progress)

    if progress == converter.conversion_progress and resources == state.resources:
        return state
    state = replace(
        state,
        resources=resources,
        modules=replace(state.modules, converter=replace(converter, conversion_progress=progress)),
    )
    return _earn_fuel(state, gained)


def _update_objects(state: GameState, action: a.UpdateObjects, ctx: EngineContext) -> GameState:
    if not _valid_delta(action.delta_time):
        return state
    return replace(state, objects=advance_objects(state.objects, action.delta_time, ctx.config.screen_height))


def _update_bots(state: GameState, action: a.UpdateBots, ctx: EngineContext) -> GameState:
    if not _valid_delta(action.delta_time) or not state.bots:
        return state
    bots, deposits = update_bots(state.bots, state.objects, state.modules.bot_bay, action.delta_time)
    state = replace(state, bots=bots)
    if deposits:
        state = collect_resources(state, deposits)
    return state


# Mining handlers

def _spawn_object(state: GameState, action: a.SpawnObject, ctx: EngineContext) -> GameState:
    if state.get_object(action.obj.id) is not None:
        return state
    return replace(state, objects=state.objects + (action.obj,))


def _fire_laser(state: GameState, action: a.FireLaser, ctx: EngineContext) -> GameState:
    laser = state.modules.laser
    if laser.cooldown_remaining > 0:
        return state

    point = Position(action.x, action.y)
    live = state.live_objects()
    max_hits = laser.laser_count + (PIERCING_EXTRA_HITS if laser.piercing else 0)
    if max_hits > 1:
        targets = check_laser_multiple_hits(point, live, laser.range, max_hits)
    else:
        hit = check_laser_hit(point, live, laser.range)
        targets = [hit] if hit else []

    if not targets and laser.auto_target:
        nearest = find_nearest_object(point, live, ctx.config.auto_target_range)
        targets = [nearest] if nearest else []

    for target in targets:
        state = _damage_object(state, target.id, laser.damage)

    laser = state.modules.laser
    return replace(state, modules=replace(
        state.modules, laser=replace(laser, cooldown_remaining=laser.cooldown)))


def _damage(state: GameState, action: a.DamageObject, ctx: EngineContext) -> GameState:
    return _damage_object(state, action.object_id, action.damage)


def _destroy(state: GameState, action: a.DestroyObject, ctx: EngineContext) -> GameState:
    obj = state.get_object(action.object_id)
    if obj is None or obj.destroyed:
        return state
    return _damage_object(state, obj.id, max(obj.health, 1))


# Resource and ship handlers

def _convert(state: GameState, action: a.ConvertResources, ctx: EngineContext) -> GameState:
    converter = state.modules.converter
    if not is_tier_unlocked(action.resource, converter.unlocked_tiers):
        return state
    amount = min(action.amount, state.resources.get(action.resource, 0))
    if not amount > 0:
        return state

    resources = dict(state.resources)
    resources[action.resource] -= amount
    gained = convert_resource_to_fuel(action.resource, amount, converter.efficiency * 100)
    return _earn_fuel(replace(state, resources=resources), gained)


def _sell(state: GameState, action: a.SellResources, ctx: EngineContext) -> GameState:
    amount = min(action.amount, state.resources.get(action.resource, 0))
    if not amount > 0:
        return state

    resources = dict(state.resources)
    resources[action.resource] -= amount
    return replace(state, resources=resources, credits=state.credits + sell_value(action.resource, amount))


def _set_auto_convert(state: GameState, action: a.SetAutoConvertPercent, ctx: EngineContext) -> GameState:
    if not math.isfinite(action.percent):
        return state
    percent = min(100.0, max(0.0, action.percent))
    converter = replace(state.modules.converter, auto_convert_percent=percent)
    return replace(state, modules=replace(state.modules, converter=converter))


def _set_auto_sell(state: GameState, action: a.SetAutoSell, ctx: EngineContext) -> GameState:
    cargo = replace(state.modules.cargo_hold, auto_sell=bool(action.enabled))
    return replace(state, modules=replace(state.modules, cargo_hold=cargo))


def _set_priority(state: GameState, action: a.SetResourcePriority, ctx: EngineContext) -> GameState:
    priority = tuple(validate_resource_priority(action.priority))
    cargo = replace(state.modules.cargo_hold, resource_priority=priority)
    return replace(state, modules=replace(state.modules, cargo_hold=cargo))


def _set_ship_speed(state: GameState, action: a.SetShipSpeed, ctx: EngineContext) -> GameState:
    speed = action.speed
    engine = state.modules.engine
    if speed != ShipSpeed.STOP:
        if speed.value not in engine.unlocked_speeds:
            logger.debug("Speed %s is locked", speed.value)
            return state
        if state.fuel <= 0:
            return state
    return replace(state, ship_speed=speed, fuel_consumption_rate=_consumption_rate(speed, engine.fuel_efficiency))


# Zone handlers

def _warp(state: GameState, action: a.WarpToNextZone, ctx: EngineContext) -> GameState:
    zone = ctx.catalog.get_zone(state.current_zone)
    if zone is None or state.current_zone >= ctx.catalog.zone_count:
        return state
    if state.zone_progress < zone.fuel_required:
        return state
    return replace(state, current_zone=state.current_zone + 1, zone_progress=0, objects=())


def _set_zone(state: GameState, action: a.SetZone, ctx: EngineContext) -> GameState:
    zone = min(max(1, int(action.zone)), ctx.catalog.zone_count)
    if zone == state.current_zone:
        return state
    return replace(state, current_zone=zone, zone_progress=0, objects=())


def _add_fuel(state: GameState, action: a.AddFuel, ctx: EngineContext) -> GameState:
    return _earn_fuel(state, action.amount)


# Lifecycle handlers

def _load_save(state: GameState, action: a.LoadSave, ctx: EngineContext) -> GameState:
    return replace(action.state, last_save_time=ctx.clock())


def _apply_offline(state: GameState, action: a.ApplyOfflineProgress, ctx: EngineContext) -> GameState:
    if action.fuel < 0 or action.time_away < 0:
        return state
    stats = state.statistics
    return replace(
        state,
        fuel=state.fuel + action.fuel,
        total_fuel_earned=state.total_fuel_earned + action.fuel,
        statistics=replace(stats, total_play_time=stats.total_play_time + action.time_away),
    )


def _hard_reset(state: GameState, action: a.HardReset, ctx: EngineContext) -> GameState:
    logger.info("Hard reset")
    return initial_game_state(ctx.clock())


_HANDLERS: dict[type, Callable[[GameState, a.Action, EngineContext], GameState]] = {
    a.Click: _click,
    a.BuyBuilding: _buy_building,
    a.BuyUpgrade: _buy_upgrade,
    a.BuyBuildingUpgrade: _buy_building_upgrade,
    a.BuyPrestigeUpgrade: _buy_prestige_upgrade,
    a.PurchaseModuleUpgrade: _purchase_module_upgrade,
    a.UnlockAchievement: _unlock_achievement,
    a.Prestige: _prestige,
    a.Tick: _tick,
    a.UpdateObjects: _update_objects,
    a.UpdateBots: _update_bots,
    a.SpawnObject: _spawn_object,
    a.FireLaser: _fire_laser,
    a.DamageObject: _damage,
    a.DestroyObject: _destroy,
    a.ConvertResources: _convert,
    a.SellResources: _sell,
    a.SetAutoConvertPercent: _set_auto_convert,
    a.SetAutoSell: _set_auto_sell,
    a.SetResourcePriority: _set_priority,
    a.SetShipSpeed: _set_ship_speed,
    a.WarpToNextZone: _warp,
    a.SetZone: _set_zone,
    a.AddFuel: _add_fuel,
    a.LoadSave: _load_save,
    a.ApplyOfflineProgress: _apply_offline,
    a.HardReset: _hard_reset,
}


def pending_achievements(state: GameState, context: EngineContext | None = None) -> list[str]:
    """Achievements the state qualifies for but has not unlocked."""
    return check_achievements(state, (context or EngineContext()).catalog)
