"""Mining bot behavior.

Bots leave the ship, fly to the nearest unclaimed object in range, mine
it at the bay's mining speed until full, then fly home and deposit.

    idle -> moving_to_target -> mining -> returning -> depositing -> idle
"""
from __future__ import annotations
import math
from dataclasses import replace
from typing import TYPE_CHECKING, Iterable

from ..config import BOT_REACH_DISTANCE, BOT_MOVE_SPEED
from ..core.state import Bot, BotState, ResourceDrop, ship_position
from ..simulation.physics import Position, Velocity
from ..simulation.resources import ResourceType

if TYPE_CHECKING:
    from ..core.state import BotBayModule, GameObject

# Deposited as this when the mined object carried no rolled drops
DEFAULT_CARGO_TYPE = ResourceType.STONE


def normalize_vector(dx: float, dy: float) -> tuple[float, float]:
    """Unit vector in the direction of (dx, dy); zero vector stays zero."""
    length = math.sqrt(dx * dx + dy * dy)
    if length == 0:
        return (0.0, 0.0)
    return (dx / length, dy / length)


def create_bot(bot_id: str, created_at: float = 0.0) -> Bot:
    """New idle bot parked at the ship."""
    return Bot(id=bot_id, position=ship_position(), created_at=created_at)


def is_valid_target(obj: GameObject | None) -> bool:
    return obj is not None and not obj.destroyed and obj.health > 0


def select_target_object(
    bot: Bot, objects: Iterable[GameObject], claimed_ids: set[str], max_range: float
) -> GameObject | None:
    """Nearest live, unclaimed object within max_range of the bot."""
    best: GameObject | None = None
    best_distance = math.inf

    for obj in objects:
        if not is_valid_target(obj) or obj.id in claimed_ids:
            continue
        dist = bot.position.distance_to(obj.position)
        if dist <= max_range and dist < best_distance:
            best = obj
            best_distance = dist

    return best


def update_bot_movement(bot: Bot, target: Position, dt: float, speed: float = BOT_MOVE_SPEED) -> Bot:
    """Move the bot toward target at constant speed, stopping on arrival."""
    nx, ny = normalize_vector(target.x - bot.position.x, target.y - bot.position.y)
    velocity = Velocity(nx * speed, ny * speed)
    step = min(speed * dt, bot.position.distance_to(target))
    position = Position(bot.position.x + nx * step, bot.position.y + ny * step)
    return replace(bot, position=position, velocity=velocity)


def check_bot_reached_target(position: Position, target: Position,
                             reach: float = BOT_REACH_DISTANCE) -> bool:
    return position.distance_to(target) <= reach


def mine_object(bot: Bot, mining_speed: float, capacity: int, dt: float) -> Bot:
    """Accumulate mining progress; each whole unit crossed becomes cargo.

    The fractional remainder carries over, so progress stays in [0, 1).
    """
    progress = bot.mining_progress + mining_speed * dt
    whole = int(progress)
    progress -= whole
    cargo = min(capacity, bot.cargo_amount + whole)
    return replace(bot, mining_progress=progress, cargo_amount=cargo)


def should_bot_return(bot: Bot, target: GameObject | None, capacity: int) -> bool:
    return bot.cargo_amount >= capacity or not is_valid_target(target)


def get_targeted_object_ids(bots: Iterable[Bot]) -> set[str]:
    """Objects currently claimed by bots heading to or mining them."""
    return {
        bot.target_object_id for bot in bots
        if bot.target_object_id is not None
        and bot.state not in (BotState.RETURNING, BotState.DEPOSITING)
    }


def _cargo_type_for(target: GameObject) -> ResourceType:
    if target.resource_drops:
        return target.resource_drops[0].resource
    return DEFAULT_CARGO_TYPE


def update_bot(
    bot: Bot,
    objects: list[GameObject],
    objects_by_id: dict[str, GameObject],
    claimed_ids: set[str],
    bay: BotBayModule,
    dt: float,
) -> Bot:
    """Advance one bot's state machine by dt."""
    state = bot.state
    home = ship_position()

    if state == BotState.IDLE:
        target = select_target_object(bot, objects, claimed_ids, bay.range)
        if target is None:
            return replace(bot, velocity=Velocity())
        return replace(bot, state=BotState.MOVING_TO_TARGET, target_object_id=target.id)

    elif state == BotState.MOVING_TO_TARGET:
        target = objects_by_id.get(bot.target_object_id) if bot.target_object_id else None
        if not is_valid_target(target):
            return replace(bot, state=BotState.IDLE, target_object_id=None, velocity=Velocity())
        moved = update_bot_movement(bot, target.position, dt)
        if check_bot_reached_target(moved.position, target.position):
            return replace(
                moved,
                state=BotState.MINING,
                velocity=Velocity(),
                mining_progress=0.0,
                cargo_type=moved.cargo_type or _cargo_type_for(target),
            )
        return moved

    elif state == BotState.MINING:
        target = objects_by_id.get(bot.target_object_id) if bot.target_object_id else None
        if should_bot_return(bot, target, bay.bot_capacity):
            return replace(bot, state=BotState.RETURNING, target_object_id=None, mining_progress=0.0)
        return mine_object(bot, bay.mining_speed, bay.bot_capacity, dt)

    elif state == BotState.RETURNING:
        moved = update_bot_movement(bot, home, dt)
        if check_bot_reached_target(moved.position, home):
            return replace(moved, state=BotState.DEPOSITING, velocity=Velocity())
        return moved

    elif state == BotState.DEPOSITING:
        return replace(
            bot,
            state=BotState.IDLE,
            cargo_amount=0,
            cargo_type=None,
            mining_progress=0.0,
        )

    return bot


def update_bots(
    bots: Iterable[Bot], objects: Iterable[GameObject], bay: BotBayModule, dt: float
) -> tuple[tuple[Bot, ...], list[ResourceDrop]]:
    """Advance every bot in order.

    Returns the new bots and the cargo delivered by bots that finished
    depositing this step. Each new claim is visible to the bots after it.
    """
    bots = list(bots)
    live = [obj for obj in objects if is_valid_target(obj)]
    by_id = {obj.id: obj for obj in live}
    claimed = get_targeted_object_ids(bots)
    updated: list[Bot] = []
    deposits: list[ResourceDrop] = []

    for bot in bots:
        if bot.state == BotState.DEPOSITING and bot.cargo_amount > 0:
            deposits.append(ResourceDrop(bot.cargo_type or DEFAULT_CARGO_TYPE, bot.cargo_amount))

        claimed.discard(bot.target_object_id)
        new_bot = update_bot(bot, live, by_id, claimed, bay, dt)
        if new_bot.target_object_id is not None and new_bot.state in (
                BotState.MOVING_TO_TARGET, BotState.MINING):
            claimed.add(new_bot.target_object_id)
        updated.append(new_bot)

    return tuple(updated), deposits
