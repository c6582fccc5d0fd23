"""Tests for mining bot behavior."""
import pytest
from dataclasses import replace

from cosmic_clicker.ai.mining_bot import (
    check_bot_reached_target, create_bot, get_targeted_object_ids, mine_object, normalize_vector,
    select_target_object, should_bot_return, update_bot, update_bot_movement, update_bots,
)
from cosmic_clicker.catalog.objects import ObjectSize, ObjectType
from cosmic_clicker.config import SHIP_POSITION
from cosmic_clicker.core import actions as a
from cosmic_clicker.core.engine import EngineContext, apply_action
from cosmic_clicker.core.state import (
    BotBayModule, BotState, GameObject, ResourceDrop, initial_game_state, ship_position,
)
from cosmic_clicker.simulation.physics import Position, Velocity
from cosmic_clicker.simulation.resources import ResourceType


def make_object(object_id="obj_1", x=400.0, y=500.0, drops=(), **kwargs):
    return GameObject(
        id=object_id,
        type=ObjectType.ASTEROID,
        template_id="asteroid_iron_small",
        position=Position(x, y),
        velocity=Velocity(0, 0),
        health=15,
        max_health=15,
        size=ObjectSize.SMALL,
        width=40,
        height=40,
        resource_drops=tuple(drops),
        **kwargs,
    )


@pytest.fixture
def bay():
    return BotBayModule(bot_count=1)


class TestBotHelpers:
    """Tests for bot movement and mining helpers."""

    def test_normalize(self):
        """Test vector normalization."""
        assert normalize_vector(3, 4) == pytest.approx((0.6, 0.8))
        assert normalize_vector(0, 0) == (0.0, 0.0)

    def test_create_bot(self):
        """Test new bots start idle at the ship."""
        bot = create_bot("bot_1")
        assert bot.state == BotState.IDLE
        assert bot.position == ship_position()
        assert bot.position == Position(*SHIP_POSITION)
        assert bot.cargo_amount == 0

    def test_select_nearest_unclaimed(self):
        """Test target selection prefers the nearest unclaimed object."""
        bot = create_bot("bot_1")
        near = make_object("near", y=520)
        far = make_object("far", y=490)

        assert select_target_object(bot, [far, near], set(), 80).id == "near"
        assert select_target_object(bot, [far, near], {"near"}, 80).id == "far"
        assert select_target_object(bot, [far, near], set(), 10) is None

    def test_destroyed_not_targeted(self):
        """Test destroyed objects are never selected."""
        bot = create_bot("bot_1")
        assert select_target_object(bot, [make_object(destroyed=True)], set(), 80) is None

    def test_movement_stops_at_target(self):
        """Test a large step lands on the target instead of passing it."""
        bot = replace(create_bot("bot_1"), position=Position(0, 0))
        moved = update_bot_movement(bot, Position(10, 0), 1.0)
        assert moved.position == Position(10, 0)

    def test_movement_speed(self):
        """Test bots travel at their move speed."""
        bot = replace(create_bot("bot_1"), position=Position(0, 0))
        moved = update_bot_movement(bot, Position(1000, 0), 0.5, speed=100)
        assert moved.position.x == pytest.approx(50)
        assert moved.velocity.vx == pytest.approx(100)

    def test_reach(self):
        """Test arrival tolerance."""
        assert check_bot_reached_target(Position(0, 0), Position(10, 0))
        assert not check_bot_reached_target(Position(0, 0), Position(10.5, 0))

    def test_mining_carries_fraction(self):
        """Test whole units become cargo and the remainder carries over."""
        bot = replace(create_bot("bot_1"), mining_progress=0.9)
        mined = mine_object(bot, 0.2, 10, 1.0)

        assert mined.cargo_amount == 1
        assert mined.mining_progress == pytest.approx(0.1)

    def test_mining_capped(self):
        """Test cargo never exceeds bot capacity."""
        bot = replace(create_bot("bot_1"), cargo_amount=9)
        assert mine_object(bot, 5.0, 10, 1.0).cargo_amount == 10

    def test_should_return(self):
        """Test bots return when full or the target is gone."""
        bot = create_bot("bot_1")
        assert should_bot_return(replace(bot, cargo_amount=10), make_object(), 10)
        assert should_bot_return(bot, None, 10)
        assert not should_bot_return(bot, make_object(), 10)

    def test_targeted_ids(self):
        """Test only outbound or mining bots hold claims."""
        bots = [
            replace(create_bot("a"), state=BotState.MINING, target_object_id="obj_1"),
            replace(create_bot("b"), state=BotState.RETURNING, target_object_id="obj_2"),
        ]
        assert get_targeted_object_ids(bots) == {"obj_1"}


class TestBotStateMachine:
    """Tests for the bot lifecycle."""

    def test_idle_picks_target(self, bay):
        """Test an idle bot heads for an object in range."""
        obj = make_object()
        bot = update_bot(create_bot("bot_1"), [obj], {obj.id: obj}, set(), bay, 0.1)

        assert bot.state == BotState.MOVING_TO_TARGET
        assert bot.target_object_id == obj.id

    def test_idle_without_targets(self, bay):
        """Test an idle bot waits when nothing is in range."""
        bot = update_bot(create_bot("bot_1"), [], {}, set(), bay, 0.1)
        assert bot.state == BotState.IDLE

    def test_arrival_starts_mining(self, bay):
        """Test reaching the target switches to mining with its resource."""
        obj = make_object(drops=[ResourceDrop(ResourceType.IRON, 5)])
        bot = replace(create_bot("bot_1"), state=BotState.MOVING_TO_TARGET, target_object_id=obj.id)
        bot = update_bot(bot, [obj], {obj.id: obj}, set(), bay, 1.0)

        assert bot.state == BotState.MINING
        assert bot.cargo_type == ResourceType.IRON
        assert bot.position == obj.position

    def test_lost_target_goes_idle(self, bay):
        """Test a bot whose target vanished goes back to idle."""
        bot = replace(create_bot("bot_1"), state=BotState.MOVING_TO_TARGET, target_object_id="gone")
        bot = update_bot(bot, [], {}, set(), bay, 1.0)

        assert bot.state == BotState.IDLE
        assert bot.target_object_id is None

    def test_mining_returns_when_target_gone(self, bay):
        """Test mining stops once the target is destroyed."""
        bot = replace(create_bot("bot_1"), state=BotState.MINING, target_object_id="gone", cargo_amount=3)
        bot = update_bot(bot, [], {}, set(), bay, 1.0)

        assert bot.state == BotState.RETURNING
        assert bot.cargo_amount == 3

    def test_return_and_deposit(self, bay):
        """Test a returning bot docks then empties on the next step."""
        bot = replace(
            create_bot("bot_1"), position=Position(400, 500), state=BotState.RETURNING,
            cargo_amount=4, cargo_type=ResourceType.IRON,
        )
        bot = update_bot(bot, [], {}, set(), bay, 1.0)
        assert bot.state == BotState.DEPOSITING

        bot = update_bot(bot, [], {}, set(), bay, 1.0)
        assert bot.state == BotState.IDLE
        assert bot.cargo_amount == 0
        assert bot.cargo_type is None


class TestBotFleet:
    """Tests for updating every bot together."""

    def test_no_double_claims(self):
        """Test two idle bots do not chase the same object."""
        bay = BotBayModule(bot_count=2)
        bots = [create_bot("bot_1"), create_bot("bot_2")]
        updated, deposits = update_bots(bots, [make_object()], bay, 0.1)

        assert updated[0].target_object_id == "obj_1"
        assert updated[1].state == BotState.IDLE
        assert deposits == []

    def test_deposits_reported(self, bay):
        """Test depositing bots deliver their cargo."""
        bot = replace(create_bot("bot_1"), state=BotState.DEPOSITING, cargo_amount=5, cargo_type=ResourceType.IRON)
        updated, deposits = update_bots([bot], [], bay, 0.1)

        assert deposits == [ResourceDrop(ResourceType.IRON, 5)]
        assert updated[0].cargo_amount == 0

    def test_engine_collects_deposits(self):
        """Test bot deliveries land in the cargo hold."""
        state = initial_game_state(0)
        bot = replace(create_bot("bot_1"), state=BotState.DEPOSITING, cargo_amount=5, cargo_type=ResourceType.IRON)
        state = replace(state, bots=(bot,))
        result = apply_action(state, a.UpdateBots(0.1), EngineContext())

        assert result.resources[ResourceType.IRON] == 5
        assert result.bots[0].state == BotState.IDLE
