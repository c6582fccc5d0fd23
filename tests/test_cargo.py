"""Tests for the resource ledger and cargo manager."""
import pytest

from cosmic_clicker.simulation.resources import (
    ResourceType, convert_resource_to_fuel, sell_value, max_cargo_addition, has_cargo_space,
    conversion_amount, fuel_consumption, resources_in_tier, is_tier_unlocked, empty_inventory,
)
from cosmic_clicker.simulation.cargo import (
    CargoStatus, auto_sell_resources, cargo_status, cargo_utilization, default_resource_priority,
    get_lowest_priority_resource, should_show_cargo_warning, space_to_free, validate_resource_priority,
)


class TestResourceLedger:
    """Tests for resource conversion math."""

    def test_convert_to_fuel(self):
        """Test fuel conversion floors the result."""
        assert convert_resource_to_fuel(ResourceType.STONE, 10) == 10
        assert convert_resource_to_fuel(ResourceType.ICE, 3) == 4  # 4.5 floored
        assert convert_resource_to_fuel(ResourceType.IRON, 10, 150) == 30

    def test_convert_nothing(self):
        """Test converting zero or negative amounts."""
        assert convert_resource_to_fuel(ResourceType.GOLD, 0) == 0
        assert convert_resource_to_fuel(ResourceType.GOLD, -5) == 0

    def test_sell_value(self):
        """Test selling uses credit values and the market multiplier."""
        assert sell_value(ResourceType.IRON, 10) == 80
        assert sell_value(ResourceType.STONE, 3, 1.5) == 9

    def test_max_cargo_addition(self):
        """Test that additions never exceed capacity."""
        assert max_cargo_addition(90, 100, 5) == 5
        assert max_cargo_addition(90, 100, 50) == 10
        assert max_cargo_addition(120, 100, 5) == 0
        assert max_cargo_addition(0, 100, -3) == 0

    def test_max_cargo_addition_bound(self):
        """Test the capacity bound across a range of inputs."""
        for current in (0, 25, 99, 100):
            for requested in (0, 1, 50, 500):
                added = max_cargo_addition(current, 100, requested)
                assert 0 <= added <= requested
                assert current + added <= max(100, current)

    def test_has_cargo_space(self):
        """Test space checks."""
        assert has_cargo_space(50, 100, 50)
        assert not has_cargo_space(50, 100, 51)

    def test_conversion_amount(self):
        """Test converter throughput is limited by what is available."""
        assert conversion_amount(2, 1.5, 10) == 3
        assert conversion_amount(2, 10, 5) == 5
        assert conversion_amount(2, 0, 5) == 0

    def test_fuel_consumption(self):
        """Test fuel burn scales with speed and efficiency."""
        assert fuel_consumption(1.0, 2.0, 100, 3) == pytest.approx(6.0)
        assert fuel_consumption(1.0, 2.0, 80, 1) == pytest.approx(1.6)
        assert fuel_consumption(1.0, 0, 100, 10) == 0

    def test_tiers(self):
        """Test tier membership."""
        assert resources_in_tier(1) == [ResourceType.STONE, ResourceType.CARBON]
        assert len(resources_in_tier(4)) == 3
        assert is_tier_unlocked(ResourceType.STONE, (1,))
        assert not is_tier_unlocked(ResourceType.IRON, (1,))

    def test_empty_inventory(self):
        """Test every resource starts at zero."""
        inventory = empty_inventory()
        assert len(inventory) == 9
        assert sum(inventory.values()) == 0


class TestCargoManager:
    """Tests for utilization and auto-selling."""

    def test_utilization(self):
        """Test utilization percent and clamping."""
        assert cargo_utilization(50, 100) == 50
        assert cargo_utilization(150, 100) == 100
        assert cargo_utilization(10, 0) == 0

    def test_warning_and_status(self):
        """Test warning thresholds."""
        assert should_show_cargo_warning(80)
        assert not should_show_cargo_warning(79.9)
        assert cargo_status(50) == CargoStatus.OK
        assert cargo_status(85) == CargoStatus.WARNING
        assert cargo_status(95) == CargoStatus.DANGER

    def test_space_to_free(self):
        """Test how much room must be made."""
        assert space_to_free(90, 100, 20) == 10
        assert space_to_free(50, 100, 20) == 0

    def test_default_priority(self):
        """Test that the default priority puts valuable resources first."""
        priority = default_resource_priority()
        assert priority[0] == ResourceType.DARK_MATTER
        assert priority[-1] == ResourceType.STONE
        assert len(priority) == 9

    def test_validate_priority(self):
        """Test dedupe and completion of a priority list."""
        priority = validate_resource_priority([ResourceType.IRON, ResourceType.IRON, ResourceType.STONE])
        assert priority[:2] == [ResourceType.IRON, ResourceType.STONE]
        assert len(priority) == 9
        assert len(set(priority)) == 9

    def test_lowest_priority_scans_from_tail(self):
        """Test that listed resources are sold before unlisted ones."""
        inventory = {ResourceType.STONE: 5, ResourceType.IRON: 5}
        assert get_lowest_priority_resource(inventory, [ResourceType.IRON]) == ResourceType.IRON
        assert get_lowest_priority_resource(inventory, default_resource_priority()) == ResourceType.STONE
        assert get_lowest_priority_resource({}, default_resource_priority()) is None

    def test_auto_sell_exact(self):
        """Test auto-sell frees exactly the space needed."""
        inventory = {ResourceType.STONE: 10, ResourceType.IRON: 5}
        result = auto_sell_resources(inventory, default_resource_priority(), 12)

        assert result.amount_sold == 12
        assert result.resources[ResourceType.STONE] == 0
        assert result.resources[ResourceType.IRON] == 3
        assert result.credits_earned == 10 * 2 + 2 * 8
        assert [r.resource for r in result.sold] == [ResourceType.STONE, ResourceType.IRON]

    def test_auto_sell_does_not_mutate_input(self):
        """Test the input inventory is left untouched."""
        inventory = {ResourceType.STONE: 10}
        auto_sell_resources(inventory, default_resource_priority(), 5)
        assert inventory == {ResourceType.STONE: 10}

    def test_auto_sell_never_oversells(self):
        """Test selling stops when nothing is left."""
        inventory = {ResourceType.STONE: 3, ResourceType.CARBON: 2}
        result = auto_sell_resources(inventory, default_resource_priority(), 50)

        assert result.amount_sold == 5
        assert sum(result.resources.values()) == 0

    def test_auto_sell_nothing_needed(self):
        """Test no sale when no space is needed."""
        result = auto_sell_resources({ResourceType.STONE: 3}, default_resource_priority(), 0)
        assert result.sold == []
        assert result.credits_earned == 0
