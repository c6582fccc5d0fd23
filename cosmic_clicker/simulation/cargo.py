"""Cargo hold capacity tracking and priority-based auto-selling."""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from .resources import ResourceType, RESOURCE_INFO, sell_value


class CargoStatus(Enum):
    OK = "ok"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class SaleRecord:
    """One resource sold during auto-sell."""
    resource: ResourceType
    amount: float
    credits: int


@dataclass
class AutoSellResult:
    resources: dict[ResourceType, float]
    sold: list[SaleRecord] = field(default_factory=list)

    @property
    def credits_earned(self) -> int:
        return sum(record.credits for record in self.sold)

    @property
    def amount_sold(self) -> float:
        return sum(record.amount for record in self.sold)


def cargo_utilization(current: float, capacity: float) -> float:
    """Percent of capacity in use, clamped to 100. Zero capacity reads as empty."""
    if capacity <= 0:
        return 0.0
    return min(current / capacity * 100, 100.0)


def should_show_cargo_warning(utilization: float, threshold: float = 80.0) -> bool:
    return utilization >= threshold


def cargo_status(utilization: float, warning: float = 80.0, danger: float = 95.0) -> CargoStatus:
    if utilization >= danger:
        return CargoStatus.DANGER
    if utilization >= warning:
        return CargoStatus.WARNING
    return CargoStatus.OK


def default_resource_priority() -> list[ResourceType]:
    """All resources ordered by tier, then credit value, highest first."""
    return sorted(
        ResourceType,
        key=lambda r: (RESOURCE_INFO[r].tier, RESOURCE_INFO[r].credit_value),
        reverse=True,
    )


def validate_resource_priority(priority: Iterable[ResourceType]) -> list[ResourceType]:
    """Drop duplicates and append any missing resources in default order."""
    validated: list[ResourceType] = []
    for resource in priority:
        if resource not in validated:
            validated.append(resource)
    for resource in default_resource_priority():
        if resource not in validated:
            validated.append(resource)
    return validated


def get_lowest_priority_resource(
    inventory: dict[ResourceType, float], priority: list[ResourceType] | tuple[ResourceType, ...]
) -> ResourceType | None:
    """Held resource that should be sold first.

    Scans the priority list from its tail, then falls back to held
    resources that are not listed at all, in catalog order.
    """
    for resource in reversed(priority):
        if inventory.get(resource, 0) > 0:
            return resource
    for resource in ResourceType:
        if resource not in priority and inventory.get(resource, 0) > 0:
            return resource
    return None


def space_to_free(current: float, capacity: float, incoming: float) -> float:
    """How much must be removed so the incoming amount fits."""
    return max(0, current + incoming - capacity)


def auto_sell_resources(
    inventory: dict[ResourceType, float],
    priority: list[ResourceType] | tuple[ResourceType, ...],
    space_needed: float,
    market_multiplier: float = 1.0,
) -> AutoSellResult:
    """Sell lowest-priority resources until space_needed units are freed.

    Never sells more than is held and never more than space_needed in total.
    The input inventory is not modified.
    """
    remaining = dict(inventory)
    result = AutoSellResult(resources=remaining)
    if space_needed <= 0:
        return result

    still_needed = space_needed
    while still_needed > 0:
        resource = get_lowest_priority_resource(remaining, priority)
        if resource is None:
            break
        amount = min(remaining[resource], still_needed)
        remaining[resource] -= amount
        still_needed -= amount
        result.sold.append(SaleRecord(resource, amount, sell_value(resource, amount, market_multiplier)))

    return result
