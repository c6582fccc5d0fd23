"""Achievement condition evaluation."""
from __future__ import annotations
from typing import TYPE_CHECKING

from ..catalog.achievements import Achievement, AchievementCondition

if TYPE_CHECKING:
    from ..core.registries import CatalogRegistry
    from ..core.state import GameState


def achievement_progress(achievement: Achievement, state: GameState) -> float:
    """Current value of the statistic the achievement tracks."""
    condition = achievement.condition
    if condition == AchievementCondition.TOTAL_CLICKS:
        return state.statistics.total_clicks
    elif condition == AchievementCondition.BUILDING_COUNT:
        return state.building_count(achievement.building_id) if achievement.building_id else 0
    elif condition == AchievementCondition.TOTAL_FUEL_EARNED:
        return state.total_fuel_earned
    elif condition == AchievementCondition.TOTAL_PRESTIGES:
        return state.statistics.total_prestiges
    elif condition == AchievementCondition.TOTAL_NEBULA_CRYSTALS:
        return state.nebula_crystals
    return 0


def is_achievement_met(achievement: Achievement, state: GameState) -> bool:
    return achievement_progress(achievement, state) >= achievement.threshold


def check_achievements(state: GameState, catalog: CatalogRegistry) -> list[str]:
    """Ids of achievements whose condition holds but are not yet unlocked."""
    return [
        a.id for a in catalog.achievements()
        if a.id not in state.achievements and is_achievement_met(a, state)
    ]
