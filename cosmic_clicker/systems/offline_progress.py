"""Earnings accrued while the game was closed."""
from __future__ import annotations
import math
from dataclasses import dataclass

from ..config import MAX_OFFLINE_HOURS, OFFLINE_PRODUCTION_MULTIPLIER, MIN_OFFLINE_POPUP_SECONDS

MAX_OFFLINE_SECONDS = MAX_OFFLINE_HOURS * 3600


@dataclass(frozen=True)
class OfflineProgress:
    fuel_earned: int
    time_away: float  # Seconds actually elapsed
    time_away_display: str
    was_capped: bool


def calculate_offline_progress(last_save_time: float, now: float, production_per_second: float) -> int:
    """Fuel earned offline: capped at 8 hours, at half the live rate."""
    elapsed = max(0.0, now - last_save_time)
    counted = min(elapsed, MAX_OFFLINE_SECONDS)
    if production_per_second <= 0 or not math.isfinite(production_per_second):
        return 0
    return math.floor(production_per_second * counted * OFFLINE_PRODUCTION_MULTIPLIER)


def format_offline_time(seconds: float) -> str:
    """Human-readable duration, coarsened to the two largest units."""
    seconds = max(0, int(seconds))
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if minutes < 1:
        return "less than a minute"
    if hours < 1:
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    if days < 1:
        rem = minutes % 60
        text = f"{hours} hour{'s' if hours != 1 else ''}"
        if rem:
            text += f" and {rem} minute{'s' if rem != 1 else ''}"
        return text
    rem = hours % 24
    text = f"{days} day{'s' if days != 1 else ''}"
    if rem:
        text += f" and {rem} hour{'s' if rem != 1 else ''}"
    return text


def get_offline_progress_info(last_save_time: float, now: float, production_per_second: float) -> OfflineProgress:
    elapsed = max(0.0, now - last_save_time)
    return OfflineProgress(
        fuel_earned=calculate_offline_progress(last_save_time, now, production_per_second),
        time_away=elapsed,
        time_away_display=format_offline_time(elapsed),
        was_capped=elapsed > MAX_OFFLINE_SECONDS,
    )


def should_show_offline_popup(time_away: float, fuel_earned: float) -> bool:
    return time_away >= MIN_OFFLINE_POPUP_SECONDS and fuel_earned > 0
