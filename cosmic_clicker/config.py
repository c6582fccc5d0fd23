"""Game constants and configuration."""
from __future__ import annotations
from dataclasses import dataclass, field

# Display settings
SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600
FPS = 60
TITLE = "Cosmic Clicker"

# Versioning / persistence
VERSION = "1.0.0"
SAVE_KEY = "cosmicClicker_save"
AUTO_SAVE_INTERVAL = 30.0  # Seconds between auto-saves in the frame driver

# Economy constants
INITIAL_CLICK_POWER = 1
COST_MULTIPLIER = 1.15
MIN_PRESTIGE_FUEL = 1_000_000
PRESTIGE_DIVISOR = 1_000_000
NEBULA_CRYSTAL_BONUS = 0.01  # +1% production per crystal
ACHIEVEMENT_BONUS = 0.01  # +1% production per achievement
MAX_AFFORDABLE_CAP = 1000

# Offline progress
MAX_OFFLINE_HOURS = 8
OFFLINE_PRODUCTION_MULTIPLIER = 0.5
MIN_OFFLINE_POPUP_SECONDS = 60

# Ship speed -> base fuel consumption per second
FUEL_CONSUMPTION_RATES: dict[str, float] = {
    'stop': 0.0,
    'slow': 0.5,
    'normal': 1.0,
    'fast': 2.0,
    'boost': 5.0,
}

# Ship speed -> spawn rate factor
SPEED_SPAWN_FACTORS: dict[str, float] = {
    'stop': 1.0,
    'slow': 0.7,
    'normal': 1.0,
    'fast': 1.3,
    'boost': 1.6,
}

# Mining layer
OBJECT_SPAWN_RATE = 1.0  # Objects per second at zone rate 1.0
OBJECT_FALL_SPEED = 100.0  # Pixels per second
ZONE_FALL_SPEED_BONUS = 0.1  # +10% fall speed per zone
ZONE_HP_SCALING = 1.3  # Object HP multiplier per zone
PIERCING_EXTRA_HITS = 2

# Mining bots
BOT_REACH_DISTANCE = 10.0  # Pixels
BOT_MOVE_SPEED = 150.0  # Pixels per second
SHIP_POSITION = (400.0, 550.0)

# Colors
COLORS = {
    'background': (5, 5, 20),
    'ship': (120, 200, 255),
    'bot': (255, 220, 80),
    'laser': (255, 60, 60),
    'asteroid': (139, 119, 101),
    'debris': (150, 150, 160),
    'derelict': (90, 140, 110),
    'gate': (160, 90, 220),
    'anomaly': (230, 100, 200),
    'ui_text': (200, 200, 220),
    'ui_highlight': (100, 150, 255),
    'warning': (255, 180, 60),
    'danger': (255, 70, 70),
}


@dataclass
class EngineConfig:
    """Simulation policy knobs passed to the engine and session."""
    screen_width: int = SCREEN_WIDTH
    screen_height: int = SCREEN_HEIGHT
    max_frame_delta: float | None = 0.25  # None disables clamping
    cargo_warning_threshold: float = 80.0  # Percent
    cargo_danger_threshold: float = 95.0  # Percent
    max_active_objects: int = 30
    auto_target_range: float = 300.0


@dataclass
class GameConfig:
    """Runtime game configuration."""
    screen_width: int = SCREEN_WIDTH
    screen_height: int = SCREEN_HEIGHT
    fps: int = FPS
    seed: int | None = None
    auto_save: bool = True
    engine: EngineConfig = field(default_factory=EngineConfig)
