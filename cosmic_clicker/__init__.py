"""Cosmic Clicker: a deterministic idle-clicker simulation engine."""
from .config import VERSION
from .core.engine import EngineContext, apply_action
from .core.world import GameSession
from .core.state import GameState, initial_game_state

__version__ = VERSION

__all__ = ['EngineContext', 'apply_action', 'GameSession', 'GameState', 'initial_game_state']
