"""Core engine: state model, actions, events and the catalog registry."""
from .events import EventBus, Event
from .state import GameState, GameObject, Bot, BotState, ShipSpeed, initial_game_state
from .registries import CatalogRegistry, get_catalog

__all__ = [
    'EventBus', 'Event',
    'GameState', 'GameObject', 'Bot', 'BotState', 'ShipSpeed', 'initial_game_state',
    'CatalogRegistry', 'get_catalog',
]
