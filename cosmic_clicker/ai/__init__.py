"""Autonomous agents."""
from .mining_bot import (
    create_bot, update_bot, update_bots, select_target_object, get_targeted_object_ids,
)

__all__ = [
    'create_bot', 'update_bot', 'update_bots', 'select_target_object', 'get_targeted_object_ids',
]
