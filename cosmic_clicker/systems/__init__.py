"""Collaborators outside the engine: persistence and offline progress."""
from .save_load import save_game, load_game, delete_save, export_save, import_save, ImportResult
from .offline_progress import OfflineProgress, get_offline_progress_info, should_show_offline_popup

__all__ = [
    'save_game', 'load_game', 'delete_save', 'export_save', 'import_save', 'ImportResult',
    'OfflineProgress', 'get_offline_progress_info', 'should_show_offline_popup',
]
