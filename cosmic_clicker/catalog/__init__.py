"""Static game catalog: buildings, upgrades, achievements, objects, zones, modules."""
from .buildings import Building, BUILDINGS
from .upgrades import (
    UpgradeType, PrestigeEffect, Upgrade,
    ClickUpgrade, ProductionUpgrade, AutoClickUpgrade, PrestigeUpgrade, BuildingUpgrade,
    CLICK_UPGRADES, PRODUCTION_UPGRADES, AUTO_CLICK_UPGRADES, PRESTIGE_UPGRADES, BUILDING_UPGRADES,
)
from .achievements import Achievement, AchievementCondition, ACHIEVEMENTS
from .objects import (
    ObjectType, ObjectSize, LootEntry, SpecialDrop, ObjectTemplate,
    ZoneConfig, SpawnEntry, ZoneSpawnTable, OBJECT_TEMPLATES, ZONES, SPAWN_TABLES,
)
from .modules import ModuleType, ModuleUpgrade, MODULE_UPGRADES

__all__ = [
    'Building', 'BUILDINGS',
    'UpgradeType', 'PrestigeEffect', 'Upgrade',
    'ClickUpgrade', 'ProductionUpgrade', 'AutoClickUpgrade', 'PrestigeUpgrade', 'BuildingUpgrade',
    'CLICK_UPGRADES', 'PRODUCTION_UPGRADES', 'AUTO_CLICK_UPGRADES', 'PRESTIGE_UPGRADES', 'BUILDING_UPGRADES',
    'Achievement', 'AchievementCondition', 'ACHIEVEMENTS',
    'ObjectType', 'ObjectSize', 'LootEntry', 'SpecialDrop', 'ObjectTemplate',
    'ZoneConfig', 'SpawnEntry', 'ZoneSpawnTable', 'OBJECT_TEMPLATES', 'ZONES', 'SPAWN_TABLES',
    'ModuleType', 'ModuleUpgrade', 'MODULE_UPGRADES',
]
