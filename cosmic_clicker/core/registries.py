"""Catalog registry.

Indexes every static catalog entry by id so lookups during a transition
are constant time. Built once and shared.
"""
from __future__ import annotations
from typing import Iterator

from ..catalog import (
    Building, BUILDINGS,
    Upgrade, UpgradeType, BuildingUpgrade, PrestigeUpgrade,
    CLICK_UPGRADES, PRODUCTION_UPGRADES, AUTO_CLICK_UPGRADES, PRESTIGE_UPGRADES, BUILDING_UPGRADES,
    Achievement, ACHIEVEMENTS,
    ObjectTemplate, OBJECT_TEMPLATES,
    ZoneConfig, ZONES, ZoneSpawnTable, SPAWN_TABLES,
    ModuleUpgrade, MODULE_UPGRADES,
)


class CatalogRegistry:
    """Singleton registry for catalog definitions."""
    _instance: CatalogRegistry | None = None
    _initialized: bool = False

    def __new__(cls) -> CatalogRegistry:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if CatalogRegistry._initialized:
            return

        self._buildings: dict[str, Building] = {b.id: b for b in BUILDINGS}
        self._upgrades: dict[str, Upgrade] = {}
        self._by_type: dict[UpgradeType, list[Upgrade]] = {t: [] for t in UpgradeType}
        self._building_upgrades: dict[str, list[BuildingUpgrade]] = {}
        self._achievements: dict[str, Achievement] = {a.id: a for a in ACHIEVEMENTS}
        self._templates: dict[str, ObjectTemplate] = dict(OBJECT_TEMPLATES)
        self._zones: dict[int, ZoneConfig] = {z.number: z for z in ZONES}
        self._spawn_tables: dict[int, ZoneSpawnTable] = {t.zone: t for t in SPAWN_TABLES}
        self._module_upgrades: dict[str, ModuleUpgrade] = dict(MODULE_UPGRADES)

        for group in (CLICK_UPGRADES, PRODUCTION_UPGRADES, AUTO_CLICK_UPGRADES,
                      PRESTIGE_UPGRADES, BUILDING_UPGRADES):
            for upgrade in group:
                self._upgrades[upgrade.id] = upgrade
                self._by_type[upgrade.type].append(upgrade)

        for upgrade in BUILDING_UPGRADES:
            self._building_upgrades.setdefault(upgrade.building_id, []).append(upgrade)

        CatalogRegistry._initialized = True

    # Buildings

    def get_building(self, building_id: str) -> Building | None:
        return self._buildings.get(building_id)

    def buildings(self) -> Iterator[Building]:
        return iter(self._buildings.values())

    # Upgrades

    def get_upgrade(self, upgrade_id: str) -> Upgrade | None:
        return self._upgrades.get(upgrade_id)

    def upgrade_type(self, upgrade_id: str) -> UpgradeType | None:
        """Category of an upgrade id, or None if unknown."""
        upgrade = self._upgrades.get(upgrade_id)
        return upgrade.type if upgrade else None

    def upgrades_of_type(self, upgrade_type: UpgradeType) -> list[Upgrade]:
        return list(self._by_type[upgrade_type])

    def owned_of_type(self, owned: frozenset[str] | set[str], upgrade_type: UpgradeType) -> list[Upgrade]:
        """Owned upgrades of one variant, in catalog order."""
        return [u for u in self._by_type[upgrade_type] if u.id in owned]

    def upgrades_for_building(self, building_id: str) -> list[BuildingUpgrade]:
        return list(self._building_upgrades.get(building_id, []))

    def prestige_upgrades(self) -> list[PrestigeUpgrade]:
        return list(self._by_type[UpgradeType.PRESTIGE])

    # Achievements

    def get_achievement(self, achievement_id: str) -> Achievement | None:
        return self._achievements.get(achievement_id)

    def achievements(self) -> Iterator[Achievement]:
        return iter(self._achievements.values())

    # Objects and zones

    def get_template(self, template_id: str) -> ObjectTemplate | None:
        return self._templates.get(template_id)

    def get_zone(self, zone: int) -> ZoneConfig | None:
        return self._zones.get(zone)

    @property
    def zone_count(self) -> int:
        return len(self._zones)

    def spawn_table_for_zone(self, zone: int) -> ZoneSpawnTable | None:
        """Spawn table for a zone. Zones past the last table reuse the last one."""
        if zone in self._spawn_tables:
            return self._spawn_tables[zone]
        if not self._spawn_tables or zone < 1:
            return None
        return self._spawn_tables[max(self._spawn_tables)]

    # Modules

    def get_module_upgrade(self, upgrade_id: str) -> ModuleUpgrade | None:
        return self._module_upgrades.get(upgrade_id)

    def module_upgrades(self) -> Iterator[ModuleUpgrade]:
        return iter(self._module_upgrades.values())

    def exists(self, entry_id: str) -> bool:
        """Check if an id names any building, upgrade, achievement or module upgrade."""
        return (entry_id in self._buildings or entry_id in self._upgrades
                or entry_id in self._achievements or entry_id in self._module_upgrades)


def get_catalog() -> CatalogRegistry:
    """Get the singleton CatalogRegistry instance."""
    return CatalogRegistry()
