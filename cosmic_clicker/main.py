"""Entry point and game loop."""
from __future__ import annotations
import logging
import sys
import time

import pygame

from .config import (
    TITLE, COLORS, AUTO_SAVE_INTERVAL, GameConfig,
)
from .core import actions as a
from .core.events import (
    AchievementUnlockedEvent, CargoWarningEvent, Event, NotificationEvent, PrestigeEvent, ZoneChangedEvent,
)
from .core.registries import get_catalog
from .core.state import GameState, ShipSpeed, ship_position
from .core.world import GameSession
from .simulation.economy import building_cost, prestige_reward
from .simulation.resources import total_cargo
from .systems.offline_progress import get_offline_progress_info, should_show_offline_popup
from .systems.save_load import load_game, save_game

logger = logging.getLogger(__name__)

SPEED_KEYS = {
    pygame.K_1: ShipSpeed.STOP,
    pygame.K_2: ShipSpeed.SLOW,
    pygame.K_3: ShipSpeed.NORMAL,
    pygame.K_4: ShipSpeed.FAST,
    pygame.K_5: ShipSpeed.BOOST,
}

NOTIFICATION_TIME = 4.0


class Notifications:
    """Short-lived messages shown in the corner of the screen."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str, float]] = []

    def add(self, message: str, kind: str = "info", duration: float = NOTIFICATION_TIME) -> None:
        self.messages.append((message, kind, time.monotonic() + duration))

    def on_event(self, event: Event) -> None:
        if isinstance(event, NotificationEvent):
            self.add(event.message, event.notification_type, event.duration)
        elif isinstance(event, AchievementUnlockedEvent):
            self.add(f"Achievement: {event.name}", "success")
        elif isinstance(event, PrestigeEvent):
            self.add(f"Prestige! +{event.crystals_gained} Nebula Crystals", "success")
        elif isinstance(event, ZoneChangedEvent):
            self.add(f"Entered zone {event.new_zone}: {event.zone_name}", "info")
        elif isinstance(event, CargoWarningEvent) and event.status != "ok":
            self.add(f"Cargo {event.utilization:.0f}% full", event.status)

    def active(self) -> list[tuple[str, str]]:
        now = time.monotonic()
        self.messages = [m for m in self.messages if m[2] > now]
        return [(text, kind) for text, kind, _ in self.messages]


def restore_saved_game(session: GameSession) -> None:
    """Load the saved game, crediting any offline earnings."""
    saved = load_game()
    if saved is None:
        logger.info("No save found, starting a new game")
        return

    info = get_offline_progress_info(saved.last_save_time, time.time(), saved.production_per_second)
    session.dispatch(a.LoadSave(saved))
    if should_show_offline_popup(info.time_away, info.fuel_earned):
        session.dispatch(a.ApplyOfflineProgress(info.fuel_earned, info.time_away))
        session.event_bus.publish(NotificationEvent(
            f"Welcome back! You were away {info.time_away_display} and earned {info.fuel_earned:,} fuel",
            "success", 8.0,
        ))


def handle_key(session: GameSession, key: int) -> None:
    state = session.state
    if key == pygame.K_SPACE:
        session.dispatch(a.Click())
    elif key in SPEED_KEYS:
        session.dispatch(a.SetShipSpeed(SPEED_KEYS[key]))
    elif key == pygame.K_b:
        session.dispatch(a.BuyBuilding("spaceMiner"))
    elif key == pygame.K_h:
        session.dispatch(a.BuyBuilding("asteroidHarvester"))
    elif key == pygame.K_w:
        session.dispatch(a.WarpToNextZone())
    elif key == pygame.K_p:
        session.dispatch(a.Prestige())
    elif key == pygame.K_c:
        for resource, amount in state.resources.items():
            if amount > 0:
                session.dispatch(a.ConvertResources(resource, amount))
    elif key == pygame.K_v:
        for resource, amount in state.resources.items():
            if amount > 0:
                session.dispatch(a.SellResources(resource, amount))
    elif key == pygame.K_s:
        ok, message = save_game(session.state)
        session.event_bus.publish(NotificationEvent(message, "success" if ok else "error"))
    elif key == pygame.K_TAB:
        session.toggle_pause()


def render(screen: pygame.Surface, font: pygame.font.Font, state: GameState,
           notifications: Notifications, paused: bool) -> None:
    screen.fill(COLORS['background'])

    for obj in state.objects:
        if obj.destroyed:
            continue
        color = COLORS.get(obj.type.value, COLORS['asteroid'])
        radius = max(obj.width, obj.height) / 2
        center = (int(obj.position.x), int(obj.position.y))
        pygame.draw.circle(screen, color, center, int(radius))
        if obj.health < obj.max_health:
            ratio = obj.health / obj.max_health
            bar = pygame.Rect(center[0] - radius, center[1] - radius - 8, radius * 2 * ratio, 4)
            pygame.draw.rect(screen, COLORS['danger'], bar)

    ship = ship_position()
    pygame.draw.polygon(screen, COLORS['ship'], [
        (ship.x, ship.y - 20), (ship.x - 16, ship.y + 14), (ship.x + 16, ship.y + 14),
    ])
    for bot in state.bots:
        pygame.draw.rect(screen, COLORS['bot'], (bot.position.x - 4, bot.position.y - 4, 8, 8))

    capacity = state.modules.cargo_hold.capacity
    miner = get_catalog().get_building("spaceMiner")
    miner_cost = building_cost(miner.base_cost, miner.cost_multiplier, state.building_count("spaceMiner"))
    lines = [
        f"Fuel: {state.fuel:,.0f}  (+{state.production_per_second:,.1f}/s)",
        f"Credits: {state.credits:,.0f}   Crystals: {state.nebula_crystals}",
        f"Zone {state.current_zone}  progress {state.zone_progress:,.0f}",
        f"Speed: {state.ship_speed.value}   Cargo: {total_cargo(state.resources):,.0f}/{capacity:,.0f}",
        f"Space Miners: {state.building_count('spaceMiner')} (next {miner_cost:,})",
        f"Prestige reward: {prestige_reward(state.total_fuel_earned)}",
    ]
    if paused:
        lines.append("PAUSED")
    for i, line in enumerate(lines):
        screen.blit(font.render(line, True, COLORS['ui_text']), (10, 10 + i * 20))

    kind_colors = {"success": COLORS['ui_highlight'], "warning": COLORS['warning'],
                   "danger": COLORS['danger'], "error": COLORS['danger']}
    for i, (text, kind) in enumerate(notifications.active()):
        surface = font.render(text, True, kind_colors.get(kind, COLORS['ui_text']))
        screen.blit(surface, (screen.get_width() - surface.get_width() - 10, 10 + i * 20))


def main() -> None:
    """Main entry point."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = GameConfig()

    pygame.init()
    screen = pygame.display.set_mode((config.screen_width, config.screen_height))
    pygame.display.set_caption(TITLE)
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(None, 22)

    notifications = Notifications()
    session = GameSession(config=config.engine, seed=config.seed)
    session.event_bus.subscribe(Event, notifications.on_event)
    restore_saved_game(session)

    save_timer = 0.0
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                else:
                    handle_key(session, event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    session.dispatch(a.FireLaser(*event.pos))
                elif event.button == 3:
                    session.dispatch(a.Click())

        dt = clock.tick(config.fps) / 1000.0  # Delta time in seconds
        session.update(dt)

        save_timer += dt
        if config.auto_save and save_timer >= AUTO_SAVE_INTERVAL:
            save_timer = 0.0
            save_game(session.state)

        render(screen, font, session.state, notifications, session.paused)
        pygame.display.flip()

    if config.auto_save:
        save_game(session.state)
    pygame.quit()
    sys.exit(0)


if __name__ == "__main__":
    main()
