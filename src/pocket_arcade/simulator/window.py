"""
Desktop arcade window using pygame.

Translates pygame keyboard and mouse input into arcade events and
draws the active game's frame buffer with a one-line HUD on top.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional

import pygame

from pocket_arcade.core.events import (
    Event,
    EventBus,
    EventType,
    key_down_event,
    key_up_event,
    tap_event,
    tick_event,
)
from pocket_arcade.games.manager import ArcadeManager

logger = logging.getLogger(__name__)

# pygame key codes that have a DOM name other than their character
SPECIAL_KEYS = {
    pygame.K_LEFT: "ArrowLeft",
    pygame.K_RIGHT: "ArrowRight",
    pygame.K_UP: "ArrowUp",
    pygame.K_DOWN: "ArrowDown",
    pygame.K_RETURN: "Enter",
    pygame.K_KP_ENTER: "Enter",
    pygame.K_SPACE: " ",
    pygame.K_ESCAPE: "Escape",
    pygame.K_BACKSPACE: "Backspace",
}


def key_name(event: pygame.event.Event) -> Optional[str]:
    """DOM-style key name for a pygame key event."""
    if event.key in SPECIAL_KEYS:
        return SPECIAL_KEYS[event.key]
    if pygame.K_KP1 <= event.key <= pygame.K_KP9:
        return str(event.key - pygame.K_KP1 + 1)
    char = getattr(event, "unicode", "")
    if char and char.isprintable():
        return char
    name = pygame.key.name(event.key)
    return name if len(name) == 1 else None


@dataclass
class WindowConfig:
    """Arcade window configuration."""
    title: str = "Pocket Arcade"
    fps: int = 60
    scale: float = 1.5
    hud_height: int = 48

    # Largest game canvas (Breakout, Space Invaders)
    canvas_width: int = 600
    canvas_height: int = 400

    # Colors
    bg_color: tuple[int, int, int] = (20, 20, 30)
    text_color: tuple[int, int, int] = (220, 220, 235)
    label_color: tuple[int, int, int] = (40, 30, 20)
    accent_color: tuple[int, int, int] = (100, 150, 255)
    error_color: tuple[int, int, int] = (255, 110, 110)

    @classmethod
    def from_settings(cls, settings) -> "WindowConfig":
        display = settings.display
        return cls(
            title=display.title,
            fps=display.fps,
            scale=display.scale,
            hud_height=display.hud_height,
        )

    @property
    def width(self) -> int:
        return int(self.canvas_width * self.scale)

    @property
    def height(self) -> int:
        return int(self.canvas_height * self.scale) + self.hud_height


class ArcadeWindow:
    """
    Main arcade window.

    Keyboard Mapping:
        Arrows / WASD: Move
        SPACE: Fire / drop
        ENTER: Start, play again
        ESC / R: Reset the current game
        BACKSPACE: Back to the game menu
        1-9: Columns, pads and holes
        Mouse click: Tap a cell, column or pad
        Ctrl+Q: Quit
    """

    NOTIFICATION_SECONDS = 3.0

    def __init__(
        self,
        manager: ArcadeManager,
        event_bus: EventBus,
        config: WindowConfig | None = None,
    ) -> None:
        self.manager = manager
        self.event_bus = event_bus
        self.config = config or WindowConfig()

        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None
        self._small_font: pygame.font.Font | None = None
        self._running = False
        self._frame_count = 0
        self._canvas_rect = pygame.Rect(0, 0, 0, 0)

        self._notification: Optional[tuple[str, str, str]] = None
        self._notification_time = 0.0

        self.event_bus.subscribe(EventType.NOTIFICATION, self._on_notification)

        logger.info("ArcadeWindow created")

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)
        self._screen = pygame.display.set_mode(
            (self.config.width, self.config.height),
            pygame.DOUBLEBUF,
        )
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.SysFont(None, 24)
        self._small_font = pygame.font.SysFont(None, 18)

        logger.info(f"Pygame initialized: {self.config.width}x{self.config.height}")

    def _on_notification(self, event: Event) -> None:
        data = event.data
        self._notification = (
            data.get("title", ""),
            data.get("description", ""),
            data.get("variant", "default"),
        )
        self._notification_time = time.monotonic()

    # Input
    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)

            elif event.type == pygame.KEYUP:
                name = key_name(event)
                if name:
                    self.event_bus.emit(key_up_event(name))

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_click(event.pos)

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        if event.key == pygame.K_q and event.mod & pygame.KMOD_CTRL:
            self._running = False
            return
        name = key_name(event)
        if name:
            self.event_bus.emit(key_down_event(name))

    def _handle_click(self, pos: tuple[int, int]) -> None:
        game = self.manager.current_game
        if game is None or not self._canvas_rect.collidepoint(pos):
            return
        x = (pos[0] - self._canvas_rect.x) / self.config.scale
        y = (pos[1] - self._canvas_rect.y) / self.config.scale
        index = game.cell_at(x, y)
        if index is not None:
            self.event_bus.emit(tap_event(index, source="mouse"))

    # Rendering
    def _render(self) -> None:
        """Render HUD and the active frame."""
        if not self._screen:
            return

        self._screen.fill(self.config.bg_color)
        self._render_canvas()
        self._render_hud()
        pygame.display.flip()

    def _render_canvas(self) -> None:
        buffer = self.manager.create_frame()
        self.manager.render(buffer)

        # numpy buffers are (height, width, 3), surfaces are (width, height)
        surface = pygame.surfarray.make_surface(buffer.swapaxes(0, 1))
        width = int(buffer.shape[1] * self.config.scale)
        height = int(buffer.shape[0] * self.config.scale)
        surface = pygame.transform.scale(surface, (width, height))

        x = (self.config.width - width) // 2
        y = self.config.hud_height + (self.config.height - self.config.hud_height - height) // 2
        self._canvas_rect = pygame.Rect(x, y, width, height)
        self._screen.blit(surface, self._canvas_rect.topleft)

        if not self._font:
            return
        color = self.config.label_color if self.manager.current_game else self.config.text_color
        for lx, ly, text in self.manager.labels():
            label = self._font.render(text, True, color)
            center = (x + lx * self.config.scale, y + ly * self.config.scale)
            self._screen.blit(label, label.get_rect(center=center))

    def _render_hud(self) -> None:
        if not self._font or not self._small_font:
            return

        status = self._font.render(self.manager.status_text(), True, self.config.text_color)
        self._screen.blit(status, (12, 8))

        balance = self.manager.balance_text()
        if balance:
            surface = self._font.render(balance, True, self.config.accent_color)
            self._screen.blit(surface, surface.get_rect(topright=(self.config.width - 12, 8)))

        if self._notification is None:
            return
        if time.monotonic() - self._notification_time > self.NOTIFICATION_SECONDS:
            self._notification = None
            return

        title, description, variant = self._notification
        color = self.config.error_color if variant == "destructive" else self.config.accent_color
        line = f"{title} {description}".strip()
        surface = self._small_font.render(line, True, color)
        self._screen.blit(surface, (12, 8 + self._font.get_linesize()))

    async def run(self) -> None:
        """Main loop."""
        self._init_pygame()
        self._running = True

        logger.info("Arcade window started")

        while self._running:
            # Handle events
            self._handle_events()

            # Emit tick event
            if self._clock:
                delta = self._clock.get_time() / 1000.0
                self.event_bus.emit(tick_event(delta, self._frame_count))

            # Process event queue
            await self.event_bus.process_queue()

            # Render
            self._render()

            # Frame timing
            if self._clock:
                self._clock.tick(self.config.fps)

            self._frame_count += 1

            # Yield so award tasks can progress
            await asyncio.sleep(0)

        self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        pygame.quit()
        logger.info("Arcade window stopped")

    def stop(self) -> None:
        """Stop the loop after the current frame."""
        self._running = False
