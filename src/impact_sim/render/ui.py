from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import pygame

from .assets import Color, get_text_surface


TextLine = tuple[str, tuple[int, int, int]]


@dataclass(frozen=True)
class ButtonVisualStyle:
    base_color: Color
    hover_color: Color
    text_color: tuple[int, int, int]
    radius: int
    border_color: Color | None = None
    border_width: int = 0
    disabled_color: Color = (40, 44, 52, 160)
    disabled_text_color: tuple[int, int, int] = (110, 116, 128)


class Button:
    """Clickable HUD button.

    ``label`` may be a plain string or a callable evaluated every frame, so a
    single button can read "Launch", "Pause" or "Resume" depending on the run
    state. ``enabled`` works the same way; a disabled button is drawn greyed
    out and ignores clicks.
    """

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        label: str | Callable[[], str],
        on_click: Callable[[], None],
        *,
        style: ButtonVisualStyle,
        enabled: Callable[[], bool] | None = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self._label = label
        self._on_click = on_click
        self._enabled = enabled
        self.style = style

    @property
    def label(self) -> str:
        return self._label() if callable(self._label) else self._label

    @property
    def enabled(self) -> bool:
        return True if self._enabled is None else self._enabled()

    def _fill_color(self, mouse_pos: tuple[int, int]) -> Color:
        if not self.enabled:
            return self.style.disabled_color
        if self.rect.collidepoint(mouse_pos):
            return self.style.hover_color
        return self.style.base_color

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        mouse_pos: tuple[int, int] | None = None,
    ) -> None:
        style = self.style
        face = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bounds = face.get_rect()
        pygame.draw.rect(face, self._fill_color(mouse_pos or pygame.mouse.get_pos()), bounds, border_radius=style.radius)
        if style.border_color is not None and style.border_width > 0:
            pygame.draw.rect(face, style.border_color, bounds, style.border_width, border_radius=style.radius)
        surface.blit(face, self.rect.topleft)

        ink = style.text_color if self.enabled else style.disabled_text_color
        caption = get_text_surface(font, self.label, ink)
        surface.blit(caption, caption.get_rect(center=self.rect.center))

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Run the click callback; returns True when the event was consumed."""
        if event.type != pygame.MOUSEBUTTONDOWN or event.button != 1:
            return False
        if not self.rect.collidepoint(event.pos):
            return False
        if self.enabled:
            self._on_click()
        return True


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[TextLine],
    *,
    background_color: Color,
    title: TextLine | None = None,
    padding: tuple[int, int] = (14, 12),
    min_width: int = 0,
) -> pygame.Surface:
    """Render HUD rows onto a rounded translucent card.

    A title row, when given, is separated from the body by a thin rule.
    Empty strings leave a blank row.
    """
    if not lines:
        raise ValueError("lines must not be empty")
    pad_x, pad_y = padding
    row_h = font.get_linesize()
    rows = list(lines) if title is None else [title, *lines]
    rule_gap = 0 if title is None else 6

    widest = max(font.size(text)[0] for text, _ in rows)
    size = (max(min_width, widest + 2 * pad_x), row_h * len(rows) + rule_gap + 2 * pad_y)
    card = pygame.Surface(size, pygame.SRCALPHA)
    pygame.draw.rect(card, background_color, card.get_rect(), border_radius=12)

    y = pad_y
    for index, (text, color) in enumerate(rows):
        if text:
            card.blit(get_text_surface(font, text, color), (pad_x, y))
        y += row_h
        if index == 0 and title is not None:
            rule_y = y + rule_gap // 2
            pygame.draw.line(card, (*title[1], 90), (pad_x, rule_y), (size[0] - pad_x, rule_y))
            y += rule_gap
    return card


def draw_progress_bar(
    surface: pygame.Surface,
    rect: tuple[int, int, int, int],
    fraction: float,
    *,
    fill_color: Color,
    track_color: Color = (255, 255, 255, 40),
) -> None:
    """Horizontal bar filled to ``fraction`` (clamped to [0, 1])."""
    track = pygame.Rect(rect)
    radius = track.height // 2
    pygame.draw.rect(surface, track_color, track, border_radius=radius)
    filled = int(track.width * min(1.0, max(0.0, fraction)))
    if filled > 0:
        pygame.draw.rect(surface, fill_color, (track.x, track.y, filled, track.height), border_radius=radius)
