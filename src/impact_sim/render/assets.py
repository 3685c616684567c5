"""Colour helpers, fonts and the rendered-text cache used by the HUD."""
from __future__ import annotations

from collections import OrderedDict
from typing import Iterable

import pygame


Color = tuple[int, int, int] | tuple[int, int, int, int]
RGB = tuple[int, int, int]


def hex_to_rgb(value: int) -> RGB:
    """``0xRRGGBB`` as used by the composition and method tables."""
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def mix_rgb(base: RGB, target: RGB, amount: float) -> RGB:
    amount = min(1.0, max(0.0, amount))
    return tuple(int(round(b + (t - b) * amount)) for b, t in zip(base, target))  # type: ignore[return-value]


class _TextCache:
    # HUD rows are re-rendered every frame but change rarely; keep the most
    # recent renders keyed on (font, text, colour).
    def __init__(self, capacity: int = 256) -> None:
        self.capacity = capacity
        self._entries: OrderedDict[tuple[int, str, Color], pygame.Surface] = OrderedDict()

    def render(self, font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
        key = (id(font), text, color)
        if key in self._entries:
            self._entries.move_to_end(key)
            return self._entries[key]
        surface = self._entries[key] = font.render(text, True, color)
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)
        return surface


_text_cache = _TextCache()


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    return _text_cache.render(font, text, color)


def load_font(candidates: Iterable[str], size: int, *, bold: bool = False) -> pygame.font.Font:
    """First installed font from ``candidates``, else pygame's system lookup."""
    names = list(candidates)
    path = next((found for found in (pygame.font.match_font(n, bold=bold) for n in names) if found), None)
    if path is not None:
        return pygame.font.Font(path, size)
    return pygame.font.SysFont(names[0] if names else None, size, bold=bold)
