from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from tetromino_rl.game import GameSnapshot, PieceKind, RunState, color_of, shape_of
from .controls import help_lines


BACKGROUND = (10, 10, 14)
EMPTY_CELL = (20, 20, 26)
BOARD_BG = (30, 30, 36)
TEXT = (230, 230, 230)

PREVIEW_CELLS = 4


def _color_for_value(v: int) -> Tuple[int, int, int]:
    if v == 0:
        return EMPTY_CELL
    return color_of(PieceKind(abs(v)))


class Renderer:
    """Draws a game snapshot: board, falling piece, ghost, next/held panels and score."""

    def __init__(self, cell_size: int = 30, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self._font: Optional[pygame.font.Font] = None
        self._small_font: Optional[pygame.font.Font] = None
        self.help = help_lines()

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        side_panel_w = (PREVIEW_CELLS + 2) * self.cell_size
        return (
            self.margin * 3 + width * self.cell_size + side_panel_w,
            self.margin * 2 + height * self.cell_size,
        )

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
        return self._font

    @property
    def small_font(self) -> pygame.font.Font:
        if self._small_font is None:
            self._small_font = pygame.font.SysFont(None, 18)
        return self._small_font

    def _cell_rect(self, ox: int, oy: int, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            ox + x * self.cell_size,
            oy + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _grid_surface(self, cells: np.ndarray) -> pygame.Surface:
        h, w = cells.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill(BOARD_BG)
        for y in range(h):
            for x in range(w):
                pygame.draw.rect(surf, _color_for_value(int(cells[y, x])), self._cell_rect(0, 0, x, y))
        return surf

    def _draw_shape(self, screen: pygame.Surface, kind: PieceKind, rotation: int, ox: int, oy: int,
                    gx: int, gy: int, rows: int, outline: bool = False) -> None:
        shape = shape_of(kind, rotation)
        color = color_of(kind)
        for py in range(shape.shape[0]):
            for px in range(shape.shape[1]):
                # Cells above the board are not drawn
                if shape[py, px] and 0 <= gy + py < rows:
                    rect = self._cell_rect(ox, oy, gx + px, gy + py)
                    pygame.draw.rect(screen, color, rect, 2 if outline else 0)

    def _draw_preview(self, screen: pygame.Surface, label: str, kind: Optional[PieceKind], ox: int, oy: int) -> None:
        screen.blit(self.font.render(label, True, TEXT), (ox, oy))
        if kind is not None:
            self._draw_shape(screen, kind, 0, ox, oy + 24, 0, 0, PREVIEW_CELLS)

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot, ghost_y: Optional[int] = None) -> None:
        h, w = snapshot.cells.shape
        screen.fill(BACKGROUND)
        screen.blit(self._grid_surface(snapshot.cells), (self.margin, self.margin))

        if snapshot.run_state is RunState.PLAYING:
            if ghost_y is not None and ghost_y != snapshot.active_y:
                self._draw_shape(screen, snapshot.active_kind, snapshot.active_rotation,
                                 self.margin, self.margin, snapshot.active_x, ghost_y, h, outline=True)
            self._draw_shape(screen, snapshot.active_kind, snapshot.active_rotation,
                             self.margin, self.margin, snapshot.active_x, snapshot.active_y, h)

        panel_x = self.margin * 2 + w * self.cell_size
        preview_h = (PREVIEW_CELLS + 2) * self.cell_size
        self._draw_preview(screen, "Next", snapshot.next_kind, panel_x, self.margin)
        self._draw_preview(screen, "Held", snapshot.held_kind, panel_x, self.margin + preview_h)

        info_y = self.margin + 2 * preview_h
        screen.blit(self.font.render(f"score: {snapshot.score:04}", True, TEXT), (panel_x, info_y))
        screen.blit(self.font.render(f"lines: {snapshot.lines_cleared:04}", True, TEXT), (panel_x, info_y + 24))

        help_y = info_y + 60
        screen.blit(self.font.render("Ctrls", True, TEXT), (panel_x, help_y))
        for i, line in enumerate(self.help):
            screen.blit(self.small_font.render(line, True, TEXT), (panel_x, help_y + 24 + i * 18))

        if snapshot.run_state is RunState.LOST:
            text = self.font.render("Game Over - R to restart, Q to quit", True, (255, 255, 255))
            rect = text.get_rect(center=(screen.get_width() // 2, self.margin // 2 + 2))
            screen.blit(text, rect)
        pygame.display.flip()
