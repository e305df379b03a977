from __future__ import annotations

import pygame

from falling_blocks.game import GameSnapshot, shape_for
from .palette import color_for_value

PREVIEW_ROWS = 4  # vertical room for one queued piece in the side panel


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_cells: int = 6) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_cells = panel_cells

    def window_size(self, rows: int, cols: int) -> tuple[int, int]:
        width = self.margin * 3 + (cols + self.panel_cells) * self.cell_size
        height = self.margin * 2 + rows * self.cell_size
        return width, height

    def _cell_rect(self, x0: int, y0: int, row: int, col: int) -> pygame.Rect:
        return pygame.Rect(
            x0 + col * self.cell_size,
            y0 + row * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _grid_surface(self, snapshot: GameSnapshot) -> pygame.Surface:
        state = snapshot.overlay()
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                color = color_for_value(int(state[y, x]))
                pygame.draw.rect(surf, color, self._cell_rect(0, 0, y, x))
        if snapshot.ghost is not None:
            ghost_color = color_for_value(int(snapshot.ghost.kind))
            for r, c in snapshot.ghost.cells():
                if 0 <= r < h and 0 <= c < w and state[r, c] == 0:
                    pygame.draw.rect(surf, ghost_color, self._cell_rect(0, 0, r, c), 2)
        return surf

    def _preview_surface(self, snapshot: GameSnapshot) -> pygame.Surface:
        rows = max(1, len(snapshot.next_pieces)) * PREVIEW_ROWS
        surf = pygame.Surface((self.panel_cells * self.cell_size, rows * self.cell_size))
        surf.fill((10, 10, 14))
        for idx, kind in enumerate(snapshot.next_pieces):
            shape = shape_for(kind, 0)
            color = color_for_value(int(kind))
            for py in range(shape.shape[0]):
                for px in range(shape.shape[1]):
                    if shape[py, px]:
                        rect = self._cell_rect(self.cell_size, 0, idx * PREVIEW_ROWS + py, px)
                        pygame.draw.rect(surf, color, rect)
        return surf

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        grid_surf = self._grid_surface(snapshot)
        screen.fill((10, 10, 14))
        screen.blit(grid_surf, (self.margin, self.margin))
        panel_x = self.margin * 2 + grid_surf.get_width()
        screen.blit(self._preview_surface(snapshot), (panel_x, self.margin))
