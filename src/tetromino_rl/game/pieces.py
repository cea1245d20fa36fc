from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .shapes import NUM_ROTATIONS, RGB, PieceKind, Shape, color_of, shape_of


# The I bounding box keeps an empty top row, so it spawns one row higher to
# line up with the other kinds.
SPAWN_X = 3
SPAWN_Y = 0
I_SPAWN_Y = -1


@dataclass(frozen=True)
class Piece:
    kind: PieceKind
    rotation: int = 0  # 0..3

    def shape(self) -> Shape:
        return shape_of(self.kind, self.rotation)

    def color(self) -> RGB:
        return color_of(self.kind)

    def rotate_clockwise(self) -> "Piece":
        return Piece(self.kind, (self.rotation - 1) % NUM_ROTATIONS)

    def rotate_counter_clockwise(self) -> "Piece":
        return Piece(self.kind, (self.rotation + 1) % NUM_ROTATIONS)

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        s = self.shape()
        h, w = s.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if s[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells


@dataclass
class ActivePiece:
    """The falling piece. Coordinates are signed; the origin may sit off-board."""

    piece: Piece
    x: int
    y: int

    @classmethod
    def spawn(cls, kind: PieceKind, spawn_x: int = SPAWN_X) -> "ActivePiece":
        y = I_SPAWN_Y if kind == PieceKind.I else SPAWN_Y
        return cls(Piece(PieceKind(kind), 0), spawn_x, y)

    @property
    def kind(self) -> PieceKind:
        return self.piece.kind

    def shape(self) -> Shape:
        return self.piece.shape()

    def cells(self) -> List[Tuple[int, int]]:
        return self.piece.cells_at(self.x, self.y)
