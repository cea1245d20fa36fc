from __future__ import annotations

from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np


RGB = Tuple[int, int, int]
Shape = np.ndarray

NUM_ROTATIONS = 4


class PieceKind(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


COLORS: Dict[PieceKind, RGB] = {
    PieceKind.I: (0, 255, 255),
    PieceKind.O: (255, 255, 0),
    PieceKind.T: (128, 0, 128),
    PieceKind.S: (0, 128, 0),
    PieceKind.Z: (255, 0, 0),
    PieceKind.J: (0, 0, 255),
    PieceKind.L: (255, 165, 0),
}


_O = [[0, 1, 1, 0],
      [0, 1, 1, 0],
      [0, 0, 0, 0],
      [0, 0, 0, 0]]

# Four 4x4 matrices per kind, indexed by rotation state. Row 0 is the top of
# the bounding box.
_ROTATIONS: Dict[PieceKind, List[List[List[int]]]] = {
    PieceKind.I: [
        [[0, 0, 0, 0],
         [1, 1, 1, 1],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
        [[0, 0, 1, 0],
         [0, 0, 1, 0],
         [0, 0, 1, 0],
         [0, 0, 1, 0]],
        [[0, 0, 0, 0],
         [0, 0, 0, 0],
         [1, 1, 1, 1],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 1, 0, 0]],
    ],
    PieceKind.O: [_O, _O, _O, _O],
    PieceKind.T: [
        [[0, 1, 0, 0],
         [1, 1, 1, 0],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [0, 1, 1, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
        [[0, 0, 0, 0],
         [1, 1, 1, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [1, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
    ],
    PieceKind.S: [
        [[0, 1, 1, 0],
         [1, 1, 0, 0],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [0, 1, 1, 0],
         [0, 0, 1, 0],
         [0, 0, 0, 0]],
        [[0, 0, 0, 0],
         [0, 1, 1, 0],
         [1, 1, 0, 0],
         [0, 0, 0, 0]],
        [[1, 0, 0, 0],
         [1, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
    ],
    PieceKind.Z: [
        [[1, 1, 0, 0],
         [0, 1, 1, 0],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
        [[0, 0, 1, 0],
         [0, 1, 1, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
        [[0, 0, 0, 0],
         [1, 1, 0, 0],
         [0, 1, 1, 0],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [1, 1, 0, 0],
         [1, 0, 0, 0],
         [0, 0, 0, 0]],
    ],
    PieceKind.J: [
        [[1, 0, 0, 0],
         [1, 1, 1, 0],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
        [[0, 1, 1, 0],
         [0, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
        [[0, 0, 0, 0],
         [1, 1, 1, 0],
         [0, 0, 1, 0],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [0, 1, 0, 0],
         [1, 1, 0, 0],
         [0, 0, 0, 0]],
    ],
    PieceKind.L: [
        [[0, 0, 1, 0],
         [1, 1, 1, 0],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 1, 1, 0],
         [0, 0, 0, 0]],
        [[1, 1, 1, 0],
         [1, 0, 0, 0],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
        [[1, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
    ],
}


def _freeze(matrix: List[List[int]]) -> Shape:
    arr = np.array(matrix, dtype=np.int8)
    arr.setflags(write=False)
    return arr


SHAPES: Dict[PieceKind, Tuple[Shape, ...]] = {
    kind: tuple(_freeze(m) for m in mats) for kind, mats in _ROTATIONS.items()
}


def shape_of(kind: PieceKind, rotation: int) -> Shape:
    """Return the read-only 4x4 occupancy matrix for ``kind`` at ``rotation``."""
    if not 0 <= rotation < NUM_ROTATIONS:
        raise ValueError(f"rotation must be in [0, {NUM_ROTATIONS}), got {rotation}")
    return SHAPES[PieceKind(kind)][rotation]


def color_of(kind: PieceKind) -> RGB:
    return COLORS[PieceKind(kind)]


def cells_of(kind: PieceKind, rotation: int) -> List[Tuple[int, int]]:
    """Occupied (x, y) offsets inside the bounding box, row-major."""
    s = shape_of(kind, rotation)
    return [(int(x), int(y)) for y, x in np.argwhere(s)]
