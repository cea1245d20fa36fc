from __future__ import annotations

import random
from typing import Iterator, List, Optional

from .shapes import PieceKind


class BagGenerator:
    """Random-bag-of-7 piece sequence.

    Every aligned run of 7 draws is a permutation of all kinds, so the gap
    between two pieces of the same kind never exceeds 12 draws. The random
    source is injected so tests can fix the sequence.
    """

    BAG_SIZE = len(PieceKind)

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self.kinds: List[PieceKind] = list(PieceKind)
        self.rng.shuffle(self.kinds)
        self.index = 0

    def next(self) -> PieceKind:
        if self.index >= self.BAG_SIZE:
            self.rng.shuffle(self.kinds)
            self.index = 0
        kind = self.kinds[self.index]
        self.index += 1
        return kind

    def __iter__(self) -> Iterator[PieceKind]:
        return self

    def __next__(self) -> PieceKind:
        return self.next()
