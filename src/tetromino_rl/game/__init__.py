"""Game module for Tetromino RL.

Exports the core game engine and supporting classes:
- PieceKind, shape_of, color_of: Static shape and color tables
- Piece, ActivePiece: Immutable rotation value and the falling piece
- BagGenerator: Random bag of 7 piece sequence
- Board: Grid representation and line clearing
- ScoringRules: Simple scoring configuration and helpers
- TetrisGame: Game state machine driven by ticks and commands
"""

from .shapes import PieceKind, shape_of, color_of, cells_of
from .pieces import Piece, ActivePiece
from .bag import BagGenerator
from .grid import Board, BOARD_WIDTH, BOARD_HEIGHT
from .rules import ScoringRules
from .core import TetrisGame, Command, RunState, GameConfig, GameSnapshot

__all__ = [
    "PieceKind",
    "shape_of",
    "color_of",
    "cells_of",
    "Piece",
    "ActivePiece",
    "BagGenerator",
    "Board",
    "BOARD_WIDTH",
    "BOARD_HEIGHT",
    "ScoringRules",
    "TetrisGame",
    "Command",
    "RunState",
    "GameConfig",
    "GameSnapshot",
]
