import numpy as np
import pytest

from tetromino_rl.game import PieceKind, cells_of, color_of, shape_of


@pytest.mark.parametrize("kind", list(PieceKind))
@pytest.mark.parametrize("rotation", range(4))
def test_every_shape_is_a_4x4_tetromino(kind, rotation):
    shape = shape_of(kind, rotation)
    assert shape.shape == (4, 4)
    assert set(np.unique(shape)) <= {0, 1}
    assert int(shape.sum()) == 4


def test_o_rotations_are_identical():
    base = shape_of(PieceKind.O, 0)
    for r in range(1, 4):
        assert np.array_equal(shape_of(PieceKind.O, r), base)


@pytest.mark.parametrize("kind", [k for k in PieceKind if k != PieceKind.O])
def test_other_kinds_have_four_distinct_rotations(kind):
    shapes = [shape_of(kind, r).tobytes() for r in range(4)]
    assert len(set(shapes)) == 4


def test_shape_table_is_read_only():
    shape = shape_of(PieceKind.T, 0)
    with pytest.raises(ValueError):
        shape[0, 0] = 1


def test_rotation_out_of_range_is_rejected():
    with pytest.raises(ValueError):
        shape_of(PieceKind.L, 4)


def test_colors_are_fixed_per_kind():
    assert color_of(PieceKind.I) == (0, 255, 255)
    assert color_of(PieceKind.L) == (255, 165, 0)
    assert len({color_of(k) for k in PieceKind}) == len(PieceKind)


def test_cells_of_lists_offsets_row_major():
    assert cells_of(PieceKind.T, 0) == [(1, 0), (0, 1), (1, 1), (2, 1)]
    assert cells_of(PieceKind.I, 1) == [(2, 0), (2, 1), (2, 2), (2, 3)]
