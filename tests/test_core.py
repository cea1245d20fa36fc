import numpy as np
import pytest

from tetromino_rl.game import (
    ActivePiece,
    Command,
    GameConfig,
    PieceKind,
    RunState,
    ScoringRules,
    TetrisGame,
    shape_of,
)


def make_game(kind=None, seed=0):
    game = TetrisGame(GameConfig(random_seed=seed))
    if kind is not None:
        game.active = ActivePiece.spawn(kind)
    return game


def test_new_game_draws_current_and_next_from_bag():
    game = make_game()
    assert game.generator.index == 2
    assert game.active.kind == game.generator.kinds[0]
    assert game.next_kind == game.generator.kinds[1]
    assert game.held_kind is None
    assert game.can_hold
    assert game.run_state is RunState.PLAYING
    assert game.score == 0 and game.lines_cleared == 0


@pytest.mark.parametrize("kind", list(PieceKind))
def test_spawn_fits_on_empty_board(kind):
    game = make_game(kind)
    assert (game.active.x, game.active.y) == (3, -1 if kind == PieceKind.I else 0)
    assert game.board.can_fit(game.active.x, game.active.y, game.active.shape())


def test_blocked_horizontal_move_is_ignored():
    game = make_game(PieceKind.O)
    for _ in range(4):
        assert game.move_horizontal(-1)
    assert game.active.x == -1
    assert not game.move_horizontal(-1)
    assert game.active.x == -1


def test_move_down_stops_at_floor():
    game = make_game(PieceKind.O)
    assert game.hard_drop() == 18
    assert game.active.y == 18
    assert not game.move_down_one()


def test_rotation_rejected_off_board():
    game = make_game(PieceKind.I)
    # Vertical I would reach row -1 at the spawn position
    assert not game.rotate(clockwise=True)
    assert not game.rotate(clockwise=False)
    assert game.active.piece.rotation == 0


def test_rotation_rejected_on_overlap():
    game = make_game(PieceKind.T)
    game.active.y = 5
    # Clockwise T adds a cell at local (1, 2)
    game.board.grid[7, 4] = int(PieceKind.Z)
    assert not game.rotate(clockwise=True)
    assert game.active.piece.rotation == 0
    game.board.grid[7, 4] = 0
    assert game.rotate(clockwise=True)
    assert game.active.piece.rotation == 3


def test_tick_accumulates_fall_interval():
    game = make_game(PieceKind.T)
    game.tick(250)
    assert game.active.y == 0
    game.tick(250)
    assert game.active.y == 1
    assert game.tick(1500) == 3
    assert game.active.y == 4
    assert game.fall_accumulator_ms == 0


def test_large_tick_does_not_sink_through_floor():
    game = make_game(PieceKind.T)
    game.active.y = 17
    game.tick(5000)
    assert game.active.y == 18
    assert game.board.can_fit(game.active.x, game.active.y, game.active.shape())


def test_resolve_ignores_floating_piece():
    game = make_game(PieceKind.T)
    assert game.resolve_lock_and_clear() == 0
    assert not game.board.grid.any()


def test_lock_commits_piece_and_spawns_next():
    game = make_game(PieceKind.T)
    queued = game.next_kind
    game.hard_drop()
    assert game.resolve_lock_and_clear() == 0
    code = int(PieceKind.T)
    assert list(game.board.grid[19, 3:6]) == [code, code, code]
    assert game.board.grid[18, 4] == code
    assert game.active.kind == queued
    assert game.generator.index == 3


def test_line_clear_scores_ten_per_line():
    # Row 19 is full except the two columns the O piece lands in
    game = make_game(PieceKind.O)
    game.board.grid[19, :] = int(PieceKind.J)
    game.board.grid[19, 4:6] = 0
    game.hard_drop()
    assert game.active.y == 18
    assert game.resolve_lock_and_clear() == 1
    assert game.lines_cleared == 1
    assert game.score == 10
    code = int(PieceKind.O)
    assert list(np.flatnonzero(game.board.grid[19])) == [4, 5]
    assert (game.board.grid[19, 4:6] == code).all()
    assert game.board.row_is_empty(0)
    assert game.run_state is RunState.PLAYING
    assert game.can_hold


def test_hold_promotes_next_then_locks_out():
    game = make_game()
    first = game.active.kind
    queued = game.next_kind
    game.hold()
    assert game.held_kind == first
    assert game.active.kind == queued
    assert game.next_kind == game.generator.kinds[2]
    assert not game.can_hold

    before = (game.active.kind, game.next_kind, game.held_kind)
    game.hold()
    assert (game.active.kind, game.next_kind, game.held_kind) == before


def test_hold_swaps_after_lock():
    game = make_game()
    first = game.active.kind
    game.hold()
    game.hard_drop()
    game.resolve_lock_and_clear()
    assert game.can_hold
    current = game.active.kind
    queued = game.next_kind
    game.hold()
    assert game.held_kind == current
    assert game.active.kind == first
    assert game.next_kind == queued
    assert (game.active.x, game.active.y) == (3, -1 if first == PieceKind.I else 0)


def test_top_row_occupied_is_lost():
    game = make_game(PieceKind.T)
    game.board.commit(-1, 0, shape_of(PieceKind.O, 0), int(PieceKind.O))
    assert game.check_loss()
    assert game.run_state is RunState.LOST

    state = (game.active.x, game.active.y, game.active.piece, game.held_kind, game.can_hold)
    for command in (Command.MOVE_LEFT, Command.MOVE_RIGHT, Command.ROTATE_CW,
                    Command.ROTATE_CCW, Command.SOFT_DROP, Command.HARD_DROP, Command.HOLD):
        game.apply_command(command)
    game.tick(5000)
    assert (game.active.x, game.active.y, game.active.piece, game.held_kind, game.can_hold) == state
    assert not game.quit_requested

    game.apply_command(Command.QUIT)
    assert game.quit_requested


def test_lock_into_top_row_loses():
    game = make_game(PieceKind.O)
    # Stack up to row 2, never a full row
    game.board.grid[2:, :9] = int(PieceKind.S)
    game.resolve_lock_and_clear()
    assert game.game_over
    assert game.board.grid[0, 4] == int(PieceKind.O)


def test_rows_are_cleared_before_loss_check():
    game = make_game(PieceKind.O)
    game.board.grid[0:2, :] = int(PieceKind.L)
    game.board.grid[0:2, 4:6] = 0
    game.board.grid[2:, 4] = int(PieceKind.L)
    assert game.resolve_lock_and_clear() == 2
    assert game.run_state is RunState.PLAYING
    assert game.score == 20
    assert game.board.row_is_empty(0) and game.board.row_is_empty(1)


def test_blocked_spawn_is_lost():
    game = make_game(PieceKind.T)
    game.board.grid[0:2, 3:7] = int(PieceKind.Z)
    game.hold()
    assert game.game_over


def test_quit_while_playing():
    game = make_game()
    game.apply_command(Command.QUIT)
    assert game.quit_requested
    assert game.run_state is RunState.LOST


def test_update_applies_commands_before_lock():
    game = make_game(PieceKind.O)
    game.hard_drop()
    game.update(commands=[Command.MOVE_LEFT])
    code = int(PieceKind.O)
    assert (game.board.grid[18:, 3:5] == code).all()
    assert not game.board.grid[18:, 5].any()


def test_update_runs_gravity_on_tick_cadence():
    game = make_game(PieceKind.T)
    for _ in range(9):
        game.update()
    assert game.active.y == 0
    game.update()
    assert game.active.y == 1


def test_none_command_changes_nothing():
    game = make_game(PieceKind.T)
    game.apply_command(Command.NONE)
    assert (game.active.x, game.active.y) == (3, 0)


def test_snapshot_is_read_only_copy():
    game = make_game(PieceKind.T)
    snap = game.snapshot()
    assert snap.active_kind == PieceKind.T
    assert (snap.active_x, snap.active_y, snap.active_rotation) == (3, 0, 0)
    assert snap.next_kind == game.next_kind
    assert snap.held_kind is None
    with pytest.raises(ValueError):
        snap.cells[0, 0] = 1
    game.board.grid[19, 0] = 1
    assert snap.cells[19, 0] == 0


def test_get_state_overlays_active_piece():
    game = make_game(PieceKind.T)
    state = game.get_state()
    assert state[0, 4] == -int(PieceKind.T)
    assert (state < 0).sum() == 4
    assert not game.board.grid.any()


def test_ghost_y_is_landing_row():
    game = make_game(PieceKind.T)
    assert game.ghost_y() == 18
    game.board.grid[10, 4] = 1
    assert game.ghost_y() == 8


def test_reset_clears_everything():
    game = make_game(PieceKind.O)
    game.board.grid[19, :] = 1
    game.score = 30
    game.apply_command(Command.QUIT)
    game.reset(seed=5)
    assert game.is_playing
    assert not game.quit_requested
    assert game.score == 0
    assert not game.board.grid.any()


def test_reset_with_seed_is_deterministic():
    a = TetrisGame()
    b = TetrisGame()
    a.reset(seed=11)
    b.reset(seed=11)
    assert (a.active.kind, a.next_kind) == (b.active.kind, b.next_kind)


def test_scoring_rules():
    rules = ScoringRules()
    assert rules.score_for_lines(0) == 0
    assert rules.score_for_lines(4) == 40
    assert ScoringRules(line_clear_points=100).score_for_lines(2) == 200


@pytest.mark.parametrize("config", [GameConfig(fall_interval_ms=0), GameConfig(tick_ms=0)])
def test_non_positive_timing_is_rejected(config):
    with pytest.raises(ValueError):
        TetrisGame(config)
