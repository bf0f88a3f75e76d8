import random as rd

import pytest

from Game2048 import CELLS, Intent, Session, Spawner, State
from helpers import StubRandom

# Left leaves rows 1-3 alone and slides row 0 to [2, 4, 8, 0]; filling the
# last hole with a 4 leaves no equal neighbours anywhere.
ONE_MOVE_FROM_THE_END = [
    0, 2, 4, 8,
    4, 8, 16, 2,
    2, 4, 8, 16,
    4, 8, 16, 32,
]


def seeded_session(seed=0):
    return Session(Spawner(rd.Random(seed)))


def assert_fresh_round(snapshot):
    tiles = [value for value in snapshot.cells if value]
    assert tiles == [2, 2]
    assert snapshot.score == 0
    assert snapshot.state is State.PLAYING


def game_over_session():
    session = seeded_session()
    session.grid.game_board = list(ONE_MOVE_FROM_THE_END)
    session.spawner.rng = StubRandom(255)
    snapshot = session.apply(Intent.LEFT)
    assert snapshot.state is State.GAME_OVER
    return session


def test_new_session_has_two_seed_tiles():
    assert_fresh_round(seeded_session().snapshot())


def test_snapshot_is_row_major():
    session = seeded_session()
    session.grid[2, 3] = 64
    assert session.snapshot().cells[11] == 64
    assert len(session.snapshot().cells) == CELLS


def test_move_without_change_does_not_spawn():
    session = seeded_session()
    session.grid.game_board = [2, 4, 2, 4] + [0] * 12
    before = session.snapshot()
    after = session.apply(Intent.LEFT)
    assert after == before
    assert after.state is State.PLAYING


def test_move_merges_and_spawns_one_tile():
    session = seeded_session()
    session.grid.game_board = [2, 2, 2, 0] + [0] * 12
    snapshot = session.apply(Intent.LEFT)
    assert snapshot.cells[:2] == (4, 2)
    assert snapshot.score == 4
    assert len([value for value in snapshot.cells if value]) == 3
    assert snapshot.state is State.PLAYING


def test_accepts_intent_values():
    session = seeded_session()
    session.grid.game_board = [0, 0, 0, 2] + [0] * 12
    snapshot = session.apply('left')
    assert snapshot.cells[0] == 2


def test_unknown_intent_fails_fast():
    with pytest.raises(ValueError):
        seeded_session().apply('sideways')


def test_filling_the_board_without_moves_ends_the_round():
    session = game_over_session()
    assert session.grid.game_board[:4] == [2, 4, 8, 4]
    assert session.state is State.GAME_OVER


def test_full_board_with_moves_keeps_playing():
    session = seeded_session()
    board = list(ONE_MOVE_FROM_THE_END)
    board[12] = 2
    session.grid.game_board = board
    session.spawner.rng = StubRandom(255)
    snapshot = session.apply(Intent.LEFT)
    assert 0 not in snapshot.cells
    assert snapshot.state is State.PLAYING


def test_directions_are_ignored_after_game_over():
    session = game_over_session()
    before = session.snapshot()
    for intent in (Intent.UP, Intent.DOWN, Intent.LEFT, Intent.RIGHT):
        assert session.apply(intent) == before


def test_restart_after_game_over():
    session = game_over_session()
    session.spawner.rng = rd.Random(1)
    assert_fresh_round(session.apply(Intent.RESTART))


def test_restart_while_playing():
    session = seeded_session()
    session.grid.game_board = [2, 2, 4, 4] + [0] * 12
    session.apply(Intent.LEFT)
    assert session.score == 12
    assert_fresh_round(session.apply(Intent.RESTART))


@pytest.mark.parametrize('playing', [True, False])
def test_quit_keeps_the_last_snapshot(playing):
    session = seeded_session() if playing else game_over_session()
    before = session.snapshot()
    after = session.apply(Intent.QUIT)
    assert after.state is State.TERMINATED
    assert after.cells == before.cells
    assert after.score == before.score


def test_nothing_happens_after_quit():
    session = seeded_session()
    quit_snapshot = session.apply(Intent.QUIT)
    for intent in Intent:
        assert session.apply(intent) == quit_snapshot


def test_random_play_keeps_tiles_powers_of_two():
    session = seeded_session(7)
    moves = rd.Random(11)
    directions = [Intent.UP, Intent.DOWN, Intent.LEFT, Intent.RIGHT]
    score = 0

    for _ in range(500):
        snapshot = session.apply(moves.choice(directions))
        for value in snapshot.cells:
            assert value == 0 or (value >= 2 and value & (value - 1) == 0)
        assert snapshot.score >= score
        score = snapshot.score
        if snapshot.state is State.GAME_OVER:
            break
