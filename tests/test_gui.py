import random as rd

import pygame
import pytest

import Game2048GUI
import SnakeGUI
from Game2048 import Intent, Session, Spawner, State
from Game2048GUI import (PALETTE, UNKNOWN_COLOUR, Board, key_to_intent,
                         tile_colour, tile_coordinates)
from Snake import SnakeGame


@pytest.fixture
def headless(monkeypatch):
    monkeypatch.setenv('SDL_VIDEODRIVER', 'dummy')
    pygame.init()
    yield
    pygame.quit()


def key_event(key):
    return pygame.event.Event(pygame.KEYDOWN, key=key)


def test_key_bindings():
    assert key_to_intent(pygame.K_UP) is Intent.UP
    assert key_to_intent(pygame.K_k) is Intent.UP
    assert key_to_intent(pygame.K_a) is Intent.LEFT
    assert key_to_intent(pygame.K_l) is Intent.RIGHT
    assert key_to_intent(pygame.K_j) is Intent.DOWN
    assert key_to_intent(pygame.K_r) is Intent.RESTART
    assert key_to_intent(pygame.K_ESCAPE) is Intent.QUIT
    assert key_to_intent(pygame.K_q) is Intent.QUIT
    assert key_to_intent(pygame.K_SPACE) is None


def test_tile_colours():
    assert tile_colour(0) == PALETTE[0]
    assert tile_colour(2) == PALETTE[1]
    assert tile_colour(2048) == PALETTE[11]
    assert tile_colour(65536) == PALETTE[16]
    assert tile_colour(131072) == UNKNOWN_COLOUR
    assert tile_colour(6) == UNKNOWN_COLOUR


def test_tile_coordinates():
    assert tile_coordinates(0) == (36, 228)
    assert tile_coordinates(15) == (423, 615)


def test_snake_window_fits_the_map():
    game = SnakeGame(rng=rd.Random(0))
    assert SnakeGUI.window_size(game) == (55 * 12, 29 * 12)


def test_board_applies_keys(headless):
    board = Board(Session(Spawner(rd.Random(0))))
    board.session.grid.game_board = [0, 0, 0, 2] + [0] * 12
    board.keyboard_event_handler(key_event(pygame.K_LEFT))
    assert board.snapshot.cells[0] == 2
    board.draw()

    board.keyboard_event_handler(key_event(pygame.K_SPACE))
    assert board.running

    board.keyboard_event_handler(key_event(pygame.K_q))
    assert not board.running
    assert board.snapshot.state is State.TERMINATED


def test_board_draws_game_over(headless, monkeypatch):
    monkeypatch.setattr(Game2048GUI, 'DEBUG', True)
    board = Board(Session(Spawner(rd.Random(0))))
    board.session.state = State.GAME_OVER
    board.snapshot = board.session.snapshot()
    board.draw()
    board.keyboard_event_handler(key_event(pygame.K_r))
    assert board.snapshot.state is State.PLAYING


def test_field_ticks_with_last_direction(headless):
    field = SnakeGUI.Field(SnakeGame(rng=rd.Random(0)))
    row, col = field.game.head()
    field.keyboard_event_handler(key_event(pygame.K_UP))
    field.keyboard_event_handler(key_event(pygame.K_LEFT))
    assert field.snapshot.state is State.PLAYING
    field.tick()
    assert field.game.head() == (row, col - 1)
    assert field.pending is None
    field.draw()

    field.keyboard_event_handler(key_event(pygame.K_ESCAPE))
    assert not field.running
