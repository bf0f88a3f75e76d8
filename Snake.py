"""
Core of the snake game: a wrap-around map with walls and food, a growing snake
and the same Intent/State session machine used by the 2048 core.
"""

import logging
import random as rd
from collections import deque

from Game2048 import Intent, State, Snapshot

LOGGER = logging.getLogger(__name__)

SPACE = 0
BARRIER = 1
HEAD = 2
BODY = 3
FOOD = 4

SPACE_MARK = '.'
BARRIER_MARK = '*'
MAX_FOOD = 10

# Tick interval in milliseconds for each speed level
SPEEDS = (600, 500, 400, 300, 200, 100, 80, 50, 30, 11)

DIRECTIONS = {
    Intent.UP: (-1, 0),
    Intent.DOWN: (1, 0),
    Intent.LEFT: (0, -1),
    Intent.RIGHT: (0, 1),
}

DEFAULT_MAP = """\
**...............................................**
*.................................................*
...................................................
...................................................
...................................................
...................................................
...................................................
...................................................
*..................................................
*.................................................*
*.................................................*
*.................................................*
*.................................................*
*.................................................*
..................................................*
...................................................
...................................................
...................................................
...................................................
...................................................
...................................................
*.................................................*
**...............................................**
"""


def read_map(text):
    """
    Parses a map of '.' (space) and '*' (wall) marks.
    Returns the row-major list of cells and the number of columns.
    """
    game_map = []
    cols = 0

    for line_no, line in enumerate(text.splitlines(), 1):
        if not line:
            continue
        if cols != 0 and len(line) != cols:
            raise ValueError(f"Line {line_no} has {len(line)} columns, expected {cols}")
        cols = len(line)

        for mark in line:
            if mark == SPACE_MARK:
                game_map.append(SPACE)
            elif mark == BARRIER_MARK:
                game_map.append(BARRIER)
            else:
                raise ValueError(f"Unknown mark {mark!r} on line {line_no}")

    if not game_map:
        raise ValueError("The map is empty")

    return game_map, cols


class SnakeGame():

    def __init__(self, game_map=None, cols=None, rng=None):
        """ Sets up a round on the given map, defaults to the built-in one.
        The snake starts as a lone head in the middle cell of the map.
        """
        if game_map is None:
            game_map, cols = read_map(DEFAULT_MAP)

        self.cols = cols
        self.rows = len(game_map) // cols
        self.game_map = list(game_map)
        self.init_pos = len(self.game_map) // 2
        assert self.game_map[self.init_pos] != BARRIER, "The middle of the map must be free."

        self.score_to_speed = max(1, len(self.game_map) // 3 // len(SPEEDS))
        self.rng = rng if rng is not None else rd.Random()
        self.snake = deque()
        self.reset()

    def reset(self):
        for i, obj in enumerate(self.game_map):
            if obj != BARRIER:
                self.game_map[i] = SPACE
        self.snake.clear()
        self.snake.append(self.init_pos)
        self.game_map[self.init_pos] = HEAD
        self.score = 0
        self.food = 0
        self.direction = self.rng.choice(list(DIRECTIONS))
        self.state = State.PLAYING
        self.feed()

    def position(self, row, col):
        """
        Converts (row, col) to an index, wrapping around the edges of the map
        """
        return (row % self.rows) * self.cols + (col % self.cols)

    def head(self):
        return divmod(self.snake[0], self.cols)

    def move_to(self, row, col):
        """
        Moves the head to (row, col). Returns True if the snake hit a wall or itself.
        """
        pos = self.position(row, col)
        obj = self.game_map[pos]

        if obj in (BARRIER, BODY):
            return True

        self.snake.appendleft(pos)
        self.game_map[pos] = HEAD
        self.game_map[self.snake[1]] = BODY

        if obj == FOOD:
            self.food -= 1
            self.score += 1
        else:
            tail = self.snake.pop()
            self.game_map[tail] = SPACE
        return False

    def feed(self):
        """
        Turns random spaces into food until there are MAX_FOOD items or no spaces left
        """
        wanted = MAX_FOOD - self.food
        if wanted <= 0:
            return
        spaces = [i for i, obj in enumerate(self.game_map) if obj == SPACE]
        for i in self.rng.sample(spaces, min(wanted, len(spaces))):
            self.game_map[i] = FOOD
            self.food += 1

    def speed(self):
        """
        Milliseconds between two ticks at the current score
        """
        level = min(self.score // self.score_to_speed, len(SPEEDS) - 1)
        return SPEEDS[level]

    def snapshot(self):
        return Snapshot(tuple(self.game_map), self.score, self.state)

    def apply(self, intent=None):
        """
        Advances the game by one tick. Without an intent the snake keeps its direction.
        """
        if intent is not None:
            intent = Intent(intent)

        if self.state is State.TERMINATED:
            return self.snapshot()

        if intent is Intent.QUIT:
            self.state = State.TERMINATED
        elif intent is Intent.RESTART:
            LOGGER.debug("Restarting, previous score %d", self.score)
            self.reset()
        elif self.state is State.PLAYING:
            direction = self.direction if intent is None else intent
            row, col = self.head()
            del_row, del_col = DIRECTIONS[direction]
            collided = self.move_to(row + del_row, col + del_col)
            self.direction = direction
            self.feed()
            if collided:
                LOGGER.debug("Collision at %s, final score %d", self.head(), self.score)
                self.state = State.GAME_OVER

        return self.snapshot()
