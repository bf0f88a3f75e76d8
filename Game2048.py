"""
Core of the 2048 game: board, directional transforms, merge engine, spawner,
terminal detector and the session state machine driven by the front ends.
"""

import argparse
import logging
import random as rd
from collections import namedtuple
from enum import Enum

LOGGER = logging.getLogger(__name__)

SIZE = 4
CELLS = SIZE * SIZE


class Intent(Enum):
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'
    RESTART = 'restart'
    QUIT = 'quit'


class State(Enum):
    PLAYING = 'playing'
    GAME_OVER = 'game_over'
    TERMINATED = 'terminated'


Snapshot = namedtuple('Snapshot', ['cells', 'score', 'state'])


class Grid():

    def __init__(self, game_board=None):
        """ Creates a 4 by 4 board, empty unless a row-major list of 16 values is given.
        The score starts at 0.
        """
        if game_board is None:
            self.game_board = [0] * CELLS
        else:
            assert len(game_board) == CELLS
            self.game_board = list(game_board)

        self.score = 0

    def __str__(self):
        """
        Prints the gameboard row by row with _ as empty tiles
        """
        board_string = ''
        col = 0
        for tile in self.game_board:
            value = '_' if tile == 0 else tile
            board_string += f"{value:^6}"
            col += 1
            if col % SIZE == 0:
                board_string += '\n'
        return board_string

    def _to_index(self, coords):
        """
        Converts (row, col) style coordinates to a single list index
        """
        row, col = coords
        assert 0 <= row < SIZE and 0 <= col < SIZE, f"Cell {coords} is off the board."
        return row * SIZE + col

    def __getitem__(self, coords):
        """
        Gets a value on the gameboard using (row, col) style coordinates
        """
        return self.game_board[self._to_index(coords)]

    def __setitem__(self, coords, value):
        """
        Sets a value on the gameboard using (row, col) style coordinates
        """
        self.game_board[self._to_index(coords)] = value

    def get(self, row, col):
        return self[row, col]

    def set(self, row, col, value):
        self[row, col] = value

    def empty_cells(self):
        return [i for i, value in enumerate(self.game_board) if value == 0]

    def reset(self):
        self.game_board = [0] * CELLS
        self.score = 0

    def snapshot_cells(self):
        return tuple(self.game_board)


class Transform():
    """
    Maps canonical (x, y) coordinates onto the physical (row, col) of the board.

    x picks one of the four parallel lines and y a position along it, with y = 0
    always being the edge tiles slide towards. A transform is the identity,
    optionally reflected on both axes, optionally with the axes swapped:

    left:  (x, y) -> (x, y)
    right: (x, y) -> (3 - x, 3 - y)
    up:    (x, y) -> (y, x)
    down:  (x, y) -> (3 - y, 3 - x)
    """

    def __init__(self, name, swap_axes=False, reflect=False):
        self.name = name
        self.swap_axes = swap_axes
        self.reflect = reflect

    def __repr__(self):
        return f"Transform({self.name!r})"

    def to_physical(self, x, y):
        if self.reflect:
            x, y = SIZE - 1 - x, SIZE - 1 - y
        return (y, x) if self.swap_axes else (x, y)

    def to_canonical(self, row, col):
        x, y = (col, row) if self.swap_axes else (row, col)
        if self.reflect:
            x, y = SIZE - 1 - x, SIZE - 1 - y
        return x, y

    def get(self, grid, x, y):
        return grid[self.to_physical(x, y)]

    def set(self, grid, x, y, value):
        grid[self.to_physical(x, y)] = value


LEFT = Transform('left')
RIGHT = Transform('right', reflect=True)
UP = Transform('up', swap_axes=True)
DOWN = Transform('down', swap_axes=True, reflect=True)

TRANSFORMS = {
    Intent.UP: UP,
    Intent.DOWN: DOWN,
    Intent.LEFT: LEFT,
    Intent.RIGHT: RIGHT,
}


def merge(grid, transform):
    """
    Slides and merges every line of the grid towards y = 0 of the transform.

    Lines are scanned from the edge outwards. prev_non_zero_y tracks the nearest
    tile before the current one that a tile may still merge into; after a merge
    it is pushed past the merged slot so a tile can only merge once per move.
    Each tile is then slid edgewards through any run of empty cells.

    Returns whether any tile moved or merged. The score on the grid is increased
    by the value of every tile created by a merge.
    """
    moved = False

    for x in range(SIZE):
        prev_non_zero_y = 0

        for y in range(1, SIZE):
            value = transform.get(grid, x, y)

            if value != 0:
                if (prev_non_zero_y < y and
                        transform.get(grid, x, prev_non_zero_y) == value):
                    merged_value = value * 2
                    grid.score += merged_value
                    transform.set(grid, x, prev_non_zero_y, merged_value)
                    value = 0
                    transform.set(grid, x, y, value)
                    prev_non_zero_y = y + 1
                    moved = True
                else:
                    prev_non_zero_y = y

            # Gravity: close the gap between this tile and the edge
            k = y
            while k > 0:
                if value == 0 or transform.get(grid, x, k - 1) != 0:
                    break
                moved = True
                transform.set(grid, x, k - 1, value)
                transform.set(grid, x, k, 0)
                k -= 1
                prev_non_zero_y = k

    return moved


def is_terminal(grid):
    """
    True when no two horizontally or vertically adjacent cells are equal.
    Only meaningful for a full board, i.e. after the Spawner reports it full.
    """
    for row in range(SIZE):
        for col in range(1, SIZE):
            if grid[row, col - 1] == grid[row, col]:
                return False

    for col in range(SIZE):
        for row in range(1, SIZE):
            if grid[row - 1, col] == grid[row, col]:
                return False

    return True


class Spawner():
    """
    Places new tiles on the board. Owns the random source of the game so the
    rest of the core stays deterministic.
    """

    # A random byte at or below the threshold spawns a 2, anything above a 4
    THRESHOLD = 222
    CROWDED_THRESHOLD = 127
    CROWDED = 4

    def __init__(self, rng=None):
        self.rng = rng if rng is not None else rd.Random()

    def seed_tiles(self, grid):
        """
        Puts two 2s at two distinct random cells of an empty board.
        """
        assert not any(grid.game_board)

        first = self.rng.randrange(CELLS)
        second = self.rng.randrange(CELLS)
        while second == first:
            second = self.rng.randrange(CELLS)

        grid.game_board[first] = 2
        grid.game_board[second] = 2
        LOGGER.debug("Seeded tiles at %d and %d", first, second)

    def spawn(self, grid):
        """
        Spawns either a 2 or a 4 in one empty cell, 4s being likelier when few
        cells are left. Returns True if the board is full afterwards, i.e. there
        was no empty cell or this spawn took the last one.
        """
        holes = grid.empty_cells()
        if not holes:
            return True

        threshold = self.CROWDED_THRESHOLD if len(holes) <= self.CROWDED else self.THRESHOLD
        index = self.rng.choice(holes)
        value = 2 if self.rng.randrange(256) <= threshold else 4
        grid.game_board[index] = value
        LOGGER.debug("Spawned %d at %d, %d empty cells before", value, index, len(holes))

        return len(holes) - 1 == 0


class Session():
    """
    The round state machine between the front end and the core.

    Directional intents are ignored once the round is over, restart starts a
    fresh round from any state and quit terminates the session for good.
    """

    def __init__(self, spawner=None):
        self.spawner = spawner if spawner is not None else Spawner()
        self.grid = Grid()
        self.state = State.PLAYING
        self.reset()

    def reset(self):
        self.grid.reset()
        self.spawner.seed_tiles(self.grid)
        self.state = State.PLAYING

    @property
    def score(self):
        return self.grid.score

    def snapshot(self):
        return Snapshot(self.grid.snapshot_cells(), self.grid.score, self.state)

    def apply(self, intent):
        """
        Applies one intent and returns the resulting snapshot.
        """
        intent = Intent(intent)

        if self.state is State.TERMINATED:
            return self.snapshot()

        if intent is Intent.QUIT:
            LOGGER.debug("Quit with score %d", self.grid.score)
            self.state = State.TERMINATED
        elif intent is Intent.RESTART:
            LOGGER.debug("Restarting, previous score %d", self.grid.score)
            self.reset()
        elif self.state is State.PLAYING:
            self._move(TRANSFORMS[intent])

        return self.snapshot()

    def _move(self, transform):
        if not merge(self.grid, transform):
            return

        boardFull = self.spawner.spawn(self.grid)
        if boardFull and is_terminal(self.grid):
            LOGGER.debug("No moves left, final score %d", self.grid.score)
            self.state = State.GAME_OVER


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Play 2048 in the console')
    parser.add_argument('--seed', type=int, default=None, help='Seed for the tile spawner')
    parser.add_argument('--debug', action='store_true', help='Log moves and spawns')
    return parser.parse_args(argv)


def main(argv=None):

    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    move_dict = {'w': Intent.UP, 'k': Intent.UP,
                 'd': Intent.RIGHT, 'l': Intent.RIGHT,
                 's': Intent.DOWN, 'j': Intent.DOWN,
                 'a': Intent.LEFT, 'h': Intent.LEFT,
                 'r': Intent.RESTART,
                 'q': Intent.QUIT, 'quit': Intent.QUIT,
                 }

    def get_move():
        move = None
        while move is None:
            try:
                move = move_dict[input().lower().strip()]
            except KeyError:
                print("Invalid move.")
        return move

    print("""To play, use the 'wasd' (or 'hjkl') keys to input moves.
To restart, type 'r'. To quit, type 'quit' or 'q'.
Follow all inputs with a newline press.
    """)

    session = Session(Spawner(rd.Random(args.seed)))
    print(session.grid)

    while session.state is not State.TERMINATED:
        previous = session.snapshot()
        snapshot = session.apply(get_move())
        if snapshot.state is State.TERMINATED:
            break
        if snapshot != previous:
            print(session.grid)
            print(f"Score: {snapshot.score}\n")
        if snapshot.state is State.GAME_OVER and previous.state is State.PLAYING:
            print(f"    GAME OVER!\n\nFinal Score: {snapshot.score}\n\nrestart: r   quit: q")

    print('Thanks for playing.')


if __name__ == '__main__':
    main()
