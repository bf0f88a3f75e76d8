import argparse
import logging
import random as rd

import pygame
from pygame.locals import *
from Game2048 import Intent, State, Session, Spawner, SIZE

LOGGER = logging.getLogger(__name__)

BASE_UNIT = 24
TILE_DIM = 4.875
FPS = 30
DEBUG = False

COLOURS = {
    'bg_colour': (230, 220, 205),
    'title_colour': (238, 201, 0),
    'score_colour': (165, 150, 127),
    'board_colour': (105, 95, 80),
    'overlay_colour': (128, 128, 128),
    'black': (0, 0, 0),
    'white': (255, 255, 255),
}

# Tile backgrounds for 0 (empty) and 2 ** 1 up to 2 ** 16
PALETTE = [
    (224, 224, 224), (255, 229, 204),
    (255, 153, 153), (204, 255, 209),
    (204, 255, 255), (204, 229, 255),
    (204, 255, 153), (204, 153, 255),
    (255, 153, 255), (255, 153, 51),
    (255, 255, 51), (255, 178, 102),
    (178, 255, 102), (102, 255, 178),
    (102, 178, 255), (102, 102, 255),
    (255, 0, 0),
]
UNKNOWN_COLOUR = COLOURS['white']

KEY_INTENTS = {
    K_UP: Intent.UP, K_w: Intent.UP, K_k: Intent.UP,
    K_RIGHT: Intent.RIGHT, K_d: Intent.RIGHT, K_l: Intent.RIGHT,
    K_DOWN: Intent.DOWN, K_s: Intent.DOWN, K_j: Intent.DOWN,
    K_LEFT: Intent.LEFT, K_a: Intent.LEFT, K_h: Intent.LEFT,
    K_r: Intent.RESTART,
    K_ESCAPE: Intent.QUIT, K_q: Intent.QUIT,
}


def key_to_intent(key):
    """
    The intent bound to a pygame key code, None for unbound keys
    """
    return KEY_INTENTS.get(key)


def tile_colour(value):
    """
    Background colour of a tile, any value outside the palette is drawn white
    """
    exponent = value.bit_length() - 1
    if value == 0:
        return PALETTE[0]
    if value == 1 << exponent and 0 < exponent < len(PALETTE):
        return PALETTE[exponent]
    return UNKNOWN_COLOUR


def tile_coordinates(index):
    """
    Window (x, y) of the top left corner of the tile at a row-major board index
    """
    row, col = divmod(index, SIZE)
    x = (1.5 + col * (TILE_DIM + 0.5)) * BASE_UNIT
    y = (9.5 + row * (TILE_DIM + 0.5)) * BASE_UNIT
    return int(x), int(y)


class Board():

    def __init__(self, session):
        if not pygame.font:
            raise ImportError("Fonts not imported")

        window_size = (BASE_UNIT * 24, BASE_UNIT * 32)
        self.window = pygame.display.set_mode(window_size)
        pygame.display.set_caption("2048")

        self.title_font = pygame.font.Font(None, 50)
        self.score_font = pygame.font.Font(None, 40)
        self.tile_font = pygame.font.Font(None, 60)
        self.clock = pygame.time.Clock()

        self.session = session
        self.snapshot = session.snapshot()
        self.running = True

    def keyboard_event_handler(self, event):
        intent = key_to_intent(event.key)
        if intent is None:
            return

        self.snapshot = self.session.apply(intent)
        if DEBUG:
            LOGGER.debug("%s -> %s\n%s", intent.name, self.snapshot.state.name, self.session.grid)

        if self.snapshot.state is State.TERMINATED:
            self.running = False

    def _blit_centred(self, font, text, colour, rect):
        surface = font.render(text, True, colour)
        self.window.blit(surface, surface.get_rect(center=rect.center))

    def draw_header(self):
        title_rect = pygame.Rect(BASE_UNIT, BASE_UNIT, 6 * BASE_UNIT, 6 * BASE_UNIT)
        pygame.draw.rect(self.window, COLOURS['title_colour'], title_rect)
        self._blit_centred(self.title_font, '2048', COLOURS['white'], title_rect)

        score_rect = pygame.Rect(9 * BASE_UNIT, BASE_UNIT, 14 * BASE_UNIT, 6 * BASE_UNIT)
        pygame.draw.rect(self.window, COLOURS['score_colour'], score_rect)
        self._blit_centred(self.score_font, f"SCORE: {self.snapshot.score}",
                           COLOURS['white'], score_rect)

    def draw_board(self):
        board_rect = pygame.Rect(BASE_UNIT, 9 * BASE_UNIT, 22 * BASE_UNIT, 22 * BASE_UNIT)
        pygame.draw.rect(self.window, COLOURS['board_colour'], board_rect)

        tile_size = int(TILE_DIM * BASE_UNIT)
        for index, value in enumerate(self.snapshot.cells):
            tile_rect = pygame.Rect(tile_coordinates(index), (tile_size, tile_size))
            pygame.draw.rect(self.window, tile_colour(value), tile_rect)
            if value != 0:
                self._blit_centred(self.tile_font, str(value), COLOURS['black'], tile_rect)

    def draw_menu(self):
        menu_rect = pygame.Rect(5 * BASE_UNIT, 13 * BASE_UNIT, 14 * BASE_UNIT, 8 * BASE_UNIT)
        pygame.draw.rect(self.window, COLOURS['overlay_colour'], menu_rect)
        for line_no, text in enumerate(("GAME OVER!", "restart: r", "quit: ESC|q")):
            line_rect = pygame.Rect(menu_rect.x, menu_rect.y + (line_no * 2 + 1) * BASE_UNIT,
                                    menu_rect.width, 2 * BASE_UNIT)
            self._blit_centred(self.score_font, text, COLOURS['white'], line_rect)

    def draw(self):
        self.window.fill(COLOURS['bg_colour'])
        self.draw_header()
        self.draw_board()
        if self.snapshot.state is State.GAME_OVER:
            self.draw_menu()
        pygame.display.flip()

    def run_GUI(self):
        while self.running:
            for event in pygame.event.get():
                if event.type == QUIT:
                    self.snapshot = self.session.apply(Intent.QUIT)
                    self.running = False
                elif event.type == KEYDOWN:
                    self.keyboard_event_handler(event)

            if self.running:
                self.draw()
            self.clock.tick(FPS)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Play 2048 in a window')
    parser.add_argument('--seed', type=int, default=None, help='Seed for the tile spawner')
    parser.add_argument('--debug', action='store_true', help='Log every intent and the board')
    return parser.parse_args(argv)


def main(argv=None):
    global DEBUG

    args = parse_args(argv)
    DEBUG = DEBUG or args.debug
    logging.basicConfig(level=logging.DEBUG if DEBUG else logging.WARNING)

    pygame.init()
    try:
        game_gui = Board(Session(Spawner(rd.Random(args.seed))))
        game_gui.run_GUI()
    finally:
        pygame.quit()


if __name__ == '__main__':
    main()
