import argparse
import logging
import random as rd

import pygame
from pygame.locals import *
from Game2048 import Intent, State
from Game2048GUI import key_to_intent
import Snake

LOGGER = logging.getLogger(__name__)

BASE_UNIT = 12
BORDER = 2
DEBUG = False

COLOURS = {
    'border_colour': (255, 255, 204),
    'overlay_colour': (128, 128, 128),
    'black': (0, 0, 0),
    'white': (255, 255, 255),
}

# Cell colours indexed by map object
OBJECT_COLOURS = {
    Snake.SPACE: (224, 224, 224),
    Snake.BARRIER: (0, 0, 0),
    Snake.HEAD: (153, 0, 0),
    Snake.BODY: (255, 0, 0),
    Snake.FOOD: (0, 153, 0),
}


def window_size(game):
    """
    Window (width, height) fitting the map, a border around it and a score line
    """
    width = (game.cols + 2 * BORDER) * BASE_UNIT
    height = (game.rows + 2 * BORDER + 2) * BASE_UNIT
    return width, height


class Field():

    def __init__(self, game):
        if not pygame.font:
            raise ImportError("Fonts not imported")

        self.window = pygame.display.set_mode(window_size(game))
        pygame.display.set_caption("Snake")
        self.font = pygame.font.Font(None, 2 * BASE_UNIT)
        self.clock = pygame.time.Clock()

        self.game = game
        self.snapshot = game.snapshot()
        self.pending = None
        self.running = True

    def keyboard_event_handler(self, event):
        intent = key_to_intent(event.key)
        if intent is None:
            return

        if intent in (Intent.RESTART, Intent.QUIT):
            self.apply(intent)
        else:
            # Only the last direction pressed before a tick counts
            self.pending = intent

    def apply(self, intent):
        self.snapshot = self.game.apply(intent)
        if DEBUG:
            LOGGER.debug("tick %s -> %s, score %d", intent, self.snapshot.state.name,
                         self.snapshot.score)
        if self.snapshot.state is State.TERMINATED:
            self.running = False

    def tick(self):
        intent, self.pending = self.pending, None
        self.apply(intent)

    def draw(self):
        self.window.fill(COLOURS['border_colour'])

        score_rect = pygame.Rect(0, 0, self.window.get_width(), 2 * BASE_UNIT)
        score = self.font.render(f"SCORE: {self.snapshot.score}", True, COLOURS['black'])
        self.window.blit(score, score.get_rect(midleft=(BASE_UNIT, score_rect.centery)))

        top = (2 + BORDER) * BASE_UNIT
        for index, obj in enumerate(self.snapshot.cells):
            row, col = divmod(index, self.game.cols)
            cell = pygame.Rect((col + BORDER) * BASE_UNIT, top + row * BASE_UNIT,
                               BASE_UNIT, BASE_UNIT)
            pygame.draw.rect(self.window, OBJECT_COLOURS[obj], cell)

        if self.snapshot.state is State.GAME_OVER:
            self.draw_menu()
        pygame.display.flip()

    def draw_menu(self):
        menu_rect = pygame.Rect(0, 0, 16 * BASE_UNIT, 8 * BASE_UNIT)
        menu_rect.center = self.window.get_rect().center
        pygame.draw.rect(self.window, COLOURS['overlay_colour'], menu_rect)
        for line_no, text in enumerate(("GAME OVER!", "restart: r", "quit: q")):
            line = self.font.render(text, True, COLOURS['white'])
            centre = (menu_rect.centerx, menu_rect.y + (line_no * 2 + 2) * BASE_UNIT)
            self.window.blit(line, line.get_rect(center=centre))

    def run_GUI(self):
        last_tick = pygame.time.get_ticks()
        self.draw()

        while self.running:
            for event in pygame.event.get():
                if event.type == QUIT:
                    self.apply(Intent.QUIT)
                elif event.type == KEYDOWN:
                    self.keyboard_event_handler(event)

            now = pygame.time.get_ticks()
            if self.running and now - last_tick >= self.game.speed():
                self.tick()
                last_tick = now

            if self.running:
                self.draw()
            self.clock.tick(100)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Play snake in a window')
    parser.add_argument('--seed', type=int, default=None, help='Seed for food and the first direction')
    parser.add_argument('--map', dest='map_path', default=None,
                        help="Text file of '.' spaces and '*' walls")
    parser.add_argument('--debug', action='store_true', help='Log every tick')
    return parser.parse_args(argv)


def main(argv=None):
    global DEBUG

    args = parse_args(argv)
    DEBUG = DEBUG or args.debug
    logging.basicConfig(level=logging.DEBUG if DEBUG else logging.WARNING)

    if args.map_path is None:
        game_map, cols = Snake.read_map(Snake.DEFAULT_MAP)
    else:
        with open(args.map_path) as map_file:
            game_map, cols = Snake.read_map(map_file.read())

    pygame.init()
    try:
        field = Field(Snake.SnakeGame(game_map, cols, rng=rd.Random(args.seed)))
        field.run_GUI()
    finally:
        pygame.quit()


if __name__ == '__main__':
    main()
