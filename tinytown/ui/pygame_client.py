"""Pygame viewer for the generated town map.

Collects placements from the engine's ``on_place`` callback and draws
them as flat squares; decor is drawn as a smaller inset square on top.
Keys map onto engine commands: R reseeds, comma/period shrink or grow the
sample window, and the arrow keys set the move intent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pygame

if TYPE_CHECKING:
    from tinytown.simulation.engine import SimulationEngine

_BG = (20, 20, 20)
_AGENT = (230, 60, 60)
_UNKNOWN = (255, 0, 255)
_TEXT = (230, 230, 230)


class PygameRenderer:
    """Renders a SimulationEngine into a Pygame window.

    Attributes:
        engine: The engine to visualise.
        scale: Pixels per world unit.
        screen: The Pygame display surface.
    """

    def __init__(self, engine: SimulationEngine, scale: float = 0.625) -> None:
        """Initialise the renderer and capture the current map.

        Args:
            engine: The engine to render.
            scale: Pixels per world unit (a 64-unit tile at 0.625 is 40px).
        """
        self.engine = engine
        self.scale = scale
        self._placements: list[tuple[float, float, str]] = []
        engine.generation.on_place = self._record
        self._capture()

        grid = engine.grid
        self._win_w = int(grid.world_width * scale)
        self._win_h = int(grid.world_height * scale)

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("Tinytown")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True

    def _record(self, world_x: float, world_y: float, label: str) -> None:
        self._placements.append((world_x, world_y, label))

    def _capture(self) -> None:
        """Rebuild the placement list from the engine's current map."""
        self._placements.clear()
        for cell in self.engine.grid:
            self._record(cell.world_x, cell.world_y, cell.terrain)
        for item in self.engine.decor:
            self._record(item.world_x, item.world_y, item.variant)

    def run(self, fps: int = 60) -> None:
        """Main loop: handle events, tick the engine, render.

        Args:
            fps: Target frames per second; one engine tick per frame.
        """
        while self.running:
            self.clock.tick(fps)
            self._handle_events()
            self._update_intent()
            self.engine.tick()
            self._draw()

        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_r:
                    self._placements.clear()
                    self.engine.reseed()
                elif event.key == pygame.K_COMMA:
                    self._placements.clear()
                    self.engine.step_frequency(-1)
                elif event.key == pygame.K_PERIOD:
                    self._placements.clear()
                    self.engine.step_frequency(+1)

    def _update_intent(self) -> None:
        keys = pygame.key.get_pressed()
        self.engine.set_move_intent(
            up=bool(keys[pygame.K_UP]),
            down=bool(keys[pygame.K_DOWN]),
            left=bool(keys[pygame.K_LEFT]),
            right=bool(keys[pygame.K_RIGHT]),
        )

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_placements()
        self._draw_agent()
        self._draw_info()
        pygame.display.flip()

    def _draw_placements(self) -> None:
        """Draw terrain squares, then decor insets, in placement order."""
        colours = self.engine.config.colours
        terrain_labels = set(self.engine.generation.classifier.palette)
        size = self.engine.grid.tile_size * self.scale
        inset = size / 4
        for world_x, world_y, label in self._placements:
            colour = colours.get(label, _UNKNOWN)
            px = world_x * self.scale
            py = world_y * self.scale
            if label in terrain_labels:
                rect = pygame.Rect(int(px), int(py), int(size) + 1, int(size) + 1)
            else:
                rect = pygame.Rect(
                    int(px + inset),
                    int(py + inset),
                    int(size - 2 * inset),
                    int(size - 2 * inset),
                )
            pygame.draw.rect(self.screen, colour, rect)

    def _draw_agent(self) -> None:
        agent = self.engine.agent
        radius = max(3, int(self.engine.grid.tile_size * self.scale / 4))
        pygame.draw.circle(
            self.screen,
            _AGENT,
            (int(agent.x * self.scale), int(agent.y * self.scale)),
            radius,
        )

    def _draw_info(self) -> None:
        """Draw seed, frequencies, and controls in the top-left corner."""
        freq = self.engine.frequency
        lines = [
            f"Seed: {self.engine.seed}",
            f"Terrain freq: {freq.terrain:.2f}",
        ]
        if freq.water is not None:
            lines.append(f"Water freq: {freq.water:.2f}")
        lines += [
            "R: regenerate  </>: sample window",
            "Arrows: move  ESC: quit",
        ]
        y = 4
        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (4, y))
            y += 16
