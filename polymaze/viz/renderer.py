import logging

import pygame

from polymaze.algo.solvers import SOLVERS
from polymaze.core import directions as dirs
from polymaze.core.grid import Grid
from polymaze.core.path import Path
from polymaze.viz.recorder import VideoRecorder

logger = logging.getLogger(__name__)


class Renderer:
    """
    Interactive viewer. Steps the generator in batches, then (optionally) a
    solver, drawing after every batch. Passages are drawn as corridors
    between cell centres, so one code path covers every topology.

    Mouse wheel zooms, dragging pans.
    """
    COLOR_BG = (10, 10, 10)
    COLOR_PASSAGE = (200, 200, 200)
    COLOR_UNDER = (90, 90, 90)
    COLOR_CURSOR = (220, 60, 60)
    COLOR_VISITED = (60, 100, 160)  # Blue tint
    COLOR_SOLUTION = (255, 215, 0)  # Gold

    def __init__(self, grid: Grid, generator=None, solver_name=None, width=1280, height=720,
                 record=False, gen_batch=50, solve_batch=20):
        self.grid = grid
        self.generator = generator
        self.solver_name = solver_name
        self.solver = None
        self.screen_width = width
        self.screen_height = height
        self.gen_batch = gen_batch
        self.solve_batch = solve_batch

        # Camera
        self.cell_size = 20.0  # Pixels per cell unit
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.zoom_speed = 1.1

        self.recorder = VideoRecorder(active=record)

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None
        self.gen_finished = generator is None
        self.status = "Idle"

    def fit_to_screen(self):
        """Auto-adjust zoom and pan to fit the entire grid on screen with padding."""
        padding = 40
        world_w, world_h = self.grid.topology.bounds()

        zoom_x = (self.screen_width - padding * 2) / world_w
        zoom_y = (self.screen_height - padding * 2) / world_h
        self.cell_size = min(zoom_x, zoom_y)

        self.offset_x = (self.screen_width - world_w * self.cell_size) / 2
        self.offset_y = (self.screen_height - world_h * self.cell_size) / 2

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(f"polymaze - {self.grid.topology.name} {self.grid.width}x{self.grid.height}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        self.fit_to_screen()

    def world_to_screen(self, wx, wy):
        sx = wx * self.cell_size + self.offset_x
        sy = wy * self.cell_size + self.offset_y
        return int(sx), int(sy)

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h

            elif event.type == pygame.MOUSEWHEEL:
                # Zoom towards mouse
                mx, my = pygame.mouse.get_pos()
                wx = (mx - self.offset_x) / self.cell_size
                wy = (my - self.offset_y) / self.cell_size

                if event.y > 0:
                    self.cell_size *= self.zoom_speed
                else:
                    self.cell_size /= self.zoom_speed
                self.cell_size = max(0.5, min(200.0, self.cell_size))

                self.offset_x = mx - wx * self.cell_size
                self.offset_y = my - wy * self.cell_size

            elif event.type == pygame.MOUSEMOTION:
                if pygame.mouse.get_pressed()[0] or pygame.mouse.get_pressed()[2]:
                    self.offset_x += event.rel[0]
                    self.offset_y += event.rel[1]

    def _half_passage(self, x, y, direction):
        """Screen segment from the centre of (x, y) to the wall it shares with its neighbour."""
        topo = self.grid.topology
        cx, cy = topo.cell_center(x, y)
        # Unwrapped neighbour, so passages across a wrapped edge point off-grid
        nx, ny = topo.cell_center(x + dirs.DX[direction], y + dirs.DY[direction])
        mx, my = (cx + nx) / 2, (cy + ny) / 2
        return self.world_to_screen(cx, cy), self.world_to_screen(mx, my)

    def draw_grid(self):
        self.surface.fill(self.COLOR_BG)
        grid = self.grid
        width = max(1, int(self.cell_size * 0.3))

        # Under plane first, so crossings on top hide them
        for x, y in grid.iter_valid():
            under = (grid[x, y] & Grid.UNDER) >> Grid.UNDER_SHIFT
            for d in dirs.bits(under):
                a, b = self._half_passage(x, y, d)
                pygame.draw.line(self.surface, self.COLOR_UNDER, a, b, max(1, width // 2))

        for x, y in grid.iter_valid():
            for d in dirs.bits(grid[x, y] & Grid.PRIMARY):
                a, b = self._half_passage(x, y, d)
                pygame.draw.line(self.surface, self.COLOR_PASSAGE, a, b, width)

        if self.generator is not None and not self.gen_finished:
            c = self.generator.cursor
            sx, sy = self.world_to_screen(*grid.topology.cell_center(c.x, c.y))
            pygame.draw.circle(self.surface, self.COLOR_CURSOR, (sx, sy), max(2, width))

        if self.solver is not None:
            self.draw_solver()

    def draw_solver(self):
        grid = self.grid
        radius = max(1, int(self.cell_size * 0.12))

        visits = getattr(self.solver, "visits", None)
        if visits is not None:
            for x, y in grid.iter_valid():
                if visits[grid.get_index(x, y)]:
                    sx, sy = self.world_to_screen(*grid.topology.cell_center(x, y))
                    pygame.draw.circle(self.surface, self.COLOR_VISITED, (sx, sy), radius)

        path: Path = self.solver.to_path(color=self.COLOR_SOLUTION)
        for point in path.cells:
            if not grid.valid(*point):
                continue
            sx, sy = self.world_to_screen(*grid.topology.cell_center(*point))
            # Hollow where the route runs underneath the cell
            hollow = 1 if path.is_set(point, Path.UNDER) and not path.is_set(point, Path.OVER) else 0
            pygame.draw.circle(self.surface, path["color"], (sx, sy), radius * 2, hollow)

    def draw_hud(self):
        fps = int(self.clock.get_fps())
        info = [
            f"FPS: {fps}",
            f"Size: {self.grid.width}x{self.grid.height} ({self.grid.topology.name})",
            f"Zoom: {self.cell_size:.2f}",
            f"Status: {self.status}",
            "REC" if self.recorder.active else "",
        ]
        if self.solver is not None:
            info.insert(4, f"Visited: {self.solver.visited_count}")

        for i, text in enumerate(info):
            lbl = self.font.render(text, True, (255, 255, 255))
            self.surface.blit(lbl, (10, 10 + i * 20))

    def run_loop(self):
        gen_iter = self.generator.run() if self.generator is not None else None
        solver_iter = None

        while self.running:
            self.handle_input()

            if gen_iter is not None and not self.gen_finished:
                try:
                    for _ in range(self.gen_batch):
                        self.status = next(gen_iter)
                except StopIteration:
                    self.gen_finished = True

            # The solver needs a finished grid, so it is created lazily
            if self.gen_finished and self.solver_name and self.solver is None:
                self.solver = SOLVERS[self.solver_name](self.grid)
                solver_iter = self.solver.run(every=self.solve_batch)
                logger.info(f"Solving with {self.solver_name}")

            if solver_iter is not None:
                try:
                    self.status = next(solver_iter)
                except StopIteration:
                    solver_iter = None

            self.draw_grid()
            self.draw_hud()
            pygame.display.flip()

            if self.recorder.active:
                self.recorder.capture_frame(self.surface)

            self.clock.tick(60)

        self.recorder.stop()
        pygame.quit()
