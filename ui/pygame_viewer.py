"""Pygame визуализация сада: вид сверху на область, цветы и колибри"""

import math
import os

import pygame

from garden.geometry import Vector3


class GardenViewer:
    """Рендер области сверху (плоскость x-z) с панелью статистики"""

    TOP_BAR_HEIGHT = 40

    def __init__(self, sim, width: int = 800, height: int = 840):
        os.environ.setdefault('SDL_VIDEO_CENTERED', '1')
        pygame.init()

        self.sim = sim
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption("Hummingbird Garden")
        self.clock = pygame.time.Clock()
        self.font_small = pygame.font.Font(None, 22)

        self.window_width = width
        self.window_height = height

        # Цвета
        self.COLOR_BG = (25, 35, 25)
        self.COLOR_BOUNDARY = (90, 110, 90)
        self.COLOR_PLANT = (60, 120, 60)
        self.COLOR_BIRD = (120, 200, 255)
        self.COLOR_PLAYER = (255, 210, 90)
        self.COLOR_LINE = (80, 220, 80)
        self.COLOR_TEXT = (210, 210, 210)

        viewport = min(width, height - self.TOP_BAR_HEIGHT)
        self.scale_factor = viewport / (2.2 * sim.world.area_radius)

    def world_to_screen(self, pos: Vector3) -> tuple:
        """Мировые координаты (x, z) → экран; +z смотрит вверх экрана"""
        center = self.sim.world.center
        cx = self.window_width / 2.0
        cy = self.TOP_BAR_HEIGHT + (self.window_height - self.TOP_BAR_HEIGHT) / 2.0
        screen_x = int(cx + (pos.x - center.x) * self.scale_factor)
        screen_y = int(cy - (pos.z - center.z) * self.scale_factor)
        return (screen_x, screen_y)

    def handle_events(self) -> dict:
        """
        Обработать события окна.

        Returns:
            {'quit': bool, 'toggle_pause': bool, 'reset': bool}
        """
        result = {'quit': False, 'toggle_pause': False, 'reset': False}
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                result['quit'] = True
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    result['quit'] = True
                elif event.key in (pygame.K_p, pygame.K_SPACE):
                    result['toggle_pause'] = True
                elif event.key == pygame.K_r:
                    result['reset'] = True
        return result

    def _draw_bird(self, agent, color):
        pos = self.world_to_screen(agent.position)
        forward = agent.forward
        heading = math.atan2(forward.x, forward.z)
        size = max(6, int(0.25 * self.scale_factor))

        tip = (pos[0] + math.sin(heading) * size * 1.6, pos[1] - math.cos(heading) * size * 1.6)
        left = (pos[0] + math.sin(heading + 2.5) * size, pos[1] - math.cos(heading + 2.5) * size)
        right = (pos[0] + math.sin(heading - 2.5) * size, pos[1] - math.cos(heading - 2.5) * size)
        pygame.draw.polygon(self.screen, color, [tip, left, right])

        if agent.frozen:
            pygame.draw.circle(self.screen, (200, 200, 255), pos, size + 4, 1)

        line = agent.update()
        if line is not None:
            start, end = line
            pygame.draw.line(self.screen, self.COLOR_LINE,
                             self.world_to_screen(start), self.world_to_screen(end), 1)

    def draw(self, paused: bool = False, player_index: int = None):
        """Отрисовать область"""
        self.screen.fill(self.COLOR_BG)

        center = self.world_to_screen(self.sim.world.center)
        radius = int(self.sim.world.area_radius * self.scale_factor)
        pygame.draw.circle(self.screen, self.COLOR_BOUNDARY, center, radius, 2)

        for plant in self.sim.area.flower_plants:
            pygame.draw.circle(self.screen, self.COLOR_PLANT, self.world_to_screen(plant.position), 4)

        for flower in self.sim.area.flowers:
            color = tuple(int(c * 255) for c in flower.color)
            pygame.draw.circle(self.screen, color, self.world_to_screen(flower.center_position), 5)

        for i, agent in enumerate(self.sim.agents):
            color = self.COLOR_PLAYER if i == player_index else self.COLOR_BIRD
            self._draw_bird(agent, color)

        # Верхняя панель
        pygame.draw.rect(self.screen, (15, 20, 15), (0, 0, self.window_width, self.TOP_BAR_HEIGHT))
        parts = [f"{a.name}: {a.nectar_obtained:.2f}" for a in self.sim.agents]
        parts.append(f"step {self.sim.step_count}")
        if paused:
            parts.append("PAUSED")
        text = self.font_small.render("   ".join(parts), True, self.COLOR_TEXT)
        self.screen.blit(text, (10, 12))

        pygame.display.flip()

    def tick(self, fps: int = 50):
        self.clock.tick(fps)

    def close(self):
        pygame.quit()
