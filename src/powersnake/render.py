# render.py
from typing import Tuple
import pygame  # type: ignore

from .config import (
    CELL_SIZE, DIFFICULTIES,
    BG, GREEN, RED, YELLOW, GRAY, WHITE, TEXT,
)
from .game import Snapshot

# ---------- Helpers ----------
def cell_center(gx: int, gy: int) -> Tuple[int, int]:
    return (gx * CELL_SIZE + CELL_SIZE // 2, gy * CELL_SIZE + CELL_SIZE // 2)

def draw_cell(screen: pygame.Surface, gx: int, gy: int, color: Tuple[int, int, int]) -> None:
    rect = pygame.Rect(gx * CELL_SIZE, gy * CELL_SIZE, CELL_SIZE, CELL_SIZE)
    pygame.draw.rect(screen, color, rect)

def draw_dot(screen: pygame.Surface, gx: int, gy: int, color: Tuple[int, int, int]) -> None:
    pygame.draw.circle(screen, color, cell_center(gx, gy), CELL_SIZE // 2 - 2)

def blit_centered(screen: pygame.Surface, font: pygame.font.Font, text: str, dy: int, color=TEXT) -> None:
    surf = font.render(text, True, color)
    rect = surf.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2 + dy))
    screen.blit(surf, rect)

# ---------- Frames ----------
def draw_game(screen: pygame.Surface, font: pygame.font.Font, snap: Snapshot) -> None:
    """Full redraw of the play field from a snapshot."""
    screen.fill(BG)

    for x, y in snap.obstacles:
        draw_cell(screen, x, y, GRAY)

    for x, y in snap.snake:
        draw_dot(screen, x, y, GREEN)
    if snap.snake:
        # eye, nudged toward the heading
        hx, hy = snap.snake[0]
        cx, cy = cell_center(hx, hy)
        dx, dy = snap.direction
        pygame.draw.circle(screen, WHITE, (cx + dx * 5, cy + dy * 5), 3)

    if snap.food is not None:
        draw_dot(screen, snap.food[0], snap.food[1], RED)
    if snap.power_up is not None:
        px, py = snap.power_up.position
        draw_dot(screen, px, py, YELLOW)

    txt = font.render(f"Score: {snap.score}", True, TEXT)
    screen.blit(txt, (10, 10))

    effects = []
    if snap.speed_boost:
        effects.append("SPEED")
    if snap.invincible:
        effects.append("INVINCIBLE")
    if effects:
        eff = font.render("  ".join(effects), True, TEXT)
        screen.blit(eff, (10, 10 + txt.get_height() + 4))

def draw_start_screen(screen: pygame.Surface, font: pygame.font.Font, difficulty: str, high_score: int) -> None:
    screen.fill(BG)
    blit_centered(screen, font, "SNAKE", -60)
    options = "   ".join(
        f"[{name}]" if name == difficulty else name for name in DIFFICULTIES
    )
    blit_centered(screen, font, options, -16)
    blit_centered(screen, font, "Left/Right or 1-3 to choose, Enter to start", 16)
    blit_centered(screen, font, f"High Score: {high_score}", 48)

def draw_game_over(screen: pygame.Surface, font: pygame.font.Font, score: int, high_score: int) -> None:
    # Dim with translucent overlay
    overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, 140))  # RGBA
    screen.blit(overlay, (0, 0))

    blit_centered(screen, font, "GAME OVER", -32, (240, 240, 250))
    blit_centered(screen, font, f"Final Score: {score}", 0, (220, 220, 230))
    blit_centered(screen, font, f"High Score: {high_score}", 28, (220, 220, 230))
    blit_centered(screen, font, "Press R to restart", 60, (220, 220, 230))
