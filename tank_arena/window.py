"""
Arcade front end for the arena: draws snapshots, samples keys, drives ticks
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

import numpy as np
import arcade

from .entities import ArenaSnapshot, CombatantView, Controls, Role
from .simulation import ArenaSimulation

# W/A/S/D move, J/K turn the turret, SPACE fires
KEY_BINDINGS = {
    arcade.key.W: "move_up",
    arcade.key.S: "move_down",
    arcade.key.A: "move_left",
    arcade.key.D: "move_right",
    arcade.key.J: "rotate_left",
    arcade.key.K: "rotate_right",
    arcade.key.SPACE: "fire",
}

# Colors
BG = (34, 34, 34)
PLAYER_BODY_C = (0, 255, 0)
PLAYER_TURRET_C = (0, 102, 0)
ENEMY_BODY_C = (255, 0, 0)
ENEMY_TURRET_C = (204, 0, 0)
TRACK_C = (51, 51, 51)
PLAYER_BULLET_C = (255, 255, 0)
ENEMY_BULLET_C = (255, 165, 0)
BAR_BG_C = (200, 0, 0)
BAR_FG_C = (0, 255, 0)
HUD_C = (255, 255, 255)


def controls_from_keys(pressed) -> Controls:
    """Build a Controls snapshot from a collection of pressed arcade key codes"""
    flags = {action: True for key, action in KEY_BINDINGS.items() if key in pressed}
    return Controls(**flags)


def _rotated_rect(cx: float, cy: float, x0: float, y0: float, x1: float, y1: float,
                  angle: float) -> List[Tuple[float, float]]:
    """Corners of the local rect [x0,x1]x[y0,y1] rotated by angle around (cx, cy)"""
    c, s = math.cos(angle), math.sin(angle)
    return [(cx + x * c - y * s, cy + x * s + y * c)
            for x, y in ((x0, y0), (x1, y0), (x1, y1), (x0, y1))]


class ArenaWindow(arcade.Window):
    """
    Arcade window rendering an ArenaSimulation.

    With interactive=True the window also owns the game loop: keyboard state
    becomes the Controls of each tick and on_update steps the simulation.
    The simulation uses screen coordinates with y pointing down, so every
    point is flipped before drawing.
    """

    def __init__(self, sim: ArenaSimulation, interactive: bool = True, title: str = "Tank Arena"):
        super().__init__(int(sim.width), int(sim.height), title)
        self.sim = sim
        self.interactive = interactive
        self.pressed = set()
        arcade.set_background_color(BG)

    # ----------------------------
    # Input / tick driver
    # ----------------------------

    def on_key_press(self, symbol: int, modifiers: int):
        self.pressed.add(symbol)
        if symbol == arcade.key.R and self.sim.game_over:
            print("Restarting...")
            self.sim.reset()
        elif symbol == arcade.key.ESCAPE:
            self.close()

    def on_key_release(self, symbol: int, modifiers: int):
        self.pressed.discard(symbol)

    def on_update(self, delta_time: float):
        if not self.interactive:
            return
        was_over = self.sim.game_over
        # Arcade hands us seconds, the simulation counts milliseconds
        if self.sim.step(delta_time * 1000.0, controls_from_keys(self.pressed)) and not was_over:
            print(f"Game Over! exp: {self.sim.player.exp:.0f}  (press R to restart)")

    # ----------------------------
    # Drawing
    # ----------------------------

    def _flip(self, points: Sequence[Tuple[float, float]]) -> List[Tuple[float, float]]:
        return [(x, self.height - y) for x, y in points]

    def _draw_tank(self, t: CombatantView):
        enemy = t.role is Role.ENEMY
        hw, hh = t.width / 2, t.height / 2

        # Body and tracks share the body rotation
        body = _rotated_rect(t.x, t.y, -hw, -hh, hw, hh, t.rotation)
        arcade.draw_polygon_filled(self._flip(body), ENEMY_BODY_C if enemy else PLAYER_BODY_C)
        for x0 in (-hw - 5, hw):
            track = _rotated_rect(t.x, t.y, x0, -hh, x0 + 5, hh, t.rotation)
            arcade.draw_polygon_filled(self._flip(track), TRACK_C)

        # Turret and barrel
        turret_c = ENEMY_TURRET_C if enemy else PLAYER_TURRET_C
        arcade.draw_circle_filled(t.x, self.height - t.y, t.turret_radius, turret_c)
        bl, bw = t.barrel_size
        barrel = _rotated_rect(t.x, t.y, 0, -bw / 2, bl, bw / 2, t.turret_rotation)
        arcade.draw_polygon_filled(self._flip(barrel), turret_c)

        # Health bar (player only once damaged)
        if enemy or t.health < t.max_health:
            left = t.x - 25
            top = self.height - (t.y - hh - 15)
            arcade.draw_lrbt_rectangle_filled(left, left + 50, top - 5, top, BAR_BG_C)
            fill = 50 * t.health_ratio
            if fill > 0:
                arcade.draw_lrbt_rectangle_filled(left, left + fill, top - 5, top, BAR_FG_C)

    def draw_snapshot(self, snap: ArenaSnapshot):
        for e in snap.enemies:
            self._draw_tank(e)

        for b in snap.projectiles:
            color = ENEMY_BULLET_C if b.owner is Role.ENEMY else PLAYER_BULLET_C
            arcade.draw_circle_filled(b.x, self.height - b.y, b.radius, color)

        self._draw_tank(snap.player)

        # Text HUD
        arcade.draw_text(f"EXP: {snap.player_exp:.0f}", 10, self.height - 30, HUD_C, 16)
        arcade.draw_text(f"HP: {snap.player.health:.0f}", 10, self.height - 60, HUD_C, 16)
        if snap.game_over:
            arcade.draw_text("GAME OVER - press R", self.width / 2 - 120, self.height / 2, HUD_C, 22)

    def on_draw(self):
        """Draw the current game state"""
        self.clear()
        self.draw_snapshot(self.sim.snapshot())

    def grab_frame(self) -> np.ndarray:
        """Current framebuffer as an (H, W, 3) uint8 array"""
        image = arcade.get_image(0, 0, self.width, self.height)
        return np.asarray(image.convert("RGB"), dtype=np.uint8)


def play(seed=None, **arena_kwargs):
    """Open a window and play the arena with the keyboard"""
    sim = ArenaSimulation(seed=seed, **arena_kwargs)
    window = ArenaWindow(sim, interactive=True)
    print("W/A/S/D move, J/K turn the turret, SPACE fires, ESC quits.")
    arcade.run()
    return window
