"""
ArenaSimulation - the per-tick game loop
---------------------------------------------------------
- One player tank driven by a Controls snapshot
- Enemy tanks spawned off-screen every few seconds with random experience
- Enemies chase, aim at and shoot the player
- Bullets fly straight and expire when they leave the arena
- Killing an enemy grants experience (growth) and heals the player

All times are milliseconds of simulation time: the clock only advances by
the dt passed to step(), and every cooldown and timer reads that clock.
Movement and turret rotation are per tick and not scaled by dt.
"""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional

from .configs.arena_config import ARENA_CONFIG
from .entities import (
    ArenaSnapshot,
    Combatant,
    Controls,
    NO_CONTROLS,
    Projectile,
    Role,
)
from .utils import circle_rect_intersects

logger = logging.getLogger(__name__)


def bullet_hits(bullet: Projectile, tank: Combatant) -> bool:
    """Circle/rectangle test between a bullet and a tank centred on its position"""
    return circle_rect_intersects(
        bullet.x, bullet.y, bullet.radius,
        tank.x, tank.y, tank.width, tank.height,
    )


class ArenaSimulation:
    """Owns every tank and bullet and advances them one tick at a time"""

    def __init__(
        self,
        width: int = ARENA_CONFIG["width"],
        height: int = ARENA_CONFIG["height"],
        spawn_interval: float = ARENA_CONFIG["spawn_interval"],
        spawn_margin: float = ARENA_CONFIG["spawn_margin"],
        max_spawn_exp: int = ARENA_CONFIG["max_spawn_exp"],
        enemy_hit_damage: float = ARENA_CONFIG["enemy_hit_damage"],
        player_hit_damage: float = ARENA_CONFIG["player_hit_damage"],
        kill_heal_fraction: float = ARENA_CONFIG["kill_heal_fraction"],
        seed: Optional[int] = None,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Arena size must be positive, got {width}x{height}")

        # Arena
        self.width = width
        self.height = height

        # Gameplay config
        self.spawn_interval = spawn_interval
        self.spawn_margin = spawn_margin
        self.max_spawn_exp = max_spawn_exp
        self.enemy_hit_damage = enemy_hit_damage
        self.player_hit_damage = player_hit_damage
        self.kill_heal_fraction = kill_heal_fraction

        self.rng = random.Random(seed)

        # World state
        self.player: Combatant = self._new_player()
        self.enemies: List[Combatant] = []
        self.projectiles: List[Projectile] = []

        # Timers
        self.spawn_timer = 0.0
        self.clock = 0.0
        self.tick_count = 0
        self.game_over = False

        # Event counters of the last tick
        self.events: Dict[str, float] = {}

        self.reset(seed)

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def reset(self, seed: Optional[int] = None):
        if seed is not None:
            self.rng.seed(seed)

        self.player = self._new_player()
        self.enemies = []
        self.projectiles = []

        self.spawn_timer = 0.0
        self.clock = 0.0
        self.tick_count = 0
        self.game_over = False
        self.events = self._empty_events()

    def _new_player(self) -> Combatant:
        return Combatant(x=self.width * 0.5, y=self.height * 0.5, role=Role.PLAYER)

    @staticmethod
    def _empty_events() -> Dict[str, float]:
        return {"shot": 0.0, "hit": 0.0, "kill": 0.0, "damage": 0.0, "exp": 0.0, "spawn": 0.0}

    def step(self, dt: float, controls: Optional[Controls] = None) -> bool:
        """
        Advance the arena by one tick of ``dt`` milliseconds.

        Returns True once the player has died. Negative dt counts as zero,
        and a zero-length tick (or any tick after game over) leaves the
        state untouched.
        """
        self.events = self._empty_events()

        dt = max(0.0, dt)
        if self.game_over or dt == 0.0:
            return self.game_over

        controls = controls or NO_CONTROLS
        self.clock += dt
        self.tick_count += 1

        self._update_player(controls)
        self._spawn_logic(dt)
        self._update_enemies()
        self._update_projectiles()
        self._handle_collisions()
        if not self.game_over:
            self._player_fire(controls)

        return self.game_over

    # ----------------------------
    # Core mechanics
    # ----------------------------

    def _update_player(self, controls: Controls):
        self.player.update(controls=controls)

    def _spawn_logic(self, dt: float):
        self.spawn_timer += dt
        if self.spawn_timer > self.spawn_interval:
            self.spawn_enemy()
            self.spawn_timer = 0.0

    def spawn_enemy(self, exp: Optional[float] = None) -> Combatant:
        """Place an enemy just outside a random edge of the arena."""
        m = self.spawn_margin
        if self.rng.random() < 0.5:
            # left/right edge pair
            x = -m if self.rng.random() < 0.5 else self.width + m
            y = self.rng.random() * self.height
        else:
            x = self.rng.random() * self.width
            y = -m if self.rng.random() < 0.5 else self.height + m

        if exp is None:
            exp = self.rng.randrange(self.max_spawn_exp) if self.max_spawn_exp > 0 else 0

        enemy = Combatant(x=x, y=y, role=Role.ENEMY)
        enemy.gain_exp(exp)
        enemy.health = enemy.max_health

        self.enemies.append(enemy)
        self.events["spawn"] += 1.0
        logger.debug(f"Spawned enemy at ({x:.0f}, {y:.0f}) exp={exp} scale={enemy.scale:.2f}")
        return enemy

    def _update_enemies(self):
        for enemy in self.enemies:
            enemy.update(player=self.player, projectiles=self.projectiles,
                         now=self.clock, rng=self.rng)

    def _update_projectiles(self):
        for b in self.projectiles:
            b.advance(self.width, self.height)
        self.projectiles = [b for b in self.projectiles if b.active]

    def _handle_collisions(self):
        self._enemy_bullets_vs_player()
        if not self.game_over:
            self._player_bullets_vs_enemies()

        # Cleanup after bullet collisions
        self.projectiles = [b for b in self.projectiles if b.active]

    def _enemy_bullets_vs_player(self):
        player = self.player
        for b in self.projectiles:
            if not b.active or not b.is_enemy_bullet:
                continue
            if not bullet_hits(b, player):
                continue

            b.active = False
            self.events["damage"] += self.enemy_hit_damage
            if player.take_damage(self.enemy_hit_damage) and not self.game_over:
                self.game_over = True
                logger.info(f"Player destroyed at t={self.clock:.0f}ms with exp={player.exp:.0f}")

    def _player_bullets_vs_enemies(self):
        player = self.player
        alive = [True] * len(self.enemies)

        for b in self.projectiles:
            if not b.active or b.is_enemy_bullet:
                continue

            # First living enemy hit takes the bullet
            for i, enemy in enumerate(self.enemies):
                if not alive[i]:
                    continue
                if not bullet_hits(b, enemy):
                    continue

                b.active = False
                self.events["hit"] += 1.0
                if enemy.take_damage(self.player_hit_damage * player.scale):
                    alive[i] = False
                    # Experience stays whole: max health rounded half up
                    reward = int(enemy.max_health + 0.5)
                    player.gain_exp(reward)
                    player.heal(enemy.max_health * self.kill_heal_fraction)
                    self.events["kill"] += 1.0
                    self.events["exp"] += reward
                    logger.debug(f"Enemy destroyed, player exp={player.exp:.0f} scale={player.scale:.2f}")
                break

        self.enemies = [e for e, ok in zip(self.enemies, alive) if ok]

    def _player_fire(self, controls: Controls):
        if not controls.fire:
            return
        if not self.player.can_fire(self.clock):
            return
        self.player.fire(self.projectiles, self.clock)
        self.events["shot"] += 1.0

    # ----------------------------
    # Read-only state
    # ----------------------------

    def snapshot(self) -> ArenaSnapshot:
        return ArenaSnapshot(
            width=self.width,
            height=self.height,
            player=self.player.view(),
            enemies=tuple(e.view() for e in self.enemies),
            projectiles=tuple(b.view() for b in self.projectiles),
            player_exp=self.player.exp,
            game_over=self.game_over,
            tick=self.tick_count,
            clock=self.clock,
        )
