"""
Game entity dataclasses

Tanks (player and enemies share one Combatant type and differ only by role),
bullets, the per-tick input snapshot and the read-only views handed to
renderers.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .configs.arena_config import TANK_CONFIG, BULLET_CONFIG
from .utils import normalize

BASE_SIZE = TANK_CONFIG["base_size"]
BASE_HEALTH = TANK_CONFIG["base_health"]
TANK_SPEED = TANK_CONFIG["speed"]
TURRET_TURN_RATE = TANK_CONFIG["turret_turn_rate"]
RELOAD_TIME = TANK_CONFIG["reload_time"]
ENEMY_RELOAD_JITTER = TANK_CONFIG["enemy_reload_jitter"]
EXP_PER_SCALE = TANK_CONFIG["exp_per_scale"]
MAX_SCALE = TANK_CONFIG["max_scale"]
BARREL_LENGTH = TANK_CONFIG["barrel_length"]
BARREL_WIDTH = TANK_CONFIG["barrel_width"]
TURRET_RADIUS = TANK_CONFIG["turret_radius"]
ENGAGEMENT_RADIUS = TANK_CONFIG["engagement_radius"]
STOP_DISTANCE = TANK_CONFIG["stop_distance"]
ENEMY_SPEED_FACTOR = TANK_CONFIG["enemy_speed_factor"]

BULLET_SPEED = BULLET_CONFIG["speed"]
BULLET_RADIUS = BULLET_CONFIG["base_radius"]


class Role(Enum):
    """Which side a tank (or the bullet it fired) belongs to"""
    PLAYER = "player"
    ENEMY = "enemy"


def scale_for_exp(exp: float) -> float:
    """Size/power multiplier for an amount of experience, capped at MAX_SCALE"""
    return min(1.0 + exp / EXP_PER_SCALE, MAX_SCALE)


@dataclass(frozen=True)
class Controls:
    """Logical actions pressed during one tick"""
    move_up: bool = False
    move_down: bool = False
    move_left: bool = False
    move_right: bool = False
    rotate_left: bool = False
    rotate_right: bool = False
    fire: bool = False


NO_CONTROLS = Controls()


@dataclass
class Projectile:
    """Bullet travelling in a straight line until it leaves the arena"""
    x: float
    y: float
    direction: float  # radians, fixed at creation
    radius: float = BULLET_RADIUS
    speed: float = BULLET_SPEED
    owner: Role = Role.PLAYER
    active: bool = True

    @property
    def is_enemy_bullet(self) -> bool:
        return self.owner is Role.ENEMY

    def advance(self, width: float, height: float):
        """Move one tick along the travel direction; deactivate once out of bounds."""
        if not self.active:
            return

        self.x += math.cos(self.direction) * self.speed
        self.y += math.sin(self.direction) * self.speed

        if self.x < 0 or self.x > width or self.y < 0 or self.y > height:
            self.active = False

    def view(self) -> "ProjectileView":
        return ProjectileView(
            x=self.x, y=self.y, radius=self.radius,
            direction=self.direction, owner=self.owner,
        )


@dataclass
class Combatant:
    """
    Tank entity.

    Width, height and max health follow the scale, which is derived from
    experience and recomputed whenever experience changes. Health is not
    raised when the tank grows.
    """
    x: float
    y: float
    role: Role = Role.PLAYER
    rotation: float = 0.0          # body, radians
    turret_rotation: float = 0.0   # radians
    exp: float = 0.0
    speed: float = TANK_SPEED
    reload_time: float = RELOAD_TIME
    last_shot: Optional[float] = None  # simulation time of the last shot
    width: float = field(init=False)
    height: float = field(init=False)
    max_health: float = field(init=False)
    health: float = field(init=False)

    def __post_init__(self):
        self.exp = max(0.0, self.exp)
        self._resize()
        self.health = self.max_health

    # ----------------------------
    # Derived stats
    # ----------------------------

    @property
    def is_enemy(self) -> bool:
        return self.role is Role.ENEMY

    @property
    def scale(self) -> float:
        return scale_for_exp(self.exp)

    @property
    def health_ratio(self) -> float:
        if self.max_health <= 0:
            return 0.0
        return max(0.0, self.health) / self.max_health

    @property
    def turret_radius(self) -> float:
        return TURRET_RADIUS * self.scale

    @property
    def barrel_size(self) -> Tuple[float, float]:
        """(length, width) of the barrel"""
        s = self.scale
        return BARREL_LENGTH * s, BARREL_WIDTH * s

    def _resize(self):
        s = self.scale
        self.width = BASE_SIZE * s
        self.height = BASE_SIZE * s
        self.max_health = BASE_HEALTH * s

    # ----------------------------
    # Progression / damage
    # ----------------------------

    def take_damage(self, amount: float) -> bool:
        """Subtract health; returns True when the tank is dead."""
        self.health -= amount
        return self.health <= 0

    def heal(self, amount: float):
        self.health = min(self.health + amount, self.max_health)

    def gain_exp(self, amount: float):
        if amount <= 0:
            return
        self.exp += amount
        self._resize()

    # ----------------------------
    # Firing
    # ----------------------------

    def barrel_tip(self) -> Tuple[float, float]:
        length = BARREL_LENGTH * self.scale
        return (self.x + math.cos(self.turret_rotation) * length,
                self.y + math.sin(self.turret_rotation) * length)

    def can_fire(self, now: float, rng: Optional[random.Random] = None) -> bool:
        # Enemies draw a fresh jitter on every check
        if self.last_shot is None:
            return True
        threshold = self.reload_time
        if self.is_enemy:
            threshold += (rng or random).random() * ENEMY_RELOAD_JITTER
        return now - self.last_shot > threshold

    def fire(self, projectiles: List[Projectile], now: float) -> Projectile:
        """Spawn a bullet at the barrel tip and restart the reload timer."""
        bx, by = self.barrel_tip()
        bullet = Projectile(
            x=bx, y=by,
            direction=self.turret_rotation,
            radius=BULLET_RADIUS * self.scale,
            owner=self.role,
        )
        projectiles.append(bullet)
        self.last_shot = now
        return bullet

    # ----------------------------
    # Behaviour
    # ----------------------------

    def distance_to(self, other: "Combatant") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def update(
        self,
        controls: Optional[Controls] = None,
        player: Optional["Combatant"] = None,
        projectiles: Optional[List[Projectile]] = None,
        now: float = 0.0,
        rng: Optional[random.Random] = None,
    ):
        if self.is_enemy:
            if player is not None:
                self._seek_and_shoot(player, projectiles, now, rng)
            return
        self._apply_controls(controls or NO_CONTROLS)

    def _apply_controls(self, controls: Controls):
        # Per tick, not per millisecond
        if controls.move_up:
            self.y -= self.speed
        if controls.move_down:
            self.y += self.speed
        if controls.move_left:
            self.x -= self.speed
        if controls.move_right:
            self.x += self.speed

        if controls.rotate_left:
            self.turret_rotation -= TURRET_TURN_RATE
        if controls.rotate_right:
            self.turret_rotation += TURRET_TURN_RATE

    def _seek_and_shoot(self, player: "Combatant",
                        projectiles: Optional[List[Projectile]],
                        now: float, rng: Optional[random.Random]):
        dx = player.x - self.x
        dy = player.y - self.y
        dist = self.distance_to(player)

        if dist >= ENGAGEMENT_RADIUS:
            return  # idle

        angle = math.atan2(dy, dx)
        self.turret_rotation = angle

        if dist > STOP_DISTANCE:
            nx, ny = normalize(dx, dy)
            step = self.speed * ENEMY_SPEED_FACTOR
            self.x += nx * step
            self.y += ny * step
            self.rotation = angle

        if projectiles is not None and self.can_fire(now, rng):
            self.fire(projectiles, now)

    def view(self) -> "CombatantView":
        return CombatantView(
            x=self.x, y=self.y,
            rotation=self.rotation,
            turret_rotation=self.turret_rotation,
            width=self.width, height=self.height,
            scale=self.scale,
            turret_radius=self.turret_radius,
            barrel_size=self.barrel_size,
            role=self.role,
            health=self.health,
            max_health=self.max_health,
            health_ratio=self.health_ratio,
        )


# ----------------------------
# Render-facing views
# ----------------------------

@dataclass(frozen=True)
class CombatantView:
    x: float
    y: float
    rotation: float
    turret_rotation: float
    width: float
    height: float
    scale: float
    turret_radius: float
    barrel_size: Tuple[float, float]  # (length, width)
    role: Role
    health: float
    max_health: float
    health_ratio: float


@dataclass(frozen=True)
class ProjectileView:
    x: float
    y: float
    radius: float
    direction: float
    owner: Role


@dataclass(frozen=True)
class ArenaSnapshot:
    """Everything a renderer needs for one frame"""
    width: float
    height: float
    player: CombatantView
    enemies: Tuple[CombatantView, ...]
    projectiles: Tuple[ProjectileView, ...]
    player_exp: float
    game_over: bool
    tick: int
    clock: float
