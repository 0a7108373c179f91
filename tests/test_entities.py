"""
Tests for tanks and bullets

Covers experience-driven growth, health bookkeeping, firing geometry and
cooldowns, keyboard-style movement and the enemy seek-and-shoot policy.
"""

import math

import pytest

from tank_arena.entities import (
    Combatant,
    Controls,
    Projectile,
    Role,
    scale_for_exp,
)


class FixedRandom:
    """Stand-in rng returning a constant from random()"""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


# =============================================================================
# PROGRESSION
# =============================================================================

class TestScale:

    @pytest.mark.parametrize(
        "exp,expected",
        [(0, 1.0), (500, 1.5), (1000, 2.0), (2000, 3.0), (5000, 3.0), (10 ** 6, 3.0)],
    )
    def test_scale_formula(self, exp, expected):
        assert scale_for_exp(exp) == pytest.approx(expected)

    def test_scale_monotonic_and_bounded(self):
        previous = 0.0
        for exp in range(0, 6000, 250):
            s = scale_for_exp(exp)
            assert s >= previous
            assert s <= 3.0
            previous = s

    def test_fresh_enemy_stats(self):
        enemy = Combatant(x=0, y=0, role=Role.ENEMY)
        assert enemy.scale == 1.0
        assert enemy.max_health == 100.0
        assert enemy.health == 100.0
        assert enemy.width == 40.0 and enemy.height == 40.0


class TestGainExp:

    def test_growth_recomputes_dimensions(self):
        tank = Combatant(x=0, y=0)
        tank.gain_exp(1000)
        assert tank.scale == pytest.approx(2.0)
        assert tank.width == pytest.approx(80.0)
        assert tank.height == pytest.approx(80.0)
        assert tank.max_health == pytest.approx(200.0)

    def test_growth_does_not_heal(self):
        tank = Combatant(x=0, y=0)
        tank.gain_exp(1000)
        assert tank.health == 100.0

    def test_negative_exp_ignored(self):
        tank = Combatant(x=0, y=0, exp=500)
        tank.gain_exp(-200)
        assert tank.exp == 500
        assert tank.scale == pytest.approx(1.5)

    def test_derived_sizes(self):
        tank = Combatant(x=0, y=0, exp=1000)
        assert tank.turret_radius == pytest.approx(30.0)
        assert tank.barrel_size == pytest.approx((70.0, 20.0))


class TestHealthBookkeeping:

    def test_take_damage_reports_death(self):
        tank = Combatant(x=0, y=0)
        assert tank.take_damage(40) is False
        assert tank.health == 60
        assert tank.take_damage(60) is True
        assert tank.health == 0

    def test_heal_clamps_to_max(self):
        tank = Combatant(x=0, y=0)
        tank.take_damage(30)
        tank.heal(500)
        assert tank.health == tank.max_health

    def test_health_never_exceeds_max_after_mixed_sequence(self):
        tank = Combatant(x=0, y=0)
        for amount in (10, 300, 50, 1000, 5):
            tank.gain_exp(amount)
            tank.heal(amount)
            assert tank.health <= tank.max_health

    def test_health_ratio(self):
        tank = Combatant(x=0, y=0)
        tank.take_damage(25)
        assert tank.health_ratio == pytest.approx(0.75)
        tank.take_damage(500)
        assert tank.health_ratio == 0.0


# =============================================================================
# BULLETS
# =============================================================================

class TestProjectile:

    @pytest.mark.parametrize("theta", [0.0, 0.3, math.pi / 2, 2.5, -1.0])
    def test_straight_line_travel(self, theta):
        b = Projectile(x=500.0, y=500.0, direction=theta)
        for _ in range(20):
            b.advance(10_000, 10_000)
        assert b.x == pytest.approx(500.0 + 20 * 10.0 * math.cos(theta))
        assert b.y == pytest.approx(500.0 + 20 * 10.0 * math.sin(theta))
        assert b.active

    def test_deactivates_when_leaving_bounds(self):
        b = Projectile(x=785.0, y=300.0, direction=0.0)
        b.advance(800, 600)
        assert b.active and b.x == pytest.approx(795.0)
        b.advance(800, 600)
        assert not b.active

    def test_edge_is_inside(self):
        b = Projectile(x=790.0, y=300.0, direction=0.0)
        b.advance(800, 600)
        assert b.x == pytest.approx(800.0)
        assert b.active

    def test_inactive_bullet_does_not_move(self):
        b = Projectile(x=100.0, y=100.0, direction=0.0, active=False)
        b.advance(800, 600)
        assert (b.x, b.y) == (100.0, 100.0)

    def test_owner_flag(self):
        assert Projectile(0, 0, 0, owner=Role.ENEMY).is_enemy_bullet
        assert not Projectile(0, 0, 0, owner=Role.PLAYER).is_enemy_bullet


# =============================================================================
# FIRING
# =============================================================================

class TestFire:

    def test_bullet_spawns_at_barrel_tip(self):
        tank = Combatant(x=100.0, y=100.0, exp=1000)
        bullets = []
        b = tank.fire(bullets, now=42.0)
        assert bullets == [b]
        assert b.x == pytest.approx(170.0)
        assert b.y == pytest.approx(100.0)
        assert b.radius == pytest.approx(10.0)
        assert b.direction == 0.0
        assert b.owner is Role.PLAYER
        assert tank.last_shot == 42.0

    def test_tip_follows_turret(self):
        tank = Combatant(x=0.0, y=0.0, turret_rotation=math.pi / 2)
        b = tank.fire([], now=0.0)
        assert b.x == pytest.approx(0.0, abs=1e-9)
        assert b.y == pytest.approx(35.0)

    def test_enemy_bullets_are_tagged(self):
        enemy = Combatant(x=0.0, y=0.0, role=Role.ENEMY)
        assert enemy.fire([], now=0.0).is_enemy_bullet

    def test_player_cooldown_is_strict(self):
        tank = Combatant(x=0, y=0)
        assert tank.can_fire(0.0)  # never fired
        tank.fire([], now=100.0)
        assert not tank.can_fire(600.0)
        assert tank.can_fire(600.5)

    def test_enemy_cooldown_adds_jitter(self):
        enemy = Combatant(x=0, y=0, role=Role.ENEMY)
        enemy.fire([], now=0.0)
        half = FixedRandom(0.5)  # 500 + 500
        assert not enemy.can_fire(1000.0, half)
        assert enemy.can_fire(1000.5, half)
        assert enemy.can_fire(500.5, FixedRandom(0.0))


# =============================================================================
# BEHAVIOUR
# =============================================================================

class TestPlayerControls:

    def test_movement_keys(self):
        tank = Combatant(x=100.0, y=100.0)
        tank.update(Controls(move_up=True, move_right=True))
        assert (tank.x, tank.y) == (103.0, 97.0)
        tank.update(Controls(move_down=True, move_left=True))
        assert (tank.x, tank.y) == (100.0, 100.0)

    def test_turret_rotation(self):
        tank = Combatant(x=0.0, y=0.0)
        tank.update(Controls(rotate_left=True))
        assert tank.turret_rotation == pytest.approx(-0.05)
        tank.update(Controls(rotate_right=True))
        tank.update(Controls(rotate_right=True))
        assert tank.turret_rotation == pytest.approx(0.05)

    def test_no_controls_is_noop(self):
        tank = Combatant(x=10.0, y=20.0)
        tank.update(None)
        assert (tank.x, tank.y, tank.turret_rotation) == (10.0, 20.0, 0.0)


class TestEnemyAI:

    def _run(self, enemy_x, now=0.0):
        player = Combatant(x=0.0, y=0.0)
        enemy = Combatant(x=enemy_x, y=0.0, role=Role.ENEMY)
        bullets = []
        enemy.update(player=player, projectiles=bullets, now=now, rng=FixedRandom(0.0))
        return enemy, bullets

    def test_idle_outside_engagement_radius(self):
        enemy, bullets = self._run(600.0)
        assert enemy.x == 600.0
        assert enemy.turret_rotation == 0.0
        assert bullets == []

    def test_engagement_radius_boundary_is_outside(self):
        enemy, bullets = self._run(500.0)
        assert enemy.x == 500.0
        assert bullets == []

    def test_approaches_aims_and_fires(self):
        enemy, bullets = self._run(300.0)
        assert enemy.x == pytest.approx(298.5)
        assert enemy.turret_rotation == pytest.approx(math.pi)
        assert enemy.rotation == pytest.approx(math.pi)
        assert len(bullets) == 1
        assert bullets[0].is_enemy_bullet

    def test_holds_position_inside_stop_distance(self):
        enemy, bullets = self._run(150.0)
        assert enemy.x == 150.0
        assert enemy.turret_rotation == pytest.approx(math.pi)
        assert len(bullets) == 1

    def test_stop_distance_boundary_holds(self):
        enemy, _ = self._run(200.0)
        assert enemy.x == 200.0

    def test_respects_cooldown(self):
        player = Combatant(x=0.0, y=0.0)
        enemy = Combatant(x=150.0, y=0.0, role=Role.ENEMY)
        bullets = []
        rng = FixedRandom(0.0)
        enemy.update(player=player, projectiles=bullets, now=0.0, rng=rng)
        enemy.update(player=player, projectiles=bullets, now=400.0, rng=rng)
        assert len(bullets) == 1
        enemy.update(player=player, projectiles=bullets, now=501.0, rng=rng)
        assert len(bullets) == 2

    def test_distance_to(self):
        a = Combatant(x=0.0, y=0.0)
        b = Combatant(x=300.0, y=400.0, role=Role.ENEMY)
        assert a.distance_to(b) == pytest.approx(500.0)
        assert b.distance_to(a) == pytest.approx(500.0)
