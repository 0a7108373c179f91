"""
TankArenaEnv - Gymnasium wrapper around the arena simulation
---------------------------------------------------------
- Gymnasium API over ArenaSimulation
- The RL agent drives the player tank: move, turn the turret, shoot
- Enemies spawn off-screen, chase and shoot back
- Vector observation: player state + top-K nearest enemies + top-M nearest enemy bullets
- Discrete MultiDiscrete action space: [move(5), turret(3), fire(2)]

Quick test:
    python -m tank_arena random
"""

from __future__ import annotations

import math
import time
from typing import Any, Dict, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .configs.arena_config import ENV_CONFIG, REWARD_CONFIG_BASELINE
from .entities import Controls, MAX_SCALE
from .simulation import ArenaSimulation
from .utils import clamp, seed_everything

# move: 0 stay, 1 up, 2 down, 3 left, 4 right
_MOVES = [
    {},
    {"move_up": True},
    {"move_down": True},
    {"move_left": True},
    {"move_right": True},
]
# turret: 0 hold, 1 left, 2 right
_TURRET = [
    {},
    {"rotate_left": True},
    {"rotate_right": True},
]


def action_to_controls(action) -> Controls:
    """Translate a MultiDiscrete action into a Controls snapshot"""
    move, turret, fire = int(action[0]), int(action[1]), int(action[2])
    return Controls(fire=bool(fire), **_MOVES[move], **_TURRET[turret])


class TankArenaEnv(gym.Env):
    """Tank arena environment; rendering goes through ArenaWindow"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        frame_ms: float = ENV_CONFIG["frame_ms"],
        max_steps: int = ENV_CONFIG["max_steps"],
        k_enemies: int = ENV_CONFIG["k_enemies"],
        m_bullets: int = ENV_CONFIG["m_bullets"],
        reward_config: Optional[Dict[str, Any]] = None,
        **arena_kwargs,
    ):
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unknown render mode: {render_mode}")
        self.render_mode = render_mode

        self.frame_ms = frame_ms
        self.max_steps = max_steps
        self.k_enemies = k_enemies
        self.m_bullets = m_bullets
        self.reward_config = dict(reward_config or REWARD_CONFIG_BASELINE)

        self.sim = ArenaSimulation(**arena_kwargs)

        self.action_space = spaces.MultiDiscrete([5, 3, 2])

        # Player: pos(2) turret cos/sin(2) health(1) scale(1) ready(1)
        # Each enemy: rel pos(2) health(1) scale(1)
        # Each enemy bullet: rel pos(2)
        obs_dim = 7 + (self.k_enemies * 4) + (self.m_bullets * 2)
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._window = None
        self._step_count = 0

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        self._step_count = 0
        self.sim.reset(seed)

        return self._get_obs(), self._get_info()

    def step(self, action):
        assert self.action_space.contains(np.asarray(action, dtype=np.int64)), f"Invalid action {action}"

        terminated = self.sim.step(self.frame_ms, action_to_controls(action))
        reward = self._compute_reward()

        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        sim = self.sim
        p = sim.player
        w, h = sim.width, sim.height

        ready = 1.0 if p.can_fire(sim.clock) else -1.0
        scale_norm = (p.scale - 1.0) / (MAX_SCALE - 1.0)

        obs_parts = [
            clamp(p.x / w * 2 - 1, -1, 1), clamp(p.y / h * 2 - 1, -1, 1),
            math.cos(p.turret_rotation), math.sin(p.turret_rotation),
            p.health_ratio * 2 - 1,
            scale_norm * 2 - 1,
            ready,
        ]

        def rel(x, y):
            return [clamp((x - p.x) / w, -1, 1), clamp((y - p.y) / h, -1, 1)]

        # Enemies: top-K nearest
        enemies_sorted = sorted(sim.enemies, key=lambda e: (e.x - p.x) ** 2 + (e.y - p.y) ** 2)
        for i in range(self.k_enemies):
            if i < len(enemies_sorted):
                e = enemies_sorted[i]
                obs_parts += rel(e.x, e.y)
                obs_parts += [e.health_ratio * 2 - 1, (e.scale - 1.0) / (MAX_SCALE - 1.0) * 2 - 1]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0]

        # Enemy bullets: top-M nearest
        incoming = [b for b in sim.projectiles if b.is_enemy_bullet]
        incoming.sort(key=lambda b: (b.x - p.x) ** 2 + (b.y - p.y) ** 2)
        for i in range(self.m_bullets):
            if i < len(incoming):
                obs_parts += rel(incoming[i].x, incoming[i].y)
            else:
                obs_parts += [0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self) -> float:
        cfg = self.reward_config
        ev = self.sim.events

        reward = 0.0
        reward += cfg["R_HIT"] * ev.get("hit", 0.0)
        reward += cfg["R_KILL"] * ev.get("kill", 0.0)
        reward -= cfg["R_DAMAGE"] * ev.get("damage", 0.0)
        reward -= cfg["R_SHOT"] * ev.get("shot", 0.0)
        reward -= cfg["R_TIME"]

        if self.sim.game_over:
            reward -= cfg["R_DEATH"]

        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        p = self.sim.player
        return {
            "health": p.health,
            "max_health": p.max_health,
            "exp": p.exp,
            "scale": p.scale,
            "num_enemies": len(self.sim.enemies),
            "num_bullets": len(self.sim.projectiles),
            "kills": self.sim.events.get("kill", 0.0),
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None:
            # Imported lazily so headless training never opens a display
            from .window import ArenaWindow
            self._window = ArenaWindow(self.sim, interactive=False)

        self._window.dispatch_events()
        self._window.on_draw()

        if self.render_mode == "rgb_array":
            return self._window.grab_frame()
        self._window.flip()
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, seed: Optional[int] = 42, frame_delay: float = 1 / 60, **env_kwargs):
    """Run a random episode for testing"""
    env = TankArenaEnv(render_mode="human" if render else None, **env_kwargs)
    obs, info = env.reset(seed=seed)
    env.action_space.seed(seed)

    terminated = False
    truncated = False
    total = 0.0
    kills = 0

    print("Running episode... close the window to stop early.")

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward
        kills += int(info["kills"])

        if render:
            time.sleep(frame_delay)

    print(f"Random episode return: {total:.3f}  steps: {info['step']}  kills: {kills}  exp: {info['exp']:.0f}")

    env.close()
    return total
