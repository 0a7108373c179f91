"""
Gameplay configuration for the tank arena
Arena constants, environment settings and reward shaping presets
"""

# Arena / simulation parameters (time values are milliseconds)
ARENA_CONFIG = {
    "width": 800,
    "height": 600,
    "spawn_interval": 3000.0,    # enemy spawn period
    "spawn_margin": 50.0,        # how far outside the bounds enemies appear
    "max_spawn_exp": 5000,       # enemies start with exp in [0, max_spawn_exp)
    "enemy_hit_damage": 5.0,     # damage an enemy bullet deals to the player
    "player_hit_damage": 25.0,   # multiplied by the player's scale
    "kill_heal_fraction": 0.5,   # fraction of the victim's max health restored
}

# Combatant parameters
TANK_CONFIG = {
    "base_size": 40.0,
    "base_health": 100.0,
    "speed": 3.0,                # units per tick
    "turret_turn_rate": 0.05,    # radians per tick
    "reload_time": 500.0,
    "enemy_reload_jitter": 1000.0,
    "exp_per_scale": 1000.0,
    "max_scale": 3.0,
    "barrel_length": 35.0,
    "barrel_width": 10.0,
    "turret_radius": 15.0,
    "engagement_radius": 500.0,
    "stop_distance": 200.0,
    "enemy_speed_factor": 0.5,
}

# Projectile parameters
BULLET_CONFIG = {
    "speed": 10.0,               # units per tick
    "base_radius": 5.0,          # multiplied by the firer's scale
}

# Gymnasium environment parameters
ENV_CONFIG = {
    # "render_mode": None,
    "frame_ms": 1000 / 60,
    "max_steps": 3600,           # 60 seconds at 60 FPS
    "k_enemies": 5,
    "m_bullets": 5,
}

# ==============================================================================
# REWARD SHAPING CONFIGURATIONS
# ==============================================================================

# Balanced
REWARD_CONFIG_BASELINE = {
    "name": "baseline",
    "description": "Balanced reward shaping",
    "R_HIT": 0.3,        # Reward for hitting enemy
    "R_KILL": 1.0,       # Reward for killing enemy
    "R_DAMAGE": 0.05,    # Penalty per point of damage taken
    "R_SHOT": 0.01,      # Penalty for shooting
    "R_TIME": 0.001,     # Small time penalty
    "R_DEATH": 5.0,      # Death penalty
}

# Prioritize staying alive and dodging
REWARD_CONFIG_SURVIVAL = {
    "name": "survival",
    "description": "Higher damage/death penalties, lower combat rewards",
    "R_HIT": 0.1,
    "R_KILL": 0.5,
    "R_DAMAGE": 0.15,
    "R_SHOT": 0.02,
    "R_TIME": 0.0,
    "R_DEATH": 10.0,
}

# Prioritize kills and growth
REWARD_CONFIG_AGGRESSIVE = {
    "name": "aggressive",
    "description": "Higher combat rewards, lower penalties",
    "R_HIT": 0.5,
    "R_KILL": 2.0,
    "R_DAMAGE": 0.02,
    "R_SHOT": 0.005,
    "R_TIME": 0.002,
    "R_DEATH": 3.0,
}

REWARD_CONFIGS = {
    "baseline": REWARD_CONFIG_BASELINE,
    "survival": REWARD_CONFIG_SURVIVAL,
    "aggressive": REWARD_CONFIG_AGGRESSIVE,
}
