"""Configuration presets for the tank arena"""

from .arena_config import (
    ARENA_CONFIG,
    TANK_CONFIG,
    BULLET_CONFIG,
    ENV_CONFIG,
    REWARD_CONFIGS,
    REWARD_CONFIG_BASELINE,
)

__all__ = [
    'ARENA_CONFIG', 'TANK_CONFIG', 'BULLET_CONFIG', 'ENV_CONFIG',
    'REWARD_CONFIGS', 'REWARD_CONFIG_BASELINE',
]
