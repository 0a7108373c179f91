"""Tank arena - top-down tank shooter simulation with a Gymnasium wrapper"""

from .entities import Combatant, Projectile, Controls, Role, ArenaSnapshot
from .simulation import ArenaSimulation
from .arena_env import TankArenaEnv, run_random_episode

__all__ = [
    'Combatant', 'Projectile', 'Controls', 'Role', 'ArenaSnapshot',
    'ArenaSimulation', 'TankArenaEnv', 'run_random_episode',
]
