"""
Command line entry point

    python -m tank_arena play            # keyboard play in an Arcade window
    python -m tank_arena random          # one random-agent episode
    python -m tank_arena random --no-render --seed 7
    python -m tank_arena random --reward survival --max-steps 600
"""

import argparse
import logging

from .configs.arena_config import ARENA_CONFIG, ENV_CONFIG, REWARD_CONFIGS


def main(argv=None):
    parser = argparse.ArgumentParser(description="Tank arena")
    parser.add_argument("mode", choices=["play", "random"], help="Play with the keyboard or run a random agent")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=int, default=ARENA_CONFIG["width"], help="Arena width")
    parser.add_argument("--height", type=int, default=ARENA_CONFIG["height"], help="Arena height")
    parser.add_argument("--no-render", action="store_true", help="Run the random agent headless")
    parser.add_argument("--reward", choices=sorted(REWARD_CONFIGS), default="baseline",
                        help="Reward shaping preset for the random agent")
    parser.add_argument("--max-steps", type=int, default=ENV_CONFIG["max_steps"], help="Episode length limit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log spawns and kills")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.mode == "play":
        from .window import play
        play(seed=args.seed, width=args.width, height=args.height)
    else:
        from .arena_env import run_random_episode
        run_random_episode(render=not args.no_render, seed=args.seed,
                           width=args.width, height=args.height,
                           max_steps=args.max_steps,
                           reward_config=REWARD_CONFIGS[args.reward])


if __name__ == "__main__":
    main()
