"""Entry-point for running the robot on a level file."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, List, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from chipbot.env import EnvConfig, GridEnv
from chipbot.executor import EpisodeRunner
from chipbot.policy import NavPlanner, NavPlannerConfig, Robot

LOGGER = logging.getLogger("chipbot")


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Key/chip collecting grid robot")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to YAML config (defaults to $CHIPBOT_CONFIG, then configs/default.yaml)",
    )
    parser.add_argument(
        "--map",
        type=Path,
        default=None,
        help="Override level file from config",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Override tick budget from config (>=1)",
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Log the ASCII map after every tick",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Python logging level (defaults to config log_level)",
    )
    return parser.parse_args(argv)


def load_config(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def build_env(cfg: dict[str, Any], args: argparse.Namespace) -> GridEnv:
    env_cfg = cfg.get("env", {})
    map_path = Path(args.map) if args.map else Path(env_cfg.get("map", "maps/level1.txt"))
    max_steps = args.max_steps if args.max_steps is not None else env_cfg.get("max_steps", 500)
    return GridEnv.from_file(map_path, EnvConfig(max_steps=int(max_steps)))


def build_nav_planner(cfg: dict[str, Any]) -> NavPlanner:
    nav_cfg = cfg.get("nav_planner", {})
    max_expansions = nav_cfg.get("max_expansions")
    config = NavPlannerConfig(
        max_expansions=int(max_expansions) if max_expansions else None,
        block_locked_doors=bool(nav_cfg.get("block_locked_doors", True)),
    )
    return NavPlanner(config)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(find_dotenv(usecwd=True))
    args = _parse_args(argv)
    config_path = args.config or Path(os.environ.get("CHIPBOT_CONFIG", "configs/default.yaml"))
    cfg = load_config(config_path)
    level = args.log_level or str(cfg.get("log_level", "INFO"))
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO))
    env = build_env(cfg, args)
    LOGGER.info("Loaded %sx%s level\n%s", env.shape[0], env.shape[1], env.render())
    robot = Robot(env, build_nav_planner(cfg))
    run_cfg = cfg.get("runner", {})
    runner = EpisodeRunner(
        env,
        robot,
        stall_limit=int(run_cfg.get("stall_limit", 8)),
        render=args.render or bool(run_cfg.get("render", False)),
    )
    result = runner.run()
    LOGGER.info(
        "solved=%s steps=%s keys=%s stalled=%s",
        result.solved,
        result.steps,
        sorted(color.value for color in result.collected_keys),
        result.stalled,
    )
    LOGGER.info("Final map\n%s", env.render())
    return 0 if result.solved else 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
