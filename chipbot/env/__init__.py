"""Environment exports."""

from .grid_env import EnvConfig, GridEnv

__all__ = ["EnvConfig", "GridEnv"]
