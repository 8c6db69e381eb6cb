"""Policy exports."""

from .nav_planner import NavPlanner, NavPlannerConfig
from .robot import Robot

__all__ = [
    "NavPlanner",
    "NavPlannerConfig",
    "Robot",
]
