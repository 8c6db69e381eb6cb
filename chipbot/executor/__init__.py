"""Executor exports."""

from .runner import EpisodeResult, EpisodeRunner

__all__ = [
    "EpisodeResult",
    "EpisodeRunner",
]
