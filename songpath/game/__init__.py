"""Game-side consumers of the analysis: ideal path, sync scoring, frame clock."""

from songpath.game.clock import GameClock
from songpath.game.path_generator import generate_ideal_path, generate_path
from songpath.game.sync_tracker import SyncTracker

__all__ = [
    "GameClock",
    "generate_ideal_path",
    "generate_path",
    "SyncTracker",
]
