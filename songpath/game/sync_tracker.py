"""Scores how closely the player's orb follows the ideal path."""

from __future__ import annotations

import math

from songpath.analysis.models import PathPoint, Vec3
from songpath.config import Settings, settings
from songpath.game.mathutil import clamp, ema

RATINGS = (
    (95, "Perfect Harmony"),
    (80, "In the Flow"),
    (60, "Drifting"),
    (40, "Lost in Space"),
)
LOWEST_RATING = "Static"


class SyncTracker:
    """Per-session sync state, updated once per frame.

    ``raw_sync`` is this frame's closeness (0-1), ``display_sync`` its
    exponential moving average for the HUD. Score samples are taken every
    ``sample_interval`` seconds of song time. Call :meth:`reset` before every
    playback, replays included.
    """

    def __init__(
        self,
        max_distance: float = 15.0,
        ema_alpha: float = 0.05,
        sample_interval: float = 0.1,
        max_lookback: float = 0.5,
    ):
        self.max_distance = max_distance
        self.ema_alpha = ema_alpha
        self.sample_interval = sample_interval
        self.max_lookback = max_lookback
        self.reset()

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> SyncTracker:
        """Build a tracker with the sync tuning from the app settings."""
        config = config or settings
        return cls(
            max_distance=config.sync_max_distance,
            ema_alpha=config.sync_ema_alpha,
            sample_interval=config.score_sample_interval,
        )

    def reset(self) -> None:
        self.raw_sync = 1.0
        self.display_sync = 1.0
        self.score_samples: list[float] = []
        self.last_sample_time = 0.0
        self.cursor = 0

    def update(self, position: Vec3, path: list[PathPoint], time: float, dt: float) -> None:
        """Score the orb ``position`` against the path at song ``time``.

        ``dt`` is the (capped) frame delta; scoring is driven by song time.
        Missing path data or a non-finite distance counts as perfect sync.
        """
        reference = self.get_ideal_position(path, time) if path else None
        distance = math.nan
        if reference is not None:
            distance = math.hypot(position.x - reference.x, position.y - reference.y)

        if not math.isfinite(distance):
            self.raw_sync = 1.0
            self.display_sync = ema(1.0, self.display_sync, self.ema_alpha)
            return

        self.raw_sync = clamp(1.0 - distance / self.max_distance, 0.0, 1.0)
        self.display_sync = ema(self.raw_sync, self.display_sync, self.ema_alpha)

        if time - self.last_sample_time >= self.sample_interval:
            self.score_samples.append(self.raw_sync)
            self.last_sample_time = time

    def get_ideal_position(self, path: list[PathPoint], time: float) -> Vec3 | None:
        """Interpolated path position at ``time``, moving the search cursor."""
        if not path:
            return None

        idx = min(self.cursor, len(path) - 1)
        while idx < len(path) - 1 and path[idx + 1].time <= time:
            idx += 1
        # small time reversals are tolerated, larger ones walk back
        while idx > 0 and path[idx].time > time + self.max_lookback:
            idx -= 1
        self.cursor = idx

        if idx >= len(path) - 1:
            return path[-1].position

        p0, p1 = path[idx], path[idx + 1]
        span = p1.time - p0.time
        if span <= 0:
            return p0.position
        t = clamp((time - p0.time) / span, 0.0, 1.0)
        return p0.position.lerp(p1.position, t)

    def get_final_score(self) -> int:
        """Mean of the score samples as a 0-100 percentage (100 with no samples)."""
        if not self.score_samples:
            return 100
        avg = sum(self.score_samples) / len(self.score_samples)
        return int(math.floor(avg * 100 + 0.5))

    @staticmethod
    def get_rating(score: float) -> str:
        for threshold, label in RATINGS:
            if score >= threshold:
                return label
        return LOWEST_RATING
