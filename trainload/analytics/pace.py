#!/usr/bin/env python3
"""
Pace analysis for speed-based sports

Converts device speed samples (m/s) into running-style pace (min/km) and
summarizes them: average and best pace, pace variability (coefficient of
variation) and whether the second half was faster than the first.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import numpy as np

from ..utils import get_logger


logger = get_logger(__name__)


# Below this speed (m/s) a sample is treated as standing still
MIN_MOVING_SPEED = 0.5


@dataclass(frozen=True)
class PaceAnalysis:
    """Pace summary for one activity"""
    avg_pace: float  # min/km
    best_pace: float  # min/km
    pace_variability: float  # coefficient of variation of pace
    negative_split: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            'avg_pace': round(self.avg_pace, 2),
            'avg_pace_formatted': PaceCalculator.format_pace(self.avg_pace),
            'best_pace': round(self.best_pace, 2),
            'best_pace_formatted': PaceCalculator.format_pace(self.best_pace),
            'pace_variability': round(self.pace_variability, 3),
            'negative_split': self.negative_split
        }


class PaceCalculator:
    """Pace conversions and per-activity pace analysis"""

    @staticmethod
    def speed_to_pace_per_km(speed_ms: float) -> float:
        """
        Convert speed in m/s to pace in minutes per kilometer

        Args:
            speed_ms: Speed in meters per second

        Returns:
            Pace in minutes per kilometer
        """
        if speed_ms <= 0:
            return float('inf')

        # 1 m/s = 3.6 km/h; pace (min/km) = 60 / speed (km/h)
        speed_kmh = speed_ms * 3.6
        return 60.0 / speed_kmh

    @staticmethod
    def pace_per_km_to_speed(pace_min_per_km: float) -> float:
        """Convert pace in minutes per kilometer to speed in m/s"""
        if pace_min_per_km <= 0:
            return 0.0

        speed_kmh = 60.0 / pace_min_per_km
        return speed_kmh / 3.6

    @staticmethod
    def format_pace(pace_min_per_km: float) -> str:
        """
        Format pace as MM:SS per km

        Args:
            pace_min_per_km: Pace in minutes per kilometer

        Returns:
            Formatted pace string (e.g., "4:30")
        """
        if pace_min_per_km == float('inf'):
            return "∞:∞"

        minutes = int(pace_min_per_km)
        seconds = int(round((pace_min_per_km - minutes) * 60))
        if seconds == 60:
            minutes, seconds = minutes + 1, 0
        return f"{minutes}:{seconds:02d}"

    @staticmethod
    def pace_from_totals(distance_km: float, duration_min: float) -> Optional[float]:
        """Average pace from total distance and duration, None without distance"""
        if not distance_km or distance_km <= 0 or duration_min <= 0:
            return None
        return duration_min / distance_km

    def analyze(self, speeds_ms: Sequence[float]) -> Optional[PaceAnalysis]:
        """
        Analyze pace from speed samples

        Args:
            speeds_ms: Speed samples in m/s, in time order

        Returns:
            PaceAnalysis, or None when there are no moving samples
        """
        speeds = np.asarray([s for s in speeds_ms if s is not None], dtype=float)
        moving = speeds[speeds >= MIN_MOVING_SPEED]
        if moving.size == 0:
            return None

        paces = 60.0 / (moving * 3.6)
        mean_pace = float(np.mean(paces))
        variability = float(np.std(paces) / mean_pace) if mean_pace > 0 else 0.0

        half = moving.size // 2
        negative_split = bool(half > 0 and np.mean(moving[half:]) > np.mean(moving[:half]))

        return PaceAnalysis(
            avg_pace=self.speed_to_pace_per_km(float(np.mean(moving))),
            best_pace=self.speed_to_pace_per_km(float(np.max(moving))),
            pace_variability=variability,
            negative_split=negative_split
        )
