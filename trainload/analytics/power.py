#!/usr/bin/env python3
"""
Power analysis

Normalized Power uses a 30-second rolling average raised to the fourth
power:

- NP = (mean of (30-sec rolling power)^4)^(1/4)
- IF = NP / FTP
- TSS = (seconds × NP × IF) / (FTP × 3600) × 100

Samples are assumed to be recorded at 1 Hz, as FIT record messages are on
most devices.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import numpy as np

from .interface import InsufficientDataError, InvalidParameterError
from ..utils import get_logger


logger = get_logger(__name__)


ROLLING_WINDOW_S = 30


@dataclass(frozen=True)
class PowerAnalysis:
    """Power summary for one activity"""
    avg_power: float
    max_power: float
    normalized_power: float
    intensity_factor: Optional[float] = None
    training_stress_score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'avg_power': round(self.avg_power, 1),
            'max_power': self.max_power,
            'normalized_power': round(self.normalized_power, 1),
            'intensity_factor': round(self.intensity_factor, 3) if self.intensity_factor is not None else None,
            'training_stress_score': (
                round(self.training_stress_score, 1) if self.training_stress_score is not None else None
            )
        }


class PowerCalculator:
    """Power metrics, with FTP-relative metrics when an FTP is known"""

    def __init__(self, ftp: Optional[float] = None):
        if ftp is not None and ftp <= 0:
            raise InvalidParameterError(f"FTP must be positive, got {ftp}")
        self.ftp = ftp

    @staticmethod
    def normalized_power(power_data: Sequence[float]) -> float:
        """
        Calculate Normalized Power (NP) using 30-second rolling average
        NP = (average of (30-sec power)^4)^(1/4)
        """
        powers = np.asarray(power_data, dtype=float)
        if powers.size == 0:
            return 0.0
        if powers.size < ROLLING_WINDOW_S:
            return float(np.mean(powers))

        window = np.ones(ROLLING_WINDOW_S) / ROLLING_WINDOW_S
        rolling = np.convolve(powers, window, mode='valid')
        return float(np.mean(rolling ** 4) ** 0.25)

    def analyze(self, power_data: Sequence[float],
                duration_seconds: Optional[float] = None) -> PowerAnalysis:
        """
        Analyze power samples

        Args:
            power_data: Power samples in watts (1 Hz)
            duration_seconds: Moving time; defaults to the sample count

        Returns:
            PowerAnalysis; intensity factor and TSS only when FTP is set
        """
        samples = [p for p in power_data if p is not None]
        if not samples:
            raise InsufficientDataError("No power data available for power analysis")

        normalized = self.normalized_power(samples)
        intensity_factor = None
        tss = None
        if self.ftp:
            seconds = duration_seconds if duration_seconds is not None else len(samples)
            intensity_factor = normalized / self.ftp
            tss = (seconds * normalized * intensity_factor) / (self.ftp * 3600) * 100

        return PowerAnalysis(
            avg_power=float(np.mean(samples)),
            max_power=float(np.max(samples)),
            normalized_power=normalized,
            intensity_factor=intensity_factor,
            training_stress_score=tss
        )
