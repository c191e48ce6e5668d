#!/usr/bin/env python3
"""
Training Impulse (TRIMP) Algorithm Implementation

Banister's TRIMP weights session duration by the fraction of heart rate
reserve the athlete worked at, with an exponential factor that differs
between sexes:

- r = (avg HR - resting HR) / (max HR - resting HR), clamped to [0, 1]
- TRIMP = duration (min) × r × e^(k·r)
- k = 1.92 (male), 1.67 (female)

Sessions without heart rate fall back to a flat per-minute rate and are
flagged low confidence.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np

from .heart_rate_zones import AthleteConfig, Sex
from .interface import InvalidParameterError
from ..config import get_aggregator_settings
from ..utils import get_logger


logger = get_logger(__name__)


SEX_WEIGHTING = {
    Sex.MALE: 1.92,
    Sex.FEMALE: 1.67,
}


@dataclass
class TRIMPResult:
    """Training load for one session and how it was obtained"""
    training_load: float
    method: str
    intensity_ratio: Optional[float] = None
    low_confidence: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'training_load': round(self.training_load, 1),
            'method': self.method,
            'intensity_ratio': self.intensity_ratio,
            'low_confidence': self.low_confidence
        }


class TRIMPCalculator:
    """Banister TRIMP calculator for one athlete"""

    def __init__(self, athlete: AthleteConfig, fallback_load_per_minute: Optional[float] = None):
        self.athlete = athlete
        if fallback_load_per_minute is None:
            fallback_load_per_minute = get_aggregator_settings().fallback_load_per_minute
        self.fallback_load_per_minute = fallback_load_per_minute

    @property
    def weighting(self) -> float:
        return SEX_WEIGHTING[self.athlete.sex]

    def intensity_ratio(self, avg_hr: float) -> float:
        """Fraction of heart rate reserve, clamped to [0, 1]"""
        ratio = (avg_hr - self.athlete.resting_hr) / self.athlete.heart_rate_reserve
        return float(np.clip(ratio, 0.0, 1.0))

    def calculate(self, duration_min: float, avg_hr: Optional[float] = None) -> TRIMPResult:
        """
        Calculate TRIMP for a session

        Args:
            duration_min: Session duration in minutes
            avg_hr: Average heart rate in BPM, None when not recorded

        Returns:
            TRIMPResult; heart-rate based when avg_hr is given, otherwise the
            duration fallback flagged low confidence
        """
        if duration_min is None or duration_min < 0:
            raise InvalidParameterError(f"Duration must be non-negative, got {duration_min}")

        if avg_hr is None:
            load = duration_min * self.fallback_load_per_minute
            logger.debug(f"No average HR, duration fallback load {load:.1f}")
            return TRIMPResult(training_load=load, method="duration_fallback", low_confidence=True)

        ratio = self.intensity_ratio(avg_hr)
        load = float(duration_min * ratio * np.exp(self.weighting * ratio))
        return TRIMPResult(training_load=load, method="heart_rate", intensity_ratio=ratio)
