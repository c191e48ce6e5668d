#!/usr/bin/env python3
"""
Heart Rate Zones Analytics Module

Five heart rate zones expressed as fractions of heart rate reserve
(Karvonen): ``bpm = resting + fraction * (max - resting)``. The athlete
configuration carrying resting/max HR, sex and zone boundaries is validated
with pydantic before any zone or TRIMP is computed from it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .interface import InvalidParameterError
from ..utils import get_logger

logger = get_logger(__name__)


ZONE_COUNT = 5

ZONE_NAMES = {
    1: "Recovery",
    2: "Aerobic",
    3: "Tempo",
    4: "Threshold",
    5: "VO2 Max",
}


class Sex(str, Enum):
    """Athlete sex, selects the TRIMP weighting exponent"""

    MALE = "male"
    FEMALE = "female"


class ZoneBoundary(BaseModel):
    """One zone as a fraction range of heart rate reserve"""

    min_fraction: float = Field(..., ge=0, le=1, description="Lower bound as fraction of HR reserve")
    max_fraction: float = Field(..., ge=0, le=1, description="Upper bound as fraction of HR reserve")

    model_config = ConfigDict(frozen=True)


DEFAULT_ZONE_BOUNDARIES = (
    ZoneBoundary(min_fraction=0.5, max_fraction=0.6),
    ZoneBoundary(min_fraction=0.6, max_fraction=0.7),
    ZoneBoundary(min_fraction=0.7, max_fraction=0.8),
    ZoneBoundary(min_fraction=0.8, max_fraction=0.9),
    ZoneBoundary(min_fraction=0.9, max_fraction=1.0),
)


class AthleteConfig(BaseModel):
    """Athlete physiology used for zones, TRIMP and power metrics"""

    resting_hr: int = Field(..., gt=0, lt=150, description="Resting heart rate in BPM")
    max_hr: int = Field(..., gt=0, le=250, description="Maximum heart rate in BPM")
    sex: Sex = Field(Sex.MALE, description="Selects TRIMP weighting")
    zone_boundaries: List[ZoneBoundary] = Field(
        default_factory=lambda: list(DEFAULT_ZONE_BOUNDARIES),
        description="Five contiguous zones as fractions of HR reserve"
    )
    ftp: Optional[float] = Field(None, gt=0, description="Functional threshold power in watts")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_physiology(self) -> "AthleteConfig":
        if self.resting_hr >= self.max_hr:
            raise ValueError(
                f"resting_hr ({self.resting_hr}) must be below max_hr ({self.max_hr})"
            )
        if len(self.zone_boundaries) != ZONE_COUNT:
            raise ValueError(f"Expected {ZONE_COUNT} zone boundaries, got {len(self.zone_boundaries)}")

        previous_max = None
        for number, boundary in enumerate(self.zone_boundaries, start=1):
            if boundary.min_fraction >= boundary.max_fraction:
                raise ValueError(f"Zone {number} lower bound must be below its upper bound")
            if previous_max is not None and abs(boundary.min_fraction - previous_max) > 1e-9:
                raise ValueError(f"Zone {number} does not start where zone {number - 1} ends")
            previous_max = boundary.max_fraction
        return self

    @property
    def heart_rate_reserve(self) -> int:
        return self.max_hr - self.resting_hr


@dataclass
class HeartRateZone:
    """Represents a single heart rate training zone"""
    zone_number: int
    zone_name: str
    fraction_range: Tuple[float, float]  # fraction of HR reserve
    heart_rate_range: Tuple[float, float]  # BPM

    def to_dict(self) -> Dict[str, Any]:
        return {
            'zone_number': self.zone_number,
            'zone_name': self.zone_name,
            'fraction_range': self.fraction_range,
            'heart_rate_range': self.heart_rate_range
        }


class HeartRateZoneCalculator:
    """Builds the athlete's five zones and classifies heart rate samples"""

    def __init__(self, athlete: AthleteConfig):
        self.athlete = athlete
        self.zones = self._build_zones()

    def _build_zones(self) -> List[HeartRateZone]:
        reserve = self.athlete.heart_rate_reserve
        resting = self.athlete.resting_hr
        zones = []
        for number, boundary in enumerate(self.athlete.zone_boundaries, start=1):
            zones.append(HeartRateZone(
                zone_number=number,
                zone_name=ZONE_NAMES[number],
                fraction_range=(boundary.min_fraction, boundary.max_fraction),
                heart_rate_range=(
                    resting + boundary.min_fraction * reserve,
                    resting + boundary.max_fraction * reserve
                )
            ))
        return zones

    def classify(self, heart_rate: float) -> int:
        """
        Classify a heart rate into zone 1-5.

        Ranges are lower-inclusive. Heart rates below zone 1 count as zone 1
        and above zone 5 as zone 5.
        """
        if heart_rate is None or heart_rate <= 0:
            raise InvalidParameterError(f"Heart rate must be positive, got {heart_rate}")

        for zone in self.zones[:-1]:
            if heart_rate < zone.heart_rate_range[1]:
                return zone.zone_number
        return self.zones[-1].zone_number

    def reserve_fraction(self, heart_rate: float) -> float:
        """Heart rate as a fraction of reserve, clamped to [0, 1]"""
        fraction = (heart_rate - self.athlete.resting_hr) / self.athlete.heart_rate_reserve
        return min(1.0, max(0.0, fraction))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'resting_hr': self.athlete.resting_hr,
            'max_hr': self.athlete.max_hr,
            'zones': [z.to_dict() for z in self.zones]
        }
