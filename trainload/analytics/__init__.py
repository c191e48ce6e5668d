#!/usr/bin/env python3
"""
Analytics - heart rate zones, TRIMP, pace/power analysis and training load
"""

from .interface import (
    AnalyticsError, InsufficientDataError, InvalidParameterError, NonChronologicalSample
)

from .heart_rate_zones import (
    Sex, ZoneBoundary, AthleteConfig, HeartRateZone, HeartRateZoneCalculator,
    DEFAULT_ZONE_BOUNDARIES
)

from .trimp import TRIMPCalculator, TRIMPResult

from .pace import PaceAnalysis, PaceCalculator

from .power import PowerAnalysis, PowerCalculator

from .load import (
    LoadState, LoadSample, LoadTracker,
    RecoveryInputs, ReadinessMetrics, ReadinessCalculator
)

from .summary import TrainingSummary, TrainingSummaryCalculator

__all__ = [
    # Exceptions
    'AnalyticsError', 'InsufficientDataError', 'InvalidParameterError', 'NonChronologicalSample',

    # Heart Rate Zones
    'Sex', 'ZoneBoundary', 'AthleteConfig', 'HeartRateZone', 'HeartRateZoneCalculator',
    'DEFAULT_ZONE_BOUNDARIES',

    # Training impulse
    'TRIMPCalculator', 'TRIMPResult',

    # Pace and power
    'PaceAnalysis', 'PaceCalculator',
    'PowerAnalysis', 'PowerCalculator',

    # Training load and readiness
    'LoadState', 'LoadSample', 'LoadTracker',
    'RecoveryInputs', 'ReadinessMetrics', 'ReadinessCalculator',

    # Summary
    'TrainingSummary', 'TrainingSummaryCalculator',
]
