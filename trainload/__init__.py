#!/usr/bin/env python3
"""
trainload - FIT activity decoding and training-load analytics
Decodes FIT files, aggregates activities and laps, and tracks ATL/CTL/TSB
and readiness for one athlete.
"""

# Setup logging first
from .utils import setup_trainload_logging
setup_trainload_logging()

# Decoding and aggregation
from .processors import (
    FitDecoder, DecodeResult, DecodedMessage, FitHeader, decode_fit,
    ActivityAggregator, ActivityMetrics, LapMetrics, AggregationResult,
    FitDecodeError, FitHeaderError, InvalidSignature, BufferTooShort, InvalidHeader
)

# Analytics
from .analytics import (
    AthleteConfig, Sex, ZoneBoundary, HeartRateZoneCalculator, TRIMPCalculator,
    LoadState, LoadTracker, ReadinessMetrics, RecoveryInputs,
    TrainingSummaryCalculator, NonChronologicalSample
)

# Services
from .services import ActivityService, ActivityProcessingResult

__version__ = "0.1.0"

__all__ = [
    # Decoding
    'FitDecoder', 'DecodeResult', 'DecodedMessage', 'FitHeader', 'decode_fit',
    'FitDecodeError', 'FitHeaderError', 'InvalidSignature', 'BufferTooShort', 'InvalidHeader',

    # Aggregation
    'ActivityAggregator', 'ActivityMetrics', 'LapMetrics', 'AggregationResult',

    # Analytics
    'AthleteConfig', 'Sex', 'ZoneBoundary', 'HeartRateZoneCalculator', 'TRIMPCalculator',
    'LoadState', 'LoadTracker', 'ReadinessMetrics', 'RecoveryInputs',
    'TrainingSummaryCalculator', 'NonChronologicalSample',

    # Services
    'ActivityService', 'ActivityProcessingResult',
]
