#!/usr/bin/env python3
"""
Activity Service - High-level pipeline from FIT bytes to training load

Chains the FIT decoder, the activity aggregator and one athlete's load
tracker: each decoded activity's training load is applied to the tracker in
date order, and readiness or a training summary can be requested at any
point.
"""

import time
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from ..analytics.heart_rate_zones import AthleteConfig
from ..analytics.interface import DateLike, NonChronologicalSample
from ..analytics.load import LoadState, LoadTracker, ReadinessMetrics, RecoveryInputs
from ..analytics.summary import TrainingSummary, TrainingSummaryCalculator
from ..config import AggregatorSettings, DecoderSettings, ReadinessSettings, get_readiness_settings
from ..processors.activity import ActivityAggregator, ActivityMetrics, AggregationResult
from ..processors.binary_reader import BytesLike
from ..processors.fit_decoder import DecodeResult, FitDecoder
from ..processors.interface import FitHeaderError, ProcessingStatus
from ..utils import get_logger

logger = get_logger(__name__)


@dataclass
class ActivityProcessingResult:
    """Outcome of processing one FIT buffer"""
    status: ProcessingStatus
    decode_result: Optional[DecodeResult] = None
    aggregation: Optional[AggregationResult] = None
    load_state: Optional[LoadState] = None
    applied_activities: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    processing_time: Optional[float] = None

    @property
    def activities(self) -> List[ActivityMetrics]:
        return self.aggregation.activities if self.aggregation else []

    def add_error(self, error: str):
        """Add error"""
        self.errors.append(error)

    def add_warning(self, warning: str):
        """Add warning"""
        self.warnings.append(warning)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status.value,
            'activities': [a.to_dict() for a in self.activities],
            'laps': [lap.to_dict() for lap in self.aggregation.laps] if self.aggregation else [],
            'load_state': self.load_state.to_dict() if self.load_state else None,
            'applied_activities': list(self.applied_activities),
            'errors': list(self.errors),
            'warnings': list(self.warnings),
            'processing_time': self.processing_time
        }


class ActivityService:
    """Processes one athlete's FIT files into activities and a rolling load state"""

    def __init__(self, athlete: Optional[AthleteConfig] = None,
                 tracker: Optional[LoadTracker] = None,
                 decoder_settings: Optional[DecoderSettings] = None,
                 aggregator_settings: Optional[AggregatorSettings] = None,
                 readiness_settings: Optional[ReadinessSettings] = None):
        """
        Initialize activity service

        Args:
            athlete: Athlete configuration; without it activities are unscored
            tracker: Existing load tracker to continue; a new one by default
            decoder_settings: FIT decoder configuration override
            aggregator_settings: Aggregation configuration override
            readiness_settings: Readiness policy override
        """
        self.athlete = athlete
        self.readiness_settings = readiness_settings or get_readiness_settings()
        self.tracker = tracker or LoadTracker(self.readiness_settings.history_days)
        self.decoder_settings = decoder_settings
        self.aggregator = ActivityAggregator(athlete, aggregator_settings)
        self.activities: List[ActivityMetrics] = []

    def process_fit_bytes(self, buffer: BytesLike,
                          activity_id: Optional[str] = None) -> ActivityProcessingResult:
        """
        Decode, aggregate and apply one FIT buffer

        Args:
            buffer: Complete FIT file contents
            activity_id: Identifier for the decoded activity; derived from the start time when omitted

        Returns:
            ActivityProcessingResult; header failures give status FAILED and no activities
        """
        start_time = time.time()
        result = ActivityProcessingResult(status=ProcessingStatus.PROCESSING)
        logger.info(f"📥 Processing FIT buffer ({len(buffer)} bytes)")

        try:
            decoded = FitDecoder(buffer, self.decoder_settings).decode()
        except FitHeaderError as e:
            logger.error(f"❌ FIT file rejected: {e}")
            result.add_error(f"FIT file rejected: {e}")
            result.status = ProcessingStatus.FAILED
            result.processing_time = time.time() - start_time
            return result

        result.decode_result = decoded
        result.warnings.extend(decoded.warnings)

        aggregation = self.aggregator.aggregate(decoded.messages, activity_id)
        result.aggregation = aggregation
        result.warnings.extend(aggregation.warnings)

        self._apply_loads(aggregation.activities, result)
        self.activities.extend(aggregation.activities)
        self._prune_activities()
        result.load_state = self.tracker.snapshot()

        if not aggregation.activities:
            result.add_warning("No activities found in FIT file")
        if result.errors:
            result.status = ProcessingStatus.PARTIALLY_COMPLETED
        else:
            result.status = ProcessingStatus.COMPLETED

        result.processing_time = time.time() - start_time
        state = result.load_state
        logger.info(
            f"✅ Processed {len(aggregation.activities)} activities "
            f"(ATL {state.atl:.1f}, CTL {state.ctl:.1f}, TSB {state.tsb:.1f})"
        )
        return result

    def _apply_loads(self, activities: List[ActivityMetrics], result: ActivityProcessingResult):
        """Sum same-day loads and merge them into the tracker in date order"""
        daily: Dict[date, float] = {}
        ids_by_date: Dict[date, List[str]] = {}
        for activity in activities:
            for problem in activity.validate():
                result.add_warning(f"{activity.activity_id}: {problem}")

            if activity.date is None or activity.training_load is None:
                result.add_warning(f"{activity.activity_id}: no training load applied (unscored or undated)")
                continue
            daily[activity.date] = daily.get(activity.date, 0.0) + activity.training_load
            ids_by_date.setdefault(activity.date, []).append(activity.activity_id)

        for day in sorted(daily):
            if self.tracker.last_date == day:
                logger.info(f"➕ Adding {daily[day]:.1f} to the load already applied for {day}")
            try:
                self.tracker.merge(day, daily[day])
            except NonChronologicalSample as e:
                logger.warning(f"⚠️ Skipping stale activity load: {e}")
                result.add_error(f"Stale activity load not applied: {e}")
                continue
            result.applied_activities.extend(ids_by_date[day])

    def _prune_activities(self):
        """Drop dated activities older than the configured history"""
        history_days = self.readiness_settings.history_days
        last = self.tracker.last_date
        if history_days is None or last is None:
            return
        cutoff = last - timedelta(days=history_days)
        self.activities = [a for a in self.activities if a.date is None or a.date > cutoff]

    def readiness(self, as_of: Optional[DateLike] = None,
                  recovery: Optional[RecoveryInputs] = None,
                  race_date: Optional[DateLike] = None) -> ReadinessMetrics:
        """Readiness from the tracker's load history"""
        return self.tracker.readiness(as_of, recovery, race_date, self.readiness_settings)

    def summary(self, reference_date: DateLike) -> TrainingSummary:
        """Training summary over every activity processed so far"""
        return TrainingSummaryCalculator(self.activities).calculate(reference_date)
