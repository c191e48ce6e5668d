#!/usr/bin/env python3
"""
Training summary over a list of activities

Weekly zone distribution and load, load trend, training streaks, HR drift
trend, week-over-week volume change, fatigue risk and injury-risk factors,
all relative to an explicit reference date.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import TYPE_CHECKING, Any, Dict, List, Sequence

import numpy as np

from .heart_rate_zones import ZONE_COUNT
from .interface import DateLike, to_date
from ..utils import get_logger

if TYPE_CHECKING:
    from ..processors.activity import ActivityMetrics


logger = get_logger(__name__)


TREND_THRESHOLD_PCT = 15
TREND_MIN_ACTIVITIES = 14
DRIFT_TREND_WINDOW = 3
DRIFT_TREND_MARGIN = 2
VOLUME_JUMP_PCT = 25
HIGH_WEEKLY_LOAD = 500
MAX_DAYS_WITHOUT_REST = 6
HIGH_INTENSITY_RATIO = 0.3


@dataclass
class TrainingSummary:
    """Aggregate view of recent training"""
    reference_date: date
    weekly_training_load: float
    weekly_zone_distribution: Dict[str, float]
    training_load_trend: str
    current_streak: int
    longest_streak: int
    hr_drift_trend: str
    volume_change_percent: float
    fatigue_risk: str
    injury_risk_factors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'reference_date': self.reference_date.isoformat(),
            'weekly_training_load': round(self.weekly_training_load, 1),
            'weekly_zone_distribution': {k: round(v, 1) for k, v in self.weekly_zone_distribution.items()},
            'training_load_trend': self.training_load_trend,
            'current_streak': self.current_streak,
            'longest_streak': self.longest_streak,
            'hr_drift_trend': self.hr_drift_trend,
            'volume_change_percent': round(self.volume_change_percent, 1),
            'fatigue_risk': self.fatigue_risk,
            'injury_risk_factors': list(self.injury_risk_factors)
        }


def _load(activity: "ActivityMetrics") -> float:
    return activity.training_load or 0.0


def _high_intensity_minutes(activity: "ActivityMetrics") -> float:
    if activity.zone_minutes is None:
        return 0.0
    return activity.zone_minutes[3] + activity.zone_minutes[4]


class TrainingSummaryCalculator:
    """Summarizes ActivityMetrics relative to a reference date"""

    def __init__(self, activities: Sequence["ActivityMetrics"]):
        dated = [a for a in activities if a.date is not None]
        self.activities = sorted(dated, key=lambda a: (a.date, a.start_time is None, a.start_time))

    def between(self, start: date, end: date) -> List["ActivityMetrics"]:
        """Activities with start <= date <= end"""
        return [a for a in self.activities if start <= a.date <= end]

    def recent(self, reference: date, days: int = 7) -> List["ActivityMetrics"]:
        return self.between(reference - timedelta(days=days - 1), reference)

    def calculate(self, reference_date: DateLike) -> TrainingSummary:
        reference = to_date(reference_date)
        week_start = reference - timedelta(days=reference.weekday())
        current_week = self.between(week_start, week_start + timedelta(days=6))
        previous_week = self.between(week_start - timedelta(days=7), week_start - timedelta(days=1))

        summary = TrainingSummary(
            reference_date=reference,
            weekly_training_load=sum(_load(a) for a in current_week),
            weekly_zone_distribution=self.zone_distribution(current_week),
            training_load_trend=self.training_load_trend(reference),
            current_streak=self.current_streak(reference),
            longest_streak=self.longest_streak(),
            hr_drift_trend=self.hr_drift_trend(reference),
            volume_change_percent=self.volume_change(current_week, previous_week),
            fatigue_risk=self.fatigue_risk(reference),
            injury_risk_factors=self.injury_risk_factors(reference)
        )
        logger.debug(
            f"Training summary for {reference}: load {summary.weekly_training_load:.1f}, "
            f"trend {summary.training_load_trend}, fatigue {summary.fatigue_risk}"
        )
        return summary

    @staticmethod
    def zone_distribution(activities: Sequence["ActivityMetrics"]) -> Dict[str, float]:
        totals = {f"zone{n}": 0.0 for n in range(1, ZONE_COUNT + 1)}
        for activity in activities:
            if activity.zone_minutes is None:
                continue
            for number, minutes in enumerate(activity.zone_minutes, start=1):
                totals[f"zone{number}"] += minutes
        return totals

    def training_load_trend(self, reference: date) -> str:
        """Week-over-week load change beyond ±15 %; needs two weeks of activities"""
        if len(self.activities) < TREND_MIN_ACTIVITIES:
            return "stable"

        last_week = sum(_load(a) for a in self.recent(reference))
        week_before = sum(_load(a) for a in self.between(
            reference - timedelta(days=13), reference - timedelta(days=7)
        ))
        change = (last_week - week_before) / week_before * 100 if week_before > 0 else 0.0

        if change > TREND_THRESHOLD_PCT:
            return "increasing"
        if change < -TREND_THRESHOLD_PCT:
            return "decreasing"
        return "stable"

    def _training_days(self) -> List[date]:
        return sorted({a.date for a in self.activities})

    def current_streak(self, reference: date) -> int:
        """Consecutive training days ending at the reference date"""
        days = set(self._training_days())
        streak = 0
        day = reference
        while day in days:
            streak += 1
            day -= timedelta(days=1)
        return streak

    def longest_streak(self) -> int:
        days = self._training_days()
        if not days:
            return 0

        longest = current = 1
        for previous, day in zip(days, days[1:]):
            if (day - previous).days == 1:
                current += 1
            else:
                current = 1
            longest = max(longest, current)
        return longest

    def hr_drift_trend(self, reference: date) -> str:
        """Compare mean drift of the last three activities with the three before"""
        drifts = [a.hr_drift_pct for a in self.activities
                  if a.hr_drift_pct is not None and a.date <= reference]
        if len(drifts) < DRIFT_TREND_WINDOW:
            return "insufficient_data"

        recent = float(np.mean(drifts[-DRIFT_TREND_WINDOW:]))
        if len(drifts) >= DRIFT_TREND_WINDOW * 2:
            older = float(np.mean(drifts[-DRIFT_TREND_WINDOW * 2:-DRIFT_TREND_WINDOW]))
            if recent < older - DRIFT_TREND_MARGIN:
                return "improving"
            if recent > older + DRIFT_TREND_MARGIN:
                return "declining"
        return "stable"

    @staticmethod
    def volume_change(current: Sequence["ActivityMetrics"], previous: Sequence["ActivityMetrics"]) -> float:
        """Percent change in training minutes; 100 when there was no previous volume"""
        current_volume = sum(a.duration_min for a in current)
        previous_volume = sum(a.duration_min for a in previous)
        if previous_volume == 0:
            return 100.0 if current_volume > 0 else 0.0
        return (current_volume - previous_volume) / previous_volume * 100

    def fatigue_risk(self, reference: date) -> str:
        recent = self.recent(reference)
        if not recent:
            return "low"

        avg_daily_load = sum(_load(a) for a in recent) / 7
        high_intensity = sum(_high_intensity_minutes(a) for a in recent)

        if avg_daily_load > 100 or high_intensity > 120:
            return "high"
        if avg_daily_load > 60 or high_intensity > 60:
            return "moderate"
        return "low"

    def injury_risk_factors(self, reference: date) -> List[str]:
        risks = []
        recent = self.recent(reference)
        previous = self.between(reference - timedelta(days=13), reference - timedelta(days=7))

        if previous and self.volume_change(recent, previous) > VOLUME_JUMP_PCT:
            risks.append(f"High volume increase (>{VOLUME_JUMP_PCT}%)")

        if sum(_load(a) for a in recent) > HIGH_WEEKLY_LOAD:
            risks.append("High weekly training load")

        if self.current_streak(reference) > MAX_DAYS_WITHOUT_REST:
            risks.append(f"No rest days in over {MAX_DAYS_WITHOUT_REST} days")

        total_minutes = sum(a.duration_min for a in recent)
        high_intensity = sum(_high_intensity_minutes(a) for a in recent)
        if total_minutes > 0 and high_intensity / total_minutes > HIGH_INTENSITY_RATIO:
            risks.append(f"High intensity ratio (>{int(HIGH_INTENSITY_RATIO * 100)}%)")

        return risks
