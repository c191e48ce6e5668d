#!/usr/bin/env python3
"""
Training Load Tracking (ATL / CTL / TSB)

Acute and chronic training load are exponentially weighted moving averages
of daily training load with 7- and 28-day time constants. For a gap of Δ
days between samples:

- ATL = ATL × e^(-Δ/7) + load × (1 - e^(-Δ/7))
- CTL = CTL × e^(-Δ/28) + load × (1 - e^(-Δ/28))
- TSB = CTL - ATL

The first sample seeds both averages with its load. A readiness score is
derived from the current state plus the recent load window and optional
recovery inputs.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from .interface import (
    DateLike, InsufficientDataError, InvalidParameterError, NonChronologicalSample, to_date
)
from ..config import ReadinessSettings, get_readiness_settings
from ..utils import get_logger


logger = get_logger(__name__)


ATL_TIME_CONSTANT = 7
CTL_TIME_CONSTANT = 28

# (lower TSB bound, status), checked in order
FORM_STATUS_THRESHOLDS = (
    (25, "peak_form"),
    (5, "good_form"),
    (-10, "neutral"),
    (-30, "building"),
    (-50, "overreaching"),
)
OVERTRAINED = "overtrained"


def _decay(days: float, time_constant: float) -> float:
    return float(np.exp(-days / time_constant))


def _clamp(value: float, lower: float = 0.0, upper: float = 100.0) -> float:
    return max(lower, min(upper, value))


@dataclass(frozen=True)
class LoadState:
    """Fitness/fatigue state after the last applied sample"""
    atl: float = 0.0
    ctl: float = 0.0
    as_of: Optional[date] = None

    @property
    def tsb(self) -> float:
        return self.ctl - self.atl

    @property
    def form_status(self) -> str:
        for threshold, status in FORM_STATUS_THRESHOLDS:
            if self.tsb > threshold:
                return status
        return OVERTRAINED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'atl': round(self.atl, 1),
            'ctl': round(self.ctl, 1),
            'tsb': round(self.tsb, 1),
            'form_status': self.form_status,
            'as_of': self.as_of.isoformat() if self.as_of else None
        }


@dataclass(frozen=True)
class LoadSample:
    """One applied training load"""
    date: date
    training_load: float


class LoadTracker:
    """
    Rolling ATL/CTL/TSB for one athlete.

    Samples must arrive in non-decreasing date order. A second ``apply`` on
    the same date is a Δ = 0 update, which leaves the state unchanged; use
    ``merge`` (or ``apply_daily``) when a later workout on the same date
    should add to that day's load.

    With ``history_days`` set, applied samples older than that many days
    before the last applied date are dropped from ``history``.
    """

    def __init__(self, history_days: Optional[int] = None):
        if history_days is not None and history_days < 1:
            raise InvalidParameterError(f"history_days must be positive, got {history_days}")
        self.history_days = history_days
        self._state = LoadState()
        self._history: List[Tuple[LoadSample, LoadState]] = []
        # State before the first sample of the last applied date, and that date's summed load
        self._day_base = LoadState()
        self._day_total = 0.0

    @property
    def last_date(self) -> Optional[date]:
        return self._state.as_of

    @property
    def history(self) -> List[Tuple[LoadSample, LoadState]]:
        """Applied samples with the state that followed each, oldest first"""
        return list(self._history)

    @property
    def day_total(self) -> float:
        """Summed load of every sample on the last applied date"""
        return self._day_total

    def snapshot(self) -> LoadState:
        """Current state; never mutates"""
        return self._state

    @staticmethod
    def _advance(state: LoadState, day: date, training_load: float) -> LoadState:
        if state.as_of is None:
            return LoadState(atl=training_load, ctl=training_load, as_of=day)

        gap = (day - state.as_of).days
        atl_decay = _decay(gap, ATL_TIME_CONSTANT)
        ctl_decay = _decay(gap, CTL_TIME_CONSTANT)
        return LoadState(
            atl=state.atl * atl_decay + training_load * (1 - atl_decay),
            ctl=state.ctl * ctl_decay + training_load * (1 - ctl_decay),
            as_of=day
        )

    def _check_sample(self, sample_date: DateLike, training_load: float) -> date:
        day = to_date(sample_date)
        if training_load is None or training_load < 0:
            raise InvalidParameterError(f"Training load must be non-negative, got {training_load}")

        last = self.last_date
        if last is not None and day < last:
            raise NonChronologicalSample(day, last)
        return day

    def _record(self, day: date, training_load: float, state: LoadState) -> LoadState:
        self._state = state
        self._history.append((LoadSample(day, training_load), state))
        self._prune()
        logger.debug(
            f"Applied load {training_load:.1f} on {day}: "
            f"ATL {state.atl:.1f}, CTL {state.ctl:.1f}, TSB {state.tsb:.1f}"
        )
        return state

    def _prune(self):
        if self.history_days is None or not self._history:
            return
        cutoff = self.last_date - timedelta(days=self.history_days)
        while self._history and self._history[0][0].date <= cutoff:
            self._history.pop(0)

    def apply(self, sample_date: DateLike, training_load: float) -> LoadState:
        """
        Apply one day's training load

        Args:
            sample_date: Date of the load (datetimes are truncated to dates)
            training_load: Load, e.g. TRIMP; must be non-negative

        Returns:
            The updated LoadState

        Raises:
            NonChronologicalSample: sample_date is before the last applied date
        """
        day = self._check_sample(sample_date, training_load)

        if day != self.last_date:
            self._day_base = self._state
            self._day_total = 0.0
        self._day_total += training_load

        # On the last applied date Δ = 0, so both decay factors are 1 and the state is unchanged
        state = self._advance(self._state, day, training_load)
        return self._record(day, training_load, state)

    def merge(self, sample_date: DateLike, training_load: float) -> LoadState:
        """
        Add a load to its date's total

        On a new date this is ``apply``. On the last applied date the state is
        recomputed from the state before that date with the summed load, so a
        second workout on the same day counts towards ATL and CTL.
        """
        day = self._check_sample(sample_date, training_load)
        if day != self.last_date:
            return self.apply(day, training_load)

        self._day_total += training_load
        state = self._advance(self._day_base, day, self._day_total)
        return self._record(day, training_load, state)

    def apply_many(self, samples: Iterable[Tuple[DateLike, float]]) -> LoadState:
        """Apply (date, load) samples in the given order"""
        for sample_date, training_load in samples:
            self.apply(sample_date, training_load)
        return self._state

    def apply_daily(self, samples: Iterable[Tuple[DateLike, float]]) -> LoadState:
        """Sum loads per date, then merge one sample per date in date order"""
        daily: Dict[date, float] = OrderedDict()
        for sample_date, training_load in samples:
            day = to_date(sample_date)
            daily[day] = daily.get(day, 0.0) + training_load

        for day in sorted(daily):
            self.merge(day, daily[day])
        return self._state

    def state_at(self, target_date: DateLike) -> LoadState:
        """Project the current state to a later date assuming no further load"""
        day = to_date(target_date)
        last = self.last_date
        if last is None:
            return LoadState(as_of=day)
        if day < last:
            raise NonChronologicalSample(day, last)

        gap = (day - last).days
        return LoadState(
            atl=self._state.atl * _decay(gap, ATL_TIME_CONSTANT),
            ctl=self._state.ctl * _decay(gap, CTL_TIME_CONSTANT),
            as_of=day
        )

    def samples_between(self, start: date, end: date) -> List[LoadSample]:
        """Applied samples with start <= date <= end"""
        return [sample for sample, _ in self._history if start <= sample.date <= end]

    def readiness(self, as_of: Optional[DateLike] = None,
                  recovery: Optional["RecoveryInputs"] = None,
                  race_date: Optional[DateLike] = None,
                  settings: Optional[ReadinessSettings] = None) -> "ReadinessMetrics":
        """Readiness for ``as_of`` (defaults to the last applied date)"""
        return ReadinessCalculator(settings).calculate(self, as_of, recovery, race_date)


@dataclass(frozen=True)
class RecoveryInputs:
    """Optional wellness inputs feeding the recovery component"""
    body_battery: Optional[float] = None
    sleep_score: Optional[float] = None
    hrv: Optional[float] = None

    def score(self, default: float) -> float:
        """Mean of the supplied inputs on a 0-100 scale; HRV counts double, capped at 100"""
        values = []
        if self.body_battery is not None:
            values.append(self.body_battery)
        if self.sleep_score is not None:
            values.append(self.sleep_score)
        if self.hrv is not None:
            values.append(min(100.0, self.hrv * 2))
        if not values:
            return default
        return _clamp(float(np.mean(values)))


@dataclass(frozen=True)
class ReadinessMetrics:
    """Readiness to train on a given day"""
    score: int
    fatigue_7day_avg: float
    recovery_score: float
    training_load_7day: float
    recent_hard_days: int
    load_state: LoadState
    days_until_race: Optional[int] = None
    components: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'score': self.score,
            'fatigue_7day_avg': round(self.fatigue_7day_avg, 1),
            'recovery_score': round(self.recovery_score, 1),
            'training_load_7day': round(self.training_load_7day, 1),
            'recent_hard_days': self.recent_hard_days,
            'days_until_race': self.days_until_race,
            'load_state': self.load_state.to_dict(),
            'components': {k: round(v, 1) for k, v in self.components.items()}
        }


class ReadinessCalculator:
    """Stateless readiness scoring over a LoadTracker's history"""

    def __init__(self, settings: Optional[ReadinessSettings] = None):
        self.settings = settings or get_readiness_settings()

    def calculate(self, tracker: LoadTracker,
                  as_of: Optional[DateLike] = None,
                  recovery: Optional[RecoveryInputs] = None,
                  race_date: Optional[DateLike] = None) -> ReadinessMetrics:
        """
        Compute readiness metrics

        Args:
            tracker: Load history to score
            as_of: Scoring date; defaults to the tracker's last applied date
            recovery: Optional wellness inputs
            race_date: Optional target race date

        Returns:
            ReadinessMetrics with a 0-100 score
        """
        policy = self.settings
        if policy.total_weight <= 0:
            raise InvalidParameterError("Readiness weights must not all be zero")

        if as_of is None:
            if tracker.last_date is None:
                raise InsufficientDataError("No training load applied and no date given")
            day = tracker.last_date
        else:
            day = to_date(as_of)

        state = tracker.state_at(day)

        window_start = day - timedelta(days=policy.window_days - 1)
        daily: Dict[date, float] = {}
        for sample in tracker.samples_between(window_start, day):
            daily[sample.date] = daily.get(sample.date, 0.0) + sample.training_load

        training_load_7day = sum(daily.values())
        fatigue_avg = training_load_7day / policy.window_days
        hard_days = sum(1 for load in daily.values() if load >= policy.hard_day_load)
        recovery_score = (recovery or RecoveryInputs()).score(policy.default_recovery_score)

        components = {
            'form': _clamp(50 + state.tsb / 2),
            'fatigue': 100 - min(100.0, fatigue_avg / policy.fatigue_ceiling * 100),
            'hard_days': 100 - min(100.0, hard_days * policy.hard_day_penalty),
            'recovery': recovery_score
        }
        weighted = (
            components['form'] * policy.tsb_weight
            + components['fatigue'] * policy.fatigue_weight
            + components['hard_days'] * policy.hard_days_weight
            + components['recovery'] * policy.recovery_weight
        )
        score = int(round(_clamp(weighted / policy.total_weight)))

        days_until_race = None
        if race_date is not None:
            days_until_race = (to_date(race_date) - day).days

        logger.debug(f"Readiness on {day}: {score} (TSB {state.tsb:.1f}, 7-day load {training_load_7day:.1f})")

        return ReadinessMetrics(
            score=score,
            fatigue_7day_avg=fatigue_avg,
            recovery_score=recovery_score,
            training_load_7day=training_load_7day,
            recent_hard_days=hard_days,
            load_state=state,
            days_until_race=days_until_race,
            components=components
        )
