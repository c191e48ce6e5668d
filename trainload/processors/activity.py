#!/usr/bin/env python3
"""
Activity aggregation

Folds the ordered messages of one decode pass into per-activity and per-lap
metrics. Record messages are timestamped samples; Lap messages close the
current lap; Session messages close the current activity. An Activity
message, or the end of the stream, closes an activity that still has
samples.

Laps and sessions take only the samples inside their time window, so files
that write every Lap and Session message after all Record messages (as
multisport recordings often do) still split correctly.

Scored activities (athlete configuration given) carry heart-rate zone
minutes and a TRIMP training load. Without athlete configuration the
activity is flagged unscored and the raw samples are attached instead.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from .fit_decoder import DecodedMessage
from .interface import MessageCategory, MetricStatus, WarningLog
from ..analytics.heart_rate_zones import AthleteConfig, HeartRateZoneCalculator, ZONE_COUNT
from ..analytics.pace import PaceAnalysis, PaceCalculator
from ..analytics.power import PowerAnalysis, PowerCalculator
from ..analytics.trimp import TRIMPCalculator
from ..config import AggregatorSettings, get_aggregator_settings
from ..utils import get_logger


logger = get_logger(__name__)


SPORTS = ('run', 'bike', 'swim', 'strength', 'yoga', 'other')

SPORT_MAP = {
    'running': 'run',
    'walking': 'run',
    'hiking': 'run',
    'cycling': 'bike',
    'e_biking': 'bike',
    'swimming': 'swim',
    'yoga': 'yoga',
}

SUB_SPORT_MAP = {
    'strength_training': 'strength',
    'yoga': 'yoga',
    'treadmill': 'run',
    'trail': 'run',
    'indoor_cycling': 'bike',
    'road': 'bike',
    'mountain': 'bike',
    'lap_swimming': 'swim',
    'open_water': 'swim',
}

SPLIT_TYPES = {
    'manual': 'manual',
    'time': 'time',
    'distance': 'distance',
}


def map_sport(sport: Any, sub_sport: Any = None) -> str:
    """Map FIT sport/sub_sport names onto run / bike / swim / strength / yoga / other"""
    # Strength and yoga are sub sports of generic 'training' on most devices
    if sub_sport in ('strength_training', 'yoga'):
        return SUB_SPORT_MAP[sub_sport]
    if isinstance(sport, str) and sport in SPORT_MAP:
        return SPORT_MAP[sport]
    if isinstance(sub_sport, str) and sub_sport in SUB_SPORT_MAP:
        return SUB_SPORT_MAP[sub_sport]
    return 'other'


def _mean(values: List[float]) -> Optional[float]:
    return float(np.mean(values)) if values else None


def _max(values: List[float]) -> Optional[float]:
    return float(np.max(values)) if values else None


def _first(fields: Dict[str, Any], *names: str) -> Any:
    for name in names:
        value = fields.get(name)
        if value is not None:
            return value
    return None


def _speed_kmh(speed_ms: Optional[float]) -> Optional[float]:
    return speed_ms * 3.6 if speed_ms is not None else None


def _count_until(samples: List["Sample"], end: datetime) -> int:
    """Number of leading samples at or before ``end``; untimed samples follow the one before them"""
    count = 0
    for index, sample in enumerate(samples):
        if sample.timestamp is not None and sample.timestamp > end:
            break
        count = index + 1
    return count


def _zone_seconds(samples: Iterable["Sample"]) -> List[float]:
    seconds = [0.0] * ZONE_COUNT
    for sample in samples:
        if sample.zone is not None:
            seconds[sample.zone - 1] += sample.elapsed_s
    return seconds


@dataclass(frozen=True)
class Sample:
    """One record message reduced to the values the aggregator uses"""
    timestamp: Optional[datetime]
    heart_rate: Optional[float] = None
    distance_m: Optional[float] = None
    speed_ms: Optional[float] = None
    power: Optional[float] = None
    cadence: Optional[float] = None
    altitude_m: Optional[float] = None
    # Seconds since the previous sample that count towards zone time
    elapsed_s: float = 0.0
    zone: Optional[int] = None

    @classmethod
    def from_message(cls, message: DecodedMessage, elapsed_s: float = 0.0,
                     zone: Optional[int] = None) -> "Sample":
        fields = message.fields
        heart_rate = fields.get('heart_rate')
        return cls(
            timestamp=message.timestamp,
            heart_rate=heart_rate if heart_rate else None,
            distance_m=fields.get('distance'),
            speed_ms=_first(fields, 'enhanced_speed', 'speed'),
            power=fields.get('power'),
            cadence=fields.get('cadence'),
            altitude_m=_first(fields, 'enhanced_altitude', 'altitude'),
            elapsed_s=elapsed_s,
            zone=zone
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
            'heart_rate': self.heart_rate,
            'distance_m': self.distance_m,
            'speed_ms': self.speed_ms,
            'power': self.power,
            'cadence': self.cadence,
            'altitude_m': self.altitude_m
        }


@dataclass(frozen=True)
class LapMetrics:
    """Metrics for one lap; date and activity_id refer back to the parent activity"""
    lap_number: int
    date: Optional[date]
    activity_id: str
    duration_min: float
    distance_km: float
    split_type: str
    avg_hr: Optional[float] = None
    max_hr: Optional[float] = None
    avg_speed: Optional[float] = None  # km/h
    max_speed: Optional[float] = None  # km/h
    avg_pace: Optional[float] = None  # min/km
    elevation_gain: Optional[float] = None
    elevation_loss: Optional[float] = None
    avg_power: Optional[float] = None
    max_power: Optional[float] = None
    normalized_power: Optional[float] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    zone_minutes: Optional[Tuple[float, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'lap_number': self.lap_number,
            'date': self.date.isoformat() if self.date else None,
            'activity_id': self.activity_id,
            'duration_min': round(self.duration_min, 2),
            'distance_km': round(self.distance_km, 3),
            'split_type': self.split_type,
            'avg_hr': self.avg_hr,
            'max_hr': self.max_hr,
            'avg_speed': self.avg_speed,
            'max_speed': self.max_speed,
            'avg_pace': self.avg_pace,
            'elevation_gain': self.elevation_gain,
            'elevation_loss': self.elevation_loss,
            'avg_power': self.avg_power,
            'max_power': self.max_power,
            'normalized_power': self.normalized_power,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'zone_minutes': list(self.zone_minutes) if self.zone_minutes is not None else None
        }


@dataclass(frozen=True)
class ActivityMetrics:
    """Metrics for one activity, immutable once the activity is closed"""
    date: Optional[date]
    activity_id: str
    sport: str
    duration_min: float
    distance_km: float
    sub_sport: Optional[str] = None
    start_time: Optional[datetime] = None
    avg_hr: Optional[float] = None
    max_hr: Optional[float] = None
    hr_drift_pct: Optional[float] = None
    zone_minutes: Optional[Tuple[float, ...]] = None
    training_load: Optional[float] = None
    calories: Optional[float] = None
    total_ascent: Optional[float] = None
    total_descent: Optional[float] = None
    avg_speed: Optional[float] = None  # km/h
    max_speed: Optional[float] = None  # km/h
    avg_pace: Optional[float] = None  # min/km
    avg_cadence: Optional[float] = None
    pace_analysis: Optional[PaceAnalysis] = None
    power_analysis: Optional[PowerAnalysis] = None
    status: Tuple[MetricStatus, ...] = ()
    lap_count: int = 0
    raw_samples: Optional[Tuple[Sample, ...]] = None

    def zone_minutes_for(self, zone: int) -> Optional[float]:
        if self.zone_minutes is None:
            return None
        return self.zone_minutes[zone - 1]

    @property
    def unscored(self) -> bool:
        return MetricStatus.UNSCORED in self.status

    @property
    def low_confidence(self) -> bool:
        return MetricStatus.LOW_CONFIDENCE in self.status

    def validate(self) -> List[str]:
        """Return a list of data problems; empty when the metrics look sane"""
        errors = []
        if not self.activity_id:
            errors.append("Missing activity ID")
        if self.date is None:
            errors.append("Missing activity date")
        if self.duration_min <= 0:
            errors.append("Duration must be greater than 0")
        if self.distance_km < 0:
            errors.append("Distance cannot be negative")
        if self.sport not in SPORTS:
            errors.append(f"Invalid sport type: {self.sport}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary format"""
        data = {
            'date': self.date.isoformat() if self.date else None,
            'activity_id': self.activity_id,
            'sport': self.sport,
            'sub_sport': self.sub_sport,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'duration_min': round(self.duration_min, 2),
            'distance_km': round(self.distance_km, 3),
            'avg_hr': self.avg_hr,
            'max_hr': self.max_hr,
            'hr_drift_pct': self.hr_drift_pct,
            'training_load': round(self.training_load, 1) if self.training_load is not None else None,
            'calories': self.calories,
            'total_ascent': self.total_ascent,
            'total_descent': self.total_descent,
            'avg_speed': self.avg_speed,
            'max_speed': self.max_speed,
            'avg_pace': self.avg_pace,
            'avg_cadence': self.avg_cadence,
            'pace_analysis': self.pace_analysis.to_dict() if self.pace_analysis else None,
            'power_analysis': self.power_analysis.to_dict() if self.power_analysis else None,
            'status': [s.value for s in self.status],
            'lap_count': self.lap_count
        }
        if self.zone_minutes is not None:
            for number, minutes in enumerate(self.zone_minutes, start=1):
                data[f'zone{number}_minutes'] = round(minutes, 2)
        if self.raw_samples is not None:
            data['raw_samples'] = [s.to_dict() for s in self.raw_samples]
        return data


@dataclass
class AggregationResult:
    """Activities and laps produced from one decode pass"""
    activities: List[ActivityMetrics] = field(default_factory=list)
    laps: List[LapMetrics] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def laps_for(self, activity_id: str) -> List[LapMetrics]:
        return [lap for lap in self.laps if lap.activity_id == activity_id]


class _ActivityBuilder:
    """Running sums for the activity currently open"""

    def __init__(self):
        self.samples: List[Sample] = []
        # Index of the first sample not yet claimed by a lap
        self.lap_start = 0
        self.pending_laps: List[Tuple[Dict[str, Any], List[Sample]]] = []
        self.last_timestamp: Optional[datetime] = None
        self.sport_hint: Any = None

    @property
    def is_empty(self) -> bool:
        return not self.samples and not self.pending_laps


class ActivityAggregator:
    """Builds ActivityMetrics and LapMetrics from decoded FIT messages"""

    def __init__(self, athlete: Optional[AthleteConfig] = None,
                 settings: Optional[AggregatorSettings] = None):
        self.athlete = athlete
        self.settings = settings or get_aggregator_settings()
        self.zones = HeartRateZoneCalculator(athlete) if athlete else None
        self.trimp = TRIMPCalculator(athlete, self.settings.fallback_load_per_minute) if athlete else None
        self.pace = PaceCalculator()
        self.power = PowerCalculator(athlete.ftp if athlete else None)

    def aggregate(self, messages: Iterable[DecodedMessage],
                  activity_id: Optional[str] = None) -> AggregationResult:
        """
        Aggregate one decode pass

        Args:
            messages: Decoded messages in file order
            activity_id: Base identifier; derived from the start time when omitted

        Returns:
            AggregationResult with activities, their laps and soft warnings
        """
        result = AggregationResult()
        warnings = WarningLog()
        builder = _ActivityBuilder()

        for message in messages:
            category = message.category
            if category is MessageCategory.RECORD:
                self._add_record(builder, message, warnings)
            elif category is MessageCategory.LAP:
                self._close_lap(builder, message)
            elif category is MessageCategory.SESSION:
                builder, carried = self._split_at_session(builder, message.fields)
                self._finalize(builder, message.fields, activity_id, result, warnings)
                builder = carried
            elif category is MessageCategory.ACTIVITY:
                if builder.samples:
                    self._finalize(builder, {}, activity_id, result, warnings)
                    builder = _ActivityBuilder()

        if builder.samples:
            self._finalize(builder, {}, activity_id, result, warnings)

        result.warnings = warnings.to_list()
        logger.info(
            f"Aggregated {len(result.activities)} activities, {len(result.laps)} laps "
            f"({len(result.warnings)} warnings)"
        )
        return result

    def _add_record(self, builder: _ActivityBuilder, message: DecodedMessage, warnings: WarningLog):
        timestamp = message.timestamp
        elapsed = 0.0
        if timestamp is not None and builder.last_timestamp is not None:
            elapsed = (timestamp - builder.last_timestamp).total_seconds()
            if elapsed < 0:
                warnings.add(f"Record timestamp {timestamp.isoformat()} goes backwards; no time accrued")
                elapsed = 0.0
            elif elapsed > self.settings.max_sample_gap_s:
                # Pause in recording
                elapsed = 0.0
        if timestamp is not None:
            builder.last_timestamp = timestamp

        zone = None
        heart_rate = message.get('heart_rate')
        if self.zones is not None and heart_rate:
            zone = self.zones.classify(heart_rate)

        builder.samples.append(Sample.from_message(message, elapsed_s=elapsed, zone=zone))

    def _close_lap(self, builder: _ActivityBuilder, message: DecodedMessage):
        candidates = builder.samples[builder.lap_start:]
        end = message.get('timestamp')
        count = _count_until(candidates, end) if isinstance(end, datetime) else len(candidates)

        builder.pending_laps.append((dict(message.fields), candidates[:count]))
        builder.lap_start += count
        if builder.sport_hint is None:
            builder.sport_hint = message.get('sport')

    @staticmethod
    def _session_end(session: Dict[str, Any]) -> Optional[datetime]:
        start = session.get('start_time')
        span_s = _first(session, 'total_elapsed_time', 'total_timer_time')
        if not isinstance(start, datetime) or span_s is None:
            return None
        return start + timedelta(seconds=span_s)

    def _split_at_session(self, builder: _ActivityBuilder,
                          session: Dict[str, Any]) -> Tuple[_ActivityBuilder, _ActivityBuilder]:
        """
        Split off the samples and laps recorded after the session's window

        Returns the builder to close for this session and a builder holding
        the later data for the next session.
        """
        carried = _ActivityBuilder()
        end = self._session_end(session)
        if end is None:
            return builder, carried

        count = _count_until(builder.samples, end)
        if count == len(builder.samples):
            return builder, carried

        carried.samples = builder.samples[count:]
        carried.last_timestamp = builder.last_timestamp
        carried.lap_start = max(0, builder.lap_start - count)
        builder.samples = builder.samples[:count]

        kept = []
        for fields, lap_samples in builder.pending_laps:
            lap_start = fields.get('start_time')
            if isinstance(lap_start, datetime) and lap_start >= end:
                carried.pending_laps.append((fields, lap_samples))
            else:
                kept.append((fields, lap_samples))
        builder.pending_laps = kept

        logger.debug(f"Session ending {end.isoformat()} keeps {count} samples, carries {len(carried.samples)}")
        return builder, carried

    def _finalize(self, builder: _ActivityBuilder, session: Dict[str, Any],
                  base_activity_id: Optional[str], result: AggregationResult,
                  warnings: WarningLog):
        samples = builder.samples
        timestamps = [s.timestamp for s in samples if s.timestamp is not None]

        start_time = session.get('start_time')
        if not isinstance(start_time, datetime):
            start_time = timestamps[0] if timestamps else None
        activity_date = start_time.date() if start_time else None

        activity_id = self._activity_id(base_activity_id, start_time, len(result.activities))

        record_span_s = (timestamps[-1] - timestamps[0]).total_seconds() if len(timestamps) > 1 else 0.0
        duration_s = session.get('total_timer_time')
        if duration_s is None:
            duration_s = record_span_s
        duration_min = duration_s / 60

        distances = [s.distance_m for s in samples if s.distance_m is not None]
        distance_m = session.get('total_distance')
        if distance_m is None:
            distance_m = max(distances) if distances else 0.0
        distance_km = distance_m / 1000

        heart_rates = [s.heart_rate for s in samples if s.heart_rate is not None]
        avg_hr = _first(session, 'avg_heart_rate')
        if avg_hr is None:
            avg_hr = _mean(heart_rates)
        max_hr = _first(session, 'max_heart_rate')
        if max_hr is None:
            max_hr = _max(heart_rates)

        speeds = [s.speed_ms for s in samples if s.speed_ms is not None]
        powers = [s.power for s in samples if s.power is not None]
        cadences = [s.cadence for s in samples if s.cadence is not None]

        pace_analysis = self.pace.analyze(speeds) if speeds else None
        avg_pace = self.pace.pace_from_totals(distance_km, duration_min)
        if avg_pace is None and pace_analysis is not None:
            avg_pace = pace_analysis.avg_pace

        moving_s = sum(s.elapsed_s for s in samples)
        power_analysis = self.power.analyze(powers, moving_s or None) if powers else None

        avg_speed = _first(session, 'enhanced_avg_speed', 'avg_speed')
        if avg_speed is None and duration_s > 0 and distance_m > 0:
            avg_speed = distance_m / duration_s
        max_speed = _first(session, 'enhanced_max_speed', 'max_speed')
        if max_speed is None:
            max_speed = _max(speeds)

        ascent, descent = self._elevation(samples)
        total_ascent = _first(session, 'total_ascent')
        total_descent = _first(session, 'total_descent')

        avg_cadence = _first(session, 'avg_cadence')
        if avg_cadence is None:
            avg_cadence = _mean(cadences)

        sport_name = session.get('sport') or builder.sport_hint
        sub_sport = session.get('sub_sport')

        status: List[MetricStatus] = []
        zone_minutes = None
        training_load = None
        raw_samples = None
        if self.athlete is None:
            status.append(MetricStatus.UNSCORED)
            raw_samples = tuple(samples)
        else:
            zone_minutes = tuple(seconds / 60 for seconds in _zone_seconds(samples))
            self._check_zone_minutes(activity_id, zone_minutes, duration_min, warnings)
            trimp = self.trimp.calculate(duration_min, avg_hr)
            training_load = trimp.training_load
            if trimp.low_confidence:
                status.append(MetricStatus.LOW_CONFIDENCE)

        activity = ActivityMetrics(
            date=activity_date,
            activity_id=activity_id,
            sport=map_sport(sport_name, sub_sport),
            sub_sport=sub_sport if isinstance(sub_sport, str) else None,
            start_time=start_time,
            duration_min=duration_min,
            distance_km=distance_km,
            avg_hr=avg_hr,
            max_hr=max_hr,
            hr_drift_pct=self._hr_drift(samples),
            zone_minutes=zone_minutes,
            training_load=training_load,
            calories=_first(session, 'total_calories'),
            total_ascent=total_ascent if total_ascent is not None else ascent,
            total_descent=total_descent if total_descent is not None else descent,
            avg_speed=_speed_kmh(avg_speed),
            max_speed=_speed_kmh(max_speed),
            avg_pace=avg_pace,
            avg_cadence=avg_cadence,
            pace_analysis=pace_analysis,
            power_analysis=power_analysis,
            status=tuple(status),
            lap_count=len(builder.pending_laps),
            raw_samples=raw_samples
        )
        result.activities.append(activity)

        for number, (lap_fields, lap_samples) in enumerate(builder.pending_laps, start=1):
            result.laps.append(self._build_lap(number, activity, lap_fields, lap_samples))

        logger.debug(
            f"Closed activity {activity_id}: {activity.sport}, {duration_min:.1f} min, "
            f"{distance_km:.2f} km, load {training_load}"
        )

    @staticmethod
    def _activity_id(base: Optional[str], start_time: Optional[datetime], index: int) -> str:
        if base is None:
            base = f"fit_{int(start_time.timestamp())}" if start_time is not None else "fit_unknown"
        # Multisport files: later sessions get a numeric suffix
        return base if index == 0 else f"{base}_{index + 1}"

    def _check_zone_minutes(self, activity_id: str, zone_minutes: Tuple[float, ...],
                            duration_min: float, warnings: WarningLog):
        total = sum(zone_minutes)
        if total > duration_min + self.settings.zone_epsilon_min:
            message = (
                f"Activity {activity_id}: zone minutes {total:.2f} exceed duration {duration_min:.2f}"
            )
            logger.warning(message)
            warnings.add(message)

    def _hr_drift(self, samples: List[Sample]) -> Optional[float]:
        """Percent change of mean HR from the first to the last third of the HR data"""
        points = [(s.timestamp, s.heart_rate) for s in samples
                  if s.timestamp is not None and s.heart_rate is not None]
        if len(points) < 3:
            return None

        start, end = points[0][0], points[-1][0]
        span_s = (end - start).total_seconds()
        if span_s < self.settings.min_drift_minutes * 60:
            return None

        first = [hr for ts, hr in points if (ts - start).total_seconds() <= span_s / 3]
        last = [hr for ts, hr in points if (ts - start).total_seconds() >= span_s * 2 / 3]
        if not first or not last:
            return None

        first_mean = float(np.mean(first))
        last_mean = float(np.mean(last))
        return round((last_mean - first_mean) / first_mean * 100, 2)

    @staticmethod
    def _elevation(samples: List[Sample]) -> Tuple[Optional[float], Optional[float]]:
        altitudes = [s.altitude_m for s in samples if s.altitude_m is not None]
        if len(altitudes) < 2:
            return None, None
        deltas = np.diff(np.asarray(altitudes, dtype=float))
        return float(deltas[deltas > 0].sum()), float(-deltas[deltas < 0].sum())

    def _build_lap(self, lap_number: int, activity: ActivityMetrics,
                   fields: Dict[str, Any], samples: List[Sample]) -> LapMetrics:
        timestamps = [s.timestamp for s in samples if s.timestamp is not None]

        start_time = fields.get('start_time')
        if not isinstance(start_time, datetime):
            start_time = timestamps[0] if timestamps else None
        end_time = fields.get('timestamp')
        if not isinstance(end_time, datetime):
            end_time = timestamps[-1] if timestamps else None

        duration_s = fields.get('total_timer_time')
        if duration_s is None:
            duration_s = (timestamps[-1] - timestamps[0]).total_seconds() if len(timestamps) > 1 else 0.0
        duration_min = duration_s / 60

        distance_m = fields.get('total_distance')
        if distance_m is None:
            distances = [s.distance_m for s in samples if s.distance_m is not None]
            distance_m = distances[-1] - distances[0] if len(distances) > 1 else 0.0
        distance_km = distance_m / 1000

        heart_rates = [s.heart_rate for s in samples if s.heart_rate is not None]
        speeds = [s.speed_ms for s in samples if s.speed_ms is not None]
        powers = [s.power for s in samples if s.power is not None]

        avg_hr = _first(fields, 'avg_heart_rate')
        max_hr = _first(fields, 'max_heart_rate')
        avg_speed = _first(fields, 'enhanced_avg_speed', 'avg_speed')
        max_speed = _first(fields, 'enhanced_max_speed', 'max_speed')
        avg_power = _first(fields, 'avg_power')
        max_power = _first(fields, 'max_power')
        normalized_power = _first(fields, 'normalized_power')

        zone_minutes = None
        if self.zones is not None:
            zone_minutes = tuple(s / 60 for s in _zone_seconds(samples))

        return LapMetrics(
            lap_number=lap_number,
            date=activity.date,
            activity_id=activity.activity_id,
            duration_min=duration_min,
            distance_km=distance_km,
            split_type=SPLIT_TYPES.get(fields.get('lap_trigger'), 'auto'),
            avg_hr=avg_hr if avg_hr is not None else _mean(heart_rates),
            max_hr=max_hr if max_hr is not None else _max(heart_rates),
            avg_speed=_speed_kmh(avg_speed if avg_speed is not None else _mean(speeds)),
            max_speed=_speed_kmh(max_speed if max_speed is not None else _max(speeds)),
            avg_pace=self.pace.pace_from_totals(distance_km, duration_min),
            elevation_gain=_first(fields, 'total_ascent'),
            elevation_loss=_first(fields, 'total_descent'),
            avg_power=avg_power if avg_power is not None else _mean(powers),
            max_power=max_power if max_power is not None else _max(powers),
            normalized_power=(
                normalized_power if normalized_power is not None
                else (self.power.normalized_power(powers) if powers else None)
            ),
            start_time=start_time,
            end_time=end_time,
            zone_minutes=zone_minutes
        )
