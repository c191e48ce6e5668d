#!/usr/bin/env python3
"""
Tests for pace and power analysis.
"""

import numpy as np
import pytest

from trainload.analytics.interface import InsufficientDataError, InvalidParameterError
from trainload.analytics.pace import PaceCalculator
from trainload.analytics.power import PowerCalculator


@pytest.fixture
def pace_calculator():
    return PaceCalculator()


class TestPaceConversions:
    """Test pace/speed conversions"""

    def test_speed_to_pace(self):
        # 3.0 m/s = 10.8 km/h = 5.556 min/km
        assert PaceCalculator.speed_to_pace_per_km(3.0) == pytest.approx(60 / 10.8)
        assert PaceCalculator.speed_to_pace_per_km(0) == float('inf')

    def test_pace_to_speed(self):
        assert PaceCalculator.pace_per_km_to_speed(5.0) == pytest.approx(12 / 3.6)
        assert PaceCalculator.pace_per_km_to_speed(0) == 0.0

    @pytest.mark.parametrize("pace,formatted", [
        (4.5, "4:30"),
        (5.0, "5:00"),
        (60 / 10.8, "5:33"),
        (4.999, "5:00"),
        (float('inf'), "∞:∞"),
    ])
    def test_format_pace(self, pace, formatted):
        assert PaceCalculator.format_pace(pace) == formatted

    def test_pace_from_totals(self):
        assert PaceCalculator.pace_from_totals(5.0, 25.0) == pytest.approx(5.0)
        assert PaceCalculator.pace_from_totals(0, 25.0) is None
        assert PaceCalculator.pace_from_totals(None, 25.0) is None


class TestPaceAnalysis:
    """Test per-activity pace analysis"""

    def test_constant_speed(self, pace_calculator):
        analysis = pace_calculator.analyze([3.0] * 20)
        assert analysis.avg_pace == pytest.approx(60 / 10.8)
        assert analysis.best_pace == pytest.approx(60 / 10.8)
        assert analysis.pace_variability == pytest.approx(0.0)
        assert not analysis.negative_split

    def test_negative_split(self, pace_calculator):
        analysis = pace_calculator.analyze([2.5] * 10 + [3.0] * 10)
        assert analysis.negative_split
        assert analysis.best_pace == pytest.approx(60 / 10.8)
        assert analysis.pace_variability > 0

    def test_positive_split(self, pace_calculator):
        assert not pace_calculator.analyze([3.5] * 10 + [3.0] * 10).negative_split

    def test_stationary_samples_ignored(self, pace_calculator):
        analysis = pace_calculator.analyze([0.0, 0.2, None, 3.0, 3.0])
        assert analysis.avg_pace == pytest.approx(60 / 10.8)

    def test_no_moving_samples(self, pace_calculator):
        assert pace_calculator.analyze([0.0, 0.1]) is None
        assert pace_calculator.analyze([]) is None

    def test_to_dict_formats(self, pace_calculator):
        data = pace_calculator.analyze([3.0] * 4).to_dict()
        assert data['avg_pace_formatted'] == "5:33"
        assert data['negative_split'] is False


class TestNormalizedPower:
    """Test Normalized Power"""

    def test_constant_power(self):
        assert PowerCalculator.normalized_power([200] * 120) == pytest.approx(200)

    def test_short_series_uses_mean(self):
        assert PowerCalculator.normalized_power([100, 200, 300]) == pytest.approx(200)

    def test_variable_power_exceeds_average(self):
        powers = ([100] * 30 + [300] * 30) * 10
        normalized = PowerCalculator.normalized_power(powers)
        assert normalized > np.mean(powers)
        assert normalized < 300

    def test_empty(self):
        assert PowerCalculator.normalized_power([]) == 0.0


class TestPowerAnalysis:
    """Test FTP-relative power metrics"""

    def test_one_hour_at_ftp(self):
        analysis = PowerCalculator(ftp=250).analyze([250] * 3600)
        assert analysis.intensity_factor == pytest.approx(1.0)
        assert analysis.training_stress_score == pytest.approx(100.0)

    def test_explicit_duration(self):
        analysis = PowerCalculator(ftp=250).analyze([250] * 60, duration_seconds=1800)
        assert analysis.training_stress_score == pytest.approx(50.0)

    def test_without_ftp(self):
        analysis = PowerCalculator().analyze([180, 220, None, 200])
        assert analysis.avg_power == pytest.approx(200)
        assert analysis.max_power == 220
        assert analysis.intensity_factor is None
        assert analysis.training_stress_score is None

    def test_no_power_data(self):
        with pytest.raises(InsufficientDataError):
            PowerCalculator(ftp=250).analyze([None, None])

    def test_invalid_ftp(self):
        with pytest.raises(InvalidParameterError):
            PowerCalculator(ftp=0)
