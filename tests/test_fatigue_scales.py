"""
Tests for Derived Fatigue Scales
================================

Performance (20-100) -> KSS, Samn-Perelli, PVT reaction time, plus the
performance risk bands and chart colours.

Run: python -m pytest tests/test_fatigue_scales.py -v
"""

import pytest

from core import (
    FatigueScaleConverter,
    ModelConfig,
    RiskThresholds,
    performance_color,
    performance_to_kss,
    performance_to_samn_perelli,
    performance_to_reaction_time,
)
from models.data_models import SeverityTier


PERFORMANCE_GRID = [20 + i * 0.5 for i in range(161)]  # 20.0 .. 100.0


class TestKSS:

    @pytest.mark.parametrize("performance,expected", [
        (100, 1.0),
        (95, 1.0),
        (88, 2.0),
        (77, 5.0),
        (73.5, 5.5),
        (55, 7.0),
        (35, 8.0),
        (20, 9.0),
    ])
    def test_calibration_breakpoints(self, performance, expected):
        assert performance_to_kss(performance) == pytest.approx(expected)

    def test_saturates_outside_domain(self):
        assert performance_to_kss(150) == 1.0
        assert performance_to_kss(-10) == 9.0

    def test_range_and_monotonic(self):
        values = [performance_to_kss(p) for p in PERFORMANCE_GRID]
        assert all(1.0 <= v <= 9.0 for v in values)
        # Higher performance never gives a sleepier KSS
        assert all(a >= b for a, b in zip(values, values[1:]))

    def test_reading_labels(self):
        converter = FatigueScaleConverter()
        alert = converter.kss_reading(95)
        assert alert.label == 'Alert'
        assert alert.severity == SeverityTier.SUCCESS

        effort = converter.kss_reading(55)
        assert effort.value == 7.0
        assert effort.label == 'Sleepy, effort to stay awake'
        assert effort.severity == SeverityTier.WARNING

        assert converter.kss_reading(20).severity == SeverityTier.CRITICAL
        assert converter.kss_reading(20).label == 'Extremely sleepy'


class TestSamnPerelli:

    @pytest.mark.parametrize("performance,expected", [
        (95, 1.0),
        (77, 3.0),
        (65, 4.0),
        (55, 5.0),
        (20, 7.0),
    ])
    def test_calibration_breakpoints(self, performance, expected):
        assert performance_to_samn_perelli(performance) == pytest.approx(expected)

    def test_not_a_rescale_of_kss(self):
        # Same performance, independently calibrated scales
        assert performance_to_samn_perelli(77) == 3.0
        assert performance_to_kss(77) == 5.0

    def test_range_and_monotonic(self):
        values = [performance_to_samn_perelli(p) for p in PERFORMANCE_GRID]
        assert all(1.0 <= v <= 7.0 for v in values)
        assert all(a >= b for a, b in zip(values, values[1:]))

    def test_reading_labels(self):
        converter = FatigueScaleConverter()
        assert converter.samn_perelli_reading(100).label == 'Fully alert'
        tired = converter.samn_perelli_reading(55)
        assert tired.label == 'Moderately tired'
        assert tired.severity == SeverityTier.WARNING
        assert converter.samn_perelli_reading(20).label == 'Completely exhausted'


class TestReactionTime:

    def test_linear_mapping(self):
        assert performance_to_reaction_time(100) == 220
        assert performance_to_reaction_time(60) == 360
        assert performance_to_reaction_time(20) == 500

    def test_clamped_to_window(self):
        assert performance_to_reaction_time(0) == 500
        assert performance_to_reaction_time(120) == 220

    def test_longer_when_performance_drops(self):
        values = [performance_to_reaction_time(p) for p in PERFORMANCE_GRID]
        assert all(200 <= v <= 500 for v in values)
        assert all(a >= b for a, b in zip(values, values[1:]))

    def test_bar_width(self):
        converter = FatigueScaleConverter()
        assert converter.reaction_time_bar_pct(200) == 0.0
        assert converter.reaction_time_bar_pct(350) == pytest.approx(50.0)
        assert converter.reaction_time_bar_pct(500) == 100.0
        assert converter.reaction_time_bar_pct(650) == 100.0
        assert converter.reaction_time_bar_pct(150) == 0.0

    def test_reading_labels(self):
        converter = FatigueScaleConverter()
        assert converter.reaction_time_reading(100).label == 'Normal'
        impaired = converter.reaction_time_reading(60)
        assert impaired.label == 'Significantly impaired'
        assert impaired.severity == SeverityTier.CRITICAL
        assert converter.reaction_time_reading(20).label == 'Severely impaired'


class TestConvert:

    def test_convert_bundles_all_scales(self):
        readings = FatigueScaleConverter().convert(77)
        assert readings.performance == 77
        assert readings.kss.value == 5.0
        assert readings.samn_perelli.value == 3.0
        assert readings.reaction_time.value == performance_to_reaction_time(77)
        assert 0.0 <= readings.reaction_time_bar_pct <= 100.0

    def test_to_dict_uses_plain_severity(self):
        reading = FatigueScaleConverter().kss_reading(95)
        assert reading.to_dict() == {'value': 1.0, 'label': 'Alert', 'severity': 'success'}


class TestRiskClassification:

    @pytest.mark.parametrize("performance,level", [
        (100, 'low'),
        (75, 'low'),
        (74.9, 'moderate'),
        (60, 'high'),
        (50, 'critical'),
        (30, 'extreme'),
        (None, 'unknown'),
    ])
    def test_default_bands(self, performance, level):
        assert RiskThresholds().classify(performance) == level

    def test_conservative_preset_is_stricter(self):
        converter = FatigueScaleConverter.from_config(ModelConfig.conservative_config())
        assert converter.classify_performance(78) == 'moderate'
        assert FatigueScaleConverter().classify_performance(78) == 'low'

    @pytest.mark.parametrize("level,action", [
        ('low', 'None required'),
        ('high', 'Mitigation required'),
        ('extreme', 'UNSAFE - Do not fly'),
        ('unknown', 'UNSAFE - Do not fly'),
    ])
    def test_get_action(self, level, action):
        assert RiskThresholds().get_action(level)['action'] == action

    def test_risk_action_follows_preset(self):
        assert FatigueScaleConverter().risk_action(78)['action'] == 'None required'
        conservative = FatigueScaleConverter.from_config(ModelConfig.conservative_config())
        assert conservative.risk_action(78)['action'] == 'Enhanced monitoring'
        assert conservative.risk_action(None)['description'] == 'Severe impairment'

    def test_unknown_preset_rejected(self):
        with pytest.raises(ValueError):
            ModelConfig.from_preset('aggressive')

    def test_performance_color(self):
        assert performance_color(85) == 'hsl(120, 70%, 45%)'
        assert performance_color(65) == 'hsl(55, 90%, 55%)'
        assert performance_color(35) == 'hsl(0, 80%, 50%)'
