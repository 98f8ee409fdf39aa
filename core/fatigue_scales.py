"""
Derived Fatigue Scales
======================

Converts the model performance score (20-100) into three validated
fatigue scales for display:

- Karolinska Sleepiness Scale (KSS, 1-9)
- Samn-Perelli Fatigue Scale (1-7)
- PVT mean reaction time (ms)

Out-of-domain input is clamped, never rejected.

References:
    Åkerstedt & Gillberg (1990) Int J Neurosci 52:29-37
    Samn & Perelli (1982) USAF SAM-TR-82-21
    Basner & Dinges (2011) Sleep 34(5):581-591
"""

from typing import Dict, List, Optional, Tuple

from core.parameters import ModelConfig, ScaleCalibration, RiskThresholds
from models.data_models import FatigueScaleReadings, ScaleReading, SeverityTier


def _interpolate(performance: float, breakpoints: List[Tuple[float, float]]) -> float:
    """Piecewise linear lookup, breakpoints ordered by descending performance"""
    for (p1, k1), (p2, k2) in zip(breakpoints, breakpoints[1:]):
        if p2 <= performance <= p1:
            ratio = (p1 - performance) / (p1 - p2)
            return round(k1 + ratio * (k2 - k1), 1)

    # Above the first breakpoint (or below the last) the scale saturates
    if performance >= breakpoints[0][0]:
        return float(breakpoints[0][1])
    return float(breakpoints[-1][1])


def _label(value: float, bands: List[Tuple[float, str, str]]) -> Tuple[str, SeverityTier]:
    for upper, label, severity in bands:
        if value <= upper:
            return label, SeverityTier(severity)
    _, label, severity = bands[-1]
    return label, SeverityTier(severity)


class FatigueScaleConverter:
    """Maps one performance score onto KSS, Samn-Perelli and PVT"""

    def __init__(self, calibration: ScaleCalibration = None, risk_thresholds: RiskThresholds = None):
        self.calibration = calibration or ScaleCalibration()
        self.risk_thresholds = risk_thresholds or RiskThresholds()

    @classmethod
    def from_config(cls, config: ModelConfig) -> 'FatigueScaleConverter':
        return cls(config.scale_calibration, config.risk_thresholds)

    # ------------------------------------------------------------------
    # Scale values
    # ------------------------------------------------------------------

    def to_kss(self, performance: float) -> float:
        """
        P >= 95 -> KSS 1 (extremely alert)
        P = 77  -> KSS 5 (neither alert nor sleepy)
        P = 55  -> KSS 7 (sleepy, some effort to stay awake)
        P <= 20 -> KSS 9 (extremely sleepy, fighting sleep)
        """
        cal = self.calibration
        kss = _interpolate(cal.clamp_performance(performance), cal.kss_breakpoints)
        return max(cal.kss_min, min(cal.kss_max, kss))

    def to_samn_perelli(self, performance: float) -> float:
        """
        P >= 95 -> SP 1 (fully alert, wide awake)
        P = 77  -> SP 3 (okay, somewhat fresh)
        P <= 20 -> SP 7 (completely exhausted)
        """
        cal = self.calibration
        sp = _interpolate(cal.clamp_performance(performance), cal.samn_perelli_breakpoints)
        return max(cal.samn_perelli_min, min(cal.samn_perelli_max, sp))

    def to_reaction_time(self, performance: float) -> int:
        """Well-rested ~220 ms, severe impairment ~500 ms"""
        cal = self.calibration
        p = cal.clamp_performance(performance)
        rt = cal.reaction_time_base_ms + (cal.performance_ceiling - p) * cal.reaction_time_slope_ms
        return int(round(max(cal.reaction_time_min_ms, min(cal.reaction_time_max_ms, rt))))

    def reaction_time_bar_pct(self, reaction_time_ms: float) -> float:
        """Bar width (0-100 %) over the PVT display window"""
        cal = self.calibration
        window = cal.reaction_time_max_ms - cal.reaction_time_min_ms
        pct = (reaction_time_ms - cal.reaction_time_min_ms) / window * 100
        return max(0.0, min(100.0, pct))

    # ------------------------------------------------------------------
    # Readings
    # ------------------------------------------------------------------

    def kss_reading(self, performance: float) -> ScaleReading:
        kss = self.to_kss(performance)
        label, severity = _label(kss, self.calibration.kss_bands)
        return ScaleReading(kss, label, severity)

    def samn_perelli_reading(self, performance: float) -> ScaleReading:
        sp = self.to_samn_perelli(performance)
        label, severity = _label(sp, self.calibration.samn_perelli_bands)
        return ScaleReading(sp, label, severity)

    def reaction_time_reading(self, performance: float) -> ScaleReading:
        rt = self.to_reaction_time(performance)
        label, severity = _label(rt, self.calibration.reaction_time_bands)
        return ScaleReading(rt, label, severity)

    def convert(self, performance: float) -> FatigueScaleReadings:
        rt = self.reaction_time_reading(performance)
        return FatigueScaleReadings(
            performance=performance,
            kss=self.kss_reading(performance),
            samn_perelli=self.samn_perelli_reading(performance),
            reaction_time=rt,
            reaction_time_bar_pct=self.reaction_time_bar_pct(rt.value),
        )

    def classify_performance(self, performance: Optional[float]) -> str:
        return self.risk_thresholds.classify(performance)

    def risk_action(self, performance: Optional[float]) -> Dict[str, str]:
        """Recommended action for the risk band; unknown scores get the extreme action"""
        return self.risk_thresholds.get_action(self.classify_performance(performance))


def performance_color(performance: float) -> str:
    """HSL colour for a performance cell (green -> red)"""
    if performance >= 80:
        return 'hsl(120, 70%, 45%)'
    if performance >= 70:
        return 'hsl(90, 70%, 50%)'
    if performance >= 60:
        return 'hsl(55, 90%, 55%)'
    if performance >= 50:
        return 'hsl(40, 95%, 50%)'
    if performance >= 40:
        return 'hsl(20, 95%, 50%)'
    return 'hsl(0, 80%, 50%)'


# Module-level shortcuts on the default calibration
_default_converter = FatigueScaleConverter()


def performance_to_kss(performance: float) -> float:
    return _default_converter.to_kss(performance)


def performance_to_samn_perelli(performance: float) -> float:
    return _default_converter.to_samn_perelli(performance)


def performance_to_reaction_time(performance: float) -> int:
    return _default_converter.to_reaction_time(performance)
