"""
Configuration & Parameters for the Display Core
===============================================

All configuration dataclasses used to re-derive dashboard values:
- EASAFatigueFramework: EASA FTL regulatory definitions
- ScaleCalibration: KSS / Samn-Perelli / PVT calibration and label bands
- RiskThresholds: Performance score thresholds
- HazardParameters: Fatigue Hazard Area integration settings
- ModelConfig: Master configuration container

Scientific Foundation:
    Åkerstedt & Gillberg (1990), Samn & Perelli (1982),
    Basner & Dinges (2011), Dawson & McCulloch (2005)
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass
class EASAFatigueFramework:
    """EASA FTL regulatory definitions (EU Regulation 965/2012)"""

    # Body clock stays on home base until this long away - ORO.FTL.105
    acclimatization_threshold_hours: float = 48.0


@dataclass
class ScaleCalibration:
    """
    Piecewise-linear calibration of the 20-100 performance score against
    validated subjective and objective fatigue scales.

    Breakpoints are (performance, scale value) pairs, highest performance
    first. Label bands are (upper bound, label, severity) checked in order.
    """

    performance_floor: float = 20.0
    performance_ceiling: float = 100.0

    # Åkerstedt & Gillberg (1990) validation data
    kss_breakpoints: List[Tuple[float, float]] = field(default_factory=lambda: [
        (95, 1), (88, 2), (83, 3), (80, 4), (77, 5), (70, 6), (55, 7), (35, 8), (20, 9),
    ])
    kss_min: float = 1.0
    kss_max: float = 9.0

    # Samn & Perelli (1982) aviator fatigue data
    samn_perelli_breakpoints: List[Tuple[float, float]] = field(default_factory=lambda: [
        (95, 1), (88, 2), (77, 3), (65, 4), (55, 5), (35, 6), (20, 7),
    ])
    samn_perelli_min: float = 1.0
    samn_perelli_max: float = 7.0

    # Basner & Dinges (2011) dose-response: RT = base + (100 - P) x slope
    reaction_time_base_ms: float = 220.0
    reaction_time_slope_ms: float = 3.5
    reaction_time_min_ms: float = 200.0
    reaction_time_max_ms: float = 500.0

    kss_bands: List[Tuple[float, str, str]] = field(default_factory=lambda: [
        (3, 'Alert', 'success'),
        (5, 'Neither alert nor sleepy', 'success'),
        (6, 'Some signs of sleepiness', 'warning'),
        (7, 'Sleepy, effort to stay awake', 'warning'),
        (8, 'Sleepy, great effort', 'critical'),
        (float('inf'), 'Extremely sleepy', 'critical'),
    ])

    samn_perelli_bands: List[Tuple[float, str, str]] = field(default_factory=lambda: [
        (2, 'Fully alert', 'success'),
        (3, 'Okay, somewhat fresh', 'success'),
        (4, 'A little tired', 'warning'),
        (5, 'Moderately tired', 'warning'),
        (6, 'Extremely tired', 'critical'),
        (float('inf'), 'Completely exhausted', 'critical'),
    ])

    reaction_time_bands: List[Tuple[float, str, str]] = field(default_factory=lambda: [
        (280, 'Normal', 'success'),
        (350, 'Mildly impaired', 'warning'),
        (420, 'Significantly impaired', 'critical'),
        (float('inf'), 'Severely impaired', 'critical'),
    ])

    def clamp_performance(self, performance: float) -> float:
        return max(self.performance_floor, min(self.performance_ceiling, performance))


@dataclass
class RiskThresholds:
    """Performance score thresholds with EASA references"""

    thresholds: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        'low': (75, 100),
        'moderate': (65, 75),
        'high': (55, 65),
        'critical': (45, 55),
        'extreme': (0, 45)
    })

    actions: Dict[str, Dict[str, str]] = field(default_factory=lambda: {
        'low': {'action': 'None required', 'description': 'Well-rested state'},
        'moderate': {'action': 'Enhanced monitoring', 'description': 'Equivalent to ~6h sleep'},
        'high': {'action': 'Mitigation required', 'description': 'Equivalent to ~5h sleep'},
        'critical': {'action': 'MANDATORY roster modification', 'description': 'Equivalent to ~4h sleep'},
        'extreme': {'action': 'UNSAFE - Do not fly', 'description': 'Severe impairment'}
    })

    def classify(self, performance: float) -> str:
        if performance is None:
            return 'unknown'
        for level, (low, high) in self.thresholds.items():
            if low <= performance < high:
                return level
        # 100 sits on the open upper edge of the top band
        if performance >= self.thresholds['low'][0]:
            return 'low'
        return 'extreme'

    def get_action(self, risk_level: str) -> Dict[str, str]:
        return self.actions.get(risk_level, self.actions['extreme'])


@dataclass
class HazardParameters:
    """
    Fatigue Hazard Area integration
    Reference: Dawson & McCulloch (2005) Sleep Med Rev 9:365-380
    """

    threshold: float = 77.0           # moderate-risk performance line
    resolution_minutes: float = 5.0   # backend timeline step

    # (upper bound in %-minutes, label, severity)
    severity_bands: List[Tuple[float, str, str]] = field(default_factory=lambda: [
        (100, 'Low', 'success'),
        (500, 'Moderate', 'warning'),
        (float('inf'), 'High', 'critical'),
    ])


@dataclass
class ModelConfig:
    """Master configuration container"""
    easa_framework: EASAFatigueFramework
    scale_calibration: ScaleCalibration
    risk_thresholds: RiskThresholds
    hazard_params: HazardParameters

    @classmethod
    def default_easa_config(cls):
        return cls(
            easa_framework=EASAFatigueFramework(),
            scale_calibration=ScaleCalibration(),
            risk_thresholds=RiskThresholds(),
            hazard_params=HazardParameters(),
        )

    @classmethod
    def conservative_config(cls):
        """
        Stricter thresholds for safety-first review.
        - Tighter risk thresholds (scores shift up by ~5 points)
        - Higher FHA threshold and lower severity bands
        """
        return cls(
            easa_framework=EASAFatigueFramework(),
            scale_calibration=ScaleCalibration(),
            risk_thresholds=RiskThresholds(thresholds={
                'low': (80, 100),
                'moderate': (70, 80),
                'high': (60, 70),
                'critical': (50, 60),
                'extreme': (0, 50)
            }),
            hazard_params=HazardParameters(
                threshold=80.0,
                severity_bands=[
                    (50, 'Low', 'success'),
                    (300, 'Moderate', 'warning'),
                    (float('inf'), 'High', 'critical'),
                ],
            ),
        )

    @classmethod
    def from_preset(cls, name: str):
        presets = {
            'default': cls.default_easa_config,
            'conservative': cls.conservative_config,
        }
        if name not in presets:
            raise ValueError(f"Unknown config preset '{name}'. Choose from: {', '.join(presets)}")
        return presets[name]()
