"""
data_models.py - Core Data Structures
======================================

Value types for the display-side fatigue conversions: scale readings,
performance decomposition, timezone renderings and airport records.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any
from enum import Enum


# ============================================================================
# ENUMS
# ============================================================================

class SeverityTier(Enum):
    """Qualitative severity used to colour badges and bars"""
    SUCCESS = "success"
    WARNING = "warning"
    CRITICAL = "critical"


class BackendAcclimatizationState(Enum):
    """
    Acclimatization state as reported by the analysis backend.

    UNKNOWN and DEPARTED are the Table 7-1 states ('X' and 'D') the
    backend emits alongside the plain acclimatized/unacclimatized flags.
    """
    ACCLIMATIZED = "acclimatized"
    UNACCLIMATIZED = "unacclimatized"
    UNKNOWN = "unknown"
    DEPARTED = "departed"


# ============================================================================
# FATIGUE SCALES
# ============================================================================

@dataclass(frozen=True)
class ScaleReading:
    """One reading on a validated fatigue scale"""
    value: float
    label: str
    severity: SeverityTier

    def to_dict(self) -> Dict[str, Any]:
        return {'value': self.value, 'label': self.label, 'severity': self.severity.value}


@dataclass(frozen=True)
class FatigueScaleReadings:
    """KSS, Samn-Perelli and PVT readings derived from one performance score"""
    performance: float
    kss: ScaleReading
    samn_perelli: ScaleReading
    reaction_time: ScaleReading
    reaction_time_bar_pct: float  # PVT bar width over the 200-500 ms window


# ============================================================================
# PERFORMANCE DECOMPOSITION
# ============================================================================

@dataclass(frozen=True)
class PerformancePoint:
    """Single timeline point as computed by the analysis backend"""
    performance: float              # 20-100
    sleep_pressure: float = 0.0     # Process S (0-1)
    circadian: float = 0.0          # Process C (0-1)
    sleep_inertia: float = 0.0      # Process W (0-1)
    time_on_task_penalty: float = 0.0
    hours_on_duty: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PerformancePoint':
        """Build from a backend timeline entry (snake_case keys)"""
        def num(key: str) -> float:
            value = data.get(key)
            return float(value) if value is not None else 0.0

        return cls(
            performance=num('performance'),
            sleep_pressure=num('sleep_pressure'),
            circadian=num('circadian'),
            sleep_inertia=num('sleep_inertia'),
            time_on_task_penalty=num('time_on_task_penalty'),
            hours_on_duty=num('hours_on_duty'),
        )


@dataclass(frozen=True)
class PerformanceDecomposition:
    """
    Per-factor share of the performance deficit, in percentage points.

    P = 20 + 80 x [S.C x (1 - W) - ToT] is not inverted here; the known
    deficit (100 - P) is apportioned across the four raw factors.
    """
    performance: float
    sleep_pressure: float
    circadian: float
    sleep_inertia: float
    time_on_task_penalty: float
    hours_on_duty: float

    s_contribution: float = 0.0
    c_contribution: float = 0.0
    w_contribution: float = 0.0
    tot_contribution: float = 0.0

    @property
    def total_deficit(self) -> float:
        return max(0.0, 100.0 - self.performance)

    @property
    def total_contribution(self) -> float:
        return self.s_contribution + self.c_contribution + self.w_contribution + self.tot_contribution

    @property
    def unmodeled_deficit(self) -> float:
        """Deficit not attributed to any of the four factors"""
        return max(0.0, round(self.total_deficit - self.total_contribution, 1))

    @property
    def alert_remaining(self) -> float:
        """Width of the 'Alert' segment of the stacked contribution bar"""
        return max(0.0, 100.0 - self.total_contribution)

    def get_component_breakdown(self) -> Dict[str, float]:
        return {
            'performance': self.performance,
            'hours_on_duty': self.hours_on_duty,
            's_contribution': self.s_contribution,
            'c_contribution': self.c_contribution,
            'w_contribution': self.w_contribution,
            'tot_contribution': self.tot_contribution,
            'unmodeled_deficit': self.unmodeled_deficit,
            'alert_remaining': self.alert_remaining,
        }


# ============================================================================
# TIMEZONE STRUCTURES
# ============================================================================

@dataclass(frozen=True)
class TimezoneResult:
    """Broken-down wall-clock time of a UTC instant in one timezone"""
    day: int                # day of month in the target zone
    hour: float             # decimal hour (14.5 = 14:30)
    hh_mm: str
    year: int = 0
    month: int = 0
    moment: Optional[datetime] = None  # aware datetime in the target zone

    @classmethod
    def empty(cls) -> 'TimezoneResult':
        return cls(day=0, hour=0.0, hh_mm='')


@dataclass(frozen=True)
class TimeTriple:
    """Zulu / local / home-base renderings of the same interval"""
    zulu: str
    local: str
    home: str
    local_is_home_ref: bool


@dataclass(frozen=True)
class AcclimatizationContext:
    """Decision input for the EASA ORO.FTL.105 reference-frame rule"""
    hours_away_from_base: float
    location_timezone: str = ''   # filled in by the triple-time builders
    home_base_timezone: str = ''
    backend_state: Optional[BackendAcclimatizationState] = None


# ============================================================================
# AIRPORTS
# ============================================================================

@dataclass(frozen=True)
class Airport:
    """Airport with timezone information"""
    code: str           # IATA (e.g., "LHR")
    timezone: str       # IANA (e.g., "Europe/London")
    latitude: float = 0.0
    longitude: float = 0.0
    name: str = ''
    city: str = ''
    country: str = ''
