"""
Core Display Components
=======================

Main exports for re-deriving dashboard values from fatigue analysis results.
"""

from core.parameters import (
    EASAFatigueFramework,
    ScaleCalibration,
    RiskThresholds,
    HazardParameters,
    ModelConfig
)

from core.fatigue_scales import (
    FatigueScaleConverter,
    performance_color,
    performance_to_kss,
    performance_to_samn_perelli,
    performance_to_reaction_time,
)
from core.decomposition import PerformanceDecomposer, decompose_performance
from core.hazard import calculate_fha, fha_severity, fha_summary

from core.timezones import (
    utc_to_zulu,
    utc_to_timezone,
    utc_to_home_base,
    utc_day_hour,
    utc_offset_hours,
    parse_time_to_hours,
    decimal_to_hhmm,
    get_acclimatized_timezone,
    is_on_home_base_reference,
    build_triple_time,
    build_sleep_triple_time,
)
from core.airports import AirportDirectory

__all__ = [
    # Parameters
    'EASAFatigueFramework',
    'ScaleCalibration',
    'RiskThresholds',
    'HazardParameters',
    'ModelConfig',
    # Fatigue scales
    'FatigueScaleConverter',
    'performance_color',
    'performance_to_kss',
    'performance_to_samn_perelli',
    'performance_to_reaction_time',
    # Decomposition & hazard
    'PerformanceDecomposer',
    'decompose_performance',
    'calculate_fha',
    'fha_severity',
    'fha_summary',
    # Timezones
    'utc_to_zulu',
    'utc_to_timezone',
    'utc_to_home_base',
    'utc_day_hour',
    'utc_offset_hours',
    'parse_time_to_hours',
    'decimal_to_hhmm',
    'get_acclimatized_timezone',
    'is_on_home_base_reference',
    'build_triple_time',
    'build_sleep_triple_time',
    # Airports
    'AirportDirectory',
]
