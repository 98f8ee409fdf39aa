"""
Fatigue Hazard Area
===================

FHA = sum of max(0, threshold - P(t)) x dt over the timeline, in %-minutes.
Higher values indicate greater cumulative fatigue exposure.

Reference: Dawson & McCulloch (2005) Sleep Med Rev 9:365-380
"""

from typing import Any, Dict, Iterable, Optional, Tuple

from core.parameters import HazardParameters
from models.data_models import SeverityTier


def _performance_of(point: Any) -> Optional[float]:
    if isinstance(point, (int, float)):
        return float(point)
    if isinstance(point, dict):
        return point.get('performance')
    return getattr(point, 'performance', None)


def calculate_fha(
    points: Iterable[Any],
    threshold: float = None,
    resolution_min: float = None,
    params: HazardParameters = None,
) -> int:
    """
    Fatigue Hazard Area in %-minutes.

    Args:
        points: Performance values, backend timeline dicts or objects
            with a ``performance`` attribute
        threshold: Performance line (defaults to params.threshold, 77 %)
        resolution_min: Time step between points in minutes (default 5)

    Returns:
        FHA rounded to the nearest %-minute; 0 for an empty timeline
    """
    params = params or HazardParameters()
    threshold = params.threshold if threshold is None else threshold
    resolution_min = params.resolution_minutes if resolution_min is None else resolution_min

    fha = 0.0
    for point in points or []:
        performance = _performance_of(point)
        if performance is None:
            continue
        fha += max(0.0, threshold - performance) * resolution_min
    return int(round(fha))


def fha_severity(fha: float, params: HazardParameters = None) -> Tuple[str, SeverityTier]:
    """Label and severity tier for an FHA value"""
    params = params or HazardParameters()
    for upper, label, severity in params.severity_bands:
        if fha <= upper:
            return label, SeverityTier(severity)
    _, label, severity = params.severity_bands[-1]
    return label, SeverityTier(severity)


def fha_summary(points: Iterable[Any], params: HazardParameters = None) -> Dict[str, Any]:
    params = params or HazardParameters()
    fha = calculate_fha(points, params=params)
    label, severity = fha_severity(fha, params)
    return {'fha': fha, 'label': label, 'severity': severity.value}
