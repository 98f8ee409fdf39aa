"""
Performance Decomposition
=========================

Splits the performance deficit of a timeline point into per-factor
contributions for the stacked contribution chart.

Performance integration used by the analysis backend:

    P = 20 + 80 x [S.C x (1 - W) - ToT]

That formula is not inverted here. The known deficit (100 - P) is
apportioned across the raw factor magnitudes S, C, W and ToT, so that
each factor's share is proportional to its own value.
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Union

from core.parameters import ScaleCalibration
from models.data_models import PerformancePoint, PerformanceDecomposition

logger = logging.getLogger(__name__)

PointLike = Union[PerformancePoint, Dict[str, Any]]


def _floor_tenth(value: float) -> float:
    # round() first so 12.3 stored as 12.2999... still floors to 12.3
    return math.floor(round(value * 10, 6)) / 10


def _cap_to_deficit(shares: List[float], total_deficit: float) -> List[float]:
    """Trim the largest share a tenth at a time until the sum fits the deficit"""
    shares = list(shares)
    while sum(shares) > total_deficit:
        i = shares.index(max(shares))
        shares[i] = max(0.0, round(shares[i] - 0.1, 1))
    return shares


class PerformanceDecomposer:
    """Apportions the performance deficit across S, C, W and time-on-task"""

    def __init__(self, calibration: ScaleCalibration = None):
        self.calibration = calibration or ScaleCalibration()

    def decompose(self, point: PointLike) -> PerformanceDecomposition:
        if isinstance(point, dict):
            point = PerformancePoint.from_dict(point)

        performance = self.calibration.clamp_performance(point.performance)
        s = max(0.0, point.sleep_pressure)
        c = max(0.0, point.circadian)
        w = max(0.0, point.sleep_inertia)
        tot = max(0.0, point.time_on_task_penalty)

        total_deficit = max(0.0, 100.0 - performance)
        raw_total = s + c + w + tot

        contributions = [0.0, 0.0, 0.0, 0.0]
        if raw_total > 0 and total_deficit > 0:
            # Floored to a tenth, then capped so the float sum never exceeds the deficit
            contributions = _cap_to_deficit(
                [_floor_tenth(x / raw_total * total_deficit) for x in (s, c, w, tot)],
                total_deficit,
            )
        elif total_deficit > 0:
            logger.debug(
                f"No factor magnitude at {point.hours_on_duty:.2f}h on duty; "
                f"{total_deficit:.1f} pts left unmodeled"
            )

        s_contrib, c_contrib, w_contrib, tot_contrib = contributions
        return PerformanceDecomposition(
            performance=performance,
            sleep_pressure=point.sleep_pressure,
            circadian=point.circadian,
            sleep_inertia=point.sleep_inertia,
            time_on_task_penalty=point.time_on_task_penalty,
            hours_on_duty=point.hours_on_duty,
            s_contribution=s_contrib,
            c_contribution=c_contrib,
            w_contribution=w_contrib,
            tot_contribution=tot_contrib,
        )

    def decompose_timeline(self, points: Iterable[PointLike]) -> List[PerformanceDecomposition]:
        return [self.decompose(p) for p in points]


def decompose_performance(point: PointLike) -> PerformanceDecomposition:
    """Decompose one point with the default calibration"""
    return PerformanceDecomposer().decompose(point)
