"""
Week-over-week trend of a score history.
"""

from collections.abc import Sequence
from types import MappingProxyType

import numpy as np

from foresight.models import ScoreKind, ScoreTrend, ScoreTrendAnalysis
from foresight.primitives import calculate_relative_change

TREND_WINDOW = 7

# Absolute change in score units beyond which the score is moving
CHANGE_THRESHOLDS = MappingProxyType({ScoreKind.CFSI: 5.0, ScoreKind.CHURN: 0.05})
LABELS = MappingProxyType({ScoreKind.CFSI: "CFSI", ScoreKind.CHURN: "Churn risk"})


def analyze_score_trend(history: Sequence[float], kind: "ScoreKind | str") -> ScoreTrendAnalysis:
    """
    Compare the mean of the last 7 scores with the mean of the 7 before.

    A rising CFSI is improving and a falling one is declining; for churn risk
    a falling value is improving and a rising one is worsening.
    """
    kind = ScoreKind(kind)
    label = LABELS[kind]
    values = np.asarray(history, dtype=float)
    if values.size < 2 or values.size <= TREND_WINDOW:
        return ScoreTrendAnalysis(
            kind=kind,
            trend=ScoreTrend.STABLE,
            change=0.0,
            change_percent=0.0,
            description="Insufficient data for trend analysis",
        )

    recent = values[-TREND_WINDOW:].mean()
    prior = values[-2 * TREND_WINDOW : -TREND_WINDOW].mean()
    change = float(recent - prior)
    change_percent = (calculate_relative_change(recent, prior, default_value=0.0) or 0.0) * 100
    threshold = CHANGE_THRESHOLDS[kind]

    if kind == ScoreKind.CFSI:
        if change > threshold:
            trend = ScoreTrend.IMPROVING
        elif change < -threshold:
            trend = ScoreTrend.DECLINING
        else:
            trend = ScoreTrend.STABLE
    elif change < -threshold:
        trend = ScoreTrend.IMPROVING
    elif change > threshold:
        trend = ScoreTrend.WORSENING
    else:
        trend = ScoreTrend.STABLE

    if trend == ScoreTrend.STABLE:
        description = f"{label} stable with {change_percent:.1f}% change over the past week"
    else:
        description = f"{label} {trend.value} by {abs(change_percent):.1f}% over the past week"

    return ScoreTrendAnalysis(
        kind=kind, trend=trend, change=change, change_percent=change_percent, description=description
    )
