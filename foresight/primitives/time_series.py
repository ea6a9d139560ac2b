"""
Time series primitives.
=============================================================================

Smoothing, rolling statistics, autocorrelation, seasonality and trend
detection on plain daily series.

Dependencies:
  - numpy
  - pandas
  - statsmodels (autocorrelation, classical decomposition)
"""

from collections.abc import Sequence

import numpy as np
import pandas as pd
from statsmodels.tsa.seasonal import seasonal_decompose
from statsmodels.tsa.stattools import acf

from foresight.exceptions import ValidationError
from foresight.models import SeasonalityProfile
from foresight.primitives.numeric import calculate_relative_change

SEASONALITY_THRESHOLD = 0.3
TREND_THRESHOLD = 0.1


def apply_ewma(values: Sequence[float], alpha: float) -> list[float]:
    """
    Exponentially weighted moving average, seeded with the first value.

    Family: time_series
    Version: 1.0

    Args:
        values: Series to smooth
        alpha: Smoothing factor in (0, 1]

    Returns:
        Smoothed series, same length as the input

    Raises:
        ValidationError: If alpha is outside (0, 1]
    """
    if not 0 < alpha <= 1:
        raise ValidationError("alpha must be in (0, 1]", {"alpha": alpha})
    if len(values) == 0:
        return []
    return pd.Series(values, dtype=float).ewm(alpha=alpha, adjust=False).mean().tolist()


def calculate_rolling_stats(values: Sequence[float], window: int) -> pd.DataFrame:
    """
    Trailing rolling mean, population std and population variance.

    Early positions use whatever history is available.

    Family: time_series
    Version: 1.0

    Returns:
        DataFrame with columns mean, std and variance
    """
    if window < 1:
        raise ValidationError("window must be a positive integer", {"window": window})
    rolling = pd.Series(values, dtype=float).rolling(window=window, min_periods=1)
    return pd.DataFrame(
        {
            "mean": rolling.mean(),
            "std": rolling.std(ddof=0),
            "variance": rolling.var(ddof=0),
        }
    )


def calculate_autocorrelation(values: Sequence[float], lag: int) -> float:
    """
    Sample autocorrelation at a single lag.

    Family: time_series
    Version: 1.0

    Returns:
        Autocorrelation in [-1, 1]; 0.0 for constant or too-short series
    """
    arr = np.asarray(values, dtype=float)
    if lag < 1 or arr.size <= lag or np.isclose(arr.var(), 0.0):
        return 0.0
    value = acf(arr, nlags=lag, fft=False)[lag]
    return 0.0 if np.isnan(value) else float(value)


def calculate_seasonal_indices(values: Sequence[float], period: int = 7) -> list[float]:
    """
    Mean of each seasonal position divided by the overall mean.

    Position k covers the values at indices k, k + period, k + 2 * period, ...

    Family: time_series
    Version: 1.0
    """
    arr = np.asarray(values, dtype=float)
    overall = arr.mean() if arr.size else 0.0
    if arr.size < period or overall == 0:
        return [1.0] * period
    return [float(arr[k::period].mean() / overall) for k in range(period)]


def detect_seasonality(values: Sequence[float], period: int = 7) -> SeasonalityProfile:
    """
    Detect a repeating cycle of the given period.

    The series is detrended with a centred moving average (classical
    decomposition) and is seasonal when it spans at least two cycles and the
    detrended autocorrelation at lag ``period`` exceeds 0.3.

    Family: time_series
    Version: 1.0

    Returns:
        SeasonalityProfile with the autocorrelation, strength and seasonal indices
    """
    arr = np.asarray(values, dtype=float)
    indices = calculate_seasonal_indices(arr, period)
    if arr.size < 2 * period:
        return SeasonalityProfile(
            has_seasonality=False, autocorrelation=0.0, strength=float(np.std(indices)), seasonal_indices=indices
        )

    trend = seasonal_decompose(arr, model="additive", period=period, two_sided=True).trend
    detrended = arr - trend
    autocorrelation = calculate_autocorrelation(detrended[~np.isnan(detrended)], period)
    return SeasonalityProfile(
        has_seasonality=autocorrelation > SEASONALITY_THRESHOLD,
        autocorrelation=autocorrelation,
        strength=float(np.std(indices)),
        seasonal_indices=indices,
    )


def detect_trend(values: Sequence[float], threshold: float = TREND_THRESHOLD) -> bool:
    """
    Whether the second half of the series differs from the first half by at
    least ``threshold`` relative to the first half's mean. A series that
    starts from a zero mean and then moves counts as trending.

    Family: time_series
    Version: 1.0
    """
    if len(values) < 7:
        return False
    arr = np.asarray(values, dtype=float)
    mid = arr.size // 2
    first, second = arr[:mid].mean(), arr[mid:].mean()
    if first == 0:
        return bool(second != 0)
    change = calculate_relative_change(second, first)
    return change is not None and abs(change) >= threshold


def calculate_window_ratio(values: Sequence[float], window: int = 7) -> float | None:
    """
    Mean of the last ``window`` values divided by the mean of the ``window`` before.

    Family: time_series
    Version: 1.0

    Returns:
        The ratio, or None with fewer than 2 * window values or a zero prior mean
    """
    if len(values) < 2 * window:
        return None
    arr = np.asarray(values, dtype=float)
    prior = arr[-2 * window : -window].mean()
    if prior == 0:
        return None
    return float(arr[-window:].mean() / prior)
