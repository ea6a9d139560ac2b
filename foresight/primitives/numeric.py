"""
Numeric operations primitives.
=============================================================================

General-purpose numeric helpers shared by the scores, models and rules.

Dependencies:
  - numpy
  - scipy (logistic function)
"""

from collections.abc import Mapping, Sequence

import numpy as np
from scipy.special import expit

from foresight.exceptions import ValidationError


def safe_divide(numerator: float, denominator: float, default_value: float | None = None) -> float | None:
    """
    Safely divide two numbers, handling zero denominator cases.

    Family: numeric
    Version: 1.0

    Args:
        numerator: The numerator value
        denominator: The denominator value
        default_value: Value to return if denominator is zero

    Returns:
        The division result, or default_value if denominator is zero

    Raises:
        ValidationError: If inputs are not numeric
    """
    try:
        numerator = float(numerator)
        denominator = float(denominator)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            "Both numerator and denominator must be numeric",
            {"numerator": numerator, "denominator": denominator},
        ) from exc

    if denominator == 0:
        return default_value
    return numerator / denominator


def clamp(value: float, lower: float, upper: float) -> float:
    """
    Bound a value to the closed interval [lower, upper].

    Family: numeric
    Version: 1.0
    """
    if lower > upper:
        raise ValidationError("lower bound must not exceed upper bound", {"lower": lower, "upper": upper})
    return float(min(max(value, lower), upper))


def calculate_relative_change(
    current_value: float, reference_value: float, default_value: float | None = None
) -> float | None:
    """
    Calculate (current - reference) / |reference|.

    Family: numeric
    Version: 1.0

    Args:
        current_value: The new value
        reference_value: The baseline value
        default_value: Returned when the reference is zero

    Returns:
        The relative change as a fraction, or default_value
    """
    if reference_value == 0:
        return default_value
    return (float(current_value) - float(reference_value)) / abs(float(reference_value))


def calculate_coefficient_of_variation(values: Sequence[float], default_value: float | None = None) -> float | None:
    """
    Population standard deviation divided by the mean.

    Family: numeric
    Version: 1.0

    Returns:
        The coefficient of variation, or default_value for an empty series or a non-positive mean
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return default_value
    mean = float(arr.mean())
    if mean <= 0:
        return default_value
    return float(arr.std(ddof=0) / mean)


def sigmoid(value: float) -> float:
    """
    Logistic function 1 / (1 + e^-x).

    Family: numeric
    Version: 1.0
    """
    return float(expit(value))


def calculate_concentration_index(shares: Mapping[str, float]) -> float | None:
    """
    Herfindahl-Hirschman index of a share distribution.

    Shares are normalised to sum to 1 before squaring, so the result lies in
    (0, 1]; 1 means a single segment holds everything.

    Family: numeric
    Version: 1.0

    Args:
        shares: Mapping of segment to (non-negative) share

    Returns:
        The HHI, or None when the total share is zero
    """
    values = np.asarray([max(float(v), 0.0) for v in shares.values()], dtype=float)
    total = values.sum()
    if values.size == 0 or total <= 0:
        return None
    normalised = values / total
    return float((normalised**2).sum())
