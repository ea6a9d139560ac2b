# primitives/__init__.py
# Import and expose all primitives for easy access

from foresight.exceptions import UnknownIdentifierError

# Numeric primitives
from .numeric import (
    calculate_coefficient_of_variation,
    calculate_concentration_index,
    calculate_relative_change,
    clamp,
    safe_divide,
    sigmoid,
)

# Time Series primitives
from .time_series import (
    apply_ewma,
    calculate_autocorrelation,
    calculate_rolling_stats,
    calculate_seasonal_indices,
    calculate_window_ratio,
    detect_seasonality,
    detect_trend,
)

# Create a dictionary of primitives organized by family
_primitive_families = {
    "numeric": [
        safe_divide,
        clamp,
        calculate_relative_change,
        calculate_coefficient_of_variation,
        sigmoid,
        calculate_concentration_index,
    ],
    "time_series": [
        apply_ewma,
        calculate_rolling_stats,
        calculate_autocorrelation,
        calculate_seasonal_indices,
        detect_seasonality,
        detect_trend,
        calculate_window_ratio,
    ],
}


def list_primitives_by_family():
    """List all primitives organized by family"""
    return {family: [func.__name__ for func in funcs] for family, funcs in _primitive_families.items()}


def get_primitive_metadata(primitive_name: str):
    """Get name, family, version and description of a primitive from its docstring"""
    primitive_func = next(
        (func for funcs in _primitive_families.values() for func in funcs if func.__name__ == primitive_name), None
    )
    if primitive_func is None:
        raise UnknownIdentifierError(primitive_name, "primitive")

    lines = [line.strip() for line in (primitive_func.__doc__ or "").split("\n") if line.strip()]
    description = next(
        (line for line in lines if not any(line.startswith(tag) for tag in ("Family:", "Version:", "Args:", "Returns:"))),
        "",
    )
    family = next((line.split(":", 1)[1].strip() for line in lines if line.startswith("Family:")), "")
    version = next((line.split(":", 1)[1].strip() for line in lines if line.startswith("Version:")), "")
    return {"name": primitive_name, "family": family, "version": version, "description": description}


__all__ = [
    "safe_divide",
    "clamp",
    "calculate_relative_change",
    "calculate_coefficient_of_variation",
    "sigmoid",
    "calculate_concentration_index",
    "apply_ewma",
    "calculate_rolling_stats",
    "calculate_autocorrelation",
    "calculate_seasonal_indices",
    "detect_seasonality",
    "detect_trend",
    "calculate_window_ratio",
    "list_primitives_by_family",
    "get_primitive_metadata",
]
