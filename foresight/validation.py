"""
Forecast accuracy against realised revenue.
"""

import datetime as dt
from collections.abc import Mapping, Sequence

import numpy as np
import pandas as pd

from foresight.models import ForecastAccuracy, ForecastPoint, ForecastValidation


def validate_forecast(
    forecast: Sequence[ForecastPoint], actuals: Mapping[dt.date | str, float] | pd.Series
) -> ForecastAccuracy:
    """
    Compare forecast points with actual values by date.

    Only dates present in both are scored. MAPE skips zero actuals, R² is
    None for constant actuals, and an empty join returns n=0 with no metrics.

    Args:
        forecast: Forecast points
        actuals: Actual values keyed by date

    Returns:
        ForecastAccuracy with aggregate metrics and per-date rows
    """
    forecast_df = pd.DataFrame(
        [{"date": p.date, "forecast": p.point, "ci_low": p.ci_low, "ci_high": p.ci_high} for p in forecast],
        columns=["date", "forecast", "ci_low", "ci_high"],
    )
    actual_series = pd.Series(actuals, dtype=float) if not isinstance(actuals, pd.Series) else actuals
    actual_df = pd.DataFrame({"date": actual_series.index, "actual": actual_series.to_numpy(dtype=float)})

    forecast_df["date"] = pd.to_datetime(forecast_df["date"])
    actual_df["date"] = pd.to_datetime(actual_df["date"])

    merged = (
        pd.merge(actual_df, forecast_df, on="date", how="inner").dropna(subset=["actual", "forecast"]).sort_values("date")
    )
    if merged.empty:
        return ForecastAccuracy(n=0)

    errors = merged["forecast"] - merged["actual"]
    abs_errors = errors.abs()
    nonzero = merged["actual"] != 0
    mape = float((abs_errors[nonzero] / merged["actual"][nonzero].abs()).mean() * 100) if nonzero.any() else None

    total_ss = float(((merged["actual"] - merged["actual"].mean()) ** 2).sum())
    r2 = 1 - float((errors**2).sum()) / total_ss if total_ss > 0 else None
    within = (merged["actual"] >= merged["ci_low"]) & (merged["actual"] <= merged["ci_high"])

    rows = [
        ForecastValidation(
            date=row.date.date(),
            forecast=float(row.forecast),
            actual=float(row.actual),
            error=float(row.forecast - row.actual),
            abs_error=float(abs(row.forecast - row.actual)),
            within_band=bool(row.actual >= row.ci_low and row.actual <= row.ci_high),
        )
        for row in merged.itertuples(index=False)
    ]
    return ForecastAccuracy(
        n=len(merged),
        mae=float(abs_errors.mean()),
        rmse=float(np.sqrt((errors**2).mean())),
        mape=mape,
        bias=float(errors.mean()),
        r2=r2,
        within_confidence=float(within.mean()),
        points=rows,
    )
