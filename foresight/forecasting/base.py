import datetime as dt
from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np

from foresight.config import PipelineConfig
from foresight.exceptions import InsufficientDataError
from foresight.models import ForecastModelName, ForecastPoint, ModelFit

# Normal quantiles for the supported two-sided confidence levels
Z_SCORES = {0.8: 1.28, 0.95: 1.96, 0.99: 2.58}


def build_forecast_points(
    start_date: dt.date, points: Sequence[float], lows: Sequence[float], highs: Sequence[float]
) -> list[ForecastPoint]:
    """Assemble one ForecastPoint per day from ``start_date``, clamped so 0 <= low <= point <= high."""
    result = []
    for offset, (point, low, high) in enumerate(zip(points, lows, highs)):
        point = max(0.0, float(point))
        low = max(0.0, min(float(low), point))
        high = max(float(high), point)
        result.append(
            ForecastPoint(date=start_date + dt.timedelta(days=offset), point=point, ci_low=low, ci_high=high)
        )
    return result


class ForecastModel(ABC):
    """Base class for all forecast models."""

    name: ForecastModelName
    description: str = ""

    def __init__(self, config: PipelineConfig | None = None, rng: np.random.Generator | None = None) -> None:
        self.config = config or PipelineConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.random_seed)
        if not self.description and self.__doc__:
            self.description = self.__doc__.strip().split("\n")[0]

    @property
    @abstractmethod
    def min_history(self) -> int:
        """Fewest observations ``fit`` accepts."""

    def fit(self, series: Sequence[float]) -> ModelFit:
        """
        Fit the model to a daily series.

        Raises:
            InsufficientDataError: If the series is shorter than ``min_history``
        """
        values = np.asarray(series, dtype=float)
        if values.size < self.min_history:
            raise InsufficientDataError(
                f"{self.name} needs at least {self.min_history} observations",
                required=self.min_history,
                available=int(values.size),
            )
        return self._fit(values)

    def forecast(
        self,
        fit: ModelFit,
        horizon_days: int,
        start_date: dt.date,
        confidence_level: float | None = None,
    ) -> list[ForecastPoint]:
        """Forecast ``horizon_days`` consecutive days starting at ``start_date``."""
        confidence_level = confidence_level or self.config.confidence_level
        points, lows, highs = self._predict(fit, horizon_days, confidence_level)
        return build_forecast_points(start_date, points, lows, highs)

    def fit_forecast(self, series: Sequence[float], horizon_days: int, start_date: dt.date) -> list[ForecastPoint]:
        return self.forecast(self.fit(series), horizon_days, start_date)

    @abstractmethod
    def _fit(self, values: np.ndarray) -> ModelFit:
        """Fit on a validated series."""

    @abstractmethod
    def _predict(
        self, fit: ModelFit, horizon_days: int, confidence_level: float
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return point, lower and upper arrays of length ``horizon_days``."""
