import datetime as dt
import logging
from collections.abc import Mapping, Sequence

import numpy as np

from foresight.exceptions import EnsembleError, InsufficientDataError, ModelError
from foresight.forecasting.base import ForecastModel, build_forecast_points
from foresight.models import EnsembleForecast, ForecastModelName, ForecastPoint

logger = logging.getLogger(__name__)


class Ensemble:
    """Weighted point-by-point combination of independent forecast models.

    Members that cannot fit the series are skipped and the remaining weights
    are renormalised. A lone survivor's forecast is returned as-is.
    """

    def __init__(self, models: Sequence[ForecastModel], weights: Mapping[str, float] | None = None) -> None:
        if not models:
            raise ValueError("Ensemble needs at least one model")
        self.models = list(models)
        self.weights = {ForecastModelName(name).value: float(weight) for name, weight in (weights or {}).items()}

    def weight_for(self, model: ForecastModel) -> float:
        return self.weights.get(model.name.value, 1.0 if not self.weights else 0.0)

    def forecast(self, series: Sequence[float], horizon_days: int, start_date: dt.date) -> EnsembleForecast:
        """
        Fit and forecast every member, then combine.

        Raises:
            EnsembleError: If no member produced a forecast
        """
        outputs: dict[str, list[ForecastPoint]] = {}
        weights: dict[str, float] = {}
        failures: dict[str, str] = {}
        for model in self.models:
            name = model.name.value
            try:
                outputs[name] = model.fit_forecast(series, horizon_days, start_date)
                weights[name] = self.weight_for(model)
            except (InsufficientDataError, ModelError) as exc:
                logger.warning("Skipping %s model: %s", name, exc.message)
                failures[name] = exc.message

        if not outputs:
            raise EnsembleError("No forecast model could be fitted", failures)

        if len(outputs) == 1:
            name, points = next(iter(outputs.items()))
            return EnsembleForecast(points=points, weights={name: 1.0}, failures=failures)

        total = sum(weights.values())
        if total <= 0:
            weights = {name: 1.0 for name in outputs}
            total = float(len(outputs))
        normalised = {name: weight / total for name, weight in weights.items()}

        stacked = {
            field: np.array([[getattr(p, field) for p in outputs[name]] for name in outputs])
            for field in ("point", "ci_low", "ci_high")
        }
        w = np.array([normalised[name] for name in outputs])
        combined = {field: w @ values for field, values in stacked.items()}
        points = build_forecast_points(start_date, combined["point"], combined["ci_low"], combined["ci_high"])
        return EnsembleForecast(points=points, weights=normalised, failures=failures)
