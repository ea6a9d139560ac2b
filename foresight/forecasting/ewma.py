import numpy as np

from foresight.config import PipelineConfig
from foresight.forecasting.base import ForecastModel
from foresight.models import ForecastModelName, ModelFit
from foresight.primitives import apply_ewma

TREND_WINDOW = 7
BAND_FRACTION = 0.1


class EWMAModel(ForecastModel):
    """Exponentially weighted level extrapolated with its recent average step."""

    name = ForecastModelName.EWMA

    def __init__(
        self, config: PipelineConfig | None = None, rng: np.random.Generator | None = None, alpha: float | None = None
    ) -> None:
        super().__init__(config, rng)
        self.alpha = self.config.alpha if alpha is None else alpha

    @property
    def min_history(self) -> int:
        return 1

    def _fit(self, values: np.ndarray) -> ModelFit:
        smoothed = np.asarray(apply_ewma(values.tolist(), self.alpha))
        steps = np.diff(smoothed)[-TREND_WINDOW:]
        trend = float(steps.mean()) if steps.size else 0.0
        return ModelFit(
            model_name=self.name,
            history=values.tolist(),
            fitted=smoothed.tolist(),
            residuals=(values - smoothed).tolist(),
            level=float(smoothed[-1]),
            trend=trend,
        )

    def _predict(self, fit: ModelFit, horizon_days: int, confidence_level: float):
        points = fit.level + np.arange(1, horizon_days + 1) * fit.trend
        band = np.abs(points) * BAND_FRACTION
        return points, points - band, points + band
