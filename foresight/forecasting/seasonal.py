import numpy as np
from statsmodels.tsa.holtwinters import ExponentialSmoothing

from foresight.config import PipelineConfig
from foresight.exceptions import ModelError
from foresight.forecasting.base import ForecastModel
from foresight.models import ForecastModelName, ModelFit
from foresight.primitives import safe_divide



class SeasonalSmoother(ForecastModel):
    """Multiplicative Holt-Winters smoother with a weekly seasonal cycle.

    State is initialised from the first two cycles: the level is the mean of
    the first cycle, the trend is the per-step change between the means of
    cycles one and two, and the seasonal indices are the first cycle's ratios
    to the level. Smoothing runs through statsmodels with these initial values
    and the configured coefficients held fixed. Seasonal index ``k`` belongs
    to positions ``t`` with ``t % period == k``.
    """

    name = ForecastModelName.SEASONAL

    def __init__(
        self,
        config: PipelineConfig | None = None,
        rng: np.random.Generator | None = None,
        alpha: float | None = None,
        beta: float | None = None,
        gamma: float | None = None,
    ) -> None:
        super().__init__(config, rng)
        self.alpha = self.config.alpha if alpha is None else alpha
        self.beta = self.config.beta if beta is None else beta
        self.gamma = self.config.gamma if gamma is None else gamma
        self.period = self.config.seasonal_period

    @property
    def min_history(self) -> int:
        return 2 * self.period

    def _fit(self, values: np.ndarray) -> ModelFit:
        m = self.period
        if np.any(values <= 0):
            raise ModelError(
                "Multiplicative seasonality needs a strictly positive series",
                self.name.value,
                {"minimum": float(values.min())},
            )
        level = float(values[:m].mean())
        trend = float((values[m : 2 * m].mean() - level) / m)
        seasonals = [safe_divide(v, level, default_value=1.0) for v in values[:m]]

        model = ExponentialSmoothing(
            values,
            trend="add",
            seasonal="mul",
            seasonal_periods=m,
            initialization_method="known",
            initial_level=level,
            initial_trend=trend,
            initial_seasonal=seasonals,
        )
        result = model.fit(
            smoothing_level=self.alpha,
            smoothing_trend=self.beta,
            smoothing_seasonal=self.gamma,
            optimized=False,
        )

        # season[t] is the index updated at t; re-key the last cycle by t % m
        season = np.asarray(result.season, dtype=float)
        n = values.size
        indices = [0.0] * m
        for t in range(n - m, n):
            indices[t % m] = float(season[t])

        return ModelFit(
            model_name=self.name,
            history=values.tolist(),
            fitted=np.asarray(result.fittedvalues, dtype=float).tolist(),
            residuals=np.asarray(result.resid, dtype=float).tolist(),
            level=float(np.asarray(result.level)[-1]),
            trend=float(np.asarray(result.trend)[-1]),
            seasonal_indices=indices,
        )

    def _predict(self, fit: ModelFit, horizon_days: int, confidence_level: float):
        n = len(fit.history)
        steps = np.arange(1, horizon_days + 1)
        seasonal = np.array([fit.seasonal_indices[(n - 1 + h) % self.period] for h in steps])
        points = (fit.level + steps * fit.trend) * seasonal

        residuals = np.asarray(fit.residuals, dtype=float)
        if residuals.size == 0:
            return points, points.copy(), points.copy()
        sample = self.rng.choice(residuals, size=self.config.bootstrap_samples, replace=True)
        tail = (1 - confidence_level) / 2 * 100
        lower_offset, upper_offset = np.percentile(sample, [tail, 100 - tail])
        lower_offset = min(float(lower_offset), 0.0)
        upper_offset = max(float(upper_offset), 0.0)
        return points, points + lower_offset, points + upper_offset
