from collections.abc import Sequence
from types import MappingProxyType

from foresight.config import PipelineConfig
from foresight.models import ForecastModelName, ModelSelection
from foresight.primitives import detect_seasonality, detect_trend

SEASONAL_WEIGHTS = MappingProxyType(
    {ForecastModelName.SEASONAL: 0.5, ForecastModelName.EWMA: 0.3, ForecastModelName.AR: 0.2}
)
TREND_WEIGHTS = MappingProxyType(
    {ForecastModelName.SEASONAL: 0.3, ForecastModelName.EWMA: 0.5, ForecastModelName.AR: 0.2}
)
STATIONARY_WEIGHTS = MappingProxyType(
    {ForecastModelName.SEASONAL: 0.2, ForecastModelName.EWMA: 0.3, ForecastModelName.AR: 0.5}
)


def select_model_configuration(series: Sequence[float], config: PipelineConfig | None = None) -> ModelSelection:
    """
    Choose smoothing coefficients and ensemble weights from the shape of the series.

    Seasonal series favour the seasonal smoother with a slower level and a
    faster seasonal update. Trending series favour EWMA with a faster level.
    Everything else favours the AR model with a slow level. Weights set in the
    config take precedence over the heuristic.
    """
    config = config or PipelineConfig()
    has_seasonality = detect_seasonality(series, config.seasonal_period).has_seasonality
    has_trend = detect_trend(series)

    alpha, gamma = config.alpha, config.gamma
    if has_seasonality and len(series) > 2 * config.seasonal_period:
        alpha, gamma, weights = 0.2, 0.3, SEASONAL_WEIGHTS
    elif has_trend:
        alpha, weights = 0.4, TREND_WEIGHTS
    else:
        alpha, weights = 0.1, STATIONARY_WEIGHTS

    return ModelSelection(
        has_trend=has_trend,
        has_seasonality=has_seasonality,
        alpha=alpha,
        beta=config.beta,
        gamma=gamma,
        weights=dict(config.model_weights or weights),
    )
