from .autoregressive import ARModel
from .base import Z_SCORES, ForecastModel, build_forecast_points
from .ensemble import Ensemble
from .ewma import EWMAModel
from .registry import MODEL_REGISTRY, create_model, get_model_class, list_models
from .seasonal import SeasonalSmoother
from .selection import select_model_configuration

__all__ = [
    "ForecastModel",
    "build_forecast_points",
    "Z_SCORES",
    "SeasonalSmoother",
    "EWMAModel",
    "ARModel",
    "Ensemble",
    "MODEL_REGISTRY",
    "create_model",
    "get_model_class",
    "list_models",
    "select_model_configuration",
]
