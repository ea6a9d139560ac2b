from types import MappingProxyType

import numpy as np

from foresight.config import PipelineConfig
from foresight.exceptions import UnknownIdentifierError
from foresight.forecasting.autoregressive import ARModel
from foresight.forecasting.base import ForecastModel
from foresight.forecasting.ewma import EWMAModel
from foresight.forecasting.seasonal import SeasonalSmoother
from foresight.models import ForecastModelName

MODEL_REGISTRY: MappingProxyType = MappingProxyType(
    {
        ForecastModelName.SEASONAL: SeasonalSmoother,
        ForecastModelName.EWMA: EWMAModel,
        ForecastModelName.AR: ARModel,
    }
)


def get_model_class(name: "ForecastModelName | str") -> type[ForecastModel]:
    """Look up a model class by name"""
    try:
        return MODEL_REGISTRY[ForecastModelName(name)]
    except ValueError as exc:
        raise UnknownIdentifierError(str(name), "forecast model") from exc


def create_model(
    name: "ForecastModelName | str",
    config: PipelineConfig | None = None,
    rng: np.random.Generator | None = None,
    **params,
) -> ForecastModel:
    """Create a model instance; ``params`` override the config's coefficients"""
    return get_model_class(name)(config, rng, **params)


def list_models() -> list[str]:
    """List all registered models"""
    return [name.value for name in MODEL_REGISTRY]
