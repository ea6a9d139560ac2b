"""
Foresight: revenue forecasting, cash-flow stability, churn risk and
governance-gated alerting for B2B signage.
"""

from foresight.api import Foresight
from foresight.config import PipelineConfig, load_config
from foresight.exceptions import (
    CalculationError,
    DataError,
    EnsembleError,
    ForecastGenerationError,
    ForesightError,
    InsufficientDataError,
    MissingDataError,
    ModelError,
    UnknownIdentifierError,
    ValidationError,
)
from foresight.features import FeatureStore
from foresight.pipeline import PredictionPipeline, generate_forecast

__version__ = "0.1.0"

__all__ = [
    "Foresight",
    "PredictionPipeline",
    "generate_forecast",
    "FeatureStore",
    "PipelineConfig",
    "load_config",
    "ForesightError",
    "ValidationError",
    "DataError",
    "MissingDataError",
    "InsufficientDataError",
    "CalculationError",
    "UnknownIdentifierError",
    "ModelError",
    "EnsembleError",
    "ForecastGenerationError",
]
