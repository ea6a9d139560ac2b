"""
Pipeline configuration.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from foresight.exceptions import ValidationError
from foresight.models.enums import ForecastModelName

MAX_HORIZON_DAYS = 60


class PipelineConfig(BaseModel):
    """Options for a prediction run.

    Smoothing coefficients apply to the seasonal smoother; ``ewma_alpha``
    smooths raw revenue in the feature store. When ``model_weights`` is None
    the ensemble weights come from the model-selection heuristic.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", protected_namespaces=())

    alpha: float = Field(default=0.3, gt=0, le=1)
    beta: float = Field(default=0.1, ge=0, le=1)
    gamma: float = Field(default=0.1, ge=0, le=1)
    confidence_level: Literal[0.8, 0.95, 0.99] = 0.8
    lookback_days: int = Field(default=90, ge=1, le=730)
    churn_threshold: float = Field(default=0.6, ge=0, le=1)
    min_confidence: float = Field(default=0.3, ge=0, le=1)
    max_window_days: int = Field(default=30, ge=1)
    ewma_alpha: float = Field(default=0.3, gt=0, le=1)
    seasonal_period: int = Field(default=7, ge=2)
    ar_order: int = Field(default=2, ge=1, le=14)
    bootstrap_samples: int = Field(default=1000, ge=10)
    model_weights: dict[ForecastModelName, float] | None = None
    random_seed: int | None = None

    @field_validator("model_weights")
    @classmethod
    def validate_weights(cls, value: dict[ForecastModelName, float] | None):
        if value is None:
            return value
        if any(weight < 0 for weight in value.values()):
            raise ValueError("model weights must be non-negative")
        if sum(value.values()) <= 0:
            raise ValueError("at least one model weight must be positive")
        return value


def load_config(options: "PipelineConfig | dict[str, Any] | None" = None) -> PipelineConfig:
    """Build a PipelineConfig, raising ValidationError on invalid options."""
    if isinstance(options, PipelineConfig):
        return options
    try:
        return PipelineConfig(**(options or {}))
    except PydanticValidationError as exc:
        invalid = {".".join(str(part) for part in err["loc"]): err["msg"] for err in exc.errors()}
        raise ValidationError("Invalid pipeline configuration", invalid) from exc
