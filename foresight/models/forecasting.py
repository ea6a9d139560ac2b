"""
Forecast output models.
"""

import datetime as dt

from pydantic import ConfigDict, Field, model_validator

from foresight.models.common import BaseModel, CamelModel
from foresight.models.enums import ForecastModelName


class ForecastPoint(CamelModel):
    """A single forecast day with its confidence band"""

    date: dt.date
    point: float
    ci_low: float
    ci_high: float

    @model_validator(mode="after")
    def validate_band(self) -> "ForecastPoint":
        if not 0 <= self.ci_low <= self.point <= self.ci_high:
            raise ValueError(
                f"band must satisfy 0 <= ci_low <= point <= ci_high, got {self.ci_low}, {self.point}, {self.ci_high}"
            )
        return self


class ModelFit(BaseModel):
    """Fitted state of one forecast model"""

    model_name: ForecastModelName
    history: list[float]
    fitted: list[float]
    residuals: list[float]
    level: float = 0.0
    trend: float = 0.0
    seasonal_indices: list[float] = Field(default_factory=list)
    coefficients: list[float] = Field(default_factory=list)

    model_config = ConfigDict(use_enum_values=True, protected_namespaces=())


class ModelSelection(BaseModel):
    """Smoothing coefficients and ensemble weights chosen for a series"""

    has_trend: bool
    has_seasonality: bool
    alpha: float
    beta: float
    gamma: float
    weights: dict[ForecastModelName, float]

    model_config = ConfigDict(use_enum_values=True)


class SeasonalityProfile(BaseModel):
    """Result of weekly seasonality detection"""

    has_seasonality: bool
    autocorrelation: float
    strength: float
    seasonal_indices: list[float] = Field(default_factory=list)


class ForecastValidation(BaseModel):
    """Forecast vs actual for one date"""

    date: dt.date
    forecast: float
    actual: float
    error: float
    abs_error: float
    within_band: bool


class ForecastAccuracy(BaseModel):
    """Aggregate accuracy of a forecast against realised values"""

    n: int
    mae: float | None = None
    rmse: float | None = None
    mape: float | None = None
    bias: float | None = None
    r2: float | None = None
    within_confidence: float | None = None
    points: list[ForecastValidation] = Field(default_factory=list)


class EnsembleForecast(BaseModel):
    """Combined forecast and which members contributed to it"""

    points: list[ForecastPoint]
    weights: dict[str, float] = Field(default_factory=dict)
    failures: dict[str, str] = Field(default_factory=dict)
