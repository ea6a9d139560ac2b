"""
The public result of a prediction run.
"""

import datetime as dt

from pydantic import Field

from foresight.models.alerts import AlertCandidate
from foresight.models.common import CamelModel
from foresight.models.enums import CFSITier, ChurnTier, Horizon, Persona
from foresight.models.forecasting import ForecastPoint
from foresight.models.governance import CreatorCheck
from foresight.models.scores import AnticipatedNeed


class ForecastDiagnostics(CamelModel):
    """Inputs the alert rules read besides the headline scores"""

    recent_revenue_average: float
    sla_performance: float
    has_trend: bool = False
    has_seasonality: bool = False
    model_weights: dict[str, float] = Field(default_factory=dict)
    models_used: list[str] = Field(default_factory=list)
    fallback_used: bool = False


class ForecastOutput(CamelModel):
    generated_at: dt.datetime
    analysis_date: dt.date
    horizons: list[Horizon]
    persona: Persona
    revenue_forecast: list[ForecastPoint]
    horizon_forecasts: dict[str, list[ForecastPoint]] = Field(default_factory=dict)
    cash_flow_stability_index: float = Field(ge=0, le=100)
    cfsi_tier: CFSITier
    churn_risk: float = Field(ge=0, le=1)
    churn_tier: ChurnTier
    anticipated_need: AnticipatedNeed
    explanations: list[str] = Field(default_factory=list)
    alerts: list[AlertCandidate] = Field(default_factory=list)
    creator_check: CreatorCheck
    diagnostics: ForecastDiagnostics

    @classmethod
    def json_schema(cls) -> dict:
        return cls.model_json_schema(by_alias=True)
