"""
Derived score models: CFSI, churn risk and anticipated need.
"""

import datetime as dt

from pydantic import Field, model_validator

from foresight.models.common import BaseModel, CamelModel
from foresight.models.enums import CFSITier, ChurnTier, NeedTier, ScoreKind, ScoreTrend


class CFSIComponents(BaseModel):
    """Sub-scores of the cash-flow stability index, each in [0, 100]"""

    revenue_volatility: float
    ar_aging: float
    refund_rate: float
    shipping_method_risk: float
    customer_concentration: float
    otif: float


class CFSIResult(BaseModel):
    value: float = Field(ge=0, le=100)
    tier: CFSITier
    description: str
    components: CFSIComponents
    recommendations: list[str] = Field(default_factory=list)


class ChurnFactors(BaseModel):
    """Proxy factors feeding the churn logistic"""

    recency: float
    frequency: float
    monetary: float
    engagement_delta: float
    persona_risk: float


class ChurnResult(BaseModel):
    value: float = Field(ge=0, le=1)
    tier: ChurnTier
    description: str
    factors: ChurnFactors
    recommendations: list[str] = Field(default_factory=list)


class AnticipatedNeed(CamelModel):
    """Predicted next purchase window"""

    window_start: dt.date
    window_end: dt.date
    confidence: float = Field(ge=0, le=1)
    top_signals: list[str] = Field(default_factory=list)
    tier: NeedTier = NeedTier.LOW
    description: str = ""

    @model_validator(mode="after")
    def validate_window(self) -> "AnticipatedNeed":
        if self.window_start > self.window_end:
            raise ValueError("window_start must not be after window_end")
        return self

    def days_until_window(self, today: dt.date) -> int:
        return (self.window_start - today).days


class ScoreTrendAnalysis(BaseModel):
    kind: ScoreKind
    trend: ScoreTrend
    change: float
    change_percent: float
    description: str
