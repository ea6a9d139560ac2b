"""
Alert rule, candidate and delivery models.
"""

import datetime as dt

from pydantic import Field

from foresight.models.common import BaseModel, CamelModel
from foresight.models.enums import AlertActionType, Severity


class AlertRule(BaseModel):
    """Static definition of an alert condition"""

    id: str
    name: str
    condition: str
    threshold: float
    severity: Severity
    action: AlertActionType
    enabled: bool = True


class AlertCandidate(CamelModel):
    """A triggered rule awaiting governance approval and delivery"""

    rule_id: str
    severity: Severity
    action: AlertActionType
    message: str
    triggered_at: dt.datetime


class DeliveryResult(BaseModel):
    rule_id: str
    action: AlertActionType
    success: bool
    error: str | None = None


class AlertSummary(BaseModel):
    total: int
    severity_breakdown: dict[str, int] = Field(default_factory=dict)
    action_breakdown: dict[str, int] = Field(default_factory=dict)
    top_concerns: list[str] = Field(default_factory=list)
