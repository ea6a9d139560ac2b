"""
Alert rule table and evaluation.

Each rule maps to a pure evaluator over a ForecastOutput. An evaluator
returns the template context when the rule fires and None otherwise.
Evaluation is flat: every enabled rule is checked independently and yields
at most one candidate.
"""

import datetime as dt
import logging
from collections import Counter
from collections.abc import Callable, Sequence
from types import MappingProxyType
from typing import Any

import numpy as np

from foresight.config import PipelineConfig
from foresight.exceptions import UnknownIdentifierError
from foresight.models import (
    AlertActionType,
    AlertCandidate,
    AlertRule,
    AlertSummary,
    ForecastOutput,
    Severity,
)
from foresight.primitives import calculate_coefficient_of_variation, safe_divide
from foresight.templates import render_text

logger = logging.getLogger(__name__)

URGENT_NEED_MIN_CONFIDENCE = 0.7

ALERT_RULES: tuple[AlertRule, ...] = (
    AlertRule(
        id="forecast_downside",
        name="Revenue Forecast Downside",
        condition="forecast average more than 15% below recent daily revenue",
        threshold=0.15,
        severity=Severity.HIGH,
        action=AlertActionType.EMAIL,
    ),
    AlertRule(
        id="cfsi_low",
        name="Low Cash Flow Stability",
        condition="CFSI below 55",
        threshold=55,
        severity=Severity.MEDIUM,
        action=AlertActionType.HUBSPOT,
    ),
    AlertRule(
        id="cfsi_critical",
        name="Critical Cash Flow Stability",
        condition="CFSI below 40",
        threshold=40,
        severity=Severity.CRITICAL,
        action=AlertActionType.EMAIL,
    ),
    AlertRule(
        id="churn_risk_high",
        name="High Churn Risk",
        condition="churn risk above threshold",
        threshold=0.6,
        severity=Severity.HIGH,
        action=AlertActionType.HUBSPOT,
    ),
    AlertRule(
        id="anticipated_need_urgent",
        name="Upcoming Order Window",
        condition="window opens within 10 days with confidence above 0.7",
        threshold=10,
        severity=Severity.MEDIUM,
        action=AlertActionType.WEBHOOK,
    ),
    AlertRule(
        id="revenue_volatility_high",
        name="High Revenue Volatility",
        condition="coefficient of variation of forecast points above 0.3",
        threshold=0.3,
        severity=Severity.MEDIUM,
        action=AlertActionType.EMAIL,
    ),
    AlertRule(
        id="sla_performance_low",
        name="Low SLA Performance",
        condition="average SLA attainment below 90%",
        threshold=0.9,
        severity=Severity.HIGH,
        action=AlertActionType.HUBSPOT,
    ),
)

SEVERITY_RANK = MappingProxyType(
    {Severity.LOW.value: 0, Severity.MEDIUM.value: 1, Severity.HIGH.value: 2, Severity.CRITICAL.value: 3}
)


def _forecast_values(output: ForecastOutput) -> list[float]:
    return [point.point for point in output.revenue_forecast]


def check_forecast_downside(output: ForecastOutput, rule: AlertRule) -> dict[str, Any] | None:
    values = _forecast_values(output)
    recent = output.diagnostics.recent_revenue_average
    if not values or recent <= 0:
        return None
    forecast_average = float(np.mean(values))
    drop = safe_divide(recent - forecast_average, recent, default_value=0.0)
    if drop > rule.threshold:
        return {"forecast_average": forecast_average, "recent_average": recent, "drop": drop}
    return None


def check_cfsi_below(output: ForecastOutput, rule: AlertRule) -> dict[str, Any] | None:
    if output.cash_flow_stability_index < rule.threshold:
        return {"value": output.cash_flow_stability_index}
    return None


def check_churn_risk_high(output: ForecastOutput, rule: AlertRule) -> dict[str, Any] | None:
    if output.churn_risk > rule.threshold:
        return {"value": output.churn_risk}
    return None


def check_anticipated_need_urgent(output: ForecastOutput, rule: AlertRule) -> dict[str, Any] | None:
    need = output.anticipated_need
    days = need.days_until_window(output.analysis_date)
    if days <= rule.threshold and need.confidence > URGENT_NEED_MIN_CONFIDENCE:
        return {"days": max(days, 0), "confidence": need.confidence}
    return None


def check_revenue_volatility(output: ForecastOutput, rule: AlertRule) -> dict[str, Any] | None:
    cv = calculate_coefficient_of_variation(_forecast_values(output))
    if cv is not None and cv > rule.threshold:
        return {"cv": cv}
    return None


def check_sla_performance(output: ForecastOutput, rule: AlertRule) -> dict[str, Any] | None:
    if output.diagnostics.sla_performance < rule.threshold:
        return {"value": output.diagnostics.sla_performance}
    return None


RuleEvaluator = Callable[[ForecastOutput, AlertRule], "dict[str, Any] | None"]

RULE_EVALUATORS: MappingProxyType = MappingProxyType(
    {
        "forecast_downside": check_forecast_downside,
        "cfsi_low": check_cfsi_below,
        "cfsi_critical": check_cfsi_below,
        "churn_risk_high": check_churn_risk_high,
        "anticipated_need_urgent": check_anticipated_need_urgent,
        "revenue_volatility_high": check_revenue_volatility,
        "sla_performance_low": check_sla_performance,
    }
)


def build_alert_rules(config: PipelineConfig | None = None) -> tuple[AlertRule, ...]:
    """The default rule table with config-driven thresholds applied."""
    config = config or PipelineConfig()
    return tuple(
        rule.model_copy(update={"threshold": config.churn_threshold}) if rule.id == "churn_risk_high" else rule
        for rule in ALERT_RULES
    )


def evaluate_alerts(
    output: ForecastOutput,
    rules: Sequence[AlertRule] | None = None,
    now: dt.datetime | None = None,
    config: PipelineConfig | None = None,
) -> list[AlertCandidate]:
    """
    Evaluate every enabled rule against a forecast output.

    Without explicit ``rules`` the default table is built from ``config``.

    Raises:
        UnknownIdentifierError: If a rule has no registered evaluator
    """
    rules = build_alert_rules(config) if rules is None else rules
    triggered_at = now or output.generated_at
    candidates = []
    for rule in rules:
        evaluator = RULE_EVALUATORS.get(rule.id)
        if evaluator is None:
            raise UnknownIdentifierError(rule.id, "alert rule")
        if not rule.enabled:
            continue
        context = evaluator(output, rule)
        if context is None:
            continue
        candidates.append(
            AlertCandidate(
                rule_id=rule.id,
                severity=rule.severity,
                action=rule.action,
                message=render_text("alert", rule.id, {"rule": rule, **context}),
                triggered_at=triggered_at,
            )
        )
    logger.debug("Triggered %d of %d alert rules", len(candidates), len(rules))
    return candidates


def summarize_alerts(candidates: Sequence[AlertCandidate]) -> AlertSummary:
    """Severity and channel breakdowns plus the three most severe rules."""
    ranked = sorted(candidates, key=lambda candidate: SEVERITY_RANK[candidate.severity], reverse=True)
    return AlertSummary(
        total=len(candidates),
        severity_breakdown=dict(Counter(candidate.severity for candidate in candidates)),
        action_breakdown=dict(Counter(candidate.action for candidate in candidates)),
        top_concerns=[candidate.rule_id for candidate in ranked[:3]],
    )
