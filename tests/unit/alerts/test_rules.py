"""
Unit tests for alert rule evaluation.
"""

import datetime as dt

import pytest

from foresight.alerts import ALERT_RULES, RULE_EVALUATORS, build_alert_rules, evaluate_alerts, summarize_alerts
from foresight.config import PipelineConfig
from foresight.exceptions import UnknownIdentifierError
from foresight.models import AlertRule, AnticipatedNeed, ForecastDiagnostics, Severity
from tests.conftest import make_points


def rule_ids(candidates):
    return [candidate.rule_id for candidate in candidates]


class TestAlertRuleTable:
    def test_every_rule_has_an_evaluator(self):
        assert {rule.id for rule in ALERT_RULES} == set(RULE_EVALUATORS)

    def test_build_applies_churn_threshold(self):
        rules = build_alert_rules(PipelineConfig(churn_threshold=0.4))

        churn_rule = next(rule for rule in rules if rule.id == "churn_risk_high")
        assert churn_rule.threshold == 0.4
        assert next(rule for rule in ALERT_RULES if rule.id == "churn_risk_high").threshold == 0.6


class TestEvaluateAlerts:
    def test_quiet_output(self, make_output):
        assert evaluate_alerts(make_output()) == []

    def test_forecast_downside(self, make_output, analysis_date):
        # Arrange
        output = make_output(points=make_points([800.0] * 14, analysis_date + dt.timedelta(days=1)))

        # Act
        candidates = evaluate_alerts(output)

        # Assert
        assert rule_ids(candidates) == ["forecast_downside"]
        assert candidates[0].severity == Severity.HIGH
        assert candidates[0].message == (
            "Alert: Revenue Forecast Downside - forecast average 800 is 20.0% below recent daily revenue of 1,000"
        )
        assert candidates[0].triggered_at == output.generated_at

    def test_small_downside_ignored(self, make_output, analysis_date):
        output = make_output(points=make_points([900.0] * 14, analysis_date + dt.timedelta(days=1)))

        assert evaluate_alerts(output) == []

    def test_cfsi_low_boundary(self, make_output):
        """Test the CFSI rule fires strictly below its threshold."""
        below = evaluate_alerts(make_output(cash_flow_stability_index=54.9))
        at = evaluate_alerts(make_output(cash_flow_stability_index=55.0))

        assert rule_ids(below) == ["cfsi_low"]
        assert below[0].message == "Alert: Low Cash Flow Stability - CFSI is 54.9, below 55"
        assert at == []

    def test_cfsi_critical(self, make_output):
        candidates = evaluate_alerts(make_output(cash_flow_stability_index=30.0, cfsi_tier="critical"))

        assert rule_ids(candidates) == ["cfsi_low", "cfsi_critical"]
        assert candidates[1].severity == Severity.CRITICAL

    @pytest.mark.parametrize("value,fires", [(0.65, True), (0.6, False), (0.3, False)])
    def test_churn_risk(self, make_output, value, fires):
        candidates = evaluate_alerts(make_output(churn_risk=value))

        assert rule_ids(candidates) == (["churn_risk_high"] if fires else [])

    @pytest.mark.parametrize(
        "days,confidence,fires",
        [(5, 0.8, True), (10, 0.8, True), (11, 0.8, False), (5, 0.7, False)],
    )
    def test_anticipated_need_urgent(self, make_output, analysis_date, days, confidence, fires):
        need = AnticipatedNeed(
            window_start=analysis_date + dt.timedelta(days=days),
            window_end=analysis_date + dt.timedelta(days=days + 14),
            confidence=confidence,
            top_signals=["Project cycle analysis"],
        )

        candidates = evaluate_alerts(make_output(anticipated_need=need))

        assert rule_ids(candidates) == (["anticipated_need_urgent"] if fires else [])

    def test_window_already_open(self, make_output, analysis_date):
        """Test a window that started before the analysis date reads as open, never as negative days."""
        # Arrange
        need = AnticipatedNeed(
            window_start=analysis_date - dt.timedelta(days=3),
            window_end=analysis_date + dt.timedelta(days=11),
            confidence=0.8,
            top_signals=["Project cycle analysis"],
        )

        # Act
        candidates = evaluate_alerts(make_output(anticipated_need=need))

        # Assert
        assert rule_ids(candidates) == ["anticipated_need_urgent"]
        assert candidates[0].message == "Alert: Upcoming Order Window - order window is open now with 80% confidence"

    def test_upcoming_window_message(self, make_output, analysis_date):
        need = AnticipatedNeed(
            window_start=analysis_date + dt.timedelta(days=4),
            window_end=analysis_date + dt.timedelta(days=18),
            confidence=0.75,
            top_signals=[],
        )

        candidates = evaluate_alerts(make_output(anticipated_need=need))

        assert candidates[0].message == (
            "Alert: Upcoming Order Window - order window opens in 4 days with 75% confidence"
        )

    def test_revenue_volatility(self, make_output, analysis_date):
        output = make_output(points=make_points([500.0, 1500.0] * 7, analysis_date + dt.timedelta(days=1)))

        candidates = evaluate_alerts(output)

        assert rule_ids(candidates) == ["revenue_volatility_high"]
        assert candidates[0].message.endswith("coefficient of variation is 50.0%")

    def test_sla_performance(self, make_output):
        output = make_output(diagnostics=ForecastDiagnostics(recent_revenue_average=1000.0, sla_performance=0.85))

        candidates = evaluate_alerts(output)

        assert rule_ids(candidates) == ["sla_performance_low"]
        assert candidates[0].message == "Alert: Low SLA Performance - SLA performance is 85.0%, below 90%"

    def test_disabled_rule_skipped(self, make_output):
        rules = [rule.model_copy(update={"enabled": False}) if rule.id == "cfsi_low" else rule for rule in ALERT_RULES]

        candidates = evaluate_alerts(make_output(cash_flow_stability_index=50.0), rules)

        assert candidates == []

    def test_unknown_rule(self, make_output):
        rule = AlertRule(
            id="margin_drop", name="Margin Drop", condition="margin below 10%", threshold=0.1, severity="low",
            action="email",
        )

        with pytest.raises(UnknownIdentifierError) as exc_info:
            evaluate_alerts(make_output(), [rule])

        assert exc_info.value.identifier == "margin_drop"

    def test_default_rules_follow_config(self, make_output):
        """Test the default rule table honours a configured churn threshold."""
        output = make_output(churn_risk=0.45)

        assert evaluate_alerts(output) == []
        candidates = evaluate_alerts(output, config=PipelineConfig(churn_threshold=0.4))
        assert rule_ids(candidates) == ["churn_risk_high"]
        assert candidates[0].message == "Alert: High Churn Risk - churn risk is 45.0%, above 40%"

    def test_explicit_trigger_time(self, make_output):
        now = dt.datetime(2024, 7, 1, tzinfo=dt.timezone.utc)

        candidates = evaluate_alerts(make_output(churn_risk=0.9), now=now)

        assert candidates[0].triggered_at == now


class TestSummarizeAlerts:
    def test_summary(self, make_output):
        # Arrange
        output = make_output(
            cash_flow_stability_index=30.0,
            churn_risk=0.65,
            diagnostics=ForecastDiagnostics(recent_revenue_average=1000.0, sla_performance=0.85),
        )
        candidates = evaluate_alerts(output)

        # Act
        summary = summarize_alerts(candidates)

        # Assert
        assert summary.total == 4
        assert summary.severity_breakdown == {"medium": 1, "critical": 1, "high": 2}
        assert summary.action_breakdown == {"hubspot": 3, "email": 1}
        assert summary.top_concerns == ["cfsi_critical", "churn_risk_high", "sla_performance_low"]

    def test_empty(self):
        summary = summarize_alerts([])

        assert summary.total == 0
        assert summary.top_concerns == []
