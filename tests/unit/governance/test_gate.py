"""
Unit tests for the creator-check gate.
"""

import datetime as dt

from foresight.alerts import evaluate_alerts
from foresight.governance import apply_creator_check, run_creator_check, summarize_creator_check
from foresight.models import CreatorCheckStatus, ForecastDiagnostics, Severity


class TestRunCreatorCheck:
    def test_clean_output_passes(self, make_output):
        # Arrange
        output = make_output()

        # Act
        check = run_creator_check(output, now=output.generated_at)

        # Assert
        assert check.passed is True
        assert len(check.audits) == 7
        assert check.notes[0] == "Data provenance check passed"
        assert summarize_creator_check(check).status == CreatorCheckStatus.PASSED

    def test_pii_fails_gate(self, make_output):
        output = make_output(
            explanations=[
                "Account 123-45-6789 is due for a reorder",
                "These projections help long-term planning and a transparent customer relationship",
            ]
        )

        check = run_creator_check(output, now=output.generated_at)

        assert check.passed is False
        assert "PII detected in forecast explanations" in check.notes

    def test_notes_keep_audit_order(self, make_output):
        output = make_output(explanations=["Wayfinding signs for patient rooms"])

        check = run_creator_check(output, now=output.generated_at)

        names = [audit.name for audit in check.audits]
        assert names == [
            "pii_leakage",
            "transparency",
            "manipulation",
            "contact_frequency",
            "sensitive_topics",
            "tone",
            "long_term",
        ]
        assert check.notes.index("Manipulation check passed") < check.notes.index("No opt-out information provided")
        assert check.notes.index("No opt-out information provided") < check.notes.index("Contact frequency check passed")

    def test_defaults_to_current_time(self, make_output):
        check = run_creator_check(make_output())

        assert "Forecast data is older than 24 hours" in check.notes


class TestApplyCreatorCheck:
    def test_failed_check_keeps_critical_alerts(self, make_output):
        # Arrange
        draft = make_output(cash_flow_stability_index=30.0, cfsi_tier="critical", churn_risk=0.65)
        output = draft.model_copy(update={"alerts": evaluate_alerts(draft)})
        failing = output.model_copy(update={"explanations": ["Call 555-123-4567 to reorder today"]})
        check = run_creator_check(failing, now=output.generated_at)

        # Act
        gated = apply_creator_check(output, check)

        # Assert
        assert len(output.alerts) == 3
        assert [alert.rule_id for alert in gated.alerts] == ["cfsi_critical"]
        assert all(alert.severity == Severity.CRITICAL for alert in gated.alerts)
        assert gated.creator_check.passed is False

    def test_passed_check_keeps_all_alerts(self, make_output):
        draft = make_output(churn_risk=0.65)
        output = draft.model_copy(update={"alerts": evaluate_alerts(draft)})
        check = run_creator_check(output, now=output.generated_at)

        gated = apply_creator_check(output, check)

        assert check.passed is True
        assert [alert.rule_id for alert in gated.alerts] == ["churn_risk_high"]


    def test_busy_channel_keeps_high_severity_alerts(self, make_output):
        """Test several problems routed to one channel still reach the account owner."""
        # Arrange
        draft = make_output(
            cash_flow_stability_index=50.0,
            cfsi_tier="poor",
            churn_risk=0.7,
            churn_tier="high",
            diagnostics=ForecastDiagnostics(recent_revenue_average=1000.0, sla_performance=0.85),
        )
        output = draft.model_copy(update={"alerts": evaluate_alerts(draft)})
        check = run_creator_check(output, now=output.generated_at)

        # Act
        gated = apply_creator_check(output, check)

        # Assert
        assert [alert.action for alert in output.alerts] == ["hubspot"] * 3
        assert check.passed is True
        assert "Many alerts for channel(s): hubspot" in check.notes
        assert [alert.rule_id for alert in gated.alerts] == ["cfsi_low", "churn_risk_high", "sla_performance_low"]
        assert summarize_creator_check(check).status == CreatorCheckStatus.WARNING


class TestSummarizeCreatorCheck:
    def test_failed(self, make_output):
        output = make_output(explanations=["Yard signs for the election season"])

        summary = summarize_creator_check(run_creator_check(output, now=output.generated_at))

        assert summary.status == CreatorCheckStatus.FAILED
        assert "sensitive_topics" in summary.failed_checks
        assert "long_term" in summary.failed_checks

    def test_warning(self, make_output):
        output = make_output()

        summary = summarize_creator_check(run_creator_check(output, now=output.generated_at + dt.timedelta(days=2)))

        assert summary.status == CreatorCheckStatus.WARNING
        assert summary.failed_checks == []
