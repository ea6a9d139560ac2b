"""
Unit tests for alert delivery.
"""

import datetime as dt
import logging

import pytest

from foresight.alerts import AlertDispatcher, LoggingSink
from foresight.models import AlertActionType, AlertCandidate, Severity


@pytest.fixture
def candidates():
    triggered_at = dt.datetime(2024, 6, 30, 12, tzinfo=dt.timezone.utc)
    return [
        AlertCandidate(
            rule_id="cfsi_critical",
            severity=Severity.CRITICAL,
            action=AlertActionType.EMAIL,
            message="Alert: Critical Cash Flow Stability - CFSI is 30.0, below 40",
            triggered_at=triggered_at,
        ),
        AlertCandidate(
            rule_id="churn_risk_high",
            severity=Severity.HIGH,
            action=AlertActionType.HUBSPOT,
            message="Alert: High Churn Risk - churn risk is 65.0%, above 60%",
            triggered_at=triggered_at,
        ),
    ]


class TestAlertDispatcher:
    def test_logging_sinks(self, candidates, caplog):
        dispatcher = AlertDispatcher.with_logging_sinks()

        with caplog.at_level(logging.INFO, logger="foresight.alerts.sinks"):
            results = dispatcher.dispatch(candidates)

        assert [result.success for result in results] == [True, True]
        assert [result.rule_id for result in results] == ["cfsi_critical", "churn_risk_high"]
        assert "[email] Alert: Critical Cash Flow Stability" in caplog.text

    def test_missing_sink(self, candidates):
        dispatcher = AlertDispatcher([LoggingSink(AlertActionType.EMAIL)])

        results = dispatcher.dispatch(candidates)

        assert results[0].success is True
        assert results[1].success is False
        assert results[1].error == "No sink registered for hubspot"

    def test_sink_failure_reported(self, candidates, mocker):
        # Arrange
        sink = LoggingSink(AlertActionType.EMAIL)
        mocker.patch.object(sink, "deliver", side_effect=RuntimeError("smtp unavailable"))
        dispatcher = AlertDispatcher([sink, LoggingSink(AlertActionType.HUBSPOT)])

        # Act
        results = dispatcher.dispatch(candidates)

        # Assert
        assert results[0].success is False
        assert results[0].error == "smtp unavailable"
        assert results[1].success is True

    def test_register_replaces_sink(self):
        dispatcher = AlertDispatcher([LoggingSink("webhook")])
        replacement = LoggingSink("webhook", level=logging.WARNING)

        dispatcher.register(replacement)

        assert dispatcher.get_sink(AlertActionType.WEBHOOK) is replacement
        assert dispatcher.get_sink("email") is None
