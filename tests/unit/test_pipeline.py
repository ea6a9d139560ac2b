"""
Tests for the end-to-end prediction pipeline.
"""

import datetime as dt

import pytest

from foresight.exceptions import (
    CalculationError,
    EnsembleError,
    MissingDataError,
    UnknownIdentifierError,
    ValidationError,
)
from foresight.forecasting import Ensemble
from foresight.mocks import MockDataProvider
from foresight.models import RawBusinessData, RevenueRecord
from foresight.pipeline import PredictionPipeline, generate_forecast, resolve_horizons
from tests.conftest import weekly_sinusoid


def strip_timestamps(payload: dict) -> dict:
    payload = dict(payload)
    payload.pop("generatedAt")
    payload["alerts"] = [{k: v for k, v in alert.items() if k != "triggeredAt"} for alert in payload["alerts"]]
    return payload


@pytest.fixture
def pipeline():
    return PredictionPipeline({"random_seed": 11})


class TestResolveHorizons:
    def test_default_all(self):
        assert [h.value for h in resolve_horizons(None)] == ["14d", "30d", "60d"]

    def test_dedupes_in_order(self):
        assert [h.value for h in resolve_horizons(["30d", "14d", "30d"])] == ["30d", "14d"]

    def test_unknown(self):
        with pytest.raises(ValidationError) as exc_info:
            resolve_horizons(["7d"])

        assert exc_info.value.invalid_fields["horizon"] == "7d"

    def test_empty(self):
        with pytest.raises(ValidationError):
            resolve_horizons([])


class TestGenerateForecast:
    def test_flat_history(self, pipeline, flat_raw_data, analysis_date):
        """Test a constant revenue history gives a flat, non-seasonal forecast."""
        # Act
        output = pipeline.generate_forecast("contractor", data=flat_raw_data, analysis_date=analysis_date)

        # Assert
        assert output.persona == "contractor"
        assert output.horizons == ["14d", "30d", "60d"]
        assert len(output.revenue_forecast) == 60
        assert all(950 <= point.point <= 1050 for point in output.revenue_forecast)
        assert output.diagnostics.has_seasonality is False
        weights = output.diagnostics.model_weights
        assert weights.get("ar", 0) + weights.get("ewma", 0) > weights.get("seasonal", 0)
        assert output.diagnostics.recent_revenue_average == pytest.approx(1000.0)
        assert output.creator_check.passed is True
        assert output.alerts == []

    def test_horizon_prefixes(self, pipeline, flat_raw_data, analysis_date):
        output = pipeline.generate_forecast(
            "smb", horizons=["30d", "14d"], data=flat_raw_data, analysis_date=analysis_date
        )

        assert {key: len(points) for key, points in output.horizon_forecasts.items()} == {"30d": 30, "14d": 14}
        assert output.horizon_forecasts["14d"] == output.revenue_forecast[:14]
        assert [point.date for point in output.revenue_forecast] == [
            analysis_date + dt.timedelta(days=i) for i in range(1, 31)
        ]

    def test_weekly_seasonality_detected(self, pipeline, analysis_date):
        values = weekly_sinusoid(91)
        data = RawBusinessData(
            revenue=[
                RevenueRecord(date=analysis_date - dt.timedelta(days=90 - t), revenue=value)
                for t, value in enumerate(values)
            ]
        )

        output = pipeline.generate_forecast("healthcare", horizons=["14d"], data=data, analysis_date=analysis_date)

        assert output.diagnostics.has_seasonality is True
        assert "Weekly seasonality patterns detected in revenue data" in output.explanations

    def test_bands_contain_points(self, pipeline, mock_raw_data, analysis_date):
        output = pipeline.generate_forecast("contractor", data=mock_raw_data, analysis_date=analysis_date)

        for points in [output.revenue_forecast, *output.horizon_forecasts.values()]:
            assert all(0 <= p.ci_low <= p.point <= p.ci_high for p in points)
        assert 0 <= output.cash_flow_stability_index <= 100
        assert 0 <= output.churn_risk <= 1
        assert output.anticipated_need.window_start <= output.anticipated_need.window_end

    def test_seeded_runs_match(self, mock_raw_data, analysis_date):
        first = PredictionPipeline({"random_seed": 5}).generate_forecast(
            "logistics", data=mock_raw_data, analysis_date=analysis_date
        )
        second = PredictionPipeline({"random_seed": 5}).generate_forecast(
            "logistics", data=mock_raw_data, analysis_date=analysis_date
        )

        assert strip_timestamps(first.to_dict()) == strip_timestamps(second.to_dict())

    def test_dict_data_accepted(self, pipeline, flat_raw_data, analysis_date):
        output = pipeline.generate_forecast(
            "contractor", horizons=["14d"], data=flat_raw_data.to_dict(), analysis_date=analysis_date
        )

        assert len(output.revenue_forecast) == 14

    def test_unknown_persona(self, pipeline, flat_raw_data):
        with pytest.raises(UnknownIdentifierError) as exc_info:
            pipeline.generate_forecast("astronaut", data=flat_raw_data)

        assert exc_info.value.identifier == "astronaut"

    def test_no_data_and_no_provider(self, pipeline):
        with pytest.raises(MissingDataError):
            pipeline.generate_forecast("contractor")

    def test_malformed_data(self, pipeline, analysis_date):
        with pytest.raises(ValidationError):
            pipeline.generate_forecast(
                "contractor", data={"revenue": [{"date": "yesterday"}]}, analysis_date=analysis_date
            )

    def test_invalid_config(self):
        with pytest.raises(ValidationError) as exc_info:
            PredictionPipeline({"alpha": 0})

        assert "alpha" in exc_info.value.invalid_fields

    def test_data_provider(self, analysis_date):
        output = generate_forecast(
            "property_manager",
            horizons=["14d"],
            analysis_date=analysis_date,
            config={"random_seed": 3},
            data_provider=MockDataProvider(seed=3),
        )

        assert output.persona == "property_manager"
        assert output.diagnostics.models_used

    def test_ensemble_failure_falls_back_to_ewma(self, pipeline, flat_raw_data, analysis_date, mocker):
        # Arrange
        mocker.patch.object(
            Ensemble, "forecast", side_effect=EnsembleError("No ensemble member produced a forecast", {"ar": "x"})
        )

        # Act
        output = pipeline.generate_forecast("contractor", horizons=["14d"], data=flat_raw_data, analysis_date=analysis_date)

        # Assert
        assert output.diagnostics.fallback_used is True
        assert output.diagnostics.model_weights == {"ewma": 1.0}
        assert "Forecast uses the EWMA model alone because the ensemble could not be fitted" in output.explanations
        assert len(output.revenue_forecast) == 14

    def test_failed_stages_use_defaults(self, pipeline, flat_raw_data, analysis_date, mocker):
        """Test scoring failures degrade to neutral values instead of aborting the run."""
        # Arrange
        mocker.patch("foresight.pipeline.calculate_cfsi", side_effect=CalculationError("cfsi failed"))
        mocker.patch("foresight.pipeline.calculate_churn_risk", side_effect=ValueError("bad factors"))
        mocker.patch("foresight.pipeline.calculate_anticipated_need", side_effect=ZeroDivisionError())

        # Act
        output = pipeline.generate_forecast("contractor", data=flat_raw_data, analysis_date=analysis_date)

        # Assert
        assert output.cash_flow_stability_index == 50.0
        assert output.cfsi_tier == "poor"
        assert output.churn_risk == 0.3
        assert output.churn_tier == "moderate"
        assert output.anticipated_need.top_signals == ["Default pattern"]
        assert output.anticipated_need.window_start == analysis_date + dt.timedelta(days=30)

    def test_unexpected_stage_error_propagates(self, pipeline, flat_raw_data, analysis_date, mocker):
        mocker.patch("foresight.pipeline.calculate_cfsi", side_effect=KeyError("boom"))

        with pytest.raises(KeyError):
            pipeline.generate_forecast("contractor", data=flat_raw_data, analysis_date=analysis_date)

    def test_failed_gate_keeps_critical_alerts(self, pipeline, flat_raw_data, analysis_date, mocker):
        # Arrange
        mocker.patch(
            "foresight.pipeline.PredictionPipeline._build_explanations",
            return_value=["Yard signs for the election season are in demand this month"],
        )
        mocker.patch("foresight.pipeline.calculate_cfsi", side_effect=CalculationError("cfsi failed"))
        rules = [rule.model_copy(update={"threshold": 60}) if rule.id == "cfsi_critical" else rule for rule in pipeline.rules]
        gated = PredictionPipeline(pipeline.config, rules=rules)

        # Act
        output = gated.generate_forecast("contractor", data=flat_raw_data, analysis_date=analysis_date)

        # Assert
        assert output.creator_check.passed is False
        assert [alert.rule_id for alert in output.alerts] == ["cfsi_critical"]

    def test_late_revenue_burst_stays_bounded(self, pipeline, analysis_date):
        """Test revenue that only starts in the last week forecasts a trend without a runaway blend."""
        # Arrange
        values = [0.0] * 85 + [500.0, 800.0, 900.0, 700.0, 600.0, 1000.0]
        data = RawBusinessData(
            revenue=[
                RevenueRecord(date=analysis_date - dt.timedelta(days=90 - t), revenue=value)
                for t, value in enumerate(values)
            ]
        )

        # Act
        output = pipeline.generate_forecast("contractor", data=data, analysis_date=analysis_date)

        # Assert
        assert output.diagnostics.has_trend is True
        assert output.diagnostics.model_weights == {"ewma": 1.0}
        assert output.diagnostics.fallback_used is False
        assert all(point.ci_high < 10000 for point in output.revenue_forecast)


class TestUnseededRuns:
    def test_scores_stable_and_bands_close(self, mock_raw_data, analysis_date):
        """Test only the bootstrap bands may differ between unseeded runs on the same history."""
        # Act
        first = PredictionPipeline().generate_forecast("logistics", data=mock_raw_data, analysis_date=analysis_date)
        second = PredictionPipeline().generate_forecast("logistics", data=mock_raw_data, analysis_date=analysis_date)

        # Assert
        assert first.cash_flow_stability_index == second.cash_flow_stability_index
        assert first.churn_risk == second.churn_risk
        assert first.anticipated_need == second.anticipated_need
        assert [p.point for p in first.revenue_forecast] == pytest.approx([p.point for p in second.revenue_forecast])
        for a, b in zip(first.revenue_forecast, second.revenue_forecast):
            assert a.ci_low == pytest.approx(b.ci_low, abs=0.1 * a.point)
            assert a.ci_high == pytest.approx(b.ci_high, abs=0.1 * a.point)
        assert [alert.rule_id for alert in first.alerts] == [alert.rule_id for alert in second.alerts]
