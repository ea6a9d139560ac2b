"""
Main API for the foresight package.
"""

import datetime as dt
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from foresight.alerts import AlertDispatcher, summarize_alerts
from foresight.config import PipelineConfig
from foresight.forecasting import list_models
from foresight.governance import summarize_creator_check
from foresight.models import (
    AlertSummary,
    CreatorCheckSummary,
    DeliveryResult,
    ForecastAccuracy,
    ForecastOutput,
    ForecastPoint,
    Horizon,
    Persona,
    RawBusinessData,
    ScoreKind,
    ScoreTrendAnalysis,
)
from foresight.pipeline import PredictionPipeline
from foresight.primitives import get_primitive_metadata, list_primitives_by_family
from foresight.providers import DataProvider
from foresight.scores import analyze_score_trend
from foresight.validation import validate_forecast


class Foresight:
    """Main API class for forecasts, scores, alert delivery and validation."""

    def __init__(
        self,
        config: PipelineConfig | dict[str, Any] | None = None,
        data_provider: DataProvider | None = None,
        dispatcher: AlertDispatcher | None = None,
    ) -> None:
        self.pipeline = PredictionPipeline(config, data_provider)
        self.dispatcher = dispatcher or AlertDispatcher.with_logging_sinks()

    @property
    def config(self) -> PipelineConfig:
        return self.pipeline.config

    def generate_forecast(
        self,
        persona: "Persona | str",
        horizons: "Iterable[Horizon | str] | None" = None,
        data: RawBusinessData | dict[str, Any] | None = None,
        analysis_date: dt.date | None = None,
    ) -> ForecastOutput:
        """Run the prediction pipeline for a persona."""
        return self.pipeline.generate_forecast(persona, horizons, data, analysis_date)

    def deliver_alerts(self, output: ForecastOutput) -> list[DeliveryResult]:
        """Send the governance-approved alerts of an output to their sinks."""
        return self.dispatcher.dispatch(output.alerts)

    @staticmethod
    def summarize_alerts(output: ForecastOutput) -> AlertSummary:
        return summarize_alerts(output.alerts)

    @staticmethod
    def summarize_creator_check(output: ForecastOutput) -> CreatorCheckSummary:
        return summarize_creator_check(output.creator_check)

    @staticmethod
    def validate_forecast(
        forecast: Sequence[ForecastPoint], actuals: Mapping[dt.date | str, float]
    ) -> ForecastAccuracy:
        return validate_forecast(forecast, actuals)

    @staticmethod
    def analyze_score_trend(history: Sequence[float], kind: "ScoreKind | str") -> ScoreTrendAnalysis:
        return analyze_score_trend(history, kind)

    @staticmethod
    def get_output_schema() -> dict[str, Any]:
        """JSON schema of ForecastOutput with public (camelCase) field names."""
        return ForecastOutput.json_schema()

    @staticmethod
    def list_models() -> list[str]:
        return list_models()

    @staticmethod
    def list_primitives() -> dict[str, list[str]]:
        return list_primitives_by_family()

    @staticmethod
    def get_primitive_info(primitive_name: str) -> dict[str, str]:
        return get_primitive_metadata(primitive_name)
