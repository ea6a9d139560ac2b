"""
Prediction pipeline: features, forecasts, scores, explanations, alerts and governance.
"""

import datetime as dt
import logging
import time
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

import numpy as np

from foresight.alerts import build_alert_rules, evaluate_alerts
from foresight.config import PipelineConfig, load_config
from foresight.exceptions import (
    CalculationError,
    DataError,
    EnsembleError,
    ForecastGenerationError,
    InsufficientDataError,
    MissingDataError,
    ValidationError,
)
from foresight.features import FeatureStore
from foresight.forecasting import EWMAModel, Ensemble, create_model, select_model_configuration
from foresight.governance import apply_creator_check, run_creator_check
from foresight.models import (
    AlertRule,
    AnticipatedNeed,
    CFSITier,
    ChurnTier,
    CreatorCheck,
    FeatureSet,
    ForecastDiagnostics,
    ForecastModelName,
    ForecastOutput,
    ForecastPoint,
    Horizon,
    ModelSelection,
    Persona,
    RawBusinessData,
)
from foresight.personas import resolve_persona
from foresight.primitives import calculate_relative_change
from foresight.providers import DataProvider
from foresight.scores import (
    DEFAULT_CHURN_RISK,
    NEUTRAL_SUBSCORE,
    calculate_anticipated_need,
    calculate_cfsi,
    calculate_churn_risk,
    classify_cfsi,
    classify_churn,
    default_anticipated_need,
)
from foresight.templates import render_text

logger = logging.getLogger(__name__)

T = TypeVar("T")

RECENT_WINDOW_DAYS = 7
REVENUE_CHANGE_THRESHOLD = 0.1

# Exceptions a scoring stage may raise that degrade it to its default
STAGE_ERRORS = (CalculationError, DataError, ArithmeticError, ValueError)


def resolve_horizons(horizons: "Iterable[Horizon | str] | None") -> list[Horizon]:
    """Coerce horizon labels in order, dropping duplicates; all horizons when None."""
    if horizons is None:
        return list(Horizon)
    resolved: list[Horizon] = []
    for horizon in horizons:
        try:
            value = Horizon(horizon)
        except ValueError as exc:
            raise ValidationError(
                f"Unsupported horizon: {horizon!r}", {"horizon": str(horizon), "supported": [h.value for h in Horizon]}
            ) from exc
        if value not in resolved:
            resolved.append(value)
    if not resolved:
        raise ValidationError("At least one horizon is required", {"horizons": []})
    return resolved


class PredictionPipeline:
    """Single entry point producing a governed ForecastOutput for a persona.

    Holds only immutable configuration; every call builds its own feature
    store, models and random generator.
    """

    def __init__(
        self,
        config: PipelineConfig | dict[str, Any] | None = None,
        data_provider: DataProvider | None = None,
        rules: Sequence[AlertRule] | None = None,
    ) -> None:
        self.config = load_config(config)
        self.data_provider = data_provider
        self.rules = tuple(rules) if rules is not None else build_alert_rules(self.config)

    def generate_forecast(
        self,
        persona: "Persona | str",
        horizons: "Iterable[Horizon | str] | None" = None,
        data: RawBusinessData | dict[str, Any] | None = None,
        analysis_date: dt.date | None = None,
    ) -> ForecastOutput:
        """
        Produce forecasts, scores, explanations and governed alerts.

        Args:
            persona: Customer segment
            horizons: Horizons to forecast; defaults to 14d, 30d and 60d
            data: Raw records; fetched from the data provider when omitted
            analysis_date: Last day of history; defaults to today

        Returns:
            ForecastOutput whose ``revenue_forecast`` covers the longest horizon

        Raises:
            UnknownIdentifierError: If the persona is not recognised
            ValidationError: If a horizon or the data is invalid
            MissingDataError: If no data is given and there is no provider
            ForecastGenerationError: If no forecast can be produced
        """
        started = time.perf_counter()
        persona = resolve_persona(persona)
        horizons = resolve_horizons(horizons)
        analysis_date = analysis_date or dt.date.today()
        generated_at = dt.datetime.now(dt.timezone.utc)
        logger.info("Generating %s forecast for %s", persona.value, ", ".join(h.value for h in horizons))

        raw = self._load_data(persona, data, analysis_date)
        features = FeatureStore(self.config).extract_features(raw, analysis_date)
        series = list(features.daily_revenue)
        if not series:
            raise ForecastGenerationError("Revenue series is empty", {"persona": persona.value})

        selection = select_model_configuration(series, self.config)
        rng = np.random.default_rng(self.config.random_seed)
        longest = max(h.days for h in horizons)
        points, weights, fallback_used = self._forecast_revenue(
            series, longest, analysis_date + dt.timedelta(days=1), selection, rng
        )
        horizon_forecasts = {h.value: points[: h.days] for h in horizons}

        cfsi = self._run_stage("cfsi", None, calculate_cfsi, features)
        cfsi_value = cfsi.value if cfsi else NEUTRAL_SUBSCORE
        cfsi_tier = CFSITier(cfsi.tier).value if cfsi else classify_cfsi(cfsi_value)[0].value
        churn = self._run_stage("churn", None, calculate_churn_risk, features, persona)
        churn_value = churn.value if churn else DEFAULT_CHURN_RISK
        churn_tier = ChurnTier(churn.tier).value if churn else classify_churn(churn_value)[0].value
        need = self._run_stage(
            "anticipated_need",
            None,
            calculate_anticipated_need,
            features,
            persona,
            analysis_date,
            self.config,
        ) or default_anticipated_need(analysis_date)

        diagnostics = ForecastDiagnostics(
            recent_revenue_average=float(np.mean(features.raw_revenue[-RECENT_WINDOW_DAYS:])),
            sla_performance=float(np.mean(features.sla_met)),
            has_trend=selection.has_trend,
            has_seasonality=selection.has_seasonality,
            model_weights=weights,
            models_used=list(weights),
            fallback_used=fallback_used,
        )
        explanations = self._build_explanations(
            features, points, selection, cfsi_value, cfsi_tier, churn_value, churn_tier, need, fallback_used
        )

        draft = ForecastOutput(
            generated_at=generated_at,
            analysis_date=analysis_date,
            horizons=horizons,
            persona=persona,
            revenue_forecast=points,
            horizon_forecasts=horizon_forecasts,
            cash_flow_stability_index=cfsi_value,
            cfsi_tier=cfsi_tier,
            churn_risk=churn_value,
            churn_tier=churn_tier,
            anticipated_need=need,
            explanations=explanations,
            creator_check=CreatorCheck(passed=False),
            diagnostics=diagnostics,
        )
        draft = draft.model_copy(update={"alerts": evaluate_alerts(draft, self.rules)})
        check = run_creator_check(draft, self.config, now=generated_at)
        output = apply_creator_check(draft, check)

        logger.info(
            "Generated %s forecast in %.2fs: %d alert(s), creator check %s",
            persona.value,
            time.perf_counter() - started,
            len(output.alerts),
            "passed" if check.passed else "failed",
        )
        return output

    def _load_data(
        self, persona: Persona, data: RawBusinessData | dict[str, Any] | None, analysis_date: dt.date
    ) -> RawBusinessData | dict[str, Any]:
        if data is not None:
            return data
        if self.data_provider is None:
            raise MissingDataError("No data given and no data provider configured", ["data"])
        return self.data_provider.fetch(persona, self.config.lookback_days, analysis_date)

    def _forecast_revenue(
        self,
        series: list[float],
        horizon_days: int,
        start_date: dt.date,
        selection: ModelSelection,
        rng: np.random.Generator,
    ) -> tuple[list[ForecastPoint], dict[str, float], bool]:
        """Ensemble forecast, falling back to EWMA alone when no member fits."""
        models = [
            create_model(ForecastModelName.SEASONAL, self.config, rng, alpha=selection.alpha, gamma=selection.gamma),
            create_model(ForecastModelName.EWMA, self.config, rng, alpha=selection.alpha),
            create_model(ForecastModelName.AR, self.config, rng),
        ]
        try:
            result = Ensemble(models, selection.weights).forecast(series, horizon_days, start_date)
            return result.points, result.weights, False
        except EnsembleError as exc:
            logger.warning("Ensemble failed (%s), falling back to EWMA", exc.message)

        try:
            points = EWMAModel(self.config, rng, alpha=selection.alpha).fit_forecast(series, horizon_days, start_date)
        except InsufficientDataError as exc:
            raise ForecastGenerationError("Unable to forecast revenue", {"reason": exc.message}) from exc
        return points, {ForecastModelName.EWMA.value: 1.0}, True

    def _run_stage(self, stage: str, default: T, func: Callable[..., T], *args: Any) -> T:
        try:
            return func(*args)
        except STAGE_ERRORS:
            logger.exception("%s stage failed, using default", stage)
            return default

    def _build_explanations(
        self,
        features: FeatureSet,
        points: list[ForecastPoint],
        selection: ModelSelection,
        cfsi_value: float,
        cfsi_tier: str,
        churn_value: float,
        churn_tier: str,
        need: AnticipatedNeed,
        fallback_used: bool,
    ) -> list[str]:
        recent = float(np.mean(features.raw_revenue[-RECENT_WINDOW_DAYS:]))
        upcoming = float(np.mean([p.point for p in points[:RECENT_WINDOW_DAYS]]))
        change = calculate_relative_change(upcoming, recent, default_value=0.0)
        if change > REVENUE_CHANGE_THRESHOLD:
            revenue_key = "revenue_growth"
        elif change < -REVENUE_CHANGE_THRESHOLD:
            revenue_key = "revenue_decline"
        else:
            revenue_key = "revenue_stable"

        explanations = [render_text("explanation", revenue_key, {"change": change})]
        if selection.has_seasonality:
            explanations.append(render_text("explanation", "seasonality", {}))
        if fallback_used:
            explanations.append(render_text("explanation", "fallback", {}))
        explanations.extend(
            [
                render_text("explanation", "cfsi", {"value": cfsi_value, "tier": cfsi_tier}),
                render_text("explanation", "churn", {"value": churn_value, "tier": churn_tier}),
                render_text(
                    "explanation",
                    "anticipated_need",
                    {"start": need.window_start, "end": need.window_end, "confidence": need.confidence},
                ),
                render_text("explanation", "preferences", {}),
                render_text("explanation", "closing", {}),
            ]
        )
        return explanations


def generate_forecast(
    persona: "Persona | str",
    horizons: "Iterable[Horizon | str] | None" = None,
    data: RawBusinessData | dict[str, Any] | None = None,
    analysis_date: dt.date | None = None,
    config: PipelineConfig | dict[str, Any] | None = None,
    data_provider: DataProvider | None = None,
) -> ForecastOutput:
    """Run a one-off PredictionPipeline."""
    return PredictionPipeline(config, data_provider).generate_forecast(persona, horizons, data, analysis_date)
