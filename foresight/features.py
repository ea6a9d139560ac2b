"""
Feature store: turns raw per-day business records into an aligned FeatureSet.
"""

import datetime as dt
import logging
from collections.abc import Sequence
from types import MappingProxyType
from typing import Any

import numpy as np
import pandas as pd
from pydantic import ValidationError as PydanticValidationError

from foresight.config import PipelineConfig
from foresight.exceptions import ValidationError
from foresight.models import FeatureSet, RawBusinessData, SeasonalityProfile
from foresight.primitives import apply_ewma, calculate_rolling_stats, detect_seasonality, detect_trend

logger = logging.getLogger(__name__)

# Values substituted for a missing day or a missing field
FIELD_DEFAULTS = MappingProxyType(
    {
        "revenue": 0.0,
        "refunds": 0.0,
        "gross_margin": 0.4,
        "leads": 0.0,
        "rfq_win_rate": 0.15,
        "sla_met": 0.97,
        "on_time": 0.95,
        "cutoff_views": 0.0,
        "freight_usage": 0.3,
        "email_engagement": 0.25,
        "site_engagement": 0.4,
    }
)
COLD_START_REVENUE = 1000.0
MIX_WINDOW_RECORDS = 7

DEFAULT_PERSONA_MIX = MappingProxyType(
    {"contractor": 0.35, "property_manager": 0.25, "logistics": 0.20, "healthcare": 0.15, "smb": 0.05}
)
DEFAULT_PRODUCT_MIX = MappingProxyType(
    {"banners": 0.40, "yard-signs": 0.25, "decals": 0.15, "ada-signs": 0.10, "safety-signs": 0.10}
)


def _daily_frame(records: Sequence[Any], index: pd.DatetimeIndex, aggregations: dict[str, str]) -> pd.DataFrame:
    """Aggregate records per day and align them to the window index; gaps are NaN."""
    columns = list(aggregations)
    if not records:
        return pd.DataFrame(np.nan, index=index, columns=columns)
    frame = pd.DataFrame([record.model_dump() for record in records])
    frame["date"] = pd.to_datetime(frame["date"])
    frame[columns] = frame[columns].astype(float)
    frame = frame[frame["date"].isin(index)]
    if frame.empty:
        return pd.DataFrame(np.nan, index=index, columns=columns)
    daily = frame.groupby("date").agg(aggregations)
    # a day whose only values are null should stay null rather than sum to 0
    counts = frame.groupby("date")[columns].count()
    daily = daily.where(counts > 0)
    return daily.reindex(index)


def _normalise_mix(totals: dict[str, float], default: MappingProxyType) -> dict[str, float]:
    total = sum(totals.values())
    if total <= 0:
        return dict(default)
    return {key: value / total for key, value in totals.items()}


class FeatureStore:
    """Builds FeatureSets over a fixed lookback window ending on the analysis date."""

    def __init__(self, config: PipelineConfig | None = None):
        self.config = config or PipelineConfig()

    def date_index(self, analysis_date: dt.date) -> pd.DatetimeIndex:
        start = analysis_date - dt.timedelta(days=self.config.lookback_days)
        return pd.date_range(start=start, end=analysis_date, freq="D", name="date")

    def extract_features(
        self, data: RawBusinessData | dict[str, Any], analysis_date: dt.date | None = None
    ) -> FeatureSet:
        """
        Build the FeatureSet for the window ending on ``analysis_date`` (default today).

        Missing days and fields are filled with domain defaults, so this never
        fails on gaps; only malformed records raise.

        Raises:
            ValidationError: If ``data`` cannot be parsed into RawBusinessData
        """
        raw = self._parse(data)
        analysis_date = analysis_date or dt.date.today()
        index = self.date_index(analysis_date)

        revenue = _daily_frame(raw.revenue, index, {"revenue": "sum", "refunds": "sum", "gross_margin": "mean"})
        leads = _daily_frame(raw.leads, index, {"leads": "sum", "rfq_submissions": "sum", "wins": "sum"})
        operations = _daily_frame(
            raw.operations,
            index,
            {"sla_met": "mean", "on_time": "mean", "cutoff_views": "sum", "freight_usage": "mean"},
        )
        engagement = _daily_frame(
            raw.engagement,
            index,
            {"email_open_rate": "mean", "email_click_rate": "mean", "site_engagement": "mean"},
        )

        win_rate = (leads["wins"] / leads["rfq_submissions"].where(leads["rfq_submissions"] > 0)).clip(0, 1)
        email = engagement[["email_open_rate", "email_click_rate"]].mean(axis=1, skipna=True)

        series = {
            "raw_revenue": revenue["revenue"].fillna(FIELD_DEFAULTS["revenue"]),
            "gross_margin": revenue["gross_margin"].fillna(FIELD_DEFAULTS["gross_margin"]),
            "refunds": revenue["refunds"].fillna(FIELD_DEFAULTS["refunds"]),
            "lead_volume": leads["leads"].fillna(FIELD_DEFAULTS["leads"]),
            "rfq_win_rate": win_rate.fillna(FIELD_DEFAULTS["rfq_win_rate"]),
            "sla_met": operations["sla_met"].fillna(FIELD_DEFAULTS["sla_met"]),
            "on_time": operations["on_time"].fillna(FIELD_DEFAULTS["on_time"]),
            "cutoff_views": operations["cutoff_views"].fillna(FIELD_DEFAULTS["cutoff_views"]),
            "freight_usage": operations["freight_usage"].fillna(FIELD_DEFAULTS["freight_usage"]),
            "email_engagement": email.fillna(FIELD_DEFAULTS["email_engagement"]),
            "site_engagement": engagement["site_engagement"].fillna(FIELD_DEFAULTS["site_engagement"]),
        }
        raw_revenue = series["raw_revenue"].tolist()
        if any(value > 0 for value in raw_revenue):
            daily_revenue = apply_ewma(raw_revenue, self.config.ewma_alpha)
        else:
            logger.warning("No revenue history in window ending %s, using cold-start baseline", analysis_date)
            daily_revenue = [COLD_START_REVENUE] * len(index)

        persona_mix, product_mix, intervals = self._customer_features(raw, index)

        return FeatureSet(
            dates=tuple(day.date() for day in index),
            daily_revenue=tuple(daily_revenue),
            **{name: tuple(float(v) for v in values.tolist()) for name, values in series.items()},
            reorder_intervals=tuple(intervals),
            persona_mix=persona_mix,
            product_mix=product_mix,
            last_updated=dt.datetime.now(dt.timezone.utc),
        )

    def _customer_features(
        self, raw: RawBusinessData, index: pd.DatetimeIndex
    ) -> tuple[dict[str, float], dict[str, float], list[float]]:
        window_start, window_end = index[0].date(), index[-1].date()
        records = sorted(
            (record for record in raw.customers if window_start <= record.date <= window_end),
            key=lambda record: record.date,
        )
        persona_totals: dict[str, float] = {}
        product_totals: dict[str, float] = {}
        for record in records[-MIX_WINDOW_RECORDS:]:
            for key, value in record.persona_mix.items():
                persona_totals[key] = persona_totals.get(key, 0.0) + max(value, 0.0)
            for key, value in record.product_mix.items():
                product_totals[key] = product_totals.get(key, 0.0) + max(value, 0.0)

        intervals = [
            float(value)
            for record in records
            for value in record.reorder_intervals
            if np.isfinite(value) and value > 0
        ]
        return (
            _normalise_mix(persona_totals, DEFAULT_PERSONA_MIX),
            _normalise_mix(product_totals, DEFAULT_PRODUCT_MIX),
            intervals,
        )

    @staticmethod
    def _parse(data: RawBusinessData | dict[str, Any]) -> RawBusinessData:
        if isinstance(data, RawBusinessData):
            return data
        try:
            return RawBusinessData.model_validate(data)
        except PydanticValidationError as exc:
            invalid = {".".join(str(part) for part in err["loc"]): err["msg"] for err in exc.errors()}
            raise ValidationError("Malformed business records", invalid) from exc

    # Analysis helpers exposed alongside extraction

    @staticmethod
    def rolling_stats(values: Sequence[float], window: int) -> pd.DataFrame:
        return calculate_rolling_stats(values, window)

    def detect_seasonality(self, values: Sequence[float]) -> SeasonalityProfile:
        return detect_seasonality(values, self.config.seasonal_period)

    @staticmethod
    def detect_trend(values: Sequence[float]) -> bool:
        return detect_trend(values)
