"""
Raw business records and the engineered feature set built from them.
"""

import datetime as dt
import math

import pandas as pd
from pydantic import ConfigDict, Field, model_validator

from foresight.models.common import BaseModel


class RevenueRecord(BaseModel):
    date: dt.date
    revenue: float | None = None
    gross_margin: float | None = None
    refunds: float | None = None


class LeadRecord(BaseModel):
    date: dt.date
    leads: float | None = None
    rfq_submissions: float | None = None
    wins: float | None = None


class CustomerRecord(BaseModel):
    date: dt.date
    reorders: float | None = None
    reorder_intervals: list[float] = Field(default_factory=list)
    persona_mix: dict[str, float] = Field(default_factory=dict)
    product_mix: dict[str, float] = Field(default_factory=dict)


class OperationalRecord(BaseModel):
    date: dt.date
    sla_met: float | None = None
    on_time: float | None = None
    cutoff_views: float | None = None
    freight_usage: float | None = None


class EngagementRecord(BaseModel):
    date: dt.date
    email_open_rate: float | None = None
    email_click_rate: float | None = None
    site_sessions: float | None = None
    site_engagement: float | None = None


class RawBusinessData(BaseModel):
    """Historical records for every signal domain"""

    revenue: list[RevenueRecord] = Field(default_factory=list)
    leads: list[LeadRecord] = Field(default_factory=list)
    customers: list[CustomerRecord] = Field(default_factory=list)
    operations: list[OperationalRecord] = Field(default_factory=list)
    engagement: list[EngagementRecord] = Field(default_factory=list)


SERIES_FIELDS = (
    "daily_revenue",
    "raw_revenue",
    "gross_margin",
    "refunds",
    "lead_volume",
    "rfq_win_rate",
    "sla_met",
    "on_time",
    "cutoff_views",
    "freight_usage",
    "email_engagement",
    "site_engagement",
)


class FeatureSet(BaseModel):
    """Aligned, gap-free daily series over the lookback window.

    Every series has one value per entry in ``dates``. ``daily_revenue`` is the
    EWMA-smoothed revenue used for forecasting; ``raw_revenue`` keeps the
    unsmoothed values.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    dates: tuple[dt.date, ...]
    daily_revenue: tuple[float, ...]
    raw_revenue: tuple[float, ...]
    gross_margin: tuple[float, ...]
    refunds: tuple[float, ...]
    lead_volume: tuple[float, ...]
    rfq_win_rate: tuple[float, ...]
    sla_met: tuple[float, ...]
    on_time: tuple[float, ...]
    cutoff_views: tuple[float, ...]
    freight_usage: tuple[float, ...]
    email_engagement: tuple[float, ...]
    site_engagement: tuple[float, ...]
    reorder_intervals: tuple[float, ...] = ()
    persona_mix: dict[str, float] = Field(default_factory=dict)
    product_mix: dict[str, float] = Field(default_factory=dict)
    last_updated: dt.datetime

    @model_validator(mode="after")
    def validate_series(self) -> "FeatureSet":
        expected = len(self.dates)
        for name in SERIES_FIELDS:
            values = getattr(self, name)
            if len(values) != expected:
                raise ValueError(f"{name} has {len(values)} values, expected {expected}")
            if not all(math.isfinite(v) for v in values):
                raise ValueError(f"{name} contains non-finite values")
        return self

    def __len__(self) -> int:
        return len(self.dates)

    def to_frame(self) -> pd.DataFrame:
        """Return the daily series as a date-indexed DataFrame."""
        frame = pd.DataFrame({name: list(getattr(self, name)) for name in SERIES_FIELDS})
        frame.index = pd.DatetimeIndex(pd.to_datetime(list(self.dates)), name="date")
        return frame
