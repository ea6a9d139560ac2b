"""
Common fixtures for all tests in the foresight package.
"""

import datetime as dt
import math

import pytest

from foresight.mocks import MockDataProvider
from foresight.models import (
    AnticipatedNeed,
    CreatorCheck,
    FeatureSet,
    ForecastDiagnostics,
    ForecastOutput,
    ForecastPoint,
    Persona,
    RawBusinessData,
    RevenueRecord,
)

ANALYSIS_DATE = dt.date(2024, 6, 30)


@pytest.fixture
def analysis_date():
    """Fixed last day of history."""
    return ANALYSIS_DATE


def weekly_sinusoid(n: int = 91, base: float = 1000.0, amplitude: float = 0.2) -> list[float]:
    """Series whose position k in each 7-day cycle follows sin(2*pi*k/7); peak at k=2."""
    return [base * (1 + amplitude * math.sin(2 * math.pi * t / 7)) for t in range(n)]


@pytest.fixture
def sinusoid_series():
    return weekly_sinusoid()


@pytest.fixture
def flat_series():
    return [1000.0] * 91


@pytest.fixture
def make_feature_set(analysis_date):
    """Factory building a FeatureSet with neutral defaults; keyword arguments override fields."""

    def _make(n: int = 91, **overrides) -> FeatureSet:
        dates = tuple(analysis_date - dt.timedelta(days=n - 1 - i) for i in range(n))
        fields = {
            "dates": dates,
            "daily_revenue": (1000.0,) * n,
            "raw_revenue": (1000.0,) * n,
            "gross_margin": (0.4,) * n,
            "refunds": (0.0,) * n,
            "lead_volume": (10.0,) * n,
            "rfq_win_rate": (0.15,) * n,
            "sla_met": (0.97,) * n,
            "on_time": (0.95,) * n,
            "cutoff_views": (0.0,) * n,
            "freight_usage": (0.3,) * n,
            "email_engagement": (0.25,) * n,
            "site_engagement": (0.4,) * n,
            "reorder_intervals": (),
            "persona_mix": {"contractor": 0.35, "property_manager": 0.25, "logistics": 0.2, "healthcare": 0.15, "smb": 0.05},
            "product_mix": {"banners": 0.4, "yard-signs": 0.25, "decals": 0.15, "ada-signs": 0.1, "safety-signs": 0.1},
            "last_updated": dt.datetime(2024, 6, 30, tzinfo=dt.timezone.utc),
        }
        for key, value in overrides.items():
            fields[key] = tuple(value) if isinstance(value, list) else value
        return FeatureSet(**fields)

    return _make


@pytest.fixture
def flat_raw_data(analysis_date):
    """Revenue of 1000 every day of the default 90-day window; other domains left to defaults."""
    return RawBusinessData(
        revenue=[
            RevenueRecord(date=analysis_date - dt.timedelta(days=offset), revenue=1000.0) for offset in range(91)
        ]
    )


@pytest.fixture
def mock_raw_data(analysis_date):
    return MockDataProvider(seed=7).fetch(Persona.CONTRACTOR, 90, analysis_date)


def make_points(values, start: dt.date, band: float = 0.1) -> list[ForecastPoint]:
    return [
        ForecastPoint(
            date=start + dt.timedelta(days=i), point=value, ci_low=value * (1 - band), ci_high=value * (1 + band)
        )
        for i, value in enumerate(values)
    ]


@pytest.fixture
def make_output(analysis_date):
    """Factory building a ForecastOutput that triggers no alerts unless overridden."""

    def _make(**overrides) -> ForecastOutput:
        diagnostics = overrides.pop("diagnostics", None) or ForecastDiagnostics(
            recent_revenue_average=1000.0, sla_performance=0.97
        )
        points = overrides.pop("points", None) or make_points([1000.0] * 14, analysis_date + dt.timedelta(days=1))
        fields = {
            "generated_at": dt.datetime(2024, 6, 30, 12, tzinfo=dt.timezone.utc),
            "analysis_date": analysis_date,
            "horizons": ["14d"],
            "persona": "contractor",
            "revenue_forecast": points,
            "horizon_forecasts": {"14d": points},
            "cash_flow_stability_index": 72.0,
            "cfsi_tier": "fair",
            "churn_risk": 0.2,
            "churn_tier": "low",
            "anticipated_need": AnticipatedNeed(
                window_start=analysis_date + dt.timedelta(days=20),
                window_end=analysis_date + dt.timedelta(days=35),
                confidence=0.6,
                top_signals=["Project cycle analysis"],
            ),
            "explanations": [
                "Revenue forecast shows a stable pattern close to recent daily revenue",
                "Alert and contact preferences can be updated at any time",
                "These projections help long-term planning and a transparent customer relationship",
            ],
            "creator_check": CreatorCheck(passed=True),
            "diagnostics": diagnostics,
        }
        fields.update(overrides)
        return ForecastOutput(**fields)

    return _make
