"""
Anticipated need: a hazard-style estimate of the next purchase window.
"""

import datetime as dt
import logging

import numpy as np

from foresight.config import PipelineConfig
from foresight.models import AnticipatedNeed, FeatureSet, NeedTier, Persona
from foresight.personas import PersonaProfile, get_persona_profile
from foresight.primitives import calculate_window_ratio, clamp

logger = logging.getLogger(__name__)

ACTIVITY_THRESHOLD = 0.5
DEFAULT_DAYS_SINCE_ACTIVITY = 30
SINGLE_INTERVAL_STD_FRACTION = 0.3
WINDOW_STD_FRACTION = 0.5
MAX_SIGNALS = 5

BASE_CONFIDENCE = 0.5
MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.9

# (ratio above which, ratio below which, rising label, falling label)
ENGAGEMENT_SIGNALS = (
    ("email_engagement", 1.2, 0.8, "Increased email engagement", "Decreased email engagement"),
    ("site_engagement", 1.2, 0.8, "Increased site engagement", "Decreased site engagement"),
    ("raw_revenue", 1.1, 0.9, "Revenue growth trend", "Revenue decline trend"),
)
HIGH_SLA = 0.95
LOW_SLA = 0.90

DEFAULT_WINDOW_START_DAYS = 30
DEFAULT_WINDOW_END_DAYS = 45
DEFAULT_NEED_CONFIDENCE = 0.3


def estimate_interval(features: FeatureSet, profile: PersonaProfile) -> tuple[float, float]:
    """Mean and population std of the reorder intervals, falling back to persona defaults."""
    intervals = np.asarray(features.reorder_intervals, dtype=float)
    mean = float(intervals.mean()) if intervals.size else float(profile.reorder_interval_days)
    if intervals.size > 1:
        return mean, float(intervals.std(ddof=0))
    return mean, mean * SINGLE_INTERVAL_STD_FRACTION


def find_last_activity(features: FeatureSet, analysis_date: dt.date) -> dt.date:
    """Last date whose combined email and site engagement reaches half its maximum."""
    combined = np.asarray(features.email_engagement, dtype=float) + np.asarray(features.site_engagement, dtype=float)
    if combined.size == 0 or combined.max() <= 0:
        return analysis_date - dt.timedelta(days=DEFAULT_DAYS_SINCE_ACTIVITY)
    active = np.flatnonzero(combined >= ACTIVITY_THRESHOLD * combined.max())
    return features.dates[int(active[-1])]


def estimate_confidence(features: FeatureSet, profile: PersonaProfile, mean: float, std: float) -> float:
    confidence = BASE_CONFIDENCE
    if len(features.reorder_intervals) >= 5:
        confidence += 0.2
    cv = std / mean if mean > 0 else None
    if cv is not None and cv < 0.3:
        confidence += 0.2
    elif cv is not None and cv < 0.5:
        confidence += 0.1
    return clamp((confidence + profile.base_confidence) / 2, MIN_CONFIDENCE, MAX_CONFIDENCE)


def collect_signals(features: FeatureSet, profile: PersonaProfile) -> list[str]:
    signals = []
    for field, rising, falling, rising_label, falling_label in ENGAGEMENT_SIGNALS:
        ratio = calculate_window_ratio(getattr(features, field))
        if ratio is None:
            continue
        if ratio > rising:
            signals.append(rising_label)
        elif ratio < falling:
            signals.append(falling_label)

    if features.sla_met:
        sla = float(np.mean(features.sla_met))
        if sla > HIGH_SLA:
            signals.append("High SLA performance")
        elif sla < LOW_SLA:
            signals.append("SLA performance concerns")

    signals.extend(profile.signals)
    return signals[:MAX_SIGNALS]


def interpret_anticipated_need(
    window_start: dt.date, confidence: float, today: dt.date
) -> tuple[NeedTier, str, list[str]]:
    days_until = (window_start - today).days
    if confidence >= 0.7 and days_until <= 14:
        return (
            NeedTier.HIGH,
            "High confidence in an upcoming order window within 2 weeks",
            ["Prepare proactive outreach materials", "Schedule account manager check-in"],
        )
    if confidence >= 0.5 and days_until <= 30:
        return (
            NeedTier.MEDIUM,
            "Moderate confidence in an upcoming order window within a month",
            ["Monitor engagement signals closely", "Plan follow-up sequence"],
        )
    return (
        NeedTier.LOW,
        "Lower confidence in the upcoming order window",
        ["Focus on relationship building", "Maintain regular touchpoints"],
    )


def calculate_anticipated_need(
    features: FeatureSet,
    persona: "Persona | str",
    analysis_date: dt.date | None = None,
    config: PipelineConfig | None = None,
) -> AnticipatedNeed:
    """
    Estimate the next purchase window from reorder intervals and recent activity.

    The window is centred on last activity plus the mean reorder interval,
    widened by half the interval std, shifted by persona offsets and capped
    at ``max_window_days``.

    Raises:
        UnknownIdentifierError: If the persona is not recognised
    """
    config = config or PipelineConfig()
    profile = get_persona_profile(persona)
    analysis_date = analysis_date or features.dates[-1]

    mean, std = estimate_interval(features, profile)
    last_activity = find_last_activity(features, analysis_date)
    uncertainty = WINDOW_STD_FRACTION * std
    window_start = last_activity + dt.timedelta(days=round(mean - uncertainty) + profile.window_start_offset_days)
    window_end = last_activity + dt.timedelta(days=round(mean + uncertainty) + profile.window_end_offset_days)
    window_end = min(window_end, window_start + dt.timedelta(days=config.max_window_days))

    confidence = estimate_confidence(features, profile, mean, std)
    tier, description, _ = interpret_anticipated_need(window_start, confidence, analysis_date)
    return AnticipatedNeed(
        window_start=window_start,
        window_end=window_end,
        confidence=confidence,
        top_signals=collect_signals(features, profile),
        tier=tier,
        description=description,
    )


def default_anticipated_need(analysis_date: dt.date) -> AnticipatedNeed:
    """Fallback window used when the estimate cannot be computed."""
    window_start = analysis_date + dt.timedelta(days=DEFAULT_WINDOW_START_DAYS)
    return AnticipatedNeed(
        window_start=window_start,
        window_end=analysis_date + dt.timedelta(days=DEFAULT_WINDOW_END_DAYS),
        confidence=DEFAULT_NEED_CONFIDENCE,
        top_signals=["Default pattern"],
        tier=NeedTier.LOW,
        description="Default order window; not enough history for an estimate",
    )
