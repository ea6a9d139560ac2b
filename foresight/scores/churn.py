"""
Churn risk.

A logistic score over four behavioural proxies plus a persona base risk.
Recency, frequency and monetary are inferred from engagement, customer mix
and revenue per lead; the coefficients below are tunable heuristics.
"""

import logging
from types import MappingProxyType

import numpy as np

from foresight.models import ChurnFactors, ChurnResult, ChurnTier, FeatureSet, Persona
from foresight.personas import get_persona_profile
from foresight.primitives import calculate_relative_change, clamp, safe_divide, sigmoid

logger = logging.getLogger(__name__)

DEFAULT_CHURN_RISK = 0.3

COEFFICIENTS = MappingProxyType(
    {
        "recency": -0.02,
        "frequency": -0.1,
        "monetary": -0.001,
        "engagement_delta": -0.5,
        "persona_risk": 1.0,
    }
)

# Recency proxy in days, from recent vs earlier email engagement
RECENCY_ACTIVE_DAYS = 7
RECENCY_STEADY_DAYS = 14
RECENCY_LAPSED_DAYS = 30
RECENCY_ACTIVE_RATIO = 1.2
RECENCY_STEADY_RATIO = 0.8

BASE_FREQUENCY = 2.0
MIN_FREQUENCY = 0.5
# (mix name, segment, share above which the bonus applies, bonus)
FREQUENCY_BONUSES = (
    ("persona_mix", "contractor", 0.3, 1.0),
    ("persona_mix", "property_manager", 0.3, 0.5),
    ("product_mix", "banners", 0.4, 0.5),
    ("product_mix", "decals", 0.3, 0.3),
)

DEFAULT_ORDER_VALUE = 500.0
MIN_ORDER_VALUE = 100.0

CHURN_TIERS = (
    (
        0.3,
        ChurnTier.LOW,
        "Low churn risk: customer is stable and engaged",
        (
            "Maintain current customer success initiatives",
            "Focus on upselling and cross-selling opportunities",
            "Monitor for any early warning signs",
        ),
    ),
    (
        0.5,
        ChurnTier.MODERATE,
        "Moderate churn risk: monitor customer health closely",
        (
            "Increase proactive outreach and engagement",
            "Review customer satisfaction and feedback",
            "Identify and address any service issues",
        ),
    ),
    (
        0.7,
        ChurnTier.HIGH,
        "High churn risk: retention action recommended",
        (
            "Schedule a customer success call",
            "Review account history for issues",
            "Consider account manager escalation",
        ),
    ),
    (
        float("inf"),
        ChurnTier.CRITICAL,
        "Critical churn risk: account needs direct intervention",
        (
            "Arrange account manager contact",
            "Review all customer touchpoints for issues",
            "Consider executive involvement",
        ),
    ),
)


def classify_churn(value: float) -> tuple[ChurnTier, str, list[str]]:
    for upper, tier, description, recommendations in CHURN_TIERS:
        if value < upper:
            return tier, description, list(recommendations)
    _, tier, description, recommendations = CHURN_TIERS[-1]
    return tier, description, list(recommendations)


def estimate_recency(features: FeatureSet) -> float:
    """Days-since-activity proxy from the last 7 days of email engagement vs the 21 before."""
    email = np.asarray(features.email_engagement, dtype=float)
    if email.size < 14:
        return RECENCY_LAPSED_DAYS
    recent = email[-7:].mean()
    earlier = email[-28:-7].mean()
    ratio = safe_divide(recent, earlier)
    if ratio is None:
        return RECENCY_ACTIVE_DAYS if recent > 0 else RECENCY_LAPSED_DAYS
    if ratio > RECENCY_ACTIVE_RATIO:
        return RECENCY_ACTIVE_DAYS
    if ratio > RECENCY_STEADY_RATIO:
        return RECENCY_STEADY_DAYS
    return RECENCY_LAPSED_DAYS


def estimate_frequency(features: FeatureSet) -> float:
    frequency = BASE_FREQUENCY
    for mix_name, segment, threshold, bonus in FREQUENCY_BONUSES:
        if getattr(features, mix_name).get(segment, 0.0) > threshold:
            frequency += bonus
    return max(MIN_FREQUENCY, frequency)


def estimate_monetary(features: FeatureSet) -> float:
    order_value = safe_divide(sum(features.raw_revenue), sum(features.lead_volume))
    if order_value is None:
        return DEFAULT_ORDER_VALUE
    return max(MIN_ORDER_VALUE, order_value)


def estimate_engagement_delta(features: FeatureSet) -> float:
    """Mean relative change of email and site engagement, last 7 days vs the 7 before."""
    if len(features) < 14:
        return 0.0
    deltas = []
    for series in (features.email_engagement, features.site_engagement):
        values = np.asarray(series, dtype=float)
        deltas.append(calculate_relative_change(values[-7:].mean(), values[-14:-7].mean(), default_value=0.0))
    return float(np.mean(deltas))


def calculate_churn_factors(features: FeatureSet, persona: "Persona | str") -> ChurnFactors:
    profile = get_persona_profile(persona)
    return ChurnFactors(
        recency=estimate_recency(features),
        frequency=estimate_frequency(features),
        monetary=estimate_monetary(features),
        engagement_delta=estimate_engagement_delta(features),
        persona_risk=profile.base_churn_risk,
    )


def calculate_churn_risk(features: FeatureSet, persona: "Persona | str") -> ChurnResult:
    """
    Calculate the churn-risk probability for a persona.

    The logistic of the weighted factors is scaled by the persona adjustment
    and clamped to [0, 1].

    Raises:
        UnknownIdentifierError: If the persona is not recognised
    """
    profile = get_persona_profile(persona)
    factors = calculate_churn_factors(features, profile.persona)
    linear = sum(getattr(factors, name) * coefficient for name, coefficient in COEFFICIENTS.items())
    value = clamp(sigmoid(linear) * profile.churn_adjustment, 0, 1)
    tier, description, recommendations = classify_churn(value)
    logger.debug("Churn risk %.3f (%s) for %s", value, tier.value, profile.persona)
    return ChurnResult(
        value=value, tier=tier, description=description, factors=factors, recommendations=recommendations
    )
