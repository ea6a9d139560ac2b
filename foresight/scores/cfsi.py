"""
Cash-Flow Stability Index.

A 0-100 composite of six operational sub-scores. Several inputs are proxies
(AR aging is inferred from freight usage, shipping-method risk from freight
share) and the constants below are tunable heuristics.
"""

import logging
from types import MappingProxyType

import numpy as np

from foresight.models import CFSIComponents, CFSIResult, CFSITier, FeatureSet
from foresight.primitives import calculate_coefficient_of_variation, calculate_concentration_index, clamp, safe_divide

logger = logging.getLogger(__name__)

NEUTRAL_SUBSCORE = 50.0
MIN_VOLATILITY_POINTS = 7

COMPONENT_WEIGHTS = MappingProxyType(
    {
        "revenue_volatility": 0.25,
        "ar_aging": 0.20,
        "refund_rate": 0.15,
        "shipping_method_risk": 0.15,
        "customer_concentration": 0.15,
        "otif": 0.10,
    }
)

# Estimated days sales outstanding = base + span * freight share
AR_AGING_BASE_DAYS = 15
AR_AGING_FREIGHT_SPAN_DAYS = 45
AR_AGING_PENALTY_PER_DAY = 1.5
REFUND_PENALTY = 1000
OTIF_SLA_WEIGHT = 0.6
OTIF_ON_TIME_WEIGHT = 0.4

# (minimum value, tier, description, recommendations), highest first
CFSI_TIERS = (
    (
        90,
        CFSITier.EXCELLENT,
        "Cash flow stability is excellent with strong operational health",
        ("Maintain current operational excellence", "Consider expansion opportunities", "Monitor for any emerging risks"),
    ),
    (
        75,
        CFSITier.GOOD,
        "Cash flow stability is good with minor areas for improvement",
        (
            "Focus on reducing revenue volatility",
            "Optimize payment terms and methods",
            "Strengthen customer diversification",
        ),
    ),
    (
        60,
        CFSITier.FAIR,
        "Cash flow stability is fair with several improvement opportunities",
        (
            "Implement revenue smoothing strategies",
            "Review and optimize operational processes",
            "Strengthen customer relationships",
            "Diversify customer base",
        ),
    ),
    (
        40,
        CFSITier.POOR,
        "Cash flow stability is poor and requires prompt attention",
        (
            "Implement cash flow management strategies",
            "Review and reduce operational risks",
            "Strengthen customer retention programs",
            "Consider financial restructuring",
        ),
    ),
    (
        0,
        CFSITier.CRITICAL,
        "Cash flow stability is critical and needs intervention",
        (
            "Implement cash flow controls",
            "Review all operational processes",
            "Consider bridge funding options",
            "Engage financial advisors",
        ),
    ),
)


def classify_cfsi(value: float) -> tuple[CFSITier, str, list[str]]:
    """Map a CFSI value to its tier, description and recommendations."""
    for minimum, tier, description, recommendations in CFSI_TIERS:
        if value >= minimum:
            return tier, description, list(recommendations)
    _, tier, description, recommendations = CFSI_TIERS[-1]
    return tier, description, list(recommendations)


def score_revenue_volatility(features: FeatureSet) -> float:
    if len(features.raw_revenue) < MIN_VOLATILITY_POINTS:
        return NEUTRAL_SUBSCORE
    cv = calculate_coefficient_of_variation(features.raw_revenue)
    if cv is None:
        return NEUTRAL_SUBSCORE
    return clamp(100 - cv * 100, 0, 100)


def score_ar_aging(features: FeatureSet) -> float:
    freight = float(np.mean(features.freight_usage)) if features.freight_usage else 0.0
    days_outstanding = AR_AGING_BASE_DAYS + freight * AR_AGING_FREIGHT_SPAN_DAYS
    return clamp(100 - days_outstanding * AR_AGING_PENALTY_PER_DAY, 0, 100)


def score_refund_rate(features: FeatureSet) -> float:
    rate = safe_divide(sum(features.refunds), sum(features.raw_revenue))
    if rate is None:
        return NEUTRAL_SUBSCORE
    return clamp(100 - rate * REFUND_PENALTY, 0, 100)


def score_shipping_method_risk(features: FeatureSet) -> float:
    if not features.freight_usage:
        return NEUTRAL_SUBSCORE
    return clamp(100 - float(np.mean(features.freight_usage)) * 100, 0, 100)


def score_customer_concentration(features: FeatureSet) -> float:
    hhi = calculate_concentration_index(features.persona_mix)
    if hhi is None:
        return NEUTRAL_SUBSCORE
    return clamp(100 - hhi * 100, 0, 100)


def score_otif(features: FeatureSet) -> float:
    if not features.sla_met:
        return NEUTRAL_SUBSCORE
    otif = OTIF_SLA_WEIGHT * float(np.mean(features.sla_met)) + OTIF_ON_TIME_WEIGHT * float(np.mean(features.on_time))
    return clamp(otif * 100, 0, 100)


def calculate_cfsi_components(features: FeatureSet) -> CFSIComponents:
    return CFSIComponents(
        revenue_volatility=score_revenue_volatility(features),
        ar_aging=score_ar_aging(features),
        refund_rate=score_refund_rate(features),
        shipping_method_risk=score_shipping_method_risk(features),
        customer_concentration=score_customer_concentration(features),
        otif=score_otif(features),
    )


def calculate_cfsi(features: FeatureSet) -> CFSIResult:
    """
    Calculate the Cash-Flow Stability Index for a feature set.

    The value is the weighted sum of the six sub-scores, clamped to [0, 100].
    Deterministic for a given FeatureSet.
    """
    components = calculate_cfsi_components(features)
    weighted = sum(getattr(components, name) * weight for name, weight in COMPONENT_WEIGHTS.items())
    value = clamp(weighted, 0, 100)
    tier, description, recommendations = classify_cfsi(value)
    logger.debug("CFSI %.1f (%s)", value, tier.value)
    return CFSIResult(
        value=value, tier=tier, description=description, components=components, recommendations=recommendations
    )
