"""
Governance audits.

Each audit is a pure function of a ForecastOutput returning an AuditResult.
Language audits read the explanation strings; the PII audit also scans
alert messages and signal labels, and the contact-frequency audit counts
alert candidates per channel.
"""

import datetime as dt
import re
from collections import Counter
from collections.abc import Iterable, Sequence

from foresight.config import PipelineConfig
from foresight.models import AuditResult, ForecastOutput

PII_PATTERNS = (
    ("SSN", re.compile(r"\b\d{3}-\d{2}-\d{4}\b")),
    ("phone number", re.compile(r"\b\d{3}-\d{3}-\d{4}\b")),
    ("email address", re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")),
)

URGENCY_WORDS = ("urgent", "immediate", "critical", "emergency", "now", "today")
FEAR_WORDS = ("risk", "danger", "threat", "loss", "miss", "fail")
SCARCITY_WORDS = ("limited", "exclusive", "rare", "once-in-a-lifetime")
OPT_OUT_WORDS = ("opt-out", "unsubscribe", "preferences")
FREQUENCY_WORDS = ("daily", "weekly", "monthly", "frequent", "regular")
HEALTH_WORDS = ("patient", "medical", "clinical", "diagnosis", "treatment")
POLITICAL_WORDS = ("election", "campaign", "political", "government", "policy")
CHILDREN_WORDS = ("child", "children", "kids", "youth", "minor")
UNPROFESSIONAL_WORDS = ("awesome", "amazing", "incredible", "fantastic", "super")
BENEFIT_WORDS = ("benefit", "value", "help", "improve", "enhance", "optimize")
LONG_TERM_WORDS = ("sustainable", "long-term", "future", "growth", "partnership")
RELATIONSHIP_WORDS = ("relationship", "partnership", "collaboration", "trust", "loyalty")
ETHICAL_WORDS = ("ethical", "responsible", "transparent", "fair", "honest")

MAX_URGENCY_HITS = 3
MAX_FEAR_HITS = 2
MAX_SCARCITY_HITS = 1
MAX_FREQUENCY_HITS = 2
MAX_UNPROFESSIONAL_HITS = 2
MAX_ALERTS_PER_CHANNEL = 2
MIN_EXPLANATION_LENGTH = 20
MAX_EXPLANATION_LENGTH = 200
SHORT_NOTICE_DAYS = 7
STALE_AFTER = dt.timedelta(hours=24)


def _word_pattern(word: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)


def count_word_hits(texts: Iterable[str], words: Sequence[str]) -> int:
    """Number of distinct listed words present in each text, summed over the texts."""
    patterns = [_word_pattern(word) for word in words]
    return sum(sum(1 for pattern in patterns if pattern.search(text)) for text in texts)


def _as_utc(value: dt.datetime) -> dt.datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=dt.timezone.utc)


def _forecast_values(output: ForecastOutput) -> list[float]:
    series = [output.revenue_forecast, *output.horizon_forecasts.values()]
    return [value for points in series for point in points for value in (point.point, point.ci_low, point.ci_high)]


def check_pii_leakage(output: ForecastOutput, config: PipelineConfig, now: dt.datetime) -> AuditResult:
    texts = [
        *output.explanations,
        *(alert.message for alert in output.alerts),
        *output.anticipated_need.top_signals,
    ]
    notes, advisory = [], []
    found = sorted({label for label, pattern in PII_PATTERNS for text in texts if pattern.search(text)})
    if found:
        notes.append("PII detected in forecast explanations")
        notes.append(f"Detected: {', '.join(found)}")
    if any(value < 0 for value in _forecast_values(output)):
        notes.append("Invalid forecast values detected")
    if _as_utc(now) - _as_utc(output.generated_at) > STALE_AFTER:
        advisory.append("Forecast data is older than 24 hours")
    passed = not notes
    if passed:
        notes.append("Data provenance check passed")
    return AuditResult(name="pii_leakage", passed=passed, notes=notes, advisory_notes=advisory)


def check_transparency(output: ForecastOutput, config: PipelineConfig, now: dt.datetime) -> AuditResult:
    notes, advisory = [], []
    if not output.explanations:
        notes.append("No explanations provided for forecast")
    else:
        average_length = sum(len(text) for text in output.explanations) / len(output.explanations)
        if average_length < MIN_EXPLANATION_LENGTH:
            notes.append("Explanations are too brief for transparency")
        elif average_length > MAX_EXPLANATION_LENGTH:
            notes.append("Explanations may be too verbose for user comprehension")
    if not output.revenue_forecast:
        notes.append("Revenue forecast is missing")
    if output.anticipated_need.confidence < config.min_confidence:
        advisory.append("Low confidence in anticipated need prediction")
    passed = not notes
    if passed:
        notes.append("Transparency check passed")
    return AuditResult(name="transparency", passed=passed, notes=notes, advisory_notes=advisory)


def check_manipulation(output: ForecastOutput, config: PipelineConfig, now: dt.datetime) -> AuditResult:
    texts = output.explanations
    notes, advisory = [], []
    if count_word_hits(texts, URGENCY_WORDS) > MAX_URGENCY_HITS:
        notes.append("Excessive urgency language detected")
    if count_word_hits(texts, FEAR_WORDS) > MAX_FEAR_HITS:
        notes.append("Fear-based messaging detected")
    if count_word_hits(texts, SCARCITY_WORDS) > MAX_SCARCITY_HITS:
        notes.append("False scarcity language detected")
    if texts and count_word_hits(texts, OPT_OUT_WORDS) == 0:
        advisory.append("No opt-out information provided")
    passed = not notes
    if passed:
        notes.append("Manipulation check passed")
    return AuditResult(name="manipulation", passed=passed, notes=notes, advisory_notes=advisory)


def check_contact_frequency(output: ForecastOutput, config: PipelineConfig, now: dt.datetime) -> AuditResult:
    """Advisory only: a busy channel or frequent-contact wording never fails the gate."""
    advisory = []
    if count_word_hits(output.explanations, FREQUENCY_WORDS) > MAX_FREQUENCY_HITS:
        advisory.append("High frequency contact recommendations detected")
    per_channel = Counter(alert.action for alert in output.alerts)
    crowded = sorted(channel for channel, count in per_channel.items() if count > MAX_ALERTS_PER_CHANNEL)
    if crowded:
        advisory.append(f"Many alerts for channel(s): {', '.join(crowded)}")
    if output.anticipated_need.days_until_window(output.analysis_date) < SHORT_NOTICE_DAYS:
        advisory.append("Very short notice for anticipated need window")
    return AuditResult(
        name="contact_frequency", passed=True, notes=["Contact frequency check passed"], advisory_notes=advisory
    )


def check_sensitive_topics(output: ForecastOutput, config: PipelineConfig, now: dt.datetime) -> AuditResult:
    texts = output.explanations
    notes = []
    if count_word_hits(texts, HEALTH_WORDS):
        notes.append("Health-related content detected; ensure HIPAA compliance")
    if count_word_hits(texts, POLITICAL_WORDS):
        notes.append("Political content detected; review for appropriateness")
    if count_word_hits(texts, CHILDREN_WORDS):
        notes.append("Children-related content detected; ensure COPPA compliance")
    passed = not notes
    if passed:
        notes.append("Sensitive segments check passed")
    return AuditResult(name="sensitive_topics", passed=passed, notes=notes)


def check_tone(output: ForecastOutput, config: PipelineConfig, now: dt.datetime) -> AuditResult:
    texts = output.explanations
    notes, advisory = [], []
    if count_word_hits(texts, UNPROFESSIONAL_WORDS) > MAX_UNPROFESSIONAL_HITS:
        notes.append("Unprofessional language detected")
    if any(point.point < 0 for point in output.revenue_forecast):
        advisory.append("Negative revenue forecasts detected; review for accuracy")
    if texts and count_word_hits(texts, BENEFIT_WORDS) == 0:
        advisory.append("No customer benefit language detected")
    passed = not notes
    if passed:
        notes.append("Tone check passed")
    return AuditResult(name="tone", passed=passed, notes=notes, advisory_notes=advisory)


def check_long_term(output: ForecastOutput, config: PipelineConfig, now: dt.datetime) -> AuditResult:
    texts = output.explanations
    advisory = []
    hits = {
        "long-term thinking": count_word_hits(texts, LONG_TERM_WORDS),
        "relationship-building": count_word_hits(texts, RELATIONSHIP_WORDS),
        "ethical considerations": count_word_hits(texts, ETHICAL_WORDS),
    }
    for label, count in hits.items():
        if count == 0:
            advisory.append(f"No {label} language detected")
    passed = any(hits.values())
    notes = ["Long-term check passed"] if passed else ["No long-term, relationship or ethical language detected"]
    return AuditResult(name="long_term", passed=passed, notes=notes, advisory_notes=advisory)


AUDITS = (
    check_pii_leakage,
    check_transparency,
    check_manipulation,
    check_contact_frequency,
    check_sensitive_topics,
    check_tone,
    check_long_term,
)
