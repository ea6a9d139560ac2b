"""
Unit tests for the Cash-Flow Stability Index.
"""

import pytest

from foresight.models import CFSITier
from foresight.scores import NEUTRAL_SUBSCORE, calculate_cfsi, calculate_cfsi_components, classify_cfsi


class TestCFSIComponents:
    def test_default_features(self, make_feature_set):
        """Test each sub-score on steady revenue with default operations."""
        # Arrange
        features = make_feature_set()

        # Act
        components = calculate_cfsi_components(features)

        # Assert
        assert components.revenue_volatility == pytest.approx(100.0)
        assert components.ar_aging == pytest.approx(100 - (15 + 0.3 * 45) * 1.5)
        assert components.refund_rate == pytest.approx(100.0)
        assert components.shipping_method_risk == pytest.approx(70.0)
        assert components.customer_concentration == pytest.approx(75.0)
        assert components.otif == pytest.approx(96.2)

    def test_zero_revenue_uses_neutral_scores(self, make_feature_set):
        features = make_feature_set(raw_revenue=[0.0] * 91)

        components = calculate_cfsi_components(features)

        assert components.revenue_volatility == NEUTRAL_SUBSCORE
        assert components.refund_rate == NEUTRAL_SUBSCORE

    def test_short_history_volatility_neutral(self, make_feature_set):
        features = make_feature_set(n=5)

        assert calculate_cfsi_components(features).revenue_volatility == NEUTRAL_SUBSCORE

    def test_empty_persona_mix(self, make_feature_set):
        features = make_feature_set(persona_mix={})

        assert calculate_cfsi_components(features).customer_concentration == NEUTRAL_SUBSCORE

    def test_heavy_refunds_clamped(self, make_feature_set):
        features = make_feature_set(refunds=[500.0] * 91)

        assert calculate_cfsi_components(features).refund_rate == 0.0


class TestCalculateCFSI:
    def test_weighted_total(self, make_feature_set):
        # Arrange
        features = make_feature_set()
        expected = 100 * 0.25 + 57.25 * 0.20 + 100 * 0.15 + 70 * 0.15 + 75 * 0.15 + 96.2 * 0.10

        # Act
        result = calculate_cfsi(features)

        # Assert
        assert result.value == pytest.approx(expected)
        assert result.tier == CFSITier.GOOD
        assert result.recommendations

    def test_deterministic(self, make_feature_set):
        features = make_feature_set(raw_revenue=[float(100 + (i % 5) * 40) for i in range(91)])

        assert calculate_cfsi(features) == calculate_cfsi(features)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"raw_revenue": [0.0] * 91},
            {"raw_revenue": [float(i % 2) * 1e9 for i in range(91)], "refunds": [1e9] * 91},
            {"freight_usage": [5.0] * 91, "sla_met": [0.0] * 91, "on_time": [0.0] * 91},
            {"freight_usage": [-3.0] * 91, "sla_met": [3.0] * 91, "on_time": [3.0] * 91},
            {"raw_revenue": [-100.0] * 91, "refunds": [-50.0] * 91, "persona_mix": {"smb": 1.0}},
        ],
    )
    def test_bounded(self, make_feature_set, overrides):
        """Test the index stays in [0, 100] for extreme inputs."""
        result = calculate_cfsi(make_feature_set(**overrides))

        assert 0 <= result.value <= 100
        for value in result.components.model_dump().values():
            assert 0 <= value <= 100


class TestClassifyCFSI:
    @pytest.mark.parametrize(
        "value,tier",
        [
            (95, CFSITier.EXCELLENT),
            (90, CFSITier.EXCELLENT),
            (89.9, CFSITier.GOOD),
            (75, CFSITier.GOOD),
            (60, CFSITier.FAIR),
            (40, CFSITier.POOR),
            (39.9, CFSITier.CRITICAL),
            (0, CFSITier.CRITICAL),
        ],
    )
    def test_tiers(self, value, tier):
        assert classify_cfsi(value)[0] == tier
