"""
Unit tests for the pricing catalog.

Tests lookups, error handling and catalog construction.
"""

import pytest

from agent_cost_sim.core.pricing import (
    DEFAULT_CATALOG,
    PricingCatalog,
    PricingEntry,
    UnitPrices,
    UnknownModel,
    build_catalog,
)


class TestPricingEntry:
    """Test PricingEntry dataclass."""

    def test_mean_price(self):
        """Verify the blended rate is the mean of input and output prices."""
        entry = PricingEntry("m", 0.10, 0.40, "M")
        assert entry.mean_price_per_million == pytest.approx(0.25)

    def test_free_tier_defaults_to_false(self):
        """Verify free-tier grounding must be opted into."""
        entry = PricingEntry("m", 1.0, 2.0, "M")
        assert entry.search_grounding_free_tier is False


class TestPricingCatalog:
    """Test pricing catalog functionality."""

    def test_lookup_supported_model(self):
        """Verify pricing retrieval for supported models."""
        pro = DEFAULT_CATALOG.lookup("gemini-2.5-pro")
        assert pro.input_price_per_million == 1.25
        assert pro.output_price_per_million == 10.0
        assert pro.display_label == "Gemini 2.5 Pro"

    def test_unknown_model_raises_error(self):
        """Verify error for unknown models."""
        with pytest.raises(UnknownModel, match="Unsupported model: unknown-model") as exc_info:
            DEFAULT_CATALOG.lookup("unknown-model")
        assert exc_info.value.model_id == "unknown-model"

    def test_unknown_model_is_value_error(self):
        """Verify UnknownModel can be caught as ValueError."""
        with pytest.raises(ValueError):
            DEFAULT_CATALOG.lookup("unknown-model")

    def test_has_free_tier_model(self):
        """Verify at least one cheap tier gets free grounding."""
        eligible = [
            model_id for model_id in DEFAULT_CATALOG.model_ids()
            if DEFAULT_CATALOG.lookup(model_id).search_grounding_free_tier
        ]
        assert "gemini-2.5-flash-lite" in eligible
        assert "gemini-2.5-pro" not in eligible

    def test_model_ids_keep_catalog_order(self):
        """Verify model ids are listed in definition order."""
        assert DEFAULT_CATALOG.model_ids() == [
            "gemini-2.5-pro",
            "gemini-2.5-flash",
            "gemini-2.5-flash-lite",
        ]

    def test_default_unit_prices(self):
        """Verify the built-in flat prices."""
        rates = DEFAULT_CATALOG.unit_prices
        assert rates.embedding_per_million_tokens == 0.15
        assert rates.search_per_thousand == 35.00
        assert rates.search_free_daily_allowance == 1500
        assert rates.network_egress_gb == 0.12

    def test_catalog_is_read_only(self):
        """Verify the models mapping cannot be modified."""
        with pytest.raises(TypeError):
            DEFAULT_CATALOG.models["new"] = PricingEntry("new", 1.0, 1.0, "New")

    def test_mismatched_key_rejected(self):
        """Verify keys must match entry ids."""
        with pytest.raises(ValueError, match="does not match"):
            PricingCatalog(models={"a": PricingEntry("b", 1.0, 1.0, "B")})


class TestBuildCatalog:
    """Test catalog construction from entry lists."""

    def test_duplicate_ids_rejected(self):
        """Verify duplicate model ids are rejected."""
        entry = PricingEntry("m", 1.0, 1.0, "M")
        with pytest.raises(ValueError, match="Duplicate model id: m"):
            build_catalog([entry, entry])

    def test_custom_unit_prices(self):
        """Verify unit prices are carried into the catalog."""
        rates = UnitPrices(search_free_daily_allowance=0)
        catalog = build_catalog([PricingEntry("m", 1.0, 1.0, "M")], rates)
        assert catalog.unit_prices.search_free_daily_allowance == 0

    def test_default_unit_prices_when_omitted(self):
        """Verify unit prices default when not given."""
        catalog = build_catalog([PricingEntry("m", 1.0, 1.0, "M")])
        assert catalog.unit_prices == UnitPrices()
