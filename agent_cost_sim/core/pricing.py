"""
Pricing catalog and unit rates.

Holds per-model token prices and the flat unit prices for embeddings,
compute, search grounding, storage and network egress.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional


class UnknownModel(ValueError):
    """Raised when a model identifier is not present in the catalog."""
    def __init__(self, model_id: str):
        super().__init__(f"Unsupported model: {model_id}")
        self.model_id = model_id


@dataclass(frozen=True)
class PricingEntry:
    """Per-token pricing for a specific model."""
    model_id: str
    input_price_per_million: float  # USD per 1M input tokens
    output_price_per_million: float  # USD per 1M output tokens
    display_label: str
    search_grounding_free_tier: bool = False

    @property
    def mean_price_per_million(self) -> float:
        """Blended rate used for calls that are not split by input/output."""
        return (self.input_price_per_million + self.output_price_per_million) / 2


@dataclass(frozen=True)
class UnitPrices:
    """Flat prices for everything that is not a chat model."""
    embedding_per_million_tokens: float = 0.15
    vcpu_second: float = 0.000024
    memory_gb_second: float = 0.0000025
    search_per_thousand: float = 35.00
    search_free_daily_allowance: int = 1500
    registry_storage_gb: float = 0.10
    db_storage_gb: float = 0.20
    network_egress_gb: float = 0.12


@dataclass(frozen=True)
class PricingCatalog:
    """Fixed pricing catalog for supported models."""
    models: Mapping[str, PricingEntry]
    unit_prices: UnitPrices = field(default_factory=UnitPrices)

    def __post_init__(self):
        for model_id, entry in self.models.items():
            if model_id != entry.model_id:
                raise ValueError(
                    f"Catalog key {model_id!r} does not match entry id {entry.model_id!r}"
                )
        # Catalog is read-only after construction
        object.__setattr__(self, "models", MappingProxyType(dict(self.models)))

    def lookup(self, model_id: str) -> PricingEntry:
        """Get pricing for a specific model.

        Args:
            model_id: Model identifier

        Returns:
            PricingEntry for the model

        Raises:
            UnknownModel: If model is not in the catalog
        """
        if model_id not in self.models:
            raise UnknownModel(model_id)
        return self.models[model_id]

    def model_ids(self) -> List[str]:
        """Model identifiers in catalog order."""
        return list(self.models)


def build_catalog(entries: List[PricingEntry], unit_prices: Optional[UnitPrices] = None) -> PricingCatalog:
    """Build a catalog from a list of entries, rejecting duplicate ids."""
    models = {}
    for entry in entries:
        if entry.model_id in models:
            raise ValueError(f"Duplicate model id: {entry.model_id}")
        models[entry.model_id] = entry
    return PricingCatalog(models=models, unit_prices=unit_prices or UnitPrices())


# Fixed pricing catalog - no dynamic fetching
DEFAULT_CATALOG = build_catalog([
    PricingEntry(
        model_id="gemini-2.5-pro",
        input_price_per_million=1.25,
        output_price_per_million=10.0,
        display_label="Gemini 2.5 Pro",
    ),
    PricingEntry(
        model_id="gemini-2.5-flash",
        input_price_per_million=0.30,
        output_price_per_million=2.50,
        display_label="Gemini 2.5 Flash",
        search_grounding_free_tier=True,
    ),
    PricingEntry(
        model_id="gemini-2.5-flash-lite",
        input_price_per_million=0.10,
        output_price_per_million=0.40,
        display_label="Gemini 2.5 Flash Lite",
        search_grounding_free_tier=True,
    ),
])
