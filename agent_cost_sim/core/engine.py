"""
Monthly cost calculation.

Maps a Configuration and a PricingCatalog to an itemized CostBreakdown.
The calculation is pure: no I/O, no shared state, same input gives the
same output.
"""

import logging
from dataclasses import dataclass
from typing import Dict

from .configuration import Configuration
from .pricing import DEFAULT_CATALOG, PricingCatalog

logger = logging.getLogger(__name__)

TOKENS_PER_MILLION = 1e6
SEARCHES_PER_PRICE_UNIT = 1000


@dataclass(frozen=True)
class CostBreakdown:
    """Itemized monthly cost with unit economics.

    The nine component fields add up to total_monthly_cost.
    """
    traces_per_month: int
    main_model_cost: float
    background_model_cost: float
    embedding_cost: float
    search_cost: float
    compute_cost: float
    evaluation_cost: float
    registry_storage_cost: float
    db_storage_cost: float
    egress_cost: float
    total_monthly_cost: float
    cost_per_user: float
    cost_per_thousand_traces: float

    @property
    def model_cost(self) -> float:
        """Main conversation plus background calls."""
        return self.main_model_cost + self.background_model_cost

    @property
    def infra_total(self) -> float:
        return self.registry_storage_cost + self.db_storage_cost + self.egress_cost

    def components(self) -> Dict[str, float]:
        """The nine itemized costs, in display order."""
        return {
            "main_model": self.main_model_cost,
            "background_model": self.background_model_cost,
            "embeddings": self.embedding_cost,
            "search_grounding": self.search_cost,
            "compute": self.compute_cost,
            "evaluation": self.evaluation_cost,
            "registry_storage": self.registry_storage_cost,
            "db_storage": self.db_storage_cost,
            "network_egress": self.egress_cost,
        }

    def share_of_total(self, amount: float) -> float:
        """Percentage of the monthly total that amount represents."""
        if self.total_monthly_cost <= 0:
            return 0.0
        return amount / self.total_monthly_cost * 100


def compute(config: Configuration, catalog: PricingCatalog = DEFAULT_CATALOG) -> CostBreakdown:
    """Calculate the monthly cost breakdown for a configuration.

    Inputs are clamped to their documented domains before use, so an
    out-of-range value never raises.

    Args:
        config: Simulation parameters
        catalog: Model and unit prices

    Returns:
        CostBreakdown with itemized costs and unit economics

    Raises:
        UnknownModel: If model_id or evaluation_model_id is not in the catalog
    """
    config = config.clamped()
    model = catalog.lookup(config.model_id)
    evaluation_model = catalog.lookup(config.evaluation_model_id)
    rates = catalog.unit_prices

    traces_per_month = (
        config.active_users * config.traces_per_user_per_day * config.active_days_per_month
    )

    # Main conversation tokens
    total_input_tokens = config.tokens_per_trace * config.input_token_fraction * traces_per_month
    total_output_tokens = config.tokens_per_trace * config.output_token_fraction * traces_per_month
    main_model_cost = (
        (total_input_tokens / TOKENS_PER_MILLION) * model.input_price_per_million
        + (total_output_tokens / TOKENS_PER_MILLION) * model.output_price_per_million
    )

    # Background calls are priced at the blended rate, not split by direction
    background_model_cost = 0.0
    if config.background_calls_per_trace > 0:
        background_tokens = (
            config.tokens_per_trace * config.background_token_ratio
            * config.background_calls_per_trace * traces_per_month
        )
        background_model_cost = (
            background_tokens / TOKENS_PER_MILLION * model.mean_price_per_million
        )

    embedding_cost = (
        config.embedding_tokens_total / TOKENS_PER_MILLION * rates.embedding_per_million_tokens
    )

    search_cost = _monthly_search_cost(config, catalog, model.search_grounding_free_tier)

    compute_seconds = config.wall_time_seconds_per_trace * traces_per_month
    compute_cost = (
        compute_seconds * config.vcpu_count * rates.vcpu_second
        + compute_seconds * config.memory_gb * rates.memory_gb_second
    )

    evaluation_cost = 0.0
    if config.evaluation_enabled:
        evaluated_traces = traces_per_month * config.evaluation_sample_rate
        evaluation_cost = (
            evaluated_traces * config.evaluation_tokens_per_run / TOKENS_PER_MILLION
            * evaluation_model.mean_price_per_million
        )

    registry_storage_cost = config.registry_storage_gb * rates.registry_storage_gb
    db_storage_cost = config.db_storage_gb * rates.db_storage_gb
    egress_cost = config.egress_gb * rates.network_egress_gb

    total_monthly_cost = (
        main_model_cost
        + background_model_cost
        + embedding_cost
        + search_cost
        + compute_cost
        + evaluation_cost
        + registry_storage_cost
        + db_storage_cost
        + egress_cost
    )

    logger.debug(
        "Computed %s traces/month on %s: total=%.4f",
        traces_per_month, config.model_id, total_monthly_cost,
    )

    return CostBreakdown(
        traces_per_month=traces_per_month,
        main_model_cost=main_model_cost,
        background_model_cost=background_model_cost,
        embedding_cost=embedding_cost,
        search_cost=search_cost,
        compute_cost=compute_cost,
        evaluation_cost=evaluation_cost,
        registry_storage_cost=registry_storage_cost,
        db_storage_cost=db_storage_cost,
        egress_cost=egress_cost,
        total_monthly_cost=total_monthly_cost,
        cost_per_user=total_monthly_cost / max(config.active_users, 1),
        cost_per_thousand_traces=total_monthly_cost / max(traces_per_month, 1) * 1000,
    )


def _monthly_search_cost(
    config: Configuration,
    catalog: PricingCatalog,
    free_tier_eligible: bool
) -> float:
    """Search grounding cost after the daily free allowance.

    The allowance applies once per day across all users, not per user.
    """
    rates = catalog.unit_prices
    daily_allowance = rates.search_free_daily_allowance if free_tier_eligible else 0
    daily_searches = config.active_users * config.searches_per_user_per_day
    billable_daily_searches = max(0, daily_searches - daily_allowance)
    daily_cost = billable_daily_searches / SEARCHES_PER_PRICE_UNIT * rates.search_per_thousand
    return daily_cost * config.active_days_per_month
