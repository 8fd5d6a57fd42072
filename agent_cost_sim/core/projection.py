"""
Growth projection.

Re-evaluates the cost engine across user-count multipliers. Per-user and
per-trace intensities stay fixed; volume quantities are rescaled according
to configurable scaling rules, then every derived configuration goes
through the same compute() call as a single estimate.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from .configuration import Configuration
from .engine import compute
from .pricing import DEFAULT_CATALOG, PricingCatalog

logger = logging.getLogger(__name__)

DEFAULT_SCALE_FACTORS = tuple(range(1, 11))


class ScalingRule(Enum):
    """How a volume quantity grows when the user base grows."""
    FIXED = "fixed"          # Independent of users and traffic
    PER_USER = "per_user"    # Proportional to active users
    PER_TRACE = "per_trace"  # Proportional to monthly trace volume


@dataclass(frozen=True)
class ScalingRules:
    """Scaling rule for each volume quantity in a Configuration."""
    embedding_tokens: ScalingRule = ScalingRule.PER_USER
    db_storage: ScalingRule = ScalingRule.PER_USER
    registry_storage: ScalingRule = ScalingRule.FIXED
    egress: ScalingRule = ScalingRule.PER_TRACE


DEFAULT_SCALING_RULES = ScalingRules()


@dataclass(frozen=True)
class ProjectionPoint:
    """Projected monthly total at one scale factor."""
    scale_factor: int
    scaled_users: int
    projected_total_cost: float


def _traces_per_month(config: Configuration) -> int:
    return config.active_users * config.traces_per_user_per_day * config.active_days_per_month


def _rescale(value: float, rule: ScalingRule, user_ratio: float, trace_ratio: float) -> float:
    if rule is ScalingRule.PER_USER:
        return value * user_ratio
    if rule is ScalingRule.PER_TRACE:
        return value * trace_ratio
    return value


def scale_configuration(
    config: Configuration,
    factor: int,
    rules: ScalingRules = DEFAULT_SCALING_RULES
) -> Configuration:
    """Derive the configuration for a user base `factor` times larger.

    Per-user rates are taken from the base user count and per-trace rates
    from the base trace volume. When the base count is zero there is no
    rate to derive, so the quantity stays at its base value.

    Args:
        config: Base configuration
        factor: Positive integer multiplier on active users
        rules: Scaling rule for each volume quantity

    Returns:
        Derived Configuration

    Raises:
        ValueError: If factor is not a positive integer
    """
    if isinstance(factor, bool) or not isinstance(factor, int) or factor < 1:
        raise ValueError(f"Scale factor must be a positive integer, got {factor!r}")

    config = config.clamped()
    scaled_users = config.active_users * factor
    base_traces = _traces_per_month(config)
    scaled_traces = scaled_users * config.traces_per_user_per_day * config.active_days_per_month

    user_ratio = scaled_users / config.active_users if config.active_users > 0 else 1.0
    trace_ratio = scaled_traces / base_traces if base_traces > 0 else 1.0

    return config.with_changes(
        active_users=scaled_users,
        embedding_tokens_total=_rescale(
            config.embedding_tokens_total, rules.embedding_tokens, user_ratio, trace_ratio
        ),
        db_storage_gb=_rescale(config.db_storage_gb, rules.db_storage, user_ratio, trace_ratio),
        registry_storage_gb=_rescale(
            config.registry_storage_gb, rules.registry_storage, user_ratio, trace_ratio
        ),
        egress_gb=_rescale(config.egress_gb, rules.egress, user_ratio, trace_ratio),
    )


def project(
    config: Configuration,
    catalog: PricingCatalog = DEFAULT_CATALOG,
    scale_factors: Iterable[int] = DEFAULT_SCALE_FACTORS,
    rules: ScalingRules = DEFAULT_SCALING_RULES
) -> List[ProjectionPoint]:
    """Project monthly cost across user-growth scale factors.

    Args:
        config: Base configuration
        catalog: Model and unit prices
        scale_factors: Positive integer multipliers on active users
        rules: Scaling rule for each volume quantity

    Returns:
        ProjectionPoints in ascending order of scaled users

    Raises:
        UnknownModel: If a model id in config is not in the catalog
        ValueError: If a scale factor is not a positive integer
    """
    points = []
    for factor in sorted(scale_factors):
        scaled = scale_configuration(config, factor, rules)
        breakdown = compute(scaled, catalog)
        points.append(ProjectionPoint(
            scale_factor=factor,
            scaled_users=scaled.active_users,
            projected_total_cost=breakdown.total_monthly_cost,
        ))

    logger.debug("Projected %d scale factors for %s", len(points), config.model_id)
    return points
