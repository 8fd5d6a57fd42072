"""
Simulation configuration.

A Configuration is an immutable snapshot of every parameter the cost engine
consumes. Edits produce a new snapshot; nothing is mutated in place.
"""

import logging
import math
from dataclasses import dataclass, fields, replace

logger = logging.getLogger(__name__)

MIN_ACTIVE_DAYS = 1
MAX_ACTIVE_DAYS = 31

# Field name -> (lower bound, upper bound or None, integer field)
_DOMAINS = {
    "active_users": (0, None, True),
    "traces_per_user_per_day": (0, None, True),
    "active_days_per_month": (MIN_ACTIVE_DAYS, MAX_ACTIVE_DAYS, True),
    "input_token_fraction": (0.0, 1.0, False),
    "tokens_per_trace": (0.0, None, False),
    "wall_time_seconds_per_trace": (0.0, None, False),
    "vcpu_count": (0.0, None, False),
    "memory_gb": (0.0, None, False),
    "embedding_tokens_total": (0.0, None, False),
    "searches_per_user_per_day": (0.0, None, False),
    "background_calls_per_trace": (0, None, True),
    "background_token_ratio": (0.0, 1.0, False),
    "evaluation_sample_rate": (0.0, 1.0, False),
    "evaluation_tokens_per_run": (0.0, None, False),
    "registry_storage_gb": (0.0, None, False),
    "db_storage_gb": (0.0, None, False),
    "egress_gb": (0.0, None, False),
}


@dataclass(frozen=True)
class Configuration:
    """All simulation parameters at evaluation time.

    Defaults describe a small pilot: 100 users running 50 traces a day for
    10 days a month on the lite model.
    """
    # Business scale
    active_users: int = 100
    traces_per_user_per_day: int = 50
    active_days_per_month: int = 10

    # Model and compute shape
    model_id: str = "gemini-2.5-flash-lite"
    input_token_fraction: float = 0.70
    tokens_per_trace: float = 2500
    wall_time_seconds_per_trace: float = 5.0
    vcpu_count: float = 1.0
    memory_gb: float = 1.0
    embedding_tokens_total: float = 0  # monthly total, not per trace
    searches_per_user_per_day: float = 0

    # Background agent (e.g. memory extraction)
    background_calls_per_trace: int = 0
    background_token_ratio: float = 0.0

    # Evaluation runs
    evaluation_enabled: bool = False
    evaluation_sample_rate: float = 0.0
    evaluation_model_id: str = "gemini-2.5-flash"
    evaluation_tokens_per_run: float = 0

    # Storage and network
    registry_storage_gb: float = 0.5
    db_storage_gb: float = 0.5
    egress_gb: float = 5.0

    @property
    def output_token_fraction(self) -> float:
        return 1 - self.input_token_fraction

    def with_changes(self, **changes) -> "Configuration":
        """Return a new snapshot with the given fields replaced."""
        return replace(self, **changes)

    def clamped(self) -> "Configuration":
        """Return a copy with every numeric field forced into its domain.

        Out-of-range values are not an error: negatives floor to zero,
        fractions clamp to [0, 1] and active days clamp to [1, 31].
        NaN becomes the lower bound. Infinities clamp to the matching bound,
        and +inf on a field with no upper bound falls back to the lower one.
        """
        changes = {}
        for name, (lower, upper, integral) in _DOMAINS.items():
            value = getattr(self, name)
            bounded = _clamp(value, lower, upper, integral)
            if bounded != value or (integral and type(value) is not int):
                logger.debug("Clamped %s from %r to %r", name, value, bounded)
                changes[name] = bounded
        if not changes:
            return self
        return replace(self, **changes)

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _clamp(value, lower, upper, integral):
    # NaN, and infinities with no finite bound to stop at, fall back to the lower bound
    if math.isnan(value):
        return lower
    if math.isinf(value):
        if value > 0 and upper is not None:
            return upper
        return lower
    if integral:
        value = int(value)
    if value < lower:
        value = lower
    if upper is not None and value > upper:
        value = upper
    return value
