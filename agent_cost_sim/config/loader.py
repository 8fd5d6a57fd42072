"""
Scenario and pricing file loading.

Reads YAML scenario files into Configuration snapshots and YAML pricing
files into PricingCatalogs, with strict validation.
"""

import logging
import math
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from agent_cost_sim.core.configuration import Configuration
from agent_cost_sim.core.pricing import PricingCatalog, PricingEntry, UnitPrices, build_catalog
from agent_cost_sim.core.projection import (
    DEFAULT_SCALE_FACTORS,
    DEFAULT_SCALING_RULES,
    ScalingRule,
    ScalingRules,
)

logger = logging.getLogger(__name__)

# Scenario section -> Configuration fields it may set
SCENARIO_SECTIONS: Dict[str, Tuple[str, ...]] = {
    "business": (
        "active_users",
        "traces_per_user_per_day",
        "active_days_per_month",
    ),
    "model": (
        "model_id",
        "input_token_fraction",
        "tokens_per_trace",
        "wall_time_seconds_per_trace",
        "vcpu_count",
        "memory_gb",
        "embedding_tokens_total",
        "searches_per_user_per_day",
    ),
    "background": (
        "background_calls_per_trace",
        "background_token_ratio",
    ),
    "evaluation": (
        "evaluation_enabled",
        "evaluation_sample_rate",
        "evaluation_model_id",
        "evaluation_tokens_per_run",
    ),
    "infrastructure": (
        "registry_storage_gb",
        "db_storage_gb",
        "egress_gb",
    ),
}

_STRING_FIELDS = {"model_id", "evaluation_model_id"}
_BOOL_FIELDS = {"evaluation_enabled"}
_INT_FIELDS = {
    "active_users",
    "traces_per_user_per_day",
    "active_days_per_month",
    "background_calls_per_trace",
}


@dataclass(frozen=True)
class Scenario:
    """A configuration plus the projection settings to run it with."""
    configuration: Configuration = field(default_factory=Configuration)
    scale_factors: Tuple[int, ...] = DEFAULT_SCALE_FACTORS
    scaling_rules: ScalingRules = DEFAULT_SCALING_RULES


def _read_yaml(path: str, kind: str) -> Dict[str, Any]:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"{kind} file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in {kind.lower()} file {path}: {e}")

    if not raw:
        raise ValueError(f"{kind} file is empty")
    if not isinstance(raw, dict):
        raise ValueError(f"{kind} file must contain a mapping")
    logger.debug("Loaded %s file %s", kind.lower(), path)
    return raw


def _reject_unknown(data: Dict, allowed, path: str) -> None:
    unknown_keys = set(data.keys()) - set(allowed)
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys}")


def _require_mapping(value: Any, path: str) -> Dict:
    if not isinstance(value, dict):
        raise ValueError(f"'{path}' must be a dictionary")
    return value


def _parse_number(value: Any, path: str) -> float:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{path}' must be a number")
    if not math.isfinite(value):
        raise ValueError(f"'{path}' must be a finite number")
    return value


def load_scenario(path: str) -> Scenario:
    """Load and validate a simulation scenario from a YAML file.

    Sections that are absent keep the Configuration defaults. Numeric values
    are not range-checked here; the engine clamps them.

    Args:
        path: Path to YAML scenario file

    Returns:
        Validated Scenario

    Raises:
        FileNotFoundError: If scenario file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If the scenario is invalid
    """
    raw = _read_yaml(path, "Scenario")
    _reject_unknown(raw, set(SCENARIO_SECTIONS) | {"projection"}, "scenario")

    values: Dict[str, Any] = {}
    for section, allowed in SCENARIO_SECTIONS.items():
        if section not in raw:
            continue
        data = _require_mapping(raw[section], section)
        _reject_unknown(data, allowed, section)
        for name, value in data.items():
            values[name] = _parse_field(name, value, f"{section}.{name}")

    scale_factors = DEFAULT_SCALE_FACTORS
    scaling_rules = DEFAULT_SCALING_RULES
    if "projection" in raw:
        projection = _require_mapping(raw["projection"], "projection")
        _reject_unknown(projection, {"scale_factors", "scaling"}, "projection")
        if "scale_factors" in projection:
            scale_factors = parse_scale_factors(projection["scale_factors"])
        if "scaling" in projection:
            scaling_rules = _parse_scaling_rules(projection["scaling"])

    return Scenario(
        configuration=Configuration(**values),
        scale_factors=scale_factors,
        scaling_rules=scaling_rules,
    )


def _parse_field(name: str, value: Any, path: str) -> Any:
    if name in _STRING_FIELDS:
        if not isinstance(value, str) or not value:
            raise ValueError(f"'{path}' must be a non-empty string")
        return value
    if name in _BOOL_FIELDS:
        if not isinstance(value, bool):
            raise ValueError(f"'{path}' must be true or false")
        return value
    number = _parse_number(value, path)
    if name in _INT_FIELDS:
        if number != int(number):
            raise ValueError(f"'{path}' must be a whole number")
        return int(number)
    return float(number)


def parse_scale_factors(value: Any) -> Tuple[int, ...]:
    """Validate a list of scale factors.

    Raises:
        ValueError: If the list is empty or holds anything but positive integers
    """
    if not isinstance(value, (list, tuple)) or not value:
        raise ValueError("'projection.scale_factors' must be a non-empty list")
    for factor in value:
        if isinstance(factor, bool) or not isinstance(factor, int) or factor < 1:
            raise ValueError(
                f"'projection.scale_factors' must hold positive integers, got {factor!r}"
            )
    return tuple(sorted(value))


def _parse_scaling_rules(value: Any) -> ScalingRules:
    data = _require_mapping(value, "projection.scaling")
    allowed = [f.name for f in fields(ScalingRules)]
    _reject_unknown(data, allowed, "projection.scaling")

    rules = {}
    for name, rule_str in data.items():
        if not isinstance(rule_str, str):
            raise ValueError(f"'projection.scaling.{name}' must be a string")
        try:
            rules[name] = ScalingRule(rule_str.lower())
        except ValueError:
            valid_rules = [rule.value for rule in ScalingRule]
            raise ValueError(
                f"'projection.scaling.{name}' must be one of: {valid_rules}"
            )
    return ScalingRules(**rules)


def load_pricing_catalog(path: str) -> PricingCatalog:
    """Load and validate a pricing catalog from a YAML file.

    Args:
        path: Path to YAML pricing file

    Returns:
        Validated PricingCatalog

    Raises:
        FileNotFoundError: If pricing file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If the pricing is invalid
    """
    raw = _read_yaml(path, "Pricing")
    _reject_unknown(raw, {"models", "unit_prices"}, "pricing")

    if "models" not in raw:
        raise ValueError("Missing required 'models' section")
    models_data = _require_mapping(raw["models"], "models")
    if not models_data:
        raise ValueError("'models' must define at least one model")

    entries = [
        _parse_pricing_entry(str(model_id), data)
        for model_id, data in models_data.items()
    ]

    unit_prices = UnitPrices()
    if "unit_prices" in raw:
        unit_prices = _parse_unit_prices(raw["unit_prices"])

    return build_catalog(entries, unit_prices)


def _parse_pricing_entry(model_id: str, data: Any) -> PricingEntry:
    path = f"models.{model_id}"
    data = _require_mapping(data, path)
    _reject_unknown(data, {"input", "output", "label", "search_grounding_free_tier"}, path)

    prices = {}
    for key in ("input", "output"):
        if key not in data:
            raise ValueError(f"Missing required '{key}' in {path}")
        price = _parse_number(data[key], f"{path}.{key}")
        if price < 0:
            raise ValueError(f"'{key}' in {path} must be >= 0")
        prices[key] = float(price)

    label = data.get("label", model_id)
    if not isinstance(label, str):
        raise ValueError(f"'label' in {path} must be a string")

    free_tier = data.get("search_grounding_free_tier", False)
    if not isinstance(free_tier, bool):
        raise ValueError(f"'search_grounding_free_tier' in {path} must be true or false")

    return PricingEntry(
        model_id=model_id,
        input_price_per_million=prices["input"],
        output_price_per_million=prices["output"],
        display_label=label,
        search_grounding_free_tier=free_tier,
    )


def _parse_unit_prices(value: Any) -> UnitPrices:
    data = _require_mapping(value, "unit_prices")
    allowed = [f.name for f in fields(UnitPrices)]
    _reject_unknown(data, allowed, "unit_prices")

    prices = {}
    for name, raw_price in data.items():
        price = _parse_number(raw_price, f"unit_prices.{name}")
        if price < 0:
            raise ValueError(f"'unit_prices.{name}' must be >= 0")
        if name == "search_free_daily_allowance":
            if price != int(price):
                raise ValueError(f"'unit_prices.{name}' must be a whole number")
            prices[name] = int(price)
        else:
            prices[name] = float(price)
    return UnitPrices(**prices)
