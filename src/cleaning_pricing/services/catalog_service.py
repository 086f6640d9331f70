"""
Catalog Service - definition-time helpers for pricing options.

Validation of option definitions, option reordering and loading of
service definitions from JSON documents. The pricing engine trusts the
definitions it is handed; these checks belong to whoever creates them.
"""
import json
import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from ..catalog.schemas import PricingCalculationRequest, ServiceWithPricingPayload
from ..engine.models import (
    FlexibleValueType,
    OptionKind,
    OptionSelection,
    PricingOption,
    ServiceDefinition,
)

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of option definition validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: str):
        self.errors.append(error)
        self.valid = False

    def merge(self, other: 'ValidationResult'):
        """Fold another result into this one."""
        for error in other.errors:
            self.add_error(error)
        self.warnings.extend(other.warnings)


@dataclass(frozen=True)
class OptionOrderUpdate:
    """Move an option to a new order_index."""
    option_id: int
    new_order: int


def validate_option(option: PricingOption) -> ValidationResult:
    """Validate a single option definition before saving."""
    result = ValidationResult(valid=True)
    label = f"Option {option.id}"

    if not option.name or not option.name.strip():
        result.add_error(f"{label}: name is required")

    data = option.type_data
    if option.kind == OptionKind.PER_UNIT:
        if data.price_per_unit < 0:
            result.add_error(f"{label}: price per unit must be non-negative")

    elif option.kind == OptionKind.SELECTOR:
        if not data.choices:
            result.add_error(f"{label}: selector needs at least one choice")
        seen = set()
        for choice in data.choices:
            if not choice.name:
                result.add_error(f"{label}: choice name is required")
            elif choice.name in seen:
                result.add_error(f"{label}: duplicate choice name '{choice.name}'")
            seen.add(choice.name)
            if choice.price < 0:
                result.add_error(f"{label}: price for '{choice.name}' must be non-negative")
        if len(data.choices) == 1:
            result.warnings.append(f"{label}: selector has a single choice")

    elif option.kind == OptionKind.FLEXIBLE_VALUE:
        if data.value_type == FlexibleValueType.PERCENTAGE:
            if not (Decimal(0) < data.value <= Decimal(100)):
                result.add_error(f"{label}: percentage must be greater than 0 and at most 100")
        elif data.value < 0:
            result.add_error(f"{label}: dollar amount must be non-negative")

    if option.is_required and not option.is_active:
        result.warnings.append(f"{label}: required option is inactive and will be ignored")
    if option.is_required and option.is_hidden:
        result.warnings.append(f"{label}: required option is hidden from customers")

    return result


def validate_service(options: Iterable[PricingOption]) -> ValidationResult:
    """Validate every option of a service plus cross-option constraints."""
    result = ValidationResult(valid=True)
    seen_ids = set()
    seen_orders = {}

    for option in options:
        result.merge(validate_option(option))

        if option.id in seen_ids:
            result.add_error(f"Duplicate option id {option.id}")
        seen_ids.add(option.id)

        if option.order_index in seen_orders:
            result.add_error(
                f"Options {seen_orders[option.order_index]} and {option.id} "
                f"share order_index {option.order_index}"
            )
        else:
            seen_orders[option.order_index] = option.id

    return result


def reorder_options(
    options: Iterable[PricingOption],
    updates: Iterable[OptionOrderUpdate],
) -> tuple[PricingOption, ...]:
    """
    Apply order updates and return options sorted by order_index.

    Raises ValueError for unknown option ids or if the new indexes collide.
    """
    options = list(options)
    new_orders = {}
    known = {o.id for o in options}
    for update in updates:
        if update.option_id not in known:
            raise ValueError(f"Option with ID '{update.option_id}' not found")
        new_orders[update.option_id] = update.new_order

    reordered = [
        replace(o, order_index=new_orders[o.id]) if o.id in new_orders else o
        for o in options
    ]

    indexes = [o.order_index for o in reordered]
    if len(indexes) != len(set(indexes)):
        raise ValueError("Order updates produce duplicate order_index values")

    return tuple(sorted(reordered, key=lambda o: o.order_index))


def load_service(path: Path) -> ServiceDefinition:
    """Load a service definition from a JSON document."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Service definition not found at {path}.")

    with open(path, 'r', encoding='utf-8') as f:
        payload = ServiceWithPricingPayload.model_validate(json.load(f))

    service = payload.to_definition()
    logger.debug("Loaded service %s with %d options", service.name, len(service.options))
    return service


def load_selections(path: Path) -> tuple[int, list[OptionSelection]]:
    """Load a pricing calculation request, returning (service_id, selections)."""
    with open(Path(path), 'r', encoding='utf-8') as f:
        request = PricingCalculationRequest.model_validate(json.load(f))
    return request.service_id, request.to_selections()
