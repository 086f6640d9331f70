"""
Pricing Engine - Core service pricing computation with traceability.

Prices a service's active pricing options against a caller's selections:
- Per-unit and selector lines are summed with the base price into a subtotal
- Flat flexible surcharges are added on top of the subtotal
- Percentage flexible surcharges each apply to the original subtotal
  (never compounded against each other)
- The total is rounded once, at the end, half-to-even

The engine holds no state between calls and performs no I/O.
"""
import logging
from decimal import Decimal, DecimalException, Inexact, InvalidOperation, localcontext
from typing import Iterable, Optional, Union

from ..config.settings import get_settings, Settings
from .errors import (
    AmountOutOfRange,
    CalculationError,
    DuplicateSelection,
    InvalidChoice,
    InvalidQuantity,
    InvalidToggle,
    MissingRequiredOption,
    UnknownOption,
)
from .models import (
    BreakdownLine,
    FlexibleValueType,
    OptionKind,
    OptionSelection,
    PricingOption,
    PricingResult,
    ServiceDefinition,
    to_decimal,
)

logger = logging.getLogger(__name__)

HUNDRED = Decimal(100)

# Significant digits available to exact line and subtotal arithmetic
PRECISION = 50


class PricingEngine:
    """
    Stateless pricing engine bound to rounding settings.

    Resolution order:
    1. Drop inactive options
    2. Reject requests missing a required option
    3. Reject selections for unknown/inactive options and duplicates
    4. Price each selected option in order_index order
    5. Build subtotal from base price, per-unit and selector lines
    6. Apply flat and percentage flexible surcharges against the subtotal
    7. Round the total once
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def calculate(
        self,
        options: Iterable[PricingOption],
        selections: Iterable[OptionSelection],
        base_price=0,
        estimated_duration_minutes: Optional[int] = None,
    ) -> Union[PricingResult, CalculationError]:
        """
        Price a request, returning the error value instead of raising.

        Args:
            options: Pricing option definitions for one service
            selections: Caller selections against those options
            base_price: Service base price added to the subtotal
            estimated_duration_minutes: Passed through to the result unchanged

        Returns:
            PricingResult on success, otherwise the first CalculationError found
        """
        try:
            return self.quote(options, selections, base_price, estimated_duration_minutes)
        except CalculationError as e:
            logger.info("Pricing request rejected: %s", e)
            return e

    def calculate_service(
        self,
        service: ServiceDefinition,
        selections: Iterable[OptionSelection],
    ) -> Union[PricingResult, CalculationError]:
        """Price selections against a service's options, base price and duration."""
        return self.calculate(
            service.options,
            selections,
            service.base_price,
            service.estimated_duration_minutes,
        )

    def quote(
        self,
        options: Iterable[PricingOption],
        selections: Iterable[OptionSelection],
        base_price=0,
        estimated_duration_minutes: Optional[int] = None,
    ) -> PricingResult:
        """Price a request, raising CalculationError on invalid selections."""
        options = list(options)
        selections = list(selections)
        base = to_decimal(base_price)

        active = sorted(
            (o for o in options if o.is_active),
            key=lambda o: (o.order_index, o.id),
        )
        by_id = {o.id: o for o in active}
        selected = self._match_selections(active, by_id, selections)

        result = PricingResult(
            base_price=base,
            subtotal=base,
            total=base,
            estimated_duration_minutes=estimated_duration_minutes,
        )
        result.add_trace(
            "Options",
            f"{len(active)} active of {len(options)} defined, {len(selections)} selected",
        )
        result.add_trace("Base Price", "Service base price", f"${base}")

        with localcontext() as ctx:
            # Line and subtotal arithmetic must be exact
            ctx.prec = PRECISION
            ctx.traps[Inexact] = True
            ctx.traps[InvalidOperation] = True
            self._price_lines(result, active, selected)

        logger.debug("Priced %d lines: subtotal=%s total=%s",
                     len(result.breakdown), result.subtotal, result.total)
        return result

    def _price_lines(
        self,
        result: PricingResult,
        active: list[PricingOption],
        selected: dict[int, OptionSelection],
    ):
        """Fill in breakdown, subtotal and total of a result."""
        deferred = []
        for option in active:
            selection = selected.get(option.id)
            if selection is None:
                continue
            try:
                line, is_deferred = self._price_line(option, selection)
            except DecimalException:
                raise AmountOutOfRange(option.id, PRECISION) from None
            result.breakdown.append(line)
            if is_deferred:
                deferred.append(line)
            else:
                result.add_trace("Line", option.name, f"${line.line_total}")

        try:
            subtotal = result.base_price + sum(
                (line.line_total for line in result.breakdown
                 if line.kind in (OptionKind.PER_UNIT, OptionKind.SELECTOR)),
                Decimal(0),
            )
        except DecimalException:
            raise AmountOutOfRange(None, PRECISION) from None
        result.subtotal = subtotal
        result.add_trace("Subtotal", "Base price plus per-unit and selector lines", f"${subtotal}")

        # Each percentage applies to the original subtotal
        for line in deferred:
            try:
                line.line_total = subtotal * line.unit_or_percent / HUNDRED
            except DecimalException:
                raise AmountOutOfRange(line.option_id, PRECISION) from None
            result.add_trace(
                "Percentage",
                f"{line.option_name} {line.unit_or_percent}% of ${subtotal}",
                f"${line.line_total}",
            )

        try:
            unrounded = subtotal + sum(
                (line.line_total for line in result.breakdown
                 if line.kind == OptionKind.FLEXIBLE_VALUE),
                Decimal(0),
            )
            with localcontext() as rounding_ctx:
                rounding_ctx.traps[Inexact] = False
                result.total = unrounded.quantize(
                    self.settings.rounding_quantum,
                    rounding=self.settings.rounding_mode,
                )
        except DecimalException:
            raise AmountOutOfRange(None, PRECISION) from None
        result.add_trace("Total", f"Subtotal plus surcharges (${unrounded}), rounded", f"${result.total}")

    def _match_selections(
        self,
        active: list[PricingOption],
        by_id: dict[int, PricingOption],
        selections: list[OptionSelection],
    ) -> dict[int, OptionSelection]:
        """Correlate selections to active options, failing on the first problem."""
        selected_ids = {s.option_id for s in selections}
        for option in active:
            if option.is_required and option.id not in selected_ids:
                raise MissingRequiredOption(option.id)

        selected = {}
        for selection in selections:
            if selection.option_id not in by_id:
                raise UnknownOption(selection.option_id)
            if selection.option_id in selected:
                raise DuplicateSelection(selection.option_id)
            selected[selection.option_id] = selection
        return selected

    def _price_line(self, option: PricingOption, selection: OptionSelection) -> tuple[BreakdownLine, bool]:
        """
        Price a single (option, selection) pair.

        Returns (line, deferred); deferred lines are enabled percentage
        surcharges whose total depends on the subtotal.
        """
        data = option.type_data

        if option.kind == OptionKind.PER_UNIT:
            qty = selection.quantity
            if not isinstance(qty, int) or isinstance(qty, bool) or qty < 0:
                raise InvalidQuantity(option.id)
            return BreakdownLine(
                option_id=option.id,
                option_name=option.name,
                kind=option.kind,
                line_total=data.price_per_unit * qty,
                quantity_or_choice=qty,
                unit_or_percent=data.price_per_unit,
            ), False

        if option.kind == OptionKind.SELECTOR:
            choice = data.find_choice(selection.selected_choice_name)
            if choice is None:
                raise InvalidChoice(option.id, selection.selected_choice_name)
            return BreakdownLine(
                option_id=option.id,
                option_name=option.name,
                kind=option.kind,
                line_total=choice.price,
                quantity_or_choice=choice.name,
                unit_or_percent=choice.price,
            ), False

        # Flexible value; an omitted toggle keeps the option's default
        if selection.enabled is None:
            enabled = data.is_enabled
        elif isinstance(selection.enabled, bool):
            enabled = selection.enabled
        else:
            raise InvalidToggle(option.id)
        line = BreakdownLine(
            option_id=option.id,
            option_name=option.name,
            kind=option.kind,
            line_total=Decimal(0),
            quantity_or_choice=enabled,
            unit_or_percent=data.value,
            value_type=data.value_type,
        )
        if not enabled:
            return line, False
        if data.value_type == FlexibleValueType.PERCENTAGE:
            return line, True
        # Negative flat amounts are priced as given and reduce the total
        line.line_total = data.value
        return line, False


def calculate(
    options: Iterable[PricingOption],
    selections: Iterable[OptionSelection],
    base_price=0,
    estimated_duration_minutes: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> Union[PricingResult, CalculationError]:
    """Price a request with a default engine; returns the error on failure."""
    return PricingEngine(settings).calculate(options, selections, base_price, estimated_duration_minutes)


def calculate_or_raise(
    options: Iterable[PricingOption],
    selections: Iterable[OptionSelection],
    base_price=0,
    estimated_duration_minutes: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> PricingResult:
    """Price a request with a default engine; raises CalculationError on failure."""
    return PricingEngine(settings).quote(options, selections, base_price, estimated_duration_minutes)
