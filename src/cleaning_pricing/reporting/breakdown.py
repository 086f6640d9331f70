"""
Breakdown reporting - tabular views of pricing results.

Used by the quoting script and by admin recalculation of many orders
against one service.
"""
from decimal import Decimal, localcontext
from typing import Iterable, Optional

import pandas as pd

from ..config.settings import get_settings
from ..engine.errors import CalculationError
from ..engine.models import OptionSelection, PricingResult, ServiceDefinition
from ..engine.pricing_engine import PRECISION, PricingEngine

BREAKDOWN_COLUMNS = ['Option', 'Kind', 'Quantity/Choice', 'Unit/Percent', 'Line Total']
BATCH_COLUMNS = ['Request', 'Subtotal', 'Total', 'Error']


def breakdown_frame(result: PricingResult) -> pd.DataFrame:
    """One row per breakdown line, in breakdown order."""
    rows = []
    for line in result.breakdown:
        rows.append({
            'Option': line.option_name,
            'Kind': line.kind.value,
            'Quantity/Choice': line.quantity_or_choice,
            'Unit/Percent': line.unit_or_percent,
            'Line Total': line.line_total,
        })
    return pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)


def quote_batch(
    service: ServiceDefinition,
    selection_sets: dict[str, Iterable[OptionSelection]],
    engine: Optional[PricingEngine] = None,
) -> pd.DataFrame:
    """
    Price many selection sets against one service.

    Failed requests are reported in the Error column with empty totals;
    they never stop the batch.
    """
    engine = engine or PricingEngine()
    rows = []
    for label, selections in selection_sets.items():
        outcome = engine.calculate_service(service, selections)
        if isinstance(outcome, CalculationError):
            rows.append({'Request': label, 'Subtotal': None, 'Total': None, 'Error': outcome.code})
        else:
            rows.append({
                'Request': label,
                'Subtotal': outcome.subtotal,
                'Total': outcome.total,
                'Error': None,
            })
    return pd.DataFrame(rows, columns=BATCH_COLUMNS)


def format_breakdown(result: PricingResult, quantum: Optional[Decimal] = None) -> str:
    """
    Plain-text breakdown table with subtotal and total.

    Base price and subtotal are shown at the total's quantum; the result
    itself keeps them exact.
    """
    settings = get_settings()
    quantum = quantum or settings.rounding_quantum

    def money(amount: Decimal) -> str:
        with localcontext() as ctx:
            ctx.prec = PRECISION
            return f"${amount.quantize(quantum, rounding=settings.rounding_mode)}"

    frame = breakdown_frame(result)
    lines = []
    if frame.empty:
        lines.append("(no priced options)")
    else:
        lines.append(frame.to_string(index=False))
    lines.append(f"Base price: {money(result.base_price)}")
    lines.append(f"Subtotal:   {money(result.subtotal)}")
    lines.append(f"Total:      ${result.total}")
    if result.estimated_duration_minutes is not None:
        lines.append(f"Estimated time: {result.estimated_duration_minutes} min")
    return "\n".join(lines)
