"""Engine subpackage - core pricing logic and calculation errors."""
from .pricing_engine import PricingEngine, calculate, calculate_or_raise
from .models import (
    BreakdownLine,
    FlexibleValueData,
    FlexibleValueType,
    OptionKind,
    OptionSelection,
    PerUnitData,
    PricingOption,
    PricingResult,
    SelectorChoice,
    SelectorData,
    ServiceDefinition,
)
from .errors import (
    CalculationError,
    AmountOutOfRange,
    DuplicateSelection,
    InvalidChoice,
    InvalidQuantity,
    InvalidToggle,
    MissingRequiredOption,
    UnknownOption,
)

__all__ = [
    'PricingEngine', 'calculate', 'calculate_or_raise',
    'BreakdownLine', 'FlexibleValueData', 'FlexibleValueType', 'OptionKind',
    'OptionSelection', 'PerUnitData', 'PricingOption', 'PricingResult',
    'SelectorChoice', 'SelectorData', 'ServiceDefinition',
    'AmountOutOfRange', 'CalculationError', 'DuplicateSelection', 'InvalidChoice',
    'InvalidQuantity', 'InvalidToggle',
    'MissingRequiredOption', 'UnknownOption',
]
