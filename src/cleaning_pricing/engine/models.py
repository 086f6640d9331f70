"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation.
Option definitions and selections are frozen; results are built fresh
for every calculation.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class OptionKind(str, Enum):
    """The closed set of pricing option kinds."""
    PER_UNIT = "per_unit"
    SELECTOR = "selector"
    FLEXIBLE_VALUE = "flexible_value"


class FlexibleValueType(str, Enum):
    """How a flexible value surcharge is expressed."""
    PERCENTAGE = "percentage"
    DOLLAR_AMOUNT = "dollar_amount"


def to_decimal(value) -> Decimal:
    """
    Coerce a price-like value to Decimal.

    Floats go through str() so 0.1 becomes Decimal('0.1') rather than
    its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Boolean is not a valid amount")
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, (int, str)):
        return Decimal(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to Decimal")


@dataclass(frozen=True)
class PerUnitData:
    """Linear price per selected quantity."""
    price_per_unit: Decimal
    short_description: Optional[str] = None
    full_description: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'price_per_unit', to_decimal(self.price_per_unit))


@dataclass(frozen=True)
class SelectorChoice:
    """One named choice of a selector option."""
    name: str
    price: Decimal
    short_description: Optional[str] = None
    full_description: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'price', to_decimal(self.price))


@dataclass(frozen=True)
class SelectorData:
    """Single-choice selector; exactly one choice must be selected."""
    choices: tuple[SelectorChoice, ...]
    short_description: Optional[str] = None
    full_description: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'choices', tuple(self.choices))

    def find_choice(self, name: Optional[str]) -> Optional[SelectorChoice]:
        """Look up a choice by exact name."""
        for choice in self.choices:
            if choice.name == name:
                return choice
        return None


@dataclass(frozen=True)
class FlexibleValueData:
    """Togglable surcharge, either a percentage of subtotal or a flat amount."""
    value_type: FlexibleValueType
    value: Decimal
    is_enabled: bool = False
    short_description: Optional[str] = None
    full_description: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'value_type', FlexibleValueType(self.value_type))
        object.__setattr__(self, 'value', to_decimal(self.value))


TypeData = Union[PerUnitData, SelectorData, FlexibleValueData]

_PAYLOAD_FOR_KIND = {
    OptionKind.PER_UNIT: PerUnitData,
    OptionKind.SELECTOR: SelectorData,
    OptionKind.FLEXIBLE_VALUE: FlexibleValueData,
}


@dataclass(frozen=True)
class PricingOption:
    """
    One configurable charge element on a service.

    The type_data payload must match kind; a mismatch raises ValueError
    at construction so an option can never carry the wrong payload.
    """
    id: int
    name: str
    kind: OptionKind
    type_data: TypeData
    order_index: int = 0
    is_required: bool = False
    is_active: bool = True
    is_hidden: bool = False

    def __post_init__(self):
        kind = OptionKind(self.kind)
        object.__setattr__(self, 'kind', kind)
        expected = _PAYLOAD_FOR_KIND[kind]
        if not isinstance(self.type_data, expected):
            raise ValueError(
                f"Option {self.id} of kind '{kind.value}' requires "
                f"{expected.__name__}, got {type(self.type_data).__name__}"
            )

    @classmethod
    def per_unit(cls, id: int, name: str, price_per_unit, **kwargs) -> 'PricingOption':
        """Build a per-unit option."""
        return cls(id=id, name=name, kind=OptionKind.PER_UNIT,
                   type_data=PerUnitData(price_per_unit=price_per_unit), **kwargs)

    @classmethod
    def selector(cls, id: int, name: str, choices, **kwargs) -> 'PricingOption':
        """Build a selector option from SelectorChoice objects or (name, price) pairs."""
        built = tuple(
            c if isinstance(c, SelectorChoice) else SelectorChoice(name=c[0], price=c[1])
            for c in choices
        )
        return cls(id=id, name=name, kind=OptionKind.SELECTOR,
                   type_data=SelectorData(choices=built), **kwargs)

    @classmethod
    def flexible(cls, id: int, name: str, value_type, value, is_enabled: bool = False,
                 **kwargs) -> 'PricingOption':
        """Build a flexible value option."""
        data = FlexibleValueData(value_type=value_type, value=value, is_enabled=is_enabled)
        return cls(id=id, name=name, kind=OptionKind.FLEXIBLE_VALUE, type_data=data, **kwargs)


@dataclass(frozen=True)
class OptionSelection:
    """
    A caller's chosen value for one pricing option.

    Only the field relevant to the referenced option's kind is read:
    quantity for per-unit, selected_choice_name for selector, enabled for
    flexible value (None keeps the option's default).
    """
    option_id: int
    quantity: Optional[int] = None
    selected_choice_name: Optional[str] = None
    enabled: Optional[bool] = None


@dataclass
class TraceStep:
    """A single step in the pricing calculation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class BreakdownLine:
    """A single computed line of a pricing breakdown."""
    option_id: int
    option_name: str
    kind: OptionKind
    line_total: Decimal
    quantity_or_choice: Union[int, str, bool, None] = None
    unit_or_percent: Optional[Decimal] = None
    value_type: Optional[FlexibleValueType] = None


@dataclass
class PricingResult:
    """Complete result of a pricing calculation."""
    base_price: Decimal
    subtotal: Decimal
    total: Decimal
    breakdown: list[BreakdownLine] = field(default_factory=list)
    estimated_duration_minutes: Optional[int] = None
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the result-level trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable result trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_response_dict(self) -> dict:
        """Convert to the console's ServicePricingResponse dict format."""
        breakdown = []
        for line in self.breakdown:
            entry = {"option_name": line.option_name, "total": float(line.line_total)}
            if line.kind == OptionKind.PER_UNIT:
                entry["quantity"] = line.quantity_or_choice
                entry["unit_price"] = float(line.unit_or_percent)
            elif line.kind == OptionKind.SELECTOR:
                entry["selected"] = line.quantity_or_choice
                entry["price"] = float(line.unit_or_percent)
            else:
                entry["enabled"] = line.quantity_or_choice
                entry["value_type"] = line.value_type.value
                entry["value"] = float(line.unit_or_percent)
            breakdown.append(entry)

        return {
            "total_price": float(self.total),
            "base_price": float(self.base_price),
            "subtotal": float(self.subtotal),
            "breakdown": breakdown,
            "estimated_time_minutes": self.estimated_duration_minutes,
        }


@dataclass(frozen=True)
class ServiceDefinition:
    """A service and the pricing options it offers."""
    id: int
    name: str
    options: tuple[PricingOption, ...] = ()
    description: Optional[str] = None
    is_published: bool = False
    base_price: Decimal = Decimal(0)
    estimated_duration_minutes: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, 'options', tuple(self.options))
        object.__setattr__(self, 'base_price', to_decimal(self.base_price))

    def get_option(self, option_id: int) -> Optional[PricingOption]:
        """Look up an option by id, active or not."""
        for option in self.options:
            if option.id == option_id:
                return option
        return None
