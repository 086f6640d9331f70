"""
Catalog Schemas - pydantic models for service catalog and pricing payloads.

Mirrors the payload shapes the admin console exchanges with the backend
(option_type plus a matching per_unit_option / selector_option /
flexible_value_option sub-object) and converts them into engine models.
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ..engine.models import (
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


_SUB_PAYLOAD_FIELDS = {
    OptionKind.PER_UNIT: 'per_unit_option',
    OptionKind.SELECTOR: 'selector_option',
    OptionKind.FLEXIBLE_VALUE: 'flexible_value_option',
}


class PerUnitOptionPayload(BaseModel):
    """Per-unit option details."""
    price_per_unit: Decimal
    short_description: Optional[str] = None
    full_description: Optional[str] = None


class SelectorOptionItemPayload(BaseModel):
    """One choice of a selector option."""
    name: str
    price: Decimal
    short_description: Optional[str] = None
    full_description: Optional[str] = None


class SelectorOptionPayload(BaseModel):
    """Selector option details."""
    options: list[SelectorOptionItemPayload]
    short_description: Optional[str] = None
    full_description: Optional[str] = None


class FlexibleValueOptionPayload(BaseModel):
    """Flexible value option details."""
    value_type: FlexibleValueType
    value: Decimal
    is_enabled: bool = False
    short_description: Optional[str] = None
    full_description: Optional[str] = None


class PricingOptionPayload(BaseModel):
    """A pricing option as stored by the service catalog."""
    id: int
    name: str
    option_type: OptionKind
    order_index: int = 0
    is_required: bool = False
    is_active: bool = True
    is_hidden: bool = False
    per_unit_option: Optional[PerUnitOptionPayload] = None
    selector_option: Optional[SelectorOptionPayload] = None
    flexible_value_option: Optional[FlexibleValueOptionPayload] = None

    @model_validator(mode='after')
    def check_sub_payload(self) -> 'PricingOptionPayload':
        """Exactly the sub-object matching option_type must be present."""
        expected = _SUB_PAYLOAD_FIELDS[self.option_type]
        for kind, field_name in _SUB_PAYLOAD_FIELDS.items():
            present = getattr(self, field_name) is not None
            if field_name == expected and not present:
                raise ValueError(f"{field_name} is required for option_type '{kind.value}'")
            if field_name != expected and present:
                raise ValueError(
                    f"{field_name} is not allowed for option_type '{self.option_type.value}'"
                )
        return self

    def to_model(self) -> PricingOption:
        """Convert to an engine PricingOption."""
        if self.option_type == OptionKind.PER_UNIT:
            p = self.per_unit_option
            type_data = PerUnitData(
                price_per_unit=p.price_per_unit,
                short_description=p.short_description,
                full_description=p.full_description,
            )
        elif self.option_type == OptionKind.SELECTOR:
            s = self.selector_option
            type_data = SelectorData(
                choices=tuple(
                    SelectorChoice(
                        name=item.name,
                        price=item.price,
                        short_description=item.short_description,
                        full_description=item.full_description,
                    )
                    for item in s.options
                ),
                short_description=s.short_description,
                full_description=s.full_description,
            )
        else:
            f = self.flexible_value_option
            type_data = FlexibleValueData(
                value_type=f.value_type,
                value=f.value,
                is_enabled=f.is_enabled,
                short_description=f.short_description,
                full_description=f.full_description,
            )

        return PricingOption(
            id=self.id,
            name=self.name,
            kind=self.option_type,
            type_data=type_data,
            order_index=self.order_index,
            is_required=self.is_required,
            is_active=self.is_active,
            is_hidden=self.is_hidden,
        )


class ServiceWithPricingPayload(BaseModel):
    """A service with its pricing options."""
    id: int
    name: str
    description: Optional[str] = None
    is_published: bool = False
    base_price: Decimal = Decimal(0)
    estimated_time_minutes: Optional[int] = None
    pricing_options: list[PricingOptionPayload] = Field(default_factory=list)

    def to_definition(self) -> ServiceDefinition:
        """Convert to an engine ServiceDefinition."""
        return ServiceDefinition(
            id=self.id,
            name=self.name,
            description=self.description,
            is_published=self.is_published,
            base_price=self.base_price,
            estimated_duration_minutes=self.estimated_time_minutes,
            options=tuple(o.to_model() for o in self.pricing_options),
        )


class OptionSelectionPayload(BaseModel):
    """A selection as sent by the calculator or admin recalculation."""
    option_id: int
    quantity: Optional[int] = None
    selected_option: Optional[str] = None
    enabled: Optional[bool] = None

    def to_model(self) -> OptionSelection:
        return OptionSelection(
            option_id=self.option_id,
            quantity=self.quantity,
            selected_choice_name=self.selected_option,
            enabled=self.enabled,
        )


class PricingCalculationRequest(BaseModel):
    """Request model for pricing a service."""
    service_id: int
    option_selections: list[OptionSelectionPayload] = Field(default_factory=list)

    def to_selections(self) -> list[OptionSelection]:
        return [s.to_model() for s in self.option_selections]


class ServicePricingResponse(BaseModel):
    """Response model for a priced service."""
    total_price: float
    base_price: float
    subtotal: float
    breakdown: list[dict]
    estimated_time_minutes: Optional[int] = None

    @classmethod
    def from_result(cls, result: PricingResult) -> 'ServicePricingResponse':
        return cls(**result.to_response_dict())
