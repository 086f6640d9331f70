"""
Calculation errors.

All variants describe caller input problems. The engine returns them as
values from calculate(); calculate_or_raise() raises them instead.
"""
from typing import Optional


class CalculationError(ValueError):
    """Base class for selection errors found while pricing a request."""

    code = "calculation_error"

    def __init__(self, option_id, message: Optional[str] = None):
        self.option_id = option_id
        super().__init__(message or f"{self.code} for option {option_id}")

    def __eq__(self, other):
        return (
            type(self) is type(other)
            and self.args == other.args
            and self.option_id == other.option_id
        )

    def __hash__(self):
        return hash((type(self), self.args))

    def to_dict(self) -> dict:
        """Serializable form for callers mapping errors to user messages."""
        return {"code": self.code, "option_id": self.option_id, "message": str(self)}


class MissingRequiredOption(CalculationError):
    """A required active option has no selection."""

    code = "missing_required_option"

    def __init__(self, option_id):
        super().__init__(option_id, f"Required option {option_id} has no selection")


class UnknownOption(CalculationError):
    """A selection references an option that does not exist or is inactive."""

    code = "unknown_option"

    def __init__(self, option_id):
        super().__init__(option_id, f"Option {option_id} does not exist or is inactive")


class InvalidQuantity(CalculationError):
    """A per-unit selection has a missing or negative quantity."""

    code = "invalid_quantity"

    def __init__(self, option_id):
        super().__init__(option_id, f"Invalid quantity for option {option_id}")


class InvalidChoice(CalculationError):
    """A selector selection names a choice the option does not offer."""

    code = "invalid_choice"

    def __init__(self, option_id, choice_name: Optional[str]):
        self.choice_name = choice_name
        super().__init__(option_id, f"Option {option_id} has no choice named {choice_name!r}")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["choice_name"] = self.choice_name
        return data


class DuplicateSelection(CalculationError):
    """More than one selection references the same option."""

    code = "duplicate_selection"

    def __init__(self, option_id):
        super().__init__(option_id, f"Option {option_id} was selected more than once")


class InvalidToggle(CalculationError):
    """A flexible value selection carries a non-boolean enabled flag."""

    code = "invalid_toggle"

    def __init__(self, option_id):
        super().__init__(option_id, f"Enabled flag for option {option_id} must be true or false")


class AmountOutOfRange(CalculationError):
    """An amount cannot be represented exactly; option_id is None for the totals."""

    code = "amount_out_of_range"

    def __init__(self, option_id, digits: int):
        self.digits = digits
        if option_id is None:
            message = f"Total exceeds {digits} significant digits"
        else:
            message = f"Amount for option {option_id} exceeds {digits} significant digits"
        super().__init__(option_id, message)
