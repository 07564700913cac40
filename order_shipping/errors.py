"""
Validation Errors

Raised by the cost engine when a line item cannot be priced. Any invalid
line voids the whole order, so callers never see a partial total.
"""


class ValidationError(ValueError):
    """
    Base class for line item validation failures.

    Attributes:
        index - 0-based position of the offending line in the order
        rule  - Short description of the broken rule (e.g. "qty required")
    """

    rule = "invalid line item"

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"line {index}: {self.rule}")


class MissingQuantity(ValidationError):
    """A line has no qty."""

    rule = "qty required"


class NegativeValue(ValidationError):
    """A line has a negative qty or weight_kg."""

    rule = "negative not allowed"

    def __init__(self, index: int, field: str):
        self.field = field
        super().__init__(index)

    def __str__(self) -> str:
        return f"line {self.index}: {self.rule} ({self.field})"


__all__ = [
    "ValidationError",
    "MissingQuantity",
    "NegativeValue",
]
