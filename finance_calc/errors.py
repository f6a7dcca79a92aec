"""Exceptions raised for structurally invalid input.

Numeric edge cases never raise; they resolve to documented fallback values.
"""


class FinanceCalcError(ValueError):
    """Base class for all errors raised by the calculator."""


class InvalidCategoryError(FinanceCalcError):
    """An allocation concept carries a category outside the closed set."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Unknown allocation category: {value!r}")
        self.value = value


class InvalidRangeError(FinanceCalcError):
    """A look-back window key is not one of the supported ranges."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Unknown range: {value!r}")
        self.value = value


class InvalidRecordError(FinanceCalcError):
    """A record is missing a field or holds a non-numeric amount."""
