"""
Validation errors raised by the vector math and retrieval layers.
A failure here means bad data (wrong embedding model, corrupt vector), not bad user input.
"""

from typing import Optional


class InvalidInputError(ValueError):
    """Base class for every validation failure raised by faqrank."""
    pass


class InvalidVectorError(InvalidInputError):
    """Vector is empty, holds non-numeric elements, or contains NaN/Infinity."""
    pass


class DimensionMismatchError(InvalidInputError):
    """Two vectors that must be compared have different lengths."""

    def __init__(self, message: str = "Vectors must have the same dimension",
                 expected: Optional[int] = None, actual: Optional[int] = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class VectorTypeError(InvalidInputError, TypeError):
    """Argument is not a sequence of numbers at all."""
    pass
