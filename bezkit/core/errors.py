class SplineError(Exception):
    """Base class for every error raised by the kernel."""


class InvalidArgument(SplineError, ValueError):
    """A missing structure, a non-positive tolerance or an unknown enum value."""


class OutOfBounds(SplineError, IndexError):
    """An index outside ``[0, len)``."""

    def __init__(self, index: int, length: int, what: str = "index"):
        super().__init__(f"{what} {index} out of range [0, {length})")
        self.index = index
        self.length = length


class InsufficientData(SplineError, ValueError):
    """Fewer knots or points than the operation needs."""


class Degenerate(SplineError, ArithmeticError):
    """Coincident points or a singular system."""
