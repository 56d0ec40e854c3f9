"""
Error kinds raised by the quote engine.

Routers translate these into HTTP responses. Within the engine only the
lenient pricing.preview_line catches MissingDimension (to leave unresolved
features out of a preview); everything else propagates. Every mutating
cart operation validates before it touches state, so a raised error
always leaves the cart unchanged.
"""


class QuoteError(Exception):
    """Base class for all quote engine errors."""


class InvalidDimension(QuoteError, ValueError):
    """Width or height is zero or negative where a real size is required."""


class MissingDimension(QuoteError, ValueError):
    """An extra or custom feature needs its own dimensions and has none.

    extra_ids lists the selected extras that are missing dimensions (empty
    when the missing dimensions belong to a custom feature).
    """

    def __init__(self, message: str, extra_ids: list | None = None):
        super().__init__(message)
        self.extra_ids = list(extra_ids or [])


class IndexOutOfRange(QuoteError, IndexError):
    """A line index does not exist in the cart."""
