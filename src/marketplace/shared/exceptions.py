"""Marketplace-specific errors.

Missing records surface as ``protean.exceptions.ObjectNotFoundError`` and bad
input as ``protean.exceptions.ValidationError``. ``InvalidStateError`` extends
protean's own type, so protean's FastAPI handlers already answer it with 409.
The API layer maps the remaining classes to an HTTP status.
"""

from protean.exceptions import InvalidStateError as ProteanInvalidStateError


class MarketplaceError(Exception):
    """Base class for marketplace errors carrying a field-keyed message dict."""

    def __init__(self, messages):
        if isinstance(messages, str):
            messages = {"_entity": [messages]}
        self.messages = messages
        super().__init__(messages)


class ForbiddenError(MarketplaceError):
    """The caller's role or ownership does not permit the operation."""


class InvalidStateError(MarketplaceError, ProteanInvalidStateError):
    """The target record is in a state that does not allow the operation."""


class ConflictError(MarketplaceError):
    """A concurrent write changed the record first; the caller may retry."""


class StockConflictError(ConflictError):
    """A concurrent stock mutation held the product for too long."""
