"""Domain error taxonomy.

Checkout on an empty cart is not an error: it is reported as
``CheckoutResult(success=False)``.
"""


class TripdeskError(Exception):
    """Base class for all domain errors."""


class ValidationError(TripdeskError):
    """Caller input violates a stated constraint."""


class AuthorizationError(TripdeskError):
    """Caller is not the owner of the record being mutated."""


class NotFoundError(TripdeskError):
    """Referenced trip or cart does not exist."""


class SupplierError(TripdeskError):
    """External itinerary generation failed."""


class ConflictError(TripdeskError):
    """A compare-and-swap write lost against a concurrent writer."""
