"""Domain errors raised by the ledger services.

Every error here is a local, recoverable condition: the operation that raised
it has left the store exactly as it found it. Storage outages are not part of
this hierarchy and surface as SQLAlchemy errors.
"""


class LedgerError(Exception):
    """Base class for ledger errors."""

    code = "ledger_error"
    status_code = 400

    def __init__(self, message: str | None = None):
        self.message = message or self.code.replace("_", " ")
        super().__init__(self.message)


class ValidationError(LedgerError):
    """Malformed, negative or empty input."""

    code = "validation_error"
    status_code = 400


class NotFound(LedgerError):
    """A referenced entity id does not exist."""

    code = "not_found"
    status_code = 404

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.capitalize()} '{entity_id}' not found")


class CrossClassMismatch(LedgerError):
    """A student tried to redeem a product from another class's shop."""

    code = "cross_class_mismatch"
    status_code = 409


class InsufficientStock(LedgerError):
    code = "insufficient_stock"
    status_code = 409


class InsufficientPoints(LedgerError):
    code = "insufficient_points"
    status_code = 409


class InvalidShippingStatusTransition(LedgerError):
    code = "invalid_shipping_status_transition"
    status_code = 409

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move shipping status from '{current}' to '{requested}'")


class ConcurrencyConflict(LedgerError):
    """Lock wait deadline exceeded. Nothing was changed; safe to retry."""

    code = "concurrency_conflict"
    status_code = 503
    retryable = True
