import logging

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidShippingStatusTransition, ValidationError
from app.models.purchase_record import (
    SHIPPING_DELIVERED,
    SHIPPING_PENDING,
    SHIPPING_SHIPPED,
    SHIPPING_STATUSES,
    PurchaseRecord,
)
from app.services.ledger_store import get_locked, unit_of_work
from app.services.locks import ledger_locks, record_key

logger = logging.getLogger(__name__)

# pending -> shipped -> delivered, nothing else
ALLOWED_TRANSITIONS: dict[str, str] = {
    SHIPPING_PENDING: SHIPPING_SHIPPED,
    SHIPPING_SHIPPED: SHIPPING_DELIVERED,
}


def can_transition(current: str, requested: str) -> bool:
    return ALLOWED_TRANSITIONS.get(current) == requested


def update_shipping_status(db: Session, record_id: str, new_status: str) -> PurchaseRecord:
    if new_status not in SHIPPING_STATUSES:
        raise ValidationError(f"Unknown shipping status '{new_status}'")

    with ledger_locks.hold([record_key(record_id)]), unit_of_work(db):
        record = get_locked(db, PurchaseRecord, record_id, "purchase record")
        current = record.shipping_status
        if not can_transition(current, new_status):
            raise InvalidShippingStatusTransition(current, new_status)
        record.shipping_status = new_status

    logger.info("Purchase record %s shipping status %s -> %s.", record_id, current, new_status)
    return record
