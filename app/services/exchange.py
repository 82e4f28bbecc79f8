"""Exchange coordinator: turns student points into product stock.

A redemption debits the student's points, debits the product's stock and
inserts a pending :class:`PurchaseRecord`, all in one transaction and while
holding the class, student and product locks. Every precondition is checked
before the first write, so a rejected request changes nothing.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    CrossClassMismatch,
    InsufficientPoints,
    InsufficientStock,
    NotFound,
    ValidationError,
)
from app.models.product import Product
from app.models.purchase_record import SHIPPING_PENDING, PurchaseRecord
from app.models.student import Student
from app.services.ledger_store import get_locked, unit_of_work
from app.services.locks import class_key, ledger_locks, product_key, student_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExchangeLine:
    product_id: str
    quantity: int


def _validate_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("quantity must be an integer >= 1")


def _peek_student(db: Session, student_id: str) -> Student:
    student = db.get(Student, student_id)
    if student is None:
        raise NotFound("student", student_id)
    return student


def _peek_product(db: Session, product_id: str) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFound("product", product_id)
    return product


def _find_by_idempotency_key(db: Session, idempotency_key: str) -> PurchaseRecord | None:
    return db.scalar(
        select(PurchaseRecord).where(PurchaseRecord.idempotency_key == idempotency_key).execution_options(
            populate_existing=True
        )
    )


def _replay(record: PurchaseRecord, student_id: str, product_id: str, quantity: int) -> PurchaseRecord:
    if (record.student_id, record.product_id, record.quantity) != (student_id, product_id, quantity):
        raise ValidationError("idempotency_key was already used for a different purchase")
    logger.info("Replayed purchase %s for idempotency key %s.", record.id, record.idempotency_key)
    return record


def _lock_keys(student: Student, products: Sequence[Product]) -> list[str]:
    keys = {student_key(student.id), class_key(student.class_id)}
    for product in products:
        keys.add(product_key(product.id))
        keys.add(class_key(product.class_id))
    return sorted(keys)


def _check_and_apply(
    db: Session,
    student: Student,
    lines: Sequence[tuple[Product, int]],
    idempotency_key: str | None = None,
) -> list[PurchaseRecord]:
    for product, _ in lines:
        if product.class_id != student.class_id:
            raise CrossClassMismatch(
                f"Student '{student.id}' cannot redeem product '{product.id}' from another class"
            )

    requested: dict[str, int] = {}
    for product, quantity in lines:
        requested[product.id] = requested.get(product.id, 0) + quantity
        if product.stock < requested[product.id]:
            raise InsufficientStock(
                f"Product '{product.name}' has {product.stock} in stock, {requested[product.id]} requested"
            )

    cost = sum(product.points * quantity for product, quantity in lines)
    if student.points < cost:
        raise InsufficientPoints(f"Student '{student.name}' has {student.points} points, {cost} required")

    records = []
    for product, quantity in lines:
        student.points -= product.points * quantity
        product.stock -= quantity
        record = PurchaseRecord(
            product_id=product.id,
            product_name=product.name,
            points=product.points,
            student_id=student.id,
            student_name=student.name,
            quantity=quantity,
            class_id=student.class_id,
            shipping_status=SHIPPING_PENDING,
            idempotency_key=idempotency_key,
        )
        db.add(record)
        records.append(record)
    return records


def purchase(
    db: Session,
    student_id: str,
    product_id: str,
    quantity: int,
    idempotency_key: str | None = None,
) -> PurchaseRecord:
    """Redeem ``quantity`` units of a product for a student.

    Raises ValidationError, NotFound, CrossClassMismatch, InsufficientStock,
    InsufficientPoints (checked in that order) or ConcurrencyConflict.
    A repeated ``idempotency_key`` returns the record created the first time.
    """
    _validate_quantity(quantity)
    if idempotency_key is not None:
        existing = _find_by_idempotency_key(db, idempotency_key)
        if existing is not None:
            return _replay(existing, student_id, product_id, quantity)

    student = _peek_student(db, student_id)
    product = _peek_product(db, product_id)

    try:
        with ledger_locks.hold(_lock_keys(student, [product])), unit_of_work(db):
            if idempotency_key is not None:
                existing = _find_by_idempotency_key(db, idempotency_key)
                if existing is not None:
                    return _replay(existing, student_id, product_id, quantity)
            student = get_locked(db, Student, student_id, "student")
            product = get_locked(db, Product, product_id, "product")
            (record,) = _check_and_apply(db, student, [(product, quantity)], idempotency_key)
    except IntegrityError:
        # same key raced in through a disjoint set of locks
        existing = _find_by_idempotency_key(db, idempotency_key) if idempotency_key else None
        if existing is None:
            raise
        return _replay(existing, student_id, product_id, quantity)

    logger.info(
        "Student %s redeemed %d x %s for %d points; stock %d, balance %d.",
        student.id,
        quantity,
        product.id,
        quantity * record.points,
        product.stock,
        student.points,
    )
    return record


def checkout(db: Session, student_id: str, lines: Sequence[ExchangeLine]) -> list[PurchaseRecord]:
    """Redeem several products at once; either every line succeeds or none does."""
    if not lines:
        raise ValidationError("checkout requires at least one item")
    for line in lines:
        _validate_quantity(line.quantity)

    student = _peek_student(db, student_id)
    products = [_peek_product(db, line.product_id) for line in lines]

    with ledger_locks.hold(_lock_keys(student, products)), unit_of_work(db):
        student = get_locked(db, Student, student_id, "student")
        locked = {}
        for line in lines:
            if line.product_id not in locked:
                locked[line.product_id] = get_locked(db, Product, line.product_id, "product")
        records = _check_and_apply(db, student, [(locked[line.product_id], line.quantity) for line in lines])

    logger.info(
        "Student %s checked out %d line(s), balance %d.",
        student.id,
        len(records),
        student.points,
    )
    return records
