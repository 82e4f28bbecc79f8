import math
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.exceptions import NotFound, ValidationError
from app.models.class_model import SchoolClass
from app.models.purchase_record import PurchaseRecord

_NEWEST_FIRST = (PurchaseRecord.created_at.desc(), PurchaseRecord.id.desc())


@dataclass
class PurchasePage:
    records: list[PurchaseRecord]
    total: int
    total_pages: int
    current_page: int
    page_size: int


def _require_class(db: Session, class_id: str) -> None:
    if db.get(SchoolClass, class_id) is None:
        raise NotFound("class", class_id)


def get_purchase_records_by_class(db: Session, class_id: str) -> list[PurchaseRecord]:
    _require_class(db, class_id)
    stmt = select(PurchaseRecord).where(PurchaseRecord.class_id == class_id).order_by(*_NEWEST_FIRST)
    return list(db.scalars(stmt).all())


def get_purchase_records_paginated(db: Session, class_id: str, page: int, page_size: int) -> PurchasePage:
    """Newest-first page of a class's purchase history.

    Pages outside ``[1, total_pages]`` are rejected rather than clamped; page 1
    of an empty history is valid and empty. Any ``page_size >= 1`` is served.
    """
    if page < 1:
        raise ValidationError("page must be >= 1")
    if page_size < 1:
        raise ValidationError("page_size must be >= 1")
    _require_class(db, class_id)

    total = db.scalar(
        select(func.count()).select_from(PurchaseRecord).where(PurchaseRecord.class_id == class_id)
    ) or 0
    total_pages = math.ceil(total / page_size)
    if page > max(total_pages, 1):
        raise ValidationError(f"page {page} is out of range, class has {total_pages} page(s)")

    stmt = (
        select(PurchaseRecord)
        .where(PurchaseRecord.class_id == class_id)
        .order_by(*_NEWEST_FIRST)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    records = list(db.scalars(stmt).all())
    return PurchasePage(
        records=records,
        total=total,
        total_pages=total_pages,
        current_page=page,
        page_size=page_size,
    )
