from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.db.session import get_db
from app.schemas.classes import ClassCreateRequest, ClassOut, ClassUpdateRequest
from app.schemas.common import OkResponse
from app.schemas.products import ProductOut
from app.schemas.purchases import PaginatedPurchaseRecords, PurchaseRecordOut
from app.services import ledger_query, ledger_store

router = APIRouter(prefix="/classes", tags=["classes"])


@router.get("", response_model=list[ClassOut])
def list_classes(db: Session = Depends(get_db)):
    return ledger_store.list_classes(db)


@router.post("", response_model=ClassOut)
def create_class(payload: ClassCreateRequest, db: Session = Depends(get_db)):
    return ledger_store.create_class(db, name=payload.name, description=payload.description)


@router.get("/{class_id}", response_model=ClassOut)
def get_class(class_id: str, db: Session = Depends(get_db)):
    return ledger_store.get_class(db, class_id)


@router.patch("/{class_id}", response_model=ClassOut)
def update_class(class_id: str, payload: ClassUpdateRequest, db: Session = Depends(get_db)):
    return ledger_store.update_class(db, class_id, payload)


@router.delete("/{class_id}", response_model=OkResponse)
def delete_class(class_id: str, db: Session = Depends(get_db)):
    ledger_store.delete_class(db, class_id)
    return OkResponse()


@router.get("/{class_id}/products", response_model=list[ProductOut])
def list_products(class_id: str, db: Session = Depends(get_db)):
    return ledger_store.list_products(db, class_id)


@router.get("/{class_id}/purchases", response_model=list[PurchaseRecordOut])
def purchase_history(class_id: str, db: Session = Depends(get_db)):
    return ledger_query.get_purchase_records_by_class(db, class_id)


@router.get("/{class_id}/purchases/paginated", response_model=PaginatedPurchaseRecords)
def purchase_history_paginated(
    class_id: str,
    page: int = 1,
    page_size: int | None = None,
    db: Session = Depends(get_db),
):
    if page_size is None:
        page_size = get_settings().default_page_size
    result = ledger_query.get_purchase_records_paginated(db, class_id, page=page, page_size=page_size)
    return PaginatedPurchaseRecords.model_validate(result)
