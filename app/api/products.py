from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.common import OkResponse
from app.schemas.products import ProductCreateRequest, ProductOut, ProductUpdateRequest
from app.services import ledger_store

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=ProductOut)
def create_product(payload: ProductCreateRequest, db: Session = Depends(get_db)):
    return ledger_store.create_product(
        db,
        name=payload.name,
        points=payload.points,
        stock=payload.stock,
        class_id=payload.class_id,
    )


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    return ledger_store.get_product(db, product_id)


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(product_id: str, payload: ProductUpdateRequest, db: Session = Depends(get_db)):
    return ledger_store.update_product(db, product_id, payload)


@router.delete("/{product_id}", response_model=OkResponse)
def delete_product(product_id: str, db: Session = Depends(get_db)):
    ledger_store.delete_product(db, product_id)
    return OkResponse()
