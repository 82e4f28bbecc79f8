from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.common import OkResponse
from app.schemas.purchases import (
    CheckoutRequest,
    PurchaseRecordOut,
    PurchaseRequest,
    ShippingStatusUpdateRequest,
)
from app.services import exchange, shipping

router = APIRouter(prefix="/purchases", tags=["purchases"])


@router.post("", response_model=PurchaseRecordOut)
def purchase(payload: PurchaseRequest, db: Session = Depends(get_db)):
    return exchange.purchase(
        db,
        student_id=payload.student_id,
        product_id=payload.product_id,
        quantity=payload.quantity,
        idempotency_key=payload.idempotency_key,
    )


@router.post("/checkout", response_model=list[PurchaseRecordOut])
def checkout(payload: CheckoutRequest, db: Session = Depends(get_db)):
    lines = [exchange.ExchangeLine(product_id=item.product_id, quantity=item.quantity) for item in payload.items]
    return exchange.checkout(db, student_id=payload.student_id, lines=lines)


@router.put("/{record_id}/shipping-status", response_model=OkResponse)
def update_shipping_status(record_id: str, payload: ShippingStatusUpdateRequest, db: Session = Depends(get_db)):
    shipping.update_shipping_status(db, record_id, payload.shipping_status)
    return OkResponse()
