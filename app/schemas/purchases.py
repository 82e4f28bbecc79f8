from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel


class PurchaseRequest(CamelModel):
    student_id: str
    product_id: str
    quantity: int = 1
    idempotency_key: str | None = Field(default=None, max_length=128)


class CheckoutItem(CamelModel):
    product_id: str
    quantity: int = 1


class CheckoutRequest(CamelModel):
    student_id: str
    items: list[CheckoutItem]


class PurchaseRecordOut(CamelModel):
    id: str
    product_id: str
    product_name: str
    points: int
    student_id: str
    student_name: str
    quantity: int
    class_id: str
    shipping_status: str
    created_at: datetime


class PaginatedPurchaseRecords(CamelModel):
    records: list[PurchaseRecordOut]
    total: int
    total_pages: int
    current_page: int
    page_size: int


class ShippingStatusUpdateRequest(CamelModel):
    shipping_status: str
