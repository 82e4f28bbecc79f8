from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.common import CreatedAtMixin, UUIDPrimaryKeyMixin

SHIPPING_PENDING = "pending"
SHIPPING_SHIPPED = "shipped"
SHIPPING_DELIVERED = "delivered"
SHIPPING_STATUSES = (SHIPPING_PENDING, SHIPPING_SHIPPED, SHIPPING_DELIVERED)


class PurchaseRecord(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    __tablename__ = "purchase_records"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_purchase_records_quantity_positive"),
        CheckConstraint(
            "shipping_status IN ('pending', 'shipped', 'delivered')",
            name="ck_purchase_records_shipping_status",
        ),
    )

    # product/student ids are plain references: history outlives the entities
    product_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    product_name: Mapped[str] = mapped_column(String(128), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    student_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    student_name: Mapped[str] = mapped_column(String(128), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    class_id: Mapped[str] = mapped_column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    shipping_status: Mapped[str] = mapped_column(String(16), nullable=False, default=SHIPPING_PENDING, index=True)
    idempotency_key: Mapped[str | None] = mapped_column(String(128), nullable=True, unique=True)

    school_class = relationship("SchoolClass", back_populates="purchase_records")
