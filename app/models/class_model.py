from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.common import CreatedAtMixin, UUIDPrimaryKeyMixin


class SchoolClass(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    __tablename__ = "classes"
    __table_args__ = (CheckConstraint("student_count >= 0", name="ck_classes_student_count_non_negative"),)

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(String(512), nullable=True)
    student_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    students = relationship("Student", back_populates="school_class", cascade="all, delete-orphan", passive_deletes=True)
    products = relationship("Product", back_populates="school_class", cascade="all, delete-orphan", passive_deletes=True)
    purchase_records = relationship(
        "PurchaseRecord", back_populates="school_class", cascade="all, delete-orphan", passive_deletes=True
    )
