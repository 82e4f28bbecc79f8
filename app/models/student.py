from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.common import CreatedAtMixin, UUIDPrimaryKeyMixin


class Student(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    __tablename__ = "students"
    __table_args__ = (CheckConstraint("points >= 0", name="ck_students_points_non_negative"),)

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    student_number: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    class_id: Mapped[str] = mapped_column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    # snapshot of the class name, refreshed on rename/move only
    class_name: Mapped[str] = mapped_column(String(128), nullable=False)

    school_class = relationship("SchoolClass", back_populates="students")
