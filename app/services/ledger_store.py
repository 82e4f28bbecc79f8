"""Ledger store: the only place class, student and product rows are written.

Writes run inside :func:`unit_of_work` while holding the relevant entity locks
from :mod:`app.services.locks`; reads take no locks and return whatever is
committed.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.core.exceptions import ConcurrencyConflict, NotFound, ValidationError
from app.models.class_model import SchoolClass
from app.models.product import Product
from app.models.purchase_record import PurchaseRecord
from app.models.student import Student
from app.schemas.classes import ClassUpdateRequest
from app.schemas.products import ProductUpdateRequest
from app.schemas.students import StudentUpdateRequest
from app.services.locks import class_key, ledger_locks, product_key, student_key

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """Commit on success; roll back and re-raise on any error."""
    try:
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        raise


def get_locked(db: Session, model: type[ModelT], entity_id: str, kind: str) -> ModelT:
    """Re-read a row inside the current transaction (FOR UPDATE where supported)."""
    row = db.get(model, entity_id, with_for_update=True, populate_existing=True)
    if row is None:
        raise NotFound(kind, entity_id)
    return row


def _peek(db: Session, model: type[ModelT], entity_id: str, kind: str) -> ModelT:
    row = db.get(model, entity_id)
    if row is None:
        raise NotFound(kind, entity_id)
    return row


def _clean_name(value: str | None, field: str = "name") -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} must not be empty")
    return value.strip()


def _non_negative(value: int | None, field: str) -> int:
    if value is None or isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if value < 0:
        raise ValidationError(f"{field} must be >= 0")
    return value


def _refresh_student_count(db: Session, class_id: str) -> None:
    db.flush()
    school_class = get_locked(db, SchoolClass, class_id, "class")
    school_class.student_count = db.scalar(
        select(func.count()).select_from(Student).where(Student.class_id == class_id)
    ) or 0


# Classes


def list_classes(db: Session) -> list[SchoolClass]:
    return list(db.scalars(select(SchoolClass).order_by(SchoolClass.created_at.desc(), SchoolClass.id.desc())).all())


def get_class(db: Session, class_id: str) -> SchoolClass:
    return _peek(db, SchoolClass, class_id, "class")


def create_class(db: Session, name: str, description: str | None = None) -> SchoolClass:
    school_class = SchoolClass(name=_clean_name(name), description=description, student_count=0)
    with unit_of_work(db):
        db.add(school_class)
    logger.info("Created class %s (%s).", school_class.id, school_class.name)
    return school_class


def update_class(db: Session, class_id: str, payload: ClassUpdateRequest) -> SchoolClass:
    fields = payload.present_fields()
    if not fields:
        raise ValidationError("No fields to update")
    new_name = _clean_name(fields["name"]) if "name" in fields else None

    with ledger_locks.hold([class_key(class_id)]), unit_of_work(db):
        school_class = get_locked(db, SchoolClass, class_id, "class")
        if new_name is not None and new_name != school_class.name:
            school_class.name = new_name
            # students carry a snapshot of the class name; follow the rename
            for student in db.scalars(select(Student).where(Student.class_id == class_id)):
                student.class_name = new_name
        if "description" in fields:
            school_class.description = fields["description"]
    return school_class


def delete_class(db: Session, class_id: str) -> None:
    with ledger_locks.hold([class_key(class_id)]), unit_of_work(db):
        school_class = get_locked(db, SchoolClass, class_id, "class")
        records = db.execute(delete(PurchaseRecord).where(PurchaseRecord.class_id == class_id)).rowcount
        products = db.execute(delete(Product).where(Product.class_id == class_id)).rowcount
        students = db.execute(delete(Student).where(Student.class_id == class_id)).rowcount
        db.delete(school_class)
    logger.info(
        "Deleted class %s with %d student(s), %d product(s), %d purchase record(s).",
        class_id,
        students,
        products,
        records,
    )


# Students


def _student_sort_key(student: Student) -> tuple:
    number = student.student_number
    numeric = int(number) if number.isdecimal() else float("inf")
    return (numeric, number, student.name)


def list_students(db: Session, class_id: str | None = None) -> list[Student]:
    stmt = select(Student)
    if class_id is not None:
        stmt = stmt.where(Student.class_id == class_id)
    return sorted(db.scalars(stmt).all(), key=_student_sort_key)


def get_student(db: Session, student_id: str) -> Student:
    return _peek(db, Student, student_id, "student")


def create_student(db: Session, name: str, student_number: str, points: int, class_id: str) -> Student:
    name = _clean_name(name)
    points = _non_negative(points, "points")
    with ledger_locks.hold([class_key(class_id)]), unit_of_work(db):
        school_class = get_locked(db, SchoolClass, class_id, "class")
        student = Student(
            name=name,
            student_number=(student_number or "").strip(),
            points=points,
            class_id=school_class.id,
            class_name=school_class.name,
        )
        db.add(student)
        school_class.student_count += 1
    return student


def update_student(db: Session, student_id: str, payload: StudentUpdateRequest) -> Student:
    fields = payload.present_fields()
    if "name" in fields:
        fields["name"] = _clean_name(fields["name"])
    if "points" in fields:
        fields["points"] = _non_negative(fields["points"], "points")
    if "student_number" in fields:
        fields["student_number"] = (fields["student_number"] or "").strip()
    if "class_id" in fields and not fields["class_id"]:
        raise ValidationError("class_id must not be empty")
    if not fields:
        return get_student(db, student_id)

    current = get_student(db, student_id)
    old_class_id = current.class_id
    keys = [student_key(student_id), class_key(old_class_id)]
    new_class_id = fields.get("class_id", old_class_id)
    if new_class_id != old_class_id:
        keys.append(class_key(new_class_id))

    with ledger_locks.hold(keys), unit_of_work(db):
        student = get_locked(db, Student, student_id, "student")
        if student.class_id != old_class_id:
            # moved by someone else between the peek and the lock
            raise ConcurrencyConflict("Student changed class concurrently, retry the request")
        if "name" in fields:
            student.name = fields["name"]
        if "student_number" in fields:
            student.student_number = fields["student_number"]
        if "points" in fields:
            student.points = fields["points"]
        if new_class_id != old_class_id:
            new_class = get_locked(db, SchoolClass, new_class_id, "class")
            student.class_id = new_class.id
            student.class_name = new_class.name
            _refresh_student_count(db, old_class_id)
            _refresh_student_count(db, new_class_id)
    return student


def adjust_student_points(db: Session, student_id: str, delta: int) -> Student:
    """Award or deduct points; the balance never drops below zero."""
    if isinstance(delta, bool) or not isinstance(delta, int):
        raise ValidationError("delta must be an integer")
    with ledger_locks.hold([student_key(student_id)]), unit_of_work(db):
        student = get_locked(db, Student, student_id, "student")
        student.points = max(0, student.points + delta)
    logger.info("Adjusted points of student %s by %d, balance %d.", student_id, delta, student.points)
    return student


def delete_student(db: Session, student_id: str) -> None:
    class_id = get_student(db, student_id).class_id
    with ledger_locks.hold([student_key(student_id), class_key(class_id)]), unit_of_work(db):
        student = get_locked(db, Student, student_id, "student")
        if student.class_id != class_id:
            raise ConcurrencyConflict("Student changed class concurrently, retry the request")
        db.delete(student)
        _refresh_student_count(db, class_id)


# Products


def list_products(db: Session, class_id: str) -> list[Product]:
    get_class(db, class_id)
    return list(
        db.scalars(
            select(Product).where(Product.class_id == class_id).order_by(Product.created_at.desc(), Product.id.desc())
        ).all()
    )


def get_product(db: Session, product_id: str) -> Product:
    return _peek(db, Product, product_id, "product")


def create_product(db: Session, name: str, points: int, stock: int, class_id: str) -> Product:
    product = Product(
        name=_clean_name(name),
        points=_non_negative(points, "points"),
        stock=_non_negative(stock, "stock"),
        class_id=class_id,
    )
    with ledger_locks.hold([class_key(class_id)]), unit_of_work(db):
        get_locked(db, SchoolClass, class_id, "class")
        db.add(product)
    return product


def update_product(db: Session, product_id: str, payload: ProductUpdateRequest) -> Product:
    fields = payload.present_fields()
    if "name" in fields:
        fields["name"] = _clean_name(fields["name"])
    for field in ("points", "stock"):
        if field in fields:
            fields[field] = _non_negative(fields[field], field)
    if not fields:
        return get_product(db, product_id)

    with ledger_locks.hold([product_key(product_id)]), unit_of_work(db):
        product = get_locked(db, Product, product_id, "product")
        for field, value in fields.items():
            setattr(product, field, value)
    return product


def delete_product(db: Session, product_id: str) -> None:
    with ledger_locks.hold([product_key(product_id)]), unit_of_work(db):
        product = get_locked(db, Product, product_id, "product")
        db.delete(product)
