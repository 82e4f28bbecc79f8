import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.class_model import SchoolClass
from app.services import ledger_store

logger = logging.getLogger(__name__)

DEMO_CLASS_NAME = "Computer Science 2021 Class 1"
DEMO_STUDENTS = (
    ("Alice Zhang", "2021001", 85),
    ("Bob Li", "2021002", 120),
    ("Carol Wang", "2021003", 40),
)
DEMO_PRODUCTS = (
    ("Notebook", 20, 30),
    ("Gel pen set", 35, 15),
    ("Homework pass", 100, 3),
)


def seed_demo_data(db: Session) -> SchoolClass | None:
    """Create one demo class with students and a stocked shop, only on an empty ledger."""
    if db.scalar(select(func.count()).select_from(SchoolClass)):
        logger.info("Ledger already has classes, demo data skipped.")
        return None

    school_class = ledger_store.create_class(db, name=DEMO_CLASS_NAME, description="Demo class")
    for name, number, points in DEMO_STUDENTS:
        ledger_store.create_student(db, name=name, student_number=number, points=points, class_id=school_class.id)
    for name, points, stock in DEMO_PRODUCTS:
        ledger_store.create_product(db, name=name, points=points, stock=stock, class_id=school_class.id)
    logger.info(
        "Seeded demo class %s with %d students and %d products.",
        school_class.id,
        len(DEMO_STUDENTS),
        len(DEMO_PRODUCTS),
    )
    return school_class
