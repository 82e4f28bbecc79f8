from app.models.class_model import SchoolClass
from app.models.product import Product
from app.models.purchase_record import PurchaseRecord
from app.models.student import Student

__all__ = [
    "SchoolClass",
    "Student",
    "Product",
    "PurchaseRecord",
]
