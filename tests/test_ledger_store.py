import pytest

from app.core.exceptions import ConcurrencyConflict, NotFound, ValidationError
from app.models import Product, PurchaseRecord, SchoolClass, Student
from app.schemas.classes import ClassUpdateRequest
from app.schemas.products import ProductUpdateRequest
from app.schemas.students import StudentUpdateRequest
from app.services import exchange, ledger_store


def test_create_class_requires_name(db):
    with pytest.raises(ValidationError):
        ledger_store.create_class(db, name="   ")


def test_create_student_rejects_negative_points(db):
    school_class = ledger_store.create_class(db, name="7A")
    with pytest.raises(ValidationError):
        ledger_store.create_student(db, name="Bob", student_number="2", points=-1, class_id=school_class.id)
    assert ledger_store.get_class(db, school_class.id).student_count == 0


def test_create_student_in_unknown_class(db):
    with pytest.raises(NotFound):
        ledger_store.create_student(db, name="Bob", student_number="2", points=0, class_id="missing")


def test_create_product_rejects_negative_stock_and_price(db):
    school_class = ledger_store.create_class(db, name="7A")
    with pytest.raises(ValidationError):
        ledger_store.create_product(db, name="Pen", points=10, stock=-1, class_id=school_class.id)
    with pytest.raises(ValidationError):
        ledger_store.create_product(db, name="Pen", points=-10, stock=1, class_id=school_class.id)
    with pytest.raises(ValidationError):
        ledger_store.create_product(db, name="", points=10, stock=1, class_id=school_class.id)


def test_student_count_follows_create_and_delete(db):
    school_class = ledger_store.create_class(db, name="7A")
    first = ledger_store.create_student(db, name="A", student_number="1", points=0, class_id=school_class.id)
    ledger_store.create_student(db, name="B", student_number="2", points=0, class_id=school_class.id)
    assert ledger_store.get_class(db, school_class.id).student_count == 2

    ledger_store.delete_student(db, first.id)
    db.expire_all()
    assert ledger_store.get_class(db, school_class.id).student_count == 1
    with pytest.raises(NotFound):
        ledger_store.get_student(db, first.id)


def test_student_snapshot_takes_class_name(db):
    school_class = ledger_store.create_class(db, name="7A")
    student = ledger_store.create_student(db, name="A", student_number="1", points=0, class_id=school_class.id)
    assert student.class_name == "7A"


def test_class_rename_refreshes_student_class_name(db):
    school_class = ledger_store.create_class(db, name="7A")
    student = ledger_store.create_student(db, name="A", student_number="1", points=0, class_id=school_class.id)

    ledger_store.update_class(db, school_class.id, ClassUpdateRequest(name="8A"))
    db.expire_all()
    assert ledger_store.get_student(db, student.id).class_name == "8A"


def test_update_class_without_fields_is_rejected(db):
    school_class = ledger_store.create_class(db, name="7A")
    with pytest.raises(ValidationError):
        ledger_store.update_class(db, school_class.id, ClassUpdateRequest())


def test_update_class_explicit_null_clears_description(db):
    school_class = ledger_store.create_class(db, name="7A", description="homeroom")

    updated = ledger_store.update_class(db, school_class.id, ClassUpdateRequest(description=None))
    assert updated.description is None
    assert updated.name == "7A"


def test_update_class_absent_description_is_kept(db):
    school_class = ledger_store.create_class(db, name="7A", description="homeroom")

    updated = ledger_store.update_class(db, school_class.id, ClassUpdateRequest(name="7B"))
    assert updated.description == "homeroom"


def test_update_student_partial_fields(db):
    school_class = ledger_store.create_class(db, name="7A")
    student = ledger_store.create_student(db, name="A", student_number="1", points=10, class_id=school_class.id)

    updated = ledger_store.update_student(db, student.id, StudentUpdateRequest(points=25))
    assert updated.points == 25
    assert updated.name == "A"
    assert updated.student_number == "1"


def test_update_student_rejects_negative_points_and_null_name(db):
    school_class = ledger_store.create_class(db, name="7A")
    student = ledger_store.create_student(db, name="A", student_number="1", points=10, class_id=school_class.id)

    with pytest.raises(ValidationError):
        ledger_store.update_student(db, student.id, StudentUpdateRequest(points=-5))
    with pytest.raises(ValidationError):
        ledger_store.update_student(db, student.id, StudentUpdateRequest(name=None))
    db.expire_all()
    assert ledger_store.get_student(db, student.id).points == 10


def test_move_student_between_classes_updates_counts(db):
    first = ledger_store.create_class(db, name="7A")
    second = ledger_store.create_class(db, name="7B")
    student = ledger_store.create_student(db, name="A", student_number="1", points=0, class_id=first.id)

    moved = ledger_store.update_student(db, student.id, StudentUpdateRequest(class_id=second.id))
    db.expire_all()
    assert moved.class_id == second.id
    assert moved.class_name == "7B"
    assert ledger_store.get_class(db, first.id).student_count == 0
    assert ledger_store.get_class(db, second.id).student_count == 1


def test_move_student_to_unknown_class_changes_nothing(db):
    school_class = ledger_store.create_class(db, name="7A")
    student = ledger_store.create_student(db, name="A", student_number="1", points=0, class_id=school_class.id)

    with pytest.raises(NotFound):
        ledger_store.update_student(db, student.id, StudentUpdateRequest(name="B", class_id="missing"))
    db.expire_all()
    reloaded = ledger_store.get_student(db, student.id)
    assert reloaded.name == "A"
    assert reloaded.class_id == school_class.id


def test_update_product_fields(db):
    school_class = ledger_store.create_class(db, name="7A")
    product = ledger_store.create_product(db, name="Pen", points=10, stock=5, class_id=school_class.id)

    updated = ledger_store.update_product(db, product.id, ProductUpdateRequest(stock=7))
    assert (updated.name, updated.points, updated.stock) == ("Pen", 10, 7)
    with pytest.raises(ValidationError):
        ledger_store.update_product(db, product.id, ProductUpdateRequest(points=-1))


def test_adjust_points_clamps_at_zero(db):
    school_class = ledger_store.create_class(db, name="7A")
    student = ledger_store.create_student(db, name="A", student_number="1", points=10, class_id=school_class.id)

    assert ledger_store.adjust_student_points(db, student.id, 5).points == 15
    assert ledger_store.adjust_student_points(db, student.id, -100).points == 0


def test_list_students_sorted_by_number(db):
    school_class = ledger_store.create_class(db, name="7A")
    for name, number in (("C", "10"), ("A", "2"), ("B", "1")):
        ledger_store.create_student(db, name=name, student_number=number, points=0, class_id=school_class.id)

    names = [student.name for student in ledger_store.list_students(db, class_id=school_class.id)]
    assert names == ["B", "A", "C"]


def test_list_students_tolerates_non_decimal_numbers(db):
    school_class = ledger_store.create_class(db, name="7A")
    for name, number in (("Sup", "\N{SUPERSCRIPT TWO}"), ("Ten", "10"), ("Two", "2")):
        ledger_store.create_student(db, name=name, student_number=number, points=0, class_id=school_class.id)

    names = [student.name for student in ledger_store.list_students(db, class_id=school_class.id)]
    assert names == ["Two", "Ten", "Sup"]


def test_list_products_unknown_class(db):
    with pytest.raises(NotFound):
        ledger_store.list_products(db, "missing")


def test_delete_class_cascades(db, session_factory):
    school_class = ledger_store.create_class(db, name="7A")
    other_class = ledger_store.create_class(db, name="7B")
    students = [
        ledger_store.create_student(db, name=f"S{i}", student_number=str(i), points=500, class_id=school_class.id)
        for i in range(3)
    ]
    products = [
        ledger_store.create_product(db, name=f"P{i}", points=10, stock=10, class_id=school_class.id)
        for i in range(2)
    ]
    records = [exchange.purchase(db, students[i].id, products[i % 2].id, 1) for i in range(3)]
    survivor = ledger_store.create_student(db, name="Z", student_number="9", points=0, class_id=other_class.id)

    ledger_store.delete_class(db, school_class.id)

    with session_factory() as session:
        assert session.get(SchoolClass, school_class.id) is None
        for student in students:
            assert session.get(Student, student.id) is None
        for product in products:
            assert session.get(Product, product.id) is None
        for record in records:
            assert session.get(PurchaseRecord, record.id) is None
        assert session.get(Student, survivor.id) is not None

    db.expire_all()
    for student in students:
        with pytest.raises(NotFound):
            ledger_store.get_student(db, student.id)
    for product in products:
        with pytest.raises(NotFound):
            ledger_store.get_product(db, product.id)
    with pytest.raises(NotFound):
        ledger_store.get_class(db, school_class.id)


def test_delete_unknown_class(db):
    with pytest.raises(NotFound):
        ledger_store.delete_class(db, "missing")


def test_delete_product_keeps_history(db, shop):
    school_class, student, product = shop
    record = exchange.purchase(db, student.id, product.id, 1)

    ledger_store.delete_product(db, product.id)
    db.expire_all()
    kept = db.get(PurchaseRecord, record.id)
    assert kept is not None
    assert kept.product_name == "Notebook"


def test_delete_student_moved_by_another_session_is_a_conflict(db, session_factory):
    first = ledger_store.create_class(db, name="7A")
    second = ledger_store.create_class(db, name="7B")
    student = ledger_store.create_student(db, name="A", student_number="1", points=0, class_id=first.id)

    # db still holds the pre-move row in its identity map
    with session_factory() as other:
        ledger_store.update_student(other, student.id, StudentUpdateRequest(class_id=second.id))

    with pytest.raises(ConcurrencyConflict):
        ledger_store.delete_student(db, student.id)

    db.expire_all()
    assert ledger_store.get_student(db, student.id).class_id == second.id
    assert ledger_store.get_class(db, first.id).student_count == 0
    assert ledger_store.get_class(db, second.id).student_count == 1
