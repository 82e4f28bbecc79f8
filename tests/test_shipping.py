import pytest

from app.core.exceptions import InvalidShippingStatusTransition, NotFound, ValidationError
from app.models import PurchaseRecord
from app.services import exchange, shipping
from tests.conftest import ledger_snapshot


@pytest.fixture()
def record(db, shop):
    _, student, product = shop
    return exchange.purchase(db, student.id, product.id, 1)


def _stored(session_factory, record_id):
    with session_factory() as session:
        row = session.get(PurchaseRecord, record_id)
        return (row.shipping_status, row.quantity, row.points, row.product_name, row.student_name)


def test_full_lifecycle(db, session_factory, record):
    shipping.update_shipping_status(db, record.id, "shipped")
    assert _stored(session_factory, record.id)[0] == "shipped"

    shipping.update_shipping_status(db, record.id, "delivered")
    assert _stored(session_factory, record.id) == ("delivered", 1, 50, "Notebook", "Alice")


@pytest.mark.parametrize(
    ("path", "illegal"),
    [
        ([], "delivered"),
        ([], "pending"),
        (["shipped"], "pending"),
        (["shipped"], "shipped"),
        (["shipped", "delivered"], "shipped"),
        (["shipped", "delivered"], "pending"),
        (["shipped", "delivered"], "delivered"),
    ],
)
def test_illegal_transitions_leave_record_untouched(db, session_factory, record, path, illegal):
    for status in path:
        shipping.update_shipping_status(db, record.id, status)

    before = ledger_snapshot(session_factory)
    with pytest.raises(InvalidShippingStatusTransition):
        shipping.update_shipping_status(db, record.id, illegal)
    assert ledger_snapshot(session_factory) == before


def test_unknown_status_value(db, record):
    with pytest.raises(ValidationError):
        shipping.update_shipping_status(db, record.id, "lost")


def test_unknown_record(db):
    with pytest.raises(NotFound):
        shipping.update_shipping_status(db, "missing", "shipped")


def test_can_transition_table():
    assert shipping.can_transition("pending", "shipped")
    assert shipping.can_transition("shipped", "delivered")
    assert not shipping.can_transition("pending", "delivered")
    assert not shipping.can_transition("delivered", "pending")
