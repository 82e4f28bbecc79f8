from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select


@pytest.fixture()
def session_factory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_file.as_posix()}")
    monkeypatch.setenv("LOCK_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("SEED_DEMO_DATA", "false")

    from app.core.config import clear_settings_cache
    from app.db.base import Base
    from app.db.session import get_engine, get_session_factory, reset_engine
    import app.models  # noqa: F401

    clear_settings_cache()
    reset_engine()
    Base.metadata.create_all(bind=get_engine())

    yield get_session_factory()

    Base.metadata.drop_all(bind=get_engine())
    reset_engine()
    clear_settings_cache()


@pytest.fixture()
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture()
def app_client(session_factory):
    from app.main import create_app

    app = create_app()
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def shop(db):
    """One class with a stocked product and a student holding 120 points."""
    from app.services import ledger_store

    school_class = ledger_store.create_class(db, name="7A", description="homeroom")
    student = ledger_store.create_student(db, name="Alice", student_number="1", points=120, class_id=school_class.id)
    product = ledger_store.create_product(db, name="Notebook", points=50, stock=3, class_id=school_class.id)
    return school_class, student, product


def ledger_snapshot(session_factory) -> dict[str, list[tuple]]:
    """Every row of every ledger table, read through a fresh session."""
    from app.models import Product, PurchaseRecord, SchoolClass, Student

    snapshot = {}
    with session_factory() as session:
        for model in (SchoolClass, Student, Product, PurchaseRecord):
            columns = [column.key for column in model.__table__.columns]
            rows = session.scalars(select(model).order_by(model.id)).all()
            snapshot[model.__tablename__] = [tuple(getattr(row, column) for column in columns) for row in rows]
    return snapshot
