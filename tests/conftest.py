import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend.database import Base  # noqa: E402
from backend.main import app  # noqa: E402
from backend.models.appointment import Appointment  # noqa: E402
from backend.routes.appointment_routes import get_db  # noqa: E402


@pytest.fixture(autouse=True)
def skip_schema_check(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('backend.routes.appointment_routes.ensure_database_ready', lambda: None)


@pytest.fixture
def session_factory():
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=[Appointment.__table__])
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine, tables=[Appointment.__table__])
        engine.dispose()


@pytest.fixture
def appointment_db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)
