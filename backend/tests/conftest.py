import os

# Must be set before backend.app is imported anywhere
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_JSON", "0")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from backend.app import db as app_db  # noqa: E402


@pytest.fixture
def db_session():
    """
    Session on the same in-memory engine the app uses, with a fresh schema
    for every test.
    """
    app_db.Base.metadata.drop_all(bind=app_db.engine)
    app_db.Base.metadata.create_all(bind=app_db.engine)
    db = app_db.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(db_session):
    from backend.app.main import app  # local import so the env tweaks above apply

    with TestClient(app) as c:
        yield c
