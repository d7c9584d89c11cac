import os

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from backend.app.config import settings

DATABASE_URL = settings.DATABASE_URL


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True, "pool_recycle": 1800}
    kwargs = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
        # Every session has to see the same in-memory database
        kwargs["poolclass"] = StaticPool
    else:
        # Make sure folder exists for database
        path = url.split("///", 1)[-1]
        folder = os.path.dirname(path)
        if folder:
            os.makedirs(folder, exist_ok=True)
    return kwargs


# Create engine and session
engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables that don't exist yet."""
    Base.metadata.create_all(bind=engine)


# Import models *AFTER* Base is defined so they register on its metadata
import backend.app.models.transaction_model  # noqa: E402,F401
import backend.app.models.budget_model  # noqa: E402,F401
import backend.app.models.category_model  # noqa: E402,F401
