from sqlmodel import SQLModel, create_engine, Session
from bilemo.core.config import settings

_engine = None


def get_engine():
    global _engine

    if _engine is not None:
        return _engine

    # Fallback to a local SQLite file when no DATABASE_URL is configured
    db_url = settings.DATABASE_URL or "sqlite:///./bilemo.db"

    # SQLite fix for multithreading
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}

    _engine = create_engine(db_url, connect_args=connect_args, pool_pre_ping=True)
    return _engine


engine = get_engine()


def init_db() -> None:
    """Create all tables registered on SQLModel.metadata."""
    import bilemo.models  # noqa: F401  (registers the tables)

    SQLModel.metadata.create_all(engine)


def get_db():
    with Session(engine) as session:
        yield session
