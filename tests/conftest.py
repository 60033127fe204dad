# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Every test gets a fresh in-memory SQLite database wired into the app through
# dependency_overrides, and an empty response cache.
# =============================================================================

import os

# Must happen before bilemo.core.config loads the settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from bilemo.core.cache import cache
from bilemo.core.security import create_access_token, get_password_hash
from bilemo.db.session import get_db
from bilemo.main import app
from bilemo.models import Client, ClientRole, Product, User

PASSWORD = "password"


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="api")
def api_fixture(session: Session):
    def get_db_override():
        yield session

    app.dependency_overrides[get_db] = get_db_override
    cache.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()
    cache.clear()


def _make_client(session: Session, name: str, roles) -> Client:
    client = Client(
        name=name,
        email=f"{name}@apibilemo.com",
        password=get_password_hash(PASSWORD),
        roles=roles,
    )
    session.add(client)
    session.commit()
    session.refresh(client)
    return client


@pytest.fixture
def admin(session: Session) -> Client:
    return _make_client(session, "admin", [ClientRole.ADMIN])


@pytest.fixture
def client_one(session: Session) -> Client:
    return _make_client(session, "client1", [ClientRole.USER])


@pytest.fixture
def client_two(session: Session) -> Client:
    return _make_client(session, "client2", [ClientRole.USER])


@pytest.fixture
def auth_headers():
    """Build bearer headers for a client, optionally asking for an API version."""
    def _auth_headers(client: Client, version=None) -> dict:
        headers = {"Authorization": f"Bearer {create_access_token(subject=client.email)}"}
        if version is not None:
            headers["Accept"] = f"application/json; version={version}"
        return headers
    return _auth_headers


@pytest.fixture
def make_user(session: Session):
    def _make_user(owner: Client, username: str, comment: str = None) -> User:
        user = User(username=username, comment=comment, client_id=owner.id)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_product(session: Session):
    def _make_product(title: str, price: float = 10.0, **fields) -> Product:
        product = Product(title=title, price=price, **fields)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product
    return _make_product
