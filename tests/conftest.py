import os

# Cheap hashing and no background sweep during tests; must be set before app imports
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("LIMITER_ENABLED", "false")

import base64
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
import app.models  # noqa: F401
from app.main import create_app
from app.middleware.rate_limit import ClientRateLimiter
from app.services.base import Models
from app.services.memory_store import DEMO_PASSWORD, seed_demo_data

SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def basic_auth(name: str, password: str) -> dict:
    token = base64.b64encode(f"{name}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def sql_models():
    """SQLAlchemy stores over a clean in-memory SQLite database."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield Models.from_session_factory(TestingSessionLocal)
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def memory_models():
    return Models.in_memory()


@pytest.fixture(params=["sql", "memory"])
def models(request):
    """Each store test runs against both backends."""
    return request.getfixturevalue(f"{request.param}_models")


@pytest.fixture
def seeded_models(models):
    """Accounts user/admin, Mock Actor 1 and 2, and Mock Movie 1 starring both."""
    seed_demo_data(models)
    return models


@pytest.fixture
def client(seeded_models):
    """FastAPI test client over seeded stores, rate limiting off."""
    app = create_app(models=seeded_models, limiter=ClientRateLimiter(enabled=False))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user_headers():
    return basic_auth("user", DEMO_PASSWORD)


@pytest.fixture
def admin_headers():
    return basic_auth("admin", DEMO_PASSWORD)


@pytest.fixture
def auth_headers():
    """Factory for Basic auth headers of arbitrary credentials."""
    return basic_auth
