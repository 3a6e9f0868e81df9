"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Tables are created before each test and
dropped after it, so no test data persists.
"""

import os

# Configure the application before it is imported: SQLite,
# no background scheduler, no seeding, email disabled.
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["EXTERNAL_API_KEY"] = "test-api-key"
os.environ["SMTP_HOST"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from grc_backoffice.config import Settings, get_settings
from grc_backoffice.main import app
from grc_backoffice.models import Base, User, get_db
from grc_backoffice.seed import seed_control_library, seed_users
from grc_backoffice.services.auth_service import sign_jwt
from grc_backoffice.services.email_service import EmailService


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """
    Create all tables before each test, drop them after.

    autouse=True means every test gets this automatically.
    This ensures each test starts with a clean database.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def session_factory():
    """Session factory for code that opens its own sessions (scheduler jobs)."""
    return TestSessionLocal


@pytest.fixture
def settings():
    return Settings(SMTP_HOST="", JWT_SECRET="test-secret")


@pytest.fixture
def email_service(settings):
    """A disabled email dispatcher: sends are logged and reported as success."""
    return EmailService(settings)


@pytest.fixture
def users(db_session) -> dict[str, User]:
    """The three seed users, keyed by short name."""
    seed_users(db_session)
    db_session.commit()
    by_email = {u.email: u for u in db_session.execute(select(User)).scalars()}
    return {
        "admin": by_email["admin@company.com"],
        "user": by_email["user@company.com"],
        "john": by_email["john.doe@company.com"],
    }


@pytest.fixture
def library(db_session):
    seed_control_library(db_session)
    db_session.commit()


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    We override the get_db dependency so the FastAPI app
    uses our test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {sign_jwt(user, get_settings())}"}


@pytest.fixture
def admin_headers(users):
    return bearer(users["admin"])


@pytest.fixture
def user_headers(users):
    return bearer(users["user"])


@pytest.fixture
def john_headers(users):
    return bearer(users["john"])


@pytest.fixture
def api_key_headers():
    return {"X-API-Key": "test-api-key"}
