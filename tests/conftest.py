import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from travel_api.core.database import Database  # noqa: E402
from travel_api.domain import UserRole  # noqa: E402
from travel_api.main import create_app  # noqa: E402
from travel_api.repositories.tourists import SqlTouristRepository  # noqa: E402
from travel_api.repositories.users import SqlUserRepository  # noqa: E402
from travel_api.schemas.tourist import TouristCreate  # noqa: E402
from travel_api.services.credentials import CredentialStore  # noqa: E402
from travel_api.services.tokens import TokenService  # noqa: E402

TEST_SECRET = "test-secret"
PASSWORD = "secret123"


@pytest.fixture
def database():
    database = Database.from_url("sqlite+pysqlite:///:memory:")
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def token_service():
    return TokenService(TEST_SECRET)


@pytest.fixture
def client(database, token_service):
    app = create_app(database=database, token_service=token_service, rate_limit_enabled=False)
    return TestClient(app)


@pytest.fixture
def credentials(db):
    return CredentialStore(SqlUserRepository(db))


@pytest.fixture
def employee(credentials):
    return credentials.register(
        email="agent@agency.com",
        password=PASSWORD,
        first_name="Rina",
        last_name="Agent",
        role=UserRole.EMPLOYEE,
    )


@pytest.fixture
def make_tourist(db, credentials):
    """Create a tourist login plus its linked tourist profile."""
    tourists = SqlTouristRepository(db)

    def _make(name: str):
        user = credentials.register(
            email=f"{name}@travel.com",
            password=PASSWORD,
            first_name=name.title(),
            last_name="Tourist",
            role=UserRole.TOURIST,
        )
        profile = tourists.create(
            TouristCreate(
                first_name=name.title(),
                last_name="Tourist",
                email=f"{name}@travel.com",
                date_of_birth=date(1990, 5, 17),
                nationality="Indonesia",
                user_id=user.id,
            )
        )
        return user, profile

    return _make


@pytest.fixture
def auth_headers(token_service):
    def _headers(user):
        return {"Authorization": f"Bearer {token_service.issue(user.id, user.email, user.role)}"}

    return _headers
