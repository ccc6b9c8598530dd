from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool
import pytest

from guardline.main import app
from guardline.database import get_session
from guardline.users.models import UserRole
from guardline.users.schemas import UserCreate
from guardline.users.service import create_user

PASSWORD = "correct-horse-battery"

@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session

@pytest.fixture(name="client")
def client_fixture(session: Session):
    def get_session_override():
        return session
    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()

@pytest.fixture(name="login_as")
def login_as_fixture(client: TestClient, session: Session):
    """Create a user with ``role`` and return it with bearer headers."""
    def _login_as(role: UserRole, email: str = None):
        email = email or f"{role.value}@guardline.io"
        user = create_user(session, UserCreate(email=email, password=PASSWORD), role=role)
        response = client.post("/api/auth/login", data={"username": email, "password": PASSWORD})
        assert response.status_code == 200
        return user, {"Authorization": f"Bearer {response.json()['access_token']}"}
    return _login_as
