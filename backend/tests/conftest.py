import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from main import app
from database import Base, get_db
from models import User
from auth import get_password_hash, create_access_token
from utils.rate_limiter import auth_rate_limiter, profile_update_rate_limiter

# Setup in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def client(db_session):
    """Create a FastAPI TestClient with overridden database dependency."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_db, None)

def make_user(db_session, email: str, full_name: str) -> User:
    user = User(
        email=email,
        hashed_password=get_password_hash("password123"),
        full_name=full_name,
        is_active=True
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user

def make_auth_headers(user: User) -> dict:
    access_token = create_access_token(data={"sub": user.email})
    return {"Authorization": f"Bearer {access_token}"}

@pytest.fixture
def test_user(db_session):
    """Create a test user and return the user object."""
    return make_user(db_session, "test@example.com", "Test User")

@pytest.fixture
def auth_headers(test_user):
    """Return authorization headers for the test user."""
    return make_auth_headers(test_user)

@pytest.fixture
def group_with_members(client, auth_headers, db_session, test_user):
    """A group owned by test_user with two more members. Returns (group_id, [A, B, C])."""
    group_resp = client.post("/groups", headers=auth_headers, json={"name": "Trip", "currency": "USD"})
    group_id = group_resp.json()["id"]

    bob = make_user(db_session, "bob@example.com", "Bob")
    carol = make_user(db_session, "carol@example.com", "Carol")
    for email in ("bob@example.com", "carol@example.com"):
        client.post(f"/groups/{group_id}/members", headers=auth_headers, json={"email": email})

    return group_id, [test_user, bob, carol]

@pytest.fixture(autouse=True)
def disable_rate_limits():
    """Disable rate limits during testing using dependency overrides."""
    async def mock_rate_limit():
        return True

    limiters = (auth_rate_limiter, profile_update_rate_limiter)
    for limiter in limiters:
        app.dependency_overrides[limiter] = mock_rate_limit
    yield
    for limiter in limiters:
        app.dependency_overrides.pop(limiter, None)
