import pytest
from fastapi.testclient import TestClient

from ebookstore import auth, models
from ebookstore.auth import create_token
from ebookstore.config import Settings
from ebookstore.crud import users as crud_users
from ebookstore.main import create_app

PASSWORD = "Secret123!"


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    monkeypatch.setattr(auth, "PASSWORD_HASH_METHOD", "pbkdf2:sha256:1000")


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", jwt_secret="test-secret", allowed_origins=["*"])


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(app, client):
    """A fresh session per call, so assertions never read a stale identity map."""
    sessions = []

    def factory():
        session = app.state.database.session()
        sessions.append(session)
        return session

    yield factory
    for session in sessions:
        session.close()


@pytest.fixture
def make_user(app, client, settings):
    counter = {"n": 0}

    def factory(role_id=models.ROLE_CUSTOMER, email=None, name="Test User"):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        session = app.state.database.session()
        try:
            user = crud_users.create_user(session, name=name, email=email, password=PASSWORD, role_id=role_id)
            token = create_token(user, settings)
            return {
                "id": user.id,
                "email": user.email,
                "token": token,
                "headers": {"Authorization": f"Bearer {token}"},
            }
        finally:
            session.close()

    return factory


@pytest.fixture
def customer(make_user):
    return make_user(models.ROLE_CUSTOMER)


@pytest.fixture
def seller(make_user):
    return make_user(models.ROLE_SELLER)


@pytest.fixture
def admin(make_user):
    return make_user(models.ROLE_ADMIN)


@pytest.fixture
def make_ebook(client):
    def factory(owner, name="Python Basics", price=10, category_id=None, description="An ebook"):
        payload = {"name": name, "price": price, "description": description}
        if category_id is not None:
            payload["category_id"] = category_id
        response = client.post("/api/ebooks", json=payload, headers=owner["headers"])
        assert response.status_code == 201, response.text
        return response.json()["ebook"]

    return factory


@pytest.fixture
def make_address(client):
    def factory(owner, is_default=False, street="1 Main St"):
        payload = {
            "street": street,
            "city": "Springfield",
            "state": "IL",
            "postal_code": "62701",
            "country": "US",
            "is_default": is_default,
        }
        response = client.post("/api/addresses", json=payload, headers=owner["headers"])
        assert response.status_code == 201, response.text
        return response.json()["address"]

    return factory
