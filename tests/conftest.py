import pytest

from app import create_app
from models import db
from tests.fakes import FakeAIClient


@pytest.fixture
def app(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
            "GEMINI_API_KEY": "",
            "EVALUATOR_MODE": "auto",
            "SEED_QUESTION_BANK": True,
        }
    )
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def use_ai(app):
    def install(*responses):
        fake = FakeAIClient(*responses)
        app.extensions["ai_client"] = fake
        return fake

    return install


def _signup(client, email, password="secret123", name=None):
    response = client.post("/api/auth/signup", json={"email": email, "password": password, "name": name})
    assert response.status_code == 201, response.get_json()
    return response.get_json()


@pytest.fixture
def signup(client):
    return lambda email, **kwargs: _signup(client, email, **kwargs)


@pytest.fixture
def auth_headers(signup):
    data = signup("alice@example.com", name="Alice")
    return {"Authorization": f"Bearer {data['token']}"}
