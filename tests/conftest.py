import pytest

from evoting import create_app
from evoting.config import Config
from evoting.extensions import db
from evoting.models.candidate import Candidate
from evoting.services import settings_store, voter_registry

ADMIN_PASSWORD = "osis-test-password"


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-key-that-is-long-enough"
    ADMIN_PASSWORD = ADMIN_PASSWORD
    ADMIN_PASSWORD_HASH = None
    ALLOW_SELF_SERVICE_VOTERS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"check_same_thread": False, "timeout": 30}}


@pytest.fixture
def app(tmp_path):
    # File database so concurrent tests get one connection per thread
    config = type("PerTestConfig", (TestConfig,), {
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'evoting-test.db'}",
    })
    app = create_app(config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers(client):
    r = client.post("/api/auth/login", json={"password": ADMIN_PASSWORD})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.get_json()['access_token']}"}


@pytest.fixture
def make_candidate(app):
    def _make(number, name=None, votes=0):
        candidate = Candidate(
            number=number,
            name=name or f"Candidate {number}",
            class_name="XI IPA 1",
            vision="A cleaner and greener school",
            mission="Weekly clean-up days for every class",
            photo_url="data:image/png;base64,AAAA",
            votes=votes,
        )
        db.session.add(candidate)
        db.session.commit()
        return candidate
    return _make


@pytest.fixture
def open_voting(app):
    settings_store.set_voting_status(True)


@pytest.fixture
def register(app):
    def _register(*identifiers):
        return voter_registry.register_batch(identifiers)
    return _register
