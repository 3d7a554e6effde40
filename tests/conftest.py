import pytest
from fastapi.testclient import TestClient

from expense_tracker.config import load_config
from webapp.main import create_app

SECRET = "test-secret-0123456789abcdef0123456789"
PREFIX = "/api/v1"


@pytest.fixture
def config(tmp_path):
    cfg = load_config(environ={})
    cfg.update(
        db_path=str(tmp_path / "tracker.db"),
        jwt_secret=SECRET,
        bcrypt_rounds=4,
        upload_dir=str(tmp_path / "uploads"),
    )
    return cfg


@pytest.fixture
def client(config):
    return TestClient(create_app(config))


def _register(client, email="a@x.com", password="pw12345678", full_name="Ada Lovelace"):
    return client.post(
        f"{PREFIX}/auth/register",
        json={"fullName": full_name, "email": email, "password": password},
    )


@pytest.fixture
def register_user(client):
    def register(**kwargs):
        return _register(client, **kwargs)
    return register


@pytest.fixture
def auth_headers(client):
    res = _register(client)
    assert res.status_code == 201, res.text
    return {"Authorization": f"Bearer {res.json()['token']}"}
