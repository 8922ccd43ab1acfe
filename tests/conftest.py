import json

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app
from models.request import Item, Request
from models.users import User
from utils.tokenJWT import create_access_token

ADMIN_EMAIL = "admin@logistics.com"
ADMIN_PASSWORD = "s3cret-admin"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        SECRET_KEY="test-secret",
        MAX_FILE_SIZE=1024,
        PUBLIC_BASE_URL="http://testserver",
        ADMIN_EMAIL=ADMIN_EMAIL,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        ADMIN_NAME="Admin",
        ENVIRONMENT="test",
    )


@pytest.fixture
def app(settings):
    application = create_app(settings)
    yield application
    application.state.context.engine.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def ctx(app):
    return app.state.context


@pytest.fixture
def db(ctx):
    session = ctx.session_factory()
    yield session
    session.close()


@pytest.fixture
def admin_token(client):
    resp = client.post("/api/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return resp.json()["token"]


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def user_headers(settings):
    token = create_access_token(settings, 999, "USER")
    return {"Authorization": f"Bearer {token}"}


def make_item(**overrides):
    item = {
        "name": "Laptop",
        "description": "x",
        "quantity": "2",
        "price": "50.5",
        "source": "VendorA",
    }
    item.update(overrides)
    return item


def submit(client, items, files=None, name="Alice", email="alice@x.com", team="Finance"):
    data = {"name": name, "email": email, "teamName": team, "items": json.dumps(items)}
    return client.post("/api/requests", data=data, files=files or None)


def counts(db):
    db.expire_all()
    return (
        db.query(User).count(),
        db.query(Request).count(),
        db.query(Item).count(),
    )
