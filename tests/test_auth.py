from datetime import timedelta

from jose import jwt

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, make_item, submit
from models.log import Log
from utils.bootstrap import ensure_admin
from utils.tokenJWT import create_access_token, create_file_token


def test_login_returns_token_and_user(client):
    resp = client.post("/api/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    body = resp.json()
    assert body["user"]["email"] == ADMIN_EMAIL
    assert body["user"]["role"] == "ADMIN"
    assert "password_hash" not in body["user"]
    assert body["token"]


def test_login_token_carries_role_and_day_expiry(client, settings):
    resp = client.post("/api/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    claims = jwt.get_unverified_claims(resp.json()["token"])
    assert claims["role"] == "ADMIN"
    assert settings.ACCESS_TOKEN_EXPIRE_MINUTES == 24 * 60


def test_login_bad_password(client, db):
    resp = client.post("/api/login", json={"email": ADMIN_EMAIL, "password": "wrong"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}
    assert db.query(Log).filter(Log.action == "LOGIN", Log.status == "FAIL").count() == 1


def test_requesters_cannot_log_in(client):
    submit(client, [make_item()])
    resp = client.post("/api/login", json={"email": "alice@x.com", "password": ""})
    assert resp.status_code == 401


def test_register_creates_admin(client):
    payload = {"email": "boss@x.com", "password": "pw", "name": "Boss", "teamName": "Ops"}
    resp = client.post("/api/register", json=payload)
    assert resp.status_code == 200
    assert resp.json()["email"] == "boss@x.com"

    login = client.post("/api/login", json={"email": "boss@x.com", "password": "pw"})
    assert login.json()["user"]["role"] == "ADMIN"


def test_register_duplicate_email(client):
    payload = {"email": ADMIN_EMAIL, "password": "pw", "name": "Again", "teamName": "Ops"}
    resp = client.post("/api/register", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "User already exists"}


def test_register_rejects_unknown_fields(client):
    payload = {"email": "x@x.com", "password": "pw", "name": "X", "role": "ADMIN", "extra": 1}
    resp = client.post("/api/register", json=payload)
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_expired_token_is_forbidden(client, settings):
    token = create_access_token(settings, 1, "ADMIN", expires_delta=timedelta(hours=-25))
    resp = client.get("/api/requests", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_token_signed_with_other_key_is_forbidden(client):
    token = jwt.encode({"sub": "1", "role": "ADMIN", "scope": "access"}, "other-key", algorithm="HS256")
    resp = client.get("/api/requests", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_file_token_is_not_an_access_token(client, settings):
    token = create_file_token(settings, "anything.pdf")
    resp = client.get("/api/requests", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_bootstrap_rotates_admin_password(ctx, client):
    ctx.settings.ADMIN_PASSWORD = "rotated"
    ensure_admin(ctx)
    old = client.post("/api/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    new = client.post("/api/login", json={"email": ADMIN_EMAIL, "password": "rotated"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_seed_creates_admin(settings, tmp_path):
    from context import build_context
    from models.users import User
    from seed import seed

    settings.DATABASE_URL = f"sqlite:///{tmp_path / 'seeded.db'}"
    seed(settings)

    ctx = build_context(settings)
    with ctx.session_factory() as db:
        admin = db.query(User).filter(User.email == ADMIN_EMAIL).one()
        assert admin.role == "ADMIN"
        assert admin.password_hash
    ctx.engine.dispose()
