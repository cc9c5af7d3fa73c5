from datetime import timedelta
from uuid import uuid4

import pytest
from jose import jwt

from tasky import errors
from tasky.core import jwt as tasky_jwt
from tasky.core.config import settings
from tasky.core.security import hash_password, verify_password
from tasky.services import credential_store, session_issuer


def _new_user(db, username="alice", password="secret123"):
    return credential_store.create_user(
        db,
        {
            "first_name": "Alice",
            "last_name": "Liddell",
            "username": username,
            "email_address": f"{username}@example.com",
            "password": password,
        },
    )


def test_hash_password_is_salted_and_verifiable():
    first = hash_password("secret123")
    second = hash_password("secret123")

    assert first != "secret123"
    assert first != second
    assert verify_password("secret123", first)
    assert not verify_password("secret124", first)


def test_verify_password_tolerates_garbage_hash():
    assert verify_password("secret123", "not-a-bcrypt-hash") is False


def test_login_returns_token_bound_to_user(db):
    user = _new_user(db)

    token, logged_in = session_issuer.login(db, "alice@example.com", "secret123")

    assert logged_in.id == user.id
    assert session_issuer.verify(token) == user.id
    claims = jwt.get_unverified_claims(token)
    assert claims["typ"] == "access"
    # seven days, give or take a second of clock drift
    assert abs((claims["exp"] - claims["iat"]) - 7 * 24 * 3600) <= 1


@pytest.mark.parametrize(
    ("identifier", "password"),
    [("alice", "wrong-password"), ("nobody", "secret123")],
)
def test_login_failures_are_indistinguishable(db, identifier, password):
    _new_user(db)

    with pytest.raises(errors.AuthError) as excinfo:
        session_issuer.login(db, identifier, password)

    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Invalid credentials"


def test_login_ignores_soft_deleted_users(db):
    user = _new_user(db)
    user.is_deleted = True
    db.add(user)
    db.commit()

    with pytest.raises(errors.AuthError):
        session_issuer.login(db, "alice", "secret123")


@pytest.mark.parametrize("token", [None, "", "not.a.jwt", "abc"])
def test_verify_rejects_missing_or_malformed(token):
    with pytest.raises(errors.AuthError):
        session_issuer.verify(token)


def test_verify_rejects_expired_token():
    token = tasky_jwt.create_access_token(uuid4(), expires_delta=timedelta(seconds=-5))

    with pytest.raises(errors.AuthError):
        session_issuer.verify(token)


def test_verify_rejects_foreign_signature():
    token = jwt.encode(
        {"sub": str(uuid4()), "typ": "access", "exp": 9999999999},
        "some-other-secret",
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(errors.AuthError):
        session_issuer.verify(token)


def test_verify_rejects_wrong_token_type():
    token = jwt.encode(
        {"sub": str(uuid4()), "typ": "refresh", "exp": 9999999999},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(errors.AuthError):
        session_issuer.verify(token)


def test_verify_rejects_non_uuid_subject():
    token = jwt.encode(
        {"sub": "alice", "typ": "access", "exp": 9999999999},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(errors.AuthError):
        session_issuer.verify(token)
