"""Password hashing and token issuing."""

import base64
from types import SimpleNamespace

import jwt
import pytest

from services.exceptions import InvalidInput, Unauthorized
from utils.security import (
    TokenIssuer,
    generate_refresh_token,
    hash_password,
    verify_password,
)

SECRET = "unit-test-secret-with-enough-length-for-hs256"


@pytest.fixture
def issuer():
    return TokenIssuer(SECRET, issuer="todo-list-api", audience="todo-list-clients", expires_minutes=30)


@pytest.fixture
def ana():
    return SimpleNamespace(id=7, name="Ana", email="ana@example.com")


def test_hash_then_verify():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed) is True


def test_verify_rejects_other_password():
    assert verify_password("correct horse", hash_password("battery staple")) is False


def test_hash_is_salted():
    assert hash_password("same") != hash_password("same")


def test_verify_malformed_hash_returns_false():
    assert verify_password("whatever", "not-an-argon2-hash") is False


@pytest.mark.parametrize("blank", ["", "   "])
def test_blank_password_is_invalid(blank):
    with pytest.raises(InvalidInput):
        hash_password(blank)
    with pytest.raises(InvalidInput):
        verify_password(blank, hash_password("x"))


def test_access_token_claims(issuer, ana):
    token = issuer.issue_access_token(ana)

    claims = issuer.decode_access_token(token)
    assert claims.user_id == 7
    assert claims.name == "Ana"
    assert claims.email == "ana@example.com"
    assert claims.jti

    raw = jwt.decode(token, SECRET, algorithms=["HS256"], audience="todo-list-clients")
    assert raw["iss"] == "todo-list-api"
    assert raw["exp"] - raw["iat"] == 30 * 60


def test_each_access_token_has_unique_jti(issuer, ana):
    first = issuer.decode_access_token(issuer.issue_access_token(ana))
    second = issuer.decode_access_token(issuer.issue_access_token(ana))
    assert first.jti != second.jti


@pytest.mark.parametrize("user", [
    None,
    SimpleNamespace(id=1, name="", email="a@example.com"),
    SimpleNamespace(id=1, name="Ana", email=""),
])
def test_access_token_requires_name_and_email(issuer, user):
    with pytest.raises(InvalidInput):
        issuer.issue_access_token(user)


def test_expired_access_token_is_rejected(ana):
    expired = TokenIssuer(SECRET, "todo-list-api", "todo-list-clients", expires_minutes=-1)
    with pytest.raises(Unauthorized, match="expired"):
        expired.decode_access_token(expired.issue_access_token(ana))


def test_wrong_audience_or_secret_is_rejected(issuer, ana):
    other_audience = TokenIssuer(SECRET, "todo-list-api", "someone-else")
    with pytest.raises(Unauthorized):
        issuer.decode_access_token(other_audience.issue_access_token(ana))

    other_secret = TokenIssuer("another-secret-with-enough-length-for-hs256", "todo-list-api", "todo-list-clients")
    with pytest.raises(Unauthorized):
        issuer.decode_access_token(other_secret.issue_access_token(ana))


def test_refresh_tokens_are_random_and_opaque():
    tokens = {generate_refresh_token() for _ in range(50)}
    assert len(tokens) == 50
    sample = tokens.pop()
    assert len(base64.urlsafe_b64decode(sample)) == 64


def test_invalid_token_message_hides_decoder_detail(issuer, ana):
    other_audience = TokenIssuer(SECRET, "todo-list-api", "someone-else")
    with pytest.raises(Unauthorized) as exc:
        issuer.decode_access_token(other_audience.issue_access_token(ana))
    assert exc.value.message == "Invalid token"

    with pytest.raises(Unauthorized) as exc:
        issuer.decode_access_token("not.a.jwt")
    assert exc.value.message == "Invalid token"


def test_non_numeric_subject_is_rejected(issuer):
    token = jwt.encode(
        {"sub": "ana", "exp": 4102444800, "iss": "todo-list-api", "aud": "todo-list-clients"},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(Unauthorized) as exc:
        issuer.decode_access_token(token)
    assert exc.value.message == "Invalid token"
