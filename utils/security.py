"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT access tokens via PyJWT (TokenIssuer)
- Opaque refresh tokens from the secrets module
"""
from __future__ import annotations

import base64
import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from services.exceptions import InvalidInput, Unauthorized

logger = logging.getLogger(__name__)

REFRESH_TOKEN_BYTES = 64
INVALID_TOKEN = "Invalid token"

ph = PasswordHasher()


def _require_password(password: str) -> None:
    if not password or not password.strip():
        raise InvalidInput("Password cannot be empty")


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    _require_password(password)
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    _require_password(password)
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def generate_refresh_token() -> str:
    """Random opaque token; carries no user data, the binding lives in the DB row."""
    return base64.urlsafe_b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii")


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    name: str
    email: str
    jti: str


class TokenIssuer:
    """
    Signs and verifies access tokens.

    Secret, algorithm, issuer, audience and lifetime come from configuration
    (see TokenIssuer.from_config); nothing here reads the Flask app directly.
    """

    def __init__(self, secret: str, issuer: str, audience: str,
                 expires_minutes: int = 30, algorithm: str = "HS256"):
        self.secret = secret
        self.issuer = issuer
        self.audience = audience
        self.expires = timedelta(minutes=expires_minutes)
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TokenIssuer":
        return cls(
            secret=config["JWT_SECRET"],
            issuer=config["JWT_ISSUER"],
            audience=config["JWT_AUDIENCE"],
            expires_minutes=int(config["JWT_ACCESS_TOKEN_EXPIRES_MINUTES"]),
            algorithm=config["JWT_ALGORITHM"],
        )

    def issue_access_token(self, user) -> str:
        if user is None:
            raise InvalidInput("User is required to issue a token")
        if not getattr(user, "name", None) or not getattr(user, "email", None):
            raise InvalidInput("User name and email are required to issue a token")

        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": str(user.id),
            "name": user.name,
            "email": user.email,
            "jti": generate_jti(),
            "iss": self.issuer,
            "aud": self.audience,
            "iat": int(now.timestamp()),
            "exp": int((now + self.expires).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def issue_refresh_token(self) -> str:
        return generate_refresh_token()

    def decode_access_token(self, token: str) -> TokenClaims:
        """
        Decode and validate a JWT. Raises Unauthorized on a bad signature,
        expiry, wrong issuer/audience or a missing identity claim.
        """
        try:
            decoded = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise Unauthorized("Token expired")
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected access token: %s", exc)
            raise Unauthorized(INVALID_TOKEN)

        try:
            user_id = int(decoded["sub"])
        except (TypeError, ValueError):
            logger.info("Rejected access token: malformed sub claim")
            raise Unauthorized(INVALID_TOKEN)
        return TokenClaims(
            user_id=user_id,
            name=decoded.get("name", ""),
            email=decoded.get("email", ""),
            jti=decoded.get("jti", ""),
        )
