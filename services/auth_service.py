"""
Authentication workflow: register, login, refresh-token rotation, logout.

- Passwords are hashed with argon2 (utils.security)
- Access tokens are short-lived JWTs issued by TokenIssuer
- Refresh tokens are opaque random strings stored in the refresh_tokens table
  so they can be revoked and rotated; each one is single-use
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError

from models.base_model import utcnow
from models.refresh_token import RefreshToken
from models.user import User
from services.exceptions import Conflict, InvalidInput, Unauthorized
from utils.security import TokenIssuer, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"
EMAIL_IN_USE = "Email is already in use."


def _is_present(token) -> bool:
    return isinstance(token, str) and bool(token.strip())


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class AuthService:
    def __init__(self, storage, token_issuer: TokenIssuer,
                 refresh_token_lifetime: timedelta = timedelta(days=30),
                 clock: Optional[Callable[[], datetime]] = None):
        self.storage = storage
        self.token_issuer = token_issuer
        self.refresh_token_lifetime = refresh_token_lifetime
        self.clock = clock or utcnow

    def register(self, name: str, email: str, password: str) -> str:
        """Create a user and return an access token for it (no refresh token yet)."""
        with self.storage.unit_of_work("register_lookup", email=email) as session:
            if session.query(User.id).filter(User.email == email).first():
                raise Conflict(EMAIL_IN_USE)

        user = User(name=name, email=email, password_hash=hash_password(password))
        try:
            with self.storage.unit_of_work("register", email=email) as session:
                session.add(user)
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            raise Conflict(EMAIL_IN_USE)

        logger.info("Registered user %s", user.id)
        return self.token_issuer.issue_access_token(user)

    def authenticate(self, email: str, password: str) -> TokenPair:
        with self.storage.unit_of_work("authenticate") as session:
            user = session.query(User).filter(User.email == email).first()
            if not user or not verify_password(password, user.password_hash):
                logger.warning("Failed login attempt")
                raise Unauthorized(INVALID_CREDENTIALS)
            refresh_token = self._persist_refresh_token(session, user.id)

        logger.info("User %s logged in", user.id)
        return TokenPair(self.token_issuer.issue_access_token(user), refresh_token)

    def refresh(self, token: str) -> TokenPair:
        """
        Exchange a usable refresh token for a new access/refresh pair.

        The presented token is revoked with a conditional update, so if two
        requests race on the same token only one of them wins.
        """
        if not _is_present(token):
            raise Unauthorized(INVALID_REFRESH_TOKEN)

        with self.storage.unit_of_work("refresh") as session:
            record = session.query(RefreshToken).filter(RefreshToken.token == token).first()
            if record is None or not record.is_usable(self.clock()):
                raise Unauthorized(INVALID_REFRESH_TOKEN)

            revoked = (
                session.query(RefreshToken)
                .filter(RefreshToken.id == record.id, RefreshToken.revoked.is_(False))
                .update({RefreshToken.revoked: True}, synchronize_session=False)
            )
            if revoked != 1:
                raise Unauthorized(INVALID_REFRESH_TOKEN)
            session.expire(record, ["revoked"])

            user = session.get(User, record.user_id)
            if user is None:
                raise Unauthorized(INVALID_REFRESH_TOKEN)
            access_token = self.token_issuer.issue_access_token(user)
            new_refresh_token = self._persist_refresh_token(session, user.id)

        logger.info("Rotated refresh token %s for user %s", record.id, record.user_id)
        return TokenPair(access_token, new_refresh_token)

    def revoke(self, token: str) -> None:
        """Mark a refresh token revoked; unknown tokens are ignored."""
        if not _is_present(token):
            raise InvalidInput("Refresh token is required")

        with self.storage.unit_of_work("revoke") as session:
            record = session.query(RefreshToken).filter(RefreshToken.token == token).first()
            if record is None:
                return
            record.revoked = True

        logger.info("Revoked refresh token %s", record.id)

    def _persist_refresh_token(self, session, user_id: int) -> str:
        token = self.token_issuer.issue_refresh_token()
        now = self.clock()
        session.add(RefreshToken(
            token=token,
            user_id=user_id,
            revoked=False,
            created_at=now,
            expires_at=now + self.refresh_token_lifetime,
        ))
        return token
