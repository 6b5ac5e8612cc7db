"""
Rate limiting: fixed window per client address, built on `limits`.

The limiter is an object stored in app.extensions["rate_limiter"] rather than
module state, so tests (or a deployment using redis://) can swap it out.
"""
from __future__ import annotations

import logging

from flask import Flask, current_app, jsonify, request
from limits import parse
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(self, limit: str = "5/second", storage_uri: str = "memory://"):
        self.item = parse(limit)
        self.storage = storage_from_string(storage_uri)
        self.strategy = FixedWindowRateLimiter(self.storage)

    def hit(self, key: str) -> bool:
        """Count one request for key; False once the window is exhausted."""
        return self.strategy.hit(self.item, key)

    def remaining(self, key: str) -> int:
        return self.strategy.get_window_stats(self.item, key).remaining

    def reset(self) -> None:
        self.storage.reset()


def _check_rate_limit():
    if not current_app.config.get("RATE_LIMIT_ENABLED", True):
        return None
    address = request.remote_addr
    if address is None:
        return None

    limiter: RateLimiter = current_app.extensions["rate_limiter"]
    if limiter.hit(address):
        return None

    logger.warning("Rate limit exceeded for %s on %s", address, request.path)
    return jsonify({
        "error": "RATE_LIMIT_EXCEEDED",
        "message": "You have exceeded the number of allowed requests. Please try again later.",
        "status": 429,
    }), 429


def setup_rate_limiting(app: Flask, limiter: RateLimiter | None = None) -> None:
    """Attach a limiter to the app and check it before every request."""
    app.extensions["rate_limiter"] = limiter or RateLimiter(
        app.config["RATE_LIMIT"], app.config["RATE_LIMIT_STORAGE_URI"]
    )
    app.before_request(_check_rate_limit)
