from __future__ import annotations
from functools import wraps
from flask import request, g, abort, current_app
from models import storage
from models.user import User
from services.exceptions import Unauthorized


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = request.headers.get("Authorization", "")
            if not auth.startswith("Bearer "):
                abort(401, description="Missing or invalid Authorization header")
            token = auth.split(" ", 1)[1].strip()
            issuer = current_app.extensions["token_issuer"]
            try:
                claims = issuer.decode_access_token(token)
            except Unauthorized as e:
                abort(401, description=e.message)

            user = storage.get(User, claims.user_id)
            if not user:
                abort(401, description="User not found")
            g.current_user_id = user.id
            return fn(*args, **kwargs)

        return wrapper

    return decorator
