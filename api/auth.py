"""
Authentication blueprint:
- POST /register
- POST /login
- POST /refresh-token
- POST /logout

The views only parse requests and shape responses; the workflow itself
(argon2 hashing, JWT access tokens, opaque single-use refresh tokens stored
in the DB) lives in services.auth_service.AuthService.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app

from models.schemas.user import UserRegisterSchema, UserLoginSchema
from services.auth_service import AuthService

bp = Blueprint("auth", __name__)

user_register_schema = UserRegisterSchema()
user_login_schema = UserLoginSchema()


def _auth_service() -> AuthService:
    return current_app.extensions["auth_service"]


def _refresh_token_from_request() -> str:
    """Accept the token as a query arg, a JSON string, a JSON object or plain text."""
    token = request.args.get("refreshToken")
    if token:
        return token
    payload = request.get_json(silent=True)
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        token = payload.get("refreshToken")
        return token if isinstance(token, str) else ""
    if payload is not None:
        # numbers, lists, booleans: not a token
        return ""
    return request.get_data(as_text=True).strip()


@bp.post("/register")
def register():
    """
    Register a new user and return an access token.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [name, email, password]
          properties:
            name: { type: string, maxLength: 100 }
            email: { type: string, maxLength: 256 }
            password: { type: string, maxLength: 200 }
    responses:
      201:
        description: Created (returns accessToken)
      400:
        description: Validation error
      409:
        description: Email already in use
    """
    payload = request.get_json(silent=True) or {}
    data = user_register_schema.load(payload)

    access_token = _auth_service().register(data["name"], data["email"], data["password"])
    return jsonify({"accessToken": access_token}), 201


@bp.post("/login")
def login():
    """
    Login: return accessToken and refreshToken
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, passwordHash]
           properties:
             email: { type: string }
             passwordHash: { type: string, description: "The plaintext password" }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid email or password
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)

    tokens = _auth_service().authenticate(data["email"], data["password"])
    return jsonify(
        {
            "accessToken": tokens.access_token,
            "refreshToken": tokens.refresh_token,
        }
    ), 200


@bp.post("/refresh-token")
def refresh_token():
    """
    Exchange a refresh token for a new access token and a new refresh token (rotation)
    ---
    tags:
      - Auth
    parameters:
      - in: query
        name: refreshToken
        type: string
      - in: body
        name: body
        schema:
          type: object
          properties:
            refreshToken: { type: string }
    responses:
      200:
        description: OK (returns accessToken and the rotated refreshToken)
      401:
        description: Invalid, expired or revoked refresh token
    """
    tokens = _auth_service().refresh(_refresh_token_from_request())
    return jsonify(
        {
            "accessToken": tokens.access_token,
            "refreshToken": tokens.refresh_token,
        }
    ), 200


@bp.post("/logout")
def logout():
    """
    Logout: revokes the given refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
      - text/plain
    parameters:
      -  in: body
         name: body
         schema:
           type: string
           description: The raw refresh token
    responses:
      200:
        description: Logged out
      400:
        description: Missing refresh token
    """
    _auth_service().revoke(_refresh_token_from_request())
    return jsonify({"message": "Successfully logged out."}), 200
