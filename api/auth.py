"""
Authentication blueprint:
- POST  /registration
- POST  /login
- POST  /refresh-tokens
- POST  /logout
- GET   /logout/all
- PATCH /change-password

The access token travels in the X-Access-Token header,
the refresh token in the JSON body (refreshToken).
"""
from __future__ import annotations

from flask import Blueprint, g

from api.responses import from_result, load_body
from models.schemas.user import (
    ChangePasswordSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegistrationSchema,
)
from services import SessionGrant, get_services
from utils.decorators import authenticate

bp = Blueprint("auth", __name__)

registration_schema = RegistrationSchema()
login_schema = LoginSchema()
refresh_token_schema = RefreshTokenSchema()
change_password_schema = ChangePasswordSchema()


@bp.post("/registration")
def registration():
    """
    Register a new user and open a first session.
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
          required: [email, firstName, lastName, password]
          properties:
            email: { type: string }
            firstName: { type: string }
            lastName: { type: string }
            password: { type: string }
    responses:
      200:
        description: OK, returns {role, tokens:{access, refresh}}
      400:
        description: MISSING_DATA / INVALID_DATA
      403:
        description: EMAIL_ALREADY_IN_USE
    """
    data, error = load_body(registration_schema)
    if error:
        return error
    result = get_services().auth.register(
        data["email"], data["password"], data["first_name"], data["last_name"]
    )
    return from_result(result, SessionGrant.to_dict)


@bp.post("/login")
def login():
    """
    Login: returns the role and a fresh token pair
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
          required: [email, password]
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: MISSING_DATA / INVALID_DATA
      401:
        description: ACCESS_DENIED
      403:
        description: ACCOUNT_IS_BLOCKED
    """
    data, error = load_body(login_schema)
    if error:
        return error
    return from_result(get_services().auth.login(data["email"], data["password"]), SessionGrant.to_dict)


@bp.post("/refresh-tokens")
def refresh_tokens():
    """
    Exchange a refresh token for a new pair (the old one is consumed).
    ---
    tags:
      - Auth
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [refreshToken]
          properties:
            refreshToken: { type: string }
    responses:
      200:
        description: OK
      400:
        description: MISSING_DATA
      401:
        description: ACCESS_DENIED
    """
    data, error = load_body(refresh_token_schema)
    if error:
        return error
    return from_result(get_services().auth.refresh(data["refresh_token"]), SessionGrant.to_dict)


@bp.post("/logout")
@authenticate
def logout():
    """
    Logout from this device: revokes the given refresh token.
    Calling it twice is harmless.
    ---
    tags:
      - Auth
    security:
      - AccessToken: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            refreshToken: { type: string }
    responses:
      200:
        description: OK
      400:
        description: MISSING_DATA
      401:
        description: MISSING_TOKEN / INVALID_TOKEN / TOKEN_EXPIRED / ACCESS_DENIED
    """
    data, error = load_body(refresh_token_schema)
    if error:
        return error
    return from_result(get_services().auth.logout(g.user_id, data["refresh_token"]))


@bp.get("/logout/all")
@authenticate
def logout_all():
    """
    Logout from every device
    ---
    tags:
      - Auth
    security:
      - AccessToken: []
    responses:
      200:
        description: OK, every outstanding token is now rejected
      401:
        description: Unauthorized
    """
    return from_result(get_services().auth.logout_all(g.user_id))


@bp.patch("/change-password")
@authenticate
def change_password():
    """
    Change password; every other session is ended and a new pair is returned.
    ---
    tags:
      - Auth
    security:
      - AccessToken: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [oldPassword, newPassword]
          properties:
            oldPassword: { type: string }
            newPassword: { type: string }
    responses:
      200:
        description: OK, returns {tokens}
      400:
        description: MISSING_DATA / OLD_PASSWORD_IS_INVALID
      401:
        description: Unauthorized
    """
    data, error = load_body(change_password_schema)
    if error:
        return error
    result = get_services().auth.change_password(g.user_id, data["old_password"], data["new_password"])
    return from_result(result, lambda tokens: {"tokens": tokens.to_dict()})
