from __future__ import annotations

from flask import Blueprint, g

from api.responses import failure, from_result, load_body, ok
from models.schemas.user import AccountOutSchema, AccountUpdateSchema, PublicProfileSchema
from models.user import User
from services import ErrorKind, get_services
from utils.decorators import authenticate, soft_authenticate

bp = Blueprint("account", __name__)

account_out_schema = AccountOutSchema()
account_update_schema = AccountUpdateSchema()
public_profile_schema = PublicProfileSchema()


@bp.get("/account")
@authenticate
def get_account():
    """
    Get current user info
    ---
    tags:
      - Account
    security:
      - AccessToken: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return ok(account_out_schema.dump(g.user))


@bp.patch("/account")
@authenticate
def update_account():
    """
    Update own profile (firstName, lastName, about)
    ---
    tags:
      - Account
    security:
      - AccessToken: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [firstName, lastName]
          properties:
            firstName: { type: string }
            lastName: { type: string }
            about: { type: string }
    responses:
      200: { description: OK }
      400: { description: MISSING_DATA / INVALID_DATA }
      401: { description: Unauthorized }
    """
    data, error = load_body(account_update_schema)
    if error:
        return error
    result = get_services().auth.update_account(g.user, data["first_name"], data["last_name"], data["about"])
    return from_result(result, account_out_schema.dump)


@bp.delete("/account")
@authenticate
def delete_account():
    """
    Delete own account. Every token and pending code stops working.
    ---
    tags:
      - Account
    security:
      - AccessToken: []
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
    """
    return from_result(get_services().auth.delete_account(g.user_id))


@bp.get("/users/<user_id>")
@soft_authenticate
def get_user(user_id: str):
    """
    Public profile of a user; isOwner tells whether the caller is that user.
    ---
    tags:
      - Account
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: RESOURCE_NOT_FOUND }
    """
    user = get_services().storage.find_one(User, id=user_id)
    if not user:
        return failure(ErrorKind.RESOURCE_NOT_FOUND)
    profile = public_profile_schema.dump(user)
    profile["isOwner"] = g.user_id == user.id
    return ok(profile)
