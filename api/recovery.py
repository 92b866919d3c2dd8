"""
Recovery blueprint: unblocking a locked account and resetting a forgotten password.
Both flows mail a link with a one-time code and redeem it here.
"""
from flask import Blueprint

from api.responses import from_result, load_body
from models.schemas.user import CodeSchema, EmailSchema, NewPasswordSchema
from services import get_services

bp = Blueprint("recovery", __name__)

email_schema = EmailSchema()
code_schema = CodeSchema()
new_password_schema = NewPasswordSchema()


@bp.post("/account-recovery/send-email")
def send_account_recovery():
    """
    Mail an account recovery link to a blocked account
    ---
    tags:
      - Recovery
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email]
          properties:
            email: { type: string }
    responses:
      200:
        description: OK, mail queued
      400:
        description: MISSING_DATA / INVALID_DATA
      401:
        description: ACCESS_DENIED (unknown or not blocked)
    """
    data, error = load_body(email_schema)
    if error:
        return error
    return from_result(get_services().recovery.send_account_recovery(data["email"]))


@bp.post("/account-recovery/verify-code")
def verify_account_recovery():
    """
    Redeem an account recovery code: the account is active again
    ---
    tags:
      - Recovery
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [code]
          properties:
            code: { type: string }
    responses:
      200:
        description: OK
      400:
        description: MISSING_DATA / INVALID_RECOVERY_CODE / EXPIRED_RECOVERY_CODE
      401:
        description: ACCESS_DENIED
    """
    data, error = load_body(code_schema)
    if error:
        return error
    return from_result(get_services().recovery.verify_account_recovery(data["code"]))


@bp.post("/password-recovery/send-email")
def send_password_recovery():
    """
    Mail a password recovery link
    ---
    tags:
      - Recovery
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email]
          properties:
            email: { type: string }
    responses:
      200:
        description: OK, mail queued
      401:
        description: ACCESS_DENIED
    """
    data, error = load_body(email_schema)
    if error:
        return error
    return from_result(get_services().recovery.send_password_recovery(data["email"]))


@bp.post("/password-recovery/submit-password")
def submit_new_password():
    """
    Set a new password with a password recovery code.
    Every session of the user is ended.
    ---
    tags:
      - Recovery
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [code, newPassword]
          properties:
            code: { type: string }
            newPassword: { type: string }
    responses:
      200:
        description: OK
      400:
        description: MISSING_DATA / INVALID_RECOVERY_CODE / EXPIRED_RECOVERY_CODE
      401:
        description: ACCESS_DENIED
    """
    data, error = load_body(new_password_schema)
    if error:
        return error
    return from_result(get_services().recovery.submit_new_password(data["code"], data["new_password"]))
