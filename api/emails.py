from flask import Blueprint, g

from api.responses import from_result, load_body
from models.schemas.user import CodeSchema, EmailSchema
from services import get_services
from utils.decorators import authenticate

bp = Blueprint("emails", __name__)

email_schema = EmailSchema()
code_schema = CodeSchema()


@bp.get("/verify-email")
@authenticate
def send_email_verification():
    """
    Mail a verification link to the caller's address
    ---
    tags:
      - Emails
    security:
      - AccessToken: []
    responses:
      200:
        description: OK, mail queued
      400:
        description: EMAIL_ALREADY_VERIFIED
      401:
        description: Unauthorized
    """
    return from_result(get_services().recovery.send_email_verification(g.user))


@bp.post("/verify-email")
def verify_email():
    """
    Redeem an email verification code
    ---
    tags:
      - Emails
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
        description: MISSING_DATA / EMAIL_ALREADY_VERIFIED
      403:
        description: INVALID_VERIFICATION_CODE / EXPIRED_VERIFICATION_CODE
    """
    data, error = load_body(code_schema)
    if error:
        return error
    return from_result(get_services().recovery.verify_email(data["code"]))


@bp.post("/change-email/send-link")
@authenticate
def send_email_change():
    """
    Start an email change: a link is mailed to the new address
    ---
    tags:
      - Emails
    security:
      - AccessToken: []
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
        description: OK
      403:
        description: EMAIL_ALREADY_IN_USE
    """
    data, error = load_body(email_schema)
    if error:
        return error
    return from_result(get_services().recovery.send_email_change(g.user, data["email"]))


@bp.post("/change-email/verify-code")
def verify_email_change():
    """
    Redeem an email change code; the new address replaces the old one.
    ---
    tags:
      - Emails
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
      403:
        description: INVALID_VERIFICATION_CODE / EXPIRED_VERIFICATION_CODE / EMAIL_ALREADY_IN_USE
      404:
        description: EMAIL_RECORD_NOT_FOUND
    """
    data, error = load_body(code_schema)
    if error:
        return error
    return from_result(get_services().recovery.verify_email_change(data["code"]))
