import logging

from flask import current_app
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from api.responses import envelope, failure
from models.schemas.common import split_validation_errors
from services import get_services
from services.results import ErrorKind
from utils import templates

logger = logging.getLogger(__name__)

# werkzeug status -> envelope info
HTTP_INFO = {
    400: ErrorKind.INVALID_DATA.value,
    401: ErrorKind.ACCESS_DENIED.value,
    404: ErrorKind.RESOURCE_NOT_FOUND.value,
    405: "METHOD_NOT_ALLOWED",
    415: ErrorKind.INVALID_DATA.value,
}


def _notify_operator(err: Exception):
    """Mail the stringified error to the operator address, if one is configured."""
    address = current_app.config.get("OPERATOR_EMAIL")
    if not address:
        return
    subject, body = templates.internal_error(
        current_app.config.get("APP_NAME", "Blog API"),
        current_app.config.get("APP_ENV", "dev"),
        f"{err.__class__.__name__}: {err}",
    )
    get_services().mailer.send(address, subject, body)


def register_error_handlers(app):
    # Marshmallow validation errors that escaped a handler
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        missing, invalid = split_validation_errors(err.messages)
        if missing:
            return failure(ErrorKind.MISSING_DATA, {"missing": missing})
        return failure(ErrorKind.INVALID_DATA, {"invalid": invalid})

    # Werkzeug HTTPExceptions keep their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 500
        info = HTTP_INFO.get(status, (err.name or "ERROR").upper().replace(" ", "_"))
        return envelope(status, info)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        try:
            get_services().storage.rollback()
        except Exception:
            logger.exception("Rollback after unhandled exception failed")
        _notify_operator(err)
        return failure(ErrorKind.INTERNAL_SERVER_ERROR)
