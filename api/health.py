from flask import Blueprint, current_app

from api.responses import ok
from services import get_services
from models.user import User

bp = Blueprint("health", __name__)


@bp.get("/")
def index():
    """
    API index
    ---
    tags:
      - Health
    responses:
      200:
        description: name of the API and where the docs live
    """
    return ok({"name": current_app.config["APP_NAME"], "docs": "/apidocs/", "health": "/api/v1/health"})


@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up and the database answers
        schema:
          type: object
          properties:
            data:
              type: object
              properties:
                status:
                  type: string
                  example: ok
                version:
                  type: string
                  example: 1.0.0
    """
    get_services().storage.count(User)
    return ok({"status": "ok", "version": "1.0.0"})
