from __future__ import annotations
from functools import wraps
from flask import request, g

from api.responses import failure
from services import check_access_token, get_services

ACCESS_TOKEN_HEADER = "X-Access-Token"


def _bind(identity=None):
    g.user_id = identity.user_id if identity else None
    g.role = identity.role if identity else None
    g.user = identity.user if identity else None


def authenticate(fn):
    """
    Strict guard: the request goes through only with a valid access token
    whose secret matches the stored AccessImage of an active user.
    Otherwise answers 401 MISSING_TOKEN / INVALID_TOKEN / TOKEN_EXPIRED / ACCESS_DENIED.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        services = get_services()
        token = request.headers.get(ACCESS_TOKEN_HEADER, "").strip()
        result = check_access_token(services.storage, services.codec, token)
        if not result.ok:
            return failure(result.error)
        _bind(result.data)
        return fn(*args, **kwargs)

    return wrapper


def soft_authenticate(fn):
    """Same check, but a failure binds an anonymous caller (g.user_id = None) and proceeds."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        services = get_services()
        token = request.headers.get(ACCESS_TOKEN_HEADER, "").strip()
        result = check_access_token(services.storage, services.codec, token)
        _bind(result.data if result.ok else None)
        return fn(*args, **kwargs)

    return wrapper
