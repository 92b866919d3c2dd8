"""Wiring of the session services around one explicit storage handle."""
from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from services.auth import AuthService, SessionGrant
from services.guard import Identity, check_access_token
from services.recovery import RecoveryService
from services.results import ErrorKind, Result
from utils.clock import Clock
from utils.mailer import Mailer
from utils.security import TokenCodec

EXTENSION_KEY = "blog_services"


@dataclass
class Services:
    storage: object
    codec: TokenCodec
    mailer: Mailer
    clock: Clock
    auth: AuthService
    recovery: RecoveryService

    @classmethod
    def build(cls, config, storage, mailer, clock: Clock) -> "Services":
        codec = TokenCodec.from_config(config, clock)
        auth = AuthService(
            storage,
            codec,
            clock=clock,
            max_failed_login_attempts=config["MAX_FAILED_LOGIN_ATTEMPTS"],
        )
        recovery = RecoveryService(
            storage,
            auth.sessions,
            auth.credentials,
            mailer,
            clock=clock,
            code_ttl=config["TOKENS_REFRESH_EXPIRATION"],
            frontend_url=config["FRONTEND_URL"],
            app_name=config["APP_NAME"],
        )
        return cls(storage=storage, codec=codec, mailer=mailer, clock=clock, auth=auth, recovery=recovery)


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "AuthService",
    "EXTENSION_KEY",
    "ErrorKind",
    "Identity",
    "RecoveryService",
    "Result",
    "Services",
    "SessionGrant",
    "check_access_token",
    "get_services",
]
