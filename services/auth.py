"""
Session lifecycle operations: registration, login, token refresh, logout,
password change and account management.

Each operation stages its writes and commits once; failures come back as
Result.failure(ErrorKind.X) and leave nothing half-written.
"""
from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from models import (
    AccessImage,
    AccountRecoveryCode,
    AccountStatus,
    EmailVerificationCode,
    Password,
    PasswordRecoveryCode,
    RecordState,
    User,
    UserEmail,
)
from services.credentials import CredentialStore
from services.results import ErrorKind, Result
from services.sessions import REVOKE, SessionStore
from utils.clock import Clock
from utils.security import REFRESH, TokenCodec, TokenError, TokenPair, verify_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionGrant:
    role: str
    tokens: TokenPair

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "tokens": self.tokens.to_dict()}


class AuthService:
    def __init__(
        self,
        storage,
        codec: TokenCodec,
        clock: Optional[Clock] = None,
        max_failed_login_attempts: int = 5,
    ):
        self.storage = storage
        self.codec = codec
        self.clock = clock or Clock()
        self.max_failed_login_attempts = max(1, int(max_failed_login_attempts))
        self.sessions = SessionStore(storage, codec, self.clock)
        self.credentials = CredentialStore(storage)

    def register(self, email: str, password: str, first_name: str = "", last_name: str = "") -> Result[SessionGrant]:
        if self.storage.find_one(User, email=email):
            return Result.failure(ErrorKind.EMAIL_ALREADY_IN_USE)

        user = self.storage.create(User(email=email, first_name=first_name, last_name=last_name))
        self.credentials.set_password(user.id, password)
        access_secret = self.sessions.rotate_access_secret(user.id)
        tokens = self.sessions.open_refresh_session(user.id, access_secret)
        self.storage.save()

        logger.info("registered user %s", user.id)
        return Result.success(SessionGrant(role=user.role, tokens=tokens))

    def login(self, email: str, password: str) -> Result[SessionGrant]:
        user = self.storage.find_one(User, email=email)
        if not user:
            return Result.failure(ErrorKind.ACCESS_DENIED)
        if user.is_blocked:
            return Result.failure(ErrorKind.ACCOUNT_IS_BLOCKED)

        record = self.credentials.current(user.id)
        if record is None:
            # a user without a credential row is an integrity problem: lock it
            user.account_status = AccountStatus.BLOCKED
            self.sessions.revoke_all(user.id)
            self.storage.save()
            logger.warning("user %s has no password record, account blocked", user.id)
            return Result.failure(ErrorKind.ACCESS_DENIED)

        if not verify_password(password, record.hash):
            attempts = min(user.failed_login_attempts + 1, self.max_failed_login_attempts)
            user.failed_login_attempts = attempts
            if attempts >= self.max_failed_login_attempts:
                user.account_status = AccountStatus.BLOCKED
                self.sessions.revoke_all(user.id)
                logger.warning("user %s blocked after %d failed logins", user.id, attempts)
            self.storage.save()
            return Result.failure(ErrorKind.ACCESS_DENIED)

        access_secret = self.sessions.ensure_access_secret(user.id)
        tokens = self.sessions.open_refresh_session(user.id, access_secret)
        if user.failed_login_attempts:
            user.failed_login_attempts = 0
        self.storage.save()

        logger.info("user %s logged in", user.id)
        return Result.success(SessionGrant(role=user.role, tokens=tokens))

    def refresh(self, refresh_token: str) -> Result[SessionGrant]:
        denied = Result.failure(ErrorKind.ACCESS_DENIED)

        record = self.sessions.find_refresh_token(refresh_token)
        if not record:
            return denied

        access_image = self.storage.find_one(AccessImage, user_id=record.user_id)
        user = self.storage.find_one(User, id=record.user_id)
        if not (access_image and user) or user.is_blocked:
            return denied

        # stored expiry first, the token's own exp claim second
        if record.is_expired(self.clock.now_millis()):
            return denied
        try:
            claims = self.codec.verify(REFRESH, refresh_token)
        except TokenError:
            return denied
        if claims.user_id != record.user_id:
            return denied
        if not hmac.compare_digest(claims.secret.encode(), record.refresh_image.encode()):
            return denied

        if not self.sessions.consume_refresh_token(record):
            self.storage.rollback()
            logger.warning("refresh token of user %s was consumed concurrently", record.user_id)
            return denied
        tokens = self.sessions.open_refresh_session(user.id, access_image.image)
        self.storage.save()

        return Result.success(SessionGrant(role=user.role, tokens=tokens))

    def logout(self, user_id: str, refresh_token: str) -> Result[None]:
        self.sessions.revoke_refresh_token(user_id, refresh_token)
        self.storage.save()
        return Result.success()

    def logout_all(self, user_id: str) -> Result[None]:
        self.sessions.rotate_access_secret(user_id)
        self.sessions.revoke_refresh_tokens(user_id)
        self.storage.save()
        logger.info("user %s logged out from all devices", user_id)
        return Result.success()

    def change_password(self, user_id: str, old_password: str, new_password: str) -> Result[TokenPair]:
        record = self.credentials.current(user_id)
        if record is None:
            return Result.failure(ErrorKind.ACCESS_DENIED)
        if not verify_password(old_password, record.hash):
            return Result.failure(ErrorKind.OLD_PASSWORD_IS_INVALID)

        self.sessions.revoke_refresh_tokens(user_id)
        access_secret = self.sessions.rotate_access_secret(user_id)
        tokens = self.sessions.open_refresh_session(user_id, access_secret)
        self.credentials.set_password(user_id, new_password)
        self.storage.update_many(User, {"id": user_id}, {"failed_login_attempts": 0})
        self.storage.save()

        logger.info("user %s changed password", user_id)
        return Result.success(tokens)

    def update_account(self, user: User, first_name: str, last_name: str, about: str = "") -> Result[User]:
        user.first_name = first_name
        user.last_name = last_name
        user.about = about or ""
        self.storage.save()
        return Result.success(user)

    def delete_account(self, user_id: str) -> Result[None]:
        """Soft-delete the user and everything that could still authenticate as them."""
        self.sessions.revoke_all(user_id)
        for cls in (AccountRecoveryCode, PasswordRecoveryCode, EmailVerificationCode, UserEmail):
            self.storage.update_many(cls, {"user_id": user_id}, REVOKE)
        self.storage.update_many(Password, {"user_id": user_id}, REVOKE)
        self.storage.update_many(User, {"id": user_id}, {"state": RecordState.REVOKED})
        self.storage.save()
        logger.info("user %s deleted own account", user_id)
        return Result.success()
