"""
Code-based flows: account recovery (unblock), password recovery,
email verification and email change.

All four share one shape: issue a single active code per (user, purpose),
mail a link containing it, and later redeem it exactly once.
"""
from __future__ import annotations

import logging
from typing import Optional, Type

from models import (
    AccountRecoveryCode,
    AccountStatus,
    EmailVerificationCode,
    PasswordRecoveryCode,
    User,
    UserEmail,
)
from services.credentials import CredentialStore
from services.results import ErrorKind, Result
from services.sessions import REVOKE, SessionStore
from utils import templates
from utils.clock import Clock
from utils.security import generate_string

logger = logging.getLogger(__name__)

CODE_LENGTH = 32


class RecoveryService:
    def __init__(
        self,
        storage,
        sessions: SessionStore,
        credentials: CredentialStore,
        mailer,
        clock: Optional[Clock] = None,
        code_ttl: int = 604800,
        frontend_url: str = "http://localhost:3000",
        app_name: str = "Blog API",
    ):
        self.storage = storage
        self.sessions = sessions
        self.credentials = credentials
        self.mailer = mailer
        self.clock = clock or Clock()
        self.code_ttl = int(code_ttl)
        self.frontend_url = frontend_url.rstrip("/")
        self.app_name = app_name

    # -- shared code handling -------------------------------------------------

    def _new_code(self, cls: Type, user_id: str):
        expiration = self.clock.now_millis() + self.code_ttl * 1000
        return self.storage.new(cls(user_id=user_id, code=generate_string(CODE_LENGTH), expiration_date=str(expiration)))

    def _issue_code(self, cls: Type, user_id: str):
        """Revoke the user's outstanding codes of this purpose and stage a new one."""
        self.storage.update_many(cls, {"user_id": user_id}, REVOKE)
        return self._new_code(cls, user_id)

    def _lookup_code(self, cls: Type, code: str, invalid: ErrorKind, expired: ErrorKind) -> Result:
        record = self.storage.find_one(cls, code=code)
        if not record:
            return Result.failure(invalid)
        if record.is_expired(self.clock.now_millis()):
            return Result.failure(expired)
        return Result.success(record)

    def _claim_code(self, cls: Type, record) -> bool:
        """Single use: only one caller flips this code from ACTIVE to REVOKED."""
        if self.storage.update_many(cls, {"id": record.id}, REVOKE) != 1:
            self.storage.rollback()
            return False
        return True

    def _link(self, path: str, code: str) -> str:
        return f"{self.frontend_url}/{path}/{code}"

    # -- account recovery -----------------------------------------------------

    def send_account_recovery(self, email: str) -> Result[None]:
        user = self.storage.find_one(User, email=email, account_status=AccountStatus.BLOCKED)
        if not user:
            return Result.failure(ErrorKind.ACCESS_DENIED)

        record = self._issue_code(AccountRecoveryCode, user.id)
        self.storage.save()

        subject, body = templates.account_recovery(self.app_name, self._link("account-recovery", record.code), user.full_name)
        self.mailer.send(user.email, subject, body)
        return Result.success()

    def verify_account_recovery(self, code: str) -> Result[None]:
        found = self._lookup_code(
            AccountRecoveryCode, code, ErrorKind.INVALID_RECOVERY_CODE, ErrorKind.EXPIRED_RECOVERY_CODE
        )
        if not found.ok:
            return found
        record = found.data

        user = self.storage.find_one(User, id=record.user_id, account_status=AccountStatus.BLOCKED)
        if not user:
            return Result.failure(ErrorKind.ACCESS_DENIED)
        if not self._claim_code(AccountRecoveryCode, record):
            return Result.failure(ErrorKind.INVALID_RECOVERY_CODE)

        self.storage.update_many(AccountRecoveryCode, {"user_id": user.id}, REVOKE)
        self.sessions.revoke_refresh_tokens(user.id)
        self.sessions.rotate_access_secret(user.id)
        user.account_status = AccountStatus.ACTIVE
        user.failed_login_attempts = 0
        self.storage.save()

        logger.info("account of user %s recovered", user.id)
        return Result.success()

    # -- password recovery ----------------------------------------------------

    def send_password_recovery(self, email: str) -> Result[None]:
        user = self.storage.find_one(User, email=email)
        if not user:
            return Result.failure(ErrorKind.ACCESS_DENIED)

        record = self._issue_code(PasswordRecoveryCode, user.id)
        self.storage.save()

        subject, body = templates.password_recovery(self.app_name, self._link("password-recovery", record.code), user.full_name)
        self.mailer.send(user.email, subject, body)
        return Result.success()

    def submit_new_password(self, code: str, new_password: str) -> Result[None]:
        found = self._lookup_code(
            PasswordRecoveryCode, code, ErrorKind.INVALID_RECOVERY_CODE, ErrorKind.EXPIRED_RECOVERY_CODE
        )
        if not found.ok:
            return found
        record = found.data

        password = self.credentials.current(record.user_id)
        user = self.storage.find_one(User, id=record.user_id)
        if not (password and user):
            return Result.failure(ErrorKind.ACCESS_DENIED)
        if not self._claim_code(PasswordRecoveryCode, record):
            return Result.failure(ErrorKind.INVALID_RECOVERY_CODE)

        self.storage.update_many(PasswordRecoveryCode, {"user_id": user.id}, REVOKE)
        self.sessions.revoke_refresh_tokens(user.id)
        self.sessions.rotate_access_secret(user.id)
        self.credentials.set_password(user.id, new_password)
        self.storage.save()

        logger.info("password of user %s reset through recovery", user.id)
        return Result.success()

    # -- email verification ---------------------------------------------------

    def send_email_verification(self, user: User) -> Result[None]:
        if user.email_is_verified:
            return Result.failure(ErrorKind.EMAIL_ALREADY_VERIFIED)

        record = self._issue_code(EmailVerificationCode, user.id)
        self.storage.save()

        subject, body = templates.email_verification(self.app_name, self._link("verify-email", record.code), user.full_name)
        self.mailer.send(user.email, subject, body)
        return Result.success()

    def verify_email(self, code: str) -> Result[None]:
        found = self._lookup_code(
            EmailVerificationCode, code, ErrorKind.INVALID_VERIFICATION_CODE, ErrorKind.EXPIRED_VERIFICATION_CODE
        )
        if not found.ok:
            return found
        record = found.data

        # codes minted for an email change are redeemed by verify_email_change only
        if self.storage.find_one(UserEmail, email_verification_code_id=record.id):
            return Result.failure(ErrorKind.INVALID_VERIFICATION_CODE)

        user = self.storage.find_one(User, id=record.user_id)
        if not user:
            return Result.failure(ErrorKind.ACCESS_DENIED)
        if user.email_is_verified:
            return Result.failure(ErrorKind.EMAIL_ALREADY_VERIFIED)
        if not self._claim_code(EmailVerificationCode, record):
            return Result.failure(ErrorKind.INVALID_VERIFICATION_CODE)

        user.email_is_verified = True
        self.storage.save()
        return Result.success()

    # -- email change ---------------------------------------------------------

    def send_email_change(self, user: User, new_email: str) -> Result[None]:
        existing = self.storage.find_one(User, email=new_email)
        if existing and existing.id != user.id:
            return Result.failure(ErrorKind.EMAIL_ALREADY_IN_USE)

        pending = self.storage.find(UserEmail, user_id=user.id)
        code_ids = [p.email_verification_code_id for p in pending]
        if code_ids:
            self.storage.update_many(EmailVerificationCode, {"id": code_ids}, REVOKE)
        self.storage.update_many(UserEmail, {"user_id": user.id}, REVOKE)

        record = self._new_code(EmailVerificationCode, user.id)
        self.storage.new(
            UserEmail(
                user_id=user.id,
                email_verification_code_id=record.id,
                new_email=new_email,
                old_email=user.email,
            )
        )
        self.storage.save()

        subject, body = templates.email_verification(self.app_name, self._link("change-email", record.code), user.full_name)
        self.mailer.send(new_email, subject, body)
        return Result.success()

    def verify_email_change(self, code: str) -> Result[None]:
        found = self._lookup_code(
            EmailVerificationCode, code, ErrorKind.INVALID_VERIFICATION_CODE, ErrorKind.EXPIRED_VERIFICATION_CODE
        )
        if not found.ok:
            return found
        record = found.data

        user = self.storage.find_one(User, id=record.user_id)
        pending = self.storage.find_one(UserEmail, email_verification_code_id=record.id)
        if not user:
            return Result.failure(ErrorKind.ACCESS_DENIED)
        if not pending:
            return Result.failure(ErrorKind.EMAIL_RECORD_NOT_FOUND)

        taken = self.storage.find_one(User, email=pending.new_email)
        if taken and taken.id != user.id:
            return Result.failure(ErrorKind.EMAIL_ALREADY_IN_USE)
        if not self._claim_code(EmailVerificationCode, record):
            return Result.failure(ErrorKind.INVALID_VERIFICATION_CODE)

        user.email = pending.new_email
        user.email_is_verified = True
        self.storage.update_many(UserEmail, {"user_id": user.id}, REVOKE)
        self.storage.save()

        logger.info("user %s changed email", user.id)
        return Result.success()
