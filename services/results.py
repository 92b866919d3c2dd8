"""Return values of the session operations: a success payload or one named error kind."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    MISSING_DATA = "MISSING_DATA"
    INVALID_DATA = "INVALID_DATA"
    MISSING_TOKEN = "MISSING_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    ACCESS_DENIED = "ACCESS_DENIED"
    ACCOUNT_IS_BLOCKED = "ACCOUNT_IS_BLOCKED"
    EMAIL_ALREADY_IN_USE = "EMAIL_ALREADY_IN_USE"
    EMAIL_ALREADY_VERIFIED = "EMAIL_ALREADY_VERIFIED"
    OLD_PASSWORD_IS_INVALID = "OLD_PASSWORD_IS_INVALID"
    INVALID_RECOVERY_CODE = "INVALID_RECOVERY_CODE"
    EXPIRED_RECOVERY_CODE = "EXPIRED_RECOVERY_CODE"
    INVALID_VERIFICATION_CODE = "INVALID_VERIFICATION_CODE"
    EXPIRED_VERIFICATION_CODE = "EXPIRED_VERIFICATION_CODE"
    EMAIL_RECORD_NOT_FOUND = "EMAIL_RECORD_NOT_FOUND"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

    @property
    def status(self) -> int:
        return _STATUSES[self]


_STATUSES = {
    ErrorKind.MISSING_DATA: 400,
    ErrorKind.INVALID_DATA: 400,
    ErrorKind.MISSING_TOKEN: 401,
    ErrorKind.INVALID_TOKEN: 401,
    ErrorKind.TOKEN_EXPIRED: 401,
    ErrorKind.ACCESS_DENIED: 401,
    ErrorKind.ACCOUNT_IS_BLOCKED: 403,
    ErrorKind.EMAIL_ALREADY_IN_USE: 403,
    ErrorKind.EMAIL_ALREADY_VERIFIED: 400,
    ErrorKind.OLD_PASSWORD_IS_INVALID: 400,
    ErrorKind.INVALID_RECOVERY_CODE: 400,
    ErrorKind.EXPIRED_RECOVERY_CODE: 400,
    ErrorKind.INVALID_VERIFICATION_CODE: 403,
    ErrorKind.EXPIRED_VERIFICATION_CODE: 403,
    ErrorKind.EMAIL_RECORD_NOT_FOUND: 404,
    ErrorKind.RESOURCE_NOT_FOUND: 404,
    ErrorKind.INTERNAL_SERVER_ERROR: 500,
}


@dataclass(frozen=True)
class Result(Generic[T]):
    data: Optional[T] = None
    error: Optional[ErrorKind] = None
    details: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: Optional[T] = None) -> "Result[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, kind: ErrorKind, details: Optional[Dict[str, Any]] = None) -> "Result[T]":
        return cls(error=kind, details=details)
