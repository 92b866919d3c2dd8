"""
security helpers:
- Argon2 password hashing via argon2-cffi
- Session secrets ("images") and one-time codes
- Access / refresh JWT creation and verification via PyJWT
"""
from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from typing import Dict, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from utils.clock import Clock

ph = PasswordHasher()

ACCESS = "access"
REFRESH = "refresh"

# claim that carries the session secret, per token purpose
SECRET_CLAIMS = {
    ACCESS: "accessImage",
    REFRESH: "refreshImage",
}

_ALPHANUMERIC = string.digits + string.ascii_letters


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_string(length: int = 16) -> str:
    """Random alphanumeric string (recovery / verification codes)."""
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(length))


def generate_image(user_id, now_millis: int) -> str:
    """
    New session secret for a user. Slow one-way hash of
    user id + randomness + timestamp; it is only ever compared, never reversed.
    """
    return ph.hash(f"{user_id}X{generate_string(10)}X{now_millis}X{generate_string(10)}")


class TokenError(Exception):
    """Base class for token verification failures."""


class InvalidToken(TokenError):
    """Bad signature, malformed token, wrong purpose or missing claims."""


class TokenExpired(TokenError):
    """Signature is fine but the exp claim is in the past."""


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    secret: str


@dataclass(frozen=True)
class TokenPair:
    access: str
    refresh: str

    def to_dict(self) -> Dict[str, str]:
        return {"access": self.access, "refresh": self.refresh}


class TokenCodec:
    """
    Signs and verifies the two token kinds with independent secrets and TTLs.

    A valid signature only proves the token was minted here; callers must still
    compare the embedded secret with the stored one to honour revocation.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: int = 86400,
        refresh_ttl: int = 604800,
        algorithm: str = "HS256",
        clock: Optional[Clock] = None,
    ):
        self._keys = {ACCESS: access_secret, REFRESH: refresh_secret}
        self._ttls = {ACCESS: int(access_ttl), REFRESH: int(refresh_ttl)}
        self.algorithm = algorithm
        self.clock = clock or Clock()

    @classmethod
    def from_config(cls, config, clock: Optional[Clock] = None) -> "TokenCodec":
        return cls(
            access_secret=config["TOKENS_ACCESS_SECRET"],
            refresh_secret=config["TOKENS_REFRESH_SECRET"],
            access_ttl=config["TOKENS_ACCESS_EXPIRATION"],
            refresh_ttl=config["TOKENS_REFRESH_EXPIRATION"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            clock=clock,
        )

    @property
    def access_ttl(self) -> int:
        return self._ttls[ACCESS]

    @property
    def refresh_ttl(self) -> int:
        return self._ttls[REFRESH]

    def issue(self, purpose: str, user_id, secret: str) -> str:
        if purpose not in SECRET_CLAIMS:
            raise ValueError(f"Unknown token purpose: {purpose}")
        now = self.clock.now_seconds()
        payload = {
            "id": str(user_id),
            SECRET_CLAIMS[purpose]: secret,
            "type": purpose,
            "iat": now,
            "exp": now + self._ttls[purpose],
        }
        return jwt.encode(payload, self._keys[purpose], algorithm=self.algorithm)

    def issue_pair(self, user_id, access_secret: str, refresh_secret: str) -> TokenPair:
        return TokenPair(
            access=self.issue(ACCESS, user_id, access_secret),
            refresh=self.issue(REFRESH, user_id, refresh_secret),
        )

    def verify(self, purpose: str, token: str) -> TokenClaims:
        """
        Decode and validate a token of the given purpose.
        Raises TokenExpired on expiry, InvalidToken on anything else.
        """
        if purpose not in SECRET_CLAIMS:
            raise ValueError(f"Unknown token purpose: {purpose}")
        try:
            decoded = jwt.decode(token, self._keys[purpose], algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise TokenExpired("Token expired")
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(f"Invalid token: {exc}")

        user_id = decoded.get("id")
        secret = decoded.get(SECRET_CLAIMS[purpose])
        if not (isinstance(user_id, str) and user_id and isinstance(secret, str) and secret):
            raise InvalidToken("Token is missing required claims")
        if decoded.get("type") != purpose:
            raise InvalidToken("Wrong token type")
        return TokenClaims(user_id=user_id, secret=secret)
