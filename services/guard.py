"""Access token check shared by the strict and soft request guards."""
from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Optional

from models import AccessImage, AccountStatus, User
from services.results import ErrorKind, Result
from utils.security import ACCESS, InvalidToken, TokenCodec, TokenExpired


@dataclass(frozen=True)
class Identity:
    user_id: str
    role: str
    user: User


def check_access_token(storage, codec: TokenCodec, token: Optional[str]) -> Result[Identity]:
    """
    Full verification of an access token:
    signature and expiry, then the stored AccessImage and an active user,
    then the embedded secret against the stored one.
    """
    if not token:
        return Result.failure(ErrorKind.MISSING_TOKEN)

    try:
        claims = codec.verify(ACCESS, token)
    except TokenExpired:
        return Result.failure(ErrorKind.TOKEN_EXPIRED)
    except InvalidToken:
        return Result.failure(ErrorKind.INVALID_TOKEN)

    access_image = storage.find_one(AccessImage, user_id=claims.user_id)
    user = storage.find_one(User, id=claims.user_id, account_status=AccountStatus.ACTIVE)
    if not (access_image and user):
        return Result.failure(ErrorKind.ACCESS_DENIED)

    if not hmac.compare_digest(access_image.image.encode(), claims.secret.encode()):
        return Result.failure(ErrorKind.INVALID_TOKEN)

    return Result.success(Identity(user_id=user.id, role=user.role, user=user))
