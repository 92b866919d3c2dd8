"""
Session secret store: AccessImage and RefreshToken records.

Every method only stages changes on the storage session; the calling
operation commits once, so a rotation and the revocations it implies land
in the same transaction.
"""
from __future__ import annotations

import logging
from typing import Optional

from models import AccessImage, RecordState, RefreshToken
from utils.clock import Clock
from utils.security import TokenCodec, TokenPair, generate_image

logger = logging.getLogger(__name__)

REVOKE = {"state": RecordState.REVOKED}


class SessionStore:
    def __init__(self, storage, codec: TokenCodec, clock: Optional[Clock] = None):
        self.storage = storage
        self.codec = codec
        self.clock = clock or Clock()

    def new_secret(self, user_id) -> str:
        return generate_image(user_id, self.clock.now_millis())

    def current_access_secret(self, user_id) -> Optional[str]:
        record = self.storage.find_one(AccessImage, user_id=user_id)
        return record.image if record else None

    def rotate_access_secret(self, user_id) -> str:
        """Revoke the active AccessImage (if any) and stage a fresh one."""
        secret = self.new_secret(user_id)
        revoked = self.storage.update_many(AccessImage, {"user_id": user_id}, REVOKE)
        self.storage.new(AccessImage(user_id=user_id, image=secret))
        logger.debug("rotated access image for user %s (%d revoked)", user_id, revoked)
        return secret

    def ensure_access_secret(self, user_id) -> str:
        return self.current_access_secret(user_id) or self.rotate_access_secret(user_id)

    def open_refresh_session(self, user_id, access_secret: str) -> TokenPair:
        """Mint a token pair around a new refresh secret and stage its RefreshToken record."""
        refresh_secret = self.new_secret(user_id)
        tokens = self.codec.issue_pair(user_id, access_secret, refresh_secret)
        expiration = self.clock.now_millis() + self.codec.refresh_ttl * 1000
        self.storage.new(
            RefreshToken(
                user_id=user_id,
                refresh_image=refresh_secret,
                token=tokens.refresh,
                expiration_date=str(expiration),
            )
        )
        return tokens

    def find_refresh_token(self, token: str) -> Optional[RefreshToken]:
        return self.storage.find_one(RefreshToken, token=token)

    def consume_refresh_token(self, record: RefreshToken) -> bool:
        """
        Compare-and-set ACTIVE -> REVOKED on this one record.
        False means another request already consumed it.
        """
        return self.storage.update_many(RefreshToken, {"id": record.id}, REVOKE) == 1

    def revoke_refresh_token(self, user_id, token: str) -> int:
        return self.storage.update_many(RefreshToken, {"user_id": user_id, "token": token}, REVOKE)

    def revoke_refresh_tokens(self, user_id) -> int:
        return self.storage.update_many(RefreshToken, {"user_id": user_id}, REVOKE)

    def revoke_all(self, user_id) -> None:
        """Drop every access image and refresh token of the user."""
        access = self.storage.update_many(AccessImage, {"user_id": user_id}, REVOKE)
        refresh = self.revoke_refresh_tokens(user_id)
        logger.info("revoked sessions of user %s (%d access, %d refresh)", user_id, access, refresh)
