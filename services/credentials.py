from __future__ import annotations

from typing import Optional

from models import Password, RecordState
from utils.security import hash_password, verify_password


class CredentialStore:
    """Current password hash per user; older hashes stay behind as revoked rows."""

    def __init__(self, storage):
        self.storage = storage

    def current(self, user_id) -> Optional[Password]:
        return self.storage.find_one(Password, user_id=user_id)

    def verify_password(self, user_id, candidate: str) -> bool:
        record = self.current(user_id)
        return record is not None and verify_password(candidate, record.hash)

    def set_password(self, user_id, plaintext: str) -> Password:
        self.storage.update_many(Password, {"user_id": user_id}, {"state": RecordState.REVOKED})
        return self.storage.new(Password(user_id=user_id, hash=hash_password(plaintext)))
