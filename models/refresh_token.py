"""
RefreshToken model: one row per issued refresh token (one per logged-in device).
Fields:
- user_id (String(36)) - FK to users.id
- refresh_image - per-record secret, must match the token's refreshImage claim
- token - the signed refresh token itself
- expiration_date - epoch milliseconds, string-encoded
- state - ACTIVE until consumed by a refresh or revoked by a logout
"""
from sqlalchemy import Column, String, Text, ForeignKey
from models.base_model import BaseModel, Base


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    refresh_image = Column(String(255), nullable=False)
    token = Column(Text, nullable=False)
    expiration_date = Column(String(32), nullable=False)

    def is_expired(self, now_millis: int) -> bool:
        return now_millis > int(self.expiration_date)

    def __repr__(self):
        return f"<RefreshToken user={self.user_id} state={self.state}>"
