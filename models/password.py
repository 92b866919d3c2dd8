"""
Password model: one active argon2 hash per user.
Superseded hashes are revoked, not removed, so the history stays in the table.
"""
from sqlalchemy import Column, String, ForeignKey
from models.base_model import BaseModel, Base


class Password(BaseModel, Base):
    __tablename__ = "passwords"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    hash = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<Password user={self.user_id} state={self.state}>"
