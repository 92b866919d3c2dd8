"""
AccessImage model: the secret embedded in every access token of a user.
Fields:
- user_id (String(36)) - FK to users.id
- image - opaque secret, compared with the token's accessImage claim
- state - only one ACTIVE row per user (partial unique index)
"""
from sqlalchemy import Column, String, ForeignKey, Index, text
from models.base_model import BaseModel, Base


class AccessImage(BaseModel, Base):
    __tablename__ = "access_images"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    image = Column(String(255), nullable=False)

    __table_args__ = (
        Index(
            "uq_access_images_active_user",
            "user_id",
            unique=True,
            sqlite_where=text("state = 'active'"),
            postgresql_where=text("state = 'active'"),
        ),
    )

    def __repr__(self):
        return f"<AccessImage user={self.user_id} state={self.state}>"
