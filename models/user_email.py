from sqlalchemy import Column, String, ForeignKey
from models.base_model import BaseModel, Base


class UserEmail(BaseModel, Base):
    """Pending email change, confirmed through an EmailVerificationCode."""
    __tablename__ = "user_emails"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    email_verification_code_id = Column(
        String(36), ForeignKey("email_verification_codes.id", ondelete="CASCADE"), nullable=False
    )
    new_email = Column(String(255), nullable=False)
    old_email = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<UserEmail user={self.user_id} state={self.state}>"
