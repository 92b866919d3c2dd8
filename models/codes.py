"""
One-time codes mailed to users. The three purposes share one shape:
- user_id, code (random string), expiration_date (epoch ms, string-encoded)
At most one ACTIVE code per (user, purpose); verifying consumes it.
"""
from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import declared_attr
from models.base_model import BaseModel, Base


class CodeMixin:
    @declared_attr
    def user_id(cls):
        return Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    code = Column(String(64), nullable=False, index=True)
    expiration_date = Column(String(32), nullable=False)

    def is_expired(self, now_millis: int) -> bool:
        return now_millis > int(self.expiration_date)

    def __repr__(self):
        return f"<{self.__class__.__name__} user={self.user_id} state={self.state}>"


class AccountRecoveryCode(CodeMixin, BaseModel, Base):
    __tablename__ = "account_recovery_codes"


class PasswordRecoveryCode(CodeMixin, BaseModel, Base):
    __tablename__ = "password_recovery_codes"


class EmailVerificationCode(CodeMixin, BaseModel, Base):
    __tablename__ = "email_verification_codes"
