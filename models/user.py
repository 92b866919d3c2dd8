import enum

from models.base_model import Base, BaseModel
from sqlalchemy import Boolean, Column, Enum, Integer, String, Text


class AccountStatus(str, enum.Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"


class User(BaseModel, Base):
    __tablename__ = "users"
    email = Column(String(255), nullable=False, index=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    about = Column(Text, nullable=True, default="")
    role = Column(String(32), nullable=False, default="user")
    account_status = Column(
        Enum(AccountStatus, native_enum=False, length=16, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=AccountStatus.ACTIVE,
    )
    failed_login_attempts = Column(Integer, nullable=False, default=0)
    email_is_verified = Column(Boolean, nullable=False, default=False)

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("role", "user")
        kwargs.setdefault("account_status", AccountStatus.ACTIVE)
        kwargs.setdefault("failed_login_attempts", 0)
        kwargs.setdefault("email_is_verified", False)
        super().__init__(*args, **kwargs)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def is_blocked(self) -> bool:
        return self.account_status == AccountStatus.BLOCKED
