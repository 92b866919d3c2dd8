from models.base_model import Base, RecordState
from models.user import User, AccountStatus
from models.password import Password
from models.access_image import AccessImage
from models.refresh_token import RefreshToken
from models.codes import AccountRecoveryCode, PasswordRecoveryCode, EmailVerificationCode
from models.user_email import UserEmail
from models.db_storage import DBStorage

__all__ = [
    "Base",
    "RecordState",
    "User",
    "AccountStatus",
    "Password",
    "AccessImage",
    "RefreshToken",
    "AccountRecoveryCode",
    "PasswordRecoveryCode",
    "EmailVerificationCode",
    "UserEmail",
    "DBStorage",
]
