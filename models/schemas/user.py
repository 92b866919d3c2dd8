from marshmallow import Schema, fields, validate

from models.schemas.common import RequestSchema

NAME_LENGTH = validate.Length(max=128)


class RegistrationSchema(RequestSchema):
    email = fields.Email(required=True)
    first_name = fields.String(required=True, data_key="firstName", validate=NAME_LENGTH)
    last_name = fields.String(required=True, data_key="lastName", validate=NAME_LENGTH)
    password = fields.String(required=True, load_only=True)


class LoginSchema(RequestSchema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)


class RefreshTokenSchema(RequestSchema):
    refresh_token = fields.String(required=True, data_key="refreshToken")


class ChangePasswordSchema(RequestSchema):
    old_password = fields.String(required=True, data_key="oldPassword")
    new_password = fields.String(required=True, data_key="newPassword")


class EmailSchema(RequestSchema):
    email = fields.Email(required=True)


class CodeSchema(RequestSchema):
    code = fields.String(required=True)


class NewPasswordSchema(RequestSchema):
    code = fields.String(required=True)
    new_password = fields.String(required=True, data_key="newPassword")


class AccountUpdateSchema(RequestSchema):
    first_name = fields.String(required=True, data_key="firstName", validate=NAME_LENGTH)
    last_name = fields.String(required=True, data_key="lastName", validate=NAME_LENGTH)
    about = fields.String(load_default="", validate=validate.Length(max=2000))


class AccountOutSchema(Schema):
    id = fields.String()
    email = fields.String()
    first_name = fields.String(data_key="firstName")
    last_name = fields.String(data_key="lastName")
    about = fields.String()
    role = fields.String()
    email_is_verified = fields.Boolean(data_key="emailIsVerified")
    created = fields.Method("get_created")

    def get_created(self, obj):
        return obj.created_at.isoformat() if obj.created_at else None


class PublicProfileSchema(Schema):
    id = fields.String()
    first_name = fields.String(data_key="firstName")
    last_name = fields.String(data_key="lastName")
    about = fields.String()
    role = fields.String()
