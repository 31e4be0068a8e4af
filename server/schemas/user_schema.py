from server.extension import ma
from server.models import User


class UserSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = User
        exclude = ("fcm_token",)

    created_at = ma.DateTime(format="%Y-%m-%dT%H:%M:%S")


class FcmTokenSchema(ma.Schema):
    fcm_token = ma.String(required=True, allow_none=True)
