from flask_restful import Resource
from flask import request, g
from server.extension import db
from server.schemas import UserSchema, FcmTokenSchema
from server.utils.decorators import login_required
from server.utils.restful import LedgerApi
from . import profile_bp

api = LedgerApi(profile_bp)
user_schema = UserSchema()
fcm_token_schema = FcmTokenSchema()


class MeResource(Resource):
    @login_required
    def get(self):
        return user_schema.dump(g.current_user), 200


class FcmTokenResource(Resource):
    @login_required
    def put(self):
        data = fcm_token_schema.load(request.get_json() or {})
        g.current_user.fcm_token = data["fcm_token"]
        db.session.commit()
        return {"message": "Device token updated"}, 200


api.add_resource(MeResource, '/me')
api.add_resource(FcmTokenResource, '/me/fcm-token')
