from functools import wraps
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from flask import g
from server.extension import db
from server.models import User


def login_required(fn):
    """
    Verify the bearer token and attach the calling user to g.current_user.
    Tokens are issued by the identity service; the identity claim is the user id.
    """
    @wraps(fn)
    def decorator(*args, **kwargs):
        verify_jwt_in_request()
        try:
            user_id = int(get_jwt_identity())
        except (TypeError, ValueError):
            return {"message": "Invalid token identity"}, 401

        user = db.session.get(User, user_id)
        if not user:
            return {"message": "User not found"}, 404
        g.current_user = user

        return fn(*args, **kwargs)
    return decorator
