from flask_restful import Resource
from flask import request, g
from server.schemas import NotificationSchema
from server.service import notification_inbox
from server.utils.decorators import login_required
from server.utils.restful import LedgerApi
from . import notification_bp

api = LedgerApi(notification_bp)

notifications_schema = NotificationSchema(many=True)


class NotificationListResource(Resource):

    @login_required
    def get(self):
        page = request.args.get("page", 1, type=int)
        pagination = notification_inbox.list_notifications(g.current_user.id, page=page)
        return {
            "data": notifications_schema.dump(pagination.items),
            "current_page": pagination.page,
            "per_page": pagination.per_page,
            "total": pagination.total,
            "last_page": pagination.pages,
        }, 200


class UnreadCountResource(Resource):

    @login_required
    def get(self):
        return {"unread_count": notification_inbox.unread_count(g.current_user.id)}, 200


class NotificationReadResource(Resource):

    @login_required
    def put(self, notification_id):
        notification_inbox.mark_as_read(notification_id, g.current_user.id)
        return {"message": "Notification marked as read"}, 200


class NotificationReadAllResource(Resource):

    @login_required
    def put(self):
        updated = notification_inbox.mark_all_as_read(g.current_user.id)
        return {"message": "All notifications marked as read", "updated": updated}, 200


class NotificationResource(Resource):

    @login_required
    def delete(self, notification_id):
        notification_inbox.delete_notification(notification_id, g.current_user.id)
        return {"message": "Notification deleted"}, 200


api.add_resource(NotificationListResource, "/notifications")
api.add_resource(UnreadCountResource, "/notifications/unread-count")
api.add_resource(NotificationReadAllResource, "/notifications/read-all")
api.add_resource(NotificationReadResource, "/notifications/<int:notification_id>/read")
api.add_resource(NotificationResource, "/notifications/<int:notification_id>")
