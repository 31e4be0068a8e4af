# server/service/notification_dispatch.py
"""In-app notification records plus post-commit push delivery.

``record_notification`` only stages a row on the current session so it
commits (or rolls back) together with the ledger change that caused it.
``dispatch`` must be called after that commit: it performs network I/O and
must never run while loan or payment rows are locked.
"""
import logging
from collections import namedtuple
from server.extension import db
from server.models import Notification
from server.service.notifications.push_sender import send_push

logger = logging.getLogger(__name__)

PushMessage = namedtuple("PushMessage", ["user", "title", "body", "data"])


def record_notification(recipient, type, title, message, sender=None, loan=None,
                        data=None, reminder_type=None, reminder_date=None):
    notification = Notification(
        user_id=recipient.id,
        sender_id=sender.id if sender else None,
        loan_id=loan.id if loan else None,
        type=type,
        title=title,
        message=message,
        reminder_type=reminder_type,
        reminder_date=reminder_date,
        data=data,
    )
    db.session.add(notification)

    push_data = {"type": type}
    if loan is not None:
        push_data["loan_id"] = loan.id
    if reminder_type:
        push_data["reminder_type"] = reminder_type
    push_data.update(data or {})

    return notification, PushMessage(recipient, title, message, push_data)


def dispatch(messages):
    """Push each staged message; returns how many were delivered."""
    delivered = 0
    for msg in messages:
        if msg is None:
            continue
        if send_push(msg.user, msg.title, msg.body, msg.data):
            delivered += 1
        else:
            logger.warning(f"Push not delivered to user {msg.user.id}: '{msg.title}'")
    return delivered
