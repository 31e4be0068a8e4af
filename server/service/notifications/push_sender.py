# server/service/notifications/push_sender.py
import logging
from flask import current_app
import firebase_admin
from firebase_admin import credentials, messaging

# sends push notifications through Firebase Cloud Messaging

logger = logging.getLogger(__name__)

_APP_NAME = "loan-ledger-push"


def _get_firebase_app():
    """Return the configured firebase app, or None when push is disabled."""
    try:
        return firebase_admin.get_app(_APP_NAME)
    except ValueError:
        pass

    cred_path = current_app.config.get("FIREBASE_CREDENTIALS")
    if not cred_path:
        return None

    return firebase_admin.initialize_app(
        credentials.Certificate(cred_path),
        options={"httpTimeout": current_app.config.get("PUSH_TIMEOUT_SECONDS", 5)},
        name=_APP_NAME,
    )


def send_push(user, title, body, data=None):
    """Best-effort push to a user's device. Never raises."""
    if user is None or not user.fcm_token:
        logger.debug("Push skipped: user has no device token")
        return False

    try:
        app = _get_firebase_app()
        if app is None:
            logger.info(f"Push disabled (no FIREBASE_CREDENTIALS); not sending '{title}' to user {user.id}")
            return False

        message = messaging.Message(
            token=user.fcm_token,
            notification=messaging.Notification(title=title, body=body),
            data={key: str(value) for key, value in (data or {}).items() if value is not None},
        )
        response = messaging.send(message, app=app)
        logger.info(f"Push sent to user {user.id} [{title}] -> {response}")
        return True
    except Exception as e:
        logger.error(f"Failed to send push to user {user.id} [{title}] -> {e}")
        return False
