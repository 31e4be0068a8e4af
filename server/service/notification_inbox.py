# server/service/notification_inbox.py
import logging
from sqlalchemy.orm import joinedload
from server.extension import db
from server.models import Loan, Notification
from server.exceptions import ValidationError, NotFoundError
from server.service.notification_dispatch import record_notification, dispatch
from server.utils.helper import atomic
from server.utils.ledger_constants import LOAN_PAID, NOTIFY_REMINDER, MAX_TEXT_LENGTH

logger = logging.getLogger(__name__)

PER_PAGE = 20


def list_notifications(user_id, page=1, per_page=PER_PAGE):
    query = (
        Notification.query.options(
            joinedload(Notification.sender),
            joinedload(Notification.loan),
        )
        .filter_by(user_id=user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
    )
    return query.paginate(page=page, per_page=per_page, error_out=False)


def unread_count(user_id):
    return Notification.query.filter_by(user_id=user_id, is_read=False).count()


def _own_notification(notification_id, user_id):
    notification = Notification.query.filter_by(id=notification_id, user_id=user_id).first()
    if not notification:
        raise NotFoundError("Notification not found")
    return notification


def mark_as_read(notification_id, user_id):
    with atomic():
        notification = _own_notification(notification_id, user_id)
        notification.mark_as_read()
    return notification


def mark_all_as_read(user_id):
    with atomic():
        updated = (
            Notification.query.filter_by(user_id=user_id, is_read=False)
            .update({"is_read": True}, synchronize_session=False)
        )
    return updated


def delete_notification(notification_id, user_id):
    with atomic():
        notification = _own_notification(notification_id, user_id)
        db.session.delete(notification)


def send_manual_reminder(loan_id, lender_id, message=None):
    """Lender nudges the borrower of an unpaid loan."""
    if message is not None and len(message) > MAX_TEXT_LENGTH:
        raise ValidationError(f"message must be at most {MAX_TEXT_LENGTH} characters")

    with atomic():
        loan = Loan.query.filter(
            Loan.id == loan_id,
            Loan.lender_id == lender_id,
            Loan.status != LOAN_PAID,
        ).first()
        if not loan:
            raise NotFoundError("Loan not found")

        lender = loan.lender
        custom_message = message or f"Please pay back the loan of {loan.remaining_amount} {loan.currency}"
        notification, push = record_notification(
            loan.borrower, NOTIFY_REMINDER, "Payment Reminder",
            f"{lender.name}: {custom_message}",
            sender=lender, loan=loan
        )

    logger.info(f"Manual reminder for loan {loan_id} sent by lender {lender_id}")
    dispatch([push])
    return notification
