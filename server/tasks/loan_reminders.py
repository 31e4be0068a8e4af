# server/tasks/loan_reminders.py
import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload
from server.extension import db
from server.models import Loan
from server.service.notification_dispatch import record_notification, dispatch
from server.utils.helper import utc_today
from server.utils.ledger_constants import NOTIFY_AUTO_REMINDER
from server.utils.reminders import (
    REMINDER_RULES, bucket_qexpr, reminder_already_sent, render_reminder
)

logger = logging.getLogger(__name__)


def run_reminder_sweep(as_of_date=None):
    """Issue at most one reminder per loan per bucket for ``as_of_date``.

    Safe to run any number of times a day. Returns the number of reminders
    actually created per bucket.
    """
    today = as_of_date or utc_today()
    counts = {}

    for rule in REMINDER_RULES:
        loans = (
            Loan.query.options(joinedload(Loan.lender), joinedload(Loan.borrower))
            .filter(bucket_qexpr(rule.bucket, today))
            .order_by(Loan.id)
            .all()
        )
        sent = 0
        for loan in loans:
            if _send_reminder(rule, loan, today):
                sent += 1
        counts[rule.bucket] = sent
        logger.info(f"Sent {sent} '{rule.bucket}' reminders for {today} ({len(loans)} matching loans)")

    return counts


def _send_reminder(rule, loan, today):
    if reminder_already_sent(loan, rule.bucket, today):
        return False

    borrower = loan.borrower
    try:
        with db.session.begin_nested():
            _, push = record_notification(
                borrower,
                NOTIFY_AUTO_REMINDER,
                rule.title,
                render_reminder(rule, loan, today),
                loan=loan,
                reminder_type=rule.bucket,
                reminder_date=today,
            )
        db.session.commit()
    except IntegrityError:
        # another sweep inserted the same (borrower, loan, bucket, day) first
        db.session.rollback()
        logger.info(f"Loan {loan.id}: '{rule.bucket}' reminder for {today} already exists, skipping")
        return False

    dispatch([push])
    return True


def process_daily_reminders(app):
    """Entry point for the scheduler: run the sweep inside an app context."""
    with app.app_context():
        try:
            counts = run_reminder_sweep()
            logger.info(f"Daily reminder sweep finished: {counts}")
            return counts
        except Exception as e:
            logger.error(f"Error processing loan reminders: {e}", exc_info=True)
            db.session.rollback()
            raise
