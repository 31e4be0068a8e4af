# server/utils/reminders.py
from collections import namedtuple
from datetime import timedelta
from sqlalchemy import and_
from server.extension import db
from server.models import Loan, Notification
from server.utils.ledger_constants import (
    LOAN_PAID, NOTIFY_AUTO_REMINDER,
    BUCKET_DUE_TODAY, BUCKET_DUE_TOMORROW, BUCKET_DUE_SOON, BUCKET_OVERDUE
)

DUE_SOON_DAYS = 3

ReminderRule = namedtuple("ReminderRule", ["bucket", "title", "template"])

# Scanned in this order; predicates are mutually exclusive per due date.
REMINDER_RULES = (
    ReminderRule(
        BUCKET_DUE_TODAY,
        "Payment Due Today",
        "Your loan of {remaining} {currency} to {lender} is due today!",
    ),
    ReminderRule(
        BUCKET_DUE_TOMORROW,
        "Payment Due Tomorrow",
        "Reminder: Your loan of {remaining} {currency} to {lender} is due tomorrow.",
    ),
    ReminderRule(
        BUCKET_DUE_SOON,
        f"Payment Due in {DUE_SOON_DAYS} Days",
        "Upcoming: Your loan of {remaining} {currency} to {lender} is due in " + str(DUE_SOON_DAYS) + " days.",
    ),
    ReminderRule(
        BUCKET_OVERDUE,
        "Payment Overdue",
        "Your loan of {remaining} {currency} to {lender} is {days_overdue} days overdue!",
    ),
)


def bucket_qexpr(bucket, today):
    """SQL filter selecting unpaid loans that fall in ``bucket`` on ``today``."""
    unpaid = Loan.status != LOAN_PAID
    if bucket == BUCKET_DUE_TODAY:
        return and_(unpaid, Loan.due_date == today)
    if bucket == BUCKET_DUE_TOMORROW:
        return and_(unpaid, Loan.due_date == today + timedelta(days=1))
    if bucket == BUCKET_DUE_SOON:
        return and_(unpaid, Loan.due_date == today + timedelta(days=DUE_SOON_DAYS))
    if bucket == BUCKET_OVERDUE:
        return and_(unpaid, Loan.due_date.isnot(None), Loan.due_date < today)
    raise ValueError(f"Unknown reminder bucket: {bucket}")


def reminder_already_sent(loan, bucket, day):
    """Advisory check; the unique constraint on notifications is the backstop."""
    return db.session.query(
        Notification.query.filter(
            Notification.user_id == loan.borrower_id,
            Notification.loan_id == loan.id,
            Notification.type == NOTIFY_AUTO_REMINDER,
            Notification.sender_id.is_(None),
            Notification.reminder_type == bucket,
            Notification.reminder_date == day,
        ).exists()
    ).scalar()


def render_reminder(rule, loan, today):
    return rule.template.format(
        remaining=loan.remaining_amount,
        currency=loan.currency,
        lender=loan.lender.name,
        days_overdue=loan.days_overdue(today),
    )
