# server/service/loan_service.py
import logging
from flask import current_app
from sqlalchemy import or_
from sqlalchemy.orm import joinedload
from server.extension import db
from server.models import Loan, User
from server.exceptions import ValidationError, NotFoundError, ConflictError
from server.service.notification_dispatch import record_notification, dispatch
from server.utils.helper import to_money, parse_date, utc_today, atomic
from server.utils.ledger_constants import (
    LOAN_PENDING, LOAN_PAID, MAX_TEXT_LENGTH,
    NOTIFY_LOAN_CREATED, NOTIFY_DUE_DATE_SET,
    NOTIFY_DUE_DATE_CHANGED, NOTIFY_DUE_DATE_REMOVED
)

logger = logging.getLogger(__name__)


def _check_description(description):
    if description is not None and len(description) > MAX_TEXT_LENGTH:
        raise ValidationError(f"description must be at most {MAX_TEXT_LENGTH} characters")


def lock_loan(**criteria):
    """Load a loan row under SELECT ... FOR UPDATE, refreshing any cached copy."""
    return (
        Loan.query.filter_by(**criteria)
        .with_for_update()
        .populate_existing()
        .first()
    )


def create_loan(lender_id, borrower_id, amount, currency=None, description=None, due_date=None):
    amount = to_money(amount)
    due_date = parse_date(due_date, "due_date")

    if amount <= 0:
        raise ValidationError("amount must be greater than 0")
    if borrower_id == lender_id:
        raise ValidationError("Cannot create loan to yourself")
    if due_date is not None and due_date <= utc_today():
        raise ValidationError("due_date must be after today")
    _check_description(description)

    lender = db.session.get(User, lender_id)
    if not lender:
        raise NotFoundError("Lender not found")
    borrower = db.session.get(User, borrower_id)
    if not borrower:
        raise NotFoundError("Borrower not found")

    currency = currency or current_app.config.get("DEFAULT_CURRENCY", "MMK")

    with atomic():
        loan = Loan(
            lender_id=lender.id,
            borrower_id=borrower.id,
            amount=amount,
            currency=currency,
            description=description,
            due_date=due_date,
            status=LOAN_PENDING,
            remaining_amount=amount,
        )
        db.session.add(loan)
        db.session.flush()

        message = f"{lender.name} created a loan of {loan.amount} {loan.currency}"
        if loan.due_date:
            message += f" (Due: {loan.due_date:%b %d, %Y})"

        _, push = record_notification(
            borrower, NOTIFY_LOAN_CREATED, "New Loan Created", message,
            sender=lender, loan=loan
        )

    logger.info(f"Loan {loan.id} created: {lender.id} -> {borrower.id} {loan.amount} {loan.currency}")
    dispatch([push])
    return loan


def update_loan(loan_id, lender_id, changes):
    """Lender edits description and/or due date of an unpaid loan."""
    if "description" in changes:
        _check_description(changes["description"])
    new_due_date = parse_date(changes.get("due_date"), "due_date")

    pushes = []
    with atomic():
        loan = (
            Loan.query.filter(
                Loan.id == loan_id,
                Loan.lender_id == lender_id,
                Loan.status != LOAN_PAID,
            )
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not loan:
            raise NotFoundError("Loan not found")

        if "description" in changes:
            loan.description = changes["description"]

        if "due_date" in changes and new_due_date != loan.due_date:
            old_due_date = loan.due_date
            loan.due_date = new_due_date
            lender = loan.lender

            if old_due_date is None:
                kind, title = NOTIFY_DUE_DATE_SET, "Due Date Set"
                message = f"{lender.name} set due date to {new_due_date:%b %d, %Y}"
            elif new_due_date is None:
                kind, title = NOTIFY_DUE_DATE_REMOVED, "Due Date Removed"
                message = f"{lender.name} removed the due date. Pay anytime."
            else:
                kind, title = NOTIFY_DUE_DATE_CHANGED, "Due Date Changed"
                message = f"{lender.name} changed due date to {new_due_date:%b %d, %Y}"

            _, push = record_notification(
                loan.borrower, kind, title, message, sender=lender, loan=loan
            )
            pushes.append(push)

    dispatch(pushes)
    return loan


def delete_loan(loan_id, lender_id):
    with atomic():
        loan = lock_loan(id=loan_id, lender_id=lender_id)
        if not loan:
            raise NotFoundError("Loan not found")
        if loan.status != LOAN_PENDING or loan.payments:
            raise ConflictError("Only pending loans without payments can be deleted")

        db.session.delete(loan)
    logger.info(f"Loan {loan_id} deleted by lender {lender_id}")


def get_loan(loan_id, user_id):
    loan = (
        Loan.query.options(
            joinedload(Loan.lender),
            joinedload(Loan.borrower),
        )
        .filter(
            Loan.id == loan_id,
            or_(Loan.lender_id == user_id, Loan.borrower_id == user_id),
        )
        .first()
    )
    if not loan:
        raise NotFoundError("Loan not found")
    return loan


def list_loans(user_id):
    loans_given = (
        Loan.query.filter_by(lender_id=user_id)
        .order_by(Loan.created_at.desc(), Loan.id.desc())
        .all()
    )
    loans_taken = (
        Loan.query.filter_by(borrower_id=user_id)
        .order_by(Loan.created_at.desc(), Loan.id.desc())
        .all()
    )
    return {"loans_given": loans_given, "loans_taken": loans_taken}


def loans_with_user(user_id, other_id):
    """Loans in both directions between two users, with net balance."""
    loans_given = Loan.query.filter_by(lender_id=user_id, borrower_id=other_id).all()
    loans_taken = Loan.query.filter_by(lender_id=other_id, borrower_id=user_id).all()

    total_given = sum((l.remaining_amount for l in loans_given if l.status != LOAN_PAID), to_money(0))
    total_owed = sum((l.remaining_amount for l in loans_taken if l.status != LOAN_PAID), to_money(0))

    return {
        "loans_given": loans_given,
        "loans_taken": loans_taken,
        "total_given": total_given,
        "total_owed": total_owed,
        "net_balance": total_given - total_owed,
    }
