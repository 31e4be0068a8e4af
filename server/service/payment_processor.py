# server/service/payment_processor.py
"""Submission of repayments against a loan.

Cash is self-verifying: it is accepted and applied to the loan in the same
transaction that records it. Electronic transfers are stored as pending and
wait for the lender (see ``payment_verification``).
"""
import logging
from datetime import datetime
from server.extension import db
from server.models import Payment
from server.exceptions import ValidationError, NotFoundError
from server.service.loan_service import lock_loan
from server.service.notification_dispatch import record_notification, dispatch
from server.utils.helper import to_money, atomic
from server.utils.ledger_constants import (
    PAYMENT_METHODS, METHOD_CASH, METHOD_E_WALLET,
    PAYMENT_ACCEPTED, PAYMENT_PENDING,
    NOTIFY_PAYMENT_RECEIVED, NOTIFY_PAYMENT_VERIFIED
)

logger = logging.getLogger(__name__)


def apply_accepted_payment(loan, amount):
    """Apply an accepted payment's amount to the (locked) loan row."""
    remaining = loan.apply_payment(amount)
    logger.info(f"Loan {loan.id}: applied {amount}, remaining={remaining} status={loan.status}")
    return loan


def submit_payment(loan_id, payer_id, amount, method, screenshot_url=None):
    amount = to_money(amount)

    if method not in PAYMENT_METHODS:
        raise ValidationError(f"payment_method must be one of: {', '.join(PAYMENT_METHODS)}")
    if amount <= 0:
        raise ValidationError("amount must be greater than 0")
    if method == METHOD_E_WALLET and not screenshot_url:
        raise ValidationError("A payment screenshot is required for e_wallet payments")

    with atomic():
        loan = lock_loan(id=loan_id, borrower_id=payer_id)
        if not loan:
            raise NotFoundError("Loan not found")
        if loan.is_paid:
            raise ValidationError("Loan is already paid")
        if amount > loan.remaining_amount:
            raise ValidationError("Payment amount exceeds remaining balance")

        payment = Payment(
            loan_id=loan.id,
            payer_id=payer_id,
            amount=amount,
            payment_method=method,
            screenshot_url=screenshot_url if method == METHOD_E_WALLET else None,
            status=PAYMENT_PENDING,
        )

        if method == METHOD_CASH:
            payment.status = PAYMENT_ACCEPTED
            payment.verified_by = loan.lender_id
            payment.verified_at = datetime.utcnow()
            apply_accepted_payment(loan, amount)

        db.session.add(payment)
        db.session.flush()

        payer = loan.borrower
        if method == METHOD_CASH:
            kind = NOTIFY_PAYMENT_VERIFIED
            title = "Payment Received (Cash)"
            message = f"{payer.name} paid {payment.amount} {loan.currency} in cash"
        else:
            kind = NOTIFY_PAYMENT_RECEIVED
            title = "Payment Proof Submitted"
            message = f"{payer.name} submitted payment proof of {payment.amount} {loan.currency}. Please verify."

        _, push = record_notification(
            loan.lender, kind, title, message,
            sender=payer, loan=loan, data={"payment_id": payment.id}
        )

    logger.info(f"Payment {payment.id} on loan {loan.id} submitted ({method}, {payment.status})")
    dispatch([push])
    return payment
