# server/service/payment_verification.py
import logging
from server.extension import db
from server.models import Loan, Payment
from server.exceptions import (
    ValidationError, NotFoundError, AuthorizationError, ConflictError
)
from server.service.loan_service import lock_loan
from server.service.payment_processor import apply_accepted_payment
from server.service.notification_dispatch import record_notification, dispatch
from server.utils.helper import atomic
from server.utils.ledger_constants import (
    PAYMENT_PENDING, PAYMENT_ACCEPTED, PAYMENT_REJECTED, MAX_TEXT_LENGTH,
    NOTIFY_PAYMENT_VERIFIED, NOTIFY_PAYMENT_REJECTED
)

logger = logging.getLogger(__name__)


def _lock_pending_payment(payment_id, lender_id):
    """Lock the payment's loan then the payment; both must still be resolvable.

    The loan row is locked first so that concurrent acceptances on the same
    loan serialize on it before either reads the remaining balance.
    """
    payment = db.session.get(Payment, payment_id)
    if not payment:
        raise NotFoundError("Payment not found")

    loan = payment.loan
    if lender_id not in (loan.lender_id, loan.borrower_id):
        raise NotFoundError("Payment not found")
    if loan.lender_id != lender_id:
        raise AuthorizationError("Only the lender can verify this payment")

    loan = lock_loan(id=loan.id)
    payment = (
        Payment.query.filter_by(id=payment_id)
        .with_for_update()
        .populate_existing()
        .one()
    )
    if payment.status != PAYMENT_PENDING:
        raise ConflictError(f"Payment has already been {payment.status}")
    return loan, payment


def accept_payment(payment_id, lender_id):
    with atomic():
        loan, payment = _lock_pending_payment(payment_id, lender_id)

        # Several pending transfers may together exceed what is still owed.
        if payment.amount > loan.remaining_amount:
            raise ConflictError("Payment exceeds the loan's remaining balance")

        payment.mark_verified(PAYMENT_ACCEPTED, lender_id)
        apply_accepted_payment(loan, payment.amount)

        lender = loan.lender
        _, push = record_notification(
            payment.payer, NOTIFY_PAYMENT_VERIFIED, "Payment Accepted",
            f"{lender.name} accepted your payment of {payment.amount} {loan.currency}",
            sender=lender, loan=loan, data={"payment_id": payment.id}
        )

    logger.info(f"Payment {payment.id} accepted by lender {lender_id}")
    dispatch([push])
    return payment


def reject_payment(payment_id, lender_id, reason):
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("A rejection reason is required")
    if len(reason) > MAX_TEXT_LENGTH:
        raise ValidationError(f"reason must be at most {MAX_TEXT_LENGTH} characters")

    with atomic():
        loan, payment = _lock_pending_payment(payment_id, lender_id)

        # The amount was never applied, so the loan is left untouched.
        payment.mark_verified(PAYMENT_REJECTED, lender_id, reason=reason)

        lender = loan.lender
        _, push = record_notification(
            payment.payer, NOTIFY_PAYMENT_REJECTED, "Payment Rejected",
            f"{lender.name} rejected your payment: {reason}",
            sender=lender, loan=loan, data={"payment_id": payment.id}
        )

    logger.info(f"Payment {payment.id} rejected by lender {lender_id}")
    dispatch([push])
    return payment


def pending_verifications(lender_id):
    return (
        Payment.query.join(Loan)
        .filter(Loan.lender_id == lender_id, Payment.status == PAYMENT_PENDING)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .all()
    )
