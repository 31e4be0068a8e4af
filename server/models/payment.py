from datetime import datetime
from server.extension import db
from server.models.loan import MONEY
from server.utils.ledger_constants import (
    PAYMENT_METHODS, PAYMENT_STATUSES, PAYMENT_PENDING,
    PAYMENT_ACCEPTED, METHOD_CASH
)


class Payment(db.Model):
    __tablename__ = "payments"
    __table_args__ = (
        db.CheckConstraint("amount > 0", name="ck_payments_positive_amount"),
        db.CheckConstraint(
            "status <> 'rejected' OR rejected_reason IS NOT NULL",
            name="ck_payments_rejection_reason"
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    loan_id = db.Column(db.Integer, db.ForeignKey("loans.id", ondelete="CASCADE"), nullable=False, index=True)
    payer_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    amount = db.Column(MONEY, nullable=False)
    payment_method = db.Column(db.Enum(*PAYMENT_METHODS, name="payment_method"), nullable=False)
    screenshot_url = db.Column(db.String(500), nullable=True)  # proof of transfer
    status = db.Column(db.Enum(*PAYMENT_STATUSES, name="payment_status"), nullable=False, default=PAYMENT_PENDING)
    rejected_reason = db.Column(db.String(500), nullable=True)
    verified_at = db.Column(db.DateTime, nullable=True)
    verified_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    loan = db.relationship("Loan", back_populates="payments")
    payer = db.relationship("User", foreign_keys=[payer_id])
    verifier = db.relationship("User", foreign_keys=[verified_by])

    @property
    def is_cash(self):
        return self.payment_method == METHOD_CASH

    @property
    def is_pending(self):
        return self.status == PAYMENT_PENDING

    def mark_verified(self, status, verifier_id, reason=None):
        self.status = status
        self.verified_by = verifier_id
        self.verified_at = datetime.utcnow()
        if status != PAYMENT_ACCEPTED:
            self.rejected_reason = reason
