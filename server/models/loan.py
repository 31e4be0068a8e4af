from datetime import datetime
from decimal import Decimal
from server.extension import db
from server.utils.ledger_constants import (
    LOAN_STATUSES, LOAN_PENDING, LOAN_PARTIAL, LOAN_PAID
)

MONEY = db.Numeric(15, 2, asdecimal=True)


class Loan(db.Model):
    __tablename__ = "loans"
    __table_args__ = (
        db.CheckConstraint("lender_id <> borrower_id", name="ck_loans_no_self_loan"),
        db.CheckConstraint("amount > 0", name="ck_loans_positive_amount"),
        db.CheckConstraint(
            "remaining_amount >= 0 AND remaining_amount <= amount",
            name="ck_loans_remaining_bounds"
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    lender_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    borrower_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = db.Column(MONEY, nullable=False)
    currency = db.Column(db.String(10), nullable=False, default="MMK")
    description = db.Column(db.String(500), nullable=True)
    due_date = db.Column(db.Date, nullable=True, index=True)
    status = db.Column(db.Enum(*LOAN_STATUSES, name="loan_status"), nullable=False, default=LOAN_PENDING)
    remaining_amount = db.Column(MONEY, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    lender = db.relationship("User", foreign_keys=[lender_id], back_populates="loans_given")
    borrower = db.relationship("User", foreign_keys=[borrower_id], back_populates="loans_taken")
    payments = db.relationship(
        "Payment",
        back_populates="loan",
        order_by="Payment.created_at",
        cascade="all, delete-orphan"
    )
    notifications = db.relationship(
        "Notification",
        back_populates="loan",
        cascade="all, delete-orphan"
    )

    @property
    def is_paid(self):
        return self.status == LOAN_PAID

    # -----------------------
    # Ledger transition
    # -----------------------
    def apply_payment(self, amount):
        """Decrement the remaining balance and re-project status.

        Only called when a payment becomes accepted, under a row lock held
        by the caller's transaction.
        """
        new_remaining = Decimal(self.remaining_amount) - Decimal(amount)

        if new_remaining <= 0:
            self.remaining_amount = Decimal("0.00")
            self.status = LOAN_PAID
        else:
            self.remaining_amount = new_remaining
            self.status = LOAN_PARTIAL
        return self.remaining_amount

    def days_overdue(self, as_of):
        if not self.due_date or self.due_date >= as_of:
            return 0
        return (as_of - self.due_date).days

    def __repr__(self):
        return f"<Loan {self.id} {self.status} {self.remaining_amount}/{self.amount} {self.currency}>"
