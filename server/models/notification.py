from datetime import datetime
from server.extension import db
from server.utils.ledger_constants import NOTIFICATION_TYPES, REMINDER_BUCKETS


class Notification(db.Model):
    __tablename__ = "notifications"
    __table_args__ = (
        # one automatic reminder per (borrower, loan, bucket, day); rows of
        # other types leave reminder_type/reminder_date NULL and never collide
        db.UniqueConstraint(
            "user_id", "loan_id", "reminder_type", "reminder_date",
            name="uq_notifications_daily_reminder"
        ),
        db.CheckConstraint(
            "(type = 'auto_reminder' AND reminder_type IS NOT NULL AND reminder_date IS NOT NULL)"
            " OR (type <> 'auto_reminder' AND reminder_type IS NULL AND reminder_date IS NULL)",
            name="ck_notifications_reminder_variant"
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    loan_id = db.Column(db.Integer, db.ForeignKey("loans.id", ondelete="CASCADE"), nullable=True)
    type = db.Column(db.Enum(*NOTIFICATION_TYPES, name="notification_type"), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    reminder_type = db.Column(db.Enum(*REMINDER_BUCKETS, name="reminder_bucket"), nullable=True)
    reminder_date = db.Column(db.Date, nullable=True)
    data = db.Column(db.JSON, nullable=True)
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    # Relationships
    recipient = db.relationship("User", foreign_keys=[user_id])
    sender = db.relationship("User", foreign_keys=[sender_id])
    loan = db.relationship("Loan", back_populates="notifications")

    def mark_as_read(self):
        self.is_read = True
