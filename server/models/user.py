from datetime import datetime
from server.extension import db


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    # device token used for push delivery, registered by the mobile client
    fcm_token = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    loans_given = db.relationship(
        "Loan",
        foreign_keys="Loan.lender_id",
        back_populates="lender"
    )
    loans_taken = db.relationship(
        "Loan",
        foreign_keys="Loan.borrower_id",
        back_populates="borrower"
    )

    def __repr__(self):
        return f"<User {self.id} {self.email}>"
