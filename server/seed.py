# seed.py
from datetime import timedelta
from server.extension import db
from server.models import User, Loan
from server.service.loan_service import create_loan
from server.service.payment_processor import submit_payment
from server.utils.helper import utc_today
from server.utils.ledger_constants import METHOD_CASH, METHOD_E_WALLET


def _get_or_create_user(name, email):
    user = User.query.filter_by(email=email).first()
    if not user:
        user = User(name=name, email=email)
        db.session.add(user)
        db.session.commit()
    return user


def seed():
    print("Seeding loan ledger database...")

    # ========== USERS ==========
    alice = _get_or_create_user("Alice", "alice@example.com")
    bob = _get_or_create_user("Bob", "bob@example.com")
    carol = _get_or_create_user("Carol", "carol@example.com")
    print("Users seeded")

    if Loan.query.count():
        print("Loans already present, skipping")
        return

    # ========== LOANS & PAYMENTS ==========
    today = utc_today()

    # partially repaid in cash, due in three days
    lunch = create_loan(alice.id, bob.id, 50000, description="Lunch money", due_date=today + timedelta(days=3))
    submit_payment(lunch.id, bob.id, 20000, METHOD_CASH)

    # transfer awaiting the lender's verification
    rent = create_loan(alice.id, carol.id, 100000, description="Rent share", due_date=today + timedelta(days=1))
    submit_payment(rent.id, carol.id, 40000, METHOD_E_WALLET, screenshot_url="https://example.com/proof/rent.png")

    # no due date
    create_loan(bob.id, alice.id, 15000, description="Concert tickets")

    print("Loans seeded")
