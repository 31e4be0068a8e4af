"""Tests for payment submission and the ledger invariants."""

from decimal import Decimal

import pytest

from server.exceptions import NotFoundError, ValidationError
from server.models import Loan, Notification, Payment
from server.service.payment_processor import submit_payment
from server.service.payment_verification import accept_payment, reject_payment


def assert_ledger_consistent(loan: Loan) -> None:
    accepted = sum(
        (p.amount for p in Payment.query.filter_by(loan_id=loan.id, status="accepted")),
        Decimal("0"),
    )
    assert loan.remaining_amount == loan.amount - accepted
    assert (loan.status == "paid") == (loan.remaining_amount == 0)
    assert (loan.status == "pending") == (accepted == 0)


class TestCashPayments:

    def test_cash_is_accepted_and_applied_immediately(self, db, lender, borrower, make_loan) -> None:
        loan = make_loan(amount="50000")

        payment = submit_payment(loan.id, borrower.id, 20000, "cash")

        assert payment.status == "accepted"
        assert payment.verified_by == lender.id
        assert payment.verified_at is not None
        loan = db.session.get(Loan, loan.id)
        assert loan.remaining_amount == Decimal("30000.00")
        assert loan.status == "partial"
        assert_ledger_consistent(loan)

    def test_repayment_scenario(self, db, borrower, make_loan) -> None:
        loan = make_loan(amount="50000")

        submit_payment(loan.id, borrower.id, 20000, "cash")
        submit_payment(loan.id, borrower.id, 30000, "cash")

        loan = db.session.get(Loan, loan.id)
        assert loan.remaining_amount == Decimal("0.00")
        assert loan.status == "paid"
        assert_ledger_consistent(loan)

        with pytest.raises(ValidationError, match="already paid"):
            submit_payment(loan.id, borrower.id, 1, "cash")

    def test_full_cash_payment_marks_paid(self, db, borrower, make_loan) -> None:
        loan = make_loan(amount="75000")
        submit_payment(loan.id, borrower.id, "75000", "cash")

        loan = db.session.get(Loan, loan.id)
        assert loan.status == "paid"
        assert loan.remaining_amount == 0

    def test_lender_notified_of_cash(self, db, lender, borrower, make_loan, pushes) -> None:
        loan = make_loan()
        payment = submit_payment(loan.id, borrower.id, 100, "cash")

        notification = Notification.query.filter_by(user_id=lender.id).one()
        assert notification.type == "payment_verified"
        assert notification.title == "Payment Received (Cash)"
        assert notification.data == {"payment_id": payment.id}
        assert pushes[-1]["user_id"] == lender.id
        assert pushes[-1]["data"]["payment_id"] == payment.id


class TestElectronicTransfers:

    def test_transfer_waits_for_lender(self, db, lender, borrower, make_loan) -> None:
        loan = make_loan(amount="50000")

        payment = submit_payment(loan.id, borrower.id, 50000, "e_wallet", screenshot_url="https://img/p.png")

        assert payment.status == "pending"
        assert payment.verified_by is None
        loan = db.session.get(Loan, loan.id)
        assert loan.status == "pending"
        assert loan.remaining_amount == Decimal("50000.00")
        assert Notification.query.filter_by(user_id=lender.id).one().type == "payment_received"

        accept_payment(payment.id, lender.id)

        loan = db.session.get(Loan, loan.id)
        assert loan.status == "paid"
        assert loan.remaining_amount == 0
        assert_ledger_consistent(loan)

    def test_transfer_requires_proof(self, db, borrower, make_loan) -> None:
        loan = make_loan()
        with pytest.raises(ValidationError, match="screenshot"):
            submit_payment(loan.id, borrower.id, 100, "e_wallet")
        assert Payment.query.count() == 0


class TestRejectedSubmissions:

    def test_overpayment_has_no_side_effects(self, db, lender, borrower, make_loan, pushes) -> None:
        loan = make_loan(amount="1000")

        with pytest.raises(ValidationError, match="exceeds"):
            submit_payment(loan.id, borrower.id, "1000.01", "cash")

        loan = db.session.get(Loan, loan.id)
        assert loan.remaining_amount == Decimal("1000.00")
        assert loan.status == "pending"
        assert Payment.query.count() == 0
        assert Notification.query.count() == 0
        assert pushes == []

    @pytest.mark.parametrize("amount", [0, "-1", "abc", None])
    def test_invalid_amounts(self, db, borrower, make_loan, amount) -> None:
        loan = make_loan()
        with pytest.raises(ValidationError):
            submit_payment(loan.id, borrower.id, amount, "cash")

    def test_unknown_method(self, db, borrower, make_loan) -> None:
        loan = make_loan()
        with pytest.raises(ValidationError):
            submit_payment(loan.id, borrower.id, 10, "cheque")

    def test_only_borrower_can_pay(self, db, lender, stranger, make_loan) -> None:
        loan = make_loan()
        for user in (lender, stranger):
            with pytest.raises(NotFoundError):
                submit_payment(loan.id, user.id, 10, "cash")

    def test_missing_loan(self, db, borrower) -> None:
        with pytest.raises(NotFoundError):
            submit_payment(12345, borrower.id, 10, "cash")


class TestLedgerSequence:

    def test_mixed_sequence_keeps_invariants(self, db, lender, borrower, make_loan) -> None:
        loan = make_loan(amount="1000")

        submit_payment(loan.id, borrower.id, 100, "cash")
        p1 = submit_payment(loan.id, borrower.id, 200, "e_wallet", screenshot_url="https://img/1")
        p2 = submit_payment(loan.id, borrower.id, 300, "e_wallet", screenshot_url="https://img/2")
        assert_ledger_consistent(db.session.get(Loan, loan.id))

        reject_payment(p1.id, lender.id, "blurry screenshot")
        assert_ledger_consistent(db.session.get(Loan, loan.id))

        accept_payment(p2.id, lender.id)
        loan = db.session.get(Loan, loan.id)
        assert loan.remaining_amount == Decimal("600.00")
        assert_ledger_consistent(loan)

        submit_payment(loan.id, borrower.id, 600, "cash")
        loan = db.session.get(Loan, loan.id)
        assert loan.status == "paid"
        assert_ledger_consistent(loan)


class TestRollback:

    def test_failure_mid_cash_payment_leaves_no_trace(self, db, borrower, make_loan, pushes, monkeypatch) -> None:
        def broken_notification(*args, **kwargs):
            raise RuntimeError("notification insert failed")

        monkeypatch.setattr("server.service.payment_processor.record_notification", broken_notification)
        loan = make_loan(amount="50000")

        with pytest.raises(RuntimeError):
            submit_payment(loan.id, borrower.id, 20000, "cash")

        loan = db.session.get(Loan, loan.id)
        assert loan.remaining_amount == Decimal("50000.00")
        assert loan.status == "pending"
        assert Payment.query.count() == 0
        assert Notification.query.count() == 0
        assert pushes == []

    def test_amount_above_column_limit(self, db, borrower, make_loan) -> None:
        loan = make_loan()
        with pytest.raises(ValidationError):
            submit_payment(loan.id, borrower.id, "10000000000000", "cash")
        assert Payment.query.count() == 0
