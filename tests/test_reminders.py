"""Tests for the daily reminder sweep."""

from datetime import date, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from server.models import Notification
from server.service.notification_dispatch import record_notification
from server.tasks.loan_reminders import run_reminder_sweep

TODAY = date(2026, 3, 10)


def reminders(loan_id=None):
    query = Notification.query.filter_by(type="auto_reminder")
    if loan_id is not None:
        query = query.filter_by(loan_id=loan_id)
    return query.order_by(Notification.id).all()


class TestBuckets:

    @pytest.mark.parametrize(
        "offset,bucket",
        [(0, "due_today"), (1, "due_tomorrow"), (3, "due_soon"), (-1, "overdue"), (-30, "overdue")],
    )
    def test_bucket_classification(self, db, borrower, make_loan, offset, bucket) -> None:
        loan = make_loan(due_date=TODAY + timedelta(days=offset))

        counts = run_reminder_sweep(TODAY)

        assert counts[bucket] == 1
        assert sum(counts.values()) == 1
        (reminder,) = reminders(loan.id)
        assert reminder.reminder_type == bucket
        assert reminder.reminder_date == TODAY
        assert reminder.user_id == borrower.id
        assert reminder.sender_id is None

    @pytest.mark.parametrize("offset", [2, 4, 30])
    def test_no_bucket(self, db, make_loan, offset) -> None:
        make_loan(due_date=TODAY + timedelta(days=offset))
        assert sum(run_reminder_sweep(TODAY).values()) == 0

    def test_loans_without_due_date_are_ignored(self, db, make_loan) -> None:
        make_loan(due_date=None)
        assert sum(run_reminder_sweep(TODAY).values()) == 0

    def test_paid_loans_are_ignored(self, db, make_loan) -> None:
        make_loan(due_date=TODAY - timedelta(days=2), status="paid", remaining_amount=0)
        assert sum(run_reminder_sweep(TODAY).values()) == 0

    def test_overdue_message_counts_days(self, db, make_loan) -> None:
        make_loan(amount="1500", due_date=TODAY - timedelta(days=3))
        run_reminder_sweep(TODAY)

        (reminder,) = reminders()
        assert reminder.title == "Payment Overdue"
        assert "3 days overdue" in reminder.message
        assert "1500.00 MMK" in reminder.message
        assert "Lender" in reminder.message

    def test_overdue_by_three_days_is_not_due_soon(self, db, make_loan) -> None:
        make_loan(due_date=TODAY - timedelta(days=3))
        counts = run_reminder_sweep(TODAY)
        assert counts["overdue"] == 1
        assert counts["due_soon"] == 0


class TestIdempotency:

    def test_second_run_same_day_sends_nothing(self, db, make_loan, pushes) -> None:
        for offset in (0, 1, 3, -2):
            make_loan(due_date=TODAY + timedelta(days=offset))

        first = run_reminder_sweep(TODAY)
        second = run_reminder_sweep(TODAY)

        assert sum(first.values()) == 4
        assert sum(second.values()) == 0
        assert len(reminders()) == 4
        assert len(pushes) == 4

    def test_overdue_reminded_again_next_day(self, db, make_loan) -> None:
        loan = make_loan(due_date=TODAY - timedelta(days=1))

        run_reminder_sweep(TODAY)
        run_reminder_sweep(TODAY + timedelta(days=1))

        assert [r.reminder_date for r in reminders(loan.id)] == [TODAY, TODAY + timedelta(days=1)]

    def test_due_soon_then_due_today_scenario(self, db, make_loan) -> None:
        loan = make_loan(amount="100000", due_date=TODAY + timedelta(days=3))

        day0 = run_reminder_sweep(TODAY)
        day3 = run_reminder_sweep(TODAY + timedelta(days=3))
        run_reminder_sweep(TODAY + timedelta(days=3))

        assert day0["due_soon"] == 1
        assert day3["due_today"] == 1
        assert day3["due_soon"] == 0
        assert [r.reminder_type for r in reminders(loan.id)] == ["due_soon", "due_today"]

    def test_manual_reminder_does_not_block_auto_reminder(self, db, lender, borrower, make_loan) -> None:
        loan = make_loan(due_date=TODAY)
        record_notification(borrower, "reminder", "Payment Reminder", "pay up", sender=lender, loan=loan)
        db.session.commit()

        assert run_reminder_sweep(TODAY)["due_today"] == 1

    def test_unique_constraint_backs_up_dedup(self, db, borrower, make_loan) -> None:
        loan = make_loan(due_date=TODAY)
        run_reminder_sweep(TODAY)

        record_notification(
            borrower, "auto_reminder", "Payment Due Today", "duplicate",
            loan=loan, reminder_type="due_today", reminder_date=TODAY,
        )
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()

    def test_push_failure_does_not_stop_sweep(self, db, make_loan, monkeypatch) -> None:
        def failing_push(user, title, body, data=None):
            return False

        monkeypatch.setattr("server.service.notification_dispatch.send_push", failing_push)
        make_loan(due_date=TODAY)
        make_loan(due_date=TODAY - timedelta(days=5))

        counts = run_reminder_sweep(TODAY)

        assert counts["due_today"] == 1
        assert counts["overdue"] == 1
        assert len(reminders()) == 2

    def test_concurrent_insert_is_skipped_and_scan_continues(self, db, make_loan, pushes, monkeypatch) -> None:
        first_loan = make_loan(due_date=TODAY)
        second_loan = make_loan(due_date=TODAY)
        assert run_reminder_sweep(TODAY)["due_today"] == 2

        # another sweep got there first: only the unique constraint catches it
        monkeypatch.setattr("server.tasks.loan_reminders.reminder_already_sent", lambda *args: False)
        late_loan = make_loan(due_date=TODAY)
        pushes.clear()

        counts = run_reminder_sweep(TODAY)

        assert counts["due_today"] == 1
        assert len(reminders(first_loan.id)) == 1
        assert len(reminders(second_loan.id)) == 1
        assert len(reminders(late_loan.id)) == 1
        assert len(pushes) == 1
