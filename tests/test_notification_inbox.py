"""Tests for the in-app notification inbox and manual reminders."""

import pytest

from server.exceptions import NotFoundError, ValidationError
from server.models import Notification
from server.service import notification_inbox
from server.service.notification_dispatch import record_notification


@pytest.fixture
def inbox(db, lender, borrower):
    def _inbox(count):
        for i in range(count):
            record_notification(borrower, "reminder", f"Title {i}", f"Message {i}", sender=lender)
        db.session.commit()

    return _inbox


class TestInbox:

    def test_list_is_paginated(self, inbox, borrower) -> None:
        inbox(25)

        first = notification_inbox.list_notifications(borrower.id)
        second = notification_inbox.list_notifications(borrower.id, page=2)

        assert first.per_page == 20
        assert len(first.items) == 20
        assert first.total == 25
        assert first.pages == 2
        assert len(second.items) == 5
        assert first.items[0].title == "Title 24"

    def test_page_past_the_end_is_empty(self, inbox, borrower) -> None:
        inbox(3)

        page = notification_inbox.list_notifications(borrower.id, page=5)

        assert page.items == []
        assert page.total == 3

    def test_unread_and_mark_read(self, inbox, borrower) -> None:
        inbox(3)
        notification = Notification.query.filter_by(user_id=borrower.id).first()

        notification_inbox.mark_as_read(notification.id, borrower.id)

        assert notification_inbox.unread_count(borrower.id) == 2
        assert notification_inbox.mark_all_as_read(borrower.id) == 2
        assert notification_inbox.unread_count(borrower.id) == 0

    def test_cannot_touch_someone_elses_notification(self, inbox, borrower, lender) -> None:
        inbox(1)
        notification = Notification.query.filter_by(user_id=borrower.id).first()

        with pytest.raises(NotFoundError):
            notification_inbox.mark_as_read(notification.id, lender.id)
        with pytest.raises(NotFoundError):
            notification_inbox.delete_notification(notification.id, lender.id)

    def test_delete(self, inbox, borrower) -> None:
        inbox(2)
        notification = Notification.query.filter_by(user_id=borrower.id).first()

        notification_inbox.delete_notification(notification.id, borrower.id)

        assert Notification.query.filter_by(user_id=borrower.id).count() == 1


class TestManualReminder:

    def test_default_message(self, pushes, lender, borrower, make_loan) -> None:
        loan = make_loan(amount="1200")

        notification = notification_inbox.send_manual_reminder(loan.id, lender.id)

        assert notification.user_id == borrower.id
        assert notification.type == "reminder"
        assert notification.reminder_type is None
        assert notification.message == "Lender: Please pay back the loan of 1200.00 MMK"
        assert pushes[-1]["user_id"] == borrower.id

    def test_custom_message(self, lender, make_loan) -> None:
        loan = make_loan()
        notification = notification_inbox.send_manual_reminder(loan.id, lender.id, "Rent day!")
        assert notification.message == "Lender: Rent day!"

    def test_only_lender_of_unpaid_loan(self, lender, borrower, make_loan) -> None:
        loan = make_loan()
        paid = make_loan(status="paid", remaining_amount=0)

        with pytest.raises(NotFoundError):
            notification_inbox.send_manual_reminder(loan.id, borrower.id)
        with pytest.raises(NotFoundError):
            notification_inbox.send_manual_reminder(paid.id, lender.id)

    def test_message_too_long(self, lender, make_loan) -> None:
        loan = make_loan()
        with pytest.raises(ValidationError):
            notification_inbox.send_manual_reminder(loan.id, lender.id, "x" * 501)
