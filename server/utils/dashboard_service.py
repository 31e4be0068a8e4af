from collections import OrderedDict
from datetime import datetime, time, timedelta
from decimal import Decimal
from sqlalchemy import func, extract
from server.models import db, User, Loan
from server.utils.helper import utc_today
from server.utils.ledger_constants import LOAN_PAID

ZERO = Decimal("0.00")


class DashboardService:
    @staticmethod
    def _unpaid():
        return Loan.status != LOAN_PAID

    @staticmethod
    def _sum_remaining(*filters):
        total = db.session.query(func.coalesce(func.sum(Loan.remaining_amount), 0)).filter(
            DashboardService._unpaid(), *filters
        ).scalar()
        return Decimal(total or 0).quantize(ZERO)

    @staticmethod
    def _count(*filters):
        return Loan.query.filter(DashboardService._unpaid(), *filters).count()

    @staticmethod
    def get_summary(user_id, today=None):
        today = today or utc_today()
        owed_to_you = DashboardService._sum_remaining(Loan.lender_id == user_id)
        you_owe = DashboardService._sum_remaining(Loan.borrower_id == user_id)
        overdue = (Loan.due_date.isnot(None), Loan.due_date < today)

        return {
            "total_owed_to_you": owed_to_you,
            "total_you_owe": you_owe,
            "net_balance": owed_to_you - you_owe,
            "pending_loans_given": DashboardService._count(Loan.lender_id == user_id),
            "pending_loans_taken": DashboardService._count(Loan.borrower_id == user_id),
            "overdue_loans_given": DashboardService._count(Loan.lender_id == user_id, *overdue),
            "overdue_loans_owed": DashboardService._count(Loan.borrower_id == user_id, *overdue),
        }

    @staticmethod
    def get_balances_by_user(user_id):
        given = (
            db.session.query(Loan.borrower_id, func.sum(Loan.remaining_amount))
            .filter(Loan.lender_id == user_id, DashboardService._unpaid())
            .group_by(Loan.borrower_id)
            .all()
        )
        taken = (
            db.session.query(Loan.lender_id, func.sum(Loan.remaining_amount))
            .filter(Loan.borrower_id == user_id, DashboardService._unpaid())
            .group_by(Loan.lender_id)
            .all()
        )

        balances = {}
        for other_id, total in given:
            balances.setdefault(other_id, {"they_owe_you": ZERO, "you_owe_them": ZERO})
            balances[other_id]["they_owe_you"] = Decimal(total).quantize(ZERO)
        for other_id, total in taken:
            balances.setdefault(other_id, {"they_owe_you": ZERO, "you_owe_them": ZERO})
            balances[other_id]["you_owe_them"] = Decimal(total).quantize(ZERO)

        users = {u.id: u for u in User.query.filter(User.id.in_(list(balances))).all()} if balances else {}
        result = []
        for other_id, row in balances.items():
            other = users.get(other_id)
            result.append({
                "user": {"id": other_id, "name": other.name if other else None},
                "they_owe_you": row["they_owe_you"],
                "you_owe_them": row["you_owe_them"],
                "net_balance": row["they_owe_you"] - row["you_owe_them"],
            })
        return sorted(result, key=lambda r: r["net_balance"], reverse=True)

    @staticmethod
    def get_monthly_totals(user_id, months=6, today=None):
        today = today or utc_today()
        # first day of the month ``months`` months back
        month_index = today.year * 12 + (today.month - 1) - months
        start = datetime.combine(
            today.replace(year=month_index // 12, month=month_index % 12 + 1, day=1), time.min
        )

        def _monthly(column):
            rows = (
                db.session.query(
                    extract("year", Loan.created_at).label("year"),
                    extract("month", Loan.created_at).label("month"),
                    func.sum(Loan.amount),
                    func.count(Loan.id),
                )
                .filter(column == user_id, Loan.created_at >= start)
                .group_by("year", "month")
                .order_by("year", "month")
                .all()
            )
            return [
                OrderedDict(
                    year=int(year),
                    month=int(month),
                    total=Decimal(total or 0).quantize(ZERO),
                    count=count,
                )
                for year, month, total, count in rows
            ]

        return {
            "loans_given": _monthly(Loan.lender_id),
            "loans_taken": _monthly(Loan.borrower_id),
        }

    @staticmethod
    def get_upcoming_due(user_id, days=7, today=None):
        today = today or utc_today()
        window = (
            DashboardService._unpaid(),
            Loan.due_date.isnot(None),
            Loan.due_date.between(today, today + timedelta(days=days)),
        )
        return {
            "loans_to_pay": Loan.query.filter(Loan.borrower_id == user_id, *window)
            .order_by(Loan.due_date).all(),
            "loans_to_receive": Loan.query.filter(Loan.lender_id == user_id, *window)
            .order_by(Loan.due_date).all(),
        }
