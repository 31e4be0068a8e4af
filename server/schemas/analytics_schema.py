from marshmallow import fields
from server.extension import ma
from server.schemas.loan_schema import LoanSchema

MONEY = dict(places=2, as_string=True)


class SummarySchema(ma.Schema):
    total_owed_to_you = fields.Decimal(**MONEY)
    total_you_owe = fields.Decimal(**MONEY)
    net_balance = fields.Decimal(**MONEY)
    pending_loans_given = fields.Integer()
    pending_loans_taken = fields.Integer()
    overdue_loans_given = fields.Integer()
    overdue_loans_owed = fields.Integer()


class CounterpartyBalanceSchema(ma.Schema):
    user = fields.Dict()
    they_owe_you = fields.Decimal(**MONEY)
    you_owe_them = fields.Decimal(**MONEY)
    net_balance = fields.Decimal(**MONEY)


class MonthlyTotalSchema(ma.Schema):
    year = fields.Integer()
    month = fields.Integer()
    total = fields.Decimal(**MONEY)
    count = fields.Integer()


class MonthlySchema(ma.Schema):
    loans_given = fields.Nested(MonthlyTotalSchema, many=True)
    loans_taken = fields.Nested(MonthlyTotalSchema, many=True)


class UpcomingDueSchema(ma.Schema):
    loans_to_pay = fields.Nested(LoanSchema, many=True, only=("id", "lender", "amount", "remaining_amount", "currency", "due_date", "status"))
    loans_to_receive = fields.Nested(LoanSchema, many=True, only=("id", "borrower", "amount", "remaining_amount", "currency", "due_date", "status"))
