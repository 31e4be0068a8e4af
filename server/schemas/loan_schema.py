from marshmallow import fields, validate
from server.extension import ma
from server.models import Loan
from server.utils.ledger_constants import MAX_AMOUNT
from server.schemas.payment_schema import PaymentSchema


class LoanSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Loan
        include_fk = True

    amount = fields.Decimal(places=2, as_string=True)
    remaining_amount = fields.Decimal(places=2, as_string=True)
    due_date = fields.Date()
    created_at = ma.DateTime(format="%Y-%m-%dT%H:%M:%S")
    updated_at = ma.DateTime(format="%Y-%m-%dT%H:%M:%S")

    lender = fields.Nested("UserSchema", only=("id", "name", "email"), dump_only=True)
    borrower = fields.Nested("UserSchema", only=("id", "name", "email"), dump_only=True)
    payments = fields.Nested(PaymentSchema, many=True, exclude=("loan",), dump_only=True)


class LoanCreateSchema(ma.Schema):
    borrower_id = fields.Integer(required=True)
    amount = fields.Decimal(required=True, places=2, validate=validate.Range(max=MAX_AMOUNT))
    currency = fields.String(load_default=None, allow_none=True, validate=validate.Length(min=1, max=10))
    description = fields.String(load_default=None, allow_none=True)
    due_date = fields.Date(load_default=None, allow_none=True)


class LoanUpdateSchema(ma.Schema):
    description = fields.String(allow_none=True)
    due_date = fields.Date(allow_none=True)


class LoansWithUserSchema(ma.Schema):
    loans_given = fields.Nested(LoanSchema, many=True, exclude=("payments",))
    loans_taken = fields.Nested(LoanSchema, many=True, exclude=("payments",))
    total_given = fields.Decimal(places=2, as_string=True)
    total_owed = fields.Decimal(places=2, as_string=True)
    net_balance = fields.Decimal(places=2, as_string=True)
