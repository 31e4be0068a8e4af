from marshmallow import fields, validate
from server.extension import ma
from server.models import Payment
from server.utils.ledger_constants import PAYMENT_METHODS, MAX_AMOUNT


class PaymentSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Payment
        include_fk = True

    amount = fields.Decimal(places=2, as_string=True)
    verified_at = ma.DateTime(format="%Y-%m-%dT%H:%M:%S")
    created_at = ma.DateTime(format="%Y-%m-%dT%H:%M:%S")

    payer = fields.Nested("UserSchema", only=("id", "name"), dump_only=True)
    loan = fields.Nested(
        "LoanSchema",
        only=("id", "lender_id", "borrower_id", "amount", "currency", "status", "remaining_amount"),
        dump_only=True
    )


class PaymentCreateSchema(ma.Schema):
    loan_id = fields.Integer(required=True, strict=False)
    amount = fields.Decimal(required=True, places=2, validate=validate.Range(max=MAX_AMOUNT))
    payment_method = fields.String(required=True, validate=validate.OneOf(PAYMENT_METHODS))
    screenshot_url = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=500))


class PaymentRejectSchema(ma.Schema):
    reason = fields.String(required=True)
