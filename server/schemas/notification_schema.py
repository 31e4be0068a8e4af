from marshmallow import fields, validate
from server.extension import ma
from server.models import Notification
from server.utils.ledger_constants import MAX_TEXT_LENGTH


class NotificationSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Notification
        include_fk = True

    created_at = ma.DateTime(format="%Y-%m-%dT%H:%M:%S")
    reminder_date = fields.Date()

    sender = fields.Nested("UserSchema", only=("id", "name"), dump_only=True)
    loan = fields.Nested(
        "LoanSchema",
        only=("id", "amount", "remaining_amount", "currency", "status", "due_date"),
        dump_only=True
    )


class ManualReminderSchema(ma.Schema):
    message = fields.String(
        load_default=None, allow_none=True, validate=validate.Length(max=MAX_TEXT_LENGTH)
    )
