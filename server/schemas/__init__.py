# Import every schema so string references in fields.Nested resolve.
from server.schemas.user_schema import UserSchema, FcmTokenSchema
from server.schemas.payment_schema import PaymentSchema, PaymentCreateSchema, PaymentRejectSchema
from server.schemas.loan_schema import LoanSchema, LoanCreateSchema, LoanUpdateSchema, LoansWithUserSchema
from server.schemas.notification_schema import NotificationSchema, ManualReminderSchema
