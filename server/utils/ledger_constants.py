from decimal import Decimal

# Loan status
LOAN_PENDING = "pending"
LOAN_PARTIAL = "partial"
LOAN_PAID = "paid"
LOAN_STATUSES = (LOAN_PENDING, LOAN_PARTIAL, LOAN_PAID)

# Payment method
METHOD_CASH = "cash"
METHOD_E_WALLET = "e_wallet"  # electronic transfer, needs proof + lender verification
PAYMENT_METHODS = (METHOD_CASH, METHOD_E_WALLET)

# Payment status
PAYMENT_PENDING = "pending"
PAYMENT_ACCEPTED = "accepted"
PAYMENT_REJECTED = "rejected"
PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_ACCEPTED, PAYMENT_REJECTED)

# Notification type
NOTIFY_REMINDER = "reminder"
NOTIFY_AUTO_REMINDER = "auto_reminder"
NOTIFY_PAYMENT_RECEIVED = "payment_received"
NOTIFY_PAYMENT_VERIFIED = "payment_verified"
NOTIFY_PAYMENT_REJECTED = "payment_rejected"
NOTIFY_LOAN_CREATED = "loan_created"
NOTIFY_DUE_DATE_SET = "due_date_set"
NOTIFY_DUE_DATE_CHANGED = "due_date_changed"
NOTIFY_DUE_DATE_REMOVED = "due_date_removed"
NOTIFICATION_TYPES = (
    NOTIFY_REMINDER,
    NOTIFY_AUTO_REMINDER,
    NOTIFY_PAYMENT_RECEIVED,
    NOTIFY_PAYMENT_VERIFIED,
    NOTIFY_PAYMENT_REJECTED,
    NOTIFY_LOAN_CREATED,
    NOTIFY_DUE_DATE_SET,
    NOTIFY_DUE_DATE_CHANGED,
    NOTIFY_DUE_DATE_REMOVED,
)

# Reminder buckets (variant field of auto_reminder notifications)
BUCKET_DUE_TODAY = "due_today"
BUCKET_DUE_TOMORROW = "due_tomorrow"
BUCKET_DUE_SOON = "due_soon"
BUCKET_OVERDUE = "overdue"
REMINDER_BUCKETS = (BUCKET_DUE_TODAY, BUCKET_DUE_TOMORROW, BUCKET_DUE_SOON, BUCKET_OVERDUE)

MAX_TEXT_LENGTH = 500

# largest value a Numeric(15, 2) column holds
MAX_AMOUNT = Decimal("9999999999999.99")
