from server.extension import db
from server.models.user import User
from server.models.loan import Loan
from server.models.payment import Payment
from server.models.notification import Notification

__all__ = ["db", "User", "Loan", "Payment", "Notification"]
