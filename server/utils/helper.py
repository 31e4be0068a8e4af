from contextlib import contextmanager
from datetime import datetime, date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from server.extension import db
from server.exceptions import ValidationError
from server.utils.ledger_constants import MAX_AMOUNT

CENTS = Decimal("0.01")


def to_money(value, field="amount"):
    """Coerce user input into a two-decimal Decimal."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number")
    if abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"{field} must be at most {MAX_AMOUNT}")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_date(value, field="date"):
    if value is None or isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be YYYY-MM-DD format")


def utc_today():
    return datetime.utcnow().date()


@contextmanager
def atomic():
    """Commit the session on success, roll it back on any error."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
