"""Ledger error taxonomy.

Every error carries a stable machine-readable ``error_code`` and the HTTP
status the request boundary translates it to.
"""


class LedgerError(Exception):
    error_code = "ERROR"
    status_code = 400

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    def to_dict(self):
        payload = {
            "success": False,
            "message": self.message,
            "error_code": self.error_code,
        }
        if self.errors is not None:
            payload["errors"] = self.errors
        return payload


class ValidationError(LedgerError):
    """Malformed or out-of-range input."""

    error_code = "VALIDATION_ERROR"
    status_code = 422


class NotFoundError(LedgerError):
    """Referenced entity is absent or not visible to the caller."""

    error_code = "NOT_FOUND"
    status_code = 404


class AuthorizationError(LedgerError):
    """Entity exists but the caller lacks the required role on it."""

    error_code = "FORBIDDEN"
    status_code = 403


class ConflictError(LedgerError):
    """Entity is no longer in the state the operation expects."""

    error_code = "CONFLICT"
    status_code = 409
