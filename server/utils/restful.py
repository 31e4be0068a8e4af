import logging
from flask_restful import Api
from marshmallow import ValidationError as SchemaValidationError
from werkzeug.exceptions import HTTPException
from server.exceptions import LedgerError

logger = logging.getLogger(__name__)


class LedgerApi(Api):
    """flask-restful Api that renders ledger and schema errors as JSON.

    Anything else that is not an HTTPException is re-raised so the app-level
    handlers (JWT loaders, the catch-all 500 handler) deal with it.
    """

    def handle_error(self, e):
        if isinstance(e, LedgerError):
            logger.info(f"{e.error_code}: {e.message}")
            return self.make_response(e.to_dict(), e.status_code)
        if isinstance(e, SchemaValidationError):
            return self.make_response({
                "success": False,
                "message": "Invalid request data",
                "error_code": "VALIDATION_ERROR",
                "errors": e.messages,
            }, 422)
        if not isinstance(e, HTTPException):
            raise e
        return super().handle_error(e)
