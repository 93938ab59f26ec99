# staffing_api/common/errors.py
from flask import current_app
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from staffing_api.common.http import fail


class APIError(Exception):
    """Custom API Error class."""
    status_code = 400

    def __init__(self, code, message, status_code=None, payload=None):
        super().__init__(message)
        self.code = code
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload


class ValidationError(APIError):
    """A request field failed its rule chain (first failing rule wins)."""
    status_code = 422

    def __init__(self, message, code="VALIDATION_ERROR", payload=None):
        super().__init__(code, message, payload=payload)


class DistributionError(APIError):
    """The deposit distribution across a bank account set is inconsistent."""
    status_code = 422

    def __init__(self, key, message):
        super().__init__(key, message)

    @property
    def key(self):
        return self.code


class PersistenceError(APIError):
    status_code = 500

    def __init__(self, message="Something went wrong, please try again", original=None):
        super().__init__("PERSISTENCE_ERROR", message, payload=str(original) if original else None)
        self.original = original


class DocumentStorageError(APIError):
    status_code = 500

    def __init__(self, message, payload=None):
        super().__init__("DOCUMENT_STORAGE_ERROR", message, payload=payload)


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def _api_error(e: APIError):
        if e.status_code >= 500:
            current_app.logger.error("%s: %s (%s)", e.code, e.message, e.payload)
        return fail(message=e.message, status=e.status_code, code=e.code, detail=e.payload)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(IntegrityError)
    def _integrity(e: IntegrityError):
        # 409 for unique/FK violations
        return fail(
            "Conflict / integrity error",
            status=409,
            code="CONSTRAINT_ERROR",
            detail=str(e.orig) if getattr(e, "orig", None) else str(e),
        )

    @app.errorhandler(Exception)
    def _500(e: Exception):
        app.logger.exception(e)
        return fail("Internal server error", status=500)
