from flask import jsonify, request
from werkzeug.exceptions import HTTPException


class ProgressError(Exception):
    """Base error carrying the HTTP status the API answers with."""

    status_code = 500
    default_message = "An unexpected error occurred."

    def __init__(self, message=None, code=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.code = code

    def to_dict(self):
        payload = {'status': 'error', 'message': self.message}
        if self.code:
            payload['code'] = self.code
        return payload


class ValidationError(ProgressError):
    status_code = 400
    default_message = "Please check your input and try again."


class ConflictError(ProgressError):
    status_code = 400
    default_message = "This record already exists. Please use a different value."


class AuthenticationError(ProgressError):
    status_code = 401
    default_message = "Authentication required"


class NotFoundError(ProgressError):
    status_code = 404

    def __init__(self, resource="Record", code="NOT_FOUND"):
        super().__init__(f"{resource} not found.", code)


class DataError(ProgressError):
    """A managed-backend call failed; ``technical`` keeps the raw detail for logs."""

    def __init__(self, message=None, code=None, technical=None):
        super().__init__(message, code)
        self.technical = technical


# PostgREST / Postgres error codes surfaced to users
SUPABASE_ERROR_MESSAGES = {
    '23505': 'This record already exists. Please use a different value.',
    '23503': 'This action would violate data integrity. Related records may exist.',
    '23502': 'Required field is missing.',
    '42501': "You don't have permission to perform this action.",
    'PGRST116': "You don't have permission to access this resource.",
}

SUPABASE_ERROR_TYPES = {
    '23505': ConflictError,
    '23503': ConflictError,
    '23502': ValidationError,
}


def from_api_error(error):
    """Translate a postgrest ``APIError`` into a ``ProgressError``."""
    code = getattr(error, 'code', None)
    message = SUPABASE_ERROR_MESSAGES.get(code) or getattr(error, 'message', None) \
        or 'An error occurred while processing your request.'
    technical = f"{code}: {getattr(error, 'message', '')} {getattr(error, 'details', '') or ''}".strip()
    error_type = SUPABASE_ERROR_TYPES.get(code)
    if error_type is not None:
        return error_type(message, code)
    return DataError(message, code, technical)


def register_error_handlers(app):
    @app.errorhandler(ProgressError)
    def handle_progress_error(e):
        if e.status_code >= 500:
            app.logger.error(f"{type(e).__name__}: {getattr(e, 'technical', None) or e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return e
        app.logger.exception("Unhandled error")
        return jsonify({'status': 'error', 'message': 'An unexpected error occurred.'}), 500


def json_body():
    """The request's JSON object, or ``{}`` when there is no JSON body.

    Arrays, strings and other non-object bodies are rejected with a 400.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object', code='VALIDATION_ERROR')
    return data


def from_validation_error(error):
    """Summarise a pydantic ``ValidationError`` as a single 400 message."""
    details = error.errors()
    if not details:
        return ValidationError(code='VALIDATION_ERROR')
    first = details[0]
    loc = '.'.join(str(part) for part in first.get('loc', ()))
    msg = first.get('msg', 'Invalid value')
    return ValidationError(f"{loc}: {msg}" if loc else msg, code='VALIDATION_ERROR')
