"""
Error taxonomy for the API.

Route handlers and domain code raise these; create_app() registers a single
handler that turns them into the {"success": false, "error": ...} envelope.
The message on each instance is safe to show to the client. Anything internal
goes in ``log_detail`` and only reaches the server log.
"""


class AppError(Exception):
    status_code = 500
    message = "Something went wrong, please try again"

    def __init__(self, message=None, details=None, status_code=None, log_detail=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        self.log_detail = log_detail

    def to_dict(self) -> dict:
        body = {"success": False, "error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class AuthenticationRequired(AppError):
    status_code = 401
    message = "Authentication required"


class ValidationFailed(AppError):
    status_code = 400
    message = "Invalid request"


class NotFoundOrUnauthorized(AppError):
    """Caller does not own the row, or it does not exist. Reported the same way."""
    status_code = 404

    def __init__(self, entity: str = "Resource"):
        super().__init__(f"{entity} not found or unauthorized")


AuthorizationFailed = NotFoundOrUnauthorized


class InvalidTransition(ValidationFailed):
    status_code = 409


class UpstreamProviderError(AppError):
    status_code = 502
    message = "Failed to initiate payment. Please try again later."


class ConfigurationError(AppError):
    status_code = 500
    message = "Server misconfigured"

    def __init__(self, log_detail: str):
        # detail names the missing setting; never shown to clients
        super().__init__(log_detail=log_detail)


class StorageError(AppError):
    status_code = 500
    message = "Something went wrong, please try again"
