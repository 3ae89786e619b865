"""Evaluation workflow errors.

Each error carries the HTTP status it maps to and a message that is safe to
show to the client. Routes translate them into JSON responses.
"""


class EvaluationError(RuntimeError):
    status_code = 500
    default_message = "Evaluation request failed"

    def __init__(self, message: str | None = None):
        self.public_message = message or self.default_message
        super().__init__(self.public_message)


class ValidationError(EvaluationError):
    """Missing or malformed input (email policy, required fields, type)."""

    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(EvaluationError):
    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(EvaluationError):
    status_code = 403
    default_message = "Insufficient permissions"


class NotFoundError(EvaluationError):
    status_code = 404
    default_message = "Not found"


class DependencyError(EvaluationError):
    """Persistence or provider failure. Details are logged, never returned."""

    status_code = 500
    default_message = "An error occurred while saving evaluation"
