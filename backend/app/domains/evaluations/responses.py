"""JSON error bodies for evaluation routes.

Guest endpoints answer with ``{"message": ...}`` and member endpoints with
``{"error": ...}``; both keep their shapes for existing clients.
"""

import logging

from fastapi.responses import JSONResponse

from ...components.evaluations.errors import DependencyError, EvaluationError

logger = logging.getLogger(__name__)


def guest_error(exc: EvaluationError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.public_message})


def member_error(exc: EvaluationError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


def unexpected_error(key: str, operation: str, message: str = DependencyError.default_message) -> JSONResponse:
    """Log the active exception and answer 500 with ``message``."""
    logger.exception("Unexpected failure during %s", operation)
    return JSONResponse(status_code=500, content={key: message})
