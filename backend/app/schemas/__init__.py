from .evaluation import (
    EmailValidationRequest,
    EmailValidationResponse,
    EvaluationCreate,
    GuestEvaluationCreate,
    ProfileResponse,
    ProfileRoleUpdate,
)

__all__ = [
    "EmailValidationRequest",
    "EmailValidationResponse",
    "EvaluationCreate",
    "GuestEvaluationCreate",
    "ProfileResponse",
    "ProfileRoleUpdate",
]
