from fastapi import APIRouter

from ...components.auth.email_policy import evaluate_corporate_email
from ...platform.config import settings
from ...schemas.evaluation import EmailValidationRequest, EmailValidationResponse

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/validate-email", response_model=EmailValidationResponse)
def validate_email(data: EmailValidationRequest):
    """Check an address against the corporate-email policy without side effects."""
    decision = evaluate_corporate_email(data.email, require_corporate=settings.REQUIRE_CORPORATE_EMAIL)
    return EmailValidationResponse(is_valid=decision.allowed, reason=decision.reason)
