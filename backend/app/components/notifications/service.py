"""Notification dispatch: inline through Resend, or queued on Celery when enabled."""

import logging
from typing import Optional

from ...platform.config import settings
from ...shared.utils import mask_email
from ..evaluations.scoring import maturity_level
from .email_client import EmailService

logger = logging.getLogger(__name__)


def resend_configured() -> bool:
    key = (settings.RESEND_API_KEY or "").strip()
    return bool(key) and key.lower() != "skip"


def _email_service() -> EmailService:
    return EmailService(api_key=settings.RESEND_API_KEY, from_email=settings.EMAIL_FROM)


def send_evaluation_results(
    *,
    to_email: str,
    evaluation_id: str,
    access_code: str,
    evaluation_type: str,
    score: int,
    display_name: str,
) -> Optional[str]:
    """Send (or queue) the guest results email.

    Returns the Resend message id, the Celery task id when queued, or None when
    email is not configured. Delivery errors propagate to the caller.
    """
    if not settings.DISABLE_CELERY:
        from .tasks import send_evaluation_results_email

        queued = send_evaluation_results_email.delay(
            to_email=to_email,
            evaluation_id=evaluation_id,
            access_code=access_code,
            evaluation_type=evaluation_type,
            score=score,
            display_name=display_name,
        )
        logger.info("Queued results email for evaluation %s (task_id=%s)", evaluation_id, queued.id)
        return queued.id

    if not resend_configured():
        logger.warning("RESEND_API_KEY not set; skipping results email to %s", mask_email(to_email))
        return None
    return _email_service().send_evaluation_results(
        to_email=to_email,
        evaluation_id=evaluation_id,
        access_code=access_code,
        evaluation_type=evaluation_type,
        score=score,
        display_name=display_name,
        maturity_label=maturity_level(evaluation_type, score).label,
        frontend_url=settings.FRONTEND_URL,
    )


def send_welcome(*, to_email: str, first_name: str) -> Optional[str]:
    if not settings.DISABLE_CELERY:
        from .tasks import send_welcome_email

        queued = send_welcome_email.delay(to_email=to_email, first_name=first_name)
        return queued.id

    if not resend_configured():
        logger.warning("RESEND_API_KEY not set; skipping welcome email to %s", mask_email(to_email))
        return None
    return _email_service().send_welcome(to_email=to_email, first_name=first_name, frontend_url=settings.FRONTEND_URL)
