"""Celery email tasks (used when DISABLE_CELERY is false)."""

import logging

from ...platform.config import settings
from ...tasks.celery_app import celery_app
from ..evaluations.scoring import maturity_level
from .email_client import EmailService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3, default_retry_delay=60)
def send_evaluation_results_email(
    self,
    to_email: str,
    evaluation_id: str,
    access_code: str,
    evaluation_type: str,
    score: int,
    display_name: str,
):
    """Deliver the guest results email, retrying on provider errors."""
    try:
        email_svc = EmailService(api_key=settings.RESEND_API_KEY, from_email=settings.EMAIL_FROM)
        return email_svc.send_evaluation_results(
            to_email=to_email,
            evaluation_id=evaluation_id,
            access_code=access_code,
            evaluation_type=evaluation_type,
            score=score,
            display_name=display_name,
            maturity_label=maturity_level(evaluation_type, score).label,
            frontend_url=settings.FRONTEND_URL,
        )
    except Exception as exc:
        logger.error("Failed to send results email for evaluation %s: %s", evaluation_id, exc)
        raise self.retry(exc=exc)


@celery_app.task(bind=True, max_retries=3, default_retry_delay=60)
def send_welcome_email(self, to_email: str, first_name: str):
    try:
        email_svc = EmailService(api_key=settings.RESEND_API_KEY, from_email=settings.EMAIL_FROM)
        return email_svc.send_welcome(to_email=to_email, first_name=first_name, frontend_url=settings.FRONTEND_URL)
    except Exception as exc:
        logger.error("Failed to send welcome email: %s", exc)
        raise self.retry(exc=exc)
