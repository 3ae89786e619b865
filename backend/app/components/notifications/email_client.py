"""
Resend email service for evaluation results and account notifications.

Every send returns the Resend message id or raises EmailDeliveryError;
callers decide whether a failed delivery matters.
"""

import logging

import resend

from ...platform.brand import BRAND_NAME, brand_email_from
from ...shared.utils import mask_email
from .templates import (
    email_verification_html,
    evaluation_results_html,
    password_reset_html,
    welcome_html,
)

logger = logging.getLogger(__name__)

_EVALUATION_LABELS = {"INITIAL": "initial", "ADVANCED": "advanced"}


class EmailDeliveryError(RuntimeError):
    """Raised when Resend rejects or fails to accept a message."""


def results_url(base_url: str, evaluation_id: str, access_code: str) -> str:
    return f"{base_url.rstrip('/')}/results/{evaluation_id}?code={access_code}"


class EmailService:
    """Service for sending transactional emails through Resend."""

    def __init__(self, api_key: str, from_email: str = brand_email_from()):
        resend.api_key = api_key
        self.from_email = from_email
        logger.debug("EmailService initialised (from=%s)", self.from_email)

    def _send(self, *, to_email: str, subject: str, html: str, kind: str) -> str:
        try:
            email = resend.Emails.send({
                "from": self.from_email,
                "to": [to_email],
                "subject": subject,
                "html": html,
            })
        except Exception as exc:
            raise EmailDeliveryError(f"{kind} email to {mask_email(to_email)} failed: {exc}") from exc

        email_id = email.get("id", "") if isinstance(email, dict) else str(getattr(email, "id", "") or "")
        if not email_id:
            raise EmailDeliveryError(f"{kind} email to {mask_email(to_email)} returned no message id")
        logger.info("%s email sent (email_id=%s, to=%s)", kind, email_id, mask_email(to_email))
        return email_id

    def send_evaluation_results(
        self,
        to_email: str,
        evaluation_id: str,
        access_code: str,
        evaluation_type: str,
        score: int,
        display_name: str,
        maturity_label: str,
        frontend_url: str,
    ) -> str:
        label = _EVALUATION_LABELS.get(str(evaluation_type), "cybersecurity")
        link = results_url(frontend_url, evaluation_id, access_code)
        html_body = evaluation_results_html(
            display_name=display_name,
            evaluation_label=label,
            score=score,
            maturity_label=maturity_label,
            results_link=link,
        )
        return self._send(
            to_email=to_email,
            subject=f"Your {label} cybersecurity evaluation results",
            html=html_body,
            kind="Evaluation results",
        )

    def send_welcome(self, to_email: str, first_name: str, frontend_url: str) -> str:
        html_body = welcome_html(first_name=first_name, dashboard_link=f"{frontend_url.rstrip('/')}/dashboard")
        return self._send(
            to_email=to_email,
            subject=f"Welcome to {BRAND_NAME}! Your account is active",
            html=html_body,
            kind="Welcome",
        )

    def send_email_verification(self, to_email: str, display_name: str, verification_link: str) -> str:
        html_body = email_verification_html(display_name=display_name, verification_link=verification_link)
        return self._send(
            to_email=to_email,
            subject=f"{BRAND_NAME}: verify your email address",
            html=html_body,
            kind="Verification",
        )

    def send_password_reset(self, to_email: str, reset_link: str) -> str:
        html_body = password_reset_html(reset_link=reset_link)
        return self._send(
            to_email=to_email,
            subject=f"{BRAND_NAME}: reset your password",
            html=html_body,
            kind="Password reset",
        )
