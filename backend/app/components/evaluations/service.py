"""Evaluation workflows: guest submission, member submission, and result access."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models.evaluation import TITLE_MAX_LENGTH, Evaluation, EvaluationType
from ...models.profile import Profile
from ...models.user import User
from ...platform.config import settings
from ...shared.utils import mask_email
from ..auth.email_policy import evaluate_corporate_email
from ..notifications.dedupe import RecentSendCache, results_key
from .errors import AuthenticationError, AuthorizationError, DependencyError, NotFoundError, ValidationError
from .policies import AdvancedAccessPolicy, advanced_access_policy, can_view_any_evaluation, can_view_history
from .repository import (
    GuestOwner,
    ProfileOwner,
    create_evaluation,
    get_evaluation,
    latest_interest_for_profile,
    list_profile_evaluations,
)
from .scoring import score_answers

logger = logging.getLogger(__name__)

# Called with keyword arguments to_email, evaluation_id, access_code,
# evaluation_type, score, display_name. Returns a delivery id or raises.
ResultsNotifier = Callable[..., Optional[str]]

GUEST_DISPLAY_NAME_FALLBACK = "there"


@dataclass
class GuestSubmission:
    email: Any
    evaluation_type: Any
    answers: Any
    title: Any = None
    interest: Any = None
    first_name: Any = None
    last_name: Any = None
    company: Any = None
    phone_number: Any = None


@dataclass
class MemberSubmission:
    evaluation_type: Any
    title: Any
    answers: Any
    interest: Any = None


# ---------------------------------------------------------------------------
# Input checks
# ---------------------------------------------------------------------------

def parse_evaluation_type(value: Any) -> EvaluationType:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Evaluation type is required")
    if not isinstance(value, str):
        raise ValidationError("Evaluation type must be INITIAL or ADVANCED")
    try:
        return EvaluationType(value.strip().upper())
    except ValueError:
        raise ValidationError("Evaluation type must be INITIAL or ADVANCED")


def clean_text(value: Any, field: str, *, max_length: Optional[int] = None) -> Optional[str]:
    """Strip an optional free-text field. Blank becomes None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    cleaned = value.strip()
    if max_length is not None and len(cleaned) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return cleaned or None


def validate_answers(answers: Any) -> Dict[str, int]:
    if answers is None:
        raise ValidationError("Answers are required")
    if not isinstance(answers, Mapping):
        raise ValidationError("Answers must map question ids to numbers")
    cleaned: Dict[str, int] = {}
    for question_id, value in answers.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"Answer for '{question_id}' must be an integer")
        cleaned[str(question_id)] = value
    return cleaned


def _normalize_interest(interest: Any) -> Optional[Dict[str, Any]]:
    if interest is None:
        return None
    if not isinstance(interest, Mapping):
        raise ValidationError("Interest must be an object with a reason")
    if not interest:
        return None
    reason = clean_text(interest.get("reason"), "Interest reason")
    if not reason:
        raise ValidationError("Interest reason is required when interest is provided")
    return {"reason": reason, "otherReason": clean_text(interest.get("otherReason"), "Other reason")}


# ---------------------------------------------------------------------------
# Notification
# ---------------------------------------------------------------------------

def _notify_results(notifier: ResultsNotifier, evaluation: Evaluation, display_name: str) -> Optional[str]:
    """Send the results email. Failures are logged and swallowed."""
    try:
        return notifier(
            to_email=evaluation.guest_email,
            evaluation_id=evaluation.id,
            access_code=evaluation.access_code,
            evaluation_type=EvaluationType(evaluation.type).value,
            score=evaluation.score,
            display_name=display_name,
        )
    except Exception:
        logger.exception(
            "Results email failed for evaluation %s (to=%s); evaluation kept",
            evaluation.id,
            mask_email(evaluation.guest_email),
        )
        return None


def _guest_display_name(evaluation: Evaluation) -> str:
    meta = evaluation.extra_metadata if isinstance(evaluation.extra_metadata, dict) else {}
    info = meta.get("guestInfo") or {}
    return str(info.get("firstName") or "").strip() or GUEST_DISPLAY_NAME_FALLBACK


# ---------------------------------------------------------------------------
# Guest workflow
# ---------------------------------------------------------------------------

def submit_guest_evaluation(
    db: Session,
    submission: GuestSubmission,
    *,
    notifier: ResultsNotifier,
) -> Evaluation:
    """Validate, score and store a guest evaluation, then email the results link.

    Every validation error is raised before anything is written. The email is
    best effort: a notifier failure leaves the stored evaluation untouched.
    """
    decision = evaluate_corporate_email(submission.email, require_corporate=settings.REQUIRE_CORPORATE_EMAIL)
    if not decision.allowed:
        logger.info("Guest evaluation rejected (%s) for %s", decision.code, mask_email(submission.email))
        raise ValidationError(decision.reason)

    evaluation_type = parse_evaluation_type(submission.evaluation_type)
    title = clean_text(submission.title, "Title", max_length=TITLE_MAX_LENGTH)
    answers = validate_answers(submission.answers)
    interest = _normalize_interest(submission.interest)
    owner = GuestOwner(
        email=decision.normalized,
        first_name=clean_text(submission.first_name, "First name"),
        last_name=clean_text(submission.last_name, "Last name"),
        company=clean_text(submission.company, "Company"),
        phone_number=clean_text(submission.phone_number, "Phone number"),
    )
    score = score_answers(answers)

    evaluation = create_evaluation(
        db,
        owner=owner,
        evaluation_type=evaluation_type,
        title=title,
        answers=answers,
        score=score,
        interest=interest,
    )
    logger.info(
        "Guest evaluation %s stored (type=%s, score=%d, to=%s)",
        evaluation.id, evaluation_type.value, score, mask_email(owner.email),
    )

    _notify_results(notifier, evaluation, owner.first_name or GUEST_DISPLAY_NAME_FALLBACK)
    return evaluation


def get_guest_evaluation(db: Session, evaluation_id: str, access_code: Optional[str]) -> Evaluation:
    """Return a guest evaluation only when ``access_code`` matches its stored code.

    Unknown ids and wrong codes raise the same NotFoundError.
    """
    evaluation = get_evaluation(db, evaluation_id)
    stored = evaluation.access_code if evaluation is not None else None
    if not stored or not access_code or not secrets.compare_digest(stored.encode(), str(access_code).encode()):
        raise NotFoundError("Evaluation not found")
    return evaluation


def resend_guest_results(
    db: Session,
    evaluation_id: str,
    access_code: Optional[str],
    *,
    notifier: ResultsNotifier,
    cache: RecentSendCache,
) -> bool:
    """Re-send the results email. Returns False when suppressed as a recent duplicate."""
    evaluation = get_guest_evaluation(db, evaluation_id, access_code)
    key = results_key(evaluation.guest_email, evaluation.id)
    if cache.seen_recently(key):
        logger.info("Results email for evaluation %s already sent recently", evaluation.id)
        return False
    try:
        notifier(
            to_email=evaluation.guest_email,
            evaluation_id=evaluation.id,
            access_code=evaluation.access_code,
            evaluation_type=EvaluationType(evaluation.type).value,
            score=evaluation.score,
            display_name=_guest_display_name(evaluation),
        )
    except Exception:
        logger.exception("Results email resend failed for evaluation %s", evaluation.id)
        raise DependencyError("Email service error")
    cache.mark_sent(key)
    return True


# ---------------------------------------------------------------------------
# Member workflow
# ---------------------------------------------------------------------------

def resolve_profile(db: Session, user: Optional[User]) -> Profile:
    if user is None:
        raise AuthenticationError("Authentication required")
    try:
        profile = db.query(Profile).filter(Profile.user_id == user.id).first()
    except SQLAlchemyError:
        logger.exception("Failed to load profile for user %s", user.id)
        raise DependencyError("Failed to load user profile")
    if profile is None:
        raise NotFoundError("User profile not found")
    return profile


def submit_profile_evaluation(
    db: Session,
    user: Optional[User],
    submission: MemberSubmission,
    *,
    policy: AdvancedAccessPolicy | None = None,
) -> Evaluation:
    profile = resolve_profile(db, user)

    evaluation_type = parse_evaluation_type(submission.evaluation_type)
    title = clean_text(submission.title, "Title", max_length=TITLE_MAX_LENGTH)
    if not title:
        raise ValidationError("Missing required fields")
    answers = validate_answers(submission.answers)
    interest = _normalize_interest(submission.interest)

    gate = policy or advanced_access_policy()
    if evaluation_type == EvaluationType.ADVANCED and not gate(profile.role):
        raise AuthorizationError("Premium subscription required for advanced evaluations")

    score = score_answers(answers)
    evaluation = create_evaluation(
        db,
        owner=ProfileOwner(profile_id=profile.id),
        evaluation_type=evaluation_type,
        title=title,
        answers=answers,
        score=score,
        interest=interest,
    )
    logger.info("Evaluation %s stored for profile %s (type=%s, score=%d)", evaluation.id, profile.id, evaluation_type.value, score)
    return evaluation


def list_evaluation_history(db: Session, user: Optional[User]) -> List[Evaluation]:
    profile = resolve_profile(db, user)
    if not can_view_history(profile.role):
        raise AuthorizationError("Premium subscription required to access evaluation history")
    return list_profile_evaluations(db, profile.id)


def get_member_evaluation(db: Session, user: Optional[User], evaluation_id: str) -> Evaluation:
    profile = resolve_profile(db, user)
    evaluation = get_evaluation(db, evaluation_id)
    if evaluation is None:
        raise NotFoundError("Evaluation not found")
    if evaluation.profile_id != profile.id and not can_view_any_evaluation(profile.role):
        raise AuthorizationError("You do not have access to this evaluation")
    return evaluation


def get_latest_interest(db: Session, user: Optional[User]) -> Optional[Dict[str, Any]]:
    profile = resolve_profile(db, user)
    return latest_interest_for_profile(db, profile.id)
