"""Evaluation record store: insert-only persistence and owner-scoped queries."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...models.evaluation import DEFAULT_TITLES, Evaluation, EvaluationType
from ...platform.config import settings
from ...shared.utils import ensure_utc
from .access_codes import generate_access_code
from .errors import DependencyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuestOwner:
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    phone_number: Optional[str] = None

    def guest_info(self) -> Dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "company": self.company,
            "phoneNumber": self.phone_number,
        }


@dataclass(frozen=True)
class ProfileOwner:
    profile_id: str


EvaluationOwner = Union[GuestOwner, ProfileOwner]


def _build_metadata(owner: EvaluationOwner, interest: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {"interest": dict(interest) if interest else None}
    if isinstance(owner, GuestOwner):
        metadata["guestInfo"] = owner.guest_info()
    return metadata


def _new_row(
    *,
    owner: EvaluationOwner,
    evaluation_type: EvaluationType,
    title: Optional[str],
    answers: Mapping[str, int],
    score: int,
    interest: Optional[Mapping[str, Any]],
) -> Evaluation:
    row = Evaluation(
        type=evaluation_type,
        title=title or DEFAULT_TITLES[evaluation_type],
        answers=json.dumps(dict(answers)),
        score=score,
        extra_metadata=_build_metadata(owner, interest),
    )
    if isinstance(owner, GuestOwner):
        row.guest_email = owner.email
        row.access_code = generate_access_code()
    else:
        row.profile_id = owner.profile_id
    return row


def create_evaluation(
    db: Session,
    *,
    owner: EvaluationOwner,
    evaluation_type: EvaluationType,
    title: Optional[str],
    answers: Mapping[str, int],
    score: int,
    interest: Optional[Mapping[str, Any]] = None,
) -> Evaluation:
    """Insert one evaluation row and return it.

    Guest rows get a fresh access code. A unique-constraint violation on insert
    is treated as an access-code collision and retried with a new code, up to
    ``ACCESS_CODE_MAX_ATTEMPTS`` times. Any other database failure is raised
    as :class:`DependencyError`.
    """
    attempts = max(1, settings.ACCESS_CODE_MAX_ATTEMPTS) if isinstance(owner, GuestOwner) else 1
    for attempt in range(1, attempts + 1):
        row = _new_row(
            owner=owner,
            evaluation_type=evaluation_type,
            title=title,
            answers=answers,
            score=score,
            interest=interest,
        )
        try:
            db.add(row)
            db.commit()
            db.refresh(row)
            return row
        except IntegrityError:
            db.rollback()
            if attempt < attempts:
                logger.warning("Evaluation insert conflict (attempt %d/%d); regenerating access code", attempt, attempts)
                continue
            logger.exception("Evaluation insert failed after %d attempts", attempts)
            raise DependencyError()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to persist evaluation")
            raise DependencyError()


def get_evaluation(db: Session, evaluation_id: str) -> Evaluation | None:
    try:
        return db.query(Evaluation).filter(Evaluation.id == evaluation_id).first()
    except SQLAlchemyError:
        logger.exception("Failed to load evaluation %s", evaluation_id)
        raise DependencyError("Failed to fetch evaluation")


def list_profile_evaluations(db: Session, profile_id: str) -> List[Evaluation]:
    try:
        return (
            db.query(Evaluation)
            .filter(Evaluation.profile_id == profile_id)
            .order_by(Evaluation.created_at.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Failed to list evaluations for profile %s", profile_id)
        raise DependencyError("Failed to fetch evaluations")


def latest_interest_for_profile(db: Session, profile_id: str) -> Dict[str, Any] | None:
    """Interest payload of the profile's most recent evaluation that captured one."""
    try:
        rows = (
            db.query(Evaluation)
            .filter(Evaluation.profile_id == profile_id)
            .order_by(Evaluation.created_at.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Failed to load interest data for profile %s", profile_id)
        raise DependencyError("Failed to fetch user interest data")
    for row in rows:
        if row.interest:
            return row.interest
    return None


def _isoformat(value: datetime | None) -> str | None:
    value = ensure_utc(value)
    return value.isoformat() if value else None


def evaluation_to_dict(evaluation: Evaluation) -> Dict[str, Any]:
    return {
        "id": evaluation.id,
        "type": EvaluationType(evaluation.type).value,
        "title": evaluation.title,
        "score": evaluation.score,
        "answers": evaluation.answers_dict,
        "profileId": evaluation.profile_id,
        "metadata": evaluation.extra_metadata,
        "createdAt": _isoformat(evaluation.created_at),
        "completedAt": _isoformat(evaluation.completed_at),
    }
