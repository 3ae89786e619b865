from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...components.evaluations.errors import EvaluationError
from ...components.evaluations.policies import AdvancedAccessPolicy, advanced_access_policy
from ...components.evaluations.repository import evaluation_to_dict
from ...components.evaluations.service import (
    MemberSubmission,
    get_latest_interest,
    get_member_evaluation,
    list_evaluation_history,
    submit_profile_evaluation,
)
from ...deps import get_optional_user
from ...models.user import User
from ...platform.database import get_db
from ...schemas.evaluation import EvaluationCreate
from .responses import member_error, unexpected_error

router = APIRouter(prefix="/evaluations", tags=["Evaluations"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_evaluation(
    data: EvaluationCreate,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
    policy: AdvancedAccessPolicy = Depends(advanced_access_policy),
):
    submission = MemberSubmission(
        evaluation_type=data.type,
        title=data.title,
        answers=data.answers,
        interest=data.interest,
    )
    try:
        evaluation = submit_profile_evaluation(db, current_user, submission, policy=policy)
    except EvaluationError as exc:
        return member_error(exc)
    except Exception:
        return unexpected_error("error", "evaluation submission", "Failed to save evaluation")
    return {"evaluation": evaluation_to_dict(evaluation)}


@router.get("")
def list_evaluations(
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    try:
        evaluations = list_evaluation_history(db, current_user)
    except EvaluationError as exc:
        return member_error(exc)
    return {"evaluations": [evaluation_to_dict(e) for e in evaluations]}


@router.get("/user-interest")
def read_user_interest(
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    try:
        interest = get_latest_interest(db, current_user)
    except EvaluationError as exc:
        return member_error(exc)
    if interest is None:
        return {"hasInterestData": False}
    return {"hasInterestData": True, "interest": interest}


@router.get("/{evaluation_id}")
def read_evaluation(
    evaluation_id: str,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    try:
        evaluation = get_member_evaluation(db, current_user, evaluation_id)
    except EvaluationError as exc:
        return member_error(exc)
    return {"evaluation": evaluation_to_dict(evaluation)}
