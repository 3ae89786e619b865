from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...components.evaluations.errors import EvaluationError
from ...components.evaluations.scoring import maturity_level
from ...components.evaluations.service import (
    GuestSubmission,
    get_guest_evaluation,
    resend_guest_results,
    submit_guest_evaluation,
)
from ...components.notifications.dedupe import RecentSendCache
from ...models.evaluation import EvaluationType
from ...platform.database import get_db
from ...schemas.evaluation import GuestEvaluationCreate
from ...shared.utils import ensure_utc
from ..integrations_notifications.adapters import (
    ResultsNotifierAdapter,
    build_recent_send_cache,
    build_results_notifier,
)
from .responses import guest_error, unexpected_error

router = APIRouter(prefix="/evaluations/guest", tags=["Guest evaluations"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_guest_evaluation(
    data: GuestEvaluationCreate,
    db: Session = Depends(get_db),
    notifier: ResultsNotifierAdapter = Depends(build_results_notifier),
):
    submission = GuestSubmission(
        email=data.email,
        evaluation_type=data.type,
        answers=data.answers,
        title=data.title,
        interest=data.interest,
        first_name=data.first_name,
        last_name=data.last_name,
        company=data.company,
        phone_number=data.phone_number,
    )
    try:
        evaluation = submit_guest_evaluation(db, submission, notifier=notifier)
    except EvaluationError as exc:
        return guest_error(exc)
    except Exception:
        return unexpected_error("message", "guest evaluation submission")

    return {
        "message": "Evaluation saved successfully",
        "evaluation": {
            "id": evaluation.id,
            "type": EvaluationType(evaluation.type).value,
            "score": evaluation.score,
            "accessCode": evaluation.access_code,
        },
    }


@router.get("/{evaluation_id}")
def read_guest_evaluation(
    evaluation_id: str,
    code: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    try:
        evaluation = get_guest_evaluation(db, evaluation_id, code)
    except EvaluationError as exc:
        return guest_error(exc)

    evaluation_type = EvaluationType(evaluation.type)
    return {
        "evaluation": {
            "id": evaluation.id,
            "type": evaluation_type.value,
            "title": evaluation.title,
            "score": evaluation.score,
            "answers": evaluation.answers_dict,
            "maturity": maturity_level(evaluation_type, evaluation.score).as_dict(),
            "createdAt": ensure_utc(evaluation.created_at).isoformat() if evaluation.created_at else None,
        }
    }


@router.post("/{evaluation_id}/resend")
def resend_guest_evaluation_email(
    evaluation_id: str,
    code: str | None = Query(default=None),
    db: Session = Depends(get_db),
    notifier: ResultsNotifierAdapter = Depends(build_results_notifier),
    cache: RecentSendCache = Depends(build_recent_send_cache),
):
    try:
        sent = resend_guest_results(db, evaluation_id, code, notifier=notifier, cache=cache)
    except EvaluationError as exc:
        return guest_error(exc)

    if not sent:
        return {"message": "Email already sent recently"}
    return {"message": "Email sent successfully"}
