import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...components.notifications.dedupe import RecentSendCache, welcome_key
from ...deps import get_current_user
from ...models.profile import Profile
from ...models.user import User
from ...platform.database import get_db
from ...shared.utils import mask_email
from .adapters import WelcomeSenderAdapter, build_recent_send_cache, build_welcome_sender

logger = logging.getLogger("simple.notifications")

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.post("/welcome")
def send_welcome_notification(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    sender: WelcomeSenderAdapter = Depends(build_welcome_sender),
    cache: RecentSendCache = Depends(build_recent_send_cache),
):
    """Send the welcome email to the caller, at most once per de-dup window."""
    key = welcome_key(current_user.email)
    if cache.seen_recently(key):
        logger.info("Welcome email to %s suppressed as duplicate", mask_email(current_user.email))
        return {"sent": False, "message": "Email already sent recently"}

    profile = db.query(Profile).filter(Profile.user_id == current_user.id).first()
    first_name = (profile.first_name if profile else None) or current_user.email.split("@")[0]
    try:
        message_id = sender(to_email=current_user.email, first_name=first_name)
    except Exception:
        logger.exception("Welcome email to %s failed", mask_email(current_user.email))
        return JSONResponse(status_code=500, content={"error": "Email service error"})

    cache.mark_sent(key)
    return {"sent": True, "id": message_id}
