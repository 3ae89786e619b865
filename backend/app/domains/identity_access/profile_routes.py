import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ...deps import get_current_user
from ...models.profile import Profile, UserRole
from ...models.user import User
from ...platform.database import get_db
from ...schemas.evaluation import ProfileResponse, ProfileRoleUpdate

logger = logging.getLogger("simple.profiles")

router = APIRouter(prefix="/profiles", tags=["Profiles"])


def _current_profile(db: Session, user: User) -> Profile:
    profile = db.query(Profile).filter(Profile.user_id == user.id).first()
    if profile is None:
        raise HTTPException(status_code=404, detail="User profile not found")
    return profile


def _profile_response(profile: Profile, email: str | None) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        user_id=profile.user_id,
        email=email,
        role=UserRole(profile.role).value,
        first_name=profile.first_name,
        last_name=profile.last_name,
        company=profile.company,
        created_at=profile.created_at,
    )


@router.get("/me", response_model=ProfileResponse)
def read_my_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = _current_profile(db, current_user)
    return _profile_response(profile, current_user.email)


@router.patch("/{profile_id}/role", response_model=ProfileResponse)
def update_profile_role(
    profile_id: str,
    data: ProfileRoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    actor = _current_profile(db, current_user)
    if actor.role != UserRole.SUPERADMIN:
        raise HTTPException(status_code=403, detail="Only administrators can change roles")

    try:
        new_role = UserRole(str(data.role or "").strip().upper())
    except ValueError:
        raise HTTPException(status_code=400, detail="Role must be FREE, PREMIUM or SUPERADMIN")

    target = db.query(Profile).filter(Profile.id == profile_id).first()
    if target is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    previous = UserRole(target.role)
    target.role = new_role
    try:
        db.commit()
        db.refresh(target)
    except Exception:
        db.rollback()
        logger.exception("Failed to update role for profile %s", profile_id)
        raise HTTPException(status_code=500, detail="Failed to update role")

    logger.info("Profile %s role changed %s -> %s by profile %s", target.id, previous.value, new_role.value, actor.id)
    owner = db.query(User).filter(User.id == target.user_id).first()
    return _profile_response(target, owner.email if owner else None)
