"""
FastAPI-Users configuration: user manager, auth backend, schemas, Resend hooks.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi_users import BaseUserManager, FastAPIUsers, IntegerIDMixin, InvalidPasswordException, exceptions, schemas
from fastapi_users.authentication import AuthenticationBackend, BearerTransport, JWTStrategy
from fastapi_users.db import SQLAlchemyUserDatabase
from fastapi_users.jwt import generate_jwt
from sqlalchemy.ext.asyncio import AsyncSession

from ...components.notifications.email_client import EmailService
from ...components.notifications.service import resend_configured
from ...models.profile import Profile, UserRole
from ...models.user import User
from ...platform.config import settings
from ...platform.database import get_async_db
from ...shared.utils import mask_email

logger = logging.getLogger("simple.auth")

PROFILE_FIELDS = ("first_name", "last_name", "company")


# ---- Schemas (extend FastAPI-Users base) ----
class UserRead(schemas.BaseUser[int]):
    pass


class UserCreate(schemas.BaseUserCreate):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None


class UserUpdate(schemas.BaseUserUpdate):
    pass


# ---- User Manager ----
class UserManager(IntegerIDMixin, BaseUserManager[User, int]):
    reset_password_token_secret = settings.SECRET_KEY
    verification_token_secret = settings.SECRET_KEY
    reset_password_token_lifetime_seconds = 3600
    verification_token_lifetime_seconds = 86400  # 24 hours

    async def validate_password(self, password: str, user) -> None:
        if len(password) < 8:
            raise InvalidPasswordException(reason="Password should be at least 8 characters")

    async def create(self, user_create, safe: bool = False, request: Optional[Request] = None) -> User:
        """Create the user and its FREE profile in one transaction."""
        await self.validate_password(user_create.password, user_create)

        existing_user = await self.user_db.get_by_email(user_create.email)
        if existing_user is not None:
            raise exceptions.UserAlreadyExists()

        user_dict = (
            user_create.create_update_dict()
            if safe
            else user_create.create_update_dict_superuser()
        )
        password = user_dict.pop("password")
        user_dict["hashed_password"] = self.password_helper.hash(password)
        profile_fields = {name: user_dict.pop(name, None) for name in PROFILE_FIELDS}

        session: AsyncSession = self.user_db.session
        created_user = User(**user_dict)
        session.add(created_user)
        await session.flush()
        session.add(Profile(user_id=created_user.id, role=UserRole.FREE, **profile_fields))
        await session.commit()
        await session.refresh(created_user)

        logger.info("Registered user %s with FREE profile", created_user.id)
        await self.on_after_register(created_user, request)
        return created_user

    def _email_service(self) -> EmailService:
        return EmailService(api_key=settings.RESEND_API_KEY, from_email=settings.EMAIL_FROM)

    def _send_verification(self, user: User, token: str) -> None:
        if not resend_configured():
            logger.warning("RESEND_API_KEY not set; skipping verification email for %s", mask_email(user.email))
            return
        try:
            verification_link = f"{settings.FRONTEND_URL}/verify-email?token={token}"
            self._email_service().send_email_verification(
                to_email=user.email,
                display_name=user.email,
                verification_link=verification_link,
            )
        except Exception:
            logger.exception("Failed to send verification email to %s", mask_email(user.email))

    async def on_after_register(self, user: User, request: Optional[Request] = None) -> None:
        token_data = {"sub": str(user.id), "email": user.email, "aud": self.verification_token_audience}
        token = generate_jwt(
            token_data,
            self.verification_token_secret,
            self.verification_token_lifetime_seconds,
        )
        self._send_verification(user, token)

    async def on_after_forgot_password(
        self, user: User, token: str, request: Optional[Request] = None
    ) -> None:
        if not resend_configured():
            logger.warning("RESEND_API_KEY not set or 'skip'; not sending password reset email to %s", mask_email(user.email))
            return
        try:
            reset_link = f"{settings.FRONTEND_URL}/reset-password?token={token}"
            self._email_service().send_password_reset(to_email=user.email, reset_link=reset_link)
        except Exception:
            logger.exception("Failed to send password reset email to %s", mask_email(user.email))

    async def on_after_request_verify(
        self, user: User, token: str, request: Optional[Request] = None
    ) -> None:
        self._send_verification(user, token)


async def get_user_db(session: AsyncSession = Depends(get_async_db)):
    yield SQLAlchemyUserDatabase(session, User)


async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)


# ---- Auth Backend ----
bearer_transport = BearerTransport(tokenUrl="/api/v1/auth/jwt/login")


def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(
        secret=settings.SECRET_KEY,
        lifetime_seconds=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

fastapi_users = FastAPIUsers[User, int](get_user_manager, [auth_backend])

current_active_user = fastapi_users.current_user(active=True)
# Member evaluation routes resolve the session themselves so a missing
# session surfaces as {"error": ...} rather than FastAPI-Users' 401 body.
optional_active_user = fastapi_users.current_user(active=True, optional=True)
