"""Evaluation router assembly: guest flow first so /guest is not read as an id."""

from fastapi import APIRouter

from .guest_routes import router as guest_router
from .member_routes import router as member_router

router = APIRouter()
router.include_router(guest_router)
router.include_router(member_router)

__all__ = ["router"]
