"""API v1 routes."""

from fastapi import APIRouter

from cms.api.v1 import auth, health, pages, users, website

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["sessions"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(pages.router, prefix="/pages", tags=["pages"])
router.include_router(website.router, prefix="/website", tags=["website"])
