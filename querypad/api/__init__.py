"""API routes."""

from fastapi import APIRouter

from querypad.api import auth, health, public, queries

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(queries.router, tags=["queries"])
router.include_router(public.router, prefix="/public", tags=["public"])
