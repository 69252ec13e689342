"""API routes."""

from fastapi import APIRouter

from app.api.routes import submissions, verification

api_router = APIRouter()

# Public routes (landing page and form builders call these directly)
api_router.include_router(submissions.router, tags=["submissions"])
api_router.include_router(verification.router, tags=["verification"])
