"""
api/routes/profile.py -- Protected endpoints.

Routes:
  GET /api/profile -- the authenticated username (requires a Bearer access token)

get_current_user rejects the request before the handler runs if the
Authorization header is missing, not "Bearer ", or carries an invalid token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.models import ProfileResponse
from auth.dependencies import get_current_user

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
def profile(user: str = Depends(get_current_user)) -> ProfileResponse:
    """Return the identity resolved from the bearer token."""
    return ProfileResponse(user=user)
