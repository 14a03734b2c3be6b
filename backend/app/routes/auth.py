"""
Spacetime Backend: Auth Route Handler
======================================

What:  POST /register exchanges a GitHub OAuth code for a session token.
Who:   Called by the frontend right after GitHub redirects back with `?code=`.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.auth import RegisterRequest, TokenResponse
from app.schemas.common import ErrorResponse
from app.services.auth_service import auth_service

router = APIRouter(tags=["Auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    responses={
        401: {"description": "GitHub rejected the code", "model": ErrorResponse},
        502: {"description": "GitHub unavailable", "model": ErrorResponse},
    },
    summary="Sign in with a GitHub OAuth code",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await auth_service.register(db=db, code=payload.code)
