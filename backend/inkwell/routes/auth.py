"""
Inkwell Backend: Account Route Handlers
========================================

What:  POST /auth/register, POST /auth/login, GET /auth/me.
Why:   The post endpoints need tokens; these routes are where tokens come from.
"""

from fastapi import APIRouter

from inkwell.dependencies import AppSettings, CurrentClaim, DbSession
from inkwell.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from inkwell.schemas.common import ErrorResponse
from inkwell.services.auth_service import auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    responses={400: {"description": "User already exists", "model": ErrorResponse}},
    summary="Register a new account",
)
async def register(payload: RegisterRequest, db: DbSession, settings: AppSettings) -> TokenResponse:
    return await auth_service.register(db=db, payload=payload, settings=settings)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Log in and receive a token",
)
async def login(payload: LoginRequest, db: DbSession, settings: AppSettings) -> TokenResponse:
    return await auth_service.login(db=db, payload=payload, settings=settings)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
    summary="Profile of the authenticated user",
)
async def me(claim: CurrentClaim, db: DbSession) -> UserResponse:
    return await auth_service.get_profile(db=db, claim=claim)
