"""
Auth API routes — signup, signin.

Route prefix: /api/auth
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import AfterValidator, BaseModel, Field

from auth.context import AuthContext
from auth.dependencies import get_auth_context
from auth.password import MAX_PASSWORD_BYTES
from auth.service import AuthOutcome, OutcomeKind, sign_in, sign_up
from database.user_store import UserRecord

router = APIRouter(tags=["auth"])

_STATUS_BY_OUTCOME = {
    OutcomeKind.CREATED: status.HTTP_201_CREATED,
    OutcomeKind.AUTHENTICATED: status.HTTP_200_OK,
    OutcomeKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    OutcomeKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    OutcomeKind.INVALID_CREDENTIALS: status.HTTP_400_BAD_REQUEST,
    OutcomeKind.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


# ── Request / response schemas ─────────────────────────────────────────


def _check_password_length(value: str) -> str:
    if len(value.encode()) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


Password = Annotated[str, Field(min_length=1), AfterValidator(_check_password_length)]


class SignUpRequest(BaseModel):
    fname: str = Field(..., min_length=1, max_length=128)
    lname: str = Field(..., min_length=1, max_length=128)
    email: str = Field(..., min_length=1, max_length=255)
    password: Password


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: Password


class UserOut(BaseModel):
    id: str
    fname: str
    lname: str
    email: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserOut":
        return cls(
            id=user.id,
            fname=user.first_name,
            lname=user.last_name,
            email=user.email,
            created_at=user.created_at,
        )


class AuthResponse(BaseModel):
    user: UserOut
    token: str


class MessageResponse(BaseModel):
    message: str


def _to_response(outcome: AuthOutcome) -> JSONResponse:
    code = _STATUS_BY_OUTCOME[outcome.kind]
    if outcome.ok:
        body = AuthResponse(user=UserOut.from_record(outcome.user), token=outcome.token)
    else:
        body = MessageResponse(message=outcome.message)
    return JSONResponse(status_code=code, content=body.model_dump(mode="json"))


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
    responses={400: {"model": MessageResponse}, 500: {"model": MessageResponse}},
)
async def signup(
    req: SignUpRequest,
    ctx: AuthContext = Depends(get_auth_context),
) -> JSONResponse:
    """Register a new user."""
    outcome = await sign_up(
        ctx,
        first_name=req.fname,
        last_name=req.lname,
        email=req.email,
        password=req.password,
    )
    return _to_response(outcome)


@router.post(
    "/signin",
    response_model=AuthResponse,
    responses={
        400: {"model": MessageResponse},
        404: {"model": MessageResponse},
        500: {"model": MessageResponse},
    },
)
async def signin(
    req: SignInRequest,
    ctx: AuthContext = Depends(get_auth_context),
) -> JSONResponse:
    """Login with email + password."""
    outcome = await sign_in(ctx, email=req.email, password=req.password)
    return _to_response(outcome)
