from typing import Literal

from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from doorman.app import SessionStatus
from doorman.web.deps import AppDep, AuthTokenDep
from doorman.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class RegisterRequest(BaseModel):
    """Account registration request."""

    username: str = Field(..., description="Unique, case-sensitive username")
    email: str = Field(..., description="Address that receives password reset links")
    password: str = Field(..., description="Plaintext password, at least 8 characters")


class LoginRequest(BaseModel):
    """Authentication request."""

    username: str = Field(..., description="Username for authentication")
    password: str = Field(..., description="Password for authentication")


class SuccessResponse(BaseModel):
    success: Literal[True] = True
    message: str | None = None


class LoginResponse(BaseModel):
    """Authentication response. The session token travels in a cookie."""

    success: Literal[True] = True
    username: str = Field(..., description="Name of the logged in user")


@router.post(
    "/register",
    summary="Register account",
    description="Create a new account. Does not log the user in.",
    operation_id="register",
    response_model_exclude_none=True,
    responses={
        200: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Weak password, taken or reserved username, or missing field"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
)
async def register(register_data: RegisterRequest, app: AppDep) -> SuccessResponse:
    await app.register(register_data.username, register_data.email, register_data.password)
    return SuccessResponse()


@router.post(
    "/login",
    summary="Authenticate user",
    description="Authenticate with username and password; the session token is set as a cookie.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, response: Response) -> LoginResponse:
    result = await app.login(login_data.username, login_data.password)

    response.set_cookie(
        key=app.config.session_cookie_name,
        value=result.auth_token,
        httponly=True,
        samesite="lax",
        secure=app.config.secure_cookies,
        max_age=app.config.session_max_age,
    )

    return LoginResponse(username=result.username)


@router.get(
    "/status",
    summary="Session status",
    description="Report whether the caller has a live session and for which user.",
    operation_id="getStatus",
    response_model_exclude_none=True,
    responses={200: {"description": "Session status"}},
)
async def status(app: AppDep, auth_token: AuthTokenDep) -> SessionStatus:
    return await app.get_status(auth_token)


@router.get(
    "/logout",
    summary="End session",
    description="Invalidate the current session and clear the cookie. Succeeds without a session too.",
    operation_id="logout",
    responses={200: {"description": "Logged out"}},
)
async def logout(app: AppDep, auth_token: AuthTokenDep, response: Response) -> SuccessResponse:
    await app.logout(auth_token)
    response.delete_cookie(
        key=app.config.session_cookie_name, httponly=True, samesite="lax", secure=app.config.secure_cookies
    )
    return SuccessResponse(message="Logged out")
