from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from doorman.web.deps import AppDep
from doorman.web.openapi import ErrorResponse
from doorman.web.routers.auth import SuccessResponse

router = APIRouter(tags=["recovery"])


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., description="Email address of the account")


class ResetPasswordRequest(BaseModel):
    """New password plus the token from the emailed link.

    Both fields are optional here so that a missing one is reported as INVALID_INPUT.
    """

    token: str | None = Field(None, description="Token from the reset link")
    new_password: str | None = Field(None, alias="newPassword", description="New plaintext password")

    model_config = ConfigDict(populate_by_name=True)


@router.post(
    "/forgot-password",
    summary="Request password reset",
    description="Email a single-use reset link. A new request invalidates earlier links.",
    operation_id="forgotPassword",
    responses={
        200: {"description": "Reset link sent"},
        400: {"model": ErrorResponse, "description": "Missing email"},
        404: {"model": ErrorResponse, "description": "No account with this email"},
        500: {"model": ErrorResponse, "description": "Token could not be stored or email could not be sent"},
    },
)
async def forgot_password(request: ForgotPasswordRequest, app: AppDep) -> SuccessResponse:
    await app.request_password_reset(request.email)
    return SuccessResponse(message="If the address is registered, a reset link has been sent")


@router.post(
    "/reset-password",
    summary="Reset password",
    description="Set a new password using the token from a reset link. Each token works once.",
    operation_id="resetPassword",
    responses={
        200: {"description": "Password changed"},
        400: {"model": ErrorResponse, "description": "Missing input, weak password, or invalid/expired token"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
)
async def reset_password(request: ResetPasswordRequest, app: AppDep) -> SuccessResponse:
    await app.confirm_password_reset(request.token, request.new_password)
    return SuccessResponse(message="Password has been changed")
