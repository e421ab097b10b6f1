from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field


def set_custom_openapi(app: FastAPI, cookie_name: str) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Doorman API",
            version="0.1.0",
            summary="Account registration, login sessions and password reset by email",
            routes=app.routes,
        )

        # Only status and logout read the session; everything else is public
        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": cookie_name,
                "description": "Session token set by login",
            },
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "description": "Session token sent as a bearer token",
            },
        }

        session_endpoints = {
            ("GET", "/api/status"),
            ("GET", "/api/logout"),
        }

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in session_endpoints:
                    operation["security"] = [{"SessionCookie": []}, {"BearerAuth": []}]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = Field(False, description="Always false for errors")
    error: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"success": False, "error": "AUTH_FAILED", "message": "Invalid username or password"},
                {"success": False, "error": "WEAK_CREDENTIAL", "message": "Password must be at least 8 characters long"},
                {"success": False, "error": "TOKEN_INVALID_OR_EXPIRED", "message": "Reset link is invalid or has expired"},
            ]
        }
    }
