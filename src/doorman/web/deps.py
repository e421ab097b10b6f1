from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from doorman.app import App
from doorman.core.modules.session.models import AuthToken

bearer_scheme = HTTPBearer(auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_auth_token(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> AuthToken | None:
    """Get the session token from the Authorization Bearer header or the session cookie.

    Validity is not checked here; status and logout both accept dead tokens.
    """
    if credentials and credentials.scheme.lower() == "bearer":
        return AuthToken(credentials.credentials)

    token_cookie = request.cookies.get(app.config.session_cookie_name)
    if token_cookie:
        return AuthToken(token_cookie)

    return None


AppDep = Annotated[App, Depends(get_app)]
AuthTokenDep = Annotated[AuthToken | None, Depends(get_auth_token)]
