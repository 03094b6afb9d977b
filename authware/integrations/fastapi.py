"""
Authware FastAPI Integration

Provides dependencies that resolve the caller's Authware profile into a
claims principal.

Usage:
    from fastapi import FastAPI, Depends
    from authware.integrations.fastapi import AuthwareFastAPI, get_current_principal, require_role

    app = FastAPI()
    authware = AuthwareFastAPI(app, app_id="00000000-0000-0000-0000-000000000000")

    @app.get("/me")
    async def me(principal = Depends(get_current_principal)):
        return {"username": principal.identity_name}

    @app.get("/admin")
    async def admin(principal = Depends(require_role("Admin"))):
        return {"admin": True}
"""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, Header, HTTPException

from ..claims import AuthwarePrincipal, to_claims_principal
from ..client import AuthwareAsyncClient
from ..errors import ApiError, AuthwareError, NetworkError, RateLimitError, UpdateRequiredError
from ..types import DEFAULT_BASE_URL, AuthwareConfig

logger = logging.getLogger("authware.fastapi")

# Global client instance (set by AuthwareFastAPI)
_authware_client: Optional[AuthwareAsyncClient] = None


def _get_client() -> AuthwareAsyncClient:
    """Get the global Authware client."""
    if _authware_client is None:
        raise RuntimeError(
            "AuthwareFastAPI not initialized. Call AuthwareFastAPI(app, app_id=...) first."
        )
    return _authware_client


class AuthwareFastAPI:
    """
    FastAPI integration for Authware.

    Args:
        app: FastAPI application instance
        app_id: ID of your Authware application
        base_url: Optional custom API URL
        app_version: Version reported to Authware for update checks
        debug: Enable debug logging
        client: Pre-built async client (overrides the other options)
    """

    def __init__(
        self,
        app: Any,  # FastAPI
        app_id: str,
        base_url: str = DEFAULT_BASE_URL,
        app_version: Optional[str] = None,
        debug: bool = False,
        client: Optional[AuthwareAsyncClient] = None,
    ) -> None:
        global _authware_client

        _authware_client = client or AuthwareAsyncClient(
            AuthwareConfig(app_id=app_id, base_url=base_url, app_version=app_version, debug=debug)
        )

        self.app = app
        app.state.authware = _authware_client

        logger.info("AuthwareFastAPI initialized")

    @property
    def client(self) -> AuthwareAsyncClient:
        """Get the Authware client instance."""
        return _get_client()


def _to_http_exception(error: AuthwareError) -> HTTPException:
    if isinstance(error, RateLimitError):
        return HTTPException(
            status_code=429,
            detail=error.message,
            headers={"Retry-After": str(int(error.retry_after.total_seconds()))},
        )
    if isinstance(error, UpdateRequiredError):
        return HTTPException(status_code=426, detail=error.message, headers={"X-Updater-URL": error.update_url})
    if isinstance(error, ApiError):
        if error.status_code >= 500:
            return HTTPException(status_code=502, detail="Authware is unavailable")
        return HTTPException(status_code=401, detail=error.message)
    if isinstance(error, NetworkError):
        return HTTPException(status_code=503, detail="Authware is unreachable")
    return HTTPException(status_code=502, detail="Unexpected response from Authware")


async def _resolve_principal(authorization: Optional[str], api_key: Optional[str]) -> AuthwarePrincipal:
    if api_key:
        profile = await _get_client().get_user_profile(api_key, is_api_key=True)
    else:
        token = (authorization or "")[7:]
        profile = await _get_client().get_user_profile(token)
    return to_claims_principal(profile)


async def get_current_principal(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None),
) -> AuthwarePrincipal:
    """
    FastAPI dependency to get the authenticated caller.

    Accepts ``Authorization: Bearer <session token>`` or ``X-Api-Key: <key>``.

    Raises:
        HTTPException: 401 if not authenticated, 429 if Authware rate limits the lookup
    """
    if not x_api_key:
        if authorization is None:
            raise HTTPException(status_code=401, detail="Authorization header required")
        if not authorization.startswith("Bearer ") or len(authorization) <= 7:
            raise HTTPException(status_code=401, detail="Invalid authorization format")

    try:
        return await _resolve_principal(authorization, x_api_key)
    except AuthwareError as e:
        logger.error(f"Authentication error: {e!r}")
        raise _to_http_exception(e) from e


async def get_optional_principal(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None),
) -> Optional[AuthwarePrincipal]:
    """FastAPI dependency to get the caller if authenticated, None otherwise."""
    if not x_api_key and (not authorization or not authorization.startswith("Bearer ")):
        return None

    try:
        return await _resolve_principal(authorization, x_api_key)
    except AuthwareError as e:
        logger.debug(f"Auth failed: {e!r}")
        return None


def require_role(role: str) -> Callable[..., Any]:
    """
    FastAPI dependency factory to require an Authware role.

    Usage:
        @app.get("/admin")
        async def admin_route(principal = Depends(require_role("Admin"))):
            return {"admin": True}
    """
    async def dependency(
        principal: AuthwarePrincipal = Depends(get_current_principal),
    ) -> AuthwarePrincipal:
        if not principal.is_in_role(role):
            raise HTTPException(status_code=403, detail=f"Missing role: {role}")
        return principal

    return dependency


def principal_to_dict(principal: AuthwarePrincipal) -> Dict[str, Any]:
    """JSON-friendly view of a principal, for responses and logging."""
    return {
        "id": str(principal.profile.id),
        "username": principal.profile.username,
        "email": principal.profile.email,
        "role": principal.profile.role.name if principal.profile.role else None,
        "authentication_type": principal.authentication_type,
    }
