"""
Authware SDK Client

Main client classes for the Authware API. Provides both synchronous and
asynchronous clients; every method checks its arguments locally and then
delegates to the requester, which builds a fresh client per call.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from .errors import ConfigurationError, ValidationError
from .requester import AsyncRequester, Requester
from .types import (
    ApiResponse,
    Application,
    AuthResponse,
    AuthwareConfig,
    BaseResponse,
    Credential,
    Profile,
    UpdatedDataResponse,
    UserVariable,
    Variable,
    is_valid_guid,
)


logger = logging.getLogger("authware")

_parse_user_variable_response = UpdatedDataResponse.parser(UserVariable.from_dict)


def _parse_variables(data: Any) -> List[Variable]:
    if not isinstance(data, list):
        raise TypeError(f"Expected a JSON array of variables, got {type(data).__name__}")
    return [Variable.from_dict(item) for item in data]


def _require(value: Any, name: str) -> None:
    """Reject None and empty strings."""
    if value is None or (isinstance(value, str) and not value):
        raise ValidationError(f"{name} can not be null or empty")


def _require_guid(value: Optional[str], name: str) -> None:
    _require(value, name)
    if not is_valid_guid(value):
        raise ValidationError(f"{name} is invalid, expected a GUID")


def _validate_config(config: AuthwareConfig) -> None:
    if not config.app_id:
        raise ConfigurationError("app_id is required")
    if not is_valid_guid(config.app_id):
        raise ConfigurationError(f"Invalid app_id: {config.app_id!r} is not a GUID")
    if not config.base_url:
        raise ConfigurationError("base_url is required")


class AuthwareClient:
    """
    Authware Client - Synchronous SDK entry point.

    Args:
        config: SDK configuration (the application ID is required)
        requester: Requester to send calls through (default: one built from ``config``)
    """

    def __init__(self, config: AuthwareConfig, requester: Optional[Requester] = None) -> None:
        """Initialize the Authware client."""
        _validate_config(config)

        self._app_id = config.app_id
        self._debug = config.debug
        self._requester = requester or Requester(config)

        # Set by initialize_application
        self.application_information: Optional[Application] = None

        self._log("AuthwareClient initialized")

    def _log(self, message: str, *args: Any) -> None:
        """Log debug message."""
        if self._debug:
            logger.debug(f"[Authware] {message}", *args)

    # =========================================================================
    # Application Methods
    # =========================================================================

    def initialize_application(self) -> Application:
        """
        Check the application ID against the API and cache the application information.

        Returns:
            Application name, version, creation date and APIs
        """
        if self.application_information is not None:
            return self.application_information

        self.application_information = self._requester.request(
            "POST", "/app", Application.from_dict, {"app_id": self._app_id}
        )
        self._log("Initialized application %s", self.application_information)
        return self.application_information

    def grab_application_variables(
        self, auth_token: Optional[str] = None, is_api_key: bool = False
    ) -> List[Variable]:
        """
        Get the application variables the caller has permission to read.

        Without a token (None) only the unauthenticated variables are returned;
        an empty token is rejected.
        """
        if auth_token is None:
            return self._requester.request("GET", "/app/variables", _parse_variables)

        _require(auth_token, "auth_token")
        credential = Credential.of(auth_token, is_api_key)

        return self._requester.request(
            "POST", "/app/variables", _parse_variables, {"app_id": self._app_id}, credential
        )

    # =========================================================================
    # Authentication Methods
    # =========================================================================

    def register(self, username: str, password: str, email: str, token: str) -> BaseResponse:
        """
        Create a user account with a license token.

        Args:
            username: Username the user will log in with
            password: Password the user will log in with
            email: Email address of the user
            token: License (a GUID) to register the user with
        """
        _require(username, "username")
        _require(password, "password")
        _require(email, "email")
        _require_guid(token, "token")

        self._log("Register attempt for: %s", username)
        return self._requester.request(
            "POST",
            "/user/register",
            BaseResponse.from_dict,
            {
                "app_id": self._app_id,
                "username": username,
                "password": password,
                "email_address": email,
                "token": token,
            },
        )

    def login(self, username: str, password: str) -> Tuple[AuthResponse, Profile]:
        """
        Authenticate with username and password.

        Returns:
            The session token and the authenticated user's profile
        """
        _require(username, "username")
        _require(password, "password")

        self._log("Login attempt for: %s", username)
        auth = self._requester.request(
            "POST",
            "/user/auth",
            AuthResponse.from_dict,
            {"app_id": self._app_id, "username": username, "password": password},
        )
        profile = self._requester.request(
            "GET", "/user/profile", Profile.from_dict, credential=Credential.bearer(auth.auth_token)
        )

        self._log("Login successful")
        return auth, profile

    def redeem_token(self, username: str, token: str) -> BaseResponse:
        """Redeem a license token to an existing (usually expired) user."""
        _require(username, "username")
        _require_guid(token, "token")

        return self._requester.request(
            "POST",
            "/user/renew",
            BaseResponse.from_dict,
            {"app_id": self._app_id, "username": username, "token": token},
        )

    # =========================================================================
    # User Methods
    # =========================================================================

    def get_user_profile(self, auth_token: str, is_api_key: bool = False) -> Profile:
        """Get the authenticated user's profile."""
        _require(auth_token, "auth_token")

        return self._requester.request(
            "GET", "/user/profile", Profile.from_dict, credential=Credential.of(auth_token, is_api_key)
        )

    def change_email(self, auth_token: str, password: str, email: str, is_api_key: bool = False) -> BaseResponse:
        """Change the user's email address."""
        _require(auth_token, "auth_token")
        _require(password, "password")
        _require(email, "email")

        return self._requester.request(
            "PUT",
            "/user/change-email",
            BaseResponse.from_dict,
            {"password": password, "new_email_address": email},
            Credential.of(auth_token, is_api_key),
        )

    def change_password(
        self, auth_token: str, current_password: str, new_password: str, is_api_key: bool = False
    ) -> BaseResponse:
        """Change the user's password."""
        _require(auth_token, "auth_token")
        _require(current_password, "current_password")
        _require(new_password, "new_password")

        return self._requester.request(
            "PUT",
            "/user/change-password",
            BaseResponse.from_dict,
            {"old_password": current_password, "password": new_password, "repeat_password": new_password},
            Credential.of(auth_token, is_api_key),
        )

    def regenerate_api_key(self, auth_token: str, password: str, is_api_key: bool = False) -> BaseResponse:
        """Regenerate the user's API key, if the application allows it."""
        _require(auth_token, "auth_token")
        _require(password, "password")

        return self._requester.request(
            "PUT",
            "/user/regenerate-key",
            BaseResponse.from_dict,
            {"password": password},
            Credential.of(auth_token, is_api_key),
        )

    # =========================================================================
    # User Variable Methods
    # =========================================================================

    def create_user_variable(
        self, auth_token: str, key: str, value: str, can_edit: bool = True, is_api_key: bool = False
    ) -> UpdatedDataResponse[UserVariable]:
        """
        Create a user variable.

        Args:
            auth_token: The user's session token or API key
            key: Key of the variable
            value: Value of the variable
            can_edit: Whether the user may edit the variable afterwards
            is_api_key: Whether ``auth_token`` is an API key
        """
        _require(auth_token, "auth_token")
        _require(key, "key")
        _require(value, "value")

        return self._requester.request(
            "POST",
            "/user/variables",
            _parse_user_variable_response,
            {"key": key, "value": value, "can_user_edit": can_edit},
            Credential.of(auth_token, is_api_key),
        )

    def update_user_variable(
        self, auth_token: str, key: str, new_value: str, is_api_key: bool = False
    ) -> UpdatedDataResponse[UserVariable]:
        """Update a user variable by key."""
        _require(auth_token, "auth_token")
        _require(key, "key")
        _require(new_value, "new_value")

        return self._requester.request(
            "PUT",
            "/user/variables",
            _parse_user_variable_response,
            {"key": key, "value": new_value},
            Credential.of(auth_token, is_api_key),
        )

    def delete_user_variable(self, auth_token: str, key: str, is_api_key: bool = False) -> BaseResponse:
        """Delete a user variable by key."""
        _require(auth_token, "auth_token")
        _require(key, "key")

        return self._requester.request(
            "DELETE",
            "/user/variables",
            BaseResponse.from_dict,
            {"key": key},
            Credential.of(auth_token, is_api_key),
        )

    # =========================================================================
    # API Methods
    # =========================================================================

    def execute_api(
        self,
        auth_token: str,
        api_id: str,
        parameters: Optional[Dict[str, Any]] = None,
        is_api_key: bool = False,
    ) -> ApiResponse:
        """
        Execute one of the application's APIs as the current user.

        Returns:
            The API response; ``decoded_response`` holds the plaintext body
        """
        _require(auth_token, "auth_token")
        _require(api_id, "api_id")

        return self._requester.request(
            "POST",
            "/api/execute",
            ApiResponse.from_dict,
            {"api_id": api_id, "parameters": parameters or {}},
            Credential.of(auth_token, is_api_key),
        )


# =============================================================================
# Async Client
# =============================================================================

class AuthwareAsyncClient:
    """
    Authware Async Client - Asynchronous SDK entry point.

    Ideal for FastAPI, aiohttp, and other async frameworks.
    """

    def __init__(self, config: AuthwareConfig, requester: Optional[AsyncRequester] = None) -> None:
        """Initialize the async Authware client."""
        _validate_config(config)

        self._app_id = config.app_id
        self._debug = config.debug
        self._requester = requester or AsyncRequester(config)

        self.application_information: Optional[Application] = None

        self._log("AuthwareAsyncClient initialized")

    def _log(self, message: str, *args: Any) -> None:
        """Log debug message."""
        if self._debug:
            logger.debug(f"[Authware] {message}", *args)

    # =========================================================================
    # Application Methods
    # =========================================================================

    async def initialize_application(self) -> Application:
        """Check the application ID against the API and cache the application information."""
        if self.application_information is not None:
            return self.application_information

        self.application_information = await self._requester.request(
            "POST", "/app", Application.from_dict, {"app_id": self._app_id}
        )
        self._log("Initialized application %s", self.application_information)
        return self.application_information

    async def grab_application_variables(
        self, auth_token: Optional[str] = None, is_api_key: bool = False
    ) -> List[Variable]:
        """Get the application variables the caller has permission to read."""
        if auth_token is None:
            return await self._requester.request("GET", "/app/variables", _parse_variables)

        _require(auth_token, "auth_token")
        credential = Credential.of(auth_token, is_api_key)

        return await self._requester.request(
            "POST", "/app/variables", _parse_variables, {"app_id": self._app_id}, credential
        )

    # =========================================================================
    # Authentication Methods
    # =========================================================================

    async def register(self, username: str, password: str, email: str, token: str) -> BaseResponse:
        """Create a user account with a license token."""
        _require(username, "username")
        _require(password, "password")
        _require(email, "email")
        _require_guid(token, "token")

        self._log("Register attempt for: %s", username)
        return await self._requester.request(
            "POST",
            "/user/register",
            BaseResponse.from_dict,
            {
                "app_id": self._app_id,
                "username": username,
                "password": password,
                "email_address": email,
                "token": token,
            },
        )

    async def login(self, username: str, password: str) -> Tuple[AuthResponse, Profile]:
        """Authenticate with username and password."""
        _require(username, "username")
        _require(password, "password")

        self._log("Login attempt for: %s", username)
        auth = await self._requester.request(
            "POST",
            "/user/auth",
            AuthResponse.from_dict,
            {"app_id": self._app_id, "username": username, "password": password},
        )
        profile = await self._requester.request(
            "GET", "/user/profile", Profile.from_dict, credential=Credential.bearer(auth.auth_token)
        )

        self._log("Login successful")
        return auth, profile

    async def redeem_token(self, username: str, token: str) -> BaseResponse:
        """Redeem a license token to an existing user."""
        _require(username, "username")
        _require_guid(token, "token")

        return await self._requester.request(
            "POST",
            "/user/renew",
            BaseResponse.from_dict,
            {"app_id": self._app_id, "username": username, "token": token},
        )

    # =========================================================================
    # User Methods
    # =========================================================================

    async def get_user_profile(self, auth_token: str, is_api_key: bool = False) -> Profile:
        """Get the authenticated user's profile."""
        _require(auth_token, "auth_token")

        return await self._requester.request(
            "GET", "/user/profile", Profile.from_dict, credential=Credential.of(auth_token, is_api_key)
        )

    async def change_email(
        self, auth_token: str, password: str, email: str, is_api_key: bool = False
    ) -> BaseResponse:
        """Change the user's email address."""
        _require(auth_token, "auth_token")
        _require(password, "password")
        _require(email, "email")

        return await self._requester.request(
            "PUT",
            "/user/change-email",
            BaseResponse.from_dict,
            {"password": password, "new_email_address": email},
            Credential.of(auth_token, is_api_key),
        )

    async def change_password(
        self, auth_token: str, current_password: str, new_password: str, is_api_key: bool = False
    ) -> BaseResponse:
        """Change the user's password."""
        _require(auth_token, "auth_token")
        _require(current_password, "current_password")
        _require(new_password, "new_password")

        return await self._requester.request(
            "PUT",
            "/user/change-password",
            BaseResponse.from_dict,
            {"old_password": current_password, "password": new_password, "repeat_password": new_password},
            Credential.of(auth_token, is_api_key),
        )

    async def regenerate_api_key(self, auth_token: str, password: str, is_api_key: bool = False) -> BaseResponse:
        """Regenerate the user's API key."""
        _require(auth_token, "auth_token")
        _require(password, "password")

        return await self._requester.request(
            "PUT",
            "/user/regenerate-key",
            BaseResponse.from_dict,
            {"password": password},
            Credential.of(auth_token, is_api_key),
        )

    # =========================================================================
    # User Variable Methods
    # =========================================================================

    async def create_user_variable(
        self, auth_token: str, key: str, value: str, can_edit: bool = True, is_api_key: bool = False
    ) -> UpdatedDataResponse[UserVariable]:
        """Create a user variable."""
        _require(auth_token, "auth_token")
        _require(key, "key")
        _require(value, "value")

        return await self._requester.request(
            "POST",
            "/user/variables",
            _parse_user_variable_response,
            {"key": key, "value": value, "can_user_edit": can_edit},
            Credential.of(auth_token, is_api_key),
        )

    async def update_user_variable(
        self, auth_token: str, key: str, new_value: str, is_api_key: bool = False
    ) -> UpdatedDataResponse[UserVariable]:
        """Update a user variable by key."""
        _require(auth_token, "auth_token")
        _require(key, "key")
        _require(new_value, "new_value")

        return await self._requester.request(
            "PUT",
            "/user/variables",
            _parse_user_variable_response,
            {"key": key, "value": new_value},
            Credential.of(auth_token, is_api_key),
        )

    async def delete_user_variable(self, auth_token: str, key: str, is_api_key: bool = False) -> BaseResponse:
        """Delete a user variable by key."""
        _require(auth_token, "auth_token")
        _require(key, "key")

        return await self._requester.request(
            "DELETE",
            "/user/variables",
            BaseResponse.from_dict,
            {"key": key},
            Credential.of(auth_token, is_api_key),
        )

    # =========================================================================
    # API Methods
    # =========================================================================

    async def execute_api(
        self,
        auth_token: str,
        api_id: str,
        parameters: Optional[Dict[str, Any]] = None,
        is_api_key: bool = False,
    ) -> ApiResponse:
        """Execute one of the application's APIs as the current user."""
        _require(auth_token, "auth_token")
        _require(api_id, "api_id")

        return await self._requester.request(
            "POST",
            "/api/execute",
            ApiResponse.from_dict,
            {"api_id": api_id, "parameters": parameters or {}},
            Credential.of(auth_token, is_api_key),
        )


# =============================================================================
# Factory Functions
# =============================================================================

def create_authware_client(config: AuthwareConfig, requester: Optional[Requester] = None) -> AuthwareClient:
    """Create a new synchronous Authware client."""
    return AuthwareClient(config, requester)


def create_async_authware_client(
    config: AuthwareConfig, requester: Optional[AsyncRequester] = None
) -> AuthwareAsyncClient:
    """Create a new asynchronous Authware client."""
    return AuthwareAsyncClient(config, requester)
