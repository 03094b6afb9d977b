"""
Authware Python SDK

A Python SDK for the Authware authentication and licensing API with sync
and async clients. Every call uses a fresh, certificate-pinned HTTPS
client and ends in a typed value or exactly one structured error.
"""

from ._version import __version__
from .client import (
    AuthwareClient,
    AuthwareAsyncClient,
    create_authware_client,
    create_async_authware_client,
)
from .requester import Requester, AsyncRequester
from .types import (
    AuthwareConfig,
    AuthMode,
    Credential,
    ResponseStatus,
    BaseResponse,
    ErrorResponse,
    UpdatedDataResponse,
    AuthResponse,
    Api,
    ApiResponse,
    Application,
    Profile,
    Role,
    Session,
    Variable,
    UserVariable,
)
from .errors import (
    AuthwareError,
    ApiError,
    NetworkError,
    ValidationError,
    ConfigurationError,
    RateLimitError,
    UpdateRequiredError,
    UnexpectedResponseError,
    ErrorResponseParseError,
    is_authware_error,
    is_retryable_error,
)
from .result import Ok, Err, Result, capture, capture_async
from .claims import AuthwarePrincipal, Claim, ClaimTypes, to_claims_principal

__all__ = [
    "__version__",
    # Clients
    "AuthwareClient",
    "AuthwareAsyncClient",
    "create_authware_client",
    "create_async_authware_client",
    "Requester",
    "AsyncRequester",
    # Types
    "AuthwareConfig",
    "AuthMode",
    "Credential",
    "ResponseStatus",
    "BaseResponse",
    "ErrorResponse",
    "UpdatedDataResponse",
    "AuthResponse",
    "Api",
    "ApiResponse",
    "Application",
    "Profile",
    "Role",
    "Session",
    "Variable",
    "UserVariable",
    # Errors
    "AuthwareError",
    "ApiError",
    "NetworkError",
    "ValidationError",
    "ConfigurationError",
    "RateLimitError",
    "UpdateRequiredError",
    "UnexpectedResponseError",
    "ErrorResponseParseError",
    "is_authware_error",
    "is_retryable_error",
    # Results
    "Ok",
    "Err",
    "Result",
    "capture",
    "capture_async",
    # Claims
    "AuthwarePrincipal",
    "Claim",
    "ClaimTypes",
    "to_claims_principal",
]
