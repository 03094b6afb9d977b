"""
Authware SDK Type Definitions

Configuration, credentials and the records returned by the Authware API.
Records decode from the API's snake_case JSON with ``from_dict``; decoding
is strict and raises KeyError, TypeError or ValueError on a shape mismatch.
"""

import base64
import binascii
import enum
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, TypeVar, Union

T = TypeVar("T")

DEFAULT_BASE_URL = "https://api.authware.org/"

_FRACTION_REGEX = re.compile(r"\.(\d+)")


def is_valid_guid(value: Optional[str]) -> bool:
    """Check if value is a GUID (e.g. application IDs and license tokens)."""
    if not value:
        return False
    try:
        uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return False
    return True


def parse_guid(value: Any) -> uuid.UUID:
    """Decode a GUID string."""
    if not isinstance(value, str):
        raise TypeError(f"Expected a GUID string, got {type(value).__name__}")
    return uuid.UUID(value)


def parse_datetime(value: Any) -> datetime:
    """Decode an ISO-8601 timestamp as written by the Authware API (up to 7 fractional digits)."""
    if not isinstance(value, str):
        raise TypeError(f"Expected a timestamp string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION_REGEX.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text)


def _require_str(data: Dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"Expected '{key}' to be a string, got {type(value).__name__}")
    return value


def _optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"Expected '{key}' to be a string, got {type(value).__name__}")
    return value


def _require_dict(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _list_of(data: Any, parse: Callable[[Any], T]) -> List[T]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise TypeError(f"Expected a JSON array, got {type(data).__name__}")
    return [parse(item) for item in data]


# =============================================================================
# Configuration and Credentials
# =============================================================================

@dataclass(frozen=True)
class AuthwareConfig:
    """SDK configuration."""

    # ID of your Authware application (a GUID)
    app_id: str
    # API base URL (default: https://api.authware.org/)
    base_url: str = DEFAULT_BASE_URL
    # Version sent in X-Authware-App-Version (default: resolved from the host program)
    app_version: Optional[str] = None
    # Custom headers to include in requests
    headers: Optional[Dict[str, str]] = None
    # Enable debug logging (default: False)
    debug: bool = False


class AuthMode(enum.Enum):
    """How a credential is placed in the Authorization header."""

    BEARER = "bearer"
    API_KEY = "api_key"


@dataclass(frozen=True)
class Credential:
    """A session token or API key used to authorize one request."""

    token: str
    mode: AuthMode = AuthMode.BEARER

    @classmethod
    def bearer(cls, token: str) -> "Credential":
        return cls(token, AuthMode.BEARER)

    @classmethod
    def api_key(cls, key: str) -> "Credential":
        return cls(key, AuthMode.API_KEY)

    @classmethod
    def of(cls, token: Optional[str], is_api_key: bool = False) -> Optional["Credential"]:
        """Build a credential from an endpoint's (auth_token, is_api_key) pair."""
        if not token:
            return None
        return cls(token, AuthMode.API_KEY if is_api_key else AuthMode.BEARER)

    def authorization_header(self) -> str:
        """Value of the Authorization header; API keys are sent verbatim."""
        if self.mode is AuthMode.API_KEY:
            return self.token
        return f"Bearer {self.token}"

    def __repr__(self) -> str:
        return f"Credential(mode={self.mode.value!r})"


# =============================================================================
# Response Envelopes
# =============================================================================

class ResponseStatus(enum.IntEnum):
    """Status codes used in Authware response bodies."""

    SUCCESS = 0
    ERROR = 1
    UPDATE_REQUIRED = 7

    @classmethod
    def coerce(cls, value: Any) -> Union["ResponseStatus", int]:
        """Map a wire code to a known status, keeping unknown integer codes as-is."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Expected an integer status code, got {value!r}")
        try:
            return cls(value)
        except ValueError:
            return value


def _status_name(code: Union[ResponseStatus, int]) -> str:
    return code.name if isinstance(code, ResponseStatus) else str(code)


@dataclass
class BaseResponse:
    """Status code and message returned by operations without a payload."""

    code: Union[ResponseStatus, int]
    message: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BaseResponse":
        data = _require_dict(data)
        return cls(
            code=ResponseStatus.coerce(data["code"]),
            message=_optional_str(data, "message"),
        )

    def __str__(self) -> str:
        return f"{_status_name(self.code)}: {self.message or ''}".rstrip()


@dataclass
class ErrorResponse:
    """Error envelope: ``{code, message, trace, errors}``."""

    code: Union[ResponseStatus, int]
    message: Optional[str] = None
    # Only present on 500 responses
    trace: Optional[str] = None
    # Commonly data validation errors
    errors: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ErrorResponse":
        data = _require_dict(data)
        errors = data.get("errors")
        if errors is not None:
            errors = _list_of(errors, lambda e: e if isinstance(e, str) else str(e))
        return cls(
            code=ResponseStatus.coerce(data["code"]),
            message=_optional_str(data, "message"),
            trace=_optional_str(data, "trace"),
            errors=errors,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the wire shape."""
        return {
            "code": int(self.code),
            "message": self.message,
            "trace": self.trace,
            "errors": self.errors,
        }

    def __str__(self) -> str:
        text = f"{_status_name(self.code)}: {self.message or ''}".rstrip()
        if self.errors:
            text = f"{text} ({', '.join(self.errors)})"
        return text


@dataclass
class UpdatedDataResponse(Generic[T]):
    """A BaseResponse that also carries the new or modified entity."""

    code: Union[ResponseStatus, int]
    entity: T
    message: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], parse_entity: Callable[[Any], T]) -> "UpdatedDataResponse[T]":
        data = _require_dict(data)
        return cls(
            code=ResponseStatus.coerce(data["code"]),
            entity=parse_entity(data["new_data"]),
            message=_optional_str(data, "message"),
        )

    @classmethod
    def parser(cls, parse_entity: Callable[[Any], T]) -> Callable[[Any], "UpdatedDataResponse[T]"]:
        """Decoder for responses wrapping ``parse_entity`` records."""
        return lambda data: cls.from_dict(data, parse_entity)


# =============================================================================
# Records
# =============================================================================

@dataclass
class AuthResponse:
    """Session token returned by a successful login."""

    auth_token: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthResponse":
        return cls(auth_token=_require_str(_require_dict(data), "auth_token"))

    def __str__(self) -> str:
        return self.auth_token


@dataclass
class Api:
    """An API added to your application."""

    id: uuid.UUID
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Api":
        data = _require_dict(data)
        return cls(id=parse_guid(data["id"]), name=_require_str(data, "name"))


@dataclass
class Application:
    """Application information returned when initializing the SDK."""

    name: str
    id: uuid.UUID
    version: str
    date_created: datetime
    is_hwid_checking_enabled: bool
    user_count: int
    request_count: int
    apis: List[Api] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Application":
        data = _require_dict(data)
        return cls(
            name=_require_str(data, "name"),
            id=parse_guid(data["id"]),
            version=_require_str(data, "version"),
            date_created=parse_datetime(data["date_created"]),
            is_hwid_checking_enabled=bool(data.get("is_hwid_checking_enabled", False)),
            user_count=int(data.get("user_count", 0)),
            request_count=int(data.get("request_count", 0)),
            apis=_list_of(data.get("apis"), Api.from_dict),
        )

    def __str__(self) -> str:
        return f"{self.name} (v{self.version})"


@dataclass
class Variable:
    """A key/value variable from an application or a role."""

    key: str
    value: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Variable":
        data = _require_dict(data)
        return cls(key=_require_str(data, "key"), value=_require_str(data, "value"))

    def __iter__(self) -> Iterator[str]:
        # Allows ``key, value = variable``
        yield self.key
        yield self.value

    def __str__(self) -> str:
        return f"{self.key}: {self.value}"


@dataclass
class UserVariable(Variable):
    """A variable possessed by a user."""

    can_user_edit: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserVariable":
        data = _require_dict(data)
        return cls(
            key=_require_str(data, "key"),
            value=_require_str(data, "value"),
            can_user_edit=bool(data.get("can_user_edit", False)),
        )


@dataclass
class Session:
    """An active session of the user."""

    id: uuid.UUID
    date_created: datetime

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        data = _require_dict(data)
        return cls(id=parse_guid(data["id"]), date_created=parse_datetime(data["date_created"]))

    def __str__(self) -> str:
        return str(self.id)


@dataclass
class Role:
    """A role the user possesses."""

    id: uuid.UUID
    name: str
    variables: List[Variable] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Role":
        data = _require_dict(data)
        return cls(
            id=parse_guid(data["id"]),
            name=_require_str(data, "name"),
            variables=_list_of(data.get("variables"), Variable.from_dict),
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


@dataclass
class Profile:
    """Profile of the authenticated user."""

    username: str
    id: uuid.UUID
    email: str
    date_created: datetime
    expiration: datetime
    sessions: List[Session] = field(default_factory=list)
    role: Optional[Role] = None
    # Previous API requests, kept as returned by the API
    requests: List[Dict[str, Any]] = field(default_factory=list)
    user_variables: List[UserVariable] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        data = _require_dict(data)
        role_data = data.get("role")
        return cls(
            username=_require_str(data, "username"),
            id=parse_guid(data["id"]),
            email=_require_str(data, "email"),
            date_created=parse_datetime(data["date_created"]),
            expiration=parse_datetime(data["expiration"]),
            sessions=_list_of(data.get("sessions"), Session.from_dict),
            role=Role.from_dict(role_data) if role_data else None,
            requests=_list_of(data.get("requests"), _require_dict),
            user_variables=_list_of(data.get("user_variables"), UserVariable.from_dict),
        )

    def __str__(self) -> str:
        return f"{self.username} ({self.id})"


@dataclass
class ApiResponse:
    """Response from an executed API."""

    request_id: uuid.UUID
    success: bool
    message: Optional[str] = None
    # Base64 encoded response from your API
    encoded_response: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiResponse":
        data = _require_dict(data)
        return cls(
            request_id=parse_guid(data["request_id"]),
            success=bool(data["is_success"]),
            message=_optional_str(data, "message"),
            encoded_response=_optional_str(data, "response"),
        )

    @property
    def decoded_response(self) -> Optional[str]:
        """Plaintext response, or None if it could not be decoded."""
        if self.encoded_response is None:
            return None
        try:
            return base64.b64decode(self.encoded_response, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None

    @property
    def can_return_response(self) -> bool:
        """False when the API is configured to answer with a bare status code."""
        decoded = self.decoded_response
        if decoded is None:
            return False
        try:
            int(decoded)
        except ValueError:
            return True
        return False

    def __str__(self) -> str:
        return self.decoded_response or ""
