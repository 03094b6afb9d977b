"""
Tests for Authware Python SDK Client

Tests both sync and async clients with mocked HTTP responses.
"""

import json
from typing import Any, Dict

import httpx
import pytest
import respx

from authware import (
    ApiResponse,
    Application,
    AuthwareAsyncClient,
    AuthwareClient,
    AuthwareConfig,
    Profile,
    ResponseStatus,
    UserVariable,
    Variable,
    create_async_authware_client,
    create_authware_client,
)
from authware.errors import (
    ApiError,
    ConfigurationError,
    RateLimitError,
    UnexpectedResponseError,
    UpdateRequiredError,
    ValidationError,
)


APP_ID = "11111111-1111-1111-1111-111111111111"
LICENSE = "33333333-3333-3333-3333-333333333333"
BASE = "https://api.authware.org"


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def valid_config() -> AuthwareConfig:
    """Valid configuration for testing."""
    return AuthwareConfig(app_id=APP_ID, app_version="1.2.3", debug=True)


@pytest.fixture
def client(valid_config: AuthwareConfig) -> AuthwareClient:
    return AuthwareClient(valid_config)


@pytest.fixture
def async_client(valid_config: AuthwareConfig) -> AuthwareAsyncClient:
    return AuthwareAsyncClient(valid_config)


@pytest.fixture
def mock_application_response() -> Dict[str, Any]:
    """Mock application response from API."""
    return {
        "name": "Test App",
        "id": APP_ID,
        "version": "1.2.3.0",
        "date_created": "2022-03-01T12:30:00Z",
        "is_hwid_checking_enabled": False,
        "user_count": 3,
        "request_count": 10,
        "apis": [],
    }


@pytest.fixture
def mock_profile_response() -> Dict[str, Any]:
    """Mock profile response from API."""
    return {
        "username": "testuser",
        "id": "44444444-4444-4444-4444-444444444444",
        "email": "test@example.com",
        "date_created": "2022-03-01T12:30:00.1234567Z",
        "expiration": "2030-01-01T00:00:00Z",
        "sessions": [
            {"id": "55555555-5555-5555-5555-555555555555", "date_created": "2022-03-02T08:00:00Z"}
        ],
        "role": {
            "id": "66666666-6666-6666-6666-666666666666",
            "name": "Admin",
            "variables": [{"key": "tier", "value": "gold"}],
        },
        "requests": [],
        "user_variables": [{"key": "theme", "value": "dark", "can_user_edit": True}],
    }


# =============================================================================
# Configuration Tests
# =============================================================================

class TestConfiguration:
    """Tests for client configuration."""

    def test_valid_config(self, valid_config: AuthwareConfig):
        """Test client creation with valid config."""
        client = AuthwareClient(valid_config)
        assert client.application_information is None

    def test_missing_app_id(self):
        with pytest.raises(ConfigurationError) as exc_info:
            AuthwareClient(AuthwareConfig(app_id=""))

        assert "app_id" in str(exc_info.value)

    def test_invalid_app_id(self):
        with pytest.raises(ConfigurationError):
            AuthwareClient(AuthwareConfig(app_id="not-a-guid"))

    def test_missing_base_url(self):
        with pytest.raises(ConfigurationError):
            AuthwareAsyncClient(AuthwareConfig(app_id=APP_ID, base_url=""))

    def test_factory_functions(self, valid_config: AuthwareConfig):
        assert isinstance(create_authware_client(valid_config), AuthwareClient)
        assert isinstance(create_async_authware_client(valid_config), AuthwareAsyncClient)


# =============================================================================
# Application Tests
# =============================================================================

class TestApplication:
    """Tests for application methods."""

    @respx.mock
    def test_initialize_application(self, client: AuthwareClient, mock_application_response: Dict):
        route = respx.post(f"{BASE}/app").mock(
            return_value=httpx.Response(200, json=mock_application_response)
        )

        app = client.initialize_application()

        assert isinstance(app, Application)
        assert str(app.id) == APP_ID
        assert client.application_information is app
        assert json.loads(route.calls.last.request.content) == {"app_id": APP_ID}
        assert route.calls.last.request.headers["X-Authware-App-Version"] == "1.2.3"

    @respx.mock
    def test_initialize_application_is_cached(self, client: AuthwareClient, mock_application_response: Dict):
        route = respx.post(f"{BASE}/app").mock(
            return_value=httpx.Response(200, json=mock_application_response)
        )

        first = client.initialize_application()
        second = client.initialize_application()

        assert first is second
        assert route.call_count == 1

    @respx.mock
    def test_variables_without_token(self, client: AuthwareClient):
        """Without a token the public variables are read with GET."""
        route = respx.get(f"{BASE}/app/variables").mock(
            return_value=httpx.Response(200, json=[{"key": "motd", "value": "hello"}])
        )

        variables = client.grab_application_variables()

        assert variables == [Variable("motd", "hello")]
        assert "Authorization" not in route.calls.last.request.headers

    @respx.mock
    def test_variables_with_token(self, client: AuthwareClient):
        """With a token the variables are read with POST and the app ID."""
        route = respx.post(f"{BASE}/app/variables").mock(
            return_value=httpx.Response(200, json=[{"key": "secret", "value": "42"}])
        )

        variables = client.grab_application_variables("session-token")

        key, value = variables[0]
        assert (key, value) == ("secret", "42")
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer session-token"
        assert json.loads(request.content) == {"app_id": APP_ID}

    @respx.mock
    def test_variables_unexpected_shape(self, client: AuthwareClient):
        respx.get(f"{BASE}/app/variables").mock(return_value=httpx.Response(200, json={"key": "x"}))

        with pytest.raises(UnexpectedResponseError):
            client.grab_application_variables()

    @respx.mock
    def test_variables_empty_token(self, client: AuthwareClient):
        """An empty token is rejected rather than read as no token."""
        with pytest.raises(ValidationError):
            client.grab_application_variables("")

        assert respx.calls.call_count == 0


# =============================================================================
# Authentication Tests
# =============================================================================

class TestAuthentication:
    """Tests for authentication methods."""

    @respx.mock
    def test_login_success(self, client: AuthwareClient, mock_profile_response: Dict):
        """Login fetches the profile with the new session token."""
        auth_route = respx.post(f"{BASE}/user/auth").mock(
            return_value=httpx.Response(200, json={"auth_token": "session-token"})
        )
        profile_route = respx.get(f"{BASE}/user/profile").mock(
            return_value=httpx.Response(200, json=mock_profile_response)
        )

        auth, profile = client.login("testuser", "password123")

        assert auth.auth_token == "session-token"
        assert isinstance(profile, Profile)
        assert profile.role.name == "Admin"
        assert profile.user_variables[0].key == "theme"
        assert json.loads(auth_route.calls.last.request.content) == {
            "app_id": APP_ID,
            "username": "testuser",
            "password": "password123",
        }
        assert profile_route.calls.last.request.headers["Authorization"] == "Bearer session-token"

    @respx.mock
    def test_login_invalid_credentials(self, client: AuthwareClient):
        respx.post(f"{BASE}/user/auth").mock(
            return_value=httpx.Response(401, json={"code": 1, "message": "Invalid credentials"})
        )

        with pytest.raises(ApiError) as exc_info:
            client.login("testuser", "wrongpassword")

        assert exc_info.value.message == "Invalid credentials"

    @respx.mock
    def test_login_rate_limited(self, client: AuthwareClient):
        respx.post(f"{BASE}/user/auth").mock(
            return_value=httpx.Response(429, text="<html>429</html>", headers={"Retry-After": "60"})
        )

        with pytest.raises(RateLimitError) as exc_info:
            client.login("testuser", "password123")

        assert exc_info.value.retry_after.total_seconds() == 60

    @respx.mock
    def test_login_update_required(self, client: AuthwareClient):
        respx.post(f"{BASE}/user/auth").mock(
            return_value=httpx.Response(
                403,
                json={"code": 7, "message": "Please update"},
                headers={"X-Updater-URL": "https://example.com/update"},
            )
        )

        with pytest.raises(UpdateRequiredError) as exc_info:
            client.login("testuser", "password123")

        assert exc_info.value.update_url == "https://example.com/update"

    @respx.mock
    def test_register(self, client: AuthwareClient):
        route = respx.post(f"{BASE}/user/register").mock(
            return_value=httpx.Response(200, json={"code": 0, "message": "Registered"})
        )

        result = client.register("newuser", "password123", "new@example.com", LICENSE)

        assert result.code == ResponseStatus.SUCCESS
        assert json.loads(route.calls.last.request.content) == {
            "app_id": APP_ID,
            "username": "newuser",
            "password": "password123",
            "email_address": "new@example.com",
            "token": LICENSE,
        }

    @respx.mock
    def test_redeem_token(self, client: AuthwareClient):
        route = respx.post(f"{BASE}/user/renew").mock(
            return_value=httpx.Response(200, json={"code": 0, "message": "Renewed"})
        )

        result = client.redeem_token("testuser", LICENSE)

        assert result.message == "Renewed"
        assert json.loads(route.calls.last.request.content)["token"] == LICENSE

    @respx.mock
    @pytest.mark.parametrize(
        "args",
        [
            ("", "password", "a@example.com", LICENSE),
            ("user", None, "a@example.com", LICENSE),
            ("user", "password", "", LICENSE),
            ("user", "password", "a@example.com", ""),
            ("user", "password", "a@example.com", "not-a-guid"),
        ],
    )
    def test_register_validation(self, client: AuthwareClient, args):
        """Invalid arguments are rejected before any request is sent."""
        with pytest.raises(ValidationError):
            client.register(*args)

        assert respx.calls.call_count == 0

    @respx.mock
    def test_login_validation(self, client: AuthwareClient):
        with pytest.raises(ValidationError) as exc_info:
            client.login("testuser", "")

        assert exc_info.value.message == "password can not be null or empty"
        assert respx.calls.call_count == 0

    @respx.mock
    def test_redeem_token_requires_guid(self, client: AuthwareClient):
        with pytest.raises(ValidationError):
            client.redeem_token("testuser", "abc")

        assert respx.calls.call_count == 0


# =============================================================================
# User Tests
# =============================================================================

class TestUser:
    """Tests for user methods."""

    @respx.mock
    def test_get_user_profile_with_api_key(self, client: AuthwareClient, mock_profile_response: Dict):
        route = respx.get(f"{BASE}/user/profile").mock(
            return_value=httpx.Response(200, json=mock_profile_response)
        )

        profile = client.get_user_profile("api-key", is_api_key=True)

        assert profile.username == "testuser"
        assert route.calls.last.request.headers["Authorization"] == "api-key"

    @respx.mock
    def test_change_email(self, client: AuthwareClient):
        route = respx.put(f"{BASE}/user/change-email").mock(
            return_value=httpx.Response(200, json={"code": 0, "message": "Email changed"})
        )

        client.change_email("session-token", "password123", "new@example.com")

        assert json.loads(route.calls.last.request.content) == {
            "password": "password123",
            "new_email_address": "new@example.com",
        }

    @respx.mock
    def test_change_password(self, client: AuthwareClient):
        route = respx.put(f"{BASE}/user/change-password").mock(
            return_value=httpx.Response(200, json={"code": 0})
        )

        client.change_password("session-token", "old-pass", "new-pass")

        assert json.loads(route.calls.last.request.content) == {
            "old_password": "old-pass",
            "password": "new-pass",
            "repeat_password": "new-pass",
        }

    @respx.mock
    def test_change_password_validation_error(self, client: AuthwareClient):
        respx.put(f"{BASE}/user/change-password").mock(
            return_value=httpx.Response(
                400,
                json={"code": 1, "message": "Validation failed", "errors": ["Password is too short"]},
            )
        )

        with pytest.raises(ApiError) as exc_info:
            client.change_password("session-token", "old-pass", "x")

        assert exc_info.value.errors == ["Password is too short"]

    @respx.mock
    def test_regenerate_api_key(self, client: AuthwareClient):
        route = respx.put(f"{BASE}/user/regenerate-key").mock(
            return_value=httpx.Response(200, json={"code": 0})
        )

        client.regenerate_api_key("session-token", "password123")

        assert json.loads(route.calls.last.request.content) == {"password": "password123"}

    @respx.mock
    def test_missing_auth_token(self, client: AuthwareClient):
        with pytest.raises(ValidationError):
            client.get_user_profile("")

        assert respx.calls.call_count == 0


# =============================================================================
# User Variable Tests
# =============================================================================

class TestUserVariables:
    """Tests for user variable methods."""

    @respx.mock
    def test_create_user_variable(self, client: AuthwareClient):
        route = respx.post(f"{BASE}/user/variables").mock(
            return_value=httpx.Response(
                200,
                json={
                    "code": 0,
                    "message": "Created",
                    "new_data": {"key": "theme", "value": "dark", "can_user_edit": False},
                },
            )
        )

        result = client.create_user_variable("session-token", "theme", "dark", can_edit=False)

        assert result.code == ResponseStatus.SUCCESS
        assert result.entity == UserVariable("theme", "dark", can_user_edit=False)
        assert json.loads(route.calls.last.request.content) == {
            "key": "theme",
            "value": "dark",
            "can_user_edit": False,
        }

    @respx.mock
    def test_update_user_variable(self, client: AuthwareClient):
        route = respx.put(f"{BASE}/user/variables").mock(
            return_value=httpx.Response(
                200,
                json={"code": 0, "new_data": {"key": "theme", "value": "light", "can_user_edit": True}},
            )
        )

        result = client.update_user_variable("session-token", "theme", "light")

        assert result.entity.value == "light"
        assert json.loads(route.calls.last.request.content) == {"key": "theme", "value": "light"}

    @respx.mock
    def test_delete_user_variable(self, client: AuthwareClient):
        """DELETE carries the key in its JSON body."""
        route = respx.delete(f"{BASE}/user/variables").mock(
            return_value=httpx.Response(200, json={"code": 0, "message": "Deleted"})
        )

        result = client.delete_user_variable("api-key", "theme", is_api_key=True)

        assert result.message == "Deleted"
        request = route.calls.last.request
        assert json.loads(request.content) == {"key": "theme"}
        assert request.headers["Authorization"] == "api-key"

    @respx.mock
    def test_create_user_variable_requires_value(self, client: AuthwareClient):
        with pytest.raises(ValidationError):
            client.create_user_variable("session-token", "theme", "")

        assert respx.calls.call_count == 0


# =============================================================================
# API Execution Tests
# =============================================================================

class TestExecuteApi:
    """Tests for API execution."""

    @respx.mock
    def test_execute_api(self, client: AuthwareClient):
        route = respx.post(f"{BASE}/api/execute").mock(
            return_value=httpx.Response(
                200,
                json={
                    "request_id": "77777777-7777-7777-7777-777777777777",
                    "is_success": True,
                    "message": "OK",
                    "response": "eyJ0ZW1wIjogMjF9",
                },
            )
        )

        result = client.execute_api("session-token", "api-id", {"city": "Oslo"})

        assert isinstance(result, ApiResponse)
        assert result.success is True
        assert result.decoded_response == '{"temp": 21}'
        assert json.loads(route.calls.last.request.content) == {
            "api_id": "api-id",
            "parameters": {"city": "Oslo"},
        }

    @respx.mock
    def test_execute_api_without_parameters(self, client: AuthwareClient):
        route = respx.post(f"{BASE}/api/execute").mock(
            return_value=httpx.Response(
                200,
                json={"request_id": "77777777-7777-7777-7777-777777777777", "is_success": False},
            )
        )

        result = client.execute_api("session-token", "api-id")

        assert result.success is False
        assert json.loads(route.calls.last.request.content)["parameters"] == {}


# =============================================================================
# Async Client Tests
# =============================================================================

class TestAsyncClient:
    """Tests for async client."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_async_initialize_application(
        self, async_client: AuthwareAsyncClient, mock_application_response: Dict
    ):
        respx.post(f"{BASE}/app").mock(
            return_value=httpx.Response(200, json=mock_application_response)
        )

        app = await async_client.initialize_application()

        assert app.name == "Test App"
        assert async_client.application_information is app

    @pytest.mark.asyncio
    @respx.mock
    async def test_async_login(self, async_client: AuthwareAsyncClient, mock_profile_response: Dict):
        respx.post(f"{BASE}/user/auth").mock(
            return_value=httpx.Response(200, json={"auth_token": "session-token"})
        )
        profile_route = respx.get(f"{BASE}/user/profile").mock(
            return_value=httpx.Response(200, json=mock_profile_response)
        )

        auth, profile = await async_client.login("testuser", "password123")

        assert auth.auth_token == "session-token"
        assert profile.email == "test@example.com"
        assert profile_route.calls.last.request.headers["Authorization"] == "Bearer session-token"

    @pytest.mark.asyncio
    @respx.mock
    async def test_async_api_error(self, async_client: AuthwareAsyncClient):
        respx.get(f"{BASE}/user/profile").mock(
            return_value=httpx.Response(401, json={"code": 1, "message": "Session expired"})
        )

        with pytest.raises(ApiError) as exc_info:
            await async_client.get_user_profile("session-token")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    @respx.mock
    async def test_async_delete_user_variable(self, async_client: AuthwareAsyncClient):
        route = respx.delete(f"{BASE}/user/variables").mock(
            return_value=httpx.Response(200, json={"code": 0})
        )

        await async_client.delete_user_variable("session-token", "theme")

        assert json.loads(route.calls.last.request.content) == {"key": "theme"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_async_validation(self, async_client: AuthwareAsyncClient):
        with pytest.raises(ValidationError):
            await async_client.register("user", "password", "a@example.com", "bad")

        assert respx.calls.call_count == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_async_variables_empty_token(self, async_client: AuthwareAsyncClient):
        with pytest.raises(ValidationError):
            await async_client.grab_application_variables("", is_api_key=True)

        assert respx.calls.call_count == 0
