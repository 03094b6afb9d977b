"""
Authware Python SDK - Basic Usage Example

This example demonstrates the basic usage of the Authware Python SDK.
"""

import asyncio
import logging

from authware import (
    AuthwareAsyncClient,
    AuthwareClient,
    AuthwareConfig,
    Err,
    capture,
)
from authware.errors import (
    ApiError,
    AuthwareError,
    RateLimitError,
    UpdateRequiredError,
)

__version__ = "1.0.0"

APP_ID = "00000000-0000-0000-0000-000000000000"


def sync_example():
    """Synchronous client example."""
    print("=== Sync Client Example ===\n")

    client = AuthwareClient(AuthwareConfig(app_id=APP_ID, debug=True))

    try:
        app = client.initialize_application()
        print(f"Application: {app}")

        auth, profile = client.login("user", "SecurePassword123!")
        print(f"Logged in as: {profile.username} ({profile.email})")

        for variable in client.grab_application_variables(auth.auth_token):
            print(f"  {variable}")
    except UpdateRequiredError as e:
        print(f"Update required, download it from {e.update_url}")
    except RateLimitError as e:
        print(f"Rate limited, retry in {e.retry_after.total_seconds():.0f}s")
    except ApiError as e:
        print(f"Authware said no: {e}")
    except AuthwareError as e:
        print(f"Error (expected without a real application): {type(e).__name__}")


async def async_example():
    """Asynchronous client example."""
    print("\n=== Async Client Example ===\n")

    client = AuthwareAsyncClient(AuthwareConfig(app_id=APP_ID))

    try:
        auth, profile = await client.login("user", "SecurePassword123!")
        response = await client.execute_api(auth.auth_token, "api-id", {"city": "Oslo"})
        if response.can_return_response:
            print(f"API returned: {response.decoded_response}")
    except AuthwareError as e:
        print(f"Error (expected without a real application): {type(e).__name__}")


def result_example():
    """Values instead of exceptions."""
    print("\n=== Result Example ===\n")

    client = AuthwareClient(AuthwareConfig(app_id=APP_ID))

    result = capture(client.redeem_token, "user", "11111111-1111-1111-1111-111111111111")
    if isinstance(result, Err):
        print(f"Redeem failed: {result.message} {result.errors}")
    else:
        print(f"Redeemed: {result.value}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    sync_example()
    asyncio.run(async_example())
    result_example()
