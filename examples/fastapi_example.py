"""
Authware Python SDK - FastAPI Integration Example

This example demonstrates how to protect FastAPI routes with Authware
sessions and API keys.

Run with: uvicorn fastapi_example:app --reload
"""

from typing import Optional

# Note: Requires fastapi to be installed
# pip install authware[fastapi]

from fastapi import Depends, FastAPI

from authware import AuthwarePrincipal
from authware.integrations.fastapi import (
    AuthwareFastAPI,
    get_current_principal,
    get_optional_principal,
    principal_to_dict,
    require_role,
)

app = FastAPI(
    title="Authware FastAPI Example",
    description="Example FastAPI app with Authware authentication",
)

authware = AuthwareFastAPI(
    app,
    app_id="00000000-0000-0000-0000-000000000000",
    app_version="1.0.0",
    debug=True,
)


@app.get("/")
async def root(principal: Optional[AuthwarePrincipal] = Depends(get_optional_principal)):
    """Public endpoint, greets signed-in users by name."""
    if principal is None:
        return {"message": "Welcome to the Authware FastAPI Example"}
    return {"message": f"Welcome back, {principal.identity_name}"}


@app.get("/me")
async def me(principal: AuthwarePrincipal = Depends(get_current_principal)):
    """Send 'Authorization: Bearer <session token>' or 'X-Api-Key: <key>'."""
    return principal_to_dict(principal)


@app.get("/admin")
async def admin(principal: AuthwarePrincipal = Depends(require_role("Admin"))):
    return {"message": f"Hello admin {principal.identity_name}"}


@app.get("/variables")
async def variables(principal: AuthwarePrincipal = Depends(get_current_principal)):
    """Public application variables."""
    items = await authware.client.grab_application_variables()
    return {variable.key: variable.value for variable in items}
