"""
Authware Framework Integrations

Provides dependencies and utilities for Python web frameworks. Each
integration is imported from its own module so that the framework stays
an optional dependency:

    from authware.integrations.fastapi import AuthwareFastAPI, get_current_principal
"""
