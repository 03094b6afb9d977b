"""
Authware SDK Transport

Builds the HTTP client used for exactly one API call. Every client gets a
fresh TLS context that only accepts certificates issued by the certificate
authorities fronting api.authware.org, ignores proxy environment variables
and carries the identifying headers.
"""

import ssl
import sys
from typing import Any, Dict, Optional, Tuple

import certifi
import httpx

from ._version import __version__
from .types import DEFAULT_BASE_URL, AuthwareConfig, Credential

# The issuer name must contain one of these to be trusted
TRUSTED_ISSUERS: Tuple[str, ...] = (
    "CN=Cloudflare Inc ECC CA-3, O=Cloudflare, Inc., C=US",
    ", O=Let's Encrypt, C=US",
)

APP_VERSION_HEADER = "X-Authware-App-Version"
REQUEST_TIME_HEADER = "X-Request-DateTime"
UPDATER_URL_HEADER = "X-Updater-URL"
USER_AGENT = f"Authware-Python/{__version__}"

__all__ = [
    "APP_VERSION_HEADER",
    "DEFAULT_BASE_URL",
    "REQUEST_TIME_HEADER",
    "TRUSTED_ISSUERS",
    "UPDATER_URL_HEADER",
    "USER_AGENT",
    "build_async_client",
    "build_client",
    "build_headers",
    "create_ssl_context",
    "format_issuer",
    "resolve_app_version",
    "verify_issuer",
]

_ATTRIBUTE_NAMES = {
    "commonName": "CN",
    "organizationName": "O",
    "organizationalUnitName": "OU",
    "countryName": "C",
    "localityName": "L",
    "stateOrProvinceName": "S",
    "emailAddress": "E",
    "domainComponent": "DC",
}


def format_issuer(cert: Dict[str, Any]) -> str:
    """
    Render the issuer of a decoded peer certificate as a distinguished name.

    ``ssl`` lists relative names from the root down (C, O, CN); the name is
    rendered most specific first, e.g. ``CN=R3, O=Let's Encrypt, C=US``.
    """
    parts = []
    for rdn in reversed(cert.get("issuer", ())):
        for key, value in rdn:
            parts.append(f"{_ATTRIBUTE_NAMES.get(key, key)}={value}")
    return ", ".join(parts)


def verify_issuer(cert: Optional[Dict[str, Any]]) -> None:
    """Raise SSLCertVerificationError unless the certificate comes from a trusted issuer."""
    issuer = format_issuer(cert or {})
    if not any(trusted in issuer for trusted in TRUSTED_ISSUERS):
        raise ssl.SSLCertVerificationError(
            1, f"Certificate issuer is not trusted by the Authware SDK: {issuer or '<none>'}"
        )


class _PinnedSSLSocket(ssl.SSLSocket):
    """Socket used by the sync client; checks the issuer once the handshake completes."""

    def do_handshake(self, *args: Any, **kwargs: Any) -> None:
        super().do_handshake(*args, **kwargs)
        verify_issuer(self.getpeercert())


class _PinnedSSLObject(ssl.SSLObject):
    """TLS object used by the async client; checks the issuer once the handshake completes."""

    def do_handshake(self) -> None:
        super().do_handshake()
        verify_issuer(self.getpeercert())


def create_ssl_context() -> ssl.SSLContext:
    """Create a verifying TLS context that also pins the certificate issuer."""
    context = ssl.create_default_context(cafile=certifi.where())
    context.sslsocket_class = _PinnedSSLSocket
    context.sslobject_class = _PinnedSSLObject
    return context


def resolve_app_version(config: AuthwareConfig) -> str:
    """Version of the host program, sent so the API can enforce updates."""
    if config.app_version:
        return config.app_version
    main = sys.modules.get("__main__")
    version = getattr(main, "__version__", None)
    return str(version) if version else "0.0.0"


def build_headers(config: AuthwareConfig, credential: Optional[Credential] = None) -> Dict[str, str]:
    """Build the default headers for one client."""
    headers: Dict[str, str] = {
        **(config.headers or {}),
        APP_VERSION_HEADER: resolve_app_version(config),
        "User-Agent": USER_AGENT,
    }

    if credential is not None:
        for name in [name for name in headers if name.lower() == "authorization"]:
            del headers[name]
        headers["Authorization"] = credential.authorization_header()

    return headers


def build_client(config: AuthwareConfig, credential: Optional[Credential] = None) -> httpx.Client:
    """Create a synchronous client for a single call."""
    return httpx.Client(
        base_url=config.base_url,
        headers=build_headers(config, credential),
        verify=create_ssl_context(),
        trust_env=False,
    )


def build_async_client(config: AuthwareConfig, credential: Optional[Credential] = None) -> httpx.AsyncClient:
    """Create an asynchronous client for a single call."""
    return httpx.AsyncClient(
        base_url=config.base_url,
        headers=build_headers(config, credential),
        verify=create_ssl_context(),
        trust_env=False,
    )
