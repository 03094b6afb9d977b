"""
Authware SDK Requester

Every API call passes through ``Requester.request`` (or its async twin):
build a fresh client, send one request, then either decode the body into
the requested type or classify the failure into exactly one SDK error.
"""

import json
import logging
import time
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from functools import partial
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

import httpx

from .errors import (
    ApiError,
    ErrorResponseParseError,
    NetworkError,
    RateLimitError,
    UnexpectedResponseError,
    UpdateRequiredError,
)
from .transport import REQUEST_TIME_HEADER, UPDATER_URL_HEADER, build_async_client, build_client
from .types import AuthwareConfig, Credential, ErrorResponse, ResponseStatus

logger = logging.getLogger("authware")

T = TypeVar("T")

ClientFactory = Callable[[Optional[Credential]], httpx.Client]
AsyncClientFactory = Callable[[Optional[Credential]], httpx.AsyncClient]
Clock = Callable[[], float]

# Exceptions raised by json.loads and the from_dict decoders on a shape mismatch
# (OverflowError: Infinity or huge numbers where an int is expected)
DECODE_ERRORS = (ValueError, KeyError, TypeError, AttributeError, OverflowError)


def build_request_headers(clock: Clock, has_body: bool) -> Dict[str, str]:
    """Per-request headers: the send time in epoch milliseconds and the body type."""
    headers = {REQUEST_TIME_HEADER: str(int(clock() * 1000))}
    if has_body:
        headers["Content-Type"] = "application/json"
    return headers


def encode_payload(payload: Optional[Mapping[str, Any]]) -> Optional[bytes]:
    """Serialize a request payload to UTF-8 JSON."""
    if payload is None:
        return None
    return json.dumps(payload).encode("utf-8")


def parse_retry_after(headers: httpx.Headers, status_code: int = 429, raw_body: str = "") -> timedelta:
    """Read the mandatory Retry-After header (delta-seconds or HTTP date)."""
    value = headers.get("retry-after")
    if value is None or not value.strip():
        raise ErrorResponseParseError(raw_body, status_code, "the Retry-After header is missing")

    value = value.strip()
    if value.isdigit():
        try:
            return timedelta(seconds=int(value))
        except OverflowError:
            raise ErrorResponseParseError(raw_body, status_code, f"Retry-After is out of range: {value!r}")

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        raise ErrorResponseParseError(raw_body, status_code, f"invalid Retry-After header: {value!r}")
    if retry_at is None:
        raise ErrorResponseParseError(raw_body, status_code, f"invalid Retry-After header: {value!r}")
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    return max(retry_at - datetime.now(timezone.utc), timedelta(0))


def decode_error_response(content: str) -> ErrorResponse:
    """Decode an error envelope; raises on a malformed or empty body."""
    return ErrorResponse.from_dict(json.loads(content))


def handle_response(response: httpx.Response, parse: Callable[[Any], T]) -> T:
    """Decode a successful response or raise the matching SDK error."""
    content = response.text
    status_code = response.status_code

    if response.is_success:
        try:
            return parse(json.loads(content))
        except DECODE_ERRORS as e:
            raise UnexpectedResponseError(content, status_code) from e

    if status_code == 429:
        retry_after = parse_retry_after(response.headers, status_code, content)
        # The limiter in front of the API answers with an HTML page
        if "<" in content:
            raise RateLimitError(None, retry_after)
        try:
            error_response: Optional[ErrorResponse] = decode_error_response(content)
        except DECODE_ERRORS:
            error_response = None
        raise RateLimitError(error_response, retry_after)

    try:
        error_response = decode_error_response(content)
    except DECODE_ERRORS as e:
        raise ErrorResponseParseError(content, status_code, str(e)) from e

    if error_response.code == ResponseStatus.UPDATE_REQUIRED:
        raise UpdateRequiredError(response.headers.get(UPDATER_URL_HEADER), error_response, status_code)

    raise ApiError(error_response, status_code)


class Requester:
    """
    Executes Authware API requests (sync).

    Args:
        config: SDK configuration
        client_factory: Builds the client for one call, given its credential
            (default: ``transport.build_client``)
        clock: Returns the current time in epoch seconds (default: ``time.time``)
    """

    def __init__(
        self,
        config: AuthwareConfig,
        client_factory: Optional[ClientFactory] = None,
        clock: Clock = time.time,
    ) -> None:
        self._client_factory = client_factory or partial(build_client, config)
        self._clock = clock

    def request(
        self,
        method: str,
        path: str,
        parse: Callable[[Any], T],
        payload: Optional[Mapping[str, Any]] = None,
        credential: Optional[Credential] = None,
    ) -> T:
        """
        Make a request and decode the response with ``parse``.

        Raises:
            UnexpectedResponseError: Success status with an undecodable body
            RateLimitError: HTTP 429
            UpdateRequiredError: The API demands an application update
            ApiError: Any other error reported by the API
            ErrorResponseParseError: The error body could not be decoded
            NetworkError: The request could not be sent
        """
        content = encode_payload(payload)
        with self._client_factory(credential) as client:
            request = client.build_request(
                method,
                path,
                headers=build_request_headers(self._clock, content is not None),
                content=content,
            )
            try:
                response = client.send(request)
            except httpx.TimeoutException as e:
                raise NetworkError("Request timeout", {"path": path}) from e
            except httpx.RequestError as e:
                raise NetworkError(str(e), {"path": path}) from e

        logger.debug("%s %s -> %d", method, path, response.status_code)
        return handle_response(response, parse)


class AsyncRequester:
    """
    Executes Authware API requests (async).

    Args:
        config: SDK configuration
        client_factory: Builds the client for one call, given its credential
            (default: ``transport.build_async_client``)
        clock: Returns the current time in epoch seconds (default: ``time.time``)
    """

    def __init__(
        self,
        config: AuthwareConfig,
        client_factory: Optional[AsyncClientFactory] = None,
        clock: Clock = time.time,
    ) -> None:
        self._client_factory = client_factory or partial(build_async_client, config)
        self._clock = clock

    async def request(
        self,
        method: str,
        path: str,
        parse: Callable[[Any], T],
        payload: Optional[Mapping[str, Any]] = None,
        credential: Optional[Credential] = None,
    ) -> T:
        """Make a request and decode the response with ``parse`` (see ``Requester.request``)."""
        content = encode_payload(payload)
        async with self._client_factory(credential) as client:
            request = client.build_request(
                method,
                path,
                headers=build_request_headers(self._clock, content is not None),
                content=content,
            )
            try:
                response = await client.send(request)
            except httpx.TimeoutException as e:
                raise NetworkError("Request timeout", {"path": path}) from e
            except httpx.RequestError as e:
                raise NetworkError(str(e), {"path": path}) from e

        logger.debug("%s %s -> %d", method, path, response.status_code)
        return handle_response(response, parse)
