"""
Request execution and response classification.

RequestExecutor signs a frozen request and hands it to the transport,
synchronously or from a worker thread. It never interprets HTTP status
codes; the shared helpers below do that uniformly for every service:

- is_success(): 200-299 inclusive
- assert_success(): raise ServerError (or a subclass) outside that range
- decode_json(): raise MalformedResponse on an invalid body
- map_response(): assert success, then apply a pure result mapper

Usage:
    executor = RequestExecutor(key, sdk_identifier="Python", sdk_version="1.0.0")
    response = executor.execute(request)
    result = map_response(response, AmlResult.from_response, AmlError)

    # Non-blocking
    response = await executor.execute_async(request)
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional, Type, TypeVar

from yoti_sdk._core.transport import DEFAULT_TIMEOUT, RequestsTransport, Response, Transport
from yoti_sdk.auth import RequestAuthenticator, SignedRequest
from yoti_sdk.errors import MalformedResponse, ServerError
from yoti_sdk.keys import KeyMaterial
from yoti_sdk.request import AuthenticatedRequest
from yoti_sdk.types import CONNECT_SCHEME, AuthScheme

if TYPE_CHECKING:
    from yoti_sdk.config import ClientConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Status Classification
# =============================================================================


def is_success(status_code: int) -> bool:
    """True for HTTP 200-299 inclusive."""
    return 200 <= status_code <= 299


def assert_success(
    response: Response,
    error_cls: Type[ServerError] = ServerError,
) -> Response:
    """
    Raise if the response status is outside the success range.

    Args:
        response: Response to classify
        error_cls: ServerError subclass to raise

    Returns:
        The response, unchanged

    Raises:
        ServerError: (or error_cls) carrying status and raw body
    """
    if not is_success(response.status_code):
        logger.warning(f"Server responded with {response.status_code}")
        raise error_cls(
            f"Server responded with {response.status_code}",
            status_code=response.status_code,
            body=response.body,
        )
    return response


def decode_json(response: Response) -> Any:
    """
    Decode a JSON response body.

    Raises:
        MalformedResponse: If the body is not valid JSON
    """
    try:
        return json.loads(response.body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedResponse("JSON response was invalid") from e


def map_response(
    response: Response,
    mapper: Callable[[Response], T],
    error_cls: Type[ServerError] = ServerError,
) -> T:
    """
    Classify a response and map it to a typed result.

    The same function runs inline for sync calls and inside the
    continuation of async calls.
    """
    assert_success(response, error_cls)
    return mapper(response)


# =============================================================================
# Executor
# =============================================================================


class RequestExecutor:
    """
    Signs and sends requests through a transport.

    Stateless apart from its collaborators, so one executor may be shared
    by concurrent callers. No retries are performed: a failed call is
    surfaced once and any retry must build a fresh request.

    Args:
        key: Private key for request signing
        transport: HTTP transport (default: RequestsTransport)
        scheme: Authentication scheme flags
        sdk_identifier: X-Yoti-SDK header value
        sdk_version: X-Yoti-SDK-Version version component
        timeout: Per-request transport timeout in seconds
        authenticator: Pre-built authenticator (overrides key/scheme/sdk_*)
    """

    def __init__(
        self,
        key: KeyMaterial,
        transport: Optional[Transport] = None,
        scheme: AuthScheme = CONNECT_SCHEME,
        sdk_identifier: Optional[str] = None,
        sdk_version: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        authenticator: Optional[RequestAuthenticator] = None,
    ) -> None:
        self._authenticator = authenticator or RequestAuthenticator(
            key,
            scheme=scheme,
            sdk_identifier=sdk_identifier,
            sdk_version=sdk_version,
        )
        self._transport = transport or RequestsTransport()
        self._timeout = timeout

    @classmethod
    def from_config(
        cls,
        key: KeyMaterial,
        config: "ClientConfig",
        scheme: AuthScheme = CONNECT_SCHEME,
    ) -> "RequestExecutor":
        """Build an executor from a client's configuration."""
        return cls(
            key,
            transport=config.transport,
            scheme=scheme,
            sdk_identifier=config.sdk_identifier,
            sdk_version=config.sdk_version,
            timeout=config.timeout,
        )

    @property
    def authenticator(self) -> RequestAuthenticator:
        return self._authenticator

    @property
    def scheme(self) -> AuthScheme:
        return self._authenticator.scheme

    @property
    def transport(self) -> Transport:
        return self._transport

    def authenticate(self, request: AuthenticatedRequest) -> SignedRequest:
        """Sign a request without sending it."""
        return self._authenticator.sign(request)

    def send(self, signed: SignedRequest) -> Response:
        """
        Send an already signed request.

        Raises:
            TransportFailure: If the transport cannot complete the call
        """
        logger.debug(f"Sending {signed.method} request")
        response = self._transport.send(
            signed.method,
            signed.url,
            signed.headers,
            signed.body,
            timeout=self._timeout,
        )
        logger.debug(f"{signed.method} request -> {response.status_code}")
        return response

    def execute(self, request: AuthenticatedRequest) -> Response:
        """
        Sign and send a request.

        Returns:
            The response, whatever its status

        Raises:
            SigningFailure: If the request cannot be signed
            TransportFailure: If the transport cannot complete the call
        """
        return self.send(self.authenticate(request))

    async def execute_async(self, request: AuthenticatedRequest) -> Response:
        """
        Sign a request, then send it without blocking the event loop.

        Signing happens in the caller so signing failures surface
        immediately. The send runs in the loop's default thread pool;
        cancelling the awaitable releases the caller but does not abort
        a send already in flight, and nothing is retried.
        """
        signed = self.authenticate(request)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.send, signed)
