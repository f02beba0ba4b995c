"""
Outbound request model: payload codec, frozen request, and builder.

Requests are assembled with RequestBuilder and frozen into an
AuthenticatedRequest before signing. Nothing about a frozen request can
change afterwards, so the canonical string that was signed can always be
rebuilt byte-for-byte from it.

Usage:
    request = (
        RequestBuilder()
        .with_base_url("https://api.yoti.com/api/v1")
        .with_endpoint("/aml-check")
        .with_post()
        .with_query_param("appId", sdk_id)
        .with_payload(Payload.from_json_data(aml_profile))
        .build()
    )
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple, Union

from yoti_sdk.errors import PayloadEncodingError
from yoti_sdk.types import CONTENT_TYPE_JSON, RESERVED_QUERY_PARAMS, HttpMethod


class RequestBuildError(ValueError):
    """Raised when a request is built from incomplete or invalid state."""
    pass


# =============================================================================
# Payload Codec
# =============================================================================


def _to_json_default(obj: Any) -> Any:
    """json.dumps hook: serialize domain objects through to_dict()."""
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@dataclass(frozen=True)
class Payload:
    """
    Opaque request body plus its declared content type.

    Attributes:
        data: Raw body bytes (exactly what is signed and transmitted)
        content_type: Value for the Content-Type header
    """
    data: bytes
    content_type: str = CONTENT_TYPE_JSON

    @classmethod
    def from_json_data(cls, obj: Any) -> "Payload":
        """
        Serialize a domain object to compact JSON.

        Objects exposing to_dict() are serialized through it at any depth.

        Raises:
            PayloadEncodingError: If the object cannot be serialized
        """
        try:
            text = json.dumps(
                obj,
                default=_to_json_default,
                separators=(",", ":"),
                ensure_ascii=False,
            )
        except (TypeError, ValueError) as e:
            raise PayloadEncodingError(f"Failed to encode payload: {e}") from e
        return cls(data=text.encode("utf-8"), content_type=CONTENT_TYPE_JSON)

    @classmethod
    def from_bytes(cls, data: bytes, content_type: str = CONTENT_TYPE_JSON) -> "Payload":
        """Wrap raw bytes without re-encoding."""
        return cls(data=bytes(data), content_type=content_type)

    @classmethod
    def from_string(cls, text: str, content_type: str = CONTENT_TYPE_JSON) -> "Payload":
        """Wrap a UTF-8 string."""
        return cls(data=text.encode("utf-8"), content_type=content_type)

    def to_base64(self) -> str:
        """Standard base64 of the body bytes, as used in the signing string."""
        return base64.b64encode(self.data).decode("ascii")


# =============================================================================
# Frozen Request
# =============================================================================


@dataclass(frozen=True)
class AuthenticatedRequest:
    """
    An intent to call the remote service, frozen before signing.

    Attributes:
        method: HTTP method
        base_url: API base URL (its path is not part of the signature)
        endpoint: Resource path starting with "/"
        query: Query parameters as ordered (name, value) pairs
        headers: Caller headers as (name, value) pairs
        payload: Optional body
        nonce: Caller-supplied nonce, or None to generate one when signing
        timestamp: Caller-supplied timestamp (ms), or None to use the clock
    """
    method: HttpMethod
    base_url: str
    endpoint: str
    query: Tuple[Tuple[str, str], ...] = ()
    headers: Tuple[Tuple[str, str], ...] = ()
    payload: Optional[Payload] = None
    nonce: Optional[str] = None
    timestamp: Optional[int] = None

    @property
    def query_dict(self) -> Dict[str, str]:
        return dict(self.query)

    @property
    def headers_dict(self) -> Dict[str, str]:
        return dict(self.headers)

    def with_auth_params(self, nonce: str, timestamp: int) -> "AuthenticatedRequest":
        """Return a copy carrying the given nonce and timestamp."""
        return replace(self, nonce=nonce, timestamp=timestamp)


# =============================================================================
# Builder
# =============================================================================


class RequestBuilder:
    """
    Incremental builder for AuthenticatedRequest.

    Query parameters and headers are kept in dicts: setting the same name
    twice keeps the last value.
    """

    def __init__(self) -> None:
        self._method: Optional[HttpMethod] = None
        self._base_url: Optional[str] = None
        self._endpoint: Optional[str] = None
        self._query: Dict[str, str] = {}
        self._headers: Dict[str, str] = {}
        self._payload: Optional[Payload] = None
        self._nonce: Optional[str] = None
        self._timestamp: Optional[int] = None

    def with_base_url(self, base_url: str) -> "RequestBuilder":
        self._base_url = base_url.rstrip("/")
        return self

    def with_endpoint(self, endpoint: str) -> "RequestBuilder":
        if not endpoint.startswith("/"):
            endpoint = "/" + endpoint
        self._endpoint = endpoint
        return self

    def with_method(self, method: Union[HttpMethod, str]) -> "RequestBuilder":
        try:
            self._method = HttpMethod(method.upper() if isinstance(method, str) else method)
        except ValueError as e:
            raise RequestBuildError(f"Unsupported HTTP method: {method}") from e
        return self

    def with_get(self) -> "RequestBuilder":
        return self.with_method(HttpMethod.GET)

    def with_post(self) -> "RequestBuilder":
        return self.with_method(HttpMethod.POST)

    def with_delete(self) -> "RequestBuilder":
        return self.with_method(HttpMethod.DELETE)

    def with_query_param(self, name: str, value: Any) -> "RequestBuilder":
        if name in RESERVED_QUERY_PARAMS:
            raise RequestBuildError(
                f"'{name}' is set by the authenticator; use with_{name}() instead"
            )
        self._query[name] = str(value)
        return self

    def with_header(self, name: str, value: str) -> "RequestBuilder":
        if not isinstance(value, str):
            raise RequestBuildError(f"Header '{name}' value must be a string")
        self._headers[name] = value
        return self

    def with_payload(self, payload: Payload) -> "RequestBuilder":
        self._payload = payload
        return self

    def with_nonce(self, nonce: str) -> "RequestBuilder":
        self._nonce = nonce
        return self

    def with_timestamp(self, timestamp: int) -> "RequestBuilder":
        self._timestamp = int(timestamp)
        return self

    def build(self) -> AuthenticatedRequest:
        """
        Freeze the builder state.

        Raises:
            RequestBuildError: If base URL, endpoint or method is missing
        """
        if not self._base_url:
            raise RequestBuildError("Base URL must be provided")
        if not self._endpoint:
            raise RequestBuildError("Endpoint must be provided")
        if self._method is None:
            raise RequestBuildError("HTTP method must be provided")

        return AuthenticatedRequest(
            method=self._method,
            base_url=self._base_url,
            endpoint=self._endpoint,
            query=tuple(self._query.items()),
            headers=tuple(self._headers.items()),
            payload=self._payload,
            nonce=self._nonce,
            timestamp=self._timestamp,
        )
