"""
Request authentication: nonce/timestamp generation and request signing.

Every request to the Yoti APIs is bound to a single-use nonce and a
millisecond timestamp, then signed with the application's private key:

1. Fill in nonce and timestamp (kept if the caller supplied them)
2. Add both as query parameters so they are covered by the signature
3. Build the canonical string: METHOD&PATH?QUERY[&BASE64(PAYLOAD)]
4. Sign it with SHA-256 / PKCS#1 v1.5 and base64 encode the result
5. Attach X-Yoti-Auth-Digest, X-Yoti-Auth-Key and the SDK identity headers

Query parameters are serialized sorted by name (then value) so the signed
string does not depend on insertion order. The same string is used in the
outbound URL.

Usage:
    authenticator = RequestAuthenticator(key, sdk_identifier="Python", sdk_version="1.0.0")
    signed = authenticator.sign(request)
    transport.send(signed.method, signed.url, signed.headers, signed.body, timeout=30)
"""

from __future__ import annotations

import base64
import logging
import time
import uuid
from typing import Callable, Dict, NamedTuple, Optional, Tuple
from urllib.parse import urlencode

from yoti_sdk._core.version import sdk_version_header
from yoti_sdk.errors import SigningFailure
from yoti_sdk.keys import KeyMaterial
from yoti_sdk.request import AuthenticatedRequest
from yoti_sdk.types import (
    AUTH_KEY_HEADER,
    CONNECT_SCHEME,
    CONTENT_TYPE_JSON,
    DIGEST_HEADER,
    NONCE_PARAM,
    SDK_HEADER,
    SDK_VERSION_HEADER,
    TIMESTAMP_PARAM,
    AuthScheme,
)

logger = logging.getLogger(__name__)

SIGNING_DELIMITER = "&"


# =============================================================================
# Nonce / Timestamp
# =============================================================================


def generate_nonce() -> str:
    """
    Generate a single-use request nonce.

    Returns:
        Random UUID4 string (122 bits of entropy)
    """
    return str(uuid.uuid4())


def current_timestamp() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


# =============================================================================
# Canonical Form
# =============================================================================


def serialize_query(query: Tuple[Tuple[str, str], ...]) -> str:
    """
    Serialize query parameters in their canonical order.

    Pairs are sorted lexicographically by name, then value, and
    form-encoded ("+" for spaces).
    """
    return urlencode(sorted(query))


def signed_query(request: AuthenticatedRequest) -> Tuple[Tuple[str, str], ...]:
    """
    All query parameters covered by the signature.

    Raises:
        SigningFailure: If nonce or timestamp has not been assigned
    """
    if request.nonce is None or request.timestamp is None:
        raise SigningFailure("Request must carry a nonce and timestamp before signing")
    return request.query + (
        (NONCE_PARAM, request.nonce),
        (TIMESTAMP_PARAM, str(request.timestamp)),
    )


def path_with_query(request: AuthenticatedRequest) -> str:
    """Endpoint plus canonical query string, as signed."""
    return f"{request.endpoint}?{serialize_query(signed_query(request))}"


def canonical_string(request: AuthenticatedRequest) -> str:
    """
    Build the canonical signing string for a frozen request.

    Format: METHOD&PATH?QUERY, followed by &BASE64(PAYLOAD) when the
    request carries a payload. A pure function of the request state.

    Raises:
        SigningFailure: If nonce or timestamp has not been assigned
    """
    parts = [request.method.value, path_with_query(request)]
    if request.payload is not None:
        parts.append(request.payload.to_base64())
    return SIGNING_DELIMITER.join(parts)


# =============================================================================
# Signed Request
# =============================================================================


class SignedRequest(NamedTuple):
    """
    Transport-ready request produced by the authenticator.

    A plain (method, url, headers, body) tuple plus the signing inputs,
    so any transport adapter can consume it.
    """
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[bytes]
    signing_string: str
    nonce: str
    timestamp: int


class RequestAuthenticator:
    """
    Signs frozen requests with a KeyMaterial.

    Holds no mutable state after construction; safe to share across
    threads.

    Args:
        key: Private key used for the digest
        scheme: Behaviour flags (auth key header, identity parameter)
        sdk_identifier: Value of X-Yoti-SDK, or None to omit
        sdk_version: Version paired with the identifier in X-Yoti-SDK-Version
        nonce_factory: Nonce source (default: generate_nonce)
        clock: Millisecond timestamp source (default: current_timestamp)
    """

    def __init__(
        self,
        key: KeyMaterial,
        scheme: AuthScheme = CONNECT_SCHEME,
        sdk_identifier: Optional[str] = None,
        sdk_version: Optional[str] = None,
        nonce_factory: Callable[[], str] = generate_nonce,
        clock: Callable[[], int] = current_timestamp,
    ) -> None:
        self._key = key
        self._scheme = scheme
        self._sdk_identifier = sdk_identifier
        self._sdk_version = sdk_version
        self._nonce_factory = nonce_factory
        self._clock = clock

    @property
    def key(self) -> KeyMaterial:
        return self._key

    @property
    def scheme(self) -> AuthScheme:
        return self._scheme

    def prepare(self, request: AuthenticatedRequest) -> AuthenticatedRequest:
        """
        Assign nonce and timestamp where the caller did not.

        Idempotent: a request that already carries both is returned as is.
        """
        if request.nonce is not None and request.timestamp is not None:
            return request
        nonce = request.nonce if request.nonce is not None else self._nonce_factory()
        timestamp = request.timestamp if request.timestamp is not None else self._clock()
        return request.with_auth_params(nonce, timestamp)

    def compute_digest(self, request: AuthenticatedRequest) -> str:
        """
        Sign the canonical string of a prepared request.

        Returns:
            Base64-encoded SHA-256 / PKCS#1 v1.5 signature

        Raises:
            SigningFailure: If the signature cannot be computed
        """
        return self._digest(canonical_string(request))

    def _digest(self, signing_string: str) -> str:
        signature = self._key.sign(signing_string.encode("utf-8"))
        return base64.b64encode(signature).decode("ascii")

    def auth_headers(self, request: AuthenticatedRequest, digest: str) -> Dict[str, str]:
        """Build the final header set; authentication headers override caller ones."""
        headers: Dict[str, str] = {"Accept": CONTENT_TYPE_JSON}
        if request.payload is not None:
            headers["Content-Type"] = request.payload.content_type
        headers.update(request.headers)

        headers[DIGEST_HEADER] = digest
        if self._scheme.send_auth_key:
            headers[AUTH_KEY_HEADER] = self._key.auth_key_identifier()
        if self._sdk_identifier:
            headers[SDK_HEADER] = self._sdk_identifier
            if self._sdk_version:
                headers[SDK_VERSION_HEADER] = sdk_version_header(
                    self._sdk_identifier, self._sdk_version
                )
        return headers

    def sign(self, request: AuthenticatedRequest) -> SignedRequest:
        """
        Authenticate a frozen request.

        Args:
            request: Frozen request (nonce/timestamp optional)

        Returns:
            SignedRequest ready for any transport

        Raises:
            SigningFailure: If signing fails
        """
        prepared = self.prepare(request)
        signing_string = canonical_string(prepared)
        digest = self._digest(signing_string)

        url = f"{prepared.base_url}{path_with_query(prepared)}"
        body = prepared.payload.data if prepared.payload is not None else None

        logger.debug(
            f"Signed {prepared.method.value} request (scheme={self._scheme.name}, "
            f"params={sorted(name for name, _ in prepared.query)})"
        )
        return SignedRequest(
            method=prepared.method.value,
            url=url,
            headers=self.auth_headers(prepared, digest),
            body=body,
            signing_string=signing_string,
            nonce=prepared.nonce,
            timestamp=prepared.timestamp,
        )
