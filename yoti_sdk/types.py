"""
Type definitions for yoti-sdk.

Defines enums, header names and authentication scheme flags shared by the
request authenticator, the executor and the service façades.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class HttpMethod(str, Enum):
    """HTTP methods used against the Yoti APIs."""
    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


# =============================================================================
# Header Names (must match the server contract exactly)
# =============================================================================

AUTH_KEY_HEADER = "X-Yoti-Auth-Key"
DIGEST_HEADER = "X-Yoti-Auth-Digest"
SDK_HEADER = "X-Yoti-SDK"
SDK_VERSION_HEADER = "X-Yoti-SDK-Version"

CONTENT_TYPE_JSON = "application/json"

# Query parameters added by the authenticator itself
NONCE_PARAM = "nonce"
TIMESTAMP_PARAM = "timestamp"
RESERVED_QUERY_PARAMS = frozenset({NONCE_PARAM, TIMESTAMP_PARAM})


# =============================================================================
# Authentication Schemes
# =============================================================================


@dataclass(frozen=True)
class AuthScheme:
    """
    Versioned behaviour flags for request authentication.

    The Connect, Doc Scan and legacy clients share one signing algorithm and
    differ only in these flags.

    Attributes:
        name: Scheme name for logs
        identity_param: Query parameter carrying the SDK/application ID
        send_auth_key: Attach X-Yoti-Auth-Key to every request
    """
    name: str
    identity_param: str = "appId"
    send_auth_key: bool = True


CONNECT_SCHEME = AuthScheme(name="connect", identity_param="appId")
DOC_SCAN_SCHEME = AuthScheme(name="doc_scan", identity_param="sdkId")

# The legacy client sent X-Yoti-Auth-Key on profile requests only
LEGACY_SCHEME = AuthScheme(name="legacy", identity_param="appId", send_auth_key=False)
