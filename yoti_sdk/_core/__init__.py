"""
Core plumbing for yoti-sdk.

This module handles:
- SDK version and identifier constants
- HTTP transport (requests-backed by default)
"""

from yoti_sdk._core.version import (
    SDK_IDENTIFIER,
    SDK_VERSION,
    sdk_version_header,
)
from yoti_sdk._core.transport import (
    DEFAULT_TIMEOUT,
    RequestsTransport,
    Response,
    Transport,
)

__all__ = [
    # Version
    "SDK_IDENTIFIER",
    "SDK_VERSION",
    "sdk_version_header",
    # Transport
    "DEFAULT_TIMEOUT",
    "RequestsTransport",
    "Response",
    "Transport",
]
