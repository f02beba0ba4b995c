"""
Version constants for yoti-sdk.

- SDK_VERSION: User-facing SDK version, also sent in X-Yoti-SDK-Version
- SDK_IDENTIFIER: Default value of the X-Yoti-SDK header
"""

from __future__ import annotations

# yoti-sdk version (user-facing semver)
SDK_VERSION = "1.0.0"

# Default SDK identifier; plugins override it through ClientConfig
SDK_IDENTIFIER = "Python"


def sdk_version_header(identifier: str, version: str) -> str:
    """
    Build the X-Yoti-SDK-Version header value.

    The header pairs the identifier with its version so the API can tell
    plugin builds apart (e.g. "Drupal-1.2.3").

    Args:
        identifier: SDK or plugin identifier
        version: SDK or plugin version

    Returns:
        "<identifier>-<version>"
    """
    return f"{identifier}-{version}"
