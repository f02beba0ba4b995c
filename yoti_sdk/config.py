"""
Client configuration for yoti-sdk.

Each client receives its own ClientConfig at construction; there is no
process-wide configuration store, so clients with different API URLs or
transports can run side by side.

Usage:
    config = ClientConfig(api_url="https://api.yoti.com/api/v1", timeout=10)
    client = YotiClient(sdk_id, "./keys/application.pem", config=config)

    # Or from the environment (YOTI_API_URL, YOTI_SDK_TIMEOUT, ...)
    client = YotiClient(sdk_id, pem, config=ClientConfig.from_env())
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional
from urllib.parse import urlparse

from yoti_sdk._core.transport import DEFAULT_TIMEOUT, Transport
from yoti_sdk._core.version import SDK_IDENTIFIER, SDK_VERSION
from yoti_sdk.errors import ConfigError

DEFAULT_API_URL = "https://api.yoti.com/api/v1"
DEFAULT_DOC_SCAN_API_URL = "https://api.yoti.com/idverify/v1"
DEFAULT_SANDBOX_API_URL = "https://api.yoti.com/sandbox/v1"

# Base url for connect page (user will be redirected to this page eg. baseurl/app-id)
CONNECT_BASE_URL = "https://www.yoti.com/connect"

ENV_API_URL = "YOTI_API_URL"
ENV_DOC_SCAN_API_URL = "YOTI_DOC_SCAN_API_URL"
ENV_SANDBOX_API_URL = "YOTI_SANDBOX_API_URL"
ENV_TIMEOUT = "YOTI_SDK_TIMEOUT"


def _check_url(name: str, value: str) -> None:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"{name} must be an absolute http(s) URL, got {value!r}")


@dataclass
class ClientConfig:
    """
    Configuration for Yoti clients.

    Attributes:
        api_url: Connect API base URL (profile, AML, share URLs)
        doc_scan_api_url: Doc Scan API base URL
        sandbox_api_url: Sandbox API base URL
        sdk_identifier: X-Yoti-SDK header value (plugins set their own)
        sdk_version: Version reported in X-Yoti-SDK-Version
        timeout: Transport timeout in seconds
        transport: Custom HTTP transport (default: RequestsTransport)
    """
    api_url: str = DEFAULT_API_URL
    doc_scan_api_url: str = DEFAULT_DOC_SCAN_API_URL
    sandbox_api_url: str = DEFAULT_SANDBOX_API_URL
    sdk_identifier: str = SDK_IDENTIFIER
    sdk_version: str = SDK_VERSION
    timeout: float = DEFAULT_TIMEOUT
    transport: Optional[Transport] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate configuration on creation."""
        self.validate()

    def validate(self) -> None:
        """Validate configuration values."""
        _check_url("api_url", self.api_url)
        _check_url("doc_scan_api_url", self.doc_scan_api_url)
        _check_url("sandbox_api_url", self.sandbox_api_url)

        if not isinstance(self.sdk_identifier, str) or not self.sdk_identifier:
            raise ConfigError("sdk_identifier must be a non-empty string")
        if not isinstance(self.sdk_version, str) or not self.sdk_version:
            raise ConfigError("sdk_version must be a non-empty string")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides,
    ) -> "ClientConfig":
        """
        Build a config from environment variables.

        Reads YOTI_API_URL, YOTI_DOC_SCAN_API_URL, YOTI_SANDBOX_API_URL and
        YOTI_SDK_TIMEOUT; unset variables keep their defaults. Keyword
        overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        values = {}

        if env.get(ENV_API_URL):
            values["api_url"] = env[ENV_API_URL]
        if env.get(ENV_DOC_SCAN_API_URL):
            values["doc_scan_api_url"] = env[ENV_DOC_SCAN_API_URL]
        if env.get(ENV_SANDBOX_API_URL):
            values["sandbox_api_url"] = env[ENV_SANDBOX_API_URL]
        if env.get(ENV_TIMEOUT):
            try:
                values["timeout"] = float(env[ENV_TIMEOUT])
            except ValueError as e:
                raise ConfigError(f"{ENV_TIMEOUT} must be a number") from e

        values.update(overrides)
        return cls(**values)

    def with_overrides(self, **changes) -> "ClientConfig":
        """Return a validated copy with some fields replaced."""
        return replace(self, **changes)
