"""
Sandbox: issue test connect tokens for a fabricated profile.

The sandbox API mints a token for a profile you describe, and its profile
endpoint then serves that profile like the live Connect API would.

Usage:
    sandbox = SandboxClient(sdk_id, "./keys/sandbox.pem")
    token = sandbox.get_token(
        TokenRequest(
            remember_me_id="some-user",
            profile_attributes=[SandboxAttribute("given_names", "Alice")],
        )
    )
    details = sandbox.get_activity_details(token)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from yoti_sdk._core.transport import Response
from yoti_sdk.config import ClientConfig
from yoti_sdk.errors import SandboxError
from yoti_sdk.executor import RequestExecutor, decode_json, map_response
from yoti_sdk.keys import KeyMaterial, load_key
from yoti_sdk.request import Payload
from yoti_sdk.services.base import ServiceBase, require_keys
from yoti_sdk.services.profile import ActivityDetails, ProfileService
from yoti_sdk.types import CONNECT_SCHEME

logger = logging.getLogger(__name__)

TOKEN_REQUEST_ENDPOINT = "/apps/{sdk_id}/tokens"


@dataclass(frozen=True)
class SandboxAttribute:
    """A profile attribute to place in the sandbox profile."""
    name: str
    value: str
    derivation: str = ""
    optional: bool = False
    anchors: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "derivation": self.derivation,
            "optional": self.optional,
            "anchors": self.anchors,
        }


@dataclass(frozen=True)
class TokenRequest:
    remember_me_id: Optional[str] = None
    profile_attributes: List[SandboxAttribute] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "remember_me_id": self.remember_me_id,
            "profile_attributes": self.profile_attributes,
        }


def token_from_response(response: Response) -> str:
    return require_keys(decode_json(response), ("token",), "Sandbox token")["token"]


class SandboxTokenService(ServiceBase):
    def get_token(self, token_request: TokenRequest) -> str:
        """
        Raises:
            SandboxError: If the server responds outside 2xx
            MalformedResponse: If the response has no token
        """
        request = (
            self._request(TOKEN_REQUEST_ENDPOINT.format(sdk_id=self._sdk_id))
            .with_post()
            .with_payload(Payload.from_json_data(token_request))
            .build()
        )
        response = self._executor.execute(request)
        return map_response(response, token_from_response, SandboxError)


class SandboxClient:
    """
    Client for the sandbox API.

    Args:
        sdk_id: Sandbox application SDK ID
        pem: KeyMaterial, PEM file path, or PEM text (header lines optional)
        config: Client configuration (sandbox_api_url is used)
    """

    def __init__(
        self,
        sdk_id: str,
        pem: Union[KeyMaterial, Path, str, bytes],
        config: Optional[ClientConfig] = None,
    ) -> None:
        self._config = config or ClientConfig()
        executor = RequestExecutor.from_config(load_key(pem), self._config, CONNECT_SCHEME)
        base_url = self._config.sandbox_api_url
        self._tokens = SandboxTokenService(sdk_id, executor, base_url)
        self._profiles = ProfileService(sdk_id, executor, base_url)
        logger.info(f"Sandbox client ready for {base_url}")

    def get_token(self, token_request: TokenRequest) -> str:
        """Mint an encrypted connect token for the requested profile."""
        return self._tokens.get_token(token_request)

    def get_activity_details(self, encrypted_connect_token: str) -> ActivityDetails:
        """Exchange a sandbox token for its activity details."""
        return self._profiles.get_activity_details(encrypted_connect_token)
