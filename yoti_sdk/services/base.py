"""
Shared plumbing for the API service façades.
"""

from __future__ import annotations

from yoti_sdk.errors import ConfigError, MalformedResponse
from yoti_sdk.executor import RequestExecutor
from yoti_sdk.request import RequestBuilder


def require_keys(data: object, keys: tuple, what: str) -> dict:
    """
    Check that a decoded JSON body is an object with the given keys.

    Raises:
        MalformedResponse: If the body is not a dict or a key is missing
    """
    if not isinstance(data, dict):
        raise MalformedResponse(f"{what} response was not a JSON object")
    missing = [k for k in keys if k not in data]
    if missing:
        raise MalformedResponse(f"{what} response is missing {', '.join(missing)}")
    return data


class ServiceBase:
    """
    Base for services that talk to one API through a shared executor.

    Args:
        sdk_id: Application / SDK ID from Yoti Hub
        executor: Signing executor shared by the client's services
        base_url: API base URL for this service
    """

    def __init__(self, sdk_id: str, executor: RequestExecutor, base_url: str) -> None:
        if not sdk_id:
            raise ConfigError("SDK ID cannot be empty")
        self._sdk_id = sdk_id
        self._executor = executor
        self._base_url = base_url

    @property
    def sdk_id(self) -> str:
        return self._sdk_id

    def _request(self, endpoint: str, identify: bool = True) -> RequestBuilder:
        """Start a request on this service's API, tagged with the SDK ID."""
        builder = RequestBuilder().with_base_url(self._base_url).with_endpoint(endpoint)
        if identify:
            builder.with_query_param(self._executor.scheme.identity_param, self._sdk_id)
        return builder
