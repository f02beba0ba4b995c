"""
AML (anti-money-laundering) profile checks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from yoti_sdk._core.transport import Response
from yoti_sdk.errors import AmlError, MalformedResponse
from yoti_sdk.executor import decode_json, is_success
from yoti_sdk.request import Payload
from yoti_sdk.services.base import ServiceBase, require_keys

logger = logging.getLogger(__name__)

AML_CHECK_ENDPOINT = "/aml-check"


@dataclass(frozen=True)
class AmlAddress:
    """
    Address for an AML check.

    Attributes:
        country: ISO 3166-1 alpha-3 country code (e.g. "GBR")
        postcode: Postcode, required for USA checks
    """
    country: str
    postcode: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"country": self.country, "post_code": self.postcode}


@dataclass(frozen=True)
class AmlProfile:
    """Subject of an AML check."""
    given_names: str
    family_name: str
    address: AmlAddress
    ssn: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "given_names": self.given_names,
            "family_name": self.family_name,
            "ssn": self.ssn,
            "address": self.address,
        }


@dataclass(frozen=True)
class AmlResult:
    """Outcome of an AML check."""
    on_pep_list: bool
    on_fraud_list: bool
    on_watch_list: bool

    @classmethod
    def from_dict(cls, data: Any) -> "AmlResult":
        """
        Raises:
            MalformedResponse: If any list flag is missing
        """
        data = require_keys(data, ("on_pep_list", "on_fraud_list", "on_watch_list"), "AML")
        return cls(
            on_pep_list=bool(data["on_pep_list"]),
            on_fraud_list=bool(data["on_fraud_list"]),
            on_watch_list=bool(data["on_watch_list"]),
        )


def aml_error_message(body: Any, status_code: int) -> str:
    """
    Build the AmlError message from an error response body.

    Uses the first error's property and message when present, e.g.
    "INVALID_REQUEST - given_names: must not be empty".
    """
    if not isinstance(body, dict):
        body = {}
    code = body.get("code") or "Error"

    errors = body.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        first = errors[0]
        if "property" in first and "message" in first:
            return f"{code} - {first['property']}: {first['message']}"

    return f"{code} - Server responded with {status_code}"


def validate_aml_response(response: Response) -> None:
    """
    Raise AmlError for a non-2xx AML response.

    The error body is parsed on a best-effort basis for its message.
    """
    if is_success(response.status_code):
        return

    try:
        body = decode_json(response)
    except MalformedResponse:
        body = None

    message = aml_error_message(body, response.status_code)
    logger.warning(f"AML check failed: {message}")
    raise AmlError(message, status_code=response.status_code, body=response.body)


class AmlService(ServiceBase):
    """Performs AML checks against the Connect API."""

    def perform_aml_check(self, aml_profile: AmlProfile) -> AmlResult:
        """
        Check a profile against PEP, fraud and watch lists.

        Raises:
            AmlError: If the server responds outside 2xx
            MalformedResponse: If the response is not a valid AML result
        """
        request = (
            self._request(AML_CHECK_ENDPOINT)
            .with_post()
            .with_payload(Payload.from_json_data(aml_profile))
            .build()
        )
        response = self._executor.execute(request)

        validate_aml_response(response)
        return AmlResult.from_dict(decode_json(response))
