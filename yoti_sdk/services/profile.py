"""
Profile sharing: exchange a connect token for the shared activity details.

Flow:
1. Decrypt the connect token received on the callback URL
2. GET /profile/{token} (signed, with X-Yoti-Auth-Key)
3. Check the receipt is present and its sharing outcome is SUCCESS

The receipt's profile content stays encrypted; decoding attributes is
left to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from yoti_sdk._core.transport import Response
from yoti_sdk.errors import (
    ActivityDetailsError,
    MalformedResponse,
    OutcomeUnsuccessful,
    ReceiptMissing,
)
from yoti_sdk.executor import RequestExecutor, decode_json, map_response
from yoti_sdk.services.base import ServiceBase
from yoti_sdk.token import TokenCipher
from yoti_sdk.types import AUTH_KEY_HEADER

logger = logging.getLogger(__name__)

# Request successful outcome
OUTCOME_SUCCESS = "SUCCESS"

PROFILE_ENDPOINT = "/profile/{token}"


@dataclass(frozen=True)
class Receipt:
    """
    Receipt of a profile share.

    Attributes:
        receipt_id: Receipt identifier
        remember_me_id: Stable user identifier for this application
        parent_remember_me_id: Identifier shared across an organisation's apps
        sharing_outcome: SUCCESS or a failure outcome
        timestamp: RFC 3339 time of the share
        wrapped_receipt_key: Encrypted receipt key
        profile_content: Encrypted user profile
        other_party_profile_content: Encrypted other-party profile
        extra_data_content: Encrypted extra data
    """
    receipt_id: Optional[str] = None
    remember_me_id: Optional[str] = None
    parent_remember_me_id: Optional[str] = None
    sharing_outcome: Optional[str] = None
    timestamp: Optional[str] = None
    wrapped_receipt_key: Optional[str] = None
    profile_content: Optional[str] = None
    other_party_profile_content: Optional[str] = None
    extra_data_content: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Receipt":
        if not isinstance(data, dict):
            raise MalformedResponse("Receipt was not a JSON object")
        return cls(
            receipt_id=data.get("receipt_id"),
            remember_me_id=data.get("remember_me_id"),
            parent_remember_me_id=data.get("parent_remember_me_id"),
            sharing_outcome=data.get("sharing_outcome"),
            timestamp=data.get("timestamp"),
            wrapped_receipt_key=data.get("wrapped_receipt_key"),
            profile_content=data.get("profile_content"),
            other_party_profile_content=data.get("other_party_profile_content"),
            extra_data_content=data.get("extra_data_content"),
            raw=data,
        )


@dataclass(frozen=True)
class ActivityDetails:
    """Successful profile share."""
    receipt: Receipt

    @property
    def remember_me_id(self) -> Optional[str]:
        return self.receipt.remember_me_id

    @property
    def parent_remember_me_id(self) -> Optional[str]:
        return self.receipt.parent_remember_me_id

    @property
    def receipt_id(self) -> Optional[str]:
        return self.receipt.receipt_id

    @property
    def timestamp(self) -> Optional[datetime]:
        """Share time as datetime, if the receipt carries one."""
        if not self.receipt.timestamp:
            return None
        return datetime.fromisoformat(self.receipt.timestamp.replace("Z", "+00:00"))


def receipt_from_response(response: Response) -> Receipt:
    """
    Map a successful profile response to its receipt.

    Raises:
        MalformedResponse: If the body is not JSON
        ReceiptMissing: If no receipt is present
    """
    result = decode_json(response)
    if not isinstance(result, dict) or "receipt" not in result:
        raise ReceiptMissing("Receipt not found in response")
    return Receipt.from_dict(result["receipt"])


class ProfileService(ServiceBase):
    """Fetches shared profiles from the Connect API."""

    def __init__(self, sdk_id: str, executor: RequestExecutor, base_url: str) -> None:
        super().__init__(sdk_id, executor, base_url)
        self._cipher = TokenCipher(executor.authenticator.key)

    def get_receipt(self, encrypted_connect_token: str) -> Receipt:
        """
        Decrypt a connect token and fetch its receipt.

        Raises:
            TokenDecryptionFailure: If the token cannot be decrypted
            ActivityDetailsError: If the server responds outside 2xx
            ReceiptMissing: If the response has no receipt
        """
        token = self._cipher.decrypt(encrypted_connect_token)
        key = self._executor.authenticator.key

        request = (
            self._request(PROFILE_ENDPOINT.format(token=token))
            .with_get()
            .with_header(AUTH_KEY_HEADER, key.auth_key_identifier())
            .build()
        )
        response = self._executor.execute(request)
        return map_response(response, receipt_from_response, ActivityDetailsError)

    def get_activity_details(self, encrypted_connect_token: str) -> ActivityDetails:
        """
        Return the profile shared with this application.

        Args:
            encrypted_connect_token: Token from the share callback

        Returns:
            ActivityDetails for a successful share

        Raises:
            TokenDecryptionFailure: If the token cannot be decrypted
            ActivityDetailsError: If the server responds outside 2xx
            ReceiptMissing: If the response has no receipt
            OutcomeUnsuccessful: If the share did not succeed
        """
        receipt = self.get_receipt(encrypted_connect_token)

        if receipt.sharing_outcome != OUTCOME_SUCCESS:
            raise OutcomeUnsuccessful(receipt.sharing_outcome)

        logger.info(f"Retrieved activity details for receipt {receipt.receipt_id}")
        return ActivityDetails(receipt)
