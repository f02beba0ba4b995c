"""
Dynamic sharing: create a share URL (QR code) for a dynamic scenario.

Usage:
    policy = (
        DynamicPolicyBuilder()
        .with_full_name()
        .with_age_over(18)
        .with_selfie_auth()
        .build()
    )
    scenario = (
        DynamicScenarioBuilder()
        .with_callback_endpoint("/profile")
        .with_policy(policy)
        .build()
    )
    result = client.create_share_url(scenario)
    print(result.share_url, result.ref_id)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from yoti_sdk._core.transport import Response
from yoti_sdk.errors import ConfigError, ShareUrlError
from yoti_sdk.executor import decode_json, map_response
from yoti_sdk.request import Payload
from yoti_sdk.services.base import ServiceBase, require_keys

logger = logging.getLogger(__name__)

SHARE_URL_ENDPOINT = "/qrcodes/apps/{app_id}"

# Auth types
SELFIE_AUTH_TYPE = 1
PIN_AUTH_TYPE = 2

ATTR_FAMILY_NAME = "family_name"
ATTR_GIVEN_NAMES = "given_names"
ATTR_FULL_NAME = "full_name"
ATTR_DATE_OF_BIRTH = "date_of_birth"
ATTR_EMAIL_ADDRESS = "email_address"
ATTR_PHONE_NUMBER = "phone_number"
ATTR_SELFIE = "selfie"
ATTR_POSTAL_ADDRESS = "postal_address"
ATTR_NATIONALITY = "nationality"


@dataclass(frozen=True)
class WantedAttribute:
    name: str
    derivation: Optional[str] = None
    optional: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "optional": self.optional}
        if self.derivation:
            data["derivation"] = self.derivation
        return data


@dataclass(frozen=True)
class DynamicPolicy:
    """Which attributes and auth types a share requests."""
    wanted: List[WantedAttribute] = field(default_factory=list)
    wanted_auth_types: List[int] = field(default_factory=list)
    wanted_remember_me: bool = False
    wanted_remember_me_optional: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wanted": self.wanted,
            "wanted_auth_types": self.wanted_auth_types,
            "wanted_remember_me": self.wanted_remember_me,
            "wanted_remember_me_optional": self.wanted_remember_me_optional,
        }


class DynamicPolicyBuilder:
    """Builder for DynamicPolicy; adding an attribute twice keeps the last."""

    def __init__(self) -> None:
        self._wanted: Dict[str, WantedAttribute] = {}
        self._auth_types: List[int] = []
        self._remember_me = False
        self._remember_me_optional = False

    def with_wanted_attribute(
        self,
        name: str,
        derivation: Optional[str] = None,
        optional: bool = False,
    ) -> "DynamicPolicyBuilder":
        key = f"{name}-{derivation}" if derivation else name
        self._wanted[key] = WantedAttribute(name, derivation, optional)
        return self

    def with_family_name(self) -> "DynamicPolicyBuilder":
        return self.with_wanted_attribute(ATTR_FAMILY_NAME)

    def with_given_names(self) -> "DynamicPolicyBuilder":
        return self.with_wanted_attribute(ATTR_GIVEN_NAMES)

    def with_full_name(self) -> "DynamicPolicyBuilder":
        return self.with_wanted_attribute(ATTR_FULL_NAME)

    def with_date_of_birth(self) -> "DynamicPolicyBuilder":
        return self.with_wanted_attribute(ATTR_DATE_OF_BIRTH)

    def with_age_over(self, age: int) -> "DynamicPolicyBuilder":
        return self.with_wanted_attribute(ATTR_DATE_OF_BIRTH, f"age_over:{int(age)}")

    def with_age_under(self, age: int) -> "DynamicPolicyBuilder":
        return self.with_wanted_attribute(ATTR_DATE_OF_BIRTH, f"age_under:{int(age)}")

    def with_email(self) -> "DynamicPolicyBuilder":
        return self.with_wanted_attribute(ATTR_EMAIL_ADDRESS)

    def with_phone_number(self) -> "DynamicPolicyBuilder":
        return self.with_wanted_attribute(ATTR_PHONE_NUMBER)

    def with_selfie(self) -> "DynamicPolicyBuilder":
        return self.with_wanted_attribute(ATTR_SELFIE)

    def with_postal_address(self) -> "DynamicPolicyBuilder":
        return self.with_wanted_attribute(ATTR_POSTAL_ADDRESS)

    def with_nationality(self) -> "DynamicPolicyBuilder":
        return self.with_wanted_attribute(ATTR_NATIONALITY)

    def with_selfie_auth(self) -> "DynamicPolicyBuilder":
        return self._with_auth_type(SELFIE_AUTH_TYPE)

    def with_pin_auth(self) -> "DynamicPolicyBuilder":
        return self._with_auth_type(PIN_AUTH_TYPE)

    def with_wanted_remember_me(self, optional: bool = False) -> "DynamicPolicyBuilder":
        self._remember_me = True
        self._remember_me_optional = optional
        return self

    def _with_auth_type(self, auth_type: int) -> "DynamicPolicyBuilder":
        if auth_type not in self._auth_types:
            self._auth_types.append(auth_type)
        return self

    def build(self) -> DynamicPolicy:
        return DynamicPolicy(
            wanted=list(self._wanted.values()),
            wanted_auth_types=list(self._auth_types),
            wanted_remember_me=self._remember_me,
            wanted_remember_me_optional=self._remember_me_optional,
        )


@dataclass(frozen=True)
class DynamicScenario:
    """A share request: callback endpoint, policy and extensions."""
    callback_endpoint: str
    policy: DynamicPolicy
    extensions: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "callback_endpoint": self.callback_endpoint,
            "policy": self.policy,
            "extensions": self.extensions,
        }


class DynamicScenarioBuilder:
    def __init__(self) -> None:
        self._callback_endpoint: Optional[str] = None
        self._policy: Optional[DynamicPolicy] = None
        self._extensions: List[Dict[str, Any]] = []

    def with_callback_endpoint(self, callback_endpoint: str) -> "DynamicScenarioBuilder":
        self._callback_endpoint = callback_endpoint
        return self

    def with_policy(self, policy: DynamicPolicy) -> "DynamicScenarioBuilder":
        self._policy = policy
        return self

    def with_extension(self, extension: Dict[str, Any]) -> "DynamicScenarioBuilder":
        self._extensions.append(extension)
        return self

    def build(self) -> DynamicScenario:
        if not self._callback_endpoint:
            raise ConfigError("Callback endpoint must be provided")
        return DynamicScenario(
            callback_endpoint=self._callback_endpoint,
            policy=self._policy or DynamicPolicy(),
            extensions=list(self._extensions),
        )


@dataclass(frozen=True)
class ShareUrlResult:
    share_url: str
    ref_id: str

    @classmethod
    def from_response(cls, response: Response) -> "ShareUrlResult":
        data = require_keys(decode_json(response), ("qrcode", "ref_id"), "Share URL")
        return cls(share_url=data["qrcode"], ref_id=data["ref_id"])


class ShareUrlService(ServiceBase):
    """Creates dynamic share URLs on the Connect API."""

    def create_share_url(self, scenario: DynamicScenario) -> ShareUrlResult:
        """
        Raises:
            ShareUrlError: If the server responds outside 2xx
            MalformedResponse: If the response lacks qrcode or ref_id
        """
        request = (
            self._request(SHARE_URL_ENDPOINT.format(app_id=self._sdk_id))
            .with_post()
            .with_payload(Payload.from_json_data(scenario))
            .build()
        )
        response = self._executor.execute(request)
        result = map_response(response, ShareUrlResult.from_response, ShareUrlError)
        logger.info(f"Created share URL with ref_id {result.ref_id}")
        return result
