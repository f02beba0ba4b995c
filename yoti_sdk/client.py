"""
Top-level clients.

YotiClient covers the Connect API (profile sharing, AML checks, dynamic
share URLs); DocScanClient covers the Doc Scan API. Each client owns one
RequestExecutor, shared by its services, built from its ClientConfig.

Usage:
    client = YotiClient("your-sdk-id", "./keys/application.pem")
    details = client.get_activity_details(token_from_callback)
    print(details.remember_me_id)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from yoti_sdk.config import CONNECT_BASE_URL, ClientConfig
from yoti_sdk.errors import ConfigError
from yoti_sdk.executor import RequestExecutor
from yoti_sdk.keys import KeyMaterial, load_key
from yoti_sdk.services.aml import AmlProfile, AmlResult, AmlService
from yoti_sdk.services.doc_scan import (
    CreateSessionResult,
    DocScanService,
    GetSessionResult,
    Media,
    SessionSpecification,
    SupportedDocumentsResponse,
)
from yoti_sdk.services.profile import ActivityDetails, ProfileService
from yoti_sdk.services.share_url import DynamicScenario, ShareUrlResult, ShareUrlService
from yoti_sdk.types import CONNECT_SCHEME, DOC_SCAN_SCHEME

logger = logging.getLogger(__name__)

KeyArg = Union[KeyMaterial, Path, str, bytes]


def _check_sdk_id(sdk_id: str) -> None:
    if not sdk_id:
        raise ConfigError("SDK ID cannot be empty")


class YotiClient:
    """
    Client for the Yoti Connect API.

    Args:
        sdk_id: SDK ID from Yoti Hub
        pem: KeyMaterial, a PEM file path (optionally "file://" prefixed)
            or the PEM text itself
        config: Client configuration (default: ClientConfig())

    Raises:
        ConfigError: If sdk_id or pem is empty
        KeyFileNotFound: If a "file://" PEM path does not exist
        InvalidKeyFormat: If the key cannot be parsed
    """

    def __init__(
        self,
        sdk_id: str,
        pem: KeyArg,
        config: Optional[ClientConfig] = None,
    ) -> None:
        _check_sdk_id(sdk_id)
        self._sdk_id = sdk_id
        self._config = config or ClientConfig()
        self._key = load_key(pem)
        self._executor = RequestExecutor.from_config(self._key, self._config, CONNECT_SCHEME)

        api_url = self._config.api_url
        self._profile_service = ProfileService(sdk_id, self._executor, api_url)
        self._aml_service = AmlService(sdk_id, self._executor, api_url)
        self._share_url_service = ShareUrlService(sdk_id, self._executor, api_url)

        logger.info(f"Yoti client ready for {api_url}")

    @property
    def sdk_id(self) -> str:
        return self._sdk_id

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    def get_activity_details(self, encrypted_connect_token: str) -> ActivityDetails:
        """
        Return the profile a user shared with this application.

        Args:
            encrypted_connect_token: Token from the share callback URL

        Raises:
            TokenDecryptionFailure: If the token cannot be decrypted
            ActivityDetailsError: If the server rejects the request
            ReceiptMissing: If the response has no receipt
            OutcomeUnsuccessful: If the share did not succeed
        """
        return self._profile_service.get_activity_details(encrypted_connect_token)

    def perform_aml_check(self, aml_profile: AmlProfile) -> AmlResult:
        """Run an AML check; raises AmlError if the server rejects it."""
        return self._aml_service.perform_aml_check(aml_profile)

    def create_share_url(self, dynamic_scenario: DynamicScenario) -> ShareUrlResult:
        return self._share_url_service.create_share_url(dynamic_scenario)

    @staticmethod
    def get_login_url(app_id: str) -> str:
        """URL of the Yoti connect page for an application."""
        return f"{CONNECT_BASE_URL}/{app_id}"


class DocScanClient:
    """
    Client for the Doc Scan API.

    Takes the same arguments as YotiClient; requests go to
    config.doc_scan_api_url and carry the "sdkId" query parameter.
    """

    def __init__(
        self,
        sdk_id: str,
        pem: KeyArg,
        config: Optional[ClientConfig] = None,
    ) -> None:
        _check_sdk_id(sdk_id)
        self._config = config or ClientConfig()
        self._executor = RequestExecutor.from_config(load_key(pem), self._config, DOC_SCAN_SCHEME)
        self._service = DocScanService(sdk_id, self._executor, self._config.doc_scan_api_url)

        logger.info(f"Doc Scan client ready for {self._config.doc_scan_api_url}")

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    def create_session(self, specification: SessionSpecification) -> CreateSessionResult:
        return self._service.create_session(specification)

    def get_session(self, session_id: str) -> GetSessionResult:
        return self._service.retrieve_session(session_id)

    def delete_session(self, session_id: str) -> None:
        self._service.delete_session(session_id)

    def get_media_content(self, session_id: str, media_id: str) -> Optional[Media]:
        return self._service.get_media_content(session_id, media_id)

    async def get_media_content_async(self, session_id: str, media_id: str) -> Optional[Media]:
        return await self._service.get_media_content_async(session_id, media_id)

    def delete_media_content(self, session_id: str, media_id: str) -> None:
        self._service.delete_media_content(session_id, media_id)

    def get_supported_documents(self) -> SupportedDocumentsResponse:
        return self._service.get_supported_documents()
