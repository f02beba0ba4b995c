"""
Doc Scan (identity document verification) sessions and media.

Doc Scan requests identify the application with the "sdkId" query
parameter rather than "appId".

Usage:
    client = DocScanClient(sdk_id, "./keys/application.pem")
    session = client.create_session(
        SessionSpecification(client_session_token_ttl=600, user_tracking_id="user-1")
    )
    result = client.get_session(session.session_id)

    # Media can be fetched without blocking an event loop
    media = await client.get_media_content_async(session.session_id, media_id)
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from yoti_sdk._core.transport import Response
from yoti_sdk.errors import DocScanError
from yoti_sdk.executor import assert_success, decode_json, map_response
from yoti_sdk.request import Payload
from yoti_sdk.services.base import ServiceBase, require_keys

logger = logging.getLogger(__name__)

SESSIONS_ENDPOINT = "/sessions"
SESSION_ENDPOINT = "/sessions/{session_id}"
MEDIA_ENDPOINT = "/sessions/{session_id}/media/{media_id}/content"
SUPPORTED_DOCUMENTS_ENDPOINT = "/supported-documents"


@dataclass(frozen=True)
class SessionSpecification:
    """
    Definition of a Doc Scan session.

    Unset fields are omitted from the request body. requested_checks,
    requested_tasks and sdk_config are sent as given.
    """
    client_session_token_ttl: Optional[int] = None
    resources_ttl: Optional[int] = None
    user_tracking_id: Optional[str] = None
    notifications: Optional[Dict[str, Any]] = None
    requested_checks: List[Dict[str, Any]] = field(default_factory=list)
    requested_tasks: List[Dict[str, Any]] = field(default_factory=list)
    sdk_config: Optional[Dict[str, Any]] = None
    required_documents: List[Dict[str, Any]] = field(default_factory=list)
    block_biometric_consent: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "client_session_token_ttl": self.client_session_token_ttl,
            "resources_ttl": self.resources_ttl,
            "user_tracking_id": self.user_tracking_id,
            "notifications": self.notifications,
            "requested_checks": self.requested_checks or None,
            "requested_tasks": self.requested_tasks or None,
            "sdk_config": self.sdk_config,
            "required_documents": self.required_documents or None,
            "block_biometric_consent": self.block_biometric_consent,
        }
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class CreateSessionResult:
    session_id: str
    client_session_token: str
    client_session_token_ttl: Optional[int] = None

    @classmethod
    def from_response(cls, response: Response) -> "CreateSessionResult":
        data = require_keys(
            decode_json(response),
            ("session_id", "client_session_token"),
            "Create session",
        )
        return cls(
            session_id=data["session_id"],
            client_session_token=data["client_session_token"],
            client_session_token_ttl=data.get("client_session_token_ttl"),
        )


@dataclass(frozen=True)
class GetSessionResult:
    """
    Current state of a session.

    Checks, resources and biometric consent are kept as returned in raw.
    """
    session_id: Optional[str]
    state: Optional[str]
    client_session_token: Optional[str] = None
    client_session_token_ttl: Optional[int] = None
    user_tracking_id: Optional[str] = None
    checks: List[Dict[str, Any]] = field(default_factory=list)
    resources: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, response: Response) -> "GetSessionResult":
        data = require_keys(decode_json(response), (), "Session")
        return cls(
            session_id=data.get("session_id"),
            state=data.get("state"),
            client_session_token=data.get("client_session_token"),
            client_session_token_ttl=data.get("client_session_token_ttl"),
            user_tracking_id=data.get("user_tracking_id"),
            checks=data.get("checks") or [],
            resources=data.get("resources") or {},
            raw=data,
        )


@dataclass(frozen=True)
class Media:
    """Binary media retrieved from a session."""
    mime_type: str
    content: bytes

    @property
    def base64_content(self) -> str:
        return base64.b64encode(self.content).decode("ascii")


def media_from_response(response: Response) -> Optional[Media]:
    """
    Map a media response; 204 No Content means there is no media.
    """
    if response.status_code == 204:
        return None
    mime_type = response.header("Content-Type", "application/octet-stream")
    return Media(mime_type=mime_type, content=response.body)


@dataclass(frozen=True)
class SupportedDocumentsResponse:
    supported_countries: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_response(cls, response: Response) -> "SupportedDocumentsResponse":
        data = require_keys(decode_json(response), (), "Supported documents")
        return cls(supported_countries=data.get("supported_countries") or [])


class DocScanService(ServiceBase):
    """Session and media operations on the Doc Scan API."""

    def create_session(self, specification: SessionSpecification) -> CreateSessionResult:
        """
        Create a Doc Scan session.

        Raises:
            DocScanError: If the server responds outside 2xx
            MalformedResponse: If the response lacks session_id or token
        """
        request = (
            self._request(SESSIONS_ENDPOINT)
            .with_post()
            .with_payload(Payload.from_json_data(specification))
            .build()
        )
        response = self._executor.execute(request)
        result = map_response(response, CreateSessionResult.from_response, DocScanError)
        logger.info(f"Created Doc Scan session {result.session_id}")
        return result

    def retrieve_session(self, session_id: str) -> GetSessionResult:
        """
        Raises:
            DocScanError: If the server responds outside 2xx
        """
        request = (
            self._request(SESSION_ENDPOINT.format(session_id=session_id))
            .with_get()
            .build()
        )
        response = self._executor.execute(request)
        return map_response(response, GetSessionResult.from_response, DocScanError)

    def delete_session(self, session_id: str) -> None:
        """Delete a session and all of its resources."""
        request = (
            self._request(SESSION_ENDPOINT.format(session_id=session_id))
            .with_delete()
            .build()
        )
        assert_success(self._executor.execute(request), DocScanError)
        logger.info(f"Deleted Doc Scan session {session_id}")

    def _media_request(self, session_id: str, media_id: str):
        return (
            self._request(MEDIA_ENDPOINT.format(session_id=session_id, media_id=media_id))
            .with_get()
            .build()
        )

    def get_media_content(self, session_id: str, media_id: str) -> Optional[Media]:
        """
        Fetch a piece of media.

        Returns:
            Media, or None if the server returned no content
        """
        response = self._executor.execute(self._media_request(session_id, media_id))
        return map_response(response, media_from_response, DocScanError)

    async def get_media_content_async(self, session_id: str, media_id: str) -> Optional[Media]:
        """Non-blocking variant of get_media_content()."""
        response = await self._executor.execute_async(self._media_request(session_id, media_id))
        return map_response(response, media_from_response, DocScanError)

    def delete_media_content(self, session_id: str, media_id: str) -> None:
        request = (
            self._request(MEDIA_ENDPOINT.format(session_id=session_id, media_id=media_id))
            .with_delete()
            .build()
        )
        assert_success(self._executor.execute(request), DocScanError)

    def get_supported_documents(self) -> SupportedDocumentsResponse:
        """List supported countries and document types (no SDK ID needed)."""
        request = self._request(SUPPORTED_DOCUMENTS_ENDPOINT, identify=False).with_get().build()
        response = self._executor.execute(request)
        return map_response(response, SupportedDocumentsResponse.from_response, DocScanError)
