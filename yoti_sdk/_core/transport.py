"""
HTTP transport for yoti-sdk.

The authenticator produces a plain (method, url, headers, body) request;
a Transport sends it and reports status, headers and body back. The
default RequestsTransport uses requests with one Session per thread, so a
single transport can be shared by concurrent callers while still pooling
connections.

Custom transports only need a matching send() method:

    class MyTransport:
        def send(self, method, url, headers, body, timeout):
            ...
            return Response(status_code=..., body=..., headers=...)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Protocol

import requests
from requests.structures import CaseInsensitiveDict

from yoti_sdk.errors import TransportFailure

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Response:
    """
    HTTP response as received from the transport.

    Attributes:
        status_code: HTTP status code
        body: Raw body bytes
        headers: Case-insensitive response headers
    """
    status_code: int
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CaseInsensitiveDict):
            object.__setattr__(self, "headers", CaseInsensitiveDict(self.headers))

    @property
    def text(self) -> str:
        """Body decoded as UTF-8 (invalid bytes replaced)."""
        return self.body.decode("utf-8", errors="replace")

    def header(self, name: str, default: str = "") -> str:
        """Get a header value case-insensitively."""
        return self.headers.get(name, default)


class Transport(Protocol):
    """Send an HTTP request and return the raw response."""

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
        timeout: float,
    ) -> Response:
        ...


class RequestsTransport:
    """
    Transport backed by requests.

    Never raises for HTTP status codes; status interpretation belongs to
    the caller. Network-level failures are raised as TransportFailure.
    """

    def __init__(self, verify: bool = True) -> None:
        self._verify = verify
        self._local = threading.local()
        self._lock = threading.Lock()
        self._sessions: List[requests.Session] = []

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.verify = self._verify
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
        timeout: float = DEFAULT_TIMEOUT,
    ) -> Response:
        try:
            response = self._session().request(
                method,
                url,
                headers=dict(headers),
                data=body,
                timeout=timeout,
            )
        except requests.RequestException as e:
            # requests messages embed the URL, which may carry a token
            logger.debug(f"{method} request failed before a response: {type(e).__name__}")
            raise TransportFailure(f"Network error: {type(e).__name__}") from e

        return Response(
            status_code=response.status_code,
            body=response.content,
            headers=CaseInsensitiveDict(response.headers),
        )

    def close(self) -> None:
        """
        Close every session this transport opened, in any thread.

        Threads that send again afterwards open a fresh session.
        """
        with self._lock:
            sessions, self._sessions = self._sessions, []
            # Invalidates thread-local sessions held by other threads
            self._local = threading.local()
        for session in sessions:
            session.close()
