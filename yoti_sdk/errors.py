"""
Exception types for yoti-sdk.

Provides typed exceptions for:
- Key material and cryptographic failures
- Transport and server (HTTP status) failures
- Response mapping failures
"""

from __future__ import annotations

from typing import Optional


class YotiError(Exception):
    """Base exception for all yoti-sdk errors."""
    pass


class ConfigError(YotiError):
    """
    Raised when client configuration is invalid.

    This includes:
    - Empty SDK ID
    - Missing PEM
    - Invalid API URLs or timeouts
    """
    pass


# =============================================================================
# Key Material Errors
# =============================================================================


class InvalidKeyFormat(YotiError):
    """Raised when PEM text cannot be parsed into an RSA private key."""
    pass


class KeyFileNotFound(YotiError, FileNotFoundError):
    """Raised when a PEM file path does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"PEM file was not found: {path}")


class DecryptionFailure(YotiError):
    """Raised when a private-key decryption fails."""
    pass


class TokenDecryptionFailure(DecryptionFailure):
    """
    Raised when an inbound opaque token cannot be decrypted.

    Covers empty or malformed input, a key mismatch, and an empty
    plaintext. The underlying cryptographic error, if any, is chained.
    """
    pass


class SigningFailure(YotiError):
    """Raised when the request signature cannot be computed."""
    pass


class PayloadEncodingError(SigningFailure):
    """Raised when a payload cannot be serialized to canonical bytes."""
    pass


# =============================================================================
# Transport / Server Errors
# =============================================================================


class TransportFailure(YotiError):
    """
    Raised when the underlying HTTP send could not complete.

    This includes:
    - Connection errors
    - DNS failures
    - Transport-level timeouts
    """
    pass


class ServerError(YotiError):
    """
    Raised when the remote service responds outside the 2xx range.

    Carries the raw status code and body for diagnostics.

    Example:
        try:
            client.perform_aml_check(profile)
        except ServerError as e:
            logger.warning(f"Rejected with {e.status_code}: {e.body!r}")
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: bytes = b"",
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={str(self)!r}, "
            f"status_code={self.status_code!r})"
        )


class ActivityDetailsError(ServerError):
    """Profile (activity details) request was rejected."""
    pass


class AmlError(ServerError):
    """AML check request was rejected."""
    pass


class ShareUrlError(ServerError):
    """Dynamic share URL request was rejected."""
    pass


class DocScanError(ServerError):
    """Doc Scan request was rejected."""
    pass


class SandboxError(ServerError):
    """Sandbox request was rejected."""
    pass


class MalformedResponse(YotiError):
    """Raised when a response body cannot be parsed into the expected shape."""
    pass


# =============================================================================
# Result Mapping Errors
# =============================================================================


class ResultError(YotiError):
    """Base class for domain-level result failures."""
    pass


class ReceiptMissing(ResultError):
    """The profile response did not contain a receipt."""
    pass


class OutcomeUnsuccessful(ResultError):
    """
    The receipt's sharing outcome was not SUCCESS.

    Attributes:
        outcome: The sharing outcome reported by the API
    """

    def __init__(self, outcome: Optional[str]):
        self.outcome = outcome
        super().__init__(f"Outcome was unsuccessful: {outcome}")
