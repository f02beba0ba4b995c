"""
Tests for yoti_sdk.auth module.

Tests nonce/timestamp generation, canonical signing strings, digests and
authentication headers.
"""

import time
from urllib.parse import parse_qsl, urlsplit

import pytest

from yoti_sdk.auth import (
    RequestAuthenticator,
    SignedRequest,
    canonical_string,
    current_timestamp,
    generate_nonce,
    serialize_query,
)
from yoti_sdk.errors import SigningFailure
from yoti_sdk.request import Payload, RequestBuilder
from yoti_sdk.types import (
    AUTH_KEY_HEADER,
    DIGEST_HEADER,
    DOC_SCAN_SCHEME,
    LEGACY_SCHEME,
    SDK_HEADER,
    SDK_VERSION_HEADER,
)
from tests.utils import (
    AUTH_KEY,
    FIXED_NONCE,
    FIXED_TIMESTAMP,
    GET_PROFILE_DIGEST,
    POST_AML_DIGEST,
    SDK_ID,
)

BASE_URL = "https://api.yoti.com/api/v1"


def _profile_request(**kwargs):
    builder = (
        RequestBuilder()
        .with_base_url(BASE_URL)
        .with_endpoint("/profile/abc")
        .with_get()
        .with_query_param("appId", SDK_ID)
    )
    if kwargs.get("fixed", True):
        builder.with_nonce(FIXED_NONCE).with_timestamp(FIXED_TIMESTAMP)
    return builder.build()


def _aml_request():
    return (
        RequestBuilder()
        .with_base_url(BASE_URL)
        .with_endpoint("/aml-check")
        .with_post()
        .with_query_param("appId", SDK_ID)
        .with_payload(Payload.from_json_data({"a": 1}))
        .with_nonce(FIXED_NONCE)
        .with_timestamp(FIXED_TIMESTAMP)
        .build()
    )


class TestNonceAndTimestamp:
    """Tests for nonce and timestamp generation."""

    def test_nonce_is_uuid4(self):
        """Nonce is a canonical UUID4 string."""
        nonce = generate_nonce()
        assert len(nonce) == 36
        assert nonce[14] == "4"

    def test_nonce_uniqueness(self):
        """Each nonce should be unique."""
        nonces = [generate_nonce() for _ in range(100)]
        assert len(set(nonces)) == 100

    def test_timestamp_is_milliseconds(self):
        """Timestamp is close to time.time() in ms."""
        before = int(time.time() * 1000)
        ts = current_timestamp()
        after = int(time.time() * 1000)
        assert before <= ts <= after


class TestCanonicalString:
    """Tests for the canonical signing string."""

    def test_get_without_payload(self):
        """No payload segment for bodiless requests."""
        assert canonical_string(_profile_request()) == (
            "GET&/profile/abc?appId=SDK_ID&nonce=fixed-nonce&timestamp=1600000000000"
        )

    def test_post_with_payload(self):
        """Payload is appended as base64."""
        assert canonical_string(_aml_request()) == (
            "POST&/aml-check?appId=SDK_ID&nonce=fixed-nonce"
            "&timestamp=1600000000000&eyJhIjoxfQ=="
        )

    def test_base_url_path_not_signed(self):
        """Only the endpoint path appears in the signing string."""
        assert "/api/v1" not in canonical_string(_profile_request())

    def test_query_sorted(self):
        """Insertion order does not change the canonical string."""
        a = (
            RequestBuilder().with_base_url(BASE_URL).with_endpoint("/x").with_get()
            .with_query_param("zeta", "1").with_query_param("alpha", "2")
            .with_nonce("n").with_timestamp(1).build()
        )
        b = (
            RequestBuilder().with_base_url(BASE_URL).with_endpoint("/x").with_get()
            .with_query_param("alpha", "2").with_query_param("zeta", "1")
            .with_nonce("n").with_timestamp(1).build()
        )
        assert canonical_string(a) == canonical_string(b)
        assert canonical_string(a) == "GET&/x?alpha=2&nonce=n&timestamp=1&zeta=1"

    def test_query_values_encoded(self):
        """Reserved characters in values are form-encoded."""
        assert serialize_query((("q", "a b&c"),)) == "q=a+b%26c"

    def test_requires_nonce(self):
        """Unprepared requests cannot be canonicalized."""
        with pytest.raises(SigningFailure):
            canonical_string(_profile_request(fixed=False))


class TestDigest:
    """Tests for RequestAuthenticator digests."""

    def test_known_get_digest(self, key_material):
        """GET digest matches the precomputed signature."""
        authenticator = RequestAuthenticator(key_material)
        assert authenticator.compute_digest(_profile_request()) == GET_PROFILE_DIGEST

    def test_known_post_digest(self, key_material):
        """POST digest matches the precomputed signature."""
        authenticator = RequestAuthenticator(key_material)
        signed = authenticator.sign(_aml_request())
        assert signed.headers[DIGEST_HEADER] == POST_AML_DIGEST

    def test_same_state_same_digest(self, key_material):
        """Signing the same frozen request twice is deterministic."""
        authenticator = RequestAuthenticator(key_material)
        request = _profile_request()
        assert authenticator.sign(request) == authenticator.sign(request)

    def test_payload_changes_digest(self, key_material):
        """A different body yields a different digest."""
        authenticator = RequestAuthenticator(key_material)
        base = _aml_request()
        other = (
            RequestBuilder().with_base_url(BASE_URL).with_endpoint("/aml-check").with_post()
            .with_query_param("appId", SDK_ID)
            .with_payload(Payload.from_json_data({"a": 2}))
            .with_nonce(FIXED_NONCE).with_timestamp(FIXED_TIMESTAMP)
            .build()
        )
        assert authenticator.compute_digest(base) != authenticator.compute_digest(other)

    def test_method_changes_digest(self, key_material):
        """Method is part of the signature."""
        authenticator = RequestAuthenticator(key_material)
        get = _profile_request()
        delete = (
            RequestBuilder().with_base_url(BASE_URL).with_endpoint("/profile/abc").with_delete()
            .with_query_param("appId", SDK_ID)
            .with_nonce(FIXED_NONCE).with_timestamp(FIXED_TIMESTAMP)
            .build()
        )
        assert authenticator.compute_digest(get) != authenticator.compute_digest(delete)

    def test_path_changes_digest(self, key_material):
        """Re-signing after changing only the endpoint changes the digest header."""
        authenticator = RequestAuthenticator(key_material)
        original = authenticator.sign(_profile_request())
        moved = authenticator.sign(
            RequestBuilder().with_base_url(BASE_URL).with_endpoint("/profile/abd").with_get()
            .with_query_param("appId", SDK_ID)
            .with_nonce(FIXED_NONCE).with_timestamp(FIXED_TIMESTAMP)
            .build()
        )
        assert moved.nonce == original.nonce
        assert moved.timestamp == original.timestamp
        assert moved.headers[DIGEST_HEADER] != original.headers[DIGEST_HEADER]

    def test_other_key_changes_digest(self, key_material, other_key):
        request = _profile_request()
        assert (
            RequestAuthenticator(key_material).compute_digest(request)
            != RequestAuthenticator(other_key).compute_digest(request)
        )


class TestSign:
    """Tests for RequestAuthenticator.sign."""

    def test_returns_signed_request(self, key_material):
        """Output is a plain tuple with url, headers and body."""
        signed = RequestAuthenticator(key_material).sign(_aml_request())
        assert isinstance(signed, SignedRequest)
        assert signed.method == "POST"
        assert signed.body == b'{"a":1}'
        assert signed.url == (
            f"{BASE_URL}/aml-check?appId=SDK_ID&nonce=fixed-nonce&timestamp=1600000000000"
        )

    def test_generates_nonce_and_timestamp(self, key_material):
        """Missing nonce/timestamp are filled from the factories."""
        authenticator = RequestAuthenticator(
            key_material,
            nonce_factory=lambda: FIXED_NONCE,
            clock=lambda: FIXED_TIMESTAMP,
        )
        signed = authenticator.sign(_profile_request(fixed=False))
        assert signed.nonce == FIXED_NONCE
        assert signed.timestamp == FIXED_TIMESTAMP
        assert signed.headers[DIGEST_HEADER] == GET_PROFILE_DIGEST

    def test_nonce_in_url_query(self, key_material):
        """Nonce and timestamp travel as query parameters."""
        signed = RequestAuthenticator(key_material).sign(_profile_request(fixed=False))
        query = dict(parse_qsl(urlsplit(signed.url).query))
        assert query["nonce"] == signed.nonce
        assert query["timestamp"] == str(signed.timestamp)
        assert query["appId"] == SDK_ID

    def test_fresh_nonce_per_sign(self, key_material):
        """Re-signing an unprepared request uses a new nonce."""
        authenticator = RequestAuthenticator(key_material)
        request = _profile_request(fixed=False)
        first = authenticator.sign(request)
        second = authenticator.sign(request)
        assert first.nonce != second.nonce
        assert first.headers[DIGEST_HEADER] != second.headers[DIGEST_HEADER]

    def test_caller_nonce_kept(self, key_material):
        """Caller-supplied nonce and timestamp are not replaced."""
        signed = RequestAuthenticator(key_material).sign(_profile_request())
        assert signed.nonce == FIXED_NONCE
        assert signed.timestamp == FIXED_TIMESTAMP

    def test_prepare_is_idempotent(self, key_material):
        authenticator = RequestAuthenticator(key_material)
        prepared = authenticator.prepare(_profile_request(fixed=False))
        assert authenticator.prepare(prepared) is prepared


class TestHeaders:
    """Tests for authentication headers."""

    def test_auth_key_header(self, key_material):
        """Connect scheme sends X-Yoti-Auth-Key."""
        signed = RequestAuthenticator(key_material).sign(_profile_request())
        assert signed.headers[AUTH_KEY_HEADER] == AUTH_KEY

    def test_legacy_scheme_omits_auth_key(self, key_material):
        """Legacy scheme leaves X-Yoti-Auth-Key to the caller."""
        signed = RequestAuthenticator(key_material, scheme=LEGACY_SCHEME).sign(_profile_request())
        assert AUTH_KEY_HEADER not in signed.headers
        assert signed.headers[DIGEST_HEADER] == GET_PROFILE_DIGEST

    def test_doc_scan_scheme_same_digest(self, key_material):
        """Schemes share one signing algorithm."""
        signed = RequestAuthenticator(key_material, scheme=DOC_SCAN_SCHEME).sign(_profile_request())
        assert signed.headers[DIGEST_HEADER] == GET_PROFILE_DIGEST

    def test_sdk_headers(self, key_material):
        """SDK identity headers are sent when declared."""
        authenticator = RequestAuthenticator(
            key_material, sdk_identifier="Drupal", sdk_version="2.1.0"
        )
        headers = authenticator.sign(_profile_request()).headers
        assert headers[SDK_HEADER] == "Drupal"
        assert headers[SDK_VERSION_HEADER] == "Drupal-2.1.0"

    def test_no_sdk_headers_by_default(self, key_material):
        headers = RequestAuthenticator(key_material).sign(_profile_request()).headers
        assert SDK_HEADER not in headers
        assert SDK_VERSION_HEADER not in headers

    def test_content_type_only_with_payload(self, key_material):
        """Content-Type follows the payload."""
        authenticator = RequestAuthenticator(key_material)
        assert "Content-Type" not in authenticator.sign(_profile_request()).headers
        assert authenticator.sign(_aml_request()).headers["Content-Type"] == "application/json"

    def test_auth_headers_override_caller(self, key_material):
        """Caller headers cannot replace the digest."""
        request = (
            RequestBuilder().with_base_url(BASE_URL).with_endpoint("/profile/abc").with_get()
            .with_query_param("appId", SDK_ID)
            .with_header(DIGEST_HEADER, "forged")
            .with_header("X-Custom", "kept")
            .with_nonce(FIXED_NONCE).with_timestamp(FIXED_TIMESTAMP)
            .build()
        )
        headers = RequestAuthenticator(key_material).sign(request).headers
        assert headers[DIGEST_HEADER] == GET_PROFILE_DIGEST
        assert headers["X-Custom"] == "kept"
