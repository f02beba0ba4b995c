"""
Shared constants and helpers for yoti-sdk tests.
"""

import base64
import json
from pathlib import Path

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from yoti_sdk._core.transport import Response

FIXTURES_DIR = Path(__file__).parent / "fixtures"

KEY_PATH = FIXTURES_DIR / "test-key.pem"
OTHER_KEY_PATH = FIXTURES_DIR / "other-key.pem"
CONNECT_TOKEN_PATH = FIXTURES_DIR / "connect-token.txt"
EMPTY_TOKEN_PATH = FIXTURES_DIR / "empty-token.txt"

SDK_ID = "SDK_ID"
FIXED_NONCE = "fixed-nonce"
FIXED_TIMESTAMP = 1600000000000

# base64(DER SubjectPublicKeyInfo) of test-key.pem
AUTH_KEY = (
    "MIIBIjANBgkqhkiG9w0BAQEFAAOCAQ8AMIIBCgKCAQEA0B0UxQzJ+R1/Vz8IbrwThBIFrsB1V58N"
    "ybVmeNtQ6jwdSoB467CcvfzXX9BgCAXY7K6lPKEL7JUlKq0/KLWiiuf1huwTICEDwCCNZDciLDKp"
    "A1sxHBaP4mCmqHJrTtqbtxRhWgSm/hgiJ5KX8OjCKhvCOE9kAB1SSn5D/tu3fNRqo1n/GHOjAVOa"
    "T+BND5S/GxxbijNKhgYPUahv16K6eaLcfc89Y6qTkLd2iOPfpj/S0btY5dEioEHMU2+YYn6mrl0f"
    "yULXa3qFA8sGaOjC07lbzQbmG9KNlzRLGQaBD3oP//CUMalHEFeuIKlpSJRiUastbc1k7WRFWRiF"
    "/4uyvwIDAQAB"
)

# Plaintext of connect-token.txt
TOKEN_PLAINTEXT = "xXNplE0DTZOG6GAHBA+TFbfaLSqVm9HyP8q0oJHCpiNRD1ceYOPrFYGyJ1FlVVhh"

# Digest of GET&/profile/abc?appId=SDK_ID&nonce=fixed-nonce&timestamp=1600000000000
GET_PROFILE_DIGEST = (
    "dTkRvtB4Ygu0hc8hJ/rLsbPSj/s9cFroj+zIPBHS6v3KXHHnhFzXN11bE+LOFOl7FUYeDWQJ8aP5"
    "JQSgQCmhIEk9uAJKK9iODV4ei84clGO4gCMlRnuKah3Yg7MABUrnWoTxmIYHuUJ65NLvJKgtVWCW"
    "RvaNt+rIJ8GM0FF9GdUBnNqspDYaVFLACwglCzzoGmT1Ej5ENfV5YAVjBB2w9+If7zpZzufBve7X"
    "vhJI+ma1hdcVmUXjbYPvvcMkmhtpWARIMAG3NHLQsSGfB5dJiRqN9hphrlgwxQKTIGjEr7dUuUNm"
    "uTim1EpWFnZEAZVc/2xFNa3jYECo09TJIwQoUQ=="
)

# Digest of POST&/aml-check?appId=SDK_ID&nonce=fixed-nonce&timestamp=1600000000000&eyJhIjoxfQ==
POST_AML_DIGEST = (
    "PUn+bgDDikD3AcdyDdaFblNb2lOe11pNF5di3I/iiysjvRFYUzo3qc1c1iR4oj6M5HQqDhuxGjEM"
    "w6Al29JMVBYAwtrnEJUCNELoAzeEakNpXbh9/RoPokCxcgDA/GK15TnLJJnj1Ml8WKsH0uSjE/QZ"
    "ucceDOmivqzYhrSbRdBbOeUEm90YfxGCj6sSDB1nH+W/RGMNvh5cmv9Z8aO/nutEJR2WPd2xcSeluNk"
    "9PmaKO9Zbkb2af87Lpt+FZsYZF+P5zZ0gbKfCpUcDBvYhDmq6gTBfGQoGMpAXAIIPAOfyhpuGc1g"
    "jxH10bcTj7rV5N1GluzriH2VXacjtDLqi5w=="
)


def json_response(data, status_code=200, headers=None):
    """Build a transport Response carrying a JSON body."""
    return Response(
        status_code=status_code,
        body=json.dumps(data).encode("utf-8"),
        headers=headers or {"Content-Type": "application/json"},
    )


def verify_digest(key, sent, base_url):
    """
    Check the X-Yoti-Auth-Digest of a sent request against the public key.

    `sent` is the (method, url, headers, body) a transport received. The
    signing string is rebuilt from the URL relative to base_url; raises
    InvalidSignature on mismatch.
    """
    method, url, headers, body = sent
    parts = [method, url[len(base_url):]]
    if body is not None:
        parts.append(base64.b64encode(body).decode("ascii"))

    key._private_key.public_key().verify(
        base64.b64decode(headers["X-Yoti-Auth-Digest"]),
        "&".join(parts).encode("utf-8"),
        padding.PKCS1v15(),
        hashes.SHA256(),
    )
