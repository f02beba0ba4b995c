"""
Pytest configuration for yoti-sdk tests.
"""

from unittest.mock import MagicMock

import pytest

from yoti_sdk._core.transport import Response
from yoti_sdk.keys import KeyMaterial
from tests.utils import (
    CONNECT_TOKEN_PATH,
    EMPTY_TOKEN_PATH,
    KEY_PATH,
    OTHER_KEY_PATH,
)

# Note: With pytest-asyncio in auto mode, no event_loop fixture needed


@pytest.fixture
def key_pem():
    """PEM text of the test key."""
    return KEY_PATH.read_text()


@pytest.fixture
def key_material():
    """KeyMaterial for the test key."""
    return KeyMaterial.from_file_path(KEY_PATH)


@pytest.fixture
def other_key():
    """KeyMaterial for a second, unrelated key."""
    return KeyMaterial.from_file_path(OTHER_KEY_PATH)


@pytest.fixture
def connect_token():
    """Connect token encrypted for the test key."""
    return CONNECT_TOKEN_PATH.read_text().strip()


@pytest.fixture
def empty_token():
    """Token whose plaintext is empty."""
    return EMPTY_TOKEN_PATH.read_text().strip()


@pytest.fixture
def mock_transport():
    """Mock Transport returning an empty 200 response by default."""
    transport = MagicMock()
    transport.send.return_value = Response(status_code=200, body=b"{}")
    return transport
