"""
yoti-sdk: Authenticated requests and token protection for the Yoti APIs.

Every outbound request is signed with the application's RSA key and bound
to a single-use nonce and timestamp; inbound connect tokens are decrypted
with the same key.

This package provides:
- KeyMaterial for loading the application key and deriving its auth key
- RequestAuthenticator / RequestExecutor for signed sync and async calls
- TokenCipher for decrypting connect tokens
- YotiClient (profile, AML, dynamic share URLs) and DocScanClient
- SandboxClient for test tokens

Installation:
    pip install yoti-sdk
    pip install yoti-sdk[test]   # With the test tooling

Quickstart (Profile):
    from yoti_sdk import YotiClient

    client = YotiClient("your-sdk-id", "./keys/application.pem")
    details = client.get_activity_details(token_from_callback)
    print(details.remember_me_id)

Quickstart (AML):
    from yoti_sdk import AmlAddress, AmlProfile

    result = client.perform_aml_check(
        AmlProfile("Edward Richard George", "Heath", AmlAddress("GBR"))
    )
    if result.on_pep_list:
        ...

Quickstart (Low level):
    from yoti_sdk import KeyMaterial, RequestBuilder, RequestExecutor

    executor = RequestExecutor(KeyMaterial.from_file_path("./keys/application.pem"))
    request = (
        RequestBuilder()
        .with_base_url("https://api.yoti.com/api/v1")
        .with_endpoint("/some-endpoint")
        .with_get()
        .with_query_param("appId", "your-sdk-id")
        .build()
    )
    response = await executor.execute_async(request)
"""

from yoti_sdk.types import (
    AUTH_KEY_HEADER,
    CONNECT_SCHEME,
    DIGEST_HEADER,
    DOC_SCAN_SCHEME,
    LEGACY_SCHEME,
    SDK_HEADER,
    SDK_VERSION_HEADER,
    AuthScheme,
    HttpMethod,
)
from yoti_sdk.errors import (
    ActivityDetailsError,
    AmlError,
    ConfigError,
    DecryptionFailure,
    DocScanError,
    InvalidKeyFormat,
    KeyFileNotFound,
    MalformedResponse,
    OutcomeUnsuccessful,
    PayloadEncodingError,
    ReceiptMissing,
    ResultError,
    SandboxError,
    ServerError,
    ShareUrlError,
    SigningFailure,
    TokenDecryptionFailure,
    TransportFailure,
    YotiError,
)
from yoti_sdk.keys import KeyMaterial, load_key
from yoti_sdk.request import (
    AuthenticatedRequest,
    Payload,
    RequestBuildError,
    RequestBuilder,
)
from yoti_sdk.auth import (
    RequestAuthenticator,
    SignedRequest,
    canonical_string,
    current_timestamp,
    generate_nonce,
)
from yoti_sdk.executor import (
    RequestExecutor,
    assert_success,
    decode_json,
    is_success,
    map_response,
)
from yoti_sdk.token import TokenCipher, decrypt_token
from yoti_sdk.config import ClientConfig
from yoti_sdk._core.transport import RequestsTransport, Response, Transport
from yoti_sdk._core.version import SDK_IDENTIFIER, SDK_VERSION
from yoti_sdk.services import (
    ActivityDetails,
    AmlAddress,
    AmlProfile,
    AmlResult,
    CreateSessionResult,
    DynamicPolicy,
    DynamicPolicyBuilder,
    DynamicScenario,
    DynamicScenarioBuilder,
    GetSessionResult,
    Media,
    Receipt,
    SandboxAttribute,
    SandboxClient,
    SessionSpecification,
    ShareUrlResult,
    SupportedDocumentsResponse,
    TokenRequest,
)
from yoti_sdk.client import DocScanClient, YotiClient

__version__ = SDK_VERSION

__all__ = [
    # Version
    "__version__",
    "SDK_VERSION",
    "SDK_IDENTIFIER",
    # Types
    "AuthScheme",
    "HttpMethod",
    "CONNECT_SCHEME",
    "DOC_SCAN_SCHEME",
    "LEGACY_SCHEME",
    "AUTH_KEY_HEADER",
    "DIGEST_HEADER",
    "SDK_HEADER",
    "SDK_VERSION_HEADER",
    # Errors
    "YotiError",
    "ConfigError",
    "InvalidKeyFormat",
    "KeyFileNotFound",
    "DecryptionFailure",
    "TokenDecryptionFailure",
    "SigningFailure",
    "PayloadEncodingError",
    "TransportFailure",
    "ServerError",
    "ActivityDetailsError",
    "AmlError",
    "ShareUrlError",
    "DocScanError",
    "SandboxError",
    "MalformedResponse",
    "ResultError",
    "ReceiptMissing",
    "OutcomeUnsuccessful",
    # Keys / tokens
    "KeyMaterial",
    "load_key",
    "TokenCipher",
    "decrypt_token",
    # Requests
    "AuthenticatedRequest",
    "Payload",
    "RequestBuildError",
    "RequestBuilder",
    "RequestAuthenticator",
    "SignedRequest",
    "canonical_string",
    "current_timestamp",
    "generate_nonce",
    # Execution
    "RequestExecutor",
    "RequestsTransport",
    "Response",
    "Transport",
    "assert_success",
    "decode_json",
    "is_success",
    "map_response",
    # Config
    "ClientConfig",
    # Clients
    "YotiClient",
    "DocScanClient",
    "SandboxClient",
    # Results
    "ActivityDetails",
    "Receipt",
    "AmlAddress",
    "AmlProfile",
    "AmlResult",
    "DynamicPolicy",
    "DynamicPolicyBuilder",
    "DynamicScenario",
    "DynamicScenarioBuilder",
    "ShareUrlResult",
    "CreateSessionResult",
    "GetSessionResult",
    "Media",
    "SessionSpecification",
    "SupportedDocumentsResponse",
    "SandboxAttribute",
    "TokenRequest",
]
