"""
API service façades built on the signing core.

Each service holds the SDK ID, a shared RequestExecutor and its API base
URL; it builds frozen requests, executes them, and maps responses through
yoti_sdk.executor.map_response().
"""

from yoti_sdk.services.base import ServiceBase
from yoti_sdk.services.profile import (
    ActivityDetails,
    ProfileService,
    Receipt,
)
from yoti_sdk.services.aml import (
    AmlAddress,
    AmlProfile,
    AmlResult,
    AmlService,
)
from yoti_sdk.services.share_url import (
    DynamicPolicy,
    DynamicPolicyBuilder,
    DynamicScenario,
    DynamicScenarioBuilder,
    ShareUrlResult,
    ShareUrlService,
)
from yoti_sdk.services.doc_scan import (
    CreateSessionResult,
    DocScanService,
    GetSessionResult,
    Media,
    SessionSpecification,
    SupportedDocumentsResponse,
)
from yoti_sdk.services.sandbox import (
    SandboxAttribute,
    SandboxClient,
    TokenRequest,
)

__all__ = [
    "ServiceBase",
    # Profile
    "ActivityDetails",
    "ProfileService",
    "Receipt",
    # AML
    "AmlAddress",
    "AmlProfile",
    "AmlResult",
    "AmlService",
    # Share URL
    "DynamicPolicy",
    "DynamicPolicyBuilder",
    "DynamicScenario",
    "DynamicScenarioBuilder",
    "ShareUrlResult",
    "ShareUrlService",
    # Doc Scan
    "CreateSessionResult",
    "DocScanService",
    "GetSessionResult",
    "Media",
    "SessionSpecification",
    "SupportedDocumentsResponse",
    # Sandbox
    "SandboxAttribute",
    "SandboxClient",
    "TokenRequest",
]
