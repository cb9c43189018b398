"""
appspider.enterprise.clients 패키지 공개 API

- EnterpriseRestClient 를 기본 구현체로 export
- Protocol 및 Config도 함께 export
"""

from .protocols import (
    HttpClientProtocol,
    EnterpriseClientProtocol,
    HttpClientConfig,
)

from .http_client import RequestsHttpClient

from .enterprise_client import (
    EnterpriseRestClient,
    ReportStream,
)

__all__ = [
    # protocols
    "HttpClientProtocol",
    "EnterpriseClientProtocol",

    # config
    "HttpClientConfig",

    # http client
    "RequestsHttpClient",

    # enterprise client
    "EnterpriseRestClient",
    "ReportStream",
]
