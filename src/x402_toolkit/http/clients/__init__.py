"""HTTP client wrappers with automatic x402 payment handling.

Provides wrappers for httpx (async) and requests (sync) that pay
402 Payment Required responses and retry once.
"""

# httpx (async)
from .httpx import (
    wrap_httpx_with_payment,
    x402_httpx_transport,
    x402AsyncTransport,
    x402HttpxClient,
)

# requests (sync)
from .requests import (
    wrap_requests_with_payment,
    x402_http_adapter,
    x402_requests,
    x402HTTPAdapter,
)

__all__ = [
    # httpx
    "x402AsyncTransport",
    "x402_httpx_transport",
    "wrap_httpx_with_payment",
    "x402HttpxClient",
    # requests
    "x402HTTPAdapter",
    "wrap_requests_with_payment",
    "x402_http_adapter",
    "x402_requests",
]
