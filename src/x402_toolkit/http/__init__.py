"""HTTP layer: wire constants, header helpers and payment-aware clients."""

from .constants import (
    DEFAULT_REGISTRY_URL,
    DEFAULT_TIMEOUT,
    PAYMENT_RESPONSE_HEADER,
    PAYMENT_SIGNATURE_HEADER,
    X_PAYMENT_HEADER,
    X_PAYMENT_RESPONSE_HEADER,
)
from .utils import (
    decode_payment_response_header,
    get_payment_response,
    payment_header_name,
)

__all__ = [
    "DEFAULT_REGISTRY_URL",
    "DEFAULT_TIMEOUT",
    "PAYMENT_SIGNATURE_HEADER",
    "X_PAYMENT_HEADER",
    "PAYMENT_RESPONSE_HEADER",
    "X_PAYMENT_RESPONSE_HEADER",
    "decode_payment_response_header",
    "get_payment_response",
    "payment_header_name",
]
