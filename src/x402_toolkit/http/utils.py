"""Header encoding helpers."""

from __future__ import annotations

import base64
import json
from collections.abc import Mapping
from typing import Any, Union

from .constants import (
    PAYMENT_RESPONSE_HEADER,
    PAYMENT_SIGNATURE_HEADER,
    X_PAYMENT_HEADER,
    X_PAYMENT_RESPONSE_HEADER,
)


def safe_base64_encode(data: Union[str, bytes]) -> str:
    """Safely encode string or bytes to base64 string.

    Args:
        data: String or bytes to encode

    Returns:
        Base64 encoded string
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.b64encode(data).decode("utf-8")


def safe_base64_decode(data: str) -> str:
    """Safely decode base64 string to bytes and then to utf-8 string.

    Args:
        data: Base64 encoded string

    Returns:
        Decoded utf-8 string
    """
    return base64.b64decode(data).decode("utf-8")


def payment_header_name(x402_version: int) -> str:
    """Header that carries the payment authorization for a protocol version."""
    return X_PAYMENT_HEADER if x402_version == 1 else PAYMENT_SIGNATURE_HEADER


def decode_payment_response_header(header: str) -> dict[str, Any]:
    """Decode a PAYMENT-RESPONSE / X-PAYMENT-RESPONSE header.

    Returns:
        The decoded settlement receipt, typically containing success,
        transaction, network and payer.
    """
    return json.loads(safe_base64_decode(header))


def get_payment_response(headers: Mapping[str, str]) -> dict[str, Any] | None:
    """Read the settlement receipt from response headers, if any.

    Args:
        headers: Case-insensitive header mapping (httpx or requests headers).
    """
    for name in (PAYMENT_RESPONSE_HEADER, X_PAYMENT_RESPONSE_HEADER):
        value = headers.get(name)
        if value:
            return decode_payment_response_header(value)
    return None
