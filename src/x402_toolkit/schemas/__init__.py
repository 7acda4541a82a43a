"""Pydantic models and error types."""

from .errors import (
    FundingTimeoutError,
    NoAcceptableOptionError,
    PaymentError,
    RegistryError,
    RpcError,
    UnsupportedSchemeError,
)
from .payments import (
    PaymentOption,
    PaymentRequirement,
    ResourceInfo,
    canonical_amount,
)
from .results import DiscoverResult, ProbeResult, ServiceListing

__all__ = [
    # Payments
    "PaymentOption",
    "PaymentRequirement",
    "ResourceInfo",
    "canonical_amount",
    # Results
    "ProbeResult",
    "ServiceListing",
    "DiscoverResult",
    # Errors
    "PaymentError",
    "UnsupportedSchemeError",
    "NoAcceptableOptionError",
    "RegistryError",
    "FundingTimeoutError",
    "RpcError",
]
