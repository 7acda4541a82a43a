"""x402-toolkit: probe, discover and pay for HTTP 402 endpoints."""

# Inspection
from x402_toolkit.probe import probe, probe_result_from_response, probe_sync
from x402_toolkit.discover import discover, discover_sync, parse_discovery_response
from x402_toolkit.format import format_price
from x402_toolkit.normalize import normalize_payment_required, parse_payment_required

# Payment
from x402_toolkit.client import (
    PaymentSigner,
    PaymentState,
    max_amount,
    payment_scope,
    prefer_network,
    x402PaymentClient,
)
from x402_toolkit.funding import BalanceLookup, wait_for_funding
from x402_toolkit.balance import RpcBalanceLookup

# Config
from x402_toolkit.config import RegistryConfig, RpcConfig

# Types
from x402_toolkit.schemas import (
    DiscoverResult,
    FundingTimeoutError,
    NoAcceptableOptionError,
    PaymentError,
    PaymentOption,
    PaymentRequirement,
    ProbeResult,
    RegistryError,
    ResourceInfo,
    RpcError,
    ServiceListing,
    UnsupportedSchemeError,
)

__version__ = "0.1.0"

__all__ = [
    # Inspection
    "probe",
    "probe_sync",
    "probe_result_from_response",
    "discover",
    "discover_sync",
    "parse_discovery_response",
    "format_price",
    "normalize_payment_required",
    "parse_payment_required",
    # Payment
    "x402PaymentClient",
    "PaymentSigner",
    "PaymentState",
    "prefer_network",
    "max_amount",
    "payment_scope",
    "BalanceLookup",
    "wait_for_funding",
    "RpcBalanceLookup",
    # Config
    "RegistryConfig",
    "RpcConfig",
    # Types
    "PaymentOption",
    "PaymentRequirement",
    "ResourceInfo",
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
