from typing import Literal

from typing_extensions import (
    TypedDict,
)  # use `typing_extensions.TypedDict` instead of `typing.TypedDict` on Python < 3.12


SupportedNetworks = Literal["base", "base-sepolia"]

# Both CAIP-2 identifiers and the legacy short names resolve to a display name
NETWORK_NAMES: dict[str, str] = {
    "eip155:8453": "Base",
    "eip155:84532": "Base Sepolia",
    "base": "Base",
    "base-sepolia": "Base Sepolia",
}

CAIP2_TO_NETWORK: dict[str, SupportedNetworks] = {
    "eip155:8453": "base",
    "eip155:84532": "base-sepolia",
}


class NetworkConfig(TypedDict):
    chain_id: int
    usdc_address: str
    rpc_url: str


NETWORK_CONFIG: dict[SupportedNetworks, NetworkConfig] = {
    "base": {
        "chain_id": 8453,
        "usdc_address": "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
        "rpc_url": "https://mainnet.base.org",
    },
    "base-sepolia": {
        "chain_id": 84532,
        "usdc_address": "0x036CbD53842c5426634e7929541eC2318f3dCF7e",
        "rpc_url": "https://sepolia.base.org",
    },
}


def get_network_name(network: str) -> str | None:
    """Display name for a network identifier, or None when unknown."""
    return NETWORK_NAMES.get(network)


def get_network_config(network: str) -> NetworkConfig:
    """Resolve a legacy or CAIP-2 network identifier to its config.

    Raises:
        ValueError: If the network is not supported.
    """
    name = CAIP2_TO_NETWORK.get(network, network)
    if name not in NETWORK_CONFIG:
        raise ValueError(
            f"Unsupported network: {network}. Must be one of: {list(NETWORK_CONFIG)}"
        )
    return NETWORK_CONFIG[name]  # type: ignore[index]
