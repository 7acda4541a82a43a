"""Chain ids and the tokens whose prices can be rendered in display units."""

from typing import Optional

from typing_extensions import (
    TypedDict,
)  # use `typing_extensions.TypedDict` instead of `typing.TypedDict` on Python < 3.12

NETWORK_TO_ID = {
    "base-sepolia": "84532",
    "base": "8453",
}


def get_chain_id(network: str) -> str:
    """Get the chain ID for a given network
    Supports CAIP-2 identifiers (eip155:8453), string encoded chain IDs and
    human readable networks
    """
    reference = network.split(":", 1)[1] if network.startswith("eip155:") else network
    if reference.isdigit():
        return reference
    if reference not in NETWORK_TO_ID:
        raise ValueError(f"Unsupported network: {network}")
    return NETWORK_TO_ID[reference]


class KnownToken(TypedDict):
    address: str
    name: str
    decimals: int
    version: str
    symbol: str
    prefix: str


KNOWN_TOKENS: dict[str, list[KnownToken]] = {
    "84532": [
        {
            "address": "0x036CbD53842c5426634e7929541eC2318f3dCF7e",
            "name": "USDC",
            "decimals": 6,
            "version": "2",
            "symbol": "USDC",
            "prefix": "$",
        }
    ],
    "8453": [
        {
            "address": "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
            "name": "USD Coin",  # needs to be exactly what is returned by name() on contract
            "decimals": 6,
            "version": "2",
            "symbol": "USDC",
            "prefix": "$",
        }
    ],
}

# Lowercased address -> token, across every chain
TOKENS_BY_ADDRESS: dict[str, KnownToken] = {
    token["address"].lower(): token
    for tokens in KNOWN_TOKENS.values()
    for token in tokens
}


def find_token(address: str) -> Optional[KnownToken]:
    """Look up a known token by contract address, ignoring case"""
    return TOKENS_BY_ADDRESS.get(address.lower())


def _token_on_chain(chain_id: str, address: str) -> KnownToken:
    token = find_token(address)
    if token is None or token not in KNOWN_TOKENS.get(chain_id, []):
        raise ValueError(f"Token not found for chain {chain_id} and address {address}")
    return token


def get_token_name(chain_id: str, address: str) -> str:
    """EIP-712 domain name of a known token."""
    return _token_on_chain(chain_id, address)["name"]


def get_token_version(chain_id: str, address: str) -> str:
    """EIP-712 domain version of a known token."""
    return _token_on_chain(chain_id, address)["version"]
