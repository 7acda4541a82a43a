"""USDC balance lookup over JSON-RPC."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .config import RpcConfig
from .networks import get_network_config
from .schemas import RpcError

logger = logging.getLogger(__name__)

# balanceOf(address)
BALANCE_OF_SELECTOR = "0x70a08231"


def encode_balance_of(address: str) -> str:
    """Encode the eth_call data for ``balanceOf(address)``."""
    padded = address.lower().removeprefix("0x").rjust(64, "0")
    return f"{BALANCE_OF_SELECTOR}{padded}"


class RpcBalanceLookup:
    """Reads a wallet's USDC balance with a plain ``eth_call``.

    Implements the BalanceLookup protocol used by wait_for_funding.
    """

    def __init__(self, config: Optional[RpcConfig] = None) -> None:
        self._config = config or RpcConfig()

    def _rpc_payload(self, address: str, network: str) -> tuple[str, dict[str, Any]]:
        network_config = get_network_config(network)
        url = self._config.url or network_config["rpc_url"]
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "eth_call",
            "params": [
                {"to": network_config["usdc_address"], "data": encode_balance_of(address)},
                "latest",
            ],
        }
        return url, payload

    async def balance_of(self, address: str, network: str) -> int:
        """Return the USDC balance in minor units (6 decimals).

        Raises:
            ValueError: If the network is not supported.
            RpcError: If the RPC endpoint returns an error object.
            httpx.HTTPError: On transport failure or a non-2xx status.
        """
        url, payload = self._rpc_payload(address, network)

        if self._config.http_client is None:
            async with httpx.AsyncClient(timeout=self._config.timeout) as client:
                response = await client.post(url, json=payload)
        else:
            response = await self._config.http_client.post(url, json=payload)

        response.raise_for_status()
        data = response.json()
        if data.get("error"):
            raise RpcError(data["error"])

        result = data.get("result")
        # Some nodes answer "0x" for an empty return value
        balance = int(result, 16) if result and result != "0x" else 0
        logger.debug("Balance of %s on %s: %s", address, network, balance)
        return balance
