"""Configuration objects for the toolkit's network-facing helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from x402_toolkit.http.constants import DEFAULT_REGISTRY_URL, DEFAULT_TIMEOUT


@dataclass
class RegistryConfig:
    """Configuration for Bazaar registry discovery."""

    url: str = DEFAULT_REGISTRY_URL
    timeout: float = DEFAULT_TIMEOUT
    http_client: Any = None  # Optional httpx.AsyncClient / httpx.Client
    headers: dict[str, str] | None = None


@dataclass
class RpcConfig:
    """Configuration for JSON-RPC balance lookups.

    ``url`` overrides the network's public RPC endpoint.
    """

    url: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    http_client: Any = None  # Optional httpx.AsyncClient
