"""Bazaar registry discovery of x402 services."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from x402_toolkit.config import RegistryConfig
from x402_toolkit.format import format_price
from x402_toolkit.normalize import build_payment_option, first_not_none
from x402_toolkit.schemas import (
    DiscoverResult,
    PaymentOption,
    RegistryError,
    ServiceListing,
)

logger = logging.getLogger(__name__)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _first_str(*values: Any) -> Optional[str]:
    for value in values:
        if isinstance(value, str):
            return value
    return None


def build_registry_url(
    base_url: str,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    resource_type: Optional[str] = None,
) -> str:
    """Append pagination and filter parameters that were actually given."""
    params: dict[str, Any] = {}
    if limit is not None:
        params["limit"] = limit
    if offset is not None:
        params["offset"] = offset
    if resource_type is not None:
        params["type"] = resource_type
    if not params:
        return base_url
    return str(httpx.URL(base_url).copy_merge_params(params))


def _cheapest(options: list[PaymentOption]) -> PaymentOption:
    # Strict < keeps the earlier option on ties
    cheapest = options[0]
    for option in options[1:]:
        if option.amount_value() < cheapest.amount_value():
            cheapest = option
    return cheapest


def normalize_listing(item: Any) -> Optional[ServiceListing]:
    """Normalize one raw registry item.

    Returns:
        The listing, or None when the item has no usable payment option.
    """
    if not isinstance(item, Mapping):
        return None

    accepts = item.get("accepts")
    if not isinstance(accepts, list):
        return None

    options: list[PaymentOption] = []
    for accept in accepts:
        if not isinstance(accept, Mapping):
            continue
        try:
            options.append(build_payment_option(accept))
        except ValidationError as e:
            logger.debug("Skipping invalid accept entry: %s", e)
    if not options:
        return None

    cheapest = _cheapest(options)
    price = format_price(cheapest.amount, cheapest.asset, cheapest.network)

    resource = item.get("resource")
    resource_info = _mapping(resource)
    first_accept = _mapping(accepts[0])
    metadata = _mapping(item.get("metadata"))

    description = _first_str(
        item.get("description"),
        resource_info.get("description"),
        first_accept.get("description"),
        metadata.get("description"),
    )
    url = _first_str(
        item.get("url"),
        resource_info.get("url"),
        resource,
        first_accept.get("resource"),
        "",
    )

    try:
        return ServiceListing(
            url=url,
            description=description,
            price=price,
            accepts=options,
            metadata=dict(metadata),
        )
    except ValidationError as e:
        logger.debug("Skipping malformed registry item: %s", e)
        return None


def parse_discovery_response(data: Any) -> DiscoverResult:
    """Normalize a decoded registry response.

    Items may live under ``items`` or ``resources``. Items without any
    payment option are dropped. ``total`` is the registry's own count when
    reported, which may exceed the number of services on this page.
    """
    data = _mapping(data)
    items = first_not_none(data.get("items"), data.get("resources"), [])
    if not isinstance(items, list):
        items = []

    services = []
    for item in items:
        listing = normalize_listing(item)
        if listing is None:
            logger.debug("Dropping registry item without payment options")
            continue
        services.append(listing)

    total = first_not_none(
        data.get("total"),
        data.get("totalCount"),
        _mapping(data.get("pagination")).get("total"),
    )
    if not isinstance(total, int) or isinstance(total, bool):
        total = len(services)

    return DiscoverResult(services=services, total=total)


def _read_registry_response(response: httpx.Response) -> DiscoverResult:
    if not response.is_success:
        raise RegistryError(response.status_code, response.text)
    try:
        data = response.json()
    except ValueError as e:
        raise RegistryError(
            response.status_code,
            response.text,
            f"Bazaar returned an unreadable body ({response.status_code})",
        ) from e
    return parse_discovery_response(data)


def _resolve(config: Optional[RegistryConfig], registry_url: Optional[str]) -> tuple[RegistryConfig, str]:
    config = config or RegistryConfig()
    return config, registry_url or config.url


async def discover(
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    *,
    resource_type: Optional[str] = None,
    registry_url: Optional[str] = None,
    config: Optional[RegistryConfig] = None,
) -> DiscoverResult:
    """Query the Bazaar registry for available x402 services.

    No wallet or authentication needed.

    Args:
        limit: Max results to return.
        offset: Pagination offset.
        resource_type: Optional resource type filter (e.g. "http").
        registry_url: Registry endpoint, overriding ``config.url``.
        config: Registry configuration (timeout, http client, headers).

    Returns:
        DiscoverResult with services in registry order.

    Raises:
        RegistryError: If the registry answers with a non-2xx status or a
            body that is not JSON.
        httpx.TransportError: If the request could not be completed.
    """
    config, base_url = _resolve(config, registry_url)
    url = build_registry_url(base_url, limit, offset, resource_type)
    headers = {"Accept": "application/json", **(config.headers or {})}

    if config.http_client is None:
        async with httpx.AsyncClient(timeout=config.timeout) as client:
            response = await client.get(url, headers=headers)
    else:
        response = await config.http_client.get(url, headers=headers)

    logger.debug("Registry %s -> %s", url, response.status_code)
    return _read_registry_response(response)


def discover_sync(
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    *,
    resource_type: Optional[str] = None,
    registry_url: Optional[str] = None,
    config: Optional[RegistryConfig] = None,
) -> DiscoverResult:
    """Synchronous version of :func:`discover`.

    ``config.http_client``, when given, must be an httpx.Client.
    """
    config, base_url = _resolve(config, registry_url)
    url = build_registry_url(base_url, limit, offset, resource_type)
    headers = {"Accept": "application/json", **(config.headers or {})}

    if config.http_client is None:
        with httpx.Client(timeout=config.timeout) as client:
            response = client.get(url, headers=headers)
    else:
        response = config.http_client.get(url, headers=headers)

    logger.debug("Registry %s -> %s", url, response.status_code)
    return _read_registry_response(response)
