"""Read-only inspection of a URL's x402 payment demand."""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

import httpx

from x402_toolkit.format import format_price
from x402_toolkit.http.constants import DEFAULT_TIMEOUT, PAYMENT_REQUIRED_STATUS
from x402_toolkit.normalize import parse_payment_required
from x402_toolkit.schemas import ProbeResult

logger = logging.getLogger(__name__)

Body = Union[str, bytes, None]


def probe_result_from_response(url: str, status: int, content: Optional[bytes]) -> ProbeResult:
    """Turn an observed response into a ProbeResult.

    Anything other than a 402 carrying a usable demand is reported as
    not enabled; that includes malformed 402 bodies.
    """
    if status != PAYMENT_REQUIRED_STATUS:
        return ProbeResult(enabled=False, url=url, status=status)

    payment_required = parse_payment_required(content)
    if payment_required is None:
        logger.debug("402 from %s carried no usable payment demand", url)
        return ProbeResult(enabled=False, url=url, status=status)

    # Report what the server proposed first, not the cheapest
    first = payment_required.accepts[0]
    price = format_price(first.amount, first.asset, first.network)
    return ProbeResult(
        enabled=True,
        url=url,
        status=status,
        price=price,
        payment_required=payment_required,
    )


def _request_kwargs(headers: Optional[dict[str, str]], body: Body, timeout: Optional[float]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"headers": headers, "content": body}
    if timeout is not None:
        kwargs["timeout"] = timeout
    return kwargs


async def probe(
    url: str,
    *,
    method: str = "GET",
    headers: Optional[dict[str, str]] = None,
    body: Body = None,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> ProbeResult:
    """Check whether a URL is x402-enabled and what it costs, without paying.

    No wallet needed. Cancelling the awaiting task aborts the in-flight
    request.

    Args:
        url: URL to probe.
        method: HTTP method. Defaults to "GET".
        headers: Request headers to include.
        body: Request body (for POST endpoints).
        http_client: Optional httpx.AsyncClient to send through. A
            short-lived client is created when omitted.
        timeout: Request timeout in seconds.

    Returns:
        ProbeResult. A non-paying endpoint is a normal, not-enabled result.

    Raises:
        httpx.TransportError: If the request could not be completed.
    """
    kwargs = _request_kwargs(headers, body, timeout)
    if http_client is None:
        async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
            response = await client.request(method, url, **kwargs)
    else:
        response = await http_client.request(method, url, **kwargs)

    logger.debug("Probed %s %s -> %s", method, url, response.status_code)
    return probe_result_from_response(url, response.status_code, response.content)


def probe_sync(
    url: str,
    *,
    method: str = "GET",
    headers: Optional[dict[str, str]] = None,
    body: Body = None,
    http_client: Optional[httpx.Client] = None,
    timeout: Optional[float] = None,
) -> ProbeResult:
    """Synchronous version of :func:`probe`."""
    kwargs = _request_kwargs(headers, body, timeout)
    if http_client is None:
        with httpx.Client(timeout=DEFAULT_TIMEOUT) as client:
            response = client.request(method, url, **kwargs)
    else:
        response = http_client.request(method, url, **kwargs)

    logger.debug("Probed %s %s -> %s", method, url, response.status_code)
    return probe_result_from_response(url, response.status_code, response.content)
