"""httpx transport wrapper with automatic x402 payment handling.

Provides an AsyncBaseTransport and convenience constructors for async
httpx clients.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from ...client import PaymentState, current_payment_scope, payment_scope
from ..constants import PAYMENT_HEADERS
from ...schemas import NoAcceptableOptionError, PaymentError, UnsupportedSchemeError

if TYPE_CHECKING:
    from ...client import x402PaymentClient

logger = logging.getLogger(__name__)


def _log_state(request: httpx.Request, state: PaymentState) -> None:
    logger.debug("%s %s: %s", request.method, request.url, state.value)


# ============================================================================
# Transport Implementation
# ============================================================================


class x402AsyncTransport(httpx.AsyncBaseTransport):
    """Async transport that pays 402 Payment Required responses.

    Sends the request as given. When the response is a 402 carrying a
    usable demand, asks the x402PaymentClient for payment headers and sends
    a copy of the original request with those headers added, exactly once.
    Payment headers the caller already set are replaced, not duplicated.
    The second response is returned whatever its status. Inside a payment
    scope that has already paid, a 402 is returned without paying.

    No per-request state is kept on the instance, so a single transport
    can serve concurrent requests.
    """

    RETRY_KEY = "_x402_is_retry"

    def __init__(
        self,
        client: x402PaymentClient,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize payment transport.

        Args:
            client: x402PaymentClient holding the signer.
            transport: Underlying transport. Defaults to httpx.AsyncHTTPTransport.
        """
        self._client = client
        self._transport = transport or httpx.AsyncHTTPTransport()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send request with automatic 402 payment handling.

        Raises:
            UnsupportedSchemeError: If no offered option uses a supported scheme.
            NoAcceptableOptionError: If the selector rejects every option.
            httpx.TransportError: If either send fails.
        """
        if request.extensions.get(self.RETRY_KEY):
            return await self._transport.handle_async_request(request)

        # Buffer the body so the retry can resend it
        await request.aread()

        _log_state(request, PaymentState.AWAITING_FIRST_RESPONSE)
        response = await self._transport.handle_async_request(request)
        if response.status_code != 402:
            _log_state(request, PaymentState.DONE)
            return response

        scope = current_payment_scope()
        if scope is not None and scope.paid:
            logger.debug("402 from %s after this call already paid; returning it as-is", request.url)
            _log_state(request, PaymentState.DONE)
            return response

        await response.aread()
        requirement = self._client.payment_requirement_from_response(
            response.status_code, response.content
        )
        if requirement is None:
            logger.debug("402 from %s has no usable demand; returning it as-is", request.url)
            _log_state(request, PaymentState.DONE)
            return response

        _log_state(request, PaymentState.NEEDS_PAYMENT)
        try:
            payment_headers = self._client.create_payment_headers(requirement)
        except Exception:
            _log_state(request, PaymentState.PAYMENT_FAILED)
            raise
        finally:
            await response.aclose()

        if scope is not None:
            scope.paid = True

        headers = [
            (name, value)
            for name, value in request.headers.multi_items()
            if name.lower() not in PAYMENT_HEADERS
        ]
        retry_request = httpx.Request(
            request.method,
            request.url,
            headers=[*headers, *payment_headers.items()],
            content=request.content,
            extensions={**request.extensions, self.RETRY_KEY: True},
        )
        retry_response = await self._transport.handle_async_request(retry_request)

        _log_state(request, PaymentState.DONE)
        return retry_response

    async def aclose(self) -> None:
        await self._transport.aclose()


def x402_httpx_transport(
    client: x402PaymentClient,
    transport: httpx.AsyncBaseTransport | None = None,
) -> x402AsyncTransport:
    """Create an async transport with 402 payment handling.

    Mounted on a plain httpx.AsyncClient, each redirect hop is a separate
    call to the transport. Use x402HttpxClient (or disable redirects) to
    keep a call that follows redirects to a single payment.
    """
    return x402AsyncTransport(client, transport)


# ============================================================================
# Wrapper Functions
# ============================================================================


class x402HttpxClient(httpx.AsyncClient):
    """httpx.AsyncClient with built-in x402 payment handling.

    Every ``send`` (and so every ``get``, ``post`` or ``stream``) runs in its
    own payment scope: once a hop of the call has paid, a later redirect
    hop answering 402 is returned as-is instead of being paid again.
    """

    def __init__(self, x402_client: x402PaymentClient, **kwargs: Any) -> None:
        """Initialize client.

        Args:
            x402_client: x402PaymentClient holding the signer.
            **kwargs: Arguments for httpx.AsyncClient. A ``transport``
                argument becomes the underlying transport.
        """
        transport = x402AsyncTransport(x402_client, kwargs.pop("transport", None))
        super().__init__(transport=transport, **kwargs)

    async def send(self, request: httpx.Request, **kwargs: Any) -> httpx.Response:
        with payment_scope():
            return await super().send(request, **kwargs)


def wrap_httpx_with_payment(
    x402_client: x402PaymentClient,
    **httpx_kwargs: Any,
) -> x402HttpxClient:
    """Create an async httpx client whose requests pay 402 demands automatically.

    Args:
        x402_client: x402PaymentClient holding the signer.
        **httpx_kwargs: Arguments for httpx.AsyncClient. A ``transport``
            argument becomes the underlying transport.

    Example:
        ```python
        from x402_toolkit import x402PaymentClient
        from x402_toolkit.http.clients import wrap_httpx_with_payment

        async with wrap_httpx_with_payment(x402PaymentClient(signer)) as http:
            response = await http.get("https://api.example.com/paid")
        ```
    """
    return x402HttpxClient(x402_client, **httpx_kwargs)


__all__ = [
    "PaymentError",
    "UnsupportedSchemeError",
    "NoAcceptableOptionError",
    "x402AsyncTransport",
    "x402_httpx_transport",
    "wrap_httpx_with_payment",
    "x402HttpxClient",
]
