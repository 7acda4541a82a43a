"""Payment-aware transport adapter for requests.Session.

The sync counterpart of the httpx transport: a 402 carrying a usable demand
is paid once and the request resent with the authorization header.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any

import requests
from requests.adapters import HTTPAdapter

from ...client import PaymentState, current_payment_scope, payment_scope
from ..constants import PAYMENT_HEADERS

if TYPE_CHECKING:
    from ...client import x402PaymentClient

logger = logging.getLogger(__name__)


# ============================================================================
# Adapter
# ============================================================================


class x402HTTPAdapter(HTTPAdapter):
    """HTTP adapter that pays 402 Payment Required responses.

    Subclasses requests.HTTPAdapter to intercept 402 responses, obtain a
    signed authorization and resend a copy of the request once with the
    payment header added. The caller's PreparedRequest is left untouched.
    """

    def __init__(
        self,
        client: x402PaymentClient,
        **kwargs: Any,
    ) -> None:
        """Bind the adapter to a payment client.

        Args:
            client: x402PaymentClient holding the signer.
            **kwargs: Additional arguments for HTTPAdapter.
        """
        super().__init__(**kwargs)
        self._client = client

    def send(
        self,
        request: requests.PreparedRequest,
        **kwargs: Any,
    ) -> requests.Response:
        """Send ``request``, paying and resending once on a usable 402.

        Args:
            request: The prepared request.
            **kwargs: Additional send arguments.

        Returns:
            Response (original, or the single paid retry).

        Raises:
            UnsupportedSchemeError: If no offered option uses a supported scheme.
            NoAcceptableOptionError: If the selector rejects every option.
            requests.RequestException: If either send fails.
        """
        logger.debug("%s %s: %s", request.method, request.url, PaymentState.AWAITING_FIRST_RESPONSE.value)
        response = super().send(request, **kwargs)

        if response.status_code != 402:
            return response

        scope = current_payment_scope()
        if scope is not None and scope.paid:
            logger.debug("402 from %s after this call already paid; returning it as-is", request.url)
            return response

        requirement = self._client.payment_requirement_from_response(
            response.status_code, response.content
        )
        if requirement is None:
            logger.debug("402 from %s has no usable demand; returning it as-is", request.url)
            return response

        logger.debug("%s %s: %s", request.method, request.url, PaymentState.NEEDS_PAYMENT.value)
        try:
            payment_headers = self._client.create_payment_headers(requirement)
        except Exception:
            logger.debug("%s %s: %s", request.method, request.url, PaymentState.PAYMENT_FAILED.value)
            raise

        if scope is not None:
            scope.paid = True

        retry_request = request.copy()
        for name in PAYMENT_HEADERS:
            retry_request.headers.pop(name, None)
        retry_request.headers.update(payment_headers)

        retry_response = super().send(retry_request, **kwargs)
        logger.debug("%s %s: %s", request.method, request.url, PaymentState.DONE.value)
        return retry_response


def x402_http_adapter(
    client: x402PaymentClient,
    **kwargs: Any,
) -> x402HTTPAdapter:
    """Build an x402HTTPAdapter bound to ``client``.

    Args:
        client: x402PaymentClient holding the signer.
        **kwargs: Additional arguments for HTTPAdapter.

    Returns:
        x402HTTPAdapter that can be mounted to a session.
    """
    return x402HTTPAdapter(client, **kwargs)


# ============================================================================
# Wrapper Functions
# ============================================================================


def _scope_session_send(session: requests.Session) -> None:
    # resolve_redirects sends every hop through session.send, so hops share the scope
    if getattr(session.send, "_x402_scoped", False):
        return
    send = session.send

    @functools.wraps(send)
    def scoped_send(request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        with payment_scope():
            return send(request, **kwargs)

    scoped_send._x402_scoped = True  # type: ignore[attr-defined]
    session.send = scoped_send  # type: ignore[method-assign]


def wrap_requests_with_payment(
    session: requests.Session,
    client: x402PaymentClient,
    **adapter_kwargs: Any,
) -> requests.Session:
    """Mount a paying adapter on ``session`` and return it.

    Both the http:// and https:// prefixes are covered. Each call through
    the session runs in its own payment scope, so a redirect hop that
    answers 402 after an earlier hop of the same call paid is returned
    as-is instead of being paid again.

    Example:
        ```python
        import requests
        from x402_toolkit import x402PaymentClient
        from x402_toolkit.http.clients import wrap_requests_with_payment

        session = wrap_requests_with_payment(requests.Session(), x402PaymentClient(signer))
        response = session.get("https://api.example.com/paid")
        ```
    """
    adapter = x402HTTPAdapter(client, **adapter_kwargs)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    _scope_session_send(session)
    return session


def x402_requests(
    client: x402PaymentClient,
    **adapter_kwargs: Any,
) -> requests.Session:
    """Create a requests Session with x402 payment handling."""
    session = requests.Session()
    return wrap_requests_with_payment(session, client, **adapter_kwargs)
