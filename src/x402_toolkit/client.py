"""x402PaymentClient - protocol logic for paying a 402 demand.

Holds the signing capability and the scheme policy. It performs no I/O;
the HTTP wrappers in ``x402_toolkit.http.clients`` drive the requests and
ask this client for the payment headers to attach to the single retry.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from enum import Enum
from typing import Callable, Iterator, Optional, Protocol, Sequence, runtime_checkable

from .http.constants import PAYMENT_REQUIRED_STATUS
from .http.utils import payment_header_name
from .normalize import parse_payment_required
from .schemas import (
    NoAcceptableOptionError,
    PaymentOption,
    PaymentRequirement,
    UnsupportedSchemeError,
)

logger = logging.getLogger(__name__)

SCHEME_EXACT = "exact"

# Selector: order or filter the supported options; the first one returned is paid
PaymentOptionSelector = Callable[[PaymentRequirement, list[PaymentOption]], list[PaymentOption]]


class PaymentState(str, Enum):
    """States of one logical paid request."""

    INITIAL = "initial"
    AWAITING_FIRST_RESPONSE = "awaiting_first_response"
    NEEDS_PAYMENT = "needs_payment"
    PAYMENT_FAILED = "payment_failed"
    DONE = "done"


class PaymentScope:
    """Payment bookkeeping for one logical call, shared by its redirect hops."""

    def __init__(self) -> None:
        self.paid = False


_current_scope: ContextVar[Optional[PaymentScope]] = ContextVar("x402_payment_scope", default=None)


def current_payment_scope() -> Optional[PaymentScope]:
    """The scope of the call in progress, or None outside of one."""
    return _current_scope.get()


@contextmanager
def payment_scope() -> Iterator[PaymentScope]:
    """Open a scope for one logical call.

    Nested entries (the redirect hops a session or client sends on behalf
    of the same call) reuse the outer scope, so at most one payment is made
    however many hops answer 402.
    """
    scope = _current_scope.get()
    if scope is not None:
        yield scope
        return

    scope = PaymentScope()
    token = _current_scope.set(scope)
    try:
        yield scope
    finally:
        _current_scope.reset(token)


@runtime_checkable
class PaymentSigner(Protocol):
    """Signing capability producing a one-time payment authorization.

    Implementations choose the nonce and expiry, and either return a
    complete header value or raise. They must never hand back partially
    signed material.
    """

    def sign(self, requirement: PaymentRequirement, option: PaymentOption) -> str:
        """Return the header-ready authorization for ``option``."""
        ...


def default_option_selector(
    requirement: PaymentRequirement, options: list[PaymentOption]
) -> list[PaymentOption]:
    """Default selector: keep server order."""
    return options


def prefer_network(network: str) -> PaymentOptionSelector:
    """Create a selector that moves options on ``network`` to the front."""

    def selector(requirement: PaymentRequirement, options: list[PaymentOption]) -> list[PaymentOption]:
        preferred = [o for o in options if o.network == network]
        others = [o for o in options if o.network != network]
        return preferred + others

    return selector


def max_amount(max_value: int) -> PaymentOptionSelector:
    """Create a selector that drops options costing more than ``max_value`` minor units."""

    def selector(requirement: PaymentRequirement, options: list[PaymentOption]) -> list[PaymentOption]:
        return [o for o in options if o.amount_value() <= max_value]

    return selector


class x402PaymentClient:
    """Client-side component that turns a 402 demand into payment headers.

    Args:
        signer: Signing capability bound for the client's lifetime.
        schemes: Payment schemes this client can pay with.
        selector: Optional selector applied to the supported options.

    Example:
        ```python
        from eth_account import Account
        from x402_toolkit import x402PaymentClient
        from x402_toolkit.signers import ExactEvmSigner

        client = x402PaymentClient(ExactEvmSigner(Account.from_key("0x...")))
        ```
    """

    def __init__(
        self,
        signer: PaymentSigner,
        schemes: Sequence[str] = (SCHEME_EXACT,),
        selector: Optional[PaymentOptionSelector] = None,
    ) -> None:
        self._signer = signer
        self._schemes = tuple(schemes)
        self._selector = selector or default_option_selector

    @property
    def schemes(self) -> tuple[str, ...]:
        return self._schemes

    def payment_requirement_from_response(
        self, status: int, content: Optional[bytes]
    ) -> Optional[PaymentRequirement]:
        """Extract a usable demand from a response.

        Returns:
            The normalized requirement, or None when the response is not a
            402 or its body is malformed or has no options.
        """
        if status != PAYMENT_REQUIRED_STATUS:
            return None
        return parse_payment_required(content)

    def select_payment_option(self, requirement: PaymentRequirement) -> PaymentOption:
        """Choose the option to pay.

        Only options whose scheme this client supports are considered, in
        server order, then passed through the selector.

        Raises:
            UnsupportedSchemeError: If no offered option uses a supported scheme.
            NoAcceptableOptionError: If the selector rejects every supported option.
        """
        supported = [o for o in requirement.accepts if o.scheme in self._schemes]
        if not supported:
            raise UnsupportedSchemeError(
                [o.scheme for o in requirement.accepts], self._schemes
            )
        selected = self._selector(requirement, supported)
        if not selected:
            raise NoAcceptableOptionError([o.amount for o in supported])
        return selected[0]

    def create_payment_headers(self, requirement: PaymentRequirement) -> dict[str, str]:
        """Select an option, sign it, and return the headers for the retry.

        Raises:
            UnsupportedSchemeError: If no offered option uses a supported scheme.
            NoAcceptableOptionError: If the selector rejects every supported option.
            Exception: Whatever the signer raises, unmodified.
        """
        option = self.select_payment_option(requirement)
        authorization = self._signer.sign(requirement, option)
        logger.info(
            "Signed %s payment of %s on %s to %s",
            option.scheme,
            option.amount,
            option.network,
            option.pay_to,
        )
        return {payment_header_name(requirement.x402_version): authorization}
