"""Polling until a wallet balance reaches a threshold."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Protocol, runtime_checkable

from .schemas import FundingTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 10.0


@runtime_checkable
class BalanceLookup(Protocol):
    """Balance-lookup capability."""

    async def balance_of(self, address: str, network: str) -> int:
        """Return the balance of ``address`` on ``network`` in minor units."""
        ...


async def wait_for_funding(
    lookup: BalanceLookup,
    address: str,
    network: str,
    min_amount: int,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    timeout: Optional[float] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> int:
    """Poll until the balance of ``address`` is at least ``min_amount``.

    Without a timeout this waits indefinitely; funding may take arbitrarily
    long. Cancelling the awaiting task interrupts the sleep and raises
    asyncio.CancelledError, never FundingTimeoutError.

    Args:
        lookup: Balance-lookup capability.
        address: Wallet address.
        network: Network identifier.
        min_amount: Required balance in minor units.
        poll_interval: Seconds between polls.
        timeout: Optional deadline in seconds from the first poll.
        clock: Monotonic clock, injectable for tests.
        sleep: Awaitable sleep, injectable for tests.

    Returns:
        The last observed balance (0 when ``min_amount`` is not positive and
        no poll was needed).

    Raises:
        FundingTimeoutError: If the deadline passes first.
    """
    if min_amount <= 0:
        return 0

    deadline = clock() + timeout if timeout is not None else None

    while True:
        balance = await lookup.balance_of(address, network)
        if balance >= min_amount:
            logger.info("Funded %s on %s: %s >= %s", address, network, balance, min_amount)
            return balance

        if deadline is not None:
            remaining = deadline - clock()
            if remaining <= 0:
                raise FundingTimeoutError(balance, min_amount)
            delay = min(poll_interval, remaining)
        else:
            delay = poll_interval

        logger.debug("Balance %s < %s on %s, polling again in %ss", balance, min_amount, network, delay)
        await sleep(delay)
