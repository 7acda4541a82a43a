"""Error types for the x402 toolkit."""

from __future__ import annotations

from collections.abc import Sequence


class PaymentError(Exception):
    """Base class for x402 payment errors."""

    pass


class UnsupportedSchemeError(PaymentError):
    """None of the offered payment options use a scheme this client implements.

    Attributes:
        offered: Schemes the server offered, in order.
        supported: Schemes the client can pay with.
    """

    def __init__(self, offered: Sequence[str], supported: Sequence[str]):
        self.offered = list(offered)
        self.supported = list(supported)
        super().__init__(
            f"No supported payment scheme found: offered {self.offered}, supported {self.supported}"
        )


class NoAcceptableOptionError(PaymentError):
    """The selector rejected every option the client could otherwise pay.

    Attributes:
        rejected: Amounts of the supported options that were rejected.
    """

    def __init__(self, rejected: Sequence[str]):
        self.rejected = list(rejected)
        super().__init__(f"No acceptable payment option: selector rejected amounts {self.rejected}")


class RegistryError(Exception):
    """The discovery registry answered with a non-2xx status or an unreadable body.

    Attributes:
        status_code: HTTP status returned by the registry.
        text: Response body text.
    """

    def __init__(self, status_code: int, text: str, message: str | None = None):
        self.status_code = status_code
        self.text = text
        super().__init__(message or f"Bazaar request failed ({status_code}): {text}")


class FundingTimeoutError(Exception):
    """The funding deadline passed before the balance reached the threshold.

    Attributes:
        balance: Last observed balance in minor units.
        required: Required balance in minor units.
    """

    def __init__(self, balance: int, required: int):
        self.balance = balance
        self.required = required
        super().__init__(f"Funding timeout: balance {balance} < required {required}")


class RpcError(Exception):
    """A JSON-RPC endpoint returned an error object."""

    def __init__(self, error: object):
        self.error = error
        super().__init__(f"RPC error: {error}")
