"""Human-readable rendering of raw x402 prices."""

from decimal import Decimal, localcontext

from x402_toolkit.chains import find_token
from x402_toolkit.networks import get_network_name


def _shorten(asset: str) -> str:
    return f"{asset[:6]}...{asset[-4:]}"


def _scale(amount: str, decimals: int) -> str | None:
    try:
        raw = int(amount)
    except (TypeError, ValueError):
        return None
    with localcontext() as ctx:
        # wide enough that scaling never rounds
        ctx.prec = max(ctx.prec, len(str(abs(raw))) + decimals)
        # normalize() drops trailing zeros; the "f" format keeps exponents out
        value = Decimal(raw).scaleb(-decimals).normalize()
    return format(value, "f")


def format_price(amount: str, asset: str, network: str, short: bool = False) -> str:
    """Format a raw x402 price into a human-readable string.

    Known assets (USDC on Base and Base Sepolia) are scaled by their
    decimals with exact decimal arithmetic. Unknown assets fall back to the
    raw amount and a shortened asset address.

    Args:
        amount: Amount in minor units, as an integer string.
        asset: Token contract address.
        network: Network identifier (CAIP-2 or legacy name).
        short: Omit the " on <Network>" suffix.

    Returns:
        e.g. "$0.002 USDC on Base"

    Example:
        >>> format_price("2000", "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913", "eip155:8453")
        '$0.002 USDC on Base'
    """
    token = find_token(asset)
    value = _scale(amount, token["decimals"]) if token else None

    if token and value is not None:
        formatted = f"{token['prefix']}{value} {token['symbol']}"
    else:
        formatted = f"{amount} {_shorten(asset)}"

    network_name = get_network_name(network)
    if short or not network_name:
        return formatted
    return f"{formatted} on {network_name}"
