"""EVM signer for the ``exact`` scheme (EIP-3009 transferWithAuthorization)."""

from __future__ import annotations

import json
import secrets
import time
from typing import TYPE_CHECKING, Any

from ..chains import get_chain_id, get_token_name, get_token_version
from ..http.utils import safe_base64_encode
from ..schemas import PaymentOption, PaymentRequirement, UnsupportedSchemeError

if TYPE_CHECKING:
    from eth_account.signers.local import LocalAccount

SCHEME_EXACT = "exact"

# Seconds before now the authorization becomes valid, absorbing clock skew
VALID_AFTER_BUFFER = 60

TRANSFER_WITH_AUTHORIZATION_TYPES = {
    "TransferWithAuthorization": [
        {"name": "from", "type": "address"},
        {"name": "to", "type": "address"},
        {"name": "value", "type": "uint256"},
        {"name": "validAfter", "type": "uint256"},
        {"name": "validBefore", "type": "uint256"},
        {"name": "nonce", "type": "bytes32"},
    ]
}


def create_nonce() -> str:
    """Create a random 32-byte hex-encoded nonce for authorization signatures."""
    return secrets.token_hex(32)


class ExactEvmSigner:
    """Signs ``exact`` payments on EVM networks with an eth_account account.

    Implements the PaymentSigner protocol. The returned header value is the
    base64 JSON payment payload for the requirement's protocol version.

    Example:
        ```python
        from eth_account import Account
        from x402_toolkit.signers import ExactEvmSigner

        signer = ExactEvmSigner(Account.from_key("0x..."))
        ```

    Args:
        account: eth_account LocalAccount instance.
    """

    def __init__(self, account: "LocalAccount") -> None:
        self._account = account

    @property
    def address(self) -> str:
        return self._account.address

    def _domain(self, option: PaymentOption, chain_id: str) -> dict[str, Any]:
        extra = option.extra or {}
        name = extra.get("name") or get_token_name(chain_id, option.asset)
        version = extra.get("version") or get_token_version(chain_id, option.asset)
        return {
            "name": name,
            "version": version,
            "chainId": int(chain_id),
            "verifyingContract": option.asset,
        }

    def _authorization(self, option: PaymentOption) -> dict[str, str]:
        now = int(time.time())
        return {
            "from": self._account.address,
            "to": option.pay_to,
            "value": option.amount,
            "validAfter": str(now - VALID_AFTER_BUFFER),
            "validBefore": str(now + option.max_timeout_seconds),
            "nonce": f"0x{create_nonce()}",
        }

    def sign_authorization(self, option: PaymentOption) -> dict[str, Any]:
        """Sign an EIP-3009 authorization for ``option``.

        Returns:
            ``{"signature": ..., "authorization": ...}``

        Raises:
            UnsupportedSchemeError: If the option is not ``exact``.
            ValueError: If the network or token domain cannot be resolved.
        """
        if option.scheme != SCHEME_EXACT:
            raise UnsupportedSchemeError([option.scheme], [SCHEME_EXACT])

        chain_id = get_chain_id(option.network)
        auth = self._authorization(option)

        signed_message = self._account.sign_typed_data(
            domain_data=self._domain(option, chain_id),
            message_types=TRANSFER_WITH_AUTHORIZATION_TYPES,
            message_data={
                "from": auth["from"],
                "to": auth["to"],
                "value": int(auth["value"]),
                "validAfter": int(auth["validAfter"]),
                "validBefore": int(auth["validBefore"]),
                "nonce": bytes.fromhex(auth["nonce"][2:]),
            },
        )
        signature = signed_message.signature.hex()
        if not signature.startswith("0x"):
            signature = f"0x{signature}"

        return {"signature": signature, "authorization": auth}

    def sign(self, requirement: PaymentRequirement, option: PaymentOption) -> str:
        """Return the base64 payment payload header value."""
        payload = self.sign_authorization(option)

        if requirement.x402_version == 1:
            payment = {
                "x402Version": 1,
                "scheme": option.scheme,
                "network": option.network,
                "payload": payload,
            }
        else:
            payment = {
                "x402Version": requirement.x402_version,
                "resource": requirement.resource.model_dump(by_alias=True, exclude_none=True),
                "accepted": option.model_dump(by_alias=True, exclude_none=True),
                "payload": payload,
            }
            if requirement.extensions:
                payment["extensions"] = requirement.extensions

        return safe_base64_encode(json.dumps(payment, separators=(",", ":")))
