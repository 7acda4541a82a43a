"""Mock implementations and sample payloads for testing."""

import asyncio

from x402_toolkit.schemas import PaymentOption, PaymentRequirement, ResourceInfo

USDC_BASE = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
USDC_SEPOLIA = "0x036CbD53842c5426634e7929541eC2318f3dCF7e"

V2_RESPONSE = {
    "x402Version": 2,
    "resource": {
        "url": "https://api.example.com/compute",
        "description": "Execute code in sandbox",
        "mimeType": "application/json",
    },
    "accepts": [
        {
            "scheme": "exact",
            "network": "eip155:8453",
            "asset": USDC_BASE,
            "amount": "2000",
            "payTo": "0x16F452F90AcED51F6EBd0B790ecA12D196e42085",
            "maxTimeoutSeconds": 300,
            "extra": {"name": "USD Coin", "version": "2"},
        }
    ],
}

V1_RESPONSE = {
    "x402Version": 1,
    "accepts": [
        {
            "scheme": "exact",
            "network": "eip155:8453",
            "asset": USDC_BASE,
            "maxAmountRequired": "5000",
            "payTo": "0xABCDEF",
            "maxTimeoutSeconds": 60,
            "resource": "https://api.example.com/weather",
            "description": "Weather data",
        }
    ],
}


def build_payment_option(
    scheme="exact", network="eip155:8453", amount="2000", pay_to="0x16F452F90AcED51F6EBd0B790ecA12D196e42085"
) -> PaymentOption:
    return PaymentOption(
        scheme=scheme,
        network=network,
        asset=USDC_BASE,
        amount=amount,
        pay_to=pay_to,
        max_timeout_seconds=300,
        extra={"name": "USD Coin", "version": "2"},
    )


def build_payment_requirement(accepts=None, x402_version=2) -> PaymentRequirement:
    return PaymentRequirement(
        x402_version=x402_version,
        resource=ResourceInfo(url="https://api.example.com/compute"),
        accepts=accepts or [build_payment_option()],
    )


class FakeSigner:
    """Records sign calls and returns a fixed authorization."""

    def __init__(self, authorization: str = "signed-authorization", error: Exception | None = None):
        self.authorization = authorization
        self.error = error
        self.calls: list = []

    def sign(self, requirement, option):
        self.calls.append((requirement, option))
        if self.error is not None:
            raise self.error
        return self.authorization


class StalledHandler:
    """Async MockTransport handler that records requests and never answers."""

    def __init__(self):
        self.started = asyncio.Event()
        self.requests = []

    async def __call__(self, request):
        self.requests.append(request)
        self.started.set()
        await asyncio.Event().wait()
        raise AssertionError("stalled handler answered")
