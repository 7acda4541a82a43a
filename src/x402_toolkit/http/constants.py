"""HTTP wire constants shared with x402 servers."""

# Header carrying the signed payment on retried requests
PAYMENT_SIGNATURE_HEADER = "PAYMENT-SIGNATURE"
X_PAYMENT_HEADER = "X-PAYMENT"

# Settlement receipt returned alongside a paid response
PAYMENT_RESPONSE_HEADER = "PAYMENT-RESPONSE"
X_PAYMENT_RESPONSE_HEADER = "X-PAYMENT-RESPONSE"

PAYMENT_REQUIRED_STATUS = 402

DEFAULT_REGISTRY_URL = "https://api.cdp.coinbase.com/platform/v2/x402/discovery/resources"

# Seconds
DEFAULT_TIMEOUT = 30.0

# Lowercased names of every header that can carry a payment authorization
PAYMENT_HEADERS = frozenset(
    {PAYMENT_SIGNATURE_HEADER.lower(), X_PAYMENT_HEADER.lower()}
)
