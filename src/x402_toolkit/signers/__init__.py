"""Signing capabilities for the payment client."""

from .evm import ExactEvmSigner, create_nonce

__all__ = ["ExactEvmSigner", "create_nonce"]
