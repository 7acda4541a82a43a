"""Canonical payment types shared by both wire-format generations."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def canonical_amount(value: Any) -> str:
    """Coerce an amount to its canonical base-10 integer string.

    Accepts integer strings (surrounding whitespace and leading zeros are
    dropped) and integral numbers. Floats are accepted only when integral.

    Raises:
        ValueError: If the value is not a non-negative integer.
    """
    if isinstance(value, bool):
        raise ValueError("amount must be an integer, not a boolean")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValueError("amount must be an integral number of minor units")
        parsed = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text.lstrip("-").isdigit():
            raise ValueError("amount must be an integer encoded as a string")
        parsed = int(text)
    else:
        raise ValueError("amount must be an integer encoded as a string")
    if parsed < 0:
        raise ValueError("amount must be non-negative")
    return str(parsed)


class PaymentOption(BaseModel):
    """One accepted way to pay for a resource."""

    scheme: str = "exact"
    network: str = ""
    asset: str = ""
    amount: str = "0"
    pay_to: str = ""
    max_timeout_seconds: int = 0
    extra: Optional[dict[str, Any]] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )

    @field_validator("amount", mode="before")
    def validate_amount(cls, v):
        return canonical_amount(v)

    def amount_value(self) -> int:
        """Amount in minor units as an arbitrary-precision integer."""
        return int(self.amount)


class ResourceInfo(BaseModel):
    url: str = ""
    description: Optional[str] = None
    mime_type: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )


class PaymentRequirement(BaseModel):
    """Normalized payment demand for one resource (either wire generation)."""

    x402_version: int
    resource: ResourceInfo
    accepts: list[PaymentOption] = Field(min_length=1)
    extensions: Optional[dict[str, Any]] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )
