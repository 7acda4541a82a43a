"""Result types returned by probe and discover."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .payments import PaymentOption, PaymentRequirement


class ProbeResult(BaseModel):
    """Outcome of inspecting one URL for a payment demand."""

    enabled: bool
    url: str
    status: int
    price: Optional[str] = None
    payment_required: Optional[PaymentRequirement] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    @model_validator(mode="after")
    def check_enabled(self) -> "ProbeResult":
        if self.enabled:
            if self.status != 402 or self.payment_required is None or self.price is None:
                raise ValueError("an enabled probe needs status 402, a price and a requirement")
        elif self.price is not None or self.payment_required is not None:
            raise ValueError("a disabled probe carries no price or requirement")
        return self


class ServiceListing(BaseModel):
    """A service listed in the Bazaar registry."""

    url: str
    description: Optional[str] = None
    price: str
    accepts: list[PaymentOption] = Field(min_length=1)
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class DiscoverResult(BaseModel):
    services: list[ServiceListing]
    total: int

    model_config = ConfigDict(frozen=True)
