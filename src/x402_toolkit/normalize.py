"""Normalization of 402 payment demands across both wire-format generations.

Generation 1 bodies carry ``maxAmountRequired`` plus the resource description
inline on every accept entry. Generation 2 bodies carry ``amount`` on each
accept entry and a top-level ``resource`` object. Both share the ``accepts``
field name, so the generation is sniffed from the first accept entry and the
top-level shape before anything is built.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import ValidationError

from x402_toolkit.schemas import PaymentOption, PaymentRequirement, ResourceInfo

DEFAULT_SCHEME = "exact"


@dataclass(frozen=True)
class GenerationOneDemand:
    raw: Mapping[str, Any]
    accepts: list[Any]

    default_version = 1
    amount_fields = ("maxAmountRequired",)

    def resource_info(self) -> dict[str, Any]:
        first = self.accepts[0]
        fallback = self.raw.get("resource")
        if not isinstance(fallback, Mapping):
            fallback = {}
        return {
            "url": first_not_none(first.get("resource"), fallback.get("url"), ""),
            "description": first_not_none(first.get("description"), fallback.get("description")),
            "mime_type": first_not_none(first.get("mimeType"), fallback.get("mimeType")),
        }


@dataclass(frozen=True)
class GenerationTwoDemand:
    raw: Mapping[str, Any]
    accepts: list[Any]

    default_version = 2
    amount_fields = ("amount", "maxAmountRequired")

    def resource_info(self) -> dict[str, Any]:
        resource = self.raw["resource"]
        return {
            "url": first_not_none(resource.get("url"), ""),
            "description": resource.get("description"),
            "mime_type": resource.get("mimeType"),
        }


PaymentDemand = Union[GenerationOneDemand, GenerationTwoDemand]


def first_not_none(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def classify_payment_required(raw: Any) -> Optional[PaymentDemand]:
    """Decide which wire generation a decoded 402 body belongs to.

    Returns:
        The tagged demand, or None when the shape is not recognized.
    """
    if not isinstance(raw, Mapping):
        return None
    accepts = raw.get("accepts")
    if not isinstance(accepts, list) or not accepts:
        return None

    first = accepts[0]
    if not isinstance(first, Mapping):
        return None

    if isinstance(first.get("amount"), str) and isinstance(raw.get("resource"), Mapping):
        return GenerationTwoDemand(raw=raw, accepts=accepts)
    if isinstance(first.get("maxAmountRequired"), str):
        return GenerationOneDemand(raw=raw, accepts=accepts)
    return None


def build_payment_option(
    accept: Mapping[str, Any],
    amount_fields: Sequence[str] = ("amount", "maxAmountRequired"),
) -> PaymentOption:
    """Build one PaymentOption from a raw accept entry.

    Args:
        accept: Raw accept entry.
        amount_fields: Fields that may hold the amount, in order of
            preference. The amount is ``"0"`` when none is present.

    Raises:
        pydantic.ValidationError: If a present field has an invalid value.
    """
    amount = first_not_none(*(accept.get(field) for field in amount_fields), "0")

    extra = accept.get("extra")
    return PaymentOption(
        scheme=first_not_none(accept.get("scheme"), DEFAULT_SCHEME),
        network=first_not_none(accept.get("network"), ""),
        asset=first_not_none(accept.get("asset"), ""),
        amount=amount,
        pay_to=first_not_none(accept.get("payTo"), ""),
        max_timeout_seconds=first_not_none(accept.get("maxTimeoutSeconds"), 0),
        extra=dict(extra) if isinstance(extra, Mapping) else None,
    )


def _build_requirement(demand: PaymentDemand) -> PaymentRequirement:
    version = demand.raw.get("x402Version")
    if not isinstance(version, int) or isinstance(version, bool):
        version = demand.default_version

    options = []
    for accept in demand.accepts:
        if not isinstance(accept, Mapping):
            raise ValueError("accept entries must be objects")
        options.append(build_payment_option(accept, demand.amount_fields))

    extensions = demand.raw.get("extensions")
    return PaymentRequirement(
        x402_version=version,
        resource=ResourceInfo(**demand.resource_info()),
        accepts=options,
        extensions=dict(extensions) if isinstance(extensions, Mapping) else None,
    )


def normalize_payment_required(raw: Any) -> Optional[PaymentRequirement]:
    """Convert a decoded 402 body of either generation into a PaymentRequirement.

    Never raises: anything that cannot be positively identified as
    generation 1 or 2, or whose fields fail validation, yields None.
    """
    demand = classify_payment_required(raw)
    if demand is None:
        return None
    try:
        return _build_requirement(demand)
    except (ValidationError, ValueError, TypeError):
        return None


def parse_payment_required(content: Union[bytes, str, None]) -> Optional[PaymentRequirement]:
    """Decode a raw 402 response body and normalize it.

    Returns:
        The requirement, or None for empty, malformed or unrecognized bodies.
    """
    if not content:
        return None
    try:
        raw = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return normalize_payment_required(raw)
