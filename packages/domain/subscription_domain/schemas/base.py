"""Base classes and type system for subscription contract models.

This module provides the foundational types, validators, and base classes
used throughout the schema system: integer widths that mirror the on-chain
message schema, the validated address boundary type, and attached coins.
"""

import re
from typing import Annotated, Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, Strict
from pydantic_core import core_schema

# =============================================================================
# Base Model
# =============================================================================

class DomainModel(BaseModel):
    """Base class for all domain models.

    Provides common configuration for all Pydantic models in the domain layer:
    - Validation on assignment for runtime safety
    - Enum value serialization
    - Unknown fields rejected (message payloads are additionalProperties: false)
    """

    model_config = ConfigDict(
        validate_assignment=True,
        use_enum_values=True,
        extra="forbid",
        populate_by_name=True,
    )


class RecordModel(DomainModel):
    """Immutable, hashable value record."""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# Type Aliases - Numeric
# =============================================================================

U16_MAX = 2**16 - 1
U64_MAX = 2**64 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

Amount = Annotated[
    int,
    Strict(),
    Field(ge=0, le=U64_MAX, description="Unsigned 64-bit amount in the smallest denom unit"),
]

SignedAmount = Annotated[
    int,
    Strict(),
    Field(ge=I64_MIN, le=I64_MAX, description="Signed 64-bit delta (positive = owed to LP)"),
]

SequenceNumber = Annotated[
    int,
    Strict(),
    Field(ge=0, le=U16_MAX, description="Position in the contract-wide ledger order"),
]

DaysOfNotice = Annotated[
    int,
    Strict(),
    Field(ge=0, le=U16_MAX, description="Notice period in days"),
]

Timestamp = Annotated[
    int,
    Strict(),
    Field(ge=0, le=U64_MAX, description="Unix timestamp in seconds"),
]


# =============================================================================
# Validated Address
# =============================================================================

AddressValidator = Callable[[str], str]

TRUSTED_ADDRESSES = "trusted_addresses"

_ADDRESS_PATTERN = re.compile(r"^[a-z0-9]+$")


def default_address_validator(raw: str) -> str:
    """Structural check used when the host supplies no validator.

    Bech32 forbids mixed case; the canonical form is lower case.
    """
    if not raw:
        raise ValueError("address must not be empty")
    if raw != raw.strip() or any(ch.isspace() for ch in raw):
        raise ValueError(f"address must not contain whitespace: {raw!r}")
    if raw.lower() != raw and raw.upper() != raw:
        raise ValueError(f"address must not be mixed case: {raw!r}")
    normalized = raw.lower()
    if not _ADDRESS_PATTERN.match(normalized):
        raise ValueError(f"address has invalid characters: {raw!r}")
    return normalized


class ValidatedAddress(str):
    """A chain address that has passed host validation.

    Instances are only produced by validate_address() or by pydantic
    validation. Raw strings reaching a model field are run through the
    validator found in the validation context under "address_validator",
    falling back to default_address_validator. Under a "trusted_addresses"
    context (reloading persisted state) strings are wrapped unchanged.
    """

    __slots__ = ()

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.with_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _validate(cls, value: Any, info: core_schema.ValidationInfo) -> "ValidatedAddress":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError("address must be a string")
        context = info.context or {}
        if context.get(TRUSTED_ADDRESSES):
            return cls(value)
        return validate_address(value, context.get("address_validator"))

    def __repr__(self) -> str:
        return f"ValidatedAddress({str.__repr__(self)})"


def validate_address(raw: str, validator: Optional[AddressValidator] = None) -> ValidatedAddress:
    """Run raw through the host validator and wrap the canonical result.

    Raises:
        ValueError: If the validator rejects the address
    """
    check = validator or default_address_validator
    return ValidatedAddress(check(raw))


# =============================================================================
# Attached Funds
# =============================================================================

class Coin(RecordModel):
    """Funds attached to an inbound message by the host."""

    denom: str = Field(min_length=1, description="Denomination of the attached funds")
    amount: Amount
