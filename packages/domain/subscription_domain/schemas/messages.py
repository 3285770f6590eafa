"""Inbound messages: instantiate, execute and migrate.

Execute messages arrive as a JSON object with exactly one top-level key
naming the command, e.g. {"issue_capital_call": {"capital_call": {...}}}.
Each command is a frozen model whose class attribute `tag` is that key.
parse_execute_msg() unwraps the envelope and validates the payload; unknown
keys or fields are rejected.

The models describe the superset of every deployed schema generation.
check_schema() narrows that superset to what the configured SchemaVersion
accepts.
"""

import logging
from typing import ClassVar, Dict, Optional, Tuple, Type, Union

from pydantic import AliasChoices, ConfigDict, Field, ValidationError
from pydantic_core import from_json

from ..errors import InvalidMessage
from .base import (
    AddressValidator,
    Amount,
    DaysOfNotice,
    DomainModel,
    ValidatedAddress,
)
from .config import SchemaVersion
from .ledger import AssetExchange

logger = logging.getLogger(__name__)


# =============================================================================
# Instantiate / Migrate
# =============================================================================

class InstantiateMsg(DomainModel):
    """Terms of the subscription, supplied once when the contract is created.

    The raise address is not part of the message: it is the instantiating
    sender.
    """

    admin: ValidatedAddress
    lp: ValidatedAddress
    recovery_admin: Optional[ValidatedAddress] = Field(
        default=None,
        description="Defaults to admin when omitted",
    )
    capital_denom: str = Field(min_length=1)
    commitment_denom: str = Field(min_length=1)
    investment_denom: str = Field(min_length=1)
    capital_per_share: Amount
    min_commitment: Optional[Amount] = None
    max_commitment: Optional[Amount] = None
    min_days_of_notice: Optional[DaysOfNotice] = None
    initial_commitment: Optional[Amount] = None
    required_capital_attribute: Optional[str] = None

    schema_version: SchemaVersion = SchemaVersion.V3
    admin_may_accept: bool = False


class MigrateMsg(DomainModel):
    """Move the instance to a newer message schema generation."""

    schema_version: SchemaVersion


# =============================================================================
# Execute Commands
# =============================================================================

class Command(DomainModel):
    """Base class for execute commands."""

    model_config = ConfigDict(frozen=True)

    tag: ClassVar[str]

    def to_wire(self) -> Dict[str, dict]:
        """Serialize back to the single-key envelope."""
        return {self.tag: self.model_dump(mode="json", exclude_unset=True)}


class Recover(Command):
    """Replace the LP address (recovery admin only)."""

    tag: ClassVar[str] = "recover"

    lp: ValidatedAddress


class Accept(Command):
    tag: ClassVar[str] = "accept"


class CapitalCallIssuance(DomainModel):
    amount: Amount
    days_of_notice: Optional[DaysOfNotice] = None


class IssueCapitalCall(Command):
    tag: ClassVar[str] = "issue_capital_call"

    capital_call: CapitalCallIssuance


class CloseCapitalCall(Command):
    tag: ClassVar[str] = "close_capital_call"

    is_retroactive: bool = False


class IssueRedemption(Command):
    """Redeem `redemption` investment units for `payment` capital.

    When payment is omitted the capital is redemption * capital_per_share,
    or the amount of attached funds.
    """

    tag: ClassVar[str] = "issue_redemption"

    redemption: Optional[Amount] = None
    is_retroactive: bool = False
    payment: Optional[Amount] = None


class IssueDistribution(Command):
    tag: ClassVar[str] = "issue_distribution"

    payment: Optional[Amount] = Field(
        default=None,
        validation_alias=AliasChoices("payment", "amount"),
    )
    is_retroactive: bool = False


class IssueWithdrawal(Command):
    tag: ClassVar[str] = "issue_withdrawal"

    amount: Amount
    to: ValidatedAddress


class AssetExchangeCommand(Command):
    """Shared payload of the asset exchange family."""

    exchanges: Tuple[AssetExchange, ...]
    to: Optional[ValidatedAddress] = None
    memo: Optional[str] = None


class AuthorizeAssetExchange(AssetExchangeCommand):
    tag: ClassVar[str] = "authorize_asset_exchange"


class CancelAssetExchangeAuthorization(AssetExchangeCommand):
    tag: ClassVar[str] = "cancel_asset_exchange_authorization"


class CompleteAssetExchange(AssetExchangeCommand):
    tag: ClassVar[str] = "complete_asset_exchange"


class Redeem(Command):
    tag: ClassVar[str] = "redeem"


ExecuteMsg = Union[
    Recover,
    Accept,
    IssueCapitalCall,
    CloseCapitalCall,
    IssueRedemption,
    IssueDistribution,
    IssueWithdrawal,
    AuthorizeAssetExchange,
    CancelAssetExchangeAuthorization,
    CompleteAssetExchange,
    Redeem,
]

COMMANDS: Dict[str, Type[Command]] = {
    command.tag: command
    for command in (
        Recover,
        Accept,
        IssueCapitalCall,
        CloseCapitalCall,
        IssueRedemption,
        IssueDistribution,
        IssueWithdrawal,
        AuthorizeAssetExchange,
        CancelAssetExchangeAuthorization,
        CompleteAssetExchange,
        Redeem,
    )
}


def parse_execute_msg(raw, address_validator: Optional[AddressValidator] = None) -> Command:
    """Validate a raw execute message into its Command model.

    Args:
        raw: dict, JSON str or JSON bytes
        address_validator: host address check applied to every address field

    Raises:
        InvalidMessage: On a malformed envelope, unknown command or bad payload
    """
    if isinstance(raw, Command):
        return raw
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = from_json(raw)
        except ValueError as exc:
            raise InvalidMessage(f"execute message is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict) or len(raw) != 1:
        raise InvalidMessage("execute message must be an object with exactly one top-level key")

    (tag, payload), = raw.items()
    command = COMMANDS.get(tag)
    if command is None:
        raise InvalidMessage(f"unknown command '{tag}'")

    try:
        return command.model_validate(
            payload,
            context={"address_validator": address_validator} if address_validator else None,
        )
    except ValidationError as exc:
        logger.debug("Rejected %s payload: %s", tag, exc)
        raise InvalidMessage(f"invalid '{tag}' payload: {exc}") from exc


# =============================================================================
# Schema Generations
# =============================================================================

COMMAND_SINCE: Dict[str, SchemaVersion] = {
    "issue_withdrawal": SchemaVersion.V2,
    "authorize_asset_exchange": SchemaVersion.V3,
    "cancel_asset_exchange_authorization": SchemaVersion.V3,
    "complete_asset_exchange": SchemaVersion.V3,
}

FIELD_SINCE: Dict[Tuple[str, str], SchemaVersion] = {
    ("close_capital_call", "is_retroactive"): SchemaVersion.V2,
    ("issue_redemption", "payment"): SchemaVersion.V2,
    ("issue_redemption", "is_retroactive"): SchemaVersion.V2,
    ("issue_distribution", "payment"): SchemaVersion.V2,
    ("issue_distribution", "is_retroactive"): SchemaVersion.V2,
}

# Required in every generation up to and including the given one.
FIELD_REQUIRED_UNTIL: Dict[Tuple[str, str], SchemaVersion] = {
    ("issue_redemption", "redemption"): SchemaVersion.V2,
}


def check_schema(command: Command, version: SchemaVersion) -> None:
    """Reject commands and fields the configured schema generation lacks.

    Raises:
        InvalidMessage: If the command or one of its set fields is unavailable,
            or a field required by this generation is missing
    """
    since = COMMAND_SINCE.get(command.tag)
    if since is not None and version < since:
        raise InvalidMessage(
            f"'{command.tag}' requires schema version {int(since)}, contract is on {int(version)}"
        )

    for field_name in command.model_fields_set:
        since = FIELD_SINCE.get((command.tag, field_name))
        if since is not None and version < since:
            raise InvalidMessage(
                f"'{command.tag}.{field_name}' requires schema version {int(since)}, "
                f"contract is on {int(version)}"
            )

    for (tag, field_name), until in FIELD_REQUIRED_UNTIL.items():
        if tag == command.tag and version <= until and getattr(command, field_name) is None:
            raise InvalidMessage(
                f"'{command.tag}.{field_name}' is required on schema version {int(version)}"
            )
