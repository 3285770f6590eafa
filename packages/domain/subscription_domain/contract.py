"""Host entry points: instantiate, execute and migrate.

These wire the pure handler layer to a host key/value store. Each entry
point loads the state, applies one message, and saves only on success, so
a failed call leaves the stored bytes exactly as they were.
"""

import logging
from typing import Optional, Sequence, Union

from pydantic import ValidationError

from .errors import InvalidAmount, InvalidMessage, InvalidState
from .handlers import Dispatcher, Response
from .handlers.validation import require_divisible
from .schemas import (
    AddressValidator,
    Coin,
    Command,
    ContractState,
    DeploymentCFG,
    InstantiateMsg,
    MigrateMsg,
    Status,
    ValidatedAddress,
    parse_execute_msg,
)
from .storage import KeyValueStore, StateSingleton

logger = logging.getLogger(__name__)


def _validate_msg(model, raw, address_validator: Optional[AddressValidator]):
    if isinstance(raw, model):
        return raw
    context = {"address_validator": address_validator} if address_validator else None
    try:
        if isinstance(raw, (str, bytes, bytearray)):
            return model.model_validate_json(raw, context=context)
        return model.model_validate(raw, context=context)
    except ValidationError as exc:
        raise InvalidMessage(f"invalid {model.__name__}: {exc}") from exc


def build_state(msg: InstantiateMsg, sender: ValidatedAddress) -> ContractState:
    """Create the initial Draft state. The instantiating sender becomes the raise.

    Raises:
        InvalidAmount: If the commitment terms are inconsistent
    """
    per_share = msg.capital_per_share
    for name in ("min_commitment", "max_commitment", "initial_commitment"):
        value = getattr(msg, name)
        if value is not None:
            require_divisible(value, per_share, name.replace("_", " "))

    if msg.min_commitment is not None and msg.max_commitment is not None:
        if msg.min_commitment > msg.max_commitment:
            raise InvalidAmount("min commitment exceeds max commitment")

    if msg.initial_commitment is not None:
        if msg.min_commitment is not None and msg.initial_commitment < msg.min_commitment:
            raise InvalidAmount("initial commitment less than minimum")
        if msg.max_commitment is not None and msg.initial_commitment > msg.max_commitment:
            raise InvalidAmount("initial commitment more than maximum")

    return ContractState(
        admin=msg.admin,
        lp=msg.lp,
        raise_address=sender,
        recovery_admin=msg.recovery_admin or msg.admin,
        capital_denom=msg.capital_denom,
        commitment_denom=msg.commitment_denom,
        investment_denom=msg.investment_denom,
        capital_per_share=per_share,
        min_commitment=msg.min_commitment,
        max_commitment=msg.max_commitment,
        commitment=msg.initial_commitment,
        min_days_of_notice=msg.min_days_of_notice,
        required_capital_attribute=msg.required_capital_attribute,
        status=Status.DRAFT,
        sequence=0,
        config=DeploymentCFG(
            schema_version=msg.schema_version,
            admin_may_accept=msg.admin_may_accept,
        ),
    )


def instantiate(
    store: KeyValueStore,
    sender: ValidatedAddress,
    msg: Union[InstantiateMsg, dict, str, bytes],
    address_validator: Optional[AddressValidator] = None,
) -> ContractState:
    """Create and persist the contract state.

    Raises:
        InvalidState: If the store already holds a contract
        InvalidMessage: If the message does not validate
        InvalidAmount: If the commitment terms are inconsistent
    """
    singleton = StateSingleton(store)
    if singleton.exists():
        raise InvalidState("contract already instantiated")

    state = build_state(_validate_msg(InstantiateMsg, msg, address_validator), sender)
    singleton.save(state)
    logger.info("Instantiated subscription for lp=%s raise=%s", state.lp, state.raise_address)
    return state


def execute(
    store: KeyValueStore,
    sender: ValidatedAddress,
    msg: Union[Command, dict, str, bytes],
    funds: Sequence[Coin] = (),
    address_validator: Optional[AddressValidator] = None,
    dispatcher: Optional[Dispatcher] = None,
) -> Response:
    """Apply one execute message to the stored state.

    The new state is saved only when the handler succeeds; the returned
    transfers are for the host to execute in the same transaction.

    Raises:
        ContractError: If the message is rejected (nothing is saved)
    """
    singleton = StateSingleton(store)
    state = singleton.load()
    command = parse_execute_msg(msg, address_validator)

    response = (dispatcher or Dispatcher()).dispatch(state, command, sender, funds)
    singleton.save(response.state)
    return response


def migrate(
    store: KeyValueStore,
    msg: Union[MigrateMsg, dict, str, bytes],
) -> ContractState:
    """Move the stored contract to a newer schema generation.

    Raises:
        InvalidState: If the target generation is older than the current one
    """
    singleton = StateSingleton(store)
    state = singleton.load()
    target = _validate_msg(MigrateMsg, msg, None).schema_version

    current = state.config.version
    if target < current:
        raise InvalidState(f"cannot migrate from schema version {int(current)} down to {int(target)}")

    state.config = DeploymentCFG(
        schema_version=target,
        admin_may_accept=state.config.admin_may_accept,
    )
    singleton.save(state)
    logger.info("Migrated schema version %d -> %d", int(current), int(target))
    return state
