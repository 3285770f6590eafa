"""Subscription contract schemas.

This package contains all Pydantic models for the contract domain layer:
- Base types and the validated address boundary type
- Ledger records (capital calls, distributions, redemptions, withdrawals)
- Asset exchanges and their staged authorizations
- Deployment configuration and schema generations
- The persisted ContractState aggregate
- Inbound messages and outbound transfer instructions

Usage:
    from subscription_domain.schemas import (
        ContractState, InstantiateMsg, parse_execute_msg, TransferInstruction
    )
"""

# Base types
from .base import (
    DomainModel,
    RecordModel,
    Amount,
    SignedAmount,
    SequenceNumber,
    DaysOfNotice,
    Timestamp,
    U16_MAX,
    U64_MAX,
    I64_MIN,
    I64_MAX,
    ValidatedAddress,
    AddressValidator,
    default_address_validator,
    validate_address,
    Coin,
)

# Ledger
from .ledger import (
    LedgerRecord,
    CapitalCall,
    Distribution,
    Redemption,
    Withdrawal,
    DueDate,
    AvailableDate,
    ExchangeDate,
    AssetExchange,
    AssetExchangeAuthorization,
)

# Configuration
from .config import SchemaVersion, DeploymentCFG

# State
from .state import Status, ContractState

# Messages
from .messages import (
    InstantiateMsg,
    MigrateMsg,
    Command,
    Recover,
    Accept,
    CapitalCallIssuance,
    IssueCapitalCall,
    CloseCapitalCall,
    IssueRedemption,
    IssueDistribution,
    IssueWithdrawal,
    AssetExchangeCommand,
    AuthorizeAssetExchange,
    CancelAssetExchangeAuthorization,
    CompleteAssetExchange,
    Redeem,
    ExecuteMsg,
    COMMANDS,
    parse_execute_msg,
    check_schema,
)

# Transfers
from .transfers import TransferInstruction

__all__ = [
    # Base types
    "DomainModel",
    "RecordModel",
    "Amount",
    "SignedAmount",
    "SequenceNumber",
    "DaysOfNotice",
    "Timestamp",
    "U16_MAX",
    "U64_MAX",
    "I64_MIN",
    "I64_MAX",
    "ValidatedAddress",
    "AddressValidator",
    "default_address_validator",
    "validate_address",
    "Coin",
    # Ledger
    "LedgerRecord",
    "CapitalCall",
    "Distribution",
    "Redemption",
    "Withdrawal",
    "DueDate",
    "AvailableDate",
    "ExchangeDate",
    "AssetExchange",
    "AssetExchangeAuthorization",
    # Configuration
    "SchemaVersion",
    "DeploymentCFG",
    # State
    "Status",
    "ContractState",
    # Messages
    "InstantiateMsg",
    "MigrateMsg",
    "Command",
    "Recover",
    "Accept",
    "CapitalCallIssuance",
    "IssueCapitalCall",
    "CloseCapitalCall",
    "IssueRedemption",
    "IssueDistribution",
    "IssueWithdrawal",
    "AssetExchangeCommand",
    "AuthorizeAssetExchange",
    "CancelAssetExchangeAuthorization",
    "CompleteAssetExchange",
    "Redeem",
    "ExecuteMsg",
    "COMMANDS",
    "parse_execute_msg",
    "check_schema",
    # Transfers
    "TransferInstruction",
]
