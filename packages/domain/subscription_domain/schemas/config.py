"""Deployment configuration for a subscription contract instance.

The same code serves every deployed message-schema generation. Which
commands and fields are accepted is decided by DeploymentCFG.schema_version
rather than by separate code paths.
"""

from enum import IntEnum

from pydantic import Field

from .base import DomainModel


class SchemaVersion(IntEnum):
    """Generations of the execute message schema.

    V1: capital calls, redemptions and distributions paid from attached funds
    V2: explicit payments, retroactive flags and withdrawals
    V3: asset exchanges; redemption units become optional
    """

    V1 = 1
    V2 = 2
    V3 = 3

    @classmethod
    def latest(cls) -> "SchemaVersion":
        return max(cls)


class DeploymentCFG(DomainModel):
    """Per-instance configuration fixed at instantiation (or raised by migrate)."""

    schema_version: SchemaVersion = Field(
        default=SchemaVersion.V3,
        description="Message schema generation in force",
    )

    admin_may_accept: bool = Field(
        default=False,
        description="Allow the admin as well as the LP to accept the draft",
    )

    @property
    def version(self) -> SchemaVersion:
        return SchemaVersion(self.schema_version)
