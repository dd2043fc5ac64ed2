"""
Module: payments_kernel.models.contract
Responsibility: ORM persistence for work agreements pairing exactly one
    client profile with exactly one contractor profile.
Architecture position: Kernel > Models.  May import from db/ and sibling
    models only.

Invariants enforced:
    - client_id and contractor_id are both required and reference profiles.
    - status is read, never written, by this kernel; lifecycle transitions
      belong to the agreement workflow outside it.  A TERMINATED contract
      is immutable.

Audit relevance:
    The (client_id, contractor_id, status) triple gates every transfer:
    settlement requires the caller to be client_id, and the deposit cap
    sums only IN_PROGRESS contracts of the exact pair.
"""

from enum import Enum

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payments_kernel.db.base import TrackedBase
from payments_kernel.models.profile import Profile


class ContractStatus(str, Enum):
    """Contract lifecycle status."""

    NEW = "new"
    IN_PROGRESS = "in_progress"
    TERMINATED = "terminated"
    COMPLETED = "completed"


# Contracts whose jobs count as earned/spent in leaderboards
SUCCESSFUL_STATUSES = (ContractStatus.IN_PROGRESS, ContractStatus.COMPLETED)

# Contracts under which unpaid jobs are still payable work
ACTIVE_STATUSES = (ContractStatus.NEW, ContractStatus.IN_PROGRESS)


class Contract(TrackedBase):
    """
    Agreement between a client and a contractor.

    Guarantees:
        - Exactly one client and one contractor.
        - status is one of ContractStatus.
    """

    __tablename__ = "contracts"

    __table_args__ = (
        Index("idx_contract_client", "client_id"),
        Index("idx_contract_contractor", "contractor_id"),
        Index("idx_contract_pair_status", "client_id", "contractor_id", "status"),
    )

    terms: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    status: Mapped[ContractStatus] = mapped_column(
        String(20),
        nullable=False,
        default=ContractStatus.NEW,
    )

    client_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id"),
        nullable=False,
    )

    contractor_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id"),
        nullable=False,
    )

    client: Mapped[Profile] = relationship(foreign_keys=[client_id])
    contractor: Mapped[Profile] = relationship(foreign_keys=[contractor_id])

    def __repr__(self) -> str:
        return (
            f"<Contract {self.id}: client={self.client_id} "
            f"contractor={self.contractor_id} ({self.status})>"
        )
