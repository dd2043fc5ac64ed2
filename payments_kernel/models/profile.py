"""
Module: payments_kernel.models.profile
Responsibility: ORM persistence for the account of every economic actor,
    client or contractor, including its spendable balance.
Architecture position: Kernel > Models.  May import from db/ only.
    MUST NOT import from services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - balance >= 0 (ck_profile_balance_non_negative).  The transfer service
      checks funds before debiting; the constraint is the last line.
    - role is fixed at provisioning; only contractors carry a profession.
    - balance is mutated only by TransferService inside a locked unit.

Failure modes:
    - IntegrityError on a flush that would drive balance negative.
"""

from decimal import Decimal
from enum import Enum

from sqlalchemy import CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from payments_kernel.db.base import TrackedBase


class ProfileRole(str, Enum):
    """Which side of a contract a profile can stand on."""

    CLIENT = "client"
    CONTRACTOR = "contractor"


class Profile(TrackedBase):
    """
    Account of a client or contractor.

    Guarantees:
        - balance is a two-decimal Decimal, never negative.
        - role is one of ProfileRole.

    Non-goals:
        - Creation and deletion belong to account provisioning, not to
          this kernel; seed_database() is the only writer of new rows.
    """

    __tablename__ = "profiles"

    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_profile_balance_non_negative"),
        Index("idx_profile_role", "role"),
        Index("idx_profile_profession", "profession"),
    )

    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    profession: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    balance: Mapped[Decimal] = mapped_column(
        nullable=False,
        default=Decimal("0.00"),
    )

    role: Mapped[ProfileRole] = mapped_column(
        String(20),
        nullable=False,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_contractor(self) -> bool:
        return self.role == ProfileRole.CONTRACTOR

    def __repr__(self) -> str:
        return f"<Profile {self.id}: {self.full_name} ({self.role})>"
