"""
Module: payments_kernel.models.job
Responsibility: ORM persistence for billable units of work under a contract.
Architecture position: Kernel > Models.

Invariants enforced:
    - price > 0 (ck_job_price_positive).
    - paid is NULL (unpaid) or true (paid), never false (ck_job_paid_tristate).
    - payment_date is set if and only if paid is set (ck_job_paid_has_date).
    - paid transitions unpaid -> paid exactly once, performed only by
      TransferService.settle_job under a row lock.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payments_kernel.db.base import TrackedBase
from payments_kernel.models.contract import Contract


class Job(TrackedBase):
    """A priced piece of work belonging to exactly one contract."""

    __tablename__ = "jobs"

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_job_price_positive"),
        CheckConstraint(
            "(paid IS NULL AND payment_date IS NULL)"
            " OR (paid IS NOT NULL AND payment_date IS NOT NULL)",
            name="ck_job_paid_has_date",
        ),
        CheckConstraint("paid IS NULL OR paid", name="ck_job_paid_tristate"),
        Index("idx_job_contract", "contract_id"),
        Index("idx_job_payment_date", "payment_date"),
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    price: Mapped[Decimal] = mapped_column(
        nullable=False,
    )

    # NULL means unpaid; there is no stored False
    paid: Mapped[bool | None] = mapped_column(
        Boolean,
        nullable=True,
        default=None,
    )

    payment_date: Mapped[datetime | None] = mapped_column(
        nullable=True,
    )

    contract_id: Mapped[int] = mapped_column(
        ForeignKey("contracts.id"),
        nullable=False,
    )

    contract: Mapped[Contract] = relationship()

    @property
    def is_paid(self) -> bool:
        return bool(self.paid)

    def __repr__(self) -> str:
        state = "paid" if self.is_paid else "unpaid"
        return f"<Job {self.id}: {self.price} on contract {self.contract_id} ({state})>"
