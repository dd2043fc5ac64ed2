"""
Module: payments_kernel.selectors.leaderboard_selector
Responsibility: Read-only aggregates over settled jobs within a date window:
    the best-earning profession and the top-spending clients.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Filters are applied before aggregation, in SQL: only jobs with
      paid = true, payment_date within [start, end] inclusive, on contracts
      that are IN_PROGRESS or COMPLETED.
    - Deterministic ordering: ties on the summed amount are broken by
      profession name ascending (best_profession) and by client id
      ascending (best_clients).
    - An empty window yields NoData, never an error or None.

Failure modes:
    - None beyond database errors; the window has already been validated by
      parse_date_window() before a selector is called.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import ColumnElement, func, select

from payments_kernel.db.types import round_money
from payments_kernel.domain.dtos import ClientSpending, NoData, ProfessionEarnings
from payments_kernel.domain.parameters import DateWindow
from payments_kernel.models.contract import SUCCESSFUL_STATUSES, Contract
from payments_kernel.models.job import Job
from payments_kernel.models.profile import Profile, ProfileRole
from payments_kernel.selectors.base import BaseSelector

NO_EARNINGS_MESSAGE = "No earnings recorded in sent period"
NO_PAYMENTS_MESSAGE = "No payments recorded in sent period"


class LeaderboardSelector(BaseSelector):
    """Earnings and spending leaderboards."""

    def best_profession(self, window: DateWindow) -> ProfessionEarnings | NoData:
        """
        Profession whose contractors earned the most in the window.

        Returns:
            ProfessionEarnings, or NoData if no job was settled in the window.
        """
        earnings = func.sum(Job.price).label("earnings")
        row = self.session.execute(
            select(Profile.profession, earnings)
            .select_from(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .join(Profile, Contract.contractor_id == Profile.id)
            .where(
                *_settled_within(window),
                Profile.role == ProfileRole.CONTRACTOR.value,
            )
            .group_by(Profile.profession)
            .order_by(earnings.desc(), Profile.profession.asc())
            .limit(1)
        ).one_or_none()

        if row is None:
            return NoData(NO_EARNINGS_MESSAGE)
        return ProfessionEarnings(profession=row.profession, earnings=_money(row.earnings))

    def best_clients(self, window: DateWindow, limit: int) -> list[ClientSpending] | NoData:
        """
        Clients who paid the most in the window, highest first.

        Args:
            window: Inclusive date range.
            limit: Maximum number of rows (already coerced, > 0).

        Returns:
            Up to ``limit`` ClientSpending rows, or NoData if none.
        """
        paid = func.sum(Job.price).label("paid")
        rows = self.session.execute(
            select(Profile.id, Profile.first_name, Profile.last_name, paid)
            .select_from(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .join(Profile, Contract.client_id == Profile.id)
            .where(*_settled_within(window))
            .group_by(Profile.id, Profile.first_name, Profile.last_name)
            .order_by(paid.desc(), Profile.id.asc())
            .limit(limit)
        ).all()

        if not rows:
            return NoData(NO_PAYMENTS_MESSAGE)
        return [
            ClientSpending(
                id=row.id,
                paid=_money(row.paid),
                full_name=f"{row.first_name} {row.last_name}",
            )
            for row in rows
        ]


def _settled_within(window: DateWindow) -> tuple[ColumnElement[bool], ...]:
    return (
        Job.paid.is_(True),
        Job.payment_date >= window.start,
        Job.payment_date <= window.end,
        Contract.status.in_([s.value for s in SUCCESSFUL_STATUSES]),
    )


def _money(value: object) -> Decimal:
    return round_money(Decimal(str(value)))
