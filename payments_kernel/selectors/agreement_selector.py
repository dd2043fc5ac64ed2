"""
Guarded lookups of contracts and jobs for a calling profile.

Each query carries the authorization predicate in its WHERE clause; rows
belonging to other parties are indistinguishable from missing rows.
"""

from __future__ import annotations

from sqlalchemy import select

from payments_kernel.domain.dtos import ContractInfo, JobInfo
from payments_kernel.exceptions import ContractNotFoundError
from payments_kernel.models.contract import ACTIVE_STATUSES, Contract, ContractStatus
from payments_kernel.models.job import Job
from payments_kernel.selectors.base import BaseSelector
from payments_kernel.services.authorization import party_of_record


class AgreementSelector(BaseSelector):
    """Read access to the caller's own agreements."""

    def get_contract(self, contract_id: int, caller_id: int) -> ContractInfo:
        """
        Get a contract the caller is party to.

        Raises:
            ContractNotFoundError: Contract missing or caller not a party.
        """
        contract = self.session.execute(
            select(Contract).where(Contract.id == contract_id, party_of_record(caller_id))
        ).scalar_one_or_none()
        if contract is None:
            raise ContractNotFoundError(contract_id)
        return ContractInfo.from_model(contract)

    def list_active_contracts(self, caller_id: int) -> list[ContractInfo]:
        """Non-terminated contracts where the caller is client or contractor."""
        contracts = self.session.execute(
            select(Contract)
            .where(
                party_of_record(caller_id),
                Contract.status != ContractStatus.TERMINATED.value,
            )
            .order_by(Contract.id)
        ).scalars()
        return [ContractInfo.from_model(c) for c in contracts]

    def list_unpaid_jobs(self, caller_id: int) -> list[JobInfo]:
        """Unpaid jobs on the caller's new or in-progress contracts."""
        jobs = self.session.execute(
            select(Job)
            .join(Job.contract)
            .where(
                Job.paid.is_(None),
                party_of_record(caller_id),
                Contract.status.in_([s.value for s in ACTIVE_STATUSES]),
            )
            .order_by(Job.id)
        ).scalars()
        return [JobInfo.from_model(j) for j in jobs]
