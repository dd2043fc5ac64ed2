"""
TransferService -- invariant-checked balance movements.

Responsibility:
    Moves money between profiles inside the caller's transaction:
    settlement of a job (client -> contractor) and discretionary deposit
    to a contractor capped by the in-progress work between the pair.

Architecture position:
    Kernel > Services.  Flush-only (see BaseService); PaymentOrchestrator
    owns the transaction boundary.

Invariants enforced:
    - A job is paid at most once.  The job row is read with
      SELECT ... FOR UPDATE and the paid flag is checked after the lock is
      granted, so a concurrent settlement either waits and then sees
      paid=true, or never starts.
    - Only the contract's client may settle its jobs; the payee is always
      the contract's contractor, never a caller-supplied id.
    - No overdraft: client balance >= price is checked on the locked row.
    - Conservation: client loses exactly what the contractor gains.
    - Deposits never exceed deposit_cap_ratio * SUM(price) of jobs on the
      pair's IN_PROGRESS contracts; the cap is computed under the same
      transaction, with those contracts locked, as the balance write.

Failure modes (all raised before or between flushes, so the caller's
rollback discards every partial write):
    - JobNotFoundError, JobAlreadyPaidError, InsufficientFundsError
    - ProfileNotFoundError, InvalidDepositTargetError, DepositCapExceededError
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from payments_kernel.config import DEFAULT_DEPOSIT_CAP_RATIO
from payments_kernel.db.types import ZERO, round_money
from payments_kernel.domain.clock import Clock
from payments_kernel.domain.dtos import JobInfo, ProfileInfo
from payments_kernel.exceptions import (
    DepositCapExceededError,
    InsufficientFundsError,
    InvalidDepositTargetError,
    JobAlreadyPaidError,
    JobNotFoundError,
    ProfileNotFoundError,
)
from payments_kernel.logging_config import get_logger
from payments_kernel.models.contract import Contract, ContractStatus
from payments_kernel.models.job import Job
from payments_kernel.models.profile import Profile, ProfileRole
from payments_kernel.services.authorization import client_of_record, pair_of_record
from payments_kernel.services.base import BaseService

logger = get_logger("services.transfer")


class TransferService(BaseService):
    """
    Write side of the ledger: settlement and deposits.

    Every public method returns a DTO built from the flushed rows.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        deposit_cap_ratio: Decimal = DEFAULT_DEPOSIT_CAP_RATIO,
    ):
        super().__init__(session, clock)
        self.deposit_cap_ratio = deposit_cap_ratio

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def settle_job(self, job_id: int, caller_id: int) -> JobInfo:
        """
        Pay for a job from the caller's balance to the contractor's.

        Args:
            job_id: Job to settle.
            caller_id: Profile id of the paying client.

        Returns:
            JobInfo with paid=True and the payment timestamp.

        Raises:
            JobNotFoundError: Job missing or caller is not the contract's client.
            JobAlreadyPaidError: Job was settled before.
            InsufficientFundsError: Client balance is below the job price.
        """
        row = self.session.execute(
            select(Job, Contract.contractor_id)
            .join(Job.contract)
            .where(Job.id == job_id, client_of_record(caller_id))
            .with_for_update(of=Job)
        ).one_or_none()
        if row is None:
            raise JobNotFoundError(job_id)

        job, contractor_id = row
        if job.is_paid:
            raise JobAlreadyPaidError(job_id)

        client, contractor = self._lock_profiles(caller_id, contractor_id)

        if client.balance < job.price:
            raise InsufficientFundsError(
                profile_id=client.id,
                balance=str(client.balance),
                required=str(job.price),
            )

        client.balance = client.balance - job.price
        contractor.balance = contractor.balance + job.price
        job.paid = True
        job.payment_date = self.clock.now_utc()
        self.session.flush()

        logger.info(
            "job_settled",
            extra={
                "job_id": job.id,
                "contract_id": job.contract_id,
                "client_id": client.id,
                "contractor_id": contractor.id,
                "amount": str(job.price),
            },
        )
        return JobInfo.from_model(job)

    def _lock_profiles(self, client_id: int, contractor_id: int) -> tuple[Profile, Profile]:
        """Lock both sides of a transfer in ascending id order (no lock cycles)."""
        profiles = {
            profile.id: profile
            for profile in self.session.execute(
                select(Profile)
                .where(Profile.id.in_({client_id, contractor_id}))
                .order_by(Profile.id)
                .with_for_update()
            ).scalars()
        }
        # Contract foreign keys guarantee both rows exist
        return profiles[client_id], profiles[contractor_id]

    # ------------------------------------------------------------------
    # Deposits
    # ------------------------------------------------------------------

    def deposit_to_contractor(
        self,
        client_id: int,
        contractor_id: int,
        amount: Decimal,
    ) -> ProfileInfo:
        """
        Credit a contractor from a client, bounded by their in-progress work.

        Args:
            client_id: Profile id of the depositing client (the caller).
            contractor_id: Profile id receiving the deposit.
            amount: Positive two-decimal amount (see parse_amount).

        Returns:
            ProfileInfo of the contractor after the deposit.

        Raises:
            ProfileNotFoundError: contractor_id does not exist.
            InvalidDepositTargetError: contractor_id is not a contractor.
            DepositCapExceededError: amount is above the cap.
        """
        contractor = self.session.execute(
            select(Profile).where(Profile.id == contractor_id).with_for_update()
        ).scalar_one_or_none()
        if contractor is None:
            raise ProfileNotFoundError(contractor_id)
        if not contractor.is_contractor:
            raise InvalidDepositTargetError(contractor_id, ProfileRole(contractor.role).value)

        cap = self._deposit_cap(client_id, contractor_id)
        if amount > cap:
            raise DepositCapExceededError(
                contractor_id=contractor_id,
                amount=str(amount),
                cap=str(cap),
            )

        contractor.balance = contractor.balance + amount
        self.session.flush()

        logger.info(
            "deposit_applied",
            extra={
                "client_id": client_id,
                "contractor_id": contractor_id,
                "amount": str(amount),
                "cap": str(cap),
            },
        )
        return ProfileInfo.from_model(contractor)

    def _deposit_cap(self, client_id: int, contractor_id: int) -> Decimal:
        """Cap over the pair's IN_PROGRESS contracts, rounded down to the cent."""
        contract_ids = (
            self.session.execute(
                select(Contract.id)
                .where(
                    pair_of_record(client_id, contractor_id),
                    Contract.status == ContractStatus.IN_PROGRESS.value,
                )
                .order_by(Contract.id)
                .with_for_update()
            )
            .scalars()
            .all()
        )
        if not contract_ids:
            return ZERO

        total = self.session.execute(
            select(func.coalesce(func.sum(Job.price), 0)).where(
                Job.contract_id.in_(contract_ids)
            )
        ).scalar_one()
        return round_money(
            Decimal(str(total)) * self.deposit_cap_ratio, rounding=ROUND_DOWN
        )
