"""
Payment Orchestrator - one unit of work per external request.

The Orchestrator ties together:
- TransferService: settlement and deposits (write side)
- AgreementSelector: guarded contract/job lookups (read side)
- LeaderboardSelector: earnings and spending aggregates (read side)

Transaction boundary:
    Every mutating call opens its own session through session_scope():
    commit on normal return, rollback on any exception, session closed on
    every path.  Business errors are raised inside the still-open scope, so
    nothing partial is ever committed.  Read-only calls use a session that
    is closed without committing.

Error policy:
    PaymentsKernelError subclasses propagate unchanged.  Unexpected
    SQLAlchemyError is wrapped in PersistenceError (SERVER_SIDE).  Nothing
    is retried here; retry policy belongs to the caller.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from decimal import Decimal
from typing import Callable, Generator, TypeVar
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from payments_kernel.config import PaymentsConfig
from payments_kernel.db.engine import get_session_factory, session_scope
from payments_kernel.domain.clock import Clock, SystemClock
from payments_kernel.domain.dtos import (
    ClientSpending,
    ContractInfo,
    JobInfo,
    NoData,
    ProfessionEarnings,
    ProfileInfo,
)
from payments_kernel.domain.parameters import coerce_limit, parse_amount, parse_date_window
from payments_kernel.exceptions import PaymentsKernelError, PersistenceError, http_status_for
from payments_kernel.logging_config import LogContext, get_logger
from payments_kernel.selectors.agreement_selector import AgreementSelector
from payments_kernel.selectors.leaderboard_selector import LeaderboardSelector
from payments_kernel.services.transfer_service import TransferService

logger = get_logger("services.payment_orchestrator")

T = TypeVar("T")


class PaymentOrchestrator:
    """
    Entry point used by the routing layer and the CLI.

    Holds no per-request state: each method builds its services on a fresh
    session, so one orchestrator can be shared across threads.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session] | None = None,
        clock: Clock | None = None,
        config: PaymentsConfig | None = None,
    ):
        """
        Args:
            session_factory: Factory for per-operation sessions. Defaults to
                the module-level factory from db.engine.
            clock: Clock for payment timestamps. Defaults to SystemClock.
            config: Runtime settings (cap ratio, default limit).
        """
        self._session_factory = session_factory or get_session_factory()
        self._clock = clock or SystemClock()
        self._config = config or PaymentsConfig()

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------

    def settle_job(self, job_id: int, caller_id: int) -> JobInfo:
        """Pay for a job as its client.  See TransferService.settle_job."""

        def _settle(session: Session) -> JobInfo:
            return self._transfers(session).settle_job(job_id, caller_id)

        return self._run_write("settle_job", caller_id, _settle)

    def deposit(self, client_id: int, contractor_id: int, amount: object) -> ProfileInfo:
        """
        Deposit to a contractor as client_id.

        amount may be a str, int or Decimal; it is validated before any
        transaction starts.
        """
        parsed: Decimal = parse_amount(amount)

        def _deposit(session: Session) -> ProfileInfo:
            return self._transfers(session).deposit_to_contractor(
                client_id, contractor_id, parsed
            )

        return self._run_write("deposit", client_id, _deposit)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_contract(self, contract_id: int, caller_id: int) -> ContractInfo:
        return self._run_read(
            "get_contract",
            caller_id,
            lambda session: AgreementSelector(session).get_contract(contract_id, caller_id),
        )

    def list_contracts(self, caller_id: int) -> list[ContractInfo]:
        return self._run_read(
            "list_contracts",
            caller_id,
            lambda session: AgreementSelector(session).list_active_contracts(caller_id),
        )

    def list_unpaid_jobs(self, caller_id: int) -> list[JobInfo]:
        return self._run_read(
            "list_unpaid_jobs",
            caller_id,
            lambda session: AgreementSelector(session).list_unpaid_jobs(caller_id),
        )

    # ------------------------------------------------------------------
    # Leaderboards
    # ------------------------------------------------------------------

    def best_profession(
        self, start: str | None, end: str | None
    ) -> ProfessionEarnings | NoData:
        """Profession that earned the most in [start, end]."""
        window = parse_date_window(start, end)
        return self._run_read(
            "best_profession",
            None,
            lambda session: LeaderboardSelector(session).best_profession(window),
        )

    def best_clients(
        self, start: str | None, end: str | None, limit: object = None
    ) -> list[ClientSpending] | NoData:
        """Clients who paid the most in [start, end], at most limit of them."""
        window = parse_date_window(start, end)
        size = coerce_limit(limit, default=self._config.best_clients_default_limit)
        return self._run_read(
            "best_clients",
            None,
            lambda session: LeaderboardSelector(session).best_clients(window, size),
        )

    # ------------------------------------------------------------------
    # Unit-of-work plumbing
    # ------------------------------------------------------------------

    def _transfers(self, session: Session) -> TransferService:
        return TransferService(
            session,
            clock=self._clock,
            deposit_cap_ratio=self._config.deposit_cap_ratio,
        )

    def _run_write(
        self, operation: str, caller_id: int | None, work: Callable[[Session], T]
    ) -> T:
        with self._logged(operation, caller_id):
            with session_scope(self._session_factory) as session:
                return work(session)

    def _run_read(
        self, operation: str, caller_id: int | None, work: Callable[[Session], T]
    ) -> T:
        with self._logged(operation, caller_id):
            session = self._session_factory()
            try:
                return work(session)
            finally:
                session.close()

    @contextmanager
    def _logged(self, operation: str, caller_id: int | None) -> Generator[None, None, None]:
        with LogContext.bind(
            correlation_id=str(uuid4()),
            caller_id=str(caller_id) if caller_id is not None else None,
            operation=operation,
        ):
            logger.info(f"{operation}_started")
            t0 = time.monotonic()
            try:
                yield
            except PaymentsKernelError as exc:
                logger.warning(
                    f"{operation}_rejected",
                    extra={
                        "code": exc.code,
                        "kind": exc.kind.value,
                        "status": http_status_for(exc),
                        "reason": str(exc),
                        "duration_ms": _elapsed_ms(t0),
                    },
                )
                raise
            except SQLAlchemyError as exc:
                logger.error(
                    f"{operation}_failed",
                    exc_info=True,
                    extra={"duration_ms": _elapsed_ms(t0)},
                )
                raise PersistenceError(operation, str(exc)) from exc
            logger.info(
                f"{operation}_completed",
                extra={"duration_ms": _elapsed_ms(t0)},
            )


def _elapsed_ms(t0: float) -> float:
    return round((time.monotonic() - t0) * 1000, 2)
