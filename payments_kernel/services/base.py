"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every write-side service.  Concrete services receive a SQLAlchemy
    ``Session`` and persist with ``session.flush()`` -- never
    ``session.commit()``.

Invariants enforced:
    Transaction boundaries: services flush within the caller's transaction
    and never commit or rollback themselves.  The caller
    (PaymentOrchestrator or a test harness) owns commit/rollback, so a
    business error raised mid-operation rolls back every write made so far.
"""

from abc import ABC

from sqlalchemy.orm import Session

from payments_kernel.domain.clock import Clock, SystemClock


class BaseService(ABC):
    """
    Abstract base class for all kernel services.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
        - Does NOT provide reporting reads -- those belong in
          ``payments_kernel/selectors/``.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        """
        Args:
            session: SQLAlchemy session for database operations.
            clock: Time source for persisted timestamps. Defaults to SystemClock.
        """
        self.session = session
        self.clock = clock or SystemClock()
