"""
Module: payments_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.
    Selectors are the read side of the kernel: they accept a Session from the
    caller and return DTOs, never ORM instances.
Architecture position: Kernel > Selectors.  May import from db/, models/,
    domain/ and services/authorization.py (guard predicates only).

Invariants enforced:
    - Read-only access: selectors MUST NOT call session.add(), delete(),
      flush() or commit().
    - Session ownership: the caller owns the session and its scope.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Non-goals:
        - BaseSelector does NOT define any query methods.
    """

    def __init__(self, session: Session):
        """
        Args:
            session: SQLAlchemy session for database operations.
        """
        self.session = session
