"""
Reference data set: 4 clients, 4 contractors, 9 contracts, 14 jobs.

Used by ``payments-kernel seed`` for local runs and by the test suite,
which relies on the ids and amounts below.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import delete, text
from sqlalchemy.orm import Session

from payments_kernel.logging_config import get_logger
from payments_kernel.models.contract import Contract, ContractStatus
from payments_kernel.models.job import Job
from payments_kernel.models.profile import Profile, ProfileRole

logger = get_logger("seed")

CLIENT = ProfileRole.CLIENT
CONTRACTOR = ProfileRole.CONTRACTOR

# id, first name, last name, profession, balance, role
PROFILES = (
    (1, "Harry", "Potter", "Wizard", "1150", CLIENT),
    (2, "Mr", "Robot", "Hacker", "231.11", CLIENT),
    (3, "John", "Snow", "Knows nothing", "451.3", CLIENT),
    (4, "Ash", "Kethcum", "Pokemon master", "1.3", CLIENT),
    (5, "John", "Lenon", "Musician", "64", CONTRACTOR),
    (6, "Linus", "Torvalds", "Programmer", "1214", CONTRACTOR),
    (7, "Alan", "Turing", "Programmer", "22", CONTRACTOR),
    (8, "Aragorn", "II Elessar Telcontarar", "Fighter", "314", CONTRACTOR),
)

# id, status, client id, contractor id
CONTRACTS = (
    (1, ContractStatus.TERMINATED, 1, 5),
    (2, ContractStatus.IN_PROGRESS, 1, 6),
    (3, ContractStatus.IN_PROGRESS, 2, 6),
    (4, ContractStatus.IN_PROGRESS, 2, 7),
    (5, ContractStatus.NEW, 3, 8),
    (6, ContractStatus.IN_PROGRESS, 3, 7),
    (7, ContractStatus.IN_PROGRESS, 4, 7),
    (8, ContractStatus.IN_PROGRESS, 4, 6),
    (9, ContractStatus.IN_PROGRESS, 4, 8),
)

# id, price, payment timestamp (None = unpaid), contract id
JOBS = (
    (1, "200", None, 1),
    (2, "201", None, 2),
    (3, "202", None, 3),
    (4, "200", None, 4),
    (5, "200", None, 7),
    (6, "2020", "2020-08-15T19:11:26.737", 7),
    (7, "200", "2020-08-15T19:11:26.737", 2),
    (8, "200", "2020-08-16T19:11:26.737", 3),
    (9, "200", "2020-08-17T19:11:26.737", 1),
    (10, "200", "2020-08-17T19:11:26.737", 5),
    (11, "21", "2020-08-10T19:11:26.737", 1),
    (12, "21", "2020-08-15T19:11:26.737", 2),
    (13, "121", "2020-08-15T19:11:26.737", 3),
    (14, "121", "2020-08-14T23:11:26.737", 3),
)


def seed_database(session: Session, *, reset: bool = True) -> None:
    """
    Insert the reference data set.

    Args:
        session: Open session; the caller commits.
        reset: Delete existing jobs, contracts and profiles first.
    """
    if reset:
        session.execute(delete(Job))
        session.execute(delete(Contract))
        session.execute(delete(Profile))

    for pid, first, last, profession, balance, role in PROFILES:
        session.add(
            Profile(
                id=pid,
                first_name=first,
                last_name=last,
                profession=profession,
                balance=Decimal(balance),
                role=role,
            )
        )
    session.flush()

    for cid, status, client_id, contractor_id in CONTRACTS:
        session.add(
            Contract(
                id=cid,
                terms="bla bla bla",
                status=status,
                client_id=client_id,
                contractor_id=contractor_id,
            )
        )
    session.flush()

    for jid, price, paid_at, contract_id in JOBS:
        payment_date = (
            datetime.fromisoformat(paid_at).replace(tzinfo=timezone.utc) if paid_at else None
        )
        session.add(
            Job(
                id=jid,
                description="work",
                price=Decimal(price),
                paid=True if payment_date else None,
                payment_date=payment_date,
                contract_id=contract_id,
            )
        )
    session.flush()

    if session.get_bind().dialect.name == "postgresql":
        # Explicit ids bypass the serial sequences
        for table in ("profiles", "contracts", "jobs"):
            session.execute(
                text(
                    f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                    f"(SELECT MAX(id) FROM {table}))"
                )
            )

    logger.info(
        "database_seeded",
        extra={"profiles": len(PROFILES), "contracts": len(CONTRACTS), "jobs": len(JOBS)},
    )
