"""
Immutable result objects returned across the kernel boundary.

Services and selectors never hand ORM instances to callers; they convert
to these frozen dataclasses while the session is still open, so results
stay valid after the unit of work is closed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from payments_kernel.models.contract import Contract, ContractStatus
from payments_kernel.models.job import Job
from payments_kernel.models.profile import Profile, ProfileRole


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive timestamps (SQLite drops the offset on storage)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class ProfileInfo:
    id: int
    first_name: str
    last_name: str
    profession: str | None
    role: ProfileRole
    balance: Decimal

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_model(cls, profile: Profile) -> ProfileInfo:
        return cls(
            id=profile.id,
            first_name=profile.first_name,
            last_name=profile.last_name,
            profession=profile.profession,
            role=ProfileRole(profile.role),
            balance=profile.balance,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "profession": self.profession,
            "role": self.role.value,
            "balance": str(self.balance),
        }


@dataclass(frozen=True)
class ContractInfo:
    id: int
    terms: str
    status: ContractStatus
    client_id: int
    contractor_id: int

    @classmethod
    def from_model(cls, contract: Contract) -> ContractInfo:
        return cls(
            id=contract.id,
            terms=contract.terms,
            status=ContractStatus(contract.status),
            client_id=contract.client_id,
            contractor_id=contract.contractor_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "terms": self.terms,
            "status": self.status.value,
            "clientId": self.client_id,
            "contractorId": self.contractor_id,
        }


@dataclass(frozen=True)
class JobInfo:
    """
    A job as seen after a read or a settlement.

    paid is True or None, mirroring storage; payment_date is set iff paid.
    """

    id: int
    description: str
    price: Decimal
    paid: bool | None
    payment_date: datetime | None
    contract_id: int

    @property
    def is_paid(self) -> bool:
        return bool(self.paid)

    @classmethod
    def from_model(cls, job: Job) -> JobInfo:
        return cls(
            id=job.id,
            description=job.description,
            price=job.price,
            paid=job.paid,
            payment_date=as_utc(job.payment_date),
            contract_id=job.contract_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "price": str(self.price),
            "paid": self.paid,
            "paymentDate": self.payment_date.isoformat() if self.payment_date else None,
            "contractId": self.contract_id,
        }


@dataclass(frozen=True)
class ProfessionEarnings:
    """Top-earning profession in a window."""

    profession: str
    earnings: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"profession": self.profession, "earnings": str(self.earnings)}


@dataclass(frozen=True)
class ClientSpending:
    """One row of the best-clients leaderboard."""

    id: int
    paid: Decimal
    full_name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "paid": str(self.paid), "fullName": self.full_name}


@dataclass(frozen=True)
class NoData:
    """Explicit empty result of a leaderboard query; not an error."""

    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}
