"""Domain layer: clock, DTOs and boundary parameter parsing."""

from payments_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from payments_kernel.domain.dtos import (
    ClientSpending,
    ContractInfo,
    JobInfo,
    NoData,
    ProfessionEarnings,
    ProfileInfo,
)
from payments_kernel.domain.parameters import (
    DateWindow,
    coerce_limit,
    parse_amount,
    parse_date_window,
)

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "ClientSpending",
    "ContractInfo",
    "JobInfo",
    "NoData",
    "ProfessionEarnings",
    "ProfileInfo",
    "DateWindow",
    "coerce_limit",
    "parse_amount",
    "parse_date_window",
]
