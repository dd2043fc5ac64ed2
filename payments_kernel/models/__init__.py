"""ORM models for the payments kernel."""

from payments_kernel.models.contract import (
    ACTIVE_STATUSES,
    SUCCESSFUL_STATUSES,
    Contract,
    ContractStatus,
)
from payments_kernel.models.job import Job
from payments_kernel.models.profile import Profile, ProfileRole

__all__ = [
    "ACTIVE_STATUSES",
    "SUCCESSFUL_STATUSES",
    "Contract",
    "ContractStatus",
    "Job",
    "Profile",
    "ProfileRole",
]
