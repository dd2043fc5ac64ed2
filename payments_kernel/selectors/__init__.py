"""Selectors for the payments kernel (read side)."""

from payments_kernel.selectors.agreement_selector import AgreementSelector
from payments_kernel.selectors.leaderboard_selector import LeaderboardSelector

__all__ = [
    "AgreementSelector",
    "LeaderboardSelector",
]
