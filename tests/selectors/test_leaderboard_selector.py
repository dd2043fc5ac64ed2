"""
Tests for LeaderboardSelector.

Reference data paid jobs counted in August 2020 (contracts 2, 3, 7):
    client 4 -> 2020.00, client 2 -> 442.00, client 1 -> 221.00,
    all earned by Programmers (contractors 6 and 7).
Jobs 9-11 are paid but sit on terminated/new contracts and never count.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from payments_kernel.domain.dtos import ClientSpending, NoData, ProfessionEarnings
from payments_kernel.domain.parameters import DateWindow, parse_date_window
from payments_kernel.selectors.leaderboard_selector import (
    NO_EARNINGS_MESSAGE,
    NO_PAYMENTS_MESSAGE,
    LeaderboardSelector,
)
from payments_kernel.services.transfer_service import TransferService


@pytest.fixture
def leaderboard(session, seeded) -> LeaderboardSelector:
    return LeaderboardSelector(session)


AUGUST = parse_date_window("2020-08-01", "2020-08-31")


class TestBestProfession:

    def test_august(self, leaderboard):
        assert leaderboard.best_profession(AUGUST) == ProfessionEarnings(
            "Programmer", Decimal("2683.00")
        )

    def test_terminated_contract_earnings_are_excluded(self, leaderboard):
        """Jobs 9 and 10, paid on 08-17, sit on terminated and new contracts."""
        window = parse_date_window("2020-08-17", "2020-08-17")

        assert leaderboard.best_profession(window) == NoData(NO_EARNINGS_MESSAGE)

    def test_empty_window(self, leaderboard):
        window = parse_date_window("2019-01-01", "2019-12-31")

        result = leaderboard.best_profession(window)

        assert isinstance(result, NoData)
        assert result.message == "No earnings recorded in sent period"

    def test_tie_breaks_by_profession_name(self, session, make_agreement, clock):
        """Equal earnings: alphabetically first profession wins."""
        transfers = TransferService(session, clock=clock)
        zeta_client, _, _, (zeta_job,) = make_agreement(profession="Zookeeper")
        alpha_client, _, _, (alpha_job,) = make_agreement(profession="Architect")

        transfers.settle_job(zeta_job, zeta_client)
        transfers.settle_job(alpha_job, alpha_client)

        day = clock.now_utc().date().isoformat()
        result = LeaderboardSelector(session).best_profession(parse_date_window(day, day))

        assert result == ProfessionEarnings("Architect", Decimal("200.00"))

    def test_completed_contracts_count(self, session, make_agreement, clock):
        from payments_kernel.models.contract import Contract, ContractStatus

        client_id, _, contract_id, (job_id,) = make_agreement(profession="Pilot")
        TransferService(session, clock=clock).settle_job(job_id, client_id)
        session.get(Contract, contract_id).status = ContractStatus.COMPLETED.value
        session.flush()

        day = clock.now_utc().date().isoformat()
        result = LeaderboardSelector(session).best_profession(parse_date_window(day, day))

        assert result == ProfessionEarnings("Pilot", Decimal("200.00"))


class TestBestClients:

    def test_limit_two(self, leaderboard):
        result = leaderboard.best_clients(AUGUST, limit=2)

        assert result == [
            ClientSpending(4, Decimal("2020.00"), "Ash Kethcum"),
            ClientSpending(2, Decimal("442.00"), "Mr Robot"),
        ]

    def test_limit_larger_than_result(self, leaderboard):
        result = leaderboard.best_clients(AUGUST, limit=5)

        assert [c.id for c in result] == [4, 2, 1]
        assert [c.paid for c in result] == sorted((c.paid for c in result), reverse=True)

    def test_date_only_end_covers_whole_day(self, leaderboard):
        """Jobs 6, 7, 12, 13 are paid at 19:11 on 2020-08-15."""
        window = parse_date_window("2020-08-15", "2020-08-15")

        result = leaderboard.best_clients(window, limit=5)

        assert result == [
            ClientSpending(4, Decimal("2020.00"), "Ash Kethcum"),
            ClientSpending(1, Decimal("221.00"), "Harry Potter"),
            ClientSpending(2, Decimal("121.00"), "Mr Robot"),
        ]

    def test_bounds_are_inclusive(self, leaderboard):
        paid_at = datetime(2020, 8, 15, 19, 11, 26, 737000, tzinfo=timezone.utc)
        window = DateWindow(start=paid_at, end=paid_at)

        result = leaderboard.best_clients(window, limit=5)

        assert [c.id for c in result] == [4, 1, 2]

    def test_late_evening_payment_stays_on_its_day(self, leaderboard):
        """Job 14 is paid at 23:11 on 2020-08-14."""
        window = parse_date_window("2020-08-14", "2020-08-14")

        assert leaderboard.best_clients(window, limit=5) == [
            ClientSpending(2, Decimal("121.00"), "Mr Robot")
        ]

    def test_empty_window(self, leaderboard):
        window = parse_date_window("2021-01-01", "2021-01-31")

        assert leaderboard.best_clients(window, limit=2) == NoData(NO_PAYMENTS_MESSAGE)

    def test_tie_breaks_by_client_id(self, session, make_agreement, clock):
        transfers = TransferService(session, clock=clock)
        first_client, _, _, (first_job,) = make_agreement()
        second_client, _, _, (second_job,) = make_agreement()

        transfers.settle_job(second_job, second_client)
        transfers.settle_job(first_job, first_client)

        day = clock.now_utc().date().isoformat()
        result = LeaderboardSelector(session).best_clients(parse_date_window(day, day), 2)

        assert [c.id for c in result] == [first_client, second_client]
