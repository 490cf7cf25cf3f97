"""
Integration test for ScoreLedgerRepoImpl against PostgreSQL

Test Focus:
1. record_checkin_score commits the participant flag and the +1 point together
2. finalize flips finalized_at once; a second submission leaves the ledger unchanged
3. Concurrent finalisations: exactly one wins
4. aggregate_by_user sums check-in and final points per identity and resource type
"""

import asyncio

import pytest

from src.platform.exception.exceptions import NotFoundError
from src.service.play_arena.domain.enum.resource_type import ResourceType
from src.service.play_arena.driven_adapter.repo.booking_command_repo_impl import (
    BookingCommandRepoImpl,
)
from src.service.play_arena.driven_adapter.repo.booking_query_repo_impl import (
    BookingQueryRepoImpl,
)
from src.service.play_arena.driven_adapter.repo.score_ledger_repo_impl import ScoreLedgerRepoImpl
from test.service.play_arena.fakes import BOOKING_DAY, at, make_booking


IN_PROGRESS = at(BOOKING_DAY, '10:05')


@pytest.fixture
def ledger() -> ScoreLedgerRepoImpl:
    return ScoreLedgerRepoImpl()


@pytest.fixture
def command_repo() -> BookingCommandRepoImpl:
    return BookingCommandRepoImpl()


@pytest.fixture
def query_repo() -> BookingQueryRepoImpl:
    return BookingQueryRepoImpl()


@pytest.mark.integration
class TestRecordCheckinScore:
    @pytest.mark.asyncio
    async def test_flag_and_point_are_committed_together(
        self,
        ledger: ScoreLedgerRepoImpl,
        command_repo: BookingCommandRepoImpl,
        query_repo: BookingQueryRepoImpl,
    ) -> None:
        booking = make_booking()
        await command_repo.create(booking=booking)
        checked_in = booking.check_in(identity='aa111a', now=IN_PROGRESS)

        record = await ledger.record_checkin_score(booking=checked_in, identity='aa111a')

        assert [(e.identity, e.checkin_score, e.final_score) for e in record.entries] == [
            ('aa111a', 1, 0)
        ]
        stored = await query_repo.get_by_id(booking_id=booking.id)
        assert stored is not None
        assert stored.participants[0].checked_in is True

    @pytest.mark.asyncio
    async def test_deleted_booking_writes_no_score(self, ledger: ScoreLedgerRepoImpl) -> None:
        """
        Given: the booking row no longer exists
        When: a check-in is recorded for it
        Then: NotFoundError, and the transaction leaves no score record behind
        """
        checked_in = make_booking().check_in(identity='aa111a', now=IN_PROGRESS)

        with pytest.raises(NotFoundError):
            await ledger.record_checkin_score(booking=checked_in, identity='aa111a')

        assert await ledger.get_by_booking_id(booking_id=checked_in.id) is None


@pytest.mark.integration
class TestFinalize:
    @pytest.mark.asyncio
    async def test_final_scores_add_to_checkin_points(
        self, ledger: ScoreLedgerRepoImpl, command_repo: BookingCommandRepoImpl
    ) -> None:
        booking = make_booking()
        await command_repo.create(booking=booking)
        await ledger.record_checkin_score(
            booking=booking.check_in(identity='aa111a', now=IN_PROGRESS), identity='aa111a'
        )

        record = await ledger.finalize(
            booking_id=booking.id,
            resource_type=ResourceType.CHESS,
            final_scores={'aa111a': 3},
        )

        assert record is not None
        assert record.finalized_at is not None
        assert [e.total for e in record.entries] == [4]

    @pytest.mark.asyncio
    async def test_second_finalize_returns_none_and_keeps_first_scores(
        self, ledger: ScoreLedgerRepoImpl
    ) -> None:
        booking = make_booking()
        await ledger.finalize(
            booking_id=booking.id, resource_type=ResourceType.CHESS, final_scores={'aa111a': 5}
        )

        second = await ledger.finalize(
            booking_id=booking.id, resource_type=ResourceType.CHESS, final_scores={'aa111a': 9}
        )

        assert second is None
        record = await ledger.get_by_booking_id(booking_id=booking.id)
        assert record is not None
        assert record.entries[0].final_score == 5

    @pytest.mark.asyncio
    async def test_concurrent_finalize_has_exactly_one_winner(
        self, ledger: ScoreLedgerRepoImpl
    ) -> None:
        booking = make_booking()

        results = await asyncio.gather(
            *[
                ledger.finalize(
                    booking_id=booking.id,
                    resource_type=ResourceType.CHESS,
                    final_scores={'aa111a': score},
                )
                for score in (1, 2, 3)
            ]
        )

        winners = [r for r in results if r is not None]
        assert len(winners) == 1
        record = await ledger.get_by_booking_id(booking_id=booking.id)
        assert record is not None
        assert record.entries[0].final_score == winners[0].entries[0].final_score


@pytest.mark.integration
class TestAggregate:
    @pytest.mark.asyncio
    async def test_totals_per_identity_and_resource_type(
        self, ledger: ScoreLedgerRepoImpl
    ) -> None:
        chess = make_booking()
        carrom = make_booking(resource_type=ResourceType.CARROM)
        await ledger.finalize(
            booking_id=chess.id,
            resource_type=ResourceType.CHESS,
            final_scores={'aa111a': 2, 'bb222b': 1},
        )
        await ledger.finalize(
            booking_id=carrom.id, resource_type=ResourceType.CARROM, final_scores={'aa111a': 6}
        )

        everything = await ledger.aggregate_by_user()
        chess_only = await ledger.aggregate_by_user(resource_type=ResourceType.CHESS)

        assert [(a.identity, a.resource_type, a.total) for a in everything] == [
            ('aa111a', ResourceType.CARROM, 6),
            ('aa111a', ResourceType.CHESS, 2),
            ('bb222b', ResourceType.CHESS, 1),
        ]
        assert [(a.identity, a.total) for a in chess_only] == [('aa111a', 2), ('bb222b', 1)]
