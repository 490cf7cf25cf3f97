from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
)
from src.service.play_arena.app.command.check_in_use_case import CheckInUseCase
from src.service.play_arena.app.command.create_booking_use_case import CreateBookingUseCase
from test.service.play_arena.fakes import (
    BOOKING_DAY,
    FixedClock,
    InMemoryBookingStore,
    InMemoryScoreLedger,
    RecordingDispatcher,
    at,
    book,
)


@pytest.mark.unit
class TestCheckIn:
    @pytest.mark.asyncio
    async def test_check_in_flips_flag_and_adds_one_point(
        self,
        create_use_case: CreateBookingUseCase,
        check_in_use_case: CheckInUseCase,
        store: InMemoryBookingStore,
        ledger: InMemoryScoreLedger,
        dispatcher: RecordingDispatcher,
        clock: FixedClock,
    ) -> None:
        booking = await book(create_use_case, mode='private', invitees=['bb222b'])
        clock.set(at(BOOKING_DAY, '10:05'))

        checked_in = await check_in_use_case.check_in(booking_id=booking.id, identity='bb222b')

        assert [p.checked_in for p in checked_in.participants] == [False, True]
        assert store.bookings[str(booking.id)].participants[1].checked_in is True
        record = ledger.records[str(booking.id)]
        assert [(e.identity, e.checkin_score) for e in record.entries] == [('bb222b', 1)]
        assert dispatcher.recipients('Checked in') == ['bb222b']

    @pytest.mark.asyncio
    async def test_second_check_in_is_a_conflict_and_scores_once(
        self,
        create_use_case: CreateBookingUseCase,
        check_in_use_case: CheckInUseCase,
        ledger: InMemoryScoreLedger,
        clock: FixedClock,
    ) -> None:
        booking = await book(create_use_case)
        clock.set(at(BOOKING_DAY, '10:05'))
        await check_in_use_case.check_in(booking_id=booking.id, identity='aa111a')

        with pytest.raises(ConflictError, match='already checked in'):
            await check_in_use_case.check_in(booking_id=booking.id, identity='aa111a')

        assert ledger.records[str(booking.id)].entries[0].checkin_score == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'now,message',
        [('09:59', 'opens when the slot starts'), ('11:00', 'already ended')],
    )
    async def test_check_in_only_while_slot_in_progress(
        self,
        create_use_case: CreateBookingUseCase,
        check_in_use_case: CheckInUseCase,
        ledger: InMemoryScoreLedger,
        clock: FixedClock,
        now: str,
        message: str,
    ) -> None:
        booking = await book(create_use_case)
        clock.set(at(BOOKING_DAY, now))

        with pytest.raises(DomainError, match=message):
            await check_in_use_case.check_in(booking_id=booking.id, identity='aa111a')

        assert ledger.records == {}

    @pytest.mark.asyncio
    async def test_non_participant_is_forbidden(
        self,
        create_use_case: CreateBookingUseCase,
        check_in_use_case: CheckInUseCase,
        clock: FixedClock,
    ) -> None:
        booking = await book(create_use_case)
        clock.set(at(BOOKING_DAY, '10:30'))

        with pytest.raises(ForbiddenError):
            await check_in_use_case.check_in(booking_id=booking.id, identity='cc333c')

    @pytest.mark.asyncio
    async def test_failed_ledger_write_leaves_flag_unset_and_retry_succeeds(
        self,
        create_use_case: CreateBookingUseCase,
        check_in_use_case: CheckInUseCase,
        store: InMemoryBookingStore,
        ledger: InMemoryScoreLedger,
        dispatcher: RecordingDispatcher,
        clock: FixedClock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """
        Given: the store fails while committing the check-in
        When: the participant retries afterwards
        Then: the first attempt left no flag behind, and the retry records exactly 1 point
        """
        booking = await book(create_use_case)
        clock.set(at(BOOKING_DAY, '10:05'))
        with monkeypatch.context() as patch:
            patch.setattr(
                ledger,
                'record_checkin_score',
                AsyncMock(side_effect=ConnectionError('connection reset')),
            )
            with pytest.raises(ConnectionError):
                await check_in_use_case.check_in(booking_id=booking.id, identity='aa111a')

        assert store.bookings[str(booking.id)].participants[0].checked_in is False
        assert ledger.records == {}
        assert dispatcher.recipients('Checked in') == []

        await check_in_use_case.check_in(booking_id=booking.id, identity='aa111a')

        assert store.bookings[str(booking.id)].participants[0].checked_in is True
        assert ledger.records[str(booking.id)].entries[0].checkin_score == 1

    @pytest.mark.asyncio
    async def test_booking_deleted_meanwhile_writes_nothing(
        self,
        create_use_case: CreateBookingUseCase,
        store: InMemoryBookingStore,
        ledger: InMemoryScoreLedger,
        clock: FixedClock,
    ) -> None:
        booking = await book(create_use_case)
        clock.set(at(BOOKING_DAY, '10:05'))
        checked_in = booking.check_in(identity='aa111a', now=clock())
        await store.delete(booking_id=booking.id)

        with pytest.raises(NotFoundError):
            await ledger.record_checkin_score(booking=checked_in, identity='aa111a')

        assert ledger.records == {}
