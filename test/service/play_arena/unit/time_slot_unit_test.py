from datetime import date

import pytest

from src.platform.exception.exceptions import DomainError
from src.service.play_arena.domain.value_object.time_slot import TimeSlot, grid_windows
from test.service.play_arena.fakes import BOOKING_DAY, at


@pytest.mark.unit
class TestTimeSlotParse:
    def test_accepts_grid_aligned_slot_within_operating_hours(self) -> None:
        slot = TimeSlot.parse(slot_date='2030-06-03', start_time='10:00', end_time='11:30')

        assert slot.date == date(2030, 6, 3)
        assert slot.windows() == ['10:00', '10:30', '11:00']

    def test_first_and_last_window_of_the_day(self) -> None:
        assert TimeSlot.parse(
            slot_date=BOOKING_DAY, start_time='09:00', end_time='09:30'
        ).windows() == ['09:00']
        assert TimeSlot.parse(
            slot_date=BOOKING_DAY, start_time='21:30', end_time='22:00'
        ).windows() == ['21:30']

    @pytest.mark.parametrize(
        'start_time,end_time,message',
        [
            ('11:00', '10:00', 'start_time must be before end_time'),
            ('10:00', '10:00', 'start_time must be before end_time'),
            ('08:30', '09:30', 'operating hours'),
            ('21:30', '22:30', 'operating hours'),
            ('10:15', '11:00', '30-minute windows'),
            ('10:00', '10:45', '30-minute windows'),
            ('9:00', '10:00', 'HH:MM'),
            ('10:00', '25:00', 'HH:MM'),
        ],
    )
    def test_rejects_malformed_or_off_grid_times(
        self, start_time: str, end_time: str, message: str
    ) -> None:
        with pytest.raises(DomainError, match=message):
            TimeSlot.parse(slot_date=BOOKING_DAY, start_time=start_time, end_time=end_time)

    def test_rejects_malformed_date(self) -> None:
        with pytest.raises(DomainError, match='YYYY-MM-DD'):
            TimeSlot.parse(slot_date='03/06/2030', start_time='10:00', end_time='10:30')


@pytest.mark.unit
class TestTimeSlotClock:
    def test_phase_boundaries(self) -> None:
        slot = TimeSlot.parse(slot_date=BOOKING_DAY, start_time='10:00', end_time='11:00')

        assert not slot.has_started(at(BOOKING_DAY, '09:59'))
        assert slot.has_started(at(BOOKING_DAY, '10:00'))
        assert not slot.has_ended(at(BOOKING_DAY, '10:59'))
        assert slot.has_ended(at(BOOKING_DAY, '11:00'))

    def test_ensure_bookable_rejects_past_date(self) -> None:
        slot = TimeSlot.parse(slot_date='2030-06-02', start_time='10:00', end_time='11:00')

        with pytest.raises(DomainError, match='Slot date cannot be in the past'):
            slot.ensure_bookable(at(BOOKING_DAY, '08:00'))

    def test_ensure_bookable_rejects_started_slot_today(self) -> None:
        slot = TimeSlot.parse(slot_date=BOOKING_DAY, start_time='10:00', end_time='11:00')

        with pytest.raises(DomainError, match='already passed'):
            slot.ensure_bookable(at(BOOKING_DAY, '10:00'))

        slot.ensure_bookable(at(BOOKING_DAY, '09:59'))


@pytest.mark.unit
def test_grid_covers_operating_hours_in_half_hour_windows() -> None:
    windows = grid_windows()

    assert len(windows) == 26
    assert windows[0].to_dict() == {'start_time': '09:00', 'end_time': '09:30'}
    assert windows[-1].to_dict() == {'start_time': '21:30', 'end_time': '22:00'}
