# barber_booking/slots.py
"""Slot generation for the booking screen.

Everything here is pure: the same schedule, appointments and ``now`` always
produce the same slots, and nothing is cached between calls.
"""

import calendar
from datetime import date, datetime, time
from typing import Iterable, List, Optional, Union

from .schemas import AppointmentStatus, CalendarDay, DaySlots, TimeSlot

TimeLike = Union[time, datetime, str]

MINUTES_PER_DAY = 24 * 60


def to_minutes(value: TimeLike) -> int:
    """Minute of day for a time, datetime or "HH:MM[:SS]" string.

    Anything finer than a minute is truncated.
    """
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    parts = str(value).strip().split(":")
    return int(parts[0]) * 60 + int(parts[1][:2])


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    return a_start < b_end and b_start < a_end


def shop_weekday(day: date) -> int:
    # 0=Sun ... 6=Sat, while date.weekday() is 0=Mon
    return (day.weekday() + 1) % 7


def is_working_day(day: date, working_days: Iterable[int]) -> bool:
    return shop_weekday(day) in set(working_days)


def _occupied_starts(appointments, target_date: date) -> set:
    starts = set()
    for a in appointments:
        if a.appointment_date != target_date:
            continue
        if a.status == AppointmentStatus.cancelled:
            continue
        starts.add(to_minutes(a.start_time))
    return starts


def _is_past(target_date: date, start_minutes: int, now: datetime) -> bool:
    today = now.date()
    if target_date < today:
        return True
    if target_date > today:
        return False
    slot_start = datetime.combine(target_date, time(start_minutes // 60, start_minutes % 60))
    return slot_start < now.replace(tzinfo=None)


def generate_slots(
    window_start: TimeLike,
    window_end: TimeLike,
    duration_minutes: int,
    appointments,
    target_date: date,
    now: datetime,
) -> List[TimeSlot]:
    """Fixed-length slots that fit entirely inside ``[window_start, window_end]``.

    A slot is occupied when a non-cancelled appointment on ``target_date``
    starts at the slot's start minute.
    """
    if duration_minutes is None or duration_minutes <= 0:
        return []

    start = to_minutes(window_start)
    end = to_minutes(window_end)
    if start >= end:
        return []

    occupied = _occupied_starts(appointments, target_date)

    slots = []
    cursor = start
    while cursor + duration_minutes <= end:
        is_past = _is_past(target_date, cursor, now)
        slots.append(TimeSlot(
            start=format_minutes(cursor),
            end=format_minutes(cursor + duration_minutes),
            is_available=cursor not in occupied and not is_past,
            is_past=is_past,
        ))
        cursor += duration_minutes

    return slots


def generate_day_slots(settings, appointments, target_date: date, now: datetime) -> DaySlots:
    """Morning and afternoon slots for one day; empty on non-working days."""
    if settings is None or not is_working_day(target_date, settings.working_days):
        return DaySlots()

    appointments = list(appointments)
    return DaySlots(
        morning=generate_slots(
            settings.morning_start,
            settings.morning_end,
            settings.slot_duration_minutes,
            appointments,
            target_date,
            now,
        ),
        afternoon=generate_slots(
            settings.afternoon_start,
            settings.afternoon_end,
            settings.slot_duration_minutes,
            appointments,
            target_date,
            now,
        ),
    )


def find_slot(day_slots: DaySlots, start: TimeLike) -> Optional[TimeSlot]:
    wanted = to_minutes(start)
    for slot in day_slots.all_slots:
        if to_minutes(slot.start) == wanted:
            return slot
    return None


def slot_end(start: TimeLike, duration_minutes: int) -> time:
    end = to_minutes(start) + duration_minutes
    if end >= MINUTES_PER_DAY:
        raise ValueError("slot would end after midnight")
    return time(end // 60, end % 60)


def calendar_month(year: int, month: int, working_days: Iterable[int], today: date) -> List[CalendarDay]:
    working_days = set(working_days)
    _, days_in_month = calendar.monthrange(year, month)

    days = []
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        working = shop_weekday(day) in working_days
        past = day < today
        days.append(CalendarDay(
            date=day,
            day_number=day_number,
            is_today=day == today,
            is_working_day=working,
            is_past=past,
            is_selectable=working and not past,
        ))
    return days
