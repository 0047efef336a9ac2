from collections.abc import Iterable
from datetime import date, timedelta
from typing import Protocol


class Booking(Protocol):
    room_name: str
    check_in: date
    nights: int


def stay_interval(check_in: date, nights: int) -> tuple[date, date]:
    """Half-open ``[check_in, checkout)`` interval for a stay."""
    return check_in, check_in + timedelta(days=nights)


def is_available(
    reservations: Iterable[Booking],
    room_name: str,
    check_in: date,
    nights: int,
) -> bool:
    """Return False when the proposed stay overlaps any booking of the same room.

    Checkout day equal to the next check-in day is not an overlap.
    """
    start, end = stay_interval(check_in, nights)
    for existing in reservations:
        if existing.room_name != room_name:
            continue
        existing_start, existing_end = stay_interval(existing.check_in, existing.nights)
        if start < existing_end and end > existing_start:
            return False
    return True
