import html
import logging
import threading
from collections import deque
from datetime import date, datetime, timezone

from aurora.app.routers.schemas import Reservation, ReservationIn
from aurora.app.services.availability import is_available

log = logging.getLogger(__name__)

DEFAULT_CAPACITY = 2000


class ReservationConflict(Exception):
    """The requested stay overlaps an existing booking of the same room."""

    def __init__(self, room_name: str, check_in: date, nights: int) -> None:
        super().__init__(f"Room {room_name!r} is already booked for {nights} night(s) from {check_in.isoformat()}")
        self.room_name = room_name
        self.check_in = check_in
        self.nights = nights


def sanitize(value: str) -> str:
    """Neutralise HTML-unsafe characters before a value is stored."""
    return html.escape(value, quote=True)


def _sanitized(draft: ReservationIn) -> ReservationIn:
    return draft.model_copy(
        update={"guest_name": sanitize(draft.guest_name), "room_name": sanitize(draft.room_name)}
    )


class ReservationStore:
    """In-memory, insertion-ordered reservations with FIFO eviction past capacity."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._records: deque[Reservation] = deque()
        self._last_id = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def all(self) -> list[Reservation]:
        with self._lock:
            return list(self._records)

    def by_user(self, username: str | None) -> list[Reservation]:
        if username is None:
            return []
        with self._lock:
            return [r for r in self._records if r.booked_by == username]

    def append(self, draft: ReservationIn) -> Reservation:
        draft = _sanitized(draft)
        with self._lock:
            return self._append_locked(draft)

    def book(
        self,
        *,
        guest_name: str,
        room_name: str,
        check_in: date,
        nights: int,
        booked_by: str,
    ) -> Reservation:
        """Check availability and append under one lock.

        Raises ReservationConflict when the stay overlaps a live booking.
        """
        draft = _sanitized(
            ReservationIn(
                guest_name=guest_name,
                room_name=room_name,
                check_in=check_in,
                nights=nights,
                booked_by=booked_by,
            )
        )
        with self._lock:
            if not is_available(self._records, draft.room_name, draft.check_in, draft.nights):
                raise ReservationConflict(draft.room_name, draft.check_in, draft.nights)
            return self._append_locked(draft)

    def _append_locked(self, draft: ReservationIn) -> Reservation:
        # Ids come from a counter, not len(), so they stay unique after eviction.
        self._last_id += 1
        record = Reservation(
            id=self._last_id,
            created_at=datetime.now(timezone.utc),
            **draft.model_dump(),
        )
        self._records.append(record)
        while len(self._records) > self.capacity:
            evicted = self._records.popleft()
            log.debug("Evicted reservation #%s (capacity %s)", evicted.id, self.capacity)
        return record
