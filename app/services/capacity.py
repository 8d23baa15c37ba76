"""
Seat capacity arithmetic for tables

Pure helpers shared by the assignment engine, the bulk allocator and the
summary/export code. Guests may be ORM objects or plain dicts.
"""

from typing import Any, Iterable, Optional

from app.core.config import settings

MIN_PARTY_SIZE = 1
MIN_TABLE_CAPACITY = 1
DEFAULT_TABLE_CAPACITY = 8


def party_size_of(guest: Any) -> int:
    """Party size of a guest, counting a missing value as 1"""
    if isinstance(guest, dict):
        size = guest.get("party_size")
    else:
        size = getattr(guest, "party_size", None)
    return size or 1


def seats_used(guests: Iterable[Any]) -> int:
    return sum(party_size_of(guest) for guest in guests)


def available_seats(capacity: int, guests: Iterable[Any]) -> int:
    """Seats still free at a table; negative if the table is overbooked"""
    return capacity - seats_used(guests)


def is_full(capacity: int, guests: Iterable[Any]) -> bool:
    return seats_used(guests) >= capacity


def clamp_party_size(value: Optional[Any]) -> int:
    """Coerce a requested party size into [1, MAX_PARTY_SIZE]"""
    try:
        size = int(value)
    except (TypeError, ValueError):
        return MIN_PARTY_SIZE
    return max(MIN_PARTY_SIZE, min(settings.MAX_PARTY_SIZE, size))


def clamp_capacity(value: Optional[Any], default: int = DEFAULT_TABLE_CAPACITY) -> int:
    """Coerce a requested capacity into [1, MAX_TABLE_CAPACITY], falling back to default"""
    try:
        capacity = int(value)
    except (TypeError, ValueError):
        capacity = 0
    if not capacity:
        capacity = default
    return max(MIN_TABLE_CAPACITY, min(settings.MAX_TABLE_CAPACITY, capacity))
