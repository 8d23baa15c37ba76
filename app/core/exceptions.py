"""
Seating domain errors

Raised by the service layer and rendered by the handlers registered in
``app.utils.responses``.
"""

from typing import Optional


def pluralize_seats(count: int) -> str:
    return f"{count} seat" if count == 1 else f"{count} seats"


class SeatingError(Exception):
    """Base class for expected, recoverable seating failures"""

    error_code = "seating_error"
    status_code = 400

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFound(SeatingError):
    error_code = "not_found"
    status_code = 404

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        super().__init__(f"{resource} not found", {"resource": resource, "id": resource_id})
        self.resource = resource
        self.resource_id = resource_id


class CapacityExceeded(SeatingError):
    error_code = "capacity_exceeded"

    def __init__(self, table_name: str, seats_needed: int, seats_available: int):
        message = (
            f'Table "{table_name}" cannot fit this party: it needs {pluralize_seats(seats_needed)} '
            f"but only {pluralize_seats(seats_available)} {'is' if seats_available == 1 else 'are'} available."
        )
        super().__init__(message, {
            "table_name": table_name,
            "seats_needed": seats_needed,
            "seats_available": seats_available,
        })
        self.table_name = table_name
        self.seats_needed = seats_needed
        self.seats_available = seats_available


class DuplicateName(SeatingError):
    error_code = "duplicate_name"

    def __init__(self, name: str):
        super().__init__(f'A table named "{name}" already exists', {"name": name})
        self.name = name


class EmptyName(SeatingError):
    error_code = "empty_name"

    def __init__(self, resource: str = "Table"):
        super().__init__(f"{resource} name cannot be empty")


class ConcurrentUpdate(SeatingError):
    """Another request changed the same guest or table between our read and write"""

    error_code = "concurrent_update"
    status_code = 409

    def __init__(self, resource: str = "Seating"):
        super().__init__(f"{resource} was modified by another request. Please reload and try again.")
