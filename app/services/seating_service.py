"""
Seating arrangement and validation service

All capacity-affecting writes go through here. Every path that puts a guest at
a table re-checks the table's load at commit time, locking the table row and
bumping its version so concurrent writers cannot overshoot capacity.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import CapacityExceeded, ConcurrentUpdate, DuplicateName, EmptyName, NotFound
from app.models import Guest, Table
from app.models.table import SHAPE_DEFAULT_CAPACITY, TABLE_SHAPES
from app.schemas.guest import GuestResponse, SeatingInfo, TableMate
from app.schemas.table import TableWithGuests
from app.services.capacity import (
    available_seats,
    clamp_capacity,
    clamp_party_size,
    is_full,
    party_size_of,
    seats_used,
)
from app.services.repositories import GuestRepo, SettingsRepo, TableRepo

logger = logging.getLogger(__name__)

TABLE_NAME_MAX_LENGTH = 50
GUEST_NAME_MAX_LENGTH = 255
PHONE_MAX_LENGTH = 20


def _commit(db: Session) -> None:
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        raise ConcurrentUpdate()
    except SQLAlchemyError:
        db.rollback()
        raise


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _normalize_shape(shape: Optional[str]) -> str:
    return shape if shape in TABLE_SHAPES else "round"


def _clean_optional(value: Optional[str], max_length: Optional[int] = None) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None
    return value[:max_length] if max_length else value


class SeatingService:
    """Service for seating arrangement operations"""

    # -------- validation helpers --------

    @staticmethod
    def validated_table_name(db: Session, name: Optional[str], exclude_table_id: Optional[str] = None) -> str:
        """Trim and truncate a table name, rejecting blanks and case-insensitive duplicates"""
        cleaned = (name or "").strip()[:TABLE_NAME_MAX_LENGTH]
        if not cleaned:
            raise EmptyName("Table")
        if TableRepo.name_taken(db, cleaned, exclude_table_id=exclude_table_id):
            raise DuplicateName(cleaned)
        return cleaned

    @staticmethod
    def validated_guest_name(name: Optional[str]) -> str:
        cleaned = (name or "").strip()[:GUEST_NAME_MAX_LENGTH]
        if not cleaned:
            raise EmptyName("Guest")
        return cleaned

    @staticmethod
    def check_capacity(db: Session, table: Table, party_size: int, exclude_guest_id: Optional[str] = None) -> None:
        """Raise CapacityExceeded if seating party_size more people would overbook the table.

        The guest being placed is left out of the current roster so re-seating a
        guest at its own table (e.g. after a party size change) is not double counted.
        """
        roster = GuestRepo.list_guests_by_table(db, table.id, exclude_guest_id=exclude_guest_id)
        current_seats_used = seats_used(roster)
        if current_seats_used + party_size > table.capacity:
            logger.info(
                f"Rejected seating {party_size} at table '{table.name}' "
                f"({current_seats_used}/{table.capacity} seats used)"
            )
            raise CapacityExceeded(table.name, party_size, max(0, table.capacity - current_seats_used))

    @staticmethod
    def _place_guest(db: Session, guest: Guest, table_id: Optional[str], party_size: Optional[int]) -> Dict[str, Any]:
        """Validate a seat change for guest and return the patch to apply (no commit)"""
        patch: Dict[str, Any] = {}
        effective_size = clamp_party_size(party_size) if party_size is not None else party_size_of(guest)
        if party_size is not None:
            patch["party_size"] = effective_size

        if table_id is None:
            patch["table_id"] = None
            return patch

        table = TableRepo.get_table(db, table_id, for_update=True)
        if not table:
            raise NotFound("Table", table_id)

        SeatingService.check_capacity(db, table, effective_size, exclude_guest_id=guest.id)
        patch["table_id"] = table.id
        # Touching the table bumps its version; a concurrent seat change on the
        # same table then fails with StaleDataError instead of committing.
        TableRepo.touch(db, table)
        return patch

    # -------- assignment engine --------

    @staticmethod
    def assign_guest_to_table(
        db: Session,
        guest_id: str,
        table_id: Optional[str],
        party_size: Optional[int] = None,
    ) -> Guest:
        """Seat a guest (optionally with a new party size) at a table"""
        guest = GuestRepo.get_guest(db, guest_id)
        if not guest:
            raise NotFound("Guest", guest_id)
        if table_id is None:
            return SeatingService.unassign_guest(db, guest_id, party_size=party_size)

        try:
            patch = SeatingService._place_guest(db, guest, table_id, party_size)
        except (NotFound, CapacityExceeded):
            db.rollback()
            raise

        GuestRepo.update_guest(db, guest, patch)
        _commit(db)
        db.refresh(guest)
        logger.info(f"Guest {guest.id} (party of {guest.party_size}) seated at table {guest.table_id}")
        return guest

    @staticmethod
    def unassign_guest(db: Session, guest_id: str, party_size: Optional[int] = None) -> Guest:
        """Remove a guest from its table. Unassigning an unassigned guest is a no-op."""
        guest = GuestRepo.get_guest(db, guest_id)
        if not guest:
            raise NotFound("Guest", guest_id)
        if guest.table_id is None and party_size is None:
            return guest

        patch: Dict[str, Any] = {"table_id": None}
        if party_size is not None:
            patch["party_size"] = clamp_party_size(party_size)
        GuestRepo.update_guest(db, guest, patch)
        _commit(db)
        db.refresh(guest)
        logger.info(f"Guest {guest.id} unassigned")
        return guest

    # -------- tables --------

    @staticmethod
    def create_table(
        db: Session,
        name: str,
        shape: Optional[str] = "round",
        capacity: Optional[Any] = None,
        position_x: Any = 0,
        position_y: Any = 0,
        rotation: Any = 0,
    ) -> Table:
        cleaned_name = SeatingService.validated_table_name(db, name)
        shape = _normalize_shape(shape)
        table = TableRepo.add_table(
            db,
            name=cleaned_name,
            shape=shape,
            capacity=clamp_capacity(capacity, default=SHAPE_DEFAULT_CAPACITY[shape]),
            position_x=_to_float(position_x),
            position_y=_to_float(position_y),
            rotation=_to_float(rotation),
        )
        _commit(db)
        db.refresh(table)
        logger.info(f"Created table '{table.name}' ({table.shape}, capacity {table.capacity})")
        return table

    @staticmethod
    def rename_table(db: Session, table_id: str, new_name: str) -> Table:
        table = TableRepo.get_table(db, table_id)
        if not table:
            raise NotFound("Table", table_id)
        cleaned_name = SeatingService.validated_table_name(db, new_name, exclude_table_id=table.id)
        TableRepo.update_table(db, table, {"name": cleaned_name})
        _commit(db)
        db.refresh(table)
        return table

    @staticmethod
    def update_table(db: Session, table_id: str, changes: Dict[str, Any]) -> Table:
        """Apply a partial update; only keys present in changes are touched"""
        table = TableRepo.get_table(db, table_id, for_update=True)
        if not table:
            raise NotFound("Table", table_id)

        patch: Dict[str, Any] = {}
        try:
            if "name" in changes:
                patch["name"] = SeatingService.validated_table_name(db, changes["name"], exclude_table_id=table.id)
            if changes.get("shape") is not None:
                patch["shape"] = _normalize_shape(changes["shape"])
            if "capacity" in changes:
                new_capacity = clamp_capacity(changes["capacity"], default=table.capacity)
                load = seats_used(GuestRepo.list_guests_by_table(db, table.id))
                if new_capacity < load:
                    # Shrinking below the current load would break the seating invariant
                    raise CapacityExceeded(table.name, load, new_capacity)
                patch["capacity"] = new_capacity
        except (EmptyName, DuplicateName, CapacityExceeded):
            db.rollback()
            raise

        for field in ("position_x", "position_y", "rotation"):
            if changes.get(field) is not None:
                patch[field] = _to_float(changes[field])

        TableRepo.update_table(db, table, patch)
        _commit(db)
        db.refresh(table)
        return table

    @staticmethod
    def move_table(db: Session, table_id: str, position_x: float, position_y: float) -> Table:
        return SeatingService.update_table(db, table_id, {"position_x": position_x, "position_y": position_y})

    @staticmethod
    def delete_table(db: Session, table_id: str) -> int:
        """Delete a table, unassigning its guests in the same transaction.

        Returns the number of guests that were unassigned.
        """
        table = TableRepo.get_table(db, table_id, for_update=True)
        if not table:
            raise NotFound("Table", table_id)

        table_name = table.name
        unassigned = GuestRepo.unassign_all_at_table(db, table.id)
        TableRepo.delete_table(db, table)
        _commit(db)
        logger.info(f"Deleted table '{table_name}', {unassigned} guest(s) unassigned")
        return unassigned

    # -------- guests --------

    @staticmethod
    def create_guest(
        db: Session,
        name: str,
        party_size: Optional[int] = 1,
        table_id: Optional[str] = None,
        phone_number: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Guest:
        cleaned_name = SeatingService.validated_guest_name(name)
        size = clamp_party_size(party_size if party_size is not None else 1)

        if table_id:
            table = TableRepo.get_table(db, table_id, for_update=True)
            if not table:
                db.rollback()
                raise NotFound("Table", table_id)
            try:
                SeatingService.check_capacity(db, table, size)
            except CapacityExceeded:
                db.rollback()
                raise
            TableRepo.touch(db, table)

        guest = GuestRepo.add_guest(
            db,
            name=cleaned_name,
            party_size=size,
            table_id=table_id or None,
            phone_number=_clean_optional(phone_number, PHONE_MAX_LENGTH),
            address=_clean_optional(address),
        )
        _commit(db)
        db.refresh(guest)
        return guest

    @staticmethod
    def update_guest(db: Session, guest_id: str, changes: Dict[str, Any]) -> Guest:
        """Apply a partial update; seat or party size changes are capacity checked"""
        guest = GuestRepo.get_guest(db, guest_id)
        if not guest:
            raise NotFound("Guest", guest_id)

        patch: Dict[str, Any] = {}
        if "name" in changes:
            patch["name"] = SeatingService.validated_guest_name(changes["name"])
        if "phone_number" in changes:
            patch["phone_number"] = _clean_optional(changes["phone_number"], PHONE_MAX_LENGTH)
        if "address" in changes:
            patch["address"] = _clean_optional(changes["address"])

        party_size = changes.get("party_size")
        if "table_id" in changes or party_size is not None:
            target_table_id = changes["table_id"] if "table_id" in changes else guest.table_id
            try:
                patch.update(SeatingService._place_guest(db, guest, target_table_id or None, party_size))
            except (NotFound, CapacityExceeded):
                db.rollback()
                raise

        GuestRepo.update_guest(db, guest, patch)
        _commit(db)
        db.refresh(guest)
        return guest

    @staticmethod
    def delete_guest(db: Session, guest_id: str) -> None:
        guest = GuestRepo.get_guest(db, guest_id)
        if not guest:
            raise NotFound("Guest", guest_id)
        GuestRepo.delete_guest(db, guest)
        _commit(db)

    # -------- read models --------

    @staticmethod
    def describe_table(table: Table, guests: List[Guest]) -> TableWithGuests:
        return TableWithGuests(
            id=table.id,
            name=table.name,
            shape=table.shape,
            capacity=table.capacity,
            position_x=table.position_x,
            position_y=table.position_y,
            rotation=table.rotation,
            guests=[GuestResponse.model_validate(guest) for guest in guests],
            seats_used=seats_used(guests),
            seats_available=available_seats(table.capacity, guests),
            is_full=is_full(table.capacity, guests),
        )

    @staticmethod
    def list_tables_with_guests(db: Session) -> List[TableWithGuests]:
        return [
            SeatingService.describe_table(table, GuestRepo.list_guests_by_table(db, table.id))
            for table in TableRepo.list_tables(db)
        ]

    @staticmethod
    def get_seating_summary(db: Session) -> Dict[str, Any]:
        """Totals for the dashboard header and per-table load"""
        tables = SeatingService.list_tables_with_guests(db)
        guests = GuestRepo.list_guests(db)
        assigned = [guest for guest in guests if guest.table_id]

        return {
            "event_name": SettingsRepo.get_or_create(db).event_name,
            "total_guests": len(guests),
            "total_people": seats_used(guests),
            "assigned_guests": len(assigned),
            "assigned_people": seats_used(assigned),
            "unassigned_guests": len(guests) - len(assigned),
            "total_tables": len(tables),
            "total_capacity": sum(table.capacity for table in tables),
            "tables": [
                {
                    "id": table.id,
                    "name": table.name,
                    "capacity": table.capacity,
                    "guest_count": len(table.guests),
                    "seats_used": table.seats_used,
                    "seats_available": table.seats_available,
                    "is_full": table.is_full,
                }
                for table in tables
            ],
        }

    @staticmethod
    def find_guest_seating(db: Session, guest_name: str) -> Optional[SeatingInfo]:
        """Look up a guest by (partial, case-insensitive) name for the guest portal"""
        matches = GuestRepo.find_by_name(db, guest_name, limit=1)
        if not matches:
            return None
        guest = matches[0]

        table_name = None
        table_mates: List[TableMate] = []
        if guest.table_id:
            table = TableRepo.get_table(db, guest.table_id)
            table_name = table.name if table else None
            table_mates = [
                TableMate(name=mate.name, party_size=party_size_of(mate))
                for mate in GuestRepo.list_guests_by_table(db, guest.table_id, exclude_guest_id=guest.id)
            ]

        return SeatingInfo(
            guest_id=guest.id,
            guest_name=guest.name,
            party_size=party_size_of(guest),
            table_name=table_name,
            has_address=bool(guest.address),
            table_mates=table_mates,
        )
