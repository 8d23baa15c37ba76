"""
Repository layer over the SQLAlchemy session.

Guest and table methods never commit; transaction boundaries for seating
changes belong to SeatingService. Settings and layout writes are standalone
and commit directly.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from app.models import EventSettings, Guest, LayoutLabel, LayoutShape, Table


# -------- Guest repository --------

class GuestRepo:
    @staticmethod
    def get_guest(db: Session, guest_id: str) -> Optional[Guest]:
        return db.query(Guest).filter(Guest.id == guest_id).first()

    @staticmethod
    def list_guests(db: Session, search: Optional[str] = None) -> List[Guest]:
        query = db.query(Guest)
        if search:
            query = query.filter(Guest.name.ilike(f"%{search}%"))
        return query.order_by(Guest.sort_order, Guest.created_at).all()

    @staticmethod
    def list_unassigned(db: Session) -> List[Guest]:
        return db.query(Guest).filter(Guest.table_id.is_(None)).order_by(Guest.sort_order, Guest.created_at).all()

    @staticmethod
    def list_guests_by_table(db: Session, table_id: str, exclude_guest_id: Optional[str] = None) -> List[Guest]:
        query = db.query(Guest).filter(Guest.table_id == table_id)
        if exclude_guest_id:
            query = query.filter(Guest.id != exclude_guest_id)
        return query.order_by(Guest.sort_order, Guest.created_at).all()

    @staticmethod
    def find_by_name(db: Session, name_icontains: str, limit: int = 10) -> List[Guest]:
        return db.query(Guest).filter(
            func.lower(Guest.name).like(f"%{name_icontains.lower()}%")
        ).order_by(Guest.name).limit(limit).all()

    @staticmethod
    def add_guest(db: Session, **values: Any) -> Guest:
        next_order = db.query(func.coalesce(func.max(Guest.sort_order), 0)).scalar() + 1
        guest = Guest(sort_order=next_order, **values)
        db.add(guest)
        db.flush()
        return guest

    @staticmethod
    def update_guest(db: Session, guest: Guest, patch: Dict[str, Any]) -> Guest:
        for field, value in patch.items():
            setattr(guest, field, value)
        guest.updated_at = datetime.utcnow()
        return guest

    @staticmethod
    def delete_guest(db: Session, guest: Guest) -> None:
        db.delete(guest)

    @staticmethod
    def unassign_all_at_table(db: Session, table_id: str) -> int:
        return db.query(Guest).filter(Guest.table_id == table_id).update(
            {
                Guest.table_id: None,
                Guest.updated_at: datetime.utcnow(),
                Guest.version: Guest.version + 1,
            },
            synchronize_session="fetch",
        )


# -------- Table repository --------

class TableRepo:
    @staticmethod
    def get_table(db: Session, table_id: str, for_update: bool = False) -> Optional[Table]:
        query = db.query(Table).filter(Table.id == table_id)
        if for_update:
            # Row lock on databases that support it; SQLite ignores it
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def list_tables(db: Session) -> List[Table]:
        return db.query(Table).order_by(Table.sort_order, Table.created_at).all()

    @staticmethod
    def name_taken(db: Session, name: str, exclude_table_id: Optional[str] = None) -> bool:
        query = db.query(Table.id).filter(func.lower(Table.name) == name.lower())
        if exclude_table_id:
            query = query.filter(Table.id != exclude_table_id)
        return query.first() is not None

    @staticmethod
    def add_table(db: Session, **values: Any) -> Table:
        next_order = db.query(func.coalesce(func.max(Table.sort_order), 0)).scalar() + 1
        table = Table(sort_order=next_order, **values)
        db.add(table)
        db.flush()
        return table

    @staticmethod
    def update_table(db: Session, table: Table, patch: Dict[str, Any]) -> Table:
        for field, value in patch.items():
            setattr(table, field, value)
        table.updated_at = datetime.utcnow()
        return table

    @staticmethod
    def touch(db: Session, table: Table) -> Table:
        """Force an UPDATE of the table row so its version counter is checked and bumped"""
        table.updated_at = datetime.utcnow()
        flag_modified(table, "updated_at")
        return table

    @staticmethod
    def delete_table(db: Session, table: Table) -> None:
        db.delete(table)


# -------- Event settings repository --------

class SettingsRepo:
    @staticmethod
    def get_or_create(db: Session) -> EventSettings:
        event_settings = db.query(EventSettings).first()
        if not event_settings:
            event_settings = EventSettings()
            db.add(event_settings)
            db.commit()
            db.refresh(event_settings)
        return event_settings

    @staticmethod
    def update(db: Session, patch: Dict[str, Any]) -> EventSettings:
        event_settings = SettingsRepo.get_or_create(db)
        for field, value in patch.items():
            setattr(event_settings, field, value)
        event_settings.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(event_settings)
        return event_settings


# -------- Layout annotations repository --------

class LayoutRepo:
    @staticmethod
    def list_labels(db: Session) -> List[LayoutLabel]:
        return db.query(LayoutLabel).all()

    @staticmethod
    def list_shapes(db: Session) -> List[LayoutShape]:
        return db.query(LayoutShape).all()

    @staticmethod
    def replace_labels(db: Session, labels: Iterable[Dict[str, Any]]) -> List[LayoutLabel]:
        db.query(LayoutLabel).delete()
        # Ids are always generated here, client ids are ignored
        created = [LayoutLabel(**label) for label in labels]
        db.add_all(created)
        db.commit()
        return created

    @staticmethod
    def replace_shapes(db: Session, shapes: Iterable[Dict[str, Any]]) -> List[LayoutShape]:
        db.query(LayoutShape).delete()
        created = [LayoutShape(**shape) for shape in shapes]
        db.add_all(created)
        db.commit()
        return created

    @staticmethod
    def delete_label(db: Session, label_id: str) -> bool:
        deleted = db.query(LayoutLabel).filter(LayoutLabel.id == label_id).delete()
        db.commit()
        return deleted > 0

    @staticmethod
    def delete_shape(db: Session, shape_id: str) -> bool:
        deleted = db.query(LayoutShape).filter(LayoutShape.id == shape_id).delete()
        db.commit()
        return deleted > 0
