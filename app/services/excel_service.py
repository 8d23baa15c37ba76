"""
Excel export of the current seating arrangement
"""

import io
from typing import Dict, List

import pandas as pd
from sqlalchemy.orm import Session

from app.services.capacity import party_size_of
from app.services.repositories import GuestRepo
from app.services.seating_service import SeatingService

GUEST_COLUMNS = ['Name', 'Party Size', 'Table', 'Phone', 'Address']
TABLE_COLUMNS = ['Table', 'Shape', 'Capacity', 'Seats Used', 'Seats Available']

class ExcelService:
    """Service for handling Excel operations"""

    @staticmethod
    def guest_rows(db: Session) -> List[Dict]:
        table_names = {table.id: table.name for table in SeatingService.list_tables_with_guests(db)}
        return [
            {
                'Name': guest.name,
                'Party Size': party_size_of(guest),
                'Table': table_names.get(guest.table_id, 'Unassigned'),
                'Phone': guest.phone_number or '',
                'Address': guest.address or '',
            }
            for guest in GuestRepo.list_guests(db)
        ]

    @staticmethod
    def table_rows(db: Session) -> List[Dict]:
        return [
            {
                'Table': table.name,
                'Shape': table.shape,
                'Capacity': table.capacity,
                'Seats Used': table.seats_used,
                'Seats Available': table.seats_available,
            }
            for table in SeatingService.list_tables_with_guests(db)
        ]

    @staticmethod
    def export_seating_chart(db: Session) -> bytes:
        """Export guests and table load to an .xlsx workbook"""
        guests_df = pd.DataFrame(ExcelService.guest_rows(db), columns=GUEST_COLUMNS)
        tables_df = pd.DataFrame(ExcelService.table_rows(db), columns=TABLE_COLUMNS)

        # Seated guests grouped by table, unassigned last
        guests_df['_unassigned'] = guests_df['Table'] == 'Unassigned'
        guests_df = guests_df.sort_values(['_unassigned', 'Table', 'Name'], kind='stable').drop(columns='_unassigned')

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            guests_df.to_excel(writer, index=False, sheet_name='Guest List')
            tables_df.to_excel(writer, index=False, sheet_name='Tables')

        return buffer.getvalue()
