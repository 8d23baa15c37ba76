"""
Seating change notifications over WebSocket

Dashboards apply drag-and-drop changes optimistically; these messages tell
every connected client to reconcile with the server's state.
"""

from datetime import datetime
from typing import Optional

from fastapi.encoders import jsonable_encoder

from app.api.ws import SEATING_CHANNEL, WebSocketManager
from app.models import Guest, Table
from app.schemas.guest import GuestResponse
from app.schemas.table import TableResponse

class SeatingNotifier:
    """Broadcasts seating changes to the admin dashboard channel"""

    def __init__(self, websocket_manager: WebSocketManager, channel: str = SEATING_CHANNEL):
        self.websocket_manager = websocket_manager
        self.channel = channel

    async def _broadcast(self, message: dict):
        message["timestamp"] = datetime.utcnow().isoformat()
        await self.websocket_manager.broadcast_to_channel(self.channel, jsonable_encoder(message))

    async def broadcast_guest_update(self, guest: Guest, update_type: str = "guest_updated"):
        """Broadcast individual guest update"""
        await self._broadcast({
            "type": update_type,
            "guest": GuestResponse.model_validate(guest).model_dump(),
        })

    async def broadcast_guest_deleted(self, guest_id: str):
        await self._broadcast({"type": "guest_deleted", "guest_id": guest_id})

    async def broadcast_table_update(self, table: Table, update_type: str = "table_updated"):
        await self._broadcast({
            "type": update_type,
            "table": TableResponse.model_validate(table).model_dump(),
        })

    async def broadcast_table_deleted(self, table_id: str, unassigned_count: int):
        await self._broadcast({
            "type": "table_deleted",
            "table_id": table_id,
            "unassigned_count": unassigned_count,
        })

    async def broadcast_seating_update(self, update_type: str = "seating_updated", detail: Optional[dict] = None):
        """Broadcast that the whole arrangement changed; clients should refetch"""
        message = {
            "type": update_type,
            "message": "Seating arrangement has been updated",
        }
        if detail:
            message["detail"] = detail
        await self._broadcast(message)
