"""
WebSocket manager for real-time seating updates
"""

import json
import logging
from typing import Dict, List
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

SEATING_CHANNEL = "seating"
CHANNELS = (SEATING_CHANNEL,)

class WebSocketManager:
    """Manages WebSocket connections grouped by channel"""

    def __init__(self):
        # channel -> list of websockets
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, channel: str):
        """Accept WebSocket connection and add it to the channel"""
        await websocket.accept()
        self.active_connections.setdefault(channel, []).append(websocket)
        logger.info(f"WebSocket connected to {channel}. Total connections: {len(self.active_connections[channel])}")

    def disconnect(self, websocket: WebSocket, channel: str):
        """Remove WebSocket connection from the channel"""
        connections = self.active_connections.get(channel)
        if not connections or websocket not in connections:
            return
        connections.remove(websocket)
        logger.info(f"WebSocket disconnected from {channel}. Remaining connections: {len(connections)}")
        if not connections:
            del self.active_connections[channel]

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send message to specific WebSocket"""
        try:
            await websocket.send_text(json.dumps(message))
        except (RuntimeError, WebSocketDisconnect) as e:
            logger.error(f"Error sending personal message: {e}")

    async def broadcast_to_channel(self, channel: str, message: dict):
        """Broadcast message to all WebSockets on a channel"""
        if channel not in self.active_connections:
            logger.debug(f"No active connections for {channel}")
            return

        # Copy, disconnects below mutate the list
        connections = self.active_connections[channel].copy()

        disconnected = []
        for websocket in connections:
            try:
                await websocket.send_text(json.dumps(message))
            except (RuntimeError, WebSocketDisconnect) as e:
                logger.error(f"Error broadcasting to websocket: {e}")
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket, channel)

    def get_connection_count(self, channel: str) -> int:
        return len(self.active_connections.get(channel, []))

# Shared manager for the process
websocket_manager = WebSocketManager()

router = APIRouter()

@router.websocket("/{channel}")
async def websocket_endpoint(websocket: WebSocket, channel: str):
    """WebSocket endpoint for real-time seating updates"""
    if channel not in CHANNELS:
        await websocket.close(code=4004, reason="Unknown channel")
        return

    await websocket_manager.connect(websocket, channel)

    try:
        await websocket_manager.send_personal_message({
            "type": "connection",
            "channel": channel,
            "connection_count": websocket_manager.get_connection_count(channel),
        }, websocket)

        while True:
            data = await websocket.receive_text()
            try:
                client_message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received from WebSocket: {data}")
                continue

            # Heartbeat
            if isinstance(client_message, dict) and client_message.get("type") == "ping":
                await websocket_manager.send_personal_message({
                    "type": "pong",
                    "timestamp": client_message.get("timestamp"),
                }, websocket)

    except WebSocketDisconnect:
        pass
    finally:
        websocket_manager.disconnect(websocket, channel)
