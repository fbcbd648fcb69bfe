# ============================================================================
# FILE: jamvault/services/remote_service.py
# ============================================================================
"""
Remote control relay.

A browser tab connects as a "player" (owns playback) or a "controller"
(sends commands). Both authenticate with the pairing token handed out by
GET /api/remote-control/info; devices sharing a token see each other.
Nothing is persisted and messages are relayed without ordering or retry.
"""
from fastapi import WebSocket, WebSocketDisconnect
from typing import Any, Dict, List, Optional
import json
import logging
import secrets
import uuid

logger = logging.getLogger(__name__)

PLAYER = "player"
CONTROLLER = "controller"
DEVICE_TYPES = (PLAYER, CONTROLLER)
COMMANDS = ("play", "pause", "next", "previous", "volume")

class RemoteDevice:
    """A connected websocket plus the last status a player reported"""

    def __init__(self, websocket: WebSocket, token: str, device_type: str, name: str):
        self.websocket = websocket
        self.token = token
        self.device_type = device_type
        self.name = name
        self.device_id = uuid.uuid4().hex
        self.current_song: Optional[Any] = None
        self.is_playing = False
        self.volume = 100

    def summary(self) -> Dict[str, Any]:
        return {
            "deviceId": self.device_id,
            "name": self.name,
            "isPlaying": self.is_playing,
            "volume": self.volume,
            "currentSong": self.current_song,
        }

class RemoteControlHub:
    """Pairs players and controllers by token and forwards their messages"""

    def __init__(self):
        self.tokens: Dict[str, int] = {}
        self.user_tokens: Dict[int, str] = {}
        self.devices: Dict[str, RemoteDevice] = {}

    def get_or_create_token(self, user_id: int) -> str:
        token = self.user_tokens.get(user_id)
        if token is None:
            token = secrets.token_urlsafe(24)
            self.user_tokens[user_id] = token
            self.tokens[token] = user_id
        return token

    def _peers(self, token: str, device_type: str) -> List[RemoteDevice]:
        return [d for d in self.devices.values() if d.token == token and d.device_type == device_type]

    async def _send(self, device: RemoteDevice, message: Dict[str, Any]) -> None:
        try:
            await device.websocket.send_json(message)
        except Exception as e:
            logger.warning(f"Remote send to {device.device_id} failed: {e}")

    async def authenticate(self, websocket: WebSocket, message: Dict[str, Any]) -> Optional[RemoteDevice]:
        token = message.get("token")
        device_type = message.get("deviceType")
        if message.get("type") != "auth" or token not in self.tokens:
            await websocket.send_json({"type": "auth_error", "message": "Invalid pairing token"})
            return None
        if device_type not in DEVICE_TYPES:
            await websocket.send_json({"type": "auth_error", "message": "deviceType must be player or controller"})
            return None

        name = message.get("deviceName") or ("JamVault Player" if device_type == PLAYER else "JamVault Remote")
        device = RemoteDevice(websocket, token, device_type, name)
        self.devices[device.device_id] = device
        await websocket.send_json({
            "type": "auth_success",
            "deviceId": device.device_id,
            "message": f"Connected as {device_type}",
        })

        if device_type == PLAYER:
            for controller in self._peers(token, CONTROLLER):
                await self._send(controller, {"type": "player_connected", "deviceId": device.device_id, "name": name})
        else:
            players = [p.summary() for p in self._peers(token, PLAYER)]
            await websocket.send_json({"type": "available_players", "players": players})

        logger.info(f"Remote {device_type} connected: {device.device_id}")
        return device

    async def handle_message(self, device: RemoteDevice, message: Dict[str, Any]) -> None:
        message_type = message.get("type")

        if message_type == "command" and device.device_type == CONTROLLER:
            action = message.get("action")
            target = self.devices.get(message.get("targetDeviceId") or "")
            if action not in COMMANDS:
                await self._send(device, {"type": "error", "message": f"Unknown command: {action}"})
                return
            if target is None or target.token != device.token or target.device_type != PLAYER:
                await self._send(device, {"type": "error", "message": "Player not found"})
                return
            await self._send(target, {"type": "command", "action": action, "params": message.get("params")})

        elif message_type == "status_update" and device.device_type == PLAYER:
            if "currentSong" in message:
                device.current_song = message["currentSong"]
            if "isPlaying" in message:
                device.is_playing = bool(message["isPlaying"])
            if "volume" in message:
                device.volume = message["volume"]
            status_message = {"type": "player_status", **device.summary()}
            status_message.pop("name")
            for controller in self._peers(device.token, CONTROLLER):
                await self._send(controller, status_message)

        else:
            await self._send(device, {"type": "error", "message": f"Unsupported message: {message_type}"})

    async def disconnect(self, device: RemoteDevice) -> None:
        self.devices.pop(device.device_id, None)
        if device.device_type == PLAYER:
            for controller in self._peers(device.token, CONTROLLER):
                await self._send(controller, {"type": "player_disconnected", "deviceId": device.device_id})
        logger.info(f"Remote {device.device_type} disconnected: {device.device_id}")

    async def serve(self, websocket: WebSocket) -> None:
        """Run one websocket connection until the client goes away"""
        await websocket.accept()
        device: Optional[RemoteDevice] = None
        try:
            while True:
                raw = await websocket.receive_text()
                try:
                    message = json.loads(raw)
                except json.JSONDecodeError:
                    await websocket.send_json({"type": "error", "message": "Invalid JSON"})
                    continue
                if not isinstance(message, dict):
                    await websocket.send_json({"type": "error", "message": "Invalid message"})
                    continue

                if device is None:
                    device = await self.authenticate(websocket, message)
                    if device is None:
                        await websocket.close(code=1008)
                        return
                else:
                    await self.handle_message(device, message)
        except WebSocketDisconnect:
            pass
        finally:
            if device is not None:
                await self.disconnect(device)
