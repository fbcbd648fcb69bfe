# ============================================================================
# FILE: jamvault/api/endpoints/remote.py
# ============================================================================
from fastapi import APIRouter, Depends, Request, WebSocket
from jamvault.api.dependencies import get_remote_hub, get_settings, require_current_user
from jamvault.config import Settings
from jamvault.db.models.user import User
from jamvault.services.remote_service import RemoteControlHub

router = APIRouter()

@router.get("/remote-control/info")
async def remote_control_info(
    request: Request,
    hub: RemoteControlHub = Depends(get_remote_hub),
    app_settings: Settings = Depends(get_settings),
    current_user: User = Depends(require_current_user)
):
    """
    Pairing details for the remote-control socket
    Every device of the same user gets the same token
    """
    return {
        "token": hub.get_or_create_token(current_user.id),
        "host": request.headers.get("host", request.url.netloc),
        "wsPath": app_settings.REMOTE_WS_PATH,
    }

async def remote_socket(websocket: WebSocket):
    await websocket.app.state.remote_hub.serve(websocket)
