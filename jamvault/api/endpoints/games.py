# ============================================================================
# FILE: jamvault/api/endpoints/games.py
# ============================================================================
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from jamvault.api.dependencies import get_storage, require_current_user
from jamvault.db.models.activity import Game
from jamvault.db.models.user import User
from jamvault.db.storage import BaseStorage
from jamvault.schemas.social import GameCreate

router = APIRouter()

@router.post("", response_model=Game, status_code=status.HTTP_201_CREATED)
async def save_game(
    game_data: GameCreate,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    return storage.create_game(current_user.id, game_data)

@router.get("", response_model=List[Game])
async def my_games(
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    return storage.get_games_by_user(current_user.id)

@router.get("/leaderboard", response_model=List[Game])
async def leaderboard(
    game_type: Optional[str] = Query(None, alias="gameType"),
    limit: int = Query(10, ge=1, le=100),
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    return storage.get_leaderboard(game_type, limit)
