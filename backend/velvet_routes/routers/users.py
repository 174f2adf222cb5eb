from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from velvet_routes.database import get_db
from velvet_routes.dependencies import get_current_user
from velvet_routes.models.user import User
from velvet_routes.schemas.auth import ProfileResponse, SearchEntryRequest, SearchHistoryResponse, UserResponse
from velvet_routes.services.user_service import user_service

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(user: User = Depends(get_current_user)):
    return ProfileResponse(user=UserResponse.model_validate(user))


@router.post("/search-history", response_model=SearchHistoryResponse)
async def add_search_history(
    req: SearchEntryRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Record a destination search; the newest entry comes first."""
    history = await user_service.add_search(db, user, req.destination, req.details)
    return SearchHistoryResponse(search_history=history)


@router.get("/search-history", response_model=SearchHistoryResponse)
async def get_search_history(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    history = await user_service.get_search_history(db, user.id)
    return SearchHistoryResponse(search_history=history)
