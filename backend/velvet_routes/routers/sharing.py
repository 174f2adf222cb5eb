"""Sharing router: public trip snapshots and comment threads."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from velvet_routes.database import get_db
from velvet_routes.dependencies import get_current_user
from velvet_routes.models.user import User
from velvet_routes.schemas.common import MessageResponse
from velvet_routes.schemas.sharing import (
    CommentListResponse,
    CommentRequest,
    CommentResponse,
    SharedTripResponse,
    ShareTripRequest,
    ShareTripResponse,
)
from velvet_routes.services.sharing_service import sharing_service

router = APIRouter()


@router.post("", response_model=ShareTripResponse)
async def share_trip(
    req: ShareTripRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    shared = await sharing_service.share_trip(db, user.id, req.trip_data)
    return ShareTripResponse(
        share_id=shared.id,
        share_link=sharing_service.share_link(shared.id),
        expires_at=shared.expires_at,
    )


@router.get("/{share_id}", response_model=SharedTripResponse)
async def get_shared_trip(share_id: str, db: AsyncSession = Depends(get_db)):
    shared = await sharing_service.get_shared_trip(db, share_id)
    return SharedTripResponse(trip_data=shared.trip_data)


@router.post("/{share_id}/comments", response_model=MessageResponse)
async def add_comment(
    share_id: str,
    req: CommentRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await sharing_service.add_comment(db, share_id, user.id, req.comment)
    return MessageResponse(message="Comment added successfully")


@router.get("/{share_id}/comments", response_model=CommentListResponse)
async def list_comments(share_id: str, db: AsyncSession = Depends(get_db)):
    comments = await sharing_service.list_comments(db, share_id)
    return CommentListResponse(comments=[CommentResponse.model_validate(c) for c in comments])
