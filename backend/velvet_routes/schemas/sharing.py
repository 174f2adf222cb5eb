from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator

from velvet_routes.schemas.common import CamelModel


class ShareTripRequest(CamelModel):
    trip_data: dict[str, Any]


class ShareTripResponse(CamelModel):
    success: bool = True
    share_id: str
    share_link: str
    expires_at: datetime | None


class SharedTripResponse(CamelModel):
    success: bool = True
    trip_data: dict[str, Any]


class CommentRequest(BaseModel):
    comment: str

    @field_validator("comment")
    @classmethod
    def comment_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment is required")
        return v


class CommentResponse(CamelModel):
    comment: str
    user_name: str
    created_at: datetime


class CommentListResponse(BaseModel):
    success: bool = True
    comments: list[CommentResponse]
