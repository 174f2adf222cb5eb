from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from velvet_routes.database import get_db
from velvet_routes.exceptions import AuthError
from velvet_routes.models.user import User
from velvet_routes.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    token = None
    if creds and creds.scheme.lower() == "bearer":
        token = creds.credentials

    if not token:
        raise AuthError("Access token required")

    user_id = decode_access_token(token)
    user = await db.get(User, user_id)
    if user is None:
        raise AuthError("User not found")

    request.state.user_id = str(user.id)
    return user
