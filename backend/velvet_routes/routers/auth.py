from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from velvet_routes.database import get_db
from velvet_routes.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from velvet_routes.security import create_access_token
from velvet_routes.services.user_service import user_service

router = APIRouter()


@router.post("/register", status_code=201, response_model=AuthResponse)
async def register(req: RegisterRequest, db: AsyncSession = Depends(get_db)):
    user = await user_service.register(db, req.name, req.email, req.password)
    token = create_access_token(user.id, user.email)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(req: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await user_service.authenticate(db, req.email, req.password)
    token = create_access_token(user.id, user.email)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))
