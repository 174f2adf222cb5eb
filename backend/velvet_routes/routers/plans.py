import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from velvet_routes.database import get_db
from velvet_routes.dependencies import get_current_user
from velvet_routes.models.user import User
from velvet_routes.schemas.common import DataResponse
from velvet_routes.schemas.plan import PlanFields, PlanResponse
from velvet_routes.services.plan_service import plan_service

router = APIRouter()


@router.post("/save-current", response_model=DataResponse[PlanResponse])
async def save_current_plan(
    req: PlanFields,
    response: Response,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Upsert the caller's current plan with the wizard fields that were sent."""
    plan, created = await plan_service.upsert_current_plan(db, user.id, req.model_dump(exclude_unset=True))
    if created:
        response.status_code = 201
    return DataResponse(data=PlanResponse.model_validate(plan))


@router.get("/current", response_model=DataResponse[PlanResponse | None])
async def get_current_plan(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    plan = await plan_service.get_current_plan(db, user.id)
    return DataResponse(data=PlanResponse.model_validate(plan) if plan else None)


@router.post("/current/archive", response_model=DataResponse[PlanResponse | None])
async def archive_current_plan(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Retire the current plan; the next save starts a new one."""
    plan = await plan_service.archive_current_plan(db, user.id)
    return DataResponse(data=PlanResponse.model_validate(plan) if plan else None)


@router.get("", response_model=DataResponse[list[PlanResponse]])
async def list_plans(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    plans = await plan_service.list_plans(db, user.id)
    return DataResponse(data=[PlanResponse.model_validate(p) for p in plans])


@router.get("/{plan_id}", response_model=DataResponse[PlanResponse])
async def get_plan(
    plan_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    plan = await plan_service.get_plan(db, user.id, plan_id)
    return DataResponse(data=PlanResponse.model_validate(plan))
