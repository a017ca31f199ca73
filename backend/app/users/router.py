from fastapi import APIRouter
from typing import List

from ..database import SessionDep
from ..users.models import User as UserModel
from ..composition import compose_user_detail, public_user

from .schema import UserUpdate, UserPublic, UserDetail
from . import service as user_service
from ..auth.dependencies import CurrentUser

router = APIRouter(prefix="/users", tags=["users"])

@router.get("", response_model=List[UserDetail])
async def list_users(db: SessionDep, skip: int = 0, limit: int = 100):
    users = await user_service.get_users(db, skip=skip, limit=limit)
    return [compose_user_detail(u) for u in users]

@router.get("/me", response_model=UserPublic)
async def read_users_me(current_user: UserModel = CurrentUser):
    return public_user(current_user)

@router.patch("/me", response_model=UserPublic)
async def update_users_me(
    db: SessionDep,
    user_update_data: UserUpdate,
    current_user: UserModel = CurrentUser,
):
    user = await user_service.update_user(db, db_user=current_user, user_in=user_update_data)
    return public_user(user)

@router.get("/{user_id}", response_model=UserDetail)
async def get_user_by_id_route(user_id: int, db: SessionDep):
    user = await user_service.get_user_detail(user_id, db)
    return compose_user_detail(user)
