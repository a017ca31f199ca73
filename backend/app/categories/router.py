from fastapi import APIRouter, status

from ..auth.dependencies import CurrentUser
from ..composition import compose_category_detail
from ..database import SessionDep
from . import service
from .schemas import CategoryCreate, CategoryDetail, CategoryOut, CategoryUpdate

router = APIRouter(prefix="/categories", tags=["categories"])


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED, dependencies=[CurrentUser])
async def create_category(body: CategoryCreate, db: SessionDep):
    return await service.create_category(db, body)


@router.get("", response_model=list[CategoryOut])
async def list_categories(db: SessionDep):
    return await service.list_categories(db)


@router.get("/{category_id}", response_model=CategoryDetail)
async def get_category(category_id: int, db: SessionDep):
    category = await service.get_category_detail(db, category_id)
    return compose_category_detail(category)


@router.patch("/{category_id}", response_model=CategoryOut, dependencies=[CurrentUser])
async def update_category(category_id: int, body: CategoryUpdate, db: SessionDep):
    return await service.update_category(db, category_id, body)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[CurrentUser])
async def delete_category(category_id: int, db: SessionDep):
    await service.delete_category(db, category_id)
    return
