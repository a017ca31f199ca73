import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ConflictError, NotFoundError, ValidationFailedError
from ..identity import ResourceKind, commit_or_conflict, find_conflict
from ..posts.models import Post, PostCategory
from ..slug import generate_slug
from .models import Category
from .schemas import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)

CATEGORY = ResourceKind.CATEGORY.value
NAME_CONFLICT_DETAIL = "Category name already exists"


def _derive_slug(name: str) -> str:
    slug = generate_slug(name)
    if not slug:
        raise ValidationFailedError(CATEGORY, "name", detail="Category name must contain at least one letter or digit")
    return slug


async def _ensure_name_available(db: AsyncSession, name: str, slug: str, exclude_id: int | None = None) -> None:
    existing = await find_conflict(db, ResourceKind.CATEGORY, name, slug, exclude_id=exclude_id)
    if existing is not None:
        logger.warning(f"Category name conflict: name={name!r} slug={slug!r} (existing id={existing.id})")
        raise ConflictError(CATEGORY, name, detail=NAME_CONFLICT_DETAIL)


async def get_by_id(db: AsyncSession, category_id: int) -> Category:
    result = await db.execute(select(Category).where(Category.id == category_id))
    category = result.scalar_one_or_none()
    if category is None:
        raise NotFoundError(CATEGORY, category_id)
    return category


async def get_category_detail(db: AsyncSession, category_id: int) -> Category:
    """연결된 게시글(및 각 게시글의 카테고리)까지 로딩한 카테고리"""
    stmt = (
        select(Category)
        .options(
            selectinload(Category.post_links)
            .selectinload(PostCategory.post)
            .selectinload(Post.category_links)
            .selectinload(PostCategory.category)
        )
        .where(Category.id == category_id)
        .execution_options(populate_existing=True)
    )
    category = (await db.execute(stmt)).scalar_one_or_none()
    if category is None:
        raise NotFoundError(CATEGORY, category_id)
    return category


async def list_categories(db: AsyncSession) -> List[Category]:
    result = await db.execute(select(Category).order_by(Category.name.asc()))
    return list(result.scalars().all())


async def create_category(db: AsyncSession, data: CategoryCreate) -> Category:
    slug = _derive_slug(data.name)
    await _ensure_name_available(db, data.name, slug)

    category = Category(
        name=data.name,
        slug=slug,
        description=data.description,
        color=data.color,
    )
    db.add(category)
    await commit_or_conflict(db, ResourceKind.CATEGORY, data.name, NAME_CONFLICT_DETAIL)
    await db.refresh(category)
    logger.info(f"Category created: id={category.id}, slug={slug!r}")
    return category


async def update_category(db: AsyncSession, category_id: int, data: CategoryUpdate) -> Category:
    category = await get_by_id(db, category_id)
    update_data = data.model_dump(exclude_unset=True)

    name = update_data.pop("name", None)
    # 이름이 바뀔 때만 slug 재계산 + 중복 재검사 (자기 자신 제외)
    if name and name != category.name:
        slug = _derive_slug(name)
        await _ensure_name_available(db, name, slug, exclude_id=category.id)
        update_data["name"] = name
        update_data["slug"] = slug

    for field, value in update_data.items():
        setattr(category, field, value)

    await commit_or_conflict(db, ResourceKind.CATEGORY, name or category_id, NAME_CONFLICT_DETAIL)
    await db.refresh(category)
    logger.info(f"Category updated: id={category.id}, fields={sorted(update_data)}")
    return category


async def delete_category(db: AsyncSession, category_id: int) -> None:
    result = await db.execute(
        select(Category)
        .options(selectinload(Category.post_links))
        .where(Category.id == category_id)
        .execution_options(populate_existing=True)
    )
    category = result.scalar_one_or_none()
    if category is None:
        raise NotFoundError(CATEGORY, category_id)

    # 게시글 연결 행은 cascade로 함께 삭제, 게시글 자체는 유지
    await db.delete(category)
    await db.commit()
    logger.info(f"Category deleted: id={category_id}")
