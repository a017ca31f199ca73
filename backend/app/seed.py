import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .categories import service as category_service
from .categories.models import Category
from .categories.schemas import CategoryCreate

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Technology", "description": "Posts about technology and programming", "color": "#007BFF"},
    {"name": "Lifestyle", "description": "Posts about lifestyle and personal experiences", "color": "#28A745"},
    {"name": "Travel", "description": "Posts about travel and adventures", "color": "#FFC107"},
    {"name": "Food", "description": "Posts about cooking and food reviews", "color": "#DC3545"},
    {"name": "Health", "description": "Posts about health and wellness", "color": "#17A2B8"},
]


async def seed_default_categories(db: AsyncSession) -> tuple[int, int]:
    """기본 카테고리를 생성합니다. 이미 있는 이름은 건너뜁니다. (created, skipped) 반환"""
    existing = set((await db.execute(select(Category.name))).scalars().all())
    created = 0
    skipped = 0
    for item in DEFAULT_CATEGORIES:
        if item["name"] in existing:
            skipped += 1
            continue
        await category_service.create_category(db, CategoryCreate(**item))
        created += 1
    logger.info(f"Seeded default categories: created={created}, skipped={skipped}")
    return created, skipped
