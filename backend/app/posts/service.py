# backend/app/posts/service.py
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import select, func, update
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.permissions import assert_owner
from ..categories.models import Category
from ..comments.models import Comment
from ..exceptions import ConflictError, NotFoundError, ValidationFailedError
from ..identity import ResourceKind, commit_or_conflict, find_conflict
from ..slug import generate_slug
from .models import Post, PostCategory
from .schemas import PostCreate, PostUpdate

logger = logging.getLogger(__name__)

POST = ResourceKind.POST.value
SLUG_CONFLICT_DETAIL = "A post with this title already exists"
NON_NULLABLE_FIELDS = ("title", "content", "is_published")


def post_load_options():
    """응답 조립에 필요한 관계(작성자, 카테고리, 댓글 작성자)를 한 번에 로딩"""
    return (
        selectinload(Post.author),
        selectinload(Post.category_links).selectinload(PostCategory.category),
        selectinload(Post.comments).selectinload(Comment.author),
    )


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _derive_slug(title: str) -> str:
    slug = generate_slug(title)
    if not slug:
        raise ValidationFailedError(POST, "title", detail="Title must contain at least one letter or digit")
    return slug


async def _load_post(db: AsyncSession, *conditions) -> Optional[Post]:
    # populate_existing: 같은 세션에 남아 있는 예전 상태 대신 DB 값을 반영
    stmt = (
        select(Post)
        .options(*post_load_options())
        .where(*conditions)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_post(db: AsyncSession, post_id: int) -> Post:
    post = await _load_post(db, Post.id == post_id)
    if post is None:
        raise NotFoundError(POST, post_id)
    return post


async def _ensure_slug_available(db: AsyncSession, title: str, slug: str, exclude_id: Optional[int] = None) -> None:
    conflict = await find_conflict(db, ResourceKind.POST, title, slug, exclude_id=exclude_id)
    if conflict is not None:
        logger.warning(f"Post slug conflict: slug={slug!r} is used by post id={conflict.id}")
        raise ConflictError(POST, slug, detail=SLUG_CONFLICT_DETAIL)


async def _resolve_categories(db: AsyncSession, category_ids: Iterable[int]) -> List[int]:
    """요청한 카테고리가 모두 존재하는지 확인하고 중복을 제거한 id 목록을 반환"""
    wanted = list(dict.fromkeys(category_ids))
    if not wanted:
        return []
    result = await db.execute(select(Category.id).where(Category.id.in_(wanted)))
    found = set(result.scalars().all())
    missing = [cid for cid in wanted if cid not in found]
    if missing:
        raise NotFoundError(ResourceKind.CATEGORY.value, missing, detail=f"Category not found: {missing}")
    return wanted


async def create_post(db: AsyncSession, data: PostCreate, author_id: int) -> Post:
    slug = _derive_slug(data.title)
    await _ensure_slug_available(db, data.title, slug)
    category_ids = await _resolve_categories(db, data.category_ids or [])

    post = Post(
        title=data.title,
        slug=slug,
        content=data.content,
        excerpt=data.excerpt,
        featured_image=data.featured_image,
        is_published=data.is_published,
        published_at=_now() if data.is_published else None,
        views=0,
        author_id=author_id,
        category_links=[PostCategory(category_id=cid) for cid in category_ids],
    )
    db.add(post)
    await commit_or_conflict(db, ResourceKind.POST, slug, SLUG_CONFLICT_DETAIL)
    logger.info(f"Post created: id={post.id}, slug={slug!r}, author_id={author_id}")
    return await get_post(db, post.id)


async def list_published_posts(db: AsyncSession, page: int = 1, limit: int = 10) -> Tuple[List[Post], int]:
    """발행된 게시글을 최신순으로 페이지 단위 조회. (게시글 목록, 전체 개수) 반환"""
    page = max(page, 1)
    skip = (page - 1) * limit

    total = (
        await db.execute(select(func.count(Post.id)).where(Post.is_published.is_(True)))
    ).scalar_one()
    result = await db.execute(
        select(Post)
        .options(*post_load_options())
        .where(Post.is_published.is_(True))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def list_posts_by_author(db: AsyncSession, author_id: int) -> List[Post]:
    result = await db.execute(
        select(Post)
        .options(*post_load_options())
        .where(Post.author_id == author_id)
        .order_by(Post.created_at.desc(), Post.id.desc())
    )
    return list(result.scalars().all())


async def list_posts_by_category(db: AsyncSession, category_id: int) -> List[Post]:
    result = await db.execute(
        select(Post)
        .options(*post_load_options())
        .join(PostCategory, PostCategory.post_id == Post.id)
        .where(PostCategory.category_id == category_id, Post.is_published.is_(True))
        .order_by(Post.created_at.desc(), Post.id.desc())
    )
    return list(result.scalars().all())


async def _increment_views(db: AsyncSession, condition) -> Optional[int]:
    """views = views + 1 을 DB에서 원자적으로 수행. 대상 행의 id를 반환 (없으면 None)"""
    target = (await db.execute(select(Post.id).where(condition))).scalar_one_or_none()
    if target is None:
        return None
    await db.execute(
        update(Post)
        .where(Post.id == target)
        .values(views=Post.views + 1)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return target


async def get_post_view(db: AsyncSession, post_id: int) -> Post:
    """
    단건 조회 (조회수 증가 포함).
    반환되는 views에는 이번 조회로 증가한 값이 반영되어 있습니다.
    """
    target = await _increment_views(db, Post.id == post_id)
    if target is None:
        raise NotFoundError(POST, post_id)
    return await get_post(db, target)


async def get_post_view_by_slug(db: AsyncSession, slug: str) -> Post:
    target = await _increment_views(db, Post.slug == slug)
    if target is None:
        raise NotFoundError(POST, slug)
    return await get_post(db, target)


async def update_post(db: AsyncSession, post_id: int, data: PostUpdate, principal_id: Optional[int]) -> Post:
    post = await get_post(db, post_id)
    assert_owner(post, principal_id, entity=POST, action="update")

    update_data = data.model_dump(exclude_unset=True)
    category_ids = update_data.pop("category_ids", None)
    # NOT NULL 컬럼에 명시적 null이 오면 무시
    for field in NON_NULLABLE_FIELDS:
        if field in update_data and update_data[field] is None:
            update_data.pop(field)

    # 제목이 바뀌어 slug가 달라질 때만 slug 재계산 + 중복 검사
    if "title" in update_data:
        new_slug = _derive_slug(update_data["title"])
        if new_slug != post.slug:
            await _ensure_slug_available(db, update_data["title"], new_slug, exclude_id=post.id)
            update_data["slug"] = new_slug

    # 미발행 -> 발행 전환 시에만 published_at 기록 (이후 수정에서는 유지)
    if update_data.get("is_published") and not post.is_published:
        update_data["published_at"] = _now()

    if category_ids is not None:
        resolved = await _resolve_categories(db, category_ids)
        # 기존 연결을 모두 지운 뒤 새로 생성 (차이 비교 없이 통째로 교체)
        post.category_links.clear()
        await db.flush()
        post.category_links.extend(PostCategory(category_id=cid) for cid in resolved)

    for field, value in update_data.items():
        setattr(post, field, value)

    await commit_or_conflict(db, ResourceKind.POST, post.slug, SLUG_CONFLICT_DETAIL)
    logger.info(f"Post updated: id={post.id}, fields={sorted(update_data)}, categories_replaced={category_ids is not None}")
    return await get_post(db, post.id)


async def delete_post(db: AsyncSession, post_id: int, principal_id: Optional[int]) -> None:
    post = await get_post(db, post_id)
    assert_owner(post, principal_id, entity=POST, action="delete")

    # 카테고리 연결과 댓글은 cascade="all, delete-orphan"으로 함께 삭제 (DB FK 규칙에 의존하지 않음)
    await db.delete(post)
    await db.commit()
    logger.info(f"Post deleted: id={post_id}, by user_id={principal_id}")
