import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.permissions import assert_owner
from ..config import settings
from ..exceptions import NotFoundError
from ..posts.models import Post
from .models import Comment
from .schemas import CommentCreate

logger = logging.getLogger(__name__)

COMMENT = "Comment"


async def _load_comment(db: AsyncSession, comment_id: int) -> Comment:
    result = await db.execute(
        select(Comment)
        .options(selectinload(Comment.author), selectinload(Comment.post))
        .where(Comment.id == comment_id)
        .execution_options(populate_existing=True)
    )
    comment = result.scalar_one_or_none()
    if comment is None:
        raise NotFoundError(COMMENT, comment_id)
    return comment


async def create_comment(db: AsyncSession, data: CommentCreate, author_id: int) -> Comment:
    """대상 게시글이 존재해야 하며, 로그인한 사용자라면 누구나 작성할 수 있습니다."""
    post = await db.get(Post, data.post_id)
    if post is None:
        raise NotFoundError("Post", data.post_id)

    comment = Comment(
        content=data.content,
        post_id=data.post_id,
        author_id=author_id,
        is_approved=settings.COMMENTS_AUTO_APPROVE,
    )
    db.add(comment)
    await db.commit()
    logger.info(f"Comment created: id={comment.id}, post_id={data.post_id}, author_id={author_id}")
    return await _load_comment(db, comment.id)


async def list_comments_for_post(db: AsyncSession, post_id: int) -> List[Comment]:
    """승인된 댓글만 최신순으로 조회"""
    result = await db.execute(
        select(Comment)
        .options(selectinload(Comment.author))
        .where(Comment.post_id == post_id, Comment.is_approved.is_(True))
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    return list(result.scalars().all())


async def update_comment(db: AsyncSession, comment_id: int, content: str, principal_id: Optional[int]) -> Comment:
    comment = await _load_comment(db, comment_id)
    assert_owner(comment, principal_id, entity=COMMENT, action="update")

    comment.content = content
    await db.commit()
    logger.info(f"Comment updated: id={comment_id}")
    return await _load_comment(db, comment_id)


async def delete_comment(db: AsyncSession, comment_id: int, principal_id: Optional[int]) -> None:
    comment = await _load_comment(db, comment_id)
    assert_owner(comment, principal_id, entity=COMMENT, action="delete")

    await db.delete(comment)
    await db.commit()
    logger.info(f"Comment deleted: id={comment_id}, by user_id={principal_id}")
