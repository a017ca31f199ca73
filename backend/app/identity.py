# backend/app/identity.py
import logging
from enum import Enum as PyEnum
from typing import Any, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .categories.models import Category
from .exceptions import ConflictError
from .posts.models import Post
from .users.models import User

logger = logging.getLogger(__name__)


class ResourceKind(str, PyEnum):
    CATEGORY = "Category"
    POST = "Post"
    USER = "User"


# kind -> (모델, 이름 컬럼, slug 컬럼). User는 (username, email) 쌍으로 중복을 판단합니다.
IDENTITY_COLUMNS = {
    ResourceKind.CATEGORY: (Category, "name", "slug"),
    ResourceKind.POST: (Post, "title", "slug"),
    ResourceKind.USER: (User, "username", "email"),
}


async def find_conflict(
    db: AsyncSession,
    kind: ResourceKind,
    candidate_name: Optional[str],
    candidate_slug: Optional[str],
    exclude_id: Optional[int] = None,
):
    """
    같은 종류의 리소스 중 이름이 같거나 slug가 같은 행을 찾습니다.

    exclude_id가 주어지면 해당 행(수정 중인 자기 자신)은 제외합니다.
    충돌하는 행을 반환하고, 없으면 None을 반환합니다.
    """
    model, name_attr, slug_attr = IDENTITY_COLUMNS[kind]
    conditions = []
    if candidate_name is not None:
        conditions.append(getattr(model, name_attr) == candidate_name)
    if candidate_slug is not None:
        conditions.append(getattr(model, slug_attr) == candidate_slug)
    if not conditions:
        return None

    stmt = select(model).where(or_(*conditions))
    if exclude_id is not None:
        stmt = stmt.where(model.id != exclude_id)
    result = await db.execute(stmt.limit(1))
    return result.scalars().first()


# asyncpg는 SQLSTATE, sqlite는 메시지로 유니크 제약 위반을 구분
UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    orig = error.orig
    if getattr(orig, "sqlstate", None) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    return "UNIQUE constraint failed" in str(orig)


async def commit_or_conflict(db: AsyncSession, kind: ResourceKind, key: Any, detail: str) -> None:
    """
    커밋 중 DB 유니크 제약 위반이 나면 롤백하고 사전 검사와 동일한 Conflict로 변환합니다.
    (중복 검사와 생성 사이의 경쟁 상태 대응)
    NOT NULL, FK 등 다른 무결성 위반은 롤백 후 그대로 다시 발생시킵니다.
    """
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if not is_unique_violation(e):
            logger.error(f"Integrity error while saving {kind.value} {key!r}: {e.orig}")
            raise
        logger.warning(f"Unique constraint violated for {kind.value} {key!r}: {e.orig}")
        raise ConflictError(kind.value, key, detail=detail)
