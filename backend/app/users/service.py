import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from typing import List, Optional

from passlib.context import CryptContext

from ..config import settings
from ..exceptions import ConflictError, NotFoundError
from ..identity import ResourceKind, commit_or_conflict, find_conflict
from ..posts.models import Post, PostCategory
from .models import User as UserModel
from .schema import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)

# 어떤 값(username/email)이 중복인지 구분하지 않고 같은 메시지로 응답합니다.
DUPLICATE_USER_DETAIL = "Username or email already exists"
NON_NULLABLE_FIELDS = ("username", "email")

_with_posts = selectinload(UserModel.posts).selectinload(Post.category_links).selectinload(PostCategory.category)


async def create_user(user_data: UserCreate, db: AsyncSession) -> UserModel:
    existing_user = await find_conflict(db, ResourceKind.USER, user_data.username, user_data.email)
    if existing_user:
        logger.warning(f"Registration rejected: duplicate username/email ({user_data.username!r})")
        raise ConflictError(ResourceKind.USER.value, user_data.username, detail=DUPLICATE_USER_DETAIL)

    db_user = UserModel(
        username=user_data.username,
        email=user_data.email,
        hashed_password=pwd_context.hash(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        bio=user_data.bio,
        is_active=True,
    )
    db.add(db_user)
    await commit_or_conflict(db, ResourceKind.USER, user_data.username, DUPLICATE_USER_DETAIL)
    await db.refresh(db_user)
    logger.info(f"User registered: id={db_user.id}, username={db_user.username!r}")
    return db_user

async def get_users(db: AsyncSession, skip: int = 0, limit: int = 100) -> List[UserModel]:
    """사용자 목록을 (작성 게시글 포함) 페이지네이션하여 조회합니다."""
    result = await db.execute(
        select(UserModel)
        .options(_with_posts)
        .order_by(UserModel.id)
        .offset(skip)
        .limit(limit)
    )
    return result.scalars().all()

async def get_user_detail(user_id: int, db: AsyncSession) -> UserModel:
    """작성 게시글(카테고리 포함)까지 로딩한 사용자. 없으면 404."""
    result = await db.execute(
        select(UserModel)
        .options(_with_posts)
        .where(UserModel.id == user_id)
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError(ResourceKind.USER.value, user_id)
    return user

async def update_user(db: AsyncSession, db_user: UserModel, user_in: UserUpdate) -> UserModel:
    """사용자 정보를 수정합니다. 명시적으로 전달된 필드만 업데이트합니다."""
    update_data = user_in.model_dump(exclude_unset=True)
    # NOT NULL 컬럼에 명시적 null이 오면 무시
    for field in NON_NULLABLE_FIELDS:
        if field in update_data and update_data[field] is None:
            update_data.pop(field)

    new_username = update_data.get("username")
    new_email = update_data.get("email")
    if (new_username and new_username != db_user.username) or (new_email and new_email != db_user.email):
        existing_user = await find_conflict(
            db,
            ResourceKind.USER,
            new_username if new_username != db_user.username else None,
            new_email if new_email != db_user.email else None,
            exclude_id=db_user.id,
        )
        if existing_user:
            raise ConflictError(ResourceKind.USER.value, db_user.id, detail=DUPLICATE_USER_DETAIL)

    # 객체 필드 업데이트
    for field, value in update_data.items():
        setattr(db_user, field, value)

    await commit_or_conflict(db, ResourceKind.USER, db_user.id, DUPLICATE_USER_DETAIL)
    await db.refresh(db_user)
    logger.info(f"User updated: id={db_user.id}, fields={sorted(update_data)}")
    return db_user


async def get_user_by_id(user_id: int, db: AsyncSession) -> Optional[UserModel]:
    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    return result.scalar_one_or_none()

async def get_user_by_username(username: str, db: AsyncSession) -> Optional[UserModel]:
    result = await db.execute(select(UserModel).where(UserModel.username == username))
    return result.scalar_one_or_none()

async def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

async def update_last_login(user: UserModel, db: AsyncSession) -> None:
    # DB 서버 시간 기준으로 기록
    user.last_login = func.now()
    await db.commit()
    await db.refresh(user)
