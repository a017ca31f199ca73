# backend/app/posts/router.py
from typing import List

from fastapi import APIRouter, Query, status

from ..auth.dependencies import CurrentUser
from ..composition import compose_post
from ..config import settings
from ..database import SessionDep
from ..users.models import User
from . import service
from .schemas import PostCreate, PostOut, PostPage, PostUpdate

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=PostOut, status_code=status.HTTP_201_CREATED)
async def create_post(body: PostCreate, db: SessionDep, current_user: User = CurrentUser):
    post = await service.create_post(db, body, author_id=current_user.id)
    return compose_post(post)


@router.get("", response_model=PostPage)
async def list_posts(
    db: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
):
    posts, total = await service.list_published_posts(db, page=page, limit=limit)
    return PostPage(posts=[compose_post(p) for p in posts], total=total, page=page, limit=limit)


@router.get("/slug/{slug}", response_model=PostOut)
async def get_post_by_slug(slug: str, db: SessionDep):
    return compose_post(await service.get_post_view_by_slug(db, slug))


@router.get("/author/{author_id}", response_model=List[PostOut])
async def list_posts_by_author(author_id: int, db: SessionDep):
    posts = await service.list_posts_by_author(db, author_id)
    return [compose_post(p) for p in posts]


@router.get("/category/{category_id}", response_model=List[PostOut])
async def list_posts_by_category(category_id: int, db: SessionDep):
    posts = await service.list_posts_by_category(db, category_id)
    return [compose_post(p) for p in posts]


@router.get("/{post_id}", response_model=PostOut)
async def get_post(post_id: int, db: SessionDep):
    return compose_post(await service.get_post_view(db, post_id))


@router.patch("/{post_id}", response_model=PostOut)
async def update_post(post_id: int, body: PostUpdate, db: SessionDep, current_user: User = CurrentUser):
    post = await service.update_post(db, post_id, body, principal_id=current_user.id)
    return compose_post(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: int, db: SessionDep, current_user: User = CurrentUser):
    await service.delete_post(db, post_id, principal_id=current_user.id)
    return
