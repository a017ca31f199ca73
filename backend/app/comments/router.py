from fastapi import APIRouter, status

from ..auth.dependencies import CurrentUser
from ..composition import compose_comment, compose_comment_detail
from ..database import SessionDep
from ..users.models import User
from . import service
from .schemas import CommentCreate, CommentDetail, CommentOut, CommentUpdate

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", response_model=CommentDetail, status_code=status.HTTP_201_CREATED)
async def create_comment(body: CommentCreate, db: SessionDep, current_user: User = CurrentUser):
    comment = await service.create_comment(db, body, author_id=current_user.id)
    return compose_comment_detail(comment)


@router.get("/post/{post_id}", response_model=list[CommentOut])
async def list_comments_for_post(post_id: int, db: SessionDep):
    comments = await service.list_comments_for_post(db, post_id)
    return [compose_comment(c) for c in comments]


@router.patch("/{comment_id}", response_model=CommentDetail)
async def update_comment(comment_id: int, body: CommentUpdate, db: SessionDep, current_user: User = CurrentUser):
    comment = await service.update_comment(db, comment_id, body.content, principal_id=current_user.id)
    return compose_comment_detail(comment)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(comment_id: int, db: SessionDep, current_user: User = CurrentUser):
    await service.delete_comment(db, comment_id, principal_id=current_user.id)
    return
