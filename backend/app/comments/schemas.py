from pydantic import Field, field_validator

from ..models import CustomModel
from ..posts.schemas import PostCommentOut, PostSummary


class CommentCreate(CustomModel):
    content: str = Field(..., min_length=1, json_schema_extra={"example": "Great article!"})
    post_id: int

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v


class CommentUpdate(CustomModel):
    content: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v


class CommentOut(PostCommentOut):
    """작성자만 포함한 댓글 (게시글별 목록용)"""


class CommentDetail(CommentOut):
    """작성자와 상위 게시글 요약을 함께 포함한 댓글 (생성/수정 응답)"""
    post: PostSummary
