from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..models import CustomModel
from ..users.schema import UserPublic
from ..categories.schemas import CategoryOut


class PostCreate(CustomModel):
    title: str = Field(..., min_length=1, max_length=255, json_schema_extra={"example": "Getting Started with FastAPI"})
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    featured_image: Optional[str] = Field(None, max_length=500)
    is_published: bool = False
    category_ids: Optional[List[int]] = None

    @field_validator("title", "content")
    @classmethod
    def validate_not_blank(cls, v: str, info) -> str:
        if not v.strip():
            raise ValueError(f"{info.field_name} must not be blank")
        return v


class PostUpdate(CustomModel):
    """부분 수정 (category_ids가 오면 카테고리 연결을 통째로 교체)"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = None
    featured_image: Optional[str] = Field(None, max_length=500)
    is_published: Optional[bool] = None
    category_ids: Optional[List[int]] = None

    @field_validator("title", "content")
    @classmethod
    def validate_not_blank(cls, v: Optional[str], info) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError(f"{info.field_name} must not be blank")
        return v


class PostCommentOut(CustomModel):
    id: int
    content: str
    is_approved: bool
    author_id: int
    post_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    author: UserPublic


class PostOut(CustomModel):
    """작성자·카테고리·댓글을 합친 게시글 응답"""
    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    is_published: bool
    published_at: Optional[datetime] = None
    views: int
    author_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    author: UserPublic
    categories: List[CategoryOut] = []
    comments: List[PostCommentOut] = []


class PostSummary(CustomModel):
    """댓글 응답 등에 포함되는 게시글 요약 (관계 필드 없음)"""
    id: int
    title: str
    slug: str
    excerpt: Optional[str] = None
    is_published: bool
    published_at: Optional[datetime] = None
    views: int
    author_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PostPage(CustomModel):
    posts: List[PostOut]
    total: int
    page: int
    limit: int
