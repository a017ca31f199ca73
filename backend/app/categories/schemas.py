from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..models import CustomModel


class CategoryCreate(CustomModel):
    name: str = Field(..., min_length=1, max_length=100, json_schema_extra={"example": "Technology"})
    description: Optional[str] = None
    color: Optional[str] = Field(None, max_length=20, json_schema_extra={"example": "#007BFF"})

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()


class CategoryUpdate(CustomModel):
    """부분 수정: 명시적으로 전달된 필드만 반영합니다."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    color: Optional[str] = Field(None, max_length=20)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("name must not be blank")
        return v.strip() if v is not None else v


class CategoryOut(CustomModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    color: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryPostSummary(CustomModel):
    id: int
    title: str
    slug: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    published_at: Optional[datetime] = None
    views: int
    author_id: int
    created_at: Optional[datetime] = None
    categories: List[CategoryOut] = []


class CategoryDetail(CategoryOut):
    posts: List[CategoryPostSummary] = []
