from pydantic import EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime

from ..models import CustomModel
from ..categories.schemas import CategoryOut

class UserBase(CustomModel):
    username: str = Field(..., min_length=1, max_length=50, json_schema_extra={"example": "johndoe"})
    email: EmailStr = Field(..., json_schema_extra={"example": "user@example.com"})
    first_name: Optional[str] = Field(None, max_length=50, json_schema_extra={"example": "John"})
    last_name: Optional[str] = Field(None, max_length=50, json_schema_extra={"example": "Doe"})
    bio: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(..., min_length=6, json_schema_extra={"example": "password123"})

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("username must not be blank")
        return v.strip()

class UserUpdate(CustomModel):
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = Field(None, json_schema_extra={"example": "new_email@example.com"})
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = None
    avatar: Optional[str] = Field(None, max_length=500)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("username must not be blank")
        return v.strip() if v is not None else v

class UserPublic(CustomModel):
    """모든 User 응답의 기본 형태. 비밀번호(해시) 필드는 절대 포함하지 않습니다."""
    id: int = Field(..., json_schema_extra={"example": 1})
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class UserPostSummary(CustomModel):
    id: int
    title: str
    slug: str
    excerpt: Optional[str] = None
    is_published: bool
    published_at: Optional[datetime] = None
    views: int
    created_at: Optional[datetime] = None
    categories: List[CategoryOut] = []

class UserDetail(UserPublic):
    posts: List[UserPostSummary] = []
