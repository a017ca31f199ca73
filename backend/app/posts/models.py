# backend/app/posts/models.py
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey, Boolean, Index
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base

class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_published_created", "is_published", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(300), unique=True, nullable=False, index=True)  # title에서 파생
    content = Column(Text, nullable=False)
    excerpt = Column(Text)
    featured_image = Column(String(500))
    is_published = Column(Boolean, default=False, nullable=False)
    published_at = Column(DateTime(timezone=True))  # 최초 발행 시 한 번만 기록
    views = Column(Integer, default=0, server_default="0", nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    author = relationship("User", back_populates="posts")
    category_links = relationship(
        "PostCategory",
        back_populates="post",
        cascade="all, delete-orphan",
    )
    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"Post(id={self.id}, slug={self.slug!r}, author_id={self.author_id}, is_published={self.is_published})"
    def __str__(self) -> str:
        return self.title


class PostCategory(Base):
    """게시글-카테고리 다대다 연결 (쌍 자체 외의 식별자 없음)"""
    __tablename__ = "post_categories"

    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True)

    post = relationship("Post", back_populates="category_links")
    category = relationship("Category", back_populates="post_links")

    def __repr__(self) -> str:
        return f"PostCategory(post_id={self.post_id}, category_id={self.category_id})"
