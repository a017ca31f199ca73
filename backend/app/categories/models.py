# backend/app/categories/models.py
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    slug = Column(String(120), unique=True, nullable=False, index=True)  # name에서 파생, 직접 수정 불가
    description = Column(Text)
    color = Column(String(20))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # 카테고리 삭제 시 연결 행은 ORM에서 직접 삭제 (DB FK 규칙에 의존하지 않음)
    post_links = relationship(
        "PostCategory",
        back_populates="category",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"Category(id={self.id}, name={self.name!r}, slug={self.slug!r})"
    def __str__(self) -> str:
        return self.name
