# backend/app/composition.py
"""
ORM 행(+ 미리 로딩된 관계) -> API 응답 스키마 변환.

세션에 접근하지 않는 순수 함수만 둡니다. 호출하는 쪽(서비스)에서
필요한 관계(author, category_links.category, comments.author 등)를
selectinload로 미리 로딩해야 합니다.
"""
from typing import Iterable, List

from .categories.models import Category
from .categories.schemas import CategoryDetail, CategoryOut, CategoryPostSummary
from .comments.models import Comment
from .comments.schemas import CommentDetail, CommentOut
from .posts.models import Post, PostCategory
from .posts.schemas import PostCommentOut, PostOut, PostSummary
from .users.models import User
from .users.schema import UserDetail, UserPostSummary, UserPublic


def public_user(user: User) -> UserPublic:
    # UserPublic에는 hashed_password 필드가 없으므로 자격 증명은 항상 빠집니다.
    return UserPublic.model_validate(user)


def flatten_categories(links: Iterable[PostCategory]) -> List[CategoryOut]:
    """연결 테이블 행(PostCategory) 목록을 카테고리 목록으로 펼칩니다."""
    return [CategoryOut.model_validate(link.category) for link in links]


def approved_comments(comments: Iterable[Comment]) -> List[Comment]:
    """승인된 댓글만 최신순으로 정렬합니다."""
    visible = [c for c in comments if c.is_approved]
    return sorted(visible, key=lambda c: (c.created_at is not None, c.created_at, c.id), reverse=True)


def _comment_fields(comment: Comment) -> dict:
    return dict(
        id=comment.id,
        content=comment.content,
        is_approved=comment.is_approved,
        author_id=comment.author_id,
        post_id=comment.post_id,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        author=public_user(comment.author),
    )


def compose_post(post: Post) -> PostOut:
    return PostOut(
        id=post.id,
        title=post.title,
        slug=post.slug,
        content=post.content,
        excerpt=post.excerpt,
        featured_image=post.featured_image,
        is_published=post.is_published,
        published_at=post.published_at,
        views=post.views,
        author_id=post.author_id,
        created_at=post.created_at,
        updated_at=post.updated_at,
        author=public_user(post.author),
        categories=flatten_categories(post.category_links),
        comments=[PostCommentOut(**_comment_fields(c)) for c in approved_comments(post.comments)],
    )


def compose_post_summary(post: Post) -> PostSummary:
    return PostSummary.model_validate(post)


def compose_comment(comment: Comment) -> CommentOut:
    return CommentOut(**_comment_fields(comment))


def compose_comment_detail(comment: Comment) -> CommentDetail:
    return CommentDetail(**_comment_fields(comment), post=compose_post_summary(comment.post))


def compose_category_detail(category: Category) -> CategoryDetail:
    # 공개 상세 화면이므로 발행된 게시글만 노출
    posts = [
        CategoryPostSummary(
            id=link.post.id,
            title=link.post.title,
            slug=link.post.slug,
            excerpt=link.post.excerpt,
            featured_image=link.post.featured_image,
            published_at=link.post.published_at,
            views=link.post.views,
            author_id=link.post.author_id,
            created_at=link.post.created_at,
            categories=flatten_categories(link.post.category_links),
        )
        for link in category.post_links
        if link.post.is_published
    ]
    return CategoryDetail(
        id=category.id,
        name=category.name,
        slug=category.slug,
        description=category.description,
        color=category.color,
        created_at=category.created_at,
        updated_at=category.updated_at,
        posts=posts,
    )


def compose_user_detail(user: User) -> UserDetail:
    posts = [
        UserPostSummary(
            id=post.id,
            title=post.title,
            slug=post.slug,
            excerpt=post.excerpt,
            is_published=post.is_published,
            published_at=post.published_at,
            views=post.views,
            created_at=post.created_at,
            categories=flatten_categories(post.category_links),
        )
        for post in user.posts
    ]
    return UserDetail(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        bio=user.bio,
        avatar=user.avatar,
        is_active=user.is_active,
        created_at=user.created_at,
        updated_at=user.updated_at,
        posts=posts,
    )
