from datetime import datetime, timedelta, timezone

from app.categories.models import Category
from app.comments.models import Comment
from app.composition import approved_comments, compose_category_detail, compose_post, flatten_categories
from app.posts.models import Post, PostCategory
from app.users.models import User

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _user(id=1, username="alice"):
    return User(
        id=id,
        username=username,
        email=f"{username}@example.com",
        hashed_password="$2b$04$hash",
        is_active=True,
        created_at=NOW,
        updated_at=NOW,
    )


def _category(id, name):
    return Category(id=id, name=name, slug=name.lower(), created_at=NOW, updated_at=NOW)


def _post(author, **extra):
    fields = dict(
        id=10,
        title="Hello World",
        slug="hello-world",
        content="Body",
        is_published=True,
        published_at=NOW,
        views=3,
        author_id=author.id,
        author=author,
        created_at=NOW,
        updated_at=NOW,
    )
    fields.update(extra)
    return Post(**fields)


def _comment(id, author, approved=True, minutes=0):
    return Comment(
        id=id,
        content=f"comment {id}",
        is_approved=approved,
        author_id=author.id,
        post_id=10,
        author=author,
        created_at=NOW + timedelta(minutes=minutes),
        updated_at=NOW,
    )


def test_flatten_categories_unwraps_links():
    tech, food = _category(1, "Technology"), _category(2, "Food")
    links = [PostCategory(post_id=10, category_id=1, category=tech), PostCategory(post_id=10, category_id=2, category=food)]

    assert [c.slug for c in flatten_categories(links)] == ["technology", "food"]


def test_approved_comments_are_filtered_and_newest_first():
    author = _user()
    comments = [_comment(1, author, minutes=0), _comment(2, author, approved=False, minutes=5), _comment(3, author, minutes=10)]

    assert [c.id for c in approved_comments(comments)] == [3, 1]


def test_compose_post_strips_credentials_everywhere():
    alice, bob = _user(1, "alice"), _user(2, "bob")
    post = _post(
        alice,
        category_links=[PostCategory(post_id=10, category_id=1, category=_category(1, "Technology"))],
        comments=[_comment(1, bob)],
    )

    data = compose_post(post).model_dump(by_alias=True)

    assert data["categories"][0]["name"] == "Technology"
    assert data["author"]["username"] == "alice"
    assert "hashedPassword" not in data["author"]
    assert "hashedPassword" not in data["comments"][0]["author"]
    assert data["publishedAt"] == NOW.isoformat()


def test_naive_timestamps_are_serialized_as_utc():
    post = _post(_user(), created_at=datetime(2026, 1, 1, 12, 0))
    data = compose_post(post).model_dump(by_alias=True)
    assert data["createdAt"] == "2026-01-01T12:00:00+00:00"


def test_category_detail_hides_drafts():
    alice = _user()
    tech = _category(1, "Technology")
    live = _post(alice, id=1, slug="live", title="Live")
    draft = _post(alice, id=2, slug="draft", title="Draft", is_published=False, published_at=None)
    tech.post_links = [
        PostCategory(post_id=1, category_id=1, post=live, category=tech),
        PostCategory(post_id=2, category_id=1, post=draft, category=tech),
    ]

    detail = compose_category_detail(tech)
    assert [p.slug for p in detail.posts] == ["live"]
    assert detail.posts[0].categories[0].slug == "technology"
