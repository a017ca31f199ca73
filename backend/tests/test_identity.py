import pytest
from sqlalchemy.exc import IntegrityError

from app import identity
from app.categories import service as category_service
from app.categories.models import Category
from app.categories.schemas import CategoryCreate
from app.exceptions import ConflictError
from app.identity import ResourceKind, commit_or_conflict, find_conflict, is_unique_violation


async def _category(db, name, slug):
    category = Category(name=name, slug=slug)
    db.add(category)
    await db.commit()
    return category


async def test_find_conflict_matches_name_or_slug(db):
    tech = await _category(db, "Technology", "technology")

    assert (await find_conflict(db, ResourceKind.CATEGORY, "Technology", "other")).id == tech.id
    assert (await find_conflict(db, ResourceKind.CATEGORY, "Tech!", "technology")).id == tech.id
    assert await find_conflict(db, ResourceKind.CATEGORY, "Travel", "travel") is None


async def test_find_conflict_excludes_own_row(db):
    tech = await _category(db, "Technology", "technology")
    other = await _category(db, "Food", "food")

    assert await find_conflict(db, ResourceKind.CATEGORY, "Technology", "technology", exclude_id=tech.id) is None
    conflict = await find_conflict(db, ResourceKind.CATEGORY, "Technology", "technology", exclude_id=other.id)
    assert conflict.id == tech.id


async def test_find_conflict_for_users_uses_username_and_email(db, make_user):
    user = await make_user("carol", email="carol@example.com")

    by_name = await find_conflict(db, ResourceKind.USER, "carol", "new@example.com")
    by_email = await find_conflict(db, ResourceKind.USER, "someone", "carol@example.com")
    assert by_name.id == user.id
    assert by_email.id == user.id
    assert await find_conflict(db, ResourceKind.USER, None, None) is None


async def test_store_level_unique_violation_is_reported_as_conflict(db, monkeypatch):
    await category_service.create_category(db, CategoryCreate(name="Technology"))

    # 사전 검사를 통과한 뒤 DB 유니크 제약에서 걸리는 경쟁 상황을 재현
    async def no_conflict(*args, **kwargs):
        return None

    monkeypatch.setattr(category_service, "find_conflict", no_conflict)

    with pytest.raises(ConflictError) as exc_info:
        await category_service.create_category(db, CategoryCreate(name="Technology"))

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == category_service.NAME_CONFLICT_DETAIL
    assert exc_info.value.entity == identity.ResourceKind.CATEGORY.value


async def test_not_null_violation_is_not_reported_as_conflict(db):
    db.add(Category(name="Broken", slug=None))

    with pytest.raises(IntegrityError):
        await commit_or_conflict(db, ResourceKind.CATEGORY, "Broken", "Category name already exists")

    # 롤백 후 세션은 계속 사용할 수 있음
    assert await find_conflict(db, ResourceKind.CATEGORY, "Broken", "broken") is None


async def test_unique_violation_at_commit_is_reported_as_conflict(db):
    await _category(db, "Technology", "technology")
    db.add(Category(name="Technology", slug="technology-2"))

    with pytest.raises(ConflictError):
        await commit_or_conflict(db, ResourceKind.CATEGORY, "Technology", "Category name already exists")


class _DriverError(Exception):
    def __init__(self, message, sqlstate=None):
        super().__init__(message)
        self.sqlstate = sqlstate


@pytest.mark.parametrize(
    "orig, expected",
    [
        (_DriverError("duplicate key value violates unique constraint", sqlstate="23505"), True),
        (_DriverError("insert or update violates foreign key constraint", sqlstate="23503"), False),
        (_DriverError("null value in column violates not-null constraint", sqlstate="23502"), False),
        (_DriverError("UNIQUE constraint failed: categories.name"), True),
        (_DriverError("FOREIGN KEY constraint failed"), False),
    ],
)
def test_is_unique_violation(orig, expected):
    assert is_unique_violation(IntegrityError("INSERT ...", {}, orig)) is expected
