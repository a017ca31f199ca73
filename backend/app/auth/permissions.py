from typing import Optional

from ..exceptions import ForbiddenError, UnauthorizedError


def is_owner(resource, principal_id: Optional[int]) -> bool:
    return principal_id is not None and resource.author_id == principal_id


def assert_owner(resource, principal_id: Optional[int], *, entity: str, action: str = "modify") -> None:
    """
    리소스의 author_id와 요청자(principal) id가 정확히 일치하는지 확인합니다.
    게시글/댓글의 수정·삭제 직전에 호출하며, 카테고리나 조회에는 적용하지 않습니다.
    """
    if principal_id is None:
        raise UnauthorizedError()
    if not is_owner(resource, principal_id):
        raise ForbiddenError(
            entity,
            resource.id,
            detail=f"You can only {action} your own {entity.lower()}s",
        )
