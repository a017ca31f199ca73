# backend/app/exceptions.py
from typing import Any

from fastapi import HTTPException, status


class BlogError(HTTPException):
    """
    서비스 계층에서 발생시키는 도메인 에러의 공통 부모.
    어떤 엔티티(entity)의 어떤 키(key) 때문에 실패했는지 함께 보관합니다.
    """
    status_code_default: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, entity: str, key: Any = None, detail: str | None = None, headers: dict | None = None):
        self.entity = entity
        self.key = key
        super().__init__(
            status_code=self.status_code_default,
            detail=detail or self.default_detail(),
            headers=headers,
        )

    def default_detail(self) -> str:
        return f"{self.entity} request failed"


class NotFoundError(BlogError):
    status_code_default = status.HTTP_404_NOT_FOUND

    def default_detail(self) -> str:
        return f"{self.entity} not found"


class ConflictError(BlogError):
    status_code_default = status.HTTP_409_CONFLICT

    def default_detail(self) -> str:
        return f"{self.entity} already exists"


class ForbiddenError(BlogError):
    status_code_default = status.HTTP_403_FORBIDDEN

    def default_detail(self) -> str:
        return f"You do not own this {self.entity.lower()}"


class ValidationFailedError(BlogError):
    status_code_default = 422

    def default_detail(self) -> str:
        return f"Invalid {self.entity.lower()} {self.key}"


class UnauthorizedError(BlogError):
    status_code_default = status.HTTP_401_UNAUTHORIZED

    def __init__(self, entity: str = "Principal", key: Any = None, detail: str | None = None):
        super().__init__(entity, key, detail, headers={"WWW-Authenticate": "Bearer"})

    def default_detail(self) -> str:
        return "Could not validate credentials"
