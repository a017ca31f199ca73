from pydantic import Field

from ..models import CustomModel
from ..users.schema import UserPublic


class LoginRequest(CustomModel):
    username: str = Field(..., min_length=1, json_schema_extra={"example": "johndoe"})
    password: str = Field(..., min_length=1, json_schema_extra={"example": "password123"})


class TokenRefreshRequest(CustomModel):
    refresh_token: str = Field(..., alias="refresh_token")


class AccessToken(CustomModel):
    # 토큰 필드는 OAuth2 관례대로 snake_case 그대로 직렬화
    access_token: str = Field(..., alias="access_token")
    token_type: str = Field("bearer", alias="token_type")


class AuthResponse(AccessToken):
    """로그인/회원가입 응답: 토큰과 비밀번호가 제거된 사용자 정보"""
    refresh_token: str = Field(..., alias="refresh_token")
    user: UserPublic
