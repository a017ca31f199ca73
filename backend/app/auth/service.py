from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Dict

from ..users import service as user_service
from ..users.models import User
from ..exceptions import UnauthorizedError

from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from ..config import settings


async def create_access_token(user: User) -> str:
    """
    사용자 객체를 기반으로 Access Token을 생성합니다.
    토큰에는 principal id(sub)와 username, 타입(type) 정보를 담습니다.
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user.id),
        "username": user.username,
        "type": "access",   # 토큰 타입 명시
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

async def create_refresh_token(user: User) -> str:
    """
    사용자 객체를 기반으로 Refresh Token을 생성합니다.
    """
    expire = datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    to_encode = {
        "sub": str(user.id),
        "type": "refresh",  # 토큰 타입 명시
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

async def _decode_token(token: str) -> Optional[Dict]:
    """
    토큰을 디코딩하고 기본적인 유효성을 검사하는 내부 헬퍼 함수.
    (서명, 만료 시간 등)
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        # 토큰 디코딩 실패 (변조, 만료 등) 시 None 반환
        return None

def _principal_id(payload: Dict) -> Optional[int]:
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None

async def get_user_from_access_token(token: str, db: AsyncSession) -> Optional[User]:
    """
    Access Token을 검증하고 해당 사용자를 반환합니다.
    """
    payload = await _decode_token(token)

    # 페이로드가 없거나, 토큰 타입이 'access'가 아니면 유효하지 않음
    if payload is None or payload.get("type") != "access":
        return None

    principal_id = _principal_id(payload)
    if principal_id is None:
        return None

    user = await user_service.get_user_by_id(principal_id, db)
    if user is None or not user.is_active:
        return None
    return user


async def get_user_from_refresh_token(token: str, db: AsyncSession) -> User:
    """
    Refresh Token을 검증하고 해당 사용자를 반환합니다.
    이 함수는 /auth/refresh 엔드포인트에서 사용됩니다.
    """
    payload = await _decode_token(token)

    # Access Token으로 Refresh를 시도하는 경우도 여기서 걸러집니다.
    if payload is None or payload.get("type") != "refresh":
        raise UnauthorizedError(detail="Invalid token type or invalid token")

    principal_id = _principal_id(payload)
    if principal_id is None:
        raise UnauthorizedError(detail="Could not find user from token")

    user = await user_service.get_user_by_id(principal_id, db)

    # 사용자가 존재하지 않거나 비활성화된 경우
    if user is None or not user.is_active:
        raise UnauthorizedError(key=principal_id, detail="User associated with this token not found")

    return user

async def authenticate_user(
    db: AsyncSession, username: str, password: str
) -> Optional[User]:
    """
    username과 비밀번호로 인증을 시도합니다.
    성공 시 User 객체를, 실패 시 None을 반환합니다.
    """
    user = await user_service.get_user_by_username(username, db)

    if not user or not user.is_active:
        return None
    if not await user_service.verify_password(password, user.hashed_password):
        return None
    return user
