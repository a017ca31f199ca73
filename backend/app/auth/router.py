import logging

from fastapi import APIRouter, status

from ..database import SessionDep
from ..exceptions import UnauthorizedError
from ..users.models import User
from ..users.schema import UserCreate, UserPublic
from ..users.service import create_user, update_last_login
from ..composition import public_user
from .dependencies import CurrentUser
from .service import authenticate_user, create_access_token, create_refresh_token, get_user_from_refresh_token
from .schema import AccessToken, AuthResponse, LoginRequest, TokenRefreshRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


async def _issue_tokens(user: User) -> AuthResponse:
    return AuthResponse(
        access_token=await create_access_token(user=user),
        refresh_token=await create_refresh_token(user=user),
        user=public_user(user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(body: UserCreate, db: SessionDep):
    user = await create_user(body, db)
    return await _issue_tokens(user)


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, db: SessionDep):
    user = await authenticate_user(db, body.username, body.password)
    if not user:
        logger.warning(f"Failed login attempt for username={body.username!r}")
        raise UnauthorizedError(key=body.username, detail="Invalid credentials")

    # last_login 업데이트 (로그인 성공 시)
    await update_last_login(user=user, db=db)
    return await _issue_tokens(user)


@router.post("/refresh", response_model=AccessToken)
async def refresh_access_token(request: TokenRefreshRequest, db: SessionDep):
    user = await get_user_from_refresh_token(request.refresh_token, db)
    return AccessToken(access_token=await create_access_token(user=user))


@router.get("/profile", response_model=UserPublic)
async def profile(current_user: User = CurrentUser):
    return public_user(current_user)
