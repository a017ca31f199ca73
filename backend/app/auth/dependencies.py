from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from ..database import SessionDep

from ..users.models import User
from ..auth import service as auth_service
from ..exceptions import UnauthorizedError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

async def get_current_user_from_access_token(
    db: SessionDep,
    token: str | None = Depends(oauth2_scheme),
) -> User:
    if not token:
        raise UnauthorizedError(detail="Not authenticated")

    user = await auth_service.get_user_from_access_token(token=token, db=db)

    if user is None:
        raise UnauthorizedError()
    return user

CurrentUser = Depends(get_current_user_from_access_token)
