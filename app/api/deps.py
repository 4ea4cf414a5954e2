# app/api/deps.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.constants.registration import ProfileRole
from app.core.config import settings
from app.core.exceptions import StoreUnavailableError
from app.crud import crud_profile
from app.db.session import get_db
from app.models.profile import Profile
from app.schemas.token import TokenPayload


# Tokens are issued by the hosted auth provider; `tokenUrl` only feeds the
# OpenAPI docs.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")


def get_current_user(token: str = Depends(oauth2_scheme)) -> TokenPayload:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False},
        )
        token_data = TokenPayload(**payload)
    except (JWTError, ValueError):
        # Catches any error from jose or Pydantic validation
        raise credentials_exception

    return token_data


def get_current_profile(
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(get_current_user),
) -> Profile:
    """Resolve the caller's profile; the role lives there, not in the token."""
    try:
        profile = crud_profile.profile.get(db, id=current_user.sub)
    except SQLAlchemyError as e:
        raise StoreUnavailableError() from e
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Profile not found"
        )
    return profile


def require_admin(profile: Profile = Depends(get_current_profile)) -> Profile:
    if profile.role != ProfileRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Administrator access required"
        )
    return profile


def require_student(profile: Profile = Depends(get_current_profile)) -> Profile:
    if profile.role != ProfileRole.STUDENT:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Student access required"
        )
    return profile
