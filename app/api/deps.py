from collections.abc import Generator
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, EmailStr, ValidationError
from sqlalchemy.orm import Session

from app.core.security import decode_access_token
from app.core.database import db


class TokenPayload(BaseModel):
    sub: Optional[EmailStr] = None

# Bearer scheme; tokens come from the identity provider
reusable_bearer = HTTPBearer(auto_error=False)

def get_db() -> Generator[Session, None, None]:
    with db.session() as session:
        yield session

# Type dependencies
SessionDep = Annotated[Session, Depends(get_db)]
TokenDep = Annotated[Optional[HTTPAuthorizationCredentials], Depends(reusable_bearer)]


def get_current_email(token: TokenDep) -> str:
    """
    Validate the access token and return the caller email (lowercased).
    """
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(token.credentials)
    try:
        token_data = TokenPayload(**payload)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if token_data.sub is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return str(token_data.sub).strip().lower()

# Current caller dependency
CurrentEmail = Annotated[str, Depends(get_current_email)]
