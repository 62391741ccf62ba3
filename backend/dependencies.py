"""Shared dependencies for authentication and repository selection."""

import os
from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

import schemas
import auth
from database import get_db
from repositories.base import GroupRepository
from repositories.fallback import FallbackGroupRepository
from repositories.remote import RemoteGroupRepository
from repositories.sql import SQLGroupRepository
from utils.validation import get_user_by_email


# Remote expense API used as primary source when configured, local DB otherwise
REMOTE_API_URL = os.environ.get("REMOTE_API_URL")
REMOTE_API_TIMEOUT = float(os.environ.get("REMOTE_API_TIMEOUT", "5"))
REMOTE_API_TOKEN = os.environ.get("REMOTE_API_TOKEN")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Session = Depends(get_db)
):
    """Get the current authenticated user from the JWT token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    email = auth.decode_access_token(token)
    if email is None:
        raise credentials_exception
    token_data = schemas.TokenData(email=email)
    user = get_user_by_email(db, email=token_data.email)
    if user is None or not user.is_active:
        raise credentials_exception
    return user


def get_group_repository(db: Session = Depends(get_db)) -> GroupRepository:
    """
    Provide the member/expense source for the settlement engine.

    Reads from the local database unless REMOTE_API_URL is set, in which case
    the remote API is tried first and the local database is the fallback.
    """
    local = SQLGroupRepository(db)
    if not REMOTE_API_URL:
        return local

    remote = RemoteGroupRepository(REMOTE_API_URL, timeout=REMOTE_API_TIMEOUT, token=REMOTE_API_TOKEN)
    return FallbackGroupRepository(primary=remote, fallback=local)
