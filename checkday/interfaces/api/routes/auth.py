"""Endpoints related to authentication."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from checkday.application.use_cases.users import AuthenticationStatus, authenticate_user
from checkday.infrastructure.database import get_db
from checkday.infrastructure.security import create_user_token
from checkday.interfaces.api.schemas import Token

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """Authenticate by email and password and return a bearer token."""

    result = authenticate_user(db, form_data.username, form_data.password)

    if result.status is AuthenticationStatus.INVALID_CREDENTIALS:
        logger.info("Rejected login for %s", form_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if result.status is AuthenticationStatus.INACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = result.user
    return Token(
        access_token=create_user_token(user.id),
        token_type="bearer",
        user_id=user.id,
        role=user.role,
    )
