import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from booth_booker.db import get_db
from booth_booker.exceptions import Conflict
from booth_booker.models.user import User
from booth_booker.schemas.user import Token, UserCreate, UserResponse
from booth_booker.utils.auth import get_current_user, get_password_hash, token_for, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post(
    "/register",
    response_model=Token,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def register(user: UserCreate, db: Session = Depends(get_db)):
    """
    Register a user and return an access token.

    - **role**: `member` (default) or `admin`.
    """
    if db.query(User).filter(User.email == user.email).first():
        logger.error(f"Email already registered: {user.email}")
        raise Conflict("Email already registered")

    db_user = User(
        name=user.name,
        email=user.email,
        hashed_password=get_password_hash(user.password),
        role=user.role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"Registered user {db_user.id} with role {db_user.role}")
    return Token(access_token=token_for(db_user))


@router.post("/login", response_model=Token, summary="Log in with email and password")
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """The `username` form field carries the account email."""
    user = db.query(User).filter(User.email == form_data.username).first()
    if not user or not verify_password(form_data.password, user.hashed_password):
        logger.error(f"Failed login for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Token(access_token=token_for(user))


@router.get("/me", response_model=UserResponse, summary="Current user profile")
def me(current_user: User = Depends(get_current_user)):
    return current_user
