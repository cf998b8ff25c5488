from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from gymtracker.db import get_db
from gymtracker.errors import AuthError
from gymtracker.models import User
from gymtracker.schemas.user import UserCredentials, UserRead, Token
from gymtracker.security import (
    check_password_strength,
    create_access_token,
    hash_password,
    normalize_email,
    verify_password,
)
from gymtracker.deps.auth import get_current_user, get_registry
from gymtracker.repositories.user_repo import UserRepository
from gymtracker.services.controller import AppRegistry

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(payload: UserCredentials, db: Session = Depends(get_db)):
    email = normalize_email(payload.email)
    check_password_strength(payload.password)
    repo = UserRepository(db)
    if repo.get_by_email(email):
        raise AuthError("auth/email-already-in-use")
    try:
        user = repo.create(email=email, password_hash=hash_password(payload.password))
    except ValueError as e:
        if str(e) == "email_already_exists":
            raise AuthError("auth/email-already-in-use")
        raise
    return user

@router.post("/login", response_model=Token)
def login(payload: UserCredentials, db: Session = Depends(get_db)):
    user = UserRepository(db).get_by_email(payload.email.strip())
    if not user or not verify_password(payload.password, user.password_hash):
        raise AuthError("auth/invalid-credential", status_code=status.HTTP_401_UNAUTHORIZED)
    return Token(access_token=create_access_token(sub=str(user.id)))

@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)):
    return current_user

@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    current_user: User = Depends(get_current_user),
    registry: AppRegistry = Depends(get_registry),
):
    # signing out unloads the user's state; the next request loads it again
    registry.drop(str(current_user.id))
