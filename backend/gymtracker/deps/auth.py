# gymtracker/deps/auth.py
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose.exceptions import ExpiredSignatureError, JWTError

from gymtracker.db import get_db
from gymtracker.models import User
from gymtracker.security import decode_token
from gymtracker.services.controller import AppRegistry, WorkoutController

LOCAL_OWNER = "local"

# Exposes Bearer auth in Swagger; login endpoint issues the token
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

def get_current_user(
    db: Session = Depends(get_db),
    token: str | None = Depends(oauth2_scheme),
) -> User:
    unauth = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise unauth
    try:
        payload = decode_token(token)
        sub = payload.get("sub")
        if sub is None:
            raise unauth
        user = db.get(User, int(sub))
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except (JWTError, ValueError):
        raise unauth

    if not user:
        raise unauth
    return user

def get_registry(request: Request) -> AppRegistry:
    return request.app.state.registry

def get_owner(
    registry: AppRegistry = Depends(get_registry),
    db: Session = Depends(get_db),
    token: str | None = Depends(oauth2_scheme),
) -> str:
    """Key of the data owner: the signed-in user in remote mode, otherwise
    the single local owner."""
    if not registry.requires_auth:
        return LOCAL_OWNER
    return str(get_current_user(db=db, token=token).id)

def get_controller(
    registry: AppRegistry = Depends(get_registry),
    owner: str = Depends(get_owner),
) -> WorkoutController:
    return registry.get(owner)
