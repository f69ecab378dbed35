# mentorship_api/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from .config import get_settings
from .database import get_db
from .models import User

logger = logging.getLogger(__name__)

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# auto_error=False so a missing token surfaces as our own 401 below
bearer_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def create_access_token(username: str, expires_delta: Optional[timedelta] = None) -> str:
    """Signs a token whose subject is the username."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    return jwt.encode({"sub": username, "exp": expire}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    user = db.query(User).filter(User.username == username).first()
    if user and pwd_context.verify(password, user.hashed_password):
        return user
    return None

def get_current_user(
    token: Optional[str] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolves the bearer token to an active user, or 401."""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise unauthorized

    try:
        username = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]).get("sub")
    except JWTError as e:
        logger.info("Rejected bearer token: %s", e)
        raise unauthorized

    user = db.query(User).filter(User.username == username).first() if username else None
    if user is None or not user.is_active:
        raise unauthorized
    return user
