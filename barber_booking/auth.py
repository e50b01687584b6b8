# barber_booking/auth.py

from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlmodel import Session, select

from . import config
from .db import get_session
from .errors import NotAuthenticated
from .models import AdminUser

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def create_access_token(data: dict, expires_minutes: int = config.ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(minutes=expires_minutes)
    to_encode["exp"] = expire
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def authenticate_token(token: Optional[str], session: Session) -> AdminUser:
    if not token:
        raise NotAuthenticated()
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except JWTError:
        raise NotAuthenticated("Invalid token")

    email = payload.get("sub")
    if email is None:
        raise NotAuthenticated("Invalid token")

    admin = session.exec(
        select(AdminUser).where(AdminUser.email == email)
    ).first()

    if admin is None:
        raise NotAuthenticated("User not found")

    return admin


def get_current_admin(
    token: Optional[str] = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> AdminUser:
    return authenticate_token(token, session)
