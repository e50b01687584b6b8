# barber_booking/routers/auth_routes.py

import logging

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select

from barber_booking.auth import create_access_token, get_current_admin, verify_password
from barber_booking.db import get_session
from barber_booking.errors import NotAuthenticated
from barber_booking.models import AdminUser
from barber_booking.schemas import AdminPublic, Token

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
):
    email = form_data.username
    password = form_data.password

    admin = session.exec(
        select(AdminUser).where(AdminUser.email == email)
    ).first()

    if admin is None or not verify_password(password, admin.password_hash):
        logger.warning("Failed admin login for %s", email)
        raise NotAuthenticated("Invalid credentials")

    token = create_access_token({"sub": admin.email})
    return {"access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=AdminPublic)
def me(current_admin: AdminUser = Depends(get_current_admin)):
    return {
        "id": current_admin.id,
        "email": current_admin.email,
    }
