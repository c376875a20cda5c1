from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session
from myhome.core.database import get_db
from myhome.core.exceptions import AuthenticationError
from myhome.services.authentication_service import authentication_service

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


@router.post("/login", status_code=status.HTTP_200_OK)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Login; the session token and user id are returned as response headers"""
    try:
        authentication_data = authentication_service.login(db, payload.email, payload.password)
    except AuthenticationError:
        # Same answer for unknown email and wrong password - prevents email enumeration
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Response(
        status_code=status.HTTP_200_OK,
        headers={"userId": authentication_data.user_id, "token": authentication_data.token},
    )
