import enum
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlalchemy.orm import Session
from myhome.api.dependencies import PageParams, get_current_user
from myhome.api.routes.houses import ListHouseMembersResponse
from myhome.core.database import get_db
from myhome.models.user import User
from myhome.services.house_service import house_service
from myhome.services.user_service import UserService, get_user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


class PasswordActionType(str, enum.Enum):
    FORGOT = "FORGOT"
    RESET = "RESET"


class CreateUserRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=8)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr
    # token and new_password are only used by the RESET action
    token: Optional[str] = None
    new_password: Optional[str] = Field(None, min_length=8)


class UserResponse(BaseModel):
    user_id: str
    name: str
    email: str
    email_confirmed: bool

    model_config = ConfigDict(from_attributes=True)


class UserDetailsResponse(UserResponse):
    community_ids: List[str] = []


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def sign_up(
    payload: CreateUserRequest,
    request: Request,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service)
):
    """Register a new user; 409 if the email is already registered"""
    logger.debug("Received SignUp request")
    user = user_service.create_user(
        db, payload.name, payload.email, payload.password, str(request.base_url)
    )
    if user is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    return user


@router.get("", response_model=List[UserResponse])
def list_all_users(
    page: PageParams = Depends(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug("Received request to list all users")
    return UserService.list_all(db, page.offset, page.size)


@router.post("/password")
def users_password(
    payload: ForgotPasswordRequest,
    action: PasswordActionType = Query(...),
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service)
):
    """
    FORGOT mails a recovery code, RESET sets a new password with that code.

    FORGOT always answers 200 so the endpoint cannot be used to discover which
    emails are registered.
    """
    if action == PasswordActionType.FORGOT:
        user_service.request_reset_password(db, payload.email)
        return Response(status_code=status.HTTP_200_OK)

    if not payload.token or not payload.new_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="token and new_password are required")
    if user_service.reset_password(db, payload.email, payload.token, payload.new_password):
        return Response(status_code=status.HTTP_200_OK)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password reset failed")


@router.get("/{user_id}", response_model=UserDetailsResponse)
def get_user_details(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to get details of user with Id[{user_id}]")
    user = UserService.get_user_details(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserDetailsResponse(
        user_id=user.user_id,
        name=user.name,
        email=user.email,
        email_confirmed=user.email_confirmed,
        community_ids=[community.community_id for community in user.communities],
    )


@router.get("/{user_id}/housemates", response_model=ListHouseMembersResponse)
def list_all_housemates(
    user_id: str,
    page: PageParams = Depends(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Members of all houses in the communities administered by the user"""
    logger.debug(f"Received request to list all members of all houses of user with Id[{user_id}]")
    members = house_service.list_house_members_for_houses_of_user_id(db, user_id, page.offset, page.size)
    return {"members": members}


@router.get("/{user_id}/email-confirm/{email_confirm_token}")
def confirm_email(
    user_id: str,
    email_confirm_token: str,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service)
):
    if user_service.confirm_email(db, user_id, email_confirm_token):
        return Response(status_code=status.HTTP_200_OK)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email confirmation failed")


@router.get("/{user_id}/email-confirm-resend")
def resend_confirm_email_mail(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service)
):
    if user_service.resend_email_confirm(db, user_id, str(request.base_url)):
        return Response(status_code=status.HTTP_200_OK)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email confirmation could not be resent")
