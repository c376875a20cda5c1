import logging
from typing import List, Set
from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from myhome.api.dependencies import PageParams, get_current_user, require_community_admin
from myhome.api.routes.houses import HouseResponse
from myhome.api.routes.users import UserResponse
from myhome.core.database import get_db
from myhome.models.user import User
from myhome.services.community_service import community_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/communities", tags=["communities"])

COMMUNITY_NOT_FOUND_MESSAGE = "Community not found"
HOUSE_OR_COMMUNITY_NOT_FOUND = "Community or house not found"


class CreateCommunityRequest(BaseModel):
    name: str = Field(..., min_length=1)
    district: str = Field(..., min_length=1)


class CommunityResponse(BaseModel):
    community_id: str
    name: str
    district: str

    model_config = ConfigDict(from_attributes=True)


class AddCommunityAdminRequest(BaseModel):
    admins: Set[str]


class AddCommunityAdminResponse(BaseModel):
    admins: Set[str]


class CommunityHouseName(BaseModel):
    name: str = Field(..., min_length=1)


class AddCommunityHouseRequest(BaseModel):
    houses: List[CommunityHouseName]


class AddCommunityHouseResponse(BaseModel):
    houses: Set[str]


@router.post("", response_model=CommunityResponse, status_code=status.HTTP_201_CREATED)
def create_community(
    payload: CreateCommunityRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a community; the caller becomes its first admin"""
    logger.debug("Received create community request")
    return community_service.create_community(db, payload.name, payload.district, current_user.user_id)


@router.get("", response_model=List[CommunityResponse])
def list_all_communities(
    page: PageParams = Depends(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug("Received request to list all community")
    return community_service.list_all(db, page.offset, page.size)


@router.get("/{community_id}", response_model=CommunityResponse)
def list_community_details(
    community_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to get details about community with id[{community_id}]")
    community = community_service.get_community_details_by_id(db, community_id)
    if community is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=COMMUNITY_NOT_FOUND_MESSAGE)
    return community


@router.get("/{community_id}/admins", response_model=List[UserResponse])
def list_community_admins(
    community_id: str,
    page: PageParams = Depends(),
    current_user: User = Depends(require_community_admin),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to list all admins of community with id[{community_id}]")
    admins = community_service.find_community_admins_by_id(db, community_id, page.offset, page.size)
    if admins is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=COMMUNITY_NOT_FOUND_MESSAGE)
    return admins


@router.post("/{community_id}/admins", response_model=AddCommunityAdminResponse, status_code=status.HTTP_201_CREATED)
def add_community_admins(
    community_id: str,
    payload: AddCommunityAdminRequest,
    current_user: User = Depends(require_community_admin),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to add admin to community with id[{community_id}]")
    community = community_service.add_admins_to_community(db, community_id, payload.admins)
    if community is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=COMMUNITY_NOT_FOUND_MESSAGE)
    return {"admins": {admin.user_id for admin in community.admins}}


@router.delete("/{community_id}/admins/{admin_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_admin_from_community(
    community_id: str,
    admin_id: str,
    current_user: User = Depends(require_community_admin),
    db: Session = Depends(get_db)
):
    logger.debug(
        f"Received request to delete an admin from community with community id[{community_id}] "
        f"and admin id[{admin_id}]"
    )
    if not community_service.remove_admin_from_community(db, community_id, admin_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Community admin not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{community_id}/houses", response_model=List[HouseResponse])
def list_community_houses(
    community_id: str,
    page: PageParams = Depends(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to list all houses of community with id[{community_id}]")
    houses = community_service.find_community_houses_by_id(db, community_id, page.offset, page.size)
    if houses is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=COMMUNITY_NOT_FOUND_MESSAGE)
    return houses


@router.post("/{community_id}/houses", response_model=AddCommunityHouseResponse, status_code=status.HTTP_201_CREATED)
def add_community_houses(
    community_id: str,
    payload: AddCommunityHouseRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to add house to community with id[{community_id}]")
    house_ids = community_service.add_houses_to_community(db, community_id, [h.name for h in payload.houses])
    if not house_ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No houses were added")
    return {"houses": house_ids}


@router.delete("/{community_id}/houses/{house_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_community_house(
    community_id: str,
    house_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to delete house with id[{house_id}] from community with id[{community_id}]")
    community = community_service.get_community_details_by_id(db, community_id)
    if community is None or not community_service.remove_house_from_community_by_house_id(db, community, house_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=HOUSE_OR_COMMUNITY_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{community_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_community(
    community_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug("Received delete community request")
    if not community_service.delete_community(db, community_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=COMMUNITY_NOT_FOUND_MESSAGE)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
