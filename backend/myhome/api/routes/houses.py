import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from myhome.api.dependencies import PageParams, get_current_user
from myhome.core.database import get_db
from myhome.models.user import User
from myhome.services.house_service import house_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/houses", tags=["houses"])

HOUSE_NOT_FOUND_MESSAGE = "House not found"


class HouseResponse(BaseModel):
    house_id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class HouseMemberResponse(BaseModel):
    member_id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class HouseMemberName(BaseModel):
    name: str = Field(..., min_length=1)


class AddHouseMemberRequest(BaseModel):
    members: List[HouseMemberName]


class ListHouseMembersResponse(BaseModel):
    members: List[HouseMemberResponse]


@router.get("", response_model=List[HouseResponse])
def list_all_houses(
    page: PageParams = Depends(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug("Received request to list all houses")
    return house_service.list_all_houses(db, page.offset, page.size)


@router.get("/{house_id}", response_model=HouseResponse)
def get_house_details(
    house_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to get details of a house with id[{house_id}]")
    house = house_service.get_house_details_by_id(db, house_id)
    if house is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=HOUSE_NOT_FOUND_MESSAGE)
    return house


@router.get("/{house_id}/members", response_model=ListHouseMembersResponse)
def list_all_members_of_house(
    house_id: str,
    page: PageParams = Depends(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to list all members of the house with id[{house_id}]")
    members = house_service.get_house_members_by_id(db, house_id, page.offset, page.size)
    if members is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=HOUSE_NOT_FOUND_MESSAGE)
    return {"members": members}


@router.post("/{house_id}/members", response_model=ListHouseMembersResponse, status_code=status.HTTP_201_CREATED)
def add_house_members(
    house_id: str,
    payload: AddHouseMemberRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to add member to the house with id[{house_id}]")
    saved_members = house_service.add_house_members(db, house_id, [m.name for m in payload.members])
    if saved_members is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=HOUSE_NOT_FOUND_MESSAGE)
    return {"members": saved_members}


@router.delete("/{house_id}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_house_member(
    house_id: str,
    member_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to delete a member from house with house id[{house_id}] and member id[{member_id}]")
    if not house_service.delete_member_from_house(db, house_id, member_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="House member not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
