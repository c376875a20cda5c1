import logging
from decimal import Decimal
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from myhome.api.dependencies import get_current_user
from myhome.core.database import get_db
from myhome.models.user import User
from myhome.services.amenity_service import amenity_service
from myhome.services.booking_service import booking_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["amenities"])

AMENITY_NOT_FOUND_MESSAGE = "Amenity not found"


class AmenityRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: str
    price: Decimal = Field(..., ge=0)


class AddAmenityRequest(BaseModel):
    amenities: List[AmenityRequest]


class UpdateAmenityRequest(AmenityRequest):
    community_id: str


class AmenityResponse(BaseModel):
    amenity_id: str
    name: str
    description: str
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class AddAmenityResponse(BaseModel):
    amenities: List[AmenityResponse]


@router.get("/amenities/{amenity_id}", response_model=AmenityResponse)
def get_amenity_details(
    amenity_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    amenity = amenity_service.get_amenity_details(db, amenity_id)
    if amenity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AMENITY_NOT_FOUND_MESSAGE)
    return amenity


@router.get("/communities/{community_id}/amenities", response_model=List[AmenityResponse])
def list_all_amenities(
    community_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return amenity_service.list_all_amenities(db, community_id)


@router.post("/communities/{community_id}/amenities", response_model=AddAmenityResponse)
def add_amenity_to_community(
    community_id: str,
    payload: AddAmenityRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to add amenities to community with id[{community_id}]")
    amenities = amenity_service.create_amenities(db, community_id, [a.model_dump() for a in payload.amenities])
    if amenities is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Community not found")
    return {"amenities": amenities}


@router.put("/amenities/{amenity_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_amenity(
    amenity_id: str,
    payload: UpdateAmenityRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    updated = amenity_service.update_amenity(
        db, amenity_id, payload.community_id, payload.name, payload.description, payload.price
    )
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AMENITY_NOT_FOUND_MESSAGE)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/amenities/{amenity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_amenity(
    amenity_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if not amenity_service.delete_amenity(db, amenity_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AMENITY_NOT_FOUND_MESSAGE)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/amenities/{amenity_id}/bookings/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_booking(
    amenity_id: str,
    booking_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to delete booking with id[{booking_id}] of amenity with id[{amenity_id}]")
    if not booking_service.delete_booking(db, amenity_id, booking_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
