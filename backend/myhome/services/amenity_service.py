import logging
import uuid
from decimal import Decimal
from typing import List, Optional, Sequence
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from myhome.models.amenity import Amenity
from myhome.repositories.community_repository import community_repository

logger = logging.getLogger(__name__)


class AmenityService:

    @staticmethod
    def create_amenities(db: Session, community_id: str, amenities: Sequence[dict]) -> Optional[List[Amenity]]:
        """
        Add amenities to a community.

        Each entry carries name, description and price. Returns None when the
        community does not exist.
        """
        community = community_repository.find_by_community_id_with_amenities(db, community_id)
        if community is None:
            return None

        try:
            created = []
            for entry in amenities:
                amenity = Amenity(
                    amenity_id=str(uuid.uuid4()),
                    name=entry["name"],
                    description=entry["description"],
                    price=entry["price"],
                )
                community.amenities.append(amenity)
                created.append(amenity)
            db.flush()
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        return created

    @staticmethod
    def get_amenity_details(db: Session, amenity_id: str) -> Optional[Amenity]:
        return db.query(Amenity).filter(Amenity.amenity_id == amenity_id).first()

    @staticmethod
    def list_all_amenities(db: Session, community_id: str) -> List[Amenity]:
        """Amenities of a community; empty for an unknown community"""
        community = community_repository.find_by_community_id_with_amenities(db, community_id)
        if community is None:
            return []
        return list(community.amenities)

    @staticmethod
    def update_amenity(
        db: Session,
        amenity_id: str,
        community_id: str,
        name: str,
        description: str,
        price: Decimal,
    ) -> bool:
        """Overwrite an amenity's fields. False if the amenity or the target community is unknown."""
        amenity = AmenityService.get_amenity_details(db, amenity_id)
        if amenity is None:
            return False
        community = community_repository.find_by_community_id(db, community_id)
        if community is None:
            return False

        try:
            amenity.name = name
            amenity.description = description
            amenity.price = price
            amenity.community = community
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        return True

    @staticmethod
    def delete_amenity(db: Session, amenity_id: str) -> bool:
        amenity = AmenityService.get_amenity_details(db, amenity_id)
        if amenity is None:
            return False

        try:
            # Leaving the community collection deletes it (orphan removal), bookings included
            amenity.community.amenities.remove(amenity)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        logger.info(f"Deleted amenity {amenity_id}")
        return True


amenity_service = AmenityService()
