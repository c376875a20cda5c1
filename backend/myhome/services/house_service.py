import logging
import uuid
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from myhome.models.house import CommunityHouse
from myhome.models.house_member import HouseMember
from myhome.repositories.community_repository import community_repository

logger = logging.getLogger(__name__)


class HouseService:
    """Houses and the members living in them"""

    @staticmethod
    def list_all_houses(db: Session, offset: int, limit: int) -> List[CommunityHouse]:
        return community_repository.find_all_houses(db, offset, limit)

    @staticmethod
    def get_house_details_by_id(db: Session, house_id: str) -> Optional[CommunityHouse]:
        return community_repository.find_by_house_id(db, house_id)

    @staticmethod
    def get_house_members_by_id(db: Session, house_id: str, offset: int, limit: int) -> Optional[List[HouseMember]]:
        """Members of a house, or None when the house does not exist"""
        if community_repository.find_by_house_id(db, house_id) is None:
            return None
        return community_repository.find_all_members_by_house_id(db, house_id, offset, limit)

    @staticmethod
    def list_house_members_for_houses_of_user_id(
        db: Session, user_id: str, offset: int, limit: int
    ) -> List[HouseMember]:
        return community_repository.find_all_members_by_admin_user_id(db, user_id, offset, limit)

    @staticmethod
    def add_house_members(db: Session, house_id: str, member_names: List[str]) -> Optional[List[HouseMember]]:
        """Create members in a house. Returns None when the house does not exist."""
        house = community_repository.find_by_house_id_with_house_members(db, house_id)
        if house is None:
            return None

        try:
            saved_members = []
            for name in member_names:
                member = HouseMember(member_id=str(uuid.uuid4()), name=name)
                # Appending sets member.community_house through back_populates
                house.house_members.append(member)
                saved_members.append(member)
            community_repository.save_house(db, house)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        logger.info(f"Added {len(saved_members)} members to house {house_id}")
        return saved_members

    @staticmethod
    def detach_member_from_house(house: CommunityHouse, member_id: str) -> bool:
        """
        Remove a member from both sides of the house <-> member relation.

        Does not flush or commit. The detached member is an orphan and is
        deleted when the session flushes.
        """
        for member in house.house_members:
            if member.member_id == member_id:
                house.house_members.remove(member)
                member.community_house = None
                return True
        return False

    @staticmethod
    def delete_member_from_house(db: Session, house_id: str, member_id: str) -> bool:
        house = community_repository.find_by_house_id_with_house_members(db, house_id)
        if house is None:
            return False

        try:
            removed = HouseService.detach_member_from_house(house, member_id)
            if removed:
                community_repository.save_house(db, house)
                db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        return removed


house_service = HouseService()
