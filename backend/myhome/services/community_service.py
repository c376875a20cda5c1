import logging
import uuid
from typing import Iterable, List, Optional, Set
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from myhome.models.community import Community
from myhome.models.house import CommunityHouse
from myhome.models.user import User
from myhome.repositories.community_repository import community_repository
from myhome.repositories.user_repository import user_repository
from myhome.services.house_service import house_service

logger = logging.getLogger(__name__)


class CommunityService:
    """
    Communities, their admins and their houses.

    "Not found" is never an exception here: lookups return None, mutations
    return False or an empty collection, and the routes pick the status code.
    """

    @staticmethod
    def create_community(db: Session, name: str, district: str, admin_user_id: str) -> Community:
        """Create a community administered by the given (authenticated) user"""
        community = Community(community_id=str(uuid.uuid4()), name=name, district=district)
        admin = user_repository.find_by_user_id_with_communities(db, admin_user_id)
        if admin is not None:
            community.admins.append(admin)

        try:
            community_repository.save(db, community)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        logger.debug(f"saved community with id[{community.community_id}] to repository")
        return community

    @staticmethod
    def list_all(db: Session, offset: int, limit: int) -> List[Community]:
        return community_repository.find_all(db, offset, limit)

    @staticmethod
    def get_community_details_by_id(db: Session, community_id: str) -> Optional[Community]:
        return community_repository.find_by_community_id(db, community_id)

    @staticmethod
    def get_community_details_by_id_with_admins(db: Session, community_id: str) -> Optional[Community]:
        return community_repository.find_by_community_id_with_admins(db, community_id)

    @staticmethod
    def find_community_houses_by_id(
        db: Session, community_id: str, offset: int, limit: int
    ) -> Optional[List[CommunityHouse]]:
        if not community_repository.exists_by_community_id(db, community_id):
            return None
        return community_repository.find_all_houses_by_community_id(db, community_id, offset, limit)

    @staticmethod
    def find_community_admins_by_id(
        db: Session, community_id: str, offset: int, limit: int
    ) -> Optional[List[User]]:
        if not community_repository.exists_by_community_id(db, community_id):
            return None
        return user_repository.find_all_by_community_id(db, community_id, offset, limit)

    @staticmethod
    def find_community_admin_by_id(db: Session, admin_id: str) -> Optional[User]:
        return user_repository.find_by_user_id(db, admin_id)

    @staticmethod
    def is_community_admin(db: Session, community_id: str, user_id: str) -> Optional[bool]:
        """Whether the user administers the community; None when the community does not exist"""
        community = community_repository.find_by_community_id_with_admins(db, community_id)
        if community is None:
            return None
        return any(admin.user_id == user_id for admin in community.admins)

    @staticmethod
    def add_admins_to_community(db: Session, community_id: str, admin_ids: Iterable[str]) -> Optional[Community]:
        community = community_repository.find_by_community_id_with_admins(db, community_id)
        if community is None:
            return None

        try:
            for admin_id in admin_ids:
                admin = user_repository.find_by_user_id_with_communities(db, admin_id)
                if admin is not None and admin not in community.admins:
                    community.admins.append(admin)
            community_repository.save(db, community)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        return community

    @staticmethod
    def add_houses_to_community(db: Session, community_id: str, house_names: Iterable[str]) -> Set[str]:
        """
        Create houses in a community and return their new ids.

        Names already used by a house of the community are skipped. An unknown
        community yields an empty set.
        """
        community = community_repository.find_by_community_id_with_houses(db, community_id)
        if community is None:
            return set()

        existing_names = {house.name for house in community.houses}
        added_ids = set()
        try:
            for name in house_names:
                if not name or name in existing_names:
                    continue
                house = CommunityHouse(house_id=str(uuid.uuid4()), name=name)
                community.houses.append(house)
                existing_names.add(name)
                added_ids.add(house.house_id)
            community_repository.save(db, community)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        return added_ids

    @staticmethod
    def remove_admin_from_community(db: Session, community_id: str, admin_id: str) -> bool:
        community = community_repository.find_by_community_id_with_admins(db, community_id)
        if community is None:
            return False

        admin = next((a for a in community.admins if a.user_id == admin_id), None)
        if admin is None:
            return False
        try:
            community.admins.remove(admin)
            community_repository.save(db, community)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        return True

    @staticmethod
    def remove_house_from_community_by_house_id(db: Session, community: Optional[Community], house_id: str) -> bool:
        """Detach and delete one house of a community, together with its members"""
        try:
            removed = CommunityService._remove_house(db, community, house_id)
            if removed:
                db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        return removed

    @staticmethod
    def delete_community(db: Session, community_id: str) -> bool:
        """Delete a community after removing every house it owns, in one transaction"""
        community = community_repository.find_by_community_id_with_houses(db, community_id)
        if community is None:
            return False

        try:
            # Snapshot: _remove_house mutates community.houses
            house_ids = [house.house_id for house in community.houses]
            for house_id in house_ids:
                CommunityService._remove_house(db, community, house_id)
            community_repository.delete(db, community)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        logger.info(f"Deleted community {community_id} with {len(house_ids)} houses")
        return True

    @staticmethod
    def _remove_house(db: Session, community: Optional[Community], house_id: str) -> bool:
        if community is None:
            return False
        house = community_repository.find_by_house_id_with_house_members(db, house_id)
        if house is None or house.community is not community:
            return False

        # The house leaves the community collection before its member graph changes
        community.houses.remove(house)
        member_ids = [member.member_id for member in house.house_members]
        for member_id in member_ids:
            house_service.detach_member_from_house(house, member_id)
        community_repository.save(db, community)
        community_repository.delete_by_house_id(db, house_id)
        return True


community_service = CommunityService()
