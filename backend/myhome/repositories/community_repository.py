from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from myhome.models.community import Community
from myhome.models.house import CommunityHouse
from myhome.models.house_member import HouseMember
from myhome.models.user import User


class CommunityRepository:
    """Data access for the Community -> CommunityHouse -> HouseMember hierarchy"""

    @staticmethod
    def find_by_community_id(db: Session, community_id: str) -> Optional[Community]:
        return db.query(Community).filter(Community.community_id == community_id).first()

    @staticmethod
    def find_by_community_id_with_houses(db: Session, community_id: str) -> Optional[Community]:
        return (
            db.query(Community)
            .options(selectinload(Community.houses))
            .filter(Community.community_id == community_id)
            .first()
        )

    @staticmethod
    def find_by_community_id_with_admins(db: Session, community_id: str) -> Optional[Community]:
        return (
            db.query(Community)
            .options(selectinload(Community.admins))
            .filter(Community.community_id == community_id)
            .first()
        )

    @staticmethod
    def find_by_community_id_with_amenities(db: Session, community_id: str) -> Optional[Community]:
        return (
            db.query(Community)
            .options(selectinload(Community.amenities))
            .filter(Community.community_id == community_id)
            .first()
        )

    @staticmethod
    def exists_by_community_id(db: Session, community_id: str) -> bool:
        return db.query(Community.id).filter(Community.community_id == community_id).first() is not None

    @staticmethod
    def find_all(db: Session, offset: int, limit: int) -> List[Community]:
        return db.query(Community).order_by(Community.id).offset(offset).limit(limit).all()

    @staticmethod
    def save(db: Session, community: Community) -> Community:
        db.add(community)
        db.flush()
        return community

    @staticmethod
    def delete(db: Session, community: Community) -> None:
        db.delete(community)
        db.flush()

    # Houses

    @staticmethod
    def find_by_house_id(db: Session, house_id: str) -> Optional[CommunityHouse]:
        return db.query(CommunityHouse).filter(CommunityHouse.house_id == house_id).first()

    @staticmethod
    def find_by_house_id_with_house_members(db: Session, house_id: str) -> Optional[CommunityHouse]:
        return (
            db.query(CommunityHouse)
            .options(selectinload(CommunityHouse.house_members))
            .filter(CommunityHouse.house_id == house_id)
            .first()
        )

    @staticmethod
    def find_all_houses(db: Session, offset: int, limit: int) -> List[CommunityHouse]:
        return db.query(CommunityHouse).order_by(CommunityHouse.id).offset(offset).limit(limit).all()

    @staticmethod
    def find_all_houses_by_community_id(
        db: Session, community_id: str, offset: int, limit: int
    ) -> List[CommunityHouse]:
        return (
            db.query(CommunityHouse)
            .join(CommunityHouse.community)
            .filter(Community.community_id == community_id)
            .order_by(CommunityHouse.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def save_house(db: Session, house: CommunityHouse) -> CommunityHouse:
        db.add(house)
        db.flush()
        return house

    @staticmethod
    def delete_by_house_id(db: Session, house_id: str) -> None:
        house = CommunityRepository.find_by_house_id(db, house_id)
        if house is not None:
            db.delete(house)
            db.flush()

    # Members

    @staticmethod
    def find_member_by_member_id(db: Session, member_id: str) -> Optional[HouseMember]:
        return db.query(HouseMember).filter(HouseMember.member_id == member_id).first()

    @staticmethod
    def find_all_members_by_house_id(
        db: Session, house_id: str, offset: int, limit: int
    ) -> List[HouseMember]:
        return (
            db.query(HouseMember)
            .join(HouseMember.community_house)
            .filter(CommunityHouse.house_id == house_id)
            .order_by(HouseMember.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def find_all_members_by_admin_user_id(
        db: Session, user_id: str, offset: int, limit: int
    ) -> List[HouseMember]:
        """Members of every house in every community the given user administers"""
        return (
            db.query(HouseMember)
            .join(HouseMember.community_house)
            .join(CommunityHouse.community)
            .join(Community.admins)
            .filter(User.user_id == user_id)
            .order_by(HouseMember.id)
            .offset(offset)
            .limit(limit)
            .all()
        )


community_repository = CommunityRepository()
