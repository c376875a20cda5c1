import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from myhome.models.house_member import HouseMember
from myhome.models.payment import Payment
from myhome.models.user import User
from myhome.repositories.community_repository import community_repository
from myhome.repositories.user_repository import user_repository

logger = logging.getLogger(__name__)


class PaymentService:

    @staticmethod
    def get_house_member(db: Session, member_id: str) -> Optional[HouseMember]:
        return community_repository.find_member_by_member_id(db, member_id)

    @staticmethod
    def is_user_admin_of_member_house(member: HouseMember, admin: User) -> bool:
        house = member.community_house
        if house is None or house.community is None:
            return False
        return admin in house.community.admins

    @staticmethod
    def schedule_payment(
        db: Session,
        member_id: str,
        admin_id: str,
        charge: Decimal,
        payment_type: str,
        description: str,
        recurring: bool,
        due_date: Optional[date],
    ) -> Optional[Payment]:
        """
        Schedule a payment for a house member.

        Only an admin of the community the member's house belongs to may do it.
        Returns None when the member or admin is unknown or the admin check fails.
        """
        member = PaymentService.get_house_member(db, member_id)
        admin = user_repository.find_by_user_id(db, admin_id)
        if member is None or admin is None:
            return None
        if not PaymentService.is_user_admin_of_member_house(member, admin):
            logger.info(f"User {admin_id} is not an admin of the community of member {member_id}")
            return None

        payment = Payment(
            payment_id=str(uuid.uuid4()),
            charge=charge,
            type=payment_type,
            description=description,
            recurring=recurring,
            due_date=due_date,
            admin=admin,
            member=member,
        )
        try:
            db.add(payment)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        return payment

    @staticmethod
    def get_payment_details(db: Session, payment_id: str) -> Optional[Payment]:
        return db.query(Payment).filter(Payment.payment_id == payment_id).first()

    @staticmethod
    def get_payments_by_member(db: Session, member_id: str) -> List[Payment]:
        return (
            db.query(Payment)
            .join(Payment.member)
            .filter(HouseMember.member_id == member_id)
            .order_by(Payment.id)
            .all()
        )

    @staticmethod
    def get_payments_by_admin(db: Session, admin_id: str, offset: int, limit: int) -> Tuple[List[Payment], int]:
        """One page of the payments scheduled by an admin, plus the total count"""
        query = db.query(Payment).join(Payment.admin).filter(User.user_id == admin_id)
        total = query.count()
        payments = query.order_by(Payment.id).offset(offset).limit(limit).all()
        return payments, total


payment_service = PaymentService()
