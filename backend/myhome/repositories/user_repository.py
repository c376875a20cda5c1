from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from myhome.models.community import Community
from myhome.models.user import User


class UserRepository:
    """Data access for users - lookups and persistence only, no business rules"""

    @staticmethod
    def find_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def find_by_email_with_tokens(db: Session, email: str) -> Optional[User]:
        # Tokens are scanned in memory by the confirm phase, so load them with the user
        return (
            db.query(User)
            .options(selectinload(User.user_tokens))
            .filter(User.email == email)
            .first()
        )

    @staticmethod
    def find_by_user_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.user_id == user_id).first()

    @staticmethod
    def find_by_user_id_with_tokens(db: Session, user_id: str) -> Optional[User]:
        return (
            db.query(User)
            .options(selectinload(User.user_tokens))
            .filter(User.user_id == user_id)
            .first()
        )

    @staticmethod
    def find_by_user_id_with_communities(db: Session, user_id: str) -> Optional[User]:
        return (
            db.query(User)
            .options(selectinload(User.communities))
            .filter(User.user_id == user_id)
            .first()
        )

    @staticmethod
    def find_all(db: Session, offset: int, limit: int) -> List[User]:
        return db.query(User).order_by(User.id).offset(offset).limit(limit).all()

    @staticmethod
    def find_all_by_community_id(db: Session, community_id: str, offset: int, limit: int) -> List[User]:
        return (
            db.query(User)
            .join(User.communities)
            .filter(Community.community_id == community_id)
            .order_by(User.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def save(db: Session, user: User) -> User:
        db.add(user)
        db.flush()
        return user

    @staticmethod
    def delete(db: Session, user: User) -> None:
        # Tokens go with the user; administered communities only lose the link row
        db.delete(user)
        db.flush()


user_repository = UserRepository()
