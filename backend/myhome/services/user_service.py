import logging
import uuid
from datetime import date
from typing import List, Optional
from fastapi import Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from myhome.core.security import get_password_hash
from myhome.models.security_token import SecurityToken, SecurityTokenType
from myhome.models.user import User
from myhome.repositories.user_repository import user_repository
from myhome.services.mail_service import MailService, build_email_confirm_link, get_mail_service
from myhome.services.security_token_service import security_token_service

logger = logging.getLogger(__name__)


class UserService:
    """
    Account lifecycle: signup, email confirmation and password reset.

    The token flows are two-step state machines (request -> confirm). Each step
    is a single transaction: the notification mail is the last thing sent
    before commit, and if it cannot be sent the whole step is rolled back and
    reported as False.
    """

    def __init__(self, mail_service: MailService):
        self.mail_service = mail_service

    def create_user(self, db: Session, name: str, email: str, password: str, base_url: str) -> Optional[User]:
        """Register a user and mail an email-confirmation link. None if the email is taken."""
        if user_repository.find_by_email(db, email) is not None:
            return None

        try:
            user = User(
                user_id=str(uuid.uuid4()),
                name=name,
                email=email,
                encrypted_password=get_password_hash(password),
                email_confirmed=False,
            )
            user_repository.save(db, user)
            logger.debug(f"saving user with id[{user.user_id}] to repository")
            token = security_token_service.create_email_confirm_token(db, user)
            db.commit()
        except IntegrityError:
            # Two signups with the same email raced past the lookup above
            db.rollback()
            return None
        except SQLAlchemyError:
            db.rollback()
            raise

        # The account exists even if this mail fails; the user can ask for a resend
        if not self.mail_service.send_account_created(user, build_email_confirm_link(base_url, user, token)):
            logger.warning(f"Account created mail not sent to user {user.user_id}")
        return user

    @staticmethod
    def list_all(db: Session, offset: int, limit: int) -> List[User]:
        return user_repository.find_all(db, offset, limit)

    @staticmethod
    def get_user_details(db: Session, user_id: str) -> Optional[User]:
        return user_repository.find_by_user_id_with_communities(db, user_id)

    @staticmethod
    def find_user_by_email(db: Session, email: str) -> Optional[User]:
        return user_repository.find_by_email(db, email)

    def request_reset_password(self, db: Session, email: str) -> bool:
        """Issue a RESET token and mail it as a recovery code"""
        user = user_repository.find_by_email_with_tokens(db, email)
        if user is None:
            return False

        try:
            self._invalidate_live_tokens(user, SecurityTokenType.RESET)
            token = security_token_service.create_password_reset_token(db, user)
            user_repository.save(db, user)
            if not self.mail_service.send_password_recover_code(user, token.token):
                db.rollback()
                return False
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        logger.info(f"Password reset requested for user {user.user_id}")
        return True

    def reset_password(self, db: Session, email: str, token: str, new_password: str) -> bool:
        """Consume a RESET token and store the new password"""
        user = user_repository.find_by_email_with_tokens(db, email)
        if user is None:
            return False
        reset_token = self.find_valid_user_token(token, user, SecurityTokenType.RESET)
        if reset_token is None:
            return False

        try:
            if security_token_service.use_token(db, reset_token) is None:
                db.rollback()
                return False
            user.encrypted_password = get_password_hash(new_password)
            user_repository.save(db, user)
            if not self.mail_service.send_password_successfully_changed(user):
                db.rollback()
                return False
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        logger.info(f"Password changed for user {user.user_id}")
        return True

    def confirm_email(self, db: Session, user_id: str, email_confirm_token: str) -> bool:
        """Consume an EMAIL_CONFIRM token and mark the user's email as confirmed"""
        user = user_repository.find_by_user_id_with_tokens(db, user_id)
        if user is None or user.email_confirmed:
            return False
        confirm_token = self.find_valid_user_token(email_confirm_token, user, SecurityTokenType.EMAIL_CONFIRM)
        if confirm_token is None:
            return False

        try:
            if security_token_service.use_token(db, confirm_token) is None:
                db.rollback()
                return False
            user.email_confirmed = True
            user_repository.save(db, user)
            if not self.mail_service.send_account_confirmed(user):
                db.rollback()
                return False
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        logger.info(f"Email confirmed for user {user.user_id}")
        return True

    def resend_email_confirm(self, db: Session, user_id: str, base_url: str) -> bool:
        """Replace any live EMAIL_CONFIRM token with a new one and mail the link again"""
        user = user_repository.find_by_user_id_with_tokens(db, user_id)
        if user is None or user.email_confirmed:
            return False

        try:
            self._invalidate_live_tokens(user, SecurityTokenType.EMAIL_CONFIRM)
            token = security_token_service.create_email_confirm_token(db, user)
            user_repository.save(db, user)
            if not self.mail_service.send_account_created(user, build_email_confirm_link(base_url, user, token)):
                db.rollback()
                return False
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        return True

    @staticmethod
    def find_valid_user_token(token: str, user: User, token_type: SecurityTokenType) -> Optional[SecurityToken]:
        """
        First token of the user that is unused, of the right type, matches the
        given string and expires strictly after today.
        """
        today = date.today()
        for user_token in user.user_tokens:
            if (
                not user_token.is_used
                and user_token.token_type == token_type
                and user_token.token == token
                and user_token.expiry_date > today
            ):
                return user_token
        return None

    @staticmethod
    def _invalidate_live_tokens(user: User, token_type: SecurityTokenType) -> None:
        # Unused tokens of this type are dropped, so at most one stays live per type
        stale = [t for t in user.user_tokens if t.token_type == token_type and not t.is_used]
        for token in stale:
            user.user_tokens.remove(token)


def get_user_service(mail_service: MailService = Depends(get_mail_service)) -> UserService:
    return UserService(mail_service)
