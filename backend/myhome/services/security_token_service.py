import logging
import uuid
from datetime import date, timedelta
from typing import Optional
from sqlalchemy.orm import Session
from myhome.core.config import settings
from myhome.models.security_token import SecurityToken, SecurityTokenType
from myhome.models.user import User

logger = logging.getLogger(__name__)


class SecurityTokenService:
    """Issues and consumes single-use security tokens.

    Nothing here commits: tokens are flushed into the caller's transaction so
    that issuing a token and acting on it succeed or fail together.
    """

    @staticmethod
    def create_token(
        db: Session,
        token_type: SecurityTokenType,
        lifetime: timedelta,
        token_owner: User,
    ) -> SecurityToken:
        """
        Mint a token of the given type for a user.

        The expiry date has day granularity: only lifetime.days is added to today.
        The owner must already be persisted. Setting the owner also appends the
        token to owner.user_tokens.
        """
        today = date.today()
        token = SecurityToken(
            token_type=token_type,
            token=str(uuid.uuid4()),
            creation_date=today,
            expiry_date=today + timedelta(days=lifetime.days),
            is_used=False,
        )
        token.token_owner = token_owner
        db.add(token)
        db.flush()
        logger.debug(f"Created {token_type.value} token for user {token_owner.user_id}")
        return token

    @staticmethod
    def create_email_confirm_token(db: Session, token_owner: User) -> SecurityToken:
        return SecurityTokenService.create_token(
            db, SecurityTokenType.EMAIL_CONFIRM, settings.EMAIL_CONFIRM_TOKEN_EXPIRATION, token_owner
        )

    @staticmethod
    def create_password_reset_token(db: Session, token_owner: User) -> SecurityToken:
        return SecurityTokenService.create_token(
            db, SecurityTokenType.RESET, settings.RESET_TOKEN_EXPIRATION, token_owner
        )

    @staticmethod
    def use_token(db: Session, token: SecurityToken) -> Optional[SecurityToken]:
        """
        Mark a token as used.

        The update only matches rows that are still unused, so when two requests
        race on the same token exactly one of them gets the row. The loser gets
        None back and must treat its flow as failed.
        """
        updated = (
            db.query(SecurityToken)
            .filter(SecurityToken.id == token.id, SecurityToken.is_used == False)  # noqa: E712
            .update({SecurityToken.is_used: True}, synchronize_session="evaluate")
        )
        if updated == 0:
            logger.info(f"Token {token.id} was already used")
            return None
        return token


security_token_service = SecurityTokenService()
