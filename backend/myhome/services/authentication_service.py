import logging
from dataclasses import dataclass
from sqlalchemy.orm import Session
from myhome.core.config import settings
from myhome.core.exceptions import CredentialsIncorrectError, UserNotFoundError
from myhome.core.security import create_session_token, encode_session_token, get_password_hash, verify_password
from myhome.repositories.user_repository import user_repository

logger = logging.getLogger(__name__)

# Checked for unknown emails so a failed login costs one bcrypt verify either way
DUMMY_PASSWORD_HASH = get_password_hash("myhome-dummy-password")


@dataclass(frozen=True)
class AuthenticationData:
    """Result of a successful login; never persisted"""
    token: str
    user_id: str


class AuthenticationService:

    @staticmethod
    def login(db: Session, email: str, password: str) -> AuthenticationData:
        """
        Verify credentials and issue a session token.

        Raises UserNotFoundError for an unknown email and CredentialsIncorrectError
        for a wrong password. Both end up as the same 401 response.
        """
        logger.debug("Received login request")
        user = user_repository.find_by_email(db, email)
        if user is None:
            verify_password(password, DUMMY_PASSWORD_HASH)
            raise UserNotFoundError(email)
        if not verify_password(password, user.encrypted_password):
            raise CredentialsIncorrectError(user.user_id)

        session_token = create_session_token(user.user_id)
        encoded = encode_session_token(session_token, settings.SECRET_KEY)
        return AuthenticationData(token=encoded, user_id=user.user_id)


authentication_service = AuthenticationService()
