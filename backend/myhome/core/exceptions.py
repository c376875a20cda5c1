import logging

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Base class for login failures.

    Every subclass is answered with the same 401 response, so callers
    cannot tell an unknown email from a wrong password.
    """
    pass


class UserNotFoundError(AuthenticationError):
    """No user is registered under the email used to log in.

    Attributes:
        email: the email that was looked up
    """
    def __init__(self, email: str):
        self.email = email
        logger.info(f"User not found - email: {email}")
        super().__init__(f"User not found: {email}")


class CredentialsIncorrectError(AuthenticationError):
    """The password does not match the stored hash.

    Attributes:
        user_id: external id of the user whose login failed
    """
    def __init__(self, user_id: str):
        self.user_id = user_id
        logger.info(f"Credentials are incorrect for userId: {user_id}")
        super().__init__(f"Credentials incorrect for user {user_id}")


class DocumentTooLargeError(Exception):
    """An uploaded house member document is over MAX_DOCUMENT_SIZE_KB.

    Attributes:
        size_bytes: size of the rejected upload
        max_size_kb: the limit it was checked against
    """
    def __init__(self, size_bytes: int, max_size_kb: int):
        self.size_bytes = size_bytes
        self.max_size_kb = max_size_kb
        super().__init__(f"Document of {size_bytes} bytes exceeds {max_size_kb} KB")
