import enum
from sqlalchemy import Column, Integer, String, Date, Boolean, ForeignKey, Enum
from sqlalchemy.orm import relationship
from myhome.core.database import Base


class SecurityTokenType(str, enum.Enum):
    EMAIL_CONFIRM = "EMAIL_CONFIRM"
    RESET = "RESET"


class SecurityToken(Base):
    """
    Single-use, typed, expiring credential owned by a user.

    is_used only ever moves from False to True. A used or expired token is
    never accepted for the action it guards.
    """
    __tablename__ = "security_tokens"

    id = Column(Integer, primary_key=True, index=True)
    token_type = Column(Enum(SecurityTokenType), nullable=False)
    # Opaque random string handed out by mail
    token = Column(String, unique=True, index=True, nullable=False)
    creation_date = Column(Date, nullable=False)
    expiry_date = Column(Date, nullable=False)
    is_used = Column(Boolean, nullable=False, default=False)
    token_owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    token_owner = relationship("User", back_populates="user_tokens")
