from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from myhome.core.database import Base


class User(Base):
    """
    User model representing application users.

    Users log in with email and password, own their security tokens and can
    administer any number of communities.
    Passwords are stored as hashes (never plaintext).
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # External identifier exposed through the API - the integer id never leaves the database
    user_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    # Email is unique and indexed for fast lookups during login
    email = Column(String, unique=True, index=True, nullable=False)
    email_confirmed = Column(Boolean, nullable=False, default=False)
    # Password is hashed using bcrypt
    encrypted_password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Tokens belong to exactly one user; removing one from this collection deletes it
    user_tokens = relationship(
        "SecurityToken",
        back_populates="token_owner",
        cascade="all, delete-orphan",
    )
    communities = relationship(
        "Community",
        secondary="community_admins",
        back_populates="admins",
    )
