from sqlalchemy import Column, Integer, String, ForeignKey, Table
from sqlalchemy.orm import relationship
from myhome.core.database import Base

# Many-to-many link between communities and the users administering them
community_admins = Table(
    "community_admins",
    Base.metadata,
    Column("community_id", Integer, ForeignKey("communities.id"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
)


class Community(Base):
    """
    A residential community: the root of the Community -> House -> Member hierarchy.
    """
    __tablename__ = "communities"

    id = Column(Integer, primary_key=True, index=True)
    community_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    district = Column(String, nullable=False)

    admins = relationship(
        "User",
        secondary=community_admins,
        back_populates="communities",
    )
    houses = relationship(
        "CommunityHouse",
        back_populates="community",
        cascade="all, delete-orphan",
    )
    amenities = relationship(
        "Amenity",
        back_populates="community",
        cascade="all, delete-orphan",
    )
