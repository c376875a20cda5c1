from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from myhome.core.database import Base


class CommunityHouse(Base):
    __tablename__ = "community_houses"

    id = Column(Integer, primary_key=True, index=True)
    house_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    community_fk = Column(Integer, ForeignKey("communities.id"), nullable=True, index=True)

    community = relationship("Community", back_populates="houses")
    # A member removed from this collection has no house left and is deleted on flush
    house_members = relationship(
        "HouseMember",
        back_populates="community_house",
        cascade="all, delete-orphan",
    )
