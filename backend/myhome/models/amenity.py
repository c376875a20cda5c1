from sqlalchemy import Column, Integer, String, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from myhome.core.database import Base


class Amenity(Base):
    """
    A bookable facility (pool, gym, hall...) offered by a community.
    """
    __tablename__ = "amenities"

    id = Column(Integer, primary_key=True, index=True)
    amenity_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False)
    # Numeric keeps prices exact - floats would drift on currency values
    price = Column(Numeric(12, 2), nullable=False)
    community_fk = Column(Integer, ForeignKey("communities.id"), nullable=False, index=True)

    community = relationship("Community", back_populates="amenities")
    booking_items = relationship(
        "AmenityBookingItem",
        back_populates="amenity",
        cascade="all, delete-orphan",
    )
