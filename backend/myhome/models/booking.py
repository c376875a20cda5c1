from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from myhome.core.database import Base


class AmenityBookingItem(Base):
    __tablename__ = "amenity_booking_items"

    id = Column(Integer, primary_key=True, index=True)
    amenity_booking_item_id = Column(String, unique=True, index=True, nullable=False)
    amenity_fk = Column(Integer, ForeignKey("amenities.id"), nullable=False, index=True)
    booking_start_date = Column(DateTime, nullable=False)
    booking_end_date = Column(DateTime, nullable=True)
    booking_user_fk = Column(Integer, ForeignKey("users.id"), nullable=True)

    amenity = relationship("Amenity", back_populates="booking_items")
    booking_user = relationship("User")
