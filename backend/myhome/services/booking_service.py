from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from myhome.models.booking import AmenityBookingItem


class BookingService:

    @staticmethod
    def delete_booking(db: Session, amenity_id: str, booking_id: str) -> bool:
        """Delete a booking, but only through the amenity it was made for"""
        booking = (
            db.query(AmenityBookingItem)
            .filter(AmenityBookingItem.amenity_booking_item_id == booking_id)
            .first()
        )
        if booking is None or booking.amenity.amenity_id != amenity_id:
            return False

        try:
            db.delete(booking)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        return True


booking_service = BookingService()
