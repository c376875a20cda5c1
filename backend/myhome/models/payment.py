from sqlalchemy import Column, Integer, String, Date, Boolean, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from myhome.core.database import Base


class Payment(Base):
    """
    A charge scheduled by a community admin for a house member.
    """
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    payment_id = Column(String, unique=True, index=True, nullable=False)
    charge = Column(Numeric(12, 2), nullable=False)
    type = Column(String, nullable=False)
    description = Column(String, nullable=False)
    recurring = Column(Boolean, nullable=False, default=False)
    due_date = Column(Date, nullable=True)
    admin_fk = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    member_fk = Column(Integer, ForeignKey("house_members.id"), nullable=True, index=True)

    admin = relationship("User")
    member = relationship("HouseMember", back_populates="payments")
