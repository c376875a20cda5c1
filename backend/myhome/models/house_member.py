from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from myhome.core.database import Base


class HouseMember(Base):
    """
    A person living in a community house.

    The back-reference to the house and the house's member collection are
    kept consistent by HouseService; never change one side alone.
    """
    __tablename__ = "house_members"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    community_house_fk = Column(Integer, ForeignKey("community_houses.id"), nullable=True, index=True)
    house_member_document_fk = Column(Integer, ForeignKey("house_member_documents.id"), nullable=True, unique=True)

    community_house = relationship("CommunityHouse", back_populates="house_members")
    # Clearing the reference deletes the document; so does deleting the member
    house_member_document = relationship(
        "HouseMemberDocument",
        cascade="all, delete-orphan",
        single_parent=True,
    )
    # Payments outlive the member; their member reference is cleared on delete
    payments = relationship("Payment", back_populates="member")
