from sqlalchemy import Column, Integer, String, DateTime, LargeBinary
from sqlalchemy.sql import func
from myhome.core.database import Base


class HouseMemberDocument(Base):
    """
    Identity document uploaded for a house member.

    The raw upload is kept in the database; a member has at most one document
    and replacing it overwrites this row.
    """
    __tablename__ = "house_member_documents"

    id = Column(Integer, primary_key=True, index=True)
    # member_<member_id>_document<ext> - one filename per member
    document_filename = Column(String, unique=True, nullable=False)
    document_content = Column(LargeBinary, nullable=False)
    content_type = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
