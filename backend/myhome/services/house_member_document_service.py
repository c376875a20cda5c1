import logging
from pathlib import Path
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from myhome.core.config import settings
from myhome.core.exceptions import DocumentTooLargeError
from myhome.models.house_member_document import HouseMemberDocument
from myhome.repositories.community_repository import community_repository

logger = logging.getLogger(__name__)


class HouseMemberDocumentService:
    """Stores the single identity document each house member may have"""

    @staticmethod
    def find_house_member_document(db: Session, member_id: str) -> Optional[HouseMemberDocument]:
        """The member's document; None for an unknown member or a member without one"""
        member = community_repository.find_member_by_member_id(db, member_id)
        if member is None:
            return None
        return member.house_member_document

    @staticmethod
    def store_house_member_document(
        db: Session,
        member_id: str,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes,
    ) -> Optional[HouseMemberDocument]:
        """
        Create the member's document, or replace the one it already has.

        Returns None when the member does not exist. Raises DocumentTooLargeError
        when content is over MAX_DOCUMENT_SIZE_KB.
        """
        member = community_repository.find_member_by_member_id(db, member_id)
        if member is None:
            return None
        if len(content) > settings.MAX_DOCUMENT_SIZE_KB * 1024:
            logger.info(f"Rejected document of {len(content)} bytes for member {member_id}")
            raise DocumentTooLargeError(len(content), settings.MAX_DOCUMENT_SIZE_KB)

        suffix = Path(filename).suffix.lower() if filename else ""
        try:
            document = member.house_member_document
            if document is None:
                document = HouseMemberDocument()
                member.house_member_document = document
            # Overwritten in place so the per-member filename stays unique
            document.document_filename = f"member_{member.member_id}_document{suffix}"
            document.document_content = content
            document.content_type = content_type or "application/octet-stream"
            db.flush()
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        logger.debug(f"Stored document {document.document_filename}")
        return document

    @staticmethod
    def delete_house_member_document(db: Session, member_id: str) -> bool:
        """Remove the member's document. False if there is no member or no document."""
        member = community_repository.find_member_by_member_id(db, member_id)
        if member is None or member.house_member_document is None:
            return False

        try:
            member.house_member_document = None
            db.flush()
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        return True


house_member_document_service = HouseMemberDocumentService()
