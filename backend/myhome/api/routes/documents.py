import logging
from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from sqlalchemy.orm import Session
from myhome.api.dependencies import get_current_user
from myhome.core.config import settings
from myhome.core.database import get_db
from myhome.core.exceptions import DocumentTooLargeError
from myhome.models.user import User
from myhome.services.house_member_document_service import house_member_document_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/members", tags=["documents"])


def store_uploaded_document(db: Session, member_id: str, member_document: UploadFile) -> Response:
    # One byte past the limit is enough to know the upload is too large
    content = member_document.file.read(settings.MAX_DOCUMENT_SIZE_KB * 1024 + 1)
    try:
        document = house_member_document_service.store_house_member_document(
            db, member_id, member_document.filename, member_document.content_type, content
        )
    except DocumentTooLargeError:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Document is larger than {settings.MAX_DOCUMENT_SIZE_KB} KB",
        )
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="House member not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{member_id}/documents")
def get_house_member_document(
    member_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Download a member's document inline"""
    logger.debug(f"Received request to get the document of house member with id[{member_id}]")
    document = house_member_document_service.find_house_member_document(db, member_id)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")

    headers = {
        "Content-Disposition": f"inline; filename={document.document_filename}",
        "Cache-Control": "no-cache",
    }
    return Response(content=document.document_content, media_type=document.content_type, headers=headers)


@router.post("/{member_id}/documents", status_code=status.HTTP_204_NO_CONTENT)
def upload_house_member_document(
    member_id: str,
    member_document: UploadFile = File(..., alias="memberDocument"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to add a document for house member with id[{member_id}]")
    return store_uploaded_document(db, member_id, member_document)


@router.put("/{member_id}/documents", status_code=status.HTTP_204_NO_CONTENT)
def update_house_member_document(
    member_id: str,
    member_document: UploadFile = File(..., alias="memberDocument"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to update the document of house member with id[{member_id}]")
    return store_uploaded_document(db, member_id, member_document)


@router.delete("/{member_id}/documents", status_code=status.HTTP_204_NO_CONTENT)
def delete_house_member_document(
    member_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to delete the document of house member with id[{member_id}]")
    if not house_member_document_service.delete_house_member_document(db, member_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
