import logging
import math
from datetime import date
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from myhome.api.dependencies import PageParams, get_current_user, require_community_admin
from myhome.core.database import get_db
from myhome.models.payment import Payment
from myhome.models.user import User
from myhome.services.community_service import community_service
from myhome.services.payment_service import payment_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments"])


class SchedulePaymentRequest(BaseModel):
    type: str = Field(..., min_length=1)
    description: str
    recurring: bool = False
    charge: Decimal = Field(..., ge=0)
    due_date: Optional[date] = None
    admin_id: str
    member_id: str


class PaymentResponse(BaseModel):
    payment_id: str
    charge: Decimal
    type: str
    description: str
    recurring: bool
    due_date: Optional[date]
    admin_id: Optional[str]
    member_id: Optional[str]


class ListMemberPaymentsResponse(BaseModel):
    payments: List[PaymentResponse]


class PageInfo(BaseModel):
    current_page: int
    page_limit: int
    total_pages: int
    total_elements: int


class ListAdminPaymentsResponse(BaseModel):
    payments: List[PaymentResponse]
    page_info: PageInfo


def to_payment_response(payment: Payment) -> PaymentResponse:
    return PaymentResponse(
        payment_id=payment.payment_id,
        charge=payment.charge,
        type=payment.type,
        description=payment.description,
        recurring=payment.recurring,
        due_date=payment.due_date,
        admin_id=payment.admin.user_id if payment.admin else None,
        member_id=payment.member.member_id if payment.member else None,
    )


@router.post("/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def schedule_payment(
    payload: SchedulePaymentRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Schedule a payment; 404 unless the admin administers the member's community"""
    logger.debug("Received schedule payment request")
    payment = payment_service.schedule_payment(
        db,
        member_id=payload.member_id,
        admin_id=payload.admin_id,
        charge=payload.charge,
        payment_type=payload.type,
        description=payload.description,
        recurring=payload.recurring,
        due_date=payload.due_date,
    )
    if payment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member or admin not found")
    return to_payment_response(payment)


@router.get("/payments/{payment_id}", response_model=PaymentResponse)
def list_payment_details(
    payment_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to get details about a payment with id[{payment_id}]")
    payment = payment_service.get_payment_details(db, payment_id)
    if payment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return to_payment_response(payment)


@router.get("/members/{member_id}/payments", response_model=ListMemberPaymentsResponse)
def list_all_member_payments(
    member_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to list all the payments for the house member with id[{member_id}]")
    if payment_service.get_house_member(db, member_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="House member not found")
    payments = payment_service.get_payments_by_member(db, member_id)
    return {"payments": [to_payment_response(p) for p in payments]}


@router.get("/communities/{community_id}/admins/{admin_id}/payments", response_model=ListAdminPaymentsResponse)
def list_all_admin_scheduled_payments(
    community_id: str,
    admin_id: str,
    page: PageParams = Depends(),
    current_user: User = Depends(require_community_admin),
    db: Session = Depends(get_db)
):
    logger.debug(f"Received request to list all the payments scheduled by the admin with id[{admin_id}]")
    if not community_service.is_community_admin(db, community_id, admin_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found in community")

    payments, total = payment_service.get_payments_by_admin(db, admin_id, page.offset, page.size)
    page_info = PageInfo(
        current_page=page.page,
        page_limit=page.size,
        total_pages=math.ceil(total / page.size) if total else 0,
        total_elements=total,
    )
    return {"payments": [to_payment_response(p) for p in payments], "page_info": page_info}
