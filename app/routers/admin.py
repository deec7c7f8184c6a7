from typing import List, Optional
from datetime import datetime
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
import uuid

from app.db.db import get_session
from app.models.admin import Admin
from app.schemas.claim_schemas import ClaimCreateRequest, ClaimStats, ClaimStatusUpdate, WarrantyClaimRead
from app.schemas.warranty_schemas import (
    SweepResult,
    WarrantyRecordCreate,
    WarrantyRecordRead,
    WarrantyRecordUpdate,
    WarrantyStats,
)
from app.services import warranty_claims, warranty_records
from app.utils.auth_helper import require_admin

router = APIRouter()


# ---------- Warranty records ----------

@router.post("/warranty-records", response_model=WarrantyRecordRead, status_code=201)
def create_warranty_record(
    payload: WarrantyRecordCreate,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    """Issue a warranty record at time of sale"""
    fields = payload.model_dump(exclude={"warranty_status"})
    return warranty_records.create_warranty_record(
        session, fields, status_override=payload.warranty_status
    )


@router.get("/warranty-records", response_model=List[WarrantyRecordRead])
def get_all_warranty_records(
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_records.list_warranty_records(session)


@router.get("/warranty-records/stats", response_model=WarrantyStats)
def get_warranty_stats(
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_records.warranty_stats(session)


@router.get("/warranty-records/filter", response_model=List[WarrantyRecordRead])
def filter_warranty_records(
    warranty_status: Optional[str] = None,
    product_id: Optional[uuid.UUID] = None,
    customer_name: Optional[str] = None,
    phone_number: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_records.filter_warranty_records(
        session,
        warranty_status=warranty_status,
        product_id=product_id,
        customer_name=customer_name,
        phone_number=phone_number,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/warranty-records/status/{status}", response_model=List[WarrantyRecordRead])
def get_warranty_records_by_status(
    status: str,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_records.list_by_status(session, status)


@router.patch("/warranty-records/update-expired", response_model=SweepResult)
def update_expired_warranties(
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    """Cron helper: move lapsed Active records to Expired"""
    return warranty_records.sweep_expired_warranties(session)


@router.get("/warranty-records/phone/{phone_number}", response_model=List[WarrantyRecordRead])
def get_warranty_records_by_phone(
    phone_number: str,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_records.list_by_phone(session, phone_number)


@router.get("/warranty-records/warranty-id/{warranty_id}", response_model=WarrantyRecordRead)
def get_warranty_record_by_warranty_id(
    warranty_id: str,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_records.get_by_warranty_id(session, warranty_id)


@router.get("/warranty-records/{record_id}", response_model=WarrantyRecordRead)
def get_warranty_record(
    record_id: uuid.UUID,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_records.get_warranty_record(session, record_id)


@router.put("/warranty-records/{record_id}", response_model=WarrantyRecordRead)
def update_warranty_record(
    record_id: uuid.UUID,
    payload: WarrantyRecordUpdate,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    fields = payload.model_dump(exclude_unset=True, exclude={"warranty_status"})
    return warranty_records.update_warranty_record(
        session, record_id, fields, status_override=payload.warranty_status
    )


@router.delete("/warranty-records/{record_id}")
def delete_warranty_record(
    record_id: uuid.UUID,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    warranty_records.delete_warranty_record(session, record_id)
    return {"ok": True, "message": "Warranty record deleted successfully"}


# ---------- Warranty claims ----------

@router.get("/warranty-claims", response_model=List[WarrantyClaimRead])
def get_all_warranty_claims(
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_claims.list_claims(session)


@router.post("/warranty-claims", response_model=WarrantyClaimRead, status_code=201)
def create_warranty_claim(
    payload: ClaimCreateRequest,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    """File a claim on a customer's behalf, optionally against a chosen record"""
    return warranty_claims.create_claim(
        session,
        payload.phone_number,
        payload.issue_description,
        warranty_record_id=payload.warranty_record_id,
    )


@router.get("/warranty-claims/stats", response_model=ClaimStats)
def get_warranty_claim_stats(
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_claims.claim_stats(session)


@router.get("/warranty-claims/filter", response_model=List[WarrantyClaimRead])
def filter_warranty_claims(
    claim_status: Optional[str] = None,
    warranty_record_id: Optional[uuid.UUID] = None,
    customer_name: Optional[str] = None,
    phone_number: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_claims.filter_claims(
        session,
        claim_status=claim_status,
        warranty_record_id=warranty_record_id,
        customer_name=customer_name,
        phone_number=phone_number,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/warranty-claims/status/{status}", response_model=List[WarrantyClaimRead])
def get_warranty_claims_by_status(
    status: str,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_claims.list_by_status(session, status)


@router.get("/warranty-claims/phone/{phone_number}", response_model=List[WarrantyClaimRead])
def get_warranty_claims_by_phone(
    phone_number: str,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_claims.list_by_phone(session, phone_number)


@router.get("/warranty-claims/claim-id/{claim_id}", response_model=WarrantyClaimRead)
def get_warranty_claim_by_claim_id(
    claim_id: str,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_claims.get_by_claim_id(session, claim_id)


@router.get("/warranty-claims/{claim_id}", response_model=WarrantyClaimRead)
def get_warranty_claim(
    claim_id: uuid.UUID,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_claims.get_claim(session, claim_id)


@router.put("/warranty-claims/{claim_id}", response_model=WarrantyClaimRead)
def update_warranty_claim(
    claim_id: uuid.UUID,
    payload: ClaimStatusUpdate,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    return warranty_claims.update_claim_status(session, claim_id, payload.claim_status)


@router.delete("/warranty-claims/{claim_id}")
def delete_warranty_claim(
    claim_id: uuid.UUID,
    session: Session = Depends(get_session),
    admin: Admin = Depends(require_admin),
):
    warranty_claims.delete_claim(session, claim_id)
    return {"ok": True, "message": "Warranty claim deleted successfully"}
