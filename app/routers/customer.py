from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.db.db import get_session
from app.schemas.claim_schemas import ClaimCreateRequest, EligibilityResponse, WarrantyClaimRead
from app.schemas.warranty_schemas import WarrantyRecordRead
from app.services import warranty_claims, warranty_records

# Public routes: the phone number is the customer's only proof of identity
router = APIRouter()


@router.get("/warranty-eligibility/{phone_number}", response_model=EligibilityResponse)
def check_warranty_eligibility(phone_number: str, session: Session = Depends(get_session)):
    return warranty_claims.check_eligibility(session, phone_number)


@router.post("/warranty-claims", response_model=WarrantyClaimRead, status_code=201)
def create_warranty_claim(payload: ClaimCreateRequest, session: Session = Depends(get_session)):
    return warranty_claims.create_claim(
        session,
        payload.phone_number,
        payload.issue_description,
        warranty_record_id=payload.warranty_record_id,
    )


@router.get("/warranty-claims/phone/{phone_number}", response_model=List[WarrantyClaimRead])
def get_warranty_claims_by_phone(phone_number: str, session: Session = Depends(get_session)):
    return warranty_claims.list_by_phone(session, phone_number)


@router.get("/warranty-claims/claim-id/{claim_id}", response_model=WarrantyClaimRead)
def get_warranty_claim_by_claim_id(claim_id: str, session: Session = Depends(get_session)):
    return warranty_claims.get_by_claim_id(session, claim_id)


@router.get("/warranty-records/phone/{phone_number}", response_model=List[WarrantyRecordRead])
def get_warranty_records_by_phone(phone_number: str, session: Session = Depends(get_session)):
    return warranty_records.list_by_phone(session, phone_number)


@router.get("/warranty-records/warranty-id/{warranty_id}", response_model=WarrantyRecordRead)
def get_warranty_record_by_warranty_id(warranty_id: str, session: Session = Depends(get_session)):
    return warranty_records.get_by_warranty_id(session, warranty_id)
