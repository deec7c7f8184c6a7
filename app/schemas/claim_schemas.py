import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.warranty_claim import ClaimStatus
from app.schemas.warranty_schemas import WarrantyRecordRead


class ClaimCreateRequest(BaseModel):
    phone_number: str = Field(min_length=1, max_length=30)
    issue_description: str = Field(min_length=1, max_length=1000)

    # Explicit record selection; must belong to phone_number. Kept as a plain
    # string so an id that is not a UUID is answered like any foreign record.
    warranty_record_id: Optional[str] = None

    @field_validator("phone_number", "issue_description", "warranty_record_id", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class ClaimStatusUpdate(BaseModel):
    # Checked against ClaimStatus by the service so the error carries field context
    claim_status: str


class WarrantyClaimRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    claim_id: str
    warranty_record_id: uuid.UUID
    customer_name: str
    phone_number: str
    issue_description: str
    claim_status: ClaimStatus
    resolved_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    # None when the referenced warranty record has since been deleted
    warranty_record: Optional[WarrantyRecordRead] = None


class ProductClaimCount(BaseModel):
    product_id: uuid.UUID
    product_name: str
    count: int


class ClaimStats(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int
    by_product: List[ProductClaimCount]


class EligibilityResponse(BaseModel):
    eligible: bool
    total_warranties: int
    warranties: List[WarrantyRecordRead]
    active: List[WarrantyRecordRead]
    expired: List[WarrantyRecordRead]
    voided: List[WarrantyRecordRead]
