from enum import Enum
from typing import Optional
import uuid
from sqlmodel import DateTime, Field, SQLModel
from datetime import datetime, timezone

class ClaimStatus(str, Enum):
    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"

RESOLVED_STATUSES = (ClaimStatus.approved, ClaimStatus.rejected)

class WarrantyClaim(SQLModel, table=True):
    __tablename__ = "warranty_claims"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": lambda: datetime.now(timezone.utc)},
    )

    # Business identifier, e.g. WC-12345678-007
    claim_id: str = Field(index=True, unique=True)

    # No FK constraint: deleting a warranty record leaves its claims in place
    warranty_record_id: uuid.UUID = Field(index=True)

    # Customer snapshot, copied from the warranty record when the claim is filed
    customer_name: str
    phone_number: str = Field(index=True)

    issue_description: str

    claim_status: ClaimStatus = Field(default=ClaimStatus.pending, index=True)
    resolved_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
