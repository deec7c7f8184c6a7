from enum import Enum
import uuid
from sqlmodel import DateTime, Field, SQLModel
from datetime import datetime, timezone

class WarrantyStatus(str, Enum):
    active = "Active"
    expired = "Expired"
    voided = "Voided" # only ever set by an admin

class WarrantyRecord(SQLModel, table=True):
    __tablename__ = "warranty_records"

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

    # Business identifier, e.g. WR-12345678-042
    warranty_id: str = Field(index=True, unique=True)

    # Customer info
    customer_name: str
    phone_number: str = Field(index=True) # customer self-service lookup key, not unique
    customer_address: str

    # Product info
    product_id: uuid.UUID = Field(foreign_key="products.id", index=True)
    quantity_purchased: int = Field(ge=1)

    # Timeline
    purchase_date: datetime = Field(sa_type=DateTime(timezone=True))
    warranty_valid_until: datetime = Field(sa_type=DateTime(timezone=True), index=True)

    warranty_status: WarrantyStatus = Field(default=WarrantyStatus.active, index=True)
