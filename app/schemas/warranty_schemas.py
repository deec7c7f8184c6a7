import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.product import CameraType
from app.models.warranty_record import WarrantyStatus


class WarrantyRecordCreate(BaseModel):
    customer_name: str = Field(min_length=1, max_length=120)
    phone_number: str = Field(min_length=1, max_length=30)
    customer_address: str = Field(min_length=1, max_length=280)
    product_id: uuid.UUID
    quantity_purchased: int = Field(ge=1)
    purchase_date: datetime
    warranty_valid_until: datetime

    # Admin override; when omitted the status is derived from the dates
    warranty_status: Optional[WarrantyStatus] = None

    @field_validator("customer_name", "phone_number", "customer_address", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class WarrantyRecordUpdate(BaseModel):
    customer_name: Optional[str] = Field(None, min_length=1, max_length=120)
    phone_number: Optional[str] = Field(None, min_length=1, max_length=30)
    customer_address: Optional[str] = Field(None, min_length=1, max_length=280)
    product_id: Optional[uuid.UUID] = None
    quantity_purchased: Optional[int] = Field(None, ge=1)
    purchase_date: Optional[datetime] = None
    warranty_valid_until: Optional[datetime] = None
    warranty_status: Optional[WarrantyStatus] = None

    @field_validator("customer_name", "phone_number", "customer_address", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class ProductSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: str
    product_name: str
    brand: str
    camera_type: CameraType
    resolution: str
    warranty_months: int
    price: float


class WarrantyRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    warranty_id: str
    customer_name: str
    phone_number: str
    customer_address: str
    product_id: uuid.UUID
    quantity_purchased: int
    purchase_date: datetime
    warranty_valid_until: datetime
    warranty_status: WarrantyStatus
    created_at: datetime
    updated_at: datetime

    product: Optional[ProductSummary] = None


class ProductWarrantyCount(BaseModel):
    product_id: uuid.UUID
    product_name: str
    count: int
    total_quantity: int


class WarrantyStats(BaseModel):
    total: int
    active: int
    expired: int
    voided: int
    by_product: List[ProductWarrantyCount]


class SweepResult(BaseModel):
    modified_count: int
