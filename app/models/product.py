from enum import Enum
import uuid
from sqlmodel import DateTime, Field, SQLModel
from datetime import datetime, timezone

class CameraType(str, Enum):
    ip = "IP"
    analog = "Analog"
    wifi = "WiFi"

class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )

    # Catalog fields (managed outside the warranty core)
    product_id: str
    product_name: str = Field(index=True, unique=True)
    brand: str
    camera_type: CameraType
    resolution: str

    warranty_months: int = Field(default=12)
    price: float = Field(default=0)
    in_stock: bool = Field(default=True)
