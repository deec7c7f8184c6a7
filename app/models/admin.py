from enum import Enum
from typing import Optional
from sqlmodel import DateTime, Field, SQLModel
from datetime import datetime, timezone


class AdminRole(str, Enum):
    super_admin = "super_admin"
    staff = "staff"


class Admin(SQLModel, table=True):
    __tablename__ = "admins"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )

    username: str = Field(index=True, unique=True)
    email: str = Field(index=True, unique=True)
    full_name: str
    phone: str

    role: AdminRole = Field(default=AdminRole.staff)
    is_active: bool = Field(default=True)

    password_hash: str
    refresh_token: Optional[str] = Field(default=None)
    last_login: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
