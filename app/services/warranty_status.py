import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlmodel import Session, update

from app.models.warranty_record import WarrantyRecord, WarrantyStatus
from app.services.errors import ValidationError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def initial_status(
    valid_until: datetime,
    now: datetime,
    override: Optional[WarrantyStatus] = None,
) -> WarrantyStatus:
    """Status for a record being created or having its expiry changed.

    An explicit admin override always wins, and it is the only way to reach Voided.
    """
    if override is not None:
        return WarrantyStatus(override)
    if as_utc(valid_until) < as_utc(now):
        return WarrantyStatus.expired
    return WarrantyStatus.active


def validate_dates(purchase_date: datetime, valid_until: datetime) -> None:
    if as_utc(valid_until) <= as_utc(purchase_date):
        raise ValidationError(
            "Warranty valid until date must be after purchase date",
            field="warranty_valid_until",
        )


def sweep_expired(session: Session, now: Clock = utcnow) -> dict:
    """Move every Active record whose validity has lapsed to Expired.

    Runs as one conditional UPDATE, so Voided records and records voided while
    the sweep runs are never matched. Safe to repeat.
    """
    cutoff = as_utc(now())

    try:
        result = session.exec(
            update(WarrantyRecord)
            .where(
                WarrantyRecord.warranty_status == WarrantyStatus.active,
                WarrantyRecord.warranty_valid_until < cutoff,
            )
            .values(warranty_status=WarrantyStatus.expired)
            .execution_options(synchronize_session=False)
        )
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Expiry sweep failed")
        raise

    modified = result.rowcount or 0
    logger.info("Expiry sweep moved %d warranty records to Expired", modified)
    return {"modified_count": modified}
