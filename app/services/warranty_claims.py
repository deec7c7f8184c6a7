import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from sqlmodel import Session, col, func, select

from app.models.product import Product
from app.models.warranty_claim import RESOLVED_STATUSES, ClaimStatus, WarrantyClaim
from app.models.warranty_record import WarrantyRecord, WarrantyStatus
from app.schemas.claim_schemas import (
    ClaimStats,
    EligibilityResponse,
    ProductClaimCount,
    WarrantyClaimRead,
)
from app.services.errors import DomainError, NotFoundError, ValidationError
from app.services.id_generator import IdKind, generate_id, insert_with_unique_id
from app.services.warranty_records import records_for_phone, to_read
from app.services.warranty_status import Clock, as_utc, utcnow

logger = logging.getLogger(__name__)


def _joined():
    # Outer joins: a claim outlives a deleted warranty record
    return (
        select(WarrantyClaim, WarrantyRecord, Product)
        .join(WarrantyRecord, WarrantyClaim.warranty_record_id == WarrantyRecord.id, isouter=True)
        .join(Product, WarrantyRecord.product_id == Product.id, isouter=True)
    )


def _to_read(
    claim: WarrantyClaim,
    record: Optional[WarrantyRecord],
    product: Optional[Product],
) -> WarrantyClaimRead:
    view = WarrantyClaimRead.model_validate(claim)
    if record is not None:
        view.warranty_record = to_read(record, product)
    return view


def _views(rows: List[Tuple]) -> List[WarrantyClaimRead]:
    return [_to_read(*row) for row in rows]


def parse_status(value) -> ClaimStatus:
    try:
        return ClaimStatus(value)
    except ValueError:
        raise ValidationError("Invalid claim status", field="claim_status")


def _as_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def create_claim(
    session: Session,
    phone_number: str,
    issue_description: str,
    warranty_record_id=None,
    generator: Callable[[IdKind], str] = generate_id,
) -> WarrantyClaimRead:
    """File a claim for whoever holds ``phone_number``.

    Knowing the phone number is the whole authorization check. With an explicit
    ``warranty_record_id`` the record must belong to that phone number; without
    one the most recently purchased Active record is used.
    """
    phone_number = (phone_number or "").strip()
    issue_description = (issue_description or "").strip()

    missing = [
        name
        for name, value in (("phone_number", phone_number), ("issue_description", issue_description))
        if not value
    ]
    if missing:
        raise ValidationError(
            "Phone number and issue description are required",
            errors=[{"field": name, "message": "Field is required"} for name in missing],
        )

    records = [record for record, _ in records_for_phone(session, phone_number)]
    if not records:
        raise NotFoundError("No warranty records found for this phone number. Please contact support.")

    if warranty_record_id:
        wanted = _as_uuid(warranty_record_id)
        selected = next((record for record in records if record.id == wanted), None)
        if selected is None:
            raise NotFoundError("Selected warranty record not found for this phone number")
    else:
        active = [record for record in records if record.warranty_status == WarrantyStatus.active]
        if not active:
            raise DomainError(
                "All warranties for this phone number are expired or voided. Please contact support."
            )
        # max() keeps the first of equal purchase dates
        selected = max(active, key=lambda record: as_utc(record.purchase_date))

    claim = insert_with_unique_id(
        session,
        IdKind.claim,
        lambda claim_id: WarrantyClaim(
            claim_id=claim_id,
            warranty_record_id=selected.id,
            customer_name=selected.customer_name,
            phone_number=selected.phone_number,
            issue_description=issue_description,
        ),
        generator,
    )

    logger.info("Created warranty claim %s against record %s", claim.claim_id, selected.warranty_id)
    return get_claim(session, claim.id)


def get_claim(session: Session, claim_id: uuid.UUID) -> WarrantyClaimRead:
    row = session.exec(_joined().where(WarrantyClaim.id == claim_id)).first()
    if not row:
        raise NotFoundError("Warranty claim not found")
    return _to_read(*row)


def get_by_claim_id(session: Session, claim_id: str) -> WarrantyClaimRead:
    if not claim_id:
        raise ValidationError("Claim ID is required", field="claim_id")

    row = session.exec(_joined().where(WarrantyClaim.claim_id == claim_id)).first()
    if not row:
        raise NotFoundError("Warranty claim not found")
    return _to_read(*row)


def list_by_phone(session: Session, phone_number: str) -> List[WarrantyClaimRead]:
    if not phone_number:
        raise ValidationError("Phone number is required", field="phone_number")

    rows = session.exec(
        _joined()
        .where(WarrantyClaim.phone_number == phone_number)
        .order_by(col(WarrantyClaim.created_at).desc())
    ).all()
    return _views(rows)


def list_claims(session: Session) -> List[WarrantyClaimRead]:
    rows = session.exec(_joined().order_by(col(WarrantyClaim.created_at).desc())).all()
    return _views(rows)


def list_by_status(session: Session, status) -> List[WarrantyClaimRead]:
    status = parse_status(status)
    rows = session.exec(
        _joined()
        .where(WarrantyClaim.claim_status == status)
        .order_by(col(WarrantyClaim.created_at).desc())
    ).all()
    return _views(rows)


def filter_claims(
    session: Session,
    claim_status: Optional[str] = None,
    warranty_record_id: Optional[uuid.UUID] = None,
    customer_name: Optional[str] = None,
    phone_number: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> List[WarrantyClaimRead]:
    query = _joined()

    if claim_status:
        query = query.where(WarrantyClaim.claim_status == parse_status(claim_status))
    if warranty_record_id:
        query = query.where(WarrantyClaim.warranty_record_id == warranty_record_id)

    if customer_name:
        query = query.where(
            func.lower(WarrantyClaim.customer_name).contains(customer_name.lower(), autoescape=True)
        )
    if phone_number:
        query = query.where(col(WarrantyClaim.phone_number).contains(phone_number, autoescape=True))

    # Claim creation date range, both ends inclusive
    if start_date:
        query = query.where(WarrantyClaim.created_at >= as_utc(start_date))
    if end_date:
        query = query.where(WarrantyClaim.created_at <= as_utc(end_date))

    rows = session.exec(query.order_by(col(WarrantyClaim.created_at).desc())).all()
    return _views(rows)


def update_claim_status(
    session: Session,
    claim_id: uuid.UUID,
    status,
    now: Clock = utcnow,
) -> WarrantyClaimRead:
    """Move a claim to ``status``.

    ``resolved_at`` is stamped the first time the claim lands on Approved or
    Rejected and is never moved afterwards.
    """
    claim = session.get(WarrantyClaim, claim_id)
    if not claim:
        raise NotFoundError("Warranty claim not found")

    new_status = parse_status(status)
    previous = claim.claim_status

    claim.claim_status = new_status
    if new_status in RESOLVED_STATUSES and claim.resolved_at is None:
        claim.resolved_at = as_utc(now())

    try:
        session.add(claim)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Failed to update warranty claim %s", claim_id)
        raise

    logger.info("Warranty claim %s: %s -> %s", claim.claim_id, previous.value, new_status.value)
    return get_claim(session, claim_id)


def delete_claim(session: Session, claim_id: uuid.UUID) -> None:
    claim = session.get(WarrantyClaim, claim_id)
    if not claim:
        raise NotFoundError("Warranty claim not found")

    business_id = claim.claim_id
    try:
        session.delete(claim)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Failed to delete warranty claim %s", claim_id)
        raise

    logger.info("Deleted warranty claim %s", business_id)


def claim_stats(session: Session) -> ClaimStats:
    total, pending, approved, rejected = session.exec(
        select(
            func.count(WarrantyClaim.id),
            func.count().filter(WarrantyClaim.claim_status == ClaimStatus.pending),
            func.count().filter(WarrantyClaim.claim_status == ClaimStatus.approved),
            func.count().filter(WarrantyClaim.claim_status == ClaimStatus.rejected),
        )
    ).one()

    # Claims whose record or product is gone drop out of the per-product breakdown
    by_product = session.exec(
        select(Product.id, Product.product_name, func.count(WarrantyClaim.id))
        .select_from(WarrantyClaim)
        .join(WarrantyRecord, WarrantyClaim.warranty_record_id == WarrantyRecord.id)
        .join(Product, WarrantyRecord.product_id == Product.id)
        .group_by(Product.id, Product.product_name)
        .order_by(func.count(WarrantyClaim.id).desc())
    ).all()

    return ClaimStats(
        total=total,
        pending=pending,
        approved=approved,
        rejected=rejected,
        by_product=[
            ProductClaimCount(product_id=product_id, product_name=product_name, count=count)
            for product_id, product_name, count in by_product
        ],
    )


def check_eligibility(session: Session, phone_number: str) -> EligibilityResponse:
    """Read-only: bucket a phone number's records by status so a client can decide
    whether to offer claim filing at all."""
    if not phone_number:
        raise ValidationError("Phone number is required", field="phone_number")

    warranties = [to_read(record, product) for record, product in records_for_phone(session, phone_number)]

    active = [w for w in warranties if w.warranty_status == WarrantyStatus.active]
    expired = [w for w in warranties if w.warranty_status == WarrantyStatus.expired]
    voided = [w for w in warranties if w.warranty_status == WarrantyStatus.voided]

    return EligibilityResponse(
        eligible=len(active) > 0,
        total_warranties=len(warranties),
        warranties=warranties,
        active=active,
        expired=expired,
        voided=voided,
    )
