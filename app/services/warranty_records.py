import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from sqlmodel import Session, col, func, select

from app.models.product import Product
from app.models.warranty_record import WarrantyRecord, WarrantyStatus
from app.schemas.warranty_schemas import (
    ProductSummary,
    ProductWarrantyCount,
    WarrantyRecordRead,
    WarrantyStats,
)
from app.services.errors import NotFoundError, ValidationError
from app.services.id_generator import IdKind, generate_id, insert_with_unique_id
from app.services.warranty_status import (
    Clock,
    as_utc,
    initial_status,
    sweep_expired,
    utcnow,
    validate_dates,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "customer_name",
    "phone_number",
    "customer_address",
    "product_id",
    "quantity_purchased",
    "purchase_date",
    "warranty_valid_until",
)

EDITABLE_FIELDS = (
    "customer_name",
    "phone_number",
    "customer_address",
    "quantity_purchased",
)


def to_read(record: WarrantyRecord, product: Optional[Product]) -> WarrantyRecordRead:
    view = WarrantyRecordRead.model_validate(record)
    if product is not None:
        view.product = ProductSummary.model_validate(product)
    return view


def _joined():
    return select(WarrantyRecord, Product).join(
        Product, WarrantyRecord.product_id == Product.id, isouter=True
    )


def _views(rows: List[Tuple[WarrantyRecord, Optional[Product]]]) -> List[WarrantyRecordRead]:
    return [to_read(record, product) for record, product in rows]


def parse_status(value) -> WarrantyStatus:
    try:
        return WarrantyStatus(value)
    except ValueError:
        raise ValidationError("Invalid warranty status", field="warranty_status")


def ensure_product_exists(session: Session, product_id) -> None:
    if session.get(Product, product_id) is None:
        raise NotFoundError("Product not found")


def create_warranty_record(
    session: Session,
    fields: dict,
    status_override: Optional[WarrantyStatus] = None,
    now: Clock = utcnow,
    generator: Callable[[IdKind], str] = generate_id,
) -> WarrantyRecordRead:
    """Issue a warranty record at time of sale.

    ``status_override`` is only passed by admin callers; without it the status is
    Active, or Expired when the validity date is already behind us.
    """
    missing = [name for name in REQUIRED_FIELDS if fields.get(name) in (None, "")]
    if missing:
        raise ValidationError(
            "All required fields must be provided",
            errors=[{"field": name, "message": "Field is required"} for name in missing],
        )
    if fields["quantity_purchased"] < 1:
        raise ValidationError("Quantity purchased must be at least 1", field="quantity_purchased")

    ensure_product_exists(session, fields["product_id"])

    purchase = as_utc(fields["purchase_date"])
    valid_until = as_utc(fields["warranty_valid_until"])
    validate_dates(purchase, valid_until)

    status = initial_status(valid_until, now(), status_override)

    record = insert_with_unique_id(
        session,
        IdKind.warranty,
        lambda warranty_id: WarrantyRecord(
            warranty_id=warranty_id,
            customer_name=fields["customer_name"],
            phone_number=fields["phone_number"],
            customer_address=fields["customer_address"],
            product_id=fields["product_id"],
            quantity_purchased=fields["quantity_purchased"],
            purchase_date=purchase,
            warranty_valid_until=valid_until,
            warranty_status=status,
        ),
        generator,
    )

    logger.info("Created warranty record %s (%s)", record.warranty_id, record.warranty_status.value)
    return get_warranty_record(session, record.id)


def get_warranty_record(session: Session, record_id: uuid.UUID) -> WarrantyRecordRead:
    row = session.exec(_joined().where(WarrantyRecord.id == record_id)).first()
    if not row:
        raise NotFoundError("Warranty record not found")
    return to_read(*row)


def get_by_warranty_id(session: Session, warranty_id: str) -> WarrantyRecordRead:
    if not warranty_id:
        raise ValidationError("Warranty ID is required", field="warranty_id")

    row = session.exec(_joined().where(WarrantyRecord.warranty_id == warranty_id)).first()
    if not row:
        raise NotFoundError("Warranty record not found")
    return to_read(*row)


def records_for_phone(session: Session, phone_number: str) -> List[Tuple[WarrantyRecord, Optional[Product]]]:
    """All records for a phone number, newest purchase first."""
    return session.exec(
        _joined()
        .where(WarrantyRecord.phone_number == phone_number)
        .order_by(col(WarrantyRecord.purchase_date).desc(), col(WarrantyRecord.created_at))
    ).all()


def list_by_phone(session: Session, phone_number: str) -> List[WarrantyRecordRead]:
    if not phone_number:
        raise ValidationError("Phone number is required", field="phone_number")
    return _views(records_for_phone(session, phone_number))


def list_warranty_records(session: Session) -> List[WarrantyRecordRead]:
    rows = session.exec(_joined().order_by(col(WarrantyRecord.created_at).desc())).all()
    return _views(rows)


def list_by_status(session: Session, status) -> List[WarrantyRecordRead]:
    status = parse_status(status)
    rows = session.exec(
        _joined()
        .where(WarrantyRecord.warranty_status == status)
        .order_by(col(WarrantyRecord.purchase_date).desc())
    ).all()
    return _views(rows)


def filter_warranty_records(
    session: Session,
    warranty_status: Optional[str] = None,
    product_id: Optional[uuid.UUID] = None,
    customer_name: Optional[str] = None,
    phone_number: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> List[WarrantyRecordRead]:
    query = _joined()

    if warranty_status:
        query = query.where(WarrantyRecord.warranty_status == parse_status(warranty_status))
    if product_id:
        query = query.where(WarrantyRecord.product_id == product_id)

    # Substring matches; the name match ignores case
    if customer_name:
        query = query.where(
            func.lower(WarrantyRecord.customer_name).contains(customer_name.lower(), autoescape=True)
        )
    if phone_number:
        query = query.where(col(WarrantyRecord.phone_number).contains(phone_number, autoescape=True))

    # Purchase date range, both ends inclusive
    if start_date:
        query = query.where(WarrantyRecord.purchase_date >= as_utc(start_date))
    if end_date:
        query = query.where(WarrantyRecord.purchase_date <= as_utc(end_date))

    rows = session.exec(query.order_by(col(WarrantyRecord.purchase_date).desc())).all()
    return _views(rows)


def update_warranty_record(
    session: Session,
    record_id: uuid.UUID,
    fields: dict,
    status_override: Optional[WarrantyStatus] = None,
    now: Clock = utcnow,
) -> WarrantyRecordRead:
    """Partial update. Only keys present in ``fields`` with a non-null value are applied."""
    record = session.get(WarrantyRecord, record_id)
    if not record:
        raise NotFoundError("Warranty record not found")

    fields = {key: value for key, value in fields.items() if value is not None}

    # Validate everything before touching the record so a rejected update leaves it clean
    if "product_id" in fields:
        ensure_product_exists(session, fields["product_id"])

    # Either date alone still has to respect the ordering against the stored other side
    dates_touched = "purchase_date" in fields or "warranty_valid_until" in fields
    if dates_touched:
        purchase = as_utc(fields.get("purchase_date", record.purchase_date))
        valid_until = as_utc(fields.get("warranty_valid_until", record.warranty_valid_until))
        validate_dates(purchase, valid_until)

    if status_override is not None:
        status_override = parse_status(status_override)

    if "product_id" in fields:
        record.product_id = fields["product_id"]
    if dates_touched:
        record.purchase_date = purchase
        record.warranty_valid_until = valid_until

    for name in EDITABLE_FIELDS:
        if name in fields:
            setattr(record, name, fields[name])

    if status_override is not None:
        record.warranty_status = status_override
    elif "warranty_valid_until" in fields and record.warranty_status != WarrantyStatus.voided:
        record.warranty_status = initial_status(record.warranty_valid_until, now())

    try:
        session.add(record)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Failed to update warranty record %s", record_id)
        raise

    logger.info("Updated warranty record %s", record.warranty_id)
    return get_warranty_record(session, record_id)


def delete_warranty_record(session: Session, record_id: uuid.UUID) -> None:
    """Hard delete. Claims filed against the record are left untouched."""
    record = session.get(WarrantyRecord, record_id)
    if not record:
        raise NotFoundError("Warranty record not found")

    warranty_id = record.warranty_id
    try:
        session.delete(record)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Failed to delete warranty record %s", record_id)
        raise

    logger.info("Deleted warranty record %s", warranty_id)


def sweep_expired_warranties(session: Session, now: Clock = utcnow) -> dict:
    return sweep_expired(session, now)


def warranty_stats(session: Session) -> WarrantyStats:
    total, active, expired, voided = session.exec(
        select(
            func.count(WarrantyRecord.id),
            func.count().filter(WarrantyRecord.warranty_status == WarrantyStatus.active),
            func.count().filter(WarrantyRecord.warranty_status == WarrantyStatus.expired),
            func.count().filter(WarrantyRecord.warranty_status == WarrantyStatus.voided),
        )
    ).one()

    by_product = session.exec(
        select(
            Product.id,
            Product.product_name,
            func.count(WarrantyRecord.id),
            func.coalesce(func.sum(WarrantyRecord.quantity_purchased), 0),
        )
        .select_from(WarrantyRecord)
        .join(Product, WarrantyRecord.product_id == Product.id)
        .group_by(Product.id, Product.product_name)
        .order_by(func.count(WarrantyRecord.id).desc())
    ).all()

    return WarrantyStats(
        total=total,
        active=active,
        expired=expired,
        voided=voided,
        by_product=[
            ProductWarrantyCount(
                product_id=product_id,
                product_name=product_name,
                count=count,
                total_quantity=total_quantity,
            )
            for product_id, product_name, count, total_quantity in by_product
        ],
    )
