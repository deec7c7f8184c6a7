from datetime import datetime, timedelta, timezone

import pytest

from app.models.warranty_record import WarrantyStatus
from app.services import warranty_records
from app.services.errors import ValidationError
from app.services.warranty_status import as_utc, initial_status, validate_dates


def at(*args):
    return lambda: datetime(*args, tzinfo=timezone.utc)


@pytest.mark.unit
def test_initial_status_follows_validity_date(now):
    assert initial_status(now + timedelta(days=1), now) == WarrantyStatus.active
    assert initial_status(now - timedelta(days=1), now) == WarrantyStatus.expired


@pytest.mark.unit
def test_override_always_wins(now):
    assert initial_status(now - timedelta(days=1), now, WarrantyStatus.active) == WarrantyStatus.active
    assert initial_status(now + timedelta(days=1), now, WarrantyStatus.voided) == WarrantyStatus.voided


@pytest.mark.unit
def test_naive_datetimes_are_treated_as_utc():
    assert as_utc(datetime(2025, 1, 1)) == datetime(2025, 1, 1, tzinfo=timezone.utc)
    karachi = timezone(timedelta(hours=5))
    assert as_utc(datetime(2025, 1, 1, 5, tzinfo=karachi)) == datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.mark.unit
def test_validate_dates_requires_strictly_later_expiry(now):
    validate_dates(now, now + timedelta(seconds=1))

    with pytest.raises(ValidationError) as exc:
        validate_dates(now, now)
    assert exc.value.errors == [
        {"field": "warranty_valid_until", "message": "Warranty valid until date must be after purchase date"}
    ]


@pytest.mark.unit
def test_sweep_only_expires_once_validity_has_passed(make_record, session):
    record = make_record(warranty_valid_until=datetime(2025, 9, 1, tzinfo=timezone.utc))
    assert record.warranty_status == WarrantyStatus.active

    assert warranty_records.sweep_expired_warranties(session, now=at(2025, 8, 1)) == {"modified_count": 0}
    assert warranty_records.sweep_expired_warranties(session, now=at(2025, 10, 1)) == {"modified_count": 1}

    assert warranty_records.get_warranty_record(session, record.id).warranty_status == WarrantyStatus.expired


@pytest.mark.unit
def test_sweep_is_idempotent_and_leaves_voided_alone(make_record, session):
    active = make_record(warranty_valid_until=datetime(2025, 9, 1, tzinfo=timezone.utc))
    voided = make_record(
        warranty_valid_until=datetime(2025, 9, 1, tzinfo=timezone.utc),
        status_override=WarrantyStatus.voided,
    )
    still_valid = make_record(warranty_valid_until=datetime(2027, 1, 1, tzinfo=timezone.utc))

    assert warranty_records.sweep_expired_warranties(session, now=at(2025, 10, 1)) == {"modified_count": 1}
    assert warranty_records.sweep_expired_warranties(session, now=at(2025, 10, 1)) == {"modified_count": 0}

    assert warranty_records.get_warranty_record(session, active.id).warranty_status == WarrantyStatus.expired
    assert warranty_records.get_warranty_record(session, voided.id).warranty_status == WarrantyStatus.voided
    assert warranty_records.get_warranty_record(session, still_valid.id).warranty_status == WarrantyStatus.active


@pytest.mark.unit
def test_sweep_with_empty_store(session, clock):
    assert warranty_records.sweep_expired_warranties(session, now=clock) == {"modified_count": 0}
