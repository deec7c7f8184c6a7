import uuid
from datetime import datetime, timezone

import pytest

from app.models.warranty_claim import ClaimStatus
from app.models.warranty_record import WarrantyStatus
from app.services import warranty_claims, warranty_records
from app.services.errors import DomainError, NotFoundError, ValidationError

PHONE = "0300-1112222"


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def at(*args):
    return lambda: utc(*args)


@pytest.fixture
def three_records(make_record):
    """Two Active purchases and a newer Expired one on the same phone"""
    oldest = make_record(purchase_date=utc(2023, 1, 1), warranty_valid_until=utc(2026, 1, 1))
    middle = make_record(purchase_date=utc(2023, 6, 1), warranty_valid_until=utc(2026, 6, 1))
    newest = make_record(purchase_date=utc(2024, 1, 1), warranty_valid_until=utc(2025, 1, 1))
    assert newest.warranty_status == WarrantyStatus.expired
    return oldest, middle, newest


@pytest.mark.unit
def test_auto_selects_most_recent_active_record(session, three_records):
    _, middle, _ = three_records

    claim = warranty_claims.create_claim(session, PHONE, "Camera 3 shows no picture at night")

    assert claim.warranty_record_id == middle.id
    assert claim.claim_id.startswith("WC-")
    assert claim.claim_status == ClaimStatus.pending
    assert claim.resolved_at is None
    assert claim.warranty_record.warranty_id == middle.warranty_id
    assert claim.warranty_record.product is not None


@pytest.mark.unit
def test_explicit_record_may_be_any_status_for_that_phone(session, three_records):
    _, _, newest = three_records

    claim = warranty_claims.create_claim(session, PHONE, "DVR fan noise", warranty_record_id=newest.id)

    assert claim.warranty_record_id == newest.id


@pytest.mark.unit
def test_explicit_record_of_another_phone_is_not_found(session, make_record, three_records):
    stranger = make_record(phone_number="0345-0001111")

    with pytest.raises(NotFoundError):
        warranty_claims.create_claim(session, PHONE, "Lens cracked", warranty_record_id=stranger.id)

    with pytest.raises(NotFoundError):
        warranty_claims.create_claim(session, PHONE, "Lens cracked", warranty_record_id="not-a-uuid")


@pytest.mark.unit
def test_unknown_phone_is_not_found(session):
    with pytest.raises(NotFoundError):
        warranty_claims.create_claim(session, "0399-0000000", "Camera offline")


@pytest.mark.unit
def test_no_active_warranty_is_a_domain_error(session, make_record):
    make_record(purchase_date=utc(2023, 1, 1), warranty_valid_until=utc(2024, 1, 1))
    make_record(status_override=WarrantyStatus.voided)

    with pytest.raises(DomainError):
        warranty_claims.create_claim(session, PHONE, "Camera offline")


@pytest.mark.unit
def test_required_fields(session):
    with pytest.raises(ValidationError) as exc:
        warranty_claims.create_claim(session, PHONE, "   ")
    assert exc.value.errors == [{"field": "issue_description", "message": "Field is required"}]


@pytest.mark.unit
def test_customer_fields_are_snapshotted(session, make_record, clock):
    record = make_record(customer_name="Hamza Khan")
    claim = warranty_claims.create_claim(session, PHONE, "Power adapter burnt")

    warranty_records.update_warranty_record(
        session, record.id, {"customer_name": "Hamza K.", "phone_number": "0311-2223333"}, now=clock
    )

    reloaded = warranty_claims.get_claim(session, claim.id)
    assert reloaded.customer_name == "Hamza Khan"
    assert reloaded.phone_number == PHONE
    assert reloaded.warranty_record.customer_name == "Hamza K."


@pytest.mark.unit
def test_resolved_at_is_stamped_once(session, make_record):
    make_record()
    claim = warranty_claims.create_claim(session, PHONE, "IR LEDs not working")

    pending = warranty_claims.update_claim_status(session, claim.id, "Pending", now=at(2025, 6, 2))
    assert pending.resolved_at is None

    approved = warranty_claims.update_claim_status(session, claim.id, "Approved", now=at(2025, 6, 3))
    assert approved.claim_status == ClaimStatus.approved
    assert approved.resolved_at.replace(tzinfo=None) == datetime(2025, 6, 3)

    rejected = warranty_claims.update_claim_status(session, claim.id, "Rejected", now=at(2025, 6, 9))
    assert rejected.claim_status == ClaimStatus.rejected
    assert rejected.resolved_at.replace(tzinfo=None) == datetime(2025, 6, 3)


@pytest.mark.unit
def test_update_status_errors(session, make_record):
    make_record()
    claim = warranty_claims.create_claim(session, PHONE, "IR LEDs not working")

    with pytest.raises(ValidationError) as exc:
        warranty_claims.update_claim_status(session, claim.id, "Closed")
    assert exc.value.errors[0]["field"] == "claim_status"

    with pytest.raises(NotFoundError):
        warranty_claims.update_claim_status(session, uuid.uuid4(), "Approved")


@pytest.mark.unit
def test_claim_survives_record_deletion(session, make_record):
    record = make_record()
    claim = warranty_claims.create_claim(session, PHONE, "Housing water damage")

    warranty_records.delete_warranty_record(session, record.id)

    orphan = warranty_claims.get_claim(session, claim.id)
    assert orphan.warranty_record_id == record.id
    assert orphan.warranty_record is None
    assert warranty_claims.get_by_claim_id(session, claim.claim_id).id == claim.id


@pytest.mark.unit
def test_lookups_filters_and_delete(session, make_record):
    make_record()
    make_record(phone_number="0321-5556666", customer_name="Sana Bilal")

    first = warranty_claims.create_claim(session, PHONE, "No video")
    second = warranty_claims.create_claim(session, PHONE, "No audio")
    other = warranty_claims.create_claim(session, "0321-5556666", "Blurry image")
    warranty_claims.update_claim_status(session, other.id, "Approved")

    mine = warranty_claims.list_by_phone(session, PHONE)
    assert {c.id for c in mine} == {first.id, second.id}

    assert [c.id for c in warranty_claims.filter_claims(session, customer_name="SANA")] == [other.id]
    assert [c.id for c in warranty_claims.filter_claims(session, phone_number="5556")] == [other.id]
    assert len(warranty_claims.filter_claims(session, claim_status="Pending")) == 2
    assert len(warranty_claims.filter_claims(session, warranty_record_id=first.warranty_record_id)) == 2
    assert len(warranty_claims.filter_claims(session, start_date=utc(2000, 1, 1), end_date=utc(2100, 1, 1))) == 3
    assert warranty_claims.filter_claims(session, end_date=utc(2000, 1, 1)) == []

    assert [c.id for c in warranty_claims.list_by_status(session, "Approved")] == [other.id]
    with pytest.raises(ValidationError):
        warranty_claims.list_by_status(session, "Done")

    assert len(warranty_claims.list_claims(session)) == 3

    warranty_claims.delete_claim(session, first.id)
    with pytest.raises(NotFoundError):
        warranty_claims.get_claim(session, first.id)
    with pytest.raises(NotFoundError):
        warranty_claims.delete_claim(session, first.id)


@pytest.mark.unit
def test_claim_ids_are_unique(session, make_record):
    make_record()
    ids = {warranty_claims.create_claim(session, PHONE, f"Fault #{n}").claim_id for n in range(15)}
    assert len(ids) == 15


@pytest.mark.unit
def test_stats(session, make_record, camera, other_camera):
    make_record()
    make_record(phone_number="0321-5556666", product_id=other_camera.id)

    a = warranty_claims.create_claim(session, PHONE, "No video")
    warranty_claims.create_claim(session, PHONE, "No audio")
    b = warranty_claims.create_claim(session, "0321-5556666", "Blurry image")
    warranty_claims.update_claim_status(session, a.id, "Approved")
    warranty_claims.update_claim_status(session, b.id, "Rejected")

    stats = warranty_claims.claim_stats(session)

    assert (stats.total, stats.pending, stats.approved, stats.rejected) == (3, 1, 1, 1)
    assert {row.product_name: row.count for row in stats.by_product} == {
        camera.product_name: 2,
        other_camera.product_name: 1,
    }


@pytest.mark.unit
def test_eligibility_partitions_records(session, make_record, three_records):
    voided = make_record(status_override=WarrantyStatus.voided)

    result = warranty_claims.check_eligibility(session, PHONE)

    assert result.eligible is True
    assert result.total_warranties == 4
    assert len(result.active) == 2
    assert len(result.expired) == 1
    assert [w.id for w in result.voided] == [voided.id]


@pytest.mark.unit
def test_eligibility_for_unknown_phone(session):
    result = warranty_claims.check_eligibility(session, "0399-0000000")

    assert result.eligible is False
    assert result.warranties == []
    assert result.total_warranties == 0


@pytest.mark.unit
def test_eligibility_without_active_records(session, make_record):
    make_record(purchase_date=utc(2023, 1, 1), warranty_valid_until=utc(2024, 1, 1))

    result = warranty_claims.check_eligibility(session, PHONE)

    assert result.eligible is False
    assert len(result.expired) == 1
