import logging
import random
import time
from enum import Enum
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, select

from app.models.warranty_claim import WarrantyClaim
from app.models.warranty_record import WarrantyRecord
from app.services.errors import InternalError

logger = logging.getLogger(__name__)

MAX_ID_ATTEMPTS = 10

T = TypeVar("T", bound=SQLModel)


class IdKind(str, Enum):
    warranty = "warranty"
    claim = "claim"


PREFIXES = {
    IdKind.warranty: "WR",
    IdKind.claim: "WC",
}


def generate_id(kind: IdKind, clock: Callable[[], float] = time.time) -> str:
    """Build a candidate ID like ``WR-73819264-057``.

    The middle segment is the last 8 digits of the epoch in milliseconds and the
    suffix is random, so two calls in the same millisecond can collide. Callers
    must check the store, see :func:`generate_unique_id`.
    """
    prefix = PREFIXES[IdKind(kind)]
    timestamp = str(int(clock() * 1000))[-8:].zfill(8)
    suffix = f"{random.randint(0, 999):03d}"
    return f"{prefix}-{timestamp}-{suffix}"


def id_exists(session: Session, kind: IdKind, candidate: str) -> bool:
    if IdKind(kind) is IdKind.warranty:
        statement = select(WarrantyRecord.id).where(WarrantyRecord.warranty_id == candidate)
    else:
        statement = select(WarrantyClaim.id).where(WarrantyClaim.claim_id == candidate)
    return session.exec(statement).first() is not None


def generate_unique_id(
    session: Session,
    kind: IdKind,
    generator: Callable[[IdKind], str] = generate_id,
) -> str:
    kind = IdKind(kind)
    for attempt in range(1, MAX_ID_ATTEMPTS + 1):
        candidate = generator(kind)
        if not id_exists(session, kind, candidate):
            return candidate
        logger.warning("%s id collision on %s (attempt %d)", kind.value, candidate, attempt)

    logger.error("Gave up generating a %s id after %d attempts", kind.value, MAX_ID_ATTEMPTS)
    raise InternalError("Could not generate a unique identifier")


def insert_with_unique_id(
    session: Session,
    kind: IdKind,
    build: Callable[[str], T],
    generator: Callable[[IdKind], str] = generate_id,
) -> T:
    """Persist ``build(new_id)`` and return it refreshed.

    The pre-check in :func:`generate_unique_id` can race with a concurrent insert,
    so a unique-index violation on commit is treated as one more collision. Any
    other integrity failure is re-raised unchanged.
    """
    kind = IdKind(kind)
    for attempt in range(1, MAX_ID_ATTEMPTS + 1):
        candidate = generate_unique_id(session, kind, generator)
        obj = build(candidate)
        session.add(obj)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            # Only a candidate that is now taken counts as a collision
            if not id_exists(session, kind, candidate):
                logger.exception("%s insert failed for %s", kind.value, candidate)
                raise
            logger.warning("%s id %s taken on insert (attempt %d), retrying", kind.value, candidate, attempt)
            continue
        session.refresh(obj)
        return obj

    logger.error("Gave up inserting %s after %d attempts", kind.value, MAX_ID_ATTEMPTS)
    raise InternalError("Could not generate a unique identifier")
