"""
Sequencers - sequential document number generators

IMPORTANT: uses the 'sequence_counters' table so numbers NEVER restart,
even if certificates or service reports are deleted. One row per document
type, created lazily by the first committing allocation.

Code format: RPS/CER/25-26/0007
- "25-26" is the year window of the calendar year the code is issued in.
  It does not follow an April-March fiscal year; a certificate issued in
  February 2026 gets "26-27".
- the ordinal is zero padded to at least 4 digits and grows past 9999.
"""
import random
from dataclasses import dataclass
from datetime import date
from typing import Optional

import structlog
from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from rps_dashboard.config import settings
from rps_dashboard.models.sequence_counter import DocumentType, SequenceCounter
from rps_dashboard.services.exceptions import StorageError

logger = structlog.get_logger(__name__)


# Prefix constants, one per document type
class Prefixes:
    CERTIFICATE = "CER"
    SERVICE = "SER"

    @classmethod
    def for_document_type(cls, document_type: DocumentType) -> str:
        if document_type == DocumentType.CERTIFICATE:
            return cls.CERTIFICATE
        return cls.SERVICE


@dataclass(frozen=True)
class AllocationResult:
    code: str
    ordinal: int
    # True when the code came from the random fallback and may collide
    fallback: bool = False


def year_window(issue_date: date) -> str:
    """Two-digit year pair for the calendar year of issue: 2025 -> "25-26"."""
    year = issue_date.year
    return f"{year % 100:02d}-{(year + 1) % 100:02d}"


def format_document_code(
    prefix: str,
    issue_date: date,
    ordinal: int,
    company: str = None
) -> str:
    """
    Formats a document code: COMPANY/PREFIX/YY-YY/NNNN

    Args:
        prefix: Document prefix ("CER" or "SER")
        issue_date: Date the code is issued on (only the year is used)
        ordinal: Ordinal within the sequence (never truncated)
        company: Company code (default: settings.DOCUMENT_CODE_COMPANY)

    Returns:
        Formatted code (e.g. "RPS/CER/25-26/0007")

    Usage:
        format_document_code(Prefixes.CERTIFICATE, date(2025, 6, 1), 7)
        # Returns: "RPS/CER/25-26/0007"
    """
    if ordinal < 0:
        raise ValueError(f"ordinal must be non-negative, got {ordinal}")

    company = company or settings.DOCUMENT_CODE_COMPANY
    return f"{company}/{prefix}/{year_window(issue_date)}/{ordinal:04d}"


def fallback_document_code(
    prefix: str,
    issue_date: date = None,
    rng: random.Random = None
) -> AllocationResult:
    """
    Best-effort code used when the sequence store cannot be reached.

    The ordinal is a random 1-9999 value formatted with the same rule as real
    codes. It is NOT unique and may collide with issued or future codes.
    """
    issue_date = issue_date or date.today()
    ordinal = (rng or random).randint(1, 9999)
    return AllocationResult(
        code=format_document_code(prefix, issue_date, ordinal),
        ordinal=ordinal,
        fallback=True,
    )


def _peek_ordinal(db: Session, document_type: DocumentType) -> int:
    last_number = db.execute(
        select(SequenceCounter.last_number).where(SequenceCounter.document_type == document_type)
    ).scalar_one_or_none()

    # No row yet: preview the first number without creating anything
    if last_number is None:
        return 1
    # Existing row: the current value, not the next one
    return last_number


def _commit_next_ordinal(
    db: Session,
    document_type: DocumentType,
    prefix: str,
    issue_date: date,
    max_retries: int
) -> int:
    """
    Atomically increments the counter and stores the formatted code.

    The UPDATE ... RETURNING takes the row write lock, so concurrent commits
    for the same type are serialized by the database. When the row does not
    exist yet it is inserted with ordinal 1; if another request inserted it
    first the primary key conflict is rolled back and the UPDATE is retried.
    """
    for attempt in range(1, max_retries + 1):
        try:
            ordinal = db.execute(
                update(SequenceCounter)
                .where(SequenceCounter.document_type == document_type)
                .values(last_number=SequenceCounter.last_number + 1)
                .returning(SequenceCounter.last_number)
                .execution_options(synchronize_session=False)
            ).scalar_one_or_none()

            if ordinal is None:
                ordinal = 1
                db.execute(
                    insert(SequenceCounter).values(document_type=document_type, last_number=ordinal)
                )

            code = format_document_code(prefix, issue_date, ordinal)
            db.execute(
                update(SequenceCounter)
                .where(SequenceCounter.document_type == document_type)
                .values(last_issued_code=code)
                .execution_options(synchronize_session=False)
            )
            db.commit()
            return ordinal

        except IntegrityError:
            db.rollback()
            logger.warning(
                "Sequence row created concurrently, retrying",
                document_type=document_type.value,
                attempt=attempt,
                max_retries=max_retries,
            )

    raise StorageError(
        f"Could not allocate a {document_type.value} number after {max_retries} attempts"
    )


def allocate_number(
    db: Session,
    document_type: DocumentType,
    commit: bool = True,
    today: date = None,
    max_retries: int = None
) -> AllocationResult:
    """
    Allocates (commit) or previews (peek) the code for a document type.

    Peek semantics are deliberately asymmetric:
    - no counter row: ordinal 1, and nothing is written
    - counter row at N: ordinal N (the last issued one, NOT N + 1)

    Commit always persists: ordinal 1 on a new type, N + 1 otherwise.

    Args:
        db: Database session
        document_type: DocumentType.CERTIFICATE or DocumentType.SERVICE
        commit: Persist the increment (True) or only preview (False)
        today: Issue date used for the year window (default: today)
        max_retries: Attempts when the first row is created concurrently

    Returns:
        AllocationResult(code, ordinal)

    Raises:
        StorageError if the sequence store cannot be read or written

    Usage:
        result = allocate_number(db, DocumentType.CERTIFICATE, commit=False)
        # result.code == "RPS/CER/25-26/0001" on an empty database
    """
    issue_date = today or date.today()
    prefix = Prefixes.for_document_type(document_type)
    retries = max_retries or settings.SEQUENCE_MAX_RETRIES

    try:
        if commit:
            ordinal = _commit_next_ordinal(db, document_type, prefix, issue_date, retries)
        else:
            ordinal = _peek_ordinal(db, document_type)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(
            "Sequence store failure",
            document_type=document_type.value,
            commit=commit,
            error=str(exc),
        )
        raise StorageError(f"Sequence store unavailable: {exc.__class__.__name__}") from exc

    code = format_document_code(prefix, issue_date, ordinal)
    if commit:
        logger.info("Document number issued", document_type=document_type.value, code=code)
    return AllocationResult(code=code, ordinal=ordinal)


def allocate_or_fallback(
    db: Session,
    document_type: DocumentType,
    commit: bool = True,
    today: date = None,
    rng: Optional[random.Random] = None
) -> AllocationResult:
    """
    allocate_number, degrading to fallback_document_code on StorageError.

    The fallback result has fallback=True and is not guaranteed unique.
    """
    try:
        return allocate_number(db, document_type, commit=commit, today=today)
    except StorageError as exc:
        prefix = Prefixes.for_document_type(document_type)
        result = fallback_document_code(prefix, today, rng)
        logger.warning(
            "Using non-unique fallback document number",
            document_type=document_type.value,
            code=result.code,
            error=str(exc),
        )
        return result
