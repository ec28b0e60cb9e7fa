import random
import re
import threading
from datetime import date

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from rps_dashboard.api.utils.sequencers import (
    Prefixes,
    allocate_number,
    allocate_or_fallback,
    fallback_document_code,
    format_document_code,
    year_window,
)
from rps_dashboard.database import build_engine
from rps_dashboard.models.sequence_counter import DocumentType, SequenceCounter
from rps_dashboard.services.exceptions import StorageError

CODE_PATTERN = re.compile(r"^RPS/(CER|SER)/\d{2}-\d{2}/\d{4,}$")
ISSUE_DATE = date(2025, 6, 1)


def counter(db, document_type):
    return db.execute(
        select(SequenceCounter).where(SequenceCounter.document_type == document_type)
    ).scalar_one_or_none()


class TestFormatDocumentCode:
    def test_pads_ordinal_to_four_digits(self):
        assert format_document_code(Prefixes.CERTIFICATE, ISSUE_DATE, 7) == "RPS/CER/25-26/0007"
        assert format_document_code(Prefixes.SERVICE, ISSUE_DATE, 1) == "RPS/SER/25-26/0001"
        assert format_document_code(Prefixes.SERVICE, date(2030, 12, 31), 1) == "RPS/SER/30-31/0001"

    def test_large_ordinal_is_not_truncated(self):
        assert format_document_code(Prefixes.CERTIFICATE, ISSUE_DATE, 12345) == "RPS/CER/25-26/12345"

    def test_zero_ordinal(self):
        assert format_document_code(Prefixes.CERTIFICATE, ISSUE_DATE, 0) == "RPS/CER/25-26/0000"

    def test_negative_ordinal_rejected(self):
        with pytest.raises(ValueError):
            format_document_code(Prefixes.CERTIFICATE, ISSUE_DATE, -1)

    def test_year_window_follows_calendar_year(self):
        # February belongs to the window of its own calendar year
        assert year_window(date(2026, 2, 15)) == "26-27"
        assert year_window(date(2025, 12, 31)) == "25-26"

    def test_year_window_wraps_century(self):
        assert year_window(date(2099, 1, 1)) == "99-00"

    def test_company_override(self):
        assert format_document_code("CER", ISSUE_DATE, 3, company="ACME") == "ACME/CER/25-26/0003"


class TestPeek:
    def test_empty_store_previews_first_number_without_writing(self, db):
        result = allocate_number(db, DocumentType.CERTIFICATE, commit=False, today=ISSUE_DATE)

        assert result.code == "RPS/CER/25-26/0001"
        assert result.ordinal == 1
        assert counter(db, DocumentType.CERTIFICATE) is None

    def test_peek_returns_current_value_not_next(self, db):
        allocate_number(db, DocumentType.CERTIFICATE, today=ISSUE_DATE)
        allocate_number(db, DocumentType.CERTIFICATE, today=ISSUE_DATE)

        result = allocate_number(db, DocumentType.CERTIFICATE, commit=False, today=ISSUE_DATE)

        assert result.code == "RPS/CER/25-26/0002"

    def test_existing_counter_peek_then_commit(self, db):
        db.add(SequenceCounter(document_type=DocumentType.CERTIFICATE, last_number=5))
        db.commit()

        assert allocate_number(db, DocumentType.CERTIFICATE, commit=False, today=ISSUE_DATE).ordinal == 5
        assert allocate_number(db, DocumentType.CERTIFICATE, today=ISSUE_DATE).code == "RPS/CER/25-26/0006"
        db.expire_all()
        assert counter(db, DocumentType.CERTIFICATE).last_number == 6

    def test_peek_does_not_change_the_counter(self, db):
        allocate_number(db, DocumentType.SERVICE, today=ISSUE_DATE)
        for _ in range(3):
            allocate_number(db, DocumentType.SERVICE, commit=False, today=ISSUE_DATE)

        assert counter(db, DocumentType.SERVICE).last_number == 1
        assert allocate_number(db, DocumentType.SERVICE, today=ISSUE_DATE).ordinal == 2


class TestCommit:
    def test_first_commit_issues_one(self, db):
        result = allocate_number(db, DocumentType.SERVICE, today=ISSUE_DATE)

        assert result.code == "RPS/SER/25-26/0001"
        assert result.fallback is False
        row = counter(db, DocumentType.SERVICE)
        assert row.last_number == 1
        assert row.last_issued_code == "RPS/SER/25-26/0001"

    def test_commits_are_strictly_increasing(self, db):
        ordinals = [allocate_number(db, DocumentType.CERTIFICATE, today=ISSUE_DATE).ordinal for _ in range(10)]
        assert ordinals == list(range(1, 11))

    def test_document_types_are_independent(self, db):
        allocate_number(db, DocumentType.CERTIFICATE, today=ISSUE_DATE)
        allocate_number(db, DocumentType.CERTIFICATE, today=ISSUE_DATE)

        service = allocate_number(db, DocumentType.SERVICE, today=ISSUE_DATE)

        assert service.code == "RPS/SER/25-26/0001"
        assert counter(db, DocumentType.CERTIFICATE).last_number == 2

    def test_counter_continues_across_year_windows(self, db):
        allocate_number(db, DocumentType.CERTIFICATE, today=date(2025, 12, 31))
        result = allocate_number(db, DocumentType.CERTIFICATE, today=date(2026, 1, 1))

        # No reset at the year boundary, only the window changes
        assert result.code == "RPS/CER/26-27/0002"

    def test_concurrent_commits_get_distinct_ordinals(self, session_factory):
        workers, per_worker = 6, 5
        issued = []
        errors = []
        lock = threading.Lock()

        def work():
            session = session_factory()
            try:
                for _ in range(per_worker):
                    result = allocate_number(session, DocumentType.CERTIFICATE, today=ISSUE_DATE)
                    with lock:
                        issued.append(result.ordinal)
            except Exception as exc:  # surfaced through the assertion below
                errors.append(exc)
            finally:
                session.close()

        threads = [threading.Thread(target=work) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert sorted(issued) == list(range(1, workers * per_worker + 1))


class TestFailures:
    @pytest.fixture
    def broken_db(self, tmp_path):
        engine = build_engine(f"sqlite:///{tmp_path / 'missing' / 'nowhere.db'}")
        session = Session(bind=engine)
        yield session
        session.close()
        engine.dispose()

    def test_unreachable_store_raises_storage_error(self, broken_db):
        with pytest.raises(StorageError):
            allocate_number(broken_db, DocumentType.CERTIFICATE)

    def test_unreachable_store_raises_on_peek_too(self, broken_db):
        with pytest.raises(StorageError):
            allocate_number(broken_db, DocumentType.SERVICE, commit=False)

    def test_fallback_used_when_store_unreachable(self, broken_db):
        result = allocate_or_fallback(broken_db, DocumentType.SERVICE, today=ISSUE_DATE, rng=random.Random(7))

        assert result.fallback is True
        assert result.code.startswith("RPS/SER/25-26/")
        assert CODE_PATTERN.match(result.code)

    def test_allocate_or_fallback_uses_the_store_when_available(self, db):
        result = allocate_or_fallback(db, DocumentType.CERTIFICATE, today=ISSUE_DATE)
        assert result.fallback is False
        assert result.code == "RPS/CER/25-26/0001"


def test_fallback_code_shape():
    rng = random.Random(42)
    for _ in range(50):
        result = fallback_document_code(Prefixes.CERTIFICATE, ISSUE_DATE, rng)
        assert 1 <= result.ordinal <= 9999
        assert result.code == format_document_code(Prefixes.CERTIFICATE, ISSUE_DATE, result.ordinal)
        assert result.fallback is True
