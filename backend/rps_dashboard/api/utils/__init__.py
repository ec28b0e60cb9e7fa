# API Utilities - shared helpers
from rps_dashboard.api.utils.db_helpers import get_by_id, validate_fk, validate_unique
from rps_dashboard.api.utils.sequencers import (
    AllocationResult,
    Prefixes,
    allocate_number,
    allocate_or_fallback,
    fallback_document_code,
    format_document_code,
)
from rps_dashboard.api.utils.updates import commit_or_raise, save_entity, update_entity, delete_entity

__all__ = [
    # db_helpers
    "get_by_id",
    "validate_fk",
    "validate_unique",
    # sequencers
    "AllocationResult",
    "Prefixes",
    "allocate_number",
    "allocate_or_fallback",
    "fallback_document_code",
    "format_document_code",
    # updates
    "commit_or_raise",
    "save_entity",
    "update_entity",
    "delete_entity",
]
