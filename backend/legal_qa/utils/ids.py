"""ID helpers."""

from __future__ import annotations

from legal_qa.utils.time import now_ms

LEGAL_VECTOR_PREFIX = "legal"


def legal_vector_id(case_id: str, timestamp_ms: int | None = None) -> str:
    """Return ``legal_<caseId>_<epochMillis>``.

    Two calls for the same case inside one millisecond yield the same id.
    """
    stamp = now_ms() if timestamp_ms is None else timestamp_ms
    return f"{LEGAL_VECTOR_PREFIX}_{case_id}_{stamp}"
