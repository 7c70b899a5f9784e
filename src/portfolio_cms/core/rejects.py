"""
Standardized reject records for validation failures.

A reject is a source record that was dropped during normalization. The
content pipeline never aborts a batch because of a single bad row; instead
it drops the row and keeps a ``Reject`` explaining where and why, so that a
spreadsheet editor can find the offending line.

Manifesto:
    Every reject should answer:
    - **Where?** stage (TOKENIZE, NORMALIZE)
    - **Why?** reason_code + reason_detail
    - **What?** raw_data for reproduction
    - **Source?** source_locator + line_number for tracing

    The reason_code enables aggregation ("how many UNPUBLISHED?")
    while reason_detail provides the specific explanation.

Tags:
    reject, validation, data-quality, portfolio-cms
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Reject:
    """
    A rejected record with classification and debugging info.

    Attributes:
        stage: Where rejected (NORMALIZE).
        reason_code: Machine-readable code (MISSING_REQUIRED, UNPUBLISHED).
        reason_detail: Human-readable explanation.
        raw_data: Original data for debugging.
        source_locator: File path or URL of source data.
        line_number: Line number in source.

    Examples:
        >>> reject = Reject(
        ...     stage="NORMALIZE",
        ...     reason_code="MISSING_REQUIRED",
        ...     reason_detail="Missing required field(s): slug",
        ...     raw_data={"slug": "", "lane": "business"},
        ...     line_number=7,
        ... )
        >>> reject.reason_code
        'MISSING_REQUIRED'
    """

    stage: str
    reason_code: str
    reason_detail: str
    raw_data: Any = None
    source_locator: str | None = None
    line_number: int | None = None


def count_by_reason(rejects: Iterable[Reject]) -> dict[str, int]:
    """Aggregate rejects by reason code, most common first."""
    return dict(Counter(r.reason_code for r in rejects).most_common())


__all__ = ["Reject", "count_by_reason"]
