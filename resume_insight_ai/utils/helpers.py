"""Helper utilities for the Resume Insight AI system."""

import math
import re
from typing import Callable, Iterable, List, Optional


def digits_only(value: str) -> str:
    """Strip everything but digits (phone numbers, page numbers)."""
    return re.sub(r"\D", "", value or "")


def dedupe_preserving_order(
    values: Iterable[str],
    key: Optional[Callable[[str], str]] = None,
) -> List[str]:
    """Remove duplicates keeping the first-seen value for each normalized key."""
    seen: set[str] = set()
    result: List[str] = []
    for v in values:
        if not v:
            continue
        k = key(v) if key else v
        if k and k not in seen:
            seen.add(k)
            result.append(v)
    return result


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores."""
    return int(math.floor(value + 0.5))
