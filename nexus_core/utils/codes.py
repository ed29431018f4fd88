"""Redemption code extraction."""

from __future__ import annotations

import re
from typing import Optional

from ..constants import NEXUS_CODE_PATTERN

_CODE_RE = re.compile(NEXUS_CODE_PATTERN, re.IGNORECASE)


def extract_nexus_code(text: Optional[str]) -> Optional[str]:
    """Return the first redemption code in ``text``, uppercased, or None."""
    if not text:
        return None
    match = _CODE_RE.search(text)
    return match.group(0).upper() if match else None
