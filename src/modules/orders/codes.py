"""Human-readable order codes ("01", "02", ...)."""

from __future__ import annotations

import re
from typing import Iterable

_NON_DIGITS = re.compile(r"\D")


def code_number(code: str | None) -> int:
    """Numeric part of ``code``; 0 when it has no digits."""
    digits = _NON_DIGITS.sub("", code or "")
    return int(digits) if digits else 0


def next_code(existing_codes: Iterable[str], issued_up_to: int = 0) -> str:
    """Return the code following the highest of ``existing_codes`` and ``issued_up_to``.

    ``issued_up_to`` is the highest number ever handed out, so the code of a
    deleted order is never issued again.  Codes with no digits are ignored.
    """
    highest = issued_up_to
    for code in existing_codes:
        highest = max(highest, code_number(code))
    return str(highest + 1).zfill(2)
