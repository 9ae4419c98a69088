"""Routes an instrument code to the source kind that can price it."""

from __future__ import annotations

import re

from unified_price.core.models import InstrumentClass
from unified_price.sources.crypto import CRYPTO_IDS

_FUND_CODE_RE = re.compile(r"[0-9]{6}")


def classify(code: str) -> InstrumentClass:
    """Classify ``code``; first matching rule wins.

    1. exactly six ASCII digits -> fund
    2. a known crypto ticker, case-insensitive -> crypto
    3. anything else -> stock
    """
    if _FUND_CODE_RE.fullmatch(code):
        return InstrumentClass.FUND
    if code.lower() in CRYPTO_IDS:
        return InstrumentClass.CRYPTO
    return InstrumentClass.STOCK
