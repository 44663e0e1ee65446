"""Block and soft-404 detection.

Two independent triggers are checked on every attempt, status first, then
page text. Both raise BlockDetected so the attempt loop can move on.
"""

import re
from typing import Optional

from .errors import BlockDetected

BLOCK_STATUSES = frozenset({401, 403, 451})

BLOCK_PHRASES = (
    "403 forbidden",
    "access denied",
    "cloudflare",
    "checking your browser",
    "blocked",
)

# Only the top of the body is scanned; product copy further down can mention "blocked"
BODY_SCAN_CHARS = 2000

BOT_PROTECTION_NOTE = "Blocked by bot-protection text"

_SOFT_404_TITLE = re.compile(r"404|not found", re.IGNORECASE)
_SOFT_404_BODY = re.compile(r"404|page not found", re.IGNORECASE)


def is_blocked_status(status: Optional[int]) -> bool:
    return status in BLOCK_STATUSES


def find_block_phrase(text: Optional[str]) -> Optional[str]:
    """Return the first block phrase found in the text, if any."""
    sample = (text or "")[:BODY_SCAN_CHARS].lower()
    for phrase in BLOCK_PHRASES:
        if phrase in sample:
            return phrase
    return None


def check_status(status: Optional[int]) -> None:
    if is_blocked_status(status):
        raise BlockDetected(f"Blocked HTTP {status}")


def check_body_text(text: Optional[str]) -> None:
    if find_block_phrase(text):
        raise BlockDetected(BOT_PROTECTION_NOTE)


def is_soft_404(title: Optional[str], body: Optional[str]) -> bool:
    """A 200 page whose content says it is a 404."""
    return bool(_SOFT_404_TITLE.search(title or "") or _SOFT_404_BODY.search(body or ""))
