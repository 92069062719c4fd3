from __future__ import annotations
import codecs
import logging
import unicodedata
from typing import Optional

logger = logging.getLogger(__name__)

SAMPLE_LIMIT = 1024             # characters
NON_PRINTABLE_THRESHOLD = 0.05  # fraction of the sampled window
READ_CHUNK = 8192

_ALLOWED_CONTROLS = {"\r", "\n", "\t"}


def is_non_printable(ch: str) -> bool:
    """Unassigned code point, or an ISO control character other than CR/LF/TAB."""
    cat = unicodedata.category(ch)
    if cat == "Cn":
        return True
    return cat == "Cc" and ch not in _ALLOWED_CONTROLS


def is_text_like(text: str,
                 limit: int = SAMPLE_LIMIT,
                 threshold: float = NON_PRINTABLE_THRESHOLD) -> bool:
    window = text[:limit]
    if not window:
        return False
    bad = sum(1 for ch in window if is_non_printable(ch))
    return bad / len(window) <= threshold


def _read_text_prefix(path: str, limit: int) -> str:
    # Decodes incrementally so only the bytes needed for `limit` characters are read.
    # Malformed UTF-8 becomes U+FFFD exactly as a full decode would produce it.
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    parts = []
    count = 0
    with open(path, "rb") as f:
        while count < limit:
            chunk = f.read(READ_CHUNK)
            if not chunk:
                tail = decoder.decode(b"", final=True)
                parts.append(tail)
                count += len(tail)
                break
            text = decoder.decode(chunk)
            parts.append(text)
            count += len(text)
    return "".join(parts)[:limit]


def sample_content(path: str,
                   limit: int = SAMPLE_LIMIT,
                   threshold: float = NON_PRINTABLE_THRESHOLD) -> Optional[str]:
    """Leading text of the file (at most `limit` characters) when it looks like text.

    Returns None for empty, unreadable or binary-looking files: images, archives,
    spreadsheets and other formats fail the printability check.
    """
    try:
        head = _read_text_prefix(path, limit)
    except OSError as e:
        logger.info("Failed to read content of %s: %s", path, e)
        return None
    if not is_text_like(head, limit, threshold):
        return None
    return head
