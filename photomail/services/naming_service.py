import logging
import re
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

MAX_FILENAME_LENGTH = 100
MAX_SUBJECT_LENGTH = 200


def dated_filename(tz_name: str, now: Optional[datetime] = None) -> str:
    """Return ``YYYY-MM-DD.pdf`` for the current date in *tz_name*."""
    tz = ZoneInfo(tz_name)
    now = now.astimezone(tz) if now else datetime.now(tz)
    return f"{now.strftime('%Y-%m-%d')}.pdf"


def sanitize_filename(name: str) -> str:
    """Make a user-supplied name safe to use as a PDF attachment filename.

    Returns an empty string when nothing usable is left.
    """
    name = re.sub(r'[<>:"/\\|?*\x00-\x1f\x7f]', "_", name)
    name = re.sub(r"\s+", "_", name.strip())
    if name.lower().endswith(".pdf"):
        name = name[:-4]
    name = name.strip("._")
    if not name:
        return ""
    return f"{name[:MAX_FILENAME_LENGTH - 4]}.pdf"


def sanitize_subject(subject: str) -> str:
    """Strip line breaks and control characters so the value is a single header line."""
    subject = re.sub(r"[\x00-\x1f\x7f]+", " ", subject)
    subject = re.sub(r"\s+", " ", subject).strip()
    return subject[:MAX_SUBJECT_LENGTH]


def resolve_filename(user_value: Optional[str], tz_name: str) -> str:
    if user_value:
        cleaned = sanitize_filename(user_value)
        if cleaned:
            return cleaned
        logger.info("Filename %r sanitized to nothing, using dated default", user_value)
    return dated_filename(tz_name)


def resolve_subject(user_value: Optional[str], filename: str) -> str:
    if user_value:
        cleaned = sanitize_subject(user_value)
        if cleaned:
            return cleaned
    return f"PDF {filename}"
