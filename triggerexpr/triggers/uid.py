"""Trigger and rule id sanitization."""

import re
import uuid

from triggerexpr.core.config import get_settings

_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_-]")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")
_VALID_START = re.compile(r"^[A-Za-z0-9]")


def validate_uid(uid: str | None = None) -> str:
    """Turn any string into a unique, well-formed id.

    Characters outside ``[A-Za-z0-9_-]`` become ``_``, runs of ``_`` are
    collapsed after ids that do not start with a letter or digit get the
    configured prefix, and a random UUID is always appended so repeated
    calls never collide.

    Args:
        uid: Id or free text to sanitize; a bare UUID is returned when empty

    Returns:
        Sanitized id
    """
    suffix = str(uuid.uuid4())
    if not uid:
        return suffix

    uid = _INVALID_CHARS.sub("_", uid)
    if not _VALID_START.match(uid):
        uid = get_settings().uid_prefix + uid
    return _REPEATED_UNDERSCORES.sub("_", uid) + suffix
