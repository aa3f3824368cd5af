# common/sanitize.py

"""
Log-safe rendering of request-derived values.

Control characters are replaced so a crafted value cannot forge extra log lines.
"""

from __future__ import annotations

import re

_CONTROL_CHARS = re.compile(r"[\n\r\t]")


def sanitize_for_log(value) -> str:
    if value is None:
        return "null"
    return _CONTROL_CHARS.sub("_", str(value))
