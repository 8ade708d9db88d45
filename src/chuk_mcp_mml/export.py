"""
Export - notation strings to a portable text payload and back.

export_mml() escapes every code point above 0xFF as a decimal numeric
character reference (&#<decimal>;), leaves everything else literal, and
Base64-encodes the Latin-1 bytes of the result.

The literal "&" is never escaped, so text that already spells a
reference above 0xFF (e.g. "&#300;") comes back from import_mml() as
the character itself. Notation made only of MML tokens never does.
"""

from __future__ import annotations

import base64
import binascii
import re

_MAX_LITERAL = 0xFF
_REFERENCE_PATTERN = re.compile(r"&#(\d+);")


def escape_non_latin1(text: str) -> str:
    """Replace code points above 0xFF with &#<decimal>; references."""
    return "".join(ch if ord(ch) <= _MAX_LITERAL else f"&#{ord(ch)};" for ch in text)


def unescape_references(text: str) -> str:
    """Turn &#<decimal>; references above 0xFF back into characters."""

    def _replace(match: re.Match[str]) -> str:
        digits = match.group(1)
        # 0x10FFFF has seven decimal digits
        if len(digits) <= 7 and _MAX_LITERAL < int(digits) <= 0x10FFFF:
            return chr(int(digits))
        return match.group(0)

    return _REFERENCE_PATTERN.sub(_replace, text)


def export_mml(text: str) -> str:
    """
    Serialize a notation string to a Base64 payload.

    Args:
        text: MML notation string (any Unicode)

    Returns:
        ASCII Base64 string

    Example:
        export_mml("T120 O4 C4") == "VDEyMCBPNCBDNA=="
    """
    escaped = escape_non_latin1(text)
    return base64.b64encode(escaped.encode("latin-1")).decode("ascii")


def import_mml(payload: str) -> str:
    """
    Reverse export_mml().

    References that export_mml() would never produce (code points
    <= 0xFF) are left as written. A reference above 0xFF that was
    already literal in the exported text is decoded too, so for such
    text the round trip is not exact.

    Raises:
        ValueError: If the payload is not valid Base64
    """
    try:
        raw = base64.b64decode(payload.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid MML payload: {e}") from e
    return unescape_references(raw.decode("latin-1"))
