"""
Wire primitives for the FTP Rush queue format.

Every text field is UTF-16LE. Fields are delimited by a two byte separator,
records end with an encoded CRLF, and a file starts with a byte-order mark.
There is no escaping, so a value whose encoding contains either delimiter
cannot be written.
"""
from typing import Optional

BOM = b"\xff\xfe"
FIELD_SEPARATOR = b"\x02\x00"
RECORD_TERMINATOR = b"\x0d\x00\x0a\x00"
TEXT_ENCODING = "utf-16-le"

_FORBIDDEN = (
    ("field separator", FIELD_SEPARATOR),
    ("record terminator", RECORD_TERMINATOR),
)


def find_pattern(data: bytes, pattern: bytes, start: int = 0) -> int:
    """
    Return the offset of the first occurrence of pattern at or after start, or -1.

    A literal byte match with no code-unit alignment, so corrupt fields with an
    odd byte count are still delimited exactly where the separator sits.
    """
    return data.find(pattern, start)


def encode_text(value: str) -> bytes:
    return value.encode(TEXT_ENCODING)


def decode_text(raw: bytes) -> str:
    # Strict: an odd byte count or a lone surrogate raises UnicodeDecodeError
    return raw.decode(TEXT_ENCODING)


def forbidden_sequence(value: str) -> Optional[str]:
    """Name the delimiter that value's encoding would contain, if any."""
    try:
        encoded = encode_text(value)
    except UnicodeEncodeError:
        return "unencodable character"
    for name, pattern in _FORBIDDEN:
        if pattern in encoded:
            return name
    return None
