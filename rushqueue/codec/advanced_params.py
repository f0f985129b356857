"""
Advanced parameters codec

The advanced parameters field is plain text of the form

    <15 digits>,<size threshold>,<date param 1>,<date param 2>

Each digit of the first segment is one option at a fixed position. All of
them are booleans except position 5, which holds a FileSizeFilterMode
(or the bare digit when it is not a known mode).
"""
import re
from typing import Any, Dict, List, Tuple

import structlog

from rushqueue.exceptions import InvalidAdvancedParamsError
from rushqueue.models import (
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    INT64_MIN,
    AdvancedParams,
)

logger = structlog.get_logger()

# Position in the digit segment -> AdvancedParams attribute
FLAG_POSITIONS: Tuple[str, ...] = (
    "use_global_skip_list",
    "enable_synchronization",
    "include_subfolders",
    "use_regular_expressions",
    "sync_existing_files_only",
    "file_size_filter_mode",
    "apply_date_condition_to_folders",
    "sync_delete_non_existent_files",
    "sync_compare_file_date_time",
    "sync_compare_file_size",
    "not_older_than_mode",
    "sync_use_binary_mode_for_ascii",
    "sync_both_sides",
    "disconnect_after_complete",
    "reserved_flag15",
)
FLAG_COUNT = len(FLAG_POSITIONS)
FILE_SIZE_MODE_POSITION = FLAG_POSITIONS.index("file_size_filter_mode")

# (attribute, lower bound, upper bound) for segments 2-4
NUMERIC_SEGMENTS: Tuple[Tuple[str, int, int], ...] = (
    ("size_threshold_bytes", INT64_MIN, INT64_MAX),
    ("date_param1", INT32_MIN, INT32_MAX),
    ("date_param2", INT32_MIN, INT32_MAX),
)

_INTEGER = re.compile(r"0|-?[1-9][0-9]*")


def _fail(message: str, text: str, **context: Any) -> InvalidAdvancedParamsError:
    logger.error("advanced_params_decode_error", error=message, text=text, **context)
    return InvalidAdvancedParamsError(message, details={"text": text, **context})


def decode_advanced_params(text: str) -> AdvancedParams:
    """
    Parse advanced parameters text.

    Raises:
        InvalidAdvancedParamsError: wrong segment count, a flags segment that is
            not 15 digits, or a bad integer
    """
    segments = text.split(",")
    if len(segments) != 1 + len(NUMERIC_SEGMENTS):
        raise _fail(
            f"expected {1 + len(NUMERIC_SEGMENTS)} comma-separated segments, got {len(segments)}",
            text,
        )

    flags = segments[0]
    if len(flags) != FLAG_COUNT:
        raise _fail(f"flags segment must be {FLAG_COUNT} digits, got {len(flags)}", text)

    values: Dict[str, Any] = {}
    for position, (name, char) in enumerate(zip(FLAG_POSITIONS, flags)):
        if char not in "0123456789":
            raise _fail(f"flag {name} is not a digit: {char!r}", text, position=position)
        digit = int(char)
        if position == FILE_SIZE_MODE_POSITION:
            # digits past the known modes are kept as plain ints
            values[name] = digit
        else:
            values[name] = digit != 0

    for (name, low, high), segment in zip(NUMERIC_SEGMENTS, segments[1:]):
        if not _INTEGER.fullmatch(segment):
            raise _fail(f"{name} is not an integer: {segment!r}", text)
        number = int(segment)
        if not low <= number <= high:
            raise _fail(f"{name} out of range: {number}", text)
        values[name] = number

    return AdvancedParams(**values)


def encode_flags(params: AdvancedParams) -> str:
    digits: List[str] = []
    for name in FLAG_POSITIONS:
        digits.append(str(int(getattr(params, name))))
    return "".join(digits)


def encode_advanced_params(params: AdvancedParams) -> str:
    """Serialize advanced parameters to their packed text form"""
    numbers = [str(getattr(params, name)) for name, _, _ in NUMERIC_SEGMENTS]
    return ",".join([encode_flags(params), *numbers])
