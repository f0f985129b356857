"""
Custom Exception Hierarchy for rushqueue

Provides structured exceptions for queue file decoding and encoding.
All custom exceptions inherit from QueueError base class.
"""
from typing import Any, Dict, Optional


class QueueError(Exception):
    """
    Base exception for all rushqueue errors.

    All custom exceptions should inherit from this class to allow
    catching every queue error with a single except clause.
    """
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(QueueError):
    """
    Invalid configuration or settings.

    Raised when settings validation fails or a configured path is unusable.
    """
    pass


# Codec Errors

class CodecError(QueueError):
    """
    Queue file decoding or encoding failure.

    Carries the position of the failure so truncated or corrupted queue
    files can be diagnosed. Offsets are byte offsets into the buffer that
    was handed to the codec.
    """
    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        field_index: Optional[int] = None,
        field_name: Optional[str] = None,
        record_index: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        context = dict(details or {})
        for key, value in (
            ("offset", offset),
            ("field_index", field_index),
            ("field_name", field_name),
            ("record_index", record_index),
        ):
            if value is not None:
                context[key] = value
        super().__init__(message, context)
        self.offset = offset
        self.field_index = field_index
        self.field_name = field_name
        self.record_index = record_index

    def __str__(self) -> str:
        location = ", ".join(
            f"{key}={self.details[key]}"
            for key in ("record_index", "field_index", "field_name", "offset")
            if key in self.details
        )
        return f"{self.message} ({location})" if location else self.message

    def relocate(self, base_offset: int, record_index: Optional[int] = None) -> "CodecError":
        """Return a copy whose offset is relative to an enclosing buffer."""
        offset = self.offset + base_offset if self.offset is not None else base_offset
        details = {
            key: value
            for key, value in self.details.items()
            if key not in ("offset", "field_index", "field_name", "record_index")
        }
        return type(self)(
            self.message,
            offset=offset,
            field_index=self.field_index,
            field_name=self.field_name,
            record_index=record_index if record_index is not None else self.record_index,
            details=details,
        )


class MalformedRecordError(CodecError):
    """A record is truncated, has extra bytes, or holds an unparseable field."""
    pass


class InvalidAdvancedParamsError(CodecError):
    """Advanced parameters text does not match the packed flags format."""
    pass


FormatError = InvalidAdvancedParamsError


class FieldValueError(CodecError):
    """Field value cannot be represented in the wire format."""
    pass
