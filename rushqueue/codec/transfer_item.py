"""
Transfer Item Codec - Bidirectional conversion between queue records and TransferItem

A record is sixteen UTF-16LE text fields, each followed by the field separator,
then the record terminator:

    <field 0> 02 00 <field 1> 02 00 ... <field 15> 02 00 0D 00 0A 00

Fields are located by scanning for the separator byte pattern; there are no
length prefixes and no padding.
"""
import re
from typing import Any, Dict, List, Optional, Tuple

import structlog

from rushqueue.codec.advanced_params import decode_advanced_params, encode_advanced_params
from rushqueue.codec.wire import (
    BOM,
    FIELD_SEPARATOR,
    RECORD_TERMINATOR,
    decode_text,
    encode_text,
    find_pattern,
    forbidden_sequence,
)
from rushqueue.exceptions import (
    FieldValueError,
    InvalidAdvancedParamsError,
    MalformedRecordError,
)
from rushqueue.models import FileType, TransferItem, TransferType

logger = structlog.get_logger()

RECORD_BLOCKS: List[Dict[str, Any]] = [
    {"name": "file_type", "type": "enum", "enum": FileType},
    {"name": "transfer_type", "type": "enum", "enum": TransferType},
    {"name": "source_site_id", "type": "string"},
    {"name": "source_path", "type": "string"},
    {"name": "source_name", "type": "string"},
    {"name": "destination_site_id", "type": "string"},
    {"name": "destination_path", "type": "string"},
    {"name": "destination_name", "type": "string"},
    {"name": "size_bytes", "type": "integer", "min": 0},
    {"name": "reserved_index4", "type": "integer"},
    {"name": "advanced_params", "type": "advanced"},
    {"name": "remark", "type": "string"},
    {"name": "folder_include_filter", "type": "string"},
    {"name": "folder_exclude_filter", "type": "string"},
    {"name": "file_include_filter", "type": "string"},
    {"name": "file_exclude_filter", "type": "string"},
]

# canonical decimal only, so decode followed by encode reproduces the bytes
_INTEGER = re.compile(r"0|-?[1-9][0-9]*")


class TransferItemCodec:
    """
    Parse and serialize single queue records.

    Decoding never returns a partially populated item: either all sixteen
    fields decode or a MalformedRecordError / InvalidAdvancedParamsError is
    raised with the byte offset and field that failed.
    """

    def __init__(self, blocks: Optional[List[Dict[str, Any]]] = None):
        self.blocks = blocks or RECORD_BLOCKS

    def decode(self, data: bytes) -> TransferItem:
        """
        Decode exactly one record.

        Args:
            data: Record bytes, optionally starting with the byte-order mark

        Returns:
            The decoded TransferItem

        Raises:
            MalformedRecordError: Missing delimiters, trailing bytes or bad field text
            InvalidAdvancedParamsError: The advanced parameters field is malformed
        """
        item, end = self.decode_from(data, 0)
        if end != len(data):
            raise self._malformed(
                f"{len(data) - end} unexpected bytes after record terminator",
                offset=end,
            )
        return item

    def decode_from(self, data: bytes, offset: int = 0) -> Tuple[TransferItem, int]:
        """
        Decode one record starting at offset.

        Returns:
            (item, offset just past the record terminator)
        """
        if data[offset:offset + len(BOM)] == BOM:
            offset += len(BOM)

        fields: Dict[str, Any] = {}
        last_index = len(self.blocks) - 1

        for index, block in enumerate(self.blocks):
            if index == last_index:
                raw, field_start, offset = self._read_final_field(data, offset, index, block['name'])
            else:
                raw, field_start, offset = self._read_field(data, offset, index, block['name'])

            fields[block['name']] = self._parse_field(raw, block, index, field_start)

        logger.debug("record_decoded", fields=len(fields), end_offset=offset)
        return TransferItem(**fields), offset

    def encode(self, item: TransferItem) -> bytes:
        """
        Encode one record, terminator included.

        Raises:
            FieldValueError: A field contains a delimiter sequence
        """
        parts: List[bytes] = []
        for index, block in enumerate(self.blocks):
            text = self._serialize_field(getattr(item, block['name']), block)
            problem = forbidden_sequence(text)
            if problem:
                logger.error("record_encode_error", field=block['name'], error=problem)
                raise FieldValueError(
                    f"field value contains {problem}",
                    field_index=index,
                    field_name=block['name'],
                )
            parts.append(encode_text(text))
            parts.append(FIELD_SEPARATOR)
        parts.append(RECORD_TERMINATOR)
        return b''.join(parts)

    def encoded_length(self, item: TransferItem) -> int:
        """Byte length encode(item) produces"""
        total = len(RECORD_TERMINATOR)
        for block in self.blocks:
            total += len(encode_text(self._serialize_field(getattr(item, block['name']), block)))
            total += len(FIELD_SEPARATOR)
        return total

    def _read_field(self, data: bytes, offset: int, index: int, name: str) -> Tuple[bytes, int, int]:
        end = find_pattern(data, FIELD_SEPARATOR, offset)
        if end == -1:
            raise self._malformed(
                "field separator not found before end of buffer",
                offset=offset,
                field_index=index,
                field_name=name,
            )
        return data[offset:end], offset, end + len(FIELD_SEPARATOR)

    def _read_final_field(self, data: bytes, offset: int, index: int, name: str) -> Tuple[bytes, int, int]:
        """
        The last field is closed by a separator immediately followed by the
        record terminator. A terminator with no separator in front of it means
        the record is short a field.
        """
        term = find_pattern(data, RECORD_TERMINATOR, offset)
        if term == -1:
            raise self._malformed(
                "record terminator not found before end of buffer",
                offset=offset,
                field_index=index,
                field_name=name,
            )

        end = term - len(FIELD_SEPARATOR)
        if end < offset or data[end:term] != FIELD_SEPARATOR:
            raise self._malformed(
                "record has fewer fields than expected",
                offset=term,
                field_index=index,
                field_name=name,
            )

        raw = data[offset:end]
        extra = find_pattern(raw, FIELD_SEPARATOR)
        if extra != -1:
            raise self._malformed(
                "record has more fields than expected",
                offset=offset + extra,
                field_index=index,
                field_name=name,
            )
        return raw, offset, term + len(RECORD_TERMINATOR)

    def _parse_field(self, raw: bytes, block: dict, index: int, offset: int) -> Any:
        """Decode one field's bytes according to its block type"""
        field_name = block['name']
        field_type = block['type']

        try:
            text = decode_text(raw)
        except UnicodeDecodeError as e:
            raise self._malformed(
                f"field is not valid UTF-16LE: {e.reason}",
                offset=offset,
                field_index=index,
                field_name=field_name,
            )

        if field_type == 'string':
            # a terminator can hide inside any field but the last
            problem = forbidden_sequence(text)
            if problem:
                raise self._malformed(
                    f"field value contains {problem}",
                    offset=offset,
                    field_index=index,
                    field_name=field_name,
                )
            return text

        if field_type == 'advanced':
            if text == '':
                return None
            try:
                return decode_advanced_params(text)
            except InvalidAdvancedParamsError as e:
                raise InvalidAdvancedParamsError(
                    e.message,
                    offset=offset,
                    field_index=index,
                    field_name=field_name,
                    details=e.details,
                )

        if not _INTEGER.fullmatch(text):
            raise self._malformed(
                f"expected a canonical decimal integer, got {text!r}",
                offset=offset,
                field_index=index,
                field_name=field_name,
            )
        number = int(text)

        if field_type == 'enum':
            try:
                return block['enum'](number)
            except ValueError:
                raise self._malformed(
                    f"unknown {block['enum'].__name__} value {number}",
                    offset=offset,
                    field_index=index,
                    field_name=field_name,
                )

        if 'min' in block and number < block['min']:
            raise self._malformed(
                f"value {number} below minimum {block['min']}",
                offset=offset,
                field_index=index,
                field_name=field_name,
            )
        return number

    def _serialize_field(self, value: Any, block: dict) -> str:
        """Render one field's wire text"""
        field_type = block['type']

        if field_type == 'advanced':
            return encode_advanced_params(value) if value is not None else ''
        if field_type in ('enum', 'integer'):
            return str(int(value))
        return value

    @staticmethod
    def _malformed(message: str, **context: Any) -> MalformedRecordError:
        logger.error("record_decode_error", error=message, **context)
        return MalformedRecordError(message, **context)
