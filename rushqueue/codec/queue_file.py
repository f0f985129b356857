"""
Queue File - ordered list of transfer items and its on-disk form.

File layout:
    FF FE                     byte-order mark, once
    <record> <record> ...     each closed by 02 00 0D 00 0A 00

There is no record count and no trailer; records are found by scanning for
the record terminator.

Usage Example:
-------------
    queue = QueueFile.decode_from_file("RushQueue.dat")
    queue.append(item)
    queue.encode_to_file("RushQueue.dat")
"""
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

import structlog

from rushqueue.codec.transfer_item import TransferItemCodec
from rushqueue.codec.wire import BOM, RECORD_TERMINATOR, find_pattern
from rushqueue.exceptions import CodecError, MalformedRecordError
from rushqueue.models import TransferItem

logger = structlog.get_logger()

PathLike = Union[str, Path]


def split_records(data: bytes, start: int = 0) -> List[Tuple[int, bytes]]:
    """
    Split a buffer into record spans at the record terminator.

    Returns:
        (offset, span) pairs, each span ending with the terminator

    Raises:
        MalformedRecordError: Bytes left over after the last terminator
    """
    spans: List[Tuple[int, bytes]] = []
    offset = start
    while offset < len(data):
        term = find_pattern(data, RECORD_TERMINATOR, offset)
        if term == -1:
            logger.error(
                "queue_file_truncated",
                offset=offset,
                record_index=len(spans),
                remaining=len(data) - offset,
            )
            raise MalformedRecordError(
                "record terminator not found before end of file",
                offset=offset,
                record_index=len(spans),
            )
        end = term + len(RECORD_TERMINATOR)
        spans.append((offset, data[offset:end]))
        offset = end
    return spans


class QueueFile:
    """
    An FTP Rush transfer queue.

    Items are kept in execution order. Decoding is all-or-nothing: a record
    that fails to decode aborts the whole file.
    """

    def __init__(self, items: Optional[Iterable[TransferItem]] = None, codec: Optional[TransferItemCodec] = None):
        self.items: List[TransferItem] = list(items or [])
        self.codec = codec or TransferItemCodec()

    @classmethod
    def decode(cls, data: bytes, codec: Optional[TransferItemCodec] = None) -> "QueueFile":
        """
        Decode a whole queue file buffer.

        Raises:
            MalformedRecordError: A record is truncated or malformed
            InvalidAdvancedParamsError: A record's advanced parameters are malformed
        """
        queue = cls(codec=codec)

        start = 0
        if data[:len(BOM)] == BOM:
            start = len(BOM)
        elif data:
            logger.warning("queue_file_missing_bom", first_bytes=data[:len(BOM)].hex())

        for index, (offset, span) in enumerate(split_records(data, start)):
            try:
                queue.items.append(queue.codec.decode(span))
            except CodecError as e:
                error = e.relocate(offset, record_index=index)
                logger.error(
                    "queue_file_decode_error",
                    record_index=index,
                    offset=error.offset,
                    field=error.field_name,
                    error=error.message,
                )
                raise error from e

        logger.debug("queue_file_decoded", items=len(queue.items), size=len(data))
        return queue

    @classmethod
    def decode_from_file(cls, path: PathLike, codec: Optional[TransferItemCodec] = None) -> "QueueFile":
        """Read and decode a queue file. OSError propagates unchanged."""
        with open(path, "rb") as f:
            data = f.read()
        logger.debug("queue_file_read", path=str(path), size=len(data))
        return cls.decode(data, codec=codec)

    def encode(self) -> bytes:
        """Encode the queue: byte-order mark followed by every record in order"""
        parts = [BOM]
        for item in self.items:
            parts.append(self.codec.encode(item))
        data = b''.join(parts)
        logger.debug("queue_file_encoded", items=len(self.items), size=len(data))
        return data

    def encode_to_file(self, path: PathLike) -> None:
        """Encode and write the queue in one shot. OSError propagates unchanged."""
        data = self.encode()
        with open(path, "wb") as f:
            f.write(data)
        logger.info("queue_file_written", path=str(path), items=len(self.items), size=len(data))

    def append(self, item: TransferItem) -> None:
        self.items.append(item)

    def remove(self, item: TransferItem) -> None:
        self.items.remove(item)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[TransferItem]:
        return iter(self.items)

    def __getitem__(self, index: int) -> TransferItem:
        return self.items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueueFile):
            return NotImplemented
        return self.items == other.items

    def __repr__(self) -> str:
        return f"QueueFile(items={len(self.items)})"
