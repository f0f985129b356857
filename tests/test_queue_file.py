"""
Tests for whole queue files.
"""
import pytest

from rushqueue.codec.queue_file import QueueFile, split_records
from rushqueue.codec.transfer_item import TransferItemCodec
from rushqueue.codec.wire import BOM, FIELD_SEPARATOR, RECORD_TERMINATOR
from rushqueue.exceptions import InvalidAdvancedParamsError, MalformedRecordError
from rushqueue.models import (
    LOCAL_SITE,
    AdvancedParams,
    FileType,
    TransferItem,
    TransferType,
)

REMOTE_SITE = "0123456789ABCDEF0123456789ABCDEF"


def _make_item(name: str, **overrides) -> TransferItem:
    fields = dict(
        file_type=FileType.FILE,
        transfer_type=TransferType.DOWNLOAD,
        source_site_id=REMOTE_SITE,
        source_path="/incoming",
        source_name=name,
        destination_site_id=LOCAL_SITE,
        destination_path="C:\\Downloads",
        destination_name=name,
        size_bytes=4096,
        advanced_params=AdvancedParams(),
    )
    fields.update(overrides)
    return TransferItem(**fields)


@pytest.fixture
def queue() -> QueueFile:
    return QueueFile([
        _make_item("one.iso"),
        _make_item("two", file_type=FileType.DIRECTORY, size_bytes=0, advanced_params=None),
        _make_item("three.txt", remark="after lunch", file_exclude_filter="*.bak"),
    ])


def test_encode_writes_bom_once_then_records(queue):
    codec = TransferItemCodec()
    data = queue.encode()

    assert data[:2] == BOM
    assert data.count(BOM) == 1
    assert data == BOM + b"".join(codec.encode(item) for item in queue)
    assert data.count(FIELD_SEPARATOR + RECORD_TERMINATOR) == 3


def test_empty_queue_is_just_the_bom():
    assert QueueFile().encode() == BOM


@pytest.mark.parametrize("data", [b"", BOM])
def test_decode_empty(data):
    assert len(QueueFile.decode(data)) == 0


def test_round_trip_preserves_order(queue):
    decoded = QueueFile.decode(queue.encode())

    assert decoded.items == queue.items
    assert [item.source_name for item in decoded] == ["one.iso", "two", "three.txt"]
    assert decoded == queue


def test_re_encoding_is_byte_identical(queue):
    data = queue.encode()
    assert QueueFile.decode(data).encode() == data


def test_decode_without_bom():
    data = TransferItemCodec().encode(_make_item("plain.bin"))
    decoded = QueueFile.decode(data)
    assert decoded[0].source_name == "plain.bin"


def test_records_split_on_terminator_not_line_breaks():
    # a lone "\n" inside a value must not split the record
    item = _make_item("odd", remark="line one\nline two")
    decoded = QueueFile.decode(QueueFile([item]).encode())
    assert decoded.items == [item]


def test_split_records_offsets(queue):
    data = queue.encode()
    spans = split_records(data, len(BOM))

    assert len(spans) == 3
    assert spans[0][0] == len(BOM)
    for offset, span in spans:
        assert data[offset:offset + len(span)] == span
        assert span.endswith(RECORD_TERMINATOR)


def test_truncated_file_aborts_decode(queue):
    data = queue.encode()

    with pytest.raises(MalformedRecordError) as exc_info:
        QueueFile.decode(data[:-3])
    assert exc_info.value.record_index == 2


def test_bad_record_reports_absolute_offset(queue):
    codec = TransferItemCodec()
    first = codec.encode(queue[0])
    broken = "2".encode("utf-16-le") + FIELD_SEPARATOR + "9".encode("utf-16-le") + FIELD_SEPARATOR + RECORD_TERMINATOR

    with pytest.raises(MalformedRecordError) as exc_info:
        QueueFile.decode(BOM + first + broken)

    error = exc_info.value
    assert error.record_index == 1
    assert error.field_index == 1
    assert error.offset == len(BOM) + len(first) + 4
    assert error.details["record_index"] == 1


def test_bad_advanced_params_abort_decode(queue):
    data = queue.encode().replace(
        "101000000000000,0,0,0".encode("utf-16-le"),
        "101000000000000,0,0".encode("utf-16-le"),
        1,
    )

    with pytest.raises(InvalidAdvancedParamsError) as exc_info:
        QueueFile.decode(data)
    assert exc_info.value.record_index == 0


def test_append_and_remove(queue):
    extra = _make_item("four.zip")
    queue.append(extra)
    assert len(queue) == 4
    assert queue[-1] is extra

    queue.remove(queue[0])
    assert [item.source_name for item in queue] == ["two", "three.txt", "four.zip"]


def test_file_round_trip(tmp_path, queue):
    path = tmp_path / "RushQueue.dat"
    queue.encode_to_file(path)

    assert path.read_bytes() == queue.encode()
    assert QueueFile.decode_from_file(path) == queue
    assert QueueFile.decode_from_file(str(path)) == queue


def test_missing_file_raises_os_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        QueueFile.decode_from_file(tmp_path / "missing.dat")
