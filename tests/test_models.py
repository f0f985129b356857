"""
Tests for queue data models.
"""
import pytest
from pydantic import ValidationError

from rushqueue.models import (
    LOCAL_SITE,
    AdvancedParams,
    FileSizeFilterMode,
    FileType,
    NotOlderThanUnit,
    TransferItem,
    TransferType,
)


def _make_item(**overrides) -> TransferItem:
    fields = dict(
        file_type=FileType.FILE,
        transfer_type=TransferType.UPLOAD,
        source_site_id=LOCAL_SITE,
        source_path="/tmp",
        source_name="a.txt",
        destination_site_id="0123456789ABCDEF0123456789ABCDEF",
        destination_path="/remote",
        destination_name="a.txt",
        size_bytes=1024,
    )
    fields.update(overrides)
    return TransferItem(**fields)


def test_transfer_item_defaults():
    item = _make_item()

    assert item.reserved_index4 == 1
    assert item.advanced_params is None
    assert item.remark == ""
    assert item.folder_include_filter == ""
    assert item.file_exclude_filter == ""
    assert item.is_local_source is True
    assert item.is_local_destination is False


def test_enums_accept_ordinals():
    item = _make_item(file_type=1, transfer_type=2)

    assert item.file_type is FileType.DIRECTORY
    assert item.transfer_type is TransferType.FXP


@pytest.mark.parametrize("value", ["sep\x02arated", "two\r\nlines", "Ȁ\u0000"])
def test_delimiters_rejected_at_construction(value):
    with pytest.raises(ValidationError):
        _make_item(remark=value)


def test_delimiters_rejected_on_assignment():
    item = _make_item()
    with pytest.raises(ValidationError):
        item.destination_name = "bad\x02name"


def test_lone_carriage_return_and_newline_are_allowed():
    item = _make_item(remark="a\rb\nc")
    assert item.remark == "a\rb\nc"


def test_negative_size_rejected():
    with pytest.raises(ValidationError):
        _make_item(size_bytes=-1)


def test_advanced_params_defaults():
    params = AdvancedParams()

    assert params.use_global_skip_list is True
    assert params.include_subfolders is True
    assert params.enable_synchronization is False
    assert params.reserved_flag15 is False
    assert params.file_size_filter_mode == FileSizeFilterMode.DISABLED
    assert params.size_threshold_bytes == 0
    assert params.date_filter_enabled is False
    assert params.not_older_than_unit is None


@pytest.mark.parametrize("field, value", [
    ("size_threshold_bytes", 2 ** 63),
    ("date_param1", 2 ** 31),
    ("date_param2", -(2 ** 31) - 1),
    ("file_size_filter_mode", 10),
    ("file_size_filter_mode", -1),
])
def test_advanced_params_numeric_ranges(field, value):
    with pytest.raises(ValidationError):
        AdvancedParams(**{field: value})


def test_file_size_filter_mode_known_digits_become_enum():
    assert AdvancedParams(file_size_filter_mode=2).file_size_filter_mode is FileSizeFilterMode.AT_MOST
    assert AdvancedParams(file_size_filter_mode=8).file_size_filter_mode == 8


def test_not_older_than_unit():
    assert AdvancedParams(not_older_than_mode=True, date_param1=6, date_param2=3).not_older_than_unit == NotOlderThanUnit.MONTH
    assert AdvancedParams(not_older_than_mode=True, date_param2=9).not_older_than_unit is None
    assert AdvancedParams(not_older_than_mode=False, date_param2=3).not_older_than_unit is None
