"""
Queue data models
"""
from enum import IntEnum
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from rushqueue.codec.wire import forbidden_sequence

LOCAL_SITE = "Local"

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class FileType(IntEnum):
    """Kind of filesystem entry a queue item transfers"""

    UNKNOWN = 0
    DIRECTORY = 1
    FILE = 2


class TransferType(IntEnum):
    """Direction of a queued transfer"""

    UPLOAD = 0
    DOWNLOAD = 1
    FXP = 2
    UNKNOWN3 = 3
    UNKNOWN4 = 4
    UNKNOWN5 = 5  # possibly delete
    UNKNOWN6 = 6


class FileSizeFilterMode(IntEnum):
    """How size_threshold_bytes limits the files that get transferred"""

    DISABLED = 0
    EQUALS = 1
    AT_MOST = 2
    AT_LEAST = 3


class NotOlderThanUnit(IntEnum):
    """Time unit stored in date_param2 when not_older_than_mode is set"""

    DISABLED = 0
    DAY = 1
    WEEK = 2
    MONTH = 3
    YEAR = 4


class AdvancedParams(BaseModel):
    """
    Per-item transfer options packed into a single queue field.

    date_param1 and date_param2 change meaning with not_older_than_mode:
    - off ("date between"): earliest and latest allowed date as serial date values
    - on ("not older than"): a count and a NotOlderThanUnit value
    Both zero disables date checks.
    """

    model_config = {"validate_assignment": True}

    use_global_skip_list: bool = True
    enable_synchronization: bool = False
    include_subfolders: bool = True
    use_regular_expressions: bool = False
    sync_existing_files_only: bool = False
    # a digit outside the known modes is kept as an int and written back as-is
    file_size_filter_mode: Union[FileSizeFilterMode, int] = Field(
        default=FileSizeFilterMode.DISABLED, union_mode="left_to_right"
    )
    apply_date_condition_to_folders: bool = False
    sync_delete_non_existent_files: bool = False
    sync_compare_file_date_time: bool = False
    sync_compare_file_size: bool = False
    not_older_than_mode: bool = False
    sync_use_binary_mode_for_ascii: bool = False
    sync_both_sides: bool = False
    disconnect_after_complete: bool = False
    reserved_flag15: bool = False

    size_threshold_bytes: int = Field(default=0, ge=INT64_MIN, le=INT64_MAX)
    date_param1: int = Field(default=0, ge=INT32_MIN, le=INT32_MAX)
    date_param2: int = Field(default=0, ge=INT32_MIN, le=INT32_MAX)

    @field_validator("file_size_filter_mode")
    @classmethod
    def _check_single_digit(cls, value: Union[FileSizeFilterMode, int]) -> Union[FileSizeFilterMode, int]:
        if not 0 <= int(value) <= 9:
            raise ValueError(f"file size filter mode must be a single digit, got {int(value)}")
        return value

    @property
    def date_filter_enabled(self) -> bool:
        return self.date_param1 != 0 or self.date_param2 != 0

    @property
    def not_older_than_unit(self) -> Optional[NotOlderThanUnit]:
        """The unit in date_param2, or None outside "not older than" mode or for unknown values."""
        if not self.not_older_than_mode:
            return None
        try:
            return NotOlderThanUnit(self.date_param2)
        except ValueError:
            return None


class TransferItem(BaseModel):
    """One queued upload, download or FXP transfer"""

    model_config = {"validate_assignment": True}

    file_type: FileType
    transfer_type: TransferType
    source_site_id: str
    source_path: str
    source_name: str
    destination_site_id: str
    destination_path: str
    destination_name: str
    size_bytes: int = Field(ge=0)
    reserved_index4: int = 1  # only ever observed as 1
    advanced_params: Optional[AdvancedParams] = None
    remark: str = ""
    folder_include_filter: str = ""
    folder_exclude_filter: str = ""
    file_include_filter: str = ""
    file_exclude_filter: str = ""

    @field_validator(
        "source_site_id",
        "source_path",
        "source_name",
        "destination_site_id",
        "destination_path",
        "destination_name",
        "remark",
        "folder_include_filter",
        "folder_exclude_filter",
        "file_include_filter",
        "file_exclude_filter",
    )
    @classmethod
    def _check_wire_safe(cls, value: str) -> str:
        problem = forbidden_sequence(value)
        if problem:
            raise ValueError(f"value cannot be stored in a queue file: contains {problem}")
        return value

    @property
    def is_local_source(self) -> bool:
        return self.source_site_id == LOCAL_SITE

    @property
    def is_local_destination(self) -> bool:
        return self.destination_site_id == LOCAL_SITE
