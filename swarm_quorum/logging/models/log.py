import datetime
import threading
from types import FrameType

import msgspec

from .entry import Entry


class Log(msgspec.Struct, kw_only=True):
    """An entry plus the call site and time it was logged from."""

    entry: Entry
    filename: str
    function_name: str
    line_number: int
    thread_id: int = msgspec.field(
        default_factory=threading.get_native_id,
    )
    timestamp: str = msgspec.field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC).isoformat()
    )

    @classmethod
    def from_frame(cls, entry: Entry, frame: FrameType) -> "Log":
        return cls(
            entry=entry,
            filename=frame.f_code.co_filename,
            function_name=frame.f_code.co_name,
            line_number=frame.f_lineno,
        )
