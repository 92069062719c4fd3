from __future__ import annotations
import math
from datetime import datetime, tzinfo
from typing import Optional

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


def format_bytes(num: int) -> str:
    if num < 0:
        return str(num)
    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    x = float(num)
    for u in units:
        if x < 1024.0 or u == units[-1]:
            return f"{x:.2f} {u}" if u != "B" else f"{int(x)} {u}"
        x /= 1024.0
    return f"{x:.2f} PB"


def size_in_kb(size_bytes: int) -> int:
    # 1500 bytes -> 2
    return int(math.ceil(size_bytes / 1024.0))


def file_extension(file_name: str) -> str:
    """Text after the last dot; empty when there is no dot or it is the first/last char."""
    dot = file_name.rfind(".")
    if 0 < dot < len(file_name) - 1:
        return file_name[dot + 1:]
    return ""


def format_timestamp(ts: float, tz: Optional[tzinfo] = None) -> str:
    if tz is None:
        dt = datetime.fromtimestamp(ts).astimezone()
    else:
        dt = datetime.fromtimestamp(ts, tz)
    return dt.strftime(TIMESTAMP_FORMAT)
