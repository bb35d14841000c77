from datetime import datetime, timezone
from typing import Optional
import time

import pytz

DISPLAY_FORMAT = "%d/%m/%Y, %H:%M:%S"


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


def ms_to_datetime(ts_ms: int, tz_name: Optional[str] = None) -> datetime:
    dt = datetime.fromtimestamp(ts_ms / 1000.0, tz=timezone.utc)
    if tz_name:
        dt = dt.astimezone(pytz.timezone(tz_name))
    return dt


def format_ts(ts_ms: Optional[int], tz_name: str = "UTC") -> str:
    """Render an epoch-ms timestamp for log lines and reports in the display timezone."""
    if ts_ms is None:
        return "-"
    return ms_to_datetime(ts_ms, tz_name).strftime(DISPLAY_FORMAT)


def utc_iso_now() -> str:
    return datetime.now(timezone.utc).isoformat()
