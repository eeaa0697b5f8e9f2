"""
Time helpers.

Everything stored in the data file is epoch milliseconds; "today" means the
local calendar day of the machine running the server.
"""
import time
from datetime import datetime, timedelta
from typing import Tuple, Union


DAY_MS = 24 * 60 * 60 * 1000


def now_ms() -> int:
    return int(time.time() * 1000)


def to_epoch_ms(value: Union[int, float, datetime]) -> int:
    """
    Convert an API date value to epoch milliseconds.

    Naive datetimes are read as local time.
    """
    if isinstance(value, datetime):
        return int(value.timestamp() * 1000)
    return int(value)


def local_day_window(now: int) -> Tuple[int, int]:
    """Return ``[local midnight, next local midnight)`` around ``now`` in ms."""
    midnight = datetime.fromtimestamp(now / 1000).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    start = int(midnight.timestamp() * 1000)
    end = int((midnight + timedelta(days=1)).timestamp() * 1000)
    return start, end
